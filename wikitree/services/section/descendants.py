"""Descendant resolution over (id, parent_id) pairs."""

from collections import deque
from typing import Iterable, Mapping, Optional

from wikitree.storage.repositories import SectionRepository

ParentPairs = Iterable[tuple[str, Optional[str]]]


def build_children_map(pairs: ParentPairs) -> dict[Optional[str], list[str]]:
    """Map each parent ID (None for root level) to its child IDs in one pass."""
    children: dict[Optional[str], list[str]] = {}
    for section_id, parent_id in pairs:
        children.setdefault(parent_id, []).append(section_id)
    return children


def collect_descendants(
    section_id: str, children_map: Mapping[Optional[str], list[str]]
) -> list[str]:
    """
    Collect every ID reachable from ``section_id`` through child edges.

    Breadth-first with an explicit queue. An ID is never visited twice, so
    the walk terminates even if the stored graph contains a cycle. The
    starting ID is never part of the result.

    Args:
        section_id: Section whose subtree is resolved
        children_map: Output of :func:`build_children_map`

    Returns:
        Descendant IDs in breadth-first order
    """
    visited = {section_id}
    descendants: list[str] = []
    queue = deque([section_id])
    while queue:
        current = queue.popleft()
        for child_id in children_map.get(current, ()):
            if child_id in visited:
                continue
            visited.add(child_id)
            descendants.append(child_id)
            queue.append(child_id)
    return descendants


class DescendantResolver:
    """Resolves subtrees for cascade deletes and cycle checks."""

    def __init__(self, section_repo: SectionRepository):
        """
        Initialize resolver with repository.

        Args:
            section_repo: Section repository for data access
        """
        self.section_repo = section_repo

    def descendants_of(self, section_id: str) -> list[str]:
        """All transitive descendant IDs of a section (breadth-first)."""
        children_map = build_children_map(self.section_repo.get_parent_pairs())
        return collect_descendants(section_id, children_map)

    def would_create_cycle(self, section_id: str, new_parent_id: Optional[str]) -> bool:
        """
        Check if moving section under new_parent would create a cycle.

        Args:
            section_id: Section ID to move
            new_parent_id: Potential new parent ID

        Returns:
            True if the new parent is the section itself or one of its descendants
        """
        if new_parent_id is None:
            return False
        if new_parent_id == section_id:
            return True
        return new_parent_id in set(self.descendants_of(section_id))
