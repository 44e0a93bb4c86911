"""Lookups over an assembled section tree."""

from typing import Optional, Sequence

from wikitree.schemas.section import SectionView


def find_section_by_id(section_id: str, sections: Sequence[SectionView]) -> Optional[SectionView]:
    """Depth-first search for a section anywhere in the tree."""
    stack = list(reversed(sections))
    while stack:
        section = stack.pop()
        if section.id == section_id:
            return section
        if section.children:
            stack.extend(reversed(section.children))
    return None


def find_section_by_path(ids: Sequence[str], sections: Sequence[SectionView]) -> Optional[SectionView]:
    """
    Follow a root-to-node path of section IDs.

    Args:
        ids: Section IDs from the root level downwards, e.g. ``["backend", "backend-api"]``
        sections: Root-level sections

    Returns:
        The section at the end of the path, or None if any step is missing
    """
    if not ids:
        return None
    level: Sequence[SectionView] = sections
    match: Optional[SectionView] = None
    for section_id in ids:
        match = next((section for section in level if section.id == section_id), None)
        if match is None:
            return None
        level = match.children or []
    return match


def first_leaf_path(section: SectionView, prefix: Sequence[str]) -> list[str]:
    """Path to the first leaf under ``section``, following the first child at every level."""
    path = list(prefix)
    current = section
    while current.children:
        current = current.children[0]
        path.append(current.id)
    return path


def collect_leaf_paths(sections: Sequence[SectionView]) -> list[tuple[list[str], SectionView]]:
    """
    Every leaf in reading order, each with its root-to-leaf ID path.

    A root section without children is its own one-step path.
    """
    leaves = []
    stack = [([section.id], section) for section in reversed(sections)]
    while stack:
        path, section = stack.pop()
        if not section.children:
            leaves.append((path, section))
            continue
        stack.extend(([*path, child.id], child) for child in reversed(section.children))
    return leaves


def find_path_to_section(section_id: str, sections: Sequence[SectionView]) -> Optional[list[str]]:
    """Root-to-node ID path of a section, or None if it is not in the tree."""
    stack = [([section.id], section) for section in reversed(sections)]
    while stack:
        path, section = stack.pop()
        if section.id == section_id:
            return path
        if section.children:
            stack.extend(([*path, child.id], child) for child in reversed(section.children))
    return None
