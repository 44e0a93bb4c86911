"""Sibling position allocation."""

from typing import Iterable, Optional

from wikitree.storage.repositories import SectionRepository


def next_position(positions: Iterable[int]) -> int:
    """Return ``max(positions) + 1``, or 0 when there are no siblings."""
    return max(positions, default=-1) + 1


class PositionAllocator:
    """Computes sibling positions from the current state of the store.

    Reads go through the caller's session, so an allocation belongs to the
    same transaction as the insert or update that consumes it. Two
    concurrent transactions can still compute the same value; the
    ``(parent_id, position)`` unique constraint rejects the loser for
    non-root siblings.
    """

    def __init__(self, section_repo: SectionRepository):
        self.section_repo = section_repo

    def allocate(self, parent_id: Optional[str], exclude_id: Optional[str] = None) -> int:
        """
        Next free position under a parent.

        Args:
            parent_id: Parent section ID (None for root level)
            exclude_id: Section to ignore, e.g. the one being moved

        Returns:
            Position one past the current maximum, or 0
        """
        return next_position(self.section_repo.get_child_positions(parent_id, exclude_id))

    def is_taken(
        self, parent_id: Optional[str], position: int, exclude_id: Optional[str] = None
    ) -> bool:
        """Check whether a sibling other than ``exclude_id`` already uses ``position``."""
        return position in self.section_repo.get_child_positions(parent_id, exclude_id)
