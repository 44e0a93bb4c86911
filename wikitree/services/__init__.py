"""Service layer for business logic and validation."""

from wikitree.services.events import TreeChangeEvent, TreeChangeKind, TreeEvents, log_tree_change
from wikitree.services.section_service import UNSET, SectionService

__all__ = [
    "SectionService",
    "UNSET",
    "TreeEvents",
    "TreeChangeEvent",
    "TreeChangeKind",
    "log_tree_change",
]
