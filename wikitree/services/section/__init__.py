"""Section service components: validation, positions, descendants, tree assembly and navigation."""

from wikitree.services.section.descendants import (
    DescendantResolver,
    build_children_map,
    collect_descendants,
)
from wikitree.services.section.navigation import (
    collect_leaf_paths,
    find_path_to_section,
    find_section_by_id,
    find_section_by_path,
    first_leaf_path,
)
from wikitree.services.section.positions import PositionAllocator, next_position
from wikitree.services.section.timeline import build_timeline
from wikitree.services.section.tree_operations import SectionRow, TreeAssembler
from wikitree.services.section.validation import SectionValidator

__all__ = [
    "DescendantResolver",
    "build_children_map",
    "collect_descendants",
    "collect_leaf_paths",
    "find_path_to_section",
    "find_section_by_id",
    "find_section_by_path",
    "first_leaf_path",
    "PositionAllocator",
    "next_position",
    "build_timeline",
    "SectionRow",
    "TreeAssembler",
    "SectionValidator",
]
