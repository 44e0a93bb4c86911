"""Pydantic schemas for content blocks and section payloads."""

from wikitree.schemas.content import (
    ContentBlockType,
    block_from_row,
    block_payload,
    dump_block,
    parse_content,
    parse_content_block,
)
from wikitree.schemas.section import SectionCreate, SectionUpdate, SectionView, validate_payload

__all__ = [
    "ContentBlockType",
    "block_from_row",
    "block_payload",
    "dump_block",
    "parse_content",
    "parse_content_block",
    "SectionCreate",
    "SectionUpdate",
    "SectionView",
    "validate_payload",
]
