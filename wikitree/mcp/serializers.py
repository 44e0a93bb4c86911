"""Model serialization for MCP responses."""

from typing import Any

from wikitree.models.section import Section
from wikitree.schemas.content import block_from_row, dump_block


def serialize_section(section: Section) -> dict[str, Any]:
    """
    Serialize a stored section (without children) to a dictionary.

    Unlike the assembled view, this keeps ``parentId`` and ``position`` so
    agents can see where a mutation put the section.

    Args:
        section: Section model instance

    Returns:
        Dictionary representation of the section
    """
    result: dict[str, Any] = {
        "id": section.id,
        "title": section.title,
        "parentId": section.parent_id,
        "position": section.position,
    }
    if section.summary is not None:
        result["summary"] = section.summary
    if section.added_at is not None:
        result["addedAt"] = section.added_at.isoformat()
    if section.updated_at is not None:
        result["updatedAt"] = section.updated_at.isoformat()
    if section.content_blocks:
        result["content"] = [
            dump_block(block_from_row(block.type, block.payload))
            for block in section.content_blocks
        ]
    return result
