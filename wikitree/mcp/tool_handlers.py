"""MCP tool handlers for executing tool operations."""

import json
import logging
from datetime import date
from typing import Any, Optional

from mcp import McpError
from mcp.types import ErrorData, TextContent

from wikitree.exceptions import (
    ConflictError,
    DatabaseError,
    InvalidHierarchyError,
    NotFoundError,
    ValidationError,
)
from wikitree.services.events import TreeEvents
from wikitree.services.section_service import UNSET, SectionService
from wikitree.mcp.serializers import serialize_section

logger = logging.getLogger(__name__)


def _text(result: Any) -> list[TextContent]:
    return [TextContent(type="text", text=json.dumps(result, indent=2))]


def _required(arguments: dict[str, Any], name: str) -> Any:
    if name not in arguments:
        raise ValidationError(f"{name} is required", name)
    return arguments[name]


def _date_argument(arguments: dict[str, Any], name: str) -> Optional[date]:
    value = arguments.get(name)
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be a date (YYYY-MM-DD)", name) from e


async def handle_list_sections(
    arguments: dict[str, Any], db: Any, events: TreeEvents | None = None
) -> list[TextContent]:
    """Handle list_sections tool."""
    with db.session() as session:
        sections = SectionService(session).list_sections()
        return _text({"sections": [section.to_dict() for section in sections]})


async def handle_get_section(
    arguments: dict[str, Any], db: Any, events: TreeEvents | None = None
) -> list[TextContent]:
    """Handle get_section tool."""
    with db.session() as session:
        section = SectionService(session).get_section(_required(arguments, "section_id"))
        return _text(section.to_dict())


async def handle_get_section_by_path(
    arguments: dict[str, Any], db: Any, events: TreeEvents | None = None
) -> list[TextContent]:
    """Handle get_section_by_path tool."""
    path = _required(arguments, "path")
    if isinstance(path, str):
        path = [segment for segment in path.split("/") if segment]
    with db.session() as session:
        section, leaf_path = SectionService(session).get_section_by_path(path)
        return _text({"section": section.to_dict(), "path": list(path), "leafPath": leaf_path})


async def handle_get_section_path(
    arguments: dict[str, Any], db: Any, events: TreeEvents | None = None
) -> list[TextContent]:
    """Handle get_section_path tool."""
    section_id = _required(arguments, "section_id")
    with db.session() as session:
        path = SectionService(session).get_section_path(section_id)
        return _text({"id": section_id, "path": path})


async def handle_get_timeline(
    arguments: dict[str, Any], db: Any, events: TreeEvents | None = None
) -> list[TextContent]:
    """Handle get_timeline tool."""
    since = _date_argument(arguments, "since")
    until = _date_argument(arguments, "until")
    with db.session() as session:
        entries = SectionService(session).timeline(
            root_id=arguments.get("root_id"), since=since, until=until
        )
        return _text({"items": [entry.to_dict() for entry in entries]})


async def handle_create_section(
    arguments: dict[str, Any], db: Any, events: TreeEvents | None = None
) -> list[TextContent]:
    """Handle create_section tool."""
    with db.session() as session:
        section = SectionService(session, events).create_section(
            section_id=_required(arguments, "section_id"),
            title=_required(arguments, "title"),
            summary=arguments.get("summary"),
            parent_id=arguments.get("parent_id"),
            position=arguments.get("position"),
            content=arguments.get("content"),
        )
        return _text(serialize_section(section))


async def handle_update_section(
    arguments: dict[str, Any], db: Any, events: TreeEvents | None = None
) -> list[TextContent]:
    """Handle update_section tool."""
    for name in ("title", "summary"):
        if name in arguments and arguments[name] is None:
            raise ValidationError(f"{name} must not be null", name)
    with db.session() as session:
        section = SectionService(session, events).update_section(
            section_id=_required(arguments, "section_id"),
            title=arguments.get("title"),
            summary=arguments.get("summary"),
            parent_id=arguments["parent_id"] if "parent_id" in arguments else UNSET,
            position=arguments.get("position"),
            content=arguments.get("content"),
        )
        return _text(serialize_section(section))


async def handle_delete_section(
    arguments: dict[str, Any], db: Any, events: TreeEvents | None = None
) -> list[TextContent]:
    """Handle delete_section tool."""
    with db.session() as session:
        removed = SectionService(session, events).delete_section(_required(arguments, "section_id"))
        return _text({"deleted": True, "ids": removed})


# Tool handler mapping
TOOL_HANDLERS = {
    "list_sections": handle_list_sections,
    "get_section": handle_get_section,
    "get_section_by_path": handle_get_section_by_path,
    "get_section_path": handle_get_section_path,
    "get_timeline": handle_get_timeline,
    "create_section": handle_create_section,
    "update_section": handle_update_section,
    "delete_section": handle_delete_section,
}


async def call_tool_handler(
    tool_name: str, arguments: dict[str, Any], db: Any, events: TreeEvents | None = None
) -> list[TextContent]:
    """
    Call the appropriate tool handler.

    Args:
        tool_name: Name of the tool to call
        arguments: Tool arguments
        db: Database instance
        events: Optional tree change hub passed to mutating handlers

    Returns:
        List of TextContent with tool execution result

    Raises:
        McpError: If tool name is unknown or handler raises an error
    """
    if tool_name not in TOOL_HANDLERS:
        raise McpError(
            ErrorData(
                code=-32601,  # Method not found
                message=f"Unknown tool: {tool_name}",
            )
        )

    handler = TOOL_HANDLERS[tool_name]

    try:
        return await handler(arguments, db, events)
    except McpError:
        raise
    except ValidationError as e:
        raise McpError(
            ErrorData(
                code=-32602,  # Invalid params
                message=f"Validation error: {str(e)}",
            )
        ) from e
    except NotFoundError as e:
        raise McpError(
            ErrorData(
                code=-32001,  # Custom error: not found
                message=str(e),
            )
        ) from e
    except ConflictError as e:
        raise McpError(
            ErrorData(
                code=-32002,  # Custom error: conflict
                message=str(e),
            )
        ) from e
    except InvalidHierarchyError as e:
        raise McpError(
            ErrorData(
                code=-32003,  # Custom error: invalid hierarchy
                message=str(e),
            )
        ) from e
    except DatabaseError as e:
        logger.error("Database error in tool %s", tool_name, exc_info=e.original_error or e)
        raise McpError(
            ErrorData(
                code=-32603,  # Internal error
                message="Internal error",
            )
        ) from e
    except Exception as e:
        logger.exception("Unexpected error in tool %s", tool_name)
        raise McpError(
            ErrorData(
                code=-32603,  # Internal error
                message="Internal error",
            )
        ) from e
