"""MCP module with tool schemas, handlers, and serializers."""

from wikitree.mcp.tool_handlers import call_tool_handler, TOOL_HANDLERS
from wikitree.mcp.tool_schemas import get_tool_schemas
from wikitree.mcp.serializers import serialize_section

__all__ = [
    "call_tool_handler",
    "TOOL_HANDLERS",
    "get_tool_schemas",
    "serialize_section",
]
