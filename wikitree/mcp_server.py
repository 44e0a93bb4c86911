"""MCP (Model Context Protocol) server for the wiki section tree.

This server exposes section tree operations to AI agents via the Model Context Protocol.
It uses the standardized mcp library for JSON-RPC 2.0 communication over stdio.
"""

import asyncio
import logging

from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server
from mcp import McpError
from mcp.types import ErrorData, TextContent, Tool

from wikitree.config import configure_logging
from wikitree.services.events import TreeEvents, log_tree_change
from wikitree.storage.database import get_db
from wikitree.mcp.tool_handlers import call_tool_handler
from wikitree.mcp.tool_schemas import get_tool_schemas

logger = logging.getLogger(__name__)

# Initialize MCP server
app = Server("wikitree")

tree_events = TreeEvents()
tree_events.subscribe(log_tree_change)


@app.list_tools()
async def list_tools() -> list[Tool]:
    """List all available MCP tools."""
    return [Tool(**schema) for schema in get_tool_schemas().values()]


@app.call_tool()
async def call_tool(name: str, arguments: dict | None) -> list[TextContent]:
    """Handle tool calls."""
    if arguments is None:
        arguments = {}

    db = get_db()

    try:
        # Handlers manage their own database sessions
        return await call_tool_handler(name, arguments, db, tree_events)
    except McpError:
        raise
    except Exception as e:
        logger.exception("Unexpected error handling tool %s", name)
        raise McpError(
            ErrorData(
                code=-32603,  # Internal error
                message="Internal error",
            )
        ) from e


async def main():
    """Main entry point for MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await app.run(
            read_stream,
            write_stream,
            InitializationOptions(
                server_name="wikitree",
                server_version="0.1.0",
                capabilities=app.get_capabilities(
                    notification_options=NotificationOptions(),
                    experimental_capabilities={},
                ),
            ),
        )


def run() -> None:
    """Console entry point."""
    configure_logging()
    asyncio.run(main())


if __name__ == "__main__":
    run()
