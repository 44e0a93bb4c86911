"""MCP tool schema definitions."""

from typing import Any

_CONTENT_SCHEMA = {
    "type": "array",
    "description": (
        "Content blocks, each an object with a 'type' of paragraph, list, code, "
        "image or video. Replaces all existing blocks when given."
    ),
    "items": {
        "type": "object",
        "properties": {
            "type": {
                "type": "string",
                "enum": ["paragraph", "list", "code", "image", "video"],
            },
        },
        "required": ["type"],
    },
}


def get_tool_schemas() -> dict[str, dict[str, Any]]:
    """Get all MCP tool schemas."""
    return {
        "list_sections": {
            "name": "list_sections",
            "description": "Retrieve the whole section tree, ordered by position",
            "inputSchema": {"type": "object", "properties": {}},
        },
        "get_section": {
            "name": "get_section",
            "description": "Retrieve a section by ID with its content and nested children",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "section_id": {"type": "string", "description": "Section ID"},
                },
                "required": ["section_id"],
            },
        },
        "get_section_by_path": {
            "name": "get_section_by_path",
            "description": (
                "Resolve a root-to-node path of section IDs, returning the section "
                "and the path to the first leaf beneath it"
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "path": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Section IDs from the root level downwards",
                    },
                },
                "required": ["path"],
            },
        },
        "get_section_path": {
            "name": "get_section_path",
            "description": "Find the root-to-node path of section IDs that addresses a section",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "section_id": {"type": "string", "description": "Section ID"},
                },
                "required": ["section_id"],
            },
        },
        "get_timeline": {
            "name": "get_timeline",
            "description": (
                "List every leaf section with its path and root section, most recently "
                "changed first"
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "root_id": {
                        "type": "string",
                        "description": "Only list leaves under this root section",
                    },
                    "since": {
                        "type": "string",
                        "format": "date",
                        "description": "Only list leaves changed on or after this day (YYYY-MM-DD)",
                    },
                    "until": {
                        "type": "string",
                        "format": "date",
                        "description": "Only list leaves changed on or before this day (YYYY-MM-DD)",
                    },
                },
            },
        },
        "create_section": {
            "name": "create_section",
            "description": (
                "Create a section. A section holding content cannot receive children, "
                "so the parent must not have content"
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "section_id": {"type": "string", "description": "Unique section ID (used in URLs)"},
                    "title": {"type": "string", "description": "Section title"},
                    "summary": {"type": "string", "description": "Optional summary"},
                    "parent_id": {
                        "type": "string",
                        "description": "Optional parent section ID (omit for root level)",
                    },
                    "position": {
                        "type": "integer",
                        "minimum": 0,
                        "description": "Optional position among siblings (default: appended last)",
                    },
                    "content": _CONTENT_SCHEMA,
                },
                "required": ["section_id", "title"],
            },
        },
        "update_section": {
            "name": "update_section",
            "description": "Partially update a section, optionally moving it to another parent",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "section_id": {"type": "string", "description": "Section ID"},
                    "title": {"type": "string", "description": "New title"},
                    "summary": {"type": "string", "description": "New summary"},
                    "parent_id": {
                        "type": ["string", "null"],
                        "description": "New parent ID; null moves the section to the root level",
                    },
                    "position": {"type": "integer", "minimum": 0, "description": "New position"},
                    "content": _CONTENT_SCHEMA,
                },
                "required": ["section_id"],
            },
        },
        "delete_section": {
            "name": "delete_section",
            "description": "Delete a section together with all of its descendants",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "section_id": {"type": "string", "description": "Section ID"},
                },
                "required": ["section_id"],
            },
        },
    }
