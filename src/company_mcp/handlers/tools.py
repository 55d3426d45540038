"""
MCP Tool Endpoint Handlers

Handles tool listing and execution for MCP protocol.
Exposes tools: search, get_company
"""

import json
import logging
from typing import Dict, Any, List

from ..config import Settings
from ..query import coerce_int, normalize_record, run_query
from ..store import RecordStore
from ..models import (
    ToolDefinition,
    ToolListResponse,
    ToolSummary,
    ToolSummaryListResponse,
    ToolCallRequest,
    ToolCallResponse,
)

logger = logging.getLogger(__name__)


FILTER_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "field": {"type": "string", "description": "Column name, e.g. 'country'"},
        "op": {"type": "string", "enum": ["eq", "contains", "gt", "lt"]},
        "value": {"type": "string", "description": "Value to compare against"}
    },
    "required": ["field", "op", "value"]
}

# Tool registry with metadata
TOOL_REGISTRY: Dict[str, Dict[str, Any]] = {
    "search": {
        "description": "Search companies with filters",
        "inputs": {"filters": "array", "limit": "integer", "offset": "integer", "sort": "object"},
        "inputSchema": {
            "type": "object",
            "properties": {
                "filters": {
                    "type": "array",
                    "items": FILTER_SCHEMA,
                    "description": "All conditions must match"
                },
                "limit": {
                    "type": "integer",
                    "description": "Number of results to return",
                    "minimum": 0
                },
                "offset": {
                    "type": "integer",
                    "description": "Number of results to skip",
                    "default": 0,
                    "minimum": 0
                },
                "sort": {
                    "type": "object",
                    "properties": {
                        "field": {"type": "string"},
                        "dir": {"type": "string", "enum": ["asc", "desc"]}
                    },
                    "required": ["field"]
                }
            }
        }
    },
    "get_company": {
        "description": "Get company by name or id",
        "inputs": {"name": "string", "id": "string"},
        "inputSchema": {
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "description": "Company name (case-insensitive)"
                },
                "id": {
                    "type": "string",
                    "description": "Company id; takes precedence over name"
                }
            }
        }
    }
}


def list_tools() -> ToolListResponse:
    """
    List all available tools.

    Returns:
        ToolListResponse with list of tool definitions
    """
    tools = [
        ToolDefinition(
            name=name,
            description=metadata["description"],
            inputSchema=metadata["inputSchema"]
        )
        for name, metadata in TOOL_REGISTRY.items()
    ]

    return ToolListResponse(tools=tools)


def list_tool_summaries() -> ToolSummaryListResponse:
    """List tools in the compact discovery format (name, description, inputs)."""
    return ToolSummaryListResponse(tools=[
        ToolSummary(name=name, description=metadata["description"], inputs=metadata["inputs"])
        for name, metadata in TOOL_REGISTRY.items()
    ])


def _text_content(payload: Any) -> List[Dict[str, Any]]:
    return [{
        "type": "text",
        "text": json.dumps(payload)
    }]


def _error_content(message: str) -> ToolCallResponse:
    return ToolCallResponse(
        content=[{
            "type": "text",
            "text": f"Error: {message}"
        }],
        isError=True
    )


async def call_tool(request: ToolCallRequest, store: RecordStore, settings: Settings) -> ToolCallResponse:
    """
    Execute a tool call.

    Args:
        request: Tool call request with name and arguments
        store: Loaded company records
        settings: Paging and normalization settings

    Returns:
        ToolCallResponse with tool output

    Raises:
        ValueError: If tool name is not found
    """
    tool_name = request.name

    if tool_name not in TOOL_REGISTRY:
        raise ValueError(f"Tool '{tool_name}' not found. Available tools: {list(TOOL_REGISTRY.keys())}")

    arguments = request.arguments or {}

    try:
        # Route to appropriate tool handler
        if tool_name == "search":
            page = run_query(
                store.records,
                filters=arguments.get("filters"),
                sort=arguments.get("sort"),
                limit=coerce_int(arguments.get("limit"), settings.default_limit),
                offset=coerce_int(arguments.get("offset"), 0),
                max_limit=settings.max_limit,
                missing_value=settings.missing_value,
            )
            content = _text_content(page.model_dump())

        elif tool_name == "get_company":
            name = arguments.get("name")
            record_id = arguments.get("id")
            found = store.lookup(
                name=str(name) if name is not None else None,
                record_id=str(record_id) if record_id is not None else None,
            )
            if found is None:
                return _error_content(f"Company not found: {record_id or name or ''}".rstrip())
            content = _text_content(normalize_record(found, settings.missing_value))

        else:
            raise ValueError(f"Tool '{tool_name}' handler not implemented")

        return ToolCallResponse(content=content, isError=False)

    except Exception as e:
        logger.error(f"Error executing tool '{tool_name}': {e}", exc_info=True)
        return _error_content(str(e))
