"""
JSON-RPC Endpoint Handler

Dispatches MCP-style JSON-RPC 2.0 requests (initialize, ping, tools/list,
tools/call) onto the same tool handlers used by /tool/call.
"""

import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .. import __version__
from ..config import Settings
from ..store import RecordStore
from ..models import JSONRPCRequest, JSONRPCResponse, JSONRPCError, ToolCallRequest
from . import tools

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "company-mcp"

# Standard JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


def _envelope(response: JSONRPCResponse) -> Dict[str, Any]:
    # id stays in the envelope even when null; only one of result/error is emitted
    data = response.model_dump(exclude={"result", "error"})
    if response.error is not None:
        data["error"] = response.error.model_dump(exclude_none=True)
    else:
        data["result"] = response.result
    return data


def result_response(request_id: Any, result: Dict[str, Any]) -> Dict[str, Any]:
    return _envelope(JSONRPCResponse(id=request_id, result=result))


def error_response(request_id: Any, code: int, message: str, data: Any = None) -> Dict[str, Any]:
    error = JSONRPCError(code=code, message=message, data=data)
    return _envelope(JSONRPCResponse(id=request_id, error=error))


async def handle_rpc(payload: Any, store: RecordStore, settings: Settings) -> Optional[Dict[str, Any]]:
    """
    Handle one JSON-RPC message.

    Args:
        payload: Decoded JSON body
        store: Loaded company records
        settings: Paging and normalization settings

    Returns:
        Response object, or None for notifications
    """
    if not isinstance(payload, dict):
        return error_response(None, INVALID_REQUEST, "Request must be a JSON object")

    raw_id = payload.get("id")
    request_id = raw_id if isinstance(raw_id, (int, str)) and not isinstance(raw_id, bool) else None

    if payload.get("params") is not None and not isinstance(payload["params"], dict):
        return error_response(request_id, INVALID_PARAMS, "params must be an object")

    try:
        request = JSONRPCRequest.model_validate(payload)
    except ValidationError as e:
        return error_response(request_id, INVALID_REQUEST, f"Invalid request: {e.errors()[0]['msg']}")

    if request.jsonrpc != "2.0":
        return error_response(request.id, INVALID_REQUEST, "Unsupported jsonrpc version")

    if "id" not in payload:
        logger.debug(f"Received notification '{request.method}'")
        return None

    params = request.params or {}
    method = request.method

    if method == "initialize":
        return result_response(request.id, {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {"listChanged": False}},
            "serverInfo": {"name": SERVER_NAME, "version": __version__}
        })

    if method == "ping":
        return result_response(request.id, {})

    if method == "tools/list":
        return result_response(request.id, tools.list_tools().model_dump())

    if method == "tools/call":
        name = params.get("name")
        if not isinstance(name, str) or not name:
            return error_response(request.id, INVALID_PARAMS, "Missing tool name")
        arguments = params.get("arguments") or {}
        if not isinstance(arguments, dict):
            return error_response(request.id, INVALID_PARAMS, "Tool arguments must be an object")
        try:
            response = await tools.call_tool(ToolCallRequest(name=name, arguments=arguments), store, settings)
        except ValueError as e:
            return error_response(request.id, INVALID_PARAMS, str(e))
        return result_response(request.id, response.model_dump())

    return error_response(request.id, METHOD_NOT_FOUND, f"Method '{method}' not found")
