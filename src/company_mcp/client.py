"""
MCP Client for orchestration agents

This module provides a client for discovering and calling the company
search tools over HTTP.
"""

import json
import logging
import os
from typing import Dict, Any, List, Optional

import requests

logger = logging.getLogger(__name__)


class MCPClientError(Exception):
    """Raised when a tool call fails in transport or returns an error result."""


class MCPClient:
    """Client for calling company search tools via HTTP."""

    def __init__(self, base_url: Optional[str] = None, timeout: float = 30):
        self.base_url = (base_url or os.getenv("MCP_BASE", "http://localhost:4000")).rstrip("/")
        self.timeout = timeout
        self.headers = {"Content-Type": "application/json"}

        logger.info(f"MCP Client initialized with URL: {self.base_url}")

    def list_tools(self) -> List[Dict[str, Any]]:
        """List tool definitions (name, description, inputSchema)."""
        try:
            response = requests.get(f"{self.base_url}/tool/list", timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"MCP server error listing tools: {e}")
            raise MCPClientError(f"Failed to list MCP tools: {e}") from e
        return response.json()["tools"]

    def call_tool(self, tool_name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
        """Call a tool via the MCP server and return the raw envelope."""
        try:
            response = requests.post(
                f"{self.base_url}/tool/call",
                headers=self.headers,
                json={"name": tool_name, "arguments": arguments},
                timeout=self.timeout
            )
            response.raise_for_status()
            result = response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"MCP server error calling {tool_name}: {e}")
            raise MCPClientError(f"Failed to call MCP tool {tool_name}: {e}") from e

        if result.get("isError"):
            raise MCPClientError(f"MCP tool error: {result['content'][0]['text']}")

        return result

    def _call_and_parse(self, tool_name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
        result = self.call_tool(tool_name, arguments)
        return json.loads(result["content"][0]["text"])

    def search(
        self,
        filters: Optional[List[Dict[str, Any]]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        sort: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """Search companies; returns {total, showing, offset, results}."""
        arguments: Dict[str, Any] = {"filters": filters or []}
        if limit is not None:
            arguments["limit"] = limit
        if offset is not None:
            arguments["offset"] = offset
        if sort is not None:
            arguments["sort"] = sort
        return self._call_and_parse("search", arguments)

    def get_company(self, name: Optional[str] = None, record_id: Optional[str] = None) -> Dict[str, Any]:
        """Get one normalized company record by name or id."""
        arguments = {}
        if name is not None:
            arguments["name"] = name
        if record_id is not None:
            arguments["id"] = record_id
        return self._call_and_parse("get_company", arguments)
