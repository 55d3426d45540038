"""
Request/Response Models

Pydantic models for the REST endpoints, the MCP tool endpoints and the
JSON-RPC protocol envelope.
"""

from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List, Union

from .query import ResultPage


# ============================================================================
# REST Models
# ============================================================================

class SearchRequest(BaseModel):
    """Body of POST /search."""
    filters: List[Any] = Field(default_factory=list, description="Filter conditions: {field, op, value}")
    limit: Optional[int] = Field(None, ge=0, description="Page size (capped by the server)")
    offset: int = Field(0, ge=0, description="Index of the first result")
    sort: Optional[Dict[str, Any]] = Field(None, description="Sort spec: {field, dir}")


class SearchResponse(ResultPage):
    """Response of POST /search."""


class CompanyResponse(BaseModel):
    """Response of GET /get-company."""
    company: Dict[str, Any] = Field(..., description="Normalized company record")


# ============================================================================
# Tool Models
# ============================================================================

class ToolDefinition(BaseModel):
    """MCP tool definition schema."""
    name: str = Field(..., description="Tool name/identifier")
    description: str = Field(..., description="Tool description")
    inputSchema: Dict[str, Any] = Field(..., description="JSON schema for tool inputs")


class ToolListResponse(BaseModel):
    """Response for listing available tools."""
    tools: List[ToolDefinition] = Field(..., description="List of available tools")


class ToolSummary(BaseModel):
    """Compact tool description used by GET /tools/list."""
    name: str
    description: str
    can_initiate: bool = True
    inputs: Dict[str, str] = Field(default_factory=dict, description="Argument name -> type")


class ToolSummaryListResponse(BaseModel):
    """Response of GET /tools/list."""
    tools: List[ToolSummary]


class ToolCallRequest(BaseModel):
    """Request to call a tool."""
    name: str = Field(..., description="Tool name to call")
    arguments: Dict[str, Any] = Field(default_factory=dict, description="Tool arguments")


class ToolCallResponse(BaseModel):
    """Response from tool call."""
    content: List[Dict[str, Any]] = Field(..., description="Tool output content")
    isError: bool = Field(default=False, description="Whether the result is an error")


# ============================================================================
# JSON-RPC Models
# ============================================================================

class JSONRPCRequest(BaseModel):
    """JSON-RPC 2.0 request or notification."""
    jsonrpc: str = Field("2.0", description="Protocol version, must be '2.0'")
    method: str = Field(..., description="Method name")
    params: Optional[Dict[str, Any]] = Field(None, description="Method parameters")
    id: Optional[Union[int, str]] = Field(None, description="Request id; absent for notifications")


class JSONRPCError(BaseModel):
    """JSON-RPC 2.0 error object."""
    code: int
    message: str
    data: Optional[Any] = None


class JSONRPCResponse(BaseModel):
    """JSON-RPC 2.0 response; exactly one of result/error is set."""
    jsonrpc: str = "2.0"
    id: Optional[Union[int, str]] = None
    result: Optional[Dict[str, Any]] = None
    error: Optional[JSONRPCError] = None


# ============================================================================
# Error Models
# ============================================================================

class MCPError(BaseModel):
    """MCP error response."""
    code: int = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    data: Optional[Dict[str, Any]] = Field(None, description="Additional error data")
