"""
Company Search Server - Main FastAPI Application

Implements the HTTP surfaces over the company dataset:
- /search, /get-company REST endpoints
- /tools/list tool discovery for orchestration clients
- /tool/list, /tool/call MCP tool endpoints
- /mcp JSON-RPC 2.0 protocol endpoint

The dataset is loaded once before serving and is read-only afterwards.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import Settings, get_settings
from .store import DataSourceError, RecordStore
from .models import (
    SearchRequest,
    SearchResponse,
    CompanyResponse,
    ToolListResponse,
    ToolSummaryListResponse,
    ToolCallRequest,
    ToolCallResponse,
    MCPError,
)
from .handlers import rest, rpc, tools

logger = logging.getLogger(__name__)

SERVICE_NAME = "Company Search MCP Server"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


def load_store(settings: Settings) -> RecordStore:
    """Load the dataset, logging and re-raising on failure."""
    try:
        return RecordStore.from_csv(settings.csv_path, name_field=settings.name_field)
    except DataSourceError as e:
        logger.error(f"Failed to load CSV: {e}")
        raise


# ============================================================================
# Dependencies
# ============================================================================

def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


# ============================================================================
# Application Factory
# ============================================================================

def create_app(store: Optional[RecordStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        store: Preloaded records; when omitted the CSV is loaded at startup
        settings: Settings to use; defaults to the environment

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # A failed load propagates and aborts startup
        if app.state.store is None:
            app.state.store = load_store(settings)
        yield

    app = FastAPI(
        title=SERVICE_NAME,
        description="Search and lookup over an in-memory company dataset via REST, MCP tools and JSON-RPC",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.settings = settings

    # CORS middleware for cross-origin requests
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ========================================================================
    # Error Handlers
    # ========================================================================

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        """Handle ValueError exceptions."""
        return JSONResponse(
            status_code=400,
            content=MCPError(
                code=400,
                message=str(exc),
                data={"type": "ValueError"}
            ).model_dump()
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=MCPError(
                code=500,
                message="Internal server error",
                data={"type": type(exc).__name__, "detail": str(exc)}
            ).model_dump()
        )

    # ========================================================================
    # Health Check
    # ========================================================================

    @app.get("/health", tags=["Health"])
    async def health_check(store: RecordStore = Depends(get_store)):
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": __version__,
            "records": len(store)
        }

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "service": SERVICE_NAME,
            "version": __version__,
            "protocol": "Model Context Protocol",
            "endpoints": {
                "rest": "/search, /get-company",
                "discovery": "/tools/list",
                "tools": "/tool/list, /tool/call",
                "jsonrpc": "/mcp",
                "docs": "/docs"
            }
        }

    # ========================================================================
    # REST Endpoints
    # ========================================================================

    @app.post(
        "/search",
        response_model=SearchResponse,
        tags=["Companies"],
        summary="Search companies"
    )
    async def search_endpoint(
        request: SearchRequest,
        store: RecordStore = Depends(get_store),
        settings: Settings = Depends(get_app_settings)
    ):
        """
        Search companies.

        - **filters**: list of {field, op, value}; op is eq, contains, gt or lt
        - **limit** / **offset**: pagination
        - **sort**: optional {field, dir}
        """
        return rest.search(request, store, settings)

    @app.get(
        "/get-company",
        response_model=CompanyResponse,
        tags=["Companies"],
        summary="Get a company by name or id",
        responses={404: {"description": "Company not found"}}
    )
    async def get_company_endpoint(
        name: Optional[str] = None,
        record_id: Optional[str] = Query(None, alias="id"),
        store: RecordStore = Depends(get_store),
        settings: Settings = Depends(get_app_settings)
    ):
        """Look up one company; id takes precedence over name."""
        result = rest.get_company(store, settings, name=name, record_id=record_id)
        if result is None:
            return JSONResponse(status_code=404, content={"error": "not found"})
        return result

    @app.get(
        "/tools/list",
        response_model=ToolSummaryListResponse,
        tags=["Tools"],
        summary="Discover available tools"
    )
    async def tool_discovery_endpoint():
        """Compact tool list for orchestration clients."""
        return tools.list_tool_summaries()

    # ========================================================================
    # Tool Endpoints
    # ========================================================================

    @app.get(
        "/tool/list",
        response_model=ToolListResponse,
        tags=["Tools"],
        summary="List available tools"
    )
    async def list_tools_endpoint():
        """
        List all available tools.

        Returns a list of tool definitions with their schemas.
        """
        return tools.list_tools()

    @app.post(
        "/tool/call",
        response_model=ToolCallResponse,
        tags=["Tools"],
        summary="Call a tool"
    )
    async def call_tool_endpoint(
        request: ToolCallRequest,
        store: RecordStore = Depends(get_store),
        settings: Settings = Depends(get_app_settings)
    ):
        """
        Execute a tool call.

        - **name**: Tool name to call
        - **arguments**: Tool arguments as JSON object

        Returns tool execution result.
        """
        return await tools.call_tool(request, store, settings)

    # ========================================================================
    # JSON-RPC Endpoint
    # ========================================================================

    @app.post("/mcp", tags=["MCP"], summary="JSON-RPC 2.0 endpoint")
    async def mcp_endpoint(
        request: Request,
        store: RecordStore = Depends(get_store),
        settings: Settings = Depends(get_app_settings)
    ):
        """Handle one MCP JSON-RPC message."""
        try:
            payload = await request.json()
        except ValueError:
            return JSONResponse(content=rpc.error_response(None, rpc.PARSE_ERROR, "Parse error"))

        try:
            response = await rpc.handle_rpc(payload, store, settings)
        except Exception as e:
            logger.error(f"Error handling JSON-RPC message: {e}", exc_info=True)
            request_id = payload.get("id") if isinstance(payload, dict) else None
            if not isinstance(request_id, (int, str)):
                request_id = None
            return JSONResponse(content=rpc.error_response(request_id, rpc.INTERNAL_ERROR, "Internal error"))

        if response is None:
            return Response(status_code=202)
        return JSONResponse(content=response)

    return app


app = create_app()


def main() -> None:
    """Load the dataset, then serve. Exits with status 1 if loading fails."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)

    try:
        store = load_store(settings)
    except DataSourceError:
        sys.exit(1)

    app = create_app(store=store, settings=settings)
    logger.info(f"Listening on port {settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
