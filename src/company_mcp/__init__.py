"""
Company Search MCP Server

This package serves an in-memory company dataset (loaded once from CSV) over:
- REST endpoints: /search, /get-company
- Tool discovery: /tools/list
- MCP tool endpoints: /tool/list, /tool/call
- JSON-RPC protocol endpoint: /mcp

Every surface shares the same filter/sort/pagination pipeline in `query`.
"""

__version__ = "0.1.0"
