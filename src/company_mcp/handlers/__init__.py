"""
Protocol Adapters

This package contains the thin translators between wire formats and the
query pipeline:
- rest: /search and /get-company
- tools: tool listing and execution (/tools/list, /tool/list, /tool/call)
- rpc: JSON-RPC 2.0 dispatch for /mcp
"""
