"""Worker MCP Server - JSON-RPC tool dispatch over HTTP."""

__version__ = "0.1.0"
