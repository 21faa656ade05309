"""
Gyazo MCP Server.

An MCP server exposing a Gyazo account's images, metadata and OCR text
as resources and tools for AI assistants.

Usage:
    # Start server (stdio)
    gyazo-mcp serve

    # Start server (Streamable HTTP)
    gyazo-mcp serve --transport http

    # Check configuration
    gyazo-mcp info
"""

__version__ = "0.1.0"

from .server import create_app, create_http_app, mcp

__all__ = [
    "mcp",
    "create_app",
    "create_http_app",
]
