"""
FastMCP server exposing Gyazo images to AI assistants.

Resources are the user's most recent images; tools fetch the latest
image, search saved images, and upload new ones. The protocol handlers
are installed directly on the low-level server because resource listing
is dynamic and a resource read returns two content parts.
"""

from __future__ import annotations

from typing import Any

import mcp.types as types
from fastmcp import FastMCP
from loguru import logger

from .config import settings
from .gyazo import create_gyazo_client
from .handlers import RESOURCE_URI_PREFIX, GyazoHandlers, ToolContent

# Initialized lazily (on first request)
_handlers: GyazoHandlers | None = None


def get_handlers() -> GyazoHandlers:
    """Get or create the Gyazo request handlers."""
    global _handlers
    if _handlers is None:
        logger.debug("Initializing Gyazo client for {}", settings.gyazo_api_url)
        client = create_gyazo_client(
            access_token=settings.gyazo_access_token,
            api_url=settings.gyazo_api_url,
            upload_url=settings.gyazo_upload_url,
            timeout=settings.request_timeout,
        )
        _handlers = GyazoHandlers(client, resource_page_size=settings.resource_page_size)
        logger.info("Gyazo handlers initialized successfully")
    return _handlers


async def list_resources() -> list[types.Resource]:
    """List recent Gyazo images as resources."""
    return await get_handlers().list_resources()


async def list_resource_templates() -> list[types.ResourceTemplate]:
    """Advertise the URI shape accepted by resources/read."""
    return [
        types.ResourceTemplate(
            uriTemplate=RESOURCE_URI_PREFIX + "{image_id}",
            name="Gyazo image",
            description="A Gyazo image with its metadata and OCR text",
        )
    ]


async def read_resource(request: types.ReadResourceRequest) -> types.ServerResult:
    """Read a Gyazo image resource.

    Registered as a raw request handler: the contents already carry the
    base64 blob and the Markdown text tagged with the requested URI.
    """
    contents = await get_handlers().read_resource(str(request.params.uri))
    return types.ServerResult(types.ReadResourceResult(contents=contents))


async def list_tools() -> list[types.Tool]:
    """List the Gyazo tools."""
    return await get_handlers().list_tools()


async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[ToolContent]:
    """Call a Gyazo tool by name."""
    return await get_handlers().call_tool(name, arguments)


def install_handlers(app: FastMCP) -> None:
    """Route the MCP resource and tool requests of ``app`` to the Gyazo handlers."""
    server = app._mcp_server
    server.list_resources()(list_resources)
    server.list_resource_templates()(list_resource_templates)
    server.list_tools()(list_tools)
    # Argument checks happen in the handlers, not against the declared schema
    server.call_tool(validate_input=False)(call_tool)
    server.request_handlers[types.ReadResourceRequest] = read_resource


# Create MCP server
mcp = FastMCP(
    name="gyazo-mcp-server",
    instructions=(
        "Access to the user's Gyazo images. Recent images are available as "
        "gyazo-mcp:/// resources with their metadata and OCR text. Use "
        "gyazo_latest_image for the newest capture, gyazo_search to find saved "
        "images, and gyazo_upload to save a new image."
    ),
)
install_handlers(mcp)


# Export for uvicorn
def create_app():
    """Create the MCP application for deployment."""
    return mcp


def create_http_app():
    """Create the Streamable HTTP ASGI app."""
    return mcp.http_app(path="/mcp")
