"""
Tool catalog for the Gyazo MCP server.

Declares the closed set of tools, their input schemas, and the parsing
of upload payloads. Schema constraints are advisory for the host; the
handlers only check argument types.
"""

import base64
import re
from enum import Enum

from mcp.types import Tool

from .exceptions import UnsupportedToolError

DATA_URI_PATTERN = re.compile(r"^data:image/(\w+);base64,")
DEFAULT_UPLOAD_TYPE = "png"


class ToolName(str, Enum):
    """Names of the tools this server exposes."""

    LATEST_IMAGE = "gyazo_latest_image"
    SEARCH = "gyazo_search"
    UPLOAD = "gyazo_upload"

    @classmethod
    def parse(cls, name: str) -> "ToolName":
        """Map a requested tool name onto the catalog.

        Raises:
            UnsupportedToolError: If no tool has this name

        """
        try:
            return cls(name)
        except ValueError:
            raise UnsupportedToolError(name) from None


TOOLS: list[Tool] = [
    Tool(
        name=ToolName.LATEST_IMAGE.value,
        description="Fetch latest image content and metadata from Gyazo",
        inputSchema={
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "const": ToolName.LATEST_IMAGE.value,
                },
            },
            "required": ["name"],
        },
    ),
    Tool(
        name=ToolName.SEARCH.value,
        description="Search through user's saved Gyazo images",
        inputSchema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Search query (max length: 200 characters)",
                },
                "page": {
                    "type": "integer",
                    "description": "Page number for pagination",
                    "minimum": 1,
                    "default": 1,
                },
                "per": {
                    "type": "integer",
                    "description": "Number of results per page (max: 100)",
                    "minimum": 1,
                    "maximum": 100,
                    "default": 20,
                },
            },
            "required": ["query"],
        },
    ),
    Tool(
        name=ToolName.UPLOAD.value,
        description="Upload an image to Gyazo",
        inputSchema={
            "type": "object",
            "properties": {
                "imageData": {
                    "type": "string",
                    "description": (
                        "Base64 encoded image data, optionally prefixed with a data URI "
                        "header such as 'data:image/png;base64,'"
                    ),
                },
                "title": {
                    "type": "string",
                    "description": "Title of the image",
                },
                "description": {
                    "type": "string",
                    "description": "Description of the image",
                },
                "refererUrl": {
                    "type": "string",
                    "description": "URL of the page the image came from",
                },
                "app": {
                    "type": "string",
                    "description": "Name of the application the image came from",
                },
            },
            "required": ["imageData"],
        },
    ),
]


def parse_image_data(image_data: str) -> tuple[str, bytes]:
    """Split an upload payload into image type and raw bytes.

    A ``data:image/<type>;base64,`` header, when present, sets the type and
    is stripped before decoding. Without one the type defaults to png.

    Args:
        image_data: Base64 string, optionally with a data URI header

    Returns:
        Tuple of (image_type, decoded_bytes)

    Raises:
        binascii.Error: If the payload is not valid base64, including a
            data URI header the pattern does not recognise

    """
    image_type = DEFAULT_UPLOAD_TYPE
    payload = image_data.strip()
    match = DATA_URI_PATTERN.match(payload)
    if match:
        image_type = match.group(1)
        payload = payload[match.end():]

    payload = re.sub(r"\s+", "", payload)
    return image_type, base64.b64decode(payload, validate=True)
