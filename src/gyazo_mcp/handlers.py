"""
MCP request handlers for Gyazo.

Maps the four protocol operations (list resources, read resource, list
tools, call tool) onto Gyazo API calls and shapes the replies into MCP
content types. All upstream access goes through one injected GyazoClient.
"""

import base64
import json
import math
from typing import Any, assert_never

from loguru import logger
from mcp.types import (
    BlobResourceContents,
    ImageContent,
    Resource,
    TextContent,
    TextResourceContents,
    Tool,
)

from .exceptions import (
    GyazoMCPError,
    ImageNotFoundError,
    InvalidArgumentError,
    ResourceReadError,
    UploadFailedError,
    error_message,
)
from .gyazo import GyazoClient, GyazoImage
from .tools import TOOLS, ToolName, parse_image_data

RESOURCE_URI_PREFIX = "gyazo-mcp:///"
NO_IMAGES_FOUND = "No images found"

DEFAULT_SEARCH_PAGE = 1
DEFAULT_SEARCH_PER = 20

ResourceContents = BlobResourceContents | TextResourceContents
ToolContent = TextContent | ImageContent


def resource_uri(image_id: str) -> str:
    """Build the resource URI for an image identifier."""
    return f"{RESOURCE_URI_PREFIX}{image_id}"


def image_metadata_markdown(image: GyazoImage) -> str:
    """
    Render an image's metadata and OCR text as Markdown.

    Each present, non-empty field becomes a level-3 heading followed by
    its value and a blank line. Sections always appear in the order
    title, description, app, URL, OCR text, OCR locale.

    Args:
        image: Image record to describe

    Returns:
        Markdown text, empty if the image carries no metadata
    """
    ocr = image.ocr
    sections = [
        ("Title", image.metadata.title),
        ("Description", image.metadata.desc),
        ("App", image.metadata.app),
        ("URL", image.metadata.url),
        ("OCR", ocr.description if ocr else None),
        ("Locale", ocr.locale if ocr else None),
    ]
    return "".join(f"### {heading}:\n{value}\n\n" for heading, value in sections if value)


def _number_or_default(value: Any, default: int) -> int:
    # bool is an int subclass but never a page number
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    return int(value)


def _optional_str(arguments: dict[str, Any], key: str) -> str | None:
    value = arguments.get(key)
    return value if isinstance(value, str) and value else None


class GyazoHandlers:
    """The server's four protocol operations, bound to one Gyazo client."""

    def __init__(self, client: GyazoClient, resource_page_size: int = 10):
        """
        Initialize the handlers.

        Args:
            client: Gyazo API client used for every upstream call
            resource_page_size: Number of recent images listed as resources
        """
        self.client = client
        self.resource_page_size = resource_page_size

    async def _encode_image(self, image: GyazoImage) -> str:
        """Fetch an image's content and return it base64-encoded."""
        content = await self.client.fetch_image_bytes(image.url)
        return base64.b64encode(content).decode("utf-8")

    # --- Resources ---

    async def list_resources(self) -> list[Resource]:
        """List the most recent images as resources, in upstream order."""
        logger.info("List resources request")
        images = await self.client.list_images(page=1, per_page=self.resource_page_size)
        return [
            Resource(
                uri=resource_uri(image.image_id),
                mimeType=image.mime_type,
                name=image.metadata.title or image.image_id,
            )
            for image in images
        ]

    async def read_resource(self, uri: str) -> list[ResourceContents]:
        """
        Read one image resource as binary content plus Markdown metadata.

        The image record is fetched first; its content URL is only fetched
        once the record exists.

        Args:
            uri: Resource URI of the form ``gyazo-mcp:///<image_id>``

        Returns:
            A blob part with the base64 image and a text part with the
            Markdown metadata, both tagged with ``uri``

        Raises:
            InvalidArgumentError: If the URI does not use the gyazo-mcp scheme
            ImageNotFoundError: If Gyazo has no image with this identifier
            ResourceReadError: For any other failure, chaining the original
        """
        logger.info("Read resource request: uri={}", uri)
        try:
            if not uri.startswith(RESOURCE_URI_PREFIX):
                raise InvalidArgumentError(f"Unsupported resource URI: {uri}")
            image_id = uri.removeprefix(RESOURCE_URI_PREFIX)

            image = await self.client.get_image(image_id)
            if image is None:
                raise ImageNotFoundError(image_id)

            blob = await self._encode_image(image)
        except GyazoMCPError as e:
            logger.error("Failed to read resource {}: {}", uri, e)
            raise
        except Exception as e:
            logger.exception("Failed to read resource {}", uri)
            raise ResourceReadError(error_message(e)) from e

        return [
            BlobResourceContents(uri=uri, mimeType=image.mime_type, blob=blob),
            TextResourceContents(
                uri=uri,
                mimeType="text/plain",
                text=image_metadata_markdown(image),
            ),
        ]

    # --- Tools ---

    async def list_tools(self) -> list[Tool]:
        """Return the static tool catalog."""
        return list(TOOLS)

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> list[ToolContent]:
        """
        Dispatch a tool call by name.

        Args:
            name: Requested tool name
            arguments: Tool arguments as sent by the host

        Returns:
            Tool-specific content parts

        Raises:
            UnsupportedToolError: If the tool is not in the catalog
        """
        tool = ToolName.parse(name)
        arguments = arguments or {}
        logger.info("Tool call: {}", tool.value)

        match tool:
            case ToolName.SEARCH:
                return await self._search(arguments)
            case ToolName.LATEST_IMAGE:
                return await self._latest_image()
            case ToolName.UPLOAD:
                return await self._upload(arguments)
            case _:
                assert_never(tool)

    async def _search(self, arguments: dict[str, Any]) -> list[ToolContent]:
        query = arguments.get("query")
        if not isinstance(query, str):
            raise InvalidArgumentError(
                "Invalid search arguments: query is required and must be a string"
            )
        page = _number_or_default(arguments.get("page"), DEFAULT_SEARCH_PAGE)
        per = _number_or_default(arguments.get("per"), DEFAULT_SEARCH_PER)

        images = await self.client.search_images(query, page=page, per=per)
        if not images:
            logger.info("No images found for query: {}", query[:50])
            return [TextContent(type="text", text=NO_IMAGES_FOUND)]

        results = [
            {
                "uri": resource_uri(image.image_id),
                "mimeType": image.mime_type,
                "permalink_url": image.permalink_url,
                "url": image.url,
                "thumb_url": image.thumb_url,
                "created_at": image.created_at,
                "alt_text": image.alt_text,
            }
            for image in images
        ]
        logger.info("Search completed: {} results", len(results))
        return [TextContent(type="text", text=json.dumps(results, indent=2, ensure_ascii=False))]

    async def _latest_image(self) -> list[ToolContent]:
        images = await self.client.list_images(page=1, per_page=1)
        if not images:
            raise ImageNotFoundError()

        image = images[0]
        data = await self._encode_image(image)
        return [
            ImageContent(type="image", data=data, mimeType=image.mime_type),
            TextContent(type="text", text=image_metadata_markdown(image)),
        ]

    async def _upload(self, arguments: dict[str, Any]) -> list[ToolContent]:
        image_data = arguments.get("imageData")
        if not isinstance(image_data, str):
            raise InvalidArgumentError(
                "Invalid upload arguments: imageData is required and must be a string"
            )

        try:
            image_type, content = parse_image_data(image_data)
            uploaded = await self.client.upload_image(
                content,
                image_type,
                title=_optional_str(arguments, "title"),
                desc=_optional_str(arguments, "description"),
                referer_url=_optional_str(arguments, "refererUrl"),
                app=_optional_str(arguments, "app"),
            )
        except UploadFailedError as e:
            logger.error("Upload rejected: {}", e)
            raise
        except Exception as e:
            logger.exception("Upload failed")
            raise UploadFailedError(error_message(e)) from e

        text = (
            "Image uploaded successfully!\n\n"
            f"Permalink URL: {uploaded.permalink_url}\n"
            f"Image URL: {uploaded.url}\n"
            f"Image ID: {uploaded.image_id}"
        )
        return [TextContent(type="text", text=text)]
