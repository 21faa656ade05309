"""Exceptions raised by the Gyazo MCP handlers.

Messages are written to be shown to the assistant host as-is.
"""

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred"


class GyazoMCPError(Exception):
    """Base exception for all server-side failures."""


class InvalidArgumentError(GyazoMCPError):
    """Raised when tool input or a resource URI is malformed."""


class ImageNotFoundError(GyazoMCPError):
    """Raised when Gyazo has no image for the requested identifier."""

    def __init__(self, image_id: str | None = None):
        message = f"Image {image_id} not found" if image_id else "Image not found"
        super().__init__(message)
        self.image_id = image_id


class UnsupportedToolError(GyazoMCPError):
    """Raised when a tool name is not part of the catalog."""

    def __init__(self, tool_name: str):
        super().__init__(f"Tool {tool_name} not found")
        self.tool_name = tool_name


class UploadFailedError(GyazoMCPError):
    """Raised when an upload is rejected or cannot be completed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ResourceReadError(GyazoMCPError):
    """Raised when reading a resource fails for a reason other than the above."""


def error_message(exc: BaseException) -> str:
    """Return the message of ``exc``, or a placeholder when it has none."""
    return str(exc) or UNKNOWN_ERROR_MESSAGE
