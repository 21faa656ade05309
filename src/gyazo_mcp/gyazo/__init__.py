"""Gyazo API package.

Provides the upstream record models and a factory for the HTTP client.
"""

from .base import GyazoImage, ImageMetadata, ImageOcr, SearchedImage, UploadedImage
from .client import DEFAULT_API_URL, DEFAULT_UPLOAD_URL, GyazoClient


def create_gyazo_client(
    access_token: str,
    api_url: str | None = None,
    upload_url: str | None = None,
    timeout: float = 30.0,
) -> GyazoClient:
    """Create a Gyazo client instance.

    Args:
        access_token: Gyazo API access token
        api_url: Optional API base URL override
        upload_url: Optional upload endpoint override
        timeout: HTTP timeout in seconds

    Returns:
        Configured GyazoClient instance

    Raises:
        ValueError: If access_token is empty

    Example:
        >>> client = create_gyazo_client(access_token="your-token")
        >>> images = await client.list_images(per_page=1)

    """
    return GyazoClient(
        access_token=access_token,
        api_url=api_url or DEFAULT_API_URL,
        upload_url=upload_url or DEFAULT_UPLOAD_URL,
        timeout=timeout,
    )


__all__ = [
    "GyazoClient",
    "GyazoImage",
    "ImageMetadata",
    "ImageOcr",
    "SearchedImage",
    "UploadedImage",
    "create_gyazo_client",
]
