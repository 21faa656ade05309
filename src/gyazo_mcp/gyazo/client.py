"""Async HTTP client for the Gyazo API.

Every call opens its own short-lived httpx client with an explicit
timeout; no connection or response state survives between requests.
"""

import time
from typing import Any
from urllib.parse import quote

import httpx
from loguru import logger

from ..exceptions import UploadFailedError
from .base import GyazoImage, SearchedImage, UploadedImage

DEFAULT_API_URL = "https://api.gyazo.com"
DEFAULT_UPLOAD_URL = "https://upload.gyazo.com/api/upload"


class GyazoClient:
    """Gyazo API client bound to one access token.

    The token is supplied at construction and sent as the ``access_token``
    parameter on every API call. Image content URLs are fetched without it.
    """

    def __init__(
        self,
        access_token: str,
        api_url: str = DEFAULT_API_URL,
        upload_url: str = DEFAULT_UPLOAD_URL,
        timeout: float = 30.0,
    ):
        """Initialize the client.

        Args:
            access_token: Gyazo API access token
            api_url: Base URL of the Gyazo API
            upload_url: Full URL of the upload endpoint
            timeout: HTTP timeout in seconds for every call

        Raises:
            ValueError: If access_token is empty or None

        """
        if not access_token:
            raise ValueError("Gyazo access token is required")

        self.access_token = access_token
        self.api_url = api_url.rstrip("/")
        self.upload_url = upload_url
        self.timeout = timeout
        logger.debug("GyazoClient initialized: api={}, timeout={}s", self.api_url, timeout)

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET an API path with the access token and return the decoded JSON body."""
        query = {"access_token": self.access_token, **(params or {})}
        async with httpx.AsyncClient(base_url=self.api_url, timeout=self.timeout) as client:
            response = await client.get(path, params=query)
            response.raise_for_status()
            return response.json()

    async def list_images(self, page: int = 1, per_page: int = 10) -> list[GyazoImage]:
        """List the user's images, newest first.

        Args:
            page: Page number (1-based)
            per_page: Number of images per page

        Returns:
            Images in upstream order

        """
        logger.debug("Listing images: page={}, per_page={}", page, per_page)
        data = await self._get_json("/api/images", {"page": page, "per_page": per_page})
        images = [GyazoImage.model_validate(item) for item in data or []]
        logger.debug("Listed {} images", len(images))
        return images

    async def get_image(self, image_id: str) -> GyazoImage | None:
        """Fetch a single image record.

        Args:
            image_id: Gyazo image identifier

        Returns:
            The image, or None if Gyazo reports it missing (404 or empty body)

        """
        logger.debug("Fetching image record: {}", image_id)
        try:
            data = await self._get_json(f"/api/images/{quote(image_id, safe='')}")
        except httpx.HTTPStatusError as e:
            if e.response.status_code == httpx.codes.NOT_FOUND:
                return None
            raise
        if not data:
            return None
        return GyazoImage.model_validate(data)

    async def search_images(self, query: str, page: int = 1, per: int = 20) -> list[SearchedImage]:
        """Full-text search over the user's images.

        Args:
            query: Search query (Gyazo limits this to 200 characters)
            page: Page number (1-based)
            per: Results per page (1-100)

        Returns:
            Matching images in upstream order

        """
        logger.debug("Searching images: query='{}', page={}, per={}", query[:50], page, per)
        data = await self._get_json("/api/search", {"query": query, "page": page, "per": per})
        return [SearchedImage.model_validate(item) for item in data or []]

    async def fetch_image_bytes(self, url: str) -> bytes:
        """Download raw image content from a direct image URL.

        Args:
            url: Direct content URL taken from an image record

        Returns:
            Raw image bytes

        """
        logger.debug("Fetching image content: {}", url[:80])
        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            response = await client.get(url)
            response.raise_for_status()
            logger.debug("Fetched {} bytes", len(response.content))
            return response.content

    async def upload_image(
        self,
        image_data: bytes,
        image_type: str = "png",
        *,
        title: str | None = None,
        desc: str | None = None,
        referer_url: str | None = None,
        app: str | None = None,
        access_policy: str | None = None,
        metadata_is_public: bool | None = None,
        created_at: str | None = None,
        collection_id: str | None = None,
    ) -> UploadedImage:
        """Upload image bytes to Gyazo.

        Args:
            image_data: Raw image bytes
            image_type: File type used for the filename and part content type
            title: Title metadata
            desc: Description metadata
            referer_url: Source URL metadata
            app: Application name metadata
            access_policy: "anyone" or "only_owner"
            metadata_is_public: Whether metadata is visible to others
            created_at: Capture time as a Unix timestamp string
            collection_id: Collection to add the image to

        Returns:
            The uploaded image's identifiers and URLs

        Raises:
            UploadFailedError: If Gyazo answers with a non-success status

        """
        filename = f"gyazo_upload_{int(time.time() * 1000)}.{image_type}"
        fields: dict[str, Any] = {
            "access_token": self.access_token,
            "title": title,
            "desc": desc,
            "referer_url": referer_url,
            "app": app,
            "access_policy": access_policy,
            "created_at": created_at,
            "collection_id": collection_id,
        }
        if metadata_is_public is not None:
            fields["metadata_is_public"] = "true" if metadata_is_public else "false"
        form = {key: value for key, value in fields.items() if value}
        files = {"imagedata": (filename, image_data, f"image/{image_type}")}

        logger.debug("Uploading {} ({} bytes)", filename, len(image_data))
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(self.upload_url, data=form, files=files)

        if not response.is_success:
            raise UploadFailedError(
                f"Upload failed with status {response.status_code}",
                status_code=response.status_code,
            )

        uploaded = UploadedImage.model_validate(response.json())
        logger.info("Uploaded image {}", uploaded.image_id)
        return uploaded
