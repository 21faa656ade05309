"""
Tests for the Gyazo API client.

Tests GyazoClient requests, response parsing, and the factory function.
"""

import httpx
import pytest
import respx
from httpx import Response

from gyazo_mcp.exceptions import UploadFailedError
from gyazo_mcp.gyazo import GyazoClient, GyazoImage, create_gyazo_client
from gyazo_mcp.gyazo.client import DEFAULT_API_URL as API_URL
from gyazo_mcp.gyazo.client import DEFAULT_UPLOAD_URL as UPLOAD_URL

IMAGE_URL = "https://i.gyazo.com/8980c52421e452ac3355ca3e5cfe7a0c.png"


class TestGyazoClientInit:
    """Test client construction."""

    def test_init_without_token_raises(self):
        """Test that an empty access token is rejected."""
        with pytest.raises(ValueError, match="Gyazo access token is required"):
            GyazoClient(access_token="")

    def test_api_url_trailing_slash_stripped(self):
        """Test the API base URL is normalized."""
        client = GyazoClient(access_token="t", api_url="https://api.example.com/")

        assert client.api_url == "https://api.example.com"

    def test_factory_defaults(self):
        """Test create_gyazo_client falls back to default endpoints."""
        client = create_gyazo_client(access_token="t")

        assert isinstance(client, GyazoClient)
        assert client.api_url == API_URL
        assert client.upload_url == UPLOAD_URL

    def test_factory_overrides(self):
        """Test create_gyazo_client honours endpoint overrides."""
        client = create_gyazo_client(
            access_token="t",
            api_url="https://api.example.com",
            upload_url="https://upload.example.com/api/upload",
            timeout=3.0,
        )

        assert client.api_url == "https://api.example.com"
        assert client.upload_url == "https://upload.example.com/api/upload"
        assert client.timeout == 3.0


class TestListImages:
    """Test the images listing call."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_images_sends_token_and_paging(self, gyazo_client, sample_image_json):
        """Test list_images sends access_token, page and per_page."""
        route = respx.get(f"{API_URL}/api/images").mock(
            return_value=Response(200, json=[sample_image_json])
        )

        images = await gyazo_client.list_images(page=1, per_page=10)

        params = route.calls.last.request.url.params
        assert params["access_token"] == "test-token"
        assert params["page"] == "1"
        assert params["per_page"] == "10"
        assert len(images) == 1
        assert isinstance(images[0], GyazoImage)
        assert images[0].metadata.title == "Sprint board"
        assert images[0].ocr.description == "TODO: ship it"

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_images_preserves_order(
        self, gyazo_client, sample_image_json, bare_image_json
    ):
        """Test images come back in upstream order."""
        respx.get(f"{API_URL}/api/images").mock(
            return_value=Response(200, json=[bare_image_json, sample_image_json])
        )

        images = await gyazo_client.list_images()

        assert [i.image_id for i in images] == ["0a1b2c3d4e5f", "8980c52421e452ac3355ca3e5cfe7a0c"]

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_images_null_metadata(self, gyazo_client, bare_image_json):
        """Test a null metadata object becomes an empty record."""
        bare_image_json["metadata"] = None
        respx.get(f"{API_URL}/api/images").mock(return_value=Response(200, json=[bare_image_json]))

        images = await gyazo_client.list_images()

        assert images[0].metadata.title is None
        assert images[0].ocr is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_images_http_error_propagates(self, gyazo_client):
        """Test upstream errors are not swallowed."""
        respx.get(f"{API_URL}/api/images").mock(return_value=Response(500))

        with pytest.raises(httpx.HTTPStatusError):
            await gyazo_client.list_images()


class TestGetImage:
    """Test the single image call."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_image_found(self, gyazo_client, sample_image_json):
        """Test get_image returns the parsed record."""
        image_id = sample_image_json["image_id"]
        respx.get(f"{API_URL}/api/images/{image_id}").mock(
            return_value=Response(200, json=sample_image_json)
        )

        image = await gyazo_client.get_image(image_id)

        assert image is not None
        assert image.image_id == image_id
        assert image.mime_type == "image/png"

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_image_null_body(self, gyazo_client):
        """Test a null body means not found."""
        respx.get(f"{API_URL}/api/images/missing").mock(
            return_value=Response(
                200, content=b"null", headers={"content-type": "application/json"}
            )
        )

        assert await gyazo_client.get_image("missing") is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_image_404(self, gyazo_client):
        """Test a 404 status means not found."""
        respx.get(f"{API_URL}/api/images/missing").mock(
            return_value=Response(404, json={"message": "Not Found"})
        )

        assert await gyazo_client.get_image("missing") is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_image_server_error_propagates(self, gyazo_client):
        """Test non-404 errors propagate."""
        respx.get(f"{API_URL}/api/images/abc").mock(return_value=Response(503))

        with pytest.raises(httpx.HTTPStatusError):
            await gyazo_client.get_image("abc")

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_image_quotes_identifier(self, gyazo_client):
        """Test path separators in the identifier stay inside the image path."""
        search_route = respx.get(f"{API_URL}/api/search").mock(
            return_value=Response(200, json=[])
        )
        record_route = respx.get(url__startswith=f"{API_URL}/api/images/").mock(
            return_value=Response(404)
        )

        assert await gyazo_client.get_image("../search") is None

        assert not search_route.called
        assert record_route.calls.last.request.url.raw_path.startswith(
            b"/api/images/..%2Fsearch"
        )


class TestSearchImages:
    """Test the search call."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_search_sends_params(self, gyazo_client, sample_search_json):
        """Test search sends query, page and per."""
        route = respx.get(f"{API_URL}/api/search").mock(
            return_value=Response(200, json=sample_search_json)
        )

        results = await gyazo_client.search_images("whiteboard", page=2, per=5)

        params = route.calls.last.request.url.params
        assert params["query"] == "whiteboard"
        assert params["page"] == "2"
        assert params["per"] == "5"
        assert params["access_token"] == "test-token"
        assert [r.image_id for r in results] == ["aaa111", "bbb222"]
        assert results[0].access_policy is None
        assert results[1].mime_type == "image/jpg"


class TestFetchImageBytes:
    """Test image content download."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_image_bytes_without_token(self, gyazo_client, png_bytes):
        """Test content is fetched as-is, without credentials."""
        route = respx.get(IMAGE_URL).mock(return_value=Response(200, content=png_bytes))

        content = await gyazo_client.fetch_image_bytes(IMAGE_URL)

        request = route.calls.last.request
        assert content == png_bytes
        assert "access_token" not in request.url.params
        assert "authorization" not in request.headers


class TestUploadImage:
    """Test the upload call."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_upload_success(self, gyazo_client, sample_upload_json):
        """Test a successful multipart upload."""
        route = respx.post(UPLOAD_URL).mock(return_value=Response(200, json=sample_upload_json))

        uploaded = await gyazo_client.upload_image(
            b"ABC", "jpeg", title="Title", desc="Desc", referer_url="https://example.com"
        )

        body = route.calls.last.request.content
        assert uploaded.image_id == "ccc333"
        assert uploaded.permalink_url == "https://gyazo.com/ccc333"
        assert b'name="imagedata"; filename="gyazo_upload_' in body
        assert b'.jpeg"' in body
        assert b'name="access_token"' in body
        assert b"test-token" in body
        assert b'name="desc"' in body
        assert b'name="referer_url"' in body
        assert b'name="app"' not in body

    @pytest.mark.asyncio
    @respx.mock
    async def test_upload_non_success_status(self, gyazo_client):
        """Test a rejected upload raises UploadFailedError with the status."""
        respx.post(UPLOAD_URL).mock(return_value=Response(413))

        with pytest.raises(UploadFailedError) as exc_info:
            await gyazo_client.upload_image(b"ABC")

        assert exc_info.value.status_code == 413
        assert "413" in str(exc_info.value)

    @pytest.mark.asyncio
    @respx.mock
    async def test_upload_private(self, gyazo_client, sample_upload_json):
        """Test access_policy and metadata_is_public are sent when given."""
        route = respx.post(UPLOAD_URL).mock(return_value=Response(200, json=sample_upload_json))

        await gyazo_client.upload_image(
            b"ABC", access_policy="only_owner", metadata_is_public=False
        )

        body = route.calls.last.request.content
        assert b"only_owner" in body
        assert b'name="metadata_is_public"' in body
