"""Pytest fixtures and configuration for gyazo-mcp tests.

This module provides shared fixtures for testing the Gyazo client, the
request handlers, and the MCP server wiring.
"""

import base64

import pytest

from gyazo_mcp.gyazo import GyazoClient
from gyazo_mcp.handlers import GyazoHandlers

IMAGE_URL = "https://i.gyazo.com/8980c52421e452ac3355ca3e5cfe7a0c.png"

PNG_BASE64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="


# --- Sample Data Fixtures ---


@pytest.fixture
def sample_image_json() -> dict:
    """An images endpoint record with full metadata and OCR."""
    return {
        "image_id": "8980c52421e452ac3355ca3e5cfe7a0c",
        "permalink_url": "https://gyazo.com/8980c52421e452ac3355ca3e5cfe7a0c",
        "thumb_url": "https://thumb.gyazo.com/thumb/200/8980c52421e452ac3355ca3e5cfe7a0c.png",
        "url": IMAGE_URL,
        "type": "png",
        "created_at": "2024-11-02T09:14:51+0000",
        "metadata": {
            "app": "Google Chrome",
            "title": "Sprint board",
            "url": "https://example.com/board",
            "desc": "Planning notes",
        },
        "ocr": {
            "locale": "en",
            "description": "TODO: ship it",
        },
    }


@pytest.fixture
def bare_image_json() -> dict:
    """An images endpoint record with no metadata values and no OCR."""
    return {
        "image_id": "0a1b2c3d4e5f",
        "permalink_url": "https://gyazo.com/0a1b2c3d4e5f",
        "thumb_url": "https://thumb.gyazo.com/thumb/200/0a1b2c3d4e5f.jpg",
        "url": "https://i.gyazo.com/0a1b2c3d4e5f.jpg",
        "type": "jpg",
        "created_at": "2024-11-01T18:00:00+0000",
        "metadata": {"app": None, "title": "", "url": None, "desc": ""},
    }


@pytest.fixture
def sample_search_json() -> list[dict]:
    """Two search endpoint records."""
    return [
        {
            "image_id": "aaa111",
            "permalink_url": "https://gyazo.com/aaa111",
            "url": "https://i.gyazo.com/aaa111.png",
            "access_policy": None,
            "type": "png",
            "thumb_url": "https://thumb.gyazo.com/thumb/200/aaa111.png",
            "created_at": "2024-10-30T12:00:00+0000",
            "alt_text": "a whiteboard with a diagram",
        },
        {
            "image_id": "bbb222",
            "permalink_url": "https://gyazo.com/bbb222",
            "url": "https://i.gyazo.com/bbb222.jpg",
            "access_policy": "anyone",
            "type": "jpg",
            "thumb_url": "https://thumb.gyazo.com/thumb/200/bbb222.jpg",
            "created_at": "2024-10-29T08:30:00+0000",
            "alt_text": "whiteboard photo",
        },
    ]


@pytest.fixture
def sample_upload_json() -> dict:
    """An upload endpoint response."""
    return {
        "image_id": "ccc333",
        "permalink_url": "https://gyazo.com/ccc333",
        "thumb_url": "https://thumb.gyazo.com/thumb/200/ccc333.png",
        "url": "https://i.gyazo.com/ccc333.png",
        "type": "png",
    }


@pytest.fixture
def png_bytes() -> bytes:
    """Minimal valid PNG: 1x1 transparent pixel."""
    return base64.b64decode(PNG_BASE64)


# --- Client Fixtures ---


@pytest.fixture
def gyazo_client() -> GyazoClient:
    """A Gyazo client with a test token and the default endpoints."""
    return GyazoClient(access_token="test-token", timeout=5.0)


@pytest.fixture
def handlers(gyazo_client: GyazoClient) -> GyazoHandlers:
    """Handlers bound to the test client."""
    return GyazoHandlers(gyazo_client)


# --- Settings Override Fixtures ---


@pytest.fixture
def mock_settings(monkeypatch):
    """Override settings with test values."""
    monkeypatch.setenv("GYAZO_ACCESS_TOKEN", "env-token")
    monkeypatch.setenv("REQUEST_TIMEOUT", "5")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    from gyazo_mcp.config import Settings

    return Settings()
