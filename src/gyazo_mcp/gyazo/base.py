"""
Data models for Gyazo API records.

Provides Pydantic models for the image, search and upload payloads
returned by the Gyazo API. Records are read-only once validated.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GyazoRecord(BaseModel):
    """Fields shared by every upstream image record."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    image_id: str = Field(description="Upstream-assigned unique identifier")
    url: str = Field(description="Direct image content URL")
    type: str = Field(description="File type, e.g. 'png' or 'jpg'")

    @property
    def mime_type(self) -> str:
        """MIME type derived from the upstream file type."""
        return f"image/{self.type}"


class ImageMetadata(BaseModel):
    """User-visible metadata captured with an image."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    app: str | None = Field(default=None, description="Application the capture came from")
    title: str | None = Field(default=None, description="Window or page title")
    url: str | None = Field(default=None, description="Source URL of the capture")
    desc: str | None = Field(default=None, description="User-written description")


class ImageOcr(BaseModel):
    """Text extracted from an image by Gyazo OCR."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    locale: str | None = Field(default=None, description="Detected locale of the text")
    description: str | None = Field(default=None, description="Extracted text")


class GyazoImage(GyazoRecord):
    """A single image as returned by the images endpoints."""

    permalink_url: str | None = Field(default=None, description="Gyazo page URL")
    thumb_url: str | None = Field(default=None, description="Thumbnail URL")
    created_at: str = Field(description="Creation timestamp, passed through unparsed")
    metadata: ImageMetadata = Field(default_factory=ImageMetadata)
    ocr: ImageOcr | None = None

    @field_validator("metadata", mode="before")
    @classmethod
    def _null_metadata(cls, value):
        return {} if value is None else value


class SearchedImage(GyazoRecord):
    """Reduced projection of an image returned by the search endpoint."""

    permalink_url: str | None = None
    access_policy: str | None = None
    thumb_url: str | None = None
    created_at: str
    alt_text: str = ""

    @field_validator("alt_text", mode="before")
    @classmethod
    def _null_alt_text(cls, value):
        return "" if value is None else value


class UploadedImage(GyazoRecord):
    """Response of the upload endpoint."""

    permalink_url: str
    thumb_url: str | None = None
