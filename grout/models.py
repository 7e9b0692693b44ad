"""Data models using Pydantic."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ImageFormat(str, Enum):
    """Supported output formats."""

    SVG = "svg"
    PNG = "png"
    JPG = "jpg"
    JPEG = "jpeg"
    GIF = "gif"
    WEBP = "webp"

    @property
    def media_type(self) -> str:
        return MEDIA_TYPES[self]


MEDIA_TYPES = {
    ImageFormat.SVG: "image/svg+xml",
    ImageFormat.PNG: "image/png",
    ImageFormat.JPG: "image/jpeg",
    ImageFormat.JPEG: "image/jpeg",
    ImageFormat.GIF: "image/gif",
    ImageFormat.WEBP: "image/webp",
}


class RenderSpec(BaseModel):
    """Everything that determines the bytes of a rendered image."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    background: str
    foreground: str
    text: str
    shape: Literal["circle", "rect"] = "rect"
    weight: Literal["normal", "bold"] = "normal"
    format: ImageFormat = ImageFormat.SVG
    prose: bool = False

    @property
    def rounded(self) -> bool:
        return self.shape == "circle"

    @property
    def bold(self) -> bool:
        return self.weight == "bold"


class AvatarParams(BaseModel):
    """Raw avatar request parameters, already split from the path."""

    name: str
    format: ImageFormat = ImageFormat.SVG
    size: str | None = None
    background: str | None = None
    color: str | None = None
    rounded: bool = False
    bold: bool = False


class PlaceholderParams(BaseModel):
    """Raw placeholder request parameters, already split from the path."""

    width: str | None = None
    height: str | None = None
    format: ImageFormat = ImageFormat.SVG
    text: str | None = None
    quote: bool = False
    joke: bool = False
    category: str = ""
    background: str | None = None
    color: str | None = None


class ImageResult(BaseModel):
    """Outcome of an image request."""

    body: bytes = b""
    media_type: str
    etag: str
    cache_status: Literal["HIT", "MISS"] | None = None

    @property
    def not_modified(self) -> bool:
        return self.cache_status is None
