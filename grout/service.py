"""Image service: parameter defaults, conditional requests, caching and rendering."""

import re
from collections.abc import Callable

from loguru import logger

from .config import DEFAULT_AVATAR_BG, DEFAULT_BG_COLOR, DEFAULT_SIZE
from .content import ContentKind, ContentRepository
from .exceptions import ContentNotFoundError
from .models import AvatarParams, ImageFormat, ImageResult, PlaceholderParams, RenderSpec
from .render import Renderer, color_hash, initials, resolve_contrast
from .storage import Cache, digest, fingerprint

INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

IMAGE_EXTENSIONS = {
    ".svg": ImageFormat.SVG,
    ".png": ImageFormat.PNG,
    ".jpg": ImageFormat.JPG,
    ".jpeg": ImageFormat.JPEG,
    ".gif": ImageFormat.GIF,
    ".webp": ImageFormat.WEBP,
}


def parse_int_or_default(value: str | None, default: int) -> int:
    """Parse a positive decimal integer, falling back to ``default`` on anything else.

    Only ASCII digits with an optional sign are accepted; whitespace,
    underscores and other Unicode digits count as parse failures.
    """
    if not value or not INTEGER_PATTERN.fullmatch(value):
        return default
    number = int(value)
    return number if number > 0 else default


def split_format(filename: str, default: ImageFormat = ImageFormat.SVG) -> tuple[ImageFormat, str]:
    """Split a known image extension off ``filename``."""
    lowered = filename.lower()
    for extension, fmt in IMAGE_EXTENSIONS.items():
        if lowered.endswith(extension):
            return fmt, filename[: -len(extension)]
    return default, filename


def parse_flag(value: str | None) -> bool:
    return value in ("true", "1")


class ImageService:
    """Serves avatars and placeholders through the image cache."""

    def __init__(
        self,
        renderer: Renderer,
        cache: Cache,
        content: ContentRepository | None = None,
        min_width_for_quote: int = 300,
    ) -> None:
        """Initialize with injected dependencies."""
        self.renderer = renderer
        self.cache = cache
        self.content = content
        self.min_width_for_quote = min_width_for_quote

    def avatar(self, params: AvatarParams, if_none_match: str | None = None) -> ImageResult:
        """Render the initials of ``params.name`` on a square or circle."""
        name = params.name
        size = parse_int_or_default(params.size, DEFAULT_SIZE)

        background = params.background or DEFAULT_AVATAR_BG
        if background.lower() == "random":
            background = color_hash(name)
        foreground = params.color or resolve_contrast(background)

        key = fingerprint(
            "Avatar",
            name,
            size,
            params.rounded,
            params.bold,
            background,
            foreground,
            params.format,
        )
        spec = RenderSpec(
            width=size,
            height=size,
            background=background,
            foreground=foreground,
            text=initials(name),
            shape="circle" if params.rounded else "rect",
            weight="bold" if params.bold else "normal",
            format=params.format,
        )
        return self.serve(key, params.format, lambda: self.renderer.render(spec), if_none_match)

    def placeholder(
        self, params: PlaceholderParams, if_none_match: str | None = None
    ) -> ImageResult:
        """Render a placeholder with dimension text, custom text, or a quote or joke."""
        width = parse_int_or_default(params.width, DEFAULT_SIZE)
        height = parse_int_or_default(params.height, DEFAULT_SIZE)
        text, prose = self._placeholder_text(params, width, height)

        background = params.background or DEFAULT_BG_COLOR
        foreground = params.color or resolve_contrast(background)

        fields: list[object] = [width, height, background, foreground, text, params.format]
        if prose:
            fields.append("wrap")
        key = fingerprint("PH", *fields)
        spec = RenderSpec(
            width=width,
            height=height,
            background=background,
            foreground=foreground,
            text=text,
            weight="bold",
            format=params.format,
            prose=prose,
        )
        return self.serve(key, params.format, lambda: self.renderer.render(spec), if_none_match)

    def _placeholder_text(
        self, params: PlaceholderParams, width: int, height: int
    ) -> tuple[str, bool]:
        """Resolve the text to draw and whether it is prose to be wrapped.

        Quotes take priority over jokes. Neither is used on images narrower
        than ``min_width_for_quote``.
        """
        default = params.text or f"{width} x {height}"
        if params.quote:
            kind = ContentKind.QUOTE
        elif params.joke:
            kind = ContentKind.JOKE
        else:
            return default, False

        if width < self.min_width_for_quote or self.content is None:
            return default, False
        try:
            return self.content.get_random(kind, params.category), True
        except ContentNotFoundError as e:
            logger.debug(f"Content lookup failed, using fallback text: {e}")
            return default, False

    def serve(
        self,
        key: str,
        fmt: ImageFormat,
        generate: Callable[[], bytes],
        if_none_match: str | None = None,
    ) -> ImageResult:
        """Answer from the conditional token, then the cache, then ``generate``.

        A failing ``generate`` propagates its RenderError and leaves the cache
        untouched.
        """
        etag = digest(key)
        if if_none_match == etag:
            return ImageResult(media_type=fmt.media_type, etag=etag)

        data = self.cache.get(key)
        if data is not None:
            return ImageResult(body=data, media_type=fmt.media_type, etag=etag, cache_status="HIT")

        logger.debug(f"Cache miss for {key[:60]}")
        data = generate()
        self.cache.put(key, data)
        return ImageResult(body=data, media_type=fmt.media_type, etag=etag, cache_status="MISS")
