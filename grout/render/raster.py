"""Raster drawing with Pillow and encoding to PNG, JPEG, GIF and WebP."""

import io
from collections.abc import Callable

from loguru import logger
from PIL import Image, ImageDraw

from ..exceptions import RenderError
from ..models import ImageFormat, RenderSpec
from .color import RGB, parse_hex, resolve_background
from .fonts import Font
from .text import line_positions

QUALITY = 90


def _horizontal_gradient(width: int, height: int, start: RGB, end: RGB) -> Image.Image:
    """Left-to-right linear blend from ``start`` to ``end``."""
    span = max(width - 1, 1)
    row = Image.new("L", (width, 1))
    row.putdata([round(255 * x / span) for x in range(width)])
    mask = row.resize((width, height), Image.Resampling.NEAREST)
    return Image.composite(
        Image.new("RGBA", (width, height), (*end, 255)),
        Image.new("RGBA", (width, height), (*start, 255)),
        mask,
    )


def _background(spec: RenderSpec) -> Image.Image:
    w, h = spec.width, spec.height
    color = resolve_background(spec.background)
    if color.end is not None:
        fill = _horizontal_gradient(w, h, color.start, color.end)
    else:
        fill = Image.new("RGBA", (w, h), (*color.start, 255))

    if not spec.rounded:
        return fill

    radius = min(w, h) / 2
    cx, cy = w / 2, h / 2
    mask = Image.new("L", (w, h), 0)
    ImageDraw.Draw(mask).ellipse((cx - radius, cy - radius, cx + radius, cy + radius), fill=255)
    canvas = Image.new("RGBA", (w, h), (0, 0, 0, 0))
    canvas.paste(fill, (0, 0), mask)
    return canvas


def draw(spec: RenderSpec, lines: list[str], font: Font, font_size: float, stroke: int = 0) -> Image.Image:
    """Draw the background shape and centered text lines."""
    image = _background(spec)
    canvas = ImageDraw.Draw(image)
    fill = (*parse_hex(spec.foreground), 255)
    x = spec.width / 2
    for line, y in zip(lines, line_positions(len(lines), spec.height, font_size)):
        canvas.text(
            (x, y),
            line,
            font=font,
            fill=fill,
            anchor="mm",
            stroke_width=stroke,
            stroke_fill=fill,
        )
    return image


def _encode_png(image: Image.Image, buf: io.BytesIO) -> None:
    image.save(buf, format="PNG")


def _encode_jpeg(image: Image.Image, buf: io.BytesIO) -> None:
    image.convert("RGB").save(buf, format="JPEG", quality=QUALITY)


def _encode_gif(image: Image.Image, buf: io.BytesIO) -> None:
    image.save(buf, format="GIF")


def _encode_webp(image: Image.Image, buf: io.BytesIO) -> None:
    image.save(buf, format="WEBP", quality=QUALITY, lossless=False)


ENCODERS: dict[ImageFormat, Callable[[Image.Image, io.BytesIO], None]] = {
    ImageFormat.PNG: _encode_png,
    ImageFormat.JPG: _encode_jpeg,
    ImageFormat.JPEG: _encode_jpeg,
    ImageFormat.GIF: _encode_gif,
    ImageFormat.WEBP: _encode_webp,
}


def encode(image: Image.Image, fmt: ImageFormat) -> bytes:
    """Encode ``image``; unknown formats are written as WebP.

    Raises:
        RenderError: If the encoder fails.
    """
    encoder = ENCODERS.get(fmt, _encode_webp)
    buf = io.BytesIO()
    try:
        encoder(image, buf)
    except (OSError, ValueError, KeyError) as e:
        logger.error(f"Failed to encode {fmt.value} image: {e}")
        raise RenderError(f"encode {fmt.value}: {e}") from e
    return buf.getvalue()


def render_raster(spec: RenderSpec, lines: list[str], font: Font, font_size: float, stroke: int = 0) -> bytes:
    return encode(draw(spec, lines, font, font_size, stroke), spec.format)
