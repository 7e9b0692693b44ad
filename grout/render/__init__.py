"""Rendering engine: turns a RenderSpec into image bytes."""

from loguru import logger

from ..models import ImageFormat, RenderSpec
from .color import ColorSpec, color_hash, resolve_background, resolve_contrast
from .fonts import FontSet
from .raster import render_raster
from .svg import render_svg
from .text import (
    CharCountMeasurer,
    FontMeasurer,
    initials,
    prose_font_size,
    single_line_font_size,
    wrap,
)


class Renderer:
    """Chooses font size and layout, then hands off to the SVG or raster backend."""

    def __init__(
        self,
        fonts: FontSet,
        min_font_size: float = 16,
        max_font_size: float = 48,
        min_chars_per_line: int = 10,
    ) -> None:
        self.fonts = fonts
        self.min_font_size = min_font_size
        self.max_font_size = max_font_size
        self.char_measurer = CharCountMeasurer(min_chars_per_line)

    def font_size(self, spec: RenderSpec) -> float:
        if spec.prose:
            return prose_font_size(spec.height, spec.text, self.min_font_size, self.max_font_size)
        return single_line_font_size(spec.width, spec.height, spec.text)

    def render(self, spec: RenderSpec) -> bytes:
        """Render ``spec``; the result depends on nothing but ``spec``.

        Raises:
            RenderError: If the raster encoder fails.
        """
        font_size = self.font_size(spec)
        logger.debug(
            f"Rendering {spec.width}x{spec.height} {spec.format.value} (font size {font_size:.1f})"
        )

        if spec.format is ImageFormat.SVG:
            lines = [spec.text]
            if spec.prose:
                lines = wrap(spec.text, spec.width, font_size, self.char_measurer)
            return render_svg(spec, lines, font_size)

        font = self.fonts.get(font_size, bold=spec.bold)
        lines = [spec.text]
        if spec.prose:
            lines = wrap(spec.text, spec.width, font_size, FontMeasurer(font))
        stroke = self.fonts.stroke_width(font_size, spec.bold)
        return render_raster(spec, lines, font, font_size, stroke)


__all__ = [
    "ColorSpec",
    "FontSet",
    "Renderer",
    "color_hash",
    "initials",
    "resolve_background",
    "resolve_contrast",
]
