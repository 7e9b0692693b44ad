"""SVG output, written directly as markup without rasterizing."""

from ..models import RenderSpec
from .color import parse_hex, resolve_background, to_hex
from .text import line_positions

_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&apos;",
    }
)


def escape_xml(value: str) -> str:
    """Escape the five XML special characters."""
    return value.translate(_ESCAPES)


def gradient_id(start: str, end: str) -> str:
    """Element id of the linear gradient between two hex stops."""
    return f"grad_{start}_{end}"


def _shape(spec: RenderSpec, fill: str) -> str:
    if spec.rounded:
        radius = min(spec.width, spec.height) // 2
        return f'<circle cx="{spec.width // 2}" cy="{spec.height // 2}" r="{radius}" fill="{fill}" />'
    return f'<rect width="{spec.width}" height="{spec.height}" fill="{fill}" />'


def _text(x: int, y: float, spec: RenderSpec, font_size: float, fill: str, line: str) -> str:
    return (
        f'<text x="{x}" y="{y:.0f}" font-family="sans-serif" font-size="{font_size:.0f}" '
        f'font-weight="{spec.weight}" fill="#{fill}" text-anchor="middle" '
        f'dominant-baseline="middle">{escape_xml(line)}</text>'
    )


def render_svg(spec: RenderSpec, lines: list[str], font_size: float) -> bytes:
    """Render ``lines`` centered on the background shape as an SVG document."""
    w, h = spec.width, spec.height
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{w}" height="{h}" viewBox="0 0 {w} {h}">'
    ]

    background = resolve_background(spec.background)
    start = to_hex(background.start)
    if background.end is not None:
        end = to_hex(background.end)
        grad = gradient_id(start, end)
        parts.append(
            f'<defs><linearGradient id="{grad}" x1="0%" y1="0%" x2="100%" y2="0%">'
            f'<stop offset="0%" style="stop-color:#{start};stop-opacity:1" />'
            f'<stop offset="100%" style="stop-color:#{end};stop-opacity:1" />'
            "</linearGradient></defs>"
        )
        parts.append(_shape(spec, f"url(#{grad})"))
    else:
        parts.append(_shape(spec, f"#{start}"))

    fill = to_hex(parse_hex(spec.foreground))
    for line, y in zip(lines, line_positions(len(lines), h, font_size)):
        parts.append(_text(w // 2, y, spec, font_size, fill, line))

    parts.append("</svg>")
    return "\n".join(parts).encode()
