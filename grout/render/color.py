"""Hex color parsing, gradients and contrast selection."""

import hashlib
from typing import NamedTuple

from ..config import FALLBACK_GRAY

RGB = tuple[int, int, int]

BLACK_HEX = "000000"
WHITE_HEX = "ffffff"
LUMINANCE_THRESHOLD = 0.5
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


class ColorSpec(NamedTuple):
    """Solid color when ``end`` is None, otherwise a left-to-right gradient."""

    start: RGB
    end: RGB | None = None

    @property
    def is_gradient(self) -> bool:
        return self.end is not None


def parse_hex(value: str) -> RGB:
    """Convert ``#rgb``/``#rrggbb`` strings to an RGB triple.

    Anything else resolves to the fallback gray.
    """
    value = value.strip().removeprefix("#")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    if len(value) != 6 or not _HEX_DIGITS.issuperset(value):
        return FALLBACK_GRAY
    return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))


def to_hex(rgb: RGB) -> str:
    """Format an RGB triple as six lowercase hex digits."""
    return "{:02x}{:02x}{:02x}".format(*rgb)


def split_gradient(value: str) -> tuple[str, str | None] | None:
    """Split a comma-separated background into its gradient stops.

    Returns ``(first, second)`` for exactly two stops, ``(first, None)`` when
    more than two values were given, and ``None`` when the value is not a
    gradient at all.
    """
    if "," not in value:
        return None
    parts = [part.strip() for part in value.split(",")]
    if len(parts) == 2:
        return parts[0], parts[1]
    if len(parts) > 2:
        return parts[0], None
    return None


def resolve_background(value: str) -> ColorSpec:
    """Parse a background value into a solid color or a two-stop gradient."""
    stops = split_gradient(value)
    if stops is None:
        return ColorSpec(parse_hex(value))
    first, second = stops
    if second is None:
        return ColorSpec(parse_hex(first))
    return ColorSpec(parse_hex(first), parse_hex(second))


def relative_luminance(rgb: tuple[float, float, float]) -> float:
    """Weighted luminance of an RGB color on a 0 to 1 scale."""
    r, g, b = (channel / 255.0 for channel in rgb)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def resolve_contrast(value: str) -> str:
    """Pick black or white text for the given background.

    Gradients are judged by the channel-wise average of both stops.
    """
    background = resolve_background(value)
    if background.end is not None:
        rgb = tuple((a + b) / 2.0 for a, b in zip(background.start, background.end))
    else:
        rgb = background.start
    if relative_luminance(rgb) > LUMINANCE_THRESHOLD:
        return BLACK_HEX
    return WHITE_HEX


def color_hash(seed: str) -> str:
    """Deterministic hex color derived from ``seed``."""
    digest = hashlib.md5(seed.encode(), usedforsecurity=False).digest()
    return digest[:3].hex()
