"""Font loading with cross-platform fallbacks."""

import io
from pathlib import Path

from loguru import logger
from PIL import ImageFont

REGULAR_CANDIDATES = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/Library/Fonts/Arial.ttf",
    "C:/Windows/Fonts/arial.ttf",
]

BOLD_CANDIDATES = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
    "/Library/Fonts/Arial Bold.ttf",
    "C:/Windows/Fonts/arialbd.ttf",
]

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


def _read_first(candidates: list[str]) -> tuple[bytes, str] | None:
    for candidate in candidates:
        path = Path(candidate)
        try:
            data = path.read_bytes()
        except OSError:
            continue
        try:
            ImageFont.truetype(io.BytesIO(data), 12)
        except OSError as e:
            logger.warning(f"Skipping unreadable font {path}: {e}")
            continue
        return data, str(path)
    return None


class FontSet:
    """Regular and bold font faces, read from disk once at startup.

    Each call to :meth:`get` builds a fresh face from the cached bytes so
    concurrent renders never share FreeType state.
    """

    def __init__(self, regular: bytes | None = None, bold: bytes | None = None) -> None:
        self.regular = regular
        self.bold = bold

    @classmethod
    def load(cls, regular_path: str | None = None, bold_path: str | None = None) -> "FontSet":
        regular = _read_first(([regular_path] if regular_path else []) + REGULAR_CANDIDATES)
        bold = _read_first(([bold_path] if bold_path else []) + BOLD_CANDIDATES)

        if regular:
            logger.info(f"Regular font: {regular[1]}")
        else:
            logger.warning("No TrueType font found, using Pillow's bundled default font")
        if bold:
            logger.info(f"Bold font: {bold[1]}")
        else:
            logger.info("No bold font found, bold text will be emulated with a stroke")

        return cls(regular[0] if regular else None, bold[0] if bold else None)

    @property
    def has_bold(self) -> bool:
        return self.bold is not None

    def get(self, size: float, bold: bool = False) -> Font:
        data = self.bold if bold and self.bold is not None else self.regular
        if data is None:
            return ImageFont.load_default(size=size)
        return ImageFont.truetype(io.BytesIO(data), size)

    def stroke_width(self, size: float, bold: bool) -> int:
        """Extra outline used to fake a bold face when none is installed."""
        if not bold or self.has_bold:
            return 0
        return max(1, round(size / 32))
