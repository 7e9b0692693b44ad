"""Text layout: initials, font sizing, word wrapping and vertical centering."""

from typing import Protocol

from PIL import ImageFont

HORIZONTAL_PADDING = 0.1
LINE_SPACING = 1.5
CHAR_WIDTH_FACTOR = 0.6
SHORT_TEXT_LENGTH = 2
MIN_SINGLE_LINE_FONT = 12.0


class Measurer(Protocol):
    """Decides whether a candidate line fits the usable width."""

    def fits(self, line: str, max_width: float, font_size: float) -> bool:
        """Return True when ``line`` fits in ``max_width`` pixels."""
        ...


class FontMeasurer:
    """Exact measurement using the font that will draw the text."""

    def __init__(self, font: ImageFont.FreeTypeFont | ImageFont.ImageFont) -> None:
        self.font = font

    def fits(self, line: str, max_width: float, font_size: float) -> bool:
        return self.font.getlength(line) <= max_width


class CharCountMeasurer:
    """Estimates capacity from an average glyph width of ``0.6 * font_size``."""

    def __init__(self, min_chars_per_line: int = 10) -> None:
        self.min_chars_per_line = min_chars_per_line

    def max_chars(self, max_width: float, font_size: float) -> int:
        return max(int(max_width / (font_size * CHAR_WIDTH_FACTOR)), self.min_chars_per_line)

    def fits(self, line: str, max_width: float, font_size: float) -> bool:
        return len(line) <= self.max_chars(max_width, font_size)


def _upper_char(char: str) -> str:
    upper = char.upper()
    return upper if len(upper) == 1 else char


def initials(name: str) -> str:
    """Return up to two leading characters from the first two words of ``name``.

    Characters whose uppercase form is longer than one character, such as
    ``ß``, are kept as they are.
    """
    return "".join(_upper_char(word[0]) for word in name.split()[:2])


def usable_width(image_width: float) -> float:
    """Image width left after ten percent padding on each side."""
    return image_width - 2 * image_width * HORIZONTAL_PADDING


def wrap(text: str, image_width: float, font_size: float, measurer: Measurer) -> list[str]:
    """Greedily break ``text`` into lines that fit the padded image width.

    A word wider than a whole line is kept alone on its own line. Input with
    no words comes back unchanged as the only line.
    """
    max_width = usable_width(image_width)
    words = text.split()
    if not words:
        return [text]

    lines: list[str] = []
    current = ""
    for word in words:
        candidate = f"{current} {word}" if current else word
        if measurer.fits(candidate, max_width, font_size):
            current = candidate
        elif current:
            lines.append(current)
            current = word
        else:
            lines.append(word)

    if current:
        lines.append(current)
    return lines or [text]


def single_line_font_size(width: int, height: int, text: str) -> float:
    """Font size for initials, dimension labels and other one-line text."""
    min_dim = float(min(width, height))
    if len(text) <= SHORT_TEXT_LENGTH:
        return min_dim * 0.5
    return max(min_dim * 0.15, MIN_SINGLE_LINE_FONT)


def prose_font_size(height: int, text: str, min_size: float, max_size: float) -> float:
    """Font size for quotes and jokes, shrinking as the text grows."""
    if len(text) > 200:
        size = height * 0.05
    elif len(text) > 100:
        size = height * 0.06
    else:
        size = height * 0.08
    return min(max(size, min_size), max_size)


def line_positions(line_count: int, height: float, font_size: float) -> list[float]:
    """Vertical centers for ``line_count`` lines centered as one block.

    The block is one font size tall plus one pitch per extra line, so no
    leading is added above the first or below the last line.
    """
    pitch = font_size * LINE_SPACING
    block_height = font_size + (line_count - 1) * pitch
    first = height / 2 - block_height / 2 + font_size / 2
    return [first + index * pitch for index in range(line_count)]
