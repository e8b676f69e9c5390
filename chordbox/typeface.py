"""Typeface: the loaded font face used to measure and draw diagram text."""

from __future__ import annotations

from functools import cache, lru_cache
from typing import Final

from PIL import ImageFont

DEFAULT_FONT: Final[str] = "DejaVuSans.ttf"


@lru_cache(maxsize=128)
def load_font(font_path: str, size: float) -> ImageFont.FreeTypeFont:
    """
    Load ``font_path`` at ``size`` pixels, falling back to Pillow's bundled face.

    Fonts are cached and never mutated, so one instance is shared by every
    render that asks for the same face and size.
    """
    try:
        return ImageFont.truetype(font_path, size)
    except OSError:
        return ImageFont.load_default(size)  # type: ignore[return-value]


class Typeface:
    """
    One font face plus the metrics the layout engine derives from it.

    ``cap_ratio`` is ascent / (ascent + descent). Font sizes are divided by it
    so that a requested glyph height maps onto the face's full line height.
    """

    # Large enough that integer pixel metrics do not distort the ratio.
    _REFERENCE_SIZE: int = 1000

    def __init__(self, font_path: str = DEFAULT_FONT) -> None:
        self.font_path = font_path
        ascent, descent = self.font(self._REFERENCE_SIZE).getmetrics()
        self.cap_ratio: float = ascent / (ascent + descent)

    def font(self, size: float) -> ImageFont.FreeTypeFont:
        return load_font(self.font_path, size)

    def measure(self, text: str, size: float) -> float:
        """Advance width of ``text`` in pixels at ``size``."""
        if not text:
            return 0.0
        return float(self.font(size).getlength(text))


@cache
def default_typeface() -> Typeface:
    """The shared default typeface, loaded on first use."""
    return Typeface()
