"""Shared fixtures: a typeface with fixed, font-independent metrics."""

import pytest
from PIL import ImageFont

from chordbox.typeface import Typeface


class FixedTypeface(Typeface):
    """Every glyph is half the font size wide; cap ratio is exactly 0.5."""

    def __init__(self) -> None:
        self.font_path = "fixed"
        self.cap_ratio = 0.5

    def font(self, size: float) -> ImageFont.FreeTypeFont:
        return ImageFont.load_default(size)  # type: ignore[return-value]

    def measure(self, text: str, size: float) -> float:
        return 0.5 * size * len(text)


@pytest.fixture
def fixed_typeface() -> Typeface:
    return FixedTypeface()
