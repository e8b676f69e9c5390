"""Unit tests for layout metrics (fixed-metric typeface, no system fonts needed)."""

import pytest

from chordbox.layout_engine import compute_layout, measure_name
from chordbox.notation_parser import parse_size
from chordbox.typeface import Typeface


def test_layout_size_one_without_name(fixed_typeface: Typeface) -> None:
    layout = compute_layout(1.0, (), fixed_typeface)
    assert layout.fret_width == 4
    assert layout.line_width == 1
    assert layout.dot_width == 4
    assert layout.marker_width == pytest.approx(2.8)
    assert layout.nut_height == 2
    assert layout.box_width == 26
    assert layout.box_height == 26
    assert layout.y_start == 7
    assert layout.image_width == 46
    assert layout.image_height == 41
    assert layout.x_start == 10


def test_layout_size_one_adds_two_to_every_font(fixed_typeface: Typeface) -> None:
    layout = compute_layout(1.0, (), fixed_typeface)
    assert layout.name_font_size == pytest.approx(8 / 0.5 + 2)
    assert layout.superscript_font_size == pytest.approx(0.7 * 8 / 0.5 + 2)
    assert layout.fret_font_size == pytest.approx(4 / 0.5 + 2)
    assert layout.finger_font_size == pytest.approx(0.8 * 4 / 0.5 + 2)


def test_layout_fonts_scale_with_cap_ratio(fixed_typeface: Typeface) -> None:
    layout = compute_layout(2.0, (), fixed_typeface)
    assert layout.name_font_size == pytest.approx(32)
    assert layout.superscript_font_size == pytest.approx(22.4)
    assert layout.fret_font_size == pytest.approx(16)
    assert layout.finger_font_size == pytest.approx(12.8)


def test_layout_size_two_geometry(fixed_typeface: Typeface) -> None:
    layout = compute_layout(2.0, (), fixed_typeface)
    assert layout.fret_width == 8
    assert layout.line_width == 1
    assert layout.dot_width == 8
    assert layout.box_width == 46
    assert layout.box_height == 46
    assert layout.y_start == 14
    assert layout.image_width == 86
    assert layout.image_height == 76
    assert layout.cell_width == 9


def test_layout_line_width_grows_with_size(fixed_typeface: Typeface) -> None:
    assert compute_layout(4.0, (), fixed_typeface).line_width == 2
    assert compute_layout(10.5, (), fixed_typeface).line_width == 4


def test_layout_name_moves_box_down(fixed_typeface: Typeface) -> None:
    layout = compute_layout(1.0, ("ABCDEFGHIJ",), fixed_typeface)
    # 0.2 * 13.2 + 18 + 2 + 1.7 * 2.8 = 27.4
    assert layout.y_start == 27


def test_layout_long_name_widens_image_and_recentres_box(fixed_typeface: Typeface) -> None:
    layout = compute_layout(1.0, ("ABCDEFGHIJ",), fixed_typeface)
    # ten glyphs of 9 px plus a 1 px gap
    assert layout.name_width == pytest.approx(91)
    assert layout.image_width == 99
    assert layout.x_start == pytest.approx(99 / 2 - 26 / 2)


def test_layout_short_name_keeps_provisional_width(fixed_typeface: Typeface) -> None:
    layout = compute_layout(1.0, ("D",), fixed_typeface)
    assert layout.image_width == 46
    assert layout.x_start == 10


def test_measure_name_alternates_fonts_and_adds_gaps(fixed_typeface: Typeface) -> None:
    width = measure_name(("C", "7", "b9"), 20, 10, 2, fixed_typeface)
    assert width == pytest.approx((10 + 2) + (5 + 2) + (20 + 2))


def test_measure_name_ignores_segments_past_four(fixed_typeface: Typeface) -> None:
    four = measure_name(("A", "b", "C", "d"), 20, 10, 1, fixed_typeface)
    six = measure_name(("A", "b", "C", "d", "EEEE", "ffff"), 20, 10, 1, fixed_typeface)
    assert four == six


def test_requested_size_three_lays_out_like_scale_two(fixed_typeface: Typeface) -> None:
    assert compute_layout(parse_size("3"), (), fixed_typeface) == compute_layout(2.0, (), fixed_typeface)


def test_layout_is_deterministic(fixed_typeface: Typeface) -> None:
    first = compute_layout(3.0, ("F", "#", "m"), fixed_typeface)
    second = compute_layout(3.0, ("F", "#", "m"), fixed_typeface)
    assert first == second


def test_default_typeface_cap_ratio_is_a_fraction() -> None:
    ratio = Typeface().cap_ratio
    assert 0.5 < ratio < 1.0


@pytest.mark.integration
def test_dejavu_cap_ratio() -> None:
    from PIL import ImageFont

    try:
        ImageFont.truetype("DejaVuSans.ttf", 10)
    except OSError:
        pytest.skip("DejaVu Sans is not installed.")
    assert Typeface("DejaVuSans.ttf").cap_ratio == pytest.approx(0.797, abs=0.005)
