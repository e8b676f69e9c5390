"""Layout engine: derives every pixel measurement of a chord diagram from its size."""

from __future__ import annotations

import math
from typing import Final

from chordbox.chord_models import FRET_COUNT, STRING_COUNT, LayoutMetrics
from chordbox.typeface import Typeface, default_typeface

MAX_NAME_SEGMENTS: Final[int] = 4
SMALL_FONT_BOOST: Final[int] = 2  # added to every font size at size 1


def measure_name(
    segments: tuple[str, ...],
    name_font_size: float,
    superscript_font_size: float,
    gap: float,
    typeface: Typeface,
) -> float:
    """
    Total advance of the chord name.

    Even segments use the name font, odd ones the superscript font; each is
    followed by ``gap``. Segments past the fourth are never drawn.
    """
    width = 0.0
    for i, segment in enumerate(segments[:MAX_NAME_SEGMENTS]):
        font_size = name_font_size if i % 2 == 0 else superscript_font_size
        width += typeface.measure(segment, font_size) + gap
    return width


def compute_layout(
    size: float,
    name_segments: tuple[str, ...] = (),
    typeface: Typeface | None = None,
) -> LayoutMetrics:
    """
    Compute the LayoutMetrics for a diagram at ``size`` with the given name.

    The image width depends on the rendered name, so the name is measured
    first, the width is then fixed, and only then is the box centred in it.

    Args:
        size:          Rendering scale as returned by ``parse_size``.
        name_segments: Chord name split into normal/superscript segments.
        typeface:      Face used for font sizing and measurement.
    """
    if typeface is None:
        typeface = default_typeface()
    k = typeface.cap_ratio

    fret_width = 4 * size
    line_width = max(1, math.ceil(0.31 * size))
    dot_width = math.ceil(0.9 * fret_width)
    marker_width = 0.7 * fret_width
    nut_height = fret_width / 2
    box_width = (STRING_COUNT - 1) * fret_width + STRING_COUNT * line_width
    box_height = FRET_COUNT * (fret_width + line_width) + line_width

    name_font_size = 2 * fret_width / k
    superscript_font_size = 0.7 * name_font_size
    fret_font_size = fret_width / k
    finger_font_size = 0.8 * fret_width / k
    if size == 1:
        name_font_size += SMALL_FONT_BOOST
        superscript_font_size += SMALL_FONT_BOOST
        fret_font_size += SMALL_FONT_BOOST
        finger_font_size += SMALL_FONT_BOOST

    if name_segments:
        y_start = round(
            0.2 * superscript_font_size + name_font_size + nut_height + 1.7 * marker_width
        )
    else:
        y_start = round(nut_height + 1.7 * marker_width)

    image_width = int(box_width + 5 * fret_width)
    image_height = int(box_height + y_start + 2 * fret_width)

    # Measure, then size: the name may need more room than the box.
    name_width = measure_name(
        name_segments, name_font_size, superscript_font_size, size, typeface
    )
    if image_width < name_width + 2 * fret_width:
        image_width = int(name_width + 2 * fret_width)

    # Centre only once the final width is known.
    x_start = image_width / 2 - box_width / 2

    return LayoutMetrics(
        size=size,
        fret_width=fret_width,
        line_width=line_width,
        dot_width=dot_width,
        marker_width=marker_width,
        nut_height=nut_height,
        box_width=box_width,
        box_height=box_height,
        name_font_size=name_font_size,
        superscript_font_size=superscript_font_size,
        fret_font_size=fret_font_size,
        finger_font_size=finger_font_size,
        name_width=name_width,
        image_width=image_width,
        image_height=image_height,
        x_start=x_start,
        y_start=float(y_start),
    )
