"""Renderer: draws a chord diagram onto a Pillow canvas."""

from __future__ import annotations

from PIL import Image, ImageDraw

from chordbox.chord_models import (
    FRET_COUNT,
    MUTED,
    NO_FINGER,
    OPEN,
    STRING_COUNT,
    BarSpan,
    ChordModel,
    LayoutMetrics,
    StringNotes,
)
from chordbox.layout_engine import MAX_NAME_SEGMENTS
from chordbox.typeface import Typeface, default_typeface

Color = tuple[int, int, int, int]


class ChordBoxRenderer:
    """
    Render a ChordModel into an RGBA image.

    The drawing order is fixed: background, grid, notes, name, base fret
    label, fingers, barres. A model with ``parse_error`` set gets a red cross
    over the background instead.
    """

    FOREGROUND: Color = (0, 0, 0, 255)
    BACKGROUND: Color = (255, 255, 255, 255)
    ERROR: Color = (255, 0, 0, 255)
    ERROR_LINE_WIDTH: int = 3

    # Barre arcs, outermost first: (start, end) in degrees clockwise from 3 o'clock.
    _BAR_ARC_ANGLES: tuple[tuple[float, float], ...] = ((181, 359), (184, 356), (190, 340))

    def __init__(self, typeface: Typeface | None = None) -> None:
        self.typeface = typeface if typeface is not None else default_typeface()

    def render(
        self,
        model: ChordModel,
        layout: LayoutMetrics,
        bars: list[BarSpan],
    ) -> Image.Image:
        """
        Allocate the canvas at the final layout size and draw the diagram.

        The caller owns the returned image and should close it once encoded.
        If a drawing step fails, the image is closed before the error propagates.
        """
        image = Image.new("RGBA", (layout.image_width, layout.image_height), self.BACKGROUND)
        try:
            draw = ImageDraw.Draw(image)

            if model.parse_error:
                self._draw_error(draw, layout)
                return image

            self._draw_chord_box(draw, model, layout)
            self._draw_chord_positions(draw, model, layout)
            self._draw_chord_name(draw, model, layout)
            self._draw_base_fret(draw, model, layout)
            self._draw_fingers(draw, model, layout)
            self._draw_bars(draw, model, layout, bars)
        except BaseException:
            image.close()
            raise
        return image

    # ------------------------------------------------------------------
    # Drawing steps
    # ------------------------------------------------------------------

    def _draw_error(self, draw: ImageDraw.ImageDraw, layout: LayoutMetrics) -> None:
        width, height = layout.image_width, layout.image_height
        draw.line([(0, 0), (width, height)], fill=self.ERROR, width=self.ERROR_LINE_WIDTH)
        draw.line([(0, height), (width, 0)], fill=self.ERROR, width=self.ERROR_LINE_WIDTH)

    def _draw_chord_box(
        self, draw: ImageDraw.ImageDraw, model: ChordModel, layout: LayoutMetrics
    ) -> None:
        x_start, y_start = layout.x_start, layout.y_start
        line_width = layout.line_width

        for i in range(FRET_COUNT + 1):
            y = y_start + i * layout.cell_width
            draw.line(
                [(x_start, y), (x_start + layout.box_width - line_width, y)],
                fill=self.FOREGROUND,
                width=line_width,
            )

        for i in range(STRING_COUNT):
            x = x_start + i * layout.cell_width
            draw.line(
                [(x, y_start), (x, y_start + layout.box_height - line_width)],
                fill=self.FOREGROUND,
                width=line_width,
            )

        if model.base_fret == 1:
            left = x_start - line_width / 2
            draw.rectangle(
                [left, y_start - layout.nut_height, left + layout.box_width, y_start],
                fill=self.FOREGROUND,
            )

    def _draw_chord_positions(
        self, draw: ImageDraw.ImageDraw, model: ChordModel, layout: LayoutMetrics
    ) -> None:
        fret_width = layout.fret_width
        dot_width = layout.dot_width
        marker_width = layout.marker_width

        marker_y = layout.y_start - fret_width
        if model.base_fret == 1:
            marker_y -= layout.nut_height

        for string_index, notes in enumerate(model.strings):
            x = (
                layout.x_start
                - 0.5 * fret_width
                + 0.5 * layout.line_width
                + string_index * layout.cell_width
            )
            marker_x = x + (dot_width - marker_width) / 2

            for note in notes:
                relative_pos = note.fret - model.base_fret + 1
                if relative_pos > 0:
                    y = relative_pos * layout.cell_width + layout.y_start - fret_width
                    draw.ellipse([x, y, x + dot_width, y + dot_width], fill=self.FOREGROUND)
                elif note.fret == OPEN:
                    draw.ellipse(
                        [marker_x, marker_y, marker_x + marker_width, marker_y + marker_width],
                        outline=self.FOREGROUND,
                        width=layout.line_width,
                    )
                elif note.fret == MUTED:
                    right = marker_x + marker_width
                    bottom = marker_y + marker_width
                    draw.line(
                        [(marker_x, marker_y), (right, bottom)],
                        fill=self.FOREGROUND,
                        width=layout.line_width,
                    )
                    draw.line(
                        [(marker_x, bottom), (right, marker_y)],
                        fill=self.FOREGROUND,
                        width=layout.line_width,
                    )

    def _draw_chord_name(
        self, draw: ImageDraw.ImageDraw, model: ChordModel, layout: LayoutMetrics
    ) -> None:
        x = layout.image_width / 2 - layout.name_width / 2
        for i, segment in enumerate(model.name_segments[:MAX_NAME_SEGMENTS]):
            if i % 2 == 0:
                font_size = layout.name_font_size
                y = 0.2 * layout.superscript_font_size
            else:
                font_size = layout.superscript_font_size
                y = 0.0
            if segment:
                draw.text(
                    (x, y),
                    segment,
                    font=self.typeface.font(font_size),
                    fill=self.FOREGROUND,
                    anchor="la",
                )
            x += self.typeface.measure(segment, font_size) + layout.segment_gap

    def _draw_base_fret(
        self, draw: ImageDraw.ImageDraw, model: ChordModel, layout: LayoutMetrics
    ) -> None:
        if model.base_fret <= 1:
            return
        offset = (layout.fret_font_size - layout.fret_width) / 2
        draw.text(
            (layout.x_start + layout.box_width + 0.3 * layout.fret_width, layout.y_start - offset),
            f"{model.base_fret}fr",
            font=self.typeface.font(layout.fret_font_size),
            fill=self.FOREGROUND,
            anchor="la",
        )

    def _draw_fingers(
        self, draw: ImageDraw.ImageDraw, model: ChordModel, layout: LayoutMetrics
    ) -> None:
        font = self.typeface.font(layout.finger_font_size)
        x = layout.x_start + 0.5 * layout.line_width
        y = layout.y_start + layout.box_height
        for notes in model.strings:
            finger = finger_label(notes)
            if finger != NO_FINGER:
                width = self.typeface.measure(finger, layout.finger_font_size)
                draw.text((x - 0.5 * width, y), finger, font=font, fill=self.FOREGROUND, anchor="la")
            x += layout.cell_width

    def _draw_bars(
        self,
        draw: ImageDraw.ImageDraw,
        model: ChordModel,
        layout: LayoutMetrics,
        bars: list[BarSpan],
    ) -> None:
        cell = layout.cell_width
        arc_width = layout.dot_width / 7
        thin = max(1, round(arc_width))
        thick = max(1, round(1.3 * arc_width))

        for bar in bars:
            # Bars on the first fret sit a little higher so they clear the nut.
            nudge = -0.3 * cell if bar.fret_position == 1 else 0.0

            left = layout.x_start + bar.starting_string * cell - layout.dot_width / 2
            right = left + bar.length * cell + layout.dot_width
            y = layout.y_start + (bar.fret_position - model.base_fret) * cell - 0.6 * cell + nudge

            boxes = (
                (y, y + cell),
                (y - arc_width, y + cell),
                (y - 1.5 * arc_width, y - 1.5 * arc_width + cell + 3 * arc_width),
            )
            for (top, bottom), (start, end), width in zip(
                boxes, self._BAR_ARC_ANGLES, (thin, thick, thick)
            ):
                draw.arc([left, top, right, bottom], start, end, fill=self.FOREGROUND, width=width)


def finger_label(notes: StringNotes) -> str:
    """
    Finger shown under a string: the highest finger symbol among its notes.

    Symbols compare by character, so ``T`` beats any digit and any digit beats ``-``.
    """
    if not notes:
        return NO_FINGER
    return max(note.finger for note in notes)
