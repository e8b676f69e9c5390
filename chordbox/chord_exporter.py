"""ChordImageExporter: runs the diagram pipeline and writes PNG output."""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import BinaryIO

from PIL import Image

from chordbox.barre_detector import detect_bars
from chordbox.chord_models import BarSpan, ChordModel, ChordRequest, LayoutMetrics
from chordbox.chord_renderer import ChordBoxRenderer
from chordbox.layout_engine import compute_layout
from chordbox.notation_parser import parse_notation, parse_size
from chordbox.typeface import Typeface, default_typeface


@dataclass(frozen=True)
class ChordDiagram:
    """Everything derived from one ChordRequest before drawing."""

    model: ChordModel
    layout: LayoutMetrics
    bars: list[BarSpan]


class ChordImageExporter:
    """
    Turn a ChordRequest into a PNG image.

    Pipeline
    --------
    1. Parse name, positions and fingers into a ChordModel; bad notation only
       sets ``parse_error``.
    2. Parse the size and compute the layout. The name is measured before the
       image width is fixed.
    3. Detect barres.
    4. Render onto a fresh canvas and encode it as PNG.
    """

    def __init__(self, typeface: Typeface | None = None) -> None:
        self.typeface = typeface if typeface is not None else default_typeface()
        self.renderer = ChordBoxRenderer(self.typeface)

    def build(self, request: ChordRequest) -> ChordDiagram:
        model = parse_notation(
            request.name,
            request.position,
            request.fingers,
            request.draw_full_barre,
        )
        layout = compute_layout(parse_size(request.size), model.name_segments, self.typeface)
        bars = [] if model.parse_error else detect_bars(model)
        return ChordDiagram(model=model, layout=layout, bars=bars)

    def render(self, request: ChordRequest) -> Image.Image:
        """Render ``request`` to an RGBA image owned by the caller."""
        diagram = self.build(request)
        return self.renderer.render(diagram.model, diagram.layout, diagram.bars)

    def export(self, request: ChordRequest, output: str | BinaryIO) -> None:
        """
        Render ``request`` and write it as PNG to a path or binary stream.

        Raises:
            OSError: If the output cannot be written.
        """
        with self.render(request) as image:
            image.save(output, format="PNG")

    def to_png_bytes(self, request: ChordRequest) -> bytes:
        buffer = io.BytesIO()
        self.export(request, buffer)
        return buffer.getvalue()
