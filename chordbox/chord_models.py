"""Data models shared by the parser, layout engine and renderer."""

from __future__ import annotations

from dataclasses import dataclass

# ── Fret and finger constants ───────────────────────────────────────────────
MUTED = -1
OPEN = 0

NO_FINGER = "-"
THUMB = "T"
FINGER_SYMBOLS: frozenset[str] = frozenset({NO_FINGER, THUMB, "1", "2", "3", "4"})

STRING_COUNT = 6
FRET_COUNT = 5  # visible frets in the box


@dataclass(frozen=True)
class Note:
    """One fretted, open or muted note and the finger that plays it."""

    fret: int
    finger: str = NO_FINGER

    @property
    def is_fretted(self) -> bool:
        return self.fret not in (MUTED, OPEN)


#: All notes sounding on one string, lowest first as written.
StringNotes = tuple[Note, ...]


@dataclass(frozen=True)
class ChordModel:
    """
    Decoded chord notation.

    Attributes:
        name:            Decoded name, ``_`` still separating segments.
        strings:         Six note groups, low E string first.
        base_fret:       Lowest fret shown in the box (1 draws the nut).
        draw_full_barre: Force the first barre candidate across all strings.
        parse_error:     Any of the inputs failed to parse.
    """

    name: str
    strings: tuple[StringNotes, ...]
    base_fret: int = 1
    draw_full_barre: bool = False
    parse_error: bool = False

    @property
    def name_segments(self) -> tuple[str, ...]:
        """Alternating normal/superscript pieces; empty for an empty name."""
        if not self.name:
            return ()
        return tuple(self.name.split("_"))


@dataclass(frozen=True)
class LayoutMetrics:
    """Pixel geometry for one diagram. Built by ``layout_engine.compute_layout``."""

    size: float
    fret_width: float
    line_width: int
    dot_width: int
    marker_width: float
    nut_height: float
    box_width: float
    box_height: float
    name_font_size: float
    superscript_font_size: float
    fret_font_size: float
    finger_font_size: float
    name_width: float
    image_width: int
    image_height: int
    x_start: float
    y_start: float

    @property
    def cell_width(self) -> float:
        """Distance between neighbouring strings (and neighbouring frets)."""
        return self.fret_width + self.line_width

    @property
    def segment_gap(self) -> float:
        """Horizontal gap after every chord name segment."""
        return self.size


@dataclass(frozen=True)
class BarSpan:
    """A barre: ``finger`` holds ``fret_position`` from ``starting_string`` over ``length`` strings."""

    starting_string: int
    fret_position: int
    length: int
    finger: str


@dataclass(frozen=True)
class ChordRequest:
    """The raw text inputs of one diagram, exactly as supplied by the caller."""

    name: str | None
    position: str | None
    fingers: str | None = None
    size: str | None = "1"
    draw_full_barre: bool = False
