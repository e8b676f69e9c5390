"""Notation parser: decodes chord name, fret positions, fingers and size."""

from __future__ import annotations

import re
from typing import Final

from chordbox.chord_models import (
    FINGER_SYMBOLS,
    MUTED,
    NO_FINGER,
    OPEN,
    STRING_COUNT,
    ChordModel,
    Note,
    StringNotes,
)

MIN_SIZE: Final[int] = 1
MAX_SIZE: Final[int] = 20

# Frets of 10 and above need the dashed form, e.g. 10-12-12-0-0-0.
# A dashed group may hold several notes separated by "/", e.g. x-3/5-2-0-1-0.
_NOTE: Final[str] = r"(?:[12]?[0-9]|[xX])"
_GROUP: Final[str] = rf"{_NOTE}(?:/{_NOTE})*"
COMPACT_POSITIONS: Final[re.Pattern[str]] = re.compile(r"[0-9xX]{6}")
DASHED_POSITIONS: Final[re.Pattern[str]] = re.compile(rf"(?:{_GROUP}-){{5}}{_GROUP}")
COMPACT_FINGERS: Final[re.Pattern[str]] = re.compile(r"[tT\-1234]{6}")
# Plain decimal text only; float() alone would also take "1_0", "inf" or "nan".
SIZE_NUMBER: Final[re.Pattern[str]] = re.compile(
    r"\s*[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?\s*"
)

_ACCIDENTALS: Final[dict[str, str]] = {"#": "♯", "b": "♭", "B": "♭"}


class NotationError(ValueError):
    """Raised when positions or fingers do not follow the chord notation."""


def parse_name(raw: str | None) -> str:
    """
    Decode a chord name, keeping ``_`` as the segment separator.

    Odd segments are superscript. A single-character superscript is treated
    as an accidental, so ``C_#`` becomes ``C_♯`` and ``E_b`` becomes ``E_♭``.
    """
    if not raw:
        return ""

    segments = raw.split("_")
    for i in range(1, len(segments), 2):
        if len(segments[i]) <= 1:
            segments[i] = _ACCIDENTALS.get(segments[i], segments[i])
    return "_".join(segments)


def parse_chord(raw: str | None) -> tuple[tuple[int, ...], ...]:
    """
    Decode fret positions into one tuple of frets per string.

    Raises:
        NotationError: If ``raw`` matches neither the compact nor the dashed form.
    """
    if raw is None:
        raise NotationError("Missing chord positions.")

    if COMPACT_POSITIONS.fullmatch(raw):
        groups = list(raw)
    elif DASHED_POSITIONS.fullmatch(raw):
        groups = raw.split("-")
    else:
        raise NotationError(f"Invalid chord positions '{raw}'.")

    return tuple(
        tuple(MUTED if token in ("x", "X") else int(token) for token in group.split("/"))
        for group in groups
    )


def find_base_fret(frets: tuple[tuple[int, ...], ...]) -> int:
    """
    Return the lowest fret to show.

    Chords that fit in the first five frets start at 1. Anything higher starts
    at the lowest fretted note; open and muted strings never move the window.
    """
    all_frets = [fret for string in frets for fret in string]
    if not all_frets or max(all_frets) <= 5:
        return 1
    fretted = [fret for fret in all_frets if fret > 0]
    return min(fretted)


def parse_fingers(
    raw: str | None,
    note_counts: tuple[int, ...] | None = None,
) -> tuple[tuple[str, ...], ...] | None:
    """
    Decode finger markings into one tuple of finger symbols per string.

    ``note_counts`` holds how many notes each string carries; when given, every
    string must have exactly one finger per note. Returns ``None`` when no
    fingers were specified, including the all-unfingered ``------``.

    Raises:
        NotationError: If the fingers are malformed or do not pair with the notes.
    """
    if not raw:
        return None

    if "+" in raw:
        groups = [group.replace("/", "") for group in raw.split("+")]
        if len(groups) != STRING_COUNT:
            raise NotationError(
                f"Expected {STRING_COUNT} finger groups, got {len(groups)} in '{raw}'."
            )
    elif COMPACT_FINGERS.fullmatch(raw):
        if set(raw) == {NO_FINGER}:
            return None
        groups = list(raw)
    else:
        raise NotationError(f"Invalid fingers '{raw}'.")

    fingers = tuple(tuple(symbol.upper() for symbol in group) for group in groups)
    for symbols in fingers:
        illegal = [symbol for symbol in symbols if symbol not in FINGER_SYMBOLS]
        if illegal:
            raise NotationError(f"Invalid finger symbol '{illegal[0]}' in '{raw}'.")

    if note_counts is not None:
        for string_index, (symbols, count) in enumerate(zip(fingers, note_counts)):
            if len(symbols) != count:
                raise NotationError(
                    f"String {string_index + 1} has {count} note(s) but "
                    f"{len(symbols)} finger(s) in '{raw}'."
                )
    return fingers


def parse_size(raw: str | None) -> float:
    """
    Convert the requested size into the rendering scale.

    The request is rounded and clamped to 1..20. Above 1, every two steps add
    one unit of scale: 3 renders at 2, 5 at 3, 20 at 10.5. Anything that is not
    a plain decimal number renders at 1.
    """
    if raw is None or not SIZE_NUMBER.fullmatch(raw):
        return 1.0

    # Clamp before rounding so that overflow to infinity still lands on a bound.
    requested = min(max(float(MIN_SIZE), float(raw)), float(MAX_SIZE))
    size = round(requested)
    if size == 1:
        return 1.0
    return 1 + (size - 1) / 2


def parse_notation(
    name: str | None,
    position: str | None,
    fingers: str | None = None,
    draw_full_barre: bool = False,
) -> ChordModel:
    """
    Build a ChordModel from the raw inputs.

    Positions and fingers are always both checked; a failure in either sets
    ``parse_error`` on the returned model instead of raising. A failed model
    carries an empty name so the error image is sized like a nameless chord.
    """
    parse_error = False

    try:
        frets: tuple[tuple[int, ...], ...] | None = parse_chord(position)
    except NotationError:
        frets = None
        parse_error = True

    note_counts = tuple(len(string) for string in frets) if frets is not None else None
    try:
        finger_groups = parse_fingers(fingers, note_counts)
    except NotationError:
        finger_groups = None
        parse_error = True

    if parse_error or frets is None:
        return ChordModel(
            name="",
            strings=tuple((Note(OPEN),) for _ in range(STRING_COUNT)),
            base_fret=1,
            draw_full_barre=draw_full_barre,
            parse_error=True,
        )

    strings: list[StringNotes] = []
    for string_index, string_frets in enumerate(frets):
        if finger_groups is None:
            string_fingers: tuple[str, ...] = (NO_FINGER,) * len(string_frets)
        else:
            string_fingers = finger_groups[string_index]
        strings.append(
            tuple(Note(fret, finger) for fret, finger in zip(string_frets, string_fingers))
        )

    return ChordModel(
        name=parse_name(name),
        strings=tuple(strings),
        base_fret=find_base_fret(frets),
        draw_full_barre=draw_full_barre,
        parse_error=False,
    )
