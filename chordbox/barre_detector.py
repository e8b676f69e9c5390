"""Barre detection: finds one finger holding the same fret across several strings."""

from chordbox.chord_models import NO_FINGER, STRING_COUNT, BarSpan, ChordModel


def _span_length(model: ChordModel, string_index: int, fret: int, finger: str) -> int:
    """
    Distance from ``string_index`` to the farthest higher string where ``finger``
    holds ``fret``. Strings in between do not need the finger mark.
    """
    length = 0
    for other in range(string_index + 1, STRING_COUNT):
        for note in model.strings[other]:
            if note.finger == finger and note.fret == fret:
                length = other - string_index
    return length


def detect_bars(model: ChordModel) -> list[BarSpan]:
    """
    Return the barres of ``model`` in the order they were found.

    Each finger gets at most one barre, opened at its lowest fretted string.
    With ``draw_full_barre`` the first candidate is stretched to the last
    string whatever the other strings hold; later candidates are detected
    normally. Candidates covering a single string are dropped.
    """
    bars: dict[str, BarSpan] = {}
    full_barre_pending = model.draw_full_barre

    for string_index, notes in enumerate(model.strings):
        for note in notes:
            if not note.is_fretted or note.finger == NO_FINGER or note.finger in bars:
                continue

            if full_barre_pending:
                length = STRING_COUNT - 1 - string_index
                full_barre_pending = False
            else:
                length = _span_length(model, string_index, note.fret, note.finger)

            if length > 0:
                bars[note.finger] = BarSpan(
                    starting_string=string_index,
                    fret_position=note.fret,
                    length=length,
                    finger=note.finger,
                )

    return list(bars.values())
