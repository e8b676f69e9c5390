"""Maps chord image URLs such as ``/D.png?p=xx0232&f=---132`` to ChordRequests."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Final
from urllib.parse import parse_qsl, unquote, urlsplit

from chordbox.chord_models import ChordRequest

CONTENT_TYPE: Final[str] = "image/png"
CACHE_MAX_AGE: Final[int] = 7 * 24 * 60 * 60  # one week, in seconds
CACHE_CONTROL: Final[str] = f"public, max-age={CACHE_MAX_AGE}"

DEFAULT_POSITION: Final[str] = "000000"
DEFAULT_SIZE: Final[str] = "1"

_PNG_PATH: Final[re.Pattern[str]] = re.compile(r"^/?(.*)\.png$", re.IGNORECASE)

# Long and short query parameter names, long form wins.
_POSITION_KEYS: Final[tuple[str, ...]] = ("pos", "p")
_FINGER_KEYS: Final[tuple[str, ...]] = ("fingers", "f")
_SIZE_KEYS: Final[tuple[str, ...]] = ("size", "s")
_FULL_BARRE_KEYS: Final[tuple[str, ...]] = ("full_barre", "b")


def _first(query: Mapping[str, str], keys: tuple[str, ...], default: str | None) -> str | None:
    for key in keys:
        value = query.get(key)
        if value is not None:
            return value
    return default


def _parse_bool(value: str) -> bool:
    """``true``/``false`` in any case; anything else is false."""
    return value.strip().lower() == "true"


def map_request(path: str, query: Mapping[str, str]) -> ChordRequest | None:
    """
    Build the ChordRequest for a chord image path and its decoded query values.

    Returns ``None`` for paths that do not end in ``.png``. The chord name is
    the percent-decoded path without the leading slash and extension, so
    ``/C%23.png`` names ``C#``. Missing parameters fall back to an open chord at
    size 1 with no fingers.

    Query decoding turns a ``+`` into a space, so spaces in the fingers are read
    back as the ``+`` group separator.
    """
    match = _PNG_PATH.match(path)
    if match is None:
        return None

    name = "+".join(unquote(piece) for piece in match.group(1).split("+"))
    fingers = _first(query, _FINGER_KEYS, None)
    if fingers is not None:
        fingers = fingers.replace(" ", "+")

    return ChordRequest(
        name=name,
        position=_first(query, _POSITION_KEYS, DEFAULT_POSITION),
        fingers=fingers,
        size=_first(query, _SIZE_KEYS, DEFAULT_SIZE),
        draw_full_barre=_parse_bool(_first(query, _FULL_BARRE_KEYS, "false") or ""),
    )


def map_url(url: str) -> ChordRequest | None:
    """
    Map a full or relative chord image URL, e.g. ``D.png?p=xx0232&f=---132``.

    Only the first value of a repeated query parameter is used.
    """
    parts = urlsplit(url)
    query: dict[str, str] = {}
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        query.setdefault(key, value)
    return map_request(parts.path, query)


def response_headers() -> dict[str, str]:
    """Headers a host should send with a rendered chord image."""
    return {"Content-Type": CONTENT_TYPE, "Cache-Control": CACHE_CONTROL}
