"""Map aggregate rows to renderer input: font sizes and stable colors."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from typing import Any, Final

FONT_BASE: Final[float] = 16.0
FONT_SCALE: Final[float] = 10.0
FONT_MIN: Final[float] = 12.0
FONT_MAX: Final[float] = 72.0

PALETTE: Final[tuple[str, ...]] = (
    "#FF6B6B", "#4ECDC4", "#45B7D1", "#96CEB4", "#FFEAA7",
    "#DDA0DD", "#98D8C8", "#F7DC6F", "#BB8FCE", "#85C1E9",
    "#F8C471", "#82E0AA", "#F1948A", "#85C1E9", "#D7BDE2",
    "#A9DFBF", "#F9E79F", "#AED6F1", "#D5DBDB", "#FADBD8",
    "#E8DAEF", "#D1F2EB", "#FCF3CF", "#D6EAF8", "#FADBD8",
    "#E8F8F5", "#FEF9E7", "#EBF5FB", "#FDF2E9", "#EAF2F8",
)


def font_size(count: int) -> float:
    """Return a log-compressed font size for a word seen ``count`` times."""
    size = FONT_BASE + math.log(count + 1) * FONT_SCALE
    return min(max(size, FONT_MIN), FONT_MAX)


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def string_hash(text: str) -> int:
    """Polynomial string hash: ``hash = unit + ((hash << 5) - hash)``.

    The shift operates on the 32-bit truncation of the running value and the
    loop walks UTF-16 code units, so browsers computing the same hash agree.
    """
    encoded = text.encode("utf-16-le")
    value = 0
    for index in range(0, len(encoded), 2):
        unit = encoded[index] | (encoded[index + 1] << 8)
        value = unit + (_to_int32(_to_int32(value) << 5) - value)
    return value


def color_for(text: str, palette: Sequence[str] = PALETTE) -> str:
    """Return the palette color deterministically assigned to ``text``."""
    return palette[abs(string_hash(text)) % len(palette)]


def _field(row: Any, name: str) -> Any:
    if isinstance(row, dict):
        return row.get(name)
    return getattr(row, name, None)


def rank_rows(rows: Iterable[Any]) -> list[Any]:
    """Sort aggregate rows by count, highest first; ties keep input order."""
    return sorted(rows, key=lambda row: _field(row, "count") or 0, reverse=True)


def render_items(rows: Iterable[Any]) -> list[dict[str, Any]]:
    """Build renderer-ready ``(text, weight, color)`` items from aggregate rows.

    Rows may be ORM objects or mappings exposing ``display_word``, ``count``
    and optionally ``color``.
    """
    items: list[dict[str, Any]] = []
    for row in rank_rows(rows):
        text = _field(row, "display_word")
        count = _field(row, "count") or 0
        items.append(
            {
                "text": text,
                "count": count,
                "weight": font_size(count),
                "color": _field(row, "color") or color_for(text),
            }
        )
    return items
