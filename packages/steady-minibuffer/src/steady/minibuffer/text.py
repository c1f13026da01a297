"""Display width of buffer text and soft-wrap row counting.

Buffer lines are measured in grapheme clusters so that wide CJK characters,
emoji sequences and combining marks occupy the same number of columns the
terminal gives them.
"""

from __future__ import annotations

import unicodedata

import grapheme
import wcwidth as _wcwidth

DEFAULT_TAB_WIDTH = 8

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


# ---------------------------------------------------------------------------
# Grapheme width
# ---------------------------------------------------------------------------

def _grapheme_width(g: str) -> int:
    """Return the display width of a single grapheme cluster.

    Rules:
    1. Zero-width characters (control, combining marks, etc.) -> 0
    2. Emoji (VS16, ZWJ sequences, regional indicators, modifiers) -> 2
    3. Otherwise delegate to wcwidth for the first codepoint.
    """
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):  # VS16, ZWJ
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF:  # Skin tone modifiers
            return 2
        if 0x1F1E6 <= cp <= 0x1F1FF:  # Regional indicators
            return 2

    first_cp = ord(g[0])
    if first_cp >= 0x1F000 or 0x2600 <= first_cp <= 0x27BF:
        return 2

    cat = unicodedata.category(g[0])
    if cat.startswith("M") or cat == "Cf":
        return 0

    return max(_wcwidth.wcwidth(g[0]), 0)


def _is_ascii(text: str) -> bool:
    for ch in text:
        cp = ord(ch)
        if cp < 0x20 or cp > 0x7E:
            return False
    return True


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def visible_width(text: str) -> int:
    """Calculate the display width of *text*.

    Tabs are not expanded here; use :func:`screen_rows` for tab-aware
    layout.  Results for non-ASCII strings are cached.
    """
    if not text:
        return 0

    if _is_ascii(text):
        return len(text)

    cached = _width_cache.get(text)
    if cached is not None:
        return cached

    total = 0
    for g in grapheme.graphemes(text):
        total += _grapheme_width(g)

    return _cache_width(text, total)


def _layout(text: str, width: int, tab_width: int, stop: int | None) -> int:
    """Walk *text* placing graphemes on rows of *width* columns.

    Returns the number of rows used.  When *stop* is given, returns the row
    that holds the grapheme starting at character offset *stop* instead.
    """
    row = 0
    col = 0
    offset = 0
    for g in grapheme.graphemes(text):
        if g == "\t":
            w = tab_width - (col % tab_width) if tab_width > 0 else 0
        else:
            w = _grapheme_width(g)
        if col + w > width and col > 0:
            row += 1
            col = 0
        if stop is not None and offset >= stop:
            return row
        col += w
        offset += len(g)
    if stop is not None:
        # Point at end of line sits after the last column
        return row + 1 if col >= width and width > 0 else row
    return row + 1


def screen_rows(text: str, width: int, tab_width: int = DEFAULT_TAB_WIDTH) -> int:
    """Number of screen rows *text* occupies when soft-wrapped at *width*.

    An empty line still takes one row.  A wide grapheme that does not fit on
    the current row moves to the next one.
    """
    if width <= 0 or not text:
        return 1
    if _is_ascii(text) and "\t" not in text:
        return max(1, -(-len(text) // width))
    return max(1, _layout(text, width, tab_width, None))


def column_row(
    text: str,
    column: int,
    width: int,
    tab_width: int = DEFAULT_TAB_WIDTH,
) -> int:
    """Wrapped row (0-based) within *text* that holds character *column*."""
    if width <= 0 or column <= 0:
        return 0
    if _is_ascii(text) and "\t" not in text:
        return min(column, len(text)) // width
    return _layout(text, width, tab_width, column)
