"""
Position lookups over sorted location tables.

Two kinds of table are searched here: page tables of (ref, loc) pairs, as
produced by the page milestones of a conversion, and the correspondence
spans of a chain, which pair every literal run's source offset with its
HTML offset.
"""
from bisect import bisect_right
from operator import itemgetter
from typing import Callable, Sequence

from ..utils.structures import Correspondence, RefLoc

BEFORE_FIRST = -1


def find_highest_index(entries: Sequence, value: int, key: Callable = itemgetter(1)) -> int:
    """
    Binary search for the last entry whose location is <= value.

    Args:
        entries: entries sorted by location, (ref, loc) pairs by default.
        value: the location to look up.
        key: extracts the location from an entry.

    Returns:
        int: the index of the highest entry at or below `value`, the last
        index if `value` is beyond the last entry, or BEFORE_FIRST if it
        precedes the first entry or the table is empty.
    """
    return bisect_right(entries, value, key=key) - 1


def find_ref_index(entries: Sequence[RefLoc], ref: str) -> int:
    """Index of the first entry with this ref, or -1."""
    for i, entry in enumerate(entries):
        if entry[0] == ref:
            return i
    return -1


def _page_extent(entries: Sequence[RefLoc], index: int, extent: int) -> int:
    """Size of the page at `index`: up to the next page, or to the end of the text."""
    end = entries[index + 1][1] if index + 1 < len(entries) else extent
    return end - entries[index][1]


def page_position(entries: Sequence[RefLoc], loc: int, extent: int) -> tuple[str, float] | None:
    """
    Finds the page containing `loc` and how far into it `loc` lies.

    Args:
        entries: page table sorted by location.
        loc: a location of the same unit as the table (e.g. a line number).
        extent: total size of the text in that unit.

    Returns:
        tuple[str, float] | None: (ref, fraction) with fraction in [0, 1];
        None if the table is empty.
    """
    if not entries:
        return None
    index = find_highest_index(entries, loc)
    if index == BEFORE_FIRST:
        return entries[0][0], 0.0
    size = _page_extent(entries, index, extent)
    if size <= 0:
        return entries[index][0], 0.0
    fraction = (loc - entries[index][1]) / size
    return entries[index][0], min(fraction, 1.0)


def locate_page(entries: Sequence[RefLoc], ref: str, fraction: float, extent: int) -> int:
    """The location `fraction` of the way into page `ref`; 0 if the page is unknown."""
    index = find_ref_index(entries, ref)
    if index < 0:
        return 0
    start = entries[index][1]
    return start + round(fraction * max(_page_extent(entries, index, extent), 0))


def _map_offset(spans: Sequence[Correspondence], offset: int, src: int, dst: int) -> int:
    index = find_highest_index(spans, offset, key=itemgetter(src))
    if index == BEFORE_FIRST:
        return 0
    span = spans[index]
    delta = min(offset - span[src], span.length)
    return span[dst] + delta


def source_to_html(spans: Sequence[Correspondence], offset: int) -> int:
    """
    Maps a source offset to the HTML offset of the same character.
    Offsets inside markup map to the end of the preceding literal.
    """
    return _map_offset(spans, offset, 0, 1)


def html_to_source(spans: Sequence[Correspondence], offset: int) -> int:
    """Maps an HTML offset back to the source. Inverse of source_to_html."""
    return _map_offset(spans, offset, 1, 0)
