"""Sanitize tagged ranges against the current buffer length."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .range_set import TaggedRange

__all__ = ["clean_invalid_ranges", "is_valid"]

LOGGER = logging.getLogger(__name__)


def is_valid(tagged: TaggedRange, buffer_len: int) -> bool:
    return 0 <= tagged.start < tagged.end <= buffer_len


def clean_invalid_ranges(ranges: Iterable[TaggedRange], buffer_len: int) -> list[TaggedRange]:
    """Return ``ranges`` clamped to ``[0, buffer_len]`` with empty spans dropped.

    A range starting at or past the end of the buffer is dropped, an ``end``
    past the buffer is clamped, and anything left with ``start >= end`` is
    dropped. Valid ranges pass through unchanged and in order.
    """

    length = max(0, int(buffer_len))
    cleaned: list[TaggedRange] = []
    dropped = 0
    for tagged in ranges:
        if is_valid(tagged, length):
            cleaned.append(tagged)
            continue
        if tagged.start >= length:
            dropped += 1
            continue
        interval = tagged.interval.clamp(upper=length)
        if interval.is_empty:
            dropped += 1
            continue
        cleaned.append(tagged.with_interval(interval))
    if dropped:
        LOGGER.debug("Dropped %d invalid range(s) (buffer length %d)", dropped, length)
    return cleaned
