"""Tagged intervals and the merge-on-apply algebra."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .ranges import Interval

__all__ = ["RangeSet", "TaggedRange"]

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class TaggedRange:
    """One tag applied to one half-open span of the buffer."""

    tag_name: str
    interval: Interval

    @property
    def start(self) -> int:
        return self.interval.start

    @property
    def end(self) -> int:
        return self.interval.end

    def with_interval(self, interval: Interval) -> TaggedRange:
        return TaggedRange(self.tag_name, interval)

    def to_dict(self) -> dict[str, Any]:
        return {"tag_name": self.tag_name, "range": self.interval.to_dict()}

    @classmethod
    def from_value(cls, value: Any) -> TaggedRange:
        if isinstance(value, TaggedRange):
            return value
        if not isinstance(value, Mapping):
            raise TypeError("Tagged ranges must be mappings")
        tag_name = value.get("tag_name")
        if not isinstance(tag_name, str) or not tag_name:
            raise ValueError("Tagged ranges require a tag_name")
        return cls(tag_name, Interval.from_value(value.get("range")))


class RangeSet:
    """Ordered collection of :class:`TaggedRange` values.

    Insertion order is preserved because :meth:`apply_tag` merges into the
    *first* intersecting range of the same tag.
    """

    def __init__(self, ranges: Iterable[TaggedRange] = ()) -> None:
        self._ranges: list[TaggedRange] = list(ranges)

    def __iter__(self) -> Iterator[TaggedRange]:
        return iter(self._ranges)

    def __len__(self) -> int:
        return len(self._ranges)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RangeSet):
            return NotImplemented
        return self._ranges == other._ranges

    def __repr__(self) -> str:
        return f"RangeSet({self._ranges!r})"

    def apply_tag(self, tag_name: str, selection: Interval) -> bool:
        """Assign ``tag_name`` to ``selection``; returns ``True`` on mutation."""

        if selection.is_empty:
            return False
        same_tag = [tr for tr in self._ranges if tr.tag_name == tag_name]
        if any(tr.interval.encloses(selection) for tr in same_tag):
            return False
        for index, existing in enumerate(self._ranges):
            if existing.tag_name != tag_name:
                continue
            if existing.interval.intersects(selection):
                merged = existing.interval.union(selection)
                self._ranges[index] = existing.with_interval(merged)
                LOGGER.debug("Merged %r into %s", tag_name, merged.to_tuple())
                return True
        self._ranges.append(TaggedRange(tag_name, selection))
        return True

    def delete_range(self, target: TaggedRange) -> bool:
        """Remove the first stored range equal to ``target``."""

        for index, existing in enumerate(self._ranges):
            if existing == target:
                del self._ranges[index]
                return True
        return False

    def remove_tag(self, tag_name: str) -> int:
        kept = [tr for tr in self._ranges if tr.tag_name != tag_name]
        removed = len(self._ranges) - len(kept)
        self._ranges = kept
        return removed

    def replace_all(self, ranges: Iterable[TaggedRange]) -> None:
        self._ranges = list(ranges)

    def query_by_tag(self, tag_name: str) -> tuple[TaggedRange, ...]:
        return tuple(tr for tr in self._ranges if tr.tag_name == tag_name)

    def query_snapshot(self) -> tuple[TaggedRange, ...]:
        """Return every range ordered by ``start`` (stable for equal starts)."""

        return tuple(sorted(self._ranges, key=lambda tr: tr.start))

    def copy(self) -> RangeSet:
        return RangeSet(self._ranges)

    def to_payload(self) -> list[dict[str, Any]]:
        return [tr.to_dict() for tr in self._ranges]

    @classmethod
    def from_payload(cls, payload: Any) -> RangeSet:
        """Parse stored ranges, skipping malformed entries."""

        if not isinstance(payload, Sequence) or isinstance(payload, (str, bytes)):
            return cls()
        ranges: list[TaggedRange] = []
        for entry in payload:
            try:
                ranges.append(TaggedRange.from_value(entry))
            except (TypeError, ValueError) as exc:
                LOGGER.warning("Skipping malformed tagged range %r: %s", entry, exc)
        return cls(ranges)
