"""Half-open offset intervals and the small algebra tags are built on."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Iterator


@dataclass(slots=True, frozen=True)
class Interval(Sequence[int]):
    """Half-open ``[start, end)`` span over buffer offsets.

    Offsets are coerced to non-negative integers. Unlike a selection, the
    endpoints are never swapped: reconciliation may briefly produce
    ``start >= end`` and the validator is responsible for dropping those.
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", self._coerce_index(self.start, "start"))
        object.__setattr__(self, "end", self._coerce_index(self.end, "end"))

    @staticmethod
    def _coerce_index(value: Any, label: str) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Interval {label} must be an integer")
        try:
            number = int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Interval {label} must be an integer") from exc
        if number < 0:
            return 0
        return number

    def __len__(self) -> int:
        return 2

    def __getitem__(self, index: int | slice) -> int | tuple[int, ...]:
        if isinstance(index, slice):
            return self.to_tuple()[index]
        if index == 0:
            return self.start
        if index == 1:
            return self.end
        raise IndexError("Interval index out of range")

    def __iter__(self) -> Iterator[int]:
        yield self.start
        yield self.end

    @property
    def length(self) -> int:
        """Return the width of the interval (0 for degenerate spans)."""

        return max(0, self.end - self.start)

    @property
    def is_empty(self) -> bool:
        return self.start >= self.end

    def contains(self, offset: int) -> bool:
        """Return ``True`` when ``offset`` lies inside ``[start, end)``."""

        return self.start <= offset < self.end

    def encloses(self, other: Interval) -> bool:
        """Return ``True`` when ``other`` lies entirely inside this interval."""

        return self.start <= other.start and other.end <= self.end

    def intersects(self, other: Interval) -> bool:
        """Half-open overlap test; touching intervals do not intersect."""

        return self.start < other.end and other.start < self.end

    def union(self, other: Interval) -> Interval:
        """Return the convex hull of both intervals (gaps are absorbed)."""

        return Interval(min(self.start, other.start), max(self.end, other.end))

    def clamp(self, *, lower: int = 0, upper: int | None = None) -> Interval:
        """Clamp both endpoints into ``[lower, upper]``."""

        start = max(lower, self.start)
        end = max(lower, self.end)
        if upper is not None:
            start = min(start, upper)
            end = min(end, upper)
        return Interval(start, end)

    def shifted(self, *, start: int = 0, end: int = 0) -> Interval:
        """Return a copy with each endpoint moved; results saturate at 0."""

        return Interval(max(0, self.start + start), max(0, self.end + end))

    def to_tuple(self) -> tuple[int, int]:
        return (self.start, self.end)

    def to_dict(self) -> dict[str, int]:
        """Return the interval as the ``{"start", "end"}`` storage object."""

        return {"start": self.start, "end": self.end}

    @classmethod
    def from_value(cls, value: Any) -> Interval:
        """Coerce mappings, pairs, or objects exposing ``start``/``end``."""

        if isinstance(value, Interval):
            return value
        if value is None:
            raise ValueError("Interval value is required")
        if isinstance(value, Mapping):
            start = value.get("start")
            end = value.get("end")
            if start is None or end is None:
                raise ValueError("Interval mappings require start and end keys")
            return cls(start, end)
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            items = list(value)
            if len(items) != 2:
                raise ValueError("Interval sequences must have exactly two entries")
            return cls(items[0], items[1])
        start = getattr(value, "start", None)
        end = getattr(value, "end", None)
        if start is not None and end is not None:
            return cls(start, end)
        raise TypeError("Unsupported Interval input")

    @classmethod
    def selection(cls, anchor: int, position: int) -> Interval:
        """Build a normalized interval from two caret endpoints in any order."""

        return cls(min(anchor, position), max(anchor, position))


def intersects(a: Interval, b: Interval) -> bool:
    return a.intersects(b)


def union(a: Interval, b: Interval) -> Interval:
    return a.union(b)


__all__ = ["Interval", "intersects", "union"]
