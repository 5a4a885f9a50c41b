"""Re-offset tagged ranges after a single discrete text edit.

Boundary policy, fixed here once for every caller:

* a boundary strictly after the caret moves by the edit delta;
* a boundary exactly at the caret stays put, so text inserted at a range's
  start is placed before the span while its ``end`` still grows;
* a caret edit inside a range (``start <= caret < end``) grows or shrinks that
  range's ``end`` locally.
* a boundary inside a removed span lands on the caret rather than being
  shifted before it, so a partially deleted range keeps its surviving text.

Reconciliation never drops or merges ranges. Spans left with
``start >= end`` are removed by :func:`~buffmonster.core.validator.clean_invalid_ranges`.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .range_set import TaggedRange
from .ranges import Interval

__all__ = ["EditEvent", "reconcile", "translate"]


@dataclass(slots=True, frozen=True)
class EditEvent:
    """One buffer mutation expressed relative to the pre-edit offsets.

    ``caret`` anchors the change (for selection edits, the selection start),
    ``delta`` is the net change in buffer length and ``selection_len`` the
    width of the selection the edit replaced (0 for plain caret edits).
    """

    caret: int
    delta: int
    selection_len: int = 0

    @property
    def inserted(self) -> int:
        """Number of characters written in place of the selection."""

        return self.delta + self.selection_len

    @property
    def is_selection_edit(self) -> bool:
        return self.selection_len > 0

    @property
    def selection(self) -> Interval:
        return Interval(self.caret, self.caret + self.selection_len)

    @property
    def removed_end(self) -> int:
        """End of the span the edit removed (the caret itself for pure insertions)."""

        if self.is_selection_edit:
            return self.caret + self.selection_len
        return self.caret + max(0, -self.delta)

    @classmethod
    def insertion(cls, caret: int, length: int = 1) -> EditEvent:
        return cls(caret=caret, delta=length)

    @classmethod
    def deletion(cls, caret: int, length: int = 1) -> EditEvent:
        return cls(caret=caret, delta=-length)

    @classmethod
    def selection_delete(cls, sel_start: int, sel_end: int) -> EditEvent:
        start, end = min(sel_start, sel_end), max(sel_start, sel_end)
        return cls(caret=start, delta=-(end - start), selection_len=end - start)

    @classmethod
    def selection_replace(cls, sel_start: int, sel_end: int, inserted: int = 1) -> EditEvent:
        start, end = min(sel_start, sel_end), max(sel_start, sel_end)
        width = end - start
        return cls(caret=start, delta=inserted - width, selection_len=width)


def translate(interval: Interval, caret: int, delta: int, *, removed_end: int | None = None) -> Interval:
    """Shift boundaries strictly after ``caret`` by ``delta`` (saturating at 0).

    Boundaries inside the removed span ``(caret, removed_end)`` land on the
    caret instead of being shifted past it.
    """

    return Interval(
        _move_boundary(interval.start, caret, delta, removed_end),
        _move_boundary(interval.end, caret, delta, removed_end),
    )


def reconcile(ranges: Iterable[TaggedRange], event: EditEvent) -> list[TaggedRange]:
    """Return ``ranges`` re-offset for ``event``, preserving order and count."""

    if event.is_selection_edit:
        return [_reconcile_selection(tagged, event) for tagged in ranges]
    return [_reconcile_caret(tagged, event) for tagged in ranges]


def _move_boundary(boundary: int, caret: int, delta: int, removed_end: int | None) -> int:
    if boundary <= caret:
        return boundary
    if removed_end is not None and boundary < removed_end:
        return caret
    return max(0, boundary + delta)


def _reconcile_caret(tagged: TaggedRange, event: EditEvent) -> TaggedRange:
    interval = tagged.interval
    if interval.contains(event.caret):
        end = _move_boundary(interval.end, event.caret, event.delta, event.removed_end)
        return tagged.with_interval(Interval(interval.start, end))
    moved = translate(interval, event.caret, event.delta, removed_end=event.removed_end)
    return tagged.with_interval(moved)


def _reconcile_selection(tagged: TaggedRange, event: EditEvent) -> TaggedRange:
    interval = tagged.interval
    selection = event.selection
    inserted = max(0, event.inserted)
    if interval == selection:
        return tagged.with_interval(Interval(selection.start, selection.start + inserted))
    # Strict enclosure: both the first and last selected offsets are inside.
    if interval.contains(selection.start) and interval.contains(selection.end - 1):
        shrink = event.selection_len - inserted
        return tagged.with_interval(Interval(interval.start, max(0, interval.end - shrink)))
    return tagged.with_interval(
        translate(interval, selection.start, event.delta, removed_end=event.removed_end)
    )
