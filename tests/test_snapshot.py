"""Tests for render snapshots."""

from __future__ import annotations

from buffmonster.core.document import Document
from buffmonster.core.range_set import RangeSet, TaggedRange
from buffmonster.core.ranges import Interval
from buffmonster.core.snapshot import build_snapshot
from buffmonster.core.tags import TagRegistry


def _document(buffer: str, *spans: tuple[str, int, int]) -> Document:
    return Document(
        buffer=buffer,
        tags=TagRegistry({"x": (200, 0, 0), "y": (0, 0, 200)}),
        ranges=RangeSet([TaggedRange(tag, Interval(start, end)) for tag, start, end in spans]),
    )


def test_snapshot_orders_ranges_by_start() -> None:
    document = _document("abcdef", ("y", 4, 6), ("x", 0, 2))

    snapshot = build_snapshot(document)

    assert [tr.tag_name for tr in snapshot.ranges] == ["x", "y"]
    assert snapshot.version_id == document.version_id
    assert snapshot.colors == {"x": (200, 0, 0), "y": (0, 0, 200)}


def test_snapshot_is_detached_from_document() -> None:
    document = _document("abcdef", ("x", 0, 2))
    snapshot = build_snapshot(document)

    document.ranges.apply_tag("y", Interval(3, 5))
    document.tags.set_color("x", (1, 1, 1))

    assert len(snapshot.ranges) == 1
    assert snapshot.colors["x"] == (200, 0, 0)


def test_color_runs_average_overlapping_tags() -> None:
    snapshot = build_snapshot(_document("abcdef", ("x", 0, 3), ("y", 2, 4)))

    assert snapshot.color_runs() == [
        (0, 2, (200, 0, 0)),
        (2, 3, (100, 0, 100)),
        (3, 4, (0, 0, 200)),
    ]


def test_colormap_skips_tags_without_color() -> None:
    snapshot = build_snapshot(_document("abcdef", ("ghost", 0, 3), ("x", 4, 5)))

    assert snapshot.colormap() == {4: (200, 0, 0)}
    assert snapshot.color_for(snapshot.ranges[0]) is None


def test_preview_stops_at_newline_and_limit() -> None:
    snapshot = build_snapshot(_document("line one\nline two " + "z" * 40, ("x", 0, 12), ("y", 9, 59)))

    assert snapshot.preview(snapshot.ranges[0]) == "line one"
    assert snapshot.preview(snapshot.ranges[1]) == "line two " + "z" * 21
    assert snapshot.preview(snapshot.ranges[1], limit=4) == "line"


def test_sections_pair_ranges_with_text(hello_document: Document) -> None:
    sections = build_snapshot(hello_document).sections()

    assert [(section.tag_name, section.text) for section in sections] == [("x", "hello"), ("y", "world")]
    assert sections[0].color == (200, 40, 40)
