"""Tests for the interval algebra."""

from __future__ import annotations

import itertools

import pytest

from buffmonster.core.ranges import Interval, intersects, union

_SAMPLES = [Interval(a, b) for a, b in itertools.combinations_with_replacement(range(0, 6), 2)]


def test_interval_coerces_negative_offsets_to_zero() -> None:
    interval = Interval(-3, 4)

    assert interval.to_tuple() == (0, 4)


def test_interval_keeps_inverted_endpoints() -> None:
    interval = Interval(5, 2)

    assert interval.start == 5
    assert interval.end == 2
    assert interval.is_empty
    assert interval.length == 0


def test_interval_rejects_non_integers() -> None:
    with pytest.raises(ValueError):
        Interval("a", 3)
    with pytest.raises(ValueError):
        Interval(True, 3)


def test_intersects_is_half_open() -> None:
    assert intersects(Interval(0, 5), Interval(4, 8))
    assert not intersects(Interval(0, 5), Interval(5, 8))
    assert intersects(Interval(2, 2), Interval(0, 5))


def test_intersects_is_symmetric() -> None:
    for a, b in itertools.product(_SAMPLES, repeat=2):
        assert intersects(a, b) == intersects(b, a)


def test_union_is_convex_hull() -> None:
    hull = union(Interval(0, 2), Interval(5, 8))

    assert hull == Interval(0, 8)


def test_union_is_commutative_and_bounded() -> None:
    for a, b in itertools.product(_SAMPLES, repeat=2):
        hull = union(a, b)
        assert hull == union(b, a)
        assert hull.start == min(a.start, b.start)
        assert hull.end == max(a.end, b.end)


def test_contains_and_encloses() -> None:
    interval = Interval(2, 6)

    assert interval.contains(2)
    assert interval.contains(5)
    assert not interval.contains(6)
    assert interval.encloses(Interval(2, 6))
    assert interval.encloses(Interval(3, 4))
    assert not interval.encloses(Interval(1, 4))


def test_clamp_limits_both_endpoints() -> None:
    assert Interval(3, 20).clamp(upper=10) == Interval(3, 10)
    assert Interval(12, 20).clamp(upper=10) == Interval(10, 10)


def test_from_value_accepts_common_shapes() -> None:
    assert Interval.from_value({"start": 1, "end": 4}) == Interval(1, 4)
    assert Interval.from_value([2, 3]) == Interval(2, 3)

    with pytest.raises(ValueError):
        Interval.from_value({"start": 1})
    with pytest.raises(TypeError):
        Interval.from_value(object())


def test_selection_normalizes_endpoints() -> None:
    assert Interval.selection(7, 3) == Interval(3, 7)
