"""Tests for color policies and color helpers."""

from __future__ import annotations

import pytest

from buffmonster.core import colors


def test_palette_policy_is_deterministic() -> None:
    first = colors.PaletteColorPolicy()
    second = colors.PaletteColorPolicy()

    picks = [first(index) for index in range(5)]

    assert picks == [second(index) for index in range(5)]
    assert len(set(picks)) == 5
    assert first(0) == first(colors.PALETTE_STEPS)


def test_palette_policy_samples_warm_ramp() -> None:
    policy = colors.PaletteColorPolicy()

    assert policy(0) == colors.warm_ramp(0.0)
    assert policy(20) == colors.warm_ramp(0.5)


def test_hsl_policy_is_reproducible_with_seed() -> None:
    first = colors.HslColorPolicy(seed=7)
    second = colors.HslColorPolicy(seed=7)

    picks = [first(index) for index in range(3)]

    assert picks == [second(index) for index in range(3)]
    for color in picks:
        assert all(0 <= channel <= 255 for channel in color)


def test_build_color_policy_by_name() -> None:
    assert isinstance(colors.build_color_policy("Palette"), colors.PaletteColorPolicy)
    assert isinstance(colors.build_color_policy("hsl", seed=1), colors.HslColorPolicy)
    with pytest.raises(ValueError):
        colors.build_color_policy("rainbow")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("#ff8000", (255, 128, 0)),
        ("10, 20, 30", (10, 20, 30)),
        ([300, -5, 7], (255, 0, 7)),
        ((1, 2, 3), (1, 2, 3)),
    ],
)
def test_normalize_color_accepts_common_forms(value: object, expected: tuple[int, int, int]) -> None:
    assert colors.normalize_color(value) == expected


def test_to_hex_round_trips_normalized_color() -> None:
    assert colors.to_hex((255, 128, 0)) == "#ff8000"


def test_readable_text_color_contrasts_background() -> None:
    assert colors.readable_text_color((250, 250, 250)) == (30, 30, 30)
    assert colors.readable_text_color((10, 10, 60)) == (230, 230, 230)


def test_mix_colors_averages_channels() -> None:
    assert colors.mix_colors((200, 0, 0), (0, 0, 200)) == (100, 0, 100)
    assert colors.mix_colors((1, 1, 1), (2, 2, 2)) == (1, 1, 1)
