"""Tag color helpers: RGB normalization, automatic color policies and mixing."""

from __future__ import annotations

import colorsys
import math
import random
from collections.abc import Sequence
from typing import Any, Protocol, Tuple

ColorTuple = Tuple[int, int, int]

PALETTE_STEPS = 40

# Endpoints of the "warm" cubehelix ramp as (hue degrees, saturation, lightness).
_WARM_START = (-100.0, 0.75, 0.35)
_WARM_END = (80.0, 1.50, 0.80)

_CUBEHELIX_A = -0.14861
_CUBEHELIX_B = 1.78277
_CUBEHELIX_C = -0.29227
_CUBEHELIX_D = -0.90649
_CUBEHELIX_E = 1.97294


def _clamp_channel(value: Any) -> int:
    channel = int(value)
    if channel < 0:
        return 0
    if channel > 255:
        return 255
    return channel


def normalize_color(value: Any) -> ColorTuple:
    """Convert ``value`` into an RGB tuple, accepting hex strings or sequences."""

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Color strings cannot be empty")
        if text.startswith("#"):
            text = text[1:]
        if "," in text:
            parts = [part.strip() for part in text.split(",") if part.strip()]
            if len(parts) != 3:
                raise ValueError(f"Color '{value}' must have exactly 3 components")
            return tuple(_clamp_channel(int(part, 0)) for part in parts)  # type: ignore[return-value]
        if len(text) in (3, 6):
            if len(text) == 3:
                text = "".join(ch * 2 for ch in text)
            return tuple(int(text[i : i + 2], 16) for i in range(0, 6, 2))  # type: ignore[return-value]
        raise ValueError(f"Unsupported color format: {value!r}")

    if isinstance(value, Sequence):
        items = list(value)
        if len(items) != 3:
            raise ValueError(f"RGB sequences must contain 3 values, received {value!r}")
        return tuple(_clamp_channel(component) for component in items)  # type: ignore[return-value]

    raise TypeError(f"Cannot convert {type(value)!r} to an RGB color")


def to_hex(color: ColorTuple) -> str:
    return "#" + "".join(f"{component:02x}" for component in color)


class ColorPolicy(Protocol):
    """Callable picking a color for a new tag given the current tag count."""

    def __call__(self, existing_count: int) -> ColorTuple:
        ...


class PaletteColorPolicy:
    """Deterministic policy sampling a warm sequential ramp by tag count."""

    name = "palette"

    def __init__(self, steps: int = PALETTE_STEPS) -> None:
        self._steps = max(1, int(steps))

    def __call__(self, existing_count: int) -> ColorTuple:
        position = (max(0, existing_count) % self._steps) / self._steps
        return warm_ramp(position)


class HslColorPolicy:
    """Random hue with saturation/lightness kept inside readable bands."""

    name = "hsl"

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def __call__(self, existing_count: int) -> ColorTuple:
        del existing_count
        hue = self._rng.uniform(0.0, 360.0)
        saturation = self._rng.uniform(0.5, 0.8)
        lightness = self._rng.uniform(0.5, 0.7)
        red, green, blue = colorsys.hls_to_rgb(hue / 360.0, lightness, saturation)
        return (int(red * 255.0), int(green * 255.0), int(blue * 255.0))


def build_color_policy(name: str, *, seed: int | None = None) -> ColorPolicy:
    """Return the color policy registered under ``name``."""

    lookup = (name or "").strip().lower()
    if lookup == PaletteColorPolicy.name:
        return PaletteColorPolicy()
    if lookup == HslColorPolicy.name:
        return HslColorPolicy(seed)
    raise ValueError(f"Unknown color policy: {name!r}")


def warm_ramp(position: float) -> ColorTuple:
    """Evaluate the warm cubehelix ramp at ``position`` in ``[0, 1]``."""

    t = min(1.0, max(0.0, float(position)))
    hue = _WARM_START[0] + (_WARM_END[0] - _WARM_START[0]) * t
    saturation = _WARM_START[1] + (_WARM_END[1] - _WARM_START[1]) * t
    lightness = _WARM_START[2] + (_WARM_END[2] - _WARM_START[2]) * t
    return _cubehelix_to_rgb(hue, saturation, lightness)


def _cubehelix_to_rgb(hue: float, saturation: float, lightness: float) -> ColorTuple:
    angle = math.radians(hue + 120.0)
    amplitude = saturation * lightness * (1.0 - lightness)
    cos_h = math.cos(angle)
    sin_h = math.sin(angle)
    red = 255.0 * (lightness + amplitude * (_CUBEHELIX_A * cos_h + _CUBEHELIX_B * sin_h))
    green = 255.0 * (lightness + amplitude * (_CUBEHELIX_C * cos_h + _CUBEHELIX_D * sin_h))
    blue = 255.0 * (lightness + amplitude * (_CUBEHELIX_E * cos_h))
    return (_clamp_channel(round(red)), _clamp_channel(round(green)), _clamp_channel(round(blue)))


def readable_text_color(background: ColorTuple) -> ColorTuple:
    """Return a gray that stays legible on top of ``background``."""

    red, green, blue = background
    luminance = 0.299 * red + 0.587 * green + 0.114 * blue
    if luminance > 150.0:
        return (30, 30, 30)
    return (230, 230, 230)


def mix_colors(first: ColorTuple, second: ColorTuple) -> ColorTuple:
    """Average two colors channel by channel (integer division)."""

    return (
        (first[0] + second[0]) // 2,
        (first[1] + second[1]) // 2,
        (first[2] + second[2]) // 2,
    )


__all__ = [
    "ColorPolicy",
    "ColorTuple",
    "HslColorPolicy",
    "PALETTE_STEPS",
    "PaletteColorPolicy",
    "build_color_policy",
    "mix_colors",
    "normalize_color",
    "readable_text_color",
    "to_hex",
    "warm_ramp",
]
