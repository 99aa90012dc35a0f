"""
random_utils.py
---------------

Uniform sampling helpers over an injected random source.

Every helper only needs `rng.random()`, so a deterministic stub works as
well as `RNG`, `random.Random`, or `numpy.random.Generator`.
"""

from __future__ import annotations

__all__ = [
    "uniform", "random_point", "random_in_rect", "random_in_circle",
    "random_hsl", "lerp", "map_range",
]

import math
from typing import TYPE_CHECKING, Optional, TypeAlias, Union

from .utils.rng import RNGBackend, get_rng

if TYPE_CHECKING:
    from .color import HSLColor
    from .path import Bounds

numeric: TypeAlias = Union[int, float]
PointXY: TypeAlias = tuple[float, float]


def _source(rng: Optional[RNGBackend]) -> RNGBackend:
    return get_rng() if rng is None else rng


def uniform(rng: Optional[RNGBackend] = None, a: numeric = 0.0, b: numeric = 1.0) -> float:
    """Random float in [a, b)."""
    return a + _source(rng).random() * (b - a)


def random_point(rng: Optional[RNGBackend], a: numeric, b: numeric,
                 c: numeric, d: numeric) -> PointXY:
    """Random point with x in [a, b) and y in [c, d). x is drawn first."""
    rng = _source(rng)
    x = uniform(rng, a, b)
    y = uniform(rng, c, d)
    return (x, y)


def random_in_rect(rng: Optional[RNGBackend], bounds: Bounds) -> PointXY:
    """Random point inside an axis-aligned rectangle."""
    return random_point(rng, bounds.x0, bounds.x1, bounds.y0, bounds.y1)


def random_in_circle(rng: Optional[RNGBackend], radius: numeric,
                     center: PointXY = (0.0, 0.0)) -> PointXY:
    """Random point uniformly distributed over a disk (sqrt radial sampling)."""
    rng = _source(rng)
    r = radius * math.sqrt(rng.random())
    theta = rng.random() * 2.0 * math.pi
    return (center[0] + r * math.cos(theta), center[1] + r * math.sin(theta))


def random_hsl(rng: Optional[RNGBackend] = None, min_hue: numeric = 0.0,
               max_hue: numeric = 360.0, saturation: numeric = 100.0,
               lightness: numeric = 60.0) -> HSLColor:
    """Random hue in [min_hue, max_hue) with fixed saturation/lightness.

    Saturation and lightness are given in percent, CSS `hsl()` style.
    """
    from .color import HSLColor

    hue = uniform(rng, min_hue, max_hue)
    return HSLColor(hue, saturation / 100.0, lightness / 100.0)


def lerp(a: float, b: float, percent: float = 0.5) -> float:
    """Linear interpolation with `percent` clamped to [0, 1]."""
    percent = max(0.0, min(1.0, percent))
    return a + (b - a) * percent


def map_range(v: float, a_min: float, a_max: float,
              b_min: float = 0.0, b_max: float = 1.0) -> float:
    """Map `v` linearly from [a_min, a_max] to [b_min, b_max] (no clamping)."""
    if a_max == a_min:
        raise ValueError(f"Source range is empty: [{a_min}, {a_max}].")
    return (v - a_min) * (b_max - b_min) / (a_max - a_min) + b_min
