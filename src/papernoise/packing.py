"""
packing.py
----------

Layout helpers that split a canvas into non-overlapping cells.

pack_rectangles: recursive binary split (a loose guillotine / treemap). Each
    rectangle splits at 33-66% of its width or height; past
    `min_leaf_level`, a rectangle stops splitting with
    `leaf_probability`, and every rectangle at `max_levels` is a leaf.

pack_circles: grow-until-touching circle packing. Each attempt drops a
    circle of `start_radius` at a random point and grows it by
    `step_radius` until it would overlap an earlier circle or reaches
    `max_radius`. Attempts that start inside another circle are discarded.
"""

from __future__ import annotations

__all__ = ["pack_rectangles", "pack_circles", "Circle"]

import math
import logging
from typing import NamedTuple, Optional

from .path import Bounds, PointXY
from .random_utils import random_in_rect, uniform
from .utils.rng import RNGBackend, get_rng

logger = logging.getLogger(__name__)


class Circle(NamedTuple):
    center: PointXY
    radius: float

    def overlaps(self, other: Circle) -> bool:
        d = math.hypot(self.center[0] - other.center[0], self.center[1] - other.center[1])
        return d < self.radius + other.radius


def pack_rectangles(bounds: Bounds, rng: Optional[RNGBackend] = None, max_levels: int = 8,
                    min_leaf_level: int = 2, leaf_probability: float = 0.25) -> list[Bounds]:
    """Leaf cells of a random recursive split of `bounds`.

    The leaves tile `bounds` exactly (no gaps, no overlaps). The split axis
    follows the longer side 75% of the time and is a coin flip otherwise.
    """
    if rng is None:
        rng = get_rng()
    leaves: list[Bounds] = []

    def split(rect: Bounds, level: int) -> None:
        if level >= max_levels:
            leaves.append(rect)
            return
        if level > min_leaf_level and rng.random() < leaf_probability:
            leaves.append(rect)
            return

        w, h = rect.width, rect.height
        vertical = w > h if rng.random() < 0.75 else rng.random() < 0.5
        pct = uniform(rng, 0.33, 0.66)
        if vertical:
            a = Bounds.from_size(rect.x0, rect.y0, w * pct, h)
            b = Bounds(a.x1, rect.y0, rect.x1, rect.y1)
        else:
            a = Bounds.from_size(rect.x0, rect.y0, w, h * pct)
            b = Bounds(rect.x0, a.y1, rect.x1, rect.y1)
        split(a, level + 1)
        split(b, level + 1)

    split(Bounds(*bounds), 0)
    logger.debug(f"pack_rectangles(): {len(leaves)} leaves")
    return leaves


def pack_circles(bounds: Bounds, rng: Optional[RNGBackend] = None, max_radius: float = 150.0,
                 iterations: int = 500, start_radius: float = 1.0,
                 step_radius: float = 1.0) -> list[Circle]:
    """Non-overlapping circles with centers inside `bounds`.

    A circle that hits a neighbor keeps its last non-overlapping radius, so
    the result is strictly non-overlapping.
    """
    if step_radius <= 0:
        raise ValueError(f"step_radius must be positive, got {step_radius}.")
    if start_radius <= 0 or start_radius > max_radius:
        raise ValueError(f"start_radius must be in (0, max_radius], got {start_radius}.")
    if rng is None:
        rng = get_rng()

    circles: list[Circle] = []
    for _ in range(int(iterations)):
        current = Circle(random_in_rect(rng, bounds), start_radius)
        if any(current.overlaps(c) for c in circles):
            continue
        while current.radius < max_radius:
            grown = Circle(current.center, min(current.radius + step_radius, max_radius))
            if any(grown.overlaps(c) for c in circles):
                break
            current = grown
        circles.append(current)

    logger.debug(f"pack_circles(): {len(circles)} circles from {iterations} attempts")
    return circles
