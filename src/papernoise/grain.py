"""
grain.py
--------

Speckle texture: small jittered-color dots scattered inside a region.

Candidate positions are drawn uniformly over the region's bounding box and
kept only if they fall inside the region itself, so the realized dot count
is at most `max_points` and scales with how much of the box the region
fills. `max_points` is therefore also the attempt budget.
"""

from __future__ import annotations

__all__ = ["scatter"]

import math
import logging
from typing import Optional

from .color import BLACK
from .path import PathGroup, Polyline
from .random_utils import map_range, random_point, uniform
from .utils.rng import RNGBackend, get_rng

logger = logging.getLogger(__name__)

DOT_RESOLUTION = 8


def scatter(region: Polyline, rng: Optional[RNGBackend] = None, max_points: int = 10,
            min_size: float = 0.25, max_size: float = 1.0, hue_var: float = 25.0,
            sat_var: float = 0.25, light_var: float = 0.25, alpha: float = 0.5,
            falloff: bool = False) -> PathGroup:
    """Scatter up to `max_points` filled dots inside `region`.

    Args:
        region: Closed polyline; its fill is the base color (black if unset).
        rng: Random source.
        max_points: Number of candidate positions (upper bound on dots).
        min_size, max_size: Dot radius range.
        hue_var: Hue jitter in degrees (+/-).
        sat_var, light_var: Saturation / lightness jitter (+/-).
        alpha: Fixed dot opacity.
        falloff: Additionally keep a candidate only with probability equal to
            its normalized distance from the bounds center (denser toward the
            rim, sparse in the middle).

    Returns:
        PathGroup of smoothed circle polylines. Each dot carries
        `meta["center"]` and `meta["radius"]`. The region is not modified.
    """
    if not isinstance(region, Polyline):
        raise TypeError(f"Expected a Polyline region, got {type(region).__name__}.")
    if max_points < 0:
        raise ValueError(f"max_points must be non-negative, got {max_points}.")
    if min_size > max_size:
        raise ValueError(f"min_size ({min_size}) exceeds max_size ({max_size}).")
    if rng is None:
        rng = get_rng()

    group = PathGroup(meta={"kind": "grain"})
    if len(region) < 3:
        return group

    bounds = region.bounds()
    center = bounds.center
    max_d = math.hypot(bounds.width, bounds.height) * 0.5
    base = region.fill if region.fill is not None else BLACK

    for _ in range(int(max_points)):
        position = random_point(rng, bounds.x0, bounds.x1, bounds.y0, bounds.y1)
        if not region.contains(position):
            continue
        if falloff and max_d > 0:
            d = math.hypot(position[0] - center[0], position[1] - center[1])
            if not rng.random() < map_range(d, 0.0, max_d, 0.0, 1.0):
                continue
        radius = uniform(rng, min_size, max_size)
        dot = Polyline.circle(position, radius, resolution=DOT_RESOLUTION)
        dot.fill = base.jitter(rng, hue_var, sat_var, light_var, alpha=alpha)
        group.add_child(dot)

    logger.debug(f"scatter(): placed {len(group)} of {max_points} candidate dots")
    return group
