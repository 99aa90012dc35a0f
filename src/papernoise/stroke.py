"""
stroke.py
---------

Turns centerlines into filled brush-stroke outlines.

The outline is built in two passes over evenly spaced arclength samples:
the forward pass offsets each sample along the normal by +t/2, the backward
pass walks the samples in reverse offsetting by -t/2. Joining both passes
gives a closed outline symmetric about the centerline, with vertex i of the
forward pass facing vertex (2n - 1 - i) of the backward pass.
"""

from __future__ import annotations

__all__ = ["widen", "thicken", "taper_scale", "sample_positions"]

import math
import logging
from numbers import Integral
from typing import Optional

from .path import Polyline, PointXY
from .random_utils import uniform
from .utils.rng import RNGBackend, get_rng

logger = logging.getLogger(__name__)

END_CLAMP = 0.01


def taper_scale(i: int, samples: int) -> float:
    """Cosine taper: 1.0 at the middle sample, 0.0 at the first and last.

    `scale(i) = cos(pi/2 * |i - m| / m)` with `m = (samples - 1) / 2`, so
    the profile is symmetric for any sample count.
    """
    if samples < 2:
        return 1.0
    half = (samples - 1) / 2.0
    return math.cos(math.pi * 0.5 * abs(i - half) / half)


def sample_positions(length: float, samples: int) -> list[float]:
    """`samples` arclength positions from 0 to `length`, clamped to
    [0.01 * length, 0.99 * length] to stay clear of the endpoints."""
    if samples < 1:
        return []
    lo, hi = END_CLAMP * length, (1.0 - END_CLAMP) * length
    step = length / (samples - 1) if samples > 1 else 0.0
    return [min(max(lo, step * i), hi) for i in range(samples)]


def _offset_pass(centerline: Polyline, positions: list[float], indices: range,
                 half_width: float, sign: float, taper: bool) -> list[PointXY]:
    points: list[PointXY] = []
    n = len(positions)
    for i in indices:
        s = positions[i]
        point = centerline.point_at(s)
        normal = centerline.normal_at(s)
        if point is None or normal is None:
            continue
        k = taper_scale(i, n) if taper else 1.0
        offset = sign * half_width * k
        points.append((point[0] + normal[0] * offset, point[1] + normal[1] * offset))
    return points


def widen(centerline: Polyline, rng: Optional[RNGBackend] = None,
          min_thickness: float = 2.0, max_thickness: float = 5.0,
          sample_count: int = 20, thinning_probability: float = 0.1,
          taper: bool = True) -> Polyline:
    """Build a closed, smoothed outline of random thickness around `centerline`.

    Draws `t = uniform(min_thickness, max_thickness)`, then halves it with
    probability `thinning_probability`. Samples whose point or normal cannot be
    evaluated are skipped, so the outline has at most `2 * sample_count`
    vertices.

    The chosen thickness is stored in `meta["thickness"]`; the centerline's
    fill is copied. The centerline itself is not modified.

    Raises:
        TypeError: `centerline` is not a Polyline.
        ValueError: Invalid thickness range or sample count.
    """
    if not isinstance(centerline, Polyline):
        raise TypeError(f"Expected a Polyline centerline, got {type(centerline).__name__}.")
    if min_thickness > max_thickness:
        raise ValueError(f"min_thickness ({min_thickness}) exceeds max_thickness ({max_thickness}).")
    if not isinstance(sample_count, Integral) or sample_count < 2:
        raise ValueError(f"sample_count must be an integer >= 2, got {sample_count!r}.")
    if rng is None:
        rng = get_rng()

    thickness = uniform(rng, min_thickness, max_thickness)
    thinned = rng.random() < thinning_probability
    if thinned:
        thickness /= 2.0

    positions = sample_positions(centerline.length(), sample_count)
    half = thickness * 0.5
    forward = _offset_pass(centerline, positions, range(sample_count), half, 1.0, taper)
    backward = _offset_pass(centerline, positions, range(sample_count - 1, -1, -1), half, -1.0, taper)

    widened = Polyline(forward + backward, closed=True, smooth=True)
    widened.fill = centerline.fill
    widened.meta.update({"thickness": thickness, "thinned": thinned, "taper": taper})
    skipped = 2 * sample_count - len(widened)
    if skipped:
        logger.debug(f"widen(): skipped {skipped} degenerate samples")
    return widened


def thicken(path: Polyline, thickness: float, samples: int = 100,
            offset: int = 10) -> Polyline:
    """Constant-width outline around `path`, starting `offset` samples in from
    the start. The outline is closed but not smoothed.
    """
    if not isinstance(path, Polyline):
        raise TypeError(f"Expected a Polyline, got {type(path).__name__}.")
    if samples < 2 or not 0 <= offset < samples:
        raise ValueError(f"Need samples >= 2 and 0 <= offset < samples, got {samples}, {offset}.")

    length = path.length()
    step = length / samples
    positions = [min(max(END_CLAMP, step * i), length * (1.0 - END_CLAMP))
                 for i in range(samples)]
    forward = _offset_pass(path, positions, range(offset, samples), thickness * 0.5, 1.0, False)
    backward = _offset_pass(path, positions, range(samples - 1, offset - 1, -1),
                            thickness * 0.5, -1.0, False)

    outline = Polyline(forward + backward, closed=True)
    outline.fill = None if path.fill is None else path.fill.shifted(lightness=-0.1, alpha=1.0)
    outline.meta["thickness"] = float(thickness)
    return outline
