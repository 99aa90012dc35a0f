"""
hatch.py
--------

Hatch shading presets. Every preset builds wiggled line families and
returns them in a `ClipGroup` whose mask is a copy of the region (or, for
FLOW, a noisy copy of its bounding rectangle), ready to be composited by the
renderer.

Presets
-------
COVER   Parallel vertical lines across the bounds, with occasional heavier
        "scribble" duplicates and, half the time, a second horizontal family
        rotated by up to 20 degrees. The mask is noise-displaced and the
        region and clip group are rotated together by up to 10 degrees.
NORMAL  Short strokes walking the region boundary, pointing inward along the
        average boundary normal; 1-3 layers, each turned further by 45-135
        degrees.
STAR    Lines through the center, rotated by 360/n, jittered and displaced.
FLOW    Sparse, strongly wiggled parallel lines under a random full rotation.
"""

from __future__ import annotations

__all__ = [
    "HatchPreset", "PRESET_WEIGHTS", "choose_preset", "hatch",
    "cover_hatch", "normal_hatch", "star_hatch", "flow_hatch",
]

import math
import logging
from enum import Enum
from typing import Callable, Optional

from .color import BLACK
from .displace import displace, wiggle
from .noise import NoiseContext
from .path import ClipGroup, PathGroup, Polyline, PointXY
from .random_utils import uniform
from .utils.rng import RNGBackend, get_rng

logger = logging.getLogger(__name__)

SCRIBBLE_PROBABILITY = 0.125
CROSS_PROBABILITY = 0.5


class HatchPreset(str, Enum):
    COVER = "cover"
    NORMAL = "normal"
    STAR = "star"
    FLOW = "flow"


# Cumulative thresholds in this order: NORMAL < 0.33, COVER < 0.80, STAR < 0.90.
PRESET_WEIGHTS: dict[HatchPreset, float] = {
    HatchPreset.NORMAL: 0.33,
    HatchPreset.COVER: 0.47,
    HatchPreset.STAR: 0.10,
    HatchPreset.FLOW: 0.10,
}


def choose_preset(rng: Optional[RNGBackend] = None) -> HatchPreset:
    """Weighted preset choice from a single draw."""
    if rng is None:
        rng = get_rng()
    r = rng.random()
    acc = 0.0
    for preset, weight in PRESET_WEIGHTS.items():
        acc += weight
        if r < acc:
            return preset
    return HatchPreset.FLOW


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _check_region(region: Polyline) -> None:
    if not isinstance(region, Polyline):
        raise TypeError(f"Expected a Polyline region, got {type(region).__name__}.")
    if len(region) < 3:
        raise ValueError(f"Hatch region needs at least 3 vertices, got {len(region)}.")


def _mask_from(region: Polyline) -> Polyline:
    mask = region.copy()
    mask.fill = None
    mask.stroke = None
    return mask


def _hatch_line(a: PointXY, b: PointXY) -> Polyline:
    return Polyline.line(a, b, stroke=BLACK)


def _stop_count(distance: float, div: float) -> int:
    """floor(distance / div), or 0 when that is not a finite count."""
    if not div > 0:
        return 0
    q = distance / div
    return int(math.floor(q)) if math.isfinite(q) else 0


def _parallel_family(ctx: NoiseContext, rng: RNGBackend, count: int,
                     origin_a: PointXY, origin_b: PointXY, offset: PointXY,
                     div: float, freq: float = 5.0, amp: float = 1.0) -> PathGroup:
    """`count` lines from origin_a->origin_b stepped by `offset`, each wiggled
    with floor(d / div) stops and occasionally doubled by a scribble copy."""
    group = PathGroup()
    for i in range(count):
        a = (origin_a[0] + offset[0] * i, origin_a[1] + offset[1] * i)
        b = (origin_b[0] + offset[0] * i, origin_b[1] + offset[1] * i)
        d = math.hypot(b[0] - a[0], b[1] - a[1])
        stops = _stop_count(d, div)

        line = _hatch_line(a, b)
        wiggle(line, ctx, stops, freq, amp)

        if rng.random() < SCRIBBLE_PROBABILITY:
            scribble = line.copy()
            wiggle(scribble, ctx, stops, 3.0, 2.0)
            group.add_child(scribble)

        group.add_child(line)
    return group


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------
def cover_hatch(region: Polyline, ctx: NoiseContext,
                rng: Optional[RNGBackend] = None) -> ClipGroup:
    """Parallel-line cover fill. Rotates `region` in place together with the
    returned clip group."""
    _check_region(region)
    if rng is None:
        rng = get_rng()
    bounds = region.bounds()

    steps = uniform(rng, 10, 20)
    div = bounds.width / steps

    mask = _mask_from(region)
    displace(mask, ctx, 6, 30, 15)
    clip = ClipGroup(mask, meta={"preset": HatchPreset.COVER.value})

    hatch_group = _parallel_family(ctx, rng, int(math.ceil(steps)),
                                   bounds.top_left, bounds.bottom_left, (div, 0.0), div)
    clip.add_child(hatch_group)

    if rng.random() < CROSS_PROBABILITY and div > 0 and math.isfinite(bounds.height / div):
        cross_steps = int(math.ceil(bounds.height / div))
        rotated = _parallel_family(ctx, rng, cross_steps,
                                   bounds.top_left, bounds.top_right, (0.0, div), div)
        rotated.rotate(uniform(rng, -20, 20))
        hatch_group.add_child(rotated)
        clip.meta["cross"] = True

    angle = uniform(rng, -10, 10)
    pivot = bounds.center
    region.rotate(angle, pivot)
    clip.rotate(angle, pivot)
    clip.meta["angle"] = angle
    return clip


def normal_hatch(region: Polyline, ctx: NoiseContext, rng: Optional[RNGBackend] = None,
                 center: Optional[PointXY] = None,
                 radius: Optional[float] = None) -> ClipGroup:
    """Inward strokes along a stretch of the boundary.

    The stroke direction is the average boundary normal over the sampled
    arclength range, oriented toward `center` (default: bounds center).
    Stroke lengths are `uniform(0.2, 0.5) * radius` (default radius: half the
    smaller bounds side).
    """
    _check_region(region)
    if rng is None:
        rng = get_rng()
    bounds = region.bounds()
    if center is None:
        center = bounds.center
    if radius is None:
        radius = min(bounds.width, bounds.height) * 0.5

    clip = ClipGroup(_mask_from(region), meta={"preset": HatchPreset.NORMAL.value})

    num_layers = int(math.floor(uniform(rng, 1, 4)))
    clip.meta["layers"] = num_layers
    length = region.length()
    step = length * uniform(rng, 0.01, 0.025)
    start_frac = uniform(rng, 0.0, 0.1)
    end_frac = uniform(rng, 0.3, 1.0)
    dist_desired = end_frac * length - start_frac * length
    if step <= 0:
        return clip

    def position(d: float) -> float:
        return min(max(0.01, d), length * 0.99)

    ax = ay = 0.0
    travelled = 0.0
    while travelled < dist_desired:
        normal = region.normal_at(position(travelled))
        if normal is not None:
            ax += normal[0]
            ay += normal[1]
        travelled += step
    norm = math.hypot(ax, ay)
    if norm <= 0:
        return clip
    ax, ay = ax / norm, ay / norm

    # Boundary normals face outward; flip if the sum ended up facing away
    ref = region.point_at(position(dist_desired * 0.5)) or bounds.center
    if (center[0] - ref[0]) * -ax + (center[1] - ref[1]) * -ay < 0:
        ax, ay = -ax, -ay

    angle = 0.0
    for _ in range(num_layers):
        travelled = 0.0
        while travelled < dist_desired:
            hatch_length = uniform(rng, radius * 0.2, radius * 0.5)
            start = region.point_at(position(travelled))
            travelled += step
            if start is None:
                continue
            end = (start[0] - ax * hatch_length, start[1] - ay * hatch_length)
            line = _hatch_line(start, end)
            line.rotate(angle)
            wiggle(line, ctx)
            clip.add_child(line)
        angle += uniform(rng, 45, 135)

    return clip


def star_hatch(region: Polyline, ctx: NoiseContext, rng: Optional[RNGBackend] = None,
               center: Optional[PointXY] = None) -> ClipGroup:
    """Lines through `center` spanning the larger bounds side in each direction."""
    _check_region(region)
    if rng is None:
        rng = get_rng()
    bounds = region.bounds()
    cx, cy = bounds.center if center is None else center

    clip = ClipGroup(_mask_from(region), meta={"preset": HatchPreset.STAR.value})

    span = max(bounds.width, bounds.height)
    steps = int(math.floor(uniform(rng, 1, 15)))
    div = 360.0 / steps
    for i in range(steps):
        a, b = (cx - span, cy), (cx + span, cy)
        line = _hatch_line(a, b)
        wiggle(line, ctx, _stop_count(2 * span, 5))
        displace(line, ctx, 6, uniform(rng, 10, 50), uniform(rng, 1, 10))

        line.rotate(i * div, (cx, cy))
        line.translate(uniform(rng, 1, 5), uniform(rng, 1, 5))
        clip.add_child(line)

    clip.meta["steps"] = steps
    return clip


def flow_hatch(region: Polyline, ctx: NoiseContext,
               rng: Optional[RNGBackend] = None) -> ClipGroup:
    """Sparse, heavily wiggled lines under a noisy rectangular mask."""
    _check_region(region)
    if rng is None:
        rng = get_rng()
    bounds = region.bounds()

    steps = uniform(rng, 3, 10)
    div = bounds.width / steps

    mask = Polyline.rectangle(bounds)
    displace(mask, ctx, 6, 30, 50)
    clip = ClipGroup(mask, meta={"preset": HatchPreset.FLOW.value})

    hatch_group = PathGroup()
    for i in range(int(math.ceil(steps))):
        x = bounds.x0 + div * i
        a, b = (x, bounds.y0), (x, bounds.y1)
        stops = _stop_count(bounds.height, 5)

        line = _hatch_line(a, b)
        wiggle(line, ctx, stops, 30.0, 10.0)

        if rng.random() < SCRIBBLE_PROBABILITY:
            scribble = line.copy()
            wiggle(scribble, ctx, stops, 3.0, 2.0)
            hatch_group.add_child(scribble)

        hatch_group.add_child(line)

    hatch_group.rotate(uniform(rng, 0, 360))
    clip.add_child(hatch_group)
    return clip


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------
def hatch(region: Polyline, preset: HatchPreset, ctx: NoiseContext,
          rng: Optional[RNGBackend] = None, center: Optional[PointXY] = None,
          radius: Optional[float] = None) -> ClipGroup:
    """Shade `region` with `preset` (a `HatchPreset` or its string value)."""
    if not isinstance(ctx, NoiseContext):
        raise TypeError(f"Expected a NoiseContext, got {type(ctx).__name__}.")
    try:
        preset = HatchPreset(preset)
    except ValueError as e:
        raise ValueError(f"Unknown hatch preset: {preset!r}") from e

    builders: dict[HatchPreset, Callable[[], ClipGroup]] = {
        HatchPreset.COVER: lambda: cover_hatch(region, ctx, rng),
        HatchPreset.NORMAL: lambda: normal_hatch(region, ctx, rng, center, radius),
        HatchPreset.STAR: lambda: star_hatch(region, ctx, rng, center),
        HatchPreset.FLOW: lambda: flow_hatch(region, ctx, rng),
    }
    clip = builders[preset]()
    logger.debug(f"hatch(): {preset.value} preset, {len(clip) - 1} items")
    return clip
