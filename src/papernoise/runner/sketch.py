"""
sketch.py
---------

Scene recipes for the demo sheet. Each recipe returns a `PathGroup` in
drawing order plus a small metadata dict for the run's JSON record.

draw_rock    noisy polygon shaded with a hatch preset, a scribbled outline
             copy and sometimes a "doughnut hole".
draw_growth  noisy colored disk covered with grain and tapered paint strokes
             that follow the noise field.
"""

from __future__ import annotations

__all__ = ["draw_rock", "draw_growth", "paint_strokes"]

import math
import logging
from typing import Optional

from ..color import BLACK, WHITE, HSLColor
from ..displace import displace, wiggle
from ..flow_field import noise_walk
from ..grain import scatter
from ..hatch import HatchPreset, choose_preset, hatch
from ..noise import NoiseContext
from ..path import Bounds, PathGroup, Polyline, PointXY
from ..random_utils import random_hsl, random_in_circle, uniform
from ..stroke import widen
from ..utils.rng import RNGBackend

logger = logging.getLogger(__name__)

ROCK_PADDING = 0.75
HOLE_PROBABILITY = 0.25
HUE_CHANGE_PROBABILITY = 0.05


def draw_rock(rect: Bounds, ctx: NoiseContext, rng: RNGBackend,
              preset: Optional[HatchPreset] = None) -> tuple[PathGroup, dict]:
    center = rect.center
    radius = min(rect.width, rect.height) * 0.5 * ROCK_PADDING

    sides = int(math.floor(uniform(rng, 4, 50)))
    outline = Polyline.regular_polygon(center, sides, radius, stroke=BLACK)
    if rect.width > rect.height:
        outline.scale(1.5, 1.0, origin=center)
    else:
        outline.scale(1.0, 1.5, origin=center)

    # Coarse, then fine
    displace(outline, ctx, 6, 60, 20)
    displace(outline, ctx, 6, 20, 5)

    if preset is None:
        preset = choose_preset(rng)
    shading = hatch(outline, preset, ctx, rng, center=center, radius=radius)
    if preset in (HatchPreset.STAR, HatchPreset.FLOW):
        outline.stroke = None

    scribble = outline.copy()
    scribble.stroke = BLACK
    wiggle(scribble, ctx, 200, 30, 3)

    group = PathGroup([outline, shading, scribble], meta={"kind": "rock"})
    meta = {"kind": "rock", "sides": sides, "preset": preset.value, "hole": False}

    if rng.random() < HOLE_PROBABILITY:
        cutout = Polyline.regular_polygon(
            center, int(math.floor(uniform(rng, 3, 7))),
            uniform(rng, radius * 0.25, radius * 0.45),
            fill=WHITE, stroke=BLACK,
        )
        wiggle(cutout, ctx, 100, 10, 3)
        cutout_scribble = cutout.copy()
        cutout_scribble.fill = None
        wiggle(cutout_scribble, ctx, 200, 30, 3)
        group.add_children([cutout, cutout_scribble])
        meta["hole"] = True

    return group, meta


def paint_strokes(body: Polyline, ctx: NoiseContext, rng: RNGBackend, center: PointXY,
                  radius: float, samples: int, hue_falloff: float,
                  min_thickness: float, max_thickness: float,
                  min_steps: float = 3, max_steps: float = 5,
                  step_size: float = 5.0, hue_change: float = 0.015) -> PathGroup:
    """Brush strokes walking the noise field from random points in the disk.

    Stroke color is the body color with a hue shift growing with the stroke's
    distance from `center`, darkened slightly but kept at lightness >= 0.35.
    """
    base = body.fill if body.fill is not None else BLACK
    strokes = PathGroup(meta={"kind": "paint_strokes"})
    for _ in range(samples):
        start = random_in_circle(rng, radius, center)
        steps = int(math.ceil(uniform(rng, min_steps, max_steps)))
        skeleton = noise_walk(ctx.field, start, steps, step_size)
        if len(skeleton) < 2:
            continue

        cx, cy = skeleton.center
        effect = math.hypot(cx - center[0], cy - center[1]) / radius if radius else 0.0
        color = base.shifted(hue=uniform(rng, -360, 360) * hue_falloff * effect)
        color = color.shifted(lightness=-0.075 * effect)
        if color.lightness < 0.35:
            color = HSLColor(color.hue, color.saturation, 0.35, color.alpha)
        if rng.random() < hue_change:
            color = color.shifted(hue=uniform(rng, 0, 360))
        skeleton.fill = color

        stroke = widen(skeleton, rng, min_thickness, max_thickness)
        if len(stroke):
            displace(stroke, ctx, 6, 100, 10)
            strokes.add_child(stroke)
    return strokes


def draw_growth(center: PointXY, radius: float, ctx: NoiseContext, rng: RNGBackend,
                grain_points: int = 4000, stroke_count: int = 100) -> tuple[PathGroup, dict]:
    body = Polyline.circle(center, radius)
    body.fill = random_hsl(rng, 180, 230, 45)
    if rng.random() < HUE_CHANGE_PROBABILITY:
        body.fill = body.fill.shifted(hue=uniform(rng, -180, 180))
    displace(body, ctx, 6, 30, 10)

    grain = scatter(body, rng, grain_points, 0.25, 2.0, hue_var=50.0, sat_var=0.0,
                    light_var=0.2, falloff=True)

    # Long sparse strokes under short dense ones
    layers = (
        dict(samples=5, hue_falloff=0.025, min_thickness=2, max_thickness=4,
             min_steps=3 * 24, max_steps=5 * 24),
        dict(samples=stroke_count, hue_falloff=0.1, min_thickness=2, max_thickness=5,
             min_steps=3, max_steps=5),
    )
    group = PathGroup([body, grain], meta={"kind": "growth"})
    for layer in layers:
        group.add_child(paint_strokes(body, ctx, rng, center, radius, **layer))

    meta = {"kind": "growth", "hue": body.fill.hue, "grain": len(grain)}
    logger.debug(f"draw_growth(): {meta}")
    return group, meta
