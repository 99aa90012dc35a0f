"""
displace.py
-----------

Noise displacement of path vertices ("hand-drawn" wobble).

    displace(path, ctx, sample_distance, noise_scale, amplitude, smooth=True)

        Resamples the path so vertices are at most `sample_distance` apart,
        then moves every vertex by

            dx = noise(vx / scale, vy / scale, seed)
            dy = noise(vy / scale, seed, vx / scale)

        times `amplitude`. The permuted axes decorrelate the x and y offsets.
        Groups are processed child by child with the same context, so
        siblings share the noise field but sample it at different places.

    wiggle(line, ctx, stops=10, freq=5, amp=1)

        Subdivides a (typically straight) stroke into `stops` pieces and
        displaces it.
"""

from __future__ import annotations

__all__ = ["displace", "wiggle", "DEFAULT_SAMPLE_DISTANCE"]

import logging
from numbers import Real
from typing import TypeVar

from .noise import NoiseContext
from .path import PathGroup, Polyline

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_DISTANCE = 6.0

PathT = TypeVar("PathT", Polyline, PathGroup)


def displace(path: PathT, ctx: NoiseContext, sample_distance: float = DEFAULT_SAMPLE_DISTANCE,
             noise_scale: float = 30.0, amplitude: float = 10.0,
             smooth: bool = True) -> PathT:
    """Displace `path` in place by the noise field; returns the same object.

    Args:
        path: Polyline or PathGroup (recursed into).
        ctx: Noise field and seed offset.
        sample_distance: Target maximum vertex spacing before displacement.
        noise_scale: Spatial period of the noise in path units (coordinates
            are divided by it before sampling).
        amplitude: Maximum displacement scale in path units.
        smooth: Mark displaced polylines for Bezier smoothing on export.

    Raises:
        TypeError: `path` is not a Polyline/PathGroup or `ctx` is not a
            NoiseContext.
        ValueError: `noise_scale` is zero or `sample_distance` not positive.
    """
    if not isinstance(ctx, NoiseContext):
        raise TypeError(f"Expected a NoiseContext, got {type(ctx).__name__}.")
    if not isinstance(noise_scale, Real) or noise_scale == 0:
        raise ValueError(f"noise_scale must be a non-zero number, got {noise_scale!r}.")
    if not isinstance(sample_distance, Real) or not sample_distance > 0:
        raise ValueError(f"sample_distance must be positive, got {sample_distance!r}.")

    if isinstance(path, PathGroup):
        for child in path.children():
            displace(child, ctx, sample_distance, noise_scale, amplitude, smooth)
        return path

    if not isinstance(path, Polyline):
        raise TypeError(f"Expected a Polyline or PathGroup, got {type(path).__name__}.")

    if sample_distance < path.length():
        path.flatten(sample_distance)

    sample = ctx.field.sample
    seed = ctx.seed
    verts = path.vertices
    for i in range(len(verts)):
        vx, vy = float(verts[i, 0]), float(verts[i, 1])
        nx = sample(vx / noise_scale, vy / noise_scale, seed)
        ny = sample(vy / noise_scale, seed, vx / noise_scale)
        verts[i, 0] = vx + nx * amplitude
        verts[i, 1] = vy + ny * amplitude

    if smooth:
        path.smooth = True
    return path


def wiggle(line: PathT, ctx: NoiseContext, stops: int = 10, freq: float = 5.0,
           amp: float = 1.0, sample_distance: float = DEFAULT_SAMPLE_DISTANCE,
           smooth: bool = True) -> PathT:
    """Split `line` into `stops` equal pieces, then noise-displace it in place."""
    if isinstance(line, PathGroup):
        for child in line.children():
            wiggle(child, ctx, stops, freq, amp, sample_distance, smooth)
        return line
    if not isinstance(line, Polyline):
        raise TypeError(f"Expected a Polyline or PathGroup, got {type(line).__name__}.")

    length = line.length()
    stops = int(stops)
    if length > 0 and stops > 0:
        for i in range(stops):
            line.divide_at(length / stops * i)
    return displace(line, ctx, sample_distance, freq, amp, smooth)
