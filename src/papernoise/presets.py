"""
presets.py
----------

Small closed families of drawing recipes, each selected by an enum member and
executed by one pure function. `choose(rng, EnumClass)` picks a member by a
rounded uniform index, so the end members are half as likely as the inner
ones.

    GrowPreset        -> grow_points()     point lists along a direction
    LineRenderPreset  -> render_line()     point list to stroke or outline
    BlossomCenter     -> blossom_center()  closed center shape
    BlossomLeaves     -> blossom_leaves()  lines/circles around a center shape

`flower()` chains one of each into a small hand-drawn doodle.
"""

from __future__ import annotations

__all__ = [
    "GrowPreset", "LineRenderPreset", "BlossomCenter", "BlossomLeaves",
    "choose", "grow_points", "render_line", "blossom_center", "blossom_leaves",
    "flower",
]

import math
import logging
from enum import Enum
from numbers import Real
from typing import Optional, Sequence, Type, TypeVar

from .color import BLACK, WHITE, HSLColor
from .displace import displace
from .noise import NoiseContext
from .path import Bounds, PathGroup, Polyline, PointXY
from .random_utils import uniform
from .stroke import widen
from .utils.rng import RNGBackend, get_rng

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


class GrowPreset(str, Enum):
    STRAIGHT = "straight"
    WOBBLY = "wobbly"


class LineRenderPreset(str, Enum):
    SIMPLE = "simple"
    TAPERED = "tapered"


class BlossomCenter(str, Enum):
    ELLIPSE = "ellipse"
    CIRCLE = "circle"
    STAR = "star"


class BlossomLeaves(str, Enum):
    LINES = "lines"
    CIRCLES = "circles"


def choose(rng: Optional[RNGBackend], enum_cls: Type[E]) -> E:
    """Member at index round(random() * (n - 1)), rounding halves up."""
    if rng is None:
        rng = get_rng()
    members = list(enum_cls)
    if not members:
        raise ValueError(f"{enum_cls.__name__} has no members.")
    index = int(math.floor(rng.random() * (len(members) - 1) + 0.5))
    return members[index]


def _random_rgb(rng: RNGBackend) -> HSLColor:
    r, g, b = rng.random(), rng.random(), rng.random()
    return HSLColor.from_any((r, g, b))


# ---------------------------------------------------------------------------
# Growth
# ---------------------------------------------------------------------------
def grow_points(preset: GrowPreset, origin: PointXY, direction: PointXY, length: float,
                segment_count: float, rng: Optional[RNGBackend] = None) -> list[PointXY]:
    """Points `length / segment_count` apart stepping from `origin` along
    `direction`, one for each i in [0, segment_count). A fractional count
    adds one more point.

    WOBBLY pushes point i sideways by up to `length * k * i / n`, where the
    offset factor k in [0.01, 0.21) is drawn once per call.
    """
    preset = GrowPreset(preset)
    if rng is None:
        rng = get_rng()
    if not isinstance(segment_count, Real) or not segment_count >= 1:
        raise ValueError(f"segment_count must be >= 1, got {segment_count!r}.")
    n = segment_count
    count = int(math.ceil(n))
    ox, oy = origin
    dx, dy = direction
    step = length / n

    if preset is GrowPreset.STRAIGHT:
        return [(ox + dx * step * i, oy + dy * step * i) for i in range(count)]

    offset_fact = 0.01 + rng.random() * 0.2
    nx, ny = -dy, dx
    norm = math.hypot(nx, ny)
    if norm > 0:
        nx, ny = nx / norm, ny / norm
    max_offset = length * offset_fact
    points = []
    for i in range(count):
        k = max_offset * rng.random() * (i / n)
        points.append((ox + dx * step * i + nx * k, oy + dy * step * i + ny * k))
    return points


# ---------------------------------------------------------------------------
# Line rendering
# ---------------------------------------------------------------------------
def render_line(preset: LineRenderPreset, points: Sequence[PointXY],
                rng: Optional[RNGBackend] = None, sample_count: int = 20) -> Polyline:
    """SIMPLE: black stroke, smoothed half the time.
    TAPERED: white-filled outline of thickness 1-11, tapered half the time.
    """
    preset = LineRenderPreset(preset)
    if rng is None:
        rng = get_rng()

    if preset is LineRenderPreset.SIMPLE:
        smooth = rng.random() >= 0.5
        return Polyline(points, smooth=smooth, stroke=BLACK)

    thickness = 1.0 + rng.random() * 10.0
    taper = rng.random() >= 0.5
    centerline = Polyline(points, fill=WHITE)
    outline = widen(centerline, rng, thickness, thickness, sample_count,
                    thinning_probability=0.0, taper=taper)
    outline.stroke = BLACK
    return outline


# ---------------------------------------------------------------------------
# Blossoms
# ---------------------------------------------------------------------------
def blossom_center(preset: BlossomCenter, position: PointXY, size: float,
                   rng: Optional[RNGBackend] = None) -> Polyline:
    preset = BlossomCenter(preset)
    if rng is None:
        rng = get_rng()

    if preset is BlossomCenter.CIRCLE:
        shape = Polyline.circle(position, size * 0.5)
    elif preset is BlossomCenter.STAR:
        count = int(math.floor(3 + rng.random() * 3 + 0.5))
        inner = 0.25 + rng.random() * 0.75
        shape = Polyline.star(position, count, size * inner, size * (1.0 - inner))
    else:
        w = size * (0.75 + rng.random() * 0.75)
        h = size * (0.75 + rng.random() * 0.75)
        shape = Polyline.ellipse(Bounds.from_size(position[0] - w / 2, position[1] - h / 2, w, h))

    shape.stroke = BLACK
    shape.fill = _random_rgb(rng)
    return shape


def blossom_leaves(preset: BlossomLeaves, center_path: Polyline, leaf_length: float,
                   rng: Optional[RNGBackend] = None) -> PathGroup:
    """Leaves placed at evenly spaced boundary points of `center_path`, along
    its outward normal. Boundary samples without a normal are skipped."""
    preset = BlossomLeaves(preset)
    if not isinstance(center_path, Polyline):
        raise TypeError(f"Expected a Polyline, got {type(center_path).__name__}.")
    if rng is None:
        rng = get_rng()

    leaf_count = 5 + rng.random() * 10
    length = center_path.length()
    step = length / leaf_count
    circle_rad = 1 + rng.random() * 5 if preset is BlossomLeaves.CIRCLES else 0.0

    group = PathGroup(meta={"kind": preset.value})
    for i in range(int(math.ceil(leaf_count))):
        s = min(length, step * i)
        p = center_path.point_at(s)
        n = center_path.normal_at(s)
        if p is None or n is None:
            continue
        if preset is BlossomLeaves.LINES:
            k = leaf_length * (0.75 + rng.random() * 0.25)
            leaf = Polyline.line(p, (p[0] + n[0] * k, p[1] + n[1] * k), stroke=BLACK)
        else:
            rad = circle_rad * (0.75 + rng.random() * 0.25)
            leaf = Polyline.circle((p[0] + n[0] * circle_rad, p[1] + n[1] * circle_rad), rad,
                                   stroke=BLACK, fill=WHITE)
        group.add_child(leaf)
    return group


# ---------------------------------------------------------------------------
# Composite doodle
# ---------------------------------------------------------------------------
def flower(origin: PointXY, ctx: NoiseContext, rng: Optional[RNGBackend] = None) -> PathGroup:
    """Stem, blossom and leaves from randomly chosen presets, noise-displaced,
    plus a second unfilled, thinner and shakier copy of the outlines."""
    if rng is None:
        rng = get_rng()
    grow = choose(rng, GrowPreset)
    line_render = choose(rng, LineRenderPreset)
    center_kind = choose(rng, BlossomCenter)
    leaves_kind = choose(rng, BlossomLeaves)

    # Direction within +/-60 degrees of straight up
    theta = math.radians(uniform(rng, -60.0, 60.0))
    direction = (math.sin(theta), -math.cos(theta))

    length = 15.0 + rng.random() * 150.0
    segments = 5 + rng.random() + 5
    stem_points = grow_points(grow, origin, direction, length, segments, rng)

    stem = render_line(line_render, stem_points, rng)
    blossom = blossom_center(center_kind, stem_points[-1], 5.0 + rng.random() * 10.0, rng)
    leaves = blossom_leaves(leaves_kind, blossom, 1.0 + rng.random() * 5.0, rng)

    drawing = PathGroup([stem, blossom, leaves])
    displace(drawing, ctx, 6, 40.0, 6.0)

    shaky = drawing.copy()
    shaky.set_style(fill=None, stroke_width=0.35)
    displace(shaky, ctx, 6, 10.0, 4.0)

    logger.debug(f"flower(): {grow.value}/{line_render.value}/{center_kind.value}/{leaves_kind.value}")
    return PathGroup([drawing, shaky], meta={
        "grow": grow.value, "line": line_render.value,
        "center": center_kind.value, "leaves": leaves_kind.value,
    })
