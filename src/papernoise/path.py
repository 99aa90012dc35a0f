"""
path.py
-------

Minimal retained-mode path model consumed by the noise, stroke, grain and
hatch routines.

A `Polyline` is an ordered (N, 2) vertex array with an arclength
parameterization. Straight edges join consecutive vertices; a closed polyline
also has the edge from the last vertex back to the first. The `smooth` flag
does not move vertices: it asks the exporter (`to_mpl_path`) to fit a
Catmull-Rom cubic Bezier chain through them instead of straight LINETO edges.

Coordinates follow the screen convention of the sketches (y grows downward),
so "top" means the smaller y value. Normals are the tangent rotated by -90
degrees, `(ty, -tx)`; for polygons built by the constructors below (vertices
ordered by increasing angle) that normal points away from the interior.

Sampler API (what the geometry routines rely on):

    length() -> float
    point_at(s) -> PointXY | None
    tangent_at(s) -> PointXY | None
    normal_at(s) -> PointXY | None
    flatten(spacing) -> self
    add_vertex(point) -> self
    divide_at(s) -> int | None
    is_composite() -> bool
    children() -> list

`PathGroup` is the composite counterpart and `ClipGroup` a group whose first
child is a clip mask.
"""

from __future__ import annotations

__all__ = [
    "Bounds", "Polyline", "PathGroup", "ClipGroup", "PathItem",
    "PointXY",
]

import copy
import math
from numbers import Real
from typing import Any, Iterable, Iterator, NamedTuple, Optional, Sequence, TypeAlias, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray
from matplotlib.path import Path as mplPath
from matplotlib.transforms import Affine2D

from .color import HSLColor

numeric: TypeAlias = Union[int, float]
PointXY: TypeAlias = tuple[float, float]

EPSILON = 1e-9
CIRCLE_RESOLUTION = 16


def _as_point(p: Any, name: str = "point") -> PointXY:
    if p is None:
        raise TypeError(f"{name} must be an (x, y) pair, got None.")
    try:
        x, y = p
    except (TypeError, ValueError) as e:
        raise TypeError(f"{name} must be an (x, y) pair, got {p!r}.") from e
    if not isinstance(x, Real) or not isinstance(y, Real):
        raise TypeError(f"{name} coordinates must be numeric, got {p!r}.")
    return (float(x), float(y))


# ---------------------------------------------------------------------------
# Axis-aligned bounds
# ---------------------------------------------------------------------------
class Bounds(NamedTuple):
    """Axis-aligned rectangle `[x0, x1] x [y0, y1]` (y0 is the top edge)."""
    x0: float
    y0: float
    x1: float
    y1: float

    @classmethod
    def from_points(cls, points: ArrayLike) -> Bounds:
        pts = np.asarray(points, dtype=float).reshape(-1, 2)
        if pts.size == 0:
            raise ValueError("Cannot compute bounds of an empty point set.")
        (x0, y0), (x1, y1) = pts.min(axis=0), pts.max(axis=0)
        return cls(float(x0), float(y0), float(x1), float(y1))

    @classmethod
    def from_size(cls, x: float, y: float, width: float, height: float) -> Bounds:
        return cls(x, y, x + width, y + height)

    @property
    def width(self) -> float: return self.x1 - self.x0

    @property
    def height(self) -> float: return self.y1 - self.y0

    @property
    def center(self) -> PointXY:
        return ((self.x0 + self.x1) / 2.0, (self.y0 + self.y1) / 2.0)

    @property
    def top_left(self) -> PointXY: return (self.x0, self.y0)

    @property
    def top_right(self) -> PointXY: return (self.x1, self.y0)

    @property
    def bottom_left(self) -> PointXY: return (self.x0, self.y1)

    @property
    def bottom_right(self) -> PointXY: return (self.x1, self.y1)

    @property
    def bottom_center(self) -> PointXY: return ((self.x0 + self.x1) / 2.0, self.y1)

    def corners(self) -> tuple[PointXY, PointXY, PointXY, PointXY]:
        return (self.top_left, self.top_right, self.bottom_right, self.bottom_left)

    def contains(self, point: PointXY) -> bool:
        x, y = point
        return self.x0 <= x <= self.x1 and self.y0 <= y <= self.y1

    def union(self, other: Bounds) -> Bounds:
        return Bounds(min(self.x0, other.x0), min(self.y0, other.y0),
                      max(self.x1, other.x1), max(self.y1, other.y1))

    def scaled(self, factor: float) -> Bounds:
        """Scale about the center."""
        cx, cy = self.center
        hw, hh = self.width * factor / 2.0, self.height * factor / 2.0
        return Bounds(cx - hw, cy - hh, cx + hw, cy + hh)


# ---------------------------------------------------------------------------
# Polyline
# ---------------------------------------------------------------------------
class Polyline:
    """Mutable open or closed polyline with style and metadata.

    Args:
        points: Sequence of (x, y) vertices.
        closed: Whether an edge joins the last vertex back to the first.
        smooth: Export as a Bezier chain through the vertices.
        fill, stroke: Optional `HSLColor` (or anything `HSLColor.from_any`
            accepts).
        stroke_width: Stroke width in points.
    """

    __slots__ = ("_verts", "closed", "smooth", "fill", "stroke",
                 "stroke_width", "clip_mask", "meta")

    def __init__(self, points: Iterable[PointXY] = (), closed: bool = False, *,
                 smooth: bool = False, fill: Any = None, stroke: Any = None,
                 stroke_width: float = 1.0, meta: Optional[dict] = None) -> None:
        verts = np.asarray(list(points) if not isinstance(points, np.ndarray) else points,
                           dtype=float)
        if verts.size == 0:
            verts = np.empty((0, 2), dtype=float)
        if verts.ndim != 2 or verts.shape[1] != 2:
            raise ValueError(f"Expected an (N, 2) vertex array, got shape {verts.shape}.")
        self._verts: NDArray[np.float64] = verts.copy()
        self.closed = bool(closed)
        self.smooth = bool(smooth)
        self.fill = None if fill is None else HSLColor.from_any(fill)
        self.stroke = None if stroke is None else HSLColor.from_any(stroke)
        self.stroke_width = float(stroke_width)
        self.clip_mask = False
        self.meta: dict[str, Any] = dict(meta or {})

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------
    @classmethod
    def line(cls, a: PointXY, b: PointXY, **kwargs) -> Polyline:
        return cls([_as_point(a, "a"), _as_point(b, "b")], **kwargs)

    @classmethod
    def between(cls, a: PointXY, b: PointXY, samples: int = 10, **kwargs) -> Polyline:
        """`samples` evenly spaced vertices from `a` toward `b` (b itself excluded)."""
        if samples < 1:
            raise ValueError(f"samples must be >= 1, got {samples}.")
        a, b = np.array(_as_point(a, "a")), np.array(_as_point(b, "b"))
        t = np.arange(samples, dtype=float)[:, None] / samples
        return cls(a + (b - a) * t, **kwargs)

    @classmethod
    def rectangle(cls, bounds: Bounds, **kwargs) -> Polyline:
        kwargs.setdefault("closed", True)
        return cls(bounds.corners(), **kwargs)

    @classmethod
    def regular_polygon(cls, center: PointXY, sides: int, radius: float, **kwargs) -> Polyline:
        if sides < 3:
            raise ValueError(f"A regular polygon needs at least 3 sides, got {sides}.")
        cx, cy = _as_point(center, "center")
        theta = math.pi / 2.0 + np.arange(sides) * (2.0 * math.pi / sides)
        pts = np.column_stack([cx + radius * np.cos(theta), cy + radius * np.sin(theta)])
        kwargs.setdefault("closed", True)
        return cls(pts, **kwargs)

    @classmethod
    def circle(cls, center: PointXY, radius: float,
               resolution: int = CIRCLE_RESOLUTION, **kwargs) -> Polyline:
        kwargs.setdefault("smooth", True)
        path = cls.regular_polygon(center, resolution, radius, **kwargs)
        path.meta.update({"shape": "circle", "center": _as_point(center), "radius": float(radius)})
        return path

    @classmethod
    def ellipse(cls, bounds: Bounds, resolution: int = CIRCLE_RESOLUTION, **kwargs) -> Polyline:
        (cx, cy), rx, ry = bounds.center, bounds.width / 2.0, bounds.height / 2.0
        theta = np.arange(resolution) * (2.0 * math.pi / resolution)
        pts = np.column_stack([cx + rx * np.cos(theta), cy + ry * np.sin(theta)])
        kwargs.setdefault("closed", True)
        kwargs.setdefault("smooth", True)
        return cls(pts, **kwargs)

    @classmethod
    def star(cls, center: PointXY, points: int, radius1: float, radius2: float,
             **kwargs) -> Polyline:
        """Star alternating between `radius1` and `radius2` over 2*points vertices."""
        if points < 2:
            raise ValueError(f"A star needs at least 2 points, got {points}.")
        cx, cy = _as_point(center, "center")
        n = 2 * points
        theta = math.pi / 2.0 + np.arange(n) * (2.0 * math.pi / n)
        radii = np.where(np.arange(n) % 2 == 0, radius1, radius2)
        pts = np.column_stack([cx + radii * np.cos(theta), cy + radii * np.sin(theta)])
        kwargs.setdefault("closed", True)
        return cls(pts, **kwargs)

    # -------------------------------------------------------------------------
    # Vertex access
    # -------------------------------------------------------------------------
    @property
    def vertices(self) -> NDArray[np.float64]:
        """The (N, 2) vertex array. Writes go straight into the path."""
        return self._verts

    @vertices.setter
    def vertices(self, verts: ArrayLike) -> None:
        verts = np.asarray(verts, dtype=float).reshape(-1, 2)
        self._verts = verts.copy()

    def __len__(self) -> int:
        return len(self._verts)

    def is_composite(self) -> bool:
        return False

    def children(self) -> list:
        return []

    def add_vertex(self, point: PointXY) -> Polyline:
        self._verts = np.vstack([self._verts, _as_point(point)])
        return self

    def close(self) -> Polyline:
        self.closed = True
        return self

    # -------------------------------------------------------------------------
    # Arclength parameterization
    # -------------------------------------------------------------------------
    def _edges(self) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Edge start points and edge vectors (closing edge included if closed)."""
        v = self._verts
        if len(v) < 2:
            return np.empty((0, 2)), np.empty((0, 2))
        ends = np.vstack([v[1:], v[:1]]) if self.closed else v[1:]
        starts = v if self.closed else v[:-1]
        return starts, ends - starts

    def _cumulative(self) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
        starts, deltas = self._edges()
        lengths = np.hypot(deltas[:, 0], deltas[:, 1])
        offsets = np.concatenate([[0.0], np.cumsum(lengths)])
        return starts, deltas, offsets

    def length(self) -> float:
        _, _, offsets = self._cumulative()
        return float(offsets[-1])

    def _locate(self, s: float) -> Optional[tuple[int, float]]:
        """Edge index and local parameter in [0, 1] for arclength `s`."""
        if s is None or not isinstance(s, Real) or not math.isfinite(s):
            return None
        starts, deltas, offsets = self._cumulative()
        total = offsets[-1]
        if len(starts) == 0 or total <= EPSILON or s < -EPSILON or s > total + EPSILON:
            return None
        s = min(max(float(s), 0.0), total)
        lengths = np.diff(offsets)
        idx = int(np.searchsorted(offsets, s, side="right") - 1)
        idx = min(max(idx, 0), len(lengths) - 1)
        # Skip degenerate (zero-length) edges so tangents are defined
        while lengths[idx] <= EPSILON and idx + 1 < len(lengths):
            idx += 1
        while lengths[idx] <= EPSILON and idx > 0:
            idx -= 1
        t = 0.0 if lengths[idx] <= EPSILON else (s - offsets[idx]) / lengths[idx]
        return idx, min(max(t, 0.0), 1.0)

    def point_at(self, s: float) -> Optional[PointXY]:
        loc = self._locate(s)
        if loc is None:
            return None
        starts, deltas = self._edges()
        idx, t = loc
        p = starts[idx] + deltas[idx] * t
        return (float(p[0]), float(p[1]))

    def tangent_at(self, s: float) -> Optional[PointXY]:
        loc = self._locate(s)
        if loc is None:
            return None
        _, deltas = self._edges()
        dx, dy = deltas[loc[0]]
        norm = math.hypot(dx, dy)
        if norm <= EPSILON:
            return None
        return (float(dx / norm), float(dy / norm))

    def normal_at(self, s: float) -> Optional[PointXY]:
        tangent = self.tangent_at(s)
        if tangent is None:
            return None
        tx, ty = tangent
        return (ty, -tx)

    def divide_at(self, s: float) -> Optional[int]:
        """Insert a vertex at arclength `s`; returns its index.

        Returns the existing index if a vertex already sits at `s`, and None
        if `s` is outside the path.
        """
        loc = self._locate(s)
        if loc is None:
            return None
        idx, t = loc
        n = len(self._verts)
        if t <= EPSILON:
            return idx
        if t >= 1.0 - EPSILON:
            return (idx + 1) % n if self.closed else idx + 1
        point = self.point_at(s)
        self._verts = np.insert(self._verts, idx + 1, point, axis=0)
        return idx + 1

    def flatten(self, spacing: float) -> Polyline:
        """Resample every edge so no edge is longer than `spacing`.

        Original vertices are kept; each edge of length L gets
        ceil(L / spacing) - 1 evenly spaced interior vertices. The result is a
        straight-edged polyline (`smooth` is reset). Edges of non-finite
        length are kept as single edges.
        """
        if not isinstance(spacing, Real) or not spacing > 0:
            raise ValueError(f"spacing must be a positive number, got {spacing!r}.")
        starts, deltas = self._edges()
        if len(starts) == 0:
            return self
        lengths = np.hypot(deltas[:, 0], deltas[:, 1])
        pieces: list[NDArray[np.float64]] = []
        for start, delta, length in zip(starts, deltas, lengths):
            if not math.isfinite(length):
                pieces.append(start[None, :])
                continue
            steps = max(1, int(math.ceil(length / spacing)))
            t = np.arange(steps, dtype=float)[:, None] / steps
            pieces.append(start + delta * t)
        if not self.closed:
            pieces.append(self._verts[-1:])
        self._verts = np.vstack(pieces)
        self.smooth = False
        return self

    # -------------------------------------------------------------------------
    # Region queries
    # -------------------------------------------------------------------------
    def bounds(self) -> Bounds:
        return Bounds.from_points(self._verts)

    @property
    def center(self) -> PointXY:
        return self.bounds().center

    def _polygon(self) -> mplPath:
        v = self._verts
        return mplPath(np.vstack([v, v[:1]]), closed=True)

    def contains(self, point: PointXY) -> bool:
        """Point-in-polygon test on the straight-edged outline (open paths are
        treated as implicitly closed)."""
        if len(self._verts) < 3:
            return False
        return bool(self._polygon().contains_point(_as_point(point)))

    def contains_points(self, points: ArrayLike) -> NDArray[np.bool_]:
        pts = np.asarray(points, dtype=float).reshape(-1, 2)
        if len(self._verts) < 3:
            return np.zeros(len(pts), dtype=bool)
        return self._polygon().contains_points(pts)

    def contains_rect(self, bounds: Bounds) -> bool:
        return all(self.contains(corner) for corner in bounds.corners())

    def signed_area(self) -> float:
        """Shoelace area; positive when vertices run by increasing angle."""
        v = self._verts
        if len(v) < 3:
            return 0.0
        x, y = v[:, 0], v[:, 1]
        return float(0.5 * (np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))))

    # -------------------------------------------------------------------------
    # Transforms
    # -------------------------------------------------------------------------
    def transform(self, trans: Affine2D) -> Polyline:
        if len(self._verts):
            self._verts = trans.transform(self._verts)
        return self

    def rotate(self, angle_deg: float, origin: Optional[PointXY] = None) -> Polyline:
        """Rotate about `origin` (default: bounds center)."""
        if not len(self._verts):
            return self
        ox, oy = self.center if origin is None else _as_point(origin, "origin")
        return self.transform(Affine2D().rotate_deg_around(ox, oy, angle_deg))

    def translate(self, dx: float, dy: float) -> Polyline:
        return self.transform(Affine2D().translate(dx, dy))

    def scale(self, sx: float, sy: Optional[float] = None,
              origin: Optional[PointXY] = None) -> Polyline:
        """Scale about `origin` (default: bounds center)."""
        if not len(self._verts):
            return self
        sy = sx if sy is None else sy
        ox, oy = self.center if origin is None else _as_point(origin, "origin")
        trans = Affine2D().translate(-ox, -oy).scale(sx, sy).translate(ox, oy)
        return self.transform(trans)

    def copy(self) -> Polyline:
        clone = copy.copy(self)
        clone._verts = self._verts.copy()
        clone.meta = copy.deepcopy(self.meta)
        return clone

    def copy_style(self, other: Polyline) -> Polyline:
        self.fill, self.stroke = other.fill, other.stroke
        self.stroke_width = other.stroke_width
        return self

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------
    def to_mpl_path(self) -> mplPath:
        """Matplotlib Path: straight edges, or a cubic Bezier chain if smooth.

        Smoothing uses Catmull-Rom tangents (neighbor differences / 6) turned
        into Bezier handles, so the curve interpolates every vertex. Open ends
        reuse the end vertex as its own neighbor.
        """
        v = self._verts
        n = len(v)
        if n == 0:
            return mplPath(np.empty((0, 2)))
        if not self.smooth or n < 3:
            verts = v
            codes = [mplPath.MOVETO] + [mplPath.LINETO] * (n - 1)
            if self.closed:
                verts = np.vstack([v, v[:1]])
                codes.append(mplPath.CLOSEPOLY)
            return mplPath(verts, codes)

        if self.closed:
            prev_pts, next_pts = np.roll(v, 1, axis=0), np.roll(v, -1, axis=0)
        else:
            prev_pts = np.vstack([v[:1], v[:-1]])
            next_pts = np.vstack([v[1:], v[-1:]])
        handles = (next_pts - prev_pts) / 6.0

        segments = n if self.closed else n - 1
        verts = [v[0]]
        for i in range(segments):
            j = (i + 1) % n
            verts.extend([v[i] + handles[i], v[j] - handles[j], v[j]])
        codes = [mplPath.MOVETO] + [mplPath.CURVE4] * (3 * segments)
        if self.closed:
            verts.append(v[0])
            codes.append(mplPath.CLOSEPOLY)
        return mplPath(np.array(verts), codes)

    def __repr__(self) -> str:
        kind = "closed" if self.closed else "open"
        return f"<Polyline {kind} n={len(self._verts)} smooth={self.smooth}>"


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------
PathItem: TypeAlias = Union[Polyline, "PathGroup"]


class PathGroup:
    """Ordered composite of polylines and nested groups."""

    __slots__ = ("_children", "meta")

    def __init__(self, children: Iterable[PathItem] = (), meta: Optional[dict] = None) -> None:
        self._children: list[PathItem] = []
        self.meta: dict[str, Any] = dict(meta or {})
        self.add_children(children)

    def is_composite(self) -> bool:
        return True

    def children(self) -> list[PathItem]:
        return list(self._children)

    def add_child(self, child: PathItem) -> PathGroup:
        if not isinstance(child, (Polyline, PathGroup)):
            raise TypeError(f"Expected a Polyline or PathGroup, got {type(child).__name__}.")
        self._children.append(child)
        return self

    def add_children(self, children: Iterable[PathItem]) -> PathGroup:
        for child in children:
            self.add_child(child)
        return self

    def __len__(self) -> int:
        return len(self._children)

    def __iter__(self) -> Iterator[PathItem]:
        return iter(self._children)

    def iter_paths(self) -> Iterator[Polyline]:
        """Depth-first iteration over leaf polylines."""
        for child in self._children:
            if isinstance(child, PathGroup):
                yield from child.iter_paths()
            else:
                yield child

    def bounds(self) -> Bounds:
        leaves = [p for p in self.iter_paths() if len(p)]
        if not leaves:
            raise ValueError("Cannot compute bounds of an empty group.")
        result = leaves[0].bounds()
        for leaf in leaves[1:]:
            result = result.union(leaf.bounds())
        return result

    @property
    def center(self) -> PointXY:
        return self.bounds().center

    def length(self) -> float:
        return sum(p.length() for p in self.iter_paths())

    def transform(self, trans: Affine2D) -> PathGroup:
        for leaf in self.iter_paths():
            leaf.transform(trans)
        return self

    def rotate(self, angle_deg: float, origin: Optional[PointXY] = None) -> PathGroup:
        """Rotate every leaf about one common origin (default: group center)."""
        if not any(len(p) for p in self.iter_paths()):
            return self
        ox, oy = self.center if origin is None else _as_point(origin, "origin")
        return self.transform(Affine2D().rotate_deg_around(ox, oy, angle_deg))

    def translate(self, dx: float, dy: float) -> PathGroup:
        return self.transform(Affine2D().translate(dx, dy))

    def scale(self, sx: float, sy: Optional[float] = None,
              origin: Optional[PointXY] = None) -> PathGroup:
        if not any(len(p) for p in self.iter_paths()):
            return self
        sy = sx if sy is None else sy
        ox, oy = self.center if origin is None else _as_point(origin, "origin")
        return self.transform(Affine2D().translate(-ox, -oy).scale(sx, sy).translate(ox, oy))

    def set_style(self, **style: Any) -> PathGroup:
        """Apply `fill`, `stroke`, `stroke_width`, or `smooth` to every leaf."""
        allowed = {"fill", "stroke", "stroke_width", "smooth"}
        unknown = set(style) - allowed
        if unknown:
            raise ValueError(f"Unknown style keys: {sorted(unknown)}")
        for leaf in self.iter_paths():
            for key, value in style.items():
                if key in ("fill", "stroke") and value is not None:
                    value = HSLColor.from_any(value)
                setattr(leaf, key, value)
        return self

    def copy(self) -> PathGroup:
        clone = copy.copy(self)
        clone._children = [child.copy() for child in self._children]
        clone.meta = copy.deepcopy(self.meta)
        return clone

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} children={len(self._children)}>"


class ClipGroup(PathGroup):
    """Group whose first child is a clip mask applied to the remaining children."""

    __slots__ = ()

    def __init__(self, mask: Polyline, children: Iterable[PathItem] = (),
                 meta: Optional[dict] = None) -> None:
        if not isinstance(mask, Polyline):
            raise TypeError(f"Clip mask must be a Polyline, got {type(mask).__name__}.")
        mask.clip_mask = True
        super().__init__([mask], meta=meta)
        self.add_children(children)

    @property
    def mask(self) -> Polyline:
        return self._children[0]

    def content(self) -> list[PathItem]:
        return list(self._children[1:])
