"""
flow_field.py
-------------

Angle grids over a rectangle and curves traced through them.

A `FlowField` stores one angle (radians) per grid node; node (i, j) sits at
`origin + (j * cell_w, i * cell_h)` with `cell = size / (count - 1)`, so the
outermost rows and columns lie on the rectangle's edges. Generators fill the
grid in place:

    BASIC   angle = i / rows * pi          (rows sweep from 0 to ~pi)
    NOISE   angle = map(noise(i*f, j*f, 0), 0, 1, 0, 2pi)

`trace_curve` walks a field with fixed steps; `noise_walk` walks the noise
field directly (the "paint stroke" walk), with no grid involved.
"""

from __future__ import annotations

__all__ = ["FieldKind", "FlowField", "generate_field", "trace_curve", "noise_walk"]

import math
import logging
from enum import Enum
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from .noise import NoiseField
from .path import Bounds, Polyline, PointXY
from .random_utils import map_range

logger = logging.getLogger(__name__)


class FieldKind(str, Enum):
    BASIC = "basic"
    NOISE = "noise"


class FlowField:
    """Grid of `rows x cols` angles spanning `bounds`."""

    def __init__(self, bounds: Bounds, rows: int = 50, cols: int = 50) -> None:
        if rows < 2 or cols < 2:
            raise ValueError(f"A flow field needs at least 2 rows and 2 columns, got {rows}x{cols}.")
        if bounds.width <= 0 or bounds.height <= 0:
            raise ValueError(f"Flow field bounds must have positive size, got {bounds}.")
        self.bounds = Bounds(*bounds)
        self.rows = int(rows)
        self.cols = int(cols)
        self.cell = (bounds.width / (self.cols - 1), bounds.height / (self.rows - 1))
        self.grid: NDArray[np.float64] = np.empty((self.rows, self.cols), dtype=float)
        self.init()

    def init(self) -> None:
        """Reset the grid to the BASIC pattern."""
        generate_field(self, FieldKind.BASIC)

    def node(self, row: int, col: int) -> PointXY:
        return (self.bounds.x0 + self.cell[0] * col, self.bounds.y0 + self.cell[1] * row)

    def query(self, point: PointXY) -> Optional[float]:
        """Angle of the nearest grid node, or None outside the grid."""
        x, y = point
        if not (math.isfinite(x) and math.isfinite(y)):
            return None
        col = int(math.floor((x - self.bounds.x0) / self.cell[0] + 0.5))
        row = int(math.floor((y - self.bounds.y0) / self.cell[1] + 0.5))
        if col < 0 or row < 0 or col > self.cols - 1 or row > self.rows - 1:
            return None
        return float(self.grid[row, col])

    def arrows(self, arrow_length: float = 10.0) -> list[Polyline]:
        """One short segment per node pointing along its angle (debug view)."""
        out = []
        for i in range(self.rows):
            for j in range(self.cols):
                x, y = self.node(i, j)
                angle = self.grid[i, j]
                out.append(Polyline.line((x, y), (x + math.cos(angle) * arrow_length,
                                                  y + math.sin(angle) * arrow_length)))
        return out

    def __repr__(self) -> str:
        return f"<FlowField {self.rows}x{self.cols} bounds={tuple(self.bounds)}>"


def generate_field(field: FlowField, kind: FieldKind = FieldKind.BASIC,
                   noise: Optional[NoiseField] = None, frequency: float = 0.15) -> FlowField:
    """Fill `field.grid` in place with the `kind` pattern; returns the field."""
    if not isinstance(field, FlowField):
        raise TypeError(f"Expected a FlowField, got {type(field).__name__}.")
    kind = FieldKind(kind)

    rows = np.arange(field.rows, dtype=float)[:, None]
    if kind is FieldKind.BASIC:
        field.grid[:, :] = np.broadcast_to(rows / field.rows * math.pi, field.grid.shape)
    else:
        if noise is None:
            raise ValueError("FieldKind.NOISE requires a NoiseField.")
        cols = np.arange(field.cols, dtype=float)[None, :]
        ii, jj = np.broadcast_arrays(rows * frequency, cols * frequency)
        n = noise.sample_array(ii, jj, np.zeros_like(ii))
        field.grid[:, :] = map_range(n, 0.0, 1.0, 0.0, 2.0 * math.pi)

    logger.debug(f"generate_field(): {kind.value} over {field.rows}x{field.cols}")
    return field


def trace_curve(field: FlowField, start: PointXY, steps: int = 100,
                step_size: float = 5.0) -> Polyline:
    """Follow the field from `start` until it leaves the grid or `steps` run out.

    Every visited position (including the one that left the field) becomes a
    vertex; the curve is smoothed.
    """
    if not isinstance(field, FlowField):
        raise TypeError(f"Expected a FlowField, got {type(field).__name__}.")
    path = Polyline(smooth=True)
    x, y = float(start[0]), float(start[1])
    for _ in range(int(steps)):
        path.add_vertex((x, y))
        angle = field.query((x, y))
        if angle is None:
            break
        x += step_size * math.cos(angle)
        y += step_size * math.sin(angle)
    return path


def noise_walk(noise: NoiseField, start: PointXY, steps: int, step_size: float = 5.0,
               frequency: float = 0.0095, z: float = 0.0) -> Polyline:
    """Walk `steps` vertices with heading `noise(x*f, y*f, z) * 2pi`.

    0.0095 gives long sweeping strokes; about 0.02 gives a bunched-up look.
    """
    if not isinstance(noise, NoiseField):
        raise TypeError(f"Expected a NoiseField, got {type(noise).__name__}.")
    path = Polyline(smooth=True)
    x, y = float(start[0]), float(start[1])
    for _ in range(int(steps)):
        path.add_vertex((x, y))
        angle = noise.sample(x * frequency, y * frequency, z) * (math.pi * 2.0)
        x += step_size * math.cos(angle)
        y += step_size * math.sin(angle)
    return path
