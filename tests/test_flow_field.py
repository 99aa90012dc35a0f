"""
test_flow_field.py
------------------
Unit tests for papernoise.flow_field
"""

import math

import numpy as np
import pytest

from papernoise.flow_field import FieldKind, FlowField, generate_field, noise_walk, trace_curve
from papernoise.path import Bounds


# ---------------------------------------------------------------------------
# 1. Grid
# ---------------------------------------------------------------------------

def test_cell_size_spans_edges():
  field = FlowField(Bounds(0, 0, 490, 245), rows=50, cols=50)
  assert field.cell == pytest.approx((10.0, 5.0))
  assert field.node(49, 49) == pytest.approx((490, 245))


def test_basic_pattern_is_default():
  field = FlowField(Bounds(0, 0, 100, 100), rows=4, cols=3)
  expected = np.array([0, 0.25, 0.5, 0.75]) * math.pi
  assert np.allclose(field.grid, expected[:, None])


def test_query_rounds_to_nearest_node():
  field = FlowField(Bounds(10, 10, 110, 110), rows=11, cols=11)
  field.grid[3, 7] = 1.25
  assert field.query((10 + 7 * 10 + 4, 10 + 3 * 10 - 4)) == 1.25


def test_query_rounds_half_cells_up():
  field = FlowField(Bounds(0, 0, 100, 100), rows=11, cols=11)
  field.grid[0, 3] = 1.5
  field.grid[3, 0] = -1.5
  assert field.query((25, 0)) == 1.5
  assert field.query((0, 25)) == -1.5


@pytest.mark.parametrize("point", [(-10, 50), (50, 200), (float("nan"), 5)])
def test_query_outside_returns_none(point):
  field = FlowField(Bounds(0, 0, 100, 100))
  assert field.query(point) is None


def test_invalid_grid():
  with pytest.raises(ValueError):
    FlowField(Bounds(0, 0, 100, 100), rows=1)
  with pytest.raises(ValueError):
    FlowField(Bounds(0, 0, 0, 100))


# ---------------------------------------------------------------------------
# 2. Generators
# ---------------------------------------------------------------------------

def test_noise_generator(noise_field):
  field = FlowField(Bounds(0, 0, 100, 100), rows=6, cols=5)
  generate_field(field, FieldKind.NOISE, noise_field, frequency=0.15)
  i, j = 4, 3
  n = noise_field.sample(i * 0.15, j * 0.15, 0.0)
  assert field.grid[i, j] == pytest.approx(n * 2 * math.pi)
  # Node (0, 0) is a lattice point
  assert field.grid[0, 0] == 0.0


def test_noise_generator_requires_noise():
  field = FlowField(Bounds(0, 0, 100, 100))
  with pytest.raises(ValueError):
    generate_field(field, FieldKind.NOISE)


def test_generate_field_rejects_non_field():
  with pytest.raises(TypeError):
    generate_field("grid", FieldKind.BASIC)


def test_init_resets_to_basic(noise_field):
  field = FlowField(Bounds(0, 0, 100, 100), rows=5, cols=5)
  generate_field(field, "noise", noise_field)
  field.init()
  assert np.allclose(field.grid[:, 0], np.arange(5) / 5 * math.pi)


# ---------------------------------------------------------------------------
# 3. Curves
# ---------------------------------------------------------------------------

def test_trace_curve_follows_field():
  field = FlowField(Bounds(0, 0, 100, 100), rows=11, cols=11)
  field.grid[:, :] = 0.0  # everything points along +x
  curve = trace_curve(field, (0, 50), steps=100, step_size=10)
  # 0, 10, ..., 100 are inside; 110 is recorded and then the walk stops
  assert len(curve) == 12
  assert curve.smooth
  assert np.allclose(curve.vertices[:, 1], 50)


def test_trace_curve_step_limit():
  field = FlowField(Bounds(0, 0, 100, 100))
  field.grid[:, :] = math.pi / 2
  assert len(trace_curve(field, (50, 0), steps=5, step_size=1)) == 5


def test_noise_walk(noise_field):
  curve = noise_walk(noise_field, (100, 100), steps=30, step_size=5)
  steps = np.hypot(*np.diff(curve.vertices, axis=0).T)
  assert len(curve) == 30
  assert np.allclose(steps, 5)
  again = noise_walk(noise_field, (100, 100), steps=30, step_size=5)
  assert np.array_equal(curve.vertices, again.vertices)
