"""
-------
conftest.py
-------
Shared pytest fixtures for papernoise tests.
"""

import pytest
import matplotlib
matplotlib.use("Agg")  # ensure headless backend for CI
import matplotlib.pyplot as plt

from papernoise.noise import NoiseContext, NoiseField
from papernoise.path import Bounds, Polyline
from papernoise.utils.rng import RNG


class ConstantSource:
  """Random source that always returns the same value."""

  def __init__(self, value: float = 0.5):
    self.value = value
    self.calls = 0

  def random(self) -> float:
    self.calls += 1
    return self.value


class SequenceSource:
  """Random source cycling through a fixed list of values."""

  def __init__(self, values):
    self.values = list(values)
    self.calls = 0

  def random(self) -> float:
    value = self.values[self.calls % len(self.values)]
    self.calls += 1
    return value


# -----------------------------------------------------------------------------
# Core Matplotlib fixtures
# -----------------------------------------------------------------------------
@pytest.fixture(scope="function")
def fig_ax():
  """
  Create and yield an isolated Matplotlib Figure/Axes pair.

  The figure is automatically closed after the test to avoid memory leaks.
  """
  fig, ax = plt.subplots(figsize=(4, 3))
  yield fig, ax
  plt.close(fig)


# -----------------------------------------------------------------------------
# Random sources and noise
# -----------------------------------------------------------------------------
@pytest.fixture
def fixed_rng() -> RNG:
  """Deterministic RNG (stdlib backend)."""
  return RNG(seed=123)


@pytest.fixture
def constant_source() -> ConstantSource:
  return ConstantSource(0.5)


@pytest.fixture
def noise_field() -> NoiseField:
  return NoiseField(RNG(seed=42))


@pytest.fixture
def ctx() -> NoiseContext:
  return NoiseContext.create(RNG(seed=7))


# -----------------------------------------------------------------------------
# Geometry
# -----------------------------------------------------------------------------
@pytest.fixture
def square() -> Polyline:
  """Closed 100x100 square at the origin."""
  return Polyline.rectangle(Bounds(0, 0, 100, 100))


@pytest.fixture
def hline() -> Polyline:
  """Open horizontal 100-unit line."""
  return Polyline.line((0, 0), (100, 0))
