"""
test_stroke.py
--------------
Unit tests for papernoise.stroke
"""

import math

import numpy as np
import pytest

from conftest import ConstantSource, SequenceSource
from papernoise.color import HSLColor
from papernoise.path import Polyline
from papernoise.stroke import sample_positions, taper_scale, thicken, widen


def _width_at(outline: Polyline, i: int, samples: int) -> float:
    """Distance between forward vertex i and its mirrored backward vertex."""
    v = outline.vertices
    a, b = v[i], v[2 * samples - 1 - i]
    return float(math.hypot(*(a - b)))


# ---------------------------------------------------------------------------
# 1. Profile helpers
# ---------------------------------------------------------------------------

def test_taper_scale_profile():
    assert taper_scale(0, 21) == pytest.approx(0.0)
    assert taper_scale(20, 21) == pytest.approx(0.0)
    assert taper_scale(10, 21) == pytest.approx(1.0)
    assert taper_scale(5, 21) == pytest.approx(taper_scale(15, 21))


def test_sample_positions_clamped():
    pos = sample_positions(100.0, 4)
    assert pos == pytest.approx([1.0, 100 / 3, 200 / 3, 99.0])


# ---------------------------------------------------------------------------
# 2. Widen
# ---------------------------------------------------------------------------

def test_widen_closed_with_two_passes(hline, fixed_rng):
    out = widen(hline, fixed_rng, sample_count=20, taper=False)
    assert out.closed and out.smooth
    assert len(out) == 40


def test_widen_constant_width_without_taper(hline, fixed_rng):
    out = widen(hline, fixed_rng, 3, 6, sample_count=21, thinning_probability=0.0, taper=False)
    t = out.meta["thickness"]
    assert 3 <= t < 6
    for i in (0, 10, 20):
        assert _width_at(out, i, 21) == pytest.approx(t)


def test_widen_tapered_ends(hline, fixed_rng):
    out = widen(hline, fixed_rng, 4, 4, sample_count=21, thinning_probability=0.0, taper=True)
    assert _width_at(out, 0, 21) == pytest.approx(0.0, abs=1e-9)
    assert _width_at(out, 20, 21) == pytest.approx(0.0, abs=1e-9)
    assert _width_at(out, 10, 21) == pytest.approx(4.0)


def test_widen_symmetric_about_centerline(fixed_rng):
    center = Polyline([(0, 0), (30, 20), (80, 10)])
    out = widen(center, fixed_rng, 5, 5, sample_count=12, thinning_probability=0.0)
    v = out.vertices
    for i in range(12):
        mid = (v[i] + v[23 - i]) / 2
        s = sample_positions(center.length(), 12)[i]
        assert mid == pytest.approx(center.point_at(s))


def test_widen_rectangle_scenario(hline):
    out = widen(hline, ConstantSource(0.5), 10, 10, sample_count=4,
                thinning_probability=0.0, taper=False)
    b = out.bounds()
    assert len(out) == 8
    assert b.height == pytest.approx(10)
    assert b.width == pytest.approx(100, abs=2.5)


def test_widen_thinning_halves_thickness(hline):
    # thickness draw 0.5 -> 5, then thinning draw 0.0 < 0.5
    out = widen(hline, SequenceSource([0.5, 0.0]), 0, 10, thinning_probability=0.5, taper=False)
    assert out.meta["thickness"] == pytest.approx(2.5)
    assert out.meta["thinned"]


def test_widen_always_draws_twice(hline):
    src = ConstantSource(0.9)
    widen(hline, src, thinning_probability=0.0)
    assert src.calls == 2


def test_widen_copies_fill_and_leaves_centerline(hline, fixed_rng):
    hline.fill = HSLColor(20, 0.5, 0.5)
    before = hline.vertices.copy()
    out = widen(hline, fixed_rng)
    assert out.fill == hline.fill
    assert np.array_equal(hline.vertices, before)


def test_widen_degenerate_centerline_skips_samples(fixed_rng):
    out = widen(Polyline([(5, 5), (5, 5)]), fixed_rng)
    assert len(out) == 0
    assert out.closed


def test_widen_contracts(hline, fixed_rng):
    with pytest.raises(TypeError):
        widen(None, fixed_rng)
    with pytest.raises(ValueError):
        widen(hline, fixed_rng, min_thickness=5, max_thickness=2)
    with pytest.raises(ValueError):
        widen(hline, fixed_rng, sample_count=1)
    with pytest.raises(ValueError):
        widen(hline, fixed_rng, sample_count=12.0)


def test_widen_accepts_numpy_integer_count(hline, fixed_rng):
    out = widen(hline, fixed_rng, sample_count=np.int64(12))
    assert len(out) == 24


# ---------------------------------------------------------------------------
# 3. Thicken
# ---------------------------------------------------------------------------

def test_thicken_constant_width(hline):
    hline.fill = HSLColor(0, 0.5, 0.5, alpha=0.3)
    out = thicken(hline, 6, samples=20, offset=2)
    assert len(out) == 2 * 18
    assert not out.smooth
    assert out.bounds().height == pytest.approx(6)
    assert out.fill.lightness == pytest.approx(0.4)
    assert out.fill.alpha == 1.0


def test_thicken_contracts(hline):
    with pytest.raises(ValueError):
        thicken(hline, 2, samples=10, offset=10)
