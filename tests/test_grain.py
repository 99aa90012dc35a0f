"""
test_grain.py
-------------
Unit tests for papernoise.grain
"""

import pytest

from conftest import ConstantSource
from papernoise.color import BLACK, HSLColor
from papernoise.grain import scatter
from papernoise.path import Bounds, Polyline
from papernoise.utils.rng import RNG


def _triangle():
    # Fills half of its bounding box
    return Polyline([(0, 0), (100, 0), (0, 100)], closed=True, fill=HSLColor(120, 0.5, 0.5))


# ---------------------------------------------------------------------------
# 1. Count and containment
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("seed", [1, 2, 3])
def test_count_bounded_and_contained(seed):
    region = _triangle()
    dots = scatter(region, RNG(seed=seed), max_points=300)
    assert len(dots) <= 300
    for dot in dots:
        assert region.contains(dot.meta["center"])


def test_rejection_rate_tracks_fill_ratio():
    dots = scatter(_triangle(), RNG(seed=5), max_points=2000)
    assert 0.4 < len(dots) / 2000 < 0.6


def test_full_box_region_accepts_interior_points(square):
    dots = scatter(square, ConstantSource(0.5), max_points=7)
    assert len(dots) == 7


def test_zero_points(square):
    assert len(scatter(square, RNG(seed=1), max_points=0)) == 0


# ---------------------------------------------------------------------------
# 2. Dot style
# ---------------------------------------------------------------------------

def test_dot_radius_and_color():
    region = _triangle()
    dots = scatter(region, RNG(seed=9), max_points=200, min_size=0.5, max_size=1.5,
                   hue_var=10, sat_var=0.1, light_var=0.1, alpha=0.3)
    assert len(dots) > 0
    for dot in dots:
        assert 0.5 <= dot.meta["radius"] < 1.5
        assert dot.closed and dot.smooth
        assert dot.fill.alpha == pytest.approx(0.3)
        dh = (dot.fill.hue - 120 + 180) % 360 - 180
        assert abs(dh) <= 10 + 1e-9
        assert abs(dot.fill.saturation - 0.5) <= 0.1 + 1e-9


def test_region_fill_untouched():
    region = _triangle()
    fill = region.fill
    verts = region.vertices.copy()
    scatter(region, RNG(seed=3), max_points=50)
    assert region.fill == fill
    assert (region.vertices == verts).all()


def test_unfilled_region_uses_black(square):
    dots = scatter(square, ConstantSource(0.5), max_points=1, hue_var=0, sat_var=0, light_var=0)
    assert dots.children()[0].fill == BLACK.shifted(alpha=0.5)


# ---------------------------------------------------------------------------
# 3. Falloff and contracts
# ---------------------------------------------------------------------------

def test_falloff_rejects_center():
    """A candidate at the exact center has falloff 0 and is always rejected."""
    region = Polyline.rectangle(Bounds(0, 0, 10, 10))
    assert len(scatter(region, ConstantSource(0.5), max_points=20, falloff=True)) == 0


def test_contracts(square):
    with pytest.raises(TypeError):
        scatter(None)
    with pytest.raises(ValueError):
        scatter(square, RNG(seed=1), min_size=2, max_size=1)
    with pytest.raises(ValueError):
        scatter(square, RNG(seed=1), max_points=-1)
