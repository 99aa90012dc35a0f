"""
test_hatch.py
-------------
Unit tests for papernoise.hatch
"""

import math

import numpy as np
import pytest

from conftest import ConstantSource, SequenceSource
from papernoise.hatch import (
    PRESET_WEIGHTS, HatchPreset, choose_preset, cover_hatch, flow_hatch, hatch,
    normal_hatch, star_hatch,
)
from papernoise.path import Bounds, ClipGroup, PathGroup, Polyline
from papernoise.utils.rng import RNG


def _region():
    return Polyline.regular_polygon((150, 150), 10, 60)


# ---------------------------------------------------------------------------
# 1. Preset selection
# ---------------------------------------------------------------------------

def test_weights_sum_to_one():
    assert sum(PRESET_WEIGHTS.values()) == pytest.approx(1.0)


@pytest.mark.parametrize("draw, expected", [
    (0.0, HatchPreset.NORMAL),
    (0.32, HatchPreset.NORMAL),
    (0.33, HatchPreset.COVER),
    (0.79, HatchPreset.COVER),
    (0.85, HatchPreset.STAR),
    (0.95, HatchPreset.FLOW),
])
def test_choose_preset_thresholds(draw, expected):
    assert choose_preset(ConstantSource(draw)) is expected


# ---------------------------------------------------------------------------
# 2. Common contract
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("preset", list(HatchPreset))
def test_every_preset_returns_clip_group(preset, ctx):
    region = _region()
    clip = hatch(region, preset, ctx, RNG(seed=4))
    assert isinstance(clip, ClipGroup)
    assert clip.mask.clip_mask
    assert clip.mask is not region
    assert clip.meta["preset"] == preset.value
    strokes = [p for item in clip.content()
               for p in (item.iter_paths() if isinstance(item, PathGroup) else [item])]
    assert strokes
    assert all(p.stroke is not None for p in strokes)


@pytest.mark.parametrize("preset", list(HatchPreset))
def test_presets_are_deterministic(preset, ctx):
    a = hatch(_region(), preset, ctx, RNG(seed=8))
    b = hatch(_region(), preset, ctx, RNG(seed=8))
    va = np.vstack([p.vertices for p in a.iter_paths()])
    vb = np.vstack([p.vertices for p in b.iter_paths()])
    assert np.array_equal(va, vb)


def test_hatch_accepts_string_preset(ctx):
    assert hatch(_region(), "star", ctx, RNG(seed=1)).meta["preset"] == "star"


def test_hatch_contracts(ctx):
    with pytest.raises(ValueError):
        hatch(_region(), "zigzag", ctx, RNG(seed=1))
    with pytest.raises(TypeError):
        hatch(_region(), HatchPreset.COVER, None, RNG(seed=1))
    with pytest.raises(TypeError):
        hatch(None, HatchPreset.COVER, ctx, RNG(seed=1))
    with pytest.raises(ValueError):
        hatch(Polyline.line((0, 0), (1, 1)), HatchPreset.STAR, ctx, RNG(seed=1))


# ---------------------------------------------------------------------------
# 3. Preset specifics
# ---------------------------------------------------------------------------

def test_cover_line_count_and_rotation(ctx):
    # steps = 10 + 0.5 * 10 = 15; no scribbles, no cross family (0.5 is not < 0.5)
    region = Polyline.rectangle(Bounds(0, 0, 150, 60))
    before = region.vertices.copy()
    clip = cover_hatch(region, ctx, ConstantSource(0.5))
    family = clip.content()[0]
    assert len(family) == 15
    assert "cross" not in clip.meta
    # angle = uniform(-10, 10) at 0.5 is 0: the region is unchanged
    assert clip.meta["angle"] == 0
    assert np.allclose(region.vertices, before)


def test_cover_rotates_region(ctx):
    # steps 15, no scribbles, no cross family, angle = -10 + 0.75 * 20 = 5
    src = SequenceSource([0.5] + [0.9] * 16 + [0.75])
    region = Polyline.rectangle(Bounds(0, 0, 150, 60))
    clip = cover_hatch(region, ctx, src)
    assert clip.meta["angle"] == pytest.approx(5.0)
    theta = math.radians(5.0)
    # (0, 0) turned 5 degrees about the center (75, 30)
    expected = (75 - 75 * math.cos(theta) + 30 * math.sin(theta),
                30 - 75 * math.sin(theta) - 30 * math.cos(theta))
    assert tuple(region.vertices[0]) == pytest.approx(expected)
    assert region.center == pytest.approx((75, 30))


def test_cover_cross_family(ctx):
    # steps draw 0.5, no scribbles (0.9), cross family (0.1), rest 0.5
    src = SequenceSource([0.5] + [0.9] * 15 + [0.1] + [0.9] * 4 + [0.5, 0.5])
    region = Polyline.rectangle(Bounds(0, 0, 150, 60))
    clip = cover_hatch(region, ctx, src)
    assert clip.meta["cross"]
    family = clip.content()[0]
    # 15 vertical lines followed by the nested rotated horizontal family
    assert isinstance(family.children()[-1], PathGroup)
    assert len(family.children()[-1]) == 6


def test_normal_hatch_strokes_point_inward(ctx):
    region = Polyline.regular_polygon((0, 0), 40, 100)
    clip = normal_hatch(region, ctx, SequenceSource([0.0, 0.5, 0.0, 0.0, 0.5]),
                        radius=100)
    # One layer over the first 30% of the boundary; every stroke ends closer
    # to the center than it starts
    assert clip.meta["layers"] == 1
    for line in clip.content():
        start, end = line.vertices[0], line.vertices[-1]
        assert np.hypot(*end) < np.hypot(*start)


def test_normal_hatch_layer_count(ctx):
    for draw, layers in [(0.0, 1), (0.5, 2), (0.99, 3)]:
        clip = normal_hatch(_region(), ctx, ConstantSource(draw))
        assert clip.meta["layers"] == layers


def test_star_hatch_steps(ctx):
    # floor(1 + 0.5 * 14) = 8 lines
    clip = star_hatch(_region(), ctx, ConstantSource(0.5))
    assert clip.meta["steps"] == 8
    assert len(clip.content()) == 8


def test_flow_mask_is_bounds_rectangle(ctx):
    region = _region()
    clip = flow_hatch(region, ctx, RNG(seed=2))
    assert len(clip.mask) > 4 and clip.mask.smooth
    assert len(clip.content()) == 1
    assert isinstance(clip.content()[0], PathGroup)


# ---------------------------------------------------------------------------
# 4. Non-finite regions
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("builder", [star_hatch, flow_hatch, cover_hatch])
def test_non_finite_region_does_not_raise(builder, ctx):
    region = Polyline([(0, 0), (50, 0), (50, 50), (np.nan, 10)], closed=True)
    clip = builder(region, ctx, RNG(seed=1))
    assert isinstance(clip, ClipGroup)


def test_infinite_region_does_not_raise(ctx):
    region = Polyline([(0, 0), (np.inf, 0), (50, 50)], closed=True)
    clip = star_hatch(region, ctx, RNG(seed=1))
    assert isinstance(clip, ClipGroup)
