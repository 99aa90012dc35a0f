"""
test_displace.py
----------------
Unit tests for papernoise.displace
"""

import numpy as np
import pytest

from papernoise.displace import displace, wiggle
from papernoise.noise import NoiseContext, NoiseField
from papernoise.path import Bounds, PathGroup, Polyline
from papernoise.utils.rng import RNG


def _blob():
    return Polyline.regular_polygon((200, 200), 12, 80)


# ---------------------------------------------------------------------------
# 1. Determinism and seed sensitivity
# ---------------------------------------------------------------------------

def test_same_context_same_output(ctx):
    a = displace(_blob(), ctx, 6, 30, 10)
    b = displace(_blob(), ctx, 6, 30, 10)
    assert np.array_equal(a.vertices, b.vertices)


def test_different_seeds_differ():
    a = displace(_blob(), NoiseContext.create(RNG(seed=1)), 6, 30, 10)
    b = displace(_blob(), NoiseContext.create(RNG(seed=2)), 6, 30, 10)
    assert a.vertices.shape == b.vertices.shape
    assert not np.allclose(a.vertices, b.vertices)


def test_seed_offset_alone_changes_output(noise_field):
    a = displace(_blob(), NoiseContext(noise_field, 10.3), 6, 30, 10)
    b = displace(_blob(), NoiseContext(noise_field, 77.7), 6, 30, 10)
    assert not np.allclose(a.vertices, b.vertices)


# ---------------------------------------------------------------------------
# 2. Displacement formula
# ---------------------------------------------------------------------------

def test_vertex_offsets_follow_noise(ctx):
    """Without resampling, each vertex moves by amplitude * (nx, ny)."""
    p = Polyline([(13.0, 7.0), (14.0, 7.5)])
    before = p.vertices.copy()
    displace(p, ctx, sample_distance=50, noise_scale=4.0, amplitude=3.0)
    s = ctx.seed
    for (vx, vy), (wx, wy) in zip(before, p.vertices):
        nx = ctx.field.sample(vx / 4.0, vy / 4.0, s)
        ny = ctx.field.sample(vy / 4.0, s, vx / 4.0)
        assert wx == pytest.approx(vx + nx * 3.0)
        assert wy == pytest.approx(vy + ny * 3.0)


def test_displacement_is_bounded_by_amplitude(ctx):
    p = _blob()
    displace(p, ctx, sample_distance=1e9, noise_scale=30, amplitude=5)
    ref = Polyline.regular_polygon((200, 200), 12, 80).vertices
    assert np.all(np.abs(p.vertices - ref) <= 5.0 + 1e-9)


def test_long_paths_are_resampled(ctx):
    p = Polyline.line((0, 0), (120, 0))
    displace(p, ctx, sample_distance=6, noise_scale=30, amplitude=1)
    assert len(p) == 21


def test_short_paths_keep_vertex_count(ctx):
    p = Polyline.line((0, 0), (5, 0))
    displace(p, ctx, sample_distance=6, noise_scale=30, amplitude=1)
    assert len(p) == 2


def test_smooth_flag(ctx):
    assert displace(_blob(), ctx).smooth
    assert not displace(_blob(), ctx, smooth=False).smooth


# ---------------------------------------------------------------------------
# 3. Groups and contracts
# ---------------------------------------------------------------------------

def test_group_recursion(ctx):
    a, b = _blob(), Polyline.rectangle(Bounds(0, 0, 50, 50))
    group = PathGroup([a, PathGroup([b])])
    ref_a = displace(_blob(), ctx)
    assert displace(group, ctx) is group
    assert np.array_equal(a.vertices, ref_a.vertices)
    assert b.smooth


def test_rejects_bad_arguments(ctx):
    with pytest.raises(TypeError):
        displace(None, ctx)
    with pytest.raises(TypeError):
        displace(_blob(), NoiseField(RNG(seed=1)))
    with pytest.raises(ValueError):
        displace(_blob(), ctx, noise_scale=0)
    with pytest.raises(ValueError):
        displace(_blob(), ctx, sample_distance=0)


def test_non_finite_vertices_do_not_raise(ctx):
    p = Polyline([(np.nan, 0.0), (1.0, 1.0)])
    displace(p, ctx, sample_distance=1e9)
    assert np.isnan(p.vertices[0]).all()


def test_infinite_vertex_does_not_raise(ctx):
    p = Polyline([(0.0, 0.0), (np.inf, 0.0)])
    displace(p, ctx)
    assert len(p) == 2
    assert np.isfinite(p.vertices[0]).all()
    assert not np.isfinite(p.vertices[1]).all()


# ---------------------------------------------------------------------------
# 4. Wiggle
# ---------------------------------------------------------------------------

def test_wiggle_subdivides_then_displaces(ctx):
    line = Polyline.line((0, 0), (40, 0))
    wiggle(line, ctx, stops=4, freq=5, amp=1, sample_distance=1e9)
    assert len(line) == 5
    assert line.smooth
    assert not np.allclose(line.vertices[:, 1], 0)


def test_wiggle_zero_stops(ctx):
    line = Polyline.line((0, 0), (3, 0))
    wiggle(line, ctx, stops=0)
    assert len(line) == 2
