"""
papernoise
----------

Gradient noise and the hand-drawn path effects built on it: vertex
displacement, tapered stroke outlines, grain speckle and hatch shading over a
small matplotlib-backed path model.
"""

from .noise import GRAD3, NoiseContext, NoiseField
from .color import BLACK, WHITE, HSLColor
from .path import Bounds, ClipGroup, PathGroup, Polyline
from .random_utils import (
    lerp, map_range, random_hsl, random_in_circle, random_in_rect,
    random_point, uniform,
)
from .displace import displace, wiggle
from .stroke import taper_scale, thicken, widen
from .grain import scatter
from .hatch import (
    HatchPreset, choose_preset, cover_hatch, flow_hatch, hatch, normal_hatch,
    star_hatch,
)
from .flow_field import FieldKind, FlowField, generate_field, noise_walk, trace_curve
from .packing import pack_circles, pack_rectangles
from .presets import (
    BlossomCenter, BlossomLeaves, GrowPreset, LineRenderPreset, blossom_center,
    blossom_leaves, choose, flower, grow_points, render_line,
)
from .render import add_to_axes, render_to_file
from .utils import RNG, configure_logging, get_rng, set_global_seed

__version__ = "0.1.0"

__all__ = [
    # noise
    "GRAD3", "NoiseField", "NoiseContext",
    # geometry
    "Bounds", "Polyline", "PathGroup", "ClipGroup",
    "HSLColor", "BLACK", "WHITE",
    # sampling
    "uniform", "random_point", "random_in_rect", "random_in_circle",
    "random_hsl", "lerp", "map_range",
    # effects
    "displace", "wiggle", "widen", "thicken", "taper_scale", "scatter",
    "HatchPreset", "choose_preset", "hatch",
    "cover_hatch", "normal_hatch", "star_hatch", "flow_hatch",
    # supplements
    "FieldKind", "FlowField", "generate_field", "trace_curve", "noise_walk",
    "pack_rectangles", "pack_circles",
    "GrowPreset", "LineRenderPreset", "BlossomCenter", "BlossomLeaves",
    "choose", "grow_points", "render_line", "blossom_center", "blossom_leaves",
    "flower",
    "add_to_axes", "render_to_file",
    # utils
    "RNG", "get_rng", "set_global_seed", "configure_logging",
]
