"""
color.py
--------

HSL color records used for fills and strokes.

Channel policy (applied on every construction, so jittered copies are always
valid):
  - hue is in degrees and wraps modulo 360;
  - saturation, lightness, and alpha are clamped to [0, 1].
"""

from __future__ import annotations

__all__ = ["HSLColor", "BLACK", "WHITE"]

import colorsys
import math
from numbers import Real
from dataclasses import dataclass, replace
from typing import Any, Optional

from matplotlib import colors as mcolors

from .random_utils import uniform
from .utils.rng import RNGBackend


def _clamp01(v: float) -> float:
    return max(0.0, min(1.0, float(v)))


@dataclass(frozen=True)
class HSLColor:
    """Hue (degrees), saturation, lightness, alpha."""
    hue: float = 0.0
    saturation: float = 0.0
    lightness: float = 0.0
    alpha: float = 1.0

    def __post_init__(self) -> None:
        for name in ("hue", "saturation", "lightness", "alpha"):
            value = getattr(self, name)
            if not isinstance(value, Real) or isinstance(value, bool):
                raise TypeError(f"{name} must be numeric, got {type(value).__name__}.")
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}.")
        object.__setattr__(self, "hue", float(self.hue) % 360.0)
        object.__setattr__(self, "saturation", _clamp01(self.saturation))
        object.__setattr__(self, "lightness", _clamp01(self.lightness))
        object.__setattr__(self, "alpha", _clamp01(self.alpha))

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------
    @classmethod
    def from_any(cls, color: Any, alpha: Optional[float] = None) -> HSLColor:
        """Build from an `HSLColor` or anything Matplotlib understands.

        Accepts CSS4 names, hex strings, and RGB(A) tuples in [0, 1].
        """
        if isinstance(color, HSLColor):
            return color if alpha is None else replace(color, alpha=alpha)
        try:
            r, g, b, a = mcolors.to_rgba(color)
        except ValueError as e:
            raise ValueError(f"Invalid color: {color!r}") from e
        h, l, s = colorsys.rgb_to_hls(r, g, b)
        return cls(h * 360.0, s, l, a if alpha is None else alpha)

    def to_rgba(self) -> tuple[float, float, float, float]:
        r, g, b = colorsys.hls_to_rgb(self.hue / 360.0, self.lightness, self.saturation)
        return (r, g, b, self.alpha)

    def to_hex(self) -> str:
        return mcolors.to_hex(self.to_rgba(), keep_alpha=True)

    # -------------------------------------------------------------------------
    # Variation
    # -------------------------------------------------------------------------
    def shifted(self, hue: float = 0.0, saturation: float = 0.0,
                lightness: float = 0.0, alpha: Optional[float] = None) -> HSLColor:
        """Copy with channel offsets added (and the channel policy re-applied)."""
        return HSLColor(
            self.hue + hue,
            self.saturation + saturation,
            self.lightness + lightness,
            self.alpha if alpha is None else alpha,
        )

    def jitter(self, rng: Optional[RNGBackend] = None, hue_var: float = 0.0,
               sat_var: float = 0.0, light_var: float = 0.0,
               alpha: Optional[float] = None) -> HSLColor:
        """Copy with independent uniform jitter in +/-var on each channel.

        Draw order is hue, saturation, lightness.
        """
        return self.shifted(
            hue=uniform(rng, -hue_var, hue_var),
            saturation=uniform(rng, -sat_var, sat_var),
            lightness=uniform(rng, -light_var, light_var),
            alpha=alpha,
        )


BLACK = HSLColor(0.0, 0.0, 0.0)
WHITE = HSLColor(0.0, 0.0, 1.0)
