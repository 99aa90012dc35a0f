"""
noise.py
--------

Classic 3-D gradient (Perlin) noise over a randomly filled permutation table.

The table is built from an injected uniform random source, so two fields
built from identically seeded sources are identical, and a field never
changes after construction. `NoiseField.sample` is therefore a pure function
of its coordinates.

Algorithm (per query point):
 1. Split each coordinate into the integer lattice cell and the fractional
    offset inside it.
 2. Wrap the cell into [0, 255] with `& 255`. Very large inputs alias back
    onto the lattice; this is a property of the table size.
 3. Hash each of the 8 cell corners through chained table lookups and reduce
    mod 12 to pick one of the 12 edge-midpoint gradients.
 4. Dot each gradient with the corner-to-point vector.
 5. Fade the fractional offsets with 6t^5 - 15t^4 + 10t^3.
 6. Trilinearly mix the 8 contributions (x, then y, then z).

The result lies roughly within [-1, 1]; it is not clamped.

Core API:

    NoiseField(rng=None)
        .sample(x, y, z) -> float
        .sample_array(xs, ys, zs) -> NDArray

    NoiseContext.create(rng=None) -> NoiseContext
        Field plus the per-run seed offset used as a third noise coordinate
        by the path displacement routines.
"""

from __future__ import annotations

__all__ = [
    "GRAD3", "TABLE_SIZE",
    "fade", "mix", "dot",
    "NoiseField", "NoiseContext",
]

import math
import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .utils.rng import RNGBackend, get_rng

logger = logging.getLogger(__name__)

TABLE_SIZE = 256

GRAD3: tuple[tuple[int, int, int], ...] = (
    ( 1,  1,  0), (-1,  1,  0), ( 1, -1,  0), (-1, -1,  0),
    ( 1,  0,  1), (-1,  0,  1), ( 1,  0, -1), (-1,  0, -1),
    ( 0,  1,  1), ( 0, -1,  1), ( 0,  1, -1), ( 0, -1, -1),
)

_GRAD3_ARRAY = np.array(GRAD3, dtype=float)


# ---------------------------------------------------------------------------
# Scalar helpers
# ---------------------------------------------------------------------------
def fade(t: float) -> float:
    """Quintic smoothstep 6t^5 - 15t^4 + 10t^3 (zero 1st/2nd derivative at 0, 1)."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def mix(a: float, b: float, t: float) -> float:
    return (1.0 - t) * a + t * b


def dot(g: tuple[int, int, int], x: float, y: float, z: float) -> float:
    return g[0] * x + g[1] * y + g[2] * z


# ---------------------------------------------------------------------------
# Noise field
# ---------------------------------------------------------------------------
class NoiseField:
    """3-D gradient noise function over a fixed 512-entry permutation table.

    Args:
        rng: Uniform random source (anything with `random() -> [0, 1)`).
            Consumed exactly 256 times during construction. Defaults to the
            shared process RNG.

    Attributes:
        base: The 256 base entries, `floor(rng.random() * 256)`. Duplicates
            are allowed.
        perm: The doubled table, `perm[i] == base[i & 255]` for i in [0, 512),
            so corner lookups never need an explicit wrap.
    """

    __slots__ = ("base", "perm", "_perm_array")

    def __init__(self, rng: Optional[RNGBackend] = None) -> None:
        if rng is None:
            rng = get_rng()
        if not callable(getattr(rng, "random", None)):
            raise TypeError(
                f"Expected a random source with a random() method, got {type(rng).__name__}."
            )

        base = tuple(int(math.floor(rng.random() * TABLE_SIZE)) for _ in range(TABLE_SIZE))
        for value in base:
            if not 0 <= value < TABLE_SIZE:
                raise ValueError(f"Random source returned a value outside [0, 1): {value / TABLE_SIZE}")

        self.base: tuple[int, ...] = base
        self.perm: tuple[int, ...] = tuple(base[i & 255] for i in range(2 * TABLE_SIZE))
        self._perm_array = np.array(self.perm, dtype=np.int64)
        self._perm_array.setflags(write=False)

    # -------------------------------------------------------------------------
    # Scalar query
    # -------------------------------------------------------------------------
    def sample(self, x: float, y: float, z: float) -> float:
        """Noise value at (x, y, z), approximately within [-1, 1].

        Non-finite input yields NaN rather than an exception.
        """
        if not (math.isfinite(x) and math.isfinite(y) and math.isfinite(z)):
            return math.nan

        perm = self.perm

        # Unit cell containing the point
        X = math.floor(x)
        Y = math.floor(y)
        Z = math.floor(z)

        # Position inside that cell
        x = x - X
        y = y - Y
        z = z - Z

        X &= 255
        Y &= 255
        Z &= 255

        # Hashed gradient indices of the eight corners
        gi000 = perm[X +     perm[Y +     perm[Z    ]]] % 12
        gi001 = perm[X +     perm[Y +     perm[Z + 1]]] % 12
        gi010 = perm[X +     perm[Y + 1 + perm[Z    ]]] % 12
        gi011 = perm[X +     perm[Y + 1 + perm[Z + 1]]] % 12
        gi100 = perm[X + 1 + perm[Y +     perm[Z    ]]] % 12
        gi101 = perm[X + 1 + perm[Y +     perm[Z + 1]]] % 12
        gi110 = perm[X + 1 + perm[Y + 1 + perm[Z    ]]] % 12
        gi111 = perm[X + 1 + perm[Y + 1 + perm[Z + 1]]] % 12

        # Corner contributions
        n000 = dot(GRAD3[gi000], x,       y,       z      )
        n100 = dot(GRAD3[gi100], x - 1.0, y,       z      )
        n010 = dot(GRAD3[gi010], x,       y - 1.0, z      )
        n110 = dot(GRAD3[gi110], x - 1.0, y - 1.0, z      )
        n001 = dot(GRAD3[gi001], x,       y,       z - 1.0)
        n101 = dot(GRAD3[gi101], x - 1.0, y,       z - 1.0)
        n011 = dot(GRAD3[gi011], x,       y - 1.0, z - 1.0)
        n111 = dot(GRAD3[gi111], x - 1.0, y - 1.0, z - 1.0)

        u = fade(x)
        v = fade(y)
        w = fade(z)

        nx00 = mix(n000, n100, u)
        nx01 = mix(n001, n101, u)
        nx10 = mix(n010, n110, u)
        nx11 = mix(n011, n111, u)

        nxy0 = mix(nx00, nx10, v)
        nxy1 = mix(nx01, nx11, v)

        return mix(nxy0, nxy1, w)

    # -------------------------------------------------------------------------
    # Vectorized query
    # -------------------------------------------------------------------------
    def sample_array(self, xs: ArrayLike, ys: ArrayLike, zs: ArrayLike) -> NDArray[np.float64]:
        """Vectorized `sample` over broadcastable coordinate arrays.

        Matches the scalar path element-wise (same operation order), except
        that non-finite inputs produce NaN in their slots.
        """
        xs, ys, zs = np.broadcast_arrays(
            np.asarray(xs, dtype=float),
            np.asarray(ys, dtype=float),
            np.asarray(zs, dtype=float),
        )
        finite = np.isfinite(xs) & np.isfinite(ys) & np.isfinite(zs)
        xs = np.where(finite, xs, 0.0)
        ys = np.where(finite, ys, 0.0)
        zs = np.where(finite, zs, 0.0)

        perm = self._perm_array
        X0 = np.floor(xs)
        Y0 = np.floor(ys)
        Z0 = np.floor(zs)
        x = xs - X0
        y = ys - Y0
        z = zs - Z0
        X = X0.astype(np.int64) & 255
        Y = Y0.astype(np.int64) & 255
        Z = Z0.astype(np.int64) & 255

        def corner(dx: int, dy: int, dz: int) -> NDArray[np.float64]:
            gi = perm[X + dx + perm[Y + dy + perm[Z + dz]]] % 12
            g = _GRAD3_ARRAY[gi]
            return g[..., 0] * (x - dx) + g[..., 1] * (y - dy) + g[..., 2] * (z - dz)

        u = fade(x)
        v = fade(y)
        w = fade(z)

        nx00 = mix(corner(0, 0, 0), corner(1, 0, 0), u)
        nx01 = mix(corner(0, 0, 1), corner(1, 0, 1), u)
        nx10 = mix(corner(0, 1, 0), corner(1, 1, 0), u)
        nx11 = mix(corner(0, 1, 1), corner(1, 1, 1), u)
        nxy0 = mix(nx00, nx10, v)
        nxy1 = mix(nx01, nx11, v)
        out = mix(nxy0, nxy1, w)

        return np.where(finite, out, np.nan)

    def __repr__(self) -> str:
        return f"<NoiseField base[:4]={list(self.base[:4])} id={id(self)}>"


# ---------------------------------------------------------------------------
# Explicit noise context
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class NoiseContext:
    """A noise field together with the run's seed offset.

    The seed offset is used as the third coordinate when displacing 2-D
    geometry, so different contexts built over the same table still produce
    different displacement patterns.
    """
    field: NoiseField
    seed: float = 0.0

    @classmethod
    def create(cls, rng: Optional[RNGBackend] = None) -> NoiseContext:
        """Build a fresh field from `rng`, then draw the seed in [0, 255)."""
        if rng is None:
            rng = get_rng()
        noise_field = NoiseField(rng)
        seed = rng.random() * 255.0
        logger.debug(f"Created NoiseContext seed={seed:.4f}")
        return cls(noise_field, seed)

    def sample(self, x: float, y: float, z: float) -> float:
        return self.field.sample(x, y, z)
