# noise_modules/primitive.py

"""
================================================================================
PRIMITIVE NOISE GENERATORS
================================================================================
This module provides the lattice noise generators that sit at the leaves of
a noise graph: improved Perlin noise in 1D-4D, simplex noise in 2D-4D and a
constant generator.

The heavy lifting happens in Numba-compiled kernels that take a pre-shuffled
permutation table and a single coordinate. The module classes own the table
and forward each call to the matching kernel.

Data Contract:
---------------
- Inputs:
    - p: A 512-entry permutation table (0..255 shuffled, stored twice so
      that folded indices never need wrapping).
    - x, y, z, w: Scalar coordinates.
- Outputs:
    - A float, typically in the range [-1, 1].
- Side Effects: None.
- Invariants: The same seed always produces the same table, and so the
  same output for every coordinate.
================================================================================
"""

import logging
import math

import numpy as np
from numba import njit

from . import config as DEFAULTS
from .config import QUALITY_FAST, QUALITY_STANDARD, QUALITY_BEST
from .interp import lerp, s_curve3, s_curve5
from .module import NoiseModule, ALL_DIMENSIONS

logger = logging.getLogger(__name__)

MASK = DEFAULTS.PERMUTATION_MASK

SQRT3 = math.sqrt(3.0)
SQRT5 = math.sqrt(5.0)

# Skewing and unskewing factors.
F2 = 0.5 * (SQRT3 - 1.0)
G2 = (3.0 - SQRT3) / 6.0
G22 = G2 * 2.0 - 1.0
F3 = 1.0 / 3.0
G3 = 1.0 / 6.0
F4 = (SQRT5 - 1.0) / 4.0
G4 = (5.0 - SQRT5) / 20.0
G42 = G4 * 2.0
G43 = G4 * 3.0
G44 = G4 * 4.0 - 1.0

# Edge midpoints of a cube.
_GRAD3 = np.array([
    [1, 1, 0], [-1, 1, 0], [1, -1, 0], [-1, -1, 0],
    [1, 0, 1], [-1, 0, 1], [1, 0, -1], [-1, 0, -1],
    [0, 1, 1], [0, -1, 1], [0, 1, -1], [0, -1, -1],
], dtype=np.float64)

# Edge midpoints of a hypercube.
_GRAD4 = np.array([
    [0, 1, 1, 1], [0, 1, 1, -1], [0, 1, -1, 1], [0, 1, -1, -1],
    [0, -1, 1, 1], [0, -1, 1, -1], [0, -1, -1, 1], [0, -1, -1, -1],
    [1, 0, 1, 1], [1, 0, 1, -1], [1, 0, -1, 1], [1, 0, -1, -1],
    [-1, 0, 1, 1], [-1, 0, 1, -1], [-1, 0, -1, 1], [-1, 0, -1, -1],
    [1, 1, 0, 1], [1, 1, 0, -1], [1, -1, 0, 1], [1, -1, 0, -1],
    [-1, 1, 0, 1], [-1, 1, 0, -1], [-1, -1, 0, 1], [-1, -1, 0, -1],
    [1, 1, 1, 0], [1, 1, -1, 0], [1, -1, 1, 0], [1, -1, -1, 0],
    [-1, 1, 1, 0], [-1, 1, -1, 0], [-1, -1, 1, 0], [-1, -1, -1, 0],
], dtype=np.float64)

# Corner traversal order for the 4D simplex, indexed by the six pairwise
# comparison bits of the cell-relative coordinate. Only 24 rows are reachable.
_SIMPLEX4 = np.array([
    [0, 1, 2, 3], [0, 1, 3, 2], [0, 0, 0, 0], [0, 2, 3, 1],
    [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [1, 2, 3, 0],
    [0, 2, 1, 3], [0, 0, 0, 0], [0, 3, 1, 2], [0, 3, 2, 1],
    [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [1, 3, 2, 0],
    [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0],
    [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0],
    [1, 2, 0, 3], [0, 0, 0, 0], [1, 3, 0, 2], [0, 0, 0, 0],
    [0, 0, 0, 0], [0, 0, 0, 0], [2, 3, 0, 1], [2, 3, 1, 0],
    [1, 0, 2, 3], [1, 0, 3, 2], [0, 0, 0, 0], [0, 0, 0, 0],
    [0, 0, 0, 0], [2, 0, 3, 1], [0, 0, 0, 0], [2, 1, 3, 0],
    [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0],
    [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0],
    [2, 0, 1, 3], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0],
    [3, 0, 1, 2], [3, 0, 2, 1], [0, 0, 0, 0], [3, 1, 2, 0],
    [2, 1, 0, 3], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0],
    [3, 1, 0, 2], [0, 0, 0, 0], [3, 2, 0, 1], [3, 2, 1, 0],
], dtype=np.int64)


def make_permutation_table(seed: int) -> np.ndarray:
    """
    Builds the doubled permutation table for a seed. The table is read-only
    so it can be shared between modules and threads.
    """
    p = np.arange(DEFAULTS.PERMUTATION_SIZE, dtype=np.int64)
    rng = np.random.default_rng(seed)
    rng.shuffle(p)
    table = np.stack([p, p]).flatten()
    table.flags.writeable = False
    return table


# --- Improved Perlin kernels ---

@njit
def _smooth(t, quality):
    if quality == QUALITY_FAST:
        return t
    if quality == QUALITY_STANDARD:
        return s_curve3(t)
    return s_curve5(t)


@njit
def _grad_1d(h, x):
    if (h & 1) == 0:
        return x
    return -x


@njit
def _grad_3d(h, x, y, z):
    """Dot product with one of the 16 improved-noise gradient directions."""
    h = h & 15
    u = x if h < 8 else y
    if h < 4:
        v = y
    elif h == 12 or h == 14:
        v = x
    else:
        v = z
    return (u if (h & 1) == 0 else -u) + (v if (h & 2) == 0 else -v)


@njit
def _grad_4d(h, x, y, z, w):
    g = _GRAD4[h & 31]
    return g[0] * x + g[1] * y + g[2] * z + g[3] * w


@njit
def improved_perlin_1d(p, x, quality):
    xf = np.floor(x)
    X = int(xf) & MASK
    x = x - xf
    u = _smooth(x, quality)
    return lerp(_grad_1d(p[X], x), _grad_1d(p[X + 1], x - 1.0), u)


@njit
def improved_perlin_2d(p, x, y, quality):
    xf = np.floor(x)
    yf = np.floor(y)
    X = int(xf) & MASK
    Y = int(yf) & MASK
    x = x - xf
    y = y - yf
    u = _smooth(x, quality)
    v = _smooth(y, quality)

    A = p[X] + Y
    B = p[X + 1] + Y

    x1 = lerp(_grad_3d(p[A], x, y, 0.0), _grad_3d(p[B], x - 1.0, y, 0.0), u)
    x2 = lerp(_grad_3d(p[A + 1], x, y - 1.0, 0.0), _grad_3d(p[B + 1], x - 1.0, y - 1.0, 0.0), u)
    return lerp(x1, x2, v)


@njit
def improved_perlin_3d(p, x, y, z, quality):
    xf = np.floor(x)
    yf = np.floor(y)
    zf = np.floor(z)
    X = int(xf) & MASK
    Y = int(yf) & MASK
    Z = int(zf) & MASK
    x = x - xf
    y = y - yf
    z = z - zf
    u = _smooth(x, quality)
    v = _smooth(y, quality)
    s = _smooth(z, quality)

    A = p[X] + Y
    AA = p[A] + Z
    AB = p[A + 1] + Z
    B = p[X + 1] + Y
    BA = p[B] + Z
    BB = p[B + 1] + Z

    return lerp(
        lerp(
            lerp(_grad_3d(p[AA], x, y, z), _grad_3d(p[BA], x - 1.0, y, z), u),
            lerp(_grad_3d(p[AB], x, y - 1.0, z), _grad_3d(p[BB], x - 1.0, y - 1.0, z), u),
            v,
        ),
        lerp(
            lerp(_grad_3d(p[AA + 1], x, y, z - 1.0), _grad_3d(p[BA + 1], x - 1.0, y, z - 1.0), u),
            lerp(_grad_3d(p[AB + 1], x, y - 1.0, z - 1.0),
                 _grad_3d(p[BB + 1], x - 1.0, y - 1.0, z - 1.0), u),
            v,
        ),
        s,
    )


@njit
def improved_perlin_4d(p, x, y, z, w, quality):
    xf = np.floor(x)
    yf = np.floor(y)
    zf = np.floor(z)
    wf = np.floor(w)
    X = int(xf) & MASK
    Y = int(yf) & MASK
    Z = int(zf) & MASK
    W = int(wf) & MASK
    x = x - xf
    y = y - yf
    z = z - zf
    w = w - wf
    u = _smooth(x, quality)
    v = _smooth(y, quality)
    s = _smooth(z, quality)
    t = _smooth(w, quality)

    A = p[X] + Y
    B = p[X + 1] + Y
    AA = p[A] + Z
    AB = p[A + 1] + Z
    BA = p[B] + Z
    BB = p[B + 1] + Z
    AAA = p[AA] + W
    AAB = p[AA + 1] + W
    ABA = p[AB] + W
    ABB = p[AB + 1] + W
    BAA = p[BA] + W
    BAB = p[BA + 1] + W
    BBA = p[BB] + W
    BBB = p[BB + 1] + W

    x1 = x - 1.0
    y1 = y - 1.0
    z1 = z - 1.0
    w1 = w - 1.0

    near_w = lerp(
        lerp(
            lerp(_grad_4d(p[AAA], x, y, z, w), _grad_4d(p[BAA], x1, y, z, w), u),
            lerp(_grad_4d(p[ABA], x, y1, z, w), _grad_4d(p[BBA], x1, y1, z, w), u),
            v,
        ),
        lerp(
            lerp(_grad_4d(p[AAB], x, y, z1, w), _grad_4d(p[BAB], x1, y, z1, w), u),
            lerp(_grad_4d(p[ABB], x, y1, z1, w), _grad_4d(p[BBB], x1, y1, z1, w), u),
            v,
        ),
        s,
    )
    far_w = lerp(
        lerp(
            lerp(_grad_4d(p[AAA + 1], x, y, z, w1), _grad_4d(p[BAA + 1], x1, y, z, w1), u),
            lerp(_grad_4d(p[ABA + 1], x, y1, z, w1), _grad_4d(p[BBA + 1], x1, y1, z, w1), u),
            v,
        ),
        lerp(
            lerp(_grad_4d(p[AAB + 1], x, y, z1, w1), _grad_4d(p[BAB + 1], x1, y, z1, w1), u),
            lerp(_grad_4d(p[ABB + 1], x, y1, z1, w1), _grad_4d(p[BBB + 1], x1, y1, z1, w1), u),
            v,
        ),
        s,
    )
    return lerp(near_w, far_w, t)


# --- Simplex kernels ---

@njit
def _dot2(g, x, y):
    return g[0] * x + g[1] * y


@njit
def _dot3(g, x, y, z):
    return g[0] * x + g[1] * y + g[2] * z


@njit
def _dot4(g, x, y, z, w):
    return g[0] * x + g[1] * y + g[2] * z + g[3] * w


@njit
def simplex_2d(p, x, y):
    s = (x + y) * F2
    i = int(np.floor(x + s))
    j = int(np.floor(y + s))
    t = (i + j) * G2

    x0 = x - (i - t)
    y0 = y - (j - t)

    # Lower triangle walks (0,0)->(1,0)->(1,1), upper walks (0,0)->(0,1)->(1,1).
    if x0 > y0:
        i1, j1 = 1, 0
    else:
        i1, j1 = 0, 1

    x1 = x0 - i1 + G2
    y1 = y0 - j1 + G2
    x2 = x0 + G22
    y2 = y0 + G22

    ii = i & MASK
    jj = j & MASK

    n0 = 0.0
    n1 = 0.0
    n2 = 0.0

    t0 = 0.5 - x0 * x0 - y0 * y0
    if t0 > 0:
        t0 *= t0
        n0 = t0 * t0 * _dot2(_GRAD3[p[ii + p[jj]] % 12], x0, y0)

    t1 = 0.5 - x1 * x1 - y1 * y1
    if t1 > 0:
        t1 *= t1
        n1 = t1 * t1 * _dot2(_GRAD3[p[ii + i1 + p[jj + j1]] % 12], x1, y1)

    t2 = 0.5 - x2 * x2 - y2 * y2
    if t2 > 0:
        t2 *= t2
        n2 = t2 * t2 * _dot2(_GRAD3[p[ii + 1 + p[jj + 1]] % 12], x2, y2)

    return 70.0 * (n0 + n1 + n2)


@njit
def simplex_3d(p, x, y, z):
    s = (x + y + z) * F3
    i = int(np.floor(x + s))
    j = int(np.floor(y + s))
    k = int(np.floor(z + s))
    t = (i + j + k) * G3

    x0 = x - (i - t)
    y0 = y - (j - t)
    z0 = z - (k - t)

    if x0 >= y0:
        if y0 >= z0:
            i1, j1, k1, i2, j2, k2 = 1, 0, 0, 1, 1, 0
        elif x0 >= z0:
            i1, j1, k1, i2, j2, k2 = 1, 0, 0, 1, 0, 1
        else:
            i1, j1, k1, i2, j2, k2 = 0, 0, 1, 1, 0, 1
    else:
        if y0 < z0:
            i1, j1, k1, i2, j2, k2 = 0, 0, 1, 0, 1, 1
        elif x0 < z0:
            i1, j1, k1, i2, j2, k2 = 0, 1, 0, 0, 1, 1
        else:
            i1, j1, k1, i2, j2, k2 = 0, 1, 0, 1, 1, 0

    x1 = x0 - i1 + G3
    y1 = y0 - j1 + G3
    z1 = z0 - k1 + G3
    x2 = x0 - i2 + F3
    y2 = y0 - j2 + F3
    z2 = z0 - k2 + F3
    x3 = x0 - 0.5
    y3 = y0 - 0.5
    z3 = z0 - 0.5

    ii = i & MASK
    jj = j & MASK
    kk = k & MASK

    n0 = 0.0
    n1 = 0.0
    n2 = 0.0
    n3 = 0.0

    t0 = 0.6 - x0 * x0 - y0 * y0 - z0 * z0
    if t0 > 0:
        t0 *= t0
        n0 = t0 * t0 * _dot3(_GRAD3[p[ii + p[jj + p[kk]]] % 12], x0, y0, z0)

    t1 = 0.6 - x1 * x1 - y1 * y1 - z1 * z1
    if t1 > 0:
        t1 *= t1
        n1 = t1 * t1 * _dot3(_GRAD3[p[ii + i1 + p[jj + j1 + p[kk + k1]]] % 12], x1, y1, z1)

    t2 = 0.6 - x2 * x2 - y2 * y2 - z2 * z2
    if t2 > 0:
        t2 *= t2
        n2 = t2 * t2 * _dot3(_GRAD3[p[ii + i2 + p[jj + j2 + p[kk + k2]]] % 12], x2, y2, z2)

    t3 = 0.6 - x3 * x3 - y3 * y3 - z3 * z3
    if t3 > 0:
        t3 *= t3
        n3 = t3 * t3 * _dot3(_GRAD3[p[ii + 1 + p[jj + 1 + p[kk + 1]]] % 12], x3, y3, z3)

    return 32.0 * (n0 + n1 + n2 + n3)


@njit
def simplex_4d(p, x, y, z, w):
    s = (x + y + z + w) * F4
    i = int(np.floor(x + s))
    j = int(np.floor(y + s))
    k = int(np.floor(z + s))
    l = int(np.floor(w + s))
    t = (i + j + k + l) * G4

    x0 = x - (i - t)
    y0 = y - (j - t)
    z0 = z - (k - t)
    w0 = w - (l - t)

    c = 0
    if x0 > y0:
        c = 0x20
    if x0 > z0:
        c |= 0x10
    if y0 > z0:
        c |= 0x08
    if x0 > w0:
        c |= 0x04
    if y0 > w0:
        c |= 0x02
    if z0 > w0:
        c |= 0x01

    # The largest coordinate carries a 3 in the traversal row, the smallest a 0.
    sc = _SIMPLEX4[c]
    i1 = 1 if sc[0] >= 3 else 0
    j1 = 1 if sc[1] >= 3 else 0
    k1 = 1 if sc[2] >= 3 else 0
    l1 = 1 if sc[3] >= 3 else 0
    i2 = 1 if sc[0] >= 2 else 0
    j2 = 1 if sc[1] >= 2 else 0
    k2 = 1 if sc[2] >= 2 else 0
    l2 = 1 if sc[3] >= 2 else 0
    i3 = 1 if sc[0] >= 1 else 0
    j3 = 1 if sc[1] >= 1 else 0
    k3 = 1 if sc[2] >= 1 else 0
    l3 = 1 if sc[3] >= 1 else 0

    x1 = x0 - i1 + G4
    y1 = y0 - j1 + G4
    z1 = z0 - k1 + G4
    w1 = w0 - l1 + G4
    x2 = x0 - i2 + G42
    y2 = y0 - j2 + G42
    z2 = z0 - k2 + G42
    w2 = w0 - l2 + G42
    x3 = x0 - i3 + G43
    y3 = y0 - j3 + G43
    z3 = z0 - k3 + G43
    w3 = w0 - l3 + G43
    x4 = x0 + G44
    y4 = y0 + G44
    z4 = z0 + G44
    w4 = w0 + G44

    ii = i & MASK
    jj = j & MASK
    kk = k & MASK
    ll = l & MASK

    n0 = 0.0
    n1 = 0.0
    n2 = 0.0
    n3 = 0.0
    n4 = 0.0

    t0 = 0.6 - x0 * x0 - y0 * y0 - z0 * z0 - w0 * w0
    if t0 > 0:
        t0 *= t0
        gi0 = p[ii + p[jj + p[kk + p[ll]]]] % 32
        n0 = t0 * t0 * _dot4(_GRAD4[gi0], x0, y0, z0, w0)

    t1 = 0.6 - x1 * x1 - y1 * y1 - z1 * z1 - w1 * w1
    if t1 > 0:
        t1 *= t1
        gi1 = p[ii + i1 + p[jj + j1 + p[kk + k1 + p[ll + l1]]]] % 32
        n1 = t1 * t1 * _dot4(_GRAD4[gi1], x1, y1, z1, w1)

    t2 = 0.6 - x2 * x2 - y2 * y2 - z2 * z2 - w2 * w2
    if t2 > 0:
        t2 *= t2
        gi2 = p[ii + i2 + p[jj + j2 + p[kk + k2 + p[ll + l2]]]] % 32
        n2 = t2 * t2 * _dot4(_GRAD4[gi2], x2, y2, z2, w2)

    t3 = 0.6 - x3 * x3 - y3 * y3 - z3 * z3 - w3 * w3
    if t3 > 0:
        t3 *= t3
        gi3 = p[ii + i3 + p[jj + j3 + p[kk + k3 + p[ll + l3]]]] % 32
        n3 = t3 * t3 * _dot4(_GRAD4[gi3], x3, y3, z3, w3)

    t4 = 0.6 - x4 * x4 - y4 * y4 - z4 * z4 - w4 * w4
    if t4 > 0:
        t4 *= t4
        gi4 = p[ii + 1 + p[jj + 1 + p[kk + 1 + p[ll + 1]]]] % 32
        n4 = t4 * t4 * _dot4(_GRAD4[gi4], x4, y4, z4, w4)

    return 27.0 * (n0 + n1 + n2 + n3 + n4)


# --- Module classes ---

class ImprovedPerlin(NoiseModule):
    """
    Ken Perlin's improved gradient noise in 1 to 4 dimensions.

    The output is not strictly bounded but usually lies within [-1, 1].
    """
    capabilities = ALL_DIMENSIONS

    def __init__(self, seed: int = DEFAULTS.DEFAULT_SEED, quality: int = DEFAULTS.DEFAULT_QUALITY,
                 permutation_table: np.ndarray = None):
        """
        Args:
            seed (int): Seed for the permutation table.
            quality (int): One of QUALITY_FAST, QUALITY_STANDARD, QUALITY_BEST.
            permutation_table (np.ndarray, optional): A pre-computed table to
                share with other modules. If None, one is built from the seed.
        """
        self.quality = quality
        if permutation_table is not None:
            if permutation_table.shape != (2 * DEFAULTS.PERMUTATION_SIZE,):
                raise ValueError(
                    f"Permutation table must have {2 * DEFAULTS.PERMUTATION_SIZE} entries, "
                    f"got shape {permutation_table.shape}"
                )
            self._seed = seed
            self._p = permutation_table
            logger.debug("Initialized with injected permutation table.")
        else:
            self.seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    @seed.setter
    def seed(self, value: int):
        self._seed = int(value)
        self._p = make_permutation_table(self._seed)
        logger.debug(f"{type(self).__name__}: permutation table rebuilt for seed {self._seed}")

    @property
    def quality(self) -> int:
        return self._quality

    @quality.setter
    def quality(self, value: int):
        if value not in (QUALITY_FAST, QUALITY_STANDARD, QUALITY_BEST):
            raise ValueError(f"Unknown noise quality: {value!r}")
        self._quality = int(value)

    @property
    def permutation_table(self) -> np.ndarray:
        return self._p

    def _evaluate(self, coords: tuple) -> float:
        n = len(coords)
        if n == 1:
            return improved_perlin_1d(self._p, coords[0], self._quality)
        if n == 2:
            return improved_perlin_2d(self._p, coords[0], coords[1], self._quality)
        if n == 3:
            return improved_perlin_3d(self._p, coords[0], coords[1], coords[2], self._quality)
        return improved_perlin_4d(self._p, coords[0], coords[1], coords[2], coords[3], self._quality)


class SimplexPerlin(ImprovedPerlin):
    """
    Simplex noise in 2D, 3D and 4D, after Stefan Gustavson's reference code.
    1D calls fall back to the improved Perlin lattice noise.
    """

    def _evaluate(self, coords: tuple) -> float:
        n = len(coords)
        if n == 2:
            return simplex_2d(self._p, coords[0], coords[1])
        if n == 3:
            return simplex_3d(self._p, coords[0], coords[1], coords[2])
        if n == 4:
            return simplex_4d(self._p, coords[0], coords[1], coords[2], coords[3])
        return super()._evaluate(coords)


class Constant(NoiseModule):
    """Outputs the same value everywhere."""
    capabilities = ALL_DIMENSIONS

    def __init__(self, value: float = DEFAULTS.DEFAULT_CONSTANT_VALUE):
        self.value = value

    def _evaluate(self, coords: tuple) -> float:
        return self.value
