# noise_modules/interp.py

"""
================================================================================
INTERPOLATION UTILITIES
================================================================================
Small numeric helpers shared by the primitive kernels and the value
modifiers. All of them are JIT-compiled with Numba so the noise kernels can
call them without leaving compiled code.

Data Contract:
---------------
- Inputs: Python or NumPy scalars. `monotone_slopes` takes two float64
  arrays holding the knot positions (strictly increasing) and values.
- Outputs: A float, or for `monotone_slopes` one tangent per knot.
- Side Effects: None.
================================================================================
"""

import numpy as np
from numba import njit


@njit
def lerp(a, b, t):
    "Linear interpolation."
    return a + t * (b - a)


@njit
def s_curve3(t):
    "3t^2 - 2t^3"
    return t * t * (3.0 - 2.0 * t)


@njit
def s_curve5(t):
    "6t^5 - 15t^4 + 10t^3"
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


@njit
def monotone_slopes(xs, ys):
    """
    Computes the tangent at every knot of a piecewise cubic Hermite curve so
    that the curve never overshoots its data (Fritsch-Carlson, with the
    weighted harmonic mean of Fritsch and Butland at interior knots).

    Where the data rises (or falls) on both sides of a knot the tangent keeps
    that sign; at a local extremum it is zero. The curve is monotone on every
    interval where the data is.
    """
    n = xs.shape[0]
    slopes = np.zeros(n)
    if n < 2:
        return slopes

    h = np.empty(n - 1)
    d = np.empty(n - 1)
    for k in range(n - 1):
        h[k] = xs[k + 1] - xs[k]
        d[k] = (ys[k + 1] - ys[k]) / h[k]

    if n == 2:
        slopes[0] = d[0]
        slopes[1] = d[0]
        return slopes

    for k in range(1, n - 1):
        if d[k - 1] * d[k] <= 0.0:
            slopes[k] = 0.0
        else:
            w1 = 2.0 * h[k] + h[k - 1]
            w2 = h[k] + 2.0 * h[k - 1]
            slopes[k] = (w1 + w2) / (w1 / d[k - 1] + w2 / d[k])

    slopes[0] = _end_slope(h[0], h[1], d[0], d[1])
    slopes[n - 1] = _end_slope(h[n - 2], h[n - 3], d[n - 2], d[n - 3])
    return slopes


@njit
def _end_slope(h0, h1, d0, d1):
    # One-sided three-point estimate, pulled back into the monotone region.
    m = ((2.0 * h0 + h1) * d0 - h0 * d1) / (h0 + h1)
    if m * d0 <= 0.0:
        return 0.0
    if d0 * d1 <= 0.0 and abs(m) > abs(3.0 * d0):
        return 3.0 * d0
    return m


@njit
def hermite_interp(y0, y1, m0, m1, h, t):
    """
    Evaluates the cubic Hermite segment of width h running from y0 to y1
    with end tangents m0 and m1, at the normalised position t in [0, 1].
    Returns y0 at t == 0 and y1 at t == 1.
    """
    t2 = t * t
    t3 = t2 * t
    h00 = 2.0 * t3 - 3.0 * t2 + 1.0
    h10 = t3 - 2.0 * t2 + t
    h01 = -2.0 * t3 + 3.0 * t2
    h11 = t3 - t2
    return h00 * y0 + h10 * h * m0 + h01 * y1 + h11 * h * m1


@njit
def clamp(value, lower, upper):
    if value < lower:
        return lower
    if value > upper:
        return upper
    return value
