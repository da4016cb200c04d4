# noise_modules/filter.py

"""
================================================================================
FRACTAL AND CELLULAR FILTERS
================================================================================
Filters wrap one source module and evaluate it repeatedly: the fractal
filters sum octaves of ever-increasing frequency and ever-decreasing
amplitude, and Voronoi scans the neighbouring lattice cells for the nearest
seed point.

The fractal code follows Ken Musgrave's spectral construction from
"Texturing and Modeling: A Procedural Approach". Each octave is weighted by
`lacunarity ** (-i * spectral_exponent)`; that table is rebuilt in full
whenever lacunarity or the spectral exponent is set.

Data Contract:
---------------
- Inputs: A source module and the coordinate to sample.
- Outputs: A float. Fractal output grows with octave count and is not
  normalised.
- Side Effects: None.
- Invariants: The spectral weight table always matches the current
  lacunarity and spectral exponent.
================================================================================
"""

import logging
import math

import numpy as np

from . import config as DEFAULTS
from .interp import clamp
from .module import SourceModule, NoiseModule, ALL_DIMENSIONS

logger = logging.getLogger(__name__)

SQRT3 = math.sqrt(3.0)


def compute_spectral_weights(lacunarity: float, spectral_exponent: float) -> np.ndarray:
    """
    Calculates the weight of every octave up to MAX_OCTAVE.

    Unusual lacunarity values (zero, negative) are accepted and produce
    inf/nan weights the same way a plain power function would.
    """
    exponents = -np.arange(DEFAULTS.MAX_OCTAVE, dtype=np.float64) * spectral_exponent
    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        weights = np.power(float(lacunarity), exponents)
    weights.flags.writeable = False
    return weights


class FractalModule(SourceModule):
    """
    Base class for octave-summing filters. Holds the shared parameters and
    the spectral weight table.
    """
    capabilities = ALL_DIMENSIONS

    def __init__(self, source: NoiseModule = None,
                 frequency: float = DEFAULTS.DEFAULT_FREQUENCY,
                 lacunarity: float = DEFAULTS.DEFAULT_LACUNARITY,
                 spectral_exponent: float = DEFAULTS.DEFAULT_SPECTRAL_EXPONENT,
                 octave_count: float = DEFAULTS.DEFAULT_OCTAVE_COUNT):
        super().__init__(source)
        self.frequency = frequency
        self._lacunarity = lacunarity
        self._spectral_exponent = spectral_exponent
        self.octave_count = octave_count
        self._compute_spectral_weights()

    def _compute_spectral_weights(self):
        self._spectral_weights = compute_spectral_weights(self._lacunarity, self._spectral_exponent)
        logger.debug(
            f"{type(self).__name__}: spectral weights rebuilt "
            f"(lacunarity={self._lacunarity}, exponent={self._spectral_exponent})"
        )

    @property
    def lacunarity(self) -> float:
        """Frequency multiplier between successive octaves."""
        return self._lacunarity

    @lacunarity.setter
    def lacunarity(self, value: float):
        self._lacunarity = value
        self._compute_spectral_weights()

    @property
    def spectral_exponent(self) -> float:
        return self._spectral_exponent

    @spectral_exponent.setter
    def spectral_exponent(self, value: float):
        self._spectral_exponent = value
        self._compute_spectral_weights()

    @property
    def octave_count(self) -> float:
        """Number of octaves, clamped to [1, MAX_OCTAVE]. May be fractional."""
        return self._octave_count

    @octave_count.setter
    def octave_count(self, value: float):
        self._octave_count = clamp(float(value), 1.0, float(DEFAULTS.MAX_OCTAVE))

    @property
    def spectral_weights(self) -> np.ndarray:
        return self._spectral_weights

    def _octaves(self, coords: tuple):
        """
        Yields (weight, signal) for every whole octave, then the fractional
        remainder as (remainder * weight, signal) when there is one.
        """
        source = self._source
        weights = self._spectral_weights
        lacunarity = self._lacunarity
        coords = [c * self.frequency for c in coords]

        whole = int(self._octave_count)
        for octave in range(whole):
            yield float(weights[octave]), source.get_value(*coords)
            coords = [c * lacunarity for c in coords]

        remainder = self._octave_count - whole
        if remainder > 0.0:
            yield remainder * float(weights[whole]), source.get_value(*coords)


class SumFractal(FractalModule):
    """
    Sum fractal noise, also known as fractional Brownian motion: the plain
    sum of every weighted octave.
    """

    def _evaluate(self, coords: tuple) -> float:
        value = 0.0
        for weight, signal in self._octaves(coords):
            value += signal * weight
        return value


class SinFractal(FractalModule):
    """
    Like SumFractal, but each whole octave contributes its absolute value
    and the total is passed through sin(x + total), where x is the
    unscaled first coordinate.
    """

    def _evaluate(self, coords: tuple) -> float:
        ox = coords[0]
        whole = int(self._octave_count)
        value = 0.0
        for octave, (weight, signal) in enumerate(self._octaves(coords)):
            contribution = signal * weight
            # The fractional remainder keeps its sign.
            if octave < whole:
                contribution = abs(contribution)
            value += contribution
        return math.sin(ox + value)


class MultiFractal(FractalModule):
    """Multiplicative fractal: each octave scales the running product."""

    def __init__(self, source: NoiseModule = None, offset: float = DEFAULTS.DEFAULT_OFFSET, **kwargs):
        super().__init__(source, **kwargs)
        self.offset = offset

    def _evaluate(self, coords: tuple) -> float:
        whole = int(self._octave_count)
        value = 1.0
        for octave, (weight, signal) in enumerate(self._octaves(coords)):
            if octave < whole:
                value *= self.offset + signal * weight
            else:
                value += signal * weight
        return value


class Voronoi(SourceModule):
    """
    Voronoi cells in 3D.

    A seed point sits in every unit cube, displaced from the cube's corner
    by the source value at that corner. Each cell outputs the source value
    at its seed's cube scaled by `displacement`; with `distance` enabled
    the normalised distance to the nearest seed is added, so values rise
    toward the cell borders.

    The 5x5x5 neighbourhood is scanned z, then y, then x, ascending. A seed
    only replaces the current nearest one when strictly closer, so the
    earliest scanned cell wins a tie.
    """
    capabilities = frozenset((3,))

    def __init__(self, source: NoiseModule = None,
                 frequency: float = DEFAULTS.DEFAULT_FREQUENCY,
                 displacement: float = DEFAULTS.DEFAULT_DISPLACEMENT,
                 distance: bool = False):
        super().__init__(source)
        self.frequency = frequency
        self.displacement = displacement
        self.distance = distance

    def _evaluate(self, coords: tuple) -> float:
        source = self._source
        x, y, z = (c * self.frequency for c in coords)

        x_int = math.floor(x)
        y_int = math.floor(y)
        z_int = math.floor(z)

        min_dist = 2147483647.0
        x_candidate = y_candidate = z_candidate = 0.0

        for z_cur in range(z_int - 2, z_int + 3):
            for y_cur in range(y_int - 2, y_int + 3):
                for x_cur in range(x_int - 2, x_int + 3):
                    offset = source.get_value(x_cur, y_cur, z_cur)
                    x_pos = x_cur + offset
                    y_pos = y_cur + offset
                    z_pos = z_cur + offset

                    x_dist = x_pos - x
                    y_dist = y_pos - y
                    z_dist = z_pos - z
                    dist = x_dist * x_dist + y_dist * y_dist + z_dist * z_dist

                    if dist < min_dist:
                        min_dist = dist
                        x_candidate = x_pos
                        y_candidate = y_pos
                        z_candidate = z_pos

        if self.distance:
            x_dist = x_candidate - x
            y_dist = y_candidate - y
            z_dist = z_candidate - z
            value = math.sqrt(x_dist * x_dist + y_dist * y_dist + z_dist * z_dist) * SQRT3 - 1.0
        else:
            value = 0.0

        return value + self.displacement * source.get_value(
            math.floor(x_candidate),
            math.floor(y_candidate),
            math.floor(z_candidate),
        )
