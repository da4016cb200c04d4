# noise_modules/modifier.py

"""
================================================================================
VALUE MODIFIERS
================================================================================
Modifiers pass the coordinate straight through to their source and reshape
the value that comes back: memoisation, saturation, spline remapping,
terracing and a handful of arithmetic adjustments.

Data Contract:
---------------
- Inputs: A source module and the coordinate to sample.
- Outputs: A float derived only from the source value and the modifier's
  own parameters.
- Side Effects: Cache stores the last coordinate and value it saw. Nothing
  else keeps state between calls.
================================================================================
"""

import bisect
import logging
from typing import NamedTuple

import numpy as np

from . import config as DEFAULTS
from .interp import hermite_interp, monotone_slopes, lerp, clamp
from .module import SourceModule, NoiseModule, ALL_DIMENSIONS

logger = logging.getLogger(__name__)


class ControlPoint(NamedTuple):
    """An (input, output) anchor of a spline curve."""
    input: float
    output: float


class Cache(SourceModule):
    """
    Caches the last output value generated by the source module.

    A call with exactly the same coordinate as the previous one returns the
    stored value without touching the source. The slot is keyed on the full
    coordinate tuple, so a 2D call never matches a stored 3D call. Rebinding
    the source empties the slot.

    Useful when one module feeds several others: without a cache the shared
    module recomputes the same value for every consumer.
    """
    capabilities = ALL_DIMENSIONS

    def __init__(self, source: NoiseModule = None):
        super().__init__(source)
        self._cached_coords = None
        self._cached_value = 0.0

    @SourceModule.source.setter
    def source(self, module: NoiseModule):
        self._source = module
        self.invalidate()

    def invalidate(self):
        """Empties the memo slot."""
        self._cached_coords = None
        logger.debug("Cache invalidated.")

    @property
    def is_cached(self) -> bool:
        return self._cached_coords is not None

    def _evaluate(self, coords: tuple) -> float:
        if coords != self._cached_coords:
            self._cached_value = self._source.get_value(*coords)
            self._cached_coords = coords
        return self._cached_value


class Clamp(SourceModule):
    """Saturates the source value to [lower_bound, upper_bound]."""
    capabilities = ALL_DIMENSIONS

    def __init__(self, source: NoiseModule = None,
                 lower_bound: float = DEFAULTS.DEFAULT_CLAMP_LOWER,
                 upper_bound: float = DEFAULTS.DEFAULT_CLAMP_UPPER):
        super().__init__(source)
        self.set_bounds(lower_bound, upper_bound)

    def set_bounds(self, lower_bound: float, upper_bound: float):
        if lower_bound >= upper_bound:
            raise ValueError(
                f"Clamp lower bound ({lower_bound}) must be less than upper bound ({upper_bound})"
            )
        self._lower_bound = lower_bound
        self._upper_bound = upper_bound

    @property
    def lower_bound(self) -> float:
        return self._lower_bound

    @property
    def upper_bound(self) -> float:
        return self._upper_bound

    def _evaluate(self, coords: tuple) -> float:
        return clamp(self._source.get_value(*coords), self._lower_bound, self._upper_bound)


class Curve(SourceModule):
    """
    Maps the source value through a spline defined by control points.

    Control points are kept sorted by input; two points may not share an
    input. At least four points are needed before the module can be
    evaluated. Values outside the outermost points are clamped to the
    first or last output.

    Each segment is a cubic Hermite whose knot tangents come from
    `monotone_slopes`, so the curve passes through every control point and
    never overshoots: rising control points give a rising curve. The
    tangents are rebuilt whenever the control points change.
    """
    capabilities = ALL_DIMENSIONS

    def __init__(self, source: NoiseModule = None, control_points=()):
        super().__init__(source)
        self._control_points = []
        self._inputs = []
        self._slopes = np.zeros(0)
        for input_value, output_value in control_points:
            self.add_control_point(input_value, output_value)

    @property
    def control_points(self) -> tuple:
        return tuple(self._control_points)

    def add_control_point(self, input_value: float, output_value: float):
        """
        Inserts a control point at its sorted position.

        Raises:
            ValueError: If a point with the same input already exists.
        """
        index = bisect.bisect_left(self._inputs, input_value)
        if index < len(self._inputs) and self._inputs[index] == input_value:
            raise ValueError(f"Curve already has a control point with input {input_value}")
        self._inputs.insert(index, input_value)
        self._control_points.insert(index, ControlPoint(input_value, output_value))
        self._rebuild_slopes()

    def clear_control_points(self):
        self._control_points = []
        self._inputs = []
        self._rebuild_slopes()

    def _rebuild_slopes(self):
        xs = np.array([point.input for point in self._control_points], dtype=np.float64)
        ys = np.array([point.output for point in self._control_points], dtype=np.float64)
        self._slopes = monotone_slopes(xs, ys)

    def map_value(self, value: float) -> float:
        """Runs a single value through the curve."""
        points = self._control_points
        count = len(points)
        if count < DEFAULTS.MIN_CURVE_CONTROL_POINTS:
            raise ValueError(
                f"Curve needs at least {DEFAULTS.MIN_CURVE_CONTROL_POINTS} control points, has {count}"
            )

        if value <= points[0].input:
            return points[0].output
        if value >= points[-1].input:
            return points[-1].output

        # Segment [index, index + 1] holds the value.
        index = bisect.bisect_right(self._inputs, value) - 1
        start = points[index]
        end = points[index + 1]
        width = end.input - start.input

        return hermite_interp(
            start.output,
            end.output,
            self._slopes[index],
            self._slopes[index + 1],
            width,
            (value - start.input) / width,
        )

    def _evaluate(self, coords: tuple) -> float:
        return self.map_value(self._source.get_value(*coords))


class Terrace(SourceModule):
    """
    Maps the source value onto a terrace-forming curve.

    Between two adjacent control values the output eases out of the lower
    one and snaps up to the next, producing flat steps. With `invert` the
    easing runs the other way.
    """
    capabilities = ALL_DIMENSIONS

    def __init__(self, source: NoiseModule = None, control_points=(), invert: bool = False):
        super().__init__(source)
        self.invert = invert
        self._control_points = []
        for value in control_points:
            self.add_control_point(value)

    @property
    def control_points(self) -> tuple:
        return tuple(self._control_points)

    def add_control_point(self, value: float):
        index = bisect.bisect_left(self._control_points, value)
        if index < len(self._control_points) and self._control_points[index] == value:
            raise ValueError(f"Terrace already has a control point at {value}")
        self._control_points.insert(index, value)

    def clear_control_points(self):
        self._control_points = []

    def make_control_points(self, count: int):
        """Replaces the control points with `count` values evenly spaced over [-1, 1]."""
        if count < DEFAULTS.MIN_TERRACE_CONTROL_POINTS:
            raise ValueError(
                f"Terrace needs at least {DEFAULTS.MIN_TERRACE_CONTROL_POINTS} control points, got {count}"
            )
        step = 2.0 / (count - 1)
        self._control_points = [-1.0 + i * step for i in range(count)]

    def map_value(self, value: float) -> float:
        points = self._control_points
        count = len(points)
        if count < DEFAULTS.MIN_TERRACE_CONTROL_POINTS:
            raise ValueError(
                f"Terrace needs at least {DEFAULTS.MIN_TERRACE_CONTROL_POINTS} control points, has {count}"
            )

        index_pos = bisect.bisect_right(points, value)
        index0 = min(max(index_pos - 1, 0), count - 1)
        index1 = min(max(index_pos, 0), count - 1)

        if index0 == index1:
            return points[index1]

        value0 = points[index0]
        value1 = points[index1]
        alpha = (value - value0) / (value1 - value0)
        if self.invert:
            alpha = 1.0 - alpha
            value0, value1 = value1, value0

        alpha *= alpha
        return lerp(value0, value1, alpha)

    def _evaluate(self, coords: tuple) -> float:
        return self.map_value(self._source.get_value(*coords))


class ScaleBias(SourceModule):
    """value * scale + bias"""
    capabilities = ALL_DIMENSIONS

    def __init__(self, source: NoiseModule = None,
                 scale: float = DEFAULTS.DEFAULT_SCALE_FACTOR,
                 bias: float = DEFAULTS.DEFAULT_BIAS):
        super().__init__(source)
        self.scale = scale
        self.bias = bias

    def _evaluate(self, coords: tuple) -> float:
        return self._source.get_value(*coords) * self.scale + self.bias


class Abs(SourceModule):
    capabilities = ALL_DIMENSIONS

    def _evaluate(self, coords: tuple) -> float:
        return abs(self._source.get_value(*coords))


class Invert(SourceModule):
    capabilities = ALL_DIMENSIONS

    def _evaluate(self, coords: tuple) -> float:
        return -self._source.get_value(*coords)


class Exponent(SourceModule):
    """
    Raises the source value, remapped to [0, 1], to a power, then maps the
    result back to [-1, 1].
    """
    capabilities = ALL_DIMENSIONS

    def __init__(self, source: NoiseModule = None, exponent: float = DEFAULTS.DEFAULT_EXPONENT):
        super().__init__(source)
        self.exponent = exponent

    def _evaluate(self, coords: tuple) -> float:
        value = self._source.get_value(*coords)
        return abs((value + 1.0) / 2.0) ** self.exponent * 2.0 - 1.0
