"""
Unit tests for the value modifiers.
"""
import numpy as np
import pytest

from noise_modules import (
    Cache, Clamp, Curve, Terrace, ScaleBias, Abs, Invert, Exponent, ControlPoint,
    Constant, ImprovedPerlin, Voronoi, MissingSourceError,
)

MONOTONE_POINTS = [(-1.0, -1.0), (-0.5, -0.6), (0.0, -0.1), (0.5, 0.4), (1.0, 1.0)]


class TestCache:
    """Test single-slot memoisation."""

    def test_repeated_coordinate_hits_cache(self, counting_source):
        cache = Cache(counting_source)
        cache.get_value(1.0, 2.0, 3.0)
        cache.get_value(1.0, 2.0, 3.0)
        assert counting_source.call_count == 1

    def test_new_coordinate_recomputes(self, counting_source):
        cache = Cache(counting_source)
        cache.get_value(1.0, 2.0, 3.0)
        cache.get_value(1.0, 2.0, 3.5)
        cache.get_value(1.0, 2.0, 3.0)
        assert counting_source.call_count == 3

    def test_slot_keyed_on_dimensionality(self, counting_source):
        cache = Cache(counting_source)
        cache.get_value(1.0, 2.0)
        cache.get_value(1.0, 2.0, 0.0)
        assert counting_source.call_count == 2

    def test_rebinding_source_invalidates(self, make_counting_source):
        first = make_counting_source(lambda *c: 1.0)
        second = make_counting_source(lambda *c: 2.0)
        cache = Cache(first)
        assert cache.get_value(0.5, 0.5) == 1.0
        assert cache.is_cached
        cache.source = second
        assert not cache.is_cached
        assert cache.get_value(0.5, 0.5) == 2.0
        assert second.call_count == 1

    def test_invalidate_forces_recompute(self, counting_source):
        cache = Cache(counting_source)
        cache.get_value(0.1)
        cache.invalidate()
        cache.get_value(0.1)
        assert counting_source.call_count == 2

    def test_returns_source_value(self):
        noise = ImprovedPerlin(seed=6)
        cache = Cache(noise)
        assert cache.get_value(0.3, 0.7, 1.1) == noise.get_value(0.3, 0.7, 1.1)

    def test_dimensions_follow_source(self):
        assert Cache(Voronoi(Constant(0.0))).dimensions == frozenset((3,))


class TestClamp:
    """Test saturation."""

    @pytest.mark.parametrize("value,expected", [(-3.0, -0.5), (0.2, 0.2), (4.0, 0.75)])
    def test_clamps_to_bounds(self, value, expected):
        assert Clamp(Constant(value), -0.5, 0.75).get_value(0.0) == expected

    def test_rejects_inverted_bounds(self):
        with pytest.raises(ValueError):
            Clamp(Constant(0.0), 1.0, -1.0)
        clamp = Clamp(Constant(0.0))
        with pytest.raises(ValueError):
            clamp.set_bounds(0.5, 0.5)
        assert (clamp.lower_bound, clamp.upper_bound) == (-1.0, 1.0)


class TestCurve:
    """Test spline remapping."""

    def test_control_points_sorted(self):
        curve = Curve(Constant(0.0))
        for point in reversed(MONOTONE_POINTS):
            curve.add_control_point(*point)
        assert curve.control_points == tuple(ControlPoint(*p) for p in MONOTONE_POINTS)

    def test_duplicate_input_rejected(self):
        curve = Curve(Constant(0.0), MONOTONE_POINTS)
        with pytest.raises(ValueError):
            curve.add_control_point(0.0, 0.9)
        assert len(curve.control_points) == 5

    def test_too_few_points_rejected(self):
        curve = Curve(Constant(0.0), MONOTONE_POINTS[:3])
        with pytest.raises(ValueError):
            curve.get_value(0.0)

    def test_clear_control_points(self):
        curve = Curve(Constant(0.0), MONOTONE_POINTS)
        curve.clear_control_points()
        assert curve.control_points == ()
        with pytest.raises(ValueError):
            curve.map_value(0.0)

    def test_hits_control_points_exactly(self):
        curve = Curve(Constant(0.0), MONOTONE_POINTS)
        for input_value, output_value in MONOTONE_POINTS:
            assert curve.map_value(input_value) == pytest.approx(output_value)

    def test_clamps_outside_range(self):
        curve = Curve(Constant(0.0), MONOTONE_POINTS)
        assert curve.map_value(-5.0) == -1.0
        assert curve.map_value(5.0) == 1.0

    def test_monotone_points_give_monotone_curve(self):
        curve = Curve(Constant(0.0), MONOTONE_POINTS)
        outputs = [curve.map_value(v) for v in np.linspace(-1.0, 1.0, 401)]
        assert all(b >= a - 1e-12 for a, b in zip(outputs, outputs[1:]))

    def test_linear_points_stay_linear(self):
        points = [(-1.0, -1.0), (-0.7, -0.7), (0.1, 0.1), (0.25, 0.25), (1.0, 1.0)]
        curve = Curve(Constant(0.0), points)
        for value in np.linspace(-1.0, 1.0, 41):
            assert curve.map_value(value) == pytest.approx(value)

    def test_unevenly_spaced_rising_points_never_dip(self):
        points = [(0.0, 0.0), (1.0, 0.01), (2.0, 10.0), (3.0, 10.01)]
        curve = Curve(Constant(0.0), points)
        outputs = [curve.map_value(v) for v in np.linspace(0.0, 3.0, 301)]
        assert all(b > a for a, b in zip(outputs, outputs[1:]))
        assert min(outputs) == 0.0
        assert max(outputs) == 10.01
        assert 0.0 < curve.map_value(0.5) < 0.01

    def test_no_overshoot_between_alternating_points(self):
        points = [(0.0, 0.0), (1.0, 1.0), (2.0, 0.0), (3.0, 1.0), (4.0, 0.0)]
        curve = Curve(Constant(0.0), points)
        outputs = np.array([curve.map_value(v) for v in np.linspace(0.0, 4.0, 401)])
        assert outputs.min() >= 0.0
        assert outputs.max() <= 1.0

    def test_adding_a_point_reshapes_curve(self):
        curve = Curve(Constant(0.0), [(0.0, 0.0), (1.0, 1.0), (2.0, 2.0), (3.0, 3.0)])
        assert curve.map_value(1.5) == pytest.approx(1.5)
        curve.add_control_point(1.5, 1.0)
        assert curve.map_value(1.5) == 1.0
        assert curve.map_value(1.25) == pytest.approx(1.0)

    def test_applies_to_source_value(self):
        curve = Curve(Constant(0.5), MONOTONE_POINTS)
        assert curve.get_value(1.0, 2.0) == pytest.approx(0.4)

    def test_missing_source(self):
        with pytest.raises(MissingSourceError):
            Curve(control_points=MONOTONE_POINTS).get_value(0.0)


class TestTerrace:
    """Test terrace forming."""

    def test_make_control_points(self):
        terrace = Terrace(Constant(0.0))
        terrace.make_control_points(3)
        assert terrace.control_points == pytest.approx((-1.0, 0.0, 1.0))

    def test_make_control_points_needs_two(self):
        with pytest.raises(ValueError):
            Terrace(Constant(0.0)).make_control_points(1)

    def test_eases_out_of_lower_step(self):
        terrace = Terrace(Constant(0.5), [-1.0, 0.0, 1.0])
        assert terrace.get_value(0.0) == pytest.approx(0.25)

    def test_invert(self):
        terrace = Terrace(Constant(0.5), [-1.0, 0.0, 1.0], invert=True)
        assert terrace.get_value(0.0) == pytest.approx(0.75)

    def test_clamps_outside_range(self):
        terrace = Terrace(Constant(0.0), [-0.5, 0.5])
        assert terrace.map_value(-2.0) == -0.5
        assert terrace.map_value(2.0) == 0.5

    def test_steps_are_flat_at_control_points(self):
        terrace = Terrace(Constant(0.0), [-1.0, 0.0, 1.0])
        assert terrace.map_value(0.0) == 0.0
        assert terrace.map_value(1e-4) == pytest.approx(0.0, abs=1e-7)

    def test_duplicate_rejected(self):
        terrace = Terrace(Constant(0.0), [0.0, 1.0])
        with pytest.raises(ValueError):
            terrace.add_control_point(0.0)

    def test_too_few_points(self):
        with pytest.raises(ValueError):
            Terrace(Constant(0.0), [0.0]).get_value(0.0)


class TestArithmetic:
    """Test the small arithmetic modifiers."""

    def test_scale_bias(self):
        assert ScaleBias(Constant(0.5), scale=3.0, bias=-1.0).get_value(0.0, 0.0) == pytest.approx(0.5)

    def test_scale_bias_defaults_are_identity(self):
        assert ScaleBias(Constant(-0.3)).get_value(1.0) == pytest.approx(-0.3)

    def test_abs(self):
        assert Abs(Constant(-0.7)).get_value(0.0) == pytest.approx(0.7)

    def test_invert(self):
        assert Invert(Constant(0.25)).get_value(0.0, 0.0, 0.0, 0.0) == -0.25

    @pytest.mark.parametrize("value,exponent,expected", [
        (0.0, 2.0, -0.5),
        (1.0, 3.0, 1.0),
        (-1.0, 2.0, -1.0),
        (0.0, 1.0, 0.0),
    ])
    def test_exponent(self, value, exponent, expected):
        assert Exponent(Constant(value), exponent).get_value(0.0) == pytest.approx(expected)
