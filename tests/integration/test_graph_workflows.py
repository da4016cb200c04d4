"""
Integration tests for building and rewiring noise graphs from config.
"""
import logging

import numpy as np
import pytest

from noise_modules import (
    NoiseGraph, GraphCycleError, MODULE_TYPES, SimplexPerlin, ImprovedPerlin,
    SumFractal, Clamp, Turbulence, Constant, ScalePoint, Abs,
)

TERRAIN_CONFIG = {
    "seed": 42,
    "modules": {
        "base": {"type": "simplex_perlin"},
        "fbm": {"type": "sum_fractal", "source": "base", "octave_count": 4, "frequency": 0.5},
        "shaped": {"type": "clamp", "source": "fbm", "lower_bound": -0.8, "upper_bound": 0.8},
    },
    "output": "shaped",
}


class TestGraphConstruction:
    """Test building graphs from a config dict."""

    def test_config_matches_manual_chain(self, sample_points):
        graph = NoiseGraph(TERRAIN_CONFIG)
        manual = Clamp(SumFractal(SimplexPerlin(seed=42), octave_count=4, frequency=0.5), -0.8, 0.8)
        for point in sample_points[:25, :3]:
            assert graph.get_value(*point) == manual.get_value(*point)

    def test_modules_declared_before_their_sources(self):
        config = {
            "modules": {
                "out": {"type": "invert", "source": "base"},
                "base": {"type": "constant", "value": 0.3},
            },
            "output": "out",
        }
        assert NoiseGraph(config).get_value(1.0, 2.0) == pytest.approx(-0.3)

    def test_seeds_follow_declaration_index(self):
        config = {
            "seed": 100,
            "module_seed_stride": 10,
            "modules": {
                "a": {"type": "improved_perlin"},
                "b": {"type": "simplex_perlin"},
                "c": {"type": "improved_perlin", "seed": 7},
            },
        }
        graph = NoiseGraph(config)
        assert graph.module("a").seed == 100
        assert graph.module("b").seed == 110
        assert graph.module("c").seed == 7

    def test_same_config_is_deterministic(self, sample_points):
        first = NoiseGraph(TERRAIN_CONFIG)
        second = NoiseGraph(TERRAIN_CONFIG)
        for point in sample_points[:10, :3]:
            assert first.get_value(*point) == second.get_value(*point)

    def test_turbulence_sources(self):
        config = {
            "modules": {
                "base": {"type": "improved_perlin"},
                "distort": {"type": "constant", "value": 0.0},
                "turb": {
                    "type": "turbulence",
                    "source": "base",
                    "sources": {"x_distort": "distort", "y_distort": "distort", "z_distort": "distort"},
                },
            },
            "output": "turb",
        }
        graph = NoiseGraph(config)
        assert isinstance(graph.output, Turbulence)
        assert graph.sources_of("turb") == {
            "source": "base", "x_distort": "distort", "y_distort": "distort", "z_distort": "distort",
        }
        assert graph.get_value(0.3, 0.4, 0.5) == graph.module("base").get_value(0.3, 0.4, 0.5)

    def test_registry_covers_every_module(self):
        assert len(MODULE_TYPES) == 19
        assert MODULE_TYPES["voronoi"].__name__ == "Voronoi"

    def test_uses_injected_logger(self, caplog):
        logger = logging.getLogger("test.noise_graph")
        with caplog.at_level(logging.INFO, logger="test.noise_graph"):
            NoiseGraph(TERRAIN_CONFIG, logger=logger)
        assert any("NoiseGraph initialized" in record.message for record in caplog.records)


class TestGraphErrors:
    """Test config and wiring errors."""

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="unknown type"):
            NoiseGraph({"modules": {"a": {"type": "mountain"}}})

    def test_missing_type(self):
        with pytest.raises(ValueError, match="no 'type'"):
            NoiseGraph({"modules": {"a": {"seed": 3}}})

    def test_unknown_source(self):
        with pytest.raises(ValueError, match="No module named"):
            NoiseGraph({"modules": {"a": {"type": "abs", "source": "missing"}}})

    def test_bad_parameter(self):
        with pytest.raises(ValueError, match="invalid parameters"):
            NoiseGraph({"modules": {"a": {"type": "abs", "strength": 3}}})

    def test_cycle_in_config(self):
        config = {
            "modules": {
                "a": {"type": "abs", "source": "b"},
                "b": {"type": "invert", "source": "a"},
            },
        }
        with pytest.raises(GraphCycleError):
            NoiseGraph(config)

    def test_self_loop(self):
        graph = NoiseGraph({"modules": {"a": {"type": "abs"}}})
        with pytest.raises(GraphCycleError):
            graph.connect("a", "a")

    def test_duplicate_name(self):
        graph = NoiseGraph()
        graph.add("noise", ImprovedPerlin())
        with pytest.raises(ValueError):
            graph.add("noise", ImprovedPerlin())

    def test_non_module_rejected(self):
        with pytest.raises(ValueError):
            NoiseGraph().add("bad", object())

    def test_unknown_slot(self):
        graph = NoiseGraph({"modules": {"a": {"type": "abs"}, "b": {"type": "constant"}}})
        with pytest.raises(ValueError, match="no source slot"):
            graph.connect("a", "b", slot="x_distort")

    def test_no_output(self):
        graph = NoiseGraph({"modules": {"a": {"type": "constant"}}})
        with pytest.raises(ValueError):
            graph.get_value(0.0)


class TestGraphRewiring:
    """Test changing a built graph."""

    def test_rebinding_source_changes_output(self):
        graph = NoiseGraph({
            "modules": {
                "low": {"type": "constant", "value": -0.5},
                "high": {"type": "constant", "value": 0.5},
                "out": {"type": "abs", "source": "low"},
            },
            "output": "out",
        })
        graph.connect("out", "high")
        assert graph.sources_of("out") == {"source": "high"}
        assert graph.get_value(0.0) == 0.5

    def test_rebinding_releases_old_upstream(self):
        graph = NoiseGraph({
            "modules": {
                "a": {"type": "abs", "source": "b"},
                "b": {"type": "invert"},
                "c": {"type": "constant"},
            },
        })
        with pytest.raises(GraphCycleError):
            graph.connect("b", "a")
        graph.connect("a", "c")
        graph.connect("b", "a")
        assert graph.sources_of("b") == {"source": "a"}

    def test_manual_graph(self):
        graph = NoiseGraph()
        graph.add("one", Constant(1.0))
        graph.add("sum", SumFractal(octave_count=1))
        graph.connect("sum", "one")
        graph.set_output("sum")
        assert graph.names() == ["one", "sum"]
        assert graph.get_value(0.0, 0.0, 0.0, 0.0) == 1.0


class TestPrewiredModules:
    """Test modules that arrive with their sources already bound."""

    def test_prewired_source_is_reported(self):
        graph = NoiseGraph()
        perlin = ImprovedPerlin(seed=3)
        scale = ScalePoint(perlin)
        graph.add("perlin", perlin)
        graph.add("scale", scale)
        graph.add("fbm", SumFractal(scale))
        assert graph.sources_of("scale") == {"source": "perlin"}
        assert graph.sources_of("fbm") == {"source": "scale"}

    def test_cycle_through_prewired_source_rejected(self):
        graph = NoiseGraph()
        scale = ScalePoint(ImprovedPerlin(seed=3))
        fbm = SumFractal(scale, octave_count=2)
        graph.add("scale", scale)
        graph.add("fbm", fbm)
        with pytest.raises(GraphCycleError):
            graph.connect("scale", "fbm")
        assert graph.sources_of("fbm") == {"source": "scale"}
        assert np.isfinite(fbm.get_value(0.1, 0.2))

    def test_cycle_through_unregistered_module_rejected(self):
        graph = NoiseGraph()
        fbm = SumFractal()
        graph.add("fbm", fbm)
        graph.add("outer", Abs(ScalePoint(fbm)))
        assert graph.sources_of("outer") == {}
        with pytest.raises(GraphCycleError):
            graph.connect("fbm", "outer")

    def test_module_already_in_a_loop_rejected(self):
        scale = ScalePoint()
        fbm = SumFractal(scale)
        scale.source = fbm
        with pytest.raises(GraphCycleError):
            NoiseGraph().add("fbm", fbm)
