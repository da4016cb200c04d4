# noise_modules/module.py

"""
================================================================================
NOISE MODULE PROTOCOL
================================================================================
Every node of a noise graph derives from NoiseModule. A node answers
`get_value(*coords)` for each dimensionality it declares in `capabilities`
and refuses the others. `dimensions` narrows that to what the whole
upstream chain supports; it is for callers inspecting a graph, while
evaluation checks one node at a time.

Data Contract:
---------------
- Inputs: 1 to 4 coordinates, passed positionally.
- Outputs: A float, usually (but not strictly) within [-1, 1].
- Side Effects: None, except the single memo slot held by Cache.
- Invariants: Given unchanged parameters and sources, the same coordinate
  always produces the same value.

Threading:
---------------
Modules carry no locks. Parameters and sources are plain attributes that a
setter rewrites in place. Any number of threads may evaluate a graph whose
parameters are not changing; a thread that mutates a module (or a Cache
being evaluated) must be the only one touching it.
================================================================================
"""

ALL_DIMENSIONS = frozenset((1, 2, 3, 4))


class UnsupportedDimensionError(ValueError):
    """Raised when a module is evaluated with a coordinate it cannot handle."""


class MissingSourceError(ValueError):
    """Raised when a module that needs a source is evaluated without one."""


class NoiseModule:
    """
    Base class for all noise modules. Subclasses set `capabilities` and
    implement `_evaluate(coords)`.
    """
    capabilities = frozenset()

    @property
    def dimensions(self) -> frozenset:
        """The dimensionalities this module can currently be evaluated in."""
        return self.capabilities

    def get_value(self, *coords) -> float:
        """
        Generates an output value for the given input coordinate.

        Args:
            *coords: 1 to 4 floats (x, y, z, w).

        Returns:
            float: The resulting output value.

        Raises:
            UnsupportedDimensionError: If this module, or a module it pulls
                from, cannot handle the coordinate's dimensionality.
        """
        # Only this node's own capability is checked here; each upstream
        # node checks its own when it is called.
        if len(coords) not in self.capabilities:
            raise UnsupportedDimensionError(
                f"{type(self).__name__} cannot be evaluated in {len(coords)}D "
                f"(supports {sorted(self.capabilities)})"
            )
        return self._evaluate(tuple(float(c) for c in coords))

    def _evaluate(self, coords: tuple) -> float:
        raise NotImplementedError


class SourceModule(NoiseModule):
    """
    A module that pulls its value from exactly one upstream module.

    The source reference is not owned; it may be rebound between calls.
    """
    def __init__(self, source: NoiseModule = None):
        self._source = source

    @property
    def source(self) -> NoiseModule:
        return self._source

    @source.setter
    def source(self, module: NoiseModule):
        self._source = module

    @property
    def dimensions(self) -> frozenset:
        if self._source is None:
            return self.capabilities
        return self.capabilities & self._source.dimensions

    def _require_source(self) -> NoiseModule:
        if self._source is None:
            raise MissingSourceError(f"{type(self).__name__} has no source module")
        return self._source

    def get_value(self, *coords) -> float:
        self._require_source()
        return super().get_value(*coords)
