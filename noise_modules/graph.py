# noise_modules/graph.py

"""
================================================================================
NOISE GRAPH
================================================================================
This module contains the NoiseGraph class, an arena that owns a set of named
noise modules, wires them together and evaluates the designated output
module.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): A graph description which can override the internal
      defaults. Expected keys are 'seed', 'modules' and 'output'.
    - logger: A configured Python logging object for runtime messages.
- Outputs (from methods):
    - Scalar noise values for a coordinate of 1 to 4 dimensions.
- Side Effects: Logs messages using the provided logger.
- Invariants: Given the same config, the graph and its output are
  deterministic. No module the graph registers or
  connects ever becomes its own upstream.

Example config:
    {
        "seed": 42,
        "modules": {
            "base": {"type": "simplex_perlin"},
            "fbm": {"type": "sum_fractal", "source": "base", "octave_count": 4},
            "shaped": {"type": "clamp", "source": "fbm"},
        },
        "output": "shaped",
    }
================================================================================
"""

import logging

from . import config as DEFAULTS
from .filter import SumFractal, SinFractal, MultiFractal, Voronoi
from .modifier import Cache, Clamp, Curve, Terrace, ScaleBias, Abs, Invert, Exponent
from .module import NoiseModule
from .primitive import ImprovedPerlin, SimplexPerlin, Constant
from .transformer import ScalePoint, TranslatePoint, RotatePoint, Turbulence

MODULE_TYPES = {
    "improved_perlin": ImprovedPerlin,
    "simplex_perlin": SimplexPerlin,
    "constant": Constant,
    "sum_fractal": SumFractal,
    "sin_fractal": SinFractal,
    "multi_fractal": MultiFractal,
    "voronoi": Voronoi,
    "scale_point": ScalePoint,
    "translate_point": TranslatePoint,
    "rotate_point": RotatePoint,
    "turbulence": Turbulence,
    "cache": Cache,
    "clamp": Clamp,
    "curve": Curve,
    "terrace": Terrace,
    "scale_bias": ScaleBias,
    "abs": Abs,
    "invert": Invert,
    "exponent": Exponent,
}

# Module types whose constructor takes a seed.
SEEDED_TYPES = ("improved_perlin", "simplex_perlin")

# Attribute names a graph may bind a source module to.
SOURCE_SLOTS = ("source", "x_distort", "y_distort", "z_distort")


def _upstream(module: NoiseModule):
    """Yields the modules currently bound to any source slot of `module`."""
    for slot in SOURCE_SLOTS:
        source = getattr(module, slot, None)
        if source is not None:
            yield source


class GraphCycleError(ValueError):
    """Raised when a connection would make a module depend on itself."""


class NoiseGraph:
    """
    Builds and holds a graph of noise modules addressed by name.

    Modules keep plain references to their sources and those references
    are the only record of the wiring. The graph names the modules, follows
    the references to reject cycles and reports the wiring by name.
    """
    def __init__(self, config: dict = None, logger: logging.Logger = None):
        """
        Initializes the graph and builds any modules described in the config.

        Args:
            config (dict, optional): Graph description overriding defaults.
            logger (logging.Logger, optional): Logger for all output. Falls
                back to this module's logger.
        """
        self.logger = logger or logging.getLogger(__name__)
        self.user_config = config or {}

        self.settings = {
            'seed': self.user_config.get('seed', DEFAULTS.DEFAULT_SEED),
            'module_seed_stride': self.user_config.get('module_seed_stride', DEFAULTS.MODULE_SEED_STRIDE),
            'modules': self.user_config.get('modules', {}),
            'output': self.user_config.get('output'),
        }
        self.seed = self.settings['seed']

        self._modules = {}
        self._output = None

        if self.settings['modules']:
            self._build(self.settings['modules'])
        if self.settings['output'] is not None:
            self.set_output(self.settings['output'])

        self.logger.info(
            f"NoiseGraph initialized with seed {self.seed}: "
            f"{len(self._modules)} modules, output '{self._output}'"
        )

    def _build(self, module_specs: dict):
        # Create every module first so sources may be declared in any order.
        for index, (name, spec) in enumerate(module_specs.items()):
            self.add(name, self._create_module(name, index, spec))

        for name, spec in module_specs.items():
            if 'source' in spec:
                self.connect(name, spec['source'])
            for slot, source_name in spec.get('sources', {}).items():
                self.connect(name, source_name, slot=slot)

    def _create_module(self, name: str, index: int, spec: dict) -> NoiseModule:
        if 'type' not in spec:
            raise ValueError(f"Module '{name}' has no 'type'")
        module_type = spec['type']
        if module_type not in MODULE_TYPES:
            raise ValueError(f"Module '{name}' has unknown type '{module_type}'")

        params = {key: value for key, value in spec.items() if key not in ('type', 'source', 'sources')}
        if module_type in SEEDED_TYPES:
            params.setdefault('seed', self.seed + index * self.settings['module_seed_stride'])

        try:
            module = MODULE_TYPES[module_type](**params)
        except TypeError as e:
            raise ValueError(f"Module '{name}' ({module_type}): invalid parameters {sorted(params)}") from e
        self.logger.debug(f"Created module '{name}' of type '{module_type}' with {params}")
        return module

    def add(self, name: str, module: NoiseModule) -> str:
        """
        Registers a module under a unique name and returns the name. The
        module may already be wired to sources, registered or not.

        Raises:
            GraphCycleError: If the module is already its own upstream.
        """
        if name in self._modules:
            raise ValueError(f"A module named '{name}' already exists")
        if not isinstance(module, NoiseModule):
            raise ValueError(f"'{name}' is not a noise module: {module!r}")
        if any(self._reaches(source, module) for source in _upstream(module)):
            raise GraphCycleError(f"Module '{name}' already depends on itself")
        self._modules[name] = module
        return name

    def module(self, name: str) -> NoiseModule:
        try:
            return self._modules[name]
        except KeyError:
            raise ValueError(f"No module named '{name}'") from None

    def names(self) -> list:
        return list(self._modules)

    def _name_of(self, module: NoiseModule):
        for name, candidate in self._modules.items():
            if candidate is module:
                return name
        return None

    def sources_of(self, name: str) -> dict:
        """
        Returns the slot -> source name wiring of a module, read from its
        live source attributes. Sources that are not registered in the graph
        are left out.
        """
        module = self.module(name)
        wiring = {}
        for slot in SOURCE_SLOTS:
            source_name = self._name_of(getattr(module, slot, None))
            if source_name is not None:
                wiring[slot] = source_name
        return wiring

    def connect(self, name: str, source_name: str, slot: str = 'source'):
        """
        Binds `source_name` as the `slot` input of `name`, replacing whatever
        was bound there before.
        """
        module = self.module(name)
        source = self.module(source_name)
        if slot not in SOURCE_SLOTS or not hasattr(module, slot):
            raise ValueError(f"Module '{name}' has no source slot '{slot}'")
        if self._reaches(source, module):
            raise GraphCycleError(f"Connecting '{source_name}' into '{name}' would create a cycle")

        setattr(module, slot, source)
        self.logger.debug(f"Connected '{source_name}' -> '{name}'.{slot}")

    def _reaches(self, start: NoiseModule, target: NoiseModule) -> bool:
        """
        True when `target` is `start` or sits anywhere upstream of it. Walks
        the modules' own source attributes, so wiring made outside the graph
        is seen too.
        """
        stack = [start]
        seen = set()
        while stack:
            current = stack.pop()
            if current is target:
                return True
            if id(current) in seen:
                continue
            seen.add(id(current))
            stack.extend(_upstream(current))
        return False

    def set_output(self, name: str):
        self.module(name)
        self._output = name

    @property
    def output(self) -> NoiseModule:
        if self._output is None:
            raise ValueError("NoiseGraph has no output module")
        return self._modules[self._output]

    def get_value(self, *coords) -> float:
        """Evaluates the output module at the given coordinate."""
        return self.output.get_value(*coords)
