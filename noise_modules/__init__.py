# noise_modules/__init__.py

# Public API of the noise module graph.

from .module import NoiseModule, SourceModule, UnsupportedDimensionError, MissingSourceError
from .primitive import ImprovedPerlin, SimplexPerlin, Constant, make_permutation_table
from .filter import SumFractal, SinFractal, MultiFractal, Voronoi, compute_spectral_weights
from .transformer import ScalePoint, TranslatePoint, RotatePoint, Turbulence
from .modifier import ControlPoint, Cache, Clamp, Curve, Terrace, ScaleBias, Abs, Invert, Exponent
from .graph import NoiseGraph, GraphCycleError, MODULE_TYPES
from .builder import build_plane_map, build_sphere_map, build_cylinder_map
from .config import QUALITY_FAST, QUALITY_STANDARD, QUALITY_BEST

__all__ = [
    "NoiseModule", "SourceModule", "UnsupportedDimensionError", "MissingSourceError",
    "ImprovedPerlin", "SimplexPerlin", "Constant", "make_permutation_table",
    "SumFractal", "SinFractal", "MultiFractal", "Voronoi", "compute_spectral_weights",
    "ScalePoint", "TranslatePoint", "RotatePoint", "Turbulence",
    "ControlPoint", "Cache", "Clamp", "Curve", "Terrace", "ScaleBias", "Abs", "Invert", "Exponent",
    "NoiseGraph", "GraphCycleError", "MODULE_TYPES",
    "build_plane_map", "build_sphere_map", "build_cylinder_map",
    "QUALITY_FAST", "QUALITY_STANDARD", "QUALITY_BEST",
]
