# noise_modules/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback constants for every noise module.
These values are used whenever a module is constructed without an explicit
value, or when a graph configuration dictionary omits a key.

DO NOT MODIFY THIS FILE FOR A SPECIFIC GRAPH.
Instead, pass a configuration dictionary to the NoiseGraph instance.
================================================================================
"""

# --- Seeding ---
DEFAULT_SEED = 1337
# Offset added per module index when a graph derives module seeds from its
# master seed. Keeps layers unique but deterministic.
MODULE_SEED_STRIDE = 1

# --- Permutation Table ---
PERMUTATION_SIZE = 256
PERMUTATION_MASK = 0xFF

# --- Noise Quality ---
# Selects the smoothing curve used between lattice points.
QUALITY_FAST = 0      # linear, no smoothing
QUALITY_STANDARD = 1  # cubic s-curve, 3t^2 - 2t^3
QUALITY_BEST = 2      # quintic s-curve, 6t^5 - 15t^4 + 10t^3
DEFAULT_QUALITY = QUALITY_BEST

# --- Fractal Filters ---
DEFAULT_FREQUENCY = 1.0
DEFAULT_LACUNARITY = 2.0
DEFAULT_OCTAVE_COUNT = 6.0
# The spectral weight table is always this long.
MAX_OCTAVE = 30
DEFAULT_OFFSET = 1.0
DEFAULT_SPECTRAL_EXPONENT = 0.9

# --- Voronoi ---
DEFAULT_DISPLACEMENT = 1.0

# --- Transformers ---
DEFAULT_ROTATE_X = 0.0
DEFAULT_ROTATE_Y = 0.0
DEFAULT_ROTATE_Z = 0.0
DEFAULT_SCALE = 1.0
DEFAULT_TRANSLATE = 0.0
DEFAULT_TURBULENCE_POWER = 1.0

# --- Modifiers ---
DEFAULT_CLAMP_LOWER = -1.0
DEFAULT_CLAMP_UPPER = 1.0
DEFAULT_BIAS = 0.0
DEFAULT_SCALE_FACTOR = 1.0
DEFAULT_EXPONENT = 1.0
DEFAULT_CONSTANT_VALUE = 0.0
# Fewest control points a Curve will evaluate with.
MIN_CURVE_CONTROL_POINTS = 4
MIN_TERRACE_CONTROL_POINTS = 2
