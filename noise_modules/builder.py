# noise_modules/builder.py

"""
================================================================================
NOISE MAP BUILDERS
================================================================================
Helpers that sample a noise module over a regular grid and return the result
as a NumPy array. Three surfaces are supported: a flat plane (optionally
blended so the map tiles seamlessly), a sphere and a cylinder.

Data Contract:
---------------
- Inputs:
    - source: Any noise module that can be evaluated in 3D.
    - width, height: Output size in samples.
    - bounds: The region of the surface to sample.
- Outputs:
    - A float64 array of shape (height, width). Row index follows the
      second bound pair, column index the first.
- Side Effects: Calls the optional callback once per finished row.
================================================================================
"""

import logging
import math

import numpy as np

from .interp import lerp
from .module import NoiseModule, MissingSourceError

logger = logging.getLogger(__name__)

DEG_TO_RAD = math.pi / 180.0


def _check_request(source: NoiseModule, width: int, height: int, bounds: tuple):
    if source is None:
        raise MissingSourceError("A source module must be provided")
    if width < 0 or height < 0:
        raise ValueError(f"Dimensions must be greater or equal 0, got {width}x{height}")
    lower_a, upper_a, lower_b, upper_b = bounds
    if lower_a >= upper_a or lower_b >= upper_b:
        raise ValueError(f"Incoherent bounds {bounds}: each lower bound must be below its upper bound")


def lat_lon_to_xyz(lat: float, lon: float) -> tuple:
    """Converts latitude/longitude in degrees to a point on the unit sphere."""
    r = math.cos(lat * DEG_TO_RAD)
    return (
        r * math.cos(lon * DEG_TO_RAD),
        math.sin(lat * DEG_TO_RAD),
        r * math.sin(lon * DEG_TO_RAD),
    )


def build_plane_map(source: NoiseModule, width: int, height: int,
                    bounds: tuple = (-1.0, 1.0, -1.0, 1.0),
                    seamless: bool = False, callback=None) -> np.ndarray:
    """
    Samples `source(x, 0, z)` over a rectangle of the x/z plane.

    Args:
        bounds (tuple): (lower_x, upper_x, lower_z, upper_z).
        seamless (bool): Blend each sample with its copies one extent away
            so that opposite edges of the map match.
        callback (callable, optional): Called with the row index after each row.
    """
    _check_request(source, width, height, bounds)
    lower_x, upper_x, lower_z, upper_z = bounds
    x_extent = upper_x - lower_x
    z_extent = upper_z - lower_z
    x_coords = lower_x + np.arange(width) * (x_extent / width) if width else np.empty(0)
    z_coords = lower_z + np.arange(height) * (z_extent / height) if height else np.empty(0)

    logger.debug(f"Building {width}x{height} plane map over {bounds} (seamless={seamless})")
    noise_map = np.empty((height, width), dtype=np.float64)

    for row, z in enumerate(z_coords):
        for col, x in enumerate(x_coords):
            if seamless:
                sw_value = source.get_value(x, 0.0, z)
                se_value = source.get_value(x + x_extent, 0.0, z)
                nw_value = source.get_value(x, 0.0, z + z_extent)
                ne_value = source.get_value(x + x_extent, 0.0, z + z_extent)
                x_blend = 1.0 - ((x - lower_x) / x_extent)
                z_blend = 1.0 - ((z - lower_z) / z_extent)
                z0 = lerp(sw_value, se_value, x_blend)
                z1 = lerp(nw_value, ne_value, x_blend)
                noise_map[row, col] = lerp(z0, z1, z_blend)
            else:
                noise_map[row, col] = source.get_value(x, 0.0, z)
        if callback is not None:
            callback(row)

    return noise_map


def build_sphere_map(source: NoiseModule, width: int, height: int,
                     bounds: tuple = (-90.0, 90.0, -180.0, 180.0),
                     callback=None) -> np.ndarray:
    """
    Samples the surface of the unit sphere.

    Args:
        bounds (tuple): (south, north, west, east) in degrees. Rows run
            from south to north, columns from west to east.
    """
    south, north, west, east = bounds
    _check_request(source, width, height, (west, east, south, north))
    lon_delta = (east - west) / width if width else 0.0
    lat_delta = (north - south) / height if height else 0.0

    logger.debug(f"Building {width}x{height} sphere map over {bounds}")
    noise_map = np.empty((height, width), dtype=np.float64)

    for row in range(height):
        lat = south + row * lat_delta
        for col in range(width):
            lon = west + col * lon_delta
            noise_map[row, col] = source.get_value(*lat_lon_to_xyz(lat, lon))
        if callback is not None:
            callback(row)

    return noise_map


def build_cylinder_map(source: NoiseModule, width: int, height: int,
                       bounds: tuple = (-180.0, 180.0, -1.0, 1.0),
                       callback=None) -> np.ndarray:
    """
    Samples the surface of a unit-radius cylinder standing on the y axis.

    Args:
        bounds (tuple): (lower_angle, upper_angle, lower_height,
            upper_height), angles in degrees.
    """
    _check_request(source, width, height, bounds)
    lower_angle, upper_angle, lower_height, upper_height = bounds
    angle_delta = (upper_angle - lower_angle) / width if width else 0.0
    height_delta = (upper_height - lower_height) / height if height else 0.0

    logger.debug(f"Building {width}x{height} cylinder map over {bounds}")
    noise_map = np.empty((height, width), dtype=np.float64)

    for row in range(height):
        y = lower_height + row * height_delta
        for col in range(width):
            angle = (lower_angle + col * angle_delta) * DEG_TO_RAD
            noise_map[row, col] = source.get_value(math.cos(angle), y, math.sin(angle))
        if callback is not None:
            callback(row)

    return noise_map
