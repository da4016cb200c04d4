# noise_modules/transformer.py

"""
================================================================================
COORDINATE TRANSFORMERS
================================================================================
Transformers remap the input coordinate and hand it to their source module
unchanged otherwise. They keep no per-call state; the only derived data is
the rotation matrix, which is rebuilt from all three angles on every angle
change.
================================================================================
"""

import logging
import math

from . import config as DEFAULTS
from .module import SourceModule, NoiseModule, MissingSourceError, ALL_DIMENSIONS

logger = logging.getLogger(__name__)

DEG_TO_RAD = math.pi / 180.0


class ScalePoint(SourceModule):
    """Multiplies each input axis by its own factor."""
    capabilities = ALL_DIMENSIONS

    def __init__(self, source: NoiseModule = None,
                 x_scale: float = DEFAULTS.DEFAULT_SCALE,
                 y_scale: float = DEFAULTS.DEFAULT_SCALE,
                 z_scale: float = DEFAULTS.DEFAULT_SCALE,
                 w_scale: float = DEFAULTS.DEFAULT_SCALE):
        super().__init__(source)
        self.x_scale = x_scale
        self.y_scale = y_scale
        self.z_scale = z_scale
        self.w_scale = w_scale

    def _evaluate(self, coords: tuple) -> float:
        factors = (self.x_scale, self.y_scale, self.z_scale, self.w_scale)
        return self._source.get_value(*(c * f for c, f in zip(coords, factors)))


class TranslatePoint(SourceModule):
    """Moves the input coordinate by a fixed offset per axis."""
    capabilities = ALL_DIMENSIONS

    def __init__(self, source: NoiseModule = None,
                 x_translate: float = DEFAULTS.DEFAULT_TRANSLATE,
                 y_translate: float = DEFAULTS.DEFAULT_TRANSLATE,
                 z_translate: float = DEFAULTS.DEFAULT_TRANSLATE,
                 w_translate: float = DEFAULTS.DEFAULT_TRANSLATE):
        super().__init__(source)
        self.x_translate = x_translate
        self.y_translate = y_translate
        self.z_translate = z_translate
        self.w_translate = w_translate

    def _evaluate(self, coords: tuple) -> float:
        offsets = (self.x_translate, self.y_translate, self.z_translate, self.w_translate)
        return self._source.get_value(*(c + o for c, o in zip(coords, offsets)))


class RotatePoint(SourceModule):
    """
    Rotates the 3D input coordinate around the origin before sampling.

    Angles are in degrees. Setting any angle rebuilds the whole matrix from
    the three current angles.
    """
    capabilities = frozenset((3,))

    def __init__(self, source: NoiseModule = None,
                 x_angle: float = DEFAULTS.DEFAULT_ROTATE_X,
                 y_angle: float = DEFAULTS.DEFAULT_ROTATE_Y,
                 z_angle: float = DEFAULTS.DEFAULT_ROTATE_Z):
        super().__init__(source)
        self.set_angles(x_angle, y_angle, z_angle)

    def set_angles(self, x_angle: float, y_angle: float, z_angle: float):
        x_cos = math.cos(x_angle * DEG_TO_RAD)
        y_cos = math.cos(y_angle * DEG_TO_RAD)
        z_cos = math.cos(z_angle * DEG_TO_RAD)
        x_sin = math.sin(x_angle * DEG_TO_RAD)
        y_sin = math.sin(y_angle * DEG_TO_RAD)
        z_sin = math.sin(z_angle * DEG_TO_RAD)

        self._matrix = (
            (y_sin * x_sin * z_sin + y_cos * z_cos, x_cos * z_sin, y_sin * z_cos - y_cos * x_sin * z_sin),
            (y_sin * x_sin * z_cos - y_cos * z_sin, x_cos * z_cos, -y_cos * x_sin * z_cos - y_sin * z_sin),
            (-y_sin * x_cos, x_sin, y_cos * x_cos),
        )
        self._x_angle = x_angle
        self._y_angle = y_angle
        self._z_angle = z_angle
        logger.debug(f"RotatePoint: matrix rebuilt for angles ({x_angle}, {y_angle}, {z_angle})")

    @property
    def matrix(self) -> tuple:
        return self._matrix

    @property
    def x_angle(self) -> float:
        return self._x_angle

    @x_angle.setter
    def x_angle(self, value: float):
        self.set_angles(value, self._y_angle, self._z_angle)

    @property
    def y_angle(self) -> float:
        return self._y_angle

    @y_angle.setter
    def y_angle(self, value: float):
        self.set_angles(self._x_angle, value, self._z_angle)

    @property
    def z_angle(self) -> float:
        return self._z_angle

    @z_angle.setter
    def z_angle(self, value: float):
        self.set_angles(self._x_angle, self._y_angle, value)

    def _evaluate(self, coords: tuple) -> float:
        x, y, z = coords
        (m11, m12, m13), (m21, m22, m23), (m31, m32, m33) = self._matrix
        nx = m11 * x + m12 * y + m13 * z
        ny = m21 * x + m22 * y + m23 * z
        nz = m31 * x + m32 * y + m33 * z
        return self._source.get_value(nx, ny, nz)


class Turbulence(SourceModule):
    """
    Randomly displaces the 3D input coordinate before sampling the source.

    Each axis is pushed by its own distortion module, sampled at a slightly
    shifted point so the three displacements are uncorrelated, and scaled
    by `power`.
    """
    capabilities = frozenset((3,))

    # Fixed sub-unit shifts, one triple per distortion module.
    X_SHIFT = (12414.0 / 65536.0, 65124.0 / 65536.0, 31337.0 / 65536.0)
    Y_SHIFT = (26519.0 / 65536.0, 18128.0 / 65536.0, 60493.0 / 65536.0)
    Z_SHIFT = (53820.0 / 65536.0, 11213.0 / 65536.0, 44845.0 / 65536.0)

    def __init__(self, source: NoiseModule = None,
                 x_distort: NoiseModule = None,
                 y_distort: NoiseModule = None,
                 z_distort: NoiseModule = None,
                 power: float = DEFAULTS.DEFAULT_TURBULENCE_POWER):
        super().__init__(source)
        self.x_distort = x_distort
        self.y_distort = y_distort
        self.z_distort = z_distort
        self.power = power

    def _distortions(self) -> tuple:
        distortions = (self.x_distort, self.y_distort, self.z_distort)
        if any(module is None for module in distortions):
            raise MissingSourceError("Turbulence needs x, y and z distortion modules")
        return distortions

    def _evaluate(self, coords: tuple) -> float:
        x, y, z = coords
        x_distort, y_distort, z_distort = self._distortions()

        dx = x_distort.get_value(x + self.X_SHIFT[0], y + self.X_SHIFT[1], z + self.X_SHIFT[2])
        dy = y_distort.get_value(x + self.Y_SHIFT[0], y + self.Y_SHIFT[1], z + self.Y_SHIFT[2])
        dz = z_distort.get_value(x + self.Z_SHIFT[0], y + self.Z_SHIFT[1], z + self.Z_SHIFT[2])

        return self._source.get_value(x + dx * self.power, y + dy * self.power, z + dz * self.power)
