# procgen_lab/noise.py

"""
================================================================================
NOISE GENERATION UTILITIES
================================================================================
This module provides functions for generating 2D and 3D coherent noise
(Perlin, value, cellular) plus lattice white noise, combined into fractals.
The sampling functions are pure and stateless; `NoiseField` is a thin,
configurable wrapper used by the visualizers.

Data Contract:
---------------
- Inputs:
    - p: A pre-shuffled NumPy permutation table (int array, length 512).
    - seed: An integer seed for the hash-based noise types.
    - x, y, z: NumPy arrays of coordinates (all the same 2D shape).
    - octaves, lacunarity, gain: Standard fractal parameters.
- Outputs:
    - A NumPy array of noise values in the range [-1, 1].
- Side Effects: None.
- Invariants: The shape of the output array matches the shape of input x and y.
  Identical inputs always produce identical outputs.
================================================================================
"""

import logging

import numpy as np
from numba import njit

from . import config as DEFAULTS

# Pre-defined gradient vectors for performance.
_GRADIENT_VECTORS = np.array([[0, 1], [0, -1], [1, 0], [-1, 0]])

# Integer codes used inside the jitted kernels.
NOISE_PERLIN = 0
NOISE_VALUE = 1
NOISE_CELLULAR = 2
NOISE_WHITE = 3

FRACTAL_FBM = 0
FRACTAL_BILLOW = 1
FRACTAL_RIDGED = 2

# Each octave samples a shifted region so octaves don't line up at the origin.
_OCTAVE_OFFSET = 19.19
_RIDGED_WEIGHT_GAIN = DEFAULTS.RIDGED_WEIGHT_GAIN


def make_permutation_table(seed: int) -> np.ndarray:
    """Creates the doubled 512-entry permutation table for a seed."""
    p = np.arange(256, dtype=np.int64)
    rng = np.random.default_rng(seed)
    rng.shuffle(p)
    return np.stack([p, p]).flatten()


@njit
def _lerp(a, b, x):
    "Linear interpolation."
    return a + x * (b - a)

@njit
def _fade(t):
    "6t^5 - 15t^4 + 10t^3"
    return t * t * t * (t * (t * 6 - 15) + 10)

@njit
def _gradient(h, x, y):
    """Calculates the dot product between a gradient vector and coordinates."""
    g = _GRADIENT_VECTORS[h % 4]
    return g[0] * x + g[1] * y

@njit
def _gradient_3d(h, x, y, z):
    """Dot product with one of the 12 cube-edge gradients."""
    h = h & 15
    u = x if h < 8 else y
    if h < 4:
        v = y
    elif h == 12 or h == 14:
        v = x
    else:
        v = z
    a = u if (h & 1) == 0 else -u
    b = v if (h & 2) == 0 else -v
    return a + b

@njit
def _hash(seed, x, y, z):
    """32-bit avalanche hash of a lattice point."""
    h = (seed ^ (x * 0x1B873593) ^ (y * 0x19088711) ^ (z * 0x26D8C5B1)) & 0xFFFFFFFF
    h = ((h ^ (h >> 16)) * 0x45D9F3B) & 0xFFFFFFFF
    h = ((h ^ (h >> 16)) * 0x45D9F3B) & 0xFFFFFFFF
    return h ^ (h >> 16)


@njit
def _perlin_2d(p, x, y):
    xi = int(np.floor(x))
    yi = int(np.floor(y))
    xf = x - xi
    yf = y - yi
    u = _fade(xf)
    v = _fade(yf)

    px0 = xi % 256
    px1 = (px0 + 1) % 256
    py0 = yi % 256
    py1 = (py0 + 1) % 256

    g00 = _gradient(p[p[px0] + py0], xf, yf)
    g01 = _gradient(p[p[px0] + py1], xf, yf - 1)
    g10 = _gradient(p[p[px1] + py0], xf - 1, yf)
    g11 = _gradient(p[p[px1] + py1], xf - 1, yf - 1)

    x1 = _lerp(g00, g10, u)
    x2 = _lerp(g01, g11, u)
    return _lerp(x1, x2, v)

@njit
def _perlin_3d(p, x, y, z):
    xi = int(np.floor(x))
    yi = int(np.floor(y))
    zi = int(np.floor(z))
    xf = x - xi
    yf = y - yi
    zf = z - zi
    u = _fade(xf)
    v = _fade(yf)
    w = _fade(zf)

    X = xi % 256
    Y = yi % 256
    Z = zi % 256
    X1 = (X + 1) % 256
    Y1 = (Y + 1) % 256
    Z1 = (Z + 1) % 256

    a0 = p[p[X] + Y]
    a1 = p[p[X] + Y1]
    b0 = p[p[X1] + Y]
    b1 = p[p[X1] + Y1]

    x00 = _lerp(_gradient_3d(p[a0 + Z], xf, yf, zf), _gradient_3d(p[b0 + Z], xf - 1, yf, zf), u)
    x10 = _lerp(_gradient_3d(p[a1 + Z], xf, yf - 1, zf), _gradient_3d(p[b1 + Z], xf - 1, yf - 1, zf), u)
    x01 = _lerp(_gradient_3d(p[a0 + Z1], xf, yf, zf - 1), _gradient_3d(p[b0 + Z1], xf - 1, yf, zf - 1), u)
    x11 = _lerp(_gradient_3d(p[a1 + Z1], xf, yf - 1, zf - 1), _gradient_3d(p[b1 + Z1], xf - 1, yf - 1, zf - 1), u)

    return _lerp(_lerp(x00, x10, v), _lerp(x01, x11, v), w)

@njit
def _value_2d(p, x, y):
    xi = int(np.floor(x))
    yi = int(np.floor(y))
    u = _fade(x - xi)
    v = _fade(y - yi)
    px0 = xi % 256
    px1 = (px0 + 1) % 256
    py0 = yi % 256
    py1 = (py0 + 1) % 256
    v00 = p[p[px0] + py0] / 127.5 - 1.0
    v10 = p[p[px1] + py0] / 127.5 - 1.0
    v01 = p[p[px0] + py1] / 127.5 - 1.0
    v11 = p[p[px1] + py1] / 127.5 - 1.0
    return _lerp(_lerp(v00, v10, u), _lerp(v01, v11, u), v)

@njit
def _value_3d(p, x, y, z):
    xi = int(np.floor(x))
    yi = int(np.floor(y))
    zi = int(np.floor(z))
    u = _fade(x - xi)
    v = _fade(y - yi)
    w = _fade(z - zi)
    X = xi % 256
    Y = yi % 256
    Z = zi % 256
    X1 = (X + 1) % 256
    Y1 = (Y + 1) % 256
    Z1 = (Z + 1) % 256
    c000 = p[p[p[X] + Y] + Z] / 127.5 - 1.0
    c100 = p[p[p[X1] + Y] + Z] / 127.5 - 1.0
    c010 = p[p[p[X] + Y1] + Z] / 127.5 - 1.0
    c110 = p[p[p[X1] + Y1] + Z] / 127.5 - 1.0
    c001 = p[p[p[X] + Y] + Z1] / 127.5 - 1.0
    c101 = p[p[p[X1] + Y] + Z1] / 127.5 - 1.0
    c011 = p[p[p[X] + Y1] + Z1] / 127.5 - 1.0
    c111 = p[p[p[X1] + Y1] + Z1] / 127.5 - 1.0
    near = _lerp(_lerp(c000, c100, u), _lerp(c010, c110, u), v)
    far = _lerp(_lerp(c001, c101, u), _lerp(c011, c111, u), v)
    return _lerp(near, far, w)

@njit
def _cellular(seed, x, y, z, dims):
    """Worley F1: distance to the nearest jittered feature point."""
    xi = int(np.floor(x))
    yi = int(np.floor(y))
    zi = int(np.floor(z))
    best = 10.0
    z_lo = -1 if dims == 3 else 0
    z_hi = 1 if dims == 3 else 0
    for dz in range(z_lo, z_hi + 1):
        for dy in range(-1, 2):
            for dx in range(-1, 2):
                cx = xi + dx
                cy = yi + dy
                cz = zi + dz if dims == 3 else 0
                h = _hash(seed, cx, cy, cz)
                fx = cx + (h & 0x3FF) / 1024.0
                fy = cy + ((h >> 10) & 0x3FF) / 1024.0
                ddx = fx - x
                ddy = fy - y
                d = ddx * ddx + ddy * ddy
                if dims == 3:
                    fz = cz + ((h >> 20) & 0x3FF) / 1024.0
                    ddz = fz - z
                    d += ddz * ddz
                if d < best:
                    best = d
    d1 = np.sqrt(best)
    if d1 > 1.0:
        d1 = 1.0
    return d1 * 2.0 - 1.0

@njit
def _white(seed, x, y, z, dims):
    zi = int(np.floor(z)) if dims == 3 else 0
    h = _hash(seed, int(np.floor(x)), int(np.floor(y)), zi)
    return h / 2147483648.0 - 1.0

@njit
def _sample(kind, p, seed, x, y, z, dims):
    if kind == NOISE_PERLIN:
        if dims == 3:
            return _perlin_3d(p, x, y, z)
        return _perlin_2d(p, x, y)
    if kind == NOISE_VALUE:
        if dims == 3:
            return _value_3d(p, x, y, z)
        return _value_2d(p, x, y)
    if kind == NOISE_CELLULAR:
        return _cellular(seed, x, y, z, dims)
    return _white(seed, x, y, z, dims)

@njit
def fractal_noise_grid(kind, fractal, p, seed, x, y, z, dims,
                       octaves=1, lacunarity=2.0, gain=0.5):
    """
    Samples a fractal of the chosen noise kind over coordinate grids.
    The sum is normalised by the total amplitude, keeping output in [-1, 1].
    """
    rows, cols = x.shape
    result = np.zeros((rows, cols))

    for i in range(rows):
        for j in range(cols):
            total = 0.0
            amplitude = 1.0
            amplitude_sum = 0.0
            frequency = 1.0
            weight = 1.0

            for o in range(octaves):
                shift = o * _OCTAVE_OFFSET
                n = _sample(kind, p, seed + o,
                            x[i, j] * frequency + shift,
                            y[i, j] * frequency + shift,
                            z[i, j] * frequency + shift,
                            dims)
                if fractal == FRACTAL_BILLOW:
                    n = abs(n) * 2.0 - 1.0
                elif fractal == FRACTAL_RIDGED:
                    n = 1.0 - abs(n)
                    n *= n
                    n *= weight
                    weight = min(max(n * _RIDGED_WEIGHT_GAIN, 0.0), 1.0)
                total += n * amplitude
                amplitude_sum += amplitude
                amplitude *= gain
                frequency *= lacunarity

            value = total / amplitude_sum
            if fractal == FRACTAL_RIDGED:
                value = value * 2.0 - 1.0
            result[i, j] = min(max(value, -1.0), 1.0)

    return result


def perlin_noise_2d(p, x, y, octaves=1, persistence=0.5, lacunarity=2.0):
    """Fractal 2D Perlin noise over coordinate grids, in [-1, 1]."""
    return fractal_noise_grid(NOISE_PERLIN, FRACTAL_FBM, p, 0, x, y, np.zeros(np.shape(x)), 2,
                              octaves, lacunarity, persistence)


def perlin_noise_3d(p, x, y, z, octaves=1, persistence=0.5, lacunarity=2.0):
    """Fractal 3D Perlin noise over coordinate grids, in [-1, 1]."""
    return fractal_noise_grid(NOISE_PERLIN, FRACTAL_FBM, p, 0, x, y, z, 3,
                              octaves, lacunarity, persistence)


def value_noise_2d(p, x, y, octaves=1, persistence=0.5, lacunarity=2.0):
    """Fractal 2D value noise over coordinate grids, in [-1, 1]."""
    return fractal_noise_grid(NOISE_VALUE, FRACTAL_FBM, p, 0, x, y, np.zeros(np.shape(x)), 2,
                              octaves, lacunarity, persistence)


def cellular_noise_2d(seed, x, y):
    """Single-octave Worley F1 noise, in [-1, 1]."""
    return fractal_noise_grid(NOISE_CELLULAR, FRACTAL_FBM, np.zeros(512, dtype=np.int64), seed,
                              x, y, np.zeros(np.shape(x)), 2, 1, 2.0, 0.5)


def white_noise_2d(seed, x, y):
    """Per-lattice-cell hashed white noise, in [-1, 1)."""
    return fractal_noise_grid(NOISE_WHITE, FRACTAL_FBM, np.zeros(512, dtype=np.int64), seed,
                              x, y, np.zeros(np.shape(x)), 2, 1, 2.0, 0.5)


class NoiseField:
    """
    A configurable noise source. Holds the seed, noise type, fractal type and
    fractal parameters, and samples whole pixel grids on request.
    """
    def __init__(self, config: dict = None, logger: logging.Logger = None):
        config = config or {}
        self.logger = logger or logging.getLogger(__name__)
        self.settings = {
            'seed': config.get('seed', DEFAULTS.DEFAULT_SEED),
            'noise_type': config.get('noise_type', DEFAULTS.DEFAULT_NOISE_TYPE),
            'fractal_type': config.get('fractal_type', DEFAULTS.DEFAULT_FRACTAL_TYPE),
            'frequency': config.get('frequency', DEFAULTS.DEFAULT_FREQUENCY),
            'octaves': config.get('octaves', DEFAULTS.DEFAULT_OCTAVES),
            'lacunarity': config.get('lacunarity', DEFAULTS.DEFAULT_LACUNARITY),
            'gain': config.get('gain', DEFAULTS.DEFAULT_GAIN),
            'dimensions': config.get('dimensions', 2),
        }
        self._validate()
        self._p = make_permutation_table(self.settings['seed'])

    def _validate(self):
        s = self.settings
        if s['noise_type'] not in DEFAULTS.NOISE_TYPES:
            raise ValueError(f"Unknown noise type '{s['noise_type']}'")
        if s['fractal_type'] not in DEFAULTS.FRACTAL_TYPES:
            raise ValueError(f"Unknown fractal type '{s['fractal_type']}'")
        if not 1 <= s['octaves'] <= DEFAULTS.MAX_OCTAVES:
            raise ValueError(f"Octaves must be between 1 and {DEFAULTS.MAX_OCTAVES}, got {s['octaves']}")
        if s['dimensions'] not in (2, 3):
            raise ValueError(f"Dimensions must be 2 or 3, got {s['dimensions']}")
        if s['frequency'] <= 0:
            raise ValueError("Frequency must be positive")

    @property
    def seed(self) -> int:
        return self.settings['seed']

    @seed.setter
    def seed(self, value: int):
        self.settings['seed'] = int(value)
        self._p = make_permutation_table(self.settings['seed'])

    @property
    def is_inverse(self) -> bool:
        return self.settings['lacunarity'] < 1.0

    def configure(self, **changes):
        """Updates any number of settings, validating the result."""
        previous = dict(self.settings)
        self.settings.update(changes)
        try:
            self._validate()
        except ValueError:
            self.settings = previous
            raise
        if self.settings['seed'] != previous['seed']:
            self._p = make_permutation_table(self.settings['seed'])
        self.logger.debug(f"Noise settings changed: {changes}")

    def cycle_noise_type(self):
        types = DEFAULTS.NOISE_TYPES
        index = types.index(self.settings['noise_type'])
        self.settings['noise_type'] = types[(index + 1) % len(types)]

    def cycle_fractal_type(self):
        types = DEFAULTS.FRACTAL_TYPES
        index = types.index(self.settings['fractal_type'])
        self.settings['fractal_type'] = types[(index + 1) % len(types)]

    def toggle_inverse(self):
        if self.is_inverse:
            self.settings['lacunarity'] = DEFAULTS.DEFAULT_LACUNARITY
            self.settings['gain'] = DEFAULTS.DEFAULT_GAIN
        else:
            self.settings['lacunarity'] = DEFAULTS.INVERSE_LACUNARITY
            self.settings['gain'] = DEFAULTS.INVERSE_GAIN

    def sample(self, x: np.ndarray, y: np.ndarray, z: np.ndarray = None) -> np.ndarray:
        """Samples the configured fractal at raw (unscaled) coordinates."""
        s = self.settings
        if z is None:
            z = np.zeros_like(x, dtype=float)
        f = s['frequency']
        return fractal_noise_grid(
            DEFAULTS.NOISE_TYPES.index(s['noise_type']),
            DEFAULTS.FRACTAL_TYPES.index(s['fractal_type']),
            self._p, s['seed'],
            np.asarray(x, dtype=float) * f,
            np.asarray(y, dtype=float) * f,
            np.asarray(z, dtype=float) * f,
            s['dimensions'], s['octaves'], s['lacunarity'], s['gain']
        )

    def sample_grid(self, width: int, height: int, offset_x: float = 0.0,
                    offset_y: float = 0.0, time: float = 0.0) -> np.ndarray:
        """Samples a (height, width) grid of pixel coordinates."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid size must be positive, got {width}x{height}")
        xs = np.arange(width, dtype=float) + offset_x
        ys = np.arange(height, dtype=float) + offset_y
        x_grid, y_grid = np.meshgrid(xs, ys)
        z_grid = np.full_like(x_grid, time)
        return self.sample(x_grid, y_grid, z_grid)

    def describe(self) -> str:
        s = self.settings
        return (f"{s['noise_type']} {s['dimensions']}D, {s['fractal_type']} x{s['octaves']}, "
                f"freq {s['frequency']:.4f}, seed {s['seed']}"
                + (", inverse" if self.is_inverse else ""))
