# procgen_lab/fov.py

"""
================================================================================
FIELD OF VIEW
================================================================================
Recursive shadowcasting over a resistance grid. The recursion is unrolled
onto an explicit stack so the whole sweep can be JIT-compiled with Numba.

Data Contract:
---------------
- Inputs:
    - resistance: (width, height) float array, >= 1.0 blocks light.
    - x, y: origin cell.
    - radius: light radius in cells (may be infinite for line of sight).
    - strategy: 'circle', 'square' or 'diamond' distance measure.
- Outputs:
    - (width, height) float array of light levels in [0, 1]; 1 at the origin
      falling linearly to 0 at the radius. Blocking cells are lit when seen
      but shadow everything behind them.
- Side Effects: None.
================================================================================
"""
import numpy as np
from numba import njit

from . import config as DEFAULTS

_STRATEGY_CODES = {"circle": 0, "square": 1, "diamond": 2}

# (xx, xy, yx, yy) transforms for the eight octants.
_OCTANTS = np.array([
    [1, 0, 0, 1], [0, 1, 1, 0], [0, -1, 1, 0], [-1, 0, 0, 1],
    [-1, 0, 0, -1], [0, -1, -1, 0], [0, 1, -1, 0], [1, 0, 0, -1],
])


@njit
def _distance(dx, dy, strategy):
    adx = abs(dx)
    ady = abs(dy)
    if strategy == 1:
        return float(max(adx, ady))
    if strategy == 2:
        return float(adx + ady)
    return np.sqrt(float(dx * dx + dy * dy))


@njit
def _shadowcast(resistance, light, cx, cy, radius, infinite, strategy):
    width, height = resistance.shape
    max_row = int(radius)

    for o in range(8):
        xx = _OCTANTS[o, 0]
        xy = _OCTANTS[o, 1]
        yx = _OCTANTS[o, 2]
        yy = _OCTANTS[o, 3]
        stack = [(1, 1.0, 0.0)]

        while len(stack) > 0:
            row, start, end = stack.pop()
            if start < end:
                continue
            new_start = 0.0
            blocked = False

            for j in range(row, max_row + 1):
                dx = -j - 1
                dy = -j
                while dx <= 0:
                    dx += 1
                    X = cx + dx * xx + dy * xy
                    Y = cy + dx * yx + dy * yy
                    l_slope = (dx - 0.5) / (dy + 0.5)
                    r_slope = (dx + 0.5) / (dy - 0.5)
                    if start < r_slope:
                        continue
                    elif end > l_slope:
                        break

                    inside = 0 <= X < width and 0 <= Y < height
                    opaque = True
                    if inside:
                        opaque = resistance[X, Y] >= 1.0
                        dist = _distance(dx, dy, strategy)
                        if dist <= radius:
                            level = 1.0 if infinite else 1.0 - dist / radius
                            if level > light[X, Y]:
                                light[X, Y] = level

                    if blocked:
                        if opaque:
                            new_start = r_slope
                            continue
                        else:
                            blocked = False
                            start = new_start
                    elif opaque and j < radius:
                        blocked = True
                        stack.append((j + 1, start, l_slope))
                        new_start = r_slope
                if blocked:
                    break
    return light


def compute_fov(resistance: np.ndarray, x: int, y: int, radius: float,
                strategy: str = DEFAULTS.DEFAULT_RADIUS_STRATEGY) -> np.ndarray:
    """Light levels visible from (x, y). See the module docstring for details."""
    if strategy not in _STRATEGY_CODES:
        raise ValueError(f"Unknown radius strategy '{strategy}', expected one of {DEFAULTS.RADIUS_STRATEGIES}")
    if not radius > 0:
        raise ValueError(f"Radius must be positive, got {radius}")
    resistance = np.asarray(resistance, dtype=float)
    width, height = resistance.shape
    if not (0 <= x < width and 0 <= y < height):
        raise ValueError(f"Origin ({x}, {y}) is outside the {width}x{height} grid")

    infinite = bool(np.isinf(radius))
    # An unlimited radius still needs a finite sweep; the grid diagonal suffices.
    effective = float(width + height) if infinite else float(radius)

    light = np.zeros((width, height))
    light[x, y] = 1.0
    return _shadowcast(resistance, light, int(x), int(y), effective, infinite, _STRATEGY_CODES[strategy])


def line_of_sight(resistance: np.ndarray, x: int, y: int, radius: float = np.inf,
                  strategy: str = DEFAULTS.DEFAULT_RADIUS_STRATEGY) -> np.ndarray:
    """Boolean mask of every cell visible from (x, y)."""
    return compute_fov(resistance, x, y, radius, strategy) > 0
