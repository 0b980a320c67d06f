# procgen_lab/lighting.py

"""
================================================================================
COLORED DUNGEON LIGHTING
================================================================================
This module provides light sources (`Radiance`) and a `LightingHandler` that
tracks many lights on a resistance grid, computes each light's field of view,
and mixes the coloured results into two layers that a renderer can blend
over the base map colours.

Data Contract:
---------------
- Inputs (on initialization):
    - resistance: (width, height) float array, >= 1.0 blocks light.
    - background: (R, G, B) used for cells the viewer cannot notice.
    - strategy: radius strategy passed to field-of-view calculations.
    - viewer_range: how far the viewer can see (may be infinite).
- Public Methods:
    - add_light / remove_light / move_light / get: manage light sources.
    - update_all(time): recompute and mix every light.
    - calculate_viewer_fov(x, y): restrict what the viewer can notice.
    - draw(base_colors): produce the final lit (width, height, 3) colours.
- Public Properties:
    - strength (width, height) in [0, 1], color (width, height, 3) in 0..255.
- Side Effects: None.
- Invariants: strength never exceeds 1.0. Cells outside the viewer's line of
  sight receive no light.
================================================================================
"""
import builtins
import logging
import math
from dataclasses import dataclass

import numpy as np
from scipy.ndimage import maximum_filter

from . import config as DEFAULTS
from .fov import compute_fov


def _hash_unit(seed: int, n: int) -> float:
    """Deterministic pseudo-random value in [-1, 1] for an integer lattice point."""
    h = (seed * 0x9E3779B1 + n * 0x85EBCA77) & 0xFFFFFFFF
    h = ((h ^ (h >> 15)) * 0x2C1B3C6D) & 0xFFFFFFFF
    h = ((h ^ (h >> 12)) * 0x297A2D39) & 0xFFFFFFFF
    h ^= h >> 15
    return h / 2147483647.5 - 1.0


def sway_randomized(seed: int, value: float) -> float:
    """Smooth 1D value noise in [-1, 1]: eased between random lattice values."""
    lattice = math.floor(value)
    t = value - lattice
    t = t * t * (3.0 - 2.0 * t)
    start = _hash_unit(seed, lattice)
    end = _hash_unit(seed, lattice + 1)
    return start + (end - start) * t


@dataclass
class Radiance:
    """
    A light source. `range` is the radius in cells; `flicker` and `strobe`
    are rates (0 disables them) at which the radius varies over time;
    `delay` offsets those cycles; `flare` is both the minimum fraction of
    the range the light keeps and a boost to its strength when mixed.
    """
    range: float = 1.0
    color: tuple = (255, 255, 255)
    flicker: float = 0.0
    strobe: float = 0.0
    delay: float = 0.0
    flare: float = 0.0
    seed: int = 0

    def current_range(self, time: float) -> float:
        current = self.range
        if self.flicker != 0.0:
            current *= sway_randomized(self.seed, time * self.flicker + self.delay) * 0.375 + 0.625
        if self.strobe != 0.0:
            current *= math.sin(2.0 * math.pi * (time * self.strobe + self.delay)) * 0.5 + 0.5
        return max(current, self.range * self.flare)

    @classmethod
    def make_chain(cls, length: int, range: float, color: tuple, strobe: float) -> list:
        """Lights that pulse one after another when placed in sequence."""
        if length <= 1:
            return [cls(range=range, color=color, strobe=strobe)]
        step = -1.0 / length
        return [cls(range=range, color=color, strobe=strobe, delay=step * i) for i in builtins.range(length)]


class LightingHandler:
    """Tracks light sources on a map and mixes their coloured light."""

    def __init__(self, resistance: np.ndarray, background: tuple = DEFAULTS.BACKGROUND_COLOR,
                 strategy: str = DEFAULTS.DEFAULT_RADIUS_STRATEGY, viewer_range: float = np.inf,
                 logger: logging.Logger = None):
        self.logger = logger or logging.getLogger(__name__)
        self.resistance = np.asarray(resistance, dtype=float)
        if self.resistance.ndim != 2:
            raise ValueError(f"Resistance map must be 2D, got shape {self.resistance.shape}")
        self.width, self.height = self.resistance.shape
        self.background = tuple(background)
        self.strategy = strategy
        self.viewer_range = viewer_range
        self.lights = {}

        self.strength = np.zeros((self.width, self.height))
        self.color = np.zeros((self.width, self.height, 3))
        # Until a viewer is placed, every cell counts as visible.
        self.los_result = np.ones((self.width, self.height))
        self.viewer = None
        self.logger.debug(f"LightingHandler created for a {self.width}x{self.height} map.")

    # --- Light Management ---
    def _check_position(self, position):
        x, y = position
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise ValueError(f"Position {position} is outside the {self.width}x{self.height} map")
        return int(x), int(y)

    def add_light(self, position: tuple, light: Radiance):
        self.lights[self._check_position(position)] = light

    def remove_light(self, position: tuple):
        self.lights.pop(tuple(position), None)

    def get(self, position: tuple):
        return self.lights.get(tuple(position))

    def move_light(self, old_position: tuple, new_position: tuple) -> bool:
        """
        Moves a light, keeping its place in the update order. Does nothing
        (and returns False) if there is no light at `old_position` or the
        destination already holds one.
        """
        old_position = tuple(old_position)
        new_position = self._check_position(new_position)
        if old_position not in self.lights or new_position in self.lights:
            return False
        self.lights = {(new_position if pos == old_position else pos): light
                       for pos, light in self.lights.items()}
        return True

    # --- Calculation ---
    def calculate_viewer_fov(self, x: int, y: int) -> np.ndarray:
        """Limits noticeable cells to those the viewer at (x, y) can see."""
        self.viewer = self._check_position((x, y))
        self.los_result = compute_fov(self.resistance, x, y, self.viewer_range, self.strategy)
        return self.los_result

    def clear_viewer(self):
        self.viewer = None
        self.los_result = np.ones((self.width, self.height))

    def _mix_light(self, fov: np.ndarray, color: tuple, flare: float):
        """Blends one light's field of view into the accumulated layers."""
        visible = self.los_result > 0
        walls = self.resistance >= 1.0

        # Walls take the strongest light that reaches an adjacent visible floor.
        floor_light = np.where(~walls & visible, fov, 0.0)
        wall_light = maximum_filter(floor_light, size=3, mode='constant', cval=0.0)
        incoming = np.where(walls, wall_light, fov)
        incoming = np.where(visible, incoming, 0.0)

        lit = incoming > 0
        if not np.any(lit):
            return

        boost = 1.0 + flare
        base = self.strength
        light_color = np.array(color, dtype=float)

        fresh = lit & (base == 0)
        self.color[fresh] = light_color
        self.strength[fresh] = np.minimum(1.0, incoming[fresh] * boost)

        blend = lit & ~fresh
        if np.any(blend):
            change = (incoming[blend] - base[blend]) * 0.5 + 0.5
            current = self.color[blend]
            self.color[blend] = current + change[:, np.newaxis] * (light_color - current)
            self.strength[blend] = np.minimum(1.0, base[blend] + incoming[blend] * change * boost)

    def update_all(self, time: float = 0.0):
        """Recomputes every light at the given time (in seconds)."""
        self.strength.fill(0.0)
        self.color.fill(0.0)
        for (x, y), light in self.lights.items():
            radius = light.current_range(time)
            if radius <= 0.0:
                continue
            fov = compute_fov(self.resistance, x, y, radius, self.strategy)
            self._mix_light(fov, light.color, light.flare)

    def noticeable(self) -> np.ndarray:
        """Cells that are both in the viewer's sight and lit."""
        return (self.los_result > 0) & (self.strength > 0)

    def draw(self, base_colors: np.ndarray, ambient: float = DEFAULTS.AMBIENT_LIGHT_LEVEL) -> np.ndarray:
        """
        Applies the lighting layers to a (width, height, 3) base colour array.
        Lit cells are tinted toward their light colour and brightened by their
        strength; seen but unlit cells fade toward the background, keeping
        only the ambient level; unseen cells take the background colour.
        """
        if base_colors.shape[:2] != (self.width, self.height):
            raise ValueError(f"Base colours {base_colors.shape[:2]} do not match map {(self.width, self.height)}")
        base = base_colors.astype(float)
        strength = self.strength[..., np.newaxis]
        tinted = base * (1.0 - 0.5 * strength) + self.color * (0.5 * strength)
        brightness = ambient + (1.0 - ambient) * strength
        background = np.asarray(self.background, dtype=float)
        result = background + (tinted - background) * brightness

        hidden = self.los_result <= 0
        result[hidden] = self.background
        return np.clip(result, 0, 255).astype(np.uint8)
