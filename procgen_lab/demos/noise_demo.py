# procgen_lab/demos/noise_demo.py

import numpy as np
import pygame

from .. import color_maps
from .. import config as DEFAULTS
from .. import noise
from .base import Scene

MODES = ("noise", "hash")
FREQUENCIES = (1.0 / 128.0, 1.0 / 64.0, 1.0 / 32.0, 1.0 / 16.0, 1.0 / 8.0, 1.0 / 4.0)
DEFAULT_TIME_SPEED = 8.0
DEFAULT_SKIP_SECONDS = 10.0


class NoiseScene(Scene):
    """
    Noise visualiser. Shows the configured noise field (or the raw
    coordinate hash) in grey or through a colour LUT. In 3D mode the third
    axis is time, so the field animates.
    """
    name = "noise"
    title = "Noise"
    default_pixel_scale = 2

    def __init__(self, config, logger, size, seed=None):
        super().__init__(config, logger, size, seed)
        field_config = dict(self.config.get('noise', {}))
        field_config['seed'] = self.seed
        self.field = noise.NoiseField(field_config, self.logger)
        self.mode_index = 0
        self.time = 0.0
        self.time_speed = self.config.get('time_speed', DEFAULT_TIME_SPEED)
        self.skip_seconds = self.config.get('skip_seconds', DEFAULT_SKIP_SECONDS)
        self.use_color = False
        self.heat_lut = color_maps.create_heat_lut()
        self.logger.info(f"Noise scene ready: {self.field.describe()}")

    @property
    def mode(self) -> str:
        return MODES[self.mode_index]

    @property
    def animated(self) -> bool:
        return self.field.settings['dimensions'] == 3

    def _next_frequency(self, step: int):
        current = self.field.settings['frequency']
        index = int(np.argmin([abs(f - current) for f in FREQUENCIES]))
        self.field.configure(frequency=FREQUENCIES[(index + step) % len(FREQUENCIES)])

    # --- Input ---
    def on_key(self, key, mod):
        s = self.field.settings
        if key == pygame.K_EQUALS:
            self.mode_index = (self.mode_index + 1) % len(MODES)
        elif key == pygame.K_MINUS:
            self.mode_index = (self.mode_index - 1) % len(MODES)
        elif key == pygame.K_n:
            self.field.cycle_noise_type()
        elif key == pygame.K_r:
            self.field.cycle_fractal_type()
        elif key == pygame.K_h:
            self.field.configure(octaves=min(s['octaves'] + 1, DEFAULTS.MAX_OCTAVES))
        elif key == pygame.K_l:
            self.field.configure(octaves=max(s['octaves'] - 1, 1))
        elif key == pygame.K_f:
            self._next_frequency(-1 if mod & pygame.KMOD_SHIFT else 1)
        elif key == pygame.K_s:
            self.field.seed = self.field.seed + 1
        elif key == pygame.K_e:
            self.field.seed = self.field.seed - 1
        elif key in (pygame.K_d, pygame.K_RETURN):
            self.field.configure(dimensions=2 if self.animated else 3)
        elif key == pygame.K_i:
            self.field.toggle_inverse()
        elif key == pygame.K_k:
            self.time += self.skip_seconds
        elif key == pygame.K_c:
            self.use_color = not self.use_color
        else:
            return False
        self.seed = self.field.seed
        self.logger.debug(f"Noise scene: {self.mode} | {self.field.describe()}")
        self.dirty = True
        return True

    def update(self, dt):
        if self.animated:
            self.time += dt
            self.dirty = True

    # --- Rendering ---
    def sample(self, width: int, height: int) -> np.ndarray:
        """The current field as a (height, width) array in [-1, 1]."""
        if self.mode == "hash":
            ys, xs = np.mgrid[0:height, 0:width].astype(float)
            # In 3D the hash is re-seeded once per second of time.
            seed = self.field.seed + (int(self.time) if self.animated else 0)
            return noise.white_noise_2d(seed, xs, ys)
        return self.field.sample_grid(width, height, time=self.time * self.time_speed)

    def colorize(self, values: np.ndarray) -> np.ndarray:
        if self.use_color:
            return color_maps.apply_lut(values, self.heat_lut)
        return color_maps.field_to_gray(values)

    def render(self):
        width, height = self.render_size
        return self.colorize(self.sample(width, height))

    def status_lines(self):
        lines = [f"Mode: {self.mode}", self.field.describe()]
        if self.animated:
            lines.append(f"Time: {self.time:.1f}s")
        lines.append(f"Colour: {'heat' if self.use_color else 'grey'}")
        return lines

    def help_lines(self):
        return [
            "=/-: noise / hash mode", "N: noise type", "R: fractal type", "H/L: octaves up/down",
            "F: frequency (Shift reverses)", "S/E: seed up/down", "D or Enter: 2D / 3D",
            "I: inverse fractal", "K: skip time forward", "C: grey / colour",
        ]
