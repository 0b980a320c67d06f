# procgen_lab/demos/palette_demo.py

import numpy as np
import pygame

from .. import config as DEFAULTS
from .. import palette
from ..noise import NoiseField
from .base import BACKGROUND_COLOR, Scene

MODES = ("swatches", "gradients", "quantized")
MIN_GRADIENT_STEPS = 2
MAX_GRADIENT_STEPS = 256


class PaletteScene(Scene):
    """
    Colour test. Shows the named palette as swatches, a set of gradients
    between two palette colours, or a smooth noise image quantized to the
    palette.
    """
    name = "palette"
    title = "Palette"

    def __init__(self, config, logger, size, seed=None):
        super().__init__(config, logger, size, seed)
        try:
            self.colors = palette.load_palette(self.config.get('palette_path'))
        except (FileNotFoundError, ValueError) as e:
            self.logger.error(f"Could not load palette ({e}). Using the built-in palette.")
            self.colors = dict(palette.FALLBACK_PALETTE)
        if not self.colors:
            self.logger.warning("Palette file defines no colours. Using the built-in palette.")
            self.colors = dict(palette.FALLBACK_PALETTE)

        self.mode_index = 0
        self.sort_by_hue = True
        self.dither = False
        self.steps = self.config.get('gradient_steps', DEFAULTS.DEFAULT_GRADIENT_STEPS)
        self.gradient_start = self.config.get('gradient_start')
        self.gradient_end = self.config.get('gradient_end')
        self._order = self._sorted_names()
        self.logger.info(f"Palette scene loaded {len(self.colors)} colours.")

    @property
    def mode(self) -> str:
        return MODES[self.mode_index]

    def _sorted_names(self) -> list:
        if self.sort_by_hue:
            return palette.sort_by_hue(self.colors)
        return sorted(self.colors)

    def _gradient_endpoints(self):
        start = self.colors.get(self.gradient_start, self.colors[self._order[0]])
        end = self.colors.get(self.gradient_end, self.colors[self._order[-1]])
        return start, end

    # --- Input ---
    def on_key(self, key, mod):
        if key == pygame.K_m:
            self.mode_index = (self.mode_index + 1) % len(MODES)
        elif key == pygame.K_s:
            self.sort_by_hue = not self.sort_by_hue
            self._order = self._sorted_names()
        elif key == pygame.K_d:
            self.dither = not self.dither
        elif key == pygame.K_EQUALS:
            self.steps = min(MAX_GRADIENT_STEPS, self.steps * 2)
        elif key == pygame.K_MINUS:
            self.steps = max(MIN_GRADIENT_STEPS, self.steps // 2)
        else:
            return False
        self.logger.debug(f"Palette scene: mode={self.mode}, hue sort={self.sort_by_hue}, "
                          f"dither={self.dither}, steps={self.steps}")
        self.dirty = True
        return True

    # --- Rendering ---
    def _render_swatches(self, width, height) -> np.ndarray:
        count = len(self._order)
        cols = int(np.ceil(np.sqrt(count * width / height)))
        rows = int(np.ceil(count / cols))
        colors = palette.palette_array(self.colors, self._order)
        # One extra background entry for the unused cells of the last row.
        colors = np.vstack([colors, np.array([BACKGROUND_COLOR], dtype=np.uint8)])

        xs = np.arange(width) * cols // width
        ys = np.arange(height) * rows // height
        index = ys[np.newaxis, :] * cols + xs[:, np.newaxis]
        index = np.where(index < count, index, count)
        return colors[index]

    def _render_gradients(self, width, height) -> np.ndarray:
        start, end = self._gradient_endpoints()
        rows = [
            palette.gradient(start, end, self.steps),
            palette.looping_gradient(start, end, self.steps),
            palette.zigzag_gradient(start, end, self.steps),
            palette.rainbow(1.0, 1.0, self.steps),
        ]
        xs = np.arange(width) * self.steps // width
        band = np.arange(height) * len(rows) // height
        result = np.empty((width, height, 3), dtype=np.uint8)
        for i, row in enumerate(rows):
            result[:, band == i] = row[xs][:, np.newaxis, :]
        return result

    def _render_quantized(self, width, height) -> np.ndarray:
        field = NoiseField({'seed': self.seed, 'octaves': 3, 'frequency': 4.0 / max(width, height)})
        hue = (field.sample_grid(width, height) + 1.0) / 2.0
        hsv = np.stack([hue, np.full_like(hue, 0.7), 0.4 + 0.6 * hue], axis=-1)
        smooth = np.transpose(palette.hsv_to_rgb(hsv), (1, 0, 2))
        palette_rgb = palette.palette_array(self.colors)
        return palette.quantize(smooth, palette_rgb, dither=self.dither)

    def render(self) -> np.ndarray:
        width, height = self.render_size
        if self.mode == "swatches":
            return self._render_swatches(width, height)
        if self.mode == "gradients":
            return self._render_gradients(width, height)
        return self._render_quantized(width, height)

    def status_lines(self):
        start, end = self._gradient_endpoints()
        return [
            f"Mode: {self.mode}",
            f"Colours: {len(self.colors)} ({'hue' if self.sort_by_hue else 'name'} order)",
            f"Gradient: {palette.rgb_to_hex(start)} -> {palette.rgb_to_hex(end)}, {self.steps} steps",
            f"Dither: {'on' if self.dither else 'off'}",
        ]

    def help_lines(self):
        return ["M: next mode", "S: sort by hue / name", "D: toggle dithering", "=/-: gradient steps"]


