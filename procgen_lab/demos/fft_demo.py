# procgen_lab/demos/fft_demo.py

import numpy as np
import pygame

from .. import color_maps
from .. import config as DEFAULTS
from .. import spectrum
from .noise_demo import NoiseScene


class FFTScene(NoiseScene):
    """
    FFT visualiser: the noise field on the left, its log power spectrum on
    the right. With band-pass enabled the right half shows the field rebuilt
    from a ring of frequencies instead.
    """
    name = "fft"
    title = "FFT"
    keep_aspect = True

    def __init__(self, config, logger, size, seed=None):
        super().__init__(config, logger, size, seed)
        self.size = self.config.get('spectrum_size', DEFAULTS.DEFAULT_SPECTRUM_SIZE)
        self.window = True
        self.band_pass = False
        self.band = (self.config.get('band_low', DEFAULTS.BAND_PASS_LOW),
                     self.config.get('band_high', DEFAULTS.BAND_PASS_HIGH))

    def on_key(self, key, mod):
        if key == pygame.K_w:
            self.window = not self.window
        elif key == pygame.K_b:
            self.band_pass = not self.band_pass
        else:
            return super().on_key(key, mod)
        self.logger.debug(f"FFT scene: window={self.window}, band-pass={self.band_pass}")
        self.dirty = True
        return True

    def render(self):
        field = self.sample(self.size, self.size)
        if self.band_pass:
            filtered = spectrum.inverse_filter(field, *self.band)
            peak = np.max(np.abs(filtered))
            right = color_maps.field_to_gray(filtered / peak if peak > 0 else filtered)
        else:
            power = spectrum.power_spectrum(field, window=self.window)
            right = color_maps.field_to_gray(power, 0.0, 1.0)
        left = self.colorize(field)
        # Arrays are (width, height, 3): stacking on axis 0 places them side by side.
        return np.concatenate([left, right], axis=0)

    def status_lines(self):
        lines = super().status_lines()
        if self.band_pass:
            lines.append(f"Right: band-pass {self.band[0]:.2f}-{self.band[1]:.2f}")
        else:
            lines.append(f"Right: power spectrum, Hann window {'on' if self.window else 'off'}")
        return lines

    def help_lines(self):
        return super().help_lines() + ["W: toggle Hann window", "B: spectrum / band-pass view"]
