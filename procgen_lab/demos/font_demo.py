# procgen_lab/demos/font_demo.py

import os

import pygame

from .base import BACKGROUND_COLOR, Scene

SAMPLE_TEXT = "The quick brown fox jumps over the lazy dog 0123456789"
GLYPH_TEXT = "#.@ ┌─┐│└┘├┤┬┴┼ ░▒▓█"
MIN_FONT_SIZE = 8
MAX_FONT_SIZE = 72
TEXT_COLOR = (230, 230, 230)
SIZE_STEPS = (1.0, 1.5, 2.0, 3.0)


class FontScene(Scene):
    """
    Font test. Renders sample text at several sizes with each configured
    font. Entries ending in .ttf/.otf are loaded from disk; other names are
    looked up as system fonts; `null` selects the pygame default font.
    """
    name = "fonts"
    title = "Fonts"

    def __init__(self, config, logger, size, seed=None):
        super().__init__(config, logger, size, seed)
        self.fonts = list(self.config.get('fonts', [None, "dejavusansmono", "freeserif"]))
        if not self.fonts:
            self.fonts = [None]
        self.font_index = 0
        self.base_size = self.config.get('font_size', 18)
        self.antialias = True
        self._font_cache = {}

    @property
    def font_name(self) -> str:
        entry = self.fonts[self.font_index]
        return "pygame default" if entry is None else str(entry)

    def _load_font(self, entry, size: int) -> pygame.font.Font:
        key = (entry, size)
        if key in self._font_cache:
            return self._font_cache[key]

        if not pygame.font.get_init():
            pygame.font.init()
        try:
            if entry is None:
                font = pygame.font.Font(None, size)
            elif entry.lower().endswith(('.ttf', '.otf')):
                if not os.path.exists(entry):
                    raise FileNotFoundError(f"Font file not found: '{entry}'")
                font = pygame.font.Font(entry, size)
            else:
                font = pygame.font.SysFont(entry, size)
        except (FileNotFoundError, OSError) as e:
            self.logger.warning(f"Could not load font '{entry}' ({e}). Using the pygame default font.")
            font = pygame.font.Font(None, size)

        self._font_cache[key] = font
        return font

    def on_key(self, key, mod):
        if key == pygame.K_f:
            self.font_index = (self.font_index + 1) % len(self.fonts)
        elif key == pygame.K_UP:
            self.base_size = min(MAX_FONT_SIZE, self.base_size + 2)
        elif key == pygame.K_DOWN:
            self.base_size = max(MIN_FONT_SIZE, self.base_size - 2)
        elif key == pygame.K_a:
            self.antialias = not self.antialias
        else:
            return False
        self.logger.debug(f"Font scene: {self.font_name} {self.base_size}px, antialias={self.antialias}")
        self.dirty = True
        return True

    def draw(self, surface):
        surface.fill(BACKGROUND_COLOR)
        entry = self.fonts[self.font_index]
        y = 10
        for step in SIZE_STEPS:
            size = int(min(MAX_FONT_SIZE, self.base_size * step))
            font = self._load_font(entry, size)
            for text in (f"{size}px  {SAMPLE_TEXT}", GLYPH_TEXT):
                rendered = font.render(text, self.antialias, TEXT_COLOR)
                surface.blit(rendered, (10, y))
                y += rendered.get_height() + 4
            y += 8
            if y > self.height:
                break
        self.dirty = False

    def status_lines(self):
        return [
            f"Font: {self.font_name} ({self.font_index + 1}/{len(self.fonts)})",
            f"Size: {self.base_size}px",
            f"Antialias: {'on' if self.antialias else 'off'}",
        ]

    def help_lines(self):
        return ["F: next font", "Up/Down: text size", "A: toggle antialiasing"]
