# procgen_lab/demos/lighting_demo.py

import numpy as np
import pygame

from .. import config as DEFAULTS
from .. import dungeon
from .. import palette
from ..lighting import LightingHandler, Radiance
from .base import Scene

FLOOR_COLOR = (70, 70, 80)
WALL_COLOR = (120, 100, 80)
VIEWER_COLOR = (255, 255, 255)
GLYPH_COLOR = (30, 30, 30)
# Glyphs are only drawn when a cell is at least this many pixels wide.
MIN_GLYPH_CELL_SIZE = 8
CARDINAL_STEPS = ((0, -1), (1, 0), (0, 1), (-1, 0))
FLICKER_RATE = 3.0
STROBE_RATE = 0.5


class LightingScene(Scene):
    """
    Dungeon lighting test. Coloured lights wander around a generated dungeon,
    one cardinal step at a time; the viewer's field of view can limit what
    is shown.
    """
    name = "lighting"
    title = "Dungeon Lighting"
    keep_aspect = True

    def __init__(self, config, logger, size, seed=None):
        super().__init__(config, logger, size, seed)
        self.grid_width = self.config.get('grid_width', DEFAULTS.DUNGEON_WIDTH)
        self.grid_height = self.config.get('grid_height', DEFAULTS.DUNGEON_HEIGHT)
        self.light_count = self.config.get('light_count', DEFAULTS.DEFAULT_LIGHT_COUNT)
        self.strategy = self.config.get('radius_strategy', DEFAULTS.DEFAULT_RADIUS_STRATEGY)
        self.viewer_range = self.config.get('viewer_range') or np.inf
        self.move_interval = self.config.get('move_interval', DEFAULTS.LIGHT_MOVE_INTERVAL_S)

        self.paused = False
        self.restrict_to_viewer = False
        self.show_glyphs = False
        self.generation = 0
        self._glyph_cache = {}
        self.regenerate()

    def regenerate(self):
        seed = self.seed + self.generation
        self.grid = dungeon.generate_dungeon(self.grid_width, self.grid_height, seed)
        self.glyphs = dungeon.wall_glyphs(self.grid)
        self.handler = LightingHandler(dungeon.resistance_map(self.grid), DEFAULTS.BACKGROUND_COLOR,
                                       self.strategy, self.viewer_range, self.logger)
        self.rng = np.random.default_rng(seed + DEFAULTS.LIGHT_SEED_OFFSET)

        colors = palette.rainbow(0.85, 1.0, max(self.light_count, 1))
        positions = dungeon.random_floor_cells(self.grid, self.rng, self.light_count + 1, min_distance=3)
        if not positions:
            raise ValueError("Generated dungeon has no floor")
        self.viewer = positions[0]
        for i, position in enumerate(positions[1:]):
            self.handler.add_light(position, Radiance(
                range=float(self.rng.uniform(DEFAULTS.LIGHT_MIN_RANGE, DEFAULTS.LIGHT_MAX_RANGE)),
                color=tuple(int(c) for c in colors[i]),
                flicker=FLICKER_RATE if i % 3 == 1 else 0.0,
                strobe=STROBE_RATE if i % 3 == 2 else 0.0,
                flare=0.2,
                seed=seed + i,
            ))

        self.time = 0.0
        self._move_timer = 0.0
        self._apply_viewer()
        self.handler.update_all(self.time)
        self.dirty = True
        self.logger.info(f"Lighting scene: {len(self.handler.lights)} lights in a "
                         f"{self.grid_width}x{self.grid_height} dungeon (seed {seed}).")

    def _apply_viewer(self):
        if self.restrict_to_viewer:
            self.handler.calculate_viewer_fov(*self.viewer)
        else:
            self.handler.clear_viewer()

    def step_lights(self):
        """Moves every light one random cardinal step onto free floor."""
        for x, y in list(self.handler.lights):
            dx, dy = CARDINAL_STEPS[self.rng.integers(len(CARDINAL_STEPS))]
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.grid_width and 0 <= ny < self.grid_height and self.grid[nx, ny] == dungeon.FLOOR:
                self.handler.move_light((x, y), (nx, ny))

    # --- Input ---
    def on_key(self, key, mod):
        if key == pygame.K_SPACE:
            self.paused = not self.paused
        elif key == pygame.K_g:
            self.generation += 1
            self.regenerate()
        elif key == pygame.K_v:
            self.restrict_to_viewer = not self.restrict_to_viewer
            self._apply_viewer()
        elif key == pygame.K_t:
            self.show_glyphs = not self.show_glyphs
        else:
            return False
        self.dirty = True
        return True

    def on_click(self, pos, button):
        cell = self.screen_to_cell(pos, (self.grid_width, self.grid_height))
        if cell is None or self.grid[cell] != dungeon.FLOOR:
            return False
        self.viewer = cell
        self._apply_viewer()
        self.dirty = True
        return True

    def update(self, dt):
        if self.paused:
            return
        self.time += dt
        self._move_timer += dt
        while self._move_timer >= self.move_interval:
            self._move_timer -= self.move_interval
            self.step_lights()
        self.handler.update_all(self.time)
        self.dirty = True

    # --- Rendering ---
    def render(self):
        base = np.empty((self.grid_width, self.grid_height, 3), dtype=np.uint8)
        base[:] = FLOOR_COLOR
        base[self.grid == dungeon.WALL] = WALL_COLOR
        colors = self.handler.draw(base)
        for (x, y), light in self.handler.lights.items():
            colors[x, y] = light.color
        colors[self.viewer] = VIEWER_COLOR
        return colors

    def _glyph_surface(self, char: str, size: int) -> pygame.Surface:
        key = (char, size)
        if key not in self._glyph_cache:
            if not pygame.font.get_init():
                pygame.font.init()
            font = pygame.font.Font(None, size)
            self._glyph_cache[key] = font.render(char, True, GLYPH_COLOR)
        return self._glyph_cache[key]

    def draw(self, surface):
        super().draw(surface)
        cell = self._view_rect.width / self.grid_width
        if not self.show_glyphs or cell < MIN_GLYPH_CELL_SIZE:
            return
        size = int(cell * 1.2)
        for x, y in np.argwhere(self.grid == dungeon.WALL):
            char = self.glyphs[x, y]
            if char == ' ':
                continue
            glyph = self._glyph_surface(char, size)
            surface.blit(glyph, (self._view_rect.x + int(x * cell), self._view_rect.y + int(y * cell)))

    def status_lines(self):
        return [
            f"Lights: {len(self.handler.lights)} ({self.strategy} radius)",
            f"Viewer: {self.viewer}, FOV {'on' if self.restrict_to_viewer else 'off'}",
            f"Time: {self.time:.1f}s{' (paused)' if self.paused else ''}",
        ]

    def help_lines(self):
        return ["Space: pause", "G: new dungeon", "V: viewer field of view", "T: wall glyphs",
                "Click: move the viewer"]
