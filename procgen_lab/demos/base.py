# procgen_lab/demos/base.py

"""
================================================================================
DEMO SCENE BASE CLASS
================================================================================
A Scene is one interactive visualisation. The application owns the window
and the frame loop; each frame it forwards events to the active scene, calls
`update(dt)` and then `draw(surface)`.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): the scene's parameter block from the app config.
    - logger: a configured Python logging object.
    - size: (width, height) of the surface the scene draws onto.
    - seed: optional master seed overriding the config.
- Side Effects: Draws onto the surface it is given. Logs state changes.
- Invariants: `render()` is only called when `dirty` is set; the cached
  surface is reused otherwise.
================================================================================
"""
import logging

import numpy as np
import pygame

from .. import config as DEFAULTS

BACKGROUND_COLOR = (16, 16, 24)


class Scene:
    """Base class for all demo scenes."""
    name = "scene"
    title = "Scene"
    # Size in screen pixels of one rendered array element.
    default_pixel_scale = 1
    # Letterbox the rendered array instead of stretching it over the surface.
    keep_aspect = False

    def __init__(self, config: dict, logger: logging.Logger, size: tuple, seed: int = None):
        self.config = config or {}
        self.logger = logger or logging.getLogger(__name__)
        self.width, self.height = size
        self.seed = seed if seed is not None else self.config.get('seed', DEFAULTS.DEFAULT_SEED)
        self.pixel_scale = max(1, int(self.config.get('pixel_scale', self.default_pixel_scale)))
        self.dirty = True
        self._cached_surface = None
        self._view_rect = pygame.Rect(0, 0, self.width, self.height)

    @property
    def render_size(self) -> tuple:
        return max(1, self.width // self.pixel_scale), max(1, self.height // self.pixel_scale)

    # --- Input ---
    def handle_event(self, event) -> bool:
        """Dispatches an event to the key/click/wheel hooks. Returns True if consumed."""
        if event.type == pygame.KEYDOWN:
            handled = self.on_key(event.key, getattr(event, 'mod', 0))
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button in (1, 3):
            handled = self.on_click(event.pos, event.button)
        elif event.type == pygame.MOUSEWHEEL:
            handled = self.on_wheel(event.y)
        else:
            handled = False
        return bool(handled)

    def on_key(self, key: int, mod: int) -> bool:
        return False

    def on_click(self, pos: tuple, button: int) -> bool:
        return False

    def on_wheel(self, direction: int) -> bool:
        return False

    # --- Frame Hooks ---
    def update(self, dt: float):
        pass

    def on_resize(self, width: int, height: int):
        self.width, self.height = width, height
        self.dirty = True

    def render(self) -> np.ndarray:
        """Returns a (width, height, 3) uint8 colour array for the current state."""
        raise NotImplementedError

    def draw(self, surface: pygame.Surface):
        if self.dirty or self._cached_surface is None:
            colors = self.render()
            self._cached_surface = pygame.surfarray.make_surface(colors)
            self.dirty = False

        surface.fill(BACKGROUND_COLOR)
        src_w, src_h = self._cached_surface.get_size()
        if self.keep_aspect:
            scale = min(self.width / src_w, self.height / src_h)
            dst_w, dst_h = max(1, int(src_w * scale)), max(1, int(src_h * scale))
        else:
            dst_w, dst_h = self.width, self.height
        self._view_rect = pygame.Rect((self.width - dst_w) // 2, (self.height - dst_h) // 2, dst_w, dst_h)
        surface.blit(pygame.transform.scale(self._cached_surface, (dst_w, dst_h)), self._view_rect.topleft)

    def screen_to_cell(self, pos: tuple, grid_size: tuple):
        """Maps a screen position to a cell of a grid drawn into the view rect, or None."""
        if not self._view_rect.collidepoint(pos):
            return None
        gx = int((pos[0] - self._view_rect.x) * grid_size[0] / self._view_rect.width)
        gy = int((pos[1] - self._view_rect.y) * grid_size[1] / self._view_rect.height)
        return min(gx, grid_size[0] - 1), min(gy, grid_size[1] - 1)

    # --- Text for the status panel ---
    def status_lines(self) -> list:
        return []

    def help_lines(self) -> list:
        return []
