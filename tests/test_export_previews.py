"""Tests for the headless preview exporter."""

import numpy as np
import pygame
from PIL import Image

from export_previews import render_scene, save_surface

SIZE = (96, 64)


def test_render_scene_returns_sized_surface(pygame_display, logger):
    surface = render_scene("noise", {}, SIZE, seed=3, frames=2, logger=logger)
    assert surface.get_size() == SIZE


def test_render_is_reproducible(pygame_display, logger):
    config = {'triangulation': {'point_count': 12}}
    first = render_scene("triangulation", config, SIZE, seed=5, frames=0, logger=logger)
    second = render_scene("triangulation", config, SIZE, seed=5, frames=0, logger=logger)
    np.testing.assert_array_equal(pygame.surfarray.array3d(first), pygame.surfarray.array3d(second))


def test_save_surface_writes_png(pygame_display, tmp_path):
    surface = pygame.Surface(SIZE)
    surface.fill((10, 20, 30))
    surface.set_at((5, 7), (200, 100, 50))
    path = tmp_path / "preview.png"
    save_surface(surface, str(path))

    with Image.open(path) as img:
        assert img.size == SIZE
        assert img.mode == "RGB"
        assert img.getpixel((5, 7)) == (200, 100, 50)
        assert img.getpixel((0, 0)) == (10, 20, 30)
