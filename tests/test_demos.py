"""Headless tests for the demo scenes."""

import numpy as np
import pygame
import pytest

from procgen_lab import dungeon
from procgen_lab.demos import DEMOS, create_scene

SIZE = (160, 120)
CONFIG = {
    'palette': {'gradient_steps': 8},
    'noise': {'noise': {'octaves': 2}},
    'fft': {'spectrum_size': 32},
    'triangulation': {'point_count': 20},
    'lighting': {'light_count': 5},
    'worldmap': {'generator': {'width': 64, 'height': 32}},
}


def key(k, mod=0):
    return pygame.event.Event(pygame.KEYDOWN, key=k, mod=mod)


def click(pos, button=1):
    return pygame.event.Event(pygame.MOUSEBUTTONDOWN, pos=pos, button=button)


@pytest.fixture
def make_scene(pygame_display, logger):
    def _make(name, seed=11):
        return create_scene(name, CONFIG, logger, SIZE, seed)
    return _make


class TestRegistry:
    """Test scene lookup."""

    def test_all_demos_registered(self):
        assert set(DEMOS) == {"palette", "fonts", "noise", "triangulation", "lighting", "worldmap", "fft"}

    def test_unknown_demo(self, logger):
        with pytest.raises(ValueError):
            create_scene("teapot", {}, logger, SIZE)

    @pytest.mark.parametrize("name", sorted(DEMOS))
    def test_every_scene_draws(self, make_scene, name):
        scene = make_scene(name)
        surface = pygame.Surface(SIZE)
        scene.update(0.05)
        scene.draw(surface)
        assert not scene.dirty
        assert scene.status_lines()
        assert scene.help_lines()
        # Something other than a flat background was drawn.
        assert len(np.unique(pygame.surfarray.array3d(surface).reshape(-1, 3), axis=0)) > 1


class TestPaletteScene:
    """Test the colour test scene."""

    def test_modes_cycle_and_render(self, make_scene):
        scene = make_scene("palette")
        for mode in ("swatches", "gradients", "quantized"):
            assert scene.mode == mode
            assert scene.render().shape == (SIZE[0], SIZE[1], 3)
            scene.handle_event(key(pygame.K_m))
        assert scene.mode == "swatches"

    def test_steps_and_toggles(self, make_scene):
        scene = make_scene("palette")
        scene.handle_event(key(pygame.K_EQUALS))
        assert scene.steps == 16
        scene.handle_event(key(pygame.K_MINUS))
        scene.handle_event(key(pygame.K_MINUS))
        assert scene.steps == 4
        scene.handle_event(key(pygame.K_d))
        assert scene.dither
        order = list(scene._order)
        scene.handle_event(key(pygame.K_s))
        assert scene._order == sorted(scene.colors)
        assert sorted(order) == scene._order

    def test_missing_palette_falls_back(self, pygame_display, logger, tmp_path):
        config = {'palette': {'palette_path': str(tmp_path / "nope.json")}}
        scene = create_scene("palette", config, logger, SIZE)
        assert "Black" in scene.colors


class TestFontScene:
    """Test the font test scene."""

    def test_keys(self, make_scene):
        scene = make_scene("fonts")
        size = scene.base_size
        scene.handle_event(key(pygame.K_UP))
        assert scene.base_size == size + 2
        scene.handle_event(key(pygame.K_a))
        assert not scene.antialias
        scene.handle_event(key(pygame.K_f))
        assert scene.font_index == 1

    def test_missing_font_file_uses_default(self, pygame_display, logger):
        scene = create_scene("fonts", {'fonts': {'fonts': ["/no/such/font.ttf"]}}, logger, SIZE)
        scene.draw(pygame.Surface(SIZE))
        assert scene.font_name == "/no/such/font.ttf"


class TestNoiseScene:
    """Test the noise visualiser."""

    def test_render_size(self, make_scene):
        scene = make_scene("noise")
        assert scene.render().shape == (SIZE[0] // 2, SIZE[1] // 2, 3)

    def test_keys_change_field(self, make_scene):
        scene = make_scene("noise")
        scene.handle_event(key(pygame.K_n))
        assert scene.field.settings['noise_type'] == "value"
        scene.handle_event(key(pygame.K_r))
        assert scene.field.settings['fractal_type'] == "billow"
        scene.handle_event(key(pygame.K_h))
        assert scene.field.settings['octaves'] == 3
        scene.handle_event(key(pygame.K_l))
        scene.handle_event(key(pygame.K_l))
        scene.handle_event(key(pygame.K_l))
        assert scene.field.settings['octaves'] == 1
        scene.handle_event(key(pygame.K_s))
        assert scene.field.seed == 12
        scene.handle_event(key(pygame.K_e))
        scene.handle_event(key(pygame.K_e))
        assert scene.field.seed == 10
        scene.handle_event(key(pygame.K_i))
        assert scene.field.is_inverse
        scene.handle_event(key(pygame.K_EQUALS))
        assert scene.mode == "hash"
        assert scene.render().shape == (SIZE[0] // 2, SIZE[1] // 2, 3)

    def test_frequency_cycles(self, make_scene):
        scene = make_scene("noise")
        start = scene.field.settings['frequency']
        scene.handle_event(key(pygame.K_f))
        assert scene.field.settings['frequency'] == pytest.approx(start * 2)
        scene.handle_event(key(pygame.K_f, pygame.KMOD_LSHIFT))
        assert scene.field.settings['frequency'] == pytest.approx(start)

    def test_3d_animates(self, make_scene):
        scene = make_scene("noise")
        scene.update(1.0)
        assert scene.time == 0.0
        scene.handle_event(key(pygame.K_d))
        assert scene.animated
        scene.draw(pygame.Surface(SIZE))
        scene.update(0.5)
        assert scene.time == 0.5 and scene.dirty
        scene.handle_event(key(pygame.K_k))
        assert scene.time == pytest.approx(10.5)

    def test_unhandled_key(self, make_scene):
        assert not make_scene("noise").handle_event(key(pygame.K_z))


class TestFFTScene:
    """Test the FFT visualiser."""

    def test_render_is_side_by_side(self, make_scene):
        scene = make_scene("fft")
        assert scene.render().shape == (64, 32, 3)

    def test_toggles(self, make_scene):
        scene = make_scene("fft")
        scene.handle_event(key(pygame.K_w))
        assert not scene.window
        scene.handle_event(key(pygame.K_b))
        assert scene.band_pass
        assert scene.render().shape == (64, 32, 3)
        # Noise keys still work.
        scene.handle_event(key(pygame.K_n))
        assert scene.field.settings['noise_type'] == "value"


class TestTriangulationScene:
    """Test the Delaunay/Voronoi scene."""

    def test_click_adds_site(self, make_scene):
        scene = make_scene("triangulation")
        count = len(scene.points)
        assert scene.handle_event(click((33, 44)))
        assert len(scene.points) == count + 1
        assert not scene.handle_event(click((33, 44)))

    def test_keys(self, make_scene):
        scene = make_scene("triangulation")
        before = scene.points.copy()
        scene.handle_event(key(pygame.K_l))
        assert scene.points.shape == before.shape
        assert not np.array_equal(scene.points, before)
        scene.handle_event(key(pygame.K_p))
        assert scene.method == "jittered"
        scene.handle_event(key(pygame.K_t))
        assert not scene.show_triangles
        scene.handle_event(key(pygame.K_c))
        assert scene.show_circumcenters
        scene.draw(pygame.Surface(SIZE))

    def test_resize_scales_sites(self, make_scene):
        scene = make_scene("triangulation")
        before = scene.points.copy()
        scene.on_resize(SIZE[0] * 2, SIZE[1])
        np.testing.assert_allclose(scene.points[:, 0], before[:, 0] * 2)
        assert scene.triangulation is not None


class TestLightingScene:
    """Test the dungeon lighting scene."""

    def test_lights_stay_on_floor(self, make_scene):
        scene = make_scene("lighting")
        assert len(scene.handler.lights) == 5
        for _ in range(5):
            scene.update(1.6)
        for x, y in scene.handler.lights:
            assert scene.grid[x, y] == dungeon.FLOOR

    def test_pause(self, make_scene):
        scene = make_scene("lighting")
        scene.handle_event(key(pygame.K_SPACE))
        scene.update(1.0)
        assert scene.time == 0.0

    def test_viewer_fov_toggle(self, make_scene):
        scene = make_scene("lighting")
        scene.handle_event(key(pygame.K_v))
        assert scene.restrict_to_viewer
        assert scene.handler.viewer == scene.viewer
        scene.handle_event(key(pygame.K_v))
        assert scene.handler.viewer is None

    def test_click_moves_viewer(self, make_scene):
        scene = make_scene("lighting")
        scene.draw(pygame.Surface(SIZE))
        rect = scene._view_rect
        fx, fy = (int(v) for v in dungeon.floor_cells(scene.grid)[-1])
        pos = (rect.x + int((fx + 0.5) * rect.width / scene.grid_width),
               rect.y + int((fy + 0.5) * rect.height / scene.grid_height))
        assert scene.handle_event(click(pos))
        assert scene.viewer == (fx, fy)

    def test_regenerate(self, make_scene):
        scene = make_scene("lighting")
        grid = scene.grid.copy()
        scene.handle_event(key(pygame.K_g))
        assert not np.array_equal(grid, scene.grid)


class TestWorldMapScene:
    """Test the biome preview scene."""

    def test_views(self, make_scene):
        scene = make_scene("worldmap")
        for mode in ("biome", "height", "heat", "moisture"):
            assert scene.view_mode == mode
            assert scene.render().shape == (64, 32, 3)
            scene.handle_event(key(pygame.K_v))

    def test_click_zoom(self, make_scene):
        scene = make_scene("worldmap")
        scene.draw(pygame.Surface(SIZE))
        assert scene.handle_event(click((SIZE[0] // 2, SIZE[1] // 2), button=1))
        assert scene.generator.zoom == 1
        assert scene.handle_event(click((0, 0), button=3))
        assert scene.generator.zoom == 0

    def test_new_seed(self, make_scene):
        scene = make_scene("worldmap")
        scene.handle_event(key(pygame.K_g))
        assert scene.seed == 12

    def test_wheel_zoom(self, make_scene):
        scene = make_scene("worldmap")
        zoom = scene.camera.zoom
        scene.handle_event(pygame.event.Event(pygame.MOUSEWHEEL, x=0, y=1))
        assert scene.camera.zoom > zoom
