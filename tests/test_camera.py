"""Tests for the pan/zoom camera."""

import pytest

from procgen_lab.camera import Camera

CONFIG = {
    'display': {'screen_width': 800, 'screen_height': 600},
    'camera': {'zoom_speed': 0.5, 'max_zoom': 2.0, 'min_zoom': 0.5},
}


@pytest.fixture
def camera():
    return Camera(CONFIG, 400, 300)


class TestCamera:
    """Test coordinate transforms and zoom."""

    def test_starts_centred(self, camera):
        assert camera.world_to_screen(200, 150) == (400, 300)

    def test_round_trip(self, camera):
        camera.zoom_in()
        camera.zoom_in()
        world = camera.screen_to_world(123, 456)
        assert camera.world_to_screen(*world) == (123, 456)

    def test_zoom_is_clamped(self, camera):
        camera.zoom_in()
        assert camera.zoom == pytest.approx(1.5)
        camera.zoom_in()
        assert camera.zoom == 2.0
        for _ in range(5):
            camera.zoom_out()
        assert camera.zoom == 0.5

    def test_zoom_changed_flag(self, camera):
        camera.zoom_changed = False
        camera.zoom = camera.max_zoom
        camera.zoom_in()
        assert not camera.zoom_changed
        camera.zoom_out()
        assert camera.zoom_changed

    def test_pan_scales_with_zoom(self, camera):
        camera.zoom_in()
        camera.zoom_in()
        camera.pan(20, -10)
        assert camera.x == pytest.approx(210)
        assert camera.y == pytest.approx(145)

    def test_pan_stays_over_world(self, camera):
        camera.pan(10_000, -10_000)
        assert camera.x == 400 and camera.y == 0

    def test_resize(self, camera):
        camera.resize(1024, 768)
        assert camera.world_to_screen(200, 150) == (512, 384)

    def test_fit_world(self, camera):
        camera.fit_world()
        assert camera.zoom == 2.0
        assert camera.world_to_screen(0, 0) == (0, 0)
        assert camera.world_to_screen(400, 300) == (800, 600)

    def test_zoom_at_keeps_cursor_point(self, camera):
        anchor = camera.screen_to_world(600, 200)
        camera.zoom_at(600, 200, 1)
        assert camera.zoom == pytest.approx(1.5)
        assert camera.screen_to_world(600, 200) == pytest.approx(anchor)
