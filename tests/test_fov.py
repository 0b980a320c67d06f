"""Tests for shadowcasting field of view."""

import numpy as np
import pytest

from procgen_lab.fov import compute_fov, line_of_sight


def _open(width=21, height=21):
    return np.zeros((width, height))


class TestOpenField:
    """Test FOV with nothing in the way."""

    def test_origin_is_fully_lit(self):
        assert compute_fov(_open(), 10, 10, 5)[10, 10] == 1.0

    def test_linear_falloff(self):
        fov = compute_fov(_open(), 10, 10, 5)
        assert fov[13, 10] == pytest.approx(0.4)
        assert fov[10, 8] == pytest.approx(0.6)
        assert fov[16, 10] == 0.0

    def test_circle_lights_everything_inside_radius(self):
        fov = compute_fov(_open(), 10, 10, 5)
        xs, ys = np.indices(fov.shape)
        inside = np.hypot(xs - 10, ys - 10) < 5
        np.testing.assert_array_equal(fov > 0, inside)

    def test_square_and_diamond_strategies(self):
        square = compute_fov(_open(), 10, 10, 4, "square")
        diamond = compute_fov(_open(), 10, 10, 4, "diamond")
        assert square[13, 13] == pytest.approx(0.25)
        assert diamond[13, 13] == 0.0
        assert diamond[12, 11] == pytest.approx(0.25)

    def test_values_in_unit_range(self):
        fov = compute_fov(_open(), 3, 17, 9)
        assert fov.min() >= 0.0 and fov.max() <= 1.0


class TestBlocking:
    """Test FOV with walls."""

    def test_wall_casts_shadow(self):
        grid = _open()
        grid[12, :] = 1.0
        fov = compute_fov(grid, 10, 10, np.inf)
        assert fov[12, 10] == 1.0
        assert fov[14, 10] == 0.0
        assert fov[8, 10] == 1.0

    def test_pillar_shadow(self):
        grid = _open()
        grid[11, 10] = 1.0
        visible = line_of_sight(grid, 10, 10)
        assert visible[11, 10]
        assert not visible[15, 10]
        assert visible[15, 15]

    def test_enclosed_origin_sees_only_neighbours(self):
        grid = np.ones((7, 7))
        grid[3, 3] = 0.0
        visible = line_of_sight(grid, 3, 3)
        assert visible.sum() == 9


class TestValidation:
    """Test argument checking."""

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            compute_fov(_open(), 1, 1, 3, "hexagon")

    @pytest.mark.parametrize("radius", [0, -2])
    def test_bad_radius(self, radius):
        with pytest.raises(ValueError):
            compute_fov(_open(), 1, 1, radius)

    def test_origin_outside(self):
        with pytest.raises(ValueError):
            compute_fov(_open(), 30, 1, 3)
