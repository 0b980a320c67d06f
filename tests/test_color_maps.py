"""Tests for colour mapping utilities."""

import numpy as np
import pytest

from procgen_lab import color_maps
from procgen_lab.world_map import BIOME_TABLE


class TestLuts:
    """Test lookup table construction."""

    @pytest.mark.parametrize("builder", [
        color_maps.create_gray_lut, color_maps.create_heat_lut, color_maps.create_moisture_lut,
    ])
    def test_continuous_luts(self, builder):
        lut = builder()
        assert lut.shape == (256, 3) and lut.dtype == np.uint8

    def test_heat_lut_endpoints(self):
        lut = color_maps.create_heat_lut()
        assert tuple(lut[0]) == color_maps.COLOR_MAP_HEAT["coldest"]
        assert tuple(lut[255]) == color_maps.COLOR_MAP_HEAT["hottest"]

    def test_biome_lut_covers_table(self):
        lut = color_maps.create_biome_color_lut()
        assert len(lut) == len(BIOME_TABLE)
        assert tuple(lut[BIOME_TABLE.index("Ocean")]) == color_maps.BIOME_COLORS["Ocean"]

    def test_height_lut_has_nine_bands(self):
        assert len(color_maps.create_height_lut()) == 9


class TestColorArrays:
    """Test field to colour conversion."""

    def test_gray_is_transposed_for_surfarray(self):
        values = np.array([[-1.0, 0.0, 1.0], [1.0, 1.0, 1.0]])
        colors = color_maps.field_to_gray(values)
        assert colors.shape == (3, 2, 3)
        assert tuple(colors[0, 0]) == (0, 0, 0)
        assert tuple(colors[2, 0]) == (255, 255, 255)
        assert tuple(colors[1, 0]) == (128, 128, 128)

    def test_apply_lut_clips(self):
        lut = color_maps.create_gray_lut()
        colors = color_maps.apply_lut(np.array([[-5.0, 5.0]]), lut)
        assert tuple(colors[0, 0]) == (0, 0, 0)
        assert tuple(colors[1, 0]) == (255, 255, 255)

    def test_bad_range(self):
        with pytest.raises(ValueError):
            color_maps.field_to_indices(np.zeros(3), 1.0, 1.0)

    def test_biome_colour_array(self):
        codes = np.array([[BIOME_TABLE.index("Desert"), BIOME_TABLE.index("Ice")]])
        colors = color_maps.get_biome_color_array(codes, color_maps.create_biome_color_lut())
        assert colors.shape == (2, 1, 3)
        assert tuple(colors[1, 0]) == color_maps.BIOME_COLORS["Ice"]

    def test_height_colour_array(self):
        colors = color_maps.get_height_color_array(np.array([[-0.9, 0.9]]), color_maps.create_height_lut())
        assert colors.shape == (2, 1, 3)
        # Deep water stays blue, high ground is near white.
        assert colors[0, 0, 2] > colors[0, 0, 0]
        assert colors[1, 0].min() > 200

    def test_region_colours_deterministic(self):
        ids = np.array([[0, 1], [1, 2]])
        a = color_maps.get_region_color_array(ids, 3, seed=4)
        b = color_maps.get_region_color_array(ids, 3, seed=4)
        np.testing.assert_array_equal(a, b)
        np.testing.assert_array_equal(a[1, 0], a[0, 1])


class TestBlend:
    """Test colour blending."""

    def test_blend_endpoints(self):
        base = np.zeros((2, 2, 3), dtype=np.uint8)
        overlay = np.full((2, 2, 3), 200, dtype=np.uint8)
        np.testing.assert_array_equal(color_maps.blend(base, overlay, 0.0), base)
        np.testing.assert_array_equal(color_maps.blend(base, overlay, 1.0), overlay)
        np.testing.assert_array_equal(color_maps.blend(base, overlay, 0.5), np.full((2, 2, 3), 100))

    def test_per_pixel_alpha(self):
        base = np.zeros((2, 1, 3), dtype=np.uint8)
        overlay = np.full((2, 1, 3), 100, dtype=np.uint8)
        alpha = np.array([[[0.0]], [[1.0]]])
        result = color_maps.blend(base, overlay, alpha)
        assert result[0, 0, 0] == 0 and result[1, 0, 0] == 100

    def test_shape_mismatch(self):
        with pytest.raises(ValueError):
            color_maps.blend(np.zeros((2, 2, 3)), np.zeros((3, 2, 3)), 0.5)
