"""Tests for palette loading, gradients and quantization."""

import json

import numpy as np
import pytest

from procgen_lab import palette


class TestHexConversion:
    """Test hex parsing and formatting."""

    def test_round_trip_examples(self):
        assert palette.hex_to_rgb("#DC143C") == (220, 20, 60)
        assert palette.hex_to_rgb("00ff7f") == (0, 255, 127)
        assert palette.rgb_to_hex((220, 20, 60)) == "#DC143C"

    @pytest.mark.parametrize("bad", ["#FFF", "#1234567", ""])
    def test_bad_hex(self, bad):
        with pytest.raises(ValueError):
            palette.hex_to_rgb(bad)

    def test_out_of_range_rgb(self):
        with pytest.raises(ValueError):
            palette.rgb_to_hex((256, 0, 0))


class TestLoadPalette:
    """Test palette asset loading."""

    def test_bundled_palette(self):
        colors = palette.load_palette()
        assert colors["Black"] == (0, 0, 0)
        assert colors["White"] == (255, 255, 255)
        assert len(colors) > len(palette.FALLBACK_PALETTE)

    def test_explicit_missing_path_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            palette.load_palette(str(tmp_path / "missing.json"))

    def test_custom_file(self, tmp_path):
        path = tmp_path / "tiny.json"
        path.write_text(json.dumps({"name": "tiny", "colors": {"Red": "#FF0000", "Blue": "#0000FF"}}))
        assert palette.load_palette(str(path)) == {"Red": (255, 0, 0), "Blue": (0, 0, 255)}


class TestColorSpaces:
    """Test HSV conversion."""

    def test_primary_hues(self):
        hsv = palette.rgb_to_hsv(np.array([[255, 0, 0], [0, 255, 0], [0, 0, 255]]))
        np.testing.assert_allclose(hsv[:, 0], [0.0, 1 / 3, 2 / 3], atol=1e-9)
        np.testing.assert_allclose(hsv[:, 1:], 1.0)

    def test_round_trip(self):
        rgb = np.random.default_rng(0).integers(0, 256, size=(50, 3))
        np.testing.assert_array_equal(palette.hsv_to_rgb(palette.rgb_to_hsv(rgb)), rgb)

    def test_grey_has_no_saturation(self):
        hsv = palette.rgb_to_hsv(np.array([128, 128, 128]))
        assert hsv[1] == 0.0


class TestGradients:
    """Test gradient construction."""

    def test_linear_gradient_endpoints(self):
        colors = palette.gradient((0, 0, 0), (255, 255, 255), 5)
        assert colors.shape == (5, 3)
        assert tuple(colors[0]) == (0, 0, 0)
        assert tuple(colors[-1]) == (255, 255, 255)
        assert tuple(colors[2]) == (128, 128, 128)

    def test_too_few_steps(self):
        with pytest.raises(ValueError):
            palette.gradient((0, 0, 0), (1, 1, 1), 1)

    def test_looping_gradient_starts_at_start(self):
        colors = palette.looping_gradient((10, 20, 30), (200, 100, 0), 8)
        assert tuple(colors[0]) == (10, 20, 30)
        assert len(colors) == 8

    def test_zigzag_endpoints_pinned(self):
        colors = palette.zigzag_gradient((255, 0, 0), (0, 0, 255), 6)
        assert tuple(colors[0]) == (255, 0, 0)
        assert tuple(colors[-1]) == (0, 0, 255)

    def test_zigzag_takes_short_way_round(self):
        """Red to blue passes through magenta, not green."""
        colors = palette.zigzag_gradient((255, 0, 0), (0, 0, 255), 3)
        assert colors[1][1] < 10

    def test_rainbow(self):
        colors = palette.rainbow(1.0, 1.0, 6)
        assert len({tuple(c) for c in colors}) == 6
        assert tuple(colors[0]) == (255, 0, 0)

    def test_lerp_color_clamps(self):
        assert palette.lerp_color((0, 0, 0), (100, 100, 100), 2.0) == (100, 100, 100)
        assert palette.lerp_color((0, 0, 0), (100, 100, 100), 0.5) == (50, 50, 50)


class TestSortAndQuantize:
    """Test ordering and nearest-colour mapping."""

    def test_greys_sort_first(self):
        colors = {"Red": (255, 0, 0), "White": (255, 255, 255), "Black": (0, 0, 0), "Blue": (0, 0, 255)}
        order = palette.sort_by_hue(colors)
        assert order[:2] == ["Black", "White"]
        assert order[2:] == ["Red", "Blue"]

    def test_quantize_maps_to_palette_colours(self):
        pal = np.array([[0, 0, 0], [255, 255, 255]], dtype=np.uint8)
        image = np.array([[[10, 10, 10], [250, 240, 245]]], dtype=np.uint8)
        result = palette.quantize(image, pal)
        np.testing.assert_array_equal(result, [[[0, 0, 0], [255, 255, 255]]])

    def test_dither_only_uses_palette_colours(self):
        pal = np.array([[0, 0, 0], [255, 255, 255]], dtype=np.uint8)
        image = np.full((8, 8, 3), 128, dtype=np.uint8)
        result = palette.quantize(image, pal, dither=True)
        assert result.shape == image.shape
        # A mid grey dithers into a mix of both colours.
        assert 0 < (result[..., 0] == 255).sum() < 64

    def test_empty_palette(self):
        with pytest.raises(ValueError):
            palette.quantize(np.zeros((2, 2, 3), dtype=np.uint8), np.empty((0, 3)))
