"""Tests for spectral analysis."""

import numpy as np
import pytest

from procgen_lab import spectrum


def _sine(size=64, cycles=8):
    x = np.arange(size)
    return np.tile(np.sin(2 * np.pi * cycles * x / size), (size, 1))


class TestPowerSpectrum:
    """Test the power spectrum."""

    def test_constant_field_peaks_at_centre(self):
        result = spectrum.power_spectrum(np.full((32, 32), 3.0), window=False)
        assert np.unravel_index(np.argmax(result), result.shape) == (16, 16)
        result[16, 16] = 0.0
        assert result.max() < 1e-6

    @pytest.mark.parametrize("window", [True, False])
    def test_constant_field_keeps_dc_peak(self, window):
        result = spectrum.power_spectrum(np.full((32, 32), 3.0), window=window)
        assert result[16, 16] == result.max() == pytest.approx(1.0)

    def test_shape_and_range(self):
        field = np.random.default_rng(0).normal(size=(40, 24))
        result = spectrum.power_spectrum(field)
        assert result.shape == (40, 24)
        assert result.min() >= 0.0 and result.max() == pytest.approx(1.0)

    def test_sine_peaks_at_its_frequency(self):
        result = spectrum.power_spectrum(_sine(), window=False)
        assert result[32, 40] == pytest.approx(1.0)
        assert result[32, 24] == pytest.approx(1.0)

    def test_rejects_non_2d(self):
        with pytest.raises(ValueError):
            spectrum.power_spectrum(np.zeros(10))


class TestRadialProfile:
    """Test radial averaging."""

    def test_profile(self):
        result = spectrum.power_spectrum(_sine(), window=False)
        profile = spectrum.radial_profile(result)
        assert profile[0] == pytest.approx(result[32, 32])
        assert np.argmax(profile) == 8


class TestInverseFilter:
    """Test band-pass reconstruction."""

    def test_band_keeps_matching_frequency(self):
        field = _sine()
        kept = spectrum.inverse_filter(field, 0.2, 0.3)
        np.testing.assert_allclose(kept, field, atol=1e-9)

    def test_band_removes_other_frequencies(self):
        removed = spectrum.inverse_filter(_sine(), 0.05, 0.15)
        assert np.abs(removed).max() < 1e-9

    def test_invalid_band(self):
        with pytest.raises(ValueError):
            spectrum.inverse_filter(_sine(), 0.4, 0.2)
