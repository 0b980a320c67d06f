# procgen_lab/spectrum.py

"""
================================================================================
FREQUENCY ANALYSIS
================================================================================
Helpers for inspecting the frequency content of 2D noise fields: a centred,
log-scaled power spectrum, its radial average, and a band-pass filter that
reconstructs the field from a ring of frequencies.

Data Contract:
---------------
- Inputs: (rows, cols) float arrays.
- Outputs: arrays of the same shape (radial_profile returns 1D).
- Side Effects: None.
- Invariants: A constant field puts all of its power in the centre bin.
================================================================================
"""
import numpy as np


def _check_field(field) -> np.ndarray:
    field = np.asarray(field, dtype=float)
    if field.ndim != 2 or field.size == 0:
        raise ValueError(f"Expected a non-empty 2D field, got shape {field.shape}")
    return field


def hann_window(rows: int, cols: int) -> np.ndarray:
    return np.outer(np.hanning(rows), np.hanning(cols))


def power_spectrum(field, window: bool = True) -> np.ndarray:
    """
    Centred power spectrum of `field`, log-scaled and normalised to [0, 1].
    The optional Hann window tapers the edges to suppress leakage; it keeps
    the DC term, so a constant field still peaks in the centre bin.
    """
    field = _check_field(field)
    if window:
        field = field * hann_window(*field.shape)

    power = np.abs(np.fft.fftshift(np.fft.fft2(field))) ** 2
    log_power = np.log1p(power)
    peak = log_power.max()
    if peak <= 0.0:
        return np.zeros_like(log_power)
    return log_power / peak


def _radius_grid(shape) -> np.ndarray:
    rows, cols = shape
    cy, cx = rows // 2, cols // 2
    y, x = np.indices(shape)
    return np.hypot(x - cx, y - cy)


def radial_profile(spectrum) -> np.ndarray:
    """Mean value in each integer-radius ring around the centre bin."""
    spectrum = _check_field(spectrum)
    radii = _radius_grid(spectrum.shape).astype(int).ravel()
    totals = np.bincount(radii, weights=spectrum.ravel())
    counts = np.bincount(radii)
    return totals / np.maximum(counts, 1)


def band_pass_mask(shape, low: float, high: float) -> np.ndarray:
    """
    Boolean mask over a centred spectrum keeping frequencies whose radius,
    as a fraction of the half-size of the smaller side, lies in [low, high].
    """
    if not 0.0 <= low < high:
        raise ValueError(f"Band must satisfy 0 <= low < high, got ({low}, {high})")
    radius = _radius_grid(shape) / (min(shape) / 2.0)
    return (radius >= low) & (radius <= high)


def inverse_filter(field, low: float, high: float) -> np.ndarray:
    """Reconstructs `field` from only the frequencies in the band [low, high]."""
    field = _check_field(field)
    mask = band_pass_mask(field.shape, low, high)
    spectrum = np.fft.fftshift(np.fft.fft2(field))
    filtered = np.fft.ifft2(np.fft.ifftshift(spectrum * mask))
    return np.real(filtered)
