# procgen_lab/palette.py

"""
================================================================================
COLOR PALETTE UTILITIES
================================================================================
Named colour tables, colour-space conversion and gradient construction, plus
nearest-colour quantization of whole images.

Like color_maps, this module has no dependency on Pygame; every colour it
returns is an (R, G, B) tuple or a uint8 NumPy array.
================================================================================
"""
import json
import logging
import os

import numpy as np
from scipy.spatial import cKDTree

from . import config as DEFAULTS

logger = logging.getLogger(__name__)

DEFAULT_PALETTE_PATH = os.path.join(os.path.dirname(__file__), "assets", "palette.json")

# Used when the bundled palette file cannot be read.
FALLBACK_PALETTE = {
    "Black": (0, 0, 0),
    "White": (255, 255, 255),
    "Gray": (128, 128, 128),
    "Red": (255, 0, 0),
    "Orange": (255, 128, 0),
    "Yellow": (255, 255, 0),
    "Green": (0, 255, 0),
    "Cyan": (0, 255, 255),
    "Blue": (0, 0, 255),
    "Magenta": (255, 0, 255),
}

# 4x4 ordered-dither threshold matrix, normalised to [-0.5, 0.5).
_BAYER_4X4 = (np.array([
    [0, 8, 2, 10],
    [12, 4, 14, 6],
    [3, 11, 1, 9],
    [15, 7, 13, 5],
]) + 0.5) / 16.0 - 0.5


def hex_to_rgb(value: str) -> tuple:
    """Parses '#RRGGBB' (the '#' is optional) into an (R, G, B) tuple."""
    text = value.lstrip('#')
    if len(text) != 6:
        raise ValueError(f"Expected a 6-digit hex colour, got '{value}'")
    return tuple(int(text[i:i + 2], 16) for i in (0, 2, 4))


def rgb_to_hex(color) -> str:
    r, g, b = _check_rgb(color)
    return f"#{r:02X}{g:02X}{b:02X}"


def _check_rgb(color) -> tuple:
    if len(color) != 3 or any(not 0 <= int(c) <= 255 for c in color):
        raise ValueError(f"Colour components must be three values in 0..255, got {color}")
    return tuple(int(c) for c in color)


def load_palette(path: str = None) -> dict:
    """
    Loads a named palette from a JSON file of the form
    {"colors": {"Name": "#RRGGBB", ...}}.

    Raises FileNotFoundError if an explicit path does not exist. When no path
    is given, the bundled palette is used, falling back to a small built-in
    table if the bundled file is missing.
    """
    explicit = path is not None
    path = path or DEFAULT_PALETTE_PATH
    if not os.path.exists(path):
        if explicit:
            raise FileNotFoundError(f"Palette file not found: '{path}'")
        logger.warning(f"Bundled palette missing at '{path}', using fallback table.")
        return dict(FALLBACK_PALETTE)

    with open(path, 'r') as f:
        data = json.load(f)

    palette = {name: hex_to_rgb(code) for name, code in data.get("colors", {}).items()}
    logger.info(f"Loaded {len(palette)} colours from '{path}'.")
    return palette


def rgb_to_hsv(rgb: np.ndarray) -> np.ndarray:
    """Converts (..., 3) RGB values in 0..255 to HSV with all channels in [0, 1]."""
    rgb = np.asarray(rgb, dtype=float)
    shape = rgb.shape
    flat = rgb.reshape(-1, 3) / 255.0
    r, g, b = flat[:, 0], flat[:, 1], flat[:, 2]
    maxc = flat.max(axis=1)
    minc = flat.min(axis=1)
    delta = maxc - minc

    v = maxc
    s = np.divide(delta, maxc, out=np.zeros_like(maxc), where=maxc > 0)

    safe = np.where(delta > 0, delta, 1.0)
    rc = (maxc - r) / safe
    gc = (maxc - g) / safe
    bc = (maxc - b) / safe
    h = np.select(
        [r == maxc, g == maxc],
        [bc - gc, 2.0 + rc - bc],
        default=4.0 + gc - rc
    )
    h = np.where(delta > 0, (h / 6.0) % 1.0, 0.0)
    return np.stack([h, s, v], axis=-1).reshape(shape)


def hsv_to_rgb(hsv: np.ndarray) -> np.ndarray:
    """Converts (..., 3) HSV values in [0, 1] to uint8 RGB."""
    hsv = np.asarray(hsv, dtype=float)
    shape = hsv.shape
    flat = hsv.reshape(-1, 3)
    h, s, v = flat[:, 0] % 1.0, flat[:, 1], flat[:, 2]
    i = np.floor(h * 6.0).astype(int) % 6
    f = h * 6.0 - np.floor(h * 6.0)
    p = v * (1.0 - s)
    q = v * (1.0 - s * f)
    t = v * (1.0 - s * (1.0 - f))

    conditions = [i == k for k in range(6)]
    r = np.select(conditions, [v, q, p, p, t, v])
    g = np.select(conditions, [t, v, v, q, p, p])
    b = np.select(conditions, [p, p, t, v, v, q])
    rgb = np.stack([r, g, b], axis=-1).reshape(shape)
    return np.clip(np.round(rgb * 255.0), 0, 255).astype(np.uint8)


def lerp_color(color1, color2, t: float) -> tuple:
    """Linearly interpolates between two RGB colours."""
    t = float(np.clip(t, 0.0, 1.0))
    c1 = np.array(_check_rgb(color1), dtype=float)
    c2 = np.array(_check_rgb(color2), dtype=float)
    return tuple(int(c) for c in np.round(c1 * (1 - t) + c2 * t))


def gradient(start, end, steps: int) -> np.ndarray:
    """A straight RGB gradient of `steps` colours, including both endpoints."""
    if steps < 2:
        raise ValueError(f"A gradient needs at least 2 steps, got {steps}")
    t = np.linspace(0.0, 1.0, steps)[:, np.newaxis]
    colors = (1 - t) * np.array(_check_rgb(start)) + t * np.array(_check_rgb(end))
    return np.round(colors).astype(np.uint8)


def looping_gradient(start, end, steps: int) -> np.ndarray:
    """Goes from start to end and back again; the last colour leads into the first."""
    if steps < 2:
        raise ValueError(f"A gradient needs at least 2 steps, got {steps}")
    t = np.sin(np.linspace(0.0, np.pi, steps, endpoint=False))[:, np.newaxis]
    colors = (1 - t) * np.array(_check_rgb(start)) + t * np.array(_check_rgb(end))
    return np.round(colors).astype(np.uint8)


def zigzag_gradient(start, end, steps: int) -> np.ndarray:
    """
    Travels between two colours through HSV space, taking the shorter way
    around the hue circle, so intermediate colours stay saturated.
    """
    if steps < 2:
        raise ValueError(f"A gradient needs at least 2 steps, got {steps}")
    hsv_start = rgb_to_hsv(np.array(_check_rgb(start)))
    hsv_end = rgb_to_hsv(np.array(_check_rgb(end)))
    dh = hsv_end[0] - hsv_start[0]
    if dh > 0.5:
        dh -= 1.0
    elif dh < -0.5:
        dh += 1.0
    t = np.linspace(0.0, 1.0, steps)
    hsv = np.stack([
        hsv_start[0] + dh * t,
        hsv_start[1] + (hsv_end[1] - hsv_start[1]) * t,
        hsv_start[2] + (hsv_end[2] - hsv_start[2]) * t,
    ], axis=-1)
    colors = hsv_to_rgb(hsv)
    # Pin the endpoints exactly; HSV round-trips can be off by one.
    colors[0] = _check_rgb(start)
    colors[-1] = _check_rgb(end)
    return colors


def rainbow(saturation: float, value: float, steps: int) -> np.ndarray:
    """`steps` colours evenly spaced around the hue circle."""
    if steps < 1:
        raise ValueError(f"Step count must be positive, got {steps}")
    hues = np.linspace(0.0, 1.0, steps, endpoint=False)
    hsv = np.stack([hues, np.full(steps, saturation), np.full(steps, value)], axis=-1)
    return hsv_to_rgb(hsv)


def sort_by_hue(palette: dict) -> list:
    """
    Orders palette names for display: greys first (by lightness), then
    chromatic colours by hue, then by lightness.
    """
    names = list(palette)
    if not names:
        return []
    hsv = rgb_to_hsv(np.array([palette[n] for n in names]))
    greys = hsv[:, 1] < 0.1
    # lexsort sorts by the last key first.
    order = np.lexsort((hsv[:, 2], np.where(greys, -1.0, hsv[:, 0]), ~greys))
    return [names[i] for i in order]


def palette_array(palette: dict, names: list = None) -> np.ndarray:
    names = names if names is not None else list(palette)
    return np.array([palette[n] for n in names], dtype=np.uint8).reshape(-1, 3)


def quantize(color_array: np.ndarray, palette_rgb: np.ndarray, dither: bool = False) -> np.ndarray:
    """
    Maps each pixel of a (width, height, 3) colour array to the nearest
    palette colour. With `dither`, a 4x4 Bayer matrix offsets each pixel
    before the lookup to break up banding.
    """
    palette_rgb = np.asarray(palette_rgb, dtype=np.uint8).reshape(-1, 3)
    if len(palette_rgb) == 0:
        raise ValueError("Cannot quantize to an empty palette")

    pixels = color_array.astype(float)
    if dither:
        w, h = pixels.shape[:2]
        threshold = np.tile(_BAYER_4X4, (w // 4 + 1, h // 4 + 1))[:w, :h]
        pixels = pixels + threshold[..., np.newaxis] * DEFAULTS.BAYER_DITHER_STRENGTH

    tree = cKDTree(palette_rgb.astype(float))
    _, indices = tree.query(pixels.reshape(-1, 3))
    return palette_rgb[indices].reshape(color_array.shape)
