# procgen_lab/color_maps.py

"""
================================================================================
SHARED COLOR MAPPING UTILITIES
================================================================================
This module contains the color mapping constants and functions for converting
raw fields (noise, elevation, heat, moisture, biome codes) into RGB color
arrays.

It is a pure, stateless utility with no dependencies on Pygame, so both the
interactive demos and the offline preview exporter can use it. Every
`*_color_array` function takes (rows, cols) data and returns a
(cols, rows, 3) uint8 array, the layout pygame.surfarray expects.
================================================================================
"""
import numpy as np

from .world_map import BIOME_TABLE, code_height

# --- Default Color Mappings ---
COLOR_MAP_HEIGHT = {
    "deep_water": (0, 0, 50),
    "medium_water": (10, 20, 80),
    "shallow_water": (20, 40, 120),
    "coastal_water": (26, 102, 255),
    "sand": (240, 230, 140),
    "grass": (34, 139, 34),
    "forest": (0, 100, 0),
    "rock": (112, 128, 144),
    "snow": (255, 255, 255),
}

COLOR_MAP_HEAT = {
    "coldest": (0, 0, 100),
    "cold": (0, 0, 255),
    "temperate": (255, 255, 0),
    "hot": (255, 0, 0),
    "hottest": (150, 0, 0),
}

COLOR_MAP_MOISTURE = {
    "dry": (210, 180, 140),
    "wet": (70, 130, 180),
}

BIOME_COLORS = {
    "Desert": (248, 229, 180),
    "Savanna": (181, 200, 100),
    "TropicalRainforest": (66, 123, 25),
    "Grassland": (130, 190, 25),
    "Woodland": (122, 170, 19),
    "SeasonalForest": (100, 158, 75),
    "TemperateRainforest": (54, 113, 60),
    "BorealForest": (64, 96, 23),
    "Tundra": (151, 175, 159),
    "Ice": (240, 248, 255),
    "Beach": (255, 235, 180),
    "Rocky": (171, 175, 176),
    "River": (30, 120, 200),
    "Ocean": (10, 20, 80),
    "Empty": (0, 0, 0),
}

# Color stops for the heat LUT, as positions in [0, 1].
HEAT_STOPS = (0.0, 0.25, 0.5, 0.75, 1.0)


# --- Color Lookup Table (LUT) Generation ---
def _stops_lut(positions, colors) -> np.ndarray:
    t = np.linspace(0.0, 1.0, 256)
    colors = np.asarray(colors, dtype=float)
    channels = [np.interp(t, positions, colors[:, c]) for c in range(3)]
    return np.round(np.stack(channels, axis=-1)).astype(np.uint8)


def create_gray_lut() -> np.ndarray:
    levels = np.arange(256, dtype=np.uint8)
    return np.stack([levels] * 3, axis=-1)


def create_heat_lut() -> np.ndarray:
    """Creates a 256-entry color LUT running from coldest to hottest."""
    m = COLOR_MAP_HEAT
    return _stops_lut(HEAT_STOPS, [m["coldest"], m["cold"], m["temperate"], m["hot"], m["hottest"]])


def create_moisture_lut() -> np.ndarray:
    """Creates a 256-entry color LUT for the moisture map."""
    return _stops_lut((0.0, 1.0), [COLOR_MAP_MOISTURE["dry"], COLOR_MAP_MOISTURE["wet"]])


def create_height_lut() -> np.ndarray:
    """A LUT where the index is the height code and the value is the RGB color."""
    return np.array(list(COLOR_MAP_HEIGHT.values()), dtype=np.uint8)


def create_biome_color_lut() -> np.ndarray:
    """A LUT where the index is the biome code and the value is the RGB color."""
    return np.array([BIOME_COLORS[name] for name in BIOME_TABLE], dtype=np.uint8)


# --- Field Conversion ---
def field_to_indices(values: np.ndarray, low: float = -1.0, high: float = 1.0) -> np.ndarray:
    """Scales values in [low, high] to LUT indices 0..255, clipping outliers."""
    if high <= low:
        raise ValueError(f"Invalid value range ({low}, {high})")
    normalized = np.clip((np.asarray(values, dtype=float) - low) / (high - low), 0.0, 1.0)
    return np.round(normalized * 255).astype(np.uint8)


def apply_lut(values: np.ndarray, lut: np.ndarray, low: float = -1.0, high: float = 1.0) -> np.ndarray:
    colors = lut[field_to_indices(values, low, high)]
    return np.transpose(colors, (1, 0, 2))


def field_to_gray(values: np.ndarray, low: float = -1.0, high: float = 1.0) -> np.ndarray:
    """Converts a scalar field into a grayscale RGB color array."""
    gray = field_to_indices(values, low, high)
    colors = np.stack([gray] * 3, axis=-1)
    return np.transpose(colors, (1, 0, 2))


def get_height_color_array(elevation: np.ndarray, height_lut: np.ndarray) -> np.ndarray:
    """Colors elevation in [-1, 1] by height code, shading each band by altitude."""
    colors = height_lut[code_height(elevation)].astype(float)
    shade = 0.85 + 0.15 * np.clip(elevation, -1.0, 1.0)[..., np.newaxis]
    colors = np.clip(colors * shade, 0, 255).astype(np.uint8)
    return np.transpose(colors, (1, 0, 2))


def get_biome_color_array(biome_codes: np.ndarray, biome_lut: np.ndarray) -> np.ndarray:
    """
    Converts a pre-calculated integer biome map into an RGB color array
    using a pre-computed lookup table.
    """
    colors = biome_lut[biome_codes]
    return np.transpose(colors, (1, 0, 2))


def get_region_color_array(region_ids: np.ndarray, region_count: int, seed: int) -> np.ndarray:
    """Gives each region (e.g. a Voronoi cell) a unique, deterministic color."""
    rng = np.random.default_rng(seed)
    color_palette = rng.integers(64, 256, size=(max(region_count, 1), 3), dtype=np.uint8)
    colors = color_palette[region_ids]
    return np.transpose(colors, (1, 0, 2))


def blend(base: np.ndarray, overlay: np.ndarray, alpha) -> np.ndarray:
    """
    Linear blend of two color arrays. `alpha` may be a scalar or an array
    broadcastable to the color shape (e.g. (w, h, 1)).
    """
    if base.shape != overlay.shape:
        raise ValueError(f"Cannot blend arrays of shape {base.shape} and {overlay.shape}")
    alpha = np.clip(alpha, 0.0, 1.0)
    mixed = base.astype(float) * (1.0 - alpha) + overlay.astype(float) * alpha
    return np.clip(np.round(mixed), 0, 255).astype(np.uint8)
