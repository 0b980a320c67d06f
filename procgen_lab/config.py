# procgen_lab/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the
procedural generators and the demo scenes. These values are used if they are
not explicitly provided by the user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC DEMO RUN.
Instead, pass a configuration dictionary to the generator or scene instance.
================================================================================
"""

# --- Seeds ---
DEFAULT_SEED = 1337
# Large prime numbers used to offset seeds for different layers, ensuring
# they are unique but deterministic from the master seed.
HEAT_SEED_OFFSET = 12347
MOISTURE_SEED_OFFSET = 98761
RIDGE_SEED_OFFSET = 54321
LIGHT_SEED_OFFSET = 25391

# --- Noise Field Defaults ---
NOISE_TYPES = ("perlin", "value", "cellular", "white")
FRACTAL_TYPES = ("fbm", "billow", "ridged")
DEFAULT_NOISE_TYPE = "perlin"
DEFAULT_FRACTAL_TYPE = "fbm"
DEFAULT_FREQUENCY = 1.0 / 32.0
DEFAULT_OCTAVES = 1
MAX_OCTAVES = 8
DEFAULT_LACUNARITY = 2.0
DEFAULT_GAIN = 0.5
# Inverted fractals sample lower frequencies with stronger weights.
INVERSE_LACUNARITY = 0.5
INVERSE_GAIN = 2.0
# Weight applied to each successive ridged octave.
RIDGED_WEIGHT_GAIN = 2.0

# --- Triangulation ---
DEFAULT_POINT_COUNT = 64
# Minimum distance between two sites; closer points are treated as duplicates.
DUPLICATE_POINT_EPSILON = 1e-6
SCATTER_METHODS = ("uniform", "jittered", "halton")

# --- Dungeon ---
DUNGEON_WIDTH = 80
DUNGEON_HEIGHT = 40
CAVE_FILL_PROBABILITY = 0.45
CAVE_SMOOTHING_STEPS = 5
CAVE_BIRTH_LIMIT = 5   # A cell becomes wall with >= 5 wall neighbours
CAVE_SURVIVAL_LIMIT = 4
DUNGEON_ROOM_COUNT = 6
DUNGEON_ROOM_MIN_SIZE = 4
DUNGEON_ROOM_MAX_SIZE = 9

# --- Field of View & Lighting ---
RADIUS_STRATEGIES = ("circle", "square", "diamond")
DEFAULT_RADIUS_STRATEGY = "circle"
DEFAULT_LIGHT_COUNT = 7
LIGHT_MIN_RANGE = 5.0
LIGHT_MAX_RANGE = 11.0
# Seconds between each step of the wandering lights.
LIGHT_MOVE_INTERVAL_S = 1.5
# How bright an unlit but noticeable cell stays, as a fraction of its colour.
AMBIENT_LIGHT_LEVEL = 0.15
BACKGROUND_COLOR = (0, 0, 0)

# --- World Map ---
WORLD_MAP_WIDTH = 256
WORLD_MAP_HEIGHT = 128
TERRAIN_FREQUENCY = 1.35
TERRAIN_OCTAVES = 6
RIDGE_FREQUENCY = 2.4
RIDGE_OCTAVES = 4
RIDGE_WEIGHT = 0.35
HEAT_FREQUENCY = 2.8
MOISTURE_FREQUENCY = 3.1
CLIMATE_OCTAVES = 3
# A lower value cools the whole world; 1.0 keeps the full heat range.
COOLING_MODIFIER = 1.0
MAX_ZOOM_LEVEL = 4

# Upper bounds of each height code, from deep water (0) up to snow (8).
HEIGHT_CODE_UPPER_BOUNDS = {
    "deep_water": -0.7,
    "medium_water": -0.3,
    "shallow_water": -0.1,
    "coastal_water": 0.02,
    "sand": 0.12,
    "grass": 0.35,
    "forest": 0.6,
    "rock": 0.8,
    # snow is anything above rock
}

# Upper bounds of the six heat bands (coldest .. warmest).
HEAT_BAND_UPPER_BOUNDS = (0.15, 0.31, 0.5, 0.69, 0.85)
# Upper bounds of the six moisture bands (driest .. wettest).
MOISTURE_BAND_UPPER_BOUNDS = (0.27, 0.4, 0.6, 0.8, 0.9)

# --- Spectrum ---
DEFAULT_SPECTRUM_SIZE = 256
BAND_PASS_LOW = 0.05   # As a fraction of the Nyquist radius
BAND_PASS_HIGH = 0.35

# --- Palette ---
DEFAULT_GRADIENT_STEPS = 64
BAYER_DITHER_STRENGTH = 32.0
