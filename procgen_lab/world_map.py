# procgen_lab/world_map.py

"""
================================================================================
WORLD MAP GENERATOR
================================================================================
This module contains the WorldMapGenerator class, which produces small,
horizontally wrapping world maps (elevation, heat, moisture), and the
BiomeMapper, which classifies every cell into a named biome.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): A dictionary of parameters which can override the
      internal defaults. Expected keys include 'seed', 'width', 'height'.
    - logger: A configured Python logging object for runtime messages.
- Outputs (from methods):
    - WorldMap: (height, width) arrays. Elevation is in [-1, 1]; heat and
      moisture are in [0, 1]; height codes are integers 0..8.
- Side Effects: Logs messages using the provided logger.
- Invariants: Given the same seed, configuration and zoom window, the output
  is deterministic. The left and right edges of a zoom-0 map join seamlessly.
================================================================================
"""

import logging
import time
from dataclasses import dataclass

import numpy as np
from scipy.ndimage import distance_transform_edt

from . import config as DEFAULTS
from . import noise

# Height code indices (Rule 1).
HEIGHT_DEEP_WATER = 0
HEIGHT_MEDIUM_WATER = 1
HEIGHT_SHALLOW_WATER = 2
HEIGHT_COASTAL_WATER = 3
HEIGHT_SAND = 4
HEIGHT_GRASS = 5
HEIGHT_FOREST = 6
HEIGHT_ROCK = 7
HEIGHT_SNOW = 8

# Biome table: the first 36 entries are 6 moisture rows (driest first) of 6
# heat columns (coldest first); then coasts, rivers, lakes and oceans by heat,
# and a final entry for cells outside the map.
BIOME_TABLE = (
    # COLDEST  COLDER          COLD              HOT                    HOTTER                HOTTEST
    "Ice",     "Ice",          "Grassland",      "Desert",              "Desert",             "Desert",              # DRYEST
    "Ice",     "Tundra",       "Grassland",      "Grassland",           "Desert",             "Desert",              # DRYER
    "Ice",     "Tundra",       "Woodland",       "Woodland",            "Savanna",            "Desert",              # DRY
    "Ice",     "Tundra",       "SeasonalForest", "SeasonalForest",      "Savanna",            "Savanna",             # WET
    "Ice",     "Tundra",       "BorealForest",   "TemperateRainforest", "TropicalRainforest", "Savanna",             # WETTER
    "Ice",     "BorealForest", "BorealForest",   "TemperateRainforest", "TropicalRainforest", "TropicalRainforest",  # WETTEST
    "Rocky",   "Rocky",        "Beach",          "Beach",               "Beach",              "Beach",               # COASTS
    "Ice",     "River",        "River",          "River",               "River",              "River",               # RIVERS
    "Ice",     "River",        "River",          "River",               "River",              "River",               # LAKES
    "Ocean",   "Ocean",        "Ocean",          "Ocean",               "Ocean",              "Ocean",               # OCEAN
    "Empty",
)
BIOME_COAST_OFFSET = 36
BIOME_RIVER_OFFSET = 42
BIOME_LAKE_OFFSET = 48
BIOME_OCEAN_OFFSET = 54
BIOME_EMPTY = 60

# How strongly altitude cools the land above the grass line.
ALTITUDE_COOLING = 0.6
# Share of the heat that comes from latitude rather than noise.
LATITUDE_HEAT_WEIGHT = 0.8
# Moisture boost next to water and its falloff distance (fraction of the world width).
COASTAL_MOISTURE_BONUS = 0.3
COASTAL_MOISTURE_FALLOFF = 0.02
# Contrast applied to the raw terrain before squashing it into [-1, 1].
TERRAIN_CONTRAST = 1.8


def code_height(high):
    """Bands elevation values in [-1, 1] into height codes 0..8."""
    bounds = DEFAULTS.HEIGHT_CODE_UPPER_BOUNDS
    edges = [bounds["deep_water"], bounds["medium_water"], bounds["shallow_water"],
             bounds["coastal_water"], bounds["sand"], bounds["grass"],
             bounds["forest"], bounds["rock"]]
    return np.digitize(high, edges, right=False)


@dataclass
class WorldMap:
    """One generated map window. Arrays are (rows, cols) = (height, width)."""
    seed: int
    zoom: int
    elevation: np.ndarray
    heat: np.ndarray
    moisture: np.ndarray
    height_codes: np.ndarray

    @property
    def width(self) -> int:
        return self.elevation.shape[1]

    @property
    def height(self) -> int:
        return self.elevation.shape[0]

    @property
    def land_fraction(self) -> float:
        return float(np.mean(self.height_codes >= HEIGHT_SAND))


class WorldMapGenerator:
    """
    Generates wrapping world maps. This class is backend-only and does not
    handle any visualization.
    """
    def __init__(self, config: dict, logger: logging.Logger):
        """
        Initializes the world map generator.

        Args:
            config (dict): User-defined parameters to override defaults.
            logger (logging.Logger): The logger instance for all output.
        """
        self.logger = logger
        self.user_config = config
        self.logger.info("WorldMapGenerator initializing...")

        # --- Consolidate Configuration ---
        self.settings = {
            'seed': self.user_config.get('seed', DEFAULTS.DEFAULT_SEED),
            'width': self.user_config.get('width', DEFAULTS.WORLD_MAP_WIDTH),
            'height': self.user_config.get('height', DEFAULTS.WORLD_MAP_HEIGHT),
            'heat_seed_offset': self.user_config.get('heat_seed_offset', DEFAULTS.HEAT_SEED_OFFSET),
            'moisture_seed_offset': self.user_config.get('moisture_seed_offset', DEFAULTS.MOISTURE_SEED_OFFSET),
            'ridge_seed_offset': self.user_config.get('ridge_seed_offset', DEFAULTS.RIDGE_SEED_OFFSET),
            'terrain_frequency': self.user_config.get('terrain_frequency', DEFAULTS.TERRAIN_FREQUENCY),
            'terrain_octaves': self.user_config.get('terrain_octaves', DEFAULTS.TERRAIN_OCTAVES),
            'ridge_frequency': self.user_config.get('ridge_frequency', DEFAULTS.RIDGE_FREQUENCY),
            'ridge_octaves': self.user_config.get('ridge_octaves', DEFAULTS.RIDGE_OCTAVES),
            'ridge_weight': self.user_config.get('ridge_weight', DEFAULTS.RIDGE_WEIGHT),
            'heat_frequency': self.user_config.get('heat_frequency', DEFAULTS.HEAT_FREQUENCY),
            'moisture_frequency': self.user_config.get('moisture_frequency', DEFAULTS.MOISTURE_FREQUENCY),
            'climate_octaves': self.user_config.get('climate_octaves', DEFAULTS.CLIMATE_OCTAVES),
            'cooling_modifier': self.user_config.get('cooling_modifier', DEFAULTS.COOLING_MODIFIER),
        }

        if self.settings['width'] <= 0 or self.settings['height'] <= 0:
            raise ValueError(
                f"World map size must be positive, got {self.settings['width']}x{self.settings['height']}"
            )

        # --- Zoom Window State ---
        # The centre of the view as a fraction of the whole world, and the
        # zoom level (each level halves the visible span).
        self.zoom = 0
        self.center_x = 0.5
        self.center_y = 0.5

        self._set_seed(self.settings['seed'])
        self.logger.info(
            f"WorldMapGenerator initialized with seed: {self.seed} "
            f"({self.settings['width']}x{self.settings['height']} cells)"
        )

    def _set_seed(self, seed: int):
        self.seed = int(seed)
        self.settings['seed'] = self.seed
        self._p_terrain = noise.make_permutation_table(self.seed)
        self._p_ridge = noise.make_permutation_table(self.seed + self.settings['ridge_seed_offset'])
        self._p_heat = noise.make_permutation_table(self.seed + self.settings['heat_seed_offset'])
        self._p_moisture = noise.make_permutation_table(self.seed + self.settings['moisture_seed_offset'])

    # --- Coordinate Mapping ---
    def _window(self) -> tuple[np.ndarray, np.ndarray]:
        """World-fraction coordinates (u across, v down) of every cell in the view."""
        span = 1.0 / (2 ** self.zoom)
        half = span / 2.0
        # Vertically the view is clamped inside the world; horizontally it wraps.
        top = min(max(self.center_y - half, 0.0), 1.0 - span)
        left = self.center_x - half

        width, height = self.settings['width'], self.settings['height']
        u = (left + (np.arange(width) + 0.5) * span / width) % 1.0
        v = top + (np.arange(height) + 0.5) * span / height
        return np.meshgrid(u, v)

    @staticmethod
    def _cylinder(u: np.ndarray, v: np.ndarray, frequency: float):
        """Wraps u around a cylinder so noise joins seamlessly at u = 0 and 1."""
        angle = u * 2.0 * np.pi
        x = np.cos(angle) * frequency
        z = np.sin(angle) * frequency
        y = v * np.pi * frequency
        return x, y, z

    # --- Layer Generation ---
    def _elevation(self, u: np.ndarray, v: np.ndarray) -> np.ndarray:
        s = self.settings
        x, y, z = self._cylinder(u, v, s['terrain_frequency'])
        terrain = noise.perlin_noise_3d(self._p_terrain, x, y, z, octaves=s['terrain_octaves'])

        rx, ry, rz = self._cylinder(u, v, s['ridge_frequency'])
        ridges = noise.fractal_noise_grid(
            noise.NOISE_PERLIN, noise.FRACTAL_RIDGED, self._p_ridge, self.seed,
            rx, ry, rz, 3, s['ridge_octaves'], 2.0, 0.5
        )
        # Ridges only raise land that is already above sea level.
        raised = terrain + s['ridge_weight'] * np.maximum(terrain, 0.0) * (ridges + 1.0)
        return np.tanh(raised * TERRAIN_CONTRAST)

    def _heat(self, u: np.ndarray, v: np.ndarray, elevation: np.ndarray) -> np.ndarray:
        s = self.settings
        x, y, z = self._cylinder(u, v, s['heat_frequency'])
        variation = (noise.perlin_noise_3d(self._p_heat, x, y, z, octaves=s['climate_octaves']) + 1.0) / 2.0

        latitude = np.abs(v - 0.5) * 2.0
        latitude_heat = 1.0 - latitude ** 2
        heat = latitude_heat * LATITUDE_HEAT_WEIGHT + variation * (1.0 - LATITUDE_HEAT_WEIGHT)

        grass_upper = DEFAULTS.HEIGHT_CODE_UPPER_BOUNDS["grass"]
        heat -= np.maximum(elevation - grass_upper, 0.0) * ALTITUDE_COOLING
        return np.clip(heat * s['cooling_modifier'], 0.0, 1.0)

    def _moisture(self, u: np.ndarray, v: np.ndarray, height_codes: np.ndarray) -> np.ndarray:
        s = self.settings
        x, y, z = self._cylinder(u, v, s['moisture_frequency'])
        base = (noise.perlin_noise_3d(self._p_moisture, x, y, z, octaves=s['climate_octaves']) + 1.0) / 2.0

        water = height_codes < HEIGHT_SAND
        if np.any(water):
            distance_cells = distance_transform_edt(~water)
            # Convert cell distances to fractions of the full world width.
            cells_per_world = s['width'] * (2 ** self.zoom)
            distance_world = distance_cells / cells_per_world
            coastal = np.exp(-distance_world / COASTAL_MOISTURE_FALLOFF) * COASTAL_MOISTURE_BONUS
        else:
            coastal = np.zeros_like(base)

        return np.clip(base * (1.0 - COASTAL_MOISTURE_BONUS) + coastal, 0.0, 1.0)

    def generate(self, seed: int = None) -> WorldMap:
        """
        Generates the current zoom window. Passing a seed starts a new world.
        """
        if seed is not None and seed != self.seed:
            self._set_seed(seed)

        start_time = time.perf_counter()
        u, v = self._window()
        elevation = self._elevation(u, v)
        height_codes = code_height(elevation)
        heat = self._heat(u, v, elevation)
        moisture = self._moisture(u, v, height_codes)
        world = WorldMap(seed=self.seed, zoom=self.zoom, elevation=elevation, heat=heat,
                         moisture=moisture, height_codes=height_codes)

        duration = time.perf_counter() - start_time
        self.logger.info(
            f"Generated world map (seed {self.seed}, zoom {self.zoom}) in {duration:.3f}s, "
            f"land {world.land_fraction:.0%}"
        )
        return world

    # --- Zoom Control ---
    def zoom_in(self, fx: float, fy: float) -> bool:
        """
        Zooms in on a point given as a fraction (0..1) of the current view.
        Returns False when already at the maximum zoom.
        """
        if self.zoom >= DEFAULTS.MAX_ZOOM_LEVEL:
            return False
        span = 1.0 / (2 ** self.zoom)
        half = span / 2.0
        top = min(max(self.center_y - half, 0.0), 1.0 - span)
        left = self.center_x - half
        self.center_x = (left + np.clip(fx, 0.0, 1.0) * span) % 1.0
        self.center_y = top + np.clip(fy, 0.0, 1.0) * span
        self.zoom += 1
        self.logger.debug(f"Zoomed in to level {self.zoom} at ({self.center_x:.3f}, {self.center_y:.3f})")
        return True

    def zoom_out(self) -> bool:
        """Zooms out one level, returning False when already fully zoomed out."""
        if self.zoom <= 0:
            return False
        self.zoom -= 1
        if self.zoom == 0:
            self.center_x = 0.5
            self.center_y = 0.5
        return True


class BiomeMapper:
    """
    Assigns heat codes, moisture codes and biome codes (indices into
    BIOME_TABLE) to every cell of a WorldMap.
    """
    def __init__(self):
        self.heat_codes = None
        self.moisture_codes = None
        self.biome_codes = None

    def make_biomes(self, world: WorldMap) -> np.ndarray:
        self.heat_codes = np.digitize(world.heat, DEFAULTS.HEAT_BAND_UPPER_BOUNDS, right=True)
        self.moisture_codes = np.digitize(world.moisture, DEFAULTS.MOISTURE_BAND_UPPER_BOUNDS, right=True)

        codes = self.heat_codes + self.moisture_codes * 6
        coast = world.height_codes == HEIGHT_SAND
        ocean = world.height_codes < HEIGHT_SAND
        codes = np.where(coast, self.heat_codes + BIOME_COAST_OFFSET, codes)
        codes = np.where(ocean, self.heat_codes + BIOME_OCEAN_OFFSET, codes)

        self.biome_codes = codes.astype(np.int64)
        return self.biome_codes

    @staticmethod
    def biome_name(code: int) -> str:
        if not 0 <= code < len(BIOME_TABLE):
            raise ValueError(f"Biome code {code} is outside the table")
        return BIOME_TABLE[code]
