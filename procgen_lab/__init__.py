# procgen_lab/__init__.py

from .noise import NoiseField
from .world_map import BiomeMapper, WorldMap, WorldMapGenerator
from .lighting import LightingHandler, Radiance

__version__ = "0.1.0"
