# procgen_lab/demos/__init__.py

from .fft_demo import FFTScene
from .font_demo import FontScene
from .lighting_demo import LightingScene
from .noise_demo import NoiseScene
from .palette_demo import PaletteScene
from .triangulation_demo import TriangulationScene
from .world_map_demo import WorldMapScene

# Scene classes by their command-line name, in menu order.
DEMOS = {
    scene.name: scene
    for scene in (PaletteScene, FontScene, NoiseScene, TriangulationScene,
                  LightingScene, WorldMapScene, FFTScene)
}


def create_scene(name: str, config: dict, logger, size: tuple, seed: int = None):
    """Builds the named scene from its block of the application config."""
    if name not in DEMOS:
        raise ValueError(f"Unknown demo '{name}', expected one of {sorted(DEMOS)}")
    return DEMOS[name](config.get(name, {}), logger, size, seed)
