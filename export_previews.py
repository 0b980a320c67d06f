# export_previews.py

"""
================================================================================
OFFLINE PREVIEW EXPORTER
================================================================================
This script renders demo scenes headless and saves each as a PNG image, so
developers can compare renders between changes without opening a window.

Usage:
    python export_previews.py --config examples/demo_suite/config.json
    python export_previews.py --demos noise fft --seed 7 --frames 30
================================================================================
"""
import os
import sys
import json
import logging
import argparse
import time

# Render without a window. Must be set before pygame initialises its video system.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import numpy as np
import pygame
from PIL import Image
from tqdm import tqdm

from procgen_lab.demos import DEMOS, create_scene

DEFAULT_CONFIG_PATH = os.path.join("examples", "demo_suite", "config.json")
DEFAULT_OUTPUT_DIR = "previews"
# Simulated seconds per frame when advancing a scene before capture.
FRAME_TIME_S = 1.0 / 30.0


def save_surface(surface: pygame.Surface, file_path: str):
    """Saves a pygame surface as an RGB PNG with Pillow."""
    # Pillow works with (height, width, channels) arrays, so transpose the
    # (width, height, channels) array that surfarray produces.
    img_data = np.transpose(pygame.surfarray.array3d(surface), (1, 0, 2))
    Image.fromarray(img_data, 'RGB').save(file_path, 'PNG')


def render_scene(name: str, config: dict, size: tuple, seed: int, frames: int,
                 logger: logging.Logger) -> pygame.Surface:
    """Builds a scene, advances it `frames` steps, and draws it to a new surface."""
    scene = create_scene(name, config, logger, size, seed)
    for _ in range(frames):
        scene.update(FRAME_TIME_S)
    surface = pygame.Surface(size)
    scene.draw(surface)
    return surface


def export_previews(config_path: str, output_dir: str, demos: list, seed: int, frames: int) -> int:
    """
    Renders the selected demos to `<output_dir>/<demo>_seed-<seed>.png`.
    Returns the number of images written.
    """
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    logger = logging.getLogger("Exporter")

    logger.info(f"Loading configuration from: {config_path}")
    try:
        with open(config_path, 'r') as f:
            config = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.critical(f"Failed to load or parse config file: {e}")
        return 0

    display = config.get('display', {})
    size = (display.get('screen_width', 1280), display.get('screen_height', 720))
    demos = demos or list(DEMOS)
    unknown = [name for name in demos if name not in DEMOS]
    if unknown:
        logger.critical(f"Unknown demos {unknown}; choose from {list(DEMOS)}")
        return 0

    os.makedirs(output_dir, exist_ok=True)
    pygame.init()
    written = 0
    start_time = time.perf_counter()
    try:
        for name in tqdm(demos, desc="Rendering previews"):
            surface = render_scene(name, config.get('demos', {}), size, seed, frames, logger)
            file_path = os.path.join(output_dir, f"{name}_seed-{seed}.png")
            save_surface(surface, file_path)
            written += 1
    finally:
        pygame.quit()

    logger.info(f"Wrote {written} previews to {output_dir} in {time.perf_counter() - start_time:.2f} seconds.")
    return written


# --- Command-Line Interface ---
if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Render procgen-lab demo scenes to PNG files.")
    parser.add_argument("--config", type=str, default=DEFAULT_CONFIG_PATH,
                        help="Path to the JSON configuration file.")
    parser.add_argument("--output-dir", type=str, default=DEFAULT_OUTPUT_DIR,
                        help="Directory the PNG files are written to.")
    parser.add_argument("--demos", nargs="*", default=None,
                        help=f"Demos to render (default: all of {', '.join(DEMOS)}).")
    parser.add_argument("--seed", type=int, default=1337, help="Master seed for every scene.")
    parser.add_argument("--frames", type=int, default=0,
                        help="Frames to simulate before capturing (animated scenes).")
    args = parser.parse_args()

    count = export_previews(args.config, args.output_dir, args.demos, args.seed, args.frames)
    sys.exit(0 if count else 1)
