# examples/demo_suite/main.py

"""
================================================================================
PROCGEN-LAB DEMO SUITE
================================================================================
Opens a window running one demo scene. ESC or closing the window exits,
F1 toggles the status panel and F12 saves a screenshot.

Usage:
    python examples/demo_suite/main.py --demo worldmap --seed 42
================================================================================
"""
import sys
import os
import io
import json
import logging
import logging.config
import argparse
import cProfile
import pstats
from datetime import datetime

import numpy as np
import pygame
import pygame_gui
from PIL import Image

from procgen_lab.demos import DEMOS, create_scene

APP_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_CONFIG_PATH = os.path.join(APP_DIR, 'config.json')
LOG_CONFIG_PATH = os.path.join(APP_DIR, 'logging_config.json')

# --- UI Constants (Rule 1) ---
UI_STATUS_WIDTH = 360
UI_PADDING = 10
SCREENSHOT_DIR = 'screenshots'


class Application:
    """The main application class for the demo suite."""

    def __init__(self, demo_name: str, config_path: str = DEFAULT_CONFIG_PATH, seed: int = None):
        self._setup_logging()
        self.logger.info("Application starting.")

        self.config_path = config_path
        self.config = self._load_config()
        self._setup_pygame()

        # --- State ---
        self.frame_count = 0
        self.show_status = self.config.get('ui', {}).get('show_status', True)
        self._last_status_text = None

        # --- Scene Creation ---
        try:
            self.scene = create_scene(demo_name, self.config.get('demos', {}), self.logger,
                                      (self.screen_width, self.screen_height), seed)
        except ValueError as e:
            self.logger.critical(f"Could not start demo: {e}")
            pygame.quit()
            sys.exit(1)
        pygame.display.set_caption(f"procgen-lab: {self.scene.title}")

        self._setup_ui()

        # --- Profiling Setup (Rule 11) ---
        self.profiler = None
        if self.config.get('profiling', {}).get('enabled', False):
            self.profiler = cProfile.Profile()
            self.logger.info("Profiling is ENABLED.")

        self.is_running = True

    def _setup_logging(self):
        """Initializes the logging system from a config file."""
        log_dir = 'logs'
        os.makedirs(log_dir, exist_ok=True)

        with open(LOG_CONFIG_PATH, 'rt') as f:
            log_config = json.load(f)

        # Tell the logger where to create its file, overriding the JSON path.
        log_config['handlers']['file']['filename'] = os.path.join(log_dir, 'demo_suite.log')

        logging.config.dictConfig(log_config)
        self.logger = logging.getLogger(__name__)

    def _load_config(self) -> dict:
        """Loads display and demo parameters from the config file."""
        self.logger.info(f"Loading configuration from {self.config_path}")
        try:
            with open(self.config_path, 'r') as f:
                return json.load(f)
        except FileNotFoundError:
            self.logger.critical(f"Configuration file not found at {self.config_path}. Exiting.")
            sys.exit(1)
        except json.JSONDecodeError:
            self.logger.critical(f"Error decoding JSON from {self.config_path}. Exiting.")
            sys.exit(1)

    def _setup_pygame(self):
        """Initializes Pygame and the display window."""
        pygame.init()
        display_config = self.config['display']
        self.screen_width = display_config['screen_width']
        self.screen_height = display_config['screen_height']
        self.screen = pygame.display.set_mode((self.screen_width, self.screen_height), pygame.RESIZABLE)

        icon_path = display_config.get('icon_path')
        if icon_path:
            try:
                pygame.display.set_icon(pygame.image.load(icon_path))
            except (FileNotFoundError, pygame.error) as e:
                self.logger.warning(f"Could not load window icon '{icon_path}': {e}")

        self.clock = pygame.time.Clock()
        self.tick_rate = display_config.get('clock_tick_rate', 60)

    def _setup_ui(self):
        """Creates the pygame_gui manager and the status text box."""
        self.ui_manager = pygame_gui.UIManager((self.screen_width, self.screen_height))
        # A height of -1 lets the text box grow to fit its content.
        self.status_box = pygame_gui.elements.UITextBox(
            relative_rect=pygame.Rect(UI_PADDING, UI_PADDING, UI_STATUS_WIDTH, -1),
            html_text=self._status_html(),
            manager=self.ui_manager,
            visible=self.show_status
        )

    def _status_html(self) -> str:
        lines = [f"<b>{self.scene.title}</b>"] + self.scene.status_lines()
        lines += [""] + self.scene.help_lines() + ["F1: hide panel", "F12: screenshot", "ESC: quit"]
        return "<br>".join(lines)

    def run(self):
        """The main application loop."""
        self.logger.info(f"Entering main loop for demo '{self.scene.name}'.")
        if self.profiler:
            self.profiler.enable()

        try:
            while self.is_running:
                time_delta = self.clock.tick(self.tick_rate) / 1000.0

                self._handle_events()
                self.scene.update(time_delta)
                self._update_status()

                self.scene.draw(self.screen)

                # --- UI Processing ---
                self.ui_manager.update(time_delta)
                self.ui_manager.draw_ui(self.screen)

                pygame.display.flip()
                self.frame_count += 1

        except Exception:
            self.logger.critical("An unhandled exception occurred!", exc_info=True)
        finally:
            if self.profiler:
                self.profiler.disable()
                self._report_profiling_results()

            self.logger.info("Exiting application.")
            pygame.quit()
            sys.exit()

    def _handle_events(self):
        """Processes user input and other events."""
        for event in pygame.event.get():
            # Pass events to the UI Manager first
            self.ui_manager.process_events(event)

            if event.type == pygame.QUIT:
                self.is_running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self.logger.info("Event: ESC key pressed. Exiting.")
                self.is_running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_F1:
                self.show_status = not self.show_status
                if self.show_status:
                    self.status_box.show()
                else:
                    self.status_box.hide()
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_F12:
                self._save_screenshot()
            elif event.type == pygame.VIDEORESIZE:
                self._resize(event.w, event.h)
            else:
                self.scene.handle_event(event)

    def _resize(self, width: int, height: int):
        self.screen_width, self.screen_height = width, height
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        self.ui_manager.set_window_resolution((width, height))
        self.scene.on_resize(width, height)
        self.logger.info(f"Event: Window resized to {width}x{height}")

    def _update_status(self):
        """Refreshes the status box only when its text changes."""
        if not self.show_status:
            return
        text = self._status_html()
        if text != self._last_status_text:
            self.status_box.set_text(text)
            self._last_status_text = text

    def _save_screenshot(self):
        os.makedirs(SCREENSHOT_DIR, exist_ok=True)
        stamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        file_path = os.path.join(SCREENSHOT_DIR, f"{self.scene.name}_{stamp}.png")
        # Pillow expects (height, width, channels).
        img_data = np.transpose(pygame.surfarray.array3d(self.screen), (1, 0, 2))
        Image.fromarray(img_data, 'RGB').save(file_path, 'PNG')
        self.logger.info(f"Screenshot saved to {file_path}")

    def _report_profiling_results(self):
        """Saves and logs profiling data."""
        profiling_config = self.config['profiling']
        output_dir = profiling_config.get('output_dir', 'profiling')
        log_count = profiling_config.get('log_count', 20)
        os.makedirs(output_dir, exist_ok=True)

        date_str = datetime.now().strftime("%Y-%m-%d")
        filename = f"{date_str}_{self.scene.name}_seed-{self.scene.seed}_frames-{self.frame_count}.prof"
        filepath = os.path.join(output_dir, filename)
        self.profiler.dump_stats(filepath)
        self.logger.info(f"Full profiling data saved to {filepath}")

        s = io.StringIO()
        ps = pstats.Stats(self.profiler, stream=s).sort_stats('cumulative')
        ps.print_stats(log_count)
        self.logger.info(f"--- Top {log_count} Profiling Results ---\n{s.getvalue()}")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Interactive procedural generation demos.")
    parser.add_argument("--demo", choices=list(DEMOS), default="noise", help="Which demo to open.")
    parser.add_argument("--config", type=str, default=DEFAULT_CONFIG_PATH, help="Path to the JSON config file.")
    parser.add_argument("--seed", type=int, default=None, help="Master seed, overriding the config.")
    return parser.parse_args(argv)


if __name__ == '__main__':
    args = parse_args()
    app = Application(args.demo, args.config, args.seed)
    app.run()
