"""Shared fixtures. Scenes render headless through SDL's dummy drivers."""

import logging
import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame
import pytest


@pytest.fixture
def logger():
    return logging.getLogger("procgen_lab.tests")


@pytest.fixture(scope="session")
def pygame_display():
    """Initialises pygame with a tiny dummy display for the whole session."""
    pygame.init()
    pygame.display.set_mode((1, 1))
    yield
    pygame.quit()
