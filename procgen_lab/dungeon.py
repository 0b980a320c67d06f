# procgen_lab/dungeon.py

"""
================================================================================
DUNGEON GENERATION
================================================================================
Small grid dungeons for the lighting demo: a cellular-automaton cave with
rectangular rooms carved into it, joined by corridors.

Grids are indexed [x, y] with shape (width, height), matching the layout that
pygame.surfarray expects. Each cell holds a character code (WALL or FLOOR).
================================================================================
"""
import logging

import numpy as np
from scipy import ndimage

from . import config as DEFAULTS

logger = logging.getLogger(__name__)

WALL = ord('#')
FLOOR = ord('.')

# Neighbour bit flags used to pick a line-drawing glyph for each wall.
_NORTH, _EAST, _SOUTH, _WEST = 1, 2, 4, 8
_WALL_GLYPHS = {
    0: '#',
    _NORTH: '│', _SOUTH: '│', _NORTH | _SOUTH: '│',
    _EAST: '─', _WEST: '─', _EAST | _WEST: '─',
    _NORTH | _EAST: '└', _NORTH | _WEST: '┘',
    _SOUTH | _EAST: '┌', _SOUTH | _WEST: '┐',
    _NORTH | _SOUTH | _EAST: '├', _NORTH | _SOUTH | _WEST: '┤',
    _EAST | _WEST | _NORTH: '┴', _EAST | _WEST | _SOUTH: '┬',
    _NORTH | _EAST | _SOUTH | _WEST: '┼',
}

_MOORE_KERNEL = np.array([[1, 1, 1], [1, 0, 1], [1, 1, 1]])


def _check_size(width: int, height: int):
    if width < 3 or height < 3:
        raise ValueError(f"Dungeon must be at least 3x3, got {width}x{height}")


def _keep_largest_region(grid: np.ndarray) -> np.ndarray:
    """Fills every floor region except the largest orthogonally connected one."""
    labels, count = ndimage.label(grid == FLOOR)
    if count <= 1:
        return grid
    sizes = ndimage.sum(np.ones_like(labels), labels, index=np.arange(1, count + 1))
    largest = int(np.argmax(sizes)) + 1
    result = grid.copy()
    result[(labels != largest) & (grid == FLOOR)] = WALL
    return result


def generate_cave(width: int, height: int, seed: int,
                  fill: float = DEFAULTS.CAVE_FILL_PROBABILITY,
                  steps: int = DEFAULTS.CAVE_SMOOTHING_STEPS) -> np.ndarray:
    """
    Random fill followed by `steps` rounds of the 4-5 smoothing rule. The
    border is always wall and only the largest open region is kept.
    """
    _check_size(width, height)
    rng = np.random.default_rng(seed)
    walls = rng.random((width, height)) < fill

    for _ in range(steps):
        walls[0, :] = walls[-1, :] = True
        walls[:, 0] = walls[:, -1] = True
        neighbours = ndimage.convolve(walls.astype(int), _MOORE_KERNEL, mode='constant', cval=1)
        walls = np.where(walls, neighbours >= DEFAULTS.CAVE_SURVIVAL_LIMIT,
                         neighbours >= DEFAULTS.CAVE_BIRTH_LIMIT)

    walls[0, :] = walls[-1, :] = True
    walls[:, 0] = walls[:, -1] = True
    grid = np.where(walls, WALL, FLOOR).astype(np.uint8)
    return _keep_largest_region(grid)


def _carve_corridor(grid: np.ndarray, start: tuple, end: tuple, horizontal_first: bool):
    (x0, y0), (x1, y1) = start, end
    if horizontal_first:
        grid[min(x0, x1):max(x0, x1) + 1, y0] = FLOOR
        grid[x1, min(y0, y1):max(y0, y1) + 1] = FLOOR
    else:
        grid[x0, min(y0, y1):max(y0, y1) + 1] = FLOOR
        grid[min(x0, x1):max(x0, x1) + 1, y1] = FLOOR


def carve_rooms(grid: np.ndarray, seed: int, count: int = DEFAULTS.DUNGEON_ROOM_COUNT) -> np.ndarray:
    """
    Carves up to `count` rectangular rooms and joins each room to the previous
    one (and the first room to the existing open area) with an L-shaped
    corridor. The outer border is left intact.
    """
    width, height = grid.shape
    rng = np.random.default_rng(seed)
    result = grid.copy()
    min_size, max_size = DEFAULTS.DUNGEON_ROOM_MIN_SIZE, DEFAULTS.DUNGEON_ROOM_MAX_SIZE

    centres = []
    open_cells = np.argwhere(result == FLOOR)
    if len(open_cells):
        anchor = open_cells[rng.integers(len(open_cells))]
        centres.append((int(anchor[0]), int(anchor[1])))

    for _ in range(count):
        room_w = int(rng.integers(min_size, max_size + 1))
        room_h = int(rng.integers(min_size, max_size + 1))
        if room_w >= width - 2 or room_h >= height - 2:
            continue
        x = int(rng.integers(1, width - room_w - 1))
        y = int(rng.integers(1, height - room_h - 1))
        result[x:x + room_w, y:y + room_h] = FLOOR
        centre = (x + room_w // 2, y + room_h // 2)
        if centres:
            _carve_corridor(result, centres[-1], centre, bool(rng.integers(2)))
        centres.append(centre)

    result[0, :] = result[-1, :] = WALL
    result[:, 0] = result[:, -1] = WALL
    return result


def generate_dungeon(width: int = DEFAULTS.DUNGEON_WIDTH, height: int = DEFAULTS.DUNGEON_HEIGHT,
                     seed: int = DEFAULTS.DEFAULT_SEED) -> np.ndarray:
    """A cave with rooms carved into it; every floor cell is reachable."""
    cave = generate_cave(width, height, seed)
    dungeon = _keep_largest_region(carve_rooms(cave, seed + 1))
    logger.debug(f"Generated {width}x{height} dungeon with {int((dungeon == FLOOR).sum())} floor cells.")
    return dungeon


def resistance_map(grid: np.ndarray) -> np.ndarray:
    """1.0 where light is blocked (walls), 0.0 on open floor."""
    return (grid == WALL).astype(float)


def floor_cells(grid: np.ndarray) -> np.ndarray:
    """(N, 2) array of [x, y] floor positions."""
    return np.argwhere(grid == FLOOR)


def random_floor_cells(grid: np.ndarray, rng: np.random.Generator, count: int,
                       min_distance: float = 0.0) -> list[tuple[int, int]]:
    """
    Picks up to `count` distinct floor cells, rejecting any closer than
    `min_distance` to one already chosen.
    """
    cells = floor_cells(grid)
    chosen = []
    for index in rng.permutation(len(cells)):
        x, y = int(cells[index][0]), int(cells[index][1])
        if all((x - cx) ** 2 + (y - cy) ** 2 >= min_distance ** 2 for cx, cy in chosen):
            chosen.append((x, y))
            if len(chosen) == count:
                break
    return chosen


def wall_glyphs(grid: np.ndarray) -> np.ndarray:
    """
    Characters for display: floors become '.', walls become box-drawing lines
    that connect to neighbouring walls. Walls surrounded entirely by walls
    are shown blank.
    """
    width, height = grid.shape
    walls = np.pad(grid == WALL, 1, constant_values=False)
    solid = np.pad(grid == WALL, 1, constant_values=True)
    glyphs = np.full((width, height), '.', dtype='<U1')

    for x in range(width):
        for y in range(height):
            if grid[x, y] != WALL:
                continue
            px, py = x + 1, y + 1
            if solid[px - 1:px + 2, py - 1:py + 2].all():
                glyphs[x, y] = ' '
                continue
            mask = 0
            if walls[px, py - 1]:
                mask |= _NORTH
            if walls[px + 1, py]:
                mask |= _EAST
            if walls[px, py + 1]:
                mask |= _SOUTH
            if walls[px - 1, py]:
                mask |= _WEST
            glyphs[x, y] = _WALL_GLYPHS[mask]
    return glyphs
