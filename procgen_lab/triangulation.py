# procgen_lab/triangulation.py

"""
================================================================================
DELAUNAY TRIANGULATION & VORONOI TESSELLATION
================================================================================
This module scatters sites over a rectangle, triangulates them, and builds the
dual Voronoi cells clipped to the rectangle. The heavy lifting is done by
Qhull through scipy.spatial; this module only normalises its output into
plain arrays the renderers can draw directly.

Data Contract:
---------------
- Inputs:
    - points: (N, 2) float array of site positions.
    - bounds: (min_x, min_y, max_x, max_y) rectangle that contains every site.
- Outputs:
    - Triangulation: CCW triangles as index triples, neighbour table, edges.
    - Voronoi cells: one CCW convex polygon per site, inside the bounds.
- Side Effects: None.
- Invariants: No site lies strictly inside the circumcircle of any triangle.
  Every Voronoi cell contains its own site.
================================================================================
"""
from dataclasses import dataclass, field

import numpy as np
from scipy.spatial import Delaunay, Voronoi, cKDTree, QhullError

from . import config as DEFAULTS


@dataclass
class Triangulation:
    """The result of triangulating a point set."""
    points: np.ndarray
    simplices: np.ndarray   # (M, 3) CCW vertex indices
    neighbors: np.ndarray   # (M, 3) triangle opposite each vertex, -1 on the hull
    _delaunay: Delaunay = field(repr=False, default=None)

    @property
    def edges(self) -> np.ndarray:
        """Unique undirected edges as (K, 2) index pairs, smaller index first."""
        s = self.simplices
        all_edges = np.concatenate([s[:, [0, 1]], s[:, [1, 2]], s[:, [2, 0]]])
        all_edges.sort(axis=1)
        return np.unique(all_edges, axis=0)

    def find_triangle(self, x: float, y: float) -> int:
        """Index of the triangle containing (x, y), or -1 outside the hull."""
        if self._delaunay is None:
            return -1
        return int(self._delaunay.find_simplex(np.array([[x, y]]))[0])

    def __len__(self):
        return len(self.simplices)


def _check_bounds(bounds):
    min_x, min_y, max_x, max_y = bounds
    if max_x <= min_x or max_y <= min_y:
        raise ValueError(f"Bounds must have positive area, got {bounds}")
    return float(min_x), float(min_y), float(max_x), float(max_y)


# --- Point Scattering ---
def uniform_points(count: int, bounds, seed: int) -> np.ndarray:
    """Independent uniformly distributed points."""
    min_x, min_y, max_x, max_y = _check_bounds(bounds)
    rng = np.random.default_rng(seed)
    xs = rng.uniform(min_x, max_x, count)
    ys = rng.uniform(min_y, max_y, count)
    return np.column_stack((xs, ys))


def jittered_grid_points(count: int, bounds, seed: int, jitter: float = 0.8) -> np.ndarray:
    """
    One point per cell of a near-square grid, offset randomly within its cell.
    Returns exactly `count` points (the grid is filled row by row).
    """
    min_x, min_y, max_x, max_y = _check_bounds(bounds)
    if count <= 0:
        return np.empty((0, 2))
    aspect = (max_x - min_x) / (max_y - min_y)
    cols = max(1, int(round(np.sqrt(count * aspect))))
    rows = int(np.ceil(count / cols))
    cell_w = (max_x - min_x) / cols
    cell_h = (max_y - min_y) / rows

    rng = np.random.default_rng(seed)
    index = np.arange(count)
    cx = min_x + (index % cols + 0.5) * cell_w
    cy = min_y + (index // cols + 0.5) * cell_h
    cx += rng.uniform(-0.5, 0.5, count) * jitter * cell_w
    cy += rng.uniform(-0.5, 0.5, count) * jitter * cell_h
    return np.column_stack((cx, cy))


def _radical_inverse(index: np.ndarray, base: int) -> np.ndarray:
    result = np.zeros(len(index))
    fraction = 1.0 / base
    index = index.copy()
    while np.any(index > 0):
        result += (index % base) * fraction
        index //= base
        fraction /= base
    return result


def halton_points(count: int, bounds, seed: int = 0) -> np.ndarray:
    """Low-discrepancy Halton (2, 3) sequence, starting at an index chosen by the seed."""
    min_x, min_y, max_x, max_y = _check_bounds(bounds)
    start = 1 + (seed % 4096)
    index = np.arange(start, start + count)
    xs = min_x + _radical_inverse(index, 2) * (max_x - min_x)
    ys = min_y + _radical_inverse(index, 3) * (max_y - min_y)
    return np.column_stack((xs, ys))


def scatter_points(method: str, count: int, bounds, seed: int) -> np.ndarray:
    if method == "uniform":
        return uniform_points(count, bounds, seed)
    if method == "jittered":
        return jittered_grid_points(count, bounds, seed)
    if method == "halton":
        return halton_points(count, bounds, seed)
    raise ValueError(f"Unknown scatter method '{method}', expected one of {DEFAULTS.SCATTER_METHODS}")


def add_point(points: np.ndarray, x: float, y: float, bounds) -> tuple[np.ndarray, bool]:
    """
    Appends (x, y) if it is inside the bounds and not a duplicate of an
    existing site. Returns the (possibly unchanged) array and whether it grew.
    """
    min_x, min_y, max_x, max_y = _check_bounds(bounds)
    if not (min_x <= x <= max_x and min_y <= y <= max_y):
        return points, False
    if len(points) and np.min(np.hypot(points[:, 0] - x, points[:, 1] - y)) < DEFAULTS.DUPLICATE_POINT_EPSILON:
        return points, False
    return np.vstack([points, [[x, y]]]), True


# --- Triangulation ---
def triangulate(points: np.ndarray) -> Triangulation:
    """
    Computes the Delaunay triangulation of a point set.

    Raises:
        ValueError: for fewer than 3 points or an all-collinear input.
    """
    points = np.asarray(points, dtype=float)
    if points.ndim != 2 or points.shape[1] != 2:
        raise ValueError(f"Expected an (N, 2) point array, got shape {points.shape}")
    if len(points) < 3:
        raise ValueError(f"Triangulation needs at least 3 points, got {len(points)}")

    try:
        delaunay = Delaunay(points)
    except QhullError as e:
        raise ValueError(f"Points are degenerate (collinear or coincident): {e}") from e

    simplices = delaunay.simplices.copy()
    neighbors = delaunay.neighbors.copy()

    # Enforce counter-clockwise winding. Swapping two vertices also swaps the
    # neighbours opposite them.
    a = points[simplices[:, 0]]
    b = points[simplices[:, 1]]
    c = points[simplices[:, 2]]
    cross = (b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (b[:, 1] - a[:, 1]) * (c[:, 0] - a[:, 0])
    clockwise = cross < 0
    simplices[clockwise] = simplices[clockwise][:, [0, 2, 1]]
    neighbors[clockwise] = neighbors[clockwise][:, [0, 2, 1]]

    return Triangulation(points=points, simplices=simplices, neighbors=neighbors, _delaunay=delaunay)


def circumcenters(tri: Triangulation) -> tuple[np.ndarray, np.ndarray]:
    """Circumcentre and circumradius of every triangle."""
    a = tri.points[tri.simplices[:, 0]]
    b = tri.points[tri.simplices[:, 1]]
    c = tri.points[tri.simplices[:, 2]]

    d = 2.0 * (a[:, 0] * (b[:, 1] - c[:, 1]) + b[:, 0] * (c[:, 1] - a[:, 1]) + c[:, 0] * (a[:, 1] - b[:, 1]))
    a2 = (a ** 2).sum(axis=1)
    b2 = (b ** 2).sum(axis=1)
    c2 = (c ** 2).sum(axis=1)
    ux = (a2 * (b[:, 1] - c[:, 1]) + b2 * (c[:, 1] - a[:, 1]) + c2 * (a[:, 1] - b[:, 1])) / d
    uy = (a2 * (c[:, 0] - b[:, 0]) + b2 * (a[:, 0] - c[:, 0]) + c2 * (b[:, 0] - a[:, 0])) / d
    centers = np.column_stack((ux, uy))
    radii = np.hypot(a[:, 0] - ux, a[:, 1] - uy)
    return centers, radii


# --- Voronoi ---
def _polygon_area_centroid(polygon: np.ndarray) -> tuple[float, np.ndarray]:
    x = polygon[:, 0]
    y = polygon[:, 1]
    x1 = np.roll(x, -1)
    y1 = np.roll(y, -1)
    cross = x * y1 - x1 * y
    area = cross.sum() / 2.0
    if abs(area) < 1e-12:
        return 0.0, polygon.mean(axis=0)
    cx = ((x + x1) * cross).sum() / (6.0 * area)
    cy = ((y + y1) * cross).sum() / (6.0 * area)
    return area, np.array([cx, cy])


def voronoi_cells(points: np.ndarray, bounds) -> list[np.ndarray]:
    """
    Builds one Voronoi polygon per site, clipped to the bounding rectangle.

    Mirroring the sites across all four edges of the rectangle makes every
    original cell bounded and makes the rectangle's edges cell borders.
    """
    min_x, min_y, max_x, max_y = _check_bounds(bounds)
    points = np.asarray(points, dtype=float)
    if len(points) == 0:
        return []
    if len(points) == 1:
        return [np.array([[min_x, min_y], [max_x, min_y], [max_x, max_y], [min_x, max_y]])]

    left = points.copy()
    left[:, 0] = 2 * min_x - left[:, 0]
    right = points.copy()
    right[:, 0] = 2 * max_x - right[:, 0]
    bottom = points.copy()
    bottom[:, 1] = 2 * min_y - bottom[:, 1]
    top = points.copy()
    top[:, 1] = 2 * max_y - top[:, 1]
    mirrored = np.vstack([points, left, right, bottom, top])

    try:
        vor = Voronoi(mirrored)
    except QhullError as e:
        raise ValueError(f"Points are degenerate (collinear or coincident): {e}") from e

    cells = []
    for i in range(len(points)):
        region = vor.regions[vor.point_region[i]]
        polygon = vor.vertices[[v for v in region if v >= 0]]
        polygon[:, 0] = np.clip(polygon[:, 0], min_x, max_x)
        polygon[:, 1] = np.clip(polygon[:, 1], min_y, max_y)
        angles = np.arctan2(polygon[:, 1] - points[i, 1], polygon[:, 0] - points[i, 0])
        cells.append(polygon[np.argsort(angles)])
    return cells


def lloyd_relax(points: np.ndarray, bounds, iterations: int = 1) -> np.ndarray:
    """Moves each site to the centroid of its clipped Voronoi cell."""
    relaxed = np.asarray(points, dtype=float).copy()
    for _ in range(iterations):
        cells = voronoi_cells(relaxed, bounds)
        relaxed = np.array([_polygon_area_centroid(cell)[1] for cell in cells])
    return relaxed


def nearest_site_map(points: np.ndarray, width: int, height: int) -> tuple[np.ndarray, np.ndarray]:
    """
    Rasterises the Voronoi diagram over a width x height pixel grid.

    Returns:
        site_ids (np.ndarray): (height, width) index of the nearest site.
        border_distance (np.ndarray): approximate distance to the nearest cell
            border, half the difference of the two nearest site distances.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Raster size must be positive, got {width}x{height}")
    points = np.asarray(points, dtype=float)
    if len(points) == 0:
        raise ValueError("Cannot rasterise an empty point set")

    ys, xs = np.mgrid[0:height, 0:width]
    query = np.column_stack((xs.ravel() + 0.5, ys.ravel() + 0.5))
    tree = cKDTree(points)

    if len(points) == 1:
        ids = np.zeros(width * height, dtype=int)
        border = np.full(width * height, np.inf)
    else:
        dist, indices = tree.query(query, k=2)
        ids = indices[:, 0]
        border = (dist[:, 1] - dist[:, 0]) / 2.0

    return ids.reshape(height, width), border.reshape(height, width)
