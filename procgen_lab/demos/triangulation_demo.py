# procgen_lab/demos/triangulation_demo.py

import numpy as np
import pygame

from .. import color_maps
from .. import config as DEFAULTS
from .. import triangulation as tri
from .base import Scene

EDGE_COLOR = (240, 240, 240)
CELL_EDGE_COLOR = (20, 20, 30)
POINT_COLOR = (255, 80, 80)
CIRCUMCENTER_COLOR = (80, 200, 255)
DARK_BACKGROUND = (24, 24, 32)
POINT_RADIUS = 3


class TriangulationScene(Scene):
    """
    Delaunay / Voronoi test. Sites are scattered over the window; the
    triangulation, the Voronoi cells and the circumcentres can be toggled,
    and clicking adds a site.
    """
    name = "triangulation"
    title = "Delaunay & Voronoi"

    def __init__(self, config, logger, size, seed=None):
        super().__init__(config, logger, size, seed)
        self.point_count = self.config.get('point_count', DEFAULTS.DEFAULT_POINT_COUNT)
        self.method_index = 0
        self.show_triangles = True
        self.show_voronoi = True
        self.show_circumcenters = False
        self.generation = 0
        self.points = np.empty((0, 2))
        self.triangulation = None
        self.cells = []
        self.regenerate()

    @property
    def bounds(self) -> tuple:
        return (0.0, 0.0, float(self.width), float(self.height))

    @property
    def method(self) -> str:
        return DEFAULTS.SCATTER_METHODS[self.method_index]

    def regenerate(self):
        self.points = tri.scatter_points(self.method, self.point_count, self.bounds, self.seed + self.generation)
        self._rebuild()

    def _rebuild(self):
        try:
            self.triangulation = tri.triangulate(self.points)
        except ValueError as e:
            self.logger.warning(f"Cannot triangulate: {e}")
            self.triangulation = None
        self.cells = tri.voronoi_cells(self.points, self.bounds) if len(self.points) else []
        self.dirty = True

    # --- Input ---
    def on_key(self, key, mod):
        if key == pygame.K_g:
            self.generation += 1
            self.regenerate()
        elif key == pygame.K_l:
            self.points = tri.lloyd_relax(self.points, self.bounds)
            self._rebuild()
        elif key == pygame.K_t:
            self.show_triangles = not self.show_triangles
        elif key == pygame.K_v:
            self.show_voronoi = not self.show_voronoi
            self.dirty = True
        elif key == pygame.K_c:
            self.show_circumcenters = not self.show_circumcenters
        elif key == pygame.K_p:
            self.method_index = (self.method_index + 1) % len(DEFAULTS.SCATTER_METHODS)
            self.regenerate()
        else:
            return False
        self.logger.debug(f"Triangulation scene: {len(self.points)} sites ({self.method})")
        return True

    def on_click(self, pos, button):
        if button != 1:
            return False
        self.points, added = tri.add_point(self.points, float(pos[0]), float(pos[1]), self.bounds)
        if added:
            self._rebuild()
        return added

    def on_resize(self, width, height):
        # Scale the existing sites into the new window.
        if len(self.points):
            self.points = self.points * np.array([width / self.width, height / self.height])
        super().on_resize(width, height)
        self._rebuild()

    # --- Rendering ---
    def render(self):
        width, height = self.render_size
        if not self.show_voronoi or len(self.points) == 0:
            colors = np.empty((width, height, 3), dtype=np.uint8)
            colors[:] = DARK_BACKGROUND
            return colors
        ids, border = tri.nearest_site_map(self.points / self.pixel_scale, width, height)
        colors = color_maps.get_region_color_array(ids, len(self.points), self.seed)
        # Darken pixels close to a cell border so the cells read as outlined.
        alpha = 0.5 + 0.5 * np.clip(border / 2.0, 0.0, 1.0).T[..., np.newaxis]
        return color_maps.blend(np.zeros_like(colors), colors, alpha)

    def draw(self, surface):
        super().draw(surface)
        if self.show_voronoi:
            for cell in self.cells:
                if len(cell) >= 3:
                    pygame.draw.polygon(surface, CELL_EDGE_COLOR, cell.tolist(), 1)

        if self.triangulation is not None:
            if self.show_triangles:
                points = self.triangulation.points
                for a, b in self.triangulation.edges:
                    pygame.draw.line(surface, EDGE_COLOR, tuple(points[a]), tuple(points[b]), 1)
            if self.show_circumcenters:
                centers, _ = tri.circumcenters(self.triangulation)
                for cx, cy in centers:
                    if np.isfinite(cx) and np.isfinite(cy):
                        pygame.draw.circle(surface, CIRCUMCENTER_COLOR, (int(cx), int(cy)), 2)

        for x, y in self.points:
            pygame.draw.circle(surface, POINT_COLOR, (int(x), int(y)), POINT_RADIUS)

    def status_lines(self):
        triangles = len(self.triangulation) if self.triangulation is not None else 0
        return [
            f"Sites: {len(self.points)} ({self.method})",
            f"Triangles: {triangles}",
            f"Show: {'triangles ' if self.show_triangles else ''}{'voronoi ' if self.show_voronoi else ''}"
            f"{'circumcentres' if self.show_circumcenters else ''}",
        ]

    def help_lines(self):
        return ["G: new sites", "L: Lloyd relaxation step", "T: triangles", "V: Voronoi cells",
                "C: circumcentres", "P: scatter method", "Click: add a site"]
