"""Tests for Delaunay triangulation and Voronoi cells."""

import numpy as np
import pytest

from procgen_lab import triangulation as tri

BOUNDS = (0.0, 0.0, 200.0, 100.0)


def _signed_areas(t):
    a = t.points[t.simplices[:, 0]]
    b = t.points[t.simplices[:, 1]]
    c = t.points[t.simplices[:, 2]]
    return (b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (b[:, 1] - a[:, 1]) * (c[:, 0] - a[:, 0])


class TestScatter:
    """Test point scattering."""

    @pytest.mark.parametrize("method", ["uniform", "jittered", "halton"])
    def test_count_and_bounds(self, method):
        points = tri.scatter_points(method, 50, BOUNDS, seed=3)
        assert points.shape == (50, 2)
        assert np.all(points[:, 0] >= 0) and np.all(points[:, 0] <= 200)
        assert np.all(points[:, 1] >= 0) and np.all(points[:, 1] <= 100)

    def test_same_seed_same_points(self):
        np.testing.assert_array_equal(tri.uniform_points(20, BOUNDS, 9), tri.uniform_points(20, BOUNDS, 9))

    def test_unknown_method(self):
        with pytest.raises(ValueError):
            tri.scatter_points("poisson", 10, BOUNDS, 0)

    def test_degenerate_bounds(self):
        with pytest.raises(ValueError):
            tri.uniform_points(5, (0, 0, 0, 10), 0)

    def test_halton_first_values(self):
        points = tri.halton_points(2, (0, 0, 1, 1), seed=0)
        np.testing.assert_allclose(points[0], [0.5, 1 / 3])
        np.testing.assert_allclose(points[1], [0.25, 2 / 3])


class TestAddPoint:
    """Test incremental point insertion."""

    def test_adds_inside_point(self):
        points = np.array([[10.0, 10.0]])
        result, added = tri.add_point(points, 50.0, 50.0, BOUNDS)
        assert added and len(result) == 2

    def test_rejects_duplicate_and_outside(self):
        points = np.array([[10.0, 10.0]])
        assert not tri.add_point(points, 10.0, 10.0, BOUNDS)[1]
        assert not tri.add_point(points, 500.0, 10.0, BOUNDS)[1]


class TestTriangulate:
    """Test Delaunay triangulation."""

    def test_square_gives_two_triangles(self):
        t = tri.triangulate(np.array([[0, 0], [1, 0], [1, 1], [0, 1]], dtype=float))
        assert len(t) == 2
        assert len(t.edges) == 5

    def test_counter_clockwise(self):
        t = tri.triangulate(tri.uniform_points(40, BOUNDS, 1))
        assert np.all(_signed_areas(t) > 0)

    def test_empty_circumcircle(self):
        points = tri.uniform_points(60, BOUNDS, 2)
        t = tri.triangulate(points)
        centers, radii = tri.circumcenters(t)
        distances = np.linalg.norm(points[np.newaxis, :, :] - centers[:, np.newaxis, :], axis=2)
        assert np.all(distances >= radii[:, np.newaxis] * (1 - 1e-9) - 1e-7)

    def test_neighbours_are_symmetric(self):
        t = tri.triangulate(tri.uniform_points(30, BOUNDS, 4))
        for i, row in enumerate(t.neighbors):
            for j in row:
                if j >= 0:
                    assert i in t.neighbors[j]

    def test_euler_edge_count(self):
        """For a triangulation, E = V + F - 1 (F counts triangles only)."""
        points = tri.uniform_points(25, BOUNDS, 5)
        t = tri.triangulate(points)
        assert len(t.edges) == len(points) + len(t) - 1

    def test_find_triangle(self):
        t = tri.triangulate(np.array([[0, 0], [10, 0], [0, 10]], dtype=float))
        assert t.find_triangle(1.0, 1.0) == 0
        assert t.find_triangle(20.0, 20.0) == -1

    @pytest.mark.parametrize("points", [
        [[0, 0], [1, 1]],
        [[0, 0], [1, 1], [2, 2], [3, 3]],
    ])
    def test_degenerate_input(self, points):
        with pytest.raises(ValueError):
            tri.triangulate(np.array(points, dtype=float))

    def test_circumcenter_of_right_triangle(self):
        t = tri.triangulate(np.array([[0, 0], [2, 0], [0, 2]], dtype=float))
        centers, radii = tri.circumcenters(t)
        np.testing.assert_allclose(centers[0], [1.0, 1.0])
        np.testing.assert_allclose(radii[0], np.sqrt(2.0))


class TestVoronoi:
    """Test clipped Voronoi cells."""

    def test_one_cell_per_site_containing_it(self):
        points = tri.jittered_grid_points(30, BOUNDS, 6)
        cells = tri.voronoi_cells(points, BOUNDS)
        assert len(cells) == len(points)
        for site, cell in zip(points, cells):
            assert np.all(cell[:, 0] >= 0) and np.all(cell[:, 0] <= 200)
            assert np.all(cell[:, 1] >= 0) and np.all(cell[:, 1] <= 100)
            assert cell[:, 0].min() <= site[0] <= cell[:, 0].max()
            assert cell[:, 1].min() <= site[1] <= cell[:, 1].max()

    def test_cells_tile_the_bounds(self):
        points = tri.uniform_points(20, BOUNDS, 7)
        cells = tri.voronoi_cells(points, BOUNDS)
        total = sum(abs(tri._polygon_area_centroid(cell)[0]) for cell in cells)
        assert total == pytest.approx(200.0 * 100.0, rel=1e-6)

    def test_single_site_gets_whole_rectangle(self):
        cells = tri.voronoi_cells(np.array([[5.0, 5.0]]), BOUNDS)
        assert len(cells) == 1 and len(cells[0]) == 4

    def test_lloyd_relaxation_evens_out_cells(self):
        points = tri.uniform_points(30, BOUNDS, 8)
        relaxed = tri.lloyd_relax(points, BOUNDS, iterations=3)

        def area_spread(pts):
            areas = [abs(tri._polygon_area_centroid(c)[0]) for c in tri.voronoi_cells(pts, BOUNDS)]
            return np.std(areas)

        assert relaxed.shape == points.shape
        assert area_spread(relaxed) < area_spread(points)

    def test_nearest_site_map(self):
        points = np.array([[10.0, 10.0], [90.0, 10.0]])
        ids, border = tri.nearest_site_map(points, 100, 20)
        assert ids.shape == (20, 100)
        assert ids[10, 5] == 0 and ids[10, 95] == 1
        assert border[10, 50] < border[10, 5]
