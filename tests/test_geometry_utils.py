from __future__ import annotations

import unittest

import numpy as np

from gardenplanner.model.geometry_utils import Ray, intersect_ground_plane, make_ray, snap_point, snap_to_grid


class SnapToGridTests(unittest.TestCase):
    def test_snaps_to_nearest_half_metre(self) -> None:
        self.assertAlmostEqual(snap_to_grid(1.73, 0.5), 1.5)
        self.assertAlmostEqual(snap_to_grid(-0.26, 0.5), -0.5)

    def test_halves_round_up(self) -> None:
        self.assertAlmostEqual(snap_to_grid(0.25, 0.5), 0.5)
        self.assertAlmostEqual(snap_to_grid(-0.25, 0.5), 0.0)

    def test_non_positive_grid_is_identity(self) -> None:
        self.assertEqual(snap_to_grid(1.23, 0.0), 1.23)

    def test_snap_point_only_touches_x_and_z(self) -> None:
        point = snap_point(np.array([1.73, 0.42, -0.26]), 0.5)
        np.testing.assert_allclose(point, [1.5, 0.42, -0.5])

    def test_snap_point_disabled(self) -> None:
        point = snap_point(np.array([1.73, 0.0, -0.26]), 0.5, enabled=False)
        np.testing.assert_allclose(point, [1.73, 0.0, -0.26])


class RayTests(unittest.TestCase):
    def test_make_ray_normalizes(self) -> None:
        ray = make_ray([0, 10, 0], [0, 0, 0])
        np.testing.assert_allclose(ray.direction, [0, -1, 0])

    def test_make_ray_degenerate(self) -> None:
        self.assertIsNone(make_ray([1, 1, 1], [1, 1, 1]))

    def test_ground_plane_hit(self) -> None:
        ray = make_ray([0, 10, 0], [5, 0, 5])
        np.testing.assert_allclose(intersect_ground_plane(ray), [5, 0, 5], atol=1e-9)

    def test_parallel_ray_misses(self) -> None:
        ray = Ray(origin=np.array([0.0, 1.0, 0.0]), direction=np.array([1.0, 0.0, 0.0]))
        self.assertIsNone(intersect_ground_plane(ray))

    def test_ray_pointing_away_misses(self) -> None:
        ray = Ray(origin=np.array([0.0, 1.0, 0.0]), direction=np.array([0.0, 1.0, 0.0]))
        self.assertIsNone(intersect_ground_plane(ray))


if __name__ == "__main__":
    unittest.main()
