from __future__ import annotations

import unittest

import pyvista as pv

from gardenplanner.model.elements import create_element
from gardenplanner.view.scene import element_height
from gardenplanner.view.widgets.meshes import (
    DEFAULT_COLOR,
    PLANT_COLOR,
    build_element_mesh,
    element_color,
    material_color,
    safe_color,
)


class ElementMeshTests(unittest.TestCase):
    def test_meshes_are_centred_with_element_height(self) -> None:
        for element_type in ("surface", "path", "tree", "bush", "flower", "house",
                             "furniture", "pond", "pool", "fountain", "note", "measurement"):
            element = create_element(element_type)
            with self.subTest(element_type=element_type):
                mesh = build_element_mesh(element)
                self.assertIsInstance(mesh, pv.PolyData)
                self.assertGreater(mesh.n_points, 0)
                y_min, y_max = mesh.bounds[2], mesh.bounds[3]
                self.assertAlmostEqual(y_max - y_min, element_height(element), places=5)
                self.assertAlmostEqual(y_max + y_min, 0.0, places=5)

    def test_tree_canopy_top_reaches_full_height(self) -> None:
        for props in ({"height": 5}, {"height": 8, "canopy": 6}, {"height": 2, "canopy": 10}):
            with self.subTest(props=props):
                mesh = build_element_mesh(create_element("tree", props))
                self.assertAlmostEqual(mesh.bounds[3], props["height"] / 2.0, places=5)
                self.assertAlmostEqual(mesh.bounds[2], -props["height"] / 2.0, places=5)

    def test_box_footprint_follows_properties(self) -> None:
        mesh = build_element_mesh(create_element("house", {"width": 4, "depth": 2}))
        x_min, x_max, _, _, z_min, z_max = mesh.bounds
        self.assertAlmostEqual(x_max - x_min, 4.0)
        self.assertAlmostEqual(z_max - z_min, 2.0)

    def test_rectangular_pool_is_a_box(self) -> None:
        mesh = build_element_mesh(create_element("pool", {"shape": "rectangular", "width": 5, "length": 8}))
        x_min, x_max, _, _, z_min, z_max = mesh.bounds
        self.assertAlmostEqual(x_max - x_min, 5.0)
        self.assertAlmostEqual(z_max - z_min, 8.0)


class ElementColorTests(unittest.TestCase):
    def test_material_palette(self) -> None:
        self.assertEqual(material_color("brick"), "#b35c44")
        self.assertEqual(material_color("marble"), DEFAULT_COLOR)
        self.assertEqual(material_color(None), DEFAULT_COLOR)

    def test_type_colors(self) -> None:
        self.assertEqual(element_color(create_element("tree")), PLANT_COLOR)
        self.assertEqual(element_color(create_element("surface", {"material": "wood"})), "#8b4513")
        self.assertEqual(element_color(create_element("house", {"color": "#123456"})), "#123456")

    def test_invalid_user_color_falls_back(self) -> None:
        self.assertEqual(safe_color("definitely-not-a-colour", "#808080"), "#808080")
        self.assertEqual(safe_color(12, "#808080"), "#808080")


if __name__ == "__main__":
    unittest.main()
