from __future__ import annotations

import unittest

from fakes import FakeRenderBackend

from gardenplanner.controller.placement import PlacementPipeline, element_from_template
from gardenplanner.model.catalog import get_element_by_id
from gardenplanner.model.state import EditorState
from gardenplanner.view.scene import SceneAdapter


class PlacementPipelineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.backend = FakeRenderBackend()
        self.state = EditorState()
        self.pipeline = PlacementPipeline(SceneAdapter(self.backend), self.state, grid_size=0.5)

    def test_drop_snaps_to_grid(self) -> None:
        element = self.pipeline.drop("oak-tree", 1.73, -0.26)

        self.assertEqual(element.type, "tree")
        self.assertEqual(element.name, "Oak Tree")
        self.assertEqual((element.position.x, element.position.y, element.position.z), (1.5, 0.0, -0.5))
        self.assertEqual(element.rotation, 0.0)

    def test_drop_without_snapping(self) -> None:
        self.state.snap_to_grid = False
        element = self.pipeline.drop("oak-tree", 1.73, -0.26)
        self.assertAlmostEqual(element.position.x, 1.73)
        self.assertAlmostEqual(element.position.z, -0.26)

    def test_drop_does_not_insert(self) -> None:
        self.pipeline.drop("oak-tree", 0.0, 0.0)
        self.assertEqual(self.state.elements, [])

    def test_unknown_template_is_a_noop(self) -> None:
        self.assertIsNone(self.pipeline.drop("no-such-template", 0.0, 0.0))

    def test_drop_outside_ground_is_a_noop(self) -> None:
        self.backend.miss = True
        self.assertIsNone(self.pipeline.drop("oak-tree", 0.0, 0.0))

    def test_properties_are_copied_from_template(self) -> None:
        template = get_element_by_id("rose-bush")
        a = element_from_template(template, 0.0, 0.0)
        b = element_from_template(template, 0.0, 0.0)

        a.properties["height"] = 3
        self.assertEqual(b.properties["height"], 1)
        self.assertEqual(template.properties["height"], 1)
        self.assertNotEqual(a.id, b.id)


if __name__ == "__main__":
    unittest.main()
