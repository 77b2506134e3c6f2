from __future__ import annotations

import unittest

from gardenplanner.model.elements import (
    ElementType,
    GardenElement,
    Vector3,
    create_element,
    default_properties,
    element_from_dict,
    is_number,
    validate_element,
)

DOCUMENTED_KEYS = {
    "surface": {"width", "depth", "material"},
    "path": {"width", "length", "material", "curved"},
    "tree": {"height", "width", "species", "mature", "flowering", "canopy"},
    "bush": {"height", "width", "species", "mature", "flowering"},
    "flower": {"height", "width", "species", "mature", "flowering", "spacing"},
    "house": {"width", "depth", "height", "stories", "roofType", "color"},
    "furniture": {"width", "depth", "height", "material", "color"},
    "pond": {"shape", "depth", "radius"},
    "pool": {"shape", "depth", "radius"},
    "fountain": {"shape", "depth", "radius"},
    "note": {"text", "fontSize", "color"},
}

VALID_PROPERTIES = {
    "surface": {"width": 5, "depth": 5},
    "path": {"width": 0.8, "length": 3},
    "tree": {"height": 5},
    "bush": {"height": 1.2},
    "flower": {"height": 0.3},
    "house": {"width": 8, "depth": 6, "height": 3},
    "furniture": {"width": 1, "depth": 1},
    "pond": {"shape": "circular", "radius": 1.5},
    "pool": {"shape": "rectangular", "width": 5, "length": 8},
}


def _raw(element_type: str, properties: dict) -> dict:
    return {
        "id": "e1",
        "name": "Thing",
        "type": element_type,
        "position": {"x": 0, "y": 0, "z": 0},
        "rotation": 0,
        "properties": properties,
    }


class DefaultPropertiesTests(unittest.TestCase):
    def test_empty_overrides_yield_exactly_documented_keys(self) -> None:
        for element_type, keys in DOCUMENTED_KEYS.items():
            with self.subTest(element_type=element_type):
                element = create_element(element_type, {})
                self.assertEqual(set(element.properties), keys)

    def test_non_circular_water_gets_width_and_length(self) -> None:
        props = default_properties(ElementType.POOL, {"shape": "rectangular"})
        self.assertIn("width", props)
        self.assertIn("length", props)
        self.assertNotIn("radius", props)

    def test_overrides_win_over_defaults(self) -> None:
        element = create_element("tree", {"height": 9, "species": "Oak"})
        self.assertEqual(element.properties["height"], 9)
        self.assertEqual(element.properties["species"], "Oak")
        self.assertEqual(element.properties["canopy"], 3)

    def test_unknown_type_has_no_defaults(self) -> None:
        element = create_element("measurement", {"length": 2})
        self.assertEqual(element.properties, {"length": 2})
        self.assertEqual(element.type, "measurement")

    def test_defaults_are_fresh_copies(self) -> None:
        a = create_element("surface")
        a.properties["width"] = 99
        self.assertEqual(create_element("surface").properties["width"], 5)


class ValidateElementTests(unittest.TestCase):
    def test_accepts_complete_elements(self) -> None:
        for element_type, props in VALID_PROPERTIES.items():
            with self.subTest(element_type=element_type):
                self.assertTrue(validate_element(_raw(element_type, props)))

    def test_rejects_missing_required_numeric_field(self) -> None:
        for element_type, props in VALID_PROPERTIES.items():
            for key in props:
                if key == "shape":
                    continue
                broken = {k: v for k, v in props.items() if k != key}
                with self.subTest(element_type=element_type, missing=key):
                    self.assertFalse(validate_element(_raw(element_type, broken)))

    def test_rejects_wrong_types(self) -> None:
        self.assertFalse(validate_element(_raw("surface", {"width": "5", "depth": 5})))
        self.assertFalse(validate_element(_raw("tree", {"height": True})))

    def test_rejects_missing_identity_or_position(self) -> None:
        raw = _raw("tree", {"height": 5})
        del raw["id"]
        self.assertFalse(validate_element(raw))

        raw = _raw("tree", {"height": 5})
        raw["position"] = None
        self.assertFalse(validate_element(raw))

    def test_never_raises_on_garbage(self) -> None:
        self.assertFalse(validate_element(None))
        self.assertFalse(validate_element("tree"))
        self.assertFalse(validate_element({"id": "x", "name": "n", "type": "tree", "position": [1, 2]}))

    def test_accepts_element_instances(self) -> None:
        self.assertTrue(validate_element(create_element("house")))

    def test_is_number_excludes_bool(self) -> None:
        self.assertTrue(is_number(1))
        self.assertTrue(is_number(1.5))
        self.assertFalse(is_number(True))
        self.assertFalse(is_number("1"))


class SerializationTests(unittest.TestCase):
    def test_round_trip_preserves_everything(self) -> None:
        element = create_element(
            "tree",
            {"height": 7, "species": "Maple", "fruit": True},
            name="Maple Tree",
            position=Vector3(1.5, 0.0, -2.0),
            rotation=45.0,
        )
        restored = GardenElement.from_dict(element.to_dict())

        self.assertEqual(restored.id, element.id)
        self.assertEqual(restored.type, element.type)
        self.assertEqual(restored.name, element.name)
        self.assertEqual(restored.position, element.position)
        self.assertEqual(restored.rotation, element.rotation)
        self.assertEqual(restored.properties, element.properties)

    def test_to_dict_does_not_share_properties(self) -> None:
        element = create_element("surface")
        data = element.to_dict()
        data["properties"]["width"] = 42
        self.assertEqual(element.properties["width"], 5)

    def test_element_from_dict_merges_defaults(self) -> None:
        element = element_from_dict(_raw("surface", {"width": 2}))
        self.assertEqual(element.properties["width"], 2)
        self.assertEqual(element.properties["material"], "grass")
        self.assertEqual(element.id, "e1")

    def test_from_dict_assigns_id_when_missing(self) -> None:
        raw = _raw("note", {})
        del raw["id"]
        self.assertTrue(GardenElement.from_dict(raw).id)


if __name__ == "__main__":
    unittest.main()
