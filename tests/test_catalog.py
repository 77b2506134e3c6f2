from __future__ import annotations

import unittest

from gardenplanner.model.catalog import (
    CATALOG,
    get_element_by_id,
    get_elements_by_category,
    list_categories,
    search_elements,
)


class CatalogTests(unittest.TestCase):
    def test_categories_in_catalog_order(self) -> None:
        self.assertEqual(
            list_categories(),
            ["garden-plan", "plot", "houses", "plants", "furniture", "ponds", "notes"],
        )

    def test_unknown_category_is_empty_list(self) -> None:
        self.assertEqual(get_elements_by_category("nonexistent"), [])

    def test_category_lookup_returns_a_copy(self) -> None:
        plants = get_elements_by_category("plants")
        plants.clear()
        self.assertTrue(get_elements_by_category("plants"))

    def test_template_ids_are_unique(self) -> None:
        ids = [t.id for templates in CATALOG.values() for t in templates]
        self.assertEqual(len(ids), len(set(ids)))

    def test_get_element_by_id(self) -> None:
        template = get_element_by_id("rose-bush")
        self.assertIsNotNone(template)
        self.assertEqual(template.type, "bush")
        self.assertIsNone(get_element_by_id("no-such-template"))

    def test_templates_are_read_only(self) -> None:
        template = get_element_by_id("oak-tree")
        with self.assertRaises(TypeError):
            template.properties["height"] = 1

    def test_search_is_case_insensitive_and_returns_rose_bush_once(self) -> None:
        results = search_elements("ROSE")
        ids = [t.id for t in results]
        self.assertEqual(ids.count("rose-bush"), 1)

    def test_search_matches_species(self) -> None:
        ids = [t.id for t in search_elements("boxwood")]
        self.assertEqual(ids, ["hedge"])

    def test_search_without_match(self) -> None:
        self.assertEqual(search_elements("cactus"), [])


if __name__ == "__main__":
    unittest.main()
