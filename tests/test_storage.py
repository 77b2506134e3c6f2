from __future__ import annotations

import json
import os
import tempfile
import unittest

from PySide6.QtCore import QSettings

from gardenplanner.model.elements import create_element
from gardenplanner.model.storage import (
    Garden,
    GardenNotFoundError,
    GardenStorage,
    GardenStorageError,
    InMemoryStore,
    SettingsStore,
)


class GardenStorageTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryStore()
        self.storage = GardenStorage(self.store)

    def test_save_by_name_upserts(self) -> None:
        first = self.storage.save([create_element("tree")], "Backyard")
        second = self.storage.save([create_element("pond"), create_element("bush")], "Backyard")

        gardens = self.storage.list_gardens()
        self.assertEqual([g.name for g in gardens], ["Backyard"])
        self.assertEqual(second.id, first.id)
        self.assertEqual([e.type for e in gardens[0].elements], ["pond", "bush"])

    def test_names_are_case_sensitive(self) -> None:
        self.storage.save([], "Backyard")
        self.storage.save([], "backyard")
        self.assertEqual(len(self.storage.list_gardens()), 2)

    def test_upsert_keeps_list_position(self) -> None:
        self.storage.save([], "A")
        self.storage.save([], "B")
        self.storage.save([create_element("tree")], "A")
        self.assertEqual([g.name for g in self.storage.list_gardens()], ["A", "B"])

    def test_saved_elements_are_copies(self) -> None:
        element = create_element("tree")
        garden = self.storage.save([element], "Copy")
        element.properties["height"] = 42
        loaded = self.storage.load(garden.id)
        self.assertEqual(loaded.elements[0].properties["height"], 5)

    def test_load_unknown_raises(self) -> None:
        with self.assertRaises(GardenNotFoundError):
            self.storage.load("missing")
        with self.assertRaises(LookupError):
            self.storage.load("missing")

    def test_delete_is_idempotent(self) -> None:
        garden = self.storage.save([], "Gone")
        self.storage.delete(garden.id)
        self.storage.delete(garden.id)
        self.assertEqual(self.storage.list_gardens(), [])

    def test_timestamp_format(self) -> None:
        garden = self.storage.save([], "Stamp")
        self.assertTrue(garden.last_modified.endswith("Z"))
        self.assertIn("T", garden.last_modified)

    def test_corrupted_store(self) -> None:
        self.store.set("gardens", "{not json")
        self.assertEqual(self.storage.list_gardens(), [])
        with self.assertRaises(GardenStorageError):
            self.storage.save([], "Anything")

    def test_record_uses_last_modified_key(self) -> None:
        self.storage.save([], "Keys")
        record = json.loads(self.store.get("gardens"))[0]
        self.assertEqual(set(record), {"id", "name", "description", "elements", "lastModified"})


class ShareLinkTests(unittest.TestCase):
    def setUp(self) -> None:
        self.storage = GardenStorage(InMemoryStore())

    def test_round_trip_resolves_locally(self) -> None:
        garden = self.storage.save([create_element("flower")], "Shared & Co")
        link = GardenStorage.build_share_link(garden)

        resolved = self.storage.load_shared(link)
        self.assertIsNotNone(resolved)
        self.assertEqual(resolved.id, garden.id)
        self.assertEqual(len(resolved.elements), 1)

    def test_link_only_carries_metadata(self) -> None:
        garden = self.storage.save([create_element("flower")], "Meta")
        link = GardenStorage.build_share_link(garden, base_url="https://example.test/")
        self.assertTrue(link.startswith("https://example.test/?garden="))
        self.assertNotIn("flower", link)

    def test_unknown_or_malformed_links(self) -> None:
        other = Garden(id="elsewhere", name="Remote")
        self.assertIsNone(self.storage.load_shared(GardenStorage.build_share_link(other)))
        self.assertIsNone(self.storage.load_shared("gardenplanner://open?garden=%7Bbroken"))
        self.assertIsNone(self.storage.load_shared("gardenplanner://open"))


class SettingsStoreTests(unittest.TestCase):
    def test_round_trip_through_ini_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "gardens.ini")
            storage = GardenStorage(SettingsStore(QSettings(path, QSettings.Format.IniFormat)))
            garden = storage.save([create_element("house")], "Persisted")

            reopened = GardenStorage(SettingsStore(QSettings(path, QSettings.Format.IniFormat)))
            loaded = reopened.load(garden.id)
            self.assertEqual(loaded.name, "Persisted")
            self.assertEqual(loaded.elements[0].type, "house")


if __name__ == "__main__":
    unittest.main()
