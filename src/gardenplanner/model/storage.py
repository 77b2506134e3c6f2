"""
Garden Storage
==============
Saves, loads and deletes named gardens in a local persistent key-value store.

All gardens live as one JSON-encoded list under a single key (`gardens`).
The default store is Qt's per-user QSettings; any object with `get`/`set`
can be used instead.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol
from urllib.parse import parse_qs, quote, urlsplit

from PySide6.QtCore import QSettings

from gardenplanner.config import SETTINGS_APPLICATION, SETTINGS_ORGANIZATION, SHARE_BASE_URL, STORAGE_KEY
from gardenplanner.model.elements import GardenElement, generate_id

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------
# Errors
# ------------------------------------------------------------------------------

class GardenStorageError(Exception):
    """Storage or file access failed."""


class GardenNotFoundError(GardenStorageError, LookupError):
    """No garden matches the requested id."""


class GardenValidationError(GardenStorageError, ValueError):
    """Imported data does not describe a garden."""


# ------------------------------------------------------------------------------
# Key-value stores
# ------------------------------------------------------------------------------

class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class SettingsStore:
    """QSettings-backed store (per-user, persistent across sessions)."""

    def __init__(self, settings: Optional[QSettings] = None) -> None:
        self._settings = settings if settings is not None else QSettings(
            SETTINGS_ORGANIZATION, SETTINGS_APPLICATION
        )

    def get(self, key: str) -> Optional[str]:
        value = self._settings.value(key)
        if value is None:
            return None
        return str(value)

    def set(self, key: str, value: str) -> None:
        self._settings.setValue(key, value)
        self._settings.sync()
        if self._settings.status() != QSettings.Status.NoError:
            raise GardenStorageError(f"Could not write '{key}' to {self._settings.fileName()}")


class InMemoryStore:
    """Non-persistent store, used for tests and throw-away sessions."""

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


# ------------------------------------------------------------------------------
# Garden record
# ------------------------------------------------------------------------------

def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class Garden:
    id: str
    name: str
    description: str = ""
    elements: List[GardenElement] = field(default_factory=list)
    last_modified: str = field(default_factory=now_iso)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "elements": [e.to_dict() for e in self.elements],
            "lastModified": self.last_modified,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Garden:
        return Garden(
            id=str(data["id"]),
            name=data["name"],
            description=data.get("description") or "",
            elements=[GardenElement.from_dict(e) for e in data.get("elements", [])],
            last_modified=data.get("lastModified") or now_iso(),
        )


# ------------------------------------------------------------------------------
# Storage
# ------------------------------------------------------------------------------

class GardenStorage:
    def __init__(self, store: Optional[KeyValueStore] = None, key: str = STORAGE_KEY) -> None:
        self.store: KeyValueStore = store if store is not None else SettingsStore()
        self.key = key

    # ---- raw list access ----

    def _read_records(self) -> List[Dict[str, Any]]:
        raw = self.store.get(self.key)
        if not raw:
            return []
        try:
            records = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.exception(f"Stored gardens are not valid JSON: {e}")
            raise GardenStorageError("Stored gardens are corrupted.") from e
        if not isinstance(records, list):
            raise GardenStorageError("Stored gardens are corrupted.")
        return records

    def _write_records(self, records: List[Dict[str, Any]]) -> None:
        try:
            self.store.set(self.key, json.dumps(records))
        except GardenStorageError:
            raise
        except Exception as e:
            logger.exception(f"Failed to write gardens: {e}")
            raise GardenStorageError(f"Failed to write gardens: {e}") from e

    # ---- public API ----

    def list_gardens(self) -> List[Garden]:
        """All saved gardens in storage order. A corrupt store reads as empty."""
        try:
            return [Garden.from_dict(record) for record in self._read_records()]
        except (GardenStorageError, KeyError, TypeError) as e:
            logger.error(f"Error getting all gardens: {e}")
            return []

    def save(self, elements: List[GardenElement], name: str, description: str = "") -> Garden:
        """
        Upsert by exact (case-sensitive) name. An existing entry keeps its id
        and its position in the list; `lastModified` is always refreshed.
        """
        records = self._read_records()
        existing_index = next(
            (i for i, record in enumerate(records) if record.get("name") == name),
            None
        )

        garden = Garden(
            id=records[existing_index]["id"] if existing_index is not None else generate_id(),
            name=name,
            description=description,
            elements=[GardenElement.from_dict(e.to_dict()) for e in elements],
            last_modified=now_iso(),
        )

        if existing_index is not None:
            records[existing_index] = garden.to_dict()
            logger.info(f"Updated garden '{name}' ({garden.id}).")
        else:
            records.append(garden.to_dict())
            logger.info(f"Saved new garden '{name}' ({garden.id}).")

        self._write_records(records)
        return garden

    def load(self, garden_id: str) -> Garden:
        for record in self._read_records():
            if record.get("id") == garden_id:
                logger.info(f"Loaded garden '{record.get('name')}' ({garden_id}).")
                return Garden.from_dict(record)
        raise GardenNotFoundError(f"Garden with ID {garden_id} not found")

    def find(self, garden_id: str) -> Optional[Garden]:
        try:
            return self.load(garden_id)
        except GardenNotFoundError:
            return None

    def delete(self, garden_id: str) -> None:
        """Remove a garden. Deleting an absent id is not an error."""
        records = self._read_records()
        remaining = [record for record in records if record.get("id") != garden_id]
        if len(remaining) == len(records):
            logger.debug(f"Delete: no garden with ID {garden_id}.")
        self._write_records(remaining)

    # ---- share links ----

    @staticmethod
    def build_share_link(garden: Garden, base_url: str = SHARE_BASE_URL) -> str:
        """
        Encode a link to the garden. Only id, name and lastModified are
        embedded, so the link only resolves where the garden is stored.
        """
        payload = json.dumps({
            "id": garden.id,
            "name": garden.name,
            "lastModified": garden.last_modified,
        })
        return f"{base_url}?garden={quote(payload, safe='')}"

    def load_shared(self, link: str) -> Optional[Garden]:
        """Resolve a share link against local storage; None if it cannot be."""
        try:
            params = parse_qs(urlsplit(link).query)
            values = params.get("garden")
            if not values:
                return None
            shared_info = json.loads(values[0])
            return self.find(str(shared_info["id"]))
        except (ValueError, KeyError, TypeError, GardenStorageError) as e:
            logger.error(f"Error loading shared garden: {e}")
            return None
