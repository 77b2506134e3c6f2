"""
Input/Output Manager (JSON)
Handles exporting gardens to JSON files, importing them back into storage and
reading the packaged starter gardens.
"""
import json
import logging
import os
import re
from typing import Any, Dict, List

import pyvista as pv

from gardenplanner.config import TEMPLATES_PATH
from gardenplanner.model.elements import GardenElement, element_from_dict, generate_id, is_number, validate_element
from gardenplanner.model.storage import Garden, GardenStorage, GardenStorageError, GardenValidationError

# Get module logger
logger = logging.getLogger(__name__)


class IOManager:

    @staticmethod
    def export_filename(garden: Garden) -> str:
        """File name for a downloaded garden, whitespace runs replaced by '_'."""
        stem = re.sub(r"\s+", "_", garden.name)
        return f"{stem}_garden.json"

    @staticmethod
    def export_garden(garden: Garden, destination: str) -> str:
        """
        Write the full garden as formatted JSON.

        Args:
            garden: Garden to export.
            destination: A directory (the file name is derived from the garden
                name) or a full file path.

        Returns:
            The path of the written file.
        """
        filepath = destination
        if os.path.isdir(destination):
            filepath = os.path.join(destination, IOManager.export_filename(garden))

        logger.info(f"Exporting garden '{garden.name}' to: {filepath}")
        try:
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(garden.to_dict(), f, indent=2)
        except OSError as e:
            logger.exception(f"Failed to export garden: {e}")
            raise GardenStorageError(f"Failed to export garden: {e}") from e

        return filepath

    @staticmethod
    def read_garden_file(filepath: str) -> Dict[str, Any]:
        """Parse and shape-check a garden JSON file."""
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                text = f.read()
        except OSError as e:
            logger.exception(f"Failed to read file '{filepath}': {e}")
            raise GardenStorageError("Failed to read file") from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"File '{filepath}' is not valid JSON: {e}")
            raise GardenValidationError("Invalid JSON file") from e

        if not isinstance(data, dict) or not data.get("name") or not isinstance(data.get("elements"), list):
            logger.error(f"File '{filepath}' is not a garden file.")
            raise GardenValidationError("Invalid garden file format")

        return data

    @staticmethod
    def is_well_formed(raw: Any) -> bool:
        """
        Structural check for one element record. Unlike `validate_element`,
        a failure here means the element cannot be placed in the scene at all.
        """
        if not isinstance(raw, dict):
            return False
        position = raw.get("position")
        if position is not None:
            if not isinstance(position, dict):
                return False
            if any(axis in position and not is_number(position[axis]) for axis in ("x", "y", "z")):
                return False
        rotation = raw.get("rotation")
        if rotation is not None and not is_number(rotation):
            return False
        properties = raw.get("properties")
        return properties is None or isinstance(properties, dict)

    @staticmethod
    def import_garden(filepath: str, storage: GardenStorage) -> Garden:
        """
        Import a garden file and save it under its name.
        Any id in the file is ignored; storage assigns id and timestamp.
        """
        logger.info(f"Importing garden from: {filepath}")
        data = IOManager.read_garden_file(filepath)

        elements: List[GardenElement] = []
        for raw in data["elements"]:
            if not IOManager.is_well_formed(raw):
                logger.error(f"File '{filepath}' contains a malformed element: {raw!r}")
                raise GardenValidationError("Invalid garden file format")
            if not validate_element(raw):
                logger.warning(f"Imported element failed validation: {raw.get('id')} ({raw.get('type')})")
            elements.append(element_from_dict(raw))

        garden = storage.save(elements, data["name"], data.get("description") or "")
        logger.info(f"Imported garden '{garden.name}' with {len(elements)} elements.")
        return garden

    # ---- starter gardens ----

    @staticmethod
    def list_garden_templates(directory: str = TEMPLATES_PATH) -> List[str]:
        """Names of the packaged starter gardens (file stems), sorted."""
        if not os.path.isdir(directory):
            logger.warning(f"Templates directory not found: {directory}")
            return []
        return sorted(
            os.path.splitext(name)[0]
            for name in os.listdir(directory)
            if name.endswith(".json")
        )

    @staticmethod
    def load_garden_template(name: str, directory: str = TEMPLATES_PATH) -> List[GardenElement]:
        """
        Read a starter garden. Elements are built through the factory and get
        fresh ids so that a template can be loaded more than once.
        """
        filepath = os.path.join(directory, f"{name}.json")
        data = IOManager.read_garden_file(filepath)

        elements = []
        for raw in data["elements"]:
            element = element_from_dict(raw)
            element.id = generate_id()
            elements.append(element)

        logger.info(f"Loaded template '{name}' with {len(elements)} elements.")
        return elements

    # ---- screenshots ----

    @staticmethod
    def save_screenshot(plotter: pv.Plotter, filepath: str) -> str:
        """Save the current view as a PNG image."""
        if not filepath.lower().endswith(".png"):
            filepath += ".png"
        try:
            plotter.screenshot(filepath)
            logger.info(f"Screenshot saved to: {filepath}")
        except Exception as e:
            logger.exception("Failed to create garden screenshot")
            raise GardenStorageError(f"Failed to create screenshot: {e}") from e
        return filepath
