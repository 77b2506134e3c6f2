"""
Garden Elements (Data Model)
============================
Defines the structure of a placed garden element and the per-type defaults.

Why is this file needed?
------------------------
1. Single record: Every placed object (lawn, tree, pond, ...) is one
   GardenElement with a `type` tag. Type-specific behaviour lives in the
   default-property table below, not in subclasses.
2. Persistence: `to_dict`/`from_dict` define the structural form used by the
   undo history, local storage and JSON export.
3. Validation: `validate_element` is the advisory check run on imported data.
"""
from __future__ import annotations

import copy
import logging
import uuid
from dataclasses import dataclass, field
from enum import StrEnum
from numbers import Real
from typing import Any, Dict, Mapping, Optional, Union

logger = logging.getLogger(__name__)

PropertyValue = Union[float, int, str, bool]


class ElementType(StrEnum):
    SURFACE = "surface"
    PATH = "path"
    TREE = "tree"
    BUSH = "bush"
    FLOWER = "flower"
    HOUSE = "house"
    FURNITURE = "furniture"
    POND = "pond"
    POOL = "pool"
    FOUNTAIN = "fountain"
    NOTE = "note"


PLANT_TYPES = (ElementType.TREE, ElementType.BUSH, ElementType.FLOWER)
WATER_TYPES = (ElementType.POND, ElementType.POOL, ElementType.FOUNTAIN)


def generate_id() -> str:
    """Time-based unique identifier."""
    return uuid.uuid1().hex


@dataclass
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}

    @staticmethod
    def from_dict(data: Optional[Mapping[str, Any]]) -> Vector3:
        if not data:
            return Vector3()
        return Vector3(
            x=data.get("x", 0.0),
            y=data.get("y", 0.0),
            z=data.get("z", 0.0),
        )


@dataclass
class GardenElement:
    """
    A single object placed in the garden.

    `rotation` is stored in degrees about the vertical (Y) axis.
    """
    id: str
    name: str
    type: str
    position: Vector3 = field(default_factory=Vector3)
    rotation: float = 0.0
    properties: Dict[str, PropertyValue] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "position": self.position.to_dict(),
            "rotation": self.rotation,
            "properties": copy.deepcopy(self.properties),
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> GardenElement:
        """Lossless inverse of `to_dict` (no defaults are merged)."""
        return GardenElement(
            id=data.get("id") or generate_id(),
            name=data.get("name", ""),
            type=data.get("type", ""),
            position=Vector3.from_dict(data.get("position")),
            rotation=data.get("rotation", 0.0) or 0.0,
            properties=copy.deepcopy(dict(data.get("properties") or {})),
        )


# ------------------------------------------------------------------------------
# Defaults
# ------------------------------------------------------------------------------

_PLANT_BASE: Dict[str, PropertyValue] = {
    "height": 1,
    "width": 1,
    "species": "Unknown",
    "mature": False,
    "flowering": False,
}

_DEFAULTS: Dict[str, Dict[str, PropertyValue]] = {
    ElementType.SURFACE: {"width": 5, "depth": 5, "material": "grass"},
    ElementType.PATH: {"width": 0.8, "length": 3, "material": "gravel", "curved": False},
    ElementType.TREE: {**_PLANT_BASE, "height": 5, "canopy": 3},
    ElementType.BUSH: {**_PLANT_BASE, "height": 1.2, "width": 1.5},
    ElementType.FLOWER: {**_PLANT_BASE, "height": 0.3, "spacing": 0.2, "flowering": True},
    ElementType.HOUSE: {
        "width": 8,
        "depth": 6,
        "height": 3,
        "stories": 1,
        "roofType": "gable",
        "color": "#e5e5e5",
    },
    ElementType.FURNITURE: {
        "width": 1,
        "depth": 1,
        "height": 0.5,
        "material": "wood",
        "color": "#CD853F",
    },
    ElementType.NOTE: {"text": "Note", "fontSize": 14, "color": "black"},
}


def default_properties(
    element_type: str,
    overrides: Optional[Mapping[str, PropertyValue]] = None
) -> Dict[str, PropertyValue]:
    """
    Return a fresh copy of the default properties for a type tag.

    Water features depend on the effective shape: circular ones get a radius,
    all others a width and length. `overrides` is only consulted for that.
    Unknown tags have no defaults.
    """
    if element_type in WATER_TYPES:
        shape = (overrides or {}).get("shape", "circular")
        defaults: Dict[str, PropertyValue] = {"shape": "circular", "depth": 0.5}
        if shape == "circular":
            defaults["radius"] = 1.5
        else:
            defaults["width"] = 3
            defaults["length"] = 3
        return defaults

    return dict(_DEFAULTS.get(element_type, {}))


def create_element(
    element_type: str,
    properties: Optional[Mapping[str, PropertyValue]] = None,
    *,
    id: Optional[str] = None,
    name: Optional[str] = None,
    position: Optional[Vector3] = None,
    rotation: float = 0.0,
) -> GardenElement:
    """
    Factory: merge the type defaults with caller overrides (caller wins).
    Never fails for unknown types.
    """
    overrides = dict(properties or {})
    merged = default_properties(element_type, overrides)
    merged.update(overrides)

    return GardenElement(
        id=id or generate_id(),
        name=name if name is not None else str(element_type),
        type=str(element_type),
        position=position if position is not None else Vector3(),
        rotation=rotation,
        properties=merged,
    )


def element_from_dict(data: Mapping[str, Any]) -> GardenElement:
    """Factory counterpart of `GardenElement.from_dict` (defaults merged)."""
    return create_element(
        data.get("type", ""),
        data.get("properties") or {},
        id=data.get("id"),
        name=data.get("name"),
        position=Vector3.from_dict(data.get("position")),
        rotation=data.get("rotation", 0.0) or 0.0,
    )


# ------------------------------------------------------------------------------
# Validation
# ------------------------------------------------------------------------------

_REQUIRED_NUMERIC: Dict[str, tuple[str, ...]] = {
    ElementType.SURFACE: ("width", "depth"),
    ElementType.PATH: ("width", "length"),
    ElementType.TREE: ("height",),
    ElementType.BUSH: ("height",),
    ElementType.FLOWER: ("height",),
    ElementType.HOUSE: ("width", "depth", "height"),
    ElementType.FURNITURE: ("width", "depth"),
}


def is_number(value: Any) -> bool:
    """True for ints and floats; booleans are not numbers here."""
    return isinstance(value, Real) and not isinstance(value, bool)


def validate_element(element: Union[GardenElement, Mapping[str, Any]]) -> bool:
    """
    Advisory validation of an element (or its serialized form).
    Returns False instead of raising on any malformed input.
    """
    try:
        data = element.to_dict() if isinstance(element, GardenElement) else element
        if not isinstance(data, Mapping):
            return False

        if not data.get("id") or not data.get("type") or not data.get("name"):
            return False

        position = data.get("position")
        if not isinstance(position, Mapping):
            return False
        if not is_number(position.get("x")) or not is_number(position.get("z")):
            return False

        element_type = data["type"]
        props = data.get("properties")

        if element_type in _REQUIRED_NUMERIC:
            if not isinstance(props, Mapping):
                return False
            return all(is_number(props.get(key)) for key in _REQUIRED_NUMERIC[element_type])

        if element_type in (ElementType.POND, ElementType.POOL):
            if not isinstance(props, Mapping):
                return False
            if props.get("shape") == "circular":
                return is_number(props.get("radius"))
            return is_number(props.get("width")) and is_number(props.get("length"))

        return True
    except Exception as e:
        logger.debug(f"Element validation failed: {e}")
        return False
