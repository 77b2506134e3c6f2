"""
Element Geometry
Builds the PyVista mesh and picks the colour for each element type.

Meshes are built in local coordinates: centred on the origin, Y up, with a
vertical extent equal to `element_height`. The scene places them so the base
rests on the ground.
"""
from __future__ import annotations

import logging
from typing import Any

import pyvista as pv
from vtkmodules.vtkFiltersCore import vtkAppendPolyData

from gardenplanner.model.elements import ElementType, GardenElement, PLANT_TYPES, WATER_TYPES, is_number
from gardenplanner.view.scene import element_height

logger = logging.getLogger(__name__)

UP = (0.0, 1.0, 0.0)

MATERIAL_COLORS = {
    "grass": "#3c8f3c",
    "concrete": "#cccccc",
    "brick": "#b35c44",
    "wood": "#8b4513",
    "gravel": "#a0a0a0",
    "soil": "#594833",
}
DEFAULT_COLOR = "#808080"
PLANT_COLOR = "#2d5a27"
WATER_COLOR = "#3a8fd6"
NOTE_COLOR = "#fff59d"
HIGHLIGHT_COLOR = "#ff9800"


def _number(element: GardenElement, key: str, default: float) -> float:
    value = element.properties.get(key)
    if is_number(value) and value > 0:
        return float(value)
    return default


def _box(width: float, height: float, depth: float) -> pv.PolyData:
    return pv.Box(bounds=(-width / 2, width / 2, -height / 2, height / 2, -depth / 2, depth / 2))


def _cylinder(radius: float, height: float, center_y: float = 0.0) -> pv.PolyData:
    return pv.Cylinder(center=(0.0, center_y, 0.0), direction=UP, radius=radius, height=height, resolution=24)


def _combine(*parts: pv.PolyData) -> pv.PolyData:
    """Append several polydata into one mesh."""
    append = vtkAppendPolyData()
    for part in parts:
        append.AddInputData(part.triangulate())
    append.Update()
    return pv.wrap(append.GetOutput())


def material_color(material: Any) -> str:
    return MATERIAL_COLORS.get(material, DEFAULT_COLOR) if isinstance(material, str) else DEFAULT_COLOR


def safe_color(value: Any, fallback: str) -> str:
    """Use a user-supplied colour only if PyVista understands it."""
    if not isinstance(value, str) or not value:
        return fallback
    try:
        pv.Color(value)
    except ValueError:
        logger.debug(f"Unknown colour '{value}', using {fallback}.")
        return fallback
    return value


def element_color(element: GardenElement) -> str:
    props = element.properties
    match element.type:
        case ElementType.SURFACE | ElementType.PATH:
            return material_color(props.get("material"))
        case t if t in PLANT_TYPES or t in ("hedge", "grass"):
            return PLANT_COLOR
        case t if t in WATER_TYPES:
            return WATER_COLOR
        case ElementType.HOUSE:
            return safe_color(props.get("color"), "#e5e5e5")
        case ElementType.FURNITURE:
            return safe_color(props.get("color"), "#CD853F")
        case ElementType.NOTE:
            return NOTE_COLOR
        case _:
            if "material" in props:
                return material_color(props.get("material"))
            return safe_color(props.get("color"), DEFAULT_COLOR)


def build_element_mesh(element: GardenElement) -> pv.PolyData:
    """Geometry for an element, dispatched on its type tag."""
    h = element_height(element)

    match element.type:
        case ElementType.SURFACE:
            return _box(_number(element, "width", 1.0), h, _number(element, "depth", 1.0))

        case ElementType.PATH:
            return _box(_number(element, "width", 0.8), h, _number(element, "length", 3.0))

        case ElementType.TREE:
            canopy_radius = min(_number(element, "canopy", 3.0) / 2.0, h / 2.0)
            trunk_height = h - canopy_radius
            trunk = _cylinder(
                radius=max(0.1, canopy_radius / 5.0),
                height=trunk_height,
                center_y=-h / 2.0 + trunk_height / 2.0,
            )
            canopy = pv.Sphere(radius=canopy_radius, direction=UP, center=(0.0, h / 2.0 - canopy_radius, 0.0))
            return _combine(trunk, canopy)

        case ElementType.BUSH | ElementType.FLOWER:
            return _cylinder(radius=_number(element, "width", 0.6) / 2.0, height=h)

        case t if t in WATER_TYPES:
            if element.properties.get("shape", "circular") == "circular" or (
                "radius" in element.properties and "width" not in element.properties
            ):
                return _cylinder(radius=_number(element, "radius", 1.5), height=h)
            return _box(_number(element, "width", 3.0), h, _number(element, "length", 3.0))

        case ElementType.NOTE:
            return _box(0.6, h, 0.4)

        case _:
            if is_number(element.properties.get("radius")):
                return _cylinder(radius=_number(element, "radius", 0.5), height=h)
            depth = _number(element, "depth", _number(element, "length", 1.0))
            return _box(_number(element, "width", 1.0), h, depth)
