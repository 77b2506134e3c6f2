"""
Scene Adapter
=============
Keeps the visual representation of the garden in sync with the element list.

The adapter owns the element id -> render handle mapping and the camera
policy (view mode, zoom). Everything that touches the rendering library goes
through a RenderBackend, so the adapter never depends on how handles are
represented.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional, Protocol, TYPE_CHECKING

import numpy as np

from gardenplanner.config import GRID_SIZE, ZOOM_MAX, ZOOM_MIN, ZOOM_SPEED
from gardenplanner.model.elements import ElementType, GardenElement, is_number
from gardenplanner.model.geometry_utils import Ray, intersect_ground_plane, snap_point
from gardenplanner.model.state import ViewMode

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

FLAT_TYPES = (ElementType.SURFACE, ElementType.PATH, ElementType.POND, ElementType.POOL, ElementType.NOTE)
FLAT_HEIGHT = 0.1
DEFAULT_HEIGHT = 1.0


class RenderBackend(Protocol):
    """Operations the adapter needs from the rendering library."""

    def create_handle(self, element: GardenElement) -> Any:
        """Build geometry/material for the element and add it to the scene."""

    def place_handle(self, handle: Any, center: npt.NDArray[np.float64], rotation_deg: float) -> None:
        """Move the handle so its centre is at `center`, rotated about Y."""

    def dispose_handle(self, handle: Any) -> None: ...

    def screen_to_ray(self, screen_x: float, screen_y: float) -> Optional[Ray]:
        """Unproject a display position through the active camera."""

    def intersect(self, handle: Any, ray: Ray) -> Optional[float]:
        """Distance along the ray to the handle, or None on a miss."""

    def set_view_mode(self, mode: ViewMode) -> None:
        """Replace the camera and its interaction style."""

    def set_ortho_zoom(self, zoom: float) -> None: ...

    def dolly(self, distance: float) -> None:
        """Move the camera along its view direction."""

    def set_grid_visible(self, visible: bool) -> None: ...

    def request_render(self) -> None: ...


def element_height(element: GardenElement) -> float:
    height = element.properties.get("height")
    if is_number(height) and height > 0:
        return float(height)
    if element.type in FLAT_TYPES:
        return FLAT_HEIGHT
    return DEFAULT_HEIGHT


def handle_center(element: GardenElement) -> npt.NDArray[np.float64]:
    """World centre of the handle: base resting on the ground plane."""
    return np.array(
        [float(element.position.x), element_height(element) / 2.0, float(element.position.z)],
        dtype=np.float64,
    )


class SceneAdapter:
    def __init__(self, backend: RenderBackend) -> None:
        self.backend = backend
        self.handles: Dict[str, Any] = {}

        self.view_mode: ViewMode = ViewMode.TOP_DOWN
        self.zoom_level: float = 1.0

    # ------------------------------------------------------------------------------
    # Element visuals
    # ------------------------------------------------------------------------------

    def add_element(self, element: GardenElement) -> Any:
        if element.id in self.handles:
            self.remove_element(element.id)

        handle = self.backend.create_handle(element)
        self.backend.place_handle(handle, handle_center(element), float(element.rotation or 0.0))
        self.handles[element.id] = handle
        self.backend.request_render()
        logger.debug(f"Created visual for {element.type} '{element.name}' ({element.id}).")
        return handle

    def remove_element(self, element_id: str) -> bool:
        handle = self.handles.pop(element_id, None)
        if handle is None:
            return False
        self.backend.dispose_handle(handle)
        self.backend.request_render()
        return True

    def update_element_visual(self, element: GardenElement) -> None:
        """Rebuild geometry after a property edit and reapply the transform."""
        if element.id in self.handles:
            self.backend.dispose_handle(self.handles.pop(element.id))
        self.add_element(element)

    def move_element_visual(self, element: GardenElement) -> None:
        """Reposition an existing handle without rebuilding its geometry."""
        handle = self.handles.get(element.id)
        if handle is None:
            return
        self.backend.place_handle(handle, handle_center(element), float(element.rotation or 0.0))
        self.backend.request_render()

    def clear_scene(self) -> None:
        for handle in self.handles.values():
            self.backend.dispose_handle(handle)
        self.handles.clear()
        self.backend.request_render()

    def render_garden(self, elements: Iterable[GardenElement]) -> None:
        self.clear_scene()
        for element in elements:
            self.add_element(element)

    # ------------------------------------------------------------------------------
    # Pointer queries
    # ------------------------------------------------------------------------------

    def pick(self, screen_x: float, screen_y: float) -> Optional[str]:
        """Id of the nearest element under the pointer, or None."""
        ray = self.backend.screen_to_ray(screen_x, screen_y)
        if ray is None:
            return None

        best_id: Optional[str] = None
        best_distance = np.inf
        for element_id, handle in self.handles.items():
            distance = self.backend.intersect(handle, ray)
            if distance is not None and distance < best_distance:
                best_id, best_distance = element_id, distance
        return best_id

    def ground_point(
        self,
        screen_x: float,
        screen_y: float,
        snap: bool = False,
        grid_size: float = GRID_SIZE,
    ) -> Optional[npt.NDArray[np.float64]]:
        """World point on the ground plane under the pointer (optionally snapped)."""
        ray = self.backend.screen_to_ray(screen_x, screen_y)
        if ray is None:
            return None
        point = intersect_ground_plane(ray)
        if point is None:
            return None
        return snap_point(point, grid_size, enabled=snap)

    # ------------------------------------------------------------------------------
    # Camera
    # ------------------------------------------------------------------------------

    def set_view_mode(self, mode: ViewMode | str) -> bool:
        """Switch between top-down and perspective. Returns False if unchanged."""
        mode = ViewMode(mode)
        if mode == self.view_mode:
            return False
        self.view_mode = mode
        self.zoom_level = 1.0
        self.backend.set_view_mode(mode)
        self.backend.request_render()
        logger.info(f"Switched to {mode} view.")
        return True

    def zoom(self, delta: float) -> None:
        """
        2d: change the orthographic zoom by `delta`, clamped to [0.5, 3.0].
        3d: move the camera along its view direction by `delta * ZOOM_SPEED`.
        """
        if self.view_mode == ViewMode.TOP_DOWN:
            self.zoom_level = min(ZOOM_MAX, max(ZOOM_MIN, self.zoom_level + delta))
            self.backend.set_ortho_zoom(self.zoom_level)
        else:
            self.backend.dolly(delta * ZOOM_SPEED)
        self.backend.request_render()

    def set_grid_visible(self, visible: bool) -> None:
        self.backend.set_grid_visible(visible)
        self.backend.request_render()
