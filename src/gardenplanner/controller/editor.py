"""
Editor Controller
=================
The single owner of the editor session. It wires the state, the history, the
scene adapter, the placement pipeline and the storage together, and exposes
Qt signals for the panels and the main window.

Why is this file needed?
------------------------
Components never reach into each other: the history reports restored
snapshots through a listener, the view reports pointer events through
signals, and this controller applies the mutation and then registers it.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from PySide6.QtCore import QObject, Signal

from gardenplanner.config import GRID_SIZE
from gardenplanner.controller.placement import PlacementPipeline, PlacementSession
from gardenplanner.model.elements import GardenElement, PropertyValue, generate_id
from gardenplanner.model.history import HistoryManager, HistorySnapshot
from gardenplanner.model.io import IOManager
from gardenplanner.model.state import EditorState, ViewMode
from gardenplanner.model.storage import Garden, GardenStorage
from gardenplanner.view.scene import SceneAdapter

logger = logging.getLogger(__name__)


class EditorController(QObject):
    """Central controller with signals for panel/view sync."""
    elements_changed = Signal()
    selection_changed = Signal(object)       # GardenElement | None
    history_changed = Signal(bool, bool)     # can_undo, can_redo
    garden_changed = Signal(object)          # Garden | None
    dirty_changed = Signal(bool)
    view_mode_changed = Signal(str)

    def __init__(
        self,
        state: EditorState,
        scene: SceneAdapter,
        storage: GardenStorage,
        grid_size: float = GRID_SIZE,
    ) -> None:
        super().__init__()
        self.state = state
        self.scene = scene
        self.storage = storage
        self.grid_size = grid_size

        self.history = HistoryManager(state)
        self.history.add_listener(self._on_history_event)
        self.placement = PlacementPipeline(scene, state, grid_size=grid_size)

        self.session: Optional[PlacementSession] = None

    # ------------------------------------------------------------------------------
    # Element mutations
    # ------------------------------------------------------------------------------

    def add_element(self, element: GardenElement) -> GardenElement:
        self.state.elements.append(element)
        self.scene.add_element(element)
        self.history.register_change()
        self.elements_changed.emit()
        return element

    def drop_template(self, template_id: str, screen_x: float, screen_y: float) -> Optional[GardenElement]:
        """Handle a catalog drop. Returns the new element, or None for a no-op drop."""
        element = self.placement.drop(template_id, screen_x, screen_y)
        if element is None:
            return None
        return self.add_element(element)

    def remove_element(self, element_id: str) -> bool:
        was_selected = self.state.selected_element_id == element_id
        removed = self.state.remove_element(element_id)
        if removed is None:
            return False

        if self.session is not None and self.session.element_id == element_id:
            self.session = None
        self.scene.remove_element(element_id)
        self.history.register_change()
        self.elements_changed.emit()
        if was_selected:
            self.selection_changed.emit(None)
        return True

    def remove_selected(self) -> bool:
        if self.state.selected_element_id is None:
            return False
        return self.remove_element(self.state.selected_element_id)

    def update_property(self, element_id: str, key: str, value: PropertyValue) -> bool:
        element = self.state.find_element(element_id)
        if element is None:
            return False
        if element.properties.get(key) == value and key in element.properties:
            return False

        element.properties[key] = value
        self.scene.update_element_visual(element)
        self.history.register_change()
        self.elements_changed.emit()
        return True

    def set_rotation(self, element_id: str, degrees: float) -> bool:
        element = self.state.find_element(element_id)
        if element is None or element.rotation == degrees:
            return False

        element.rotation = float(degrees)
        self.scene.move_element_visual(element)
        self.history.register_change()
        self.elements_changed.emit()
        return True

    def rename_element(self, element_id: str, name: str) -> bool:
        element = self.state.find_element(element_id)
        if element is None or not name or element.name == name:
            return False

        element.name = name
        self.history.register_change()
        self.elements_changed.emit()
        return True

    # ------------------------------------------------------------------------------
    # Selection & drag
    # ------------------------------------------------------------------------------

    def select(self, element_id: Optional[str]) -> None:
        if element_id is not None and self.state.find_element(element_id) is None:
            element_id = None
        if element_id == self.state.selected_element_id:
            return
        self.state.selected_element_id = element_id
        self.selection_changed.emit(self.state.selected_element)

    def pointer_down(self, screen_x: float, screen_y: float) -> bool:
        """
        Select the nearest element under the pointer and start a drag session.
        Returns True if an element was hit.
        """
        element_id = self.scene.pick(screen_x, screen_y)
        if element_id is None:
            self.session = None
            self.select(None)
            return False

        self.session = PlacementSession(element_id=element_id)
        self.select(element_id)
        return True

    def pointer_move(self, screen_x: float, screen_y: float) -> bool:
        """Drag the session's element to the ground point under the pointer."""
        if self.session is None:
            return False

        element = self.state.find_element(self.session.element_id)
        if element is None:
            self.session = None
            return False

        point = self.scene.ground_point(
            screen_x, screen_y,
            snap=self.state.snap_to_grid,
            grid_size=self.grid_size,
        )
        if point is None:
            return False

        element.position.x = float(point[0])
        element.position.y = 0.0
        element.position.z = float(point[2])
        self.scene.move_element_visual(element)
        self.session.moved = True
        return True

    def pointer_up(self) -> bool:
        """End the drag. One history step per gesture that moved the element."""
        session, self.session = self.session, None
        if session is None or not session.moved:
            return False

        self.history.register_change()
        self.elements_changed.emit()
        return True

    # ------------------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------------------

    def undo(self) -> bool:
        return self.history.undo()

    def redo(self) -> bool:
        return self.history.redo()

    def has_unsaved_changes(self) -> bool:
        return self.history.has_unsaved_changes()

    def _on_history_event(self, snapshot: Optional[HistorySnapshot]) -> None:
        if snapshot is not None:
            # undo/redo replaced the element list
            self.session = None
            self.scene.render_garden(self.state.elements)
            self.elements_changed.emit()
            self.selection_changed.emit(self.state.selected_element)
            self.garden_changed.emit(self.state.current_garden)
        self.history_changed.emit(self.history.can_undo(), self.history.can_redo())
        self.dirty_changed.emit(self.history.has_unsaved_changes())

    # ------------------------------------------------------------------------------
    # Gardens
    # ------------------------------------------------------------------------------

    def _replace_elements(self, elements: List[GardenElement], garden: Optional[Garden]) -> None:
        self.session = None
        self.state.elements = elements
        self.state.current_garden = garden
        self.state.selected_element_id = None
        self.scene.render_garden(self.state.elements)
        self.elements_changed.emit()
        self.selection_changed.emit(None)
        self.garden_changed.emit(garden)

    def new_garden(self) -> None:
        """Discard the current garden. Confirmation is the caller's job."""
        self._replace_elements([], None)
        self.history.clear_history()
        logger.info("Started a new garden.")

    def load_garden(self, garden_id: str) -> Garden:
        garden = self.storage.load(garden_id)
        self._load(garden)
        return garden

    def _load(self, garden: Garden) -> None:
        self._replace_elements(
            [GardenElement.from_dict(e.to_dict()) for e in garden.elements],
            garden,
        )
        self.history.clear_history()
        self.history.mark_saved()

    def save_garden(self, name: str, description: str = "") -> Garden:
        garden = self.storage.save(self.state.elements, name, description)
        self.history.rebind_garden(self.state.current_garden, garden)
        self.state.current_garden = garden
        self.history.mark_saved()
        self.garden_changed.emit(garden)
        return garden

    def quick_save(self) -> Optional[Garden]:
        """Save under the current garden's name; None if the garden was never saved."""
        current = self.state.current_garden
        if current is None:
            return None
        return self.save_garden(current.name, current.description)

    def delete_current_garden(self) -> bool:
        """Delete the loaded garden from storage and clear the editor."""
        current = self.state.current_garden
        if current is None:
            return False
        self.storage.delete(current.id)
        self.new_garden()
        return True

    def list_gardens(self) -> List[Garden]:
        return self.storage.list_gardens()

    def load_template(self, name: str) -> None:
        """Replace the garden with a starter layout; the result is unsaved."""
        elements = IOManager.load_garden_template(name)
        self._replace_elements(elements, None)
        self.history.register_change()

    def export_current(self, destination: str) -> str:
        garden = self.state.current_garden
        if garden is None:
            garden = Garden(id=generate_id(), name="Untitled")
        garden = Garden(
            id=garden.id,
            name=garden.name,
            description=garden.description,
            elements=list(self.state.elements),
            last_modified=garden.last_modified,
        )
        return IOManager.export_garden(garden, destination)

    def import_file(self, filepath: str) -> Garden:
        garden = IOManager.import_garden(filepath, self.storage)
        self._load(garden)
        return garden

    def share_link(self) -> Optional[str]:
        if self.state.current_garden is None:
            return None
        return GardenStorage.build_share_link(self.state.current_garden)

    def open_shared(self, link: str) -> Optional[Garden]:
        garden = self.storage.load_shared(link)
        if garden is not None:
            self._load(garden)
        return garden

    # ------------------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------------------

    def set_view_mode(self, mode: ViewMode | str) -> None:
        if self.scene.set_view_mode(mode):
            self.state.current_view = ViewMode(mode)
            self.view_mode_changed.emit(str(self.state.current_view))

    def zoom(self, delta: float) -> None:
        self.scene.zoom(delta)

    def set_grid_visible(self, visible: bool) -> None:
        self.state.grid_visible = visible
        self.scene.set_grid_visible(visible)

    def set_snap_to_grid(self, enabled: bool) -> None:
        self.state.snap_to_grid = enabled

    def set_category(self, category: str) -> None:
        self.state.current_category = category

    def render_all(self) -> None:
        self.scene.render_garden(self.state.elements)
