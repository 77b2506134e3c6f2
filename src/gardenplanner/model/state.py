"""
Editor State (Data Model)
=========================
This module defines the central data structure for the running editor.

Why is this file needed?
------------------------
1. State Management: It holds the current garden's element list, the loaded
   garden record, the view mode, the selection and the grid flags in one place.
2. Ownership: The element list is owned here. The scene keeps non-owning
   render handles and the history keeps copies.
3. Decoupling: One instance is created at start-up and passed to every
   controller and view that needs it.

Classes:
    ViewMode: The two camera modes.
    EditorState: The main container class.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import List, Optional, TYPE_CHECKING

from gardenplanner.model.elements import GardenElement

if TYPE_CHECKING:
    from gardenplanner.model.storage import Garden

logger = logging.getLogger(__name__)


class ViewMode(StrEnum):
    TOP_DOWN = "2d"
    PERSPECTIVE = "3d"


@dataclass
class EditorState:
    """
    Holds the entire state of the open editor session.
    Pass this instance to your Controllers and Views.
    """
    elements: List[GardenElement] = field(default_factory=list)
    current_garden: Optional[Garden] = None

    current_category: str = "garden-plan"
    current_view: ViewMode = ViewMode.TOP_DOWN
    selected_element_id: Optional[str] = None

    grid_visible: bool = True
    snap_to_grid: bool = True

    def find_element(self, element_id: Optional[str]) -> Optional[GardenElement]:
        if element_id is None:
            return None
        for element in self.elements:
            if element.id == element_id:
                return element
        return None

    @property
    def selected_element(self) -> Optional[GardenElement]:
        return self.find_element(self.selected_element_id)

    def remove_element(self, element_id: str) -> Optional[GardenElement]:
        """Remove and return the element, or None if absent."""
        for index, element in enumerate(self.elements):
            if element.id == element_id:
                if self.selected_element_id == element_id:
                    self.selected_element_id = None
                return self.elements.pop(index)
        return None

    def reset(self) -> None:
        """Clear the garden for a new drawing. View and grid flags are kept."""
        self.elements = []
        self.current_garden = None
        self.selected_element_id = None
        logger.info("Editor state has been reset.")
