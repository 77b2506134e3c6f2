"""
Placement Pipeline
Turns a catalog drop at a screen position into a new, grid-snapped element.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, TYPE_CHECKING

from gardenplanner.config import GRID_SIZE
from gardenplanner.model.catalog import ElementTemplate, get_element_by_id
from gardenplanner.model.elements import GardenElement, Vector3, generate_id
from gardenplanner.model.state import EditorState

if TYPE_CHECKING:
    from gardenplanner.view.scene import SceneAdapter

logger = logging.getLogger(__name__)

TemplateLookup = Callable[[str], Optional[ElementTemplate]]


@dataclass
class PlacementSession:
    """
    An in-progress drag of a placed element.
    History is registered once, on pointer-up, and only if the element moved.
    """
    element_id: str
    moved: bool = False


def element_from_template(template: ElementTemplate, x: float, z: float) -> GardenElement:
    """New element at (x, 0, z). Properties are a shallow copy of the template's."""
    return GardenElement(
        id=generate_id(),
        name=template.name,
        type=template.type,
        position=Vector3(x=x, y=0.0, z=z),
        rotation=0.0,
        properties=dict(template.properties),
    )


class PlacementPipeline:
    def __init__(
        self,
        scene: SceneAdapter,
        state: EditorState,
        grid_size: float = GRID_SIZE,
        lookup: TemplateLookup = get_element_by_id,
    ) -> None:
        self.scene = scene
        self.state = state
        self.grid_size = grid_size
        self.lookup = lookup

    def drop(self, template_id: str, screen_x: float, screen_y: float) -> Optional[GardenElement]:
        """
        Build the element for a drop, or None when the drop is a no-op
        (pointer ray misses the ground, or the template is unknown).
        The caller inserts the element into the garden.
        """
        point = self.scene.ground_point(
            screen_x, screen_y,
            snap=self.state.snap_to_grid,
            grid_size=self.grid_size,
        )
        if point is None:
            logger.info(f"Drop at ({screen_x}, {screen_y}) is outside the ground plane; ignored.")
            return None

        template = self.lookup(template_id)
        if template is None:
            logger.warning(f"Dropped unknown template '{template_id}'; ignored.")
            return None

        element = element_from_template(template, float(point[0]), float(point[2]))
        logger.debug(f"Dropped '{template.id}' as {element.id} at ({element.position.x}, {element.position.z}).")
        return element
