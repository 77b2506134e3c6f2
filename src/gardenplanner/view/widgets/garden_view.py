"""
Garden View (PyVista Wrapper)
=============================
The Qt widget that draws the garden and implements the render backend used
by the SceneAdapter.

Why is this file needed?
------------------------
It is the only place that knows about actors, cameras and VTK display
coordinates. Pointer input is forwarded to a PointerHandler (the editor
controller); when the handler consumes a press the camera interaction for
that gesture is suppressed, so dragging an element never orbits the view.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol, TYPE_CHECKING

import numpy as np
import pyvista as pv
from PySide6.QtCore import QEvent, QObject, Signal
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import QVBoxLayout, QWidget
from pyvistaqt import QtInteractor

from gardenplanner.config import GARDEN_SIZE, GRID_SIZE, ZOOM_STEP
from gardenplanner.model.elements import GardenElement
from gardenplanner.model.geometry_utils import Ray, make_ray
from gardenplanner.model.state import ViewMode
from gardenplanner.view.widgets.grid_manager import GridManager
from gardenplanner.view.widgets.meshes import HIGHLIGHT_COLOR, build_element_mesh, element_color

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

TEMPLATE_MIME = "application/x-garden-template"

# Length of the segment used for ray casting against element meshes
RAY_LENGTH = GARDEN_SIZE * 20.0


class PointerHandler(Protocol):
    def pointer_down(self, screen_x: float, screen_y: float) -> bool: ...
    def pointer_move(self, screen_x: float, screen_y: float) -> bool: ...
    def pointer_up(self) -> bool: ...
    def zoom(self, delta: float) -> None: ...


@dataclass
class ElementHandle:
    """Render handle for one element: its actor plus the local mesh used for picking."""
    actor: pv.Actor
    mesh: pv.PolyData
    center: npt.NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    rotation: float = 0.0

    def world_mesh(self) -> pv.PolyData:
        return self.mesh.rotate_y(self.rotation, inplace=False).translate(self.center, inplace=False)


class GardenView(QWidget):
    template_dropped = Signal(str, float, float)  # template id, display x, display y

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)

        self.layout_box: QVBoxLayout = QVBoxLayout(self)
        self.layout_box.setContentsMargins(0, 0, 0, 0)

        self.plotter: QtInteractor = QtInteractor(self)
        self.layout_box.addWidget(self.plotter)

        self._init_plotter()

        # --- Managers ---
        self._grid_manager = GridManager(self.plotter, size=GARDEN_SIZE, spacing=GRID_SIZE)
        self._grid_manager.build()

        # --- Interaction state ---
        self.pointer_handler: Optional[PointerHandler] = None
        self._dragging: bool = False
        self._observer_tags: Dict[str, int] = {}
        self._highlighted: Optional[ElementHandle] = None

        self.set_view_mode(ViewMode.TOP_DOWN)
        self._attach_observers()

        self.plotter.setAcceptDrops(True)
        self.plotter.installEventFilter(self)

    # ------------------------------------------------------------------------------
    # Render backend
    # ------------------------------------------------------------------------------

    def create_handle(self, element: GardenElement) -> ElementHandle:
        mesh = build_element_mesh(element)
        actor = self.plotter.add_mesh(
            mesh,
            color=element_color(element),
            pickable=False,
            show_scalar_bar=False,
            render=False,
        )
        return ElementHandle(actor=actor, mesh=mesh)

    def place_handle(self, handle: ElementHandle, center: npt.NDArray[np.float64], rotation_deg: float) -> None:
        handle.center = np.asarray(center, dtype=np.float64)
        handle.rotation = rotation_deg
        handle.actor.position = tuple(handle.center)
        handle.actor.orientation = (0.0, rotation_deg, 0.0)

    def dispose_handle(self, handle: ElementHandle) -> None:
        if handle is self._highlighted:
            self._highlighted = None
        self.plotter.remove_actor(handle.actor, render=False)

    def screen_to_ray(self, screen_x: float, screen_y: float) -> Optional[Ray]:
        """Unproject a display pixel onto the near and far clipping planes."""
        renderer = self.plotter.renderer
        points = []
        for depth in (0.0, 1.0):
            renderer.SetDisplayPoint(screen_x, screen_y, depth)
            renderer.DisplayToWorld()
            x, y, z, w = renderer.GetWorldPoint()
            if w == 0.0:
                return None
            points.append((x / w, y / w, z / w))
        return make_ray(points[0], points[1])

    def intersect(self, handle: ElementHandle, ray: Ray) -> Optional[float]:
        end = ray.origin + ray.direction * RAY_LENGTH
        hits, _ = handle.world_mesh().ray_trace(ray.origin, end)
        if len(hits) == 0:
            return None
        return float(np.min(np.linalg.norm(hits - ray.origin, axis=1)))

    def set_view_mode(self, mode: ViewMode) -> None:
        """Install a fresh camera and interaction style for the mode."""
        camera = pv.Camera()
        self.plotter.renderer.camera = camera
        half = GARDEN_SIZE / 2.0

        if mode == ViewMode.TOP_DOWN:
            camera.position = (0.0, GARDEN_SIZE, 0.0)
            camera.focal_point = (0.0, 0.0, 0.0)
            camera.up = (0.0, 0.0, -1.0)
            self.plotter.enable_parallel_projection()
            camera.parallel_scale = half
            self.plotter.enable_image_style()
        else:
            camera.position = (half, half, half)
            camera.focal_point = (0.0, 0.0, 0.0)
            camera.up = (0.0, 1.0, 0.0)
            camera.view_angle = 45.0
            self.plotter.disable_parallel_projection()
            self.plotter.enable_terrain_style()

        self.plotter.renderer.reset_camera_clipping_range()

    def set_ortho_zoom(self, zoom: float) -> None:
        self.plotter.camera.parallel_scale = (GARDEN_SIZE / 2.0) / zoom

    def dolly(self, distance: float) -> None:
        camera = self.plotter.camera
        position = np.asarray(camera.position, dtype=np.float64)
        direction = np.asarray(camera.focal_point, dtype=np.float64) - position
        length = float(np.linalg.norm(direction))
        if length < 1e-9:
            return
        camera.position = tuple(position + direction / length * distance)
        self.plotter.renderer.reset_camera_clipping_range()

    def set_grid_visible(self, visible: bool) -> None:
        self._grid_manager.set_visible(visible)

    def request_render(self) -> None:
        self.plotter.render()

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def set_highlight(self, handle: Optional[ElementHandle]) -> None:
        """Outline the selected element's actor."""
        if self._highlighted is not None:
            self._highlighted.actor.prop.show_edges = False
        self._highlighted = handle
        if handle is not None:
            handle.actor.prop.show_edges = True
            handle.actor.prop.edge_color = HIGHLIGHT_COLOR
            handle.actor.prop.line_width = 2
        self.plotter.render()

    # ------------------------------------------------------------------------------
    # Internal: Setup & Observers
    # ------------------------------------------------------------------------------

    def _init_plotter(self) -> None:
        self.plotter.set_background("#dbeafe", top="white")
        self.plotter.enable_lightkit()

    def _attach_observers(self) -> None:
        # Observers go on the raw VTK interactor with a priority above the
        # interactor style, so a consumed event can be aborted before the
        # style moves the camera.
        iren = self.plotter.iren.interactor
        for event, callback in (
            ("LeftButtonPressEvent", self._on_left_press),
            ("MouseMoveEvent", self._on_mouse_move),
            ("LeftButtonReleaseEvent", self._on_left_release),
            ("MouseWheelForwardEvent", self._on_wheel),
            ("MouseWheelBackwardEvent", self._on_wheel),
        ):
            self._observer_tags[event] = iren.AddObserver(event, callback, 10.0)

    def _abort(self, obj, event: str) -> None:
        obj.GetCommand(self._observer_tags[event]).AbortFlagOn()

    def _on_left_press(self, obj, event: str) -> None:
        if self.pointer_handler is None:
            return
        x, y = obj.GetEventPosition()
        self._dragging = self.pointer_handler.pointer_down(float(x), float(y))
        if self._dragging:
            self._abort(obj, event)

    def _on_mouse_move(self, obj, event: str) -> None:
        if not self._dragging or self.pointer_handler is None:
            return
        x, y = obj.GetEventPosition()
        self.pointer_handler.pointer_move(float(x), float(y))
        self._abort(obj, event)

    def _on_left_release(self, obj, event: str) -> None:
        if not self._dragging:
            return
        self._dragging = False
        if self.pointer_handler is not None:
            self.pointer_handler.pointer_up()
        self._abort(obj, event)

    def _on_wheel(self, obj, event: str) -> None:
        if self.pointer_handler is None:
            return
        delta = ZOOM_STEP if event == "MouseWheelForwardEvent" else -ZOOM_STEP
        self.pointer_handler.zoom(delta)
        self._abort(obj, event)

    # ------------------------------------------------------------------------------
    # Drag & drop from the catalog
    # ------------------------------------------------------------------------------

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if watched is self.plotter and event.type() in (QEvent.Type.DragEnter, QEvent.Type.DragMove):
            if event.mimeData().hasFormat(TEMPLATE_MIME):
                event.acceptProposedAction()
                return True
        elif watched is self.plotter and event.type() == QEvent.Type.Drop:
            mime = event.mimeData()
            if mime.hasFormat(TEMPLATE_MIME):
                template_id = bytes(mime.data(TEMPLATE_MIME).data()).decode("utf-8")
                x, y = self._to_display(event.position().x(), event.position().y())
                event.acceptProposedAction()
                self.template_dropped.emit(template_id, x, y)
                return True
        return super().eventFilter(watched, event)

    def _to_display(self, widget_x: float, widget_y: float) -> tuple[float, float]:
        """Qt widget coordinates (top-left origin) to VTK display pixels (bottom-left)."""
        ratio = self.plotter.devicePixelRatioF()
        return widget_x * ratio, (self.plotter.height() - widget_y) * ratio

    def closeEvent(self, event: QCloseEvent) -> None:
        self.plotter.close()
        event.accept()
