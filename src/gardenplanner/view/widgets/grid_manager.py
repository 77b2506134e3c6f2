"""
Grid Manager
Handles the ground plane and the snapping grid drawn on top of it.
"""
from typing import Optional

import numpy as np
import pyvista as pv

from gardenplanner.config import GARDEN_SIZE, GRID_SIZE

GROUND_COLOR = "#8BC34A"


class GridManager:
    def __init__(self, plotter: pv.Plotter, size: float = GARDEN_SIZE, spacing: float = GRID_SIZE) -> None:
        self.plotter = plotter
        self.size = size
        self.minor_spacing: float = spacing
        self.major_spacing: float = max(spacing, 5.0)
        self.visible: bool = True

        self._ground_actor: Optional[pv.Actor] = None
        self._grid_major_actor: Optional[pv.Actor] = None
        self._grid_minor_actor: Optional[pv.Actor] = None

    def build(self) -> None:
        """(Re)create the ground and grid actors."""
        self.clear_actors()

        ground = pv.Plane(
            center=(0.0, 0.0, 0.0),
            direction=(0.0, 1.0, 0.0),
            i_size=self.size,
            j_size=self.size,
        )
        self._ground_actor = self.plotter.add_mesh(
            ground, color=GROUND_COLOR, pickable=False, show_scalar_bar=False, render=False
        )

        half = self.size / 2.0
        bounds = (-half, half, -half, half)
        grid_minor = self._build_xz_grid_polydata(bounds, spacing=self.minor_spacing)
        grid_major = self._build_xz_grid_polydata(bounds, spacing=self.major_spacing)

        self._grid_minor_actor = self.plotter.add_mesh(
            grid_minor, color="#E0E0E0", line_width=1, opacity=0.5, pickable=False, render=False
        )
        self._grid_major_actor = self.plotter.add_mesh(
            grid_major, color="#B0B0B0", line_width=1, opacity=0.8, pickable=False, render=False
        )
        self.set_visible(self.visible)

    def set_visible(self, visible: bool) -> None:
        """Show or hide the grid lines. The ground plane always stays."""
        self.visible = visible
        for actor in (self._grid_minor_actor, self._grid_major_actor):
            if actor is not None:
                actor.SetVisibility(visible)

    @staticmethod
    def _build_xz_grid_polydata(bounds, spacing, height: float = 0.01) -> pv.PolyData:
        """
        Create a grid in the XZ plane, slightly above the ground.

        Args:
            bounds: (x_min, x_max, z_min, z_max)
            spacing: Grid spacing in both directions.
            height: Y offset of the lines, keeps them from z-fighting the ground.

        Returns:
            A PyVista PolyData line set.
        """
        x_min, x_max, z_min, z_max = bounds
        xs = np.arange(np.ceil(x_min / spacing) * spacing, x_max + spacing / 2, spacing)
        zs = np.arange(np.ceil(z_min / spacing) * spacing, z_max + spacing / 2, spacing)

        n_lines = len(xs) + len(zs)
        if n_lines == 0: return pv.PolyData()

        points = np.empty((n_lines * 2, 3), dtype=float)
        cells = np.empty(n_lines * 3, dtype=int)

        pid, cid = 0, 0
        for x in xs:
            points[pid] = (x, height, z_min)
            points[pid + 1] = (x, height, z_max)
            cells[cid:cid + 3] = (2, pid, pid + 1)
            pid += 2
            cid += 3
        for z in zs:
            points[pid] = (x_min, height, z)
            points[pid + 1] = (x_max, height, z)
            cells[cid:cid + 3] = (2, pid, pid + 1)
            pid += 2
            cid += 3

        return pv.PolyData(points, lines=cells)

    def clear_actors(self) -> None:
        """Clears the ground and grid actors from the plotter."""
        for actor in (self._ground_actor, self._grid_minor_actor, self._grid_major_actor):
            if actor is not None:
                self.plotter.remove_actor(actor, render=False)
        self._ground_actor = None
        self._grid_minor_actor = None
        self._grid_major_actor = None
