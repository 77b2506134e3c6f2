from __future__ import annotations

import math
from typing import NamedTuple, Optional, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy import typing as npt


class Ray(NamedTuple):
    """A world-space ray. `direction` is normalized."""
    origin: npt.NDArray[np.float64]
    direction: npt.NDArray[np.float64]


def make_ray(near: npt.ArrayLike, far: npt.ArrayLike) -> Optional[Ray]:
    """
    Build a ray through two world points (e.g. an unprojected pixel on the
    near and far clipping planes).

    Returns:
        None if both points coincide.
    """
    origin = np.asarray(near, dtype=np.float64).reshape(3)
    direction = np.asarray(far, dtype=np.float64).reshape(3) - origin
    length = float(np.linalg.norm(direction))
    if length < 1e-12:
        return None
    return Ray(origin=origin, direction=direction / length)


def intersect_ground_plane(ray: Ray, plane_y: float = 0.0) -> Optional[npt.NDArray[np.float64]]:
    """
    Intersect a ray with the horizontal plane y = plane_y.

    Args:
        ray: The world-space ray.
        plane_y: Height of the plane.

    Returns:
        The (3,) intersection point, or None if the ray is parallel to the
        plane or points away from it.
    """
    dy = float(ray.direction[1])
    if abs(dy) < 1e-12:
        return None

    t = (plane_y - float(ray.origin[1])) / dy
    if t < 0.0:
        return None

    point = ray.origin + t * ray.direction
    point[1] = plane_y
    return point


def snap_to_grid(value: float, grid_size: float) -> float:
    """
    Round to the nearest multiple of grid_size, halves rounded up
    (towards +inf), e.g. 1.73 -> 1.5 and -0.26 -> -0.5 for a 0.5 grid.
    """
    if grid_size <= 0:
        return value
    return math.floor(value / grid_size + 0.5) * grid_size


def snap_point(
    point: npt.NDArray[np.float64],
    grid_size: float,
    enabled: bool = True
) -> npt.NDArray[np.float64]:
    """Snap the planar (x, z) coordinates of a world point independently."""
    snapped = np.array(point, dtype=np.float64)
    if enabled:
        snapped[0] = snap_to_grid(float(snapped[0]), grid_size)
        snapped[2] = snap_to_grid(float(snapped[2]), grid_size)
    return snapped
