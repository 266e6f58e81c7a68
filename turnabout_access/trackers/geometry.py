"""
Camera projection helpers for moving a 2D cursor onto a 3D hotspot.

A camera is a 4x4 view-projection matrix (column vectors, clip = M @ p)
plus a viewport size in pixels. Screen depth is the clip-space w of a
point, which for a perspective camera is its distance along the view axis.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from turnabout_access.errors import ProjectionError

_EPSILON = 1e-9


def _matrix(matrix: Sequence) -> np.ndarray:
    m = np.asarray(matrix, dtype=np.float64)
    if m.size != 16:
        raise ProjectionError(f"expected a 4x4 matrix, got {m.size} values")
    m = m.reshape(4, 4)
    if not np.all(np.isfinite(m)):
        raise ProjectionError("matrix has non-finite entries")
    return m


def _homogeneous(point: Sequence[float]) -> np.ndarray:
    return np.array([point[0], point[1], point[2], 1.0], dtype=np.float64)


def perspective(fov_y_deg: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Build an OpenGL-style perspective projection (camera looks down -z)."""
    f = 1.0 / math.tan(math.radians(fov_y_deg) / 2.0)
    return np.array([
        [f / aspect, 0.0, 0.0, 0.0],
        [0.0, f, 0.0, 0.0],
        [0.0, 0.0, (far + near) / (near - far), 2.0 * far * near / (near - far)],
        [0.0, 0.0, -1.0, 0.0],
    ])


def depth_of(matrix: Sequence, point: Sequence[float]) -> float:
    """Screen depth (clip-space w) of a world point."""
    m = _matrix(matrix)
    return float(m[3] @ _homogeneous(point))


def world_to_screen(
    matrix: Sequence,
    viewport: Sequence[float],
    point: Sequence[float],
) -> np.ndarray:
    """Project a world point to (x_pixels, y_pixels, depth).

    Raises:
        ProjectionError: If the point is at or behind the camera
    """
    m = _matrix(matrix)
    clip = m @ _homogeneous(point)
    w = clip[3]
    if not math.isfinite(w) or w <= _EPSILON:
        raise ProjectionError("point is behind the camera")

    ndc = clip[:3] / w
    width, height = float(viewport[0]), float(viewport[1])
    screen = np.array([
        (ndc[0] + 1.0) * 0.5 * width,
        (ndc[1] + 1.0) * 0.5 * height,
        w,
    ])
    if not np.all(np.isfinite(screen)):
        raise ProjectionError("projection produced non-finite coordinates")
    return screen


def screen_to_world(
    matrix: Sequence,
    viewport: Sequence[float],
    screen: Sequence[float],
) -> np.ndarray:
    """Unproject (x_pixels, y_pixels, depth) to a world point.

    The pixel defines a ray through the near and far planes; the result is
    the point on that ray whose clip-space w equals the requested depth.

    Raises:
        ProjectionError: If the matrix is singular or depth is undefined
            along the ray (orthographic cameras)
    """
    m = _matrix(matrix)
    width, height = float(viewport[0]), float(viewport[1])
    if width <= 0 or height <= 0:
        raise ProjectionError("viewport has no area")

    try:
        inverse = np.linalg.inv(m)
    except np.linalg.LinAlgError as e:
        raise ProjectionError(f"matrix is singular: {e}") from e

    ndc_x = screen[0] / width * 2.0 - 1.0
    ndc_y = screen[1] / height * 2.0 - 1.0

    ends = []
    for ndc_z in (-1.0, 1.0):
        h = inverse @ np.array([ndc_x, ndc_y, ndc_z, 1.0])
        if abs(h[3]) < _EPSILON:
            raise ProjectionError("ray end at infinity")
        ends.append(h[:3] / h[3])
    near, far = ends

    w_near = m[3] @ _homogeneous(near)
    w_far = m[3] @ _homogeneous(far)
    if abs(w_far - w_near) < _EPSILON:
        raise ProjectionError("depth is constant along the ray")

    t = (float(screen[2]) - w_near) / (w_far - w_near)
    world = near + t * (far - near)
    if not np.all(np.isfinite(world)):
        raise ProjectionError("unprojection produced non-finite coordinates")
    return world
