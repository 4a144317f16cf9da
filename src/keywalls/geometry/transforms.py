"""Transform utilities for solids and raw point sets."""

import math

import numpy as np
from manifold3d import Manifold


def translate(solid: Manifold, x: float = 0, y: float = 0, z: float = 0) -> Manifold:
    """Translate a manifold by (x, y, z)."""
    return solid.translate([x, y, z])


def mirror_x(solid: Manifold) -> Manifold:
    """Mirror a manifold across the YZ plane (flip X)."""
    return solid.mirror([1, 0, 0])


def rotation_matrix(ax: float = 0, ay: float = 0, az: float = 0) -> np.ndarray:
    """Rotation matrix for X, then Y, then Z rotations given in degrees.

    Matches the order Manifold.rotate applies its Euler angles.
    """
    rx, ry, rz = (math.radians(a) for a in (ax, ay, az))
    cx, sx = math.cos(rx), math.sin(rx)
    cy, sy = math.cos(ry), math.sin(ry)
    cz, sz = math.cos(rz), math.sin(rz)
    mx = np.array([[1, 0, 0], [0, cx, -sx], [0, sx, cx]])
    my = np.array([[cy, 0, sy], [0, 1, 0], [-sy, 0, cy]])
    mz = np.array([[cz, -sz, 0], [sz, cz, 0], [0, 0, 1]])
    return mz @ my @ mx


def rotate_point(
    point: np.ndarray,
    degrees: tuple[float, float, float],
    about: np.ndarray | None = None,
) -> np.ndarray:
    """Rotate a point by Euler angles (degrees) around a pivot."""
    pivot = np.zeros(3) if about is None else np.asarray(about, dtype=np.float64)
    m = rotation_matrix(*degrees)
    return m @ (np.asarray(point, dtype=np.float64) - pivot) + pivot


def normalize(v: np.ndarray) -> np.ndarray:
    """Unit vector in the direction of v (zero vectors are returned as-is)."""
    v = np.asarray(v, dtype=np.float64)
    n = np.linalg.norm(v)
    if n < 1e-12:
        return v
    return v / n


def unrotate_point(
    point: np.ndarray,
    degrees: tuple[float, float, float],
    about: np.ndarray | None = None,
) -> np.ndarray:
    """Inverse of rotate_point for the same angles and pivot."""
    pivot = np.zeros(3) if about is None else np.asarray(about, dtype=np.float64)
    m = rotation_matrix(*degrees)
    return m.T @ (np.asarray(point, dtype=np.float64) - pivot) + pivot


def rotate_about_axis(
    point: np.ndarray,
    axis: np.ndarray,
    degrees: float,
    pivot: np.ndarray | None = None,
) -> np.ndarray:
    """Rotate a point around an arbitrary axis through pivot (Rodrigues)."""
    k = normalize(axis)
    origin = np.zeros(3) if pivot is None else np.asarray(pivot, dtype=np.float64)
    v = np.asarray(point, dtype=np.float64) - origin
    a = math.radians(degrees)
    rotated = v * math.cos(a) + np.cross(k, v) * math.sin(a) + k * (k @ v) * (1 - math.cos(a))
    return rotated + origin


def mirror_point(point: np.ndarray, normal=(1.0, 0.0, 0.0)) -> np.ndarray:
    """Reflect a point through the plane at the origin with the given normal."""
    n = normalize(normal)
    p = np.asarray(point, dtype=np.float64)
    return p - 2.0 * (p @ n) * n


def rotate_solid(
    solid: Manifold,
    degrees: tuple[float, float, float],
    about: np.ndarray | None = None,
) -> Manifold:
    """Rotate a manifold by Euler angles (degrees) around a pivot."""
    if about is None:
        return solid.rotate(list(degrees))
    px, py, pz = (float(v) for v in about)
    return solid.translate([-px, -py, -pz]).rotate(list(degrees)).translate([px, py, pz])
