"""Geometry primitives with dimension guards.

All primitives validate inputs and raise GeometryError on invalid dimensions.
"""

import numpy as np
from manifold3d import Manifold, Mesh

from keywalls.errors import GeometryError

# Boolean operation constants
BOOLEAN_OVERSHOOT = 0.1  # Extend subtractions past the target surface (mm)
UNION_FUDGE = 0.01  # Push bridge ends into the walls they join (mm)
DEST_FUDGE = 0.05  # Destination push for flat prism bridges (mm)


def _check_positive(value: float, name: str) -> None:
    """Raise GeometryError if value is not positive."""
    if value <= 0:
        raise GeometryError(f"{name} must be positive, got {value}")


def cylinder(
    radius: float, height: float, segments: int | None = None
) -> Manifold:
    """Create a cylinder centered on X/Y with base at Z=0.

    Args:
        radius: Cylinder radius (mm).
        height: Cylinder height (mm).
        segments: Number of segments. None uses the global default.
    """
    _check_positive(radius, "radius")
    _check_positive(height, "height")
    if segments is not None:
        return Manifold.cylinder(height, radius, circular_segments=segments)
    return Manifold.cylinder(height, radius)


def hull_points(points: np.ndarray) -> Manifold:
    """Convex hull of a point cloud."""
    pts = np.asarray(points, dtype=np.float64)
    if len(pts) < 4:
        raise GeometryError(f"Hull needs at least 4 points, got {len(pts)}")
    result = Manifold.hull_points(pts)
    if result.is_empty():
        raise GeometryError("Hull produced an empty manifold (coplanar points?)")
    return result


def signed_volume(vertices: np.ndarray, triangles: np.ndarray) -> float:
    """Signed volume enclosed by a closed triangle mesh."""
    v0 = vertices[triangles[:, 0]]
    v1 = vertices[triangles[:, 1]]
    v2 = vertices[triangles[:, 2]]
    return float(np.einsum("ij,ij->i", v0, np.cross(v1, v2)).sum() / 6.0)


def polyhedron(vertices: np.ndarray, triangles: np.ndarray) -> Manifold:
    """Build a solid from an indexed, closed triangle mesh.

    Winding is flipped when the mesh encloses negative volume, so callers
    only need consistent (not necessarily outward) orientation.

    Args:
        vertices: (n, 3) vertex positions.
        triangles: (m, 3) vertex indices.
    """
    verts = np.asarray(vertices, dtype=np.float64)
    tris = np.asarray(triangles, dtype=np.int64)
    if len(tris) < 4:
        raise GeometryError(f"Polyhedron needs at least 4 faces, got {len(tris)}")
    if signed_volume(verts, tris) < 0:
        tris = tris[:, ::-1]
    mesh = Mesh(
        vert_properties=np.ascontiguousarray(verts, dtype=np.float32),
        tri_verts=np.ascontiguousarray(tris, dtype=np.uint32),
    )
    result = Manifold(mesh)
    if result.is_empty():
        raise GeometryError(
            f"Polyhedron produced an empty manifold ({result.status()})"
        )
    return result


def debug_manifold(m: Manifold, label: str = "manifold") -> None:
    """Print debug info about a manifold for troubleshooting."""
    if m.is_empty():
        print(f"[DEBUG] {label}: EMPTY")
        return
    min_x, min_y, min_z, max_x, max_y, max_z = m.bounding_box()
    print(
        f"[DEBUG] {label}: volume={m.volume():.4f}, "
        f"bbox=({min_x:.2f},{min_y:.2f},{min_z:.2f})-"
        f"({max_x:.2f},{max_y:.2f},{max_z:.2f})"
    )
