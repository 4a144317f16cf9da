"""STL output of a finished case base."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import numpy as np
import trimesh
from manifold3d import Manifold

from keywalls.errors import GeometryError

logger = logging.getLogger(__name__)


def manifold_to_trimesh(solid: Manifold) -> trimesh.Trimesh:
    """Trimesh view of a solid, sharing the manifold's vertex indexing."""
    if solid.is_empty():
        raise GeometryError("Cannot convert an empty solid to a mesh")
    mesh = solid.to_mesh()
    return trimesh.Trimesh(
        vertices=np.asarray(mesh.vert_properties[:, :3], dtype=np.float64),
        faces=np.asarray(mesh.tri_verts, dtype=np.int64),
        process=False,
    )


def export_stl_bytes(solid: Manifold, ascii: bool = False) -> bytes:
    """Serialise a solid as binary (default) or ASCII STL."""
    buffer = io.BytesIO()
    manifold_to_trimesh(solid).export(buffer, file_type="stl_ascii" if ascii else "stl")
    return buffer.getvalue()


def write_stl(solid: Manifold, path: str | Path, ascii: bool = False) -> Path:
    """Write a solid to an STL file, creating parent directories."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(export_stl_bytes(solid, ascii=ascii))
    logger.info("Wrote %s", out)
    return out
