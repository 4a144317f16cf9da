"""Validation checks for generated walls, bridges and base shells."""

import numpy as np
from manifold3d import Manifold

from keywalls.errors import ValidationError
from keywalls.export.stl import manifold_to_trimesh

GROUND_TOLERANCE = 1e-3


def validate_manifold(solid: Manifold, max_triangles: int = 500_000) -> dict:
    """Run validation checklist on a generated manifold.

    Returns a dict with check results and overall pass/fail.
    """
    results = {}

    tmesh = manifold_to_trimesh(solid)

    # 1. Watertight
    results["is_watertight"] = bool(tmesh.is_watertight)

    # 2. Positive volume
    vol = tmesh.volume
    results["volume"] = float(vol)
    results["positive_volume"] = bool(vol > 0)

    # 3. Nothing below the ground plane
    bbox = tmesh.bounds
    results["min_z"] = float(bbox[0][2])
    results["above_ground"] = bool(bbox[0][2] >= -GROUND_TOLERANCE)

    # 4. Triangle count
    tri_count = len(tmesh.faces)
    results["triangle_count"] = tri_count
    results["triangle_count_ok"] = 4 <= tri_count <= max_triangles

    # 5. No degenerate triangles
    areas = tmesh.area_faces
    results["no_degenerate_triangles"] = bool(np.all(areas > 1e-10))

    critical_checks = [
        "is_watertight",
        "positive_volume",
        "above_ground",
        "triangle_count_ok",
    ]
    results["pass"] = all(results.get(c, False) for c in critical_checks)

    return results


def require_valid(solid: Manifold, label: str = "solid") -> dict:
    """Validate and raise ValidationError listing the failed checks."""
    results = validate_manifold(solid)
    if not results["pass"]:
        failed = [k for k, v in results.items() if v is False]
        raise ValidationError(f"{label} failed checks: {', '.join(failed)}")
    return results
