"""CaseBaseBuilder orchestrator and BaseResult dataclass."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any

from manifold3d import Manifold

from keywalls.config import BaseParams
from keywalls.connect.perimeter import closed_perimeter, skeleton_perimeter
from keywalls.errors import GeometryError, InvalidParamsError
from keywalls.geometry.booleans import union_all
from keywalls.geometry.transforms import mirror_x
from keywalls.settings import Settings
from keywalls.walls.maps import CaseWalls

logger = logging.getLogger(__name__)


@dataclass
class BaseResult:
    """Result of building a case base shell, including metadata."""

    manifold: Manifold
    perimeter: Manifold
    triangle_count: int
    bounding_box: tuple
    is_watertight: bool
    warnings: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)


class CaseBaseBuilder:
    """Orchestrator that unions walls with a perimeter of bridges.

    Responsibility: pick the perimeter strategy, union, report.
    Does NOT build walls; those come from the layout collaborator.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        logging.getLogger("keywalls").setLevel(settings.log_level)

    def build(self, walls: CaseWalls, params: BaseParams | None = None) -> BaseResult:
        """Build the base shell.

        1. Stitch the perimeter with the requested connector
        2. Union every present wall with the perimeter
        3. Mirror for the right hand if asked
        4. Check the triangle budget from settings
        5. Return BaseResult with metadata
        """
        params = params or BaseParams()
        start_time = time.time()
        warnings: list[str] = []

        # 1. Perimeter
        if params.connector == "skeleton":
            perimeter = skeleton_perimeter(walls, params.skeleton)
        elif params.connector == "closed":
            perimeter = closed_perimeter(walls, params.closed)
        else:
            raise InvalidParamsError(f"Unknown connector '{params.connector}'")

        # 2. Union
        wall_solids = [w.solid for w in walls.all_walls()]
        if not wall_solids:
            raise InvalidParamsError("No walls to assemble")
        shell = union_all(wall_solids + [perimeter], "base parts")
        if shell.is_empty():
            raise GeometryError("Base shell is empty after union")

        # 3. Handedness
        if params.right_hand:
            shell = mirror_x(shell)
            perimeter = mirror_x(perimeter)

        # 4. Triangle budget
        tri_count = shell.to_mesh().tri_verts.shape[0]
        max_tris = self.settings.max_triangles
        if tri_count > max_tris:
            warnings.append(f"Base has {tri_count} triangles, budget is {max_tris}")
            logger.warning("Base over triangle budget: %d > %d", tri_count, max_tris)

        elapsed = time.time() - start_time
        logger.info(
            "Built %s base from %d walls in %.0f ms",
            params.connector, len(wall_solids), elapsed * 1000,
        )

        return BaseResult(
            manifold=shell,
            perimeter=perimeter,
            triangle_count=tri_count,
            bounding_box=shell.bounding_box(),
            is_watertight=True,  # manifold3d guarantees watertight
            warnings=warnings,
            metadata={
                "connector": params.connector,
                "hand": "right" if params.right_hand else "left",
                "num_walls": len(wall_solids),
                "generation_time_ms": round(elapsed * 1000),
            },
        )
