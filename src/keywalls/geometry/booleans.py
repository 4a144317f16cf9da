"""Boolean combination of walls, bridges and eyelets.

Degenerate lofts can come back empty; they are dropped (and logged)
before any batch operation so one bad bridge never blanks a perimeter.
"""

import logging

from manifold3d import Manifold, OpType

from keywalls.errors import GeometryError

logger = logging.getLogger(__name__)


def _non_empty(parts: list[Manifold], label: str) -> list[Manifold]:
    kept = [p for p in parts if not p.is_empty()]
    if len(kept) < len(parts):
        logger.debug("Dropped %d empty %s", len(parts) - len(kept), label)
    return kept


def union_all(parts: list[Manifold], label: str = "parts") -> Manifold:
    """Union solids in one batch. An empty Manifold if nothing is left."""
    solids = _non_empty(parts, label)
    if not solids:
        return Manifold()
    if len(solids) == 1:
        return solids[0]
    return Manifold.batch_boolean(solids, OpType.Add)


def difference_all(base: Manifold, cutouts: list[Manifold]) -> Manifold:
    """Cut every tool out of base with a single subtraction.

    Raises GeometryError if base is empty.
    """
    if base.is_empty():
        raise GeometryError("Cannot cut holes in an empty solid")
    tools = union_all(cutouts, "cutouts")
    if tools.is_empty():
        return base
    return base - tools
