"""Screw and bumpon eyelets attached to the foot of a wall."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from manifold3d import Manifold

from keywalls.config import ScrewConfig
from keywalls.geometry.booleans import difference_all, union_all
from keywalls.geometry.primitives import BOOLEAN_OVERSHOOT, cylinder, hull_points
from keywalls.geometry.transforms import mirror_point, rotate_point, rotate_solid, translate
from keywalls.walls.edge import Points


@dataclass(frozen=True, eq=False)
class Screw:
    """A placed eyelet: its config, hole centre on the ground, and solid."""

    config: ScrewConfig
    centre: np.ndarray
    solid: Manifold

    def translate(self, offset) -> Screw:
        d = np.asarray(offset, dtype=np.float64)
        return Screw(self.config, self.centre + d, self.solid.translate(list(d)))

    def rotate(self, degrees: tuple[float, float, float], about=None) -> Screw:
        return Screw(
            self.config,
            rotate_point(self.centre, degrees, about),
            rotate_solid(self.solid, degrees, about),
        )

    def mirror(self, normal=(1.0, 0.0, 0.0)) -> Screw:
        return Screw(
            self.config, mirror_point(self.centre, normal), self.solid.mirror(list(normal))
        )


def _ring(centre: np.ndarray, radius: float, z: float, n: int = 24) -> np.ndarray:
    angles = np.linspace(0.0, 2 * math.pi, n, endpoint=False)
    return np.column_stack(
        [
            centre[0] + radius * np.cos(angles),
            centre[1] + radius * np.sin(angles),
            np.full(n, z),
        ]
    )


def default_eyelet(config: ScrewConfig, foot: Points, outward: np.ndarray) -> Screw:
    """Disc hulled onto the outer foot edge, with a screw hole or bumpon recess.

    Args:
        config: Eyelet dimensions.
        foot: Foot points of the wall the eyelet hangs off.
        outward: Unit xy direction pointing away from the keys.
    """
    mid = (foot.top_left + foot.top_right) / 2
    centre = mid + outward * config.outer_rad
    centre[2] = 0.0

    t = config.thickness
    anchors = np.array(
        [
            foot.top_left,
            foot.top_right,
            foot.top_left + [0, 0, t],
            foot.top_right + [0, 0, t],
        ]
    )
    rings = [_ring(centre, config.outer_rad, z) for z in (0.0, t)]
    body = hull_points(np.vstack([*rings, anchors]))

    if config.hole_depth is None:
        depth = t + 2 * BOOLEAN_OVERSHOOT
    else:
        depth = config.hole_depth + BOOLEAN_OVERSHOOT
    hole = translate(
        cylinder(config.inner_rad, depth), centre[0], centre[1], -BOOLEAN_OVERSHOOT
    )
    return Screw(config=config, centre=centre, solid=difference_all(body, [hole]))


def place_eyelet(config: ScrewConfig, foot: Points, outward: np.ndarray) -> Screw:
    """Build the eyelet with the configured maker, or the default one."""
    maker = config.maker or default_eyelet
    return maker(config, foot, outward)


def attach(solid: Manifold, screw: Screw | None) -> Manifold:
    """Union an eyelet onto a wall solid."""
    if screw is None:
        return solid
    return union_all([solid, screw.solid])
