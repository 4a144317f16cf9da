"""Key aperture geometry consumed from the layout.

Only what wall construction needs is modelled: the four side faces of
each aperture (corner points plus outward normal) and a per-column map
of apertures by row.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

import numpy as np

from keywalls.geometry.transforms import normalize, rotate_point
from keywalls.walls.edge import Points


class Side(enum.Enum):
    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"


@dataclass(frozen=True, eq=False)
class KeyFace:
    """One side face of an aperture: corners plus outward normal."""

    points: Points
    normal: np.ndarray

    def translate(self, offset) -> KeyFace:
        return KeyFace(points=self.points.translate(offset), normal=self.normal)

    def rotate(self, degrees: tuple[float, float, float], about=None) -> KeyFace:
        return KeyFace(
            points=self.points.map(lambda p: rotate_point(p, degrees, about)),
            normal=normalize(rotate_point(self.normal, degrees)),
        )


@dataclass(frozen=True, eq=False)
class KeyHole:
    """A placed key aperture with one face per cardinal side."""

    origin: np.ndarray
    faces: dict[Side, KeyFace]

    def face(self, side: Side) -> KeyFace:
        return self.faces[side]

    @classmethod
    def rectangular(
        cls,
        origin=(0.0, 0.0, 0.0),
        width: float = 14.0,
        depth: float = 14.0,
        thickness: float = 4.0,
    ) -> KeyHole:
        """Axis-aligned aperture centred on origin, plate spanning +-thickness/2.

        North is +Y and east is +X.
        """
        ox, oy, oz = (float(v) for v in origin)
        hw, hd, ht = width / 2, depth / 2, thickness / 2
        top, bot = oz + ht, oz - ht

        def face(left_xy, right_xy, normal) -> KeyFace:
            (lx, ly), (rx, ry) = left_xy, right_xy
            return KeyFace(
                points=Points.of_clockwise_list(
                    [(lx, ly, top), (rx, ry, top), (rx, ry, bot), (lx, ly, bot)]
                ),
                normal=np.array(normal, dtype=np.float64),
            )

        faces = {
            Side.NORTH: face((ox - hw, oy + hd), (ox + hw, oy + hd), (0, 1, 0)),
            Side.SOUTH: face((ox + hw, oy - hd), (ox - hw, oy - hd), (0, -1, 0)),
            Side.EAST: face((ox + hw, oy + hd), (ox + hw, oy - hd), (1, 0, 0)),
            Side.WEST: face((ox - hw, oy - hd), (ox - hw, oy + hd), (-1, 0, 0)),
        }
        return cls(origin=np.array([ox, oy, oz]), faces=faces)

    def translate(self, offset) -> KeyHole:
        d = np.asarray(offset, dtype=np.float64)
        return KeyHole(
            origin=self.origin + d,
            faces={s: f.translate(d) for s, f in self.faces.items()},
        )

    def rotate(self, degrees: tuple[float, float, float], about=None) -> KeyHole:
        """Rotate by Euler angles in degrees, about origin unless given."""
        pivot = self.origin if about is None else np.asarray(about, dtype=np.float64)
        return KeyHole(
            origin=rotate_point(self.origin, degrees, pivot),
            faces={s: f.rotate(degrees, pivot) for s, f in self.faces.items()},
        )


@dataclass(frozen=True)
class Column:
    """Keys of one column, indexed by row (0 = southmost)."""

    keys: dict[int, KeyHole] = field(default_factory=dict)

    def end_key(self, side: Side) -> KeyHole:
        """Northmost key for NORTH, southmost for SOUTH."""
        if side is Side.NORTH:
            return self.keys[max(self.keys)]
        return self.keys[min(self.keys)]


def grid_columns(
    n_cols: int,
    n_rows: int,
    pitch: float = 19.0,
    height: float = 20.0,
    offsets: dict[int, tuple[float, float, float]] | None = None,
    tilts: dict[int, tuple[float, float, float]] | None = None,
    **key_kwargs,
) -> dict[int, Column]:
    """Planar grid of apertures, optionally offset and tilted per column.

    Tilts are Euler angles in degrees applied about each key's own centre.
    """
    offsets = offsets or {}
    tilts = tilts or {}
    columns = {}
    for c in range(n_cols):
        off = np.asarray(offsets.get(c, (0.0, 0.0, 0.0)), dtype=np.float64)
        keys = {}
        for r in range(n_rows):
            key = KeyHole.rectangular((c * pitch, r * pitch, height), **key_kwargs)
            if c in tilts:
                key = key.rotate(tilts[c])
            keys[r] = key.translate(off)
        columns[c] = Column(keys=keys)
    return columns
