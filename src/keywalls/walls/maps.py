"""Sparse maps of walls around a key layout, and builders for them.

Entries are None where the layout has no wall (or asked for none).
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Callable

from keywalls.config import WallParams
from keywalls.errors import InvalidParamsError
from keywalls.walls.keyhole import Column, KeyHole, Side
from keywalls.walls.wall import Wall, build_wall, column_drop

logger = logging.getLogger(__name__)


class Presence(enum.Enum):
    """Whether a wall is drawn at a position, and if it carries an eyelet."""

    NO = "no"
    YES = "yes"
    SCREW = "screw"


@dataclass(frozen=True)
class ColumnWalls:
    """North and south end walls of a column (or thumb key)."""

    north: Wall | None = None
    south: Wall | None = None

    def get(self, side: Side) -> Wall | None:
        if side is Side.NORTH:
            return self.north
        if side is Side.SOUTH:
            return self.south
        raise InvalidParamsError(f"Column walls only have north/south, got {side}")


@dataclass(frozen=True)
class BodyWalls:
    """Walls of the main key body.

    cols maps column index to its end walls; west/east map row index to
    the side wall of the outermost column.
    """

    cols: dict[int, ColumnWalls] = field(default_factory=dict)
    west: dict[int, Wall | None] = field(default_factory=dict)
    east: dict[int, Wall | None] = field(default_factory=dict)

    def col(self, side: Side, idx: int) -> Wall | None:
        c = self.cols.get(idx)
        return None if c is None else c.get(side)

    @property
    def n_cols(self) -> int:
        return max(self.cols) + 1 if self.cols else 0


@dataclass(frozen=True)
class ThumbWalls:
    """Walls of the thumb cluster, keys indexed west to east."""

    keys: dict[int, ColumnWalls] = field(default_factory=dict)
    west: Wall | None = None
    east: Wall | None = None

    def key(self, side: Side, idx: int) -> Wall | None:
        k = self.keys.get(idx)
        return None if k is None else k.get(side)


@dataclass(frozen=True)
class CaseWalls:
    body: BodyWalls
    thumb: ThumbWalls | None = None

    def all_walls(self) -> list[Wall]:
        """Every present wall, body first."""
        walls: list[Wall | None] = []
        for c in self.body.cols.values():
            walls += [c.north, c.south]
        walls += list(self.body.west.values()) + list(self.body.east.values())
        if self.thumb is not None:
            for k in self.thumb.keys.values():
                walls += [k.north, k.south]
            walls += [self.thumb.west, self.thumb.east]
        return [w for w in walls if w is not None]


def _params_for(presence: Presence, params: WallParams) -> WallParams | None:
    if presence is Presence.NO:
        return None
    if presence is Presence.YES:
        return params.model_copy(update={"screw_config": None})
    if params.screw_config is None:
        raise InvalidParamsError("Presence.SCREW requested without a screw_config")
    return params


def _always(_: int) -> Presence:
    return Presence.YES


def build_body_walls(
    columns: dict[int, Column],
    spacing: float = 1.0,
    params: WallParams | None = None,
    side_params: WallParams | None = None,
    north_lookup: Callable[[int], Presence] = _always,
    south_lookup: Callable[[int], Presence] = _always,
    west_lookup: Callable[[int], Presence] = _always,
    east_lookup: Callable[[int], Presence] = _always,
) -> BodyWalls:
    """Walls for the main body: column ends plus the outer side walls.

    Lookups take a column index (north/south) or row index (west/east).
    """
    params = params or WallParams()
    side_params = side_params or params
    if not columns:
        raise InvalidParamsError("Body needs at least one column")

    cols = {}
    for idx in sorted(columns):
        ends = {}
        for side, lookup in ((Side.NORTH, north_lookup), (Side.SOUTH, south_lookup)):
            p = _params_for(lookup(idx), params)
            ends[side] = None if p is None else column_drop(columns, side, idx, spacing, p)
        cols[idx] = ColumnWalls(north=ends[Side.NORTH], south=ends[Side.SOUTH])

    def side_walls(column: Column, side: Side, lookup) -> dict[int, Wall | None]:
        walls = {}
        for row, key in sorted(column.keys.items()):
            p = _params_for(lookup(row), side_params)
            walls[row] = None if p is None else build_wall(key, side, p)
        return walls

    west = side_walls(columns[min(columns)], Side.WEST, west_lookup)
    east = side_walls(columns[max(columns)], Side.EAST, east_lookup)
    logger.debug("Body walls: %d columns, %d west, %d east", len(cols), len(west), len(east))
    return BodyWalls(cols=cols, west=west, east=east)


def build_thumb_walls(
    keys: dict[int, KeyHole],
    params: WallParams | None = None,
    north_lookup: Callable[[int], Presence] = _always,
    south_lookup: Callable[[int], Presence] = _always,
    west: Presence = Presence.YES,
    east: Presence = Presence.NO,
) -> ThumbWalls:
    """Walls for a single-row thumb cluster, keys indexed west to east."""
    params = params or WallParams()
    if not keys:
        raise InvalidParamsError("Thumb cluster needs at least one key")

    def drawn(key: KeyHole, side: Side, presence: Presence) -> Wall | None:
        p = _params_for(presence, params)
        return None if p is None else build_wall(key, side, p)

    walls = {
        i: ColumnWalls(
            north=drawn(k, Side.NORTH, north_lookup(i)),
            south=drawn(k, Side.SOUTH, south_lookup(i)),
        )
        for i, k in sorted(keys.items())
    }
    return ThumbWalls(
        keys=walls,
        west=drawn(keys[min(keys)], Side.WEST, west),
        east=drawn(keys[max(keys)], Side.EAST, east),
    )
