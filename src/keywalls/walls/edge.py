"""Wall edge curves, corner records, and the point-at-height search."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable

import numpy as np

from keywalls.errors import ConvergenceError, InvalidParamsError
from keywalls.geometry.bezier import Curve
from keywalls.geometry.transforms import mirror_point, rotate_point, unrotate_point


# An edge runs from a key face corner (t=0) down to the ground (t=1).
Edge = Curve


class Corner(enum.Enum):
    """Wall corners, in clockwise order.

    Left and right are as seen from the key looking out through the face.
    Top corners come from the key's top surface and form the outer face
    of the wall; bottom corners form the inner face.
    """

    TOP_LEFT = "top_left"
    TOP_RIGHT = "top_right"
    BOTTOM_RIGHT = "bot_right"
    BOTTOM_LEFT = "bot_left"


CLOCKWISE = (Corner.TOP_LEFT, Corner.TOP_RIGHT, Corner.BOTTOM_RIGHT, Corner.BOTTOM_LEFT)


class Hand(enum.Enum):
    """Which end of a wall a bridge attaches to."""

    LEFT = "left"
    RIGHT = "right"

    @property
    def corners(self) -> tuple[Corner, Corner]:
        """(top, bottom) corners on this end."""
        if self is Hand.LEFT:
            return Corner.TOP_LEFT, Corner.BOTTOM_LEFT
        return Corner.TOP_RIGHT, Corner.BOTTOM_RIGHT


@dataclass(frozen=True, eq=False)
class Points:
    """Snapshot of the four wall corners."""

    top_left: np.ndarray
    top_right: np.ndarray
    bot_right: np.ndarray
    bot_left: np.ndarray

    def get(self, corner: Corner) -> np.ndarray:
        return getattr(self, corner.value)

    def to_clockwise_list(self) -> list[np.ndarray]:
        return [self.get(c) for c in CLOCKWISE]

    @classmethod
    def of_clockwise_list(cls, points: list) -> Points:
        """Build from [TL, TR, BR, BL]."""
        if len(points) != 4:
            raise InvalidParamsError(f"Points needs 4 corners, got {len(points)}")
        return cls(*(np.asarray(p, dtype=np.float64) for p in points))

    def map(self, f: Callable[[np.ndarray], np.ndarray]) -> Points:
        return Points.of_clockwise_list([f(p) for p in self.to_clockwise_list()])

    def translate(self, offset) -> Points:
        d = np.asarray(offset, dtype=np.float64)
        return self.map(lambda p: p + d)

    def rotate(self, degrees: tuple[float, float, float], about=None) -> Points:
        return self.map(lambda p: rotate_point(p, degrees, about))

    def mirror(self, normal=(1.0, 0.0, 0.0)) -> Points:
        """Reflect through the plane at the origin with the given normal.

        Left and right swap so corners keep their meaning on the mirrored wall.
        """
        m = [mirror_point(p, normal) for p in self.to_clockwise_list()]
        tl, tr, br, bl = m
        return Points.of_clockwise_list([tr, tl, bl, br])

    @property
    def centre(self) -> np.ndarray:
        return np.mean(self.to_clockwise_list(), axis=0)


@dataclass(frozen=True, eq=False)
class Edges:
    """The four edge curves running from a wall's start to its foot."""

    top_left: Edge
    top_right: Edge
    bot_right: Edge
    bot_left: Edge

    def get(self, corner: Corner) -> Edge:
        return getattr(self, corner.value)

    def to_clockwise_list(self) -> list[Edge]:
        return [self.get(c) for c in CLOCKWISE]

    @classmethod
    def of_clockwise_list(cls, edges: list[Edge]) -> Edges:
        """Build from [TL, TR, BR, BL]."""
        if len(edges) != 4:
            raise InvalidParamsError(f"Edges needs 4 curves, got {len(edges)}")
        return cls(*edges)

    def points_at(self, t: float) -> Points:
        """Corner snapshot at curve parameter t."""
        return Points.of_clockwise_list([e(t) for e in self.to_clockwise_list()])

    def map(self, f: Callable[[np.ndarray], np.ndarray]) -> Edges:
        """Apply a point transform to every point along every edge."""
        return Edges.of_clockwise_list([_mapped(e, f) for e in self.to_clockwise_list()])

    def translate(self, offset) -> Edges:
        d = np.asarray(offset, dtype=np.float64)
        return self.map(lambda p: p + d)

    def rotate(self, degrees: tuple[float, float, float], about=None) -> Edges:
        return self.map(lambda p: rotate_point(p, degrees, about))

    def mirror(self, normal=(1.0, 0.0, 0.0)) -> Edges:
        tl, tr, br, bl = (
            _mapped(e, lambda p: mirror_point(p, normal)) for e in self.to_clockwise_list()
        )
        return Edges.of_clockwise_list([tr, tl, bl, br])


def _mapped(edge: Edge, f: Callable[[np.ndarray], np.ndarray]) -> Edge:
    return lambda t: f(edge(t))


def point_at_height(
    edge: Edge,
    z: float,
    max_iter: int = 100,
    tolerance: float = 0.001,
) -> np.ndarray:
    """Find the point on an edge at height z by bisection.

    Assumes z varies monotonically along the edge.

    Raises:
        ConvergenceError: if z lies outside the edge's height range, or
            the search exhausts max_iter without reaching tolerance. The
            best estimate found is attached as ``best``.
    """
    lo, hi = 0.0, 1.0
    p_lo, p_hi = edge(lo), edge(hi)
    if abs(p_lo[2] - z) <= tolerance:
        return p_lo
    if abs(p_hi[2] - z) <= tolerance:
        return p_hi
    z_min, z_max = sorted((p_lo[2], p_hi[2]))
    if not z_min <= z <= z_max:
        raise ConvergenceError(
            f"Height {z:.3f} is outside edge range [{z_min:.3f}, {z_max:.3f}]"
        )

    descending = p_lo[2] > p_hi[2]
    best = p_lo
    for _ in range(max_iter):
        mid = (lo + hi) / 2.0
        p = edge(mid)
        best = p
        diff = p[2] - z
        if abs(diff) <= tolerance:
            return p
        # Move toward z keeping it bracketed between lo and hi
        if (diff > 0) == descending:
            lo = mid
        else:
            hi = mid
    raise ConvergenceError(
        f"No point within {tolerance} of z={z:.3f} after {max_iter} iterations",
        best=best,
    )


Drawer = Callable[[np.ndarray], Edge]


@dataclass(frozen=True)
class EdgeDrawer:
    """Draws edges to the ground from arbitrary points along a wall's start.

    Each drawer takes a point (only x and y are used) and returns an edge
    starting from the nearest point on the top or bottom start segment.
    """

    top: Drawer
    bot: Drawer

    def map(
        self,
        f: Callable[[np.ndarray], np.ndarray],
        inverse: Callable[[np.ndarray], np.ndarray],
    ) -> EdgeDrawer:
        """Transform drawn edges by f; query points are taken back by inverse."""

        def wrap(draw: Drawer) -> Drawer:
            return lambda p: _mapped(draw(inverse(np.asarray(p, dtype=np.float64))), f)

        return EdgeDrawer(top=wrap(self.top), bot=wrap(self.bot))

    def translate(self, offset) -> EdgeDrawer:
        d = np.asarray(offset, dtype=np.float64)
        return self.map(lambda p: p + d, lambda p: p - d)

    def rotate(self, degrees: tuple[float, float, float], about=None) -> EdgeDrawer:
        return self.map(
            lambda p: rotate_point(p, degrees, about),
            lambda p: unrotate_point(p, degrees, about),
        )

    def mirror(self, normal=(1.0, 0.0, 0.0)) -> EdgeDrawer:
        def flip(p):
            return mirror_point(p, normal)

        return self.map(flip, flip)


def _closest_on_segment_xy(a: np.ndarray, b: np.ndarray, p: np.ndarray) -> np.ndarray:
    ab = (b - a)[:2]
    denom = float(ab @ ab)
    if denom < 1e-12:
        return a
    t = float(np.clip(((p[:2] - a[:2]) @ ab) / denom, 0.0, 1.0))
    return a + (b - a) * t


def make_edge_drawer(
    get_bez: Callable[[bool, np.ndarray], Edge],
    start: Points,
) -> EdgeDrawer:
    """Edge drawer for a wall whose corner edges come from get_bez(top, start)."""

    def top(p: np.ndarray) -> Edge:
        q = _closest_on_segment_xy(start.top_left, start.top_right, np.asarray(p))
        return get_bez(True, q)

    def bot(p: np.ndarray) -> Edge:
        q = _closest_on_segment_xy(start.bot_left, start.bot_right, np.asarray(p))
        return get_bez(False, q)

    return EdgeDrawer(top=top, bot=bot)
