"""Walls running from a key face down to the ground plane."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from manifold3d import Manifold

from keywalls.config import WallParams, steps_to_int
from keywalls.errors import InvalidParamsError
from keywalls.geometry.bezier import blend, loft, quad_bezier
from keywalls.geometry.booleans import union_all
from keywalls.geometry.primitives import hull_points
from keywalls.geometry.transforms import normalize, rotate_about_axis, rotate_solid
from keywalls.walls.edge import EdgeDrawer, Edges, Points, make_edge_drawer
from keywalls.walls.keyhole import Column, KeyFace, KeyHole, Side
from keywalls.walls.screw import Screw, attach, place_eyelet

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Wall:
    """A wall solid plus the curves and corner points it was built from."""

    solid: Manifold
    start: Points  # corners the wall emerges from, clearance applied
    foot: Points  # corners on the ground (z = 0)
    edges: Edges
    edge_drawer: EdgeDrawer
    screw: Screw | None = None

    def start_direction(self) -> np.ndarray:
        """Unit vector from the right to the left start corners."""
        return normalize(self.start.top_left - self.start.top_right)

    def foot_direction(self) -> np.ndarray:
        """Unit xy vector from the right to the left foot corners."""
        d = self.foot.top_left - self.foot.top_right
        d[2] = 0.0
        return normalize(d)

    def translate(self, offset) -> Wall:
        d = np.asarray(offset, dtype=np.float64)
        return Wall(
            solid=self.solid.translate(list(d)),
            start=self.start.translate(d),
            foot=self.foot.translate(d),
            edges=self.edges.translate(d),
            edge_drawer=self.edge_drawer.translate(d),
            screw=None if self.screw is None else self.screw.translate(d),
        )

    def rotate(self, degrees: tuple[float, float, float], about=None) -> Wall:
        """Rotate by Euler angles (degrees) around a pivot, origin by default."""
        return Wall(
            solid=rotate_solid(self.solid, degrees, about),
            start=self.start.rotate(degrees, about),
            foot=self.foot.rotate(degrees, about),
            edges=self.edges.rotate(degrees, about),
            edge_drawer=self.edge_drawer.rotate(degrees, about),
            screw=None if self.screw is None else self.screw.rotate(degrees, about),
        )

    def mirror(self, normal=(1.0, 0.0, 0.0)) -> Wall:
        """Reflect through the plane at the origin with the given normal.

        The default normal flips x, turning a left-hand wall into its
        right-hand twin. Left and right corners swap with the reflection.
        """
        return Wall(
            solid=self.solid.mirror(list(normal)),
            start=self.start.mirror(normal),
            foot=self.foot.mirror(normal),
            edges=self.edges.mirror(normal),
            edge_drawer=self.edge_drawer.mirror(normal),
            screw=None if self.screw is None else self.screw.mirror(normal),
        )


def swing_face(key_origin, face: KeyFace, step: float = 7.5) -> tuple[KeyFace, np.ndarray]:
    """Pivot a tilted key face towards vertical.

    A face pointing up (away from key_origin) pivots around its bottom
    edge, one pointing down around its top edge. It turns in `step` degree
    increments for as long as each turn brings the normal closer to
    horizontal without crossing it.

    Returns:
        The pivoted face and its new outward normal. An upright face comes
        back unchanged.
    """
    normal = face.normal
    if (face.points.centre - np.asarray(key_origin, dtype=np.float64)) @ normal < 0:
        normal = -normal
    z = normal[2]
    if abs(z) < 1e-9:
        return face, normal
    if z > 0:
        pivot, axis = face.points.bot_left, face.points.bot_right - face.points.bot_left
    else:
        pivot, axis = face.points.top_left, face.points.top_right - face.points.top_left

    def turned(angle: float) -> np.ndarray:
        return rotate_about_axis(normal, axis, angle)

    sign = 1.0 if abs(turned(step)[2]) < abs(z) else -1.0
    angle, best = 0.0, normal
    while True:
        nxt = turned(angle + sign * step)
        if nxt[2] * z <= 0 or abs(nxt[2]) >= abs(best[2]):
            break
        angle, best = angle + sign * step, nxt
    if angle == 0.0:
        return face, normal

    pivoted = KeyFace(
        points=face.points.map(lambda p: rotate_about_axis(p, axis, angle, pivot)),
        normal=normalize(best),
    )
    return pivoted, pivoted.normal


def _outward_xy(normal: np.ndarray) -> np.ndarray:
    xy = np.array([normal[0], normal[1], 0.0])
    if np.linalg.norm(xy) < 1e-9:
        raise InvalidParamsError("Key face normal points straight up or down")
    return normalize(xy)


def _facet_ring(edges: Edges, n_facets: int) -> list:
    """Clockwise edge ring with extra blended edges along both wall faces."""
    outer = [blend(edges.top_left, edges.top_right, i / n_facets) for i in range(1, n_facets)]
    inner = [blend(edges.bot_right, edges.bot_left, i / n_facets) for i in range(1, n_facets)]
    return [edges.top_left, *outer, edges.top_right, edges.bot_right, *inner, edges.bot_left]


def build_wall(keyhole: KeyHole, side: Side, params: WallParams | None = None) -> Wall:
    """Draw a wall from the side face of a key aperture down to the ground.

    A tilted face is first pivoted upright with swing_face (unless
    params.swing is off) and the wedge between the two is kept.
    Each corner of the face (pushed out by the clearance) becomes a
    quadratic Bezier whose middle control point sits d1 out along the
    face's horizontal normal and whose end sits d2 out on the ground.
    Outer (top) corners are pushed out a further wall thickness.
    """
    params = params or WallParams()
    face = keyhole.face(side)
    xy = _outward_xy(face.normal)
    wedge = None
    if params.swing:
        swung, _ = swing_face(keyhole.origin, face, params.swing_step)
        if swung is not face:
            # Fill the gap between the aperture face and its pivoted copy
            wedge = hull_points(
                np.vstack(face.points.to_clockwise_list() + swung.points.to_clockwise_list())
            )
            face = swung
            xy = _outward_xy(face.normal)
    start = face.points.map(lambda p: p + face.normal * params.clearance)
    shift = np.array([params.x_off, params.y_off, 0.0])
    hop = np.array([0.0, 0.0, params.z_off])

    def get_bez(top: bool, p1: np.ndarray):
        jog = params.thickness if top else 0.0
        p2 = p1 + xy * (params.d1 + jog) + hop
        p3 = np.array([p1[0], p1[1], 0.0]) + xy * (params.d2 + jog) + shift
        return quad_bezier(p1, p2, p3)

    edges = Edges(
        top_left=get_bez(True, start.top_left),
        top_right=get_bez(True, start.top_right),
        bot_right=get_bez(False, start.bot_right),
        bot_left=get_bez(False, start.bot_left),
    )
    foot = edges.points_at(1.0)

    z = max(p[2] for p in start.to_clockwise_list())
    n_steps = steps_to_int(params.n_steps, z)
    logger.debug(
        "Wall %s: height %.2f -> %d steps, %d facets",
        side.value, z, n_steps, params.n_facets,
    )
    solid = loft(_facet_ring(edges, params.n_facets), n_steps, arity=2 + 2 * params.n_facets)
    if wedge is not None:
        solid = union_all([solid, wedge], "swung wall")

    screw = None
    if params.screw_config is not None:
        screw = place_eyelet(params.screw_config, foot, xy)

    return Wall(
        solid=attach(solid, screw),
        start=start,
        foot=foot,
        edges=edges,
        edge_drawer=make_edge_drawer(get_bez, start),
        screw=screw,
    )


def _x_extent(keyhole: KeyHole, side: Side) -> tuple[float, float]:
    xs = [p[0] for p in keyhole.face(side).points.to_clockwise_list()]
    return min(xs), max(xs)


def column_drop(
    columns: dict[int, Column],
    side: Side,
    idx: int,
    spacing: float,
    params: WallParams | None = None,
) -> Wall:
    """Wall for the north or south end of column idx.

    Tilting a column can push its end face over the next column to the
    east. When that face (plus spacing) reaches past the neighbour's end
    face, the wall's ground target is shifted west to restore the gap.
    """
    if side not in (Side.NORTH, Side.SOUTH):
        raise InvalidParamsError(f"column_drop only builds north/south walls, got {side}")
    params = params or WallParams()
    key = columns[idx].end_key(side)

    nxt = columns.get(idx + 1)
    if nxt is not None and nxt.keys:
        _, right_x = _x_extent(key, side)
        next_left_x, _ = _x_extent(nxt.end_key(side), side)
        overhang = right_x + spacing - next_left_x
        if overhang > 0:
            logger.debug("Column %d %s overhangs by %.3f", idx, side.value, overhang)
            params = params.model_copy(update={"x_off": params.x_off - overhang})

    return build_wall(key, side, params)
