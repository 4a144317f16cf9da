"""Bridges between pairs of walls.

Every strategy takes a source wall w1 (bridged from its right end) and a
destination wall w2 (bridged to its left end) and returns a standalone
solid. Bridge ends are pushed slightly into both walls so the later
union never has to resolve a zero-thickness contact.
"""

from __future__ import annotations

import logging

import numpy as np
from manifold3d import Manifold

from keywalls.config import (
    CubicParams,
    ElbowParams,
    JoinParams,
    SnakeParams,
    StraightParams,
)
from keywalls.geometry.bezier import (
    cubic_bezier,
    discretize,
    discretize_reversed,
    loft,
    prism,
    quad_bezier,
)
from keywalls.geometry.booleans import union_all
from keywalls.geometry.transforms import normalize
from keywalls.walls.edge import Hand, point_at_height
from keywalls.walls.wall import Wall

logger = logging.getLogger(__name__)

XY = np.array([1.0, 1.0, 0.0])


def base_endpoints(wall: Wall, hand: Hand, height: float, max_iter: int = 100,
                   tolerance: float = 0.001) -> list[np.ndarray]:
    """Quad at one end of a wall: inner foot, outer foot, outer and inner at height."""
    top, bot = hand.corners
    return [
        wall.foot.get(bot),
        wall.foot.get(top),
        point_at_height(wall.edges.get(top), height, max_iter, tolerance),
        point_at_height(wall.edges.get(bot), height, max_iter, tolerance),
    ]


def base_steps(n_steps: int, starts: list, dests: list) -> list[int]:
    """Per-curve step counts scaled by length; the shortest gets n_steps."""
    norms = [float(np.linalg.norm(s - d)) for s, d in zip(starts, dests)]
    lowest = max(min(norms), 1e-9)
    return [max(1, int(n / lowest * n_steps)) for n in norms]


def _endpoints(w1: Wall, w2: Wall, p) -> tuple[list, list]:
    return (
        base_endpoints(w1, Hand.RIGHT, p.height, p.max_iter, p.tolerance),
        base_endpoints(w2, Hand.LEFT, p.height, p.max_iter, p.tolerance),
    )


def _axis_mask(direction: np.ndarray) -> np.ndarray:
    """Unit mask for whichever of x or y dominates a direction."""
    if abs(direction[0]) > abs(direction[1]):
        return np.array([1.0, 0.0, 0.0])
    return np.array([0.0, 1.0, 0.0])


def _major_minor(w1: Wall, w2: Wall) -> tuple[float, float, float]:
    """Gap between the facing wall ends along w1's major and minor axes.

    Returns (major_diff, minor_diff, major_axis_component of w1's direction).
    """
    dx, dy, _ = w1.foot_direction()
    x, y, _ = (
        np.mean([w1.foot.bot_right, w1.foot.top_right], axis=0)
        - np.mean([w2.foot.bot_left, w2.foot.top_left], axis=0)
    )
    if abs(dx) > abs(dy):
        return x, y, dx
    return y, x, dy


def _overlap(major_diff: float, major_ax: float, fudge: float) -> float:
    """How far to pull the start back: the overlap if footprints cross."""
    if np.sign(major_diff) != np.sign(major_ax):
        return abs(major_diff)
    return fudge


def bezier_elbow(w1: Wall, w2: Wall, params: ElbowParams | None = None) -> Manifold:
    """Single-bend quadratic bridge for walls meeting near a right angle."""
    p = params or ElbowParams()
    dir1, dir2 = w1.foot_direction(), w2.foot_direction()
    mask = _axis_mask(dir1)

    def get_bez(start, dest):
        return quad_bezier(
            start + dir1 * XY * p.union_fudge,
            start + mask * (dest - start),
            dest - dir2 * XY * p.union_fudge,
        )

    starts, dests = _endpoints(w1, w2, p)
    steps = base_steps(p.n_steps, starts, dests)
    return loft([get_bez(s, d) for s, d in zip(starts, dests)], steps, arity=4)


def _bow_width(w1: Wall, scale: float) -> float:
    return float(np.linalg.norm(w1.foot.top_right - w1.foot.bot_right)) * scale


def cubic_bow(w1: Wall, w2: Wall, params: CubicParams | None = None) -> Manifold:
    """Double-bend bridge; the outer pair of control points bows further out."""
    p = params or CubicParams()
    dir1, dir2 = w1.foot_direction(), w2.foot_direction()
    width = _bow_width(w1, p.scale)

    def get_bez(outer, start, dest):
        out = (width + p.d if outer and p.bow_out else p.d) * XY
        return cubic_bezier(
            start + dir1 * XY * p.union_fudge,
            start - dir1 * out,
            dest + dir2 * out,
            dest - dir2 * XY * p.union_fudge,
        )

    starts, dests = _endpoints(w1, w2, p)
    steps = base_steps(p.n_steps, starts, dests)
    flags = [False, True, True, False]
    return loft([get_bez(f, s, d) for f, s, d in zip(flags, starts, dests)], steps, arity=4)


def snake_bow(w1: Wall, w2: Wall, params: SnakeParams | None = None) -> Manifold:
    """Double-bend bridge bowed evenly: each pair swaps which end bows wide."""
    p = params or SnakeParams()
    dir1, dir2 = w1.foot_direction(), w2.foot_direction()
    dist = p.d * XY
    wide = (_bow_width(w1, p.scale) + p.d) * XY

    def get_bez(outer, start, dest):
        return cubic_bezier(
            start + dir1 * XY * p.union_fudge,
            start - dir1 * (dist if outer else wide),
            dest + dir2 * (wide if outer else dist),
            dest - dir2 * XY * p.union_fudge,
        )

    starts, dests = _endpoints(w1, w2, p)
    steps = base_steps(p.n_steps, starts, dests)
    flags = [False, True, True, False]
    return loft([get_bez(f, s, d) for f, s, d in zip(flags, starts, dests)], steps, arity=4)


def inward_elbow(w1: Wall, w2: Wall, params: ElbowParams | None = None) -> Manifold:
    """Quadratic bridge starting from the inner face of w1 rather than its end."""
    p = params or ElbowParams()
    dir1, dir2 = w1.foot_direction(), w2.foot_direction()
    inward = normalize(w1.foot.bot_right - w1.foot.top_right)
    mask = _axis_mask(inward)

    def get_bez(start, dest):
        return quad_bezier(
            start - inward * XY * p.union_fudge,
            start + mask * (dest - start),
            dest - dir2 * XY * p.union_fudge,
        )

    up_bot = point_at_height(w1.edges.bot_right, p.height, p.max_iter, p.tolerance)
    w = float(np.linalg.norm(w1.foot.bot_right - w1.foot.top_right))

    def slide(pt):
        return pt + dir1 * XY * w

    starts = [slide(w1.foot.bot_right), w1.foot.bot_right, up_bot, slide(up_bot)]
    dests = base_endpoints(w2, Hand.LEFT, p.height, p.max_iter, p.tolerance)
    steps = base_steps(p.n_steps, starts, dests)
    return loft([get_bez(s, d) for s, d in zip(starts, dests)], steps, arity=4)


def straight(w1: Wall, w2: Wall, params: StraightParams | None = None) -> Manifold:
    """Flat prism between the facing ends of two gently angled walls."""
    p = params or StraightParams()
    dir1, dir2 = w1.foot_direction(), w2.foot_direction()
    major_diff, minor_diff, major_ax = _major_minor(w1, w2)

    # Inner points are slid along the wall to keep steep joins from folding
    extra = 0.0
    if abs(minor_diff) > abs(major_diff):
        extra = abs(min(abs(major_diff) - p.fudge_factor, 0.0))

    def fudge(d, pt):
        return pt + d * XY * extra

    overlap = _overlap(major_diff, major_ax, p.union_fudge)
    outward = np.linalg.norm(w1.foot.top_right - w2.foot.top_left) > np.linalg.norm(
        w1.foot.top_right - w2.foot.bot_left
    )
    logger.debug(
        "straight: major %.3f minor %.3f overlap %.3f extra %.3f outward %s",
        major_diff, minor_diff, overlap, extra, outward,
    )

    s_top = point_at_height(w1.edges.top_right, p.height, p.max_iter, p.tolerance)
    s_bot = point_at_height(w1.edges.bot_right, p.height, p.max_iter, p.tolerance)
    starts = [
        w1.foot.bot_right if outward else fudge(dir1, w1.foot.bot_right),
        w1.foot.top_right,
        s_top,
        s_bot if outward else fudge(dir1, s_bot),
    ]
    starts = [pt + dir1 * XY * overlap for pt in starts]

    d_top = point_at_height(w2.edges.top_left, p.height, p.max_iter, p.tolerance)
    d_bot = point_at_height(w2.edges.bot_left, p.height, p.max_iter, p.tolerance)
    dests = [
        fudge(-dir2, w2.foot.bot_left) if outward else w2.foot.bot_left,
        w2.foot.top_left,
        d_top,
        fudge(-dir2, d_bot) if outward else d_bot,
    ]
    dests = [pt - dir2 * XY * p.dest_fudge for pt in dests]
    return prism(starts, dests)


def _mapped(edge, f):
    return lambda t: f(edge(t))


def boundary_loop(wall: Wall, hand: Hand, n_steps: int, edge_map=None) -> list[np.ndarray]:
    """Full side outline of a wall end: top edge foot-to-start, then bottom edge back down.

    edge_map optionally adjusts points of the top edge.
    """
    top_corner, bot_corner = hand.corners
    top = wall.edges.get(top_corner)
    if edge_map is not None:
        top = _mapped(top, edge_map)
    return discretize_reversed(top, n_steps, init=discretize(wall.edges.get(bot_corner), n_steps))


def join_edges(w1: Wall, w2: Wall, params: JoinParams | None = None) -> Manifold:
    """Loft between the whole side outlines of two walls meeting up high.

    A thin wedge also fills the sliver left between the two walls at
    their key face starts.
    """
    p = params or JoinParams()
    dir1, dir2 = w1.foot_direction(), w2.foot_direction()
    major_diff, minor_diff, major_ax = _major_minor(w1, w2)

    # Slide destination points along w2's outer face to improve the angle
    extra = 0.0
    if abs(minor_diff) > p.fudge_factor:
        extra = abs(min(abs(major_diff) - p.fudge_factor, 0.0))

    def fudge(pt):
        return pt - dir2 * XY * extra

    overlap = _overlap(major_diff, major_ax, p.union_fudge)

    starts = [pt + dir1 * XY * overlap for pt in boundary_loop(w1, Hand.RIGHT, p.n_steps)]
    dests = [
        pt - dir2 * XY * p.union_fudge
        for pt in boundary_loop(w2, Hand.LEFT, p.n_steps, edge_map=fudge)
    ]

    sdir1, sdir2 = w1.start_direction(), w2.start_direction()
    wedge = prism(
        [
            pt + sdir1 * overlap
            for pt in (w1.start.top_right, w1.edges.bot_right(0.0), w1.edges.top_right(0.0001))
        ],
        [
            pt - sdir2 * p.union_fudge
            for pt in (w2.start.top_left, w2.edges.bot_left(0.0), fudge(w2.edges.top_left(0.0001)))
        ],
    )
    return union_all([prism(starts, dests), wedge])
