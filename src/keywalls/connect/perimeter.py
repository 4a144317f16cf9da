"""Perimeter assembly: chain wall bridges around the whole key layout.

Wall maps are sparse. Along a row of columns a missing wall breaks the
chain at that point. The west and east side walls are chained over the
walls that are present only, so a gap in a side is spanned by a single
join between its neighbours.
"""

from __future__ import annotations

import logging
from typing import Callable

from manifold3d import Manifold

from keywalls.config import (
    ClosedParams,
    CubicParams,
    ElbowParams,
    JoinParams,
    LinkParams,
    SkeletonParams,
    StraightParams,
)
from keywalls.connect.strategies import (
    bezier_elbow,
    cubic_bow,
    inward_elbow,
    join_edges,
    snake_bow,
    straight,
)
from keywalls.geometry.booleans import union_all
from keywalls.walls.keyhole import Side
from keywalls.walls.maps import CaseWalls, ThumbWalls
from keywalls.walls.wall import Wall

logger = logging.getLogger(__name__)

Joiner = Callable[[Wall, Wall], Manifold]


def _join(f: Joiner, w1: Wall | None, w2: Wall | None) -> Manifold | None:
    """Bridge two optional walls; None when either is absent."""
    if w1 is None or w2 is None:
        return None
    return f(w1, w2)


def _chain(f: Joiner, walls: list[Wall | None]) -> list[Manifold]:
    """Bridge each consecutive pair of a wall sequence, skipping any gap."""
    return [
        j for j in (_join(f, a, b) for a, b in zip(walls, walls[1:])) if j is not None
    ]


def _present(d: dict[int, Wall | None]) -> list[Wall]:
    """Walls of a sparse side map in row order, missing rows dropped."""
    return [d[k] for k in sorted(d) if d[k] is not None]


def _first(d: dict[int, Wall | None]) -> Wall | None:
    present = _present(d)
    return present[0] if present else None


def _last(d: dict[int, Wall | None]) -> Wall | None:
    present = _present(d)
    return present[-1] if present else None


def _link(params: LinkParams) -> Joiner:
    """Bridge function for a thumb link, chosen by its params kind."""
    bridges = {"snake": snake_bow, "cubic": cubic_bow, "straight": straight}
    bridge = bridges[params.kind]
    return lambda a, b: bridge(a, b, params)


def _thumb_bridges(thumb: ThumbWalls, p: SkeletonParams) -> list[Manifold | None]:
    """Bridges around the thumb cluster itself, without the body links."""
    keys = sorted(thumb.keys)
    first, last = keys[0], keys[-1]
    corner = JoinParams(n_steps=p.thumb_join_steps, fudge_factor=0.0)
    hk = {} if p.thumb_height is None else {"height": p.thumb_height}

    def join_corner(a, b):
        return join_edges(a, b, corner)

    parts: list[Manifold | None] = [
        _join(join_corner, thumb.key(Side.SOUTH, first), thumb.west),
        _join(join_corner, thumb.west, thumb.key(Side.NORTH, first)),
    ]
    if not p.close_thumb:
        parts.append(
            _join(
                lambda a, b: bezier_elbow(a, b, ElbowParams(n_steps=p.n_steps, **hk)),
                thumb.key(Side.SOUTH, last),
                thumb.key(Side.SOUTH, first),
            )
        )
        return parts

    thumb_join = JoinParams(n_steps=p.thumb_join_steps)

    def join(a, b):
        return join_edges(a, b, thumb_join)

    parts += _chain(join, [thumb.key(Side.NORTH, k) for k in keys])
    parts += _chain(join, [thumb.key(Side.SOUTH, k) for k in reversed(keys)])
    if thumb.east is not None:
        parts += [
            _join(join_corner, thumb.key(Side.NORTH, last), thumb.east),
            _join(join_corner, thumb.east, thumb.key(Side.SOUTH, last)),
        ]
    else:
        cubic = CubicParams(d=p.cubic_d, scale=p.cubic_scale, n_steps=p.n_steps, **hk)
        parts.append(
            _join(
                lambda a, b: cubic_bow(a, b, cubic),
                thumb.key(Side.NORTH, last),
                thumb.key(Side.SOUTH, last),
            )
        )
    return parts


def skeleton_perimeter(walls: CaseWalls, params: SkeletonParams | None = None) -> Manifold:
    """Open outline of ground-level bridges around body and thumb cluster.

    East side walls of the body are not bridged; the last column is
    closed off by a cubic bow from its north wall to its south wall.
    """
    p = params or SkeletonParams()
    body = walls.body
    n_cols = body.n_cols
    col = body.col

    hk = {} if p.height is None else {"height": p.height}

    def straight_at(h: float | None) -> Joiner:
        sp = StraightParams(fudge_factor=p.fudge_factor, **({} if h is None else {"height": h}))
        return lambda a, b: straight(a, b, sp)

    body_join = JoinParams(n_steps=p.body_join_steps)
    elbow = ElbowParams(n_steps=p.n_steps, **hk)
    parts: list[Manifold | None] = []

    parts += _chain(lambda a, b: join_edges(a, b, body_join), _present(body.west))
    parts.append(
        _join(
            lambda a, b: bezier_elbow(a, b, ElbowParams(height=p.index_height, n_steps=p.n_steps)),
            _last(body.west),
            col(Side.NORTH, 0),
        )
    )
    for i in range(n_cols - 1):
        h = p.index_height if i == 0 else p.height
        parts.append(_join(straight_at(h), col(Side.NORTH, i), col(Side.NORTH, i + 1)))

    cubic = CubicParams(d=p.cubic_d, scale=p.cubic_scale, n_steps=p.n_steps, **hk)
    parts.append(
        _join(
            lambda a, b: cubic_bow(a, b, cubic),
            col(Side.NORTH, n_cols - 1),
            col(Side.SOUTH, n_cols - 1),
        )
    )

    def inward(a, b):
        return inward_elbow(a, b, elbow)

    for idx in range(n_cols - 1, 0, -1):
        f = inward if idx == p.pinky_idx else straight_at(p.height)
        parts.append(_join(f, col(Side.SOUTH, idx), col(Side.SOUTH, idx - 1)))

    if walls.thumb is not None and walls.thumb.keys:
        thumb = walls.thumb
        first, last = min(thumb.keys), max(thumb.keys)
        parts += _thumb_bridges(thumb, p)
        parts += [
            _join(
                _link(p.east_link),
                col(Side.SOUTH, p.thumb_link_col),
                thumb.key(Side.SOUTH, last),
            ),
            _join(_link(p.west_link), thumb.key(Side.NORTH, first), _first(body.west)),
        ]

    present = [m for m in parts if m is not None]
    logger.info("Skeleton perimeter: %d bridges over %d columns", len(present), n_cols)
    return union_all(present, "skeleton bridges")


def closed_perimeter(walls: CaseWalls, params: ClosedParams | None = None) -> Manifold:
    """Enclosed outline of full-height joins around the main body.

    The thumb cluster is not closed off yet; without one, the south-west
    corner of the body is closed instead.
    """
    p = params or ClosedParams()
    body = walls.body
    n_cols = body.n_cols
    col = body.col

    side_join = JoinParams(n_steps=p.n_steps, fudge_factor=p.fudge_factor)
    corner_join = JoinParams(n_steps=p.n_steps, fudge_factor=0.0)

    def join(a, b):
        return join_edges(a, b, side_join)

    def corner(a, b):
        return join_edges(a, b, corner_join)

    columns = range(min(body.cols), max(body.cols) + 1) if body.cols else range(0)

    parts: list[Manifold | None] = []
    parts += _chain(join, _present(body.west))
    parts += _chain(join, _present(body.east)[::-1])
    parts += _chain(join, [col(Side.NORTH, i) for i in columns])
    parts += _chain(join, [col(Side.SOUTH, i) for i in reversed(columns)])

    parts += [
        _join(corner, _last(body.west), col(Side.NORTH, 0)),
        _join(corner, col(Side.NORTH, n_cols - 1), _last(body.east)),
        _join(corner, body.east.get(0), col(Side.SOUTH, n_cols - 1)),
    ]
    if walls.thumb is None:
        parts.append(_join(corner, col(Side.SOUTH, 0), body.west.get(0)))

    present = [m for m in parts if m is not None]
    logger.info("Closed perimeter: %d joins over %d columns", len(present), n_cols)
    return union_all(present, "closed joins")
