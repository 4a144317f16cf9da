"""Bezier curve construction, sampling, and lofting into solids.

A curve is any callable mapping t in [0, 1] to a 3D point. Lofting takes
a ring of such curves (one per polygon vertex, clockwise) and stitches
their samples into a closed polyhedron whose caps are the rings of first
and last samples.
"""

from __future__ import annotations

from typing import Callable, Sequence

import numpy as np
from manifold3d import Manifold

from keywalls.errors import InvalidParamsError
from keywalls.geometry.primitives import polyhedron

Curve = Callable[[float], np.ndarray]


def _vec(p) -> np.ndarray:
    return np.asarray(p, dtype=np.float64)


def quad_bezier(p1, p2, p3) -> Curve:
    """Quadratic Bezier through p1 and p3, pulled toward p2."""
    p1, p2, p3 = _vec(p1), _vec(p2), _vec(p3)

    def curve(t: float) -> np.ndarray:
        u = 1.0 - t
        return u * u * p1 + 2.0 * u * t * p2 + t * t * p3

    return curve


def cubic_bezier(p1, p2, p3, p4) -> Curve:
    """Cubic Bezier through p1 and p4 with control points p2 and p3."""
    p1, p2, p3, p4 = _vec(p1), _vec(p2), _vec(p3), _vec(p4)

    def curve(t: float) -> np.ndarray:
        u = 1.0 - t
        return (
            u * u * u * p1
            + 3.0 * u * u * t * p2
            + 3.0 * u * t * t * p3
            + t * t * t * p4
        )

    return curve


def line(p1, p2) -> Curve:
    """Straight segment from p1 to p2."""
    p1, p2 = _vec(p1), _vec(p2)
    d = p2 - p1

    def curve(t: float) -> np.ndarray:
        return p1 + d * t

    return curve


def blend(a: Curve, b: Curve, frac: float) -> Curve:
    """Curve interpolated between two curves at the same parameter."""

    def curve(t: float) -> np.ndarray:
        return a(t) * (1.0 - frac) + b(t) * frac

    return curve


def discretize(curve: Curve, n_steps: int) -> list[np.ndarray]:
    """Sample n_steps + 1 points from t=0 to t=1."""
    if n_steps < 1:
        raise InvalidParamsError(f"n_steps must be at least 1, got {n_steps}")
    return [curve(i / n_steps) for i in range(n_steps + 1)]


def discretize_reversed(
    curve: Curve,
    n_steps: int,
    init: Sequence[np.ndarray] | None = None,
) -> list[np.ndarray]:
    """Sample n_steps + 1 points from t=1 back to t=0, followed by init.

    Seeding with another curve's forward samples joins the two into one
    continuous boundary running down one curve and up the other.
    """
    points = discretize(curve, n_steps)[::-1]
    if init is not None:
        points.extend(init)
    return points


def _cap_triangles(ring: Sequence[int]) -> list[tuple[int, int, int]]:
    """Zig-zag triangulation across a ring, preserving its winding."""
    tris = []
    lo, hi = 0, len(ring) - 1
    advance_lo = True
    while hi - lo >= 2:
        if advance_lo:
            tris.append((ring[lo], ring[lo + 1], ring[hi]))
            lo += 1
        else:
            tris.append((ring[lo], ring[hi - 1], ring[hi]))
            hi -= 1
        advance_lo = not advance_lo
    return tris


def _strip_triangles(a: list[int], b: list[int]) -> list[tuple[int, int, int]]:
    """Triangles between two sample columns of (possibly) different length.

    Advances along whichever column lags in normalised parameter so that
    ragged step counts still produce a closed strip.
    """
    tris = []
    na, nb = len(a) - 1, len(b) - 1
    i = j = 0
    while i < na or j < nb:
        step_a = j == nb or (i < na and (i + 1) / na <= (j + 1) / nb)
        if step_a:
            tris.append((a[i], a[i + 1], b[j]))
            i += 1
        else:
            tris.append((a[i], b[j + 1], b[j]))
            j += 1
    return tris


def loft(
    curves: Sequence[Curve],
    steps: int | Sequence[int],
    arity: int | None = None,
) -> Manifold:
    """Loft a clockwise ring of curves into a solid.

    Args:
        curves: One curve per vertex of the cross-section polygon.
        steps: Step count for every curve, or one count per curve.
        arity: Expected number of curves. None accepts any ring of 3+.

    Raises:
        InvalidParamsError: on an arity or step-list length mismatch, or a
            step count below one.
    """
    n = len(curves)
    if arity is not None and n != arity:
        raise InvalidParamsError(f"Loft expected {arity} curves, got {n}")
    if n < 3:
        raise InvalidParamsError(f"Loft needs at least 3 curves, got {n}")
    if isinstance(steps, int):
        step_list = [steps] * n
    else:
        step_list = list(steps)
        if len(step_list) != n:
            raise InvalidParamsError(
                f"Loft got {len(step_list)} step counts for {n} curves"
            )
    if any(s < 1 for s in step_list):
        raise InvalidParamsError(f"Step counts must be at least 1, got {step_list}")

    vertices: list[np.ndarray] = []
    columns: list[list[int]] = []
    for curve, s in zip(curves, step_list):
        start = len(vertices)
        vertices.extend(discretize(curve, s))
        columns.append(list(range(start, len(vertices))))

    triangles = _cap_triangles([c[0] for c in columns])
    triangles += _cap_triangles([c[-1] for c in reversed(columns)])
    for k in range(n):
        triangles += _strip_triangles(columns[k], columns[(k + 1) % n])

    return polyhedron(np.array(vertices), np.array(triangles))


def prism(bottom: Sequence[np.ndarray], top: Sequence[np.ndarray]) -> Manifold:
    """Solid between two matched point rings, joined by straight segments."""
    if len(bottom) != len(top):
        raise InvalidParamsError(
            f"Prism rings differ in length: {len(bottom)} vs {len(top)}"
        )
    return loft([line(b, t) for b, t in zip(bottom, top)], 1)
