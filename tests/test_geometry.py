"""Tests for geometry primitives, booleans, transforms, and curves."""

import numpy as np
import pytest
from manifold3d import Manifold

from keywalls.errors import GeometryError, InvalidParamsError
from keywalls.geometry.bezier import (
    blend,
    cubic_bezier,
    discretize,
    discretize_reversed,
    line,
    loft,
    prism,
    quad_bezier,
)
from keywalls.geometry.booleans import difference_all, union_all
from keywalls.geometry.primitives import (
    cylinder,
    hull_points,
    polyhedron,
    signed_volume,
)
from keywalls.geometry.transforms import (
    mirror_point,
    mirror_x,
    normalize,
    rotate_about_axis,
    rotate_point,
    rotate_solid,
    translate,
    unrotate_point,
)

TETRA_VERTS = np.array(
    [[0, 0, 0], [1, 0, 0], [0, 1, 0], [0, 0, 1]], dtype=np.float64
)
TETRA_TRIS = np.array([[0, 2, 1], [0, 1, 3], [0, 3, 2], [1, 2, 3]])


def _square(z, size=1.0):
    return [
        np.array([0.0, 0.0, z]),
        np.array([0.0, size, z]),
        np.array([size, size, z]),
        np.array([size, 0.0, z]),
    ]


class TestCylinder:
    def test_valid_cylinder(self):
        c = cylinder(1.0, 5.0)
        assert not c.is_empty()
        assert c.volume() > 0

    def test_cylinder_base_at_z0(self):
        c = cylinder(2.0, 3.0, segments=32)
        min_x, min_y, min_z, max_x, max_y, max_z = c.bounding_box()
        assert abs(min_z) < 0.01
        assert abs(max_z - 3.0) < 0.01

    def test_zero_radius_raises(self):
        with pytest.raises(GeometryError):
            cylinder(0, 5.0)


class TestHull:
    def test_cube_hull(self):
        pts = np.array(_square(0.0) + _square(1.0))
        h = hull_points(pts)
        assert abs(h.volume() - 1.0) < 0.01

    def test_too_few_points_raises(self):
        with pytest.raises(GeometryError):
            hull_points(np.array(_square(0.0)[:3]))


class TestPolyhedron:
    def test_outward_tetrahedron(self):
        assert signed_volume(TETRA_VERTS, TETRA_TRIS) > 0
        m = polyhedron(TETRA_VERTS, TETRA_TRIS)
        assert abs(m.volume() - 1 / 6) < 0.001

    def test_inverted_winding_is_flipped(self):
        tris = TETRA_TRIS[:, ::-1]
        assert signed_volume(TETRA_VERTS, tris) < 0
        m = polyhedron(TETRA_VERTS, tris)
        assert abs(m.volume() - 1 / 6) < 0.001

    def test_too_few_faces_raises(self):
        with pytest.raises(GeometryError):
            polyhedron(TETRA_VERTS, TETRA_TRIS[:3])


class TestUnionAll:
    def test_union_two(self):
        a = cylinder(1, 1)
        b = translate(cylinder(1, 1), 5, 0, 0)
        result = union_all([a, b])
        assert abs(result.volume() - a.volume() - b.volume()) < 0.01

    def test_union_filters_empty(self):
        a = cylinder(1, 1)
        result = union_all([Manifold(), a, Manifold()])
        assert abs(result.volume() - a.volume()) < 0.01

    def test_union_empty_list(self):
        assert union_all([]).is_empty()


class TestDifferenceAll:
    def test_subtract_hole(self):
        base = cylinder(3, 2)
        hole = translate(cylinder(1, 3), 0, 0, -0.5)
        result = difference_all(base, [hole])
        assert result.volume() < base.volume()

    def test_no_cutouts_returns_base(self):
        base = cylinder(3, 2)
        assert difference_all(base, []) is base

    def test_empty_base_raises(self):
        with pytest.raises(GeometryError):
            difference_all(Manifold(), [cylinder(1, 1)])


class TestTransforms:
    def test_rotate_point_about_pivot(self):
        p = rotate_point(np.array([2.0, 1.0, 0.0]), (0, 0, 90), about=[1.0, 1.0, 0.0])
        assert np.allclose(p, [1.0, 2.0, 0.0])

    def test_normalize(self):
        assert np.allclose(normalize([3.0, 0.0, 4.0]), [0.6, 0.0, 0.8])

    def test_normalize_zero(self):
        assert np.allclose(normalize([0.0, 0.0, 0.0]), 0.0)

    def test_unrotate_inverts_rotate(self):
        p = np.array([2.0, -1.0, 3.0])
        turned = rotate_point(p, (10, 20, 30), about=[1.0, 1.0, 1.0])
        assert np.allclose(unrotate_point(turned, (10, 20, 30), about=[1.0, 1.0, 1.0]), p)

    def test_rotate_about_axis(self):
        p = rotate_about_axis(np.array([1.0, 1.0, 0.0]), [0, 0, 1], 90, pivot=[1.0, 0.0, 0.0])
        assert np.allclose(p, [0.0, 0.0, 0.0])

    def test_mirror_point(self):
        assert np.allclose(mirror_point(np.array([2.0, 3.0, 4.0])), [-2, 3, 4])
        assert np.allclose(mirror_point(np.array([2.0, 3.0, 4.0]), (0, 0, 2)), [2, 3, -4])

    def test_rotate_solid_about_pivot(self):
        c = translate(cylinder(1, 2), 5, 0, 0)
        turned = rotate_solid(c, (0, 0, 180), about=[5.0, 0.0, 0.0])
        assert np.allclose(turned.bounding_box(), c.bounding_box(), atol=0.01)

    def test_mirror_x(self):
        c = translate(cylinder(1, 2), 5, 0, 0)
        min_x, min_y, min_z, max_x, max_y, max_z = mirror_x(c).bounding_box()
        assert abs(min_x + 6) < 0.01
        assert abs(max_x + 4) < 0.01


class TestCurves:
    def test_quad_bezier_endpoints(self):
        c = quad_bezier([0, 0, 10], [0, 5, 10], [0, 8, 0])
        assert np.allclose(c(0.0), [0, 0, 10])
        assert np.allclose(c(1.0), [0, 8, 0])

    def test_cubic_bezier_midpoint(self):
        c = cubic_bezier([0, 0, 0], [0, 0, 0], [4, 0, 0], [4, 0, 0])
        assert np.allclose(c(0.5), [2, 0, 0])

    def test_blend(self):
        a = line([0, 0, 0], [0, 0, 1])
        b = line([2, 0, 0], [2, 0, 1])
        assert np.allclose(blend(a, b, 0.25)(1.0), [0.5, 0, 1])

    def test_discretize_count_and_ends(self):
        c = line([0, 0, 0], [4, 0, 0])
        pts = discretize(c, 4)
        assert len(pts) == 5
        assert np.allclose(pts[0], [0, 0, 0])
        assert np.allclose(pts[-1], [4, 0, 0])
        assert np.allclose(pts[1], [1, 0, 0])

    def test_discretize_zero_steps_raises(self):
        with pytest.raises(InvalidParamsError):
            discretize(line([0, 0, 0], [1, 0, 0]), 0)

    def test_discretize_reversed_with_init(self):
        a = line([0, 0, 0], [0, 0, 3])
        b = line([1, 0, 0], [1, 0, 3])
        pts = discretize_reversed(a, 3, init=discretize(b, 3))
        assert len(pts) == 8
        assert np.allclose(pts[0], [0, 0, 3])
        assert np.allclose(pts[3], [0, 0, 0])
        assert np.allclose(pts[4], [1, 0, 0])
        assert np.allclose(pts[-1], [1, 0, 3])


class TestLoft:
    def _pillars(self, height=2.0):
        return [line(p, p + [0, 0, height]) for p in _square(0.0)]

    def test_uniform_steps(self):
        m = loft(self._pillars(), 3)
        assert abs(m.volume() - 2.0) < 0.01

    def test_ragged_steps(self):
        m = loft(self._pillars(), [1, 2, 3, 4])
        assert not m.is_empty()
        assert abs(m.volume() - 2.0) < 0.01

    def test_arity_mismatch_raises(self):
        with pytest.raises(InvalidParamsError):
            loft(self._pillars(), 2, arity=6)

    def test_step_list_mismatch_raises(self):
        with pytest.raises(InvalidParamsError):
            loft(self._pillars(), [1, 2, 3])

    def test_zero_step_raises(self):
        with pytest.raises(InvalidParamsError):
            loft(self._pillars(), [1, 0, 1, 1])

    def test_too_few_curves_raises(self):
        with pytest.raises(InvalidParamsError):
            loft(self._pillars()[:2], 2)


class TestPrism:
    def test_box_volume(self):
        m = prism(_square(0.0, 2.0), _square(3.0, 2.0))
        assert abs(m.volume() - 12.0) < 0.01

    def test_mismatched_rings_raise(self):
        with pytest.raises(InvalidParamsError):
            prism(_square(0.0), _square(1.0)[:3])
