"""Tests for the wall-to-wall bridge strategies."""

import numpy as np
import pytest

from keywalls.config import CubicParams, ElbowParams, JoinParams, StraightParams
from keywalls.connect.strategies import (
    base_endpoints,
    base_steps,
    bezier_elbow,
    boundary_loop,
    cubic_bow,
    inward_elbow,
    join_edges,
    snake_bow,
    straight,
)
from keywalls.errors import ConvergenceError
from keywalls.export.stl import manifold_to_trimesh
from keywalls.geometry.bezier import discretize
from keywalls.walls.edge import Hand
from keywalls.walls.keyhole import KeyHole, Side
from keywalls.walls.wall import build_wall


@pytest.fixture
def north_pair():
    """North walls of two keys whose feet sit 10mm apart along x."""
    a = build_wall(KeyHole.rectangular((0, 0, 15)), Side.NORTH)
    b = build_wall(KeyHole.rectangular((24, 0, 15)), Side.NORTH)
    return a, b


def _assert_solid(m):
    assert not m.is_empty()
    assert m.volume() > 0


class TestBaseHelpers:
    def test_base_endpoints_order(self, north_pair):
        a, _ = north_pair
        pts = base_endpoints(a, Hand.RIGHT, 11.0)
        assert np.allclose(pts[0], a.foot.bot_right)
        assert np.allclose(pts[1], a.foot.top_right)
        assert abs(pts[2][2] - 11.0) <= 0.001
        assert abs(pts[3][2] - 11.0) <= 0.001
        # outer edge sits further out than the inner edge at the same height
        assert pts[2][1] > pts[3][1]

    def test_base_endpoints_too_high(self, north_pair):
        a, _ = north_pair
        with pytest.raises(ConvergenceError):
            base_endpoints(a, Hand.RIGHT, 40.0)

    def test_base_steps_scale_with_length(self):
        starts = [np.zeros(3)] * 3
        dests = [np.array([1.0, 0, 0]), np.array([2.0, 0, 0]), np.array([4.0, 0, 0])]
        assert base_steps(3, starts, dests) == [3, 6, 12]


class TestStraight:
    def test_gap_filled(self, north_pair):
        a, b = north_pair
        m = straight(a, b)
        _assert_solid(m)
        min_x, min_y, min_z, max_x, max_y, max_z = m.bounding_box()
        assert abs(min_x - 6.99) < 0.005
        assert abs(max_x - 17.05) < 0.005
        assert abs(min_z) < 0.01
        assert abs(max_z - 11.0) < 0.01
        # no zero-area slivers left by the prism
        assert (manifold_to_trimesh(m).area_faces > 1e-10).all()

    def test_custom_fudge(self, north_pair):
        a, b = north_pair
        m = straight(a, b, StraightParams(union_fudge=0.5, dest_fudge=0.25))
        min_x, min_y, min_z, max_x, max_y, max_z = m.bounding_box()
        assert abs(min_x - 6.5) < 0.005
        assert abs(max_x - 17.25) < 0.005

    def test_height(self, north_pair):
        a, b = north_pair
        m = straight(a, b, StraightParams(height=6.0))
        assert abs(m.bounding_box()[5] - 6.0) < 0.01


class TestElbows:
    def test_bezier_elbow_round_corner(self, key):
        west = build_wall(key, Side.WEST)
        north = build_wall(key, Side.NORTH)
        m = bezier_elbow(west, north)
        _assert_solid(m)
        min_x, min_y, min_z, max_x, max_y, max_z = m.bounding_box()
        assert abs(max_z - 11.0) < 0.01
        assert min_x < -8.5
        assert max_y > 8.5

    def test_elbow_steps(self, key):
        west = build_wall(key, Side.WEST)
        north = build_wall(key, Side.NORTH)
        coarse = bezier_elbow(west, north, ElbowParams(n_steps=2))
        fine = bezier_elbow(west, north, ElbowParams(n_steps=12))
        assert fine.to_mesh().tri_verts.shape[0] > coarse.to_mesh().tri_verts.shape[0]

    def test_inward_elbow(self, body):
        m = inward_elbow(body.col(Side.SOUTH, 1), body.col(Side.SOUTH, 0))
        _assert_solid(m)
        assert abs(m.bounding_box()[5] - 11.0) < 0.01


class TestBows:
    def test_cubic_bows_outward(self, key):
        north = build_wall(key, Side.NORTH)
        south = build_wall(key, Side.SOUTH)
        m = cubic_bow(north, south)
        _assert_solid(m)
        min_x, min_y, min_z, max_x, max_y, max_z = m.bounding_box()
        assert max_x > 10.0
        assert abs(max_z - 4.0) < 0.01

    def test_cubic_without_bow_out_is_narrower(self, key):
        north = build_wall(key, Side.NORTH)
        south = build_wall(key, Side.SOUTH)
        wide = cubic_bow(north, south)
        narrow = cubic_bow(north, south, CubicParams(bow_out=False))
        assert narrow.bounding_box()[3] < wide.bounding_box()[3]

    def test_snake_bow(self, key):
        north = build_wall(key, Side.NORTH)
        south = build_wall(key, Side.SOUTH)
        m = snake_bow(north, south)
        _assert_solid(m)
        assert abs(m.bounding_box()[5] - 4.0) < 0.01


class TestJoinEdges:
    def test_boundary_loop(self, key):
        wall = build_wall(key, Side.NORTH)
        loop = boundary_loop(wall, Hand.RIGHT, 6)
        assert len(loop) == 2 * len(discretize(wall.edges.top_right, 6))
        assert np.allclose(loop[0], wall.foot.top_right)
        assert np.allclose(loop[6], wall.start.top_right)
        assert np.allclose(loop[7], wall.start.bot_right)
        assert np.allclose(loop[-1], wall.foot.bot_right)

    def test_boundary_loop_edge_map(self, key):
        wall = build_wall(key, Side.NORTH)
        loop = boundary_loop(wall, Hand.LEFT, 4, edge_map=lambda p: p + [0, 0, 1])
        assert np.allclose(loop[0], wall.foot.top_left + [0, 0, 1])
        assert np.allclose(loop[-1], wall.foot.bot_left)

    def test_join_spans_full_height(self, body):
        m = join_edges(body.col(Side.NORTH, 0), body.col(Side.NORTH, 1))
        _assert_solid(m)
        min_x, min_y, min_z, max_x, max_y, max_z = m.bounding_box()
        assert abs(max_z - 22.0) < 0.01
        assert abs(min_x - 6.99) < 0.005
        assert abs(max_x - 12.01) < 0.005

    def test_corner_join(self, body):
        m = join_edges(body.west[0], body.col(Side.NORTH, 0), JoinParams(fudge_factor=0.0))
        _assert_solid(m)
