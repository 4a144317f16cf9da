"""Tests for STL export and validation checks."""

import io

import pytest
import trimesh
from manifold3d import Manifold

from keywalls.errors import GeometryError, ValidationError
from keywalls.export.stl import export_stl_bytes, manifold_to_trimesh, write_stl
from keywalls.geometry.primitives import cylinder
from keywalls.geometry.transforms import translate
from keywalls.validation.checks import require_valid, validate_manifold
from keywalls.walls.keyhole import Side
from keywalls.walls.wall import build_wall


class TestSTLExport:
    def test_manifold_to_trimesh(self):
        tmesh = manifold_to_trimesh(cylinder(2, 5))
        assert isinstance(tmesh, trimesh.Trimesh)
        assert len(tmesh.vertices) > 0
        assert len(tmesh.faces) > 0

    def test_stl_bytes(self):
        data = export_stl_bytes(cylinder(2, 5))
        assert isinstance(data, bytes)
        assert len(data) > 80  # STL header is 80 bytes

    def test_stl_roundtrip(self, key):
        wall = build_wall(key, Side.NORTH)
        data = export_stl_bytes(wall.solid)
        reimported = trimesh.load(io.BytesIO(data), file_type="stl")
        assert abs(reimported.volume - wall.solid.volume()) < 1.0

    def test_ascii_stl(self):
        data = export_stl_bytes(cylinder(2, 5), ascii=True)
        assert data.lstrip().startswith(b"solid")

    def test_empty_solid_raises(self):
        with pytest.raises(GeometryError):
            export_stl_bytes(Manifold())

    def test_write_stl(self, tmp_path):
        out = write_stl(cylinder(2, 5), tmp_path / "nested" / "base.stl")
        assert out.exists()
        assert out.stat().st_size > 80


class TestValidation:
    def test_wall_passes(self, key):
        results = validate_manifold(build_wall(key, Side.WEST).solid)
        assert results["is_watertight"]
        assert results["positive_volume"]
        assert results["above_ground"]
        assert results["pass"]

    def test_below_ground_fails(self):
        results = validate_manifold(translate(cylinder(2, 5), 0, 0, -1))
        assert results["above_ground"] is False
        assert results["pass"] is False

    def test_triangle_budget(self):
        results = validate_manifold(cylinder(2, 5), max_triangles=10)
        assert results["triangle_count_ok"] is False

    def test_require_valid_raises(self):
        with pytest.raises(ValidationError, match="above_ground"):
            require_valid(translate(cylinder(2, 5), 0, 0, -1), "sunk")

    def test_require_valid_returns_results(self, key):
        results = require_valid(build_wall(key, Side.EAST).solid)
        assert results["pass"]
