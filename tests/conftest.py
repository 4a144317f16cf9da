"""Shared pytest fixtures for wall and perimeter tests."""

import pytest

from keywalls.settings import Settings
from keywalls.walls.keyhole import KeyHole, grid_columns
from keywalls.walls.maps import CaseWalls, build_body_walls


@pytest.fixture
def settings():
    """Default settings instance."""
    return Settings()


@pytest.fixture
def key():
    """Single 14x14 aperture, plate top at z=22."""
    return KeyHole.rectangular((0.0, 0.0, 20.0))


@pytest.fixture
def columns():
    """Two columns, one row, on a 19mm pitch at z=20."""
    return grid_columns(2, 1)


@pytest.fixture
def body(columns):
    """Body walls for the two-column grid."""
    return build_body_walls(columns)


@pytest.fixture
def case_walls(body):
    """Body-only case walls (no thumb cluster)."""
    return CaseWalls(body=body)
