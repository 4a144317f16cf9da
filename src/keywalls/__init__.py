"""Procedural wall and perimeter generator for keyboard case bases."""

import logging

import manifold3d

__version__ = "0.1.0"

# Eyelet discs stay round at bumpon radii
manifold3d.set_circular_segments(24)

logger = logging.getLogger(__name__)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
