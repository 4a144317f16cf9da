#!/usr/bin/env python3
"""
Build a case base for a planar demo layout and write it to STL.

Lays out a grid of key apertures, draws walls around it, stitches the
perimeter with the chosen connector and validates the result.

Usage:
    python scripts/build_demo_base.py --cols 5 --rows 3
    python scripts/build_demo_base.py --connector skeleton --thumb 3 --output out/base.stl
    python scripts/build_demo_base.py --screws --verbose
"""
import argparse
import sys

from keywalls.assembly.case_base import CaseBaseBuilder
from keywalls.config import BaseParams, ScrewConfig, SkeletonParams, WallParams
from keywalls.export.stl import write_stl
from keywalls.geometry.primitives import debug_manifold
from keywalls.settings import Settings
from keywalls.validation.checks import validate_manifold
from keywalls.walls.keyhole import KeyHole, grid_columns
from keywalls.walls.maps import CaseWalls, Presence, build_body_walls, build_thumb_walls


def build_walls(args) -> CaseWalls:
    columns = grid_columns(args.cols, args.rows, pitch=args.pitch, height=args.height)
    params = WallParams(screw_config=ScrewConfig.screw() if args.screws else None)

    def corners(i: int) -> Presence:
        # Eyelets only on the outermost columns
        if args.screws and i in (0, args.cols - 1):
            return Presence.SCREW
        return Presence.YES

    body = build_body_walls(
        columns, params=params, north_lookup=corners, south_lookup=corners
    )

    thumb = None
    if args.thumb:
        y = -args.pitch * 1.5
        keys = {
            i: KeyHole.rectangular((i * args.pitch, y, args.height))
            for i in range(args.thumb)
        }
        thumb = build_thumb_walls(keys)
    return CaseWalls(body=body, thumb=thumb)


def main():
    parser = argparse.ArgumentParser(description="Build a demo keyboard case base")
    parser.add_argument("--cols", type=int, default=5, help="Number of key columns")
    parser.add_argument("--rows", type=int, default=3, help="Keys per column")
    parser.add_argument("--pitch", type=float, default=19.0, help="Key pitch (mm)")
    parser.add_argument("--height", type=float, default=20.0, help="Plate height (mm)")
    parser.add_argument("--thumb", type=int, default=0, help="Thumb cluster keys (0 = none)")
    parser.add_argument("--connector", default="closed", choices=["closed", "skeleton"])
    parser.add_argument("--screws", action="store_true", help="Add screw eyelets")
    parser.add_argument("--close-thumb", action="store_true", help="Join thumb keys all round")
    parser.add_argument("--right-hand", action="store_true", help="Mirror for the right hand")
    parser.add_argument("--output", default="out/base.stl", help="STL output path")
    parser.add_argument("--verbose", action="store_true", help="Print solid debug info")
    args = parser.parse_args()

    walls = build_walls(args)
    # The link column must exist in small demo layouts
    skeleton = SkeletonParams(
        pinky_idx=min(4, args.cols - 1),
        thumb_link_col=min(2, args.cols - 1),
        close_thumb=args.close_thumb,
    )
    params = BaseParams(
        connector=args.connector, skeleton=skeleton, right_hand=args.right_hand
    )
    settings = Settings()
    result = CaseBaseBuilder(settings).build(walls, params)

    if args.verbose:
        debug_manifold(result.perimeter, "perimeter")
        debug_manifold(result.manifold, "base")

    checks = validate_manifold(result.manifold)
    for name, value in checks.items():
        print(f"  {name}: {value}")
    for warning in result.warnings:
        print(f"  warning: {warning}")

    out = write_stl(result.manifold, args.output, ascii=settings.stl_ascii)
    print(f"Wrote {out} ({result.triangle_count} triangles)")
    return 0 if checks["pass"] else 1


if __name__ == "__main__":
    sys.exit(main())
