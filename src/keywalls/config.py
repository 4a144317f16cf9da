"""Step specs, eyelet config, and pydantic parameter models.

Every tunable distance used by wall construction and bridge stitching
lives here with its default, so call sites never carry literal fudge
values of their own.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Annotated, Any, Callable, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from keywalls.errors import InvalidParamsError
from keywalls.geometry.primitives import DEST_FUDGE, UNION_FUDGE


@dataclass(frozen=True)
class Flat:
    """A fixed number of wall steps, regardless of height."""

    n: int


@dataclass(frozen=True)
class PerZ:
    """One wall step for every `mm` of height off the ground."""

    mm: float


StepSpec = Flat | PerZ


def steps_to_int(spec: StepSpec, z: float) -> int:
    """Resolve a step spec to a concrete step count for a wall starting at z.

    PerZ never resolves below one step.
    """
    if isinstance(spec, Flat):
        return spec.n
    if isinstance(spec, PerZ):
        # Small epsilon so exact multiples are not lost to float rounding
        return max(1, math.floor(z / spec.mm + 1e-9))
    raise InvalidParamsError(f"Unknown step spec: {spec!r}")


@dataclass(frozen=True)
class ScrewConfig:
    """Screw or bumpon eyelet attached to the foot of a wall."""

    outer_rad: float = 4.0
    inner_rad: float = 2.0
    thickness: float = 4.0
    hole_depth: float | None = None  # None = through hole, else bottom inset
    maker: Callable[..., Any] | None = None  # (config, foot, outward) -> Screw

    @classmethod
    def screw(cls) -> ScrewConfig:
        """Through-hole eyelet for an M2-ish screw."""
        return cls()

    @classmethod
    def bumpon(cls) -> ScrewConfig:
        """Eyelet with a shallow bottom recess for a rubber bumpon."""
        return cls(outer_rad=5.4, inner_rad=4.8, thickness=2.4, hole_depth=0.8)


class WallParams(BaseModel):
    """Parameters for drawing a wall from a key face down to the ground."""

    x_off: float = 0.0
    y_off: float = 0.0
    z_off: float = 0.0
    clearance: float = 1.5
    n_steps: Flat | PerZ = Flat(4)
    n_facets: int = 1
    d1: float = 2.0
    d2: float = 5.0
    thickness: float = 3.5
    screw_config: ScrewConfig | None = None
    swing: bool = True  # pivot tilted faces upright before drawing
    swing_step: float = 7.5  # degrees per pivot increment

    @model_validator(mode="after")
    def check_counts(self):
        if self.n_facets < 1:
            raise InvalidParamsError(f"n_facets must be >= 1, got {self.n_facets}")
        if isinstance(self.n_steps, Flat) and self.n_steps.n < 1:
            raise InvalidParamsError(f"Flat steps must be >= 1, got {self.n_steps.n}")
        if isinstance(self.n_steps, PerZ) and self.n_steps.mm <= 0:
            raise InvalidParamsError(f"PerZ spacing must be positive, got {self.n_steps.mm}")
        if self.swing_step <= 0:
            raise InvalidParamsError(f"swing_step must be positive, got {self.swing_step}")
        return self

    @field_validator("thickness")
    @classmethod
    def check_thickness(cls, v: float) -> float:
        if v <= 0:
            raise InvalidParamsError(f"thickness must be positive, got {v}")
        return v


class ConnectParams(BaseModel):
    """Settings shared by every bridge strategy."""

    union_fudge: float = UNION_FUDGE
    max_iter: int = 100
    tolerance: float = 0.001

    @field_validator("union_fudge")
    @classmethod
    def check_fudge(cls, v: float) -> float:
        if v <= 0:
            raise InvalidParamsError(f"union_fudge must be positive, got {v}")
        return v


class StraightParams(ConnectParams):
    """Flat prism between the facing ends of two walls."""

    kind: Literal["straight"] = "straight"
    height: float = 11.0
    fudge_factor: float = 6.0
    dest_fudge: float = DEST_FUDGE


class ElbowParams(ConnectParams):
    """Single-bend quadratic bridge (also used for the inward elbow)."""

    height: float = 11.0
    n_steps: int = 6


class CubicParams(ConnectParams):
    """Double-bend bridge with only the outer control points bowed."""

    kind: Literal["cubic"] = "cubic"
    height: float = 4.0
    scale: float = 1.1
    d: float = 2.0
    n_steps: int = 10
    bow_out: bool = True


class SnakeParams(ConnectParams):
    """Double-bend bridge with both control point pairs bowed."""

    kind: Literal["snake"] = "snake"
    height: float = 4.0
    scale: float = 1.5
    d: float = 2.0
    n_steps: int = 10


# Bridge used to link the thumb cluster to the body
LinkParams = Annotated[SnakeParams | CubicParams | StraightParams, Field(discriminator="kind")]


class JoinParams(ConnectParams):
    """Full-height join between the side boundaries of two walls."""

    n_steps: int = 6
    fudge_factor: float = 3.0


class SkeletonParams(BaseModel):
    """Open perimeter: bridges along the ground only.

    The body outline uses `height` (or each bridge type's own default),
    except the bridges around the index column which use `index_height`.
    The thumb cluster is linked to the body by `east_link` (south side)
    and `west_link` (north side). With `close_thumb` the thumb keys are
    joined all the way round instead of being spanned by a single elbow.
    """

    index_height: float = 11.0
    height: float | None = None  # None = each bridge type keeps its own default
    thumb_height: float | None = None
    n_steps: int = 6
    body_join_steps: int = 6
    thumb_join_steps: int = 6
    fudge_factor: float = 6.0
    cubic_d: float = 2.0
    cubic_scale: float = 1.1
    east_link: LinkParams = SnakeParams()
    west_link: LinkParams = SnakeParams()
    pinky_idx: int = 4
    thumb_link_col: int = 2
    close_thumb: bool = False

    @model_validator(mode="after")
    def check_values(self):
        for name in ("index_height", "height", "thumb_height"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise InvalidParamsError(f"{name} must be positive")
        for name in ("n_steps", "body_join_steps", "thumb_join_steps"):
            if getattr(self, name) < 1:
                raise InvalidParamsError(f"{name} must be >= 1")
        return self


class ClosedParams(BaseModel):
    """Closed perimeter: full-height joins around the whole body."""

    n_steps: int = 6
    fudge_factor: float = 3.0


class BaseParams(BaseModel):
    """Parameters for assembling a case base from a set of walls."""

    connector: str = "closed"
    skeleton: SkeletonParams = SkeletonParams()
    closed: ClosedParams = ClosedParams()
    right_hand: bool = False  # mirror the finished base across the YZ plane

    @field_validator("connector")
    @classmethod
    def check_connector(cls, v: str) -> str:
        valid = ("skeleton", "closed")
        if v not in valid:
            raise InvalidParamsError(
                f"connector must be one of {valid}, got '{v}'"
            )
        return v
