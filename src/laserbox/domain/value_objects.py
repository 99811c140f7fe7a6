"""Value objects for the laser-cut box domain.

All measurements are millimetres. Panel-local coordinates put the origin at
the top-left corner of the panel's bounding box with y growing downwards,
matching the drawing output.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .geometry import DrawPath


class Operation(str, Enum):
    """Laser operation a drawn path is routed to."""

    CUT = "cut"
    SCORE = "score"
    ENGRAVE = "engrave"


class FaceRole(str, Enum):
    """Semantic role of a generated panel."""

    FRONT = "front"
    BACK = "back"
    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"
    LID = "lid"
    DIVIDER = "divider"
    DRAWER_FRONT = "drawer_front"
    IMPORTED = "imported"


class LidType(str, Enum):
    """Closure applied to the top of the box."""

    NONE = "none"
    FLAT = "flat_lid"
    SLIDING = "sliding_lid"


class DimensionReference(str, Enum):
    """Whether supplied dimensions describe the inside or outside envelope."""

    INSIDE = "inside"
    OUTSIDE = "outside"


class BoxType(str, Enum):
    """Box variant; selects the specialization stage."""

    SIMPLE = "simple"
    HINGED = "hinged"
    DRAWER = "drawer"


class FrontFaceStyle(str, Enum):
    """Drawer front treatment."""

    FLUSH = "flush"
    LIP = "lip"


class LaserboxError(Exception):
    """Base class for errors raised by laserbox."""


class ConfigurationError(LaserboxError, ValueError):
    """Raised when box inputs are contradictory (e.g. finger max below min)."""


class GeometryError(LaserboxError, ValueError):
    """Raised when geometry is requested that cannot exist."""


@dataclass(frozen=True)
class Point:
    """2D point or vector in panel-local coordinates."""

    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> Point:
        return Point(self.x * factor, self.y * factor)

    def rotated(self, degrees: float) -> Point:
        """Rotate about the origin; positive angles turn clockwise on screen."""
        rad = math.radians(degrees)
        cos_a, sin_a = math.cos(rad), math.sin(rad)
        return Point(self.x * cos_a - self.y * sin_a, self.x * sin_a + self.y * cos_a)

    def is_close(self, other: Point, eps: float = 1e-6) -> bool:
        return abs(self.x - other.x) <= eps and abs(self.y - other.y) <= eps


ORIGIN = Point(0.0, 0.0)


@dataclass(frozen=True)
class BoxDimensions:
    """Resolved outer and inner envelope of a box.

    Attributes:
        outer_width: Exterior width (X).
        outer_depth: Exterior depth (Z).
        outer_height: Exterior height (Y).
        inner_width: Usable interior width.
        inner_depth: Usable interior depth.
        inner_height: Usable interior height.
        thickness: Material thickness used as the wall allowance.
    """

    outer_width: float
    outer_depth: float
    outer_height: float
    inner_width: float
    inner_depth: float
    inner_height: float
    thickness: float

    @property
    def is_positive(self) -> bool:
        """True when every interior dimension is strictly positive."""
        return min(self.inner_width, self.inner_depth, self.inner_height) > 0


@dataclass(frozen=True)
class FacePath:
    """A drawable path tagged with its laser operation."""

    path: DrawPath
    operation: Operation = Operation.CUT


@dataclass(frozen=True)
class GeneratedFace:
    """One physical panel.

    The first entry of ``paths`` is always the outline as a cut path.
    Additional cut paths (holes, slots) and score/engrave marks follow.

    Attributes:
        id: Deterministic identifier, unique within one generated batch.
        name: Semantic role of the panel.
        width: Bounding box width.
        height: Bounding box height.
        vertices: Closed outline polygon (last vertex joins the first).
        paths: Drawable paths, outline first.
        offset: Translation applied when the face is composited as artwork.
        valid: False when the outline is a best-effort preview only.
        label: Human readable label used for exports.
    """

    id: str
    name: FaceRole
    width: float
    height: float
    vertices: tuple[Point, ...]
    paths: tuple[FacePath, ...]
    offset: Point = ORIGIN
    valid: bool = True
    label: str = ""

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Face dimensions must be positive")
        if len(self.vertices) < 3 and self.name != FaceRole.IMPORTED:
            raise ValueError("Face outline needs at least three vertices")

    @classmethod
    def from_outline(
        cls,
        id: str,
        name: FaceRole,
        vertices: tuple[Point, ...] | list[Point],
        extra_paths: tuple[FacePath, ...] = (),
        valid: bool = True,
        label: str = "",
    ) -> GeneratedFace:
        """Build a face whose bounding box and outline path come from vertices."""
        from .geometry import DrawPath, bbox

        verts = tuple(vertices)
        min_x, min_y, max_x, max_y = bbox(verts)
        outline = FacePath(DrawPath.from_polygon(verts), Operation.CUT)
        return cls(
            id=id,
            name=name,
            width=max_x - min_x,
            height=max_y - min_y,
            vertices=verts,
            paths=(outline, *extra_paths),
            valid=valid,
            label=label or name.value,
        )

    @property
    def outline_path(self) -> DrawPath:
        """The outline as a drawable path."""
        return self.paths[0].path

    def with_outline(self, vertices: tuple[Point, ...] | list[Point]) -> GeneratedFace:
        """Return a copy with a new outline, keeping the extra paths."""
        return GeneratedFace.from_outline(
            self.id, self.name, vertices, self.paths[1:], self.valid, self.label
        )

    def with_paths(self, *extra: FacePath) -> GeneratedFace:
        """Return a copy with additional paths appended."""
        return replace(self, paths=(*self.paths, *extra))

    def paths_for(self, operation: Operation) -> list[FacePath]:
        return [p for p in self.paths if p.operation == operation]


@dataclass(frozen=True)
class PinHole:
    """Circular hinge pin hole in panel-local coordinates."""

    cx: float
    cy: float
    r: float

    def __post_init__(self) -> None:
        if self.r <= 0:
            raise ValueError("Pin hole radius must be positive")


@dataclass(frozen=True)
class HingeHoles:
    """Pin holes cut into the left and right walls of a hinged box."""

    left: PinHole
    right: PinHole


@dataclass(frozen=True)
class DrawerDimensions:
    """Outer shell and nested drawer sizes for a sliding-drawer box.

    Attributes:
        outer_width: Shell exterior width.
        outer_depth: Shell exterior depth.
        outer_height: Shell exterior height.
        thickness: Material thickness.
        shell_inner_width: Opening width inside the shell walls.
        shell_inner_depth: Shell interior depth.
        shell_inner_height: Shell interior height.
        drawer_width: Drawer exterior width.
        drawer_depth: Drawer exterior depth.
        drawer_height: Drawer exterior height.
    """

    outer_width: float
    outer_depth: float
    outer_height: float
    thickness: float
    shell_inner_width: float
    shell_inner_depth: float
    shell_inner_height: float
    drawer_width: float
    drawer_depth: float
    drawer_height: float

    @property
    def inner_width(self) -> float:
        """Drawer interior width."""
        return self.drawer_width - 2 * self.thickness

    @property
    def inner_depth(self) -> float:
        """Drawer interior depth."""
        return self.drawer_depth - 2 * self.thickness

    @property
    def inner_height(self) -> float:
        """Drawer interior height (open top)."""
        return self.drawer_height - self.thickness

    @property
    def is_positive(self) -> bool:
        return min(self.drawer_width, self.drawer_depth, self.drawer_height) > 0


@dataclass(frozen=True)
class OverlayPlacement:
    """Centre-anchored placement of an overlay inside its target face.

    Attributes:
        x: Centre X in the target face's local coordinates.
        y: Centre Y in the target face's local coordinates.
        rotation: Clockwise rotation in degrees.
        scale_x: Horizontal scale factor.
        scale_y: Vertical scale factor.
    """

    x: float
    y: float
    rotation: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0

    def __post_init__(self) -> None:
        if self.scale_x == 0 or self.scale_y == 0:
            raise ValueError("Overlay scale must be non-zero")


@dataclass(frozen=True)
class EngraveOverlayItem:
    """User artwork attached to a face.

    The source face supplies the paths; its ``offset`` moves the artwork's own
    origin to the top-left of its bounding box before centring.
    """

    id: str
    target_face_id: str
    source: GeneratedFace
    placement: OverlayPlacement
    operation: Operation = Operation.ENGRAVE
