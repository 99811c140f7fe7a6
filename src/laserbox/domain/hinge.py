"""Hinged-lid specialization.

Starts from the generic lidded box and adapts it for a pin hinge:

1. the lid becomes a pivot profile with two side tabs near its back edge and
   a filleted pull tab on its front edge
2. walls and bottom are re-mapped so the box matches the requested exterior
   width and depth (the tooth region is translated, the interior is scaled)
3. a rectangular notch is cut into the front wall's top edge for the pull tab
4. each side wall gets a pin hole aligned with the lid's side tab
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable

from .face_generator import (
    BoxInputs,
    GenerationResult,
    compute_dimensions,
    ensure_simple,
    generate_faces,
)
from .geometry import DrawPath, arc_points, bbox, cut_top_notch, normalize
from .value_objects import (
    BoxDimensions,
    DimensionReference,
    FacePath,
    FaceRole,
    GeneratedFace,
    HingeHoles,
    LidType,
    Operation,
    PinHole,
    Point,
)

logger = logging.getLogger(__name__)

# Lid pivot profile
LID_TAB_WIDTH = 4.0
LID_TAB_HEIGHT = 3.32
LID_TAB_INSET = 1.64
LID_PULL_TAB_WIDTH = 32.31
LID_PULL_TAB_HEIGHT = 8.0
LID_FILLET_RADIUS = 2.0
LID_FILLET_STEPS = 5
LID_DEPTH_CLEARANCE = 0.2

# Front wall notch clearing the pull tab
NOTCH_WIDTH = 34.0
NOTCH_EXTRA_DEPTH = 2.0

PIN_CLEARANCE = 1.5


@dataclass(frozen=True)
class HingeParams:
    """Tunable hinge parameters.

    Attributes:
        top_inset: Extra distance of the pin hole below the wall's top edge.
        back_inset: Extra distance of the pin hole from the wall's back edge.
        notch_width: Width of the front-wall notch.
        notch_depth: Depth of the front-wall notch; defaults to thickness + 2.
        pin_clearance: Added to the thickness to get the hole diameter.
    """

    top_inset: float = 0.0
    back_inset: float = 0.0
    notch_width: float = NOTCH_WIDTH
    notch_depth: float | None = None
    pin_clearance: float = PIN_CLEARANCE

    def __post_init__(self) -> None:
        if self.top_inset < 0 or self.back_inset < 0:
            raise ValueError("Hinge insets must be non-negative")
        if self.notch_width <= 0:
            raise ValueError("Notch width must be positive")
        if self.notch_depth is not None and self.notch_depth <= 0:
            raise ValueError("Notch depth must be positive")
        if self.pin_clearance < 0:
            raise ValueError("Pin clearance must be non-negative")

    def hole_radius(self, thickness: float) -> float:
        return (thickness + self.pin_clearance) / 2

    def resolved_notch_depth(self, thickness: float) -> float:
        if self.notch_depth is not None:
            return self.notch_depth
        return thickness + NOTCH_EXTRA_DEPTH


@dataclass
class HingeResult:
    """Hinged box panels plus the pin hole geometry used to cut them."""

    faces: list[GeneratedFace] = field(default_factory=list)
    holes: HingeHoles | None = None
    dimensions: BoxDimensions | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def lid_profile(width: float, depth: float) -> list[Point]:
    """Lid outline with pivot tabs on both sides and a filleted pull tab.

    The back edge is at the top (y = 0); the pull tab hangs off the front.
    """
    y1 = LID_TAB_INSET
    y2 = LID_TAB_INSET + LID_TAB_HEIGHT
    tab_left = width / 2 - LID_PULL_TAB_WIDTH / 2
    tab_right = width / 2 + LID_PULL_TAB_WIDTH / 2
    tab_bottom = depth + LID_PULL_TAB_HEIGHT
    r = min(LID_FILLET_RADIUS, LID_PULL_TAB_HEIGHT, LID_PULL_TAB_WIDTH / 2)

    points = [
        Point(0, 0),
        Point(width, 0),
        Point(width, y1),
        Point(width + LID_TAB_WIDTH, y1),
        Point(width + LID_TAB_WIDTH, y2),
        Point(width, y2),
        Point(width, depth),
        Point(tab_right, depth),
        Point(tab_right, tab_bottom - r),
    ]
    points += arc_points(tab_right - r, tab_bottom - r, r, 0, 90, LID_FILLET_STEPS)
    points.append(Point(tab_left + r, tab_bottom))
    points += arc_points(tab_left + r, tab_bottom - r, r, 90, 180, LID_FILLET_STEPS)
    points += [
        Point(tab_left, depth),
        Point(0, depth),
        Point(0, y2),
        Point(-LID_TAB_WIDTH, y2),
        Point(-LID_TAB_WIDTH, y1),
        Point(0, y1),
    ]
    normalized, _ = normalize(points)
    return normalized


def interior_remap(start: float, old_inner: float, new_inner: float) -> Callable[[float], float]:
    """Piecewise-linear remap of one axis.

    Coordinates up to ``start`` are kept, ``[start, start + old_inner]`` is
    scaled onto ``[start, start + new_inner]`` and everything beyond is
    translated rigidly.
    """
    old_end = start + old_inner
    new_end = start + new_inner
    eps = 1e-6

    def remap(value: float) -> float:
        if value <= start + eps:
            return value
        if value <= old_end + eps:
            return start + (value - start) * new_inner / old_inner
        return new_end + (value - old_end)

    return remap


def _identity(value: float) -> float:
    return value


def resize_face(
    face: GeneratedFace,
    thickness: float,
    target_width: float | None = None,
    target_height: float | None = None,
) -> GeneratedFace:
    """Stretch or shrink a face's interior so its total size hits the target."""
    map_x: Callable[[float], float] = _identity
    map_y: Callable[[float], float] = _identity
    if target_width is not None:
        old_inner = max(face.width - 2 * thickness, 1.0)
        new_inner = max(target_width - 2 * thickness, 1.0)
        map_x = interior_remap(thickness, old_inner, new_inner)
    if target_height is not None:
        old_inner = max(face.height - 2 * thickness, 1.0)
        new_inner = max(target_height - 2 * thickness, 1.0)
        map_y = interior_remap(thickness, old_inner, new_inner)

    def mapper(p: Point) -> Point:
        return Point(map_x(p.x), map_y(p.y))

    vertices = [mapper(p) for p in face.vertices]
    extra = tuple(FacePath(p.path.transformed(mapper), p.operation) for p in face.paths[1:])
    rebuilt = face.with_outline(vertices)
    return replace(rebuilt, paths=(rebuilt.paths[0], *extra))


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def compute_pin_holes(
    reference: GeneratedFace, params: HingeParams, thickness: float
) -> tuple[HingeHoles, list[str]]:
    """Pin hole centres for the left and right walls.

    Both holes sit ``tooth centre + top_inset`` below the top edge. The left
    hole is ``tooth centre + back_inset`` from the wall's minimum x and the
    right hole the same distance from the maximum x, so the pair mirrors
    around the depth centre line. Positions are clamped so the hole never
    comes closer than its radius to any edge.
    """
    warnings: list[str] = []
    r = params.hole_radius(thickness)
    min_x, min_y, max_x, max_y = bbox(reference.vertices)
    tooth_center = LID_TAB_INSET + LID_TAB_HEIGHT / 2
    offset_top = tooth_center + params.top_inset
    offset_back = tooth_center + params.back_inset

    cy_wanted = min_y + offset_top
    cy = _clamp(cy_wanted, min_y + r, max_y - r)
    cx_left_wanted = min_x + offset_back
    cx_right_wanted = max_x - offset_back
    cx_left = _clamp(cx_left_wanted, min_x + r, max_x - r)
    cx_right = _clamp(cx_right_wanted, min_x + r, max_x - r)

    moved = (
        abs(cy - cy_wanted) > 1e-9
        or abs(cx_left - cx_left_wanted) > 1e-9
        or abs(cx_right - cx_right_wanted) > 1e-9
    )
    if moved:
        warnings.append(
            "Hinge pin hole was moved to stay at least one radius "
            f"({r:.2f} mm) away from the panel edge"
        )
    return HingeHoles(PinHole(cx_left, cy, r), PinHole(cx_right, cy, r)), warnings


def _hinge_generic_inputs(inputs: BoxInputs) -> BoxInputs:
    """Inside-referenced inputs whose walls reach the full exterior height.

    The hinged lid drops between the side walls instead of resting on them,
    so the walls must span bottom plate plus interior plus lid thickness.
    """
    target = compute_dimensions(replace(inputs, lid_type=LidType.FLAT))
    return replace(
        inputs,
        height=target.outer_height - inputs.thickness,
        dimension_reference=DimensionReference.INSIDE,
        lid_type=LidType.FLAT,
        dividers_enabled=False,
    )


def specialize_hinge(
    generated: GenerationResult,
    inputs: BoxInputs,
    params: HingeParams | None = None,
) -> HingeResult:
    """Adapt a generic lidded box into a pin-hinged box.

    Args:
        generated: Generic faces (front, back, left, right, bottom, top).
        inputs: The user's box inputs; their exterior size is the target.
        params: Hinge parameters.

    Returns:
        Hinged faces, pin holes and any warnings or errors.
    """
    params = params or HingeParams()
    t = inputs.thickness
    target = compute_dimensions(replace(inputs, lid_type=LidType.FLAT))
    result = HingeResult(
        dimensions=target,
        errors=list(generated.errors),
        warnings=list(generated.warnings),
    )
    if generated.errors:
        return result

    faces: list[GeneratedFace] = []
    for face in generated.faces:
        if face.name in (FaceRole.FRONT, FaceRole.BACK):
            faces.append(resize_face(face, t, target_width=target.outer_width))
        elif face.name in (FaceRole.LEFT, FaceRole.RIGHT):
            faces.append(resize_face(face, t, target_width=target.outer_depth))
        elif face.name == FaceRole.BOTTOM:
            faces.append(
                resize_face(
                    face,
                    t,
                    target_width=target.outer_width,
                    target_height=target.outer_depth,
                )
            )
        elif face.name in (FaceRole.TOP, FaceRole.LID):
            outline = lid_profile(
                target.inner_width, target.inner_depth - LID_DEPTH_CLEARANCE
            )
            faces.append(
                GeneratedFace.from_outline(face.id.replace("-top", "-lid"), FaceRole.LID, outline)
            )
        else:
            faces.append(face)

    notch_depth = params.resolved_notch_depth(t)
    for i, face in enumerate(faces):
        if face.name != FaceRole.FRONT:
            continue
        notched = cut_top_notch(face.vertices, params.notch_width, notch_depth)
        if notched is None:
            result.warnings.append(
                f"Front panel top edge has no straight run of {params.notch_width:g} mm "
                "for the hinge notch"
            )
        else:
            faces[i] = face.with_outline(notched)

    faces = [ensure_simple(f, result.errors, result.warnings) for f in faces]

    reference = next(
        (f for f in faces if f.name == FaceRole.RIGHT),
        next((f for f in faces if f.name == FaceRole.LEFT), None),
    )
    if reference is None:
        result.errors.append("Hinged box needs left and right walls for the pin holes")
        result.faces = faces
        return result

    holes, hole_warnings = compute_pin_holes(reference, params, t)
    result.warnings.extend(hole_warnings)
    for i, face in enumerate(faces):
        hole = {FaceRole.LEFT: holes.left, FaceRole.RIGHT: holes.right}.get(face.name)
        if hole is not None:
            faces[i] = face.with_paths(
                FacePath(DrawPath.circle(hole.cx, hole.cy, hole.r), Operation.CUT)
            )

    logger.debug(
        "Hinge holes at (%.3f, %.3f) and (%.3f, %.3f) r=%.3f",
        holes.left.cx,
        holes.left.cy,
        holes.right.cx,
        holes.right.cy,
        holes.left.r,
    )
    result.faces = faces
    result.holes = holes
    return result


def generate_hinged_box(inputs: BoxInputs, params: HingeParams | None = None) -> HingeResult:
    """Generate and specialize a hinged box in one pass."""
    generated = generate_faces(_hinge_generic_inputs(inputs), prefix="hinged")
    return specialize_hinge(generated, inputs, params)
