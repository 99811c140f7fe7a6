"""Finger-jointed face generation for rectangular boxes.

Turns :class:`BoxInputs` into a set of closed panel outlines whose edges
interlock. Walls (front, back, left, right) and plates (bottom, top) share
one finger pattern per box axis so mating edges always line up:

- front/back own the vertical corners and carry tabs on their bottom edge
- left/right carry tabs on their bottom edge and notches on their sides
- the bottom plate is notched on all four edges
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .finger_joints import FLAT, EdgeJoint, FingerPattern, build_panel, plan_fingers
from .geometry import EPS, DrawPath, is_simple_polygon, normalize, simplify_closed
from .value_objects import (
    BoxDimensions,
    ConfigurationError,
    DimensionReference,
    FacePath,
    FaceRole,
    GeneratedFace,
    LidType,
    Operation,
    Point,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoxInputs:
    """User-facing box parameters in millimetres.

    Attributes:
        width: Box width (X).
        depth: Box depth (Z).
        height: Box height (Y).
        thickness: Material thickness.
        kerf: Width of material removed by the beam.
        finger_min: Smallest finger width.
        finger_max: Largest finger width.
        finger_width: Single finger width; overrides both bounds when set.
        auto_finger_count: Let the generator choose finger counts.
        finger_count: Fixed segment count used when auto mode is off.
        dimension_reference: Whether sizes are inside or outside dimensions.
        lid_type: Top closure.
        dividers_enabled: Generate grid dividers.
        divider_count_x: Compartments across the width.
        divider_count_z: Compartments across the depth.
        divider_clearance: Slack between dividers and walls/slots.
        groove_offset: Distance from the side wall top to the sliding-lid
            groove; defaults to the thickness.
        groove_depth: Height of the sliding-lid groove band; defaults to the
            thickness.
    """

    width: float
    depth: float
    height: float
    thickness: float = 3.0
    kerf: float = 0.15
    finger_min: float = 8.0
    finger_max: float = 20.0
    finger_width: float | None = None
    auto_finger_count: bool = True
    finger_count: int | None = None
    dimension_reference: DimensionReference = DimensionReference.OUTSIDE
    lid_type: LidType = LidType.NONE
    dividers_enabled: bool = False
    divider_count_x: int = 1
    divider_count_z: int = 1
    divider_clearance: float = 0.2
    groove_offset: float | None = None
    groove_depth: float | None = None

    def __post_init__(self) -> None:
        if self.thickness <= 0:
            raise ValueError("Material thickness must be positive")
        if self.kerf < 0:
            raise ValueError("Kerf must be non-negative")
        if self.finger_width is None and self.finger_max < self.finger_min:
            raise ConfigurationError(
                f"finger_max ({self.finger_max}) must not be smaller than "
                f"finger_min ({self.finger_min})"
            )
        if self.divider_count_x < 1 or self.divider_count_z < 1:
            raise ValueError("Divider counts must be at least 1")
        if self.divider_clearance < 0:
            raise ValueError("Divider clearance must be non-negative")
        if self.groove_offset is not None and self.groove_offset < 0:
            raise ValueError("Groove offset must be non-negative")
        if self.groove_depth is not None and self.groove_depth <= 0:
            raise ValueError("Groove depth must be positive")

    @property
    def finger_bounds(self) -> tuple[float, float]:
        """Effective ``(min, max)`` finger width."""
        if self.finger_width is not None:
            return self.finger_width, self.finger_width
        return self.finger_min, self.finger_max

    @property
    def groove_band(self) -> tuple[float, float]:
        """Effective ``(offset, depth)`` of the sliding-lid groove."""
        offset = self.thickness if self.groove_offset is None else self.groove_offset
        depth = self.thickness if self.groove_depth is None else self.groove_depth
        return offset, depth


@dataclass
class GenerationResult:
    """Faces produced for one box plus any problems found.

    Attributes:
        faces: Generated faces in generation order.
        dimensions: Resolved box dimensions.
        errors: Problems that block export.
        warnings: Advisories that do not block export.
    """

    faces: list[GeneratedFace] = field(default_factory=list)
    dimensions: BoxDimensions | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def face(self, role: FaceRole) -> GeneratedFace | None:
        """First face with the given role."""
        return next((f for f in self.faces if f.name == role), None)


def compute_dimensions(inputs: BoxInputs) -> BoxDimensions:
    """Resolve inside/outside dimensions.

    Width and depth lose one wall on each side. Height loses the bottom plate
    and, when a lid is present, the lid thickness too.
    """
    t = inputs.thickness
    height_padding = t if inputs.lid_type == LidType.NONE else 2 * t
    if inputs.dimension_reference == DimensionReference.OUTSIDE:
        return BoxDimensions(
            outer_width=inputs.width,
            outer_depth=inputs.depth,
            outer_height=inputs.height,
            inner_width=inputs.width - 2 * t,
            inner_depth=inputs.depth - 2 * t,
            inner_height=inputs.height - height_padding,
            thickness=t,
        )
    return BoxDimensions(
        outer_width=inputs.width + 2 * t,
        outer_depth=inputs.depth + 2 * t,
        outer_height=inputs.height + height_padding,
        inner_width=inputs.width,
        inner_depth=inputs.depth,
        inner_height=inputs.height,
        thickness=t,
    )


def rectangle(width: float, height: float) -> list[Point]:
    return [Point(0, 0), Point(width, 0), Point(width, height), Point(0, height)]


def ensure_simple(
    face: GeneratedFace, errors: list[str], warnings: list[str]
) -> GeneratedFace:
    """Swap a self-intersecting face for an invalid rectangle preview."""
    if not face.valid or is_simple_polygon(face.vertices):
        return face
    label = face.label or face.id
    errors.append(f"{label}: outline self-intersects")
    warnings.append(f"{label}: showing a plain rectangle preview only")
    return GeneratedFace.from_outline(
        face.id,
        face.name,
        rectangle(face.width, face.height),
        face.paths[1:],
        valid=False,
        label=face.label,
    )


class FaceBuilder:
    """Builds faces for one box while collecting errors and warnings.

    Patterns are planned once per axis so every pair of mating edges uses the
    same segment layout.
    """

    def __init__(self, inputs: BoxInputs, prefix: str = "simple") -> None:
        self.inputs = inputs
        self.prefix = prefix
        self.errors: list[str] = []
        self.warnings: list[str] = []
        self._patterns: dict[float, FingerPattern | None] = {}

    def pattern(self, length: float) -> FingerPattern | None:
        """Plan (or reuse) the pattern for an edge length.

        Returns None when the edge cannot hold even one finger pair.
        """
        key = round(length, 6)
        if key in self._patterns:
            return self._patterns[key]
        finger_min, finger_max = self.inputs.finger_bounds
        if length < 2 * finger_min:
            self._patterns[key] = None
            return None
        planned = plan_fingers(
            length,
            finger_min,
            finger_max,
            auto_count=self.inputs.auto_finger_count,
            fixed_count=self.inputs.finger_count,
        )
        for message in planned.warnings:
            if message not in self.warnings:
                self.warnings.append(message)
        self._patterns[key] = planned
        return planned

    def joint(self, length: float, inverted: bool = False) -> EdgeJoint | None:
        planned = self.pattern(length)
        if planned is None:
            return None
        return EdgeJoint(planned, inverted)

    def face_id(self, role: FaceRole, suffix: str = "") -> str:
        base = f"{self.prefix}-{role.value}"
        return f"{base}-{suffix}" if suffix else base

    def build(
        self,
        role: FaceRole,
        core_width: float,
        core_height: float,
        edges: dict[str, tuple[float, bool] | None],
        extra_paths: tuple[FacePath, ...] = (),
        suffix: str = "",
    ) -> GeneratedFace:
        """Build one face from its core size and edge joint description.

        Args:
            role: Semantic role of the face.
            core_width: Width between mating walls.
            core_height: Height between mating walls.
            edges: Per side (``top``, ``right``, ``bottom``, ``left``) either
                None for a flat edge or ``(length, inverted)``.
            extra_paths: Additional paths appended after the outline.
            suffix: Id suffix to keep ids unique.
        """
        t = self.inputs.thickness
        joints: dict[str, EdgeJoint] = {}
        too_short: list[str] = []
        for side in ("top", "right", "bottom", "left"):
            spec = edges.get(side)
            if spec is None:
                joints[side] = FLAT
                continue
            length, inverted = spec
            joint = self.joint(length, inverted)
            if joint is None:
                too_short.append(f"{side} ({length:.2f} mm)")
                joints[side] = FLAT
            else:
                joints[side] = joint

        face_id = self.face_id(role, suffix)
        label = f"{role.value} {suffix}".strip()
        if too_short:
            finger_min, _ = self.inputs.finger_bounds
            self.errors.append(
                f"{label}: edge too short for one finger pair "
                f"(needs {2 * finger_min:g} mm): {', '.join(too_short)}"
            )
            self.warnings.append(f"{label}: showing a plain rectangle preview only")
            return self._fallback(face_id, role, core_width, core_height, edges, extra_paths, label)

        raw = build_panel(
            core_width,
            core_height,
            t,
            self.inputs.kerf,
            top=joints["top"],
            right=joints["right"],
            bottom=joints["bottom"],
            left=joints["left"],
        )
        outline, shift = normalize(simplify_closed(raw))
        if not is_simple_polygon(outline):
            self.errors.append(f"{label}: outline self-intersects")
            self.warnings.append(f"{label}: showing a plain rectangle preview only")
            return self._fallback(face_id, role, core_width, core_height, edges, extra_paths, label)

        shifted = tuple(
            FacePath(p.path.translated(shift.x, shift.y), p.operation) for p in extra_paths
        )
        logger.debug("Built %s with %d vertices", face_id, len(outline))
        return GeneratedFace.from_outline(face_id, role, outline, shifted, label=label)

    def _fallback(
        self,
        face_id: str,
        role: FaceRole,
        core_width: float,
        core_height: float,
        edges: dict[str, tuple[float, bool] | None],
        extra_paths: tuple[FacePath, ...],
        label: str,
    ) -> GeneratedFace:
        t = self.inputs.thickness
        width = core_width + t * sum(1 for s in ("left", "right") if edges.get(s))
        height = core_height + t * sum(1 for s in ("top", "bottom") if edges.get(s))
        return GeneratedFace.from_outline(
            face_id,
            role,
            rectangle(max(width, t), max(height, t)),
            extra_paths,
            valid=False,
            label=label,
        )


def sliding_groove(
    core_width: float, offset: float, depth: float, x0: float, core_height: float
) -> FacePath | None:
    """Score band marking the channel a sliding lid runs in.

    The band is clipped to the wall's core height; None when nothing of it
    is left on the panel.
    """
    top = min(max(offset, 0.0), core_height)
    bottom = min(offset + depth, core_height)
    if bottom - top <= EPS:
        return None
    return FacePath(DrawPath.rect(x0, top, core_width, bottom - top), Operation.SCORE)


def build_divider_outline(
    length: float,
    height: float,
    slot_centers: list[float],
    slot_width: float,
    slot_depth: float,
    from_top: bool,
) -> list[Point]:
    """Rectangle with half-height slots for cross-halving dividers."""
    centers = sorted(
        min(max(c, slot_width / 2), length - slot_width / 2) for c in slot_centers
    )
    points = [Point(0, 0)]
    if from_top:
        for c in centers:
            a, b = c - slot_width / 2, c + slot_width / 2
            points += [Point(a, 0), Point(a, slot_depth), Point(b, slot_depth), Point(b, 0)]
        points += [Point(length, 0), Point(length, height), Point(0, height)]
    else:
        points += [Point(length, 0), Point(length, height)]
        for c in reversed(centers):
            a, b = c - slot_width / 2, c + slot_width / 2
            y = height - slot_depth
            points += [Point(b, height), Point(b, y), Point(a, y), Point(a, height)]
        points.append(Point(0, height))
    return simplify_closed(points)


def generate_dividers(
    inner_width: float,
    inner_depth: float,
    height: float,
    count_x: int,
    count_z: int,
    thickness: float,
    clearance: float,
    prefix: str,
    errors: list[str] | None = None,
    warnings: list[str] | None = None,
) -> list[GeneratedFace]:
    """Grid dividers that assemble by cross-halving.

    ``count_x - 1`` dividers run front to back (slotted from the top) and
    ``count_z - 1`` run side to side (slotted from the bottom).

    A grid whose compartments are not wider than one slot leaves no
    material between slots. Those dividers come back as plain rectangle
    previews marked invalid, with the problem appended to ``errors`` and
    ``warnings`` when the caller passes them.
    """
    errors = errors if errors is not None else []
    warnings = warnings if warnings is not None else []
    faces: list[GeneratedFace] = []
    slot_width = thickness + clearance
    slot_depth = height / 2
    length_x = inner_depth - clearance
    length_z = inner_width - clearance
    if length_x <= slot_width or length_z <= slot_width or height <= 0:
        if count_x > 1 or count_z > 1:
            errors.append(
                f"Dividers: interior {inner_width:g} x {inner_depth:g} mm is too small "
                f"for {slot_width:g} mm slots"
            )
        return faces

    pitch_x = inner_depth / count_z
    pitch_z = inner_width / count_x
    crowded = False
    if count_z > 1 and pitch_x <= slot_width + EPS:
        crowded = True
        errors.append(
            f"Dividers: {count_z} rows in {inner_depth:g} mm leave {pitch_x:g} mm "
            f"compartments, not wider than the {slot_width:g} mm slot"
        )
    if count_x > 1 and pitch_z <= slot_width + EPS:
        crowded = True
        errors.append(
            f"Dividers: {count_x} columns in {inner_width:g} mm leave {pitch_z:g} mm "
            f"compartments, not wider than the {slot_width:g} mm slot"
        )

    slots_on_x = [i * pitch_x - clearance / 2 for i in range(1, count_z)]
    slots_on_z = [i * pitch_z - clearance / 2 for i in range(1, count_x)]

    def divider(
        face_id: str, label: str, length: float, slots: list[float], from_top: bool
    ) -> GeneratedFace:
        outline = build_divider_outline(length, height, slots, slot_width, slot_depth, from_top)
        if not crowded and is_simple_polygon(outline):
            return GeneratedFace.from_outline(face_id, FaceRole.DIVIDER, outline, label=label)
        if not crowded:
            errors.append(f"{label}: outline self-intersects")
        warnings.append(f"{label}: showing a plain rectangle preview only")
        return GeneratedFace.from_outline(
            face_id, FaceRole.DIVIDER, rectangle(length, height), valid=False, label=label
        )

    for i in range(count_x - 1):
        faces.append(
            divider(f"{prefix}-divider-x-{i + 1}", f"divider x{i + 1}", length_x, slots_on_x, True)
        )
    for i in range(count_z - 1):
        faces.append(
            divider(f"{prefix}-divider-z-{i + 1}", f"divider z{i + 1}", length_z, slots_on_z, False)
        )
    return faces


def _check_inputs(inputs: BoxInputs, dims: BoxDimensions, result: GenerationResult) -> None:
    finger_min, _ = inputs.finger_bounds
    if inputs.kerf >= inputs.thickness:
        result.errors.append(
            f"Kerf ({inputs.kerf:g} mm) must be smaller than the material thickness "
            f"({inputs.thickness:g} mm)"
        )
    if inputs.kerf >= finger_min:
        result.errors.append(
            f"Kerf ({inputs.kerf:g} mm) must be smaller than the finger width ({finger_min:g} mm)"
        )
    if not dims.is_positive:
        result.errors.append(
            "Resolved interior dimensions must be positive "
            f"(got {dims.inner_width:g} x {dims.inner_depth:g} x {dims.inner_height:g} mm)"
        )


def generate_faces(inputs: BoxInputs, prefix: str = "simple") -> GenerationResult:
    """Generate the finger-jointed faces of a closed-bottom box.

    Produces front, back, left, right and bottom, plus a top (``flat_lid``)
    or lid (``sliding_lid``), plus dividers when enabled. Structurally
    impossible requests return errors and no faces instead of raising.

    Raises:
        ConfigurationError: If the finger bounds are contradictory.
    """
    dims = compute_dimensions(inputs)
    result = GenerationResult(dimensions=dims)
    _check_inputs(inputs, dims, result)
    if result.errors:
        return result

    builder = FaceBuilder(inputs, prefix)
    t = inputs.thickness
    wi, di, hi = dims.inner_width, dims.inner_depth, dims.inner_height

    wall_edges = {
        "right": (hi, False),
        "bottom": (wi, False),
        "left": (hi, False),
    }
    result.faces.append(builder.build(FaceRole.FRONT, wi, hi, wall_edges))
    result.faces.append(builder.build(FaceRole.BACK, wi, hi, wall_edges))

    side_extra: tuple[FacePath, ...] = ()
    if inputs.lid_type == LidType.SLIDING:
        offset, depth = inputs.groove_band
        groove = sliding_groove(di, offset, depth, t, hi)
        if groove is None:
            result.warnings.append(
                f"Sliding lid groove at {offset:g} mm lies below the {hi:g} mm side walls; "
                "groove omitted"
            )
        else:
            side_extra = (groove,)
            if offset + depth > hi + EPS:
                result.warnings.append(
                    f"Sliding lid groove clipped to the {hi:g} mm side wall height"
                )
    side_edges = {
        "right": (hi, True),
        "bottom": (di, False),
        "left": (hi, True),
    }
    result.faces.append(builder.build(FaceRole.LEFT, di, hi, side_edges, side_extra))
    result.faces.append(builder.build(FaceRole.RIGHT, di, hi, side_edges, side_extra))

    plate_edges = {
        "top": (wi, True),
        "right": (di, True),
        "bottom": (wi, True),
        "left": (di, True),
    }
    result.faces.append(builder.build(FaceRole.BOTTOM, wi, di, plate_edges))

    if inputs.lid_type == LidType.FLAT:
        result.faces.append(
            GeneratedFace.from_outline(
                builder.face_id(FaceRole.TOP),
                FaceRole.TOP,
                rectangle(dims.outer_width, dims.outer_depth),
            )
        )
    elif inputs.lid_type == LidType.SLIDING:
        result.faces.append(
            GeneratedFace.from_outline(
                builder.face_id(FaceRole.LID),
                FaceRole.LID,
                rectangle(wi, di),
            )
        )

    if inputs.dividers_enabled:
        result.faces.extend(
            generate_dividers(
                wi,
                di,
                hi,
                inputs.divider_count_x,
                inputs.divider_count_z,
                t,
                inputs.divider_clearance,
                prefix,
                result.errors,
                result.warnings,
            )
        )

    result.errors.extend(builder.errors)
    result.warnings.extend(builder.warnings)
    logger.debug(
        "Generated %d faces for %.1f x %.1f x %.1f box",
        len(result.faces),
        dims.outer_width,
        dims.outer_depth,
        dims.outer_height,
    )
    return result


def generate_open_front_shell(inputs: BoxInputs, prefix: str = "shell") -> GenerationResult:
    """Generate an open-front shell: back, left, right, bottom and top.

    The back is tabbed on all four edges, the side walls drop their front
    joint, and the two plates are notched on every closed edge.
    """
    dims = compute_dimensions(inputs)
    result = GenerationResult(dimensions=dims)
    _check_inputs(inputs, dims, result)
    if result.errors:
        return result

    builder = FaceBuilder(inputs, prefix)
    wi, di, hi = dims.inner_width, dims.inner_depth, dims.inner_height

    result.faces.append(
        builder.build(
            FaceRole.BACK,
            wi,
            hi,
            {
                "top": (wi, False),
                "right": (hi, False),
                "bottom": (wi, False),
                "left": (hi, False),
            },
        )
    )
    side_edges = {
        "top": (di, False),
        "right": (hi, True),
        "bottom": (di, False),
        "left": None,
    }
    result.faces.append(builder.build(FaceRole.LEFT, di, hi, side_edges))
    result.faces.append(builder.build(FaceRole.RIGHT, di, hi, side_edges))

    plate_edges = {
        "top": (wi, True),
        "right": (di, True),
        "bottom": None,
        "left": (di, True),
    }
    result.faces.append(builder.build(FaceRole.BOTTOM, wi, di, plate_edges))
    result.faces.append(builder.build(FaceRole.TOP, wi, di, plate_edges))

    result.errors.extend(builder.errors)
    result.warnings.extend(builder.warnings)
    return result
