"""Sliding-drawer specialization.

A drawer box is two independent finger-jointed boxes: an open-front shell
and a lidless drawer sized to slide inside it with clearance. Both come from
the generic face generator; this module only works out their sizes and adds
the drawer-specific touches (thumb notch, lip front, dividers).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace

from .face_generator import (
    BoxInputs,
    compute_dimensions,
    generate_dividers,
    generate_faces,
    generate_open_front_shell,
    rectangle,
)
from .geometry import insert_into_edge, is_simple_polygon, simplify_closed
from .value_objects import (
    DimensionReference,
    DrawerDimensions,
    FaceRole,
    FrontFaceStyle,
    GeneratedFace,
    LidType,
    Point,
)

logger = logging.getLogger(__name__)

THUMB_NOTCH_STEPS = 18
THUMB_NOTCH_RATIO = 0.18
THUMB_NOTCH_MIN_RADIUS = 4.0
THUMB_NOTCH_MAX_RADIUS = 18.0
THUMB_NOTCH_MIN_EDGE = 10.0


@dataclass(frozen=True)
class DrawerParams:
    """Drawer fit and front options.

    Attributes:
        clearance: Gap between drawer and shell on each side and at the top.
        bottom_offset: Extra gap under the drawer.
        front_style: Flush front or a separate overlapping lip panel.
        lip_reveal: How far the lip overhangs the drawer on every side.
        thumb_notch: Cut a finger pull into the front's top edge.
    """

    clearance: float = 1.0
    bottom_offset: float = 0.0
    front_style: FrontFaceStyle = FrontFaceStyle.FLUSH
    lip_reveal: float = 5.0
    thumb_notch: bool = True

    def __post_init__(self) -> None:
        if self.clearance < 0:
            raise ValueError("Drawer clearance must be non-negative")
        if self.bottom_offset < 0:
            raise ValueError("Drawer bottom offset must be non-negative")
        if self.lip_reveal < 0:
            raise ValueError("Lip reveal must be non-negative")


@dataclass
class DrawerResult:
    """Shell panels, drawer panels and the drawer front.

    Attributes:
        outer_panels: Open-front shell panels.
        drawer_panels: Drawer box panels plus dividers.
        front_face: The face the user sees; the lip panel when
            ``front_style`` is lip, else the drawer's own front.
        dimensions: Resolved shell and drawer sizes.
        errors: Problems that block export.
        warnings: Advisories.
    """

    outer_panels: list[GeneratedFace] = field(default_factory=list)
    drawer_panels: list[GeneratedFace] = field(default_factory=list)
    front_face: GeneratedFace | None = None
    dimensions: DrawerDimensions | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def faces(self) -> list[GeneratedFace]:
        """Every panel to cut, shell first."""
        faces = [*self.outer_panels, *self.drawer_panels]
        if self.front_face is not None and self.front_face.name == FaceRole.DRAWER_FRONT:
            faces.append(self.front_face)
        return faces


def _shell_inputs(inputs: BoxInputs) -> BoxInputs:
    return replace(inputs, lid_type=LidType.FLAT, dividers_enabled=False)


def compute_drawer_dimensions(
    inputs: BoxInputs, params: DrawerParams
) -> tuple[DrawerDimensions, list[str]]:
    """Size the shell and the drawer that slides into it.

    The drawer loses ``clearance`` on each side of its width and depth, and
    ``clearance + bottom_offset`` of its height. A bottom offset larger than
    half the shell's interior height is clamped.

    Returns:
        The dimensions and any warnings raised while clamping.
    """
    warnings: list[str] = []
    shell = compute_dimensions(_shell_inputs(inputs))
    bottom_offset = params.bottom_offset
    limit = max(shell.inner_height / 2, 0.0)
    if bottom_offset > limit:
        warnings.append(
            f"Drawer bottom offset {bottom_offset:g} mm clamped to {limit:g} mm "
            "(half the shell interior height)"
        )
        bottom_offset = limit
    c = params.clearance
    dims = DrawerDimensions(
        outer_width=shell.outer_width,
        outer_depth=shell.outer_depth,
        outer_height=shell.outer_height,
        thickness=inputs.thickness,
        shell_inner_width=shell.inner_width,
        shell_inner_depth=shell.inner_depth,
        shell_inner_height=shell.inner_height,
        drawer_width=shell.inner_width - 2 * c,
        drawer_depth=shell.inner_depth - 2 * c,
        drawer_height=shell.inner_height - c - bottom_offset,
    )
    return dims, warnings


def _top_flat_edges(points: list[Point]) -> list[int]:
    min_y = min(p.y for p in points)
    n = len(points)
    return [
        i
        for i in range(n)
        if abs(points[i].y - min_y) < 1e-3 and abs(points[(i + 1) % n].y - min_y) < 1e-3
    ]


def cut_thumb_notch(vertices: tuple[Point, ...] | list[Point]) -> list[Point] | None:
    """Cut a semicircular finger pull into the longest flat run of the top edge.

    The radius is 18% of the smaller panel dimension, kept within 4..18 mm,
    and the notch never reaches closer than 1 mm to either end of the run.

    Returns:
        The new outline, or None when the top edge has no usable run.
    """
    points = list(vertices)
    candidates = _top_flat_edges(points)
    if not candidates:
        return None
    n = len(points)
    index = max(candidates, key=lambda i: abs(points[(i + 1) % n].x - points[i].x))
    a, b = points[index], points[(index + 1) % n]
    start, end = min(a.x, b.x), max(a.x, b.x)
    if end - start <= THUMB_NOTCH_MIN_EDGE:
        return None

    xs = [p.x for p in points]
    ys = [p.y for p in points]
    panel_w = max(xs) - min(xs)
    panel_h = max(ys) - min(ys)
    r = min(panel_w, panel_h) * THUMB_NOTCH_RATIO
    r = min(max(r, THUMB_NOTCH_MIN_RADIUS), THUMB_NOTCH_MAX_RADIUS)
    cx = (start + end) / 2
    x1 = max(cx - r, start + 1)
    x2 = min(cx + r, end - 1)
    if x2 - x1 <= 1.5:
        return None

    rx = (x2 - x1) / 2
    depth = min(r, panel_h / 2)
    forward = b.x >= a.x
    detour = []
    for i in range(THUMB_NOTCH_STEPS + 1):
        angle = math.pi * i / THUMB_NOTCH_STEPS
        # Sweep left to right along the edge direction, dipping into the panel.
        dx = -math.cos(angle) if forward else math.cos(angle)
        detour.append(Point(cx + rx * dx, a.y + depth * math.sin(angle)))
    return simplify_closed(insert_into_edge(points, index, detour))


def _notched(face: GeneratedFace, warnings: list[str]) -> GeneratedFace:
    outline = cut_thumb_notch(face.vertices)
    if outline is None:
        warnings.append(f"{face.label}: top edge too short for a thumb notch")
        return face
    if not is_simple_polygon(outline):
        warnings.append(f"{face.label}: thumb notch would cross the outline, skipped")
        return face
    return face.with_outline(outline)


def specialize_drawer(inputs: BoxInputs, params: DrawerParams | None = None) -> DrawerResult:
    """Generate the shell, the drawer, its front and optional dividers.

    Args:
        inputs: Outer box inputs; dividers apply to the drawer.
        params: Drawer fit and front options.

    Returns:
        The drawer result. When the clearance collapses the drawer, the
        result carries an error and no panels.
    """
    params = params or DrawerParams()
    dims, warnings = compute_drawer_dimensions(inputs, params)
    result = DrawerResult(dimensions=dims, warnings=warnings)

    if params.clearance < inputs.kerf:
        result.warnings.append(
            f"Drawer clearance {params.clearance:g} mm is smaller than the kerf "
            f"({inputs.kerf:g} mm); the drawer may bind"
        )
    if not dims.is_positive:
        result.errors.append(
            "Drawer clearance leaves no room for the drawer "
            f"({dims.drawer_width:g} x {dims.drawer_depth:g} x {dims.drawer_height:g} mm)"
        )
        return result

    shell = generate_open_front_shell(_shell_inputs(inputs), prefix="drawer-shell")
    result.errors.extend(shell.errors)
    result.warnings.extend(shell.warnings)
    result.outer_panels = shell.faces

    drawer_inputs = replace(
        inputs,
        width=dims.drawer_width,
        depth=dims.drawer_depth,
        height=dims.drawer_height,
        dimension_reference=DimensionReference.OUTSIDE,
        lid_type=LidType.NONE,
        dividers_enabled=False,
    )
    drawer = generate_faces(drawer_inputs, prefix="drawer")
    result.errors.extend(drawer.errors)
    result.warnings.extend(w for w in drawer.warnings if w not in result.warnings)
    if drawer.errors:
        return result

    panels = list(drawer.faces)
    front_index = next(i for i, f in enumerate(panels) if f.name == FaceRole.FRONT)

    if params.front_style == FrontFaceStyle.LIP:
        reveal = params.lip_reveal
        lip = GeneratedFace.from_outline(
            "drawer-drawer_front",
            FaceRole.DRAWER_FRONT,
            rectangle(dims.drawer_width + 2 * reveal, dims.drawer_height + 2 * reveal),
            label="drawer front",
        )
        if params.thumb_notch:
            lip = _notched(lip, result.warnings)
        result.front_face = lip
    else:
        if params.thumb_notch:
            panels[front_index] = _notched(panels[front_index], result.warnings)
        result.front_face = panels[front_index]

    if inputs.dividers_enabled:
        panels.extend(
            generate_dividers(
                dims.inner_width,
                dims.inner_depth,
                dims.inner_height,
                inputs.divider_count_x,
                inputs.divider_count_z,
                inputs.thickness,
                inputs.divider_clearance,
                "drawer",
                result.errors,
                result.warnings,
            )
        )
    result.drawer_panels = panels

    logger.debug(
        "Drawer %.2f x %.2f x %.2f in shell %.2f x %.2f x %.2f",
        dims.drawer_width,
        dims.drawer_depth,
        dims.drawer_height,
        dims.outer_width,
        dims.outer_depth,
        dims.outer_height,
    )
    return result
