"""Application commands (use cases) for box generation."""

from __future__ import annotations

import logging

from laserbox.domain import (
    BoxType,
    EngraveOverlayItem,
    FaceRole,
    GeneratedFace,
    OverlayPlacement,
    artwork_from_path_data,
    generate_faces,
    generate_hinged_box,
    specialize_drawer,
)
from laserbox.infrastructure.sheet_packer import ColumnPacker

from .dtos import BoxOutput, BoxRequest, OverlayInput

logger = logging.getLogger(__name__)


class GenerateBoxCommand:
    """Command to generate a complete set of box panels.

    Dispatches on the request's box type to the face generator and the
    matching specialization, resolves artwork overlays against the generated
    panels and optionally packs them onto a sheet.
    """

    def __init__(self, packer_class: type[ColumnPacker] = ColumnPacker) -> None:
        self.packer_class = packer_class

    def execute(self, request: BoxRequest) -> BoxOutput:
        """Execute the box generation command.

        Args:
            request: Box inputs, box type and optional mechanism parameters.

        Returns:
            BoxOutput with panels, auxiliary geometry, errors and warnings.
        """
        output = BoxOutput(box_type=request.box_type, inputs=request.inputs)

        if request.box_type == BoxType.HINGED:
            hinged = generate_hinged_box(request.inputs, request.hinge)
            output.faces = hinged.faces
            output.dimensions = hinged.dimensions
            output.hinge_holes = hinged.holes
            output.errors.extend(hinged.errors)
            output.warnings.extend(hinged.warnings)
        elif request.box_type == BoxType.DRAWER:
            drawer = specialize_drawer(request.inputs, request.drawer)
            output.faces = drawer.faces
            output.drawer_dimensions = drawer.dimensions
            output.errors.extend(drawer.errors)
            output.warnings.extend(drawer.warnings)
        else:
            generated = generate_faces(request.inputs, prefix=BoxType.SIMPLE.value)
            output.faces = generated.faces
            output.dimensions = generated.dimensions
            output.errors.extend(generated.errors)
            output.warnings.extend(generated.warnings)

        for index, overlay in enumerate(request.overlays, start=1):
            item = self._resolve_overlay(overlay, index, output)
            if item is not None:
                output.overlays.append(item)

        sheet = request.sheet
        if sheet is not None and output.faces:
            output.packing_result = self.packer_class(sheet).pack(output.faces)
            for placed in output.packing_result.overflow:
                output.warnings.append(
                    f"Panel '{placed.face.id}' does not fit on the sheet and was not placed "
                    f"(usable area {sheet.usable_width:g} x {sheet.usable_height:g} mm "
                    f"inside a {sheet.edge_margin:g} mm edge margin)"
                )

        logger.info(
            "Generated %s box: %d panels, %d errors, %d warnings",
            request.box_type.value,
            len(output.faces),
            len(output.errors),
            len(output.warnings),
        )
        return output

    def _resolve_overlay(
        self, overlay: OverlayInput, index: int, output: BoxOutput
    ) -> EngraveOverlayItem | None:
        problems = overlay.validate()
        if problems:
            output.errors.extend(f"Overlay {index}: {p}" for p in problems)
            return None

        target = _find_target(output.faces, overlay.target)
        if target is None:
            output.errors.append(f"Overlay {index}: no panel matches '{overlay.target}'")
            return None

        overlay_id = f"overlay-{index}"
        try:
            artwork = artwork_from_path_data(overlay.path_data, overlay_id, overlay.operation)
        except ValueError as e:
            output.errors.append(f"Overlay {index}: {e}")
            return None

        placement = OverlayPlacement(
            x=target.width / 2 if overlay.x is None else overlay.x,
            y=target.height / 2 if overlay.y is None else overlay.y,
            rotation=overlay.rotation,
            scale_x=overlay.scale_x,
            scale_y=overlay.scale_y,
        )
        return EngraveOverlayItem(
            id=overlay_id,
            target_face_id=target.id,
            source=artwork,
            placement=placement,
            operation=overlay.operation,
        )


def _find_target(faces: list[GeneratedFace], target: str) -> GeneratedFace | None:
    """Match a face by id first, then by role."""
    for face in faces:
        if face.id == target:
            return face
    try:
        role = FaceRole(target)
    except ValueError:
        return None
    return next((f for f in faces if f.name == role), None)
