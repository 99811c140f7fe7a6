"""Data Transfer Objects for the application layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from laserbox.domain import (
    BoxDimensions,
    BoxInputs,
    BoxType,
    DrawerDimensions,
    DrawerParams,
    EngraveOverlayItem,
    GeneratedFace,
    HingeHoles,
    HingeParams,
    Operation,
)

if TYPE_CHECKING:
    from laserbox.infrastructure.sheet_packer import PackingResult, SheetConfig


@dataclass
class OverlayInput:
    """Artwork to engrave onto one of the generated panels.

    Attributes:
        target: Face id (``"simple-front"``) or role (``"front"``).
        path_data: SVG path data of the artwork.
        x: Centre X on the target face; defaults to the face centre.
        y: Centre Y on the target face; defaults to the face centre.
        rotation: Clockwise rotation in degrees.
        scale_x: Horizontal scale factor.
        scale_y: Vertical scale factor.
        operation: Laser operation for the artwork.
    """

    target: str
    path_data: str
    x: float | None = None
    y: float | None = None
    rotation: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    operation: Operation = Operation.ENGRAVE

    def validate(self) -> list[str]:
        """Validate input and return list of error messages."""
        errors: list[str] = []
        if not self.target:
            errors.append("Overlay target must not be empty")
        if not self.path_data.strip():
            errors.append("Overlay path data must not be empty")
        if self.scale_x == 0 or self.scale_y == 0:
            errors.append("Overlay scale must be non-zero")
        return errors


@dataclass
class BoxRequest:
    """Input DTO for one box generation run.

    Attributes:
        inputs: Box dimensions, material and joint parameters.
        box_type: Which specialization to apply.
        hinge: Hinge parameters for hinged boxes.
        drawer: Drawer parameters for drawer boxes.
        sheet: Pack the panels onto this sheet when given.
        overlays: Artwork to merge onto panels.
    """

    inputs: BoxInputs
    box_type: BoxType = BoxType.SIMPLE
    hinge: HingeParams | None = None
    drawer: DrawerParams | None = None
    sheet: SheetConfig | None = None
    overlays: list[OverlayInput] = field(default_factory=list)


@dataclass
class BoxOutput:
    """Output DTO containing the generated panels and everything derived.

    Attributes:
        box_type: Box variant that was generated.
        inputs: The inputs the panels were generated from.
        faces: Every panel to cut, in generation order.
        dimensions: Resolved outer/inner box dimensions.
        hinge_holes: Pin holes for hinged boxes.
        drawer_dimensions: Shell and drawer sizes for drawer boxes.
        overlays: Resolved artwork overlays.
        errors: Problems that block export.
        warnings: Advisories that do not block export.
        packing_result: Sheet layout, when packing was requested.
    """

    box_type: BoxType
    inputs: BoxInputs
    faces: list[GeneratedFace] = field(default_factory=list)
    dimensions: BoxDimensions | None = None
    hinge_holes: HingeHoles | None = None
    drawer_dimensions: DrawerDimensions | None = None
    overlays: list[EngraveOverlayItem] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    packing_result: PackingResult | None = None

    @property
    def is_valid(self) -> bool:
        """Check if the box was generated without blocking errors."""
        return len(self.errors) == 0

    def face(self, face_id: str) -> GeneratedFace | None:
        return next((f for f in self.faces if f.id == face_id), None)
