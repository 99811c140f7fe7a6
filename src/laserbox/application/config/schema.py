"""Pydantic configuration schema models for box specifications.

This module defines the configuration schema for JSON-based box configuration
files. It uses Pydantic v2 for validation and serialization.

Numeric fields are clamped into their documented ranges rather than rejected,
so a config that asks for a 0.05 mm material or a 9 m box still loads; every
clamp is logged. Values of the wrong type are left to Pydantic to report.

The enums are reused from the domain layer to ensure consistency and avoid
duplication.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

from laserbox.domain.value_objects import (
    BoxType,
    DimensionReference,
    FrontFaceStyle,
    LidType,
    Operation,
)

logger = logging.getLogger(__name__)

# Supported schema versions for configuration files
# Version 1.0: Box, material, fingers, lid, dividers, hinge, drawer, sheet, output
# Version 1.1: Added engraving overlays
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0", "1.1"})

# Closed ranges numeric fields are clamped into (mm unless noted)
DIMENSION_RANGE = (10.0, 5000.0)
THICKNESS_RANGE = (1.0, 50.0)
KERF_RANGE = (0.0, 1.0)
FINGER_WIDTH_RANGE = (2.0, 200.0)
SHEET_RANGE = (50.0, 5000.0)
SPACING_RANGE = (0.0, 100.0)
DIVIDER_COUNT_RANGE = (1, 20)
CLEARANCE_RANGE = (0.0, 50.0)
GROOVE_OFFSET_RANGE = (0.0, 50.0)
GROOVE_DEPTH_RANGE = (0.1, 50.0)


def clamp_value(value: Any, low: float, high: float, name: str) -> Any:
    """Clamp a numeric value into ``[low, high]``, logging when it moves.

    Non-numeric input is returned untouched for Pydantic to reject.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return value
    if not isinstance(value, (int, float)):
        return value
    if value < low or value > high:
        clamped = min(max(value, low), high)
        logger.warning(f"{name} {value} is outside [{low}, {high}]; clamped to {clamped}")
        return clamped
    return value


class BoxConfig(BaseModel):
    """Box type and size.

    Attributes:
        type: Box variant (simple, hinged, drawer)
        width: Width along X in mm
        depth: Depth along Z in mm
        height: Height along Y in mm
        dimension_reference: Whether the sizes are inside or outside dimensions
    """

    model_config = ConfigDict(extra="forbid")

    type: BoxType = BoxType.SIMPLE
    width: float = Field(..., description="Box width in mm")
    depth: float = Field(..., description="Box depth in mm")
    height: float = Field(..., description="Box height in mm")
    dimension_reference: DimensionReference = DimensionReference.OUTSIDE

    @field_validator("width", "depth", "height", mode="before")
    @classmethod
    def clamp_dimensions(cls, v: Any, info: ValidationInfo) -> Any:
        return clamp_value(v, *DIMENSION_RANGE, f"box.{info.field_name}")


class MaterialConfig(BaseModel):
    """Sheet material.

    Attributes:
        thickness: Material thickness in mm (1 to 50)
        kerf: Width removed by the laser beam in mm (0 to 1)
    """

    model_config = ConfigDict(extra="forbid")

    thickness: float = 3.0
    kerf: float = 0.15

    @field_validator("thickness", mode="before")
    @classmethod
    def clamp_thickness(cls, v: Any) -> Any:
        return clamp_value(v, *THICKNESS_RANGE, "material.thickness")

    @field_validator("kerf", mode="before")
    @classmethod
    def clamp_kerf(cls, v: Any) -> Any:
        return clamp_value(v, *KERF_RANGE, "material.kerf")


class FingerConfig(BaseModel):
    """Finger joint sizing.

    Attributes:
        width: Single finger width; overrides min and max when set
        min: Smallest finger width
        max: Largest finger width
        auto_count: Let the generator pick segment counts per edge
        count: Fixed segment count when auto_count is off
    """

    model_config = ConfigDict(extra="forbid")

    width: float | None = None
    min: float = 8.0
    max: float = 20.0
    auto_count: bool = True
    count: int | None = Field(default=None, ge=1, le=999)

    @field_validator("width", "min", "max", mode="before")
    @classmethod
    def clamp_finger_width(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None:
            return v
        return clamp_value(v, *FINGER_WIDTH_RANGE, f"fingers.{info.field_name}")

    @model_validator(mode="after")
    def validate_bounds(self) -> FingerConfig:
        """Validate that max >= min; the bounds are never swapped silently."""
        if self.width is None and self.max < self.min:
            raise ValueError(
                f"fingers.max ({self.max}) must be greater than or equal to "
                f"fingers.min ({self.min})"
            )
        return self

    @model_validator(mode="after")
    def validate_manual_count(self) -> FingerConfig:
        """Validate that manual mode carries a segment count."""
        if not self.auto_count and self.count is None:
            raise ValueError("fingers.count is required when auto_count is false")
        return self


class LidConfig(BaseModel):
    """Top closure.

    Attributes:
        type: none (open top), flat_lid or sliding_lid
        groove_offset: Sliding-lid groove distance below the wall top in mm;
            defaults to the material thickness
        groove_depth: Sliding-lid groove band height in mm; defaults to the
            material thickness
    """

    model_config = ConfigDict(extra="forbid")

    type: LidType = LidType.NONE
    groove_offset: float | None = None
    groove_depth: float | None = None

    @field_validator("groove_offset", mode="before")
    @classmethod
    def clamp_groove_offset(cls, v: Any) -> Any:
        if v is None:
            return v
        return clamp_value(v, *GROOVE_OFFSET_RANGE, "lid.groove_offset")

    @field_validator("groove_depth", mode="before")
    @classmethod
    def clamp_groove_depth(cls, v: Any) -> Any:
        if v is None:
            return v
        return clamp_value(v, *GROOVE_DEPTH_RANGE, "lid.groove_depth")


class DividerConfig(BaseModel):
    """Interior grid dividers.

    Attributes:
        enabled: Generate dividers
        count_x: Compartments across the width (1 to 20)
        count_z: Compartments across the depth (1 to 20)
        clearance: Slack between dividers, walls and slots in mm
    """

    model_config = ConfigDict(extra="forbid")

    enabled: bool = False
    count_x: int = 1
    count_z: int = 1
    clearance: float = 0.2

    @field_validator("count_x", "count_z", mode="before")
    @classmethod
    def clamp_counts(cls, v: Any, info: ValidationInfo) -> Any:
        return clamp_value(v, *DIVIDER_COUNT_RANGE, f"dividers.{info.field_name}")

    @field_validator("clearance", mode="before")
    @classmethod
    def clamp_clearance(cls, v: Any) -> Any:
        return clamp_value(v, 0.0, 5.0, "dividers.clearance")


class HingeConfig(BaseModel):
    """Pin hinge tuning for hinged boxes.

    Attributes:
        top_inset: Extra distance of the pin hole below the wall's top edge
        back_inset: Extra distance of the pin hole from the wall's back edge
        notch_width: Width of the finger notch in the front wall
        notch_depth: Depth of the finger notch; defaults to thickness + 2
        pin_clearance: Added to the thickness to get the hole diameter
    """

    model_config = ConfigDict(extra="forbid")

    top_inset: float = 0.0
    back_inset: float = 0.0
    notch_width: float = 34.0
    notch_depth: float | None = None
    pin_clearance: float = 1.5

    @field_validator("top_inset", "back_inset", "pin_clearance", mode="before")
    @classmethod
    def clamp_offsets(cls, v: Any, info: ValidationInfo) -> Any:
        return clamp_value(v, *CLEARANCE_RANGE, f"hinge.{info.field_name}")

    @field_validator("notch_width", mode="before")
    @classmethod
    def clamp_notch_width(cls, v: Any) -> Any:
        return clamp_value(v, 1.0, DIMENSION_RANGE[1], "hinge.notch_width")

    @field_validator("notch_depth", mode="before")
    @classmethod
    def clamp_notch_depth(cls, v: Any) -> Any:
        if v is None:
            return v
        return clamp_value(v, 0.5, DIMENSION_RANGE[1], "hinge.notch_depth")


class DrawerConfig(BaseModel):
    """Drawer fit for drawer boxes.

    Attributes:
        clearance: Gap between the drawer and the shell on each side in mm
        bottom_offset: Raise the drawer above the shell floor in mm
        front_style: flush front or a lip overlapping the shell opening
        lip_reveal: Lip overlap on each side in mm
        thumb_notch: Cut a finger pull into the drawer front
    """

    model_config = ConfigDict(extra="forbid")

    clearance: float = 1.0
    bottom_offset: float = 0.0
    front_style: FrontFaceStyle = FrontFaceStyle.FLUSH
    lip_reveal: float = 5.0
    thumb_notch: bool = True

    @field_validator("clearance", "lip_reveal", mode="before")
    @classmethod
    def clamp_gaps(cls, v: Any, info: ValidationInfo) -> Any:
        return clamp_value(v, *CLEARANCE_RANGE, f"drawer.{info.field_name}")

    @field_validator("bottom_offset", mode="before")
    @classmethod
    def clamp_bottom_offset(cls, v: Any) -> Any:
        return clamp_value(v, 0.0, DIMENSION_RANGE[1], "drawer.bottom_offset")


class SheetConfigSchema(BaseModel):
    """Stock sheet for packing.

    Attributes:
        width: Sheet width in mm (50 to 5000)
        height: Sheet height in mm (50 to 5000)
        spacing: Gap between panels and margin to the sheet edge in mm
        auto_rotate: Allow panels to be turned 90 degrees
    """

    model_config = ConfigDict(extra="forbid")

    width: float = 600.0
    height: float = 400.0
    spacing: float = 3.0
    auto_rotate: bool = False

    @field_validator("width", "height", mode="before")
    @classmethod
    def clamp_size(cls, v: Any, info: ValidationInfo) -> Any:
        return clamp_value(v, *SHEET_RANGE, f"sheet.{info.field_name}")

    @field_validator("spacing", mode="before")
    @classmethod
    def clamp_spacing(cls, v: Any) -> Any:
        return clamp_value(v, *SPACING_RANGE, "sheet.spacing")


class OverlayConfig(BaseModel):
    """Artwork engraved onto a generated panel.

    Attributes:
        target: Panel id ("simple-front") or role ("front")
        path: SVG path data of the artwork
        x: Centre X on the panel; defaults to the panel centre
        y: Centre Y on the panel; defaults to the panel centre
        rotation: Clockwise rotation in degrees
        scale_x: Horizontal scale factor
        scale_y: Vertical scale factor
        operation: Laser operation for the artwork
    """

    model_config = ConfigDict(extra="forbid")

    target: str = Field(..., min_length=1)
    path: str = Field(..., min_length=1, description="SVG path data")
    x: float | None = None
    y: float | None = None
    rotation: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    operation: Operation = Operation.ENGRAVE

    @field_validator("scale_x", "scale_y")
    @classmethod
    def validate_scale(cls, v: float) -> float:
        if v == 0:
            raise ValueError("Scale must be non-zero")
        return v


class OutputConfig(BaseModel):
    """Configuration for output formats and file paths.

    Attributes:
        formats: List of output formats to generate
        output_dir: Directory for output files
        project_name: Base name for output files
        stroke_width: SVG stroke width for cut and score paths in mm
        force: Export even when generation reported errors
    """

    model_config = ConfigDict(extra="forbid")

    formats: list[str] = Field(default_factory=lambda: ["svg"])
    output_dir: str | None = Field(default=None, description="Directory for output files")
    project_name: str = Field(default="box", min_length=1)
    stroke_width: float = Field(default=0.1, gt=0, le=5)
    force: bool = False

    @field_validator("formats")
    @classmethod
    def validate_formats(cls, v: list[str]) -> list[str]:
        """Validate format names in the formats list."""
        valid_formats = {"svg", "dxf", "panels"}
        invalid = set(v) - valid_formats - {"all"}
        if invalid:
            raise ValueError(f"Invalid formats: {invalid}. Valid formats: {sorted(valid_formats)}")
        return v


class BoxConfiguration(BaseModel):
    """Root configuration model for box specifications.

    Attributes:
        schema_version: Version string in format "major.minor" (e.g., "1.0")
        box: Box type and dimensions
        material: Thickness and kerf
        fingers: Finger joint sizing
        lid: Top closure
        dividers: Interior dividers
        hinge: Hinge tuning, used by hinged boxes
        drawer: Drawer fit, used by drawer boxes
        sheet: Stock sheet; panels are packed when present
        overlays: Engraving artwork (v1.1+)
        output: Output format configuration

    Example:
        >>> config = BoxConfiguration(
        ...     schema_version="1.0",
        ...     box=BoxConfig(width=120, depth=80, height=60)
        ... )
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(..., pattern=r"^\d+\.\d+$")
    box: BoxConfig
    material: MaterialConfig = Field(default_factory=MaterialConfig)
    fingers: FingerConfig = Field(default_factory=FingerConfig)
    lid: LidConfig = Field(default_factory=LidConfig)
    dividers: DividerConfig = Field(default_factory=DividerConfig)
    hinge: HingeConfig = Field(default_factory=HingeConfig)
    drawer: DrawerConfig = Field(default_factory=DrawerConfig)
    sheet: SheetConfigSchema | None = Field(default=None, description="Sheet packing (optional)")
    overlays: list[OverlayConfig] = Field(default_factory=list)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @field_validator("schema_version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        """Validate that schema version is supported.

        Args:
            v: The schema version string

        Returns:
            The validated schema version

        Raises:
            ValueError: If the version is not supported
        """
        if v in SUPPORTED_VERSIONS:
            return v

        major_version = int(v.split(".")[0])
        supported_majors = {int(sv.split(".")[0]) for sv in SUPPORTED_VERSIONS}
        if major_version in supported_majors:
            return v

        raise ValueError(
            f"Unsupported schema version '{v}'. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}"
        )
