"""Pydantic response schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, Field


class FaceSchema(BaseModel):
    """One generated panel."""

    id: str = Field(..., description="Stable panel id")
    role: str = Field(..., description="Panel role (front, lid, divider, ...)")
    label: str = Field(default="", description="Human readable label")
    width: float = Field(..., description="Bounding box width in mm")
    height: float = Field(..., description="Bounding box height in mm")
    valid: bool = Field(default=True, description="False for preview-only fallbacks")
    cut_paths: int = Field(default=0, description="Number of cut paths")
    score_paths: int = Field(default=0, description="Number of score paths")
    engrave_paths: int = Field(default=0, description="Number of engrave paths")


class DimensionsSummarySchema(BaseModel):
    """Resolved outer and inner box size."""

    outer_width: float
    outer_depth: float
    outer_height: float
    inner_width: float
    inner_depth: float
    inner_height: float


class PinHoleSchema(BaseModel):
    """Hinge pin hole in panel-local coordinates."""

    cx: float
    cy: float
    r: float


class HingeHolesSchema(BaseModel):
    """Mirrored pin holes in the left and right walls."""

    left: PinHoleSchema
    right: PinHoleSchema


class DrawerSummarySchema(BaseModel):
    """Shell and drawer sizes."""

    outer_width: float
    outer_depth: float
    outer_height: float
    drawer_width: float
    drawer_depth: float
    drawer_height: float


class PlacementSchema(BaseModel):
    """Panel position on the sheet."""

    face_id: str
    x: float
    y: float
    rotation: int = Field(default=0, description="0 or 90 degrees")
    overflow: bool = Field(default=False, description="True when off the sheet")


class PackingSchema(BaseModel):
    """Sheet layout summary."""

    sheet_width: float
    sheet_height: float
    edge_margin: float = Field(..., description="Clear border kept along each sheet edge in mm")
    ready_count: int
    overflow_count: int
    utilization: float = Field(..., description="Fraction of the sheet covered")
    placements: list[PlacementSchema] = Field(default_factory=list)


class BoxOutputSchema(BaseModel):
    """Response for box generation."""

    is_valid: bool = Field(..., description="Whether generation was successful")
    box_type: str = Field(..., description="Box type")
    errors: list[str] = Field(default_factory=list, description="Error messages")
    warnings: list[str] = Field(default_factory=list, description="Warning messages")
    faces: list[FaceSchema] = Field(default_factory=list, description="Generated panels")
    dimensions: DimensionsSummarySchema | None = None
    hinge_holes: HingeHolesSchema | None = None
    drawer: DrawerSummarySchema | None = None
    packing: PackingSchema | None = None


class ValidationResultSchema(BaseModel):
    """Response for configuration validation."""

    is_valid: bool = Field(..., description="Whether configuration is valid")
    errors: list[dict[str, Any]] = Field(default_factory=list, description="Validation errors")
    warnings: list[dict[str, Any]] = Field(
        default_factory=list, description="Validation warnings"
    )


class ExportFormatsSchema(BaseModel):
    """Response for available export formats."""

    formats: list[str] = Field(..., description="Available format names")


class ErrorResponseSchema(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")
    error_type: str = Field(..., description="Error type identifier")
    details: list[dict[str, Any]] | dict[str, Any] | None = Field(
        default=None, description="Additional error details"
    )
