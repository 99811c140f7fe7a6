"""Pydantic request schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, Field

from laserbox.domain import BoxType, DimensionReference, LidType
from laserbox.web.schemas.common import (
    DimensionsSchema,
    FingerSchema,
    MaterialSchema,
    OverlaySchema,
    SheetSchema,
)


class GenerateRequest(BaseModel):
    """Request for generating a box from dimensions."""

    box_type: BoxType = Field(default=BoxType.SIMPLE, description="Box type")
    dimensions: DimensionsSchema = Field(..., description="Box dimensions")
    dimension_reference: DimensionReference = Field(
        default=DimensionReference.OUTSIDE, description="Inside or outside dimensions"
    )
    material: MaterialSchema = Field(default_factory=MaterialSchema, description="Material")
    fingers: FingerSchema = Field(default_factory=FingerSchema, description="Finger sizing")
    lid: LidType = Field(default=LidType.NONE, description="Top closure")
    groove_offset: float | None = Field(
        default=None, ge=0, le=50, description="Sliding-lid groove distance below the wall top"
    )
    groove_depth: float | None = Field(
        default=None, gt=0, le=50, description="Sliding-lid groove height"
    )
    dividers_x: int = Field(default=1, ge=1, le=20, description="Compartments across the width")
    dividers_z: int = Field(default=1, ge=1, le=20, description="Compartments across the depth")
    sheet: SheetSchema | None = Field(default=None, description="Pack onto this sheet")
    overlays: list[OverlaySchema] = Field(default_factory=list, description="Engraving artwork")

    def to_config_data(self) -> dict[str, Any]:
        """Equivalent configuration file content."""
        data: dict[str, Any] = {
            "schema_version": "1.1",
            "box": {
                "type": self.box_type.value,
                "width": self.dimensions.width,
                "depth": self.dimensions.depth,
                "height": self.dimensions.height,
                "dimension_reference": self.dimension_reference.value,
            },
            "material": self.material.model_dump(),
            "fingers": self.fingers.model_dump(exclude_none=True),
            "lid": self._lid_data(),
            "overlays": [o.model_dump(mode="json", exclude_none=True) for o in self.overlays],
        }
        if self.dividers_x > 1 or self.dividers_z > 1:
            data["dividers"] = {
                "enabled": True,
                "count_x": self.dividers_x,
                "count_z": self.dividers_z,
            }
        if self.sheet is not None:
            data["sheet"] = self.sheet.model_dump()
        return data

    def _lid_data(self) -> dict[str, Any]:
        lid: dict[str, Any] = {"type": self.lid.value}
        if self.groove_offset is not None:
            lid["groove_offset"] = self.groove_offset
        if self.groove_depth is not None:
            lid["groove_depth"] = self.groove_depth
        return lid


class GenerateFromConfigRequest(BaseModel):
    """Request for generating a box from a full configuration."""

    config: dict[str, Any] = Field(..., description="Full box configuration JSON")


class ConfigValidateRequest(BaseModel):
    """Request for validating a configuration."""

    config: dict[str, Any] = Field(..., description="Box configuration JSON")


class ExportRequest(GenerateRequest):
    """Request for exporting a box to a specific format."""

    force: bool = Field(default=False, description="Export despite generation errors")
