"""Common Pydantic schemas shared across requests and responses."""

from pydantic import BaseModel, Field

from laserbox.domain import Operation


class DimensionsSchema(BaseModel):
    """Box dimensions in millimetres."""

    width: float = Field(..., gt=0, le=5000, description="Width in mm")
    depth: float = Field(..., gt=0, le=5000, description="Depth in mm")
    height: float = Field(..., gt=0, le=5000, description="Height in mm")


class MaterialSchema(BaseModel):
    """Sheet material."""

    thickness: float = Field(default=3.0, gt=0, le=50, description="Thickness in mm")
    kerf: float = Field(default=0.15, ge=0, le=1, description="Laser kerf in mm")


class FingerSchema(BaseModel):
    """Finger joint sizing."""

    width: float | None = Field(default=None, gt=0, description="Fixed finger width in mm")
    min: float = Field(default=8.0, gt=0, description="Smallest finger width in mm")
    max: float = Field(default=20.0, gt=0, description="Largest finger width in mm")


class SheetSchema(BaseModel):
    """Stock sheet for packing."""

    width: float = Field(default=600.0, gt=0, le=5000, description="Sheet width in mm")
    height: float = Field(default=400.0, gt=0, le=5000, description="Sheet height in mm")
    spacing: float = Field(
        default=3.0,
        ge=0,
        le=100,
        description="Gap between panels and margin to each sheet edge in mm",
    )
    auto_rotate: bool = Field(default=False, description="Allow 90 degree rotation")


class OverlaySchema(BaseModel):
    """Artwork engraved onto a panel."""

    target: str = Field(..., min_length=1, description="Panel id or role")
    path: str = Field(..., min_length=1, description="SVG path data")
    x: float | None = Field(default=None, description="Centre X on the panel")
    y: float | None = Field(default=None, description="Centre Y on the panel")
    rotation: float = Field(default=0.0, description="Clockwise rotation in degrees")
    scale_x: float = Field(default=1.0, description="Horizontal scale")
    scale_y: float = Field(default=1.0, description="Vertical scale")
    operation: Operation = Field(default=Operation.ENGRAVE, description="Laser operation")
