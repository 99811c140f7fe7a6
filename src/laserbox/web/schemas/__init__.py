"""Pydantic schemas for the REST API."""

from laserbox.web.schemas.common import (
    DimensionsSchema,
    FingerSchema,
    MaterialSchema,
    OverlaySchema,
    SheetSchema,
)
from laserbox.web.schemas.requests import (
    ConfigValidateRequest,
    ExportRequest,
    GenerateFromConfigRequest,
    GenerateRequest,
)
from laserbox.web.schemas.responses import (
    BoxOutputSchema,
    DimensionsSummarySchema,
    DrawerSummarySchema,
    ErrorResponseSchema,
    ExportFormatsSchema,
    FaceSchema,
    HingeHolesSchema,
    PackingSchema,
    PinHoleSchema,
    PlacementSchema,
    ValidationResultSchema,
)

__all__ = [
    # Common
    "DimensionsSchema",
    "FingerSchema",
    "MaterialSchema",
    "OverlaySchema",
    "SheetSchema",
    # Requests
    "ConfigValidateRequest",
    "ExportRequest",
    "GenerateFromConfigRequest",
    "GenerateRequest",
    # Responses
    "BoxOutputSchema",
    "DimensionsSummarySchema",
    "DrawerSummarySchema",
    "ErrorResponseSchema",
    "ExportFormatsSchema",
    "FaceSchema",
    "HingeHolesSchema",
    "PackingSchema",
    "PinHoleSchema",
    "PlacementSchema",
    "ValidationResultSchema",
]
