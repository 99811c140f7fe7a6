"""FastAPI REST API for box generation.

Provides endpoints for generating boxes, validating configurations, and
exporting panels as SVG and DXF.

Usage:
    uvicorn laserbox.web:app --reload
"""

from laserbox.web.app import app, create_app

__all__ = ["app", "create_app"]
