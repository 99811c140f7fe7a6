"""API routers for the REST API."""

from laserbox.web.routers.export import router as export_router
from laserbox.web.routers.generate import router as generate_router
from laserbox.web.routers.validate import router as validate_router

__all__ = [
    "export_router",
    "generate_router",
    "validate_router",
]
