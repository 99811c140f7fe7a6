"""Custom exceptions and error handlers for the REST API."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from laserbox.application.config import ConfigError
from laserbox.infrastructure.exporters import ExportBlockedError


class BoxGenerationError(Exception):
    """Raised when box generation reports blocking errors."""

    def __init__(self, errors: list[str], warnings: list[str] | None = None) -> None:
        self.errors = errors
        self.warnings = warnings or []
        super().__init__(f"Generation failed: {errors}")


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers with the FastAPI app."""

    @app.exception_handler(BoxGenerationError)
    async def generation_error_handler(
        request: Request, exc: BoxGenerationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": "Box generation failed",
                "error_type": "generation",
                "details": [{"message": e} for e in exc.errors]
                + [{"message": w, "warning": True} for w in exc.warnings],
            },
        )

    @app.exception_handler(ExportBlockedError)
    async def export_blocked_handler(
        request: Request, exc: ExportBlockedError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": str(exc),
                "error_type": "export_blocked",
                "details": [{"message": e} for e in exc.errors],
            },
        )

    @app.exception_handler(ConfigError)
    async def config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": exc.message,
                "error_type": exc.error_type,
                "details": exc.details or None,
            },
        )
