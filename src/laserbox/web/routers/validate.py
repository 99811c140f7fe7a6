"""Configuration validation endpoint."""

from fastapi import APIRouter

from laserbox.application.config import ConfigError, load_config_from_dict, validate_config
from laserbox.web.schemas.requests import ConfigValidateRequest
from laserbox.web.schemas.responses import ValidationResultSchema

router = APIRouter(prefix="/validate", tags=["validate"])


@router.post("", response_model=ValidationResultSchema)
async def validate_configuration(request: ConfigValidateRequest) -> ValidationResultSchema:
    """Validate a configuration without generating output.

    Schema errors and fabrication errors are both reported in the body with
    status 200; ``is_valid`` tells them apart from a clean result.
    """
    try:
        config = load_config_from_dict(request.config)
    except ConfigError as e:
        return ValidationResultSchema(
            is_valid=False,
            errors=[
                {"path": d.get("path", ""), "message": d.get("message", "")} for d in e.details
            ],
        )

    result = validate_config(config)
    return ValidationResultSchema(
        is_valid=result.is_valid,
        errors=[{"path": e.path, "message": e.message, "value": e.value} for e in result.errors],
        warnings=[
            {"path": w.path, "message": w.message, "suggestion": w.suggestion}
            for w in result.warnings
        ],
    )
