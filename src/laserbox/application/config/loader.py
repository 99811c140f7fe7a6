"""Configuration loading with structured errors.

JSON text is read, parsed and validated against ``BoxConfiguration``. Every
failure is reported as a ``ConfigError`` whose ``error_type`` tells callers
(the CLI and the web API) which stage failed and whose ``details`` carry the
offending JSON paths.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from laserbox.application.config.schema import BoxConfiguration
from laserbox.domain.value_objects import LaserboxError

logger = logging.getLogger(__name__)


class ConfigError(LaserboxError):
    """A configuration could not be loaded.

    Attributes:
        message: The primary error message
        error_type: One of file_not_found, permission_denied,
            file_read_error, json_parse, validation
        path: Path to the configuration file (if applicable)
        details: Line/column for JSON errors, one entry per field for
            validation errors
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


def format_json_path(loc: tuple[str | int, ...]) -> str:
    """Join a Pydantic location into a JSON path.

    Examples:
        >>> format_json_path(("box", "width"))
        'box.width'
        >>> format_json_path(("overlays", 0, "target"))
        'overlays[0].target'
    """
    path = ""
    for segment in loc:
        if isinstance(segment, int):
            path += f"[{segment}]"
        elif path:
            path += f".{segment}"
        else:
            path = str(segment)
    return path


def validation_details(error: PydanticValidationError) -> list[dict[str, Any]]:
    """One dictionary per field error with path, message, value and type."""
    return [
        {
            "path": format_json_path(err["loc"]),
            "message": err["msg"],
            "value": err.get("input"),
            "error_type": err["type"],
        }
        for err in error.errors()
    ]


def _validation_message(details: list[dict[str, Any]]) -> str:
    lines = ["Configuration validation failed:"]
    for detail in details:
        line = f"  - {detail['path'] or '<root>'}: {detail['message']}"
        value = detail.get("value")
        # Nested objects are too noisy to echo back
        if value is not None and not isinstance(value, (dict, list)):
            line += f" (got: {value!r})"
        lines.append(line)
    return "\n".join(lines)


def load_config_from_dict(
    data: dict[str, Any], path: Path | None = None
) -> BoxConfiguration:
    """Validate an already-parsed configuration.

    Args:
        data: Decoded JSON object
        path: Source file, used in error reports only

    Raises:
        ConfigError: With error_type "validation".
    """
    try:
        config = BoxConfiguration.model_validate(data)
    except PydanticValidationError as e:
        details = validation_details(e)
        raise ConfigError(
            message=_validation_message(details),
            error_type="validation",
            path=path,
            details=details,
        ) from e
    logger.debug(
        f"Loaded {config.box.type.value} box config "
        f"{config.box.width}x{config.box.depth}x{config.box.height} mm"
    )
    return config


def load_config_from_text(text: str, path: Path | None = None) -> BoxConfiguration:
    """Parse and validate configuration JSON text.

    Raises:
        ConfigError: With error_type "json_parse" or "validation".
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        source = path if path is not None else "configuration"
        raise ConfigError(
            message=(
                f"Invalid JSON in {source} (line {e.lineno}, column {e.colno}): {e.msg}"
            ),
            error_type="json_parse",
            path=path,
            details=[{"line": e.lineno, "column": e.colno, "message": e.msg}],
        ) from e

    if not isinstance(data, dict):
        raise ConfigError(
            message=f"Configuration must be a JSON object, got {type(data).__name__}",
            error_type="validation",
            path=path,
            details=[{"path": "", "message": "Expected a JSON object", "value": None}],
        )
    return load_config_from_dict(data, path)


def load_config(path: Path) -> BoxConfiguration:
    """Load and validate a box configuration file.

    Args:
        path: Path to the JSON configuration file

    Returns:
        A validated BoxConfiguration instance

    Raises:
        ConfigError: If the file cannot be read, parsed or validated.

    Example:
        >>> try:
        ...     config = load_config(Path("my-box.json"))
        ... except ConfigError as e:
        ...     for detail in e.details:
        ...         print(f"  {detail['path']}: {detail['message']}")
    """
    if not path.exists():
        raise ConfigError(
            message=f"Config file not found: {path}",
            error_type="file_not_found",
            path=path,
        )

    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError as e:
        raise ConfigError(
            message=f"Permission denied reading config file: {path}",
            error_type="permission_denied",
            path=path,
        ) from e
    except OSError as e:
        raise ConfigError(
            message=f"Error reading config file: {path}: {e}",
            error_type="file_read_error",
            path=path,
        ) from e

    return load_config_from_text(content, path)
