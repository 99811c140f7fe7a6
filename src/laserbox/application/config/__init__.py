"""Configuration schema and loading system for box specifications.

This package provides JSON-based configuration loading and validation for
box specifications: Pydantic models for the schema, a loader with
structured errors, adapters into domain objects, and fabrication checks.

Example:
    >>> from pathlib import Path
    >>> from laserbox.application.config import load_config, ConfigError
    >>>
    >>> try:
    ...     config = load_config(Path("my-box.json"))
    ...     print(f"Box: {config.box.width}x{config.box.depth}x{config.box.height}")
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from laserbox.application.config.adapter import (
    config_to_drawer_params,
    config_to_hinge_params,
    config_to_inputs,
    config_to_request,
    config_to_sheet,
)
from laserbox.application.config.loader import (
    ConfigError,
    load_config,
    load_config_from_dict,
    load_config_from_text,
)
from laserbox.application.config.merger import merge_config_with_cli
from laserbox.application.config.schema import (
    SUPPORTED_VERSIONS,
    BoxConfig,
    BoxConfiguration,
    DividerConfig,
    DrawerConfig,
    FingerConfig,
    HingeConfig,
    LidConfig,
    MaterialConfig,
    OutputConfig,
    OverlayConfig,
    SheetConfigSchema,
)
from laserbox.application.config.validator import (
    ValidationError,
    ValidationResult,
    ValidationWarning,
    validate_config,
)

__all__ = [
    # Schema
    "SUPPORTED_VERSIONS",
    "BoxConfig",
    "BoxConfiguration",
    "DividerConfig",
    "DrawerConfig",
    "FingerConfig",
    "HingeConfig",
    "LidConfig",
    "MaterialConfig",
    "OutputConfig",
    "OverlayConfig",
    "SheetConfigSchema",
    # Loading
    "ConfigError",
    "load_config",
    "load_config_from_dict",
    "load_config_from_text",
    "merge_config_with_cli",
    # Adapters
    "config_to_drawer_params",
    "config_to_hinge_params",
    "config_to_inputs",
    "config_to_request",
    "config_to_sheet",
    # Validation
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
    "validate_config",
]
