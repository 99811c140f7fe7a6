"""Configuration merging for CLI override support.

Precedence is CLI args > config values > defaults. Only non-None CLI
arguments override configuration values, and the merged result is validated
again so overrides are clamped exactly like file values.
"""

from __future__ import annotations

from typing import Any

from laserbox.application.config.loader import load_config_from_dict
from laserbox.application.config.schema import BoxConfiguration

DEFAULT_SCHEMA_VERSION = "1.0"

# CLI keyword -> (config section, field)
_OVERRIDES: dict[str, tuple[str, str]] = {
    "box_type": ("box", "type"),
    "width": ("box", "width"),
    "depth": ("box", "depth"),
    "height": ("box", "height"),
    "dimension_reference": ("box", "dimension_reference"),
    "thickness": ("material", "thickness"),
    "kerf": ("material", "kerf"),
    "finger_width": ("fingers", "width"),
    "lid_type": ("lid", "type"),
    "groove_offset": ("lid", "groove_offset"),
    "groove_depth": ("lid", "groove_depth"),
    "sheet_width": ("sheet", "width"),
    "sheet_height": ("sheet", "height"),
    "spacing": ("sheet", "spacing"),
    "auto_rotate": ("sheet", "auto_rotate"),
    "output_dir": ("output", "output_dir"),
    "project_name": ("output", "project_name"),
}


def merge_config_with_cli(
    config: BoxConfiguration | None = None, **overrides: Any
) -> BoxConfiguration:
    """Merge CLI arguments into a configuration.

    Args:
        config: Base configuration, or None to start from defaults. Without
            a base, width, depth and height must all be given.
        **overrides: Any of the keywords in ``_OVERRIDES`` plus
            ``dividers`` as a ``(count_x, count_z)`` tuple and ``formats``
            as a list. None values are ignored.

    Returns:
        A new validated BoxConfiguration.

    Raises:
        ConfigError: If the merged values fail validation.
        TypeError: If an unknown override keyword is passed.

    Example:
        >>> merged = merge_config_with_cli(config, width=150.0)
        >>> merged.box.width
        150.0
    """
    if config is None:
        data: dict[str, Any] = {"schema_version": DEFAULT_SCHEMA_VERSION, "box": {}}
    else:
        data = config.model_dump(mode="json", exclude_none=True)

    for name, value in overrides.items():
        if value is None:
            continue
        if name == "dividers":
            count_x, count_z = value
            data.setdefault("dividers", {}).update(
                {"enabled": True, "count_x": count_x, "count_z": count_z}
            )
        elif name == "formats":
            data.setdefault("output", {})["formats"] = list(value)
        elif name in _OVERRIDES:
            section, key = _OVERRIDES[name]
            data.setdefault(section, {})[key] = value
        else:
            raise TypeError(f"Unknown override: {name}")

    return load_config_from_dict(data)
