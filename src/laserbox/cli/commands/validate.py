"""Validate command for checking configuration files.

Checks a JSON configuration for syntax and schema errors, then runs the
fabrication checks (kerf, finger fit, drawer fit, sheet fit).
"""

from pathlib import Path
from typing import Annotated

import typer

from laserbox.application.config import ConfigError, load_config, validate_config
from laserbox.cli.commands.output_handlers import (
    display_load_error,
    display_validation_result,
)


def validate_command(
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON configuration file to validate"),
    ],
) -> None:
    """Validate a box configuration file.

    Exit codes:
        0 - Configuration is valid with no warnings
        1 - Configuration has errors (cannot be used)
        2 - Configuration is valid but has warnings

    Example:
        laserbox validate my-box.json
    """
    typer.echo(f"Validating {config_file}...")
    typer.echo()

    try:
        config = load_config(config_file)
    except ConfigError as e:
        display_load_error(e)
        typer.echo()
        typer.echo("Validation failed.", err=True)
        raise typer.Exit(code=1)

    result = validate_config(config)
    display_validation_result(result)
    raise typer.Exit(code=result.exit_code)
