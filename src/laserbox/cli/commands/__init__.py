"""CLI command implementations for the laserbox application.

This package contains subcommands for the laserbox CLI, including:
- generate: Generate panels and export them
- pack: Pack panels onto a sheet and write the sheet drawing
- validate: Validate a configuration file
"""

from laserbox.cli.commands.generate import generate_command, pack_command
from laserbox.cli.commands.validate import validate_command

__all__ = ["generate_command", "pack_command", "validate_command"]
