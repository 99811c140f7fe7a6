"""Console output shared by the generate, pack and validate commands."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import typer

from laserbox.infrastructure.exporters import (
    ExportBlockedError,
    ExporterRegistry,
    ExportManager,
)

if TYPE_CHECKING:
    from laserbox.application.config import ConfigError, ValidationResult
    from laserbox.application.dtos import BoxOutput

__all__ = [
    "display_load_error",
    "display_validation_result",
    "echo_summary",
    "handle_multi_format_export",
    "parse_formats",
]


def parse_formats(formats: str | list[str]) -> list[str]:
    """Normalize a comma-separated string or list of format names.

    "all" expands to every registered format. Unknown names exit with code 1.
    """
    names = formats.split(",") if isinstance(formats, str) else list(formats)
    names = [name.strip().lower() for name in names if name.strip()]
    available = ExporterRegistry.available_formats()
    if "all" in names:
        return available

    invalid = [name for name in names if name not in available]
    if invalid:
        typer.echo(f"Unknown formats: {', '.join(invalid)}", err=True)
        typer.echo(f"Available formats: {', '.join(available)}", err=True)
        raise typer.Exit(code=1)
    if not names:
        typer.echo("No formats to export.", err=True)
        raise typer.Exit(code=1)
    return names


def echo_summary(output: BoxOutput, err: bool = False) -> None:
    """Print the panel list, then warnings and errors to stderr.

    With ``err`` the panel list goes to stderr too, keeping stdout clean for
    a drawing written there.
    """
    typer.echo(f"{output.box_type.value} box: {len(output.faces)} panels", err=err)
    for face in output.faces:
        flag = "" if face.valid else "  [preview only]"
        typer.echo(f"  {face.id:<28} {face.width:8.2f} x {face.height:8.2f} mm{flag}", err=err)

    packing = output.packing_result
    if packing is not None:
        typer.echo(
            f"Sheet {packing.sheet.width:g} x {packing.sheet.height:g} mm "
            f"({packing.sheet.edge_margin:g} mm edge margin): "
            f"{packing.ready_count} placed, {len(packing.overflow)} overflow, "
            f"{packing.utilization:.1%} used",
            err=err,
        )

    for warning in output.warnings:
        typer.echo(f"Warning: {warning}", err=True)
    for error in output.errors:
        typer.echo(f"Error: {error}", err=True)


def handle_multi_format_export(
    formats: list[str],
    output_dir: Path,
    project_name: str,
    output: BoxOutput,
    force: bool = False,
) -> dict[str, Path]:
    """Export to every requested format and list the written paths.

    Exits with code 1 when the export is blocked or fails.
    """
    manager = ExportManager(output_dir, force=force)
    try:
        files = manager.export_all(formats, output, project_name)
    except ExportBlockedError as e:
        typer.echo(f"Export blocked: {len(e.errors)} error(s). Use --force to export anyway.", err=True)
        raise typer.Exit(code=1)
    except (OSError, ValueError) as e:
        typer.echo(f"Export error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo("\nExported files:")
    for fmt, path in files.items():
        typer.echo(f"  {fmt.upper()}: {path}")
    return files


def _value_line(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list)):
        return None
    return f"    Value: {value!r}"


def _load_error_lines(error: ConfigError) -> list[str]:
    if error.error_type == "file_not_found":
        return [f"  File not found: {error.path}"]
    if error.error_type == "json_parse":
        lines = ["  Invalid JSON syntax"]
        for d in error.details:
            lines.append(
                f"    Line {d.get('line', '?')}, Column {d.get('column', '?')}: {d.get('message')}"
            )
        return lines
    if error.error_type == "validation":
        lines = []
        for d in error.details:
            lines.append(f"  {d.get('path') or '<root>'}: {d.get('message')}")
            value = _value_line(d.get("value"))
            if value:
                lines.append(value)
        return lines
    return [f"  {error.message}"]


def display_load_error(error: ConfigError) -> None:
    """Print a config that failed to load, one problem per line, on stderr."""
    for line in ["Errors:", *_load_error_lines(error)]:
        typer.echo(line, err=True)


def display_validation_result(result: ValidationResult) -> None:
    """Print the fabrication check findings and a one-line verdict."""
    if result.errors:
        typer.echo("Errors:", err=True)
        for issue in result.errors:
            typer.echo(f"  {issue.path}: {issue.message}", err=True)
            value = _value_line(issue.value)
            if value:
                typer.echo(value, err=True)
        typer.echo()
    if result.warnings:
        typer.echo("Warnings:")
        for warning in result.warnings:
            typer.echo(f"  {warning.path}: {warning.message}")
            if warning.suggestion:
                typer.echo(f"    Suggestion: {warning.suggestion}")
        typer.echo()

    counts = f"{len(result.errors)} error(s), {len(result.warnings)} warning(s)"
    if result.errors:
        typer.echo(f"Validation failed: {counts}", err=True)
    elif result.warnings:
        typer.echo(f"Validation passed with {len(result.warnings)} warning(s)")
    else:
        typer.echo("Validation passed. Configuration is valid.")
