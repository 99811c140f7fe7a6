"""Typer CLI for laser-cut box generation."""

import logging
from typing import Annotated

import typer

from laserbox import __version__
from laserbox.cli.commands import generate_command, pack_command, validate_command
from laserbox.infrastructure.exporters import ExporterRegistry

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

app = typer.Typer(
    name="laserbox",
    help="Generate finger-jointed laser-cut boxes as SVG and DXF.",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"laserbox {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log generation details")
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version", callback=_version_callback, is_eager=True, help="Show the version"
        ),
    ] = False,
) -> None:
    """Generate finger-jointed laser-cut boxes as SVG and DXF."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)


app.command(name="generate")(generate_command)
app.command(name="pack")(pack_command)
app.command(name="validate")(validate_command)


@app.command()
def formats() -> None:
    """List the registered export formats."""
    for name in ExporterRegistry.available_formats():
        exporter_class = ExporterRegistry.get(name)
        kind = "directory" if exporter_class.writes_directory else f".{exporter_class.file_extension}"
        typer.echo(f"{name:<8} {kind}")


if __name__ == "__main__":
    app()
