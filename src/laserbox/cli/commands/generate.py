"""Generate and pack commands.

Both commands take the box either from a JSON configuration file, from
options, or from a file with options overriding it.
"""

from pathlib import Path
from typing import Annotated

import typer

from laserbox.application import BoxOutput, GenerateBoxCommand
from laserbox.application.config import (
    BoxConfiguration,
    ConfigError,
    config_to_request,
    load_config,
    merge_config_with_cli,
)
from laserbox.cli.commands.output_handlers import (
    display_load_error,
    echo_summary,
    handle_multi_format_export,
    parse_formats,
)
from laserbox.domain import BoxType, DimensionReference, LidType
from laserbox.infrastructure.exporters import ExportBlockedError, SvgExporter

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to JSON configuration file"),
]
TypeOption = Annotated[BoxType | None, typer.Option("--type", help="Box type")]
WidthOption = Annotated[float | None, typer.Option("--width", "-w", help="Box width in mm")]
DepthOption = Annotated[float | None, typer.Option("--depth", "-d", help="Box depth in mm")]
HeightOption = Annotated[float | None, typer.Option("--height", "-h", help="Box height in mm")]
ThicknessOption = Annotated[
    float | None, typer.Option("--thickness", "-t", help="Material thickness in mm")
]
KerfOption = Annotated[float | None, typer.Option("--kerf", "-k", help="Laser kerf in mm")]
FingerOption = Annotated[
    float | None, typer.Option("--finger-width", help="Fixed finger width in mm")
]
LidOption = Annotated[LidType | None, typer.Option("--lid", help="Top closure")]
GrooveOffsetOption = Annotated[
    float | None,
    typer.Option("--groove-offset", help="Sliding-lid groove distance below the wall top in mm"),
]
GrooveDepthOption = Annotated[
    float | None, typer.Option("--groove-depth", help="Sliding-lid groove height in mm")
]
ReferenceOption = Annotated[
    DimensionReference | None,
    typer.Option("--reference", help="Whether sizes are inside or outside dimensions"),
]
SheetWidthOption = Annotated[
    float | None, typer.Option("--sheet-width", help="Sheet width in mm")
]
SheetHeightOption = Annotated[
    float | None, typer.Option("--sheet-height", help="Sheet height in mm")
]
SpacingOption = Annotated[
    float | None,
    typer.Option("--spacing", help="Gap between panels and margin to each sheet edge in mm"),
]
RotateOption = Annotated[
    bool | None,
    typer.Option("--rotate/--no-rotate", help="Allow panels to be turned 90 degrees"),
]
ForceOption = Annotated[
    bool, typer.Option("--force", help="Export even when generation reports errors")
]


def _resolve_config(config_file: Path | None, **overrides) -> BoxConfiguration:
    """Load the config file (if any) and apply CLI overrides."""
    base = None
    if config_file is not None:
        try:
            base = load_config(config_file)
        except ConfigError as e:
            display_load_error(e)
            raise typer.Exit(code=1)
    elif None in (overrides.get("width"), overrides.get("depth"), overrides.get("height")):
        typer.echo(
            "Error: --width, --depth, and --height are required when --config is not provided",
            err=True,
        )
        raise typer.Exit(code=1)

    try:
        return merge_config_with_cli(base, **overrides)
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)


def _generate(config: BoxConfiguration, err: bool = False) -> BoxOutput:
    output = GenerateBoxCommand().execute(config_to_request(config))
    echo_summary(output, err=err)
    return output


def generate_command(
    config_file: ConfigOption = None,
    box_type: TypeOption = None,
    width: WidthOption = None,
    depth: DepthOption = None,
    height: HeightOption = None,
    thickness: ThicknessOption = None,
    kerf: KerfOption = None,
    finger_width: FingerOption = None,
    lid: LidOption = None,
    groove_offset: GrooveOffsetOption = None,
    groove_depth: GrooveDepthOption = None,
    reference: ReferenceOption = None,
    dividers_x: Annotated[
        int | None, typer.Option("--dividers-x", help="Compartments across the width")
    ] = None,
    dividers_z: Annotated[
        int | None, typer.Option("--dividers-z", help="Compartments across the depth")
    ] = None,
    sheet_width: SheetWidthOption = None,
    sheet_height: SheetHeightOption = None,
    spacing: SpacingOption = None,
    rotate: RotateOption = None,
    output_formats: Annotated[
        str | None,
        typer.Option(
            "--output-formats",
            "-f",
            help="Comma-separated export formats: svg,dxf,panels (or 'all')",
        ),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Output directory for exported files"),
    ] = None,
    project_name: Annotated[
        str | None,
        typer.Option("--project-name", help="Project name for output file naming"),
    ] = None,
    force: ForceOption = False,
) -> None:
    """Generate box panels and export them.

    Examples:
        laserbox generate --width 120 --depth 80 --height 60
        laserbox generate --config my-box.json --output-formats svg,dxf -o ./out
        laserbox generate --config my-box.json --width 150 --type drawer
    """
    dividers = None
    if dividers_x is not None or dividers_z is not None:
        dividers = (dividers_x or 1, dividers_z or 1)

    config = _resolve_config(
        config_file,
        box_type=box_type,
        width=width,
        depth=depth,
        height=height,
        thickness=thickness,
        kerf=kerf,
        finger_width=finger_width,
        lid_type=lid,
        groove_offset=groove_offset,
        groove_depth=groove_depth,
        dimension_reference=reference,
        dividers=dividers,
        sheet_width=sheet_width,
        sheet_height=sheet_height,
        spacing=spacing,
        auto_rotate=rotate,
        output_dir=str(output_dir) if output_dir is not None else None,
        project_name=project_name,
    )
    force = force or config.output.force
    formats = parse_formats(output_formats if output_formats is not None else config.output.formats)

    output = _generate(config)
    if not output.is_valid and not force:
        typer.echo("Generation failed; nothing exported. Use --force to export anyway.", err=True)
        raise typer.Exit(code=1)

    target_dir = Path(config.output.output_dir) if config.output.output_dir else Path(".")
    handle_multi_format_export(formats, target_dir, config.output.project_name, output, force)


def pack_command(
    config_file: ConfigOption = None,
    box_type: TypeOption = None,
    width: WidthOption = None,
    depth: DepthOption = None,
    height: HeightOption = None,
    thickness: ThicknessOption = None,
    kerf: KerfOption = None,
    lid: LidOption = None,
    sheet_width: SheetWidthOption = None,
    sheet_height: SheetHeightOption = None,
    spacing: SpacingOption = None,
    rotate: RotateOption = None,
    output_file: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="SVG file to write; prints to stdout if omitted"),
    ] = None,
    show_sheet: Annotated[
        bool, typer.Option("--show-sheet", help="Outline the sheet boundary")
    ] = False,
    force: ForceOption = False,
) -> None:
    """Pack the panels onto a sheet and write the sheet SVG.

    The sheet defaults to 600 x 400 mm when neither the config nor the
    options give one. Panels that do not fit are reported and drawn in a
    separate overflow group beside the sheet.

    Examples:
        laserbox pack --width 120 --depth 80 --height 60 --sheet-width 300 --sheet-height 200
        laserbox pack --config my-box.json -o sheet.svg
    """
    config = _resolve_config(
        config_file,
        box_type=box_type,
        width=width,
        depth=depth,
        height=height,
        thickness=thickness,
        kerf=kerf,
        lid_type=lid,
        sheet_width=sheet_width,
        sheet_height=sheet_height,
        spacing=spacing,
        auto_rotate=rotate,
    )
    if config.sheet is None:
        config = merge_config_with_cli(config, spacing=3.0)

    output = _generate(config, err=output_file is None)
    exporter = SvgExporter(layout="sheet", show_sheet=show_sheet, force=force or config.output.force)
    try:
        svg = exporter.export_string(output)
    except ExportBlockedError as e:
        typer.echo(f"Export blocked: {len(e.errors)} error(s). Use --force to export anyway.", err=True)
        raise typer.Exit(code=1)

    if output_file is None:
        typer.echo(svg)
        return
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(svg, encoding="utf-8")
    typer.echo(f"\nSheet written to {output_file}")
