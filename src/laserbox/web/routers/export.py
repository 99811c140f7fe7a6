"""Export format endpoints."""

from fastapi import APIRouter
from fastapi.responses import Response

from laserbox.application import BoxOutput
from laserbox.infrastructure.exporters import DxfExporter, ExporterRegistry, SvgExporter
from laserbox.web.dependencies import GenerateCommandDep
from laserbox.web.exceptions import BoxGenerationError
from laserbox.web.routers.generate import run_generation
from laserbox.web.schemas.requests import ExportRequest
from laserbox.web.schemas.responses import ExportFormatsSchema

router = APIRouter(prefix="/export", tags=["export"])


def _generate(command: GenerateCommandDep, request: ExportRequest) -> BoxOutput:
    output = run_generation(command, request.to_config_data())
    if not output.is_valid and not request.force:
        raise BoxGenerationError(output.errors, output.warnings)
    return output


@router.get("/formats", response_model=ExportFormatsSchema)
async def list_export_formats() -> ExportFormatsSchema:
    """List all registered export formats."""
    return ExportFormatsSchema(formats=ExporterRegistry.available_formats())


@router.post("/svg")
async def export_svg(request: ExportRequest, command: GenerateCommandDep) -> Response:
    """Export the box as SVG.

    Returns the packed sheet when the request carries a sheet, otherwise a
    grid of every panel.
    """
    output = _generate(command, request)
    svg_content = SvgExporter(force=request.force).export_string(output)
    return Response(
        content=svg_content,
        media_type="image/svg+xml",
        headers={"Content-Disposition": "attachment; filename=box.svg"},
    )


@router.post("/dxf")
async def export_dxf(request: ExportRequest, command: GenerateCommandDep) -> Response:
    """Export the box as a DXF drawing with CUT, SCORE and ENGRAVE layers."""
    output = _generate(command, request)
    dxf_content = DxfExporter(force=request.force).export_string(output)
    return Response(
        content=dxf_content,
        media_type="application/dxf",
        headers={"Content-Disposition": "attachment; filename=box.dxf"},
    )
