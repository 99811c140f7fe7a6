"""Box generation endpoints."""

from fastapi import APIRouter

from laserbox.application import BoxOutput, GenerateBoxCommand
from laserbox.application.config import config_to_request, load_config_from_dict
from laserbox.domain import Operation
from laserbox.web.dependencies import GenerateCommandDep
from laserbox.web.exceptions import BoxGenerationError
from laserbox.web.schemas.requests import GenerateFromConfigRequest, GenerateRequest
from laserbox.web.schemas.responses import (
    BoxOutputSchema,
    DimensionsSummarySchema,
    DrawerSummarySchema,
    FaceSchema,
    HingeHolesSchema,
    PackingSchema,
    PinHoleSchema,
    PlacementSchema,
)

router = APIRouter(prefix="/generate", tags=["generate"])


def run_generation(command: GenerateBoxCommand, config_data: dict) -> BoxOutput:
    """Validate config data and generate the box.

    Raises:
        ConfigError: If the data fails schema validation.
    """
    config = load_config_from_dict(config_data)
    return command.execute(config_to_request(config))


def output_to_schema(output: BoxOutput) -> BoxOutputSchema:
    """Convert BoxOutput to response schema."""
    faces = [
        FaceSchema(
            id=face.id,
            role=face.name.value,
            label=face.label,
            width=face.width,
            height=face.height,
            valid=face.valid,
            cut_paths=len(face.paths_for(Operation.CUT)),
            score_paths=len(face.paths_for(Operation.SCORE)),
            engrave_paths=len(face.paths_for(Operation.ENGRAVE)),
        )
        for face in output.faces
    ]

    dimensions = None
    if output.dimensions is not None:
        d = output.dimensions
        dimensions = DimensionsSummarySchema(
            outer_width=d.outer_width,
            outer_depth=d.outer_depth,
            outer_height=d.outer_height,
            inner_width=d.inner_width,
            inner_depth=d.inner_depth,
            inner_height=d.inner_height,
        )

    hinge_holes = None
    if output.hinge_holes is not None:
        left, right = output.hinge_holes.left, output.hinge_holes.right
        hinge_holes = HingeHolesSchema(
            left=PinHoleSchema(cx=left.cx, cy=left.cy, r=left.r),
            right=PinHoleSchema(cx=right.cx, cy=right.cy, r=right.r),
        )

    drawer = None
    if output.drawer_dimensions is not None:
        dd = output.drawer_dimensions
        drawer = DrawerSummarySchema(
            outer_width=dd.outer_width,
            outer_depth=dd.outer_depth,
            outer_height=dd.outer_height,
            drawer_width=dd.drawer_width,
            drawer_depth=dd.drawer_depth,
            drawer_height=dd.drawer_height,
        )

    packing = None
    if output.packing_result is not None:
        result = output.packing_result
        packing = PackingSchema(
            sheet_width=result.sheet.width,
            sheet_height=result.sheet.height,
            edge_margin=result.sheet.edge_margin,
            ready_count=result.ready_count,
            overflow_count=len(result.overflow),
            utilization=result.utilization,
            placements=[
                PlacementSchema(
                    face_id=p.face.id,
                    x=p.x,
                    y=p.y,
                    rotation=p.rotation,
                    overflow=p.overflow,
                )
                for p in result.placements
            ],
        )

    return BoxOutputSchema(
        is_valid=output.is_valid,
        box_type=output.box_type.value,
        errors=output.errors,
        warnings=output.warnings,
        faces=faces,
        dimensions=dimensions,
        hinge_holes=hinge_holes,
        drawer=drawer,
        packing=packing,
    )


@router.post("", response_model=BoxOutputSchema)
async def generate_box(
    request: GenerateRequest,
    command: GenerateCommandDep,
) -> BoxOutputSchema:
    """Generate a box from dimensions.

    Raises:
        BoxGenerationError: If generation reports blocking errors (422).
    """
    output = run_generation(command, request.to_config_data())
    if not output.is_valid:
        raise BoxGenerationError(output.errors, output.warnings)
    return output_to_schema(output)


@router.post("/from-config", response_model=BoxOutputSchema)
async def generate_from_config(
    request: GenerateFromConfigRequest,
    command: GenerateCommandDep,
) -> BoxOutputSchema:
    """Generate a box from a full configuration document.

    Raises:
        ConfigError: If the configuration is invalid (422).
        BoxGenerationError: If generation reports blocking errors (422).
    """
    output = run_generation(command, request.config)
    if not output.is_valid:
        raise BoxGenerationError(output.errors, output.warnings)
    return output_to_schema(output)
