"""Unit tests for the box generation command."""

from dataclasses import replace

import pytest

from laserbox.application import BoxRequest, GenerateBoxCommand, OverlayInput
from laserbox.domain import (
    BoxInputs,
    BoxType,
    DrawerParams,
    FaceRole,
    FrontFaceStyle,
    HingeParams,
    Operation,
)
from laserbox.infrastructure.sheet_packer import SheetConfig

SQUARE = "M 0 0 L 10 0 L 10 10 L 0 10 Z"


class TestOverlayInput:
    def test_valid_input_has_no_errors(self) -> None:
        assert OverlayInput(target="front", path_data=SQUARE).validate() == []

    def test_problems_are_listed(self) -> None:
        errors = OverlayInput(target="", path_data="  ", scale_x=0).validate()

        assert len(errors) == 3


class TestGenerateBoxCommand:
    def test_simple_box(self, generate_command: GenerateBoxCommand, default_inputs: BoxInputs) -> None:
        output = generate_command.execute(BoxRequest(inputs=default_inputs))

        assert output.is_valid
        assert output.box_type == BoxType.SIMPLE
        assert len(output.faces) == 5
        assert output.dimensions is not None
        assert output.packing_result is None
        assert output.face("simple-bottom") is not None

    def test_hinged_box(self, generate_command: GenerateBoxCommand, default_inputs: BoxInputs) -> None:
        request = BoxRequest(inputs=default_inputs, box_type=BoxType.HINGED, hinge=HingeParams())
        output = generate_command.execute(request)

        assert output.is_valid
        assert output.hinge_holes is not None
        assert output.face("hinged-lid") is not None

    def test_hinged_box_without_params_uses_defaults(
        self, generate_command: GenerateBoxCommand, default_inputs: BoxInputs
    ) -> None:
        output = generate_command.execute(BoxRequest(inputs=default_inputs, box_type=BoxType.HINGED))

        assert output.hinge_holes.left.r == pytest.approx(2.25)

    def test_drawer_box(self, generate_command: GenerateBoxCommand, default_inputs: BoxInputs) -> None:
        request = BoxRequest(
            inputs=default_inputs,
            box_type=BoxType.DRAWER,
            drawer=DrawerParams(front_style=FrontFaceStyle.LIP),
        )
        output = generate_command.execute(request)

        assert output.is_valid
        assert output.drawer_dimensions.drawer_width == pytest.approx(112)
        assert len(output.faces) == 11

    def test_errors_are_reported_not_raised(self, generate_command: GenerateBoxCommand) -> None:
        inputs = BoxInputs(width=120, depth=80, height=60, thickness=1, kerf=1)
        output = generate_command.execute(BoxRequest(inputs=inputs))

        assert not output.is_valid
        assert output.faces == []

    def test_overlay_resolved_by_role(
        self, generate_command: GenerateBoxCommand, default_inputs: BoxInputs
    ) -> None:
        request = BoxRequest(
            inputs=default_inputs, overlays=[OverlayInput(target="front", path_data=SQUARE)]
        )
        output = generate_command.execute(request)

        assert output.is_valid
        item = output.overlays[0]
        assert item.id == "overlay-1"
        assert item.target_face_id == "simple-front"
        assert (item.placement.x, item.placement.y) == pytest.approx((60, 30))
        assert item.operation == Operation.ENGRAVE

    def test_overlay_resolved_by_id_with_explicit_position(
        self, generate_command: GenerateBoxCommand, default_inputs: BoxInputs
    ) -> None:
        overlay = OverlayInput(target="simple-left", path_data=SQUARE, x=20, y=15, rotation=45)
        output = generate_command.execute(BoxRequest(inputs=default_inputs, overlays=[overlay]))

        item = output.overlays[0]
        assert item.target_face_id == "simple-left"
        assert (item.placement.x, item.placement.y, item.placement.rotation) == (20, 15, 45)

    def test_unknown_overlay_target_is_error(
        self, generate_command: GenerateBoxCommand, default_inputs: BoxInputs
    ) -> None:
        request = BoxRequest(
            inputs=default_inputs, overlays=[OverlayInput(target="lid", path_data=SQUARE)]
        )
        output = generate_command.execute(request)

        assert not output.is_valid
        assert output.errors == ["Overlay 1: no panel matches 'lid'"]

    def test_malformed_overlay_path_is_error(
        self, generate_command: GenerateBoxCommand, default_inputs: BoxInputs
    ) -> None:
        request = BoxRequest(
            inputs=default_inputs, overlays=[OverlayInput(target="front", path_data="M 0")]
        )
        output = generate_command.execute(request)

        assert output.errors and output.errors[0].startswith("Overlay 1:")
        assert output.overlays == []

    def test_packing_on_sheet(self, generate_command: GenerateBoxCommand, default_inputs: BoxInputs) -> None:
        request = BoxRequest(inputs=default_inputs, sheet=SheetConfig())
        output = generate_command.execute(request)

        assert output.packing_result is not None
        assert output.packing_result.ready_count == 5
        assert output.warnings == []

    def test_overflow_becomes_warning(
        self, generate_command: GenerateBoxCommand, default_inputs: BoxInputs
    ) -> None:
        request = BoxRequest(inputs=default_inputs, sheet=SheetConfig(width=100, height=400))
        output = generate_command.execute(request)

        assert output.is_valid
        assert (
            "Panel 'simple-front' does not fit on the sheet and was not placed "
            "(usable area 94 x 394 mm inside a 3 mm edge margin)"
        ) in output.warnings
        assert output.packing_result.ready_count == 2

    def test_dividers(self, generate_command: GenerateBoxCommand, default_inputs: BoxInputs) -> None:
        inputs = replace(default_inputs, dividers_enabled=True, divider_count_x=2, divider_count_z=3)
        output = generate_command.execute(BoxRequest(inputs=inputs))

        dividers = [f for f in output.faces if f.name == FaceRole.DIVIDER]
        assert len(dividers) == 3
