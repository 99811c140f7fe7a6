"""Unit tests for CLI override merging and the config adapters."""

from pathlib import Path

import pytest

from laserbox.application.config import (
    ConfigError,
    config_to_inputs,
    config_to_request,
    config_to_sheet,
    load_config,
    merge_config_with_cli,
)
from laserbox.domain import BoxType, DimensionReference, FrontFaceStyle, LidType, Operation


class TestMergeConfigWithCli:
    """Tests for merge_config_with_cli."""

    def test_no_base_uses_defaults(self) -> None:
        config = merge_config_with_cli(width=150, depth=100, height=50)

        assert config.schema_version == "1.0"
        assert (config.box.width, config.box.depth, config.box.height) == (150, 100, 50)
        assert config.material.thickness == 3.0

    def test_no_base_requires_dimensions(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            merge_config_with_cli(width=150, depth=100)

        assert exc_info.value.error_type == "validation"
        assert [d["path"] for d in exc_info.value.details] == ["box.height"]

    def test_override_wins_and_base_is_untouched(self, fixtures_path: Path) -> None:
        base = load_config(fixtures_path / "valid_minimal.json")
        merged = merge_config_with_cli(base, width=200, kerf=0.2)

        assert merged.box.width == 200
        assert merged.material.kerf == 0.2
        assert merged.box.depth == 80
        assert base.box.width == 120

    def test_none_is_ignored(self, fixtures_path: Path) -> None:
        base = load_config(fixtures_path / "valid_minimal.json")
        merged = merge_config_with_cli(base, width=None, thickness=None)

        assert merged.model_dump() == base.model_dump()

    def test_enum_overrides(self) -> None:
        config = merge_config_with_cli(
            width=120,
            depth=80,
            height=60,
            box_type="hinged",
            lid_type="flat_lid",
            dimension_reference="inside",
        )

        assert config.box.type == BoxType.HINGED
        assert config.lid.type == LidType.FLAT
        assert config.box.dimension_reference == DimensionReference.INSIDE

    def test_dividers_tuple_enables_dividers(self) -> None:
        config = merge_config_with_cli(width=120, depth=80, height=60, dividers=(3, 2))

        assert config.dividers.enabled
        assert (config.dividers.count_x, config.dividers.count_z) == (3, 2)

    def test_groove_overrides_reach_inputs(self) -> None:
        config = merge_config_with_cli(
            width=120,
            depth=80,
            height=60,
            lid_type=LidType.SLIDING,
            groove_offset=4.5,
            groove_depth=2,
        )
        inputs = config_to_inputs(config)

        assert (config.lid.groove_offset, config.lid.groove_depth) == (4.5, 2)
        assert inputs.groove_band == (4.5, 2)

    def test_formats(self) -> None:
        config = merge_config_with_cli(width=120, depth=80, height=60, formats=("svg", "dxf"))

        assert config.output.formats == ["svg", "dxf"]

    def test_sheet_override_creates_section(self) -> None:
        config = merge_config_with_cli(width=120, depth=80, height=60, spacing=5)

        assert config.sheet is not None
        assert config.sheet.spacing == 5
        assert config.sheet.width == 600

    def test_overrides_are_clamped(self) -> None:
        config = merge_config_with_cli(width=9000, depth=80, height=60)

        assert config.box.width == 5000

    def test_invalid_override_is_config_error(self) -> None:
        with pytest.raises(ConfigError):
            merge_config_with_cli(width=120, depth=80, height=60, box_type="barrel")

    def test_unknown_override(self) -> None:
        with pytest.raises(TypeError, match="Unknown override"):
            merge_config_with_cli(width=120, depth=80, height=60, colour="red")


class TestAdapters:
    """Tests for config to domain conversion."""

    def test_inputs_carry_every_section(self, fixtures_path: Path) -> None:
        inputs = config_to_inputs(load_config(fixtures_path / "valid_full.json"))

        assert (inputs.width, inputs.depth, inputs.height) == (160, 110, 70)
        assert inputs.thickness == 3
        assert inputs.kerf == 0.15
        assert inputs.finger_bounds == (8, 20)
        assert inputs.lid_type == LidType.SLIDING
        assert inputs.dividers_enabled
        assert (inputs.divider_count_x, inputs.divider_count_z) == (2, 2)

    def test_sheet(self, fixtures_path: Path) -> None:
        sheet = config_to_sheet(load_config(fixtures_path / "valid_full.json"))

        assert sheet is not None
        assert (sheet.width, sheet.height, sheet.spacing) == (600, 400, 3)

    def test_no_sheet_section(self, fixtures_path: Path) -> None:
        assert config_to_sheet(load_config(fixtures_path / "valid_minimal.json")) is None

    def test_request_for_simple_box(self, fixtures_path: Path) -> None:
        request = config_to_request(load_config(fixtures_path / "valid_full.json"))

        assert request.box_type == BoxType.SIMPLE
        assert request.hinge is None
        assert request.drawer is None
        assert len(request.overlays) == 1
        assert request.overlays[0].target == "front"
        assert request.overlays[0].path_data == "M 0 0 L 20 0 L 20 10 L 0 10 Z"
        assert request.overlays[0].operation == Operation.ENGRAVE

    def test_request_for_hinged_box(self, fixtures_path: Path) -> None:
        request = config_to_request(load_config(fixtures_path / "hinged.json"))

        assert request.hinge is not None
        assert request.hinge.pin_clearance == 1.5
        assert request.drawer is None

    def test_request_for_drawer_box(self, fixtures_path: Path) -> None:
        request = config_to_request(load_config(fixtures_path / "drawer.json"))

        assert request.hinge is None
        assert request.drawer is not None
        assert request.drawer.front_style == FrontFaceStyle.LIP
