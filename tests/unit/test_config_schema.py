"""Unit tests for the configuration schema models."""

import logging

import pytest
from pydantic import ValidationError

from laserbox.application.config import (
    BoxConfig,
    BoxConfiguration,
    FingerConfig,
    LidConfig,
    MaterialConfig,
    OutputConfig,
    OverlayConfig,
    SheetConfigSchema,
)
from laserbox.application.config.schema import clamp_value
from laserbox.domain import BoxType, DimensionReference, FrontFaceStyle, LidType


def minimal(**sections) -> dict:
    data = {"schema_version": "1.0", "box": {"width": 120, "depth": 80, "height": 60}}
    data.update(sections)
    return data


class TestClampValue:
    def test_in_range_unchanged(self) -> None:
        assert clamp_value(5.0, 1.0, 10.0, "x") == 5.0

    def test_out_of_range_is_clamped_and_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            assert clamp_value(12.0, 1.0, 10.0, "material.thickness") == 10.0

        assert "material.thickness" in caplog.text
        assert "clamped" in caplog.text

    def test_numeric_string_is_converted(self) -> None:
        assert clamp_value("0.5", 0.0, 1.0, "kerf") == 0.5

    def test_non_numeric_passes_through(self) -> None:
        assert clamp_value("wide", 1.0, 10.0, "x") == "wide"
        assert clamp_value(True, 1.0, 10.0, "x") is True
        assert clamp_value(None, 1.0, 10.0, "x") is None


class TestBoxConfiguration:
    def test_minimal_defaults(self) -> None:
        config = BoxConfiguration.model_validate(minimal())

        assert config.box.type == BoxType.SIMPLE
        assert config.box.dimension_reference == DimensionReference.OUTSIDE
        assert config.material == MaterialConfig()
        assert config.lid.type == LidType.NONE
        assert not config.dividers.enabled
        assert config.drawer.front_style == FrontFaceStyle.FLUSH
        assert config.sheet is None
        assert config.overlays == []
        assert config.output.formats == ["svg"]
        assert config.output.project_name == "box"

    def test_box_is_required(self) -> None:
        with pytest.raises(ValidationError):
            BoxConfiguration.model_validate({"schema_version": "1.0"})

    def test_unknown_field_rejected(self) -> None:
        data = minimal()
        data["box"]["colour"] = "walnut"

        with pytest.raises(ValidationError, match="colour"):
            BoxConfiguration.model_validate(data)

    @pytest.mark.parametrize("version", ["1.0", "1.1", "1.7"])
    def test_supported_versions(self, version: str) -> None:
        data = minimal()
        data["schema_version"] = version

        assert BoxConfiguration.model_validate(data).schema_version == version

    @pytest.mark.parametrize("version", ["2.0", "1", "one"])
    def test_unsupported_versions(self, version: str) -> None:
        data = minimal()
        data["schema_version"] = version

        with pytest.raises(ValidationError):
            BoxConfiguration.model_validate(data)

    def test_dimensions_are_clamped(self) -> None:
        box = BoxConfig(width=9000, depth=2, height="60")

        assert box.width == 5000
        assert box.depth == 10
        assert box.height == 60.0

    def test_wrong_type_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            BoxConfig(width="wide", depth=80, height=60)

    def test_kerf_is_clamped(self) -> None:
        assert MaterialConfig(kerf=2.5).kerf == 1.0
        assert MaterialConfig(thickness=0.2).thickness == 1.0

    def test_sheet_is_clamped(self) -> None:
        sheet = SheetConfigSchema(width=10, spacing=500)

        assert sheet.width == 50
        assert sheet.spacing == 100


class TestFingerConfig:
    def test_max_below_min_rejected(self) -> None:
        with pytest.raises(ValidationError, match="fingers.max"):
            FingerConfig(min=20, max=10)

    def test_fixed_width_ignores_bounds(self) -> None:
        config = FingerConfig(width=12, min=20, max=10)

        assert config.width == 12

    def test_manual_mode_needs_count(self) -> None:
        with pytest.raises(ValidationError, match="fingers.count"):
            FingerConfig(auto_count=False)

    def test_manual_mode_with_count(self) -> None:
        assert FingerConfig(auto_count=False, count=7).count == 7

    def test_width_is_clamped(self) -> None:
        assert FingerConfig(width=0.5).width == 2.0


class TestLidConfig:
    def test_groove_defaults_to_thickness(self) -> None:
        lid = LidConfig(type=LidType.SLIDING)

        assert lid.groove_offset is None
        assert lid.groove_depth is None

    def test_groove_values_are_clamped(self) -> None:
        lid = LidConfig(type=LidType.SLIDING, groove_offset=-2, groove_depth=0)

        assert lid.groove_offset == 0.0
        assert lid.groove_depth == 0.1


class TestOverlayConfig:
    def test_defaults(self) -> None:
        overlay = OverlayConfig(target="front", path="M 0 0 L 5 5")

        assert overlay.x is None
        assert overlay.scale_x == 1.0

    def test_zero_scale_rejected(self) -> None:
        with pytest.raises(ValidationError, match="non-zero"):
            OverlayConfig(target="front", path="M 0 0 L 5 5", scale_y=0)

    def test_empty_target_rejected(self) -> None:
        with pytest.raises(ValidationError):
            OverlayConfig(target="", path="M 0 0 L 5 5")


class TestOutputConfig:
    def test_valid_formats(self) -> None:
        assert OutputConfig(formats=["svg", "dxf", "panels"]).formats == ["svg", "dxf", "panels"]
        assert OutputConfig(formats=["all"]).formats == ["all"]

    def test_invalid_format(self) -> None:
        with pytest.raises(ValidationError, match="Invalid formats"):
            OutputConfig(formats=["stl"])
