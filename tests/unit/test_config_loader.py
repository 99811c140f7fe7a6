"""Unit tests for configuration loading and error reporting."""

from pathlib import Path

import pytest

from laserbox.application.config import (
    BoxConfiguration,
    ConfigError,
    load_config,
    load_config_from_dict,
    load_config_from_text,
)
from laserbox.application.config.loader import format_json_path
from laserbox.domain import BoxType, FrontFaceStyle, LidType


class TestFormatJsonPath:
    def test_dotted_keys(self) -> None:
        assert format_json_path(("box", "width")) == "box.width"

    def test_list_index(self) -> None:
        assert format_json_path(("overlays", 0, "target")) == "overlays[0].target"

    def test_empty_location(self) -> None:
        assert format_json_path(()) == ""


class TestLoadConfig:
    """Tests for loading JSON files."""

    def test_valid_minimal(self, fixtures_path: Path) -> None:
        config = load_config(fixtures_path / "valid_minimal.json")

        assert isinstance(config, BoxConfiguration)
        assert (config.box.width, config.box.depth, config.box.height) == (120, 80, 60)

    def test_valid_full(self, fixtures_path: Path) -> None:
        config = load_config(fixtures_path / "valid_full.json")

        assert config.schema_version == "1.1"
        assert config.lid.type == LidType.SLIDING
        assert config.dividers.enabled
        assert config.sheet is not None
        assert config.sheet.width == 600
        assert len(config.overlays) == 1
        assert config.overlays[0].target == "front"
        assert config.output.formats == ["svg", "dxf"]
        assert config.output.project_name == "organizer"

    def test_hinged_and_drawer(self, fixtures_path: Path) -> None:
        hinged = load_config(fixtures_path / "hinged.json")
        drawer = load_config(fixtures_path / "drawer.json")

        assert hinged.box.type == BoxType.HINGED
        assert drawer.box.type == BoxType.DRAWER
        assert drawer.drawer.front_style == FrontFaceStyle.LIP

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path / "nope.json")

        assert exc_info.value.error_type == "file_not_found"
        assert "Config file not found" in str(exc_info.value)

    def test_invalid_json(self, fixtures_path: Path) -> None:
        path = fixtures_path / "invalid_json.json"

        with pytest.raises(ConfigError) as exc_info:
            load_config(path)

        error = exc_info.value
        assert error.error_type == "json_parse"
        assert error.path == path
        assert "line" in error.details[0]
        assert "column" in error.details[0]

    def test_unknown_field(self, fixtures_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(fixtures_path / "unknown_field.json")

        error = exc_info.value
        assert error.error_type == "validation"
        assert [d["path"] for d in error.details] == ["box.colour"]
        assert str(error).startswith("Configuration validation failed:")

    def test_not_an_object(self, fixtures_path: Path) -> None:
        with pytest.raises(ConfigError, match="must be a JSON object") as exc_info:
            load_config(fixtures_path / "not_an_object.json")

        assert exc_info.value.error_type == "validation"


class TestLoadFromTextAndDict:
    def test_text(self) -> None:
        config = load_config_from_text(
            '{"schema_version": "1.0", "box": {"width": 50, "depth": 40, "height": 30}}'
        )

        assert config.box.width == 50

    def test_bad_text(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config_from_text("{")

        assert exc_info.value.error_type == "json_parse"

    def test_dict_reports_every_field(self) -> None:
        data = {
            "schema_version": "1.0",
            "box": {"width": "wide", "depth": 80},
        }

        with pytest.raises(ConfigError) as exc_info:
            load_config_from_dict(data)

        paths = {d["path"] for d in exc_info.value.details}
        assert paths == {"box.width", "box.height"}
        assert "box.width" in exc_info.value.message
        assert "(got: 'wide')" in exc_info.value.message

    def test_overlay_error_path_has_index(self) -> None:
        data = {
            "schema_version": "1.1",
            "box": {"width": 120, "depth": 80, "height": 60},
            "overlays": [{"target": "front", "path": "M 0 0 L 1 1", "scale_x": 0}],
        }

        with pytest.raises(ConfigError) as exc_info:
            load_config_from_dict(data)

        assert exc_info.value.details[0]["path"] == "overlays[0].scale_x"
