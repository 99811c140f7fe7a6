"""Integration tests for the laserbox CLI.

These tests drive the Typer app end to end:
- generate writes the requested formats and refuses broken boxes
- pack writes the sheet SVG to stdout or a file
- validate reports errors and warnings with the right exit codes
"""

from pathlib import Path

import ezdxf
import pytest
from typer.testing import CliRunner

from laserbox import __version__
from laserbox.cli.main import app

FIXTURES_PATH = Path(__file__).parent.parent / "fixtures" / "configs"

BOX = ["--width", "120", "--depth", "80", "--height", "60"]


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


class TestGenerateCommand:
    """Tests for the generate command."""

    def test_generate_svg(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(app, ["generate", *BOX, "-o", str(tmp_path)])

        assert result.exit_code == 0, result.output
        assert "simple box: 5 panels" in result.output
        assert "Exported files:" in result.output
        svg_path = tmp_path / "box_svg.svg"
        assert svg_path.exists()
        assert svg_path.read_text().startswith("<?xml")

    def test_generate_several_formats(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(
            app,
            [
                "generate",
                *BOX,
                "-f",
                "svg,dxf",
                "-o",
                str(tmp_path),
                "--project-name",
                "tray",
            ],
        )

        assert result.exit_code == 0, result.output
        assert (tmp_path / "tray_svg.svg").exists()
        doc = ezdxf.readfile(tmp_path / "tray_dxf.dxf")
        assert "CUT" in doc.layers

    def test_generate_all_formats(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(app, ["generate", *BOX, "-f", "all", "-o", str(tmp_path)])

        assert result.exit_code == 0, result.output
        panels = tmp_path / "box_panels"
        assert panels.is_dir()
        assert len(list(panels.glob("*.svg"))) == 5

    def test_generate_from_config_with_override(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(
            app,
            [
                "generate",
                "--config",
                str(FIXTURES_PATH / "valid_minimal.json"),
                "--type",
                "hinged",
                "-o",
                str(tmp_path),
            ],
        )

        assert result.exit_code == 0, result.output
        assert "hinged box" in result.output
        assert "hinged-lid" in result.output

    def test_generate_drawer_config(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(
            app,
            ["generate", "--config", str(FIXTURES_PATH / "drawer.json"), "-o", str(tmp_path)],
        )

        assert result.exit_code == 0, result.output
        assert "drawer box" in result.output

    def test_dimensions_required_without_config(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["generate", "--width", "120"])

        assert result.exit_code == 1
        assert "--width, --depth, and --height are required" in result.output

    def test_missing_config_file(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["generate", "--config", str(FIXTURES_PATH / "nonexistent.json")]
        )

        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_unknown_format(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(app, ["generate", *BOX, "-f", "stl", "-o", str(tmp_path)])

        assert result.exit_code == 1
        assert "Unknown formats: stl" in result.output

    def test_broken_box_is_not_exported(self, runner: CliRunner, tmp_path: Path) -> None:
        args = [
            "generate",
            "--width",
            "120",
            "--depth",
            "80",
            "--height",
            "18",
            "--finger-width",
            "10",
            "-o",
            str(tmp_path),
        ]
        result = runner.invoke(app, args)

        assert result.exit_code == 1
        assert "too short" in result.output
        assert "Generation failed; nothing exported" in result.output
        assert not (tmp_path / "box_svg.svg").exists()

    def test_force_exports_broken_box(self, runner: CliRunner, tmp_path: Path) -> None:
        args = [
            "generate",
            "--width",
            "120",
            "--depth",
            "80",
            "--height",
            "18",
            "--finger-width",
            "10",
            "-o",
            str(tmp_path),
            "--force",
        ]
        result = runner.invoke(app, args)

        assert result.exit_code == 0, result.output
        assert "[preview only]" in result.output
        assert (tmp_path / "box_svg.svg").exists()


class TestPackCommand:
    """Tests for the pack command."""

    def test_pack_to_stdout(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["pack", *BOX, "--sheet-width", "300", "--sheet-height", "200"]
        )

        assert result.exit_code == 0, result.output
        assert "<svg" in result.output
        assert 'width="300mm"' in result.output

    def test_pack_to_file(self, runner: CliRunner, tmp_path: Path) -> None:
        target = tmp_path / "out" / "sheet.svg"
        result = runner.invoke(app, ["pack", *BOX, "-o", str(target)])

        assert result.exit_code == 0, result.output
        assert "Sheet written to" in result.output
        content = target.read_text()
        assert 'width="600mm"' in content
        assert 'id="simple-front"' in content

    def test_overflow_is_reported(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(
            app,
            [
                "pack",
                "--config",
                str(FIXTURES_PATH / "with_warnings.json"),
                "-o",
                str(tmp_path / "s.svg"),
            ],
        )

        assert result.exit_code == 0, result.output
        assert "does not fit on the sheet" in result.output
        assert "2 placed, 3 overflow" in result.output
        assert "(3 mm edge margin)" in result.output

    def test_output_is_deterministic(self, runner: CliRunner, tmp_path: Path) -> None:
        first = tmp_path / "a.svg"
        second = tmp_path / "b.svg"

        config = str(FIXTURES_PATH / "valid_full.json")
        runner.invoke(app, ["pack", "--config", config, "-o", str(first)])
        runner.invoke(app, ["pack", "--config", config, "-o", str(second)])

        assert first.read_text() == second.read_text()


class TestValidateCommand:
    """Tests for the validate command."""

    def test_valid_minimal_config(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["validate", str(FIXTURES_PATH / "valid_minimal.json")])

        assert result.exit_code == 0
        assert "Validation passed. Configuration is valid." in result.output

    @pytest.mark.parametrize("name", ["valid_full.json", "hinged.json", "drawer.json"])
    def test_valid_configs(self, runner: CliRunner, name: str) -> None:
        result = runner.invoke(app, ["validate", str(FIXTURES_PATH / name)])

        assert result.exit_code in [0, 2]
        assert "Validation passed" in result.output

    def test_file_not_found(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["validate", str(FIXTURES_PATH / "nonexistent.json")])

        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_invalid_json_syntax(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["validate", str(FIXTURES_PATH / "invalid_json.json")])

        assert result.exit_code == 1
        assert "Invalid JSON syntax" in result.output
        assert "Validation failed." in result.output

    def test_unknown_field_rejected(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["validate", str(FIXTURES_PATH / "unknown_field.json")])

        assert result.exit_code == 1
        assert "box.colour" in result.output

    def test_not_an_object(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["validate", str(FIXTURES_PATH / "not_an_object.json")])

        assert result.exit_code == 1
        assert "Errors:" in result.output

    def test_kerf_too_large(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["validate", str(FIXTURES_PATH / "kerf_too_large.json")])

        assert result.exit_code == 1
        assert "material.kerf" in result.output
        assert "Validation failed: 1 error(s), 0 warning(s)" in result.output

    def test_valid_config_with_warnings(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["validate", str(FIXTURES_PATH / "with_warnings.json")])

        assert result.exit_code == 2
        assert "Warnings:" in result.output
        assert "sheet: Panel 'simple-front' does not fit" in result.output
        assert "Validation passed with 3 warning(s)" in result.output


class TestMiscCommands:
    def test_formats(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["formats"])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines == ["dxf      .dxf", "panels   directory", "svg      .svg"]

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"laserbox {__version__}" in result.output
