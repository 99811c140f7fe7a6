"""Base exporter framework with Protocol, Registry, and Manager."""

from __future__ import annotations

import logging
from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar, Protocol, runtime_checkable

from laserbox.domain import LaserboxError, Point

if TYPE_CHECKING:
    from laserbox.application.dtos import BoxOutput
    from laserbox.domain import GeneratedFace


logger = logging.getLogger(__name__)


class ExportBlockedError(LaserboxError):
    """Raised when output with blocking errors is exported without ``force``."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        summary = "; ".join(self.errors[:3])
        more = f" (+{len(self.errors) - 3} more)" if len(self.errors) > 3 else ""
        super().__init__(f"Export blocked by {len(self.errors)} error(s): {summary}{more}")


def ensure_exportable(output: BoxOutput, force: bool = False) -> None:
    """Refuse to export output that carries blocking errors.

    Raises:
        ExportBlockedError: If the output has errors and ``force`` is False.
    """
    if output.errors and not force:
        raise ExportBlockedError(output.errors)
    if output.errors:
        logger.warning("Exporting despite %d blocking error(s)", len(output.errors))


def grid_positions(
    faces: list[GeneratedFace], columns: int, spacing: float, margin: float = 0.0
) -> list[Point]:
    """Top-left corners for a row-major presentation grid."""
    positions: list[Point] = []
    y = margin
    for start in range(0, len(faces), columns):
        row = faces[start : start + columns]
        x = margin
        for face in row:
            positions.append(Point(x, y))
            x += face.width + spacing
        y += max(f.height for f in row) + spacing
    return positions


@runtime_checkable
class Exporter(Protocol):
    """Protocol for all exporters.

    Exporters convert a BoxOutput to a specific format. Each exporter must
    define its format name and file extension, and implement at least the
    export method.

    Attributes:
        format_name: Name of the export format (e.g., "svg", "dxf").
        file_extension: File extension without leading dot.
        writes_directory: True when ``export`` writes a directory of files.
    """

    format_name: ClassVar[str]
    file_extension: ClassVar[str]
    writes_directory: ClassVar[bool]

    @abstractmethod
    def export(self, output: BoxOutput, path: Path) -> None:
        """Export box output to a file (or directory).

        Args:
            output: The box output to export.
            path: Where the result is written.
        """
        ...

    def export_string(self, output: BoxOutput) -> str:
        """Export box output as a string.

        Raises:
            NotImplementedError: If the format does not support string export.
        """
        raise NotImplementedError(
            f"Format '{self.format_name}' does not support string export"
        )


class ExporterRegistry:
    """Registry for exporter classes.

    Exporters register themselves using the @ExporterRegistry.register
    decorator.

    Example:
        @ExporterRegistry.register("svg")
        class SvgExporter:
            format_name = "svg"
            file_extension = "svg"
            ...
    """

    _exporters: ClassVar[dict[str, type[Exporter]]] = {}

    @classmethod
    def register(cls, format_name: str) -> type:
        """Decorator to register an exporter class.

        Args:
            format_name: The format name to register.

        Returns:
            Decorator function that registers the class.
        """

        def decorator(exporter_class: type[Exporter]) -> type[Exporter]:
            if format_name in cls._exporters:
                logger.warning(
                    f"Overwriting existing exporter for format '{format_name}'"
                )
            cls._exporters[format_name] = exporter_class
            logger.debug(f"Registered exporter '{format_name}': {exporter_class.__name__}")
            return exporter_class

        return decorator

    @classmethod
    def get(cls, format_name: str) -> type[Exporter]:
        """Get an exporter class by format name.

        Raises:
            KeyError: If no exporter is registered for the format.
        """
        if format_name not in cls._exporters:
            available = ", ".join(sorted(cls._exporters.keys()))
            raise KeyError(
                f"No exporter registered for format '{format_name}'. "
                f"Available formats: {available or 'none'}"
            )
        return cls._exporters[format_name]

    @classmethod
    def available_formats(cls) -> list[str]:
        """Sorted list of registered format names."""
        return sorted(cls._exporters.keys())

    @classmethod
    def is_registered(cls, format_name: str) -> bool:
        return format_name in cls._exporters


class ExportManager:
    """Manages export operations to multiple formats.

    Attributes:
        output_dir: Directory where exported files will be saved.
        force: Export even when the output carries blocking errors.
    """

    def __init__(self, output_dir: Path, force: bool = False) -> None:
        """Initialize the export manager.

        Args:
            output_dir: Directory where exported files will be saved.
                        Will be created if it doesn't exist.
            force: Export output that has blocking errors.
        """
        self.output_dir = Path(output_dir)
        self.force = force

    def export_all(
        self,
        formats: list[str],
        output: BoxOutput,
        project_name: str = "box",
    ) -> dict[str, Path]:
        """Export box output to multiple formats.

        Args:
            formats: Format names to export (e.g., ["svg", "dxf"]).
            output: The box output to export.
            project_name: Base name for output files.

        Returns:
            Dictionary mapping format names to output paths.

        Raises:
            KeyError: If any format is not registered.
            ExportBlockedError: If the output has errors and force is off.
            OSError: If file operations fail.
        """
        ensure_exportable(output, self.force)
        exporter_classes = {name: ExporterRegistry.get(name) for name in formats}
        self.output_dir.mkdir(parents=True, exist_ok=True)

        results: dict[str, Path] = {}
        for format_name, exporter_class in exporter_classes.items():
            exporter = exporter_class(force=self.force)
            if exporter.writes_directory:
                target = self.output_dir / f"{project_name}_{format_name}"
            else:
                target = self.output_dir / f"{project_name}_{format_name}.{exporter.file_extension}"

            logger.info(f"Exporting to {format_name}: {target}")
            exporter.export(output, target)
            results[format_name] = target

        return results

    def export_single(
        self,
        format_name: str,
        output: BoxOutput,
        project_name: str = "box",
    ) -> Path:
        """Export box output to a single format."""
        results = self.export_all([format_name], output, project_name)
        return results[format_name]
