"""SVG exporter for box panels.

Writes a packed sheet drawing when the output carries a packing result,
otherwise a presentation grid of every panel.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from laserbox.infrastructure.exporters.base import ExporterRegistry, ensure_exportable
from laserbox.infrastructure.path_synthesis import PathSynthesizer

if TYPE_CHECKING:
    from laserbox.application.dtos import BoxOutput


logger = logging.getLogger(__name__)


@ExporterRegistry.register("svg")
class SvgExporter:
    """SVG exporter for combined drawings.

    Attributes:
        format_name: Identifier for this export format.
        file_extension: File extension for SVG files.
    """

    format_name: ClassVar[str] = "svg"
    file_extension: ClassVar[str] = "svg"
    writes_directory: ClassVar[bool] = False

    def __init__(
        self,
        layout: str = "auto",
        columns: int = 3,
        spacing: float = 10.0,
        stroke_width: float = 0.1,
        show_sheet: bool = False,
        force: bool = False,
    ) -> None:
        """Initialize the SVG exporter.

        Args:
            layout: "sheet" for the packed layout, "grid" for the presentation
                grid, or "auto" to use the sheet when one was packed.
            columns: Panels per row in grid layout.
            spacing: Gap between panels in grid layout (mm).
            stroke_width: Stroke width for cut and score paths (mm).
            show_sheet: Outline the stock sheet in sheet layout.
            force: Export even when the output has blocking errors.
        """
        if layout not in ("auto", "sheet", "grid"):
            raise ValueError(f"Invalid layout: {layout}. Must be 'auto', 'sheet' or 'grid'")
        self.layout = layout
        self.columns = columns
        self.spacing = spacing
        self.show_sheet = show_sheet
        self.force = force
        self.synthesizer = PathSynthesizer(stroke_width=stroke_width)

    def export(self, output: BoxOutput, path: Path) -> None:
        """Write the drawing to ``path``."""
        path.write_text(self.export_string(output), encoding="utf-8")
        logger.info(f"Exported SVG to {path}")

    def export_string(self, output: BoxOutput) -> str:
        """Render the drawing.

        Raises:
            ExportBlockedError: If the output has errors and force is off.
            ValueError: If sheet layout is requested without a packing result.
        """
        ensure_exportable(output, self.force)
        use_sheet = self.layout == "sheet" or (
            self.layout == "auto" and output.packing_result is not None
        )
        if use_sheet:
            if output.packing_result is None:
                raise ValueError(
                    "Sheet layout requires a packing result. "
                    "Configure a sheet or use the grid layout."
                )
            return self.synthesizer.render_sheet(
                output.packing_result, output.overlays, show_sheet=self.show_sheet
            )
        return self.synthesizer.render_grid(
            output.faces, output.overlays, columns=self.columns, spacing=self.spacing
        )
