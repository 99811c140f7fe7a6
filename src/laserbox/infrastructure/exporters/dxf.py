"""DXF format exporter for box panels.

Generates 2D DXF files (R2010 format) with one layer per laser operation.
Panels are drawn at their packed sheet positions when a packing result is
available, otherwise in a simple grid. Overflow placements are skipped.
Arcs and curves are flattened to polylines; hole circles stay circles.
"""

from __future__ import annotations

import logging
from io import StringIO
from pathlib import Path
from typing import TYPE_CHECKING, Callable, ClassVar, Sequence, cast

import ezdxf
from ezdxf import units

from laserbox.domain import EngraveOverlayItem, GeneratedFace, Operation, Point
from laserbox.infrastructure.exporters.base import (
    ExporterRegistry,
    ensure_exportable,
    grid_positions,
)
from laserbox.infrastructure.path_synthesis import overlay_point_mapper

if TYPE_CHECKING:
    from ezdxf.document import Drawing
    from ezdxf.layouts import Modelspace

    from laserbox.application.dtos import BoxOutput


logger = logging.getLogger(__name__)


# Layer configuration for DXF output
LAYERS = {
    "CUT": {"color": 1},  # Red - through cuts
    "SCORE": {"color": 5},  # Blue - score lines
    "ENGRAVE": {"color": 7},  # White/black - engraving
    "LABELS": {"color": 8},  # Grey - panel labels
}

OPERATION_LAYERS = {
    Operation.CUT: "CUT",
    Operation.SCORE: "SCORE",
    Operation.ENGRAVE: "ENGRAVE",
}


@ExporterRegistry.register("dxf")
class DxfExporter:
    """Exports box panels to DXF for laser and CNC software.

    Attributes:
        format_name: "dxf"
        file_extension: "dxf"
    """

    format_name: ClassVar[str] = "dxf"
    file_extension: ClassVar[str] = "dxf"
    writes_directory: ClassVar[bool] = False

    def __init__(
        self,
        panel_spacing: float = 10.0,
        panels_per_row: int = 3,
        include_labels: bool = True,
        force: bool = False,
    ) -> None:
        """Initialize the DXF exporter.

        Args:
            panel_spacing: Space between panels in grid mode (mm).
            panels_per_row: Number of panels per row in grid mode.
            include_labels: Write panel labels on the LABELS layer.
            force: Export even when the output has blocking errors.
        """
        if panels_per_row < 1:
            raise ValueError("panels_per_row must be at least 1")
        self.panel_spacing = panel_spacing
        self.panels_per_row = panels_per_row
        self.include_labels = include_labels
        self.force = force

    def export(self, output: BoxOutput, path: Path) -> None:
        """Export box output to a DXF file."""
        doc = self.build_document(output)
        doc.saveas(path)
        logger.info(f"Exported DXF to {path}")

    def export_string(self, output: BoxOutput) -> str:
        """Export box output as DXF text."""
        doc = self.build_document(output)
        stream = StringIO()
        doc.write(stream)
        return stream.getvalue()

    def build_document(self, output: BoxOutput) -> Drawing:
        """Create the DXF document for the output.

        Raises:
            ExportBlockedError: If the output has errors and force is off.
        """
        ensure_exportable(output, self.force)
        doc = self._create_document()
        msp = doc.modelspace()

        placements = self._placements(output)
        if not placements:
            logger.warning("No panels to export")
            return doc

        height = max(max_y for _, _, max_y in placements)
        if output.packing_result is not None:
            height = max(height, output.packing_result.sheet.height)

        def flip(p: Point) -> tuple[float, float]:
            return (p.x, height - p.y)

        for face, to_sheet, _ in placements:
            self._draw_face(msp, face, to_sheet, flip, output.overlays)
        return doc

    def _create_document(self) -> Drawing:
        doc = ezdxf.new("R2010")
        doc.units = units.MM
        for name, props in LAYERS.items():
            doc.layers.add(name, color=cast(int, props["color"]))
        return doc

    def _placements(
        self, output: BoxOutput
    ) -> list[tuple[GeneratedFace, Callable[[Point], Point], float]]:
        """Each drawable face with its local-to-sheet mapping and lowest y."""
        result = []
        if output.packing_result is not None:
            for placed in output.packing_result.placed:
                result.append((placed.face, placed.to_sheet, placed.bottom_edge))
            skipped = len(output.packing_result.overflow)
            if skipped:
                logger.warning(f"Skipping {skipped} overflow panel(s) in DXF output")
            return result

        positions = grid_positions(output.faces, self.panels_per_row, self.panel_spacing)
        for face, origin in zip(output.faces, positions):
            result.append((face, _offset(origin), origin.y + face.height))
        return result

    def _draw_face(
        self,
        msp: Modelspace,
        face: GeneratedFace,
        to_sheet: Callable[[Point], Point],
        flip: Callable[[Point], tuple[float, float]],
        overlays: Sequence[EngraveOverlayItem],
    ) -> None:
        for face_path in face.paths:
            layer = OPERATION_LAYERS[face_path.operation]
            circle = face_path.path.as_circle()
            if circle is not None:
                cx, cy, r = circle
                msp.add_circle(flip(to_sheet(Point(cx, cy))), r, dxfattribs={"layer": layer})
                continue
            self._draw_polylines(msp, face_path.path.sample(), to_sheet, flip, layer)

        for item in overlays:
            if item.target_face_id != face.id:
                continue
            local = overlay_point_mapper(item)

            def mapper(p: Point, local: Callable[[Point], Point] = local) -> Point:
                return to_sheet(local(p))

            layer = OPERATION_LAYERS[item.operation]
            for face_path in item.source.paths:
                self._draw_polylines(msp, face_path.path.sample(), mapper, flip, layer)

        if self.include_labels:
            self._draw_label(msp, face, to_sheet, flip)

    def _draw_polylines(
        self,
        msp: Modelspace,
        polylines: list[tuple[list[Point], bool]],
        mapper: Callable[[Point], Point],
        flip: Callable[[Point], tuple[float, float]],
        layer: str,
    ) -> None:
        for points, closed in polylines:
            mapped = [flip(mapper(p)) for p in points]
            if closed and len(mapped) > 1 and mapped[0] == mapped[-1]:
                mapped = mapped[:-1]
            if len(mapped) < 2:
                continue
            msp.add_lwpolyline(mapped, close=closed, dxfattribs={"layer": layer})

    def _draw_label(
        self,
        msp: Modelspace,
        face: GeneratedFace,
        to_sheet: Callable[[Point], Point],
        flip: Callable[[Point], tuple[float, float]],
    ) -> None:
        """Draw the panel label centred in the panel."""
        center = flip(to_sheet(Point(face.width / 2, face.height / 2)))
        text_height = max(2.0, min(10.0, min(face.width, face.height) * 0.08))
        msp.add_mtext(
            f"{face.label}\n{face.width:.1f} x {face.height:.1f} mm",
            dxfattribs={
                "layer": "LABELS",
                "char_height": text_height,
                "insert": center,
                "attachment_point": 5,  # MIDDLE_CENTER
            },
        )


def _offset(origin: Point) -> Callable[[Point], Point]:
    def mapper(p: Point) -> Point:
        return p + origin

    return mapper


__all__ = ["DxfExporter", "LAYERS"]
