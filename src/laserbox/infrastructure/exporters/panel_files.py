"""One SVG drawing per panel.

File names encode the box type, the panel and the headline inputs, so
regenerating the same box reproduces the same names:

    simple_front_W120_D80_H60_T3_K0.15.svg
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from laserbox.domain.geometry import fmt
from laserbox.infrastructure.exporters.base import ExporterRegistry, ensure_exportable
from laserbox.infrastructure.path_synthesis import PathSynthesizer

if TYPE_CHECKING:
    from laserbox.application.dtos import BoxOutput
    from laserbox.domain import GeneratedFace


logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9_.]+")


def panel_slug(face: GeneratedFace, box_type: str) -> str:
    """Panel part of the file name: the face id without the box type prefix."""
    slug = face.id
    if slug.startswith(f"{box_type}-"):
        slug = slug[len(box_type) + 1 :]
    return _UNSAFE.sub("_", slug.replace("-", "_")).strip("_") or face.name.value


def panel_filename(output: BoxOutput, face: GeneratedFace) -> str:
    """Deterministic file name for one panel drawing."""
    inputs = output.inputs
    box_type = output.box_type.value
    return (
        f"{box_type}_{panel_slug(face, box_type)}"
        f"_W{fmt(inputs.width)}_D{fmt(inputs.depth)}_H{fmt(inputs.height)}"
        f"_T{fmt(inputs.thickness)}_K{fmt(inputs.kerf)}.svg"
    )


@ExporterRegistry.register("panels")
class PanelFilesExporter:
    """Writes a directory with one SVG file per panel.

    Attributes:
        format_name: "panels"
        file_extension: "svg" (per file)
    """

    format_name: ClassVar[str] = "panels"
    file_extension: ClassVar[str] = "svg"
    writes_directory: ClassVar[bool] = True

    def __init__(
        self, stroke_width: float = 0.1, padding: float = 2.0, force: bool = False
    ) -> None:
        self.synthesizer = PathSynthesizer(stroke_width=stroke_width, padding=padding)
        self.force = force

    def render_files(self, output: BoxOutput) -> dict[str, str]:
        """Map each file name to its SVG document, in panel order.

        Raises:
            ExportBlockedError: If the output has errors and force is off.
        """
        ensure_exportable(output, self.force)
        files: dict[str, str] = {}
        for face in output.faces:
            name = panel_filename(output, face)
            if name in files:
                raise ValueError(f"Duplicate panel file name: {name}")
            files[name] = self.synthesizer.render_face(face, output.overlays)
        return files

    def export(self, output: BoxOutput, path: Path) -> None:
        """Write every panel drawing into the directory ``path``."""
        files = self.render_files(output)
        path.mkdir(parents=True, exist_ok=True)
        for name, content in files.items():
            (path / name).write_text(content, encoding="utf-8")
        logger.info(f"Exported {len(files)} panel drawings to {path}")

    def export_string(self, output: BoxOutput) -> str:
        raise NotImplementedError(
            f"Format '{self.format_name}' writes one file per panel; use export()"
        )
