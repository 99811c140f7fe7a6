"""Exporter framework for box panel outputs.

This package provides a unified exporter framework with:
- Exporter Protocol: Defines the interface for all exporters
- ExporterRegistry: Central registry for format discovery
- ExportManager: Coordinates multi-format export operations

Registered exporters:
- dxf: DXF drawing with CUT/SCORE/ENGRAVE layers
- panels: One SVG file per panel with deterministic names
- svg: Combined SVG, packed sheet or presentation grid

Usage:
    from laserbox.infrastructure.exporters import ExportManager, ExporterRegistry

    formats = ExporterRegistry.available_formats()

    manager = ExportManager(output_dir=Path("./output"))
    results = manager.export_all(["svg", "dxf"], box_output, project_name="my_box")
"""

from laserbox.infrastructure.exporters.base import (
    ExportBlockedError,
    Exporter,
    ExporterRegistry,
    ExportManager,
    ensure_exportable,
)

# Import exporters to trigger registration
from laserbox.infrastructure.exporters.dxf import DxfExporter
from laserbox.infrastructure.exporters.panel_files import (
    PanelFilesExporter,
    panel_filename,
)
from laserbox.infrastructure.exporters.svg import SvgExporter

__all__ = [
    # Framework
    "ExportBlockedError",
    "Exporter",
    "ExporterRegistry",
    "ExportManager",
    "ensure_exportable",
    # Registered exporters
    "DxfExporter",
    "PanelFilesExporter",
    "SvgExporter",
    "panel_filename",
]
