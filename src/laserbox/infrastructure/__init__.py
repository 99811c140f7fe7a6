"""Infrastructure layer - sheet packing, drawing synthesis and exporters."""

from .path_synthesis import OPERATION_STYLES, PathSynthesizer, order_elements
from .sheet_packer import ColumnPacker, PackingResult, PlacedFace, SheetConfig, pack_faces

__all__ = [
    "OPERATION_STYLES",
    "ColumnPacker",
    "PackingResult",
    "PathSynthesizer",
    "PlacedFace",
    "SheetConfig",
    "order_elements",
    "pack_faces",
]
