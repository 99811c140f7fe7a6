"""Imported artwork as engraving overlays.

Artwork arrives as finished SVG path data (from a tracer, a font outliner or
a file the user picked). It becomes an ``imported`` face whose ``offset``
moves the artwork's own origin to the top-left of its bounding box, which is
what overlay placement expects.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET

from .geometry import DrawPath, largest_subpath
from .value_objects import (
    EngraveOverlayItem,
    FacePath,
    FaceRole,
    GeneratedFace,
    Operation,
    OverlayPlacement,
    Point,
)

logger = logging.getLogger(__name__)

MIN_EXTENT = 1e-3


def artwork_from_path_data(
    d: str,
    artwork_id: str,
    operation: Operation = Operation.ENGRAVE,
    outer_contour_only: bool = False,
) -> GeneratedFace:
    """Wrap SVG path data as an imported face.

    Args:
        d: SVG path data.
        artwork_id: Id for the resulting face.
        operation: Operation assigned to the artwork paths.
        outer_contour_only: Keep only the subpath with the largest bounding
            area (best-effort; meant for well-formed single-shape input).

    Raises:
        ValueError: If the path data is malformed or empty.
    """
    path = DrawPath.parse(d)
    if not path.commands:
        raise ValueError("Artwork path data is empty")
    if outer_contour_only:
        path = largest_subpath(path)
    min_x, min_y, max_x, max_y = path.bounds()
    return GeneratedFace(
        id=artwork_id,
        name=FaceRole.IMPORTED,
        width=max(max_x - min_x, MIN_EXTENT),
        height=max(max_y - min_y, MIN_EXTENT),
        vertices=(),
        paths=(FacePath(path, operation),),
        offset=Point(-min_x, -min_y),
        label=artwork_id,
    )


def artwork_from_svg(
    text: str, artwork_id: str, operation: Operation = Operation.ENGRAVE
) -> GeneratedFace:
    """Collect every ``<path>`` of an SVG document into one imported face.

    Element transforms are not applied.

    Raises:
        ValueError: If the document cannot be parsed or has no path data.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise ValueError(f"Invalid SVG document: {e}") from e
    data = [
        el.get("d", "")
        for el in root.iter()
        if el.tag.rsplit("}", 1)[-1] == "path" and el.get("d")
    ]
    if not data:
        raise ValueError("SVG document contains no path data")
    logger.debug("Imported %d paths as artwork '%s'", len(data), artwork_id)
    return artwork_from_path_data(" ".join(data), artwork_id, operation)


def place_artwork(
    artwork: GeneratedFace,
    target: GeneratedFace,
    placement: OverlayPlacement | None = None,
    overlay_id: str | None = None,
    operation: Operation = Operation.ENGRAVE,
) -> EngraveOverlayItem:
    """Attach artwork to a face, centred on the face unless placed explicitly."""
    placement = placement or OverlayPlacement(target.width / 2, target.height / 2)
    return EngraveOverlayItem(
        id=overlay_id or f"{target.id}-{artwork.id}",
        target_face_id=target.id,
        source=artwork,
        placement=placement,
        operation=operation,
    )
