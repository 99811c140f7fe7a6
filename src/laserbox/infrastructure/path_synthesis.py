"""Drawing synthesis for generated panels.

Turns panel paths and user overlays into SVG documents in millimetres. The
operation colours are a compatibility contract with laser-control software
that routes paths to passes by colour:

- cut: red stroke, no fill
- score: blue stroke, no fill
- engrave: black fill, no stroke

Within every container the elements are ordered engrave, score, cut so cut
paths always come last in document order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence
from xml.sax.saxutils import escape, quoteattr

from laserbox.domain.geometry import fmt
from laserbox.domain.value_objects import (
    EngraveOverlayItem,
    GeneratedFace,
    Operation,
    Point,
)
from laserbox.infrastructure.sheet_packer import PackingResult, PlacedFace

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
OVERFLOW_STROKE = "#999999"


@dataclass(frozen=True)
class OperationStyle:
    """Fixed presentation for one laser operation."""

    stroke: str
    fill: str

    def attributes(self, stroke_width: float) -> str:
        if self.stroke == "none":
            return f'fill="{self.fill}" stroke="none"'
        return f'fill="{self.fill}" stroke="{self.stroke}" stroke-width="{fmt(stroke_width)}"'


OPERATION_STYLES: dict[Operation, OperationStyle] = {
    Operation.CUT: OperationStyle(stroke="#ff0000", fill="none"),
    Operation.SCORE: OperationStyle(stroke="#0000ff", fill="none"),
    Operation.ENGRAVE: OperationStyle(stroke="none", fill="#000000"),
}

DRAW_ORDER: dict[Operation, int] = {
    Operation.ENGRAVE: 0,
    Operation.SCORE: 1,
    Operation.CUT: 2,
}


@dataclass(frozen=True)
class DrawElement:
    """One ``<path>`` element ready to be written.

    Attributes:
        operation: Laser operation, drives style and ordering.
        d: Path data.
        transform: Optional SVG transform attribute value.
        source_id: Id of the face or overlay the element came from.
    """

    operation: Operation
    d: str
    transform: str = ""
    source_id: str = ""


def order_elements(elements: Iterable[DrawElement]) -> list[DrawElement]:
    """Stable reorder so engrave comes first and cut last."""
    return sorted(elements, key=lambda e: DRAW_ORDER[e.operation])


def overlay_transform(item: EngraveOverlayItem) -> str:
    """SVG transform placing an overlay centred on its placement point.

    Order: translate to the centre, rotate, scale, then shift the artwork so
    its own bounding box is centred on the pivot.
    """
    p = item.placement
    src = item.source
    shift_x = -src.width / 2 + src.offset.x
    shift_y = -src.height / 2 + src.offset.y
    return (
        f"translate({fmt(p.x)} {fmt(p.y)}) rotate({fmt(p.rotation)}) "
        f"scale({fmt(p.scale_x)} {fmt(p.scale_y)}) "
        f"translate({fmt(shift_x)} {fmt(shift_y)})"
    )


def overlay_point_mapper(item: EngraveOverlayItem) -> Callable[[Point], Point]:
    """Point function equivalent to :func:`overlay_transform`."""
    p = item.placement
    src = item.source
    shift = Point(-src.width / 2 + src.offset.x, -src.height / 2 + src.offset.y)

    def mapper(point: Point) -> Point:
        moved = point + shift
        scaled = Point(moved.x * p.scale_x, moved.y * p.scale_y)
        return scaled.rotated(p.rotation) + Point(p.x, p.y)

    return mapper


def face_elements(
    face: GeneratedFace, overlays: Sequence[EngraveOverlayItem] = ()
) -> list[DrawElement]:
    """Panel paths plus the overlays that target it, in draw order."""
    elements = [
        DrawElement(fp.operation, fp.path.to_svg_d(), source_id=face.id) for fp in face.paths
    ]
    for item in overlays:
        if item.target_face_id != face.id:
            continue
        transform = overlay_transform(item)
        elements.extend(
            DrawElement(item.operation, fp.path.to_svg_d(), transform, item.id)
            for fp in item.source.paths
        )
    return order_elements(elements)


class PathSynthesizer:
    """Renders panels, grids and packed sheets as SVG.

    Attributes:
        stroke_width: Stroke width in millimetres for cut and score paths.
        padding: Margin around single-panel drawings.
    """

    def __init__(self, stroke_width: float = 0.1, padding: float = 2.0) -> None:
        if stroke_width <= 0:
            raise ValueError("Stroke width must be positive")
        if padding < 0:
            raise ValueError("Padding must be non-negative")
        self.stroke_width = stroke_width
        self.padding = padding

    def render_face(
        self, face: GeneratedFace, overlays: Sequence[EngraveOverlayItem] = ()
    ) -> str:
        """Render one panel as a standalone SVG document.

        The canvas is the panel's bounding box plus ``padding`` on each side.
        """
        pad = self.padding
        width = face.width + 2 * pad
        height = face.height + 2 * pad
        parts = self._open(width, height, -pad, -pad)
        parts.extend(self._face_group(face, overlays, indent="  "))
        parts.append("</svg>")
        return "\n".join(parts)

    def render_grid(
        self,
        faces: Sequence[GeneratedFace],
        overlays: Sequence[EngraveOverlayItem] = (),
        columns: int = 3,
        spacing: float = 10.0,
        margin: float = 10.0,
    ) -> str:
        """Render panels in a simple row-major grid.

        Presentation only; for cutting use :meth:`render_sheet` with a packed
        layout.
        """
        if columns < 1:
            raise ValueError("Grid needs at least one column")
        if not faces:
            return "\n".join([*self._open(2 * margin, 2 * margin), "</svg>"])

        rows = [faces[i : i + columns] for i in range(0, len(faces), columns)]
        body: list[str] = []
        y = margin
        total_width = 0.0
        for row in rows:
            x = margin
            for face in row:
                body.extend(
                    self._face_group(
                        face, overlays, indent="  ", transform=f"translate({fmt(x)} {fmt(y)})"
                    )
                )
                x += face.width + spacing
            total_width = max(total_width, x - spacing + margin)
            y += max(f.height for f in row) + spacing
        total_height = y - spacing + margin

        parts = self._open(total_width, total_height)
        parts.extend(body)
        parts.append("</svg>")
        return "\n".join(parts)

    def render_sheet(
        self,
        result: PackingResult,
        overlays: Sequence[EngraveOverlayItem] = (),
        show_sheet: bool = False,
    ) -> str:
        """Render a packed layout.

        Placed panels are positioned at their packed coordinates. Overflow
        panels go into a separate group to the right of the sheet, drawn in
        grey so laser software does not pick them up as cut or score.
        """
        sheet = result.sheet
        overflow = result.overflow
        width = sheet.width
        height = sheet.height
        if overflow:
            width = max(p.right_edge for p in overflow) + sheet.spacing
            height = max(height, max(p.bottom_edge for p in overflow))

        parts = self._open(width, height)
        if show_sheet:
            parts.append(
                f'  <rect id="sheet" x="0" y="0" width="{fmt(sheet.width)}" '
                f'height="{fmt(sheet.height)}" fill="none" stroke="{OVERFLOW_STROKE}" '
                f'stroke-width="{fmt(self.stroke_width)}"/>'
            )
        parts.append('  <g id="sheet-panels">')
        for placed in result.placed:
            parts.extend(self._placed_group(placed, overlays, "    "))
        parts.append("  </g>")

        if overflow:
            parts.append('  <g id="overflow" class="overflow" data-overflow="true">')
            for placed in overflow:
                parts.extend(self._placed_group(placed, overlays, "    ", flagged=True))
            parts.append("  </g>")
            logger.debug("%d overflow panels drawn outside the sheet", len(overflow))

        parts.append("</svg>")
        return "\n".join(parts)

    def render_each(
        self, faces: Sequence[GeneratedFace], overlays: Sequence[EngraveOverlayItem] = ()
    ) -> dict[str, str]:
        """One standalone drawing per panel, keyed by face id."""
        return {face.id: self.render_face(face, overlays) for face in faces}

    def _open(
        self, width: float, height: float, min_x: float = 0.0, min_y: float = 0.0
    ) -> list[str]:
        return [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<svg xmlns="{SVG_NS}" width="{fmt(width)}mm" height="{fmt(height)}mm" '
            f'viewBox="{fmt(min_x)} {fmt(min_y)} {fmt(width)} {fmt(height)}">',
        ]

    def _path(self, element: DrawElement, indent: str, flagged: bool = False) -> str:
        op = element.operation.value
        if flagged:
            style = f'fill="none" stroke="{OVERFLOW_STROKE}" stroke-width="{fmt(self.stroke_width)}"'
        else:
            style = OPERATION_STYLES[element.operation].attributes(self.stroke_width)
        transform = f' transform="{element.transform}"' if element.transform else ""
        return f'{indent}<path class="{op}" d="{element.d}" {style}{transform}/>'

    def _face_group(
        self,
        face: GeneratedFace,
        overlays: Sequence[EngraveOverlayItem],
        indent: str,
        transform: str = "",
        flagged: bool = False,
    ) -> list[str]:
        attrs = f"id={quoteattr(face.id)}"
        if transform:
            attrs += f' transform="{transform}"'
        if not face.valid:
            attrs += ' data-valid="false"'
        lines = [f"{indent}<g {attrs}>", f"{indent}  <title>{escape(face.label)}</title>"]
        lines.extend(
            self._path(e, indent + "  ", flagged) for e in face_elements(face, overlays)
        )
        lines.append(f"{indent}</g>")
        return lines

    def _placed_group(
        self,
        placed: PlacedFace,
        overlays: Sequence[EngraveOverlayItem],
        indent: str,
        flagged: bool = False,
    ) -> list[str]:
        return self._face_group(
            placed.face, overlays, indent, transform=placed.svg_transform(), flagged=flagged
        )
