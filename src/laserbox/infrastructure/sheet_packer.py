"""Column-first sheet packing for laser-cut panels.

This is deliberately not a nesting optimizer: panels are placed in the order
they are supplied, top to bottom in columns, left to right across the sheet.
The same input always produces the same layout.

All dataclasses are frozen (immutable) apart from the internal column
cursor used while packing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from laserbox.domain.value_objects import GeneratedFace, Point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SheetConfig:
    """Stock sheet dimensions in millimetres.

    Attributes:
        width: Sheet width.
        height: Sheet height.
        spacing: Gap between panels. The same distance is kept clear along
            every sheet edge, so a panel fits only when it is at most
            ``width - 2 * spacing`` by ``height - 2 * spacing``.
        auto_rotate: Allow panels to be turned 90 degrees.
    """

    width: float = 600.0
    height: float = 400.0
    spacing: float = 3.0
    auto_rotate: bool = False

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise ValueError("Sheet width must be positive")
        if self.height <= 0:
            raise ValueError("Sheet height must be positive")
        if self.spacing < 0:
            raise ValueError("Spacing must be non-negative")

    @property
    def edge_margin(self) -> float:
        """Clear border kept along each sheet edge."""
        return self.spacing

    @property
    def usable_width(self) -> float:
        """Width available inside the edge margin."""
        return self.width - 2 * self.spacing

    @property
    def usable_height(self) -> float:
        """Height available inside the edge margin."""
        return self.height - 2 * self.spacing

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass(frozen=True)
class PlacedFace:
    """A panel positioned on the sheet.

    Coordinates are the top-left of the placed (possibly rotated) bounding
    box in sheet coordinates. For overflow placements they only position the
    panel in the off-sheet preview strip and are not meaningful for cutting.

    Attributes:
        face: The placed panel.
        x: Left edge of the placed bounding box.
        y: Top edge of the placed bounding box.
        rotation: 0 or 90 degrees (clockwise).
        overflow: True when the panel did not fit on the sheet.
    """

    face: GeneratedFace
    x: float
    y: float
    rotation: int = 0
    overflow: bool = False

    def __post_init__(self) -> None:
        if self.rotation not in (0, 90):
            raise ValueError("Rotation must be 0 or 90 degrees")

    @property
    def rotated(self) -> bool:
        return self.rotation == 90

    @property
    def placed_width(self) -> float:
        """Width of the panel as placed (accounts for rotation)."""
        return self.face.height if self.rotated else self.face.width

    @property
    def placed_height(self) -> float:
        """Height of the panel as placed (accounts for rotation)."""
        return self.face.width if self.rotated else self.face.height

    @property
    def right_edge(self) -> float:
        return self.x + self.placed_width

    @property
    def bottom_edge(self) -> float:
        return self.y + self.placed_height

    def to_sheet(self, point: Point) -> Point:
        """Map a panel-local point to sheet coordinates."""
        if self.rotated:
            # Clockwise quarter turn keeps the rotated bbox at the placement origin.
            return Point(self.x + self.face.height - point.y, self.y + point.x)
        return Point(self.x + point.x, self.y + point.y)

    def svg_transform(self) -> str:
        """SVG ``transform`` attribute equivalent to :meth:`to_sheet`."""
        if self.rotated:
            return f"translate({self.x + self.face.height:g} {self.y:g}) rotate(90)"
        return f"translate({self.x:g} {self.y:g})"


@dataclass(frozen=True)
class PackingResult:
    """Outcome of packing a batch of panels onto one sheet.

    Attributes:
        sheet: The sheet the panels were packed onto.
        placements: One placement per input panel, in input order.
    """

    sheet: SheetConfig
    placements: tuple[PlacedFace, ...] = ()

    @property
    def placed(self) -> list[PlacedFace]:
        """Placements that fit on the sheet."""
        return [p for p in self.placements if not p.overflow]

    @property
    def overflow(self) -> list[PlacedFace]:
        """Placements that did not fit."""
        return [p for p in self.placements if p.overflow]

    @property
    def ready_count(self) -> int:
        """Number of panels ready to cut."""
        return len(self.placed)

    @property
    def used_area(self) -> float:
        return sum(p.placed_width * p.placed_height for p in self.placed)

    @property
    def utilization(self) -> float:
        """Fraction of the sheet area covered by placed panels."""
        return self.used_area / self.sheet.area


@dataclass
class _Column:
    """Internal cursor for the column being filled.

    Attributes:
        x: Left edge of the column.
        y: Top of the next slot in the column.
        width: Widest panel placed in the column so far.
        count: Panels placed in the column.
    """

    x: float
    y: float
    width: float = 0.0
    count: int = 0


class ColumnPacker:
    """Deterministic column-first packer.

    Panels go down the current column until the next one would run past the
    bottom edge, then a new column starts to the right of the widest panel
    in the current one. Columns start one ``spacing`` in from the top and left
    edges and must end one ``spacing`` short of the bottom and right edges,
    so the usable area is :attr:`SheetConfig.usable_width` by
    :attr:`SheetConfig.usable_height`. Panels that cannot be placed are
    flagged as overflow and packing continues with the next panel.

    Attributes:
        sheet: Sheet dimensions and spacing.
    """

    def __init__(self, sheet: SheetConfig) -> None:
        self.sheet = sheet

    def pack(self, faces: Sequence[GeneratedFace]) -> PackingResult:
        """Place panels on the sheet in the supplied order.

        Args:
            faces: Panels in generation order.

        Returns:
            PackingResult with one placement per panel.
        """
        sheet = self.sheet
        spacing = sheet.spacing
        column = _Column(x=spacing, y=spacing)
        placements: list[PlacedFace] = []
        overflow_y = 0.0

        for face in faces:
            placement = self._place(face, column)
            if placement is None:
                placement = PlacedFace(
                    face, sheet.width + spacing * 2, overflow_y, 0, overflow=True
                )
                overflow_y += face.height + spacing
                logger.warning(
                    "Panel '%s' (%.1f x %.1f mm) does not fit on the %.0f x %.0f mm sheet",
                    face.id,
                    face.width,
                    face.height,
                    sheet.width,
                    sheet.height,
                )
            placements.append(placement)

        result = PackingResult(sheet=sheet, placements=tuple(placements))
        logger.debug(
            "Packed %d of %d panels, %.1f%% of the sheet used",
            result.ready_count,
            len(placements),
            result.utilization * 100,
        )
        return result

    def _orientations(self, face: GeneratedFace) -> list[tuple[float, float, int]]:
        """Candidate ``(width, height, rotation)`` triples that fit the sheet."""
        options = [(face.width, face.height, 0)]
        if self.sheet.auto_rotate and abs(face.width - face.height) > 1e-9:
            options.append((face.height, face.width, 90))
            # Prefer the orientation with the smaller height; stable on ties.
            options.sort(key=lambda o: o[1])
        return [
            o
            for o in options
            if o[0] <= self.sheet.usable_width + 1e-9 and o[1] <= self.sheet.usable_height + 1e-9
        ]

    def _place(self, face: GeneratedFace, column: _Column) -> PlacedFace | None:
        sheet = self.sheet
        bottom = sheet.height - sheet.spacing
        right = sheet.width - sheet.spacing
        orientations = self._orientations(face)
        if not orientations:
            return None

        # Try the current column first, then a fresh column.
        for width, height, rotation in orientations:
            if column.y + height <= bottom + 1e-9 and column.x + width <= right + 1e-9:
                return self._commit(face, column, width, height, rotation)

        if column.count == 0:
            return None
        next_x = column.x + column.width + sheet.spacing
        for width, height, rotation in orientations:
            if next_x + width <= right + 1e-9:
                column.x = next_x
                column.y = sheet.spacing
                column.width = 0.0
                column.count = 0
                return self._commit(face, column, width, height, rotation)
        return None

    def _commit(
        self, face: GeneratedFace, column: _Column, width: float, height: float, rotation: int
    ) -> PlacedFace:
        placed = PlacedFace(face, column.x, column.y, rotation)
        column.y += height + self.sheet.spacing
        column.width = max(column.width, width)
        column.count += 1
        return placed


def pack_faces(faces: Sequence[GeneratedFace], sheet: SheetConfig | None = None) -> PackingResult:
    """Pack panels onto a sheet with :class:`ColumnPacker`."""
    return ColumnPacker(sheet or SheetConfig()).pack(faces)
