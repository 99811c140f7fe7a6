"""Finger-joint patterns and the edge walker that turns them into outlines.

A pattern splits an edge into an odd number of segments that alternate
between protruding tabs and recessed notches, starting and ending with a tab.
The same pattern is used by both panels meeting at an edge; one of them walks
it inverted, so its tabs land in the other panel's notches.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .value_objects import ConfigurationError, GeometryError, Point

logger = logging.getLogger(__name__)

EPS = 1e-9


@dataclass(frozen=True)
class FingerPattern:
    """Segment layout along one edge.

    Attributes:
        length: Edge length the segments add up to.
        segments: Segment widths; even indices are tabs.
        warnings: Advisories raised while planning the pattern.
    """

    length: float
    segments: tuple[float, ...]
    warnings: tuple[str, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        if not self.segments:
            raise ValueError("Finger pattern needs at least one segment")
        if abs(sum(self.segments) - self.length) > 1e-6:
            raise ValueError("Finger segments must add up to the edge length")

    @property
    def count(self) -> int:
        """Number of segments (tabs plus notches)."""
        return len(self.segments)

    @property
    def finger_width(self) -> float:
        """Width of the interior segments."""
        if self.count < 3:
            return self.segments[0]
        return self.segments[1]

    def boundaries(self) -> list[float]:
        """Cumulative segment boundaries from 0 to ``length``."""
        positions = [0.0]
        for width in self.segments:
            positions.append(positions[-1] + width)
        positions[-1] = self.length
        return positions

    def spans(self, inverted: bool = False, kerf: float = 0.0) -> list[tuple[float, float, bool]]:
        """Segment spans with kerf compensation applied.

        Each interior boundary moves ``kerf / 2`` towards the notch side, so
        tabs grow by ``kerf`` and notches shrink by ``kerf``. The two edge
        ends never move, which keeps the panel's nominal size.

        Args:
            inverted: Walk the complementary pattern (notch first).
            kerf: Beam width to compensate for.

        Returns:
            ``(start, end, protrudes)`` triples along the edge.
        """
        bounds = self.boundaries()
        half = kerf / 2
        result = []
        for i in range(self.count):
            protrudes = (i % 2 == 0) != inverted
            start, end = bounds[i], bounds[i + 1]
            if i > 0:
                start += -half if protrudes else half
            if i < self.count - 1:
                end += half if protrudes else -half
            result.append((start, end, protrudes))
        return result


def _nearest_odd(value: float) -> int:
    n = int(round(value))
    if n % 2 == 0:
        n = n + 1 if value >= n else n - 1
    return max(n, 3)


def _equal(length: float, count: int, warnings: list[str]) -> FingerPattern:
    width = length / count
    segments = [width] * count
    segments[-1] = length - width * (count - 1)
    return FingerPattern(length, tuple(segments), tuple(warnings))


def plan_fingers(
    length: float,
    finger_min: float,
    finger_max: float,
    auto_count: bool = True,
    fixed_count: int | None = None,
) -> FingerPattern:
    """Plan the finger pattern for an edge.

    In auto mode the largest odd count whose equal segment width falls inside
    ``[finger_min, finger_max]`` is chosen. When no odd count fits, the odd
    count nearest to ``length / mean(bounds)`` is used so that segments stay
    equal and no corner sliver appears.

    With a caller-fixed count the segment width is ``length / count``; if that
    falls outside the bounds it is clamped, the surplus is split evenly
    between the two end tabs, and a warning is attached.

    Args:
        length: Edge length in mm.
        finger_min: Smallest allowed finger width.
        finger_max: Largest allowed finger width.
        auto_count: Pick the count automatically.
        fixed_count: Segment count to use when ``auto_count`` is False.

    Returns:
        The planned pattern.

    Raises:
        ConfigurationError: If ``finger_max < finger_min``.
        GeometryError: If ``length`` is not positive.
    """
    if finger_max < finger_min:
        raise ConfigurationError(
            f"finger_max ({finger_max}) must not be smaller than finger_min ({finger_min})"
        )
    if finger_min <= 0:
        raise ConfigurationError("finger_min must be positive")
    if length <= 0:
        raise GeometryError(f"Edge length must be positive, got {length}")

    if auto_count or not fixed_count:
        n = int(length // finger_min)
        if n % 2 == 0:
            n -= 1
        while n >= 3:
            width = length / n
            if finger_min - EPS <= width <= finger_max + EPS:
                return _equal(length, n, [])
            n -= 2
        target = (finger_min + finger_max) / 2
        n = _nearest_odd(length / target)
        logger.debug(
            "No odd finger count fits %.3f mm in [%.3f, %.3f]; using %d segments",
            length,
            finger_min,
            finger_max,
            n,
        )
        return _equal(length, n, [])

    warnings: list[str] = []
    n = max(int(fixed_count), 3)
    if n % 2 == 0:
        n += 1
        warnings.append(f"Finger count must be odd; using {n} segments")
    width = length / n
    if finger_min - EPS <= width <= finger_max + EPS:
        return _equal(length, n, warnings)

    clamped = min(max(width, finger_min), finger_max)
    warnings.append(
        f"Finger width {width:.2f} mm for a {length:.2f} mm edge is outside "
        f"[{finger_min:g}, {finger_max:g}]; clamped to {clamped:.2f} mm"
    )
    end = (length - (n - 2) * clamped) / 2
    while n > 3 and end < clamped / 2:
        n -= 2
        end = (length - (n - 2) * clamped) / 2
    if end < clamped / 2:
        return _equal(length, 3, warnings)
    segments = [end] + [clamped] * (n - 2) + [end]
    segments[-1] = length - sum(segments[:-1])
    return FingerPattern(length, tuple(segments), tuple(warnings))


@dataclass(frozen=True)
class EdgeJoint:
    """How one edge of a panel is jointed.

    Attributes:
        pattern: Finger pattern, or None for a plain straight edge.
        inverted: Start with a notch instead of a tab.
    """

    pattern: FingerPattern | None = None
    inverted: bool = False

    @property
    def is_jointed(self) -> bool:
        return self.pattern is not None

    def first_protrudes(self) -> bool:
        return self.pattern is not None and not self.inverted

    def last_protrudes(self) -> bool:
        if self.pattern is None:
            return False
        return ((self.pattern.count - 1) % 2 == 0) != self.inverted


FLAT = EdgeJoint()

# Clockwise walk in y-down coordinates: top, right, bottom, left.
_SIDES = ("top", "right", "bottom", "left")
_DIRECTIONS = {
    "top": Point(1, 0),
    "right": Point(0, 1),
    "bottom": Point(-1, 0),
    "left": Point(0, -1),
}
_NORMALS = {
    "top": Point(0, -1),
    "right": Point(1, 0),
    "bottom": Point(0, 1),
    "left": Point(-1, 0),
}


def build_panel(
    core_width: float,
    core_height: float,
    thickness: float,
    kerf: float,
    top: EdgeJoint = FLAT,
    right: EdgeJoint = FLAT,
    bottom: EdgeJoint = FLAT,
    left: EdgeJoint = FLAT,
) -> list[Point]:
    """Walk the four edges of a panel and return its outline.

    The core rectangle is the part of the panel between the mating walls;
    tabs protrude ``thickness`` outwards from it. A corner square is filled
    when both edges meeting there end and start on a tab.

    Returns:
        Clockwise outline vertices (not yet simplified or normalized).
    """
    edges = {"top": top, "right": right, "bottom": bottom, "left": left}
    x0 = thickness if left.is_jointed else 0.0
    y0 = thickness if top.is_jointed else 0.0
    starts = {
        "top": Point(x0, y0),
        "right": Point(x0 + core_width, y0),
        "bottom": Point(x0 + core_width, y0 + core_height),
        "left": Point(x0, y0 + core_height),
    }
    lengths = {
        "top": core_width,
        "right": core_height,
        "bottom": core_width,
        "left": core_height,
    }

    points: list[Point] = []
    for index, side in enumerate(_SIDES):
        joint = edges[side]
        previous = edges[_SIDES[index - 1]]
        start = starts[side]
        d = _DIRECTIONS[side]
        n = _NORMALS[side]
        length = lengths[side]

        corner_filled = previous.last_protrudes() and joint.first_protrudes()
        if corner_filled:
            points.append(start - d * thickness + n * thickness)

        if joint.pattern is None:
            points.append(start)
            points.append(start + d * length)
            continue

        if abs(joint.pattern.length - length) > 1e-6:
            raise GeometryError(
                f"Pattern length {joint.pattern.length} does not match {side} edge {length}"
            )
        for seg_start, seg_end, protrudes in joint.pattern.spans(joint.inverted, kerf):
            lift = n * (thickness if protrudes else 0.0)
            points.append(start + d * seg_start + lift)
            points.append(start + d * seg_end + lift)
    return points
