"""Geometry primitives: polygons and drawable paths.

Paths are stored as a tuple of absolute commands (``M``, ``L``, ``A``, ``C``,
``Q``, ``Z``) rather than serialized path text, so edits such as notch
insertion are structural operations on points and commands.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from .value_objects import Point

EPS = 1e-6

# Segments used when flattening curves for measurement and DXF output
ARC_STEPS = 16
CURVE_STEPS = 8

_TOKEN_RE = re.compile(r"[MmLlHhVvAaCcQqZz]|[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_ARG_COUNTS = {"M": 2, "L": 2, "H": 1, "V": 1, "A": 7, "C": 6, "Q": 4, "Z": 0}


def fmt(value: float) -> str:
    """Format a coordinate for path output (3 decimals, no trailing zeros)."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def bbox(points: Iterable[Point]) -> tuple[float, float, float, float]:
    """Return ``(min_x, min_y, max_x, max_y)`` of a point set.

    Raises:
        ValueError: If ``points`` is empty.
    """
    pts = list(points)
    if not pts:
        raise ValueError("Cannot compute bounding box of no points")
    xs = [p.x for p in pts]
    ys = [p.y for p in pts]
    return min(xs), min(ys), max(xs), max(ys)


def polygon_area(points: Sequence[Point]) -> float:
    """Unsigned shoelace area of a closed polygon."""
    total = 0.0
    n = len(points)
    for i in range(n):
        a = points[i]
        b = points[(i + 1) % n]
        total += a.x * b.y - b.x * a.y
    return abs(total) / 2


def _orientation(a: Point, b: Point, c: Point) -> int:
    cross = (b.x - a.x) * (c.y - a.y) - (b.y - a.y) * (c.x - a.x)
    if abs(cross) <= EPS:
        return 0
    return 1 if cross > 0 else -1


def _on_segment(a: Point, b: Point, p: Point) -> bool:
    return (
        min(a.x, b.x) - EPS <= p.x <= max(a.x, b.x) + EPS
        and min(a.y, b.y) - EPS <= p.y <= max(a.y, b.y) + EPS
    )


def segments_intersect(p1: Point, p2: Point, q1: Point, q2: Point) -> bool:
    """True if closed segments p1-p2 and q1-q2 touch or cross."""
    o1 = _orientation(p1, p2, q1)
    o2 = _orientation(p1, p2, q2)
    o3 = _orientation(q1, q2, p1)
    o4 = _orientation(q1, q2, p2)
    if o1 != o2 and o3 != o4 and 0 not in (o1, o2, o3, o4):
        return True
    if o1 == 0 and _on_segment(p1, p2, q1):
        return True
    if o2 == 0 and _on_segment(p1, p2, q2):
        return True
    if o3 == 0 and _on_segment(q1, q2, p1):
        return True
    if o4 == 0 and _on_segment(q1, q2, p2):
        return True
    return False


def is_simple_polygon(points: Sequence[Point]) -> bool:
    """Check that a closed polygon has no self-intersections.

    Adjacent edges may share their common vertex; any other contact between
    edges, including collinear overlap, makes the polygon non-simple.
    """
    n = len(points)
    if n < 3:
        return False
    if polygon_area(points) <= EPS:
        return False
    edges = [(points[i], points[(i + 1) % n]) for i in range(n)]
    for i in range(n):
        a1, a2 = edges[i]
        for j in range(i + 1, n):
            if j == i + 1 or (i == 0 and j == n - 1):
                # adjacent: only a fold-back onto the previous edge is a defect
                shared = a2 if j == i + 1 else a1
                other_a = a1 if j == i + 1 else a2
                b1, b2 = edges[j]
                other_b = b2 if j == i + 1 else b1
                if _orientation(other_a, shared, other_b) == 0:
                    da = other_a - shared
                    db = other_b - shared
                    if da.x * db.x + da.y * db.y > 0:
                        return False
                continue
            b1, b2 = edges[j]
            if segments_intersect(a1, a2, b1, b2):
                return False
    return True


def simplify_closed(points: Sequence[Point], eps: float = EPS) -> list[Point]:
    """Drop repeated and collinear vertices from a closed polygon."""
    pts: list[Point] = []
    for p in points:
        if not pts or not pts[-1].is_close(p, eps):
            pts.append(p)
    if len(pts) > 1 and pts[0].is_close(pts[-1], eps):
        pts.pop()

    changed = True
    while changed and len(pts) > 3:
        changed = False
        for i in range(len(pts)):
            prev_pt = pts[i - 1]
            cur = pts[i]
            nxt = pts[(i + 1) % len(pts)]
            cross = (cur.x - prev_pt.x) * (nxt.y - prev_pt.y) - (cur.y - prev_pt.y) * (
                nxt.x - prev_pt.x
            )
            if abs(cross) <= eps or cur.is_close(nxt, eps):
                del pts[i]
                changed = True
                break
    return pts


def normalize(points: Sequence[Point]) -> tuple[list[Point], Point]:
    """Translate points so the bounding box minimum sits at the origin.

    Returns:
        The translated points and the translation that was applied.
    """
    min_x, min_y, _, _ = bbox(points)
    shift = Point(-min_x, -min_y)
    return [p + shift for p in points], shift


def insert_into_edge(
    points: Sequence[Point], index: int, detour: Sequence[Point]
) -> list[Point]:
    """Insert ``detour`` points between vertex ``index`` and its successor."""
    result = list(points[: index + 1])
    result.extend(detour)
    result.extend(points[index + 1 :])
    return result


def find_horizontal_edge(
    points: Sequence[Point],
    span_start: float,
    span_end: float,
    prefer: str = "min",
) -> int | None:
    """Find the horizontal edge that fully contains ``[span_start, span_end]``.

    When several edges qualify, the one with the smallest y (``prefer="min"``)
    or largest y (``prefer="max"``) wins. This is a best-effort heuristic
    intended for well-formed single-contour outlines.

    Returns:
        Index of the edge's starting vertex, or None.
    """
    best: int | None = None
    best_y = 0.0
    n = len(points)
    for i in range(n):
        a = points[i]
        b = points[(i + 1) % n]
        if abs(a.y - b.y) > 1e-3:
            continue
        if span_start < min(a.x, b.x) - 1e-3 or span_end > max(a.x, b.x) + 1e-3:
            continue
        if best is None or (a.y < best_y if prefer == "min" else a.y > best_y):
            best = i
            best_y = a.y
    return best


def cut_top_notch(
    points: Sequence[Point], width: float, depth: float
) -> list[Point] | None:
    """Cut a rectangular notch centred on the top edge of an outline.

    The notch goes into the panel (towards increasing y) from the highest
    horizontal edge that fully contains the centred span.

    Returns:
        The new outline, or None when no edge can hold the notch.
    """
    min_x, _, max_x, _ = bbox(points)
    center = (min_x + max_x) / 2
    left = center - width / 2
    right = center + width / 2
    index = find_horizontal_edge(points, left, right, prefer="min")
    if index is None:
        return None
    a = points[index]
    b = points[(index + 1) % len(points)]
    y = a.y
    if b.x >= a.x:
        enter, leave = left, right
    else:
        enter, leave = right, left
    detour = [
        Point(enter, y),
        Point(enter, y + depth),
        Point(leave, y + depth),
        Point(leave, y),
    ]
    return simplify_closed(insert_into_edge(points, index, detour))


def arc_points(
    cx: float, cy: float, r: float, start_deg: float, end_deg: float, steps: int
) -> list[Point]:
    """Points along a circular arc, excluding the start point."""
    pts = []
    for i in range(1, steps + 1):
        deg = start_deg + (end_deg - start_deg) * i / steps
        rad = math.radians(deg)
        pts.append(Point(cx + math.cos(rad) * r, cy + math.sin(rad) * r))
    return pts


def _arc_center(
    start: Point,
    rx: float,
    ry: float,
    phi_deg: float,
    large_arc: bool,
    sweep: bool,
    end: Point,
) -> tuple[Point, float, float, float, float] | None:
    """Convert an SVG endpoint arc to centre form.

    Returns:
        ``(center, rx, ry, theta1, delta_theta)`` in radians, or None for a
        degenerate arc that should be treated as a straight line.
    """
    if rx == 0 or ry == 0 or start.is_close(end):
        return None
    rx, ry = abs(rx), abs(ry)
    phi = math.radians(phi_deg)
    cos_phi, sin_phi = math.cos(phi), math.sin(phi)
    dx = (start.x - end.x) / 2
    dy = (start.y - end.y) / 2
    x1p = cos_phi * dx + sin_phi * dy
    y1p = -sin_phi * dx + cos_phi * dy

    lam = (x1p * x1p) / (rx * rx) + (y1p * y1p) / (ry * ry)
    if lam > 1:
        scale = math.sqrt(lam)
        rx *= scale
        ry *= scale

    num = rx * rx * ry * ry - rx * rx * y1p * y1p - ry * ry * x1p * x1p
    den = rx * rx * y1p * y1p + ry * ry * x1p * x1p
    coef = math.sqrt(max(num / den, 0.0)) if den else 0.0
    if large_arc == sweep:
        coef = -coef
    cxp = coef * rx * y1p / ry
    cyp = -coef * ry * x1p / rx

    cx = cos_phi * cxp - sin_phi * cyp + (start.x + end.x) / 2
    cy = sin_phi * cxp + cos_phi * cyp + (start.y + end.y) / 2

    def angle(ux: float, uy: float, vx: float, vy: float) -> float:
        a = math.atan2(ux * vy - uy * vx, ux * vx + uy * vy)
        return a

    theta1 = angle(1, 0, (x1p - cxp) / rx, (y1p - cyp) / ry)
    delta = angle(
        (x1p - cxp) / rx, (y1p - cyp) / ry, (-x1p - cxp) / rx, (-y1p - cyp) / ry
    )
    if not sweep and delta > 0:
        delta -= 2 * math.pi
    elif sweep and delta < 0:
        delta += 2 * math.pi
    return Point(cx, cy), rx, ry, theta1, delta


@dataclass(frozen=True)
class PathCommand:
    """One absolute path command.

    Attributes:
        kind: One of ``M``, ``L``, ``A``, ``C``, ``Q``, ``Z``.
        args: Numeric arguments in SVG order.
    """

    kind: str
    args: tuple[float, ...] = ()

    def __post_init__(self) -> None:
        expected = _ARG_COUNTS.get(self.kind)
        if expected is None or self.kind in ("H", "V"):
            raise ValueError(f"Unsupported path command: {self.kind}")
        if len(self.args) != expected:
            raise ValueError(
                f"Command {self.kind} takes {expected} arguments, got {len(self.args)}"
            )

    @property
    def end(self) -> Point | None:
        """End point of the command, None for ``Z``."""
        if self.kind == "Z":
            return None
        return Point(self.args[-2], self.args[-1])

    def to_svg(self) -> str:
        if self.kind == "A":
            rx, ry, rot, large, sweep, x, y = self.args
            return (
                f"A {fmt(rx)} {fmt(ry)} {fmt(rot)} {int(large)} {int(sweep)} "
                f"{fmt(x)} {fmt(y)}"
            )
        if not self.args:
            return self.kind
        return self.kind + " " + " ".join(fmt(a) for a in self.args)


@dataclass(frozen=True)
class DrawPath:
    """A drawable path made of absolute commands.

    Attributes:
        commands: Ordered path commands.
    """

    commands: tuple[PathCommand, ...]

    @classmethod
    def from_polygon(cls, points: Sequence[Point], closed: bool = True) -> DrawPath:
        """Build a path from an ordered vertex list."""
        if not points:
            return cls(())
        cmds = [PathCommand("M", (points[0].x, points[0].y))]
        cmds.extend(PathCommand("L", (p.x, p.y)) for p in points[1:])
        if closed:
            cmds.append(PathCommand("Z"))
        return cls(tuple(cmds))

    @classmethod
    def rect(cls, x: float, y: float, width: float, height: float) -> DrawPath:
        return cls.from_polygon(
            [
                Point(x, y),
                Point(x + width, y),
                Point(x + width, y + height),
                Point(x, y + height),
            ]
        )

    @classmethod
    def circle(cls, cx: float, cy: float, r: float) -> DrawPath:
        """Full circle drawn as two half-circle arcs starting at the east point."""
        return cls(
            (
                PathCommand("M", (cx + r, cy)),
                PathCommand("A", (r, r, 0, 1, 0, cx - r, cy)),
                PathCommand("A", (r, r, 0, 1, 0, cx + r, cy)),
                PathCommand("Z"),
            )
        )

    @classmethod
    def parse(cls, d: str) -> DrawPath:
        """Parse SVG path data into absolute commands.

        Supports ``M L H V A C Q Z`` in absolute and relative forms, with
        implicit command repetition.

        Raises:
            ValueError: On malformed path data.
        """
        tokens = _TOKEN_RE.findall(d)
        cmds: list[PathCommand] = []
        current = Point(0.0, 0.0)
        subpath_start = current
        i = 0
        command: str | None = None
        while i < len(tokens):
            token = tokens[i]
            if token.isalpha():
                command = token
                i += 1
                if command in "Zz":
                    cmds.append(PathCommand("Z"))
                    current = subpath_start
                    continue
            elif command is None or command in "Zz":
                raise ValueError(f"Path data must start with a command: {d[:40]!r}")

            upper = command.upper()
            count = _ARG_COUNTS[upper]
            raw = tokens[i : i + count]
            if len(raw) < count or any(t.isalpha() for t in raw):
                raise ValueError(f"Incomplete arguments for '{command}' in path data")
            args = [float(t) for t in raw]
            i += count
            relative = command.islower()

            if upper == "M":
                target = Point(args[0], args[1])
                if relative:
                    target = target + current
                cmds.append(PathCommand("M", (target.x, target.y)))
                current = subpath_start = target
                # subsequent pairs are implicit line-tos
                command = "l" if relative else "L"
            elif upper in ("L", "H", "V"):
                if upper == "L":
                    target = Point(args[0], args[1])
                    if relative:
                        target = target + current
                elif upper == "H":
                    x = args[0] + (current.x if relative else 0)
                    target = Point(x, current.y)
                else:
                    y = args[0] + (current.y if relative else 0)
                    target = Point(current.x, y)
                cmds.append(PathCommand("L", (target.x, target.y)))
                current = target
            elif upper == "A":
                target = Point(args[5], args[6])
                if relative:
                    target = target + current
                cmds.append(
                    PathCommand(
                        "A",
                        (
                            args[0],
                            args[1],
                            args[2],
                            1.0 if args[3] else 0.0,
                            1.0 if args[4] else 0.0,
                            target.x,
                            target.y,
                        ),
                    )
                )
                current = target
            else:
                pairs = [Point(args[k], args[k + 1]) for k in range(0, count, 2)]
                if relative:
                    pairs = [p + current for p in pairs]
                flat = tuple(v for p in pairs for v in (p.x, p.y))
                cmds.append(PathCommand(upper, flat))
                current = pairs[-1]
        return cls(tuple(cmds))

    def to_svg_d(self) -> str:
        """Serialize as SVG path data."""
        return " ".join(c.to_svg() for c in self.commands)

    def subpaths(self) -> list[DrawPath]:
        """Split at each move command."""
        groups: list[list[PathCommand]] = []
        for cmd in self.commands:
            if cmd.kind == "M" or not groups:
                groups.append([])
            groups[-1].append(cmd)
        return [DrawPath(tuple(g)) for g in groups]

    def sample(self) -> list[tuple[list[Point], bool]]:
        """Flatten into polylines.

        Returns:
            One ``(points, closed)`` pair per subpath; arcs and curves are
            approximated with line segments.
        """
        polylines: list[tuple[list[Point], bool]] = []
        points: list[Point] = []
        current = Point(0.0, 0.0)
        for cmd in self.commands:
            if cmd.kind == "M":
                if len(points) > 1:
                    polylines.append((points, False))
                current = Point(cmd.args[0], cmd.args[1])
                points = [current]
            elif cmd.kind == "L":
                current = Point(cmd.args[0], cmd.args[1])
                points.append(current)
            elif cmd.kind == "A":
                rx, ry, rot, large, sweep, x, y = cmd.args
                end = Point(x, y)
                center = _arc_center(current, rx, ry, rot, bool(large), bool(sweep), end)
                if center is not None:
                    c, arx, ary, theta1, delta = center
                    phi = math.radians(rot)
                    for k in range(1, ARC_STEPS + 1):
                        theta = theta1 + delta * k / ARC_STEPS
                        px = arx * math.cos(theta)
                        py = ary * math.sin(theta)
                        points.append(
                            Point(
                                c.x + px * math.cos(phi) - py * math.sin(phi),
                                c.y + px * math.sin(phi) + py * math.cos(phi),
                            )
                        )
                points.append(end)
                current = end
            elif cmd.kind in ("C", "Q"):
                ctrl = [Point(cmd.args[k], cmd.args[k + 1]) for k in range(0, len(cmd.args), 2)]
                start = current
                for k in range(1, CURVE_STEPS + 1):
                    t = k / CURVE_STEPS
                    points.append(_bezier(start, ctrl, t))
                current = ctrl[-1]
            elif cmd.kind == "Z":
                if points:
                    polylines.append((points, True))
                    current = points[0]
                points = [current]
        if len(points) > 1:
            polylines.append((points, False))
        return polylines

    def bounds(self) -> tuple[float, float, float, float]:
        """Bounding box of the flattened path."""
        return bbox(p for pts, _ in self.sample() for p in pts)

    def transformed(self, fn: Callable[[Point], Point]) -> DrawPath:
        """Apply a point transform; arcs and curves are flattened first."""
        cmds: list[PathCommand] = []
        for pts, closed in self.sample():
            mapped = [fn(p) for p in pts]
            if closed and len(mapped) > 1 and mapped[-1].is_close(mapped[0]):
                mapped = mapped[:-1]
            cmds.extend(DrawPath.from_polygon(mapped, closed).commands)
        return DrawPath(tuple(cmds))

    def translated(self, dx: float, dy: float) -> DrawPath:
        """Translate exactly, keeping arcs intact."""
        cmds = []
        for cmd in self.commands:
            if cmd.kind == "A":
                a = cmd.args
                cmds.append(PathCommand("A", (*a[:5], a[5] + dx, a[6] + dy)))
            elif cmd.kind == "Z":
                cmds.append(cmd)
            else:
                args = tuple(
                    v + (dx if k % 2 == 0 else dy) for k, v in enumerate(cmd.args)
                )
                cmds.append(PathCommand(cmd.kind, args))
        return DrawPath(tuple(cmds))

    def as_circle(self) -> tuple[float, float, float] | None:
        """Recognise the two-arc circle form produced by :meth:`circle`.

        Returns:
            ``(cx, cy, r)`` or None.
        """
        kinds = [c.kind for c in self.commands]
        if kinds != ["M", "A", "A", "Z"]:
            return None
        start = self.commands[0].end
        first, second = self.commands[1], self.commands[2]
        r = first.args[0]
        if abs(first.args[1] - r) > EPS or abs(second.args[0] - r) > EPS:
            return None
        mid = first.end
        end = second.end
        if start is None or mid is None or end is None or not end.is_close(start):
            return None
        if abs(math.hypot(start.x - mid.x, start.y - mid.y) - 2 * r) > 1e-3:
            return None
        return (start.x + mid.x) / 2, (start.y + mid.y) / 2, r


def _bezier(start: Point, ctrl: list[Point], t: float) -> Point:
    pts = [start, *ctrl]
    while len(pts) > 1:
        pts = [a * (1 - t) + b * t for a, b in zip(pts, pts[1:])]
    return pts[0]


def largest_subpath(path: DrawPath) -> DrawPath:
    """Pick the subpath with the largest bounding-box area.

    Best-effort heuristic for choosing the outer contour of imported
    artwork. Malformed or nested multi-contour input may pick unexpectedly.
    """
    best = None
    best_area = -1.0
    for sub in path.subpaths():
        try:
            min_x, min_y, max_x, max_y = sub.bounds()
        except ValueError:
            continue
        area = (max_x - min_x) * (max_y - min_y)
        if area > best_area:
            best, best_area = sub, area
    if best is None:
        raise ValueError("Path has no measurable subpaths")
    return best
