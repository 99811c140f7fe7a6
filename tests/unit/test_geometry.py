"""Unit tests for polygon helpers and path data handling."""

import pytest

from laserbox.domain import (
    DrawPath,
    PathCommand,
    Point,
    bbox,
    cut_top_notch,
    is_simple_polygon,
    largest_subpath,
    normalize,
    polygon_area,
    simplify_closed,
)
from laserbox.domain.geometry import fmt

SQUARE = [Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)]


class TestPoint:
    def test_arithmetic(self) -> None:
        assert Point(1, 2) + Point(3, 4) == Point(4, 6)
        assert Point(3, 4) - Point(1, 1) == Point(2, 3)
        assert Point(1, 2) * 2 == Point(2, 4)

    def test_rotated_clockwise_in_y_down(self) -> None:
        rotated = Point(1, 0).rotated(90)

        assert rotated.is_close(Point(0, 1))


class TestFmt:
    @pytest.mark.parametrize(
        "value,expected",
        [(1.0, "1"), (2.5, "2.5"), (0.1234, "0.123"), (-0.0001, "0"), (120.0, "120")],
    )
    def test_formatting(self, value: float, expected: str) -> None:
        assert fmt(value) == expected


class TestPolygonHelpers:
    def test_bbox(self) -> None:
        assert bbox([Point(2, 3), Point(-1, 5), Point(4, 0)]) == (-1, 0, 4, 5)

    def test_bbox_of_nothing_raises(self) -> None:
        with pytest.raises(ValueError):
            bbox([])

    def test_polygon_area(self) -> None:
        assert polygon_area(SQUARE) == pytest.approx(100)

    def test_square_is_simple(self) -> None:
        assert is_simple_polygon(SQUARE)

    def test_bowtie_is_not_simple(self) -> None:
        bowtie = [Point(0, 0), Point(10, 10), Point(10, 0), Point(0, 10)]

        assert not is_simple_polygon(bowtie)

    def test_degenerate_polygon_is_not_simple(self) -> None:
        assert not is_simple_polygon([Point(0, 0), Point(5, 0), Point(10, 0)])

    def test_simplify_drops_collinear_and_repeated(self) -> None:
        points = [
            Point(0, 0),
            Point(5, 0),
            Point(10, 0),
            Point(10, 0),
            Point(10, 10),
            Point(0, 10),
            Point(0, 0),
        ]

        assert simplify_closed(points) == SQUARE

    def test_normalize_moves_minimum_to_origin(self) -> None:
        moved, shift = normalize([Point(-3, 2), Point(5, 7)])

        assert shift == Point(3, -2)
        assert moved == [Point(0, 0), Point(8, 5)]


class TestCutTopNotch:
    def test_notch_is_centred_on_top_edge(self) -> None:
        rect = [Point(0, 0), Point(100, 0), Point(100, 50), Point(0, 50)]
        notched = cut_top_notch(rect, 20, 5)

        assert notched is not None
        assert len(notched) == 8
        assert Point(40, 5) in notched
        assert Point(60, 5) in notched
        assert polygon_area(notched) == pytest.approx(4900)
        assert is_simple_polygon(notched)

    def test_notch_wider_than_edge_is_refused(self) -> None:
        rect = [Point(0, 0), Point(100, 0), Point(100, 50), Point(0, 50)]

        assert cut_top_notch(rect, 200, 5) is None


class TestPathCommand:
    def test_unsupported_kind(self) -> None:
        with pytest.raises(ValueError, match="Unsupported"):
            PathCommand("H", (1.0,))

    def test_wrong_argument_count(self) -> None:
        with pytest.raises(ValueError, match="takes 2 arguments"):
            PathCommand("L", (1.0,))

    def test_to_svg(self) -> None:
        assert PathCommand("M", (1.0, 2.5)).to_svg() == "M 1 2.5"
        assert PathCommand("Z").to_svg() == "Z"


class TestDrawPath:
    def test_from_polygon_closes(self) -> None:
        path = DrawPath.from_polygon(SQUARE)

        assert path.to_svg_d() == "M 0 0 L 10 0 L 10 10 L 0 10 Z"

    def test_parse_relative_and_shorthand_commands(self) -> None:
        path = DrawPath.parse("m 10 10 l 5 0 h 5 v 5 z")

        assert [c.kind for c in path.commands] == ["M", "L", "L", "L", "Z"]
        assert path.commands[-2].args == (20.0, 15.0)
        assert path.bounds() == (10, 10, 20, 15)

    def test_parse_implicit_line_to_after_move(self) -> None:
        path = DrawPath.parse("M 0 0 10 0 10 10")

        assert [c.kind for c in path.commands] == ["M", "L", "L"]

    def test_parse_requires_leading_command(self) -> None:
        with pytest.raises(ValueError, match="must start with a command"):
            DrawPath.parse("10 10")

    def test_parse_rejects_incomplete_arguments(self) -> None:
        with pytest.raises(ValueError, match="Incomplete"):
            DrawPath.parse("M 0")

    def test_circle_round_trips_through_as_circle(self) -> None:
        circle = DrawPath.circle(5, 5, 2)

        assert circle.as_circle() == pytest.approx((5, 5, 2))
        min_x, min_y, max_x, max_y = circle.bounds()
        assert (min_x, min_y, max_x, max_y) == pytest.approx((3, 3, 7, 7), abs=1e-3)

    def test_translated_keeps_arcs(self) -> None:
        moved = DrawPath.circle(5, 5, 2).translated(10, 20)

        assert moved.as_circle() == pytest.approx((15, 25, 2))

    def test_transformed_flattens(self) -> None:
        moved = DrawPath.circle(0, 0, 1).transformed(lambda p: p + Point(1, 1))

        assert moved.as_circle() is None
        assert all(c.kind in ("M", "L", "Z") for c in moved.commands)

    def test_rectangle_is_not_a_circle(self) -> None:
        assert DrawPath.rect(0, 0, 10, 5).as_circle() is None

    def test_subpaths_split_on_move(self) -> None:
        path = DrawPath.parse("M 0 0 L 1 0 L 1 1 Z M 5 5 L 6 5 L 6 6 Z")

        assert len(path.subpaths()) == 2

    def test_largest_subpath(self) -> None:
        path = DrawPath.parse("M 0 0 L 1 0 L 1 1 Z M 0 0 L 10 0 L 10 10 Z")

        assert largest_subpath(path).bounds() == (0, 0, 10, 10)
