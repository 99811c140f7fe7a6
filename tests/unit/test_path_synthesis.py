"""Unit tests for SVG drawing synthesis and overlay merging."""

import xml.etree.ElementTree as ET

import pytest

from laserbox.domain import (
    DrawPath,
    EngraveOverlayItem,
    FacePath,
    FaceRole,
    GeneratedFace,
    Operation,
    OverlayPlacement,
    Point,
    artwork_from_path_data,
)
from laserbox.domain.face_generator import rectangle
from laserbox.infrastructure.path_synthesis import (
    OPERATION_STYLES,
    DrawElement,
    PathSynthesizer,
    face_elements,
    order_elements,
    overlay_point_mapper,
    overlay_transform,
)
from laserbox.infrastructure.sheet_packer import SheetConfig, pack_faces

SVG = "{http://www.w3.org/2000/svg}"


def make_panel(panel_id: str, width: float = 20, height: float = 10, **kwargs) -> GeneratedFace:
    return GeneratedFace.from_outline(panel_id, FaceRole.FRONT, rectangle(width, height), **kwargs)


@pytest.fixture
def overlay() -> EngraveOverlayItem:
    artwork = artwork_from_path_data("M 0 0 L 20 0 L 20 10 L 0 10 Z", "logo")
    return EngraveOverlayItem(
        id="overlay-1",
        target_face_id="panel",
        source=artwork,
        placement=OverlayPlacement(50, 30),
    )


class TestOperationStyles:
    def test_cut_is_red_stroke(self) -> None:
        assert OPERATION_STYLES[Operation.CUT].attributes(0.1) == (
            'fill="none" stroke="#ff0000" stroke-width="0.1"'
        )

    def test_score_is_blue_stroke(self) -> None:
        assert 'stroke="#0000ff"' in OPERATION_STYLES[Operation.SCORE].attributes(0.1)

    def test_engrave_is_black_fill(self) -> None:
        assert OPERATION_STYLES[Operation.ENGRAVE].attributes(0.1) == (
            'fill="#000000" stroke="none"'
        )


class TestOrdering:
    def test_cut_comes_last(self) -> None:
        elements = [
            DrawElement(Operation.CUT, "M 0 0"),
            DrawElement(Operation.ENGRAVE, "M 1 1"),
            DrawElement(Operation.SCORE, "M 2 2"),
            DrawElement(Operation.CUT, "M 3 3"),
        ]
        ordered = order_elements(elements)

        assert [e.operation for e in ordered] == [
            Operation.ENGRAVE,
            Operation.SCORE,
            Operation.CUT,
            Operation.CUT,
        ]
        # stable within an operation
        assert [e.d for e in ordered[2:]] == ["M 0 0", "M 3 3"]

    def test_face_elements_merge_overlays(self, overlay: EngraveOverlayItem) -> None:
        score = FacePath(DrawPath.rect(2, 2, 5, 5), Operation.SCORE)
        panel = make_panel("panel", 100, 60, extra_paths=(score,))
        elements = face_elements(panel, [overlay])

        assert [e.operation for e in elements] == [
            Operation.ENGRAVE,
            Operation.SCORE,
            Operation.CUT,
        ]
        assert elements[0].source_id == "overlay-1"
        assert elements[0].transform == overlay_transform(overlay)

    def test_overlays_for_other_faces_are_ignored(self, overlay: EngraveOverlayItem) -> None:
        elements = face_elements(make_panel("other"), [overlay])

        assert [e.operation for e in elements] == [Operation.CUT]


class TestOverlayTransform:
    def test_transform_centres_artwork(self, overlay: EngraveOverlayItem) -> None:
        assert overlay_transform(overlay) == (
            "translate(50 30) rotate(0) scale(1 1) translate(-10 -5)"
        )

    def test_point_mapper_matches_transform(self, overlay: EngraveOverlayItem) -> None:
        mapper = overlay_point_mapper(overlay)

        assert mapper(Point(0, 0)).is_close(Point(40, 25))
        assert mapper(Point(20, 10)).is_close(Point(60, 35))

    def test_point_mapper_with_rotation(self, overlay: EngraveOverlayItem) -> None:
        rotated = EngraveOverlayItem(
            id=overlay.id,
            target_face_id=overlay.target_face_id,
            source=overlay.source,
            placement=OverlayPlacement(50, 30, rotation=90),
        )

        assert overlay_point_mapper(rotated)(Point(0, 0)).is_close(Point(55, 20))

    def test_artwork_offset_is_applied(self) -> None:
        artwork = artwork_from_path_data("M 10 10 L 30 10 L 30 20 Z", "art")
        item = EngraveOverlayItem("o", "panel", artwork, OverlayPlacement(0, 0))

        assert overlay_point_mapper(item)(Point(10, 10)).is_close(Point(-10, -5))


class TestPathSynthesizer:
    def test_invalid_settings(self) -> None:
        with pytest.raises(ValueError):
            PathSynthesizer(stroke_width=0)
        with pytest.raises(ValueError):
            PathSynthesizer(padding=-1)

    def test_render_face_document(self) -> None:
        svg = PathSynthesizer().render_face(make_panel("panel"))
        root = ET.fromstring(svg)

        assert root.get("width") == "24mm"
        assert root.get("height") == "14mm"
        assert root.get("viewBox") == "-2 -2 24 14"
        group = root.find(f"{SVG}g")
        assert group is not None and group.get("id") == "panel"
        path = group.find(f"{SVG}path")
        assert path.get("d") == "M 0 0 L 20 0 L 20 10 L 0 10 Z"
        assert path.get("stroke") == "#ff0000"
        assert path.get("class") == "cut"

    def test_cut_paths_are_last_in_document(self, overlay: EngraveOverlayItem) -> None:
        score = FacePath(DrawPath.rect(2, 2, 5, 5), Operation.SCORE)
        panel = make_panel("panel", 100, 60, extra_paths=(score,))
        svg = PathSynthesizer().render_face(panel, [overlay])

        assert svg.index('class="engrave"') < svg.index('class="score"') < svg.index('class="cut"')

    def test_preview_face_is_flagged(self) -> None:
        svg = PathSynthesizer().render_face(make_panel("panel", valid=False))

        assert 'data-valid="false"' in svg

    def test_render_grid(self) -> None:
        panels = [make_panel(f"p{i}") for i in range(4)]
        root = ET.fromstring(PathSynthesizer().render_grid(panels, columns=2))

        groups = root.findall(f"{SVG}g")
        assert [g.get("id") for g in groups] == ["p0", "p1", "p2", "p3"]
        assert groups[3].get("transform") == "translate(40 30)"
        # 10 margin + 20 + 10 spacing + 20 + 10 margin
        assert root.get("width") == "70mm"

    def test_render_grid_needs_a_column(self) -> None:
        with pytest.raises(ValueError):
            PathSynthesizer().render_grid([make_panel("p")], columns=0)

    def test_render_sheet_separates_overflow(self) -> None:
        sheet = SheetConfig(width=100, height=100, spacing=3)
        result = pack_faces([make_panel("fits", 50, 50), make_panel("huge", 200, 50)], sheet)
        svg = PathSynthesizer().render_sheet(result, show_sheet=True)
        root = ET.fromstring(svg)

        assert root.find(f"{SVG}rect").get("id") == "sheet"
        panels = root.find(f"{SVG}g[@id='sheet-panels']")
        assert [g.get("id") for g in panels.findall(f"{SVG}g")] == ["fits"]
        overflow = root.find(f"{SVG}g[@id='overflow']")
        assert overflow.get("data-overflow") == "true"
        assert [g.get("id") for g in overflow.findall(f"{SVG}g")] == ["huge"]
        for path in overflow.iter(f"{SVG}path"):
            assert path.get("stroke") == "#999999"

    def test_render_each_keyed_by_id(self) -> None:
        drawings = PathSynthesizer().render_each([make_panel("a"), make_panel("b")])

        assert list(drawings) == ["a", "b"]
