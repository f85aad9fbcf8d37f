import math

import pytest

from dstv_blocks.blocks import (
    DecodeError,
    arc_length,
    arc_polyline,
    decode_arc_contour,
    decode_cut,
    decode_marking,
    decode_punch,
)
from dstv_blocks.blocks.arc_contour import LEGACY, MULTI_LINE, SINGLE_LINE, classify_arc_format
from dstv_blocks.blocks.cut import cut_kind_for
from dstv_blocks.config import DecoderSettings


class TestCut:
    def test_kind_inferred_from_aspect_ratio(self) -> None:
        assert cut_kind_for(40, 38) == "circular"
        assert cut_kind_for(100, 40) == "rectangular"
        assert cut_kind_for(300, 50) == "angular"

    def test_minimal_cut(self, settings: DecoderSettings) -> None:
        cut = decode_cut(["100", "50", "40", "38"], settings=settings)

        assert cut.cut_kind == "circular"
        assert cut.angle == 0
        assert cut.work_plane == "E0"
        assert cut.feature_type == "straight_cut"

    def test_angle_makes_an_angle_cut(self, settings: DecoderSettings) -> None:
        cut = decode_cut(["100", "50", "100", "40", "30"], settings=settings)

        assert cut.angle == pytest.approx(30.0)
        assert cut.feature_type == "angle_cut"

    def test_numeric_options_follow_heuristic_order(self, settings: DecoderSettings) -> None:
        cut = decode_cut(["0", "0", "100", "40", "15", "5", "25"], settings=settings)

        assert cut.angle == pytest.approx(15.0)
        assert cut.radius == pytest.approx(5.0)
        assert cut.depth == pytest.approx(25.0)

    def test_text_options(self, settings: DecoderSettings) -> None:
        cut = decode_cut(["0", "0", "300", "50", "beveled", "E2", "o", "junk"], settings=settings)

        assert cut.cut_kind == "beveled"
        assert cut.work_plane == "E2"
        assert cut.face == "top_flange"
        assert cut.feature_type == "bevel_cut"

    def test_empty_mandatory_field(self, settings: DecoderSettings) -> None:
        with pytest.raises(DecodeError):
            decode_cut(["0", "", "10", "10", "20"], settings=settings)

    @pytest.mark.parametrize("fields", [["0", "0", "0", "10"], ["0", "0", "10", "-1"], ["x", "0", "1", "1"]])
    def test_structural_failures(self, settings: DecoderSettings, fields: list[str]) -> None:
        with pytest.raises(DecodeError):
            decode_cut(fields, settings=settings)


class TestArcContour:
    def test_format_detection(self) -> None:
        assert classify_arc_format(["100 50 25 0 90"]) == SINGLE_LINE
        assert classify_arc_format(["100 50 25 0 90", "200 50 10 270 90"]) == MULTI_LINE
        assert classify_arc_format(["vo", "100", "50", "25", "0", "90"]) == LEGACY

    def test_single_line(self) -> None:
        contour = decode_arc_contour(["100 50 25 0 90"])

        (arc,) = contour.arcs
        assert (arc.center_x, arc.center_y, arc.radius) == (100.0, 50.0, 25.0)
        assert arc.clockwise
        assert contour.face is None

    def test_multi_line(self) -> None:
        contour = decode_arc_contour(["100 50 25 0 90", "200 50 10 270 90"])

        assert len(contour.arcs) == 2
        assert not contour.arcs[1].clockwise

    def test_legacy_drops_zero_radius_arcs(self) -> None:
        contour = decode_arc_contour(["vo", "100", "50", "25", "0", "90", "0", "0", "0", "0", "0"])

        assert contour.face == "web_top"
        assert len(contour.arcs) == 1

    def test_angles_are_normalised(self) -> None:
        (arc,) = decode_arc_contour(["0 0 10 -90 450"]).arcs

        assert arc.start_angle == pytest.approx(270.0)
        assert arc.end_angle == pytest.approx(90.0)

    @pytest.mark.parametrize("fields", [[], ["1 2 3"]])
    def test_structural_failures(self, fields: list[str]) -> None:
        with pytest.raises(DecodeError):
            decode_arc_contour(fields)

    def test_polyline_and_length(self) -> None:
        (arc,) = decode_arc_contour(["0 0 10 0 90"]).arcs

        points = arc_polyline(arc, segments=8)
        assert len(points) == 9
        assert points[0].x == pytest.approx(10.0)
        assert points[-1].y == pytest.approx(10.0)
        assert arc_length(arc) == pytest.approx(5 * math.pi)


class TestPunch:
    def test_defaults(self, settings: DecoderSettings) -> None:
        punch = decode_punch(["100", "50"], settings=settings)

        assert punch.depth == pytest.approx(0.5)
        assert punch.diameter == pytest.approx(3.0)
        assert punch.angle == 0
        assert punch.work_plane == "E0"
        assert punch.tool_number is None

    def test_all_fields_with_clamped_angle(self, settings: DecoderSettings) -> None:
        punch = decode_punch(["100", "50", "1.5", "6", "120", "E2", "7"], settings=settings)

        assert punch.depth == pytest.approx(1.5)
        assert punch.diameter == pytest.approx(6.0)
        assert punch.angle == pytest.approx(90.0)
        assert punch.work_plane == "E2"
        assert punch.tool_number == 7

    def test_empty_optional_field_keeps_later_positions(self, settings: DecoderSettings) -> None:
        punch = decode_punch(["10", "20", "", "5.0", "0", "E1"], settings=settings)

        assert punch.depth == pytest.approx(0.5)
        assert punch.diameter == pytest.approx(5.0)
        assert punch.angle == 0
        assert punch.work_plane == "E1"

    def test_non_numeric_position(self, settings: DecoderSettings) -> None:
        with pytest.raises(DecodeError):
            decode_punch(["x", "50"], settings=settings)


class TestMarking:
    def test_standard_with_options(self, settings: DecoderSettings) -> None:
        marking = decode_marking(
            ["100", "50", "POS-12", "12", "45", "0.2", "E1", "stamp", "arial"], settings=settings
        )

        assert marking.text == "POS-12"
        assert marking.height == pytest.approx(12.0)
        assert marking.angle == pytest.approx(45.0)
        assert marking.depth == pytest.approx(0.2)
        assert marking.work_plane == "E1"
        assert marking.method == "stamp"
        assert marking.font == "arial"

    def test_standard_defaults(self, settings: DecoderSettings) -> None:
        marking = decode_marking(["1", "2", "A1"], settings=settings)

        assert marking.height == pytest.approx(10.0)
        assert marking.depth == pytest.approx(0.1)
        assert marking.method == "engrave"

    def test_legacy_sized_text(self, settings: DecoderSettings) -> None:
        marking = decode_marking(["v", "2.00u", "2.00", "0.00", "10rF1000"], settings=settings)

        assert marking.face == "web"
        assert (marking.x, marking.y) == (2.0, 2.0)
        assert marking.height == pytest.approx(10.0)
        assert marking.text == "F1000"

    def test_missing_text(self, settings: DecoderSettings) -> None:
        with pytest.raises(DecodeError):
            decode_marking(["1", "2", " "], settings=settings)
