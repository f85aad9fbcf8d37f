from dataclasses import replace

import pytest

from dstv_blocks.blocks import DecodeError, decode_inner_contour, decode_outer_contour
from dstv_blocks.blocks.inner_contour import cutout_depth
from dstv_blocks.blocks.outer_contour import GROUPED, MATRIX, bevel_angles, classify_layout
from dstv_blocks.config import DecoderSettings
from dstv_blocks.features import Bounds, Point2D, ProfileContext
from dstv_blocks.geometry.cut_regions import derive_cut_regions

RECTANGLE_FIELDS = ["0", "0", "10", "0", "10", "5", "0", "5", "0", "0"]
NOTCH_EXTENSION = [
    ("0", "0"),
    ("900", "0"),
    ("900", "50"),
    ("1000", "50"),
    ("1000", "150"),
    ("900", "150"),
    ("900", "200"),
    ("0", "200"),
    ("0", "0"),
]


def _matrix_line(x: str, y: str) -> list[str]:
    return [x, y] + ["0.00"] * 5


class TestOuterContour:
    def test_standard_pairs(self, settings: DecoderSettings) -> None:
        contour = decode_outer_contour(RECTANGLE_FIELDS, settings=settings)

        assert len(contour.points) == 5
        assert contour.closed
        assert contour.work_plane == "E0"
        assert contour.cut_regions == ()
        assert contour.feature_type == "contour"

    def test_legacy_grouped_layout(self, settings: DecoderSettings) -> None:
        fields = []
        for x, y in [("0", "0"), ("100", "0"), ("100", "50"), ("0", "50"), ("0", "0")]:
            fields.extend(["v", x, y, "0"])

        assert classify_layout(fields) == GROUPED
        contour = decode_outer_contour(fields, settings=settings)

        assert contour.face == "web"
        assert [p.as_tuple() for p in contour.points][:3] == [(0.0, 0.0), (100.0, 0.0), (100.0, 50.0)]
        assert contour.closed

    def test_legacy_matrix_layout(self, settings: DecoderSettings) -> None:
        fields = ["o"]
        for x, y in [("0.00", "0.00"), ("100.00", "0.00"), ("100.00", "50.00"), ("0.00", "50.00")]:
            fields.extend(_matrix_line(x, y))

        assert classify_layout(fields) == MATRIX
        contour = decode_outer_contour(fields, settings=settings)

        assert contour.face == "top_flange"
        assert [p.as_tuple() for p in contour.points] == [(0.0, 0.0), (100.0, 0.0), (100.0, 50.0), (0.0, 50.0)]
        assert not contour.closed

    def test_layout_rules_are_pluggable(self) -> None:
        fields = ["v", "1", "2", "3"]

        assert classify_layout(fields, rules=(lambda _fields: MATRIX,)) == MATRIX
        assert classify_layout(fields, rules=()) == GROUPED

    def test_bevel_angles(self) -> None:
        assert bevel_angles(["10", "-45", "-5", "-90", "x"]) == (-45.0,)

    def test_cut_regions_only_when_enabled(self, settings: DecoderSettings) -> None:
        fields = ["100", "0", "900", "0", "900", "200", "100", "200", "100", "0"]
        context = ProfileContext(length=1000.0, height=200.0, width=100.0)

        assert decode_outer_contour(fields, context, settings).cut_regions == ()

        enabled = replace(settings, derive_cut_regions=True)
        regions = decode_outer_contour(fields, context, enabled).cut_regions

        assert [region.label for region in regions] == ["start", "end"]
        assert regions[0].bounds == Bounds(0.0, 100.0, 0.0, 200.0)
        assert regions[1].bounds == Bounds(900.0, 1000.0, 0.0, 200.0)
        assert all(region.is_transverse for region in regions)
        assert regions[0].depth == pytest.approx(8.0 * 1.2)

    def test_notch_extension_yields_high_and_low_cuts(self, settings: DecoderSettings) -> None:
        fields = [value for pair in NOTCH_EXTENSION for value in pair]
        context = ProfileContext(length=1000.0, height=200.0, width=100.0)
        enabled = replace(settings, derive_cut_regions=True)

        regions = decode_outer_contour(fields, context, enabled).cut_regions

        assert [region.label for region in regions] == ["high", "low"]
        assert regions[0].bounds == Bounds(900.0, 1000.0, 0.0, 50.0)
        assert regions[1].bounds == Bounds(900.0, 1000.0, 150.0, 200.0)
        assert all(region.is_transverse for region in regions)

    def test_notch_extension_replaces_end_cut(self, settings: DecoderSettings) -> None:
        points = [Point2D(float(x), float(y)) for x, y in NOTCH_EXTENSION]
        context = ProfileContext(length=1200.0, height=200.0, width=100.0)

        regions = derive_cut_regions(points, "web", context, settings)

        assert [region.label for region in regions] == ["high", "low"]
        assert regions[0].depth == pytest.approx(8.0 * 1.2)
        assert not regions[0].is_transverse

    def test_lowercase_work_plane(self, settings: DecoderSettings) -> None:
        contour = decode_outer_contour(RECTANGLE_FIELDS + ["e3"], settings=settings)

        assert contour.work_plane == "E3"
        assert len(contour.points) == 5

    def test_too_few_fields(self, settings: DecoderSettings) -> None:
        with pytest.raises(DecodeError):
            decode_outer_contour(["0", "0", "1"], settings=settings)


class TestInnerContour:
    def test_small_rectangle_uses_default_depth(self, settings: DecoderSettings) -> None:
        contour = decode_inner_contour(
            ["10", "10", "40", "10", "40", "30", "10", "30", "10", "10"], settings=settings
        )

        assert contour.contour_kind == "rectangular"
        assert contour.depth == pytest.approx(10.0)
        assert not contour.is_transverse
        assert contour.closed
        assert contour.feature_type == "cutout"

    def test_explicit_depth_wins(self, settings: DecoderSettings) -> None:
        contour = decode_inner_contour(
            ["10", "10", "40", "10", "40", "30", "10", "30", "10", "10", "15"], settings=settings
        )

        assert contour.depth == pytest.approx(15.0)

    def test_large_opening_is_transverse(self, settings: DecoderSettings) -> None:
        contour = decode_inner_contour(
            ["0", "0", "200", "0", "200", "100", "0", "100", "0", "0"], settings=settings
        )

        assert contour.is_transverse
        assert contour.depth == -1

    def test_large_rectangle_depth(self, settings: DecoderSettings) -> None:
        contour = decode_inner_contour(
            ["0", "0", "60", "0", "60", "50", "0", "50", "0", "0"], settings=settings
        )

        assert contour.depth == pytest.approx(20.0)

    def test_legacy_entries(self, settings: DecoderSettings) -> None:
        contour = decode_inner_contour(
            ["v0 0", "v50 0", "v50 20", "v0 20", "v0 0", "E0"], settings=settings
        )

        assert contour.face == "web"
        assert len(contour.points) == 5
        assert contour.closed

    def test_round_cutout_depth(self) -> None:
        assert cutout_depth("circular", Bounds(0, 40, 0, 40), None, 10.0) == (15.0, False)
        assert cutout_depth("oval", Bounds(0, 60, 0, 30), 8.0, 10.0) == (8.0, False)
