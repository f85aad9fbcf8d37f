from types import SimpleNamespace

import pytest

from dstv_blocks.features import (
    Cut,
    EndMarker,
    FreeformContour,
    Hole,
    InnerContour,
    Marking,
    OuterContour,
    Point2D,
    Punch,
)
from dstv_blocks.priority import FeaturePriorityManager, PriorityClass


@pytest.fixture
def manager() -> FeaturePriorityManager:
    return FeaturePriorityManager()


def _contour() -> OuterContour:
    points = (Point2D(0, 0), Point2D(10, 0), Point2D(10, 5), Point2D(0, 0))
    return OuterContour(points=points, closed=True)


def _marking() -> Marking:
    return Marking(0, 0, "A1", 10.0, 0.0, 0.1)


def _hole(x: float = 0.0, face_code: str = "v") -> Hole:
    return Hole(x, 0.0, 22.0, face_code=face_code)


def test_priority_by_feature_type(manager: FeaturePriorityManager) -> None:
    assert manager.priority(_contour()) == PriorityClass.CONTOUR
    assert manager.priority(FreeformContour(points=(), closed=False)) == PriorityClass.CONTOUR
    assert manager.priority(Cut(0, 0, 10, 10, 0.0, "circular")) == PriorityClass.STRAIGHT_CUT
    assert manager.priority(Cut(0, 0, 10, 10, 0.0, "beveled")) == PriorityClass.BEVEL_CUT
    assert manager.priority(Cut(0, 0, 10, 10, 30.0, "rectangular")) == PriorityClass.ANGLE_CUT
    assert manager.priority(InnerContour((), "irregular", 10.0, False, False)) == PriorityClass.STRAIGHT_CUT
    assert manager.priority(_hole()) == PriorityClass.HOLE
    assert manager.priority(Hole(0, 0, 10, hole_kind="slotted", slot_length=20)) == PriorityClass.SLOT
    assert manager.priority(Punch(0, 0, 0.5, 3.0)) == PriorityClass.MARKING
    assert manager.priority(_marking()) == PriorityClass.MARKING
    assert manager.priority(EndMarker()) == PriorityClass.DEFAULT


@pytest.mark.parametrize(
    ("feature_type", "expected"),
    [
        ("pocket_contour", PriorityClass.CONTOUR),
        ("notched_cut", PriorityClass.CUT_WITH_NOTCHES),
        ("deep_drill", PriorityClass.HOLE),
        ("etched_text_line", PriorityClass.MARKING),
        ("weld", PriorityClass.DEFAULT),
    ],
)
def test_pattern_fallback(manager: FeaturePriorityManager, feature_type: str, expected: int) -> None:
    assert manager.priority(SimpleNamespace(feature_type=feature_type)) == expected


def test_sort_by_priority(manager: FeaturePriorityManager) -> None:
    marking, hole, contour = _marking(), _hole(), _contour()

    ordered = manager.sort_by_priority([marking, hole, contour])

    assert ordered == [contour, hole, marking]


def test_sort_is_stable_and_returns_new_list(manager: FeaturePriorityManager) -> None:
    first, second = _hole(1.0), _hole(2.0)
    cut = Cut(0, 0, 10, 10, 0.0, "circular")
    features = [first, cut, second]

    ordered = manager.sort_by_priority(features)

    assert ordered == [cut, first, second]
    assert features == [first, cut, second]


def test_group_by_priority_keys_descend(manager: FeaturePriorityManager) -> None:
    groups = manager.group_by_priority([_marking(), _hole(), _contour(), _hole(5.0)])

    assert list(groups) == [1000, 500, 100]
    assert len(groups[500]) == 2


def test_optimize_order_clusters_holes_by_face(manager: FeaturePriorityManager) -> None:
    web_a, top, web_b = _hole(1.0, "v"), _hole(2.0, "o"), _hole(3.0, "v")
    contour = _contour()

    ordered = manager.optimize_order([web_a, top, contour, web_b])

    assert ordered == [contour, web_a, web_b, top]


def test_validate_order(manager: FeaturePriorityManager) -> None:
    assert manager.validate_order([_contour(), _hole(), _marking()]).warnings == ()

    result = manager.validate_order([_marking(), _contour()])

    assert result.is_valid
    assert len(result.warnings) == 1


def test_marking_override_above_holes_is_an_error() -> None:
    manager = FeaturePriorityManager({"SI": 600})

    result = manager.validate_order([_marking()])

    assert manager.priority(_marking()) == 600
    assert not result.is_valid


def test_priority_info(manager: FeaturePriorityManager) -> None:
    hole = manager.priority_info(_hole())
    marking = manager.priority_info(_marking())
    contour = manager.priority_info(_contour())

    assert (hole.requires_csg, hole.batchable, hole.block_kind) == (True, True, "BO")
    assert (marking.requires_csg, marking.batchable) == (False, True)
    assert (contour.requires_csg, contour.batchable) == (True, False)
    assert contour.priority_class == "CONTOUR"


def test_report_lists_counts_and_findings(manager: FeaturePriorityManager) -> None:
    report = manager.report([_marking(), _hole(), _contour()])

    assert report.startswith("Feature priority report (3 features)")
    assert "|CONTOUR" in report
    assert "+--------------------+" in report
    assert "WARNINGS:" in report
    assert "ERRORS:" not in report
