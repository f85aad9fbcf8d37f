import pytest

from dstv_blocks.blocks import DecodeError, decode_hole, decode_holes
from dstv_blocks.blocks.hole import standard_stride
from dstv_blocks.config import DecoderSettings


def test_legacy_separated_hole(settings: DecoderSettings) -> None:
    hole = decode_hole(["v", "1857.15", "163.20", "22.00", "0.00"], settings=settings)

    assert hole.x == pytest.approx(1857.15)
    assert hole.y == pytest.approx(163.20)
    assert hole.diameter == pytest.approx(22.0)
    assert hole.depth == 0
    assert hole.is_through
    assert hole.face == "web"
    assert hole.face_code == "v"


def test_legacy_and_standard_encodings_agree(settings: DecoderSettings) -> None:
    legacy = decode_hole(["v", "1857.15", "163.20", "22.00", "0.00"], settings=settings)
    standard = decode_hole(["1857.15", "163.20", "22.00", "0.00"], settings=settings)

    for name in ("x", "y", "diameter", "depth", "face", "face_code"):
        assert getattr(legacy, name) == getattr(standard, name)
    assert standard.work_plane == "E0"


def test_condensed_legacy_entry_strips_suffix(settings: DecoderSettings) -> None:
    hole = decode_hole(["v 1857.15u 163.20 22.00 0.00"], settings=settings)

    assert hole.x == pytest.approx(1857.15)
    assert hole.diameter == pytest.approx(22.0)
    assert hole.hole_kind == "round"


def test_condensed_legacy_slot_marker(settings: DecoderSettings) -> None:
    hole = decode_hole(["o 100 50 18 0 l 40"], settings=settings)

    assert hole.hole_kind == "slotted"
    assert hole.slot_length == pytest.approx(40.0)
    assert hole.face == "top_flange"
    assert hole.feature_type == "slot"


def test_block_with_several_standard_holes(settings: DecoderSettings) -> None:
    holes = decode_holes(["100", "50", "22", "0", "200", "50", "22", "0"], settings=settings)

    assert [hole.x for hole in holes] == [100.0, 200.0]
    assert all(hole.diameter == 22.0 for hole in holes)


def test_work_plane_tokens_terminate_groups(settings: DecoderSettings) -> None:
    holes = decode_holes(["100", "50", "22", "10", "E1", "200", "50", "18", "E2"], settings=settings)

    assert len(holes) == 2
    assert holes[0].depth == pytest.approx(10.0)
    assert holes[0].work_plane == "E1"
    assert holes[1].depth == 0
    assert holes[1].work_plane == "E2"


@pytest.mark.parametrize(
    ("count", "stride"),
    [(3, 3), (5, 5), (8, 4), (10, 5), (9, 3), (7, 4)],
)
def test_standard_stride(count: int, stride: int) -> None:
    assert standard_stride(["1"] * count) == stride


def test_too_few_fields_is_a_decode_error(settings: DecoderSettings) -> None:
    with pytest.raises(DecodeError) as excinfo:
        decode_holes(["1", "2"], settings=settings)

    assert excinfo.value.kind == "BO"


def test_block_without_numeric_hole_is_a_decode_error(settings: DecoderSettings) -> None:
    with pytest.raises(DecodeError):
        decode_holes(["a", "b", "c"], settings=settings)


def test_empty_depth_field_keeps_angle_in_place(settings: DecoderSettings) -> None:
    hole = decode_hole(["100", "50", "22", "", "45"], settings=settings)

    assert hole.depth == 0
    assert hole.is_through
    assert hole.angle == pytest.approx(45.0)


def test_lowercase_work_plane_is_recognised(settings: DecoderSettings) -> None:
    holes = decode_holes(["100", "50", "22", "10", "e1", "200", "50", "18", "e2"], settings=settings)

    assert [hole.work_plane for hole in holes] == ["E1", "E2"]
    assert holes[0].depth == pytest.approx(10.0)
