from dstv_blocks.config import DecoderSettings
from dstv_blocks.features import Cut, EndMarker, Hole, Marking, ProfileHeader, Punch
from dstv_blocks.validation import (
    validate_cut,
    validate_end,
    validate_feature,
    validate_header,
    validate_hole,
    validate_holes,
    validate_marking,
    validate_punch,
)


def _hole(x: float = 100.0, y: float = 50.0, **kwargs: object) -> Hole:
    values: dict[str, object] = {"diameter": 22.0, "face": "web", "face_code": "v", "work_plane": "E0"}
    values.update(kwargs)
    return Hole(x, y, **values)  # type: ignore[arg-type]


def _header(**kwargs: object) -> ProfileHeader:
    values: dict[str, object] = dict(
        order_number="1001",
        drawing_number="D-12",
        phase_number="1",
        piece_number="P1",
        steel_grade="S355",
        quantity=1,
        profile_name="HEA200",
        profile_kind="I_PROFILE",
        length=6000.0,
        height=190.0,
        width=200.0,
        web_thickness=6.5,
        flange_thickness=10.0,
        weight=42.3,
        painting_surface=1.1,
    )
    values.update(kwargs)
    return ProfileHeader(**values)  # type: ignore[arg-type]


class TestHoles:
    def test_through_hole_has_no_findings(self, settings: DecoderSettings) -> None:
        result = validate_hole(_hole(depth=0.0), settings)

        assert result.is_valid
        assert result.errors == ()
        assert result.warnings == ()

    def test_negative_depth_is_an_error(self, settings: DecoderSettings) -> None:
        result = validate_hole(_hole(depth=-1.0), settings)

        assert not result.is_valid
        assert any("negative" in error for error in result.errors)

    def test_angle_range(self, settings: DecoderSettings) -> None:
        steep = validate_hole(_hole(angle=60.0), settings)
        invalid = validate_hole(_hole(angle=95.0), settings)

        assert steep.is_valid and steep.warnings
        assert not invalid.is_valid

    def test_duplicates_and_close_holes(self, settings: DecoderSettings) -> None:
        duplicate = validate_holes([_hole(), _hole()], settings)
        close = validate_holes([_hole(), _hole(x=120.0)], settings)
        other_face = validate_holes([_hole(), _hole(face="top_flange", face_code="o")], settings)

        assert any("duplicates" in error for error in duplicate.errors)
        assert close.is_valid
        assert any("too close" in warning for warning in close.warnings)
        assert other_face.errors == () and other_face.warnings == ()

    def test_kind_specific_rules(self, settings: DecoderSettings) -> None:
        assert not validate_hole(_hole(hole_kind="slotted"), settings).is_valid
        assert validate_hole(_hole(hole_kind="slotted", slot_length=40.0), settings).is_valid
        assert not validate_hole(_hole(hole_kind="rectangular", width=10.0), settings).is_valid
        assert validate_hole(_hole(diameter=250.0), settings).warnings

    def test_feature_list_dispatches_to_hole_block(self, settings: DecoderSettings) -> None:
        result = validate_feature([_hole(), _hole(x=400.0)], settings)

        assert result.is_valid
        assert len(result.data) == 2


class TestCutPunchMarking:
    def test_cut_angle_outside_range(self, settings: DecoderSettings) -> None:
        cut = Cut(0, 0, 100, 40, 200.0, "rectangular")

        assert not validate_cut(cut, settings).is_valid

    def test_circular_cut_with_unequal_sides_warns(self, settings: DecoderSettings) -> None:
        result = validate_cut(Cut(0, 0, 100, 40, 0.0, "circular"), settings)

        assert result.is_valid
        assert result.warnings

    def test_punch(self, settings: DecoderSettings) -> None:
        assert validate_punch(Punch(0, 0, 0.5, 3.0), settings).is_valid
        assert not validate_punch(Punch(0, 0, 0.0, 3.0), settings).is_valid
        assert validate_punch(Punch(0, 0, 0.5, 6.0, tool_number=1200), settings).warnings

    def test_marking(self, settings: DecoderSettings) -> None:
        assert validate_marking(Marking(0, 0, "A1", 10.0, 0.0, 0.1), settings).is_valid
        assert not validate_marking(Marking(0, 0, "", 10.0, 0.0, 0.1), settings).is_valid
        assert not validate_marking(Marking(0, 0, "A1", -1.0, 0.0, 0.1), settings).is_valid
        accented = validate_marking(Marking(0, 0, "Pièce", 10.0, 0.0, 0.1), settings)
        assert any("non-ASCII" in warning for warning in accented.warnings)


class TestRecords:
    def test_header_is_valid(self, settings: DecoderSettings) -> None:
        assert validate_header(_header(), settings).is_valid

    def test_header_errors(self, settings: DecoderSettings) -> None:
        result = validate_header(
            _header(order_number="", drawing_number="", piece_number="", quantity=0, length=-1.0),
            settings,
        )

        assert len(result.errors) == 3

    def test_unknown_profile_kind_warns(self, settings: DecoderSettings) -> None:
        result = validate_header(_header(profile_kind="UNKNOWN"), settings)

        assert result.is_valid
        assert result.warnings

    def test_end_marker_counts(self, settings: DecoderSettings) -> None:
        assert validate_end(EndMarker(), settings).is_valid
        assert not validate_end(EndMarker(record_count=-1), settings).is_valid
