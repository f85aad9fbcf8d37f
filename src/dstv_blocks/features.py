"""Typed records produced by the block decoders."""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Iterable, Union

# Block kind tags as they appear in the exchange format.
HEADER = "ST"
END = "EN"
OUTER_CONTOUR = "AK"
INNER_CONTOUR = "IK"
CUT = "SC"
ARC_CONTOUR = "KA"
FREEFORM_CONTOUR = "UE"
HOLE = "BO"
PUNCH = "PU"
MARKING = "SI"

BLOCK_KINDS = (
    HEADER,
    END,
    OUTER_CONTOUR,
    INNER_CONTOUR,
    CUT,
    ARC_CONTOUR,
    FREEFORM_CONTOUR,
    HOLE,
    PUNCH,
    MARKING,
)


@dataclass(frozen=True)
class Point2D:
    x: float
    y: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned extent of a point set."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def area(self) -> float:
        return self.width * self.height

    @classmethod
    def from_points(cls, points: Iterable[Point2D]) -> "Bounds":
        xs: list[float] = []
        ys: list[float] = []
        for point in points:
            xs.append(point.x)
            ys.append(point.y)
        if not xs:
            return cls(0.0, 0.0, 0.0, 0.0)
        return cls(min(xs), max(xs), min(ys), max(ys))


@dataclass(frozen=True)
class ProfileContext:
    """Profile dimensions used for default inference while decoding."""

    length: float
    height: float
    width: float
    web_thickness: float | None = None
    flange_thickness: float | None = None


@dataclass(frozen=True)
class CutRegion:
    """Material removed from the reference rectangle of an outer contour."""

    label: str
    points: tuple[Point2D, ...]
    bounds: Bounds
    is_transverse: bool
    depth: float


@dataclass(frozen=True)
class OuterContour:
    block_kind: ClassVar[str] = OUTER_CONTOUR

    points: tuple[Point2D, ...]
    closed: bool
    face: str | None = None
    work_plane: str | None = None
    cut_regions: tuple[CutRegion, ...] = ()
    bevel_angles: tuple[float, ...] = ()

    @property
    def feature_type(self) -> str:
        return "contour"


@dataclass(frozen=True)
class InnerContour:
    block_kind: ClassVar[str] = INNER_CONTOUR

    points: tuple[Point2D, ...]
    contour_kind: str
    depth: float
    is_transverse: bool
    closed: bool
    face: str | None = None

    @property
    def feature_type(self) -> str:
        return "cutout"


@dataclass(frozen=True)
class Cut:
    block_kind: ClassVar[str] = CUT

    x: float
    y: float
    width: float
    height: float
    angle: float
    cut_kind: str
    radius: float | None = None
    depth: float | None = None
    face: str | None = None
    work_plane: str | None = None
    tool_number: int | None = None
    feed_rate: float | None = None

    @property
    def feature_type(self) -> str:
        if self.cut_kind == "beveled":
            return "bevel_cut"
        if self.cut_kind == "angular" or self.angle:
            return "angle_cut"
        return "straight_cut"


@dataclass(frozen=True)
class Arc:
    center_x: float
    center_y: float
    radius: float
    start_angle: float
    end_angle: float
    clockwise: bool


@dataclass(frozen=True)
class ArcContour:
    block_kind: ClassVar[str] = ARC_CONTOUR

    arcs: tuple[Arc, ...]
    face: str | None = None

    @property
    def feature_type(self) -> str:
        return "contour"


@dataclass(frozen=True)
class ContourPoint:
    x: float
    y: float
    segment_kind: str = "line"
    radius: float | None = None
    center: Point2D | None = None
    bulge: float | None = None
    control_points: tuple[Point2D, ...] = ()
    tension: float | None = None


@dataclass(frozen=True)
class FreeformContour:
    block_kind: ClassVar[str] = FREEFORM_CONTOUR

    points: tuple[ContourPoint, ...]
    closed: bool
    contour_kind: str = "feature"
    work_plane: str | None = None
    finishing: str = "finish"
    tool_compensation: str = "none"
    tolerance: float | None = None
    feed_rate: float | None = None
    spindle_speed: float | None = None

    @property
    def feature_type(self) -> str:
        return "unrestricted_contour"


@dataclass(frozen=True)
class Hole:
    block_kind: ClassVar[str] = HOLE

    x: float
    y: float
    diameter: float
    depth: float = 0.0
    angle: float | None = None
    face: str | None = None
    face_code: str | None = None
    work_plane: str | None = None
    hole_kind: str = "round"
    width: float | None = None
    height: float | None = None
    slot_length: float | None = None
    tolerance: float | None = None

    @property
    def is_through(self) -> bool:
        return self.depth == 0

    @property
    def feature_type(self) -> str:
        return "slot" if self.hole_kind == "slotted" else "hole"


@dataclass(frozen=True)
class Punch:
    block_kind: ClassVar[str] = PUNCH

    x: float
    y: float
    depth: float
    diameter: float
    angle: float = 0.0
    work_plane: str | None = None
    tool_number: int | None = None

    @property
    def feature_type(self) -> str:
        return "punch"


@dataclass(frozen=True)
class Marking:
    block_kind: ClassVar[str] = MARKING

    x: float
    y: float
    text: str
    height: float
    angle: float
    depth: float
    method: str = "engrave"
    face: str | None = None
    work_plane: str | None = None
    font: str | None = None

    @property
    def feature_type(self) -> str:
        return "marking"


@dataclass(frozen=True)
class ProfileHeader:
    block_kind: ClassVar[str] = HEADER

    order_number: str
    drawing_number: str
    phase_number: str
    piece_number: str
    steel_grade: str
    quantity: int
    profile_name: str
    profile_kind: str
    length: float
    height: float
    width: float
    web_thickness: float
    flange_thickness: float
    weight: float
    painting_surface: float
    radius: float | None = None
    thickness: float | None = None
    wall_thickness: float | None = None
    layout: str = "standard"
    created_date: str | None = None
    created_time: str | None = None

    @property
    def feature_type(self) -> str:
        return "header"

    def context(self) -> ProfileContext:
        """Return the profile context other decoders use for default inference."""

        return ProfileContext(
            length=self.length,
            height=self.height,
            width=self.width,
            web_thickness=self.web_thickness or self.wall_thickness or self.thickness or None,
            flange_thickness=self.flange_thickness or self.wall_thickness or self.thickness or None,
        )


@dataclass(frozen=True)
class EndMarker:
    block_kind: ClassVar[str] = END

    processing_time: float | None = None
    checksum: str | None = None
    record_count: int | None = None
    error_count: int | None = None
    warning_count: int | None = None

    @property
    def feature_type(self) -> str:
        return "end"


Feature = Union[
    OuterContour,
    InnerContour,
    Cut,
    ArcContour,
    FreeformContour,
    Hole,
    Punch,
    Marking,
    ProfileHeader,
    EndMarker,
]


__all__ = [
    "ARC_CONTOUR",
    "Arc",
    "ArcContour",
    "BLOCK_KINDS",
    "Bounds",
    "CUT",
    "ContourPoint",
    "Cut",
    "CutRegion",
    "END",
    "EndMarker",
    "FREEFORM_CONTOUR",
    "Feature",
    "FreeformContour",
    "HEADER",
    "HOLE",
    "Hole",
    "INNER_CONTOUR",
    "InnerContour",
    "MARKING",
    "Marking",
    "OUTER_CONTOUR",
    "OuterContour",
    "PUNCH",
    "Point2D",
    "ProfileContext",
    "ProfileHeader",
    "Punch",
]
