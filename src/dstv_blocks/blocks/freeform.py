"""Free-form contour (UE) decoding."""
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Sequence

from dstv_blocks.config import DecoderSettings, load_decoder_settings
from dstv_blocks.features import (
    FREEFORM_CONTOUR,
    ContourPoint,
    FreeformContour,
    Point2D,
    ProfileContext,
)
from dstv_blocks.fields import is_work_plane, to_float
from dstv_blocks.geometry.contour import is_closed

from .base import compact_fields, require_fields

logger = logging.getLogger(__name__)

MIN_FIELDS = 4

SEGMENT_WORDS = {
    "LINE": "line",
    "L": "line",
    "ARC": "arc",
    "A": "arc",
    "BEZIER": "bezier",
    "B": "bezier",
    "SPLINE": "spline",
    "S": "spline",
}
CONTOUR_KINDS = ("outer", "inner", "feature")
FINISHING_KINDS = ("rough", "semi", "finish")
COMPENSATION_KINDS = ("left", "right", "none")

_SEGMENT_PARAM_RE = re.compile(
    r"^(C1X|C1Y|C2X|C2Y|CX|CY|R|B|T)([-+]?(?:\d+\.?\d*|\.\d+))$", re.IGNORECASE
)

# Parameter prefix to the segment kind it implies.
_PARAM_KINDS = {
    "R": "arc",
    "CX": "arc",
    "CY": "arc",
    "B": "arc",
    "T": "spline",
    "C1X": "bezier",
    "C1Y": "bezier",
    "C2X": "bezier",
    "C2Y": "bezier",
}


@dataclass(slots=True)
class _PointBuilder:
    x: float
    y: float
    segment_kind: str = "line"
    params: dict[str, float] = field(default_factory=dict)

    def apply(self, token: str) -> bool:
        word = SEGMENT_WORDS.get(token.upper())
        if word is not None:
            self.segment_kind = word
            return True
        match = _SEGMENT_PARAM_RE.match(token)
        if not match:
            return False
        key = match.group(1).upper()
        value = float(match.group(2))
        if key == "R" and value <= 0:
            return False
        self.params[key] = value
        self.segment_kind = _PARAM_KINDS[key]
        return True

    def _pair(self, x_key: str, y_key: str) -> Point2D | None:
        if x_key in self.params and y_key in self.params:
            return Point2D(self.params[x_key], self.params[y_key])
        return None

    def build(self) -> ContourPoint:
        controls = tuple(
            point
            for point in (self._pair("C1X", "C1Y"), self._pair("C2X", "C2Y"))
            if point is not None
        )
        return ContourPoint(
            x=self.x,
            y=self.y,
            segment_kind=self.segment_kind,
            radius=self.params.get("R"),
            center=self._pair("CX", "CY"),
            bulge=self.params.get("B"),
            control_points=controls,
            tension=self.params.get("T"),
        )


def _parse_points(fields: Sequence[str]) -> tuple[list[ContourPoint], int]:
    points: list[ContourPoint] = []
    index = 0
    while index < len(fields) - 1:
        x = to_float(fields[index])
        y = to_float(fields[index + 1])
        if x is None or y is None:
            break
        builder = _PointBuilder(x, y)
        index += 2
        while index < len(fields) and builder.apply(fields[index]):
            index += 1
        points.append(builder.build())
    return points, index


@dataclass(slots=True)
class _BlockOptions:
    work_plane: str | None = None
    contour_kind: str = "feature"
    finishing: str = "finish"
    tool_compensation: str = "none"
    tolerance: float | None = None
    feed_rate: float | None = None
    spindle_speed: float | None = None


def _parse_options(fields: Sequence[str]) -> _BlockOptions:
    options = _BlockOptions()
    for token in fields:
        upper = token.upper()
        lower = token.lower()
        if is_work_plane(upper):
            options.work_plane = upper
        elif lower in CONTOUR_KINDS:
            options.contour_kind = lower
        elif lower in FINISHING_KINDS:
            options.finishing = lower
        elif lower in COMPENSATION_KINDS:
            options.tool_compensation = lower
        else:
            value = to_float(token)
            if value is None:
                logger.debug("UE block: dropping unrecognized field %r", token)
            elif 0 < value < 1 and options.tolerance is None:
                options.tolerance = value
            elif 1 <= value <= 10000 and options.feed_rate is None:
                options.feed_rate = value
            elif value > 10000 and options.spindle_speed is None:
                options.spindle_speed = value
            else:
                logger.debug("UE block: dropping unmatched numeric field %r", token)
    return options


def segment_length(start: ContourPoint, end: ContourPoint) -> float:
    """Approximate the length of the segment ending at ``end``."""

    chord = math.hypot(end.x - start.x, end.y - start.y)
    if end.segment_kind == "arc":
        if end.radius:
            return end.radius * 2 * math.asin(min(1.0, chord / (2 * end.radius)))
        if end.bulge is not None:
            return chord * (1 + abs(end.bulge))
        return chord * 1.2
    if end.segment_kind == "bezier":
        return chord * 1.3
    if end.segment_kind == "spline":
        tension = end.tension if end.tension is not None else 0.5
        return chord * (1 + tension * 0.5)
    return chord


def contour_length(points: Sequence[ContourPoint]) -> float:
    return sum(segment_length(a, b) for a, b in zip(points, points[1:]))


def complex_segment_count(points: Sequence[ContourPoint]) -> int:
    return sum(1 for point in points if point.segment_kind in ("bezier", "spline"))


def complexity(points: Sequence[ContourPoint]) -> str:
    """Rate a contour as ``simple``, ``moderate`` or ``complex``."""

    curved = complex_segment_count(points)
    if len(points) > 50 or curved > len(points) / 2:
        return "complex"
    arcs = sum(1 for point in points if point.segment_kind == "arc")
    if len(points) > 10 or curved or arcs:
        return "moderate"
    return "simple"


def decode_freeform_contour(
    fields: Sequence[str],
    context: ProfileContext | None = None,
    settings: DecoderSettings | None = None,
) -> FreeformContour:
    """Decode a UE block into a :class:`FreeformContour`."""

    settings = settings or load_decoder_settings()
    tokens = compact_fields(fields)
    require_fields(FREEFORM_CONTOUR, tokens, MIN_FIELDS)

    points, end = _parse_points(tokens)
    options = _parse_options(tokens[end:])
    plain = [Point2D(point.x, point.y) for point in points]
    logger.debug("UE block: %d points, %d trailing fields", len(points), len(tokens) - end)

    return FreeformContour(
        points=tuple(points),
        closed=len(points) >= 3 and is_closed(plain, settings.closure_tolerance),
        contour_kind=options.contour_kind,
        work_plane=options.work_plane or settings.work_plane,
        finishing=options.finishing,
        tool_compensation=options.tool_compensation,
        tolerance=options.tolerance,
        feed_rate=options.feed_rate,
        spindle_speed=options.spindle_speed,
    )


__all__ = [
    "complex_segment_count",
    "complexity",
    "contour_length",
    "decode_freeform_contour",
    "segment_length",
]
