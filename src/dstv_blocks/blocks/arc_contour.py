"""Arc contour (KA) decoding."""
from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np

from dstv_blocks.config import DecoderSettings
from dstv_blocks.features import ARC_CONTOUR, Arc, ArcContour, Point2D, ProfileContext
from dstv_blocks.fields import COMPOUND_FACE_NAMES, FACE_NAMES, face_name

from .base import DecodeError, compact_fields, require_number

logger = logging.getLogger(__name__)

SINGLE_LINE = "single_line"
MULTI_LINE = "multi_line"
LEGACY = "legacy"

ARC_STRIDE = 5
ARC_FACE_CODES = frozenset(FACE_NAMES) | frozenset(COMPOUND_FACE_NAMES)


def classify_arc_format(fields: Sequence[str]) -> str:
    """Return the arc block encoding.

    A leading face code marks the legacy layout. Several fields that each
    hold a full arc line are multi-line. Anything else is read as one
    flattened run of numbers.
    """

    if fields and fields[0].strip().lower() in ARC_FACE_CODES:
        return LEGACY
    if len(fields) > 1 and all(len(field.split()) >= ARC_STRIDE for field in fields):
        return MULTI_LINE
    return SINGLE_LINE


def normalize_angle(angle: float) -> float:
    return angle % 360.0


def _number(token: str, name: str) -> float:
    if token == "-":
        return 0.0
    return require_number(ARC_CONTOUR, token, name)


def _arc_from(values: Sequence[str]) -> Arc:
    start = normalize_angle(_number(values[3], "start angle"))
    end = normalize_angle(_number(values[4], "end angle"))
    return Arc(
        center_x=_number(values[0], "center x"),
        center_y=_number(values[1], "center y"),
        radius=_number(values[2], "radius"),
        start_angle=start,
        end_angle=end,
        clockwise=not end < start,
    )


def _split(fields: Sequence[str]) -> list[str]:
    return [part for field in fields for part in field.split()]


def _arcs_in(tokens: Sequence[str]) -> list[Arc]:
    return [
        _arc_from(tokens[start : start + ARC_STRIDE])
        for start in range(0, len(tokens) - ARC_STRIDE + 1, ARC_STRIDE)
    ]


def decode_arc_contour(
    fields: Sequence[str],
    context: ProfileContext | None = None,
    settings: DecoderSettings | None = None,
) -> ArcContour:
    """Decode a KA block into an :class:`ArcContour`."""

    tokens = compact_fields(fields)
    if not tokens:
        raise DecodeError(ARC_CONTOUR, "requires at least one arc definition")

    layout = classify_arc_format(tokens)
    face: str | None = None
    if layout == LEGACY:
        face = face_name(tokens[0])
        arcs = [arc for arc in _arcs_in(_split(tokens[1:])) if arc.radius > 0]
    elif layout == MULTI_LINE:
        arcs = [_arc_from(line.split()) for line in tokens]
    else:
        flat = _split(tokens)
        if len(flat) < ARC_STRIDE:
            raise DecodeError(
                ARC_CONTOUR, f"single-line layout requires at least {ARC_STRIDE} values, got {len(flat)}"
            )
        arcs = _arcs_in(flat)

    logger.debug("KA block: %s layout, %d arcs, face=%s", layout, len(arcs), face)
    return ArcContour(arcs=tuple(arcs), face=face)


def arc_polyline(arc: Arc, segments: int = 16) -> tuple[Point2D, ...]:
    """Sample ``arc`` into ``segments + 1`` points, counter-clockwise from the start angle."""

    sweep = arc.end_angle - arc.start_angle
    if sweep <= 0:
        sweep += 360.0
    angles = np.radians(arc.start_angle + np.linspace(0.0, sweep, segments + 1))
    xs = arc.center_x + arc.radius * np.cos(angles)
    ys = arc.center_y + arc.radius * np.sin(angles)
    return tuple(Point2D(float(x), float(y)) for x, y in zip(xs, ys))


def arc_length(arc: Arc) -> float:
    sweep = arc.end_angle - arc.start_angle
    if sweep <= 0:
        sweep += 360.0
    return math.radians(sweep) * arc.radius


__all__ = [
    "LEGACY",
    "MULTI_LINE",
    "SINGLE_LINE",
    "arc_length",
    "arc_polyline",
    "classify_arc_format",
    "decode_arc_contour",
    "normalize_angle",
]
