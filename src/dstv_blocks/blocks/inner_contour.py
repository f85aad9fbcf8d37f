"""Inner contour (IK) decoding."""
from __future__ import annotations

import logging
from typing import Sequence

from dstv_blocks.config import DecoderSettings, load_decoder_settings
from dstv_blocks.features import INNER_CONTOUR, Bounds, InnerContour, Point2D, ProfileContext
from dstv_blocks.fields import extract_numbers, face_letter, face_name, has_face_prefix, to_float
from dstv_blocks.geometry.contour import CIRCULAR, OVAL, RECTANGULAR, classify_shape, is_closed

from .base import clean_fields, require_fields

logger = logging.getLogger(__name__)

MIN_FIELDS = 6
THROUGH_DEPTH = -1.0
TRANSVERSE_AREA = 10000.0
LARGE_RECTANGLE_AREA = 2500.0
ROUND_CUTOUT_DEPTH = 15.0
LARGE_RECTANGLE_DEPTH = 20.0
MAX_EXPLICIT_DEPTH = 100.0


def is_legacy(fields: Sequence[str]) -> bool:
    return any(has_face_prefix(token) for token in fields)


def _parse_legacy(fields: Sequence[str]) -> tuple[list[Point2D], str | None, float | None]:
    points: list[Point2D] = []
    face: str | None = None
    depth: float | None = None
    for token in fields:
        if not has_face_prefix(token):
            continue
        face = face_name(face_letter(token))
        numbers = extract_numbers(token[1:])
        if len(numbers) >= 2:
            points.append(Point2D(numbers[0], numbers[1]))
            if len(numbers) > 2:
                depth = numbers[2]
    return points, face, depth


def _parse_standard(fields: Sequence[str]) -> tuple[list[Point2D], float | None]:
    points: list[Point2D] = []
    consumed = 0
    for index in range(0, len(fields) - 1, 2):
        x = to_float(fields[index])
        y = to_float(fields[index + 1])
        if x is None or y is None:
            break
        points.append(Point2D(x, y))
        consumed = index + 2

    depth: float | None = None
    for token in fields[consumed:]:
        value = to_float(token)
        if value is not None and 0 < value < MAX_EXPLICIT_DEPTH:
            depth = value
            break
    return points, depth


def cutout_depth(shape: str, box: Bounds, explicit: float | None, fallback: float) -> tuple[float, bool]:
    """Return ``(depth, is_transverse)`` for a cutout of ``shape`` spanning ``box``.

    Openings larger than 100x100 go through the material. Otherwise an explicit
    depth wins, then a shape-based default.
    """

    area = box.area
    if area > TRANSVERSE_AREA:
        return THROUGH_DEPTH, True
    if explicit is not None:
        return explicit, False
    if shape in (CIRCULAR, OVAL):
        return ROUND_CUTOUT_DEPTH, False
    if shape == RECTANGULAR and area > LARGE_RECTANGLE_AREA:
        return LARGE_RECTANGLE_DEPTH, False
    return fallback, False


def decode_inner_contour(
    fields: Sequence[str],
    context: ProfileContext | None = None,
    settings: DecoderSettings | None = None,
) -> InnerContour:
    """Decode an IK block into an :class:`InnerContour`."""

    settings = settings or load_decoder_settings()
    tokens = clean_fields(fields)
    require_fields(INNER_CONTOUR, tokens, MIN_FIELDS)

    face: str | None = None
    if is_legacy(tokens):
        points, face, explicit = _parse_legacy(tokens)
    else:
        points, explicit = _parse_standard(tokens)

    shape = classify_shape(points, settings.axis_tolerance)
    depth, transverse = cutout_depth(
        shape, Bounds.from_points(points), explicit, settings.inner_contour_depth
    )
    logger.debug("IK block: %s cutout, %d points, depth=%s", shape, len(points), depth)

    return InnerContour(
        points=tuple(points),
        contour_kind=shape,
        depth=depth,
        is_transverse=transverse,
        closed=len(points) >= 3 and is_closed(points, settings.closure_tolerance),
        face=face,
    )


__all__ = ["cutout_depth", "decode_inner_contour", "is_legacy"]
