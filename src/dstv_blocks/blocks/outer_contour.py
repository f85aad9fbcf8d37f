"""Outer contour (AK) decoding."""
from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from dstv_blocks.config import DecoderSettings, load_decoder_settings
from dstv_blocks.features import OUTER_CONTOUR, CutRegion, OuterContour, Point2D, ProfileContext
from dstv_blocks.fields import (
    DEFAULT_WORK_PLANE,
    face_name,
    is_face_code,
    is_work_plane,
    parse_number,
    to_float,
)
from dstv_blocks.geometry.contour import is_closed
from dstv_blocks.geometry.cut_regions import derive_cut_regions

from .base import LEGACY, classify_encoding, clean_fields, require_fields

logger = logging.getLogger(__name__)

MIN_FIELDS = 4
GROUPED = "grouped"
MATRIX = "matrix"
GROUPED_STRIDE = 4
MATRIX_STRIDE = 7
BEVEL_RANGE = (-85.0, -10.0)

LayoutRule = Callable[[Sequence[str]], Optional[str]]


def _face_field_count(fields: Sequence[str]) -> int:
    return sum(1 for token in fields if is_face_code(token))


def _zero_heavy_rule(fields: Sequence[str]) -> str | None:
    """Mostly ``0.00`` padding with few face letters means one face per 7-value line."""

    zeros = sum(1 for token in fields if token == "0.00")
    if zeros > len(fields) * 0.5 and _face_field_count(fields) <= 4:
        return MATRIX
    return None


def _face_ratio_rule(fields: Sequence[str]) -> str | None:
    """One face letter per four fields means ``face, x, y, z`` groups."""

    if _face_field_count(fields) * GROUPED_STRIDE >= len(fields) * 0.8:
        return GROUPED
    return None


LAYOUT_RULES: tuple[LayoutRule, ...] = (_zero_heavy_rule, _face_ratio_rule)


def classify_layout(
    fields: Sequence[str], rules: Sequence[LayoutRule] = LAYOUT_RULES
) -> str:
    """Return the legacy field layout, the first matching rule wins."""

    for rule in rules:
        layout = rule(fields)
        if layout is not None:
            return layout
    return GROUPED


def _parse_grouped(fields: Sequence[str]) -> tuple[list[Point2D], str | None]:
    points: list[Point2D] = []
    face: str | None = None
    for start in range(0, len(fields), GROUPED_STRIDE):
        if start + 2 >= len(fields):
            break
        face_token = fields[start]
        if face is None and is_face_code(face_token):
            face = face_name(face_token)
        x = parse_number(fields[start + 1])
        y = parse_number(fields[start + 2])
        if x is None or y is None:
            logger.debug("Skipping AK group at %d: %r", start, fields[start : start + 3])
            continue
        points.append(Point2D(x, y))
    return points, face


def _parse_matrix(fields: Sequence[str]) -> tuple[list[Point2D], str | None]:
    face = face_name(fields[0]) if fields and is_face_code(fields[0]) else None
    points: list[Point2D] = []
    for start in range(1, len(fields), MATRIX_STRIDE):
        if start + 1 >= len(fields):
            break
        x = parse_number(fields[start])
        y = parse_number(fields[start + 1])
        if x is not None and y is not None:
            points.append(Point2D(x, y))
    return points, face


def _parse_standard(fields: Sequence[str]) -> list[Point2D]:
    numbers = [parse_number(token) for token in fields if not is_work_plane(token.upper())]
    points: list[Point2D] = []
    for index in range(0, len(numbers) - 1, 2):
        x, y = numbers[index], numbers[index + 1]
        if x is not None and y is not None:
            points.append(Point2D(x, y))
    return points


def bevel_angles(fields: Sequence[str]) -> tuple[float, ...]:
    """Return negative values that encode welding-preparation bevels."""

    low, high = BEVEL_RANGE
    found: list[float] = []
    for token in fields:
        value = to_float(token)
        if value is not None and low < value < high:
            found.append(value)
    return tuple(found)


def decode_outer_contour(
    fields: Sequence[str],
    context: ProfileContext | None = None,
    settings: DecoderSettings | None = None,
) -> OuterContour:
    """Decode an AK block into an :class:`OuterContour`."""

    settings = settings or load_decoder_settings()
    tokens = clean_fields(fields)
    require_fields(OUTER_CONTOUR, tokens, MIN_FIELDS)

    encoding = classify_encoding(tokens)
    face: str | None = None
    if encoding == LEGACY:
        layout = classify_layout(tokens)
        logger.debug("AK block: legacy %s layout over %d fields", layout, len(tokens))
        if layout == MATRIX:
            points, face = _parse_matrix(tokens)
        else:
            points, face = _parse_grouped(tokens)
    else:
        points = _parse_standard(tokens)

    work_plane = next(
        (token.upper() for token in tokens if is_work_plane(token.upper())), DEFAULT_WORK_PLANE
    )
    regions: tuple[CutRegion, ...] = ()
    if settings.derive_cut_regions:
        regions = derive_cut_regions(points, face, context, settings)

    return OuterContour(
        points=tuple(points),
        closed=len(points) >= 3 and is_closed(points, settings.closure_tolerance),
        face=face,
        work_plane=work_plane,
        cut_regions=regions,
        bevel_angles=bevel_angles(tokens),
    )


__all__ = [
    "GROUPED",
    "LAYOUT_RULES",
    "MATRIX",
    "bevel_angles",
    "classify_layout",
    "decode_outer_contour",
]
