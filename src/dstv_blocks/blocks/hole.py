"""Hole (BO) decoding.

A single BO block may carry several holes. Three encodings are observed:

* condensed legacy entries, one hole per field: ``"v 1857.15u 163.20 22.00 0.00"``
* separated legacy groups: ``v, 1857.15, 163.20, 22.00, 0.00``
* standard positional groups: ``x, y, diameter[, depth, angle, work_plane]``
"""
from __future__ import annotations

import logging
from typing import Sequence

from dstv_blocks.config import DecoderSettings, load_decoder_settings
from dstv_blocks.features import HOLE, Hole, ProfileContext
from dstv_blocks.fields import (
    FACE_PREFIX_RE,
    face_name,
    is_face_code,
    is_work_plane,
    parse_number,
)

from .base import DecodeError, clean_fields, require_fields

logger = logging.getLogger(__name__)

MIN_FIELDS = 3
SEPARATED_STRIDE = 5
DEFAULT_FACE_CODE = "v"
SLOT_MARKER = "l"


def is_legacy(fields: Sequence[str]) -> bool:
    return bool(fields) and bool(FACE_PREFIX_RE.match(fields[0]))


def _condensed_entry(entry: str, settings: DecoderSettings) -> Hole | None:
    code = entry[0].lower()
    parts = entry[1:].split()
    numbers: list[float] = []
    slot: list[float] = []
    target = numbers
    for part in parts:
        if part.lower() == SLOT_MARKER:
            target = slot
            continue
        value = parse_number(part)
        if value is not None:
            target.append(value)

    if len(numbers) < 3:
        logger.debug("BO block: insufficient numbers in legacy entry %r", entry)
        return None

    return Hole(
        x=numbers[0],
        y=numbers[1],
        diameter=numbers[2],
        depth=numbers[3] if len(numbers) > 3 else settings.hole_depth,
        angle=numbers[4] if len(numbers) > 4 else None,
        tolerance=numbers[5] if len(numbers) > 5 else None,
        face=face_name(code),
        face_code=code,
        hole_kind="slotted" if slot else "round",
        slot_length=slot[0] if slot else None,
    )


def _parse_legacy(fields: Sequence[str], settings: DecoderSettings) -> list[Hole]:
    holes: list[Hole] = []
    index = 0
    while index < len(fields):
        token = fields[index]
        if " " in token and FACE_PREFIX_RE.match(token):
            hole = _condensed_entry(token, settings)
            if hole is not None:
                holes.append(hole)
            index += 1
        elif is_face_code(token) and index + 3 < len(fields):
            code = token.lower()
            x = parse_number(fields[index + 1])
            y = parse_number(fields[index + 2])
            diameter = parse_number(fields[index + 3])
            depth = parse_number(fields[index + 4]) if index + 4 < len(fields) else None
            if x is not None and y is not None and diameter is not None:
                holes.append(
                    Hole(
                        x=x,
                        y=y,
                        diameter=diameter,
                        depth=depth if depth is not None else settings.hole_depth,
                        face=face_name(code),
                        face_code=code,
                    )
                )
            index += SEPARATED_STRIDE
        else:
            index += 1
    return holes


def standard_stride(fields: Sequence[str]) -> int:
    """Return the group width of a standard BO block without work-plane markers.

    ``x, y, diameter, depth`` groups are preferred, then groups carrying an
    angle as well, then bare ``x, y, diameter`` triples.
    """

    count = len(fields)
    if count <= 5:
        return count
    for stride in (4, 5, 3):
        if count % stride == 0:
            return stride
    return 4


def _standard_groups(fields: Sequence[str]) -> list[list[str]]:
    if any(is_work_plane(token.upper()) for token in fields):
        groups: list[list[str]] = []
        current: list[str] = []
        for token in fields:
            current.append(token)
            if is_work_plane(token.upper()):
                groups.append(current)
                current = []
        if current:
            groups.append(current)
        return groups

    stride = standard_stride(fields)
    return [list(fields[start : start + stride]) for start in range(0, len(fields), stride)]


def _standard_hole(group: Sequence[str], settings: DecoderSettings) -> Hole | None:
    work_plane = next((token.upper() for token in group if is_work_plane(token.upper())), None)
    numbers = [parse_number(token) for token in group if not is_work_plane(token.upper())]
    if len(numbers) < 3:
        logger.debug("BO block: skipping incomplete hole group %r", list(group))
        return None
    x, y, diameter = numbers[0], numbers[1], numbers[2]
    if x is None or y is None or diameter is None:
        logger.debug("BO block: skipping non-numeric hole group %r", list(group))
        return None
    depth = numbers[3] if len(numbers) > 3 and numbers[3] is not None else settings.hole_depth
    angle = numbers[4] if len(numbers) > 4 else None
    return Hole(
        x=x,
        y=y,
        diameter=diameter,
        depth=depth,
        angle=angle,
        face=face_name(DEFAULT_FACE_CODE),
        face_code=DEFAULT_FACE_CODE,
        work_plane=work_plane or settings.work_plane,
    )


def decode_holes(
    fields: Sequence[str],
    context: ProfileContext | None = None,
    settings: DecoderSettings | None = None,
) -> list[Hole]:
    """Decode every hole carried by a BO block."""

    settings = settings or load_decoder_settings()
    tokens = clean_fields(fields)
    require_fields(HOLE, tokens, MIN_FIELDS)

    if is_legacy(tokens):
        holes = _parse_legacy(tokens, settings)
        encoding = "legacy"
    else:
        holes = [
            hole
            for hole in (_standard_hole(group, settings) for group in _standard_groups(tokens))
            if hole is not None
        ]
        encoding = "standard"

    if not holes:
        raise DecodeError(HOLE, f"no decodable hole in {len(tokens)} fields")
    logger.debug("BO block: %d holes from %s encoding", len(holes), encoding)
    return holes


def decode_hole(
    fields: Sequence[str],
    context: ProfileContext | None = None,
    settings: DecoderSettings | None = None,
) -> Hole:
    """Decode the first hole of a BO block."""

    return decode_holes(fields, context, settings)[0]


__all__ = ["decode_hole", "decode_holes", "is_legacy", "standard_stride"]
