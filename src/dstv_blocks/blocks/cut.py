"""Cut (SC) decoding."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from dstv_blocks.config import DecoderSettings, load_decoder_settings
from dstv_blocks.features import CUT, Cut, ProfileContext
from dstv_blocks.fields import face_name, is_face_code, is_work_plane, to_float

from .base import DecodeError, clean_fields, require_fields, require_number

logger = logging.getLogger(__name__)

MIN_FIELDS = 4
CUT_KINDS = ("rectangular", "circular", "angular", "beveled", "custom")


def cut_kind_for(width: float, height: float) -> str:
    """Infer the cut kind from the aspect ratio of its extent."""

    ratio = max(width, height) / min(width, height)
    if ratio < 1.1:
        return "circular"
    if ratio < 3:
        return "rectangular"
    return "angular"


@dataclass(slots=True)
class _CutOptions:
    angle: float | None = None
    radius: float | None = None
    depth: float | None = None
    tool_number: int | None = None
    feed_rate: float | None = None
    work_plane: str | None = None
    face: str | None = None
    cut_kind: str | None = None


def _assign_number(options: _CutOptions, value: float, width: float, height: float) -> bool:
    if options.angle is None and -180 <= value <= 180:
        options.angle = value
    elif options.radius is None and 0 < value < min(width, height) / 2:
        options.radius = value
    elif options.depth is None and 0 < value < 1000:
        options.depth = value
    elif options.tool_number is None and value.is_integer() and 0 < value < 1000:
        options.tool_number = int(value)
    elif options.feed_rate is None and 10 < value < 50000:
        options.feed_rate = value
    else:
        return False
    return True


def _parse_options(fields: Sequence[str], width: float, height: float) -> _CutOptions:
    options = _CutOptions()
    for token in fields:
        if not token:
            continue
        value = to_float(token)
        if value is not None:
            if not _assign_number(options, value, width, height):
                logger.debug("SC block: dropping unmatched numeric field %r", token)
            continue

        upper = token.upper()
        if is_work_plane(upper):
            options.work_plane = upper
        elif is_face_code(token):
            options.face = face_name(token)
        elif token.lower() in CUT_KINDS:
            options.cut_kind = token.lower()
        else:
            logger.debug("SC block: dropping unrecognized field %r", token)
    return options


def decode_cut(
    fields: Sequence[str],
    context: ProfileContext | None = None,
    settings: DecoderSettings | None = None,
) -> Cut:
    """Decode an SC block into a :class:`Cut`."""

    settings = settings or load_decoder_settings()
    tokens = clean_fields(fields)
    require_fields(CUT, tokens, MIN_FIELDS)

    x = require_number(CUT, tokens[0], "x")
    y = require_number(CUT, tokens[1], "y")
    width = require_number(CUT, tokens[2], "width")
    height = require_number(CUT, tokens[3], "height")
    if width <= 0 or height <= 0:
        raise DecodeError(CUT, f"cut dimensions must be positive, got {width}x{height}")

    options = _parse_options(tokens[4:], width, height)
    return Cut(
        x=x,
        y=y,
        width=width,
        height=height,
        angle=options.angle if options.angle is not None else 0.0,
        cut_kind=options.cut_kind or cut_kind_for(width, height),
        radius=options.radius,
        depth=options.depth,
        face=options.face,
        work_plane=options.work_plane or settings.work_plane,
        tool_number=options.tool_number,
        feed_rate=options.feed_rate,
    )


__all__ = ["CUT_KINDS", "cut_kind_for", "decode_cut"]
