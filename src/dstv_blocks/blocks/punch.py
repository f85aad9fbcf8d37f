"""Punch mark (PU) decoding."""
from __future__ import annotations

import logging
from typing import Sequence

from dstv_blocks.config import DecoderSettings, load_decoder_settings
from dstv_blocks.features import PUNCH, ProfileContext, Punch
from dstv_blocks.fields import field_at, is_work_plane, number_at, to_int

from .base import clean_fields, require_fields, require_number

logger = logging.getLogger(__name__)

MIN_FIELDS = 2
ANGLE_LIMIT = 90.0


def decode_punch(
    fields: Sequence[str],
    context: ProfileContext | None = None,
    settings: DecoderSettings | None = None,
) -> Punch:
    """Decode a PU block: ``x, y[, depth, diameter, angle, work_plane, tool_number]``."""

    settings = settings or load_decoder_settings()
    tokens = clean_fields(fields)
    require_fields(PUNCH, tokens, MIN_FIELDS)

    x = require_number(PUNCH, tokens[0], "x")
    y = require_number(PUNCH, tokens[1], "y")

    depth = number_at(tokens, 2)
    if depth is None or depth <= 0:
        depth = settings.punch_depth
    diameter = number_at(tokens, 3)
    if diameter is None or diameter <= 0:
        diameter = settings.punch_diameter
    angle = number_at(tokens, 4)
    if angle is None:
        angle = 0.0
    elif abs(angle) > ANGLE_LIMIT:
        logger.debug("PU block: clamping angle %s into [-90, 90]", angle)
        angle = max(-ANGLE_LIMIT, min(ANGLE_LIMIT, angle))

    plane_token = field_at(tokens, 5).upper()
    tool = to_int(field_at(tokens, 6))

    return Punch(
        x=x,
        y=y,
        depth=depth,
        diameter=diameter,
        angle=angle,
        work_plane=plane_token if is_work_plane(plane_token) else settings.work_plane,
        tool_number=tool if tool is not None and tool > 0 else None,
    )


__all__ = ["decode_punch"]
