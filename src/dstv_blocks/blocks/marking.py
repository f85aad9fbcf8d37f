"""Marking (SI) decoding."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Sequence

from dstv_blocks.config import DecoderSettings, load_decoder_settings
from dstv_blocks.features import MARKING, Marking, ProfileContext
from dstv_blocks.fields import face_name, is_face_code, is_work_plane, parse_number, to_float

from .base import LEGACY, STANDARD, DecodeError, clean_fields, require_fields, require_number

logger = logging.getLogger(__name__)

MIN_FIELDS = 3
MARKING_METHODS = ("engrave", "stamp", "laser", "paint")
KNOWN_FONTS = (
    "arial",
    "helvetica",
    "times",
    "courier",
    "verdana",
    "tahoma",
    "standard",
    "sans",
    "serif",
    "mono",
    "bold",
    "italic",
)

_SIZED_TEXT_RE = re.compile(r"^(\d+(?:\.\d+)?)r(.+)$")
_FONT_WORD_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9\-_]*$")


def classify_marking_encoding(fields: Sequence[str]) -> str:
    """A lone face letter in front of the coordinates marks the legacy layout."""

    head = fields[0].split() if fields else []
    if head and is_face_code(head[0]):
        return LEGACY
    return STANDARD


def is_font_name(token: str) -> bool:
    lower = token.lower()
    return any(font in lower for font in KNOWN_FONTS) or bool(_FONT_WORD_RE.match(token))


@dataclass(slots=True)
class _MarkingOptions:
    height: float | None = None
    angle: float | None = None
    depth: float | None = None
    work_plane: str | None = None
    face: str | None = None
    method: str = "engrave"
    font: str | None = None


def _parse_options(fields: Sequence[str]) -> _MarkingOptions:
    options = _MarkingOptions()
    for token in fields:
        if not token:
            continue
        value = to_float(token)
        if value is not None:
            if options.height is None and 0 < value < 100:
                options.height = value
            elif options.angle is None and -360 <= value <= 360:
                options.angle = value
            elif options.depth is None and 0 < value < 10:
                options.depth = value
            else:
                logger.debug("SI block: dropping unmatched numeric field %r", token)
            continue

        upper = token.upper()
        if is_work_plane(upper):
            options.work_plane = upper
        elif is_face_code(token):
            options.face = face_name(token)
        elif token.lower() in MARKING_METHODS:
            options.method = token.lower()
        elif is_font_name(token):
            options.font = token
        else:
            logger.debug("SI block: dropping unrecognized field %r", token)
    return options


def _decode_legacy(tokens: Sequence[str], settings: DecoderSettings) -> Marking:
    parts = [part for token in tokens for part in token.split()]
    require_fields(MARKING, parts, 5)

    face = face_name(parts[0])
    x = require_number(MARKING, parts[1], "x")
    y = require_number(MARKING, parts[2], "y")
    angle = parse_number(parts[3])
    remainder = " ".join(parts[4:])
    sized = _SIZED_TEXT_RE.match(remainder)
    if sized:
        height = float(sized.group(1))
        text = sized.group(2).strip()
    else:
        height = settings.marking_height
        text = remainder.strip()
    if not text:
        raise DecodeError(MARKING, "marking text is empty")

    return Marking(
        x=x,
        y=y,
        text=text,
        height=height,
        angle=angle if angle is not None else 0.0,
        depth=settings.marking_depth,
        face=face,
        work_plane=settings.work_plane,
    )


def decode_marking(
    fields: Sequence[str],
    context: ProfileContext | None = None,
    settings: DecoderSettings | None = None,
) -> Marking:
    """Decode an SI block into a :class:`Marking`."""

    settings = settings or load_decoder_settings()
    tokens = clean_fields(fields)
    if classify_marking_encoding(tokens) == LEGACY:
        logger.debug("SI block: legacy encoding")
        return _decode_legacy(tokens, settings)

    require_fields(MARKING, tokens, MIN_FIELDS)
    x = require_number(MARKING, tokens[0], "x")
    y = require_number(MARKING, tokens[1], "y")
    text = tokens[2].strip()
    if not text:
        raise DecodeError(MARKING, "marking text is empty")

    options = _parse_options(tokens[3:])
    return Marking(
        x=x,
        y=y,
        text=text,
        height=options.height if options.height is not None else settings.marking_height,
        angle=options.angle if options.angle is not None else 0.0,
        depth=options.depth if options.depth is not None else settings.marking_depth,
        method=options.method,
        face=options.face,
        work_plane=options.work_plane or settings.work_plane,
        font=options.font,
    )


__all__ = ["MARKING_METHODS", "classify_marking_encoding", "decode_marking", "is_font_name"]
