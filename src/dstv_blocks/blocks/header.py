"""Header (ST) decoding.

The header is positional but writers disagree on where the profile name and
its single-letter kind code sit. :func:`classify_header_layout` settles that
once, before any dimension is read.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Sequence

from dstv_blocks.config import DecoderSettings
from dstv_blocks.features import HEADER, ProfileContext, ProfileHeader
from dstv_blocks.fields import field_at, to_float

from .base import require_fields

logger = logging.getLogger(__name__)

MIN_FIELDS = 8
DEFAULT_STEEL_GRADE = "S235"
DEFAULT_LENGTH = 1000.0

STANDARD = "standard"
PLATE = "plate"
TUBE = "tube"

KIND_CODES = {
    "I": "I_PROFILE",
    "U": "U_PROFILE",
    "L": "L_PROFILE",
    "T": "T_PROFILE",
    "M": "TUBE_RECT",
    "R": "TUBE_ROUND",
    "B": "PLATE",
}
UNKNOWN_KIND = "UNKNOWN"

_KIND_CODE_RE = re.compile(r"^[IULTMRB]$", re.IGNORECASE)
_PLATE_THICKNESS_RE = re.compile(r"PL\s*(\d+)")
_DATE_RE = re.compile(r"^(?:\d{2}[-/]\d{2}[-/]\d{4}|\d{4}[-/]\d{2}[-/]\d{2})$")
_TIME_RE = re.compile(r"^\d{2}:\d{2}(?::\d{2})?$")

# Designation prefixes checked in order; angles before channels so UKA is not a U.
_DESIGNATION_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"^(?:HEA|HEB|HEM|HE\d|IPE|IPN|UBP|UB|UC)"), "I_PROFILE"),
    (re.compile(r"^(?:W\d|S\d|HP\d)"), "I_PROFILE"),
    (re.compile(r"^(?:L.*X|RSA|RS|UKA|ANGLE)"), "L_PROFILE"),
    (re.compile(r"^(?:UPN|UPE|UAP|U\s*\d)"), "U_PROFILE"),
    (re.compile(r"^(?:C\d|MC\d)"), "U_PROFILE"),
    (re.compile(r"^T\s*\d"), "T_PROFILE"),
    (re.compile(r"^(?:HSS|RHS|SHS|TUBE RECT)"), "TUBE_RECT"),
    (re.compile(r"^(?:CHS|PIPE|TUBE CIRC)"), "TUBE_ROUND"),
    (re.compile(r"TUBE.*(?:CIRC|ROUND)"), "TUBE_ROUND"),
    (re.compile(r"TUBE"), "TUBE_RECT"),
    (re.compile(r"^(?:RND|ROND|RD)"), "ROUND_BAR"),
    (re.compile(r"^(?:FL|FB|FLAT)"), "FLAT_BAR"),
    (re.compile(r"^(?:PL|PLT|PLATE)"), "PLATE"),
    (re.compile(r"^Z\s*\d"), "Z_PROFILE"),
    (re.compile(r"CUSTOM|SPECIAL"), "CUSTOM"),
)


@dataclass(frozen=True)
class HeaderLayout:
    """Where the profile designation and dimension block sit in a header."""

    layout: str
    profile_name: str
    profile_kind: str
    dimension_start: int


def clean_text(token: str) -> str:
    """Return ``token`` stripped, treating ``-`` and ``0`` placeholders as empty."""

    text = token.strip()
    return "" if text in ("-", "0") else text


def is_kind_code(token: str) -> bool:
    return bool(_KIND_CODE_RE.match(token.strip()))


def profile_kind_for(designation: str) -> str:
    """Infer the profile kind from a designation such as ``HEA200`` or ``L80X80X8``."""

    upper = designation.strip().upper()
    if not upper:
        return UNKNOWN_KIND
    for pattern, kind in _DESIGNATION_RULES:
        if pattern.search(upper):
            return kind
    return UNKNOWN_KIND


def classify_header_layout(fields: Sequence[str]) -> HeaderLayout:
    """Detect which of the observed header layouts ``fields`` follows."""

    if field_at(fields, 6) == "PL" and field_at(fields, 8) == "B":
        return HeaderLayout(PLATE, f"PL {field_at(fields, 7)}", "PLATE", 9)

    if field_at(fields, 6) == "Tube" and field_at(fields, 7) == "rect.":
        sizes = [token for token in (field_at(fields, i) for i in (8, 9, 10)) if token and token != "-"]
        return HeaderLayout(TUBE, f"Tube rect. {'x'.join(sizes)}", "TUBE_RECT", 12)

    for code_index in (9, 8, 7):
        code = field_at(fields, code_index)
        if code and is_kind_code(code):
            name = clean_text(field_at(fields, code_index - 1))
            return HeaderLayout(STANDARD, name, KIND_CODES[code.upper()], code_index + 1)

    name = clean_text(field_at(fields, 6))
    return HeaderLayout(STANDARD, name, profile_kind_for(name), 8)


def _number(fields: Sequence[str], index: int, default: float = 0.0) -> float:
    token = field_at(fields, index)
    if not token or token == "-":
        return default
    value = to_float(token)
    return default if value is None else value


def decode_header(
    fields: Sequence[str],
    context: ProfileContext | None = None,
    settings: DecoderSettings | None = None,
) -> ProfileHeader:
    """Decode an ST block into a :class:`ProfileHeader`."""

    tokens = [str(token).strip() for token in fields]
    require_fields(HEADER, tokens, MIN_FIELDS)

    layout = classify_header_layout(tokens)
    start = layout.dimension_start
    logger.debug(
        "ST block: %s layout, profile %r (%s), dimensions at %d",
        layout.layout,
        layout.profile_name,
        layout.profile_kind,
        start,
    )

    height = width = web = flange = 0.0
    thickness: float | None = None
    wall: float | None = None
    length = _number(tokens, start)
    if layout.layout == PLATE:
        width = _number(tokens, start + 1)
        thickness = _number(tokens, start + 4) or None
        if thickness is None:
            match = _PLATE_THICKNESS_RE.search(layout.profile_name)
            if match:
                thickness = float(match.group(1))
        height = thickness or 0.0
    elif layout.layout == TUBE:
        height = _number(tokens, start + 1)
        width = _number(tokens, start + 2)
        wall = _number(tokens, start + 3) or _number(tokens, start + 4) or None
    else:
        height = _number(tokens, start + 1)
        width = _number(tokens, start + 2)
        web = _number(tokens, start + 3)
        flange = _number(tokens, start + 4)

    if not length:
        logger.debug("ST block: missing length, using %s", DEFAULT_LENGTH)
        length = DEFAULT_LENGTH

    created_date: str | None = None
    created_time: str | None = None
    for token in tokens[start + 8 :]:
        if _DATE_RE.match(token):
            created_date = token
        elif _TIME_RE.match(token):
            created_time = token

    radius_token = field_at(tokens, start + 7)
    quantity = to_float(field_at(tokens, 5))
    return ProfileHeader(
        order_number=clean_text(field_at(tokens, 0)),
        drawing_number=clean_text(field_at(tokens, 1)),
        phase_number=clean_text(field_at(tokens, 2)),
        piece_number=clean_text(field_at(tokens, 3)),
        steel_grade=clean_text(field_at(tokens, 4)) or DEFAULT_STEEL_GRADE,
        quantity=int(quantity) if quantity is not None else 1,
        profile_name=layout.profile_name,
        profile_kind=layout.profile_kind,
        length=length,
        height=height,
        width=width,
        web_thickness=web,
        flange_thickness=flange,
        weight=_number(tokens, start + 5),
        painting_surface=_number(tokens, start + 6),
        radius=_number(tokens, start + 7) if radius_token and radius_token != "-" else None,
        thickness=thickness,
        wall_thickness=wall,
        layout=layout.layout,
        created_date=created_date,
        created_time=created_time,
    )


__all__ = [
    "HeaderLayout",
    "KIND_CODES",
    "PLATE",
    "STANDARD",
    "TUBE",
    "classify_header_layout",
    "clean_text",
    "decode_header",
    "is_kind_code",
    "profile_kind_for",
]
