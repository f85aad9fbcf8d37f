"""Per-block decoders for the lettered exchange-format records."""
from __future__ import annotations

from .arc_contour import arc_length, arc_polyline, decode_arc_contour
from .base import LEGACY, STANDARD, BlockDecoder, DecodeError, classify_encoding
from .cut import decode_cut
from .end import decode_end
from .freeform import complexity, contour_length, decode_freeform_contour
from .header import classify_header_layout, decode_header, profile_kind_for
from .hole import decode_hole, decode_holes
from .inner_contour import decode_inner_contour
from .marking import decode_marking
from .outer_contour import LAYOUT_RULES, classify_layout, decode_outer_contour
from .punch import decode_punch

__all__ = [
    "BlockDecoder",
    "DecodeError",
    "LAYOUT_RULES",
    "LEGACY",
    "STANDARD",
    "arc_length",
    "arc_polyline",
    "classify_encoding",
    "classify_header_layout",
    "classify_layout",
    "complexity",
    "contour_length",
    "decode_arc_contour",
    "decode_cut",
    "decode_end",
    "decode_freeform_contour",
    "decode_header",
    "decode_hole",
    "decode_holes",
    "decode_inner_contour",
    "decode_marking",
    "decode_outer_contour",
    "decode_punch",
    "profile_kind_for",
]
