"""End marker (EN) decoding."""
from __future__ import annotations

import logging
from typing import Sequence

from dstv_blocks.config import DecoderSettings
from dstv_blocks.features import EndMarker, ProfileContext
from dstv_blocks.fields import to_float, to_int

from .base import clean_fields

logger = logging.getLogger(__name__)

POSITIONAL_KEYS = ("processing_time", "checksum", "record_count", "error_count", "warning_count")
COUNT_KEYS = ("record_count", "error_count", "warning_count")

_KEY_ALIASES = {
    "time": "processing_time",
    "processing_time": "processing_time",
    "checksum": "checksum",
    "crc": "checksum",
    "records": "record_count",
    "record_count": "record_count",
    "errors": "error_count",
    "error_count": "error_count",
    "warnings": "warning_count",
    "warning_count": "warning_count",
}


def _split_pairs(tokens: Sequence[str]) -> dict[str, str]:
    values: dict[str, str] = {}
    for token in tokens:
        key, _, raw = token.partition("=")
        name = _KEY_ALIASES.get(key.strip().lower())
        if name is None:
            logger.debug("EN block: dropping unknown key %r", key)
            continue
        values[name] = raw.strip()
    return values


def decode_end(
    fields: Sequence[str],
    context: ProfileContext | None = None,
    settings: DecoderSettings | None = None,
) -> EndMarker:
    """Decode an EN block; all fields are optional."""

    tokens = clean_fields(fields)
    if not tokens:
        return EndMarker()

    if any("=" in token for token in tokens):
        values = _split_pairs(tokens)
    else:
        values = dict(zip(POSITIONAL_KEYS, tokens))
        if len(tokens) > len(POSITIONAL_KEYS):
            logger.debug("EN block: ignoring %d trailing fields", len(tokens) - len(POSITIONAL_KEYS))

    counts = {key: to_int(values.get(key)) for key in COUNT_KEYS}
    return EndMarker(
        processing_time=to_float(values.get("processing_time")),
        checksum=values.get("checksum") or None,
        record_count=counts["record_count"],
        error_count=counts["error_count"],
        warning_count=counts["warning_count"],
    )


__all__ = ["POSITIONAL_KEYS", "decode_end"]
