"""Standard-conformance checks for decoded blocks.

Validators never raise. Structural decode failures become the single error of
a :class:`ValidationResult` whose ``data`` is ``None``.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

from dstv_blocks.blocks.base import DecodeError
from dstv_blocks.config import DecoderSettings, load_decoder_settings
from dstv_blocks.features import (
    ARC_CONTOUR,
    CUT,
    END,
    FREEFORM_CONTOUR,
    HEADER,
    HOLE,
    INNER_CONTOUR,
    MARKING,
    OUTER_CONTOUR,
    PUNCH,
    ProfileContext,
)
from dstv_blocks.registry import DecoderRegistry, UnknownBlockKindError, create_default_registry, normalize_kind

from .contours import (
    validate_arc_contour,
    validate_freeform_contour,
    validate_inner_contour,
    validate_outer_contour,
)
from .operations import (
    validate_cut,
    validate_hole,
    validate_holes,
    validate_marking,
    validate_punch,
)
from .records import validate_end, validate_header
from .result import Findings, ValidationResult

logger = logging.getLogger(__name__)

Validator = Callable[[Any, DecoderSettings], ValidationResult]

VALIDATORS: dict[str, Validator] = {
    HEADER: validate_header,
    END: validate_end,
    OUTER_CONTOUR: validate_outer_contour,
    INNER_CONTOUR: validate_inner_contour,
    CUT: validate_cut,
    ARC_CONTOUR: validate_arc_contour,
    FREEFORM_CONTOUR: validate_freeform_contour,
    HOLE: validate_hole,
    PUNCH: validate_punch,
    MARKING: validate_marking,
}


def validate_feature(feature: Any, settings: DecoderSettings | None = None) -> ValidationResult:
    """Validate an already decoded feature, or a list of holes from one BO block."""

    settings = settings or load_decoder_settings()
    if isinstance(feature, list):
        return validate_holes(feature, settings)
    kind = getattr(feature, "block_kind", None)
    validator = VALIDATORS.get(kind) if isinstance(kind, str) else None
    if validator is None:
        return ValidationResult.failed(f"No validator for {type(feature).__name__}")
    return validator(feature, settings)


def validate_block(
    kind: str,
    fields: Sequence[str],
    context: ProfileContext | None = None,
    settings: DecoderSettings | None = None,
    registry: DecoderRegistry | None = None,
) -> ValidationResult:
    """Decode ``fields`` as a ``kind`` block and validate the outcome."""

    registry = registry or create_default_registry(settings)
    settings = settings or registry.get_settings()
    key = normalize_kind(kind)
    try:
        decoded = registry.decode(key, fields, context, settings)
    except DecodeError as exc:
        logger.debug("Validation of %s block stopped at decode: %s", key, exc.reason)
        return ValidationResult.failed(str(exc))
    except UnknownBlockKindError as exc:
        return ValidationResult.failed(str(exc))
    return validate_feature(decoded, settings)


__all__ = [
    "Findings",
    "VALIDATORS",
    "ValidationResult",
    "validate_arc_contour",
    "validate_block",
    "validate_cut",
    "validate_end",
    "validate_feature",
    "validate_freeform_contour",
    "validate_header",
    "validate_hole",
    "validate_holes",
    "validate_inner_contour",
    "validate_marking",
    "validate_outer_contour",
    "validate_punch",
]
