"""Batch import of already-split blocks into an ordered feature list."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from dstv_blocks.blocks.base import DecodeError
from dstv_blocks.config import DecoderSettings, describe_settings
from dstv_blocks.features import EndMarker, ProfileContext, ProfileHeader
from dstv_blocks.priority import FeaturePriorityManager
from dstv_blocks.registry import DecoderRegistry, UnknownBlockKindError, create_default_registry, normalize_kind
from dstv_blocks.utils.tables import draw_kv_table
from dstv_blocks.validation import ValidationResult, validate_feature

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkippedBlock:
    index: int
    kind: str
    reason: str


@dataclass(frozen=True)
class BlockOutcome:
    index: int
    kind: str
    result: ValidationResult


@dataclass(slots=True)
class ImportResult:
    """Everything an import produced, in processing order."""

    header: ProfileHeader | None = None
    end: EndMarker | None = None
    features: list[Any] = field(default_factory=list)
    outcomes: list[BlockOutcome] = field(default_factory=list)
    skipped: list[SkippedBlock] = field(default_factory=list)

    @property
    def results(self) -> list[ValidationResult]:
        return [outcome.result for outcome in self.outcomes]

    @property
    def is_valid(self) -> bool:
        return not self.skipped and all(outcome.result.is_valid for outcome in self.outcomes)

    @property
    def errors(self) -> list[str]:
        messages = [f"{block.kind} block {block.index}: {block.reason}" for block in self.skipped]
        for outcome in self.outcomes:
            messages.extend(f"{outcome.kind} block {outcome.index}: {msg}" for msg in outcome.result.errors)
        return messages

    @property
    def warnings(self) -> list[str]:
        return [
            f"{outcome.kind} block {outcome.index}: {msg}"
            for outcome in self.outcomes
            for msg in outcome.result.warnings
        ]


def _context_for(header: ProfileHeader | None, fallback: ProfileContext | None) -> ProfileContext | None:
    if header is None:
        return fallback
    return header.context()


def import_blocks(
    blocks: Iterable[tuple[str, Sequence[str]]],
    *,
    registry: DecoderRegistry | None = None,
    settings: DecoderSettings | None = None,
    manager: FeaturePriorityManager | None = None,
    context: ProfileContext | None = None,
) -> ImportResult:
    """Decode, validate and priority-order ``(kind, fields)`` blocks.

    Blocks that fail structurally are recorded in ``skipped`` and the import
    carries on with the next block.
    """

    registry = registry or create_default_registry(settings)
    settings = settings or registry.get_settings()
    manager = manager or FeaturePriorityManager()
    outcome = ImportResult()
    features: list[Any] = []

    for index, (kind, fields) in enumerate(blocks, start=1):
        key = normalize_kind(kind)
        try:
            decoded = registry.decode(key, fields, _context_for(outcome.header, context), settings)
        except (DecodeError, UnknownBlockKindError) as exc:
            logger.warning("Skipping %s block %d: %s", key, index, exc)
            outcome.skipped.append(SkippedBlock(index, key, str(exc)))
            continue

        result = validate_feature(decoded, settings)
        outcome.outcomes.append(BlockOutcome(index, key, result))

        if isinstance(decoded, ProfileHeader):
            if outcome.header is None:
                outcome.header = decoded
            else:
                logger.warning("Ignoring additional header at block %d", index)
        elif isinstance(decoded, EndMarker):
            outcome.end = decoded
        elif isinstance(decoded, list):
            features.extend(decoded)
        else:
            features.append(decoded)

    outcome.features = manager.optimize_order(features)
    logger.debug(
        "Imported %d features from %d blocks (%d skipped)",
        len(outcome.features),
        len(outcome.outcomes) + len(outcome.skipped),
        len(outcome.skipped),
    )
    return outcome


def settings_table(settings: DecoderSettings | None = None) -> str:
    """Render the active decoder settings as a two-column table."""

    snapshot = describe_settings(settings)
    width = max((len(key) for key in snapshot), default=10) + 2
    value_width = max((len(value) for value in snapshot.values()), default=10) + 2
    return draw_kv_table(sorted(snapshot.items()), width, value_width)


__all__ = ["BlockOutcome", "ImportResult", "SkippedBlock", "import_blocks", "settings_table"]
