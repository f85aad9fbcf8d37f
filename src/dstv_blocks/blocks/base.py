"""Shared pieces for the per-block decoders."""
from __future__ import annotations

from typing import Protocol, Sequence

from dstv_blocks.config import DecoderSettings
from dstv_blocks.features import Feature, ProfileContext
from dstv_blocks.fields import has_face_prefix, is_face_code, parse_number

LEGACY = "legacy"
STANDARD = "standard"


class DecodeError(ValueError):
    """Raised when a block cannot be decoded structurally."""

    def __init__(self, kind: str, reason: str) -> None:
        super().__init__(f"{kind} block: {reason}")
        self.kind = kind
        self.reason = reason


class BlockDecoder(Protocol):
    def __call__(
        self,
        fields: Sequence[str],
        context: ProfileContext | None = None,
        settings: DecoderSettings | None = None,
    ) -> Feature | list[Feature]:  # pragma: no cover - structural typing helper
        ...


def clean_fields(fields: Sequence[str]) -> list[str]:
    """Strip whitespace, keeping every field at its position.

    Empty or missing fields become ``""`` so the fields after them stay in
    their slots. Only trailing empties are dropped.
    """

    tokens = ["" if token is None else str(token).strip() for token in fields]
    while tokens and not tokens[-1]:
        tokens.pop()
    return tokens


def compact_fields(fields: Sequence[str]) -> list[str]:
    """Strip whitespace and drop empty tokens, for blocks read as a token stream."""

    return [token for token in clean_fields(fields) if token]


def require_fields(kind: str, fields: Sequence[str], minimum: int) -> None:
    if len(fields) < minimum:
        raise DecodeError(kind, f"requires at least {minimum} fields, got {len(fields)}")


def require_number(kind: str, token: str | None, name: str) -> float:
    """Return the number in ``token`` or raise :class:`DecodeError`."""

    value = parse_number(token)
    if value is None:
        raise DecodeError(kind, f"{name} must be numeric, got {token!r}")
    return value


def classify_encoding(fields: Sequence[str]) -> str:
    """Return :data:`LEGACY` when a face letter prefixes or precedes the coordinates."""

    if fields and is_face_code(fields[0]):
        return LEGACY
    if any(has_face_prefix(token) and not is_face_code(token) for token in fields):
        return LEGACY
    return STANDARD


__all__ = [
    "BlockDecoder",
    "DecodeError",
    "LEGACY",
    "STANDARD",
    "classify_encoding",
    "clean_fields",
    "compact_fields",
    "require_fields",
    "require_number",
]
