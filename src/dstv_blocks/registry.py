"""Explicit mapping from block kind tags to decoders."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Sequence

from dstv_blocks.blocks import (
    BlockDecoder,
    decode_arc_contour,
    decode_cut,
    decode_end,
    decode_freeform_contour,
    decode_header,
    decode_holes,
    decode_inner_contour,
    decode_marking,
    decode_outer_contour,
    decode_punch,
)
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
    Feature,
    ProfileContext,
)

logger = logging.getLogger(__name__)

DEFAULT_DECODERS: dict[str, BlockDecoder] = {
    HEADER: decode_header,
    END: decode_end,
    OUTER_CONTOUR: decode_outer_contour,
    INNER_CONTOUR: decode_inner_contour,
    CUT: decode_cut,
    ARC_CONTOUR: decode_arc_contour,
    FREEFORM_CONTOUR: decode_freeform_contour,
    HOLE: decode_holes,
    PUNCH: decode_punch,
    MARKING: decode_marking,
}


class UnknownBlockKindError(KeyError):
    """Raised when no decoder is registered for a block kind."""

    def __init__(self, kind: str) -> None:
        super().__init__(kind)
        self.kind = kind

    def __str__(self) -> str:
        return f"No decoder registered for block kind {self.kind!r}"


def normalize_kind(kind: str) -> str:
    return kind.strip().upper()


@dataclass(slots=True)
class DecoderRegistry:
    """Decoders keyed by block kind, plus the settings they are called with."""

    decoders: dict[str, BlockDecoder] = field(default_factory=dict)
    settings_factory: Callable[[], DecoderSettings] = load_decoder_settings
    _settings_cache: DecoderSettings | None = field(default=None, init=False, repr=False)

    def register(self, kind: str, decoder: BlockDecoder, *, replace: bool = False) -> None:
        key = normalize_kind(kind)
        if key in self.decoders and not replace:
            raise ValueError(f"Decoder for {key!r} is already registered")
        self.decoders[key] = decoder
        logger.debug("Registered decoder for %s: %s", key, getattr(decoder, "__name__", decoder))

    def get(self, kind: str) -> BlockDecoder:
        key = normalize_kind(kind)
        try:
            return self.decoders[key]
        except KeyError:
            raise UnknownBlockKindError(key) from None

    def kinds(self) -> tuple[str, ...]:
        return tuple(self.decoders)

    def __contains__(self, kind: object) -> bool:
        return isinstance(kind, str) and normalize_kind(kind) in self.decoders

    def get_settings(self) -> DecoderSettings:
        """Return the cached decoder settings, loading them on first use."""

        if self._settings_cache is None:
            self._settings_cache = self.settings_factory()
        return self._settings_cache

    def decode(
        self,
        kind: str,
        fields: Sequence[str],
        context: ProfileContext | None = None,
        settings: DecoderSettings | None = None,
    ) -> Feature | list[Feature]:
        """Decode ``fields`` with the decoder registered for ``kind``."""

        decoder = self.get(kind)
        return decoder(fields, context, settings or self.get_settings())


def create_default_registry(settings: DecoderSettings | None = None) -> DecoderRegistry:
    """Create a :class:`DecoderRegistry` wired to the built-in decoders."""

    if settings is None:
        return DecoderRegistry(decoders=dict(DEFAULT_DECODERS))
    return DecoderRegistry(decoders=dict(DEFAULT_DECODERS), settings_factory=lambda: settings)


__all__ = [
    "DEFAULT_DECODERS",
    "DecoderRegistry",
    "UnknownBlockKindError",
    "create_default_registry",
    "normalize_kind",
]
