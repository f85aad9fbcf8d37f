"""Block decoding, validation and feature ordering for DSTV/NC1 records."""
from __future__ import annotations

from .blocks import DecodeError
from .config import ConfigError, DecoderSettings, describe_settings, load_decoder_settings
from .features import BLOCK_KINDS, Feature, Point2D, ProfileContext
from .pipeline import ImportResult, import_blocks
from .priority import FeaturePriorityManager, PriorityClass
from .registry import DecoderRegistry, UnknownBlockKindError, create_default_registry
from .validation import ValidationResult, validate_block, validate_feature

__version__ = "0.1.0"

__all__ = [
    "BLOCK_KINDS",
    "ConfigError",
    "DecodeError",
    "DecoderRegistry",
    "DecoderSettings",
    "Feature",
    "FeaturePriorityManager",
    "ImportResult",
    "Point2D",
    "PriorityClass",
    "ProfileContext",
    "UnknownBlockKindError",
    "ValidationResult",
    "create_default_registry",
    "describe_settings",
    "import_blocks",
    "load_decoder_settings",
    "validate_block",
    "validate_feature",
]
