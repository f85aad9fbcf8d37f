from __future__ import annotations

import pytest

from dstv_blocks.config import DecoderSettings
from dstv_blocks.features import BLOCK_KINDS, Punch
from dstv_blocks.registry import (
    DEFAULT_DECODERS,
    DecoderRegistry,
    UnknownBlockKindError,
    create_default_registry,
)


def test_default_registry_covers_every_block_kind(registry: DecoderRegistry) -> None:
    assert set(registry.kinds()) == set(DEFAULT_DECODERS)
    assert set(BLOCK_KINDS) <= set(registry.kinds())


def test_lookup_is_case_insensitive(registry: DecoderRegistry) -> None:
    assert "pu" in registry
    assert " Pu " in registry
    assert 42 not in registry

    punch = registry.decode("pu", ["12", "34"])

    assert isinstance(punch, Punch)
    assert (punch.x, punch.y) == (12.0, 34.0)


def test_unknown_kind_raises(registry: DecoderRegistry) -> None:
    with pytest.raises(UnknownBlockKindError) as excinfo:
        registry.get("zz")

    assert excinfo.value.kind == "ZZ"
    assert str(excinfo.value) == "No decoder registered for block kind 'ZZ'"
    assert isinstance(excinfo.value, KeyError)


def test_register_refuses_silent_replacement(registry: DecoderRegistry) -> None:
    def decode_nothing(fields, context=None, settings=None):
        return []

    with pytest.raises(ValueError):
        registry.register("BO", decode_nothing)

    registry.register("bo", decode_nothing, replace=True)
    assert registry.decode("BO", ["1", "2", "3"]) == []


def test_settings_factory_is_called_once() -> None:
    calls: list[DecoderSettings] = []

    def factory() -> DecoderSettings:
        settings = DecoderSettings(punch_depth=2.0)
        calls.append(settings)
        return settings

    registry = DecoderRegistry(decoders=dict(DEFAULT_DECODERS), settings_factory=factory)

    assert registry.get_settings() is registry.get_settings()
    assert len(calls) == 1
    assert registry.decode("PU", ["1", "2"]).depth == 2.0


def test_explicit_settings_are_used_without_loading() -> None:
    settings = DecoderSettings(marking_height=25.0)

    registry = create_default_registry(settings)

    assert registry.get_settings() is settings


def test_registries_are_independent() -> None:
    first = create_default_registry()
    second = create_default_registry()
    first.register("XX", DEFAULT_DECODERS["PU"])

    assert "XX" in first
    assert "XX" not in second
