from __future__ import annotations

import pytest

from dstv_blocks import config
from dstv_blocks.config import DecoderSettings
from dstv_blocks.features import Point2D, ProfileContext
from dstv_blocks.registry import DecoderRegistry, create_default_registry


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(config.SETTINGS_ENV_VAR, raising=False)
    monkeypatch.delenv(config.DERIVE_CUT_REGIONS_ENV_VAR, raising=False)
    monkeypatch.setattr(config, "_SETTINGS_CACHE", None)


@pytest.fixture
def settings() -> DecoderSettings:
    return DecoderSettings()


@pytest.fixture
def hea_context() -> ProfileContext:
    return ProfileContext(length=6000.0, height=190.0, width=200.0, web_thickness=6.5, flange_thickness=10.0)


@pytest.fixture
def registry(settings: DecoderSettings) -> DecoderRegistry:
    return create_default_registry(settings)


@pytest.fixture
def rectangle() -> tuple[Point2D, ...]:
    return (
        Point2D(0.0, 0.0),
        Point2D(10.0, 0.0),
        Point2D(10.0, 5.0),
        Point2D(0.0, 5.0),
        Point2D(0.0, 0.0),
    )
