"""Configuration helpers for the block decoders."""
from __future__ import annotations

import copy
import json
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

from dstv_blocks.fields import to_float

logger = logging.getLogger(__name__)

RESOURCE_DIR = Path(__file__).resolve().parent / "resources"
SETTINGS_ENV_VAR = "DSTV_BLOCKS_SETTINGS"
DERIVE_CUT_REGIONS_ENV_VAR = "DSTV_DERIVE_CUT_REGIONS"
_SETTINGS_CACHE: dict[str, Any] | None = None


def _env_flag(name: str, *, default: bool = False) -> bool:
    """Return a boolean from the environment with tolerant parsing."""

    raw = os.getenv(name)
    if raw is None:
        return default

    flag = _parse_flag(raw)
    return default if flag is None else flag


def _parse_flag(raw: str) -> bool | None:
    normalized = raw.strip().lower()
    if not normalized:
        return None

    truthy = {"1", "true", "yes", "on"}
    falsy = {"0", "false", "no", "off"}

    if normalized in truthy:
        return True
    if normalized in falsy:
        return False

    try:
        return bool(int(normalized))
    except ValueError:
        return None


class ConfigError(RuntimeError):
    """Raised when configuration data cannot be loaded or validated."""


def _load_json_mapping(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Malformed JSON in {path.name}: {exc}") from exc

    if not isinstance(raw, Mapping):
        raise ConfigError(f"Configuration root must be an object in {path.name}")

    return dict(raw)


def _merge_mappings(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    for key, value in override.items():
        if key in base and isinstance(base[key], Mapping) and isinstance(value, Mapping):
            base[key] = _merge_mappings(dict(base[key]), value)
        else:
            base[key] = value
    return base


def _load_settings_raw() -> dict[str, Any]:
    base = _load_json_mapping(RESOURCE_DIR / "decoder_settings.json")

    override_raw = os.getenv(SETTINGS_ENV_VAR)
    if override_raw:
        override_path = Path(override_raw).expanduser()
        if override_path.exists():
            try:
                override = _load_json_mapping(override_path)
            except ConfigError as exc:
                raise ConfigError(f"Failed to load override settings: {exc}") from exc
            base = _merge_mappings(base, override)
        else:
            logger.warning("Override settings path does not exist: %s", override_path)

    return base


def load_raw_settings(*, reload: bool = False) -> dict[str, Any]:
    """Return the merged settings mapping, applying an optional override file."""

    global _SETTINGS_CACHE
    if reload or _SETTINGS_CACHE is None:
        _SETTINGS_CACHE = _load_settings_raw()

    return copy.deepcopy(_SETTINGS_CACHE)


@dataclass(frozen=True)
class DecoderSettings:
    """Tunables shared by the decoders, the analyzer and the validators."""

    closure_tolerance: float = 0.01
    axis_tolerance: float = 0.01
    derive_cut_regions: bool = False
    default_length: float = 2000.0
    default_height: float = 300.0
    default_width: float = 150.0
    default_web_thickness: float = 8.0
    default_flange_thickness: float = 10.0
    cut_depth_margin: float = 1.2
    fallback_cut_depth: float = 12.0
    edge_tolerance: float = 1.0
    work_plane: str = "E0"
    hole_depth: float = 0.0
    punch_depth: float = 0.5
    punch_diameter: float = 3.0
    marking_height: float = 10.0
    marking_depth: float = 0.1
    inner_contour_depth: float = 10.0
    hole_proximity_margin: float = 5.0
    max_hole_count: int = 1000
    extreme_coordinate: float = 50000.0

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "DecoderSettings":
        def _section(name: str) -> Mapping[str, Any]:
            section = raw.get(name, {})
            if not isinstance(section, Mapping):
                raise ConfigError(f"'{name}' section must be an object")
            return section

        geometry = _section("geometry")
        regions = _section("cut_regions")
        defaults = _section("defaults")
        validation = _section("validation")
        base = cls()

        def _flag(section: Mapping[str, Any], key: str, fallback: bool) -> bool:
            if key not in section:
                return fallback
            value = section[key]
            if isinstance(value, bool):
                return value
            if isinstance(value, int):
                return bool(value)
            flag = _parse_flag(value) if isinstance(value, str) else None
            if flag is None:
                raise ConfigError(f"Setting '{key}' must be a boolean, got {value!r}")
            return flag

        def _num(section: Mapping[str, Any], key: str, fallback: float) -> float:
            if key not in section:
                return fallback
            value = to_float(section[key])
            if value is None:
                raise ConfigError(f"Setting '{key}' must be numeric, got {section[key]!r}")
            return value

        return cls(
            closure_tolerance=_num(geometry, "closure_tolerance", base.closure_tolerance),
            axis_tolerance=_num(geometry, "axis_tolerance", base.axis_tolerance),
            derive_cut_regions=_flag(regions, "enabled", base.derive_cut_regions),
            default_length=_num(regions, "default_length", base.default_length),
            default_height=_num(regions, "default_height", base.default_height),
            default_width=_num(regions, "default_width", base.default_width),
            default_web_thickness=_num(regions, "default_web_thickness", base.default_web_thickness),
            default_flange_thickness=_num(
                regions, "default_flange_thickness", base.default_flange_thickness
            ),
            cut_depth_margin=_num(regions, "depth_margin", base.cut_depth_margin),
            fallback_cut_depth=_num(regions, "fallback_depth", base.fallback_cut_depth),
            edge_tolerance=_num(regions, "edge_tolerance", base.edge_tolerance),
            work_plane=str(defaults.get("work_plane", base.work_plane)),
            hole_depth=_num(defaults, "hole_depth", base.hole_depth),
            punch_depth=_num(defaults, "punch_depth", base.punch_depth),
            punch_diameter=_num(defaults, "punch_diameter", base.punch_diameter),
            marking_height=_num(defaults, "marking_height", base.marking_height),
            marking_depth=_num(defaults, "marking_depth", base.marking_depth),
            inner_contour_depth=_num(defaults, "inner_contour_depth", base.inner_contour_depth),
            hole_proximity_margin=_num(
                validation, "hole_proximity_margin", base.hole_proximity_margin
            ),
            max_hole_count=int(_num(validation, "max_hole_count", base.max_hole_count)),
            extreme_coordinate=_num(validation, "extreme_coordinate", base.extreme_coordinate),
        )


def load_decoder_settings(*, reload: bool = False) -> DecoderSettings:
    """Return decoder settings from the packaged JSON, overrides and environment."""

    settings = DecoderSettings.from_mapping(load_raw_settings(reload=reload))
    enabled = _env_flag(DERIVE_CUT_REGIONS_ENV_VAR, default=settings.derive_cut_regions)
    if enabled != settings.derive_cut_regions:
        logger.debug("Cut-region derivation overridden by environment: %s", enabled)
        settings = replace(settings, derive_cut_regions=enabled)
    return settings


def describe_settings(settings: DecoderSettings | None = None) -> dict[str, str]:
    """Return a flat string snapshot of the active settings for diagnostics."""

    active = settings if settings is not None else load_decoder_settings()
    info = {f.name: str(getattr(active, f.name)) for f in fields(active)}
    info["settings_override"] = os.getenv(SETTINGS_ENV_VAR) or ""
    return info


__all__ = [
    "ConfigError",
    "DecoderSettings",
    "RESOURCE_DIR",
    "describe_settings",
    "load_decoder_settings",
    "load_raw_settings",
]
