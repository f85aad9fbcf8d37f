"""Shared helpers for reading tokenized block fields."""
from __future__ import annotations

import re
from typing import Any, Sequence

LEGACY_FACE_CODES = ("v", "o", "u", "h")

# Canonical legacy face letter to logical profile face.
FACE_NAMES = {
    "v": "web",
    "o": "top_flange",
    "u": "bottom_flange",
    "h": "back",
}

# Compound codes only observed in arc-contour blocks.
COMPOUND_FACE_NAMES = {
    "s": "back",
    "vo": "web_top",
    "vu": "web_bottom",
    "ho": "back_top",
    "hu": "back_bottom",
}

DEFAULT_WORK_PLANE = "E0"

WORK_PLANE_RE = re.compile(r"^E[0-9]$")
FACE_PREFIX_RE = re.compile(r"^[hvuo]", re.IGNORECASE)
NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_NUMERIC_TOKEN_RE = re.compile(r"^[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?$")


def to_float(value: Any) -> float | None:
    """Best-effort conversion of ``value`` to a float."""

    if value is None:
        return None

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None

    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def to_int(value: Any) -> int | None:
    """Best-effort conversion of ``value`` to an integer via rounding."""

    numeric = to_float(value)
    if numeric is None:
        return None
    return int(round(numeric))


def is_numeric(token: str | None) -> bool:
    """Return ``True`` when ``token`` is a plain decimal number."""

    if token is None:
        return False
    return bool(_NUMERIC_TOKEN_RE.match(token.strip()))


def strip_face_affixes(token: str) -> str:
    """Remove a leading face letter and a trailing ``u`` suffix from ``token``.

    Legacy writers emit values such as ``v1857.15`` or ``163.20u``; both
    collapse to the bare number.
    """

    text = token.strip()
    if len(text) > 1 and text[0].lower() in LEGACY_FACE_CODES and not is_numeric(text):
        candidate = text[1:].strip()
        if candidate and (candidate[0].isdigit() or candidate[0] in "+-."):
            text = candidate
    if len(text) > 1 and text[-1] in "uU":
        text = text[:-1]
    return text.strip()


def parse_number(token: str | None) -> float | None:
    """Return the numeric value of a field, tolerating legacy face affixes."""

    if token is None:
        return None
    value = to_float(token)
    if value is not None:
        return value
    return to_float(strip_face_affixes(token))


def extract_numbers(token: str) -> list[float]:
    """Return every decimal number embedded in ``token`` in order of appearance."""

    return [float(match) for match in NUMBER_RE.findall(token)]


def field_at(fields: Sequence[str], index: int, default: str = "") -> str:
    """Return ``fields[index]`` stripped, or ``default`` when out of range."""

    if 0 <= index < len(fields):
        return str(fields[index]).strip()
    return default


def number_at(fields: Sequence[str], index: int) -> float | None:
    """Return the number stored at ``index`` or ``None`` when absent or not numeric."""

    if 0 <= index < len(fields):
        return parse_number(fields[index])
    return None


def is_work_plane(token: str | None) -> bool:
    return token is not None and bool(WORK_PLANE_RE.match(token.strip()))


def is_face_code(token: str | None) -> bool:
    """Return ``True`` for a lone single-letter legacy face token."""

    if token is None:
        return False
    return token.strip().lower() in LEGACY_FACE_CODES


def has_face_prefix(token: str | None) -> bool:
    """Return ``True`` when ``token`` starts with a face letter and carries a digit."""

    if not token:
        return False
    text = token.strip()
    return bool(FACE_PREFIX_RE.match(text)) and any(ch.isdigit() for ch in text)


def face_name(code: str | None) -> str | None:
    """Map a legacy face code to its logical face name."""

    if not code:
        return None
    key = code.strip().lower()
    return FACE_NAMES.get(key) or COMPOUND_FACE_NAMES.get(key)


def face_letter(token: str | None) -> str | None:
    """Return the leading legacy face letter of ``token`` if it has one."""

    if not token:
        return None
    text = token.strip()
    if text and text[0].lower() in LEGACY_FACE_CODES:
        return text[0].lower()
    return None


__all__ = [
    "COMPOUND_FACE_NAMES",
    "DEFAULT_WORK_PLANE",
    "FACE_NAMES",
    "FACE_PREFIX_RE",
    "LEGACY_FACE_CODES",
    "WORK_PLANE_RE",
    "extract_numbers",
    "face_letter",
    "face_name",
    "field_at",
    "has_face_prefix",
    "is_face_code",
    "is_numeric",
    "is_work_plane",
    "number_at",
    "parse_number",
    "strip_face_affixes",
    "to_float",
    "to_int",
]
