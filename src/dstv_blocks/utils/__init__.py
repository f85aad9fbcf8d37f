"""Small text helpers shared by the diagnostic output."""
from __future__ import annotations

ELLIPSIS = "…"


def ellipsize(text: object, width: int) -> str:
    """Clamp ``text`` to ``width`` characters using a single ellipsis if needed."""

    if width <= 0:
        return ""
    clean = text if isinstance(text, str) else str(text)
    if len(clean) <= width:
        return clean
    if width == 1:
        return ELLIPSIS
    return f"{clean[: width - 1]}{ELLIPSIS}"


__all__ = ["ELLIPSIS", "ellipsize"]
