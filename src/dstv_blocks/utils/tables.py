"""ASCII table rendering for the priority report."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from . import ellipsize


@dataclass(frozen=True)
class ColumnSpec:
    """Describe a table column."""

    width: int
    align: str = "L"
    header_align: str | None = None


def _coerce_alignment(value: str) -> str:
    upper = (value or "L").upper()
    if upper not in {"L", "C", "R"}:
        upper = "L"
    return upper


def _pad(text: str, width: int, align: str) -> str:
    truncated = ellipsize(text, width)
    pad = max(width - len(truncated), 0)
    if align == "R":
        return " " * pad + truncated
    if align == "C":
        left = pad // 2
        right = pad - left
        return " " * left + truncated + " " * right
    return truncated + " " * pad


def draw_boxed_table(
    headers: Sequence[str] | None,
    rows: Sequence[Sequence[str]],
    colspecs: Sequence[ColumnSpec],
) -> str:
    """Render a fixed-width ASCII table with ``+``/``|`` borders."""

    if any(spec.width <= 0 for spec in colspecs):
        raise ValueError("column widths must be positive")
    column_count = len(colspecs)
    if headers and len(headers) != column_count:
        raise ValueError("header count must match column specification")
    for row in rows:
        if len(row) != column_count:
            raise ValueError("row does not match column specification")

    horizontal = "+" + "+".join("-" * spec.width for spec in colspecs) + "+"

    def _render_row(cells: Sequence[str], *, header: bool = False) -> str:
        formatted: list[str] = []
        for idx, cell in enumerate(cells):
            spec = colspecs[idx]
            align = spec.header_align if header and spec.header_align else spec.align
            formatted.append(_pad(str(cell), spec.width, _coerce_alignment(align)))
        return "|" + "|".join(formatted) + "|"

    output: list[str] = [horizontal]
    if headers:
        output.append(_render_row(headers, header=True))
        output.append(horizontal)
    for row in rows:
        output.append(_render_row(row))
    output.append(horizontal)
    return "\n".join(output)


def draw_kv_table(
    pairs: Iterable[tuple[str, str]],
    left_width: int,
    right_width: int,
    *,
    left_align: str = "L",
    right_align: str = "R",
) -> str:
    """Two-column key/value table, used for settings snapshots."""

    colspecs = (
        ColumnSpec(left_width, left_align),
        ColumnSpec(right_width, right_align),
    )
    return draw_boxed_table(None, list(pairs), colspecs)


__all__ = ["ColumnSpec", "draw_boxed_table", "draw_kv_table"]
