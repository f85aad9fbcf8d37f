"""Planar geometry used by the contour-bearing decoders."""
from __future__ import annotations

from .contour import (
    CIRCULAR,
    IRREGULAR,
    OVAL,
    RECTANGULAR,
    ContourAnalysis,
    analyze_contour,
    area,
    classify_shape,
    is_closed,
    orientation,
    orientation_sum,
    signed_area,
)
from .cut_regions import derive_cut_regions

__all__ = [
    "CIRCULAR",
    "IRREGULAR",
    "OVAL",
    "RECTANGULAR",
    "ContourAnalysis",
    "analyze_contour",
    "area",
    "classify_shape",
    "derive_cut_regions",
    "is_closed",
    "orientation",
    "orientation_sum",
    "signed_area",
]
