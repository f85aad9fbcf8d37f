"""Planar analysis helpers shared by the contour-bearing decoders."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from dstv_blocks.features import Bounds, Point2D

logger = logging.getLogger(__name__)

CLOSURE_TOLERANCE = 0.01
AXIS_TOLERANCE = 0.01
CIRCLE_MIN_POINTS = 12
CIRCLE_DEVIATION_RATIO = 0.05
OVAL_ASPECT_RANGE = (1.2, 3.0)

RECTANGULAR = "rectangular"
CIRCULAR = "circular"
OVAL = "oval"
IRREGULAR = "irregular"

COUNTER_CLOCKWISE = "counter_clockwise"
CLOCKWISE = "clockwise"
DEGENERATE = "degenerate"


def _as_array(points: Sequence[Point2D]) -> np.ndarray:
    if not points:
        return np.zeros((0, 2), dtype=float)
    return np.array([(p.x, p.y) for p in points], dtype=float)


def is_closed(points: Sequence[Point2D], tolerance: float = CLOSURE_TOLERANCE) -> bool:
    """Return ``True`` when the first and last point coincide within ``tolerance``."""

    if len(points) < 2:
        return False
    first, last = points[0], points[-1]
    return abs(first.x - last.x) < tolerance and abs(first.y - last.y) < tolerance


def signed_area(points: Sequence[Point2D]) -> float:
    """Shoelace area, positive for counter-clockwise in a y-up frame."""

    coords = _as_array(points)
    if len(coords) < 3:
        return 0.0
    x = coords[:, 0]
    y = coords[:, 1]
    return float(0.5 * np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))


def area(points: Sequence[Point2D]) -> float:
    return abs(signed_area(points))


def orientation_sum(points: Sequence[Point2D]) -> float:
    """Return ``sum((x[i+1] - x[i]) * (y[i+1] + y[i]))`` over the wrapped polygon.

    The exchange format treats a positive sum as the counter-clockwise
    orientation expected for an external contour.
    """

    coords = _as_array(points)
    if len(coords) < 3:
        return 0.0
    x = coords[:, 0]
    y = coords[:, 1]
    nx = np.roll(x, -1)
    ny = np.roll(y, -1)
    return float(np.sum((nx - x) * (ny + y)))


def orientation(points: Sequence[Point2D]) -> str:
    total = orientation_sum(points)
    if total > 0:
        return COUNTER_CLOCKWISE
    if total < 0:
        return CLOCKWISE
    return DEGENERATE


def centroid(points: Sequence[Point2D]) -> Point2D:
    """Arithmetic mean of the vertices."""

    coords = _as_array(points)
    if not len(coords):
        return Point2D(0.0, 0.0)
    mean = coords.mean(axis=0)
    return Point2D(float(mean[0]), float(mean[1]))


def bounds(points: Sequence[Point2D]) -> Bounds:
    return Bounds.from_points(points)


def perimeter(points: Sequence[Point2D]) -> float:
    """Length of the open polyline through ``points``."""

    coords = _as_array(points)
    if len(coords) < 2:
        return 0.0
    return float(np.sum(np.hypot(*np.diff(coords, axis=0).T)))


def _is_rectangular(points: Sequence[Point2D], tolerance: float) -> bool:
    count = len(points)
    if count not in (4, 5):
        return False
    if count == 5 and not is_closed(points, tolerance):
        return False

    coords = _as_array(points)
    deltas = np.abs(np.roll(coords, -1, axis=0) - coords)
    horizontal = deltas[:, 1] < tolerance
    vertical = deltas[:, 0] < tolerance
    return bool(np.all(horizontal | vertical))


def _is_circular(points: Sequence[Point2D]) -> bool:
    if len(points) < CIRCLE_MIN_POINTS:
        return False
    coords = _as_array(points)
    distances = np.hypot(*(coords - coords.mean(axis=0)).T)
    mean = float(distances.mean())
    if mean <= 0:
        return False
    return float(distances.std()) < CIRCLE_DEVIATION_RATIO * mean


def _is_oval(points: Sequence[Point2D]) -> bool:
    if len(points) < CIRCLE_MIN_POINTS:
        return False
    box = bounds(points)
    short = min(box.width, box.height)
    if short <= 0:
        return False
    ratio = max(box.width, box.height) / short
    low, high = OVAL_ASPECT_RANGE
    return low < ratio < high


def classify_shape(points: Sequence[Point2D], tolerance: float = AXIS_TOLERANCE) -> str:
    """Classify a contour as rectangular, circular, oval or irregular."""

    if _is_rectangular(points, tolerance):
        return RECTANGULAR
    if _is_circular(points):
        return CIRCULAR
    if _is_oval(points):
        return OVAL
    return IRREGULAR


def duplicate_points(points: Sequence[Point2D], *, precision: int = 2) -> list[int]:
    """Return indices of intermediate points repeating an earlier vertex.

    The closing point is excluded since it legitimately repeats the first.
    """

    seen: set[tuple[float, float]] = set()
    duplicates: list[int] = []
    for index, point in enumerate(points[:-1]):
        key = (round(point.x, precision), round(point.y, precision))
        if key in seen:
            duplicates.append(index)
        else:
            seen.add(key)
    return duplicates


@dataclass(frozen=True)
class ContourAnalysis:
    closed: bool
    shape: str
    area: float
    signed_area: float
    orientation: str
    bounds: Bounds
    centroid: Point2D
    perimeter: float


def analyze_contour(
    points: Sequence[Point2D],
    *,
    closure_tolerance: float = CLOSURE_TOLERANCE,
    axis_tolerance: float = AXIS_TOLERANCE,
) -> ContourAnalysis:
    """Run every contour measurement once and bundle the results."""

    shoelace = signed_area(points)
    analysis = ContourAnalysis(
        closed=is_closed(points, closure_tolerance),
        shape=classify_shape(points, axis_tolerance),
        area=abs(shoelace),
        signed_area=shoelace,
        orientation=orientation(points),
        bounds=bounds(points),
        centroid=centroid(points),
        perimeter=perimeter(points),
    )
    logger.debug(
        "Analyzed %d-point contour: shape=%s area=%.3f closed=%s",
        len(points),
        analysis.shape,
        analysis.area,
        analysis.closed,
    )
    return analysis


__all__ = [
    "CIRCULAR",
    "CLOCKWISE",
    "COUNTER_CLOCKWISE",
    "ContourAnalysis",
    "DEGENERATE",
    "IRREGULAR",
    "OVAL",
    "RECTANGULAR",
    "analyze_contour",
    "area",
    "bounds",
    "centroid",
    "classify_shape",
    "duplicate_points",
    "is_closed",
    "orientation",
    "orientation_sum",
    "perimeter",
    "signed_area",
]
