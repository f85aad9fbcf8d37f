"""Validation of the contour-bearing blocks (AK, IK, KA, UE)."""
from __future__ import annotations

import math

from dstv_blocks.blocks.freeform import complex_segment_count, contour_length
from dstv_blocks.blocks.inner_contour import THROUGH_DEPTH
from dstv_blocks.config import DecoderSettings
from dstv_blocks.features import ArcContour, FreeformContour, InnerContour, OuterContour, Point2D
from dstv_blocks.geometry.contour import (
    CIRCULAR,
    CLOCKWISE,
    RECTANGULAR,
    area,
    duplicate_points,
    is_closed,
    orientation,
)

from .common import ARC_FACES, check_extreme_coordinates, check_face, check_work_plane
from .result import Findings, ValidationResult

MIN_CONTOUR_POINTS = 3
DEGENERATE_AREA = 0.1
TINY_AREA = 1.0
RECOMMENDED_BEVEL = (-75.0, -15.0)
MAX_CUTOUT_DEPTH = 1000.0
MAX_ARC_RADIUS = 10000.0
MIN_FREEFORM_POINTS = 2
MAX_BULGE = 10.0
CENTER_TOLERANCE = 0.01
MAX_SPINDLE_SPEED = 30000.0
MAX_FEED_RATE = 50000.0


def _check_closed_polygon(findings: Findings, points: tuple[Point2D, ...], tolerance: float) -> None:
    if len(points) < MIN_CONTOUR_POINTS:
        findings.error(f"Contour requires at least {MIN_CONTOUR_POINTS} points, got {len(points)}")
        return
    if not is_closed(points, tolerance):
        first, last = points[0], points[-1]
        findings.error(
            f"Contour is not closed: first ({first.x}, {first.y}) and last ({last.x}, {last.y}) differ"
        )
    for index in duplicate_points(points):
        findings.warn(f"Duplicate contour point at index {index}")


def validate_outer_contour(contour: OuterContour, settings: DecoderSettings) -> ValidationResult:
    findings = Findings()
    points = contour.points
    _check_closed_polygon(findings, points, settings.closure_tolerance)

    if len(points) >= MIN_CONTOUR_POINTS:
        enclosed = area(points)
        if enclosed < DEGENERATE_AREA:
            findings.error(f"Degenerate contour area {enclosed:.3f}")
        elif enclosed < TINY_AREA:
            findings.warn(f"Very small contour area {enclosed:.3f}")
        if orientation(points) == CLOCKWISE:
            findings.warn("Contour is clockwise; outer contours are expected counter-clockwise")

    check_extreme_coordinates(findings, points, settings.extreme_coordinate)

    low, high = RECOMMENDED_BEVEL
    for angle in contour.bevel_angles:
        findings.warn(f"Welding preparation bevel {angle} degrees")
        if not low <= angle <= high:
            findings.warn(f"Bevel angle {angle} outside recommended range [{low:g}, {high:g}]")

    check_face(findings, contour.face)
    check_work_plane(findings, contour.work_plane)
    return findings.result(contour)


def validate_inner_contour(contour: InnerContour, settings: DecoderSettings) -> ValidationResult:
    findings = Findings()
    points = contour.points
    _check_closed_polygon(findings, points, settings.closure_tolerance)

    if contour.depth <= 0 and contour.depth != THROUGH_DEPTH:
        findings.error(f"Cutout depth must be positive or {THROUGH_DEPTH:g} (through), got {contour.depth}")
    elif contour.depth > MAX_CUTOUT_DEPTH:
        findings.warn(f"Very deep cutout ({contour.depth})")

    if contour.contour_kind == RECTANGULAR and len(points) > 6:
        findings.warn(f"Rectangular cutout described with {len(points)} points")
    if contour.contour_kind == CIRCULAR and len(points) < 12:
        findings.warn(f"Circular cutout approximated with only {len(points)} points")

    check_extreme_coordinates(findings, points, settings.extreme_coordinate)
    check_face(findings, contour.face)
    return findings.result(contour)


def validate_arc_contour(contour: ArcContour, settings: DecoderSettings) -> ValidationResult:
    findings = Findings()
    if not contour.arcs:
        findings.error("Arc contour contains no arcs")

    for index, arc in enumerate(contour.arcs, start=1):
        if arc.radius <= 0:
            findings.error(f"Arc {index}: radius must be positive, got {arc.radius}")
        elif arc.radius > MAX_ARC_RADIUS:
            findings.warn(f"Arc {index}: very large radius {arc.radius}")
        if arc.start_angle == arc.end_angle:
            findings.warn(f"Arc {index}: start and end angle are identical ({arc.start_angle})")

    centers = [Point2D(arc.center_x, arc.center_y) for arc in contour.arcs]
    check_extreme_coordinates(findings, centers, settings.extreme_coordinate, label="Arc")
    check_face(findings, contour.face, ARC_FACES)
    return findings.result(contour)


def validate_freeform_contour(contour: FreeformContour, settings: DecoderSettings) -> ValidationResult:
    findings = Findings()
    points = contour.points
    if len(points) < MIN_FREEFORM_POINTS:
        findings.error(f"Free-form contour requires at least {MIN_FREEFORM_POINTS} points, got {len(points)}")

    for index, point in enumerate(points, start=1):
        if point.segment_kind == "arc":
            if point.radius is not None and point.radius <= 0:
                findings.error(f"Point {index}: arc radius must be positive")
            if point.bulge is not None and abs(point.bulge) > MAX_BULGE:
                findings.warn(f"Point {index}: unusual bulge value {point.bulge}")
            if point.center is not None and point.radius is not None:
                measured = math.hypot(point.x - point.center.x, point.y - point.center.y)
                if abs(measured - point.radius) > CENTER_TOLERANCE:
                    findings.warn(f"Point {index}: inconsistent arc center/radius definition")
        elif point.segment_kind == "bezier" and not point.control_points:
            findings.warn(f"Point {index}: bezier segment without control points")
        elif point.segment_kind == "spline" and point.tension is not None:
            if not 0 <= point.tension <= 1:
                findings.error(f"Point {index}: spline tension must be between 0 and 1")

    if contour.tolerance is not None:
        if contour.tolerance <= 0:
            findings.error("Tolerance must be positive")
        elif contour.tolerance > 1:
            findings.warn(f"Large tolerance value {contour.tolerance}")
    if contour.feed_rate is not None:
        if contour.feed_rate <= 0:
            findings.warn("Feed rate should be positive")
        elif contour.feed_rate > MAX_FEED_RATE:
            findings.warn(f"Very high feed rate {contour.feed_rate}")
    if contour.spindle_speed is not None:
        if contour.spindle_speed <= 0:
            findings.warn("Spindle speed should be positive")
        elif contour.spindle_speed > MAX_SPINDLE_SPEED:
            findings.warn(f"Very high spindle speed {contour.spindle_speed}")
    check_work_plane(findings, contour.work_plane)

    if len(points) >= MIN_FREEFORM_POINTS:
        length = contour_length(points)
        if length < 1:
            findings.warn("Very short contour")
        elif length > 50000:
            findings.warn("Very long contour")
        if complex_segment_count(points) > len(points) / 2:
            findings.warn("High proportion of complex curve segments")

    check_extreme_coordinates(
        findings, [Point2D(point.x, point.y) for point in points], settings.extreme_coordinate
    )
    return findings.result(contour)


__all__ = [
    "validate_arc_contour",
    "validate_freeform_contour",
    "validate_inner_contour",
    "validate_outer_contour",
]
