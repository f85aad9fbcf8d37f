"""Validation of machining operations (SC, BO, PU, SI)."""
from __future__ import annotations

import math
from collections import defaultdict
from typing import Sequence

from dstv_blocks.blocks.cut import CUT_KINDS
from dstv_blocks.blocks.marking import MARKING_METHODS
from dstv_blocks.config import DecoderSettings
from dstv_blocks.features import Cut, Hole, Marking, Point2D, Punch
from dstv_blocks.fields import LEGACY_FACE_CODES

from .common import check_angle, check_extreme_coordinates, check_face, check_work_plane
from .result import Findings, ValidationResult

MAX_CUT_SIDE = 2000.0
MAX_CUT_DEPTH = 1000.0
CIRCULAR_RATIO = 1.1

MAX_HOLE_DIAMETER = 500.0
MIN_HOLE_DIAMETER = 1.0
LARGE_ROUND_DIAMETER = 200.0
SHALLOW_HOLE_DEPTH = 0.5
DEEP_HOLE_DEPTH = 1000.0
STEEP_HOLE_ANGLE = 45.0
DUPLICATE_DISTANCE = 0.1
HOLE_KINDS = ("round", "slotted", "square", "rectangular")

MAX_PUNCH_DEPTH = 20.0
MAX_PUNCH_DIAMETER = 50.0
MIN_PUNCH_DIAMETER = 0.1
TOOL_NUMBER_RANGE = (1, 999)

MAX_TEXT_LENGTH = 100
MARKING_HEIGHT_RANGE = (1.0, 200.0)
MAX_MARKING_DEPTH = 5.0


def validate_cut(cut: Cut, settings: DecoderSettings) -> ValidationResult:
    findings = Findings()
    if cut.width <= 0 or cut.height <= 0:
        findings.error(f"Cut dimensions must be positive, got {cut.width}x{cut.height}")
    elif cut.width > MAX_CUT_SIDE and cut.height > MAX_CUT_SIDE:
        findings.warn(f"Very large cut {cut.width}x{cut.height}")

    check_angle(findings, cut.angle, 180.0, label="Cut angle")
    if cut.cut_kind not in CUT_KINDS:
        findings.error(f"Unknown cut kind {cut.cut_kind!r}")

    if cut.radius is not None:
        if cut.radius <= 0:
            findings.error(f"Corner radius must be positive, got {cut.radius}")
        elif cut.radius > min(cut.width, cut.height) / 2:
            findings.warn(f"Corner radius {cut.radius} exceeds half the smallest cut side")
    if cut.depth is not None:
        if cut.depth <= 0:
            findings.error(f"Cut depth must be positive, got {cut.depth}")
        elif cut.depth > MAX_CUT_DEPTH:
            findings.warn(f"Very deep cut ({cut.depth})")
    if cut.tool_number is not None:
        low, high = TOOL_NUMBER_RANGE
        if not low <= cut.tool_number <= high:
            findings.warn(f"Tool number {cut.tool_number} outside {low}-{high}")
    if cut.feed_rate is not None and cut.feed_rate <= 0:
        findings.error(f"Feed rate must be positive, got {cut.feed_rate}")

    if cut.cut_kind == "circular" and cut.width > 0 and cut.height > 0:
        ratio = max(cut.width, cut.height) / min(cut.width, cut.height)
        if ratio >= CIRCULAR_RATIO:
            findings.warn(f"Circular cut with unequal sides {cut.width}x{cut.height}")

    check_extreme_coordinates(findings, [Point2D(cut.x, cut.y)], settings.extreme_coordinate, label="Cut")
    check_face(findings, cut.face)
    check_work_plane(findings, cut.work_plane)
    return findings.result(cut)


def _check_hole_kind(findings: Findings, hole: Hole) -> None:
    if hole.hole_kind not in HOLE_KINDS:
        findings.error(f"Unknown hole kind {hole.hole_kind!r}")
    elif hole.hole_kind == "square":
        if not hole.width or hole.width <= 0:
            findings.error("Square hole requires a positive width")
    elif hole.hole_kind == "rectangular":
        if not hole.width or hole.width <= 0 or not hole.height or hole.height <= 0:
            findings.error("Rectangular hole requires positive width and height")
    elif hole.hole_kind == "slotted":
        if not hole.slot_length or hole.slot_length <= 0:
            findings.error("Slotted hole requires a positive slot length")
    elif hole.diameter > LARGE_ROUND_DIAMETER:
        findings.warn(f"Large round hole ({hole.diameter}); consider a contour cut")


def _check_hole(hole: Hole, settings: DecoderSettings) -> Findings:
    findings = Findings()
    if hole.diameter <= 0:
        findings.error(f"Diameter must be positive, got {hole.diameter}")
    elif hole.diameter > MAX_HOLE_DIAMETER:
        findings.warn(f"Very large diameter {hole.diameter}")
    elif hole.diameter < MIN_HOLE_DIAMETER:
        findings.warn(f"Very small diameter {hole.diameter}")

    if hole.depth < 0:
        findings.error(f"Depth cannot be negative, got {hole.depth}")
    elif 0 < hole.depth < SHALLOW_HOLE_DEPTH:
        findings.warn(f"Very shallow blind hole ({hole.depth})")
    elif hole.depth > DEEP_HOLE_DEPTH:
        findings.warn(f"Very deep blind hole ({hole.depth})")

    check_angle(findings, hole.angle, 90.0)
    if hole.angle is not None and abs(hole.angle) > STEEP_HOLE_ANGLE:
        findings.warn(f"Large angle {hole.angle} may be difficult to machine")

    if hole.face_code is not None and hole.face_code not in LEGACY_FACE_CODES:
        findings.error(f"Invalid face code {hole.face_code!r} (must be h/v/u/o)")
    check_face(findings, hole.face)
    check_work_plane(findings, hole.work_plane)
    check_extreme_coordinates(findings, [Point2D(hole.x, hole.y)], settings.extreme_coordinate, label="Hole")
    _check_hole_kind(findings, hole)
    return findings


def _check_hole_conflicts(findings: Findings, holes: Sequence[Hole], margin: float) -> None:
    by_face: dict[str | None, list[tuple[int, Hole]]] = defaultdict(list)
    for index, hole in enumerate(holes, start=1):
        by_face[hole.face_code or hole.face].append((index, hole))

    for face, members in by_face.items():
        for offset, (first_index, first) in enumerate(members):
            for second_index, second in members[offset + 1 :]:
                distance = math.hypot(first.x - second.x, first.y - second.y)
                if distance < DUPLICATE_DISTANCE and first.diameter == second.diameter:
                    findings.error(f"Holes {first_index} and {second_index} are duplicates on face {face}")
                elif distance < (first.diameter + second.diameter) / 2 + margin:
                    findings.warn(
                        f"Holes {first_index} and {second_index} are too close ({distance:.2f}) on face {face}"
                    )


def validate_holes(holes: Sequence[Hole], settings: DecoderSettings) -> ValidationResult:
    findings = Findings()
    if not holes:
        findings.warn("Hole block contains no holes")
    for index, hole in enumerate(holes, start=1):
        findings.extend(_check_hole(hole, settings), prefix=f"Hole {index}: ")
    _check_hole_conflicts(findings, holes, settings.hole_proximity_margin)
    if len(holes) > settings.max_hole_count:
        findings.warn(f"Very high hole count ({len(holes)})")
    return findings.result(list(holes))


def validate_hole(hole: Hole, settings: DecoderSettings) -> ValidationResult:
    result = validate_holes([hole], settings)
    return Findings(list(result.errors), list(result.warnings)).result(hole)


def validate_punch(punch: Punch, settings: DecoderSettings) -> ValidationResult:
    findings = Findings()
    if punch.depth <= 0:
        findings.error(f"Punch depth must be positive, got {punch.depth}")
    elif punch.depth > MAX_PUNCH_DEPTH:
        findings.warn(f"Very deep punch mark ({punch.depth})")
    if punch.diameter <= 0:
        findings.error(f"Punch diameter must be positive, got {punch.diameter}")
    elif punch.diameter > MAX_PUNCH_DIAMETER or punch.diameter < MIN_PUNCH_DIAMETER:
        findings.warn(f"Unusual punch diameter {punch.diameter}")
    if punch.depth > 0 and punch.diameter > 10 * punch.depth:
        findings.warn(f"Punch diameter {punch.diameter} is large relative to depth {punch.depth}")

    check_angle(findings, punch.angle, 90.0, label="Punch angle")
    if punch.tool_number is not None:
        low, high = TOOL_NUMBER_RANGE
        if not low <= punch.tool_number <= high:
            findings.warn(f"Tool number {punch.tool_number} outside {low}-{high}")
    check_work_plane(findings, punch.work_plane)
    check_extreme_coordinates(findings, [Point2D(punch.x, punch.y)], settings.extreme_coordinate, label="Punch")
    return findings.result(punch)


def validate_marking(marking: Marking, settings: DecoderSettings) -> ValidationResult:
    findings = Findings()
    if not marking.text.strip():
        findings.error("Marking text is required")
    elif len(marking.text) > MAX_TEXT_LENGTH:
        findings.warn(f"Long marking text ({len(marking.text)} characters)")
    if not marking.text.isascii():
        findings.warn("Marking text contains non-ASCII characters")

    low, high = MARKING_HEIGHT_RANGE
    if marking.height <= 0:
        findings.error(f"Text height must be positive, got {marking.height}")
    elif not low <= marking.height <= high:
        findings.warn(f"Unusual text height {marking.height}")
    if marking.depth <= 0:
        findings.error(f"Marking depth must be positive, got {marking.depth}")
    elif marking.depth > MAX_MARKING_DEPTH:
        findings.warn(f"Deep marking ({marking.depth})")

    check_angle(findings, marking.angle, 360.0, label="Marking angle")
    if marking.method not in MARKING_METHODS:
        findings.error(f"Unknown marking method {marking.method!r}")
    check_face(findings, marking.face)
    check_work_plane(findings, marking.work_plane)
    check_extreme_coordinates(
        findings, [Point2D(marking.x, marking.y)], settings.extreme_coordinate, label="Marking"
    )
    return findings.result(marking)


__all__ = [
    "HOLE_KINDS",
    "validate_cut",
    "validate_hole",
    "validate_holes",
    "validate_marking",
    "validate_punch",
]
