"""Checks reused by several block validators."""
from __future__ import annotations

from typing import Iterable

from dstv_blocks.features import Point2D
from dstv_blocks.fields import COMPOUND_FACE_NAMES, FACE_NAMES, is_work_plane

from .result import Findings

PROFILE_FACES = frozenset(FACE_NAMES.values())
ARC_FACES = PROFILE_FACES | frozenset(COMPOUND_FACE_NAMES.values())


def check_work_plane(findings: Findings, work_plane: str | None) -> None:
    if work_plane is not None and not is_work_plane(work_plane):
        findings.error(f"Invalid work plane {work_plane!r} (must be E0-E9)")


def check_face(findings: Findings, face: str | None, allowed: frozenset[str] = PROFILE_FACES) -> None:
    if face is not None and face not in allowed:
        findings.error(f"Invalid face {face!r} (expected one of {', '.join(sorted(allowed))})")


def check_extreme_coordinates(
    findings: Findings, points: Iterable[Point2D], limit: float, label: str = "Point"
) -> None:
    for index, point in enumerate(points, start=1):
        if abs(point.x) > limit or abs(point.y) > limit:
            findings.warn(f"{label} {index}: extreme coordinates ({point.x:.1f}, {point.y:.1f})")


def check_angle(findings: Findings, angle: float | None, limit: float, label: str = "Angle") -> None:
    if angle is not None and not -limit <= angle <= limit:
        findings.error(f"{label} {angle} outside valid range [-{limit:g}, {limit:g}]")


__all__ = [
    "ARC_FACES",
    "PROFILE_FACES",
    "check_angle",
    "check_extreme_coordinates",
    "check_face",
    "check_work_plane",
]
