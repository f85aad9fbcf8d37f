"""Validation of the header (ST) and end (EN) records."""
from __future__ import annotations

from dstv_blocks.blocks.header import UNKNOWN_KIND
from dstv_blocks.config import DecoderSettings
from dstv_blocks.features import EndMarker, ProfileHeader

from .result import Findings, ValidationResult

MAX_LENGTH = 50000.0
MAX_SECTION = 2000.0


def validate_header(header: ProfileHeader, settings: DecoderSettings) -> ValidationResult:
    findings = Findings()
    if not (header.order_number or header.drawing_number or header.piece_number):
        findings.error("Header requires an order, drawing or piece number")
    if not header.profile_name:
        findings.error("Profile name is required")
    if header.quantity <= 0:
        findings.error(f"Quantity must be positive, got {header.quantity}")

    dimensions = {
        "length": header.length,
        "height": header.height,
        "width": header.width,
        "web thickness": header.web_thickness,
        "flange thickness": header.flange_thickness,
        "weight": header.weight,
    }
    for name, value in dimensions.items():
        if value < 0:
            findings.error(f"Profile {name} cannot be negative, got {value}")

    if header.length > MAX_LENGTH:
        findings.warn(f"Very long profile ({header.length})")
    if header.height > MAX_SECTION or header.width > MAX_SECTION:
        findings.warn(f"Unusually large section {header.height}x{header.width}")
    if header.profile_kind == UNKNOWN_KIND:
        findings.warn(f"Unknown profile kind for {header.profile_name!r}")
    return findings.result(header)


def validate_end(marker: EndMarker, settings: DecoderSettings) -> ValidationResult:
    findings = Findings()
    counts = {
        "record count": marker.record_count,
        "error count": marker.error_count,
        "warning count": marker.warning_count,
    }
    for name, value in counts.items():
        if value is not None and value < 0:
            findings.error(f"End marker {name} cannot be negative, got {value}")
    if marker.processing_time is not None and marker.processing_time < 0:
        findings.warn(f"Negative processing time {marker.processing_time}")
    return findings.result(marker)


__all__ = ["validate_end", "validate_header"]
