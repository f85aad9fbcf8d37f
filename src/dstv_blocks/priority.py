"""Processing order of decoded features.

Solid construction must apply contour-defining operations before cuts, cuts
before holes and holes before surface markings. The manager assigns each
feature a :class:`PriorityClass`, sorts and groups features by it, and checks
an existing sequence for order violations.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Iterable, Mapping, Sequence

from dstv_blocks.utils.tables import ColumnSpec, draw_boxed_table
from dstv_blocks.validation.result import Findings, ValidationResult

logger = logging.getLogger(__name__)


class PriorityClass(IntEnum):
    CONTOUR = 1000
    CUT_WITH_NOTCHES = 900
    BEVEL_CUT = 850
    ANGLE_CUT = 800
    STRAIGHT_CUT = 750
    HOLE = 500
    SLOT = 450
    MARKING = 100
    TEXT = 50
    DEFAULT = 0


TYPE_PRIORITIES: dict[str, PriorityClass] = {
    "contour": PriorityClass.CONTOUR,
    "unrestricted_contour": PriorityClass.CONTOUR,
    "cut_with_notches": PriorityClass.CUT_WITH_NOTCHES,
    "bevel_cut": PriorityClass.BEVEL_CUT,
    "angle_cut": PriorityClass.ANGLE_CUT,
    "straight_cut": PriorityClass.STRAIGHT_CUT,
    "cut": PriorityClass.STRAIGHT_CUT,
    "cutout": PriorityClass.STRAIGHT_CUT,
    "hole": PriorityClass.HOLE,
    "tapped_hole": PriorityClass.HOLE,
    "countersink": PriorityClass.HOLE,
    "counterbore": PriorityClass.HOLE,
    "slot": PriorityClass.SLOT,
    "marking": PriorityClass.MARKING,
    "punch": PriorityClass.MARKING,
    "text": PriorityClass.TEXT,
}

DEFAULT_FACE_KEY = "default"


def feature_type_of(feature: Any) -> str:
    return str(getattr(feature, "feature_type", "") or "")


def block_kind_of(feature: Any) -> str | None:
    kind = getattr(feature, "block_kind", None)
    return kind if isinstance(kind, str) else None


def face_key(feature: Any) -> str:
    """Grouping key for the face a feature is machined on."""

    return getattr(feature, "face_code", None) or getattr(feature, "face", None) or DEFAULT_FACE_KEY


def _pattern_priority(feature_type: str) -> PriorityClass:
    lowered = feature_type.lower()
    if "contour" in lowered:
        return PriorityClass.CONTOUR
    if "cut" in lowered and "notch" in lowered:
        return PriorityClass.CUT_WITH_NOTCHES
    if "hole" in lowered or "drill" in lowered:
        return PriorityClass.HOLE
    if "mark" in lowered or "text" in lowered:
        return PriorityClass.MARKING
    return PriorityClass.DEFAULT


def class_name(priority: int) -> str:
    try:
        return PriorityClass(priority).name
    except ValueError:
        return f"CUSTOM({priority})"


@dataclass(frozen=True)
class PriorityInfo:
    priority: int
    priority_class: str
    block_kind: str | None
    feature_type: str
    requires_csg: bool
    batchable: bool


class FeaturePriorityManager:
    """Assign, sort and check feature processing priorities.

    ``overrides`` maps a block kind tag (``"SI"``, ``"BO"`` ...) to an explicit
    priority that wins over the type table.
    """

    def __init__(self, overrides: Mapping[str, int] | None = None) -> None:
        self._overrides = {kind.strip().upper(): int(value) for kind, value in (overrides or {}).items()}

    @property
    def overrides(self) -> dict[str, int]:
        return dict(self._overrides)

    def priority(self, feature: Any) -> int:
        kind = block_kind_of(feature)
        if kind is not None and kind in self._overrides:
            return self._overrides[kind]
        feature_type = feature_type_of(feature)
        if feature_type in TYPE_PRIORITIES:
            return int(TYPE_PRIORITIES[feature_type])
        return int(_pattern_priority(feature_type))

    def sort_by_priority(self, features: Iterable[Any]) -> list[Any]:
        """Return a new list ordered by descending priority; ties keep input order."""

        return sorted(features, key=self.priority, reverse=True)

    def group_by_priority(self, features: Iterable[Any]) -> dict[int, list[Any]]:
        groups: dict[int, list[Any]] = {}
        for feature in features:
            groups.setdefault(self.priority(feature), []).append(feature)
        return {priority: groups[priority] for priority in sorted(groups, reverse=True)}

    def optimize_order(self, features: Iterable[Any]) -> list[Any]:
        """Sort by priority, then cluster the hole group by face."""

        ordered: list[Any] = []
        for priority, members in self.group_by_priority(features).items():
            if priority != PriorityClass.HOLE:
                ordered.extend(members)
                continue
            by_face: dict[str, list[Any]] = {}
            for feature in members:
                by_face.setdefault(face_key(feature), []).append(feature)
            logger.debug("Clustered %d holes over %d faces", len(members), len(by_face))
            for cluster in by_face.values():
                ordered.extend(cluster)
        return ordered

    def validate_order(self, features: Sequence[Any]) -> ValidationResult:
        findings = Findings()
        for index, feature in enumerate(features):
            priority = self.priority(feature)
            if feature_type_of(feature) == "marking" and priority > PriorityClass.HOLE:
                findings.error(
                    f"Feature {index + 1}: marking has priority {priority} above hole threshold"
                )
            if index == 0:
                continue
            previous = self.priority(features[index - 1])
            if previous < priority:
                logger.debug("Order violation at %d: %d before %d", index, previous, priority)
                findings.warn(
                    f"Feature {index + 1} ({feature_type_of(feature)}, {priority}) follows "
                    f"lower-priority feature {index} ({feature_type_of(features[index - 1])}, {previous})"
                )
        return findings.result()

    def priority_info(self, feature: Any) -> PriorityInfo:
        priority = self.priority(feature)
        return PriorityInfo(
            priority=priority,
            priority_class=class_name(priority),
            block_kind=block_kind_of(feature),
            feature_type=feature_type_of(feature),
            requires_csg=priority >= PriorityClass.HOLE,
            batchable=priority in (PriorityClass.HOLE, PriorityClass.MARKING),
        )

    def report(
        self,
        features: Sequence[Any],
        results: Iterable[ValidationResult] = (),
    ) -> str:
        """Render per-class counts, the feature listing and any findings as text."""

        groups = self.group_by_priority(features)
        rows = [[class_name(priority), str(priority), str(len(members))] for priority, members in groups.items()]
        colspecs = (ColumnSpec(20), ColumnSpec(10, "R", "C"), ColumnSpec(8, "R", "C"))

        lines = [f"Feature priority report ({len(features)} features)"]
        lines.append(draw_boxed_table(["Class", "Priority", "Count"], rows, colspecs))
        lines.append("")
        lines.append("Features:")
        for index, feature in enumerate(features, start=1):
            info = self.priority_info(feature)
            lines.append(
                f"  {index:>3}. {info.feature_type or type(feature).__name__:<22} "
                f"{info.block_kind or '-':<3} {info.priority:>5}"
            )

        findings = Findings()
        order = self.validate_order(features)
        findings.errors.extend(order.errors)
        findings.warnings.extend(order.warnings)
        for result in results:
            findings.errors.extend(result.errors)
            findings.warnings.extend(result.warnings)

        if findings.errors:
            lines.append("")
            lines.append("ERRORS:")
            lines.extend(f"  - {message}" for message in findings.errors)
        if findings.warnings:
            lines.append("")
            lines.append("WARNINGS:")
            lines.extend(f"  - {message}" for message in findings.warnings)
        return "\n".join(lines)


__all__ = [
    "FeaturePriorityManager",
    "PriorityClass",
    "PriorityInfo",
    "TYPE_PRIORITIES",
    "class_name",
    "face_key",
]
