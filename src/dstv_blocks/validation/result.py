"""Validation outcome shared by every block validator."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one block.

    ``data`` holds the best-effort decoded feature (a list of holes for BO
    blocks) even when ``errors`` is not empty, or ``None`` when the block
    could not be decoded at all.
    """

    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    data: Any = None

    @classmethod
    def failed(cls, message: str) -> "ValidationResult":
        return cls(is_valid=False, errors=(message,))


@dataclass(slots=True)
class Findings:
    """Mutable collector the validators append to before freezing a result."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def error(self, message: str) -> None:
        self.errors.append(message)

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def extend(self, other: "Findings", prefix: str = "") -> None:
        self.errors.extend(f"{prefix}{message}" for message in other.errors)
        self.warnings.extend(f"{prefix}{message}" for message in other.warnings)

    def result(self, data: Any = None) -> ValidationResult:
        return ValidationResult(
            is_valid=not self.errors,
            errors=tuple(self.errors),
            warnings=tuple(self.warnings),
            data=data,
        )


__all__ = ["Findings", "ValidationResult"]
