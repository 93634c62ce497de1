"""Domain-level request contracts and error shapes shared by multiple layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


@dataclass(slots=True)
class ActivityInput:
    """Raw activity fields as supplied by a caller; any field may be missing."""

    type: Any = None
    date: datetime | str | None = None
    duration: Any = None
    distance: Any = None
    calories: Any = None


@dataclass(slots=True)
class GoalInput:
    """Raw goal fields as supplied by a caller; any field may be missing."""

    name: str | None = None
    target_metric: Any = None
    target_value: Any = None
    deadline: datetime | str | None = None


@dataclass(frozen=True, slots=True)
class FieldError:
    """A single violated validation rule."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


@dataclass(slots=True)
class ValidationResult:
    """Outcome of validating an input; valid when no errors were collected."""

    errors: list[FieldError] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        """Join every collected error as ``field: message`` separated by commas."""
        return ", ".join(str(error) for error in self.errors)


class InvalidEntityError(ValueError):
    """Raised when an entity factory is handed input that fails validation."""

    def __init__(self, result: ValidationResult) -> None:
        super().__init__(f"Validation failed: {result.summary()}")
        self.errors = list(result.errors)


class ServiceErrorKind(str, Enum):
    validation = "validation"
    storage = "storage"
    not_found = "not_found"


@dataclass(frozen=True, slots=True)
class ServiceError:
    """Error returned by the activity and goal services."""

    kind: ServiceErrorKind
    message: str

    @classmethod
    def validation(cls, result: ValidationResult) -> "ServiceError":
        return cls(ServiceErrorKind.validation, result.summary())

    @classmethod
    def storage(cls, message: str) -> "ServiceError":
        return cls(ServiceErrorKind.storage, message)

    @classmethod
    def not_found(cls, entity: str, entity_id: str) -> "ServiceError":
        return cls(ServiceErrorKind.not_found, f"{entity} with id {entity_id} not found")
