"""
SISFO exception hierarchy.

Engines raise these typed errors; the HTTP boundary is the only layer that
turns them into status codes (see ``SISFO.api.envelope``). Every error carries
a machine-readable ``error_code``, the HTTP ``status_code`` it maps to and
optional ``details`` (field-keyed dict for validation, list for conflicts).
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class SISFOError(Exception):
    """Base class for all errors surfaced by the academic core."""

    error_code: str = "5001"
    status_code: int = 500

    def __init__(
        self,
        message: str,
        details: Any = None,
        error_code: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details
        if error_code is not None:
            self.error_code = error_code
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


# ---- 400 ---------------------------------------------------------------------

class ValidationError(SISFOError):
    """Entity failed validation; ``details`` maps field name -> message."""

    error_code = "4001"
    status_code = 400

    def __init__(self, errors: Dict[str, str], message: str = "validation error") -> None:
        super().__init__(message, details=dict(errors))
        self.errors = dict(errors)


class InvalidIdentifierError(SISFOError):
    error_code = "4001"
    status_code = 400

    def __init__(self, field: str, value: Any = None) -> None:
        super().__init__(f"Invalid {field}", details={field: f"{value!r} is not a valid identifier"})
        self.field = field


class DependencyMissingError(SISFOError):
    error_code = "4002"
    status_code = 400


class TemplateEmptyError(DependencyMissingError):
    error_code = "TEMPLATE_EMPTY"

    def __init__(self, template_id: Any) -> None:
        super().__init__(
            f"schedule template {template_id} has no items",
            details={"template_id": str(template_id)},
        )


class MissingTeacherForSubjectError(DependencyMissingError):
    error_code = "MISSING_TEACHER_FOR_SUBJECT"

    def __init__(self, subject_id: Any) -> None:
        super().__init__(
            f"no teacher assigned for subject {subject_id}",
            details={"subject_id": str(subject_id)},
        )
        self.subject_id = subject_id


# ---- 404 ---------------------------------------------------------------------

class NotFoundError(SISFOError):
    error_code = "4004"
    status_code = 404

    def __init__(self, entity: str, entity_id: Any = None) -> None:
        msg = f"{entity} not found" if entity_id is None else f"{entity} {entity_id} not found"
        super().__init__(msg, details={"entity": entity, "id": None if entity_id is None else str(entity_id)})
        self.entity = entity
        self.entity_id = entity_id


# ---- 409 ---------------------------------------------------------------------

class ConflictError(SISFOError):
    error_code = "4009"
    status_code = 409


class ScheduleConflictError(ConflictError):
    error_code = "SCHEDULE_CONFLICT"

    def __init__(self, conflicts: list[dict[str, Any]], message: Optional[str] = None) -> None:
        super().__init__(
            message or "schedule conflict detected: overlapping with existing schedule",
            details={"conflicts": conflicts},
        )
        self.conflicts = conflicts


class DuplicateClassSubjectError(ConflictError):
    error_code = "DUPLICATE_CLASS_SUBJECT"

    def __init__(self, class_id: Any, subject_id: Any) -> None:
        super().__init__(
            "class subject conflict: subject already assigned to class",
            details={"class_id": str(class_id), "subject_id": str(subject_id)},
        )


class CapacityExceededError(ConflictError):
    error_code = "CAPACITY_EXCEEDED"

    def __init__(self, class_id: Any, capacity: int, requested: int) -> None:
        super().__init__(
            "enrollment conflict: class capacity exceeded",
            details={"class_id": str(class_id), "capacity": capacity, "requested": requested},
        )


class AlreadyPublishedError(ConflictError):
    error_code = "ALREADY_PUBLISHED"

    def __init__(self, report_card_id: Any) -> None:
        super().__init__(
            "report card already published",
            details={"report_card_id": str(report_card_id)},
        )


# ---- 5xx ---------------------------------------------------------------------

class StorageError(SISFOError):
    error_code = "5001"
    status_code = 500


class DeadlineExceededError(SISFOError):
    error_code = "6002"
    status_code = 504

    def __init__(self, operation: str, timeout: float) -> None:
        super().__init__(
            f"{operation} exceeded deadline of {timeout:g}s",
            details={"operation": operation, "timeout_seconds": timeout},
        )


__all__ = [
    "SISFOError",
    "ValidationError",
    "InvalidIdentifierError",
    "DependencyMissingError",
    "TemplateEmptyError",
    "MissingTeacherForSubjectError",
    "NotFoundError",
    "ConflictError",
    "ScheduleConflictError",
    "DuplicateClassSubjectError",
    "CapacityExceededError",
    "AlreadyPublishedError",
    "StorageError",
    "DeadlineExceededError",
]
