# src/SISFO/domain/enums.py
from __future__ import annotations

from enum import Enum


class SemesterType(str, Enum):
    ODD = "odd"
    EVEN = "even"


class PersonStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    GRADUATED = "graduated"
    TRANSFERRED = "transferred"


class EnrollmentStatus(str, Enum):
    ACTIVE = "active"
    DROPPED = "dropped"
    MOVED = "moved"


class GradeStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    FINAL = "final"


class ReportCardStatus(str, Enum):
    DRAFT = "draft"
    GENERATED = "generated"
    PUBLISHED = "published"

    def can_transition_to(self, target: "ReportCardStatus") -> bool:
        order = [ReportCardStatus.DRAFT, ReportCardStatus.GENERATED, ReportCardStatus.PUBLISHED]
        if self is ReportCardStatus.PUBLISHED:
            return False
        # Regeneration keeps a generated card generated.
        return order.index(target) >= order.index(self)


__all__ = ["SemesterType", "PersonStatus", "EnrollmentStatus", "GradeStatus", "ReportCardStatus"]
