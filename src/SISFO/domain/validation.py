"""
Validation predicates for core entities.

Each ``validate_*`` function collects every problem into a field-keyed dict
and raises a single :class:`SISFO.errors.ValidationError`; callers never see
partial results. Predicates work on ORM instances or anything exposing the
same attribute names.
"""

from __future__ import annotations

import re
from typing import Any, Dict

from SISFO.domain.enums import EnrollmentStatus, GradeStatus
from SISFO.errors import ValidationError

_TIME_RE = re.compile(r"^(?P<h>\d{2}):(?P<m>\d{2})(?::(?P<s>\d{2}))?$")


def normalize_time(value: Any, field: str = "time") -> str:
    """
    Return ``value`` as ``HH:MM:SS``.

    Accepts ``HH:MM`` and ``HH:MM:SS``; anything else raises ValidationError
    keyed by ``field``.
    """
    if not isinstance(value, str) or not value:
        raise ValidationError({field: "is required"})
    m = _TIME_RE.match(value.strip())
    if not m:
        raise ValidationError({field: "must be HH:MM or HH:MM:SS"})
    h, mi, s = int(m["h"]), int(m["m"]), int(m["s"] or 0)
    if h > 23 or mi > 59 or s > 59:
        raise ValidationError({field: "is not a valid time of day"})
    return f"{h:02d}:{mi:02d}:{s:02d}"


def _raise_if(errors: Dict[str, str]) -> None:
    if errors:
        raise ValidationError(errors)


def _blank(v: Any) -> bool:
    return v is None or (isinstance(v, str) and not v.strip())


def _check_tenant(obj: Any, errors: Dict[str, str]) -> None:
    if _blank(getattr(obj, "tenant_id", None)):
        errors["tenant_id"] = "tenant ID is required"


def _check_slot_times(obj: Any, errors: Dict[str, str]) -> None:
    dow = getattr(obj, "day_of_week", None)
    if not isinstance(dow, int) or isinstance(dow, bool) or not 1 <= dow <= 7:
        errors["day_of_week"] = "day of week must be between 1 and 7"
    start = end = None
    for field in ("start_time", "end_time"):
        try:
            value = normalize_time(getattr(obj, field, None), field)
        except ValidationError as exc:
            errors.update(exc.errors)
            continue
        setattr(obj, field, value)
        if field == "start_time":
            start = value
        else:
            end = value
    if start and end and not start < end:
        errors["end_time"] = "end time must be after start time"


# ---- academic calendar -------------------------------------------------------

def validate_academic_year(obj: Any) -> None:
    errors: Dict[str, str] = {}
    _check_tenant(obj, errors)
    if _blank(obj.name):
        errors["name"] = "name is required"
    if obj.start_date is None:
        errors["start_date"] = "start date is required"
    if obj.end_date is None:
        errors["end_date"] = "end date is required"
    if obj.start_date and obj.end_date and not obj.start_date < obj.end_date:
        errors["end_date"] = "start date must be before end date"
    _raise_if(errors)


def validate_semester(obj: Any) -> None:
    errors: Dict[str, str] = {}
    _check_tenant(obj, errors)
    if obj.academic_year_id is None:
        errors["academic_year_id"] = "academic year ID is required"
    if _blank(obj.name):
        errors["name"] = "name is required"
    if obj.start_date is None:
        errors["start_date"] = "start date is required"
    if obj.end_date is None:
        errors["end_date"] = "end date is required"
    if obj.start_date and obj.end_date and not obj.start_date < obj.end_date:
        errors["end_date"] = "start date must be before end date"
    _raise_if(errors)


# ---- master data -------------------------------------------------------------

def validate_subject(obj: Any) -> None:
    errors: Dict[str, str] = {}
    _check_tenant(obj, errors)
    if _blank(obj.name):
        errors["name"] = "name is required"
    if _blank(obj.code):
        errors["code"] = "code is required"
    if (obj.credit_units or 0) < 0:
        errors["credit_units"] = "credit units must not be negative"
    _raise_if(errors)


def validate_person(obj: Any) -> None:
    errors: Dict[str, str] = {}
    _check_tenant(obj, errors)
    if _blank(obj.name):
        errors["name"] = "name is required"
    if _blank(obj.status):
        errors["status"] = "status is required"
    _raise_if(errors)


def validate_class(obj: Any) -> None:
    errors: Dict[str, str] = {}
    _check_tenant(obj, errors)
    if _blank(obj.name):
        errors["name"] = "name is required"
    if (obj.capacity or 0) < 0:
        errors["capacity"] = "capacity must not be negative"
    _raise_if(errors)


def validate_class_subject(obj: Any) -> None:
    errors: Dict[str, str] = {}
    _check_tenant(obj, errors)
    if obj.class_id is None:
        errors["class_id"] = "class ID is required"
    if obj.subject_id is None:
        errors["subject_id"] = "subject ID is required"
    _raise_if(errors)


def validate_enrollment(obj: Any) -> None:
    errors: Dict[str, str] = {}
    _check_tenant(obj, errors)
    if obj.class_id is None:
        errors["class_id"] = "class ID is required"
    if obj.student_id is None:
        errors["student_id"] = "student ID is required"
    if obj.status not in {s.value for s in EnrollmentStatus}:
        errors["status"] = "status must be one of active, dropped, moved"
    _raise_if(errors)


def validate_curriculum(obj: Any) -> None:
    errors: Dict[str, str] = {}
    _check_tenant(obj, errors)
    if _blank(obj.name):
        errors["name"] = "name is required"
    if not obj.year or obj.year <= 0:
        errors["year"] = "year must be positive"
    _raise_if(errors)


def validate_curriculum_subject(obj: Any) -> None:
    errors: Dict[str, str] = {}
    if obj.curriculum_id is None:
        errors["curriculum_id"] = "curriculum ID is required"
    if obj.subject_id is None:
        errors["subject_id"] = "subject ID is required"
    _raise_if(errors)


def validate_grading_rule(obj: Any) -> None:
    errors: Dict[str, str] = {}
    if obj.curriculum_id is None:
        errors["curriculum_id"] = "curriculum ID is required"
    if _blank(obj.grade):
        errors["grade"] = "grade is required"
    if obj.min_score is None or obj.min_score < 0:
        errors["min_score"] = "min score must not be negative"
    if obj.max_score is None or obj.max_score < 0:
        errors["max_score"] = "max score must not be negative"
    if (
        "min_score" not in errors
        and "max_score" not in errors
        and obj.min_score > obj.max_score
    ):
        errors["max_score"] = "min score cannot be greater than max score"
    if (obj.points or 0) < 0:
        errors["points"] = "points must not be negative"
    _raise_if(errors)


# ---- timetable ---------------------------------------------------------------

def validate_schedule(obj: Any) -> None:
    """Validate a slot and normalise its times in place."""
    errors: Dict[str, str] = {}
    _check_tenant(obj, errors)
    for field in ("class_id", "subject_id", "teacher_id"):
        if getattr(obj, field, None) is None:
            errors[field] = f"{field.replace('_id', '')} ID is required"
    _check_slot_times(obj, errors)
    if obj.room is None:
        obj.room = ""
    _raise_if(errors)


def validate_schedule_template(obj: Any) -> None:
    errors: Dict[str, str] = {}
    _check_tenant(obj, errors)
    if _blank(obj.name):
        errors["name"] = "name is required"
    _raise_if(errors)


def validate_template_item(obj: Any) -> None:
    errors: Dict[str, str] = {}
    _check_slot_times(obj, errors)
    _raise_if(errors)


# ---- grading -----------------------------------------------------------------

def validate_grade_category(obj: Any) -> None:
    errors: Dict[str, str] = {}
    _check_tenant(obj, errors)
    if _blank(obj.name):
        errors["name"] = "name is required"
    if obj.weight is None or obj.weight <= 0:
        errors["weight"] = "weight must be positive"
    _raise_if(errors)


def validate_assessment(obj: Any) -> None:
    errors: Dict[str, str] = {}
    _check_tenant(obj, errors)
    for field in ("teacher_id", "subject_id", "class_id", "grade_category_id"):
        if getattr(obj, field, None) is None:
            errors[field] = f"{field} is required"
    if _blank(obj.name):
        errors["name"] = "name is required"
    if obj.max_score is None or obj.max_score <= 0:
        errors["max_score"] = "max score must be greater than 0"
    if obj.date is None:
        errors["date"] = "date is required"
    _raise_if(errors)


def validate_grade(obj: Any) -> None:
    errors: Dict[str, str] = {}
    _check_tenant(obj, errors)
    if obj.assessment_id is None:
        errors["assessment_id"] = "assessment ID is required"
    if obj.student_id is None:
        errors["student_id"] = "student ID is required"
    if obj.score is None or obj.score < 0:
        errors["score"] = "score cannot be negative"
    if obj.status not in {s.value for s in GradeStatus}:
        errors["status"] = "status must be one of draft, submitted, approved, final"
    _raise_if(errors)


__all__ = [
    "normalize_time",
    "validate_academic_year",
    "validate_semester",
    "validate_subject",
    "validate_person",
    "validate_class",
    "validate_class_subject",
    "validate_enrollment",
    "validate_curriculum",
    "validate_curriculum_subject",
    "validate_grading_rule",
    "validate_schedule",
    "validate_schedule_template",
    "validate_template_item",
    "validate_grade_category",
    "validate_assessment",
    "validate_grade",
]
