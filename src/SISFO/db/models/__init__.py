# src/SISFO/db/models/__init__.py
"""Importing this package registers every table on ``Base.metadata``."""

from SISFO.db.base import Base

from .academic_years import AcademicYear
from .assessments import Assessment, Grade, GradeCategory
from .classes import ClassSubject, Enrollment, SchoolClass
from .curricula import Curriculum, CurriculumSubject, GradingRule
from .people import Student, Teacher
from .report_cards import ReportCard, ReportCardDetail
from .schedules import Schedule, ScheduleTemplate, ScheduleTemplateItem
from .semesters import Semester
from .subjects import Subject

__all__ = [
    "Base",
    "AcademicYear",
    "Assessment",
    "ClassSubject",
    "Curriculum",
    "CurriculumSubject",
    "Enrollment",
    "Grade",
    "GradeCategory",
    "GradingRule",
    "ReportCard",
    "ReportCardDetail",
    "Schedule",
    "ScheduleTemplate",
    "ScheduleTemplateItem",
    "SchoolClass",
    "Semester",
    "Student",
    "Subject",
    "Teacher",
]
