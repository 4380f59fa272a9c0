# src/SISFO/schemas/grading.py
from __future__ import annotations

import datetime as dt
from typing import Any, Optional
from uuid import UUID

from pydantic import Field

from .base import APIModel, ORMBase


class GradeCategoryCreate(APIModel):
    name: str
    description: str = ""
    weight: float = Field(gt=0)


class GradeCategoryUpdate(APIModel):
    name: Optional[str] = None
    description: Optional[str] = None
    weight: Optional[float] = Field(default=None, gt=0)


class GradeCategoryOut(ORMBase):
    name: str
    description: str
    weight: float


class AssessmentCreate(APIModel):
    teacher_id: UUID
    subject_id: UUID
    class_id: UUID
    grade_category_id: UUID
    semester_id: Optional[UUID] = None
    name: str
    description: str = ""
    max_score: float
    date: dt.date


class AssessmentOut(ORMBase):
    teacher_id: UUID
    subject_id: UUID
    class_id: UUID
    grade_category_id: UUID
    semester_id: Optional[UUID] = None
    name: str
    description: str
    max_score: float
    date: dt.date


class GradeInput(APIModel):
    assessment_id: UUID
    student_id: UUID
    score: float
    status: Optional[str] = None
    feedback: str = ""
    notes: str = ""
    graded_by: Optional[UUID] = None


class GradeOut(ORMBase):
    assessment_id: UUID
    student_id: UUID
    score: float
    status: str
    feedback: str
    notes: str
    graded_by: Optional[UUID] = None


class FinalScoreOut(APIModel):
    student_id: UUID
    class_id: UUID
    subject_id: UUID
    semester_id: Optional[UUID] = None
    final_score: float
    assessments_counted: int


class ReportCardGenerate(APIModel):
    student_id: UUID
    class_id: UUID
    semester_id: UUID
    comments: Optional[str] = None


class ReportCardDetailOut(APIModel):
    id: UUID
    subject_id: UUID
    subject_name: str
    credit: int
    final_score: float
    grade_letter: str
    points: float
    comments: str


class ReportCardOut(ORMBase):
    student_id: UUID
    class_id: UUID
    semester_id: UUID
    status: str
    gpa: float
    total_credits: int
    rank: int
    attendance: int
    attendance_summary: dict[str, Any] = Field(default_factory=dict)
    comments: str
    pdf_url: str
    generated_at: Optional[dt.datetime] = None
    published_at: Optional[dt.datetime] = None
    details: list[ReportCardDetailOut] = Field(default_factory=list)
