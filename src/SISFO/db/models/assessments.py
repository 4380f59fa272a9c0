from __future__ import annotations

import uuid
import datetime as dt
from typing import ClassVar, Optional

import sqlalchemy as sa
from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from SISFO.db.base import Base, GUID, UUIDMixin, AuditMixin, live_unique_index


class GradeCategory(UUIDMixin, AuditMixin, Base):
    __tablename__ = "grade_categories"

    NOTE: ClassVar[str] = (
        "owner=assessment_service; "
        "description=Weighted assessment groups (quiz, midterm, ...). Weights are relative."
    )

    __table_args__ = (
        sa.CheckConstraint("weight > 0", name="weight_positive"),
        {"comment": NOTE, "info": {"note": NOTE}},
    )

    name: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    description: Mapped[str] = mapped_column(sa.Text, nullable=False, default="")
    weight: Mapped[float] = mapped_column(sa.Float, nullable=False, default=1.0)


class Assessment(UUIDMixin, AuditMixin, Base):
    __tablename__ = "assessments"

    NOTE: ClassVar[str] = (
        "owner=assessment_service; "
        "description=Scored tasks for a class and subject, grouped by grade category."
    )

    __table_args__ = (
        sa.CheckConstraint("max_score > 0", name="max_score_positive"),
        sa.Index("ix_assessments_class_subject", "class_id", "subject_id"),
        {"comment": NOTE, "info": {"note": NOTE}},
    )

    teacher_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("teachers.id"), nullable=False)
    subject_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("subjects.id"), nullable=False)
    class_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("classes.id"), nullable=False)
    grade_category_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("grade_categories.id"), nullable=False
    )
    semester_id: Mapped[Optional[uuid.UUID]] = mapped_column(GUID(), ForeignKey("semesters.id"), nullable=True)
    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    description: Mapped[str] = mapped_column(sa.Text, nullable=False, default="")
    max_score: Mapped[float] = mapped_column(sa.Float, nullable=False)
    date: Mapped[dt.date] = mapped_column(sa.Date, nullable=False)


class Grade(UUIDMixin, AuditMixin, Base):
    __tablename__ = "grades"

    NOTE: ClassVar[str] = (
        "owner=assessment_service; "
        "description=One score per (student, assessment) among live rows; re-input overwrites."
    )

    __table_args__ = (
        live_unique_index("uq_grades_student_assessment_live", "student_id", "assessment_id"),
        sa.CheckConstraint("score >= 0", name="score_non_negative"),
        {"comment": NOTE, "info": {"note": NOTE}},
    )

    assessment_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("assessments.id"), nullable=False, index=True
    )
    student_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("students.id"), nullable=False, index=True)
    score: Mapped[float] = mapped_column(sa.Float, nullable=False)
    status: Mapped[str] = mapped_column(sa.String(16), nullable=False, default="draft")
    feedback: Mapped[str] = mapped_column(sa.Text, nullable=False, default="")
    notes: Mapped[str] = mapped_column(sa.Text, nullable=False, default="")
    graded_by: Mapped[Optional[uuid.UUID]] = mapped_column(GUID(), nullable=True)
