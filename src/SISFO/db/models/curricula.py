from __future__ import annotations

import uuid
from typing import ClassVar

import sqlalchemy as sa
from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from SISFO.db.base import Base, GUID, UUIDMixin, AuditMixin


class Curriculum(UUIDMixin, AuditMixin, Base):
    __tablename__ = "curricula"

    NOTE: ClassVar[str] = (
        "owner=academic_service; "
        "description=Curriculum versions. Own their curriculum subjects and grading rules."
    )

    __table_args__ = {"comment": NOTE, "info": {"note": NOTE}}

    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    description: Mapped[str] = mapped_column(sa.Text, nullable=False, default="")
    year: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=False)


class CurriculumSubject(UUIDMixin, AuditMixin, Base):
    __tablename__ = "curriculum_subjects"

    NOTE: ClassVar[str] = "owner=academic_service; description=Subjects a curriculum prescribes per grade level and semester."

    __table_args__ = {"comment": NOTE, "info": {"note": NOTE}}

    curriculum_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("curricula.id"), nullable=False, index=True
    )
    subject_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("subjects.id"), nullable=False)
    grade_level: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    semester: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)


class GradingRule(UUIDMixin, AuditMixin, Base):
    __tablename__ = "grading_rules"

    NOTE: ClassVar[str] = (
        "owner=academic_service; "
        "description=Letter-grade bands of a curriculum. min_score <= max_score, both non-negative."
    )

    __table_args__ = (
        sa.CheckConstraint("min_score >= 0 AND max_score >= min_score", name="score_band"),
        {"comment": NOTE, "info": {"note": NOTE}},
    )

    curriculum_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("curricula.id"), nullable=False, index=True
    )
    grade: Mapped[str] = mapped_column(sa.String(8), nullable=False)
    min_score: Mapped[float] = mapped_column(sa.Float, nullable=False)
    max_score: Mapped[float] = mapped_column(sa.Float, nullable=False)
    points: Mapped[float] = mapped_column(sa.Float, nullable=False, default=0.0)
    description: Mapped[str] = mapped_column(sa.Text, nullable=False, default="")
