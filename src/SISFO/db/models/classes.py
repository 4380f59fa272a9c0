from __future__ import annotations

import uuid
from typing import ClassVar, Optional

import sqlalchemy as sa
from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from SISFO.db.base import Base, GUID, UUIDMixin, AuditMixin, live_unique_index


class SchoolClass(UUIDMixin, AuditMixin, Base):
    """A homeroom group (``classes`` table). Named to avoid shadowing ``class``."""

    __tablename__ = "classes"

    NOTE: ClassVar[str] = "owner=academic_service; description=Homeroom groups with a seat capacity."

    __table_args__ = {"comment": NOTE, "info": {"note": NOTE}}

    school_id: Mapped[Optional[uuid.UUID]] = mapped_column(GUID(), nullable=True)
    academic_year_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        GUID(), ForeignKey("academic_years.id"), nullable=True
    )
    name: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    level: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    major: Mapped[str] = mapped_column(sa.String(100), nullable=False, default="")
    homeroom_teacher_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        GUID(), ForeignKey("teachers.id"), nullable=True
    )
    capacity: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)


class ClassSubject(UUIDMixin, AuditMixin, Base):
    __tablename__ = "class_subjects"

    NOTE: ClassVar[str] = (
        "owner=academic_service; "
        "description=Subjects taught in a class, optionally with the assigned teacher. "
        "Unique per (class_id, subject_id) among live rows."
    )

    __table_args__ = (
        live_unique_index("uq_class_subjects_live", "class_id", "subject_id"),
        {"comment": NOTE, "info": {"note": NOTE}},
    )

    class_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("classes.id"), nullable=False, index=True)
    subject_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("subjects.id"), nullable=False)
    teacher_id: Mapped[Optional[uuid.UUID]] = mapped_column(GUID(), ForeignKey("teachers.id"), nullable=True)


class Enrollment(UUIDMixin, AuditMixin, Base):
    __tablename__ = "enrollments"

    NOTE: ClassVar[str] = (
        "owner=academic_service; "
        "description=Student membership in a class. Active rows per class never exceed the class capacity."
    )

    __table_args__ = (
        sa.Index("ix_enrollments_class_status", "class_id", "status"),
        {"comment": NOTE, "info": {"note": NOTE}},
    )

    class_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("classes.id"), nullable=False)
    student_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("students.id"), nullable=False, index=True)
    status: Mapped[str] = mapped_column(sa.String(16), nullable=False, default="active")
