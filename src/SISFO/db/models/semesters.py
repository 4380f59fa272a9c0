from __future__ import annotations

import uuid
from datetime import date
from typing import ClassVar, Optional

import sqlalchemy as sa
from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from SISFO.db.base import Base, GUID, UUIDMixin, AuditMixin


class Semester(UUIDMixin, AuditMixin, Base):
    __tablename__ = "semesters"

    NOTE: ClassVar[str] = (
        "owner=academic_service; "
        "description=Terms within an academic year. At most one active semester per year. "
        "curriculum_id binds the grading rules used for report cards."
    )

    __table_args__ = (
        sa.Index("ix_semesters_year_active", "academic_year_id", "is_active"),
        {"comment": NOTE, "info": {"note": NOTE}},
    )

    academic_year_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("academic_years.id"), nullable=False, index=True
    )
    curriculum_id: Mapped[Optional[uuid.UUID]] = mapped_column(GUID(), ForeignKey("curricula.id"), nullable=True)
    name: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    semester_type: Mapped[str] = mapped_column(sa.String(16), nullable=False, default="odd")
    start_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    end_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    is_active: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=False)
