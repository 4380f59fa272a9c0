from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, ClassVar, Dict, List, Optional

import sqlalchemy as sa
from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from SISFO.db.base import Base, GUID, UUIDMixin, AuditMixin, live_unique_index


class ReportCard(UUIDMixin, AuditMixin, Base):
    __tablename__ = "report_cards"

    NOTE: ClassVar[str] = (
        "owner=assessment_service; "
        "description=Per student and semester summary. draft -> generated -> published; "
        "published cards are frozen."
    )

    __table_args__ = (
        live_unique_index("uq_report_cards_student_semester_live", "student_id", "semester_id"),
        {"comment": NOTE, "info": {"note": NOTE}},
    )

    student_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("students.id"), nullable=False, index=True)
    class_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("classes.id"), nullable=False)
    semester_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("semesters.id"), nullable=False)
    status: Mapped[str] = mapped_column(sa.String(16), nullable=False, default="draft")
    gpa: Mapped[float] = mapped_column(sa.Float, nullable=False, default=0.0)
    total_credits: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    rank: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    attendance: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    attendance_summary: Mapped[Dict[str, Any]] = mapped_column(sa.JSON, nullable=False, default=dict)
    comments: Mapped[str] = mapped_column(sa.Text, nullable=False, default="")
    pdf_url: Mapped[str] = mapped_column(sa.Text, nullable=False, default="")
    generated_at: Mapped[Optional[datetime]] = mapped_column(sa.DateTime(timezone=True), nullable=True)
    published_at: Mapped[Optional[datetime]] = mapped_column(sa.DateTime(timezone=True), nullable=True)

    # Filled by the repository when the card is loaded with its details.
    @property
    def details(self) -> List["ReportCardDetail"]:
        if getattr(self, "_details", None) is None:
            self._details = []
        return self._details

    @details.setter
    def details(self, value: List["ReportCardDetail"]) -> None:
        self._details = list(value)


class ReportCardDetail(UUIDMixin, AuditMixin, Base):
    __tablename__ = "report_card_details"

    NOTE: ClassVar[str] = "owner=assessment_service; description=Per subject lines of a report card."

    __table_args__ = {"comment": NOTE, "info": {"note": NOTE}}

    report_card_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("report_cards.id"), nullable=False, index=True
    )
    subject_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("subjects.id"), nullable=False)
    subject_name: Mapped[str] = mapped_column(sa.String(255), nullable=False, default="")
    credit: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    final_score: Mapped[float] = mapped_column(sa.Float, nullable=False, default=0.0)
    grade_letter: Mapped[str] = mapped_column(sa.String(8), nullable=False, default="")
    points: Mapped[float] = mapped_column(sa.Float, nullable=False, default=0.0)
    teacher_id: Mapped[Optional[uuid.UUID]] = mapped_column(GUID(), nullable=True)
    comments: Mapped[str] = mapped_column(sa.Text, nullable=False, default="")
