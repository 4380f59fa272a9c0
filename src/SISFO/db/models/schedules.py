from __future__ import annotations

import uuid
from typing import ClassVar, List, Optional

import sqlalchemy as sa
from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from SISFO.db.base import Base, GUID, UUIDMixin, AuditMixin


class Schedule(UUIDMixin, AuditMixin, Base):
    __tablename__ = "schedules"

    NOTE: ClassVar[str] = (
        "owner=academic_service; "
        "description=Weekly recurring class sessions. Times are HH:MM:SS strings; "
        "rows sharing class, teacher or non-empty room never overlap on the same day "
        "(exclusion constraints on PostgreSQL)."
    )

    __table_args__ = (
        sa.CheckConstraint("day_of_week BETWEEN 1 AND 7", name="day_of_week_range"),
        sa.CheckConstraint("start_time < end_time", name="time_order"),
        sa.Index("ix_schedules_tenant_day", "tenant_id", "day_of_week"),
        {"comment": NOTE, "info": {"note": NOTE}},
    )

    class_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("classes.id"), nullable=False, index=True)
    subject_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("subjects.id"), nullable=False)
    teacher_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("teachers.id"), nullable=False, index=True)
    day_of_week: Mapped[int] = mapped_column(sa.SmallInteger, nullable=False)
    start_time: Mapped[str] = mapped_column(sa.String(8), nullable=False)
    end_time: Mapped[str] = mapped_column(sa.String(8), nullable=False)
    room: Mapped[str] = mapped_column(sa.String(50), nullable=False, default="")


class ScheduleTemplate(UUIDMixin, AuditMixin, Base):
    __tablename__ = "schedule_templates"

    NOTE: ClassVar[str] = "owner=academic_service; description=Reusable weekly layouts materialised into schedules."

    __table_args__ = {"comment": NOTE, "info": {"note": NOTE}}

    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    description: Mapped[str] = mapped_column(sa.Text, nullable=False, default="")
    is_active: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=True)

    # Loaded explicitly by the repository; never lazy-loaded.
    @property
    def items(self) -> List["ScheduleTemplateItem"]:
        if getattr(self, "_items", None) is None:
            self._items = []
        return self._items

    @items.setter
    def items(self, value: List["ScheduleTemplateItem"]) -> None:
        self._items = list(value)


class ScheduleTemplateItem(UUIDMixin, AuditMixin, Base):
    __tablename__ = "schedule_template_items"

    NOTE: ClassVar[str] = (
        "owner=academic_service; "
        "description=Slots of a schedule template. subject_id may be null for placeholder rows."
    )

    __table_args__ = (
        sa.CheckConstraint("day_of_week BETWEEN 1 AND 7", name="day_of_week_range"),
        {"comment": NOTE, "info": {"note": NOTE}},
    )

    template_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("schedule_templates.id"), nullable=False, index=True
    )
    subject_id: Mapped[Optional[uuid.UUID]] = mapped_column(GUID(), ForeignKey("subjects.id"), nullable=True)
    day_of_week: Mapped[int] = mapped_column(sa.SmallInteger, nullable=False)
    start_time: Mapped[str] = mapped_column(sa.String(8), nullable=False)
    end_time: Mapped[str] = mapped_column(sa.String(8), nullable=False)
