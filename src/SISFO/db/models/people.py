from __future__ import annotations

import uuid
from datetime import date
from typing import ClassVar, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from SISFO.db.base import Base, GUID, UUIDMixin, AuditMixin


class Teacher(UUIDMixin, AuditMixin, Base):
    __tablename__ = "teachers"

    NOTE: ClassVar[str] = "owner=academic_service; description=Teaching staff identity records."

    __table_args__ = {"comment": NOTE, "info": {"note": NOTE}}

    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(GUID(), nullable=True)
    nip: Mapped[str] = mapped_column(sa.String(50), nullable=False, default="")
    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    gender: Mapped[str] = mapped_column(sa.String(16), nullable=False, default="")
    title_front: Mapped[str] = mapped_column(sa.String(50), nullable=False, default="")
    title_back: Mapped[str] = mapped_column(sa.String(50), nullable=False, default="")
    phone: Mapped[str] = mapped_column(sa.String(50), nullable=False, default="")
    email: Mapped[str] = mapped_column(sa.String(255), nullable=False, default="")
    status: Mapped[str] = mapped_column(sa.String(32), nullable=False, default="active")


class Student(UUIDMixin, AuditMixin, Base):
    __tablename__ = "students"

    NOTE: ClassVar[str] = (
        "owner=academic_service; "
        "description=Student identity records. Created by admission events keyed by (tenant_id, nis)."
    )

    __table_args__ = (
        sa.Index("ix_students_tenant_nis", "tenant_id", "nis"),
        {"comment": NOTE, "info": {"note": NOTE}},
    )

    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(GUID(), nullable=True)
    nis: Mapped[str] = mapped_column(sa.String(50), nullable=False, default="")
    nisn: Mapped[str] = mapped_column(sa.String(50), nullable=False, default="")
    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    gender: Mapped[str] = mapped_column(sa.String(16), nullable=False, default="")
    birth_place: Mapped[str] = mapped_column(sa.String(100), nullable=False, default="")
    birth_date: Mapped[Optional[date]] = mapped_column(sa.Date, nullable=True)
    address: Mapped[str] = mapped_column(sa.Text, nullable=False, default="")
    phone: Mapped[str] = mapped_column(sa.String(50), nullable=False, default="")
    email: Mapped[str] = mapped_column(sa.String(255), nullable=False, default="")
    parent_name: Mapped[str] = mapped_column(sa.String(255), nullable=False, default="")
    parent_phone: Mapped[str] = mapped_column(sa.String(50), nullable=False, default="")
    admission_date: Mapped[Optional[date]] = mapped_column(sa.Date, nullable=True)
    status: Mapped[str] = mapped_column(sa.String(32), nullable=False, default="active")
