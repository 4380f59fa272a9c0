from __future__ import annotations

from datetime import date
from typing import ClassVar

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from SISFO.db.base import Base, UUIDMixin, AuditMixin


class AcademicYear(UUIDMixin, AuditMixin, Base):
    __tablename__ = "academic_years"

    NOTE: ClassVar[str] = (
        "owner=academic_service; "
        "description=School years (e.g. 2024/2025). Semesters hang off an academic year."
    )

    __table_args__ = {"comment": NOTE, "info": {"note": NOTE}}

    name: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    start_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    end_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    is_active: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=False)
