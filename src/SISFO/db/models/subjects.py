from __future__ import annotations

from typing import ClassVar

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from SISFO.db.base import Base, UUIDMixin, AuditMixin


class Subject(UUIDMixin, AuditMixin, Base):
    __tablename__ = "subjects"

    NOTE: ClassVar[str] = "owner=academic_service; description=Taught subjects. Code is free-form and not unique."

    __table_args__ = {"comment": NOTE, "info": {"note": NOTE}}

    code: Mapped[str] = mapped_column(sa.String(50), nullable=False)
    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    description: Mapped[str] = mapped_column(sa.Text, nullable=False, default="")
    credit_units: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    type: Mapped[str] = mapped_column(sa.String(50), nullable=False, default="")
