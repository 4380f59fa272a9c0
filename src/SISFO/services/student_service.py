from __future__ import annotations

from datetime import date
from typing import Optional

from SISFO.db.models import Student
from SISFO.domain.enums import PersonStatus
from SISFO.domain.validation import validate_person

from .base import BaseService, bounded


class StudentService(BaseService):
    @bounded("student.register_admission")
    async def register_admission(
        self,
        *,
        registration_number: str,
        first_name: str,
        last_name: str = "",
        email: str = "",
        phone: str = "",
        admission_date: Optional[date] = None,
    ) -> tuple[Student, bool]:
        """
        Materialise an admitted applicant as a student.

        Idempotent on (tenant, registration number): when a live student with
        the same ``nis`` exists it is returned with ``created=False``.
        """
        existing = await self.repos.students.get_by_nis(registration_number)
        if existing is not None:
            return existing, False

        student = Student(
            name=f"{first_name} {last_name}".strip(),
            nis=registration_number,
            email=email or "",
            phone=phone or "",
            status=PersonStatus.ACTIVE.value,
            admission_date=admission_date or date.today(),
        )
        student.tenant_id = self.tenant_id
        validate_person(student)
        async with self.transaction():
            await self.repos.students.create(student)
        return student, True
