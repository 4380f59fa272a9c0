"""
Repositories for the academic calendar and master data.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from SISFO.db.models import AcademicYear, SchoolClass, Semester, Student, Subject, Teacher

from .base import BaseRepository


class AcademicYearRepository(BaseRepository[AcademicYear]):
    def __init__(self, session: AsyncSession, tenant_id: str, actor_id: Optional[UUID] = None) -> None:
        super().__init__(session, AcademicYear, tenant_id, actor_id)


class SemesterRepository(BaseRepository[Semester]):
    def __init__(self, session: AsyncSession, tenant_id: str, actor_id: Optional[UUID] = None) -> None:
        super().__init__(session, Semester, tenant_id, actor_id)

    async def list_by_academic_year(self, academic_year_id: UUID) -> list[Semester]:
        return await self.find(
            Semester.academic_year_id == academic_year_id,
            order_by=(Semester.start_date, Semester.id),
        )

    async def list_active_by_academic_year(self, academic_year_id: UUID) -> list[Semester]:
        return await self.find(
            Semester.academic_year_id == academic_year_id,
            Semester.is_active.is_(True),
        )


class SubjectRepository(BaseRepository[Subject]):
    def __init__(self, session: AsyncSession, tenant_id: str, actor_id: Optional[UUID] = None) -> None:
        super().__init__(session, Subject, tenant_id, actor_id)

    async def get_many(self, ids: list[UUID]) -> dict[UUID, Subject]:
        if not ids:
            return {}
        rows = await self.find(Subject.id.in_(ids))
        return {s.id: s for s in rows}


class TeacherRepository(BaseRepository[Teacher]):
    def __init__(self, session: AsyncSession, tenant_id: str, actor_id: Optional[UUID] = None) -> None:
        super().__init__(session, Teacher, tenant_id, actor_id)


class StudentRepository(BaseRepository[Student]):
    def __init__(self, session: AsyncSession, tenant_id: str, actor_id: Optional[UUID] = None) -> None:
        super().__init__(session, Student, tenant_id, actor_id)

    async def get_by_nis(self, nis: str) -> Student | None:
        """Live student of this tenant with the given registration number."""
        return await self.find_one(Student.nis == nis)


class ClassRepository(BaseRepository[SchoolClass]):
    def __init__(self, session: AsyncSession, tenant_id: str, actor_id: Optional[UUID] = None) -> None:
        super().__init__(session, SchoolClass, tenant_id, actor_id)
