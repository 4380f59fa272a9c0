"""
Semester lifecycle with the one-active-semester-per-academic-year rule.

Deactivating the siblings and activating the target happen in one
transaction, so a failure or a deadline leaves the previous state intact.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from SISFO.db.models import Semester
from SISFO.domain.validation import validate_semester

from .base import BaseService, bounded


class SemesterService(BaseService):
    async def _check_refs(self, sem: Semester) -> None:
        self.require(
            await self.repos.academic_years.get_by_id(sem.academic_year_id), "academic year", sem.academic_year_id
        )
        if sem.curriculum_id is not None:
            self.require(await self.repos.curricula.get_by_id(sem.curriculum_id), "curriculum", sem.curriculum_id)

    async def _deactivate_others(self, sem: Semester) -> None:
        for other in await self.repos.semesters.list_active_by_academic_year(sem.academic_year_id):
            if other.id != sem.id:
                await self.repos.semesters.update(other, is_active=False)

    @bounded("semester.create")
    async def create(self, data: dict[str, Any]) -> Semester:
        sem = Semester(**data)
        sem.tenant_id = self.tenant_id
        sem.is_active = bool(sem.is_active)
        if sem.semester_type is None:
            sem.semester_type = "odd"
        validate_semester(sem)
        await self._check_refs(sem)
        async with self.transaction():
            await self.repos.semesters.create(sem)
            if sem.is_active:
                await self._deactivate_others(sem)
        return sem

    @bounded("semester.update")
    async def update(self, id: UUID, changes: dict[str, Any]) -> Semester:
        sem = self.require(await self.repos.semesters.get_by_id(id), "semester", id)
        for key, value in changes.items():
            setattr(sem, key, value)
        validate_semester(sem)
        await self._check_refs(sem)
        async with self.transaction():
            if sem.is_active:
                await self._deactivate_others(sem)
            await self.repos.semesters.update(sem)
        return sem

    @bounded("semester.activate")
    async def activate(self, id: UUID) -> Semester:
        sem = self.require(await self.repos.semesters.get_by_id(id), "semester", id)
        async with self.transaction():
            await self._deactivate_others(sem)
            await self.repos.semesters.update(sem, is_active=True)
        return sem

    @bounded("semester.get")
    async def get(self, id: UUID) -> Semester:
        return self.require(await self.repos.semesters.get_by_id(id), "semester", id)

    @bounded("semester.list")
    async def list(self, limit: int = 100, offset: int = 0) -> tuple[list[Semester], int]:
        rows = await self.repos.semesters.get_all(limit=limit, offset=offset)
        return rows, await self.repos.semesters.count()

    @bounded("semester.list_by_academic_year")
    async def list_by_academic_year(self, academic_year_id: UUID) -> list[Semester]:
        return await self.repos.semesters.list_by_academic_year(academic_year_id)

    @bounded("semester.delete")
    async def delete(self, id: UUID) -> None:
        sem = self.require(await self.repos.semesters.get_by_id(id), "semester", id)
        async with self.transaction():
            await self.repos.semesters.soft_delete(sem)

