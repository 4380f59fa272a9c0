"""
Enrollment and class-subject repositories.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from SISFO.db.models import ClassSubject, Enrollment
from SISFO.domain.enums import EnrollmentStatus

from .base import BaseRepository


class EnrollmentRepository(BaseRepository[Enrollment]):
    def __init__(self, session: AsyncSession, tenant_id: str, actor_id: Optional[UUID] = None) -> None:
        super().__init__(session, Enrollment, tenant_id, actor_id)

    async def count_active(self, class_id: UUID) -> int:
        return await self.count(
            Enrollment.class_id == class_id,
            Enrollment.status == EnrollmentStatus.ACTIVE.value,
        )

    async def bulk_enroll(self, enrollments: list[Enrollment]) -> list[Enrollment]:
        return await self.bulk_create(enrollments)

    async def list_by_class(self, class_id: UUID) -> list[Enrollment]:
        return await self.find(Enrollment.class_id == class_id, order_by=(Enrollment.created_at,))

    async def list_by_student(self, student_id: UUID) -> list[Enrollment]:
        return await self.find(Enrollment.student_id == student_id, order_by=(Enrollment.created_at.desc(),))

    async def get_active(self, class_id: UUID, student_id: UUID) -> Enrollment | None:
        return await self.find_one(
            Enrollment.class_id == class_id,
            Enrollment.student_id == student_id,
            Enrollment.status == EnrollmentStatus.ACTIVE.value,
        )


class ClassSubjectRepository(BaseRepository[ClassSubject]):
    def __init__(self, session: AsyncSession, tenant_id: str, actor_id: Optional[UUID] = None) -> None:
        super().__init__(session, ClassSubject, tenant_id, actor_id)

    async def get_by_class_and_subject(self, class_id: UUID, subject_id: UUID) -> ClassSubject | None:
        return await self.find_one(ClassSubject.class_id == class_id, ClassSubject.subject_id == subject_id)

    async def list_by_class(self, class_id: UUID) -> list[ClassSubject]:
        return await self.find(ClassSubject.class_id == class_id, order_by=(ClassSubject.created_at,))
