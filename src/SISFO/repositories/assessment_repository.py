"""
Grade category, assessment and grade repositories.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from SISFO.db.models import Assessment, Grade, GradeCategory

from .base import BaseRepository


class GradeCategoryRepository(BaseRepository[GradeCategory]):
    def __init__(self, session: AsyncSession, tenant_id: str, actor_id: Optional[UUID] = None) -> None:
        super().__init__(session, GradeCategory, tenant_id, actor_id)

    async def get_many(self, ids: set[UUID]) -> dict[UUID, GradeCategory]:
        if not ids:
            return {}
        rows = await self.find(GradeCategory.id.in_(list(ids)))
        return {c.id: c for c in rows}


class AssessmentRepository(BaseRepository[Assessment]):
    def __init__(self, session: AsyncSession, tenant_id: str, actor_id: Optional[UUID] = None) -> None:
        super().__init__(session, Assessment, tenant_id, actor_id)

    async def get_by_class_and_subject(self, class_id: UUID, subject_id: UUID) -> list[Assessment]:
        """Live assessments of a class/subject, most recent first."""
        return await self.find(
            Assessment.class_id == class_id,
            Assessment.subject_id == subject_id,
            order_by=(Assessment.date.desc(), Assessment.created_at.desc()),
        )

    async def get_many(self, ids: set[UUID]) -> dict[UUID, Assessment]:
        if not ids:
            return {}
        rows = await self.find(Assessment.id.in_(list(ids)))
        return {a.id: a for a in rows}


class GradeRepository(BaseRepository[Grade]):
    def __init__(self, session: AsyncSession, tenant_id: str, actor_id: Optional[UUID] = None) -> None:
        super().__init__(session, Grade, tenant_id, actor_id)

    async def get_by_student_and_assessment(self, student_id: UUID, assessment_id: UUID) -> Grade | None:
        return await self.find_one(Grade.student_id == student_id, Grade.assessment_id == assessment_id)

    async def list_by_student(
        self,
        student_id: UUID,
        class_id: Optional[UUID] = None,
        semester_id: Optional[UUID] = None,
    ) -> list[Grade]:
        criteria = [Grade.student_id == student_id]
        if class_id is not None or semester_id is not None:
            sub = select(Assessment.id).where(
                Assessment.tenant_id == self.tenant_id,
                Assessment.deleted_at.is_(None),
            )
            if class_id is not None:
                sub = sub.where(Assessment.class_id == class_id)
            if semester_id is not None:
                sub = sub.where(
                    (Assessment.semester_id == semester_id) | Assessment.semester_id.is_(None)
                )
            criteria.append(Grade.assessment_id.in_(sub))
        return await self.find(*criteria, order_by=(Grade.created_at,))

    async def list_for_assessments(self, student_id: UUID, assessment_ids: list[UUID]) -> list[Grade]:
        if not assessment_ids:
            return []
        return await self.find(Grade.student_id == student_id, Grade.assessment_id.in_(assessment_ids))

    async def list_by_assessment(self, assessment_id: UUID) -> list[Grade]:
        return await self.find(Grade.assessment_id == assessment_id, order_by=(Grade.created_at,))
