"""
Curriculum repositories. Curriculum subjects and grading rules are owned by
their curriculum and only ever read through it.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from SISFO.db.models import Curriculum, CurriculumSubject, GradingRule

from .base import BaseRepository


class CurriculumRepository(BaseRepository[Curriculum]):
    def __init__(self, session: AsyncSession, tenant_id: str, actor_id: Optional[UUID] = None) -> None:
        super().__init__(session, Curriculum, tenant_id, actor_id)


class CurriculumSubjectRepository(BaseRepository[CurriculumSubject]):
    def __init__(self, session: AsyncSession, tenant_id: str, actor_id: Optional[UUID] = None) -> None:
        super().__init__(session, CurriculumSubject, tenant_id, actor_id)

    async def list_by_curriculum(self, curriculum_id: UUID) -> list[CurriculumSubject]:
        return await self.find(
            CurriculumSubject.curriculum_id == curriculum_id,
            order_by=(CurriculumSubject.grade_level, CurriculumSubject.semester, CurriculumSubject.created_at),
        )


class GradingRuleRepository(BaseRepository[GradingRule]):
    def __init__(self, session: AsyncSession, tenant_id: str, actor_id: Optional[UUID] = None) -> None:
        super().__init__(session, GradingRule, tenant_id, actor_id)

    async def list_by_curriculum(self, curriculum_id: UUID) -> list[GradingRule]:
        """Rules of a curriculum, highest ``min_score`` first."""
        return await self.find(
            GradingRule.curriculum_id == curriculum_id,
            order_by=(GradingRule.min_score.desc(), GradingRule.id),
        )
