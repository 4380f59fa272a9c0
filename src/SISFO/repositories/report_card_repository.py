"""
Report card repository. A card and its detail rows are always written
together; ``update_with_details`` replaces the detail set wholesale.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from SISFO.app_logger import get_logger
from SISFO.db.models import ReportCard, ReportCardDetail

from .base import BaseRepository

logger = get_logger(__name__)


class ReportCardRepository(BaseRepository[ReportCard]):
    def __init__(self, session: AsyncSession, tenant_id: str, actor_id: Optional[UUID] = None) -> None:
        super().__init__(session, ReportCard, tenant_id, actor_id)
        self.details = BaseRepository(session, ReportCardDetail, tenant_id, actor_id)

    async def list_details(self, report_card_id: UUID) -> list[ReportCardDetail]:
        return await self.details.find(
            ReportCardDetail.report_card_id == report_card_id,
            order_by=(ReportCardDetail.subject_name, ReportCardDetail.subject_id),
        )

    async def _attach(self, card: ReportCard | None) -> ReportCard | None:
        if card is not None:
            card.details = await self.list_details(card.id)
        return card

    async def get_with_details(self, id: UUID) -> ReportCard | None:
        return await self._attach(await self.get_by_id(id))

    async def get_by_student_and_semester(self, student_id: UUID, semester_id: UUID) -> ReportCard | None:
        card = await self.find_one(ReportCard.student_id == student_id, ReportCard.semester_id == semester_id)
        return await self._attach(card)

    async def list_by_student(self, student_id: UUID, semester_id: Optional[UUID] = None) -> list[ReportCard]:
        criteria = [ReportCard.student_id == student_id]
        if semester_id is not None:
            criteria.append(ReportCard.semester_id == semester_id)
        cards = await self.find(*criteria, order_by=(ReportCard.created_at.desc(),))
        for card in cards:
            await self._attach(card)
        return cards

    async def create_with_details(self, card: ReportCard, details: list[ReportCardDetail]) -> ReportCard:
        await self.create(card)
        for d in details:
            d.report_card_id = card.id
        card.details = await self.details.bulk_create(details) if details else []
        return card

    async def update_with_details(self, card: ReportCard, details: list[ReportCardDetail]) -> ReportCard:
        """Soft delete the current detail rows, insert ``details`` and update the card."""
        for old in await self.list_details(card.id):
            await self.details.soft_delete(old)
        for d in details:
            d.report_card_id = card.id
        new_rows = await self.details.bulk_create(details) if details else []
        await self.update(card)
        card.details = new_rows
        logger.debug(f"Replaced details of report card {card.id} ({len(new_rows)} rows)")
        return card
