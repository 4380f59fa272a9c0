"""
Schedule and schedule template repositories.

``ScheduleRepository.check_conflicts`` is the advisory overlap probe used by
the schedule engine; on PostgreSQL the exclusion constraints created by the
initial migration are the authoritative guard.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy import and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from SISFO.app_logger import get_logger
from SISFO.db.models import Schedule, ScheduleTemplate, ScheduleTemplateItem

from .base import BaseRepository

logger = get_logger(__name__)


def slots_overlap(a: Schedule, b: Schedule) -> bool:
    """
    Half-open overlap on the same day with a shared class, teacher or
    non-empty room. Times must already be normalised to HH:MM:SS.
    """
    if a.day_of_week != b.day_of_week:
        return False
    shares = (
        a.class_id == b.class_id
        or a.teacher_id == b.teacher_id
        or (bool(a.room) and a.room == b.room)
    )
    return shares and a.start_time < b.end_time and a.end_time > b.start_time


class ScheduleRepository(BaseRepository[Schedule]):
    def __init__(self, session: AsyncSession, tenant_id: str, actor_id: Optional[UUID] = None) -> None:
        super().__init__(session, Schedule, tenant_id, actor_id)

    async def check_conflicts(self, candidate: Schedule) -> list[Schedule]:
        """
        Live slots that collide with ``candidate``.

        A slot collides when it is on the same day, shares the class, the
        teacher or a non-empty room, overlaps the half-open interval
        ``[start_time, end_time)`` and is not the candidate itself.
        """
        shared = [Schedule.class_id == candidate.class_id, Schedule.teacher_id == candidate.teacher_id]
        if candidate.room:
            shared.append(and_(Schedule.room != "", Schedule.room == candidate.room))

        criteria = [
            Schedule.day_of_week == candidate.day_of_week,
            or_(*shared),
            Schedule.start_time < candidate.end_time,
            Schedule.end_time > candidate.start_time,
        ]
        if candidate.id is not None:
            criteria.append(Schedule.id != candidate.id)

        conflicts = await self.find(*criteria, order_by=(Schedule.start_time,))
        if conflicts:
            logger.debug(f"Schedule candidate day={candidate.day_of_week} "
                         f"{candidate.start_time}-{candidate.end_time} has {len(conflicts)} conflict(s)")
        return conflicts

    async def list_by_class(self, class_id: UUID) -> list[Schedule]:
        return await self.find(
            Schedule.class_id == class_id,
            order_by=(Schedule.day_of_week, Schedule.start_time),
        )

    async def list_by_teacher(self, teacher_id: UUID) -> list[Schedule]:
        return await self.find(
            Schedule.teacher_id == teacher_id,
            order_by=(Schedule.day_of_week, Schedule.start_time),
        )


class ScheduleTemplateRepository(BaseRepository[ScheduleTemplate]):
    def __init__(self, session: AsyncSession, tenant_id: str, actor_id: Optional[UUID] = None) -> None:
        super().__init__(session, ScheduleTemplate, tenant_id, actor_id)
        self.items = BaseRepository(session, ScheduleTemplateItem, tenant_id, actor_id)

    async def list_items(self, template_id: UUID) -> list[ScheduleTemplateItem]:
        return await self.items.find(
            ScheduleTemplateItem.template_id == template_id,
            order_by=(ScheduleTemplateItem.day_of_week, ScheduleTemplateItem.start_time),
        )

    async def get_with_items(self, id: UUID) -> ScheduleTemplate | None:
        template = await self.get_by_id(id)
        if template is not None:
            template.items = await self.list_items(template.id)
        return template

    async def create_with_items(
        self, template: ScheduleTemplate, items: list[ScheduleTemplateItem]
    ) -> ScheduleTemplate:
        await self.create(template)
        for item in items:
            item.template_id = template.id
        template.items = await self.items.bulk_create(items) if items else []
        return template

    async def add_item(self, item: ScheduleTemplateItem) -> ScheduleTemplateItem:
        return await self.items.create(item)

    async def get_item(self, item_id: UUID) -> ScheduleTemplateItem | None:
        return await self.items.get_by_id(item_id)

    async def delete_item(self, item: ScheduleTemplateItem) -> None:
        await self.items.soft_delete(item)
