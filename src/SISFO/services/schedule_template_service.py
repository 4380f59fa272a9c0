from __future__ import annotations

from typing import Any, Mapping, Sequence
from uuid import UUID

from SISFO.db.models import ScheduleTemplate, ScheduleTemplateItem
from SISFO.domain.validation import validate_schedule_template, validate_template_item
from SISFO.errors import ValidationError

from .base import BaseService, bounded

ITEM_FIELDS = ("subject_id", "day_of_week", "start_time", "end_time")


class ScheduleTemplateService(BaseService):
    def _item(self, data: Mapping[str, Any]) -> ScheduleTemplateItem:
        item = ScheduleTemplateItem(**{k: data.get(k) for k in ITEM_FIELDS})
        item.tenant_id = self.tenant_id
        validate_template_item(item)
        return item

    def _items(self, items: Sequence[Mapping[str, Any]]) -> list[ScheduleTemplateItem]:
        out: list[ScheduleTemplateItem] = []
        errors: dict[str, str] = {}
        for i, data in enumerate(items):
            try:
                out.append(self._item(data))
            except ValidationError as exc:
                errors.update({f"items[{i}].{k}": v for k, v in exc.errors.items()})
        if errors:
            raise ValidationError(errors)
        return out

    @bounded("schedule_template.create")
    async def create(self, data: Mapping[str, Any], items: Sequence[Mapping[str, Any]] = ()) -> ScheduleTemplate:
        template = ScheduleTemplate(
            name=data.get("name"),
            description=data.get("description") or "",
            is_active=data.get("is_active", True),
        )
        template.tenant_id = self.tenant_id
        validate_schedule_template(template)
        rows = self._items(items)
        async with self.transaction():
            await self.repos.schedule_templates.create_with_items(template, rows)
        return template

    @bounded("schedule_template.get")
    async def get(self, id: UUID) -> ScheduleTemplate:
        return self.require(await self.repos.schedule_templates.get_with_items(id), "schedule template", id)

    @bounded("schedule_template.list")
    async def list(self, limit: int = 100, offset: int = 0) -> tuple[list[ScheduleTemplate], int]:
        rows = await self.repos.schedule_templates.get_all(limit=limit, offset=offset)
        for t in rows:
            t.items = await self.repos.schedule_templates.list_items(t.id)
        return rows, await self.repos.schedule_templates.count()

    @bounded("schedule_template.update")
    async def update(self, id: UUID, changes: Mapping[str, Any]) -> ScheduleTemplate:
        template = self.require(await self.repos.schedule_templates.get_with_items(id), "schedule template", id)
        for key in ("name", "description", "is_active"):
            if key in changes and changes[key] is not None:
                setattr(template, key, changes[key])
        validate_schedule_template(template)
        async with self.transaction():
            await self.repos.schedule_templates.update(template)
        return template

    @bounded("schedule_template.delete")
    async def delete(self, id: UUID) -> None:
        template = self.require(await self.repos.schedule_templates.get_by_id(id), "schedule template", id)
        async with self.transaction():
            await self.repos.schedule_templates.soft_delete(template)

    @bounded("schedule_template.add_item")
    async def add_item(self, template_id: UUID, data: Mapping[str, Any]) -> ScheduleTemplateItem:
        self.require(await self.repos.schedule_templates.get_by_id(template_id), "schedule template", template_id)
        item = self._item(data)
        item.template_id = template_id
        async with self.transaction():
            await self.repos.schedule_templates.add_item(item)
        return item

    @bounded("schedule_template.delete_item")
    async def delete_item(self, item_id: UUID) -> None:
        item = self.require(await self.repos.schedule_templates.get_item(item_id), "schedule template item", item_id)
        async with self.transaction():
            await self.repos.schedule_templates.delete_item(item)
