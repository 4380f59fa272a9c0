"""
Schedule engine: conflict-checked slot creation and update, atomic bulk
insert, and materialisation of schedule templates.

Candidates are probed against persisted slots and pairwise against the
other members of the same batch. The probe is advisory; the exclusion
constraints on PostgreSQL remain the guard under concurrency.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence
from uuid import UUID

from SISFO.db.models import Schedule
from SISFO.domain.validation import validate_schedule
from SISFO.errors import (
    MissingTeacherForSubjectError,
    ScheduleConflictError,
    TemplateEmptyError,
    ValidationError,
)
from SISFO.repositories import slots_overlap

from .base import BaseService, bounded

SLOT_FIELDS = ("class_id", "subject_id", "teacher_id", "day_of_week", "start_time", "end_time", "room")


def slot_summary(s: Schedule) -> dict[str, Any]:
    return {
        "id": str(s.id) if s.id is not None else None,
        "class_id": str(s.class_id),
        "subject_id": str(s.subject_id),
        "teacher_id": str(s.teacher_id),
        "day_of_week": s.day_of_week,
        "start_time": s.start_time,
        "end_time": s.end_time,
        "room": s.room,
    }


class ScheduleService(BaseService):
    def _candidate(self, data: Mapping[str, Any]) -> Schedule:
        slot = Schedule(**{k: data.get(k) for k in SLOT_FIELDS if k in data})
        slot.tenant_id = self.tenant_id
        if slot.room is None:
            slot.room = ""
        validate_schedule(slot)
        return slot

    def _candidates(self, items: Sequence[Mapping[str, Any]]) -> list[Schedule]:
        slots: list[Schedule] = []
        errors: dict[str, str] = {}
        for i, data in enumerate(items):
            try:
                slots.append(self._candidate(data))
            except ValidationError as exc:
                errors.update({f"schedules[{i}].{k}": v for k, v in exc.errors.items()})
        if errors:
            raise ValidationError(errors)
        return slots

    async def _probe(self, candidates: Sequence[Schedule]) -> None:
        conflicts: list[dict[str, Any]] = []
        for i, cand in enumerate(candidates):
            for existing in await self.repos.schedules.check_conflicts(cand):
                conflicts.append({"candidate_index": i, "existing": slot_summary(existing)})
            for j in range(i):
                if slots_overlap(candidates[j], cand):
                    conflicts.append({"candidate_index": i, "batch_index": j, "existing": slot_summary(candidates[j])})
        if conflicts:
            raise ScheduleConflictError(conflicts)

    @bounded("schedule.create")
    async def create(self, data: Mapping[str, Any]) -> Schedule:
        slot = self._candidate(data)
        await self._probe([slot])
        async with self.transaction():
            await self.repos.schedules.create(slot)
        return slot

    @bounded("schedule.update")
    async def update(self, id: UUID, changes: Mapping[str, Any]) -> Schedule:
        current = self.require(await self.repos.schedules.get_by_id(id), "schedule", id)
        merged = {k: getattr(current, k) for k in SLOT_FIELDS}
        merged.update({k: v for k, v in changes.items() if k in SLOT_FIELDS})
        # probe with a detached copy so nothing is autoflushed before the check
        candidate = self._candidate(merged)
        candidate.id = current.id
        await self._probe([candidate])
        async with self.transaction():
            await self.repos.schedules.update(current, **{k: getattr(candidate, k) for k in SLOT_FIELDS})
        return current

    @bounded("schedule.bulk_create")
    async def bulk_create(self, items: Sequence[Mapping[str, Any]]) -> list[Schedule]:
        if not items:
            raise ValidationError({"schedules": "at least one schedule is required"})
        slots = self._candidates(items)
        await self._probe(slots)
        async with self.transaction():
            await self.repos.schedules.bulk_create(slots)
        return slots

    @bounded("schedule.create_from_template")
    async def create_from_template(
        self,
        template_id: UUID,
        class_id: UUID,
        assignments: Mapping[UUID, UUID],
    ) -> list[Schedule]:
        """
        Materialise a template for ``class_id``. ``assignments`` maps subject
        id to teacher id; items without a subject are skipped.
        """
        template = self.require(
            await self.repos.schedule_templates.get_with_items(template_id), "schedule template", template_id
        )
        if not template.items:
            raise TemplateEmptyError(template_id)

        slots: list[Schedule] = []
        for item in template.items:
            if item.subject_id is None:
                continue
            teacher_id = assignments.get(item.subject_id)
            if teacher_id is None:
                raise MissingTeacherForSubjectError(item.subject_id)
            slot = Schedule(
                class_id=class_id,
                subject_id=item.subject_id,
                teacher_id=teacher_id,
                day_of_week=item.day_of_week,
                start_time=item.start_time,
                end_time=item.end_time,
                room="",
            )
            slot.tenant_id = template.tenant_id
            validate_schedule(slot)
            slots.append(slot)

        if not slots:
            return []
        await self._probe(slots)
        async with self.transaction():
            await self.repos.schedules.bulk_create(slots)
        return slots

    @bounded("schedule.get")
    async def get(self, id: UUID) -> Schedule:
        return self.require(await self.repos.schedules.get_by_id(id), "schedule", id)

    @bounded("schedule.list")
    async def list(self, limit: int = 100, offset: int = 0) -> tuple[list[Schedule], int]:
        rows = await self.repos.schedules.get_all(limit=limit, offset=offset)
        return rows, await self.repos.schedules.count()

    @bounded("schedule.list_by_class")
    async def list_by_class(self, class_id: UUID) -> list[Schedule]:
        return await self.repos.schedules.list_by_class(class_id)

    @bounded("schedule.list_by_teacher")
    async def list_by_teacher(self, teacher_id: UUID) -> list[Schedule]:
        return await self.repos.schedules.list_by_teacher(teacher_id)

    @bounded("schedule.delete")
    async def delete(self, id: UUID) -> None:
        slot = self.require(await self.repos.schedules.get_by_id(id), "schedule", id)
        async with self.transaction():
            await self.repos.schedules.soft_delete(slot)
