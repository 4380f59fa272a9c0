from __future__ import annotations

from typing import Any, Mapping
from uuid import UUID

from SISFO.db.models import Curriculum, CurriculumSubject, GradingRule
from SISFO.domain.validation import validate_curriculum, validate_curriculum_subject, validate_grading_rule

from .base import BaseService, bounded

CURRICULUM_FIELDS = ("name", "description", "year", "is_active")
RULE_FIELDS = ("grade", "min_score", "max_score", "points", "description")


class CurriculumService(BaseService):
    # ---- curricula -----------------------------------------------------------

    @bounded("curriculum.create")
    async def create(self, data: Mapping[str, Any]) -> Curriculum:
        c = Curriculum(**{k: data[k] for k in CURRICULUM_FIELDS if k in data})
        c.tenant_id = self.tenant_id
        c.description = c.description or ""
        c.is_active = bool(c.is_active)
        validate_curriculum(c)
        async with self.transaction():
            await self.repos.curricula.create(c)
        return c

    @bounded("curriculum.get")
    async def get(self, id: UUID) -> Curriculum:
        return self.require(await self.repos.curricula.get_by_id(id), "curriculum", id)

    @bounded("curriculum.list")
    async def list(self, limit: int = 100, offset: int = 0) -> tuple[list[Curriculum], int]:
        rows = await self.repos.curricula.get_all(limit=limit, offset=offset)
        return rows, await self.repos.curricula.count()

    @bounded("curriculum.update")
    async def update(self, id: UUID, changes: Mapping[str, Any]) -> Curriculum:
        c = self.require(await self.repos.curricula.get_by_id(id), "curriculum", id)
        for key in CURRICULUM_FIELDS:
            if key in changes and changes[key] is not None:
                setattr(c, key, changes[key])
        validate_curriculum(c)
        async with self.transaction():
            await self.repos.curricula.update(c)
        return c

    @bounded("curriculum.delete")
    async def delete(self, id: UUID) -> None:
        c = self.require(await self.repos.curricula.get_by_id(id), "curriculum", id)
        async with self.transaction():
            await self.repos.curricula.soft_delete(c)

    # ---- curriculum subjects -------------------------------------------------

    @bounded("curriculum.add_subject")
    async def add_subject(self, curriculum_id: UUID, data: Mapping[str, Any]) -> CurriculumSubject:
        self.require(await self.repos.curricula.get_by_id(curriculum_id), "curriculum", curriculum_id)
        cs = CurriculumSubject(
            curriculum_id=curriculum_id,
            subject_id=data.get("subject_id"),
            grade_level=data.get("grade_level") or 0,
            semester=data.get("semester") or 0,
        )
        cs.tenant_id = self.tenant_id
        validate_curriculum_subject(cs)
        self.require(await self.repos.subjects.get_by_id(cs.subject_id), "subject", cs.subject_id)
        async with self.transaction():
            await self.repos.curriculum_subjects.create(cs)
        return cs

    @bounded("curriculum.list_subjects")
    async def list_subjects(self, curriculum_id: UUID) -> list[CurriculumSubject]:
        self.require(await self.repos.curricula.get_by_id(curriculum_id), "curriculum", curriculum_id)
        return await self.repos.curriculum_subjects.list_by_curriculum(curriculum_id)

    @bounded("curriculum.remove_subject")
    async def remove_subject(self, id: UUID) -> None:
        cs = self.require(await self.repos.curriculum_subjects.get_by_id(id), "curriculum subject", id)
        async with self.transaction():
            await self.repos.curriculum_subjects.soft_delete(cs)

    # ---- grading rules -------------------------------------------------------

    @bounded("curriculum.add_grading_rule")
    async def add_grading_rule(self, curriculum_id: UUID, data: Mapping[str, Any]) -> GradingRule:
        self.require(await self.repos.curricula.get_by_id(curriculum_id), "curriculum", curriculum_id)
        rule = GradingRule(curriculum_id=curriculum_id, **{k: data.get(k) for k in RULE_FIELDS})
        rule.tenant_id = self.tenant_id
        rule.description = rule.description or ""
        rule.points = rule.points or 0.0
        validate_grading_rule(rule)
        async with self.transaction():
            await self.repos.grading_rules.create(rule)
        return rule

    @bounded("curriculum.list_grading_rules")
    async def list_grading_rules(self, curriculum_id: UUID) -> list[GradingRule]:
        self.require(await self.repos.curricula.get_by_id(curriculum_id), "curriculum", curriculum_id)
        return await self.repos.grading_rules.list_by_curriculum(curriculum_id)

    @bounded("curriculum.update_grading_rule")
    async def update_grading_rule(self, id: UUID, changes: Mapping[str, Any]) -> GradingRule:
        rule = self.require(await self.repos.grading_rules.get_by_id(id), "grading rule", id)
        for key in RULE_FIELDS:
            if key in changes and changes[key] is not None:
                setattr(rule, key, changes[key])
        validate_grading_rule(rule)
        async with self.transaction():
            await self.repos.grading_rules.update(rule)
        return rule

    @bounded("curriculum.delete_grading_rule")
    async def delete_grading_rule(self, id: UUID) -> None:
        rule = self.require(await self.repos.grading_rules.get_by_id(id), "grading rule", id)
        async with self.transaction():
            await self.repos.grading_rules.soft_delete(rule)
