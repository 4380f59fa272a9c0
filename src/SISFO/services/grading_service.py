"""
Grading engine: assessments, idempotent grade input and weighted
per-subject final scores.

Final score policy: an assessment the student has no grade for contributes
nothing (it is skipped, not scored as zero). Category weights are relative
and normalised by their sum.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional
from uuid import UUID

from SISFO.db.models import Assessment, Grade, ReportCard
from SISFO.domain.enums import GradeStatus, ReportCardStatus
from SISFO.domain.grading import normalize_score, weighted_average
from SISFO.domain.validation import validate_assessment, validate_grade
from SISFO.errors import AlreadyPublishedError, ValidationError

from .base import BaseService, bounded

ASSESSMENT_FIELDS = (
    "teacher_id", "subject_id", "class_id", "grade_category_id", "semester_id",
    "name", "description", "max_score", "date",
)
GRADE_FIELDS = ("score", "status", "feedback", "notes", "graded_by")


@dataclass
class FinalScore:
    student_id: UUID
    class_id: UUID
    subject_id: UUID
    semester_id: Optional[UUID]
    final_score: float
    assessments_counted: int


def in_semester(assessment: Assessment, semester_id: Optional[UUID]) -> bool:
    """Assessments without a semester count for every semester."""
    return semester_id is None or assessment.semester_id is None or assessment.semester_id == semester_id


class GradingService(BaseService):
    # ---- assessments ---------------------------------------------------------

    @bounded("grading.create_assessment")
    async def create_assessment(self, data: Mapping[str, Any]) -> Assessment:
        a = Assessment(**{k: data.get(k) for k in ASSESSMENT_FIELDS})
        a.tenant_id = self.tenant_id
        a.description = a.description or ""
        validate_assessment(a)
        if await self.repos.grade_categories.get_by_id(a.grade_category_id) is None:
            raise ValidationError({"grade_category_id": "grade category not found"})
        async with self.transaction():
            await self.repos.assessments.create(a)
        return a

    @bounded("grading.get_assessment")
    async def get_assessment(self, id: UUID) -> Assessment:
        return self.require(await self.repos.assessments.get_by_id(id), "assessment", id)

    @bounded("grading.list_assessments")
    async def list_assessments(self, class_id: UUID, subject_id: UUID) -> list[Assessment]:
        return await self.repos.assessments.get_by_class_and_subject(class_id, subject_id)

    # ---- grades --------------------------------------------------------------

    async def _ensure_not_frozen(self, assessment: Assessment, student_id: UUID) -> None:
        if assessment.semester_id is None:
            return
        card = await self.repos.report_cards.find_one(
            ReportCard.student_id == student_id,
            ReportCard.semester_id == assessment.semester_id,
        )
        if card is not None and card.status == ReportCardStatus.PUBLISHED.value:
            raise AlreadyPublishedError(card.id)

    @bounded("grading.input_grade")
    async def input_grade(self, data: Mapping[str, Any]) -> Grade:
        """Create the grade, or overwrite the live one for (student, assessment)."""
        g = Grade(
            assessment_id=data.get("assessment_id"),
            student_id=data.get("student_id"),
            score=data.get("score"),
            status=data.get("status") or GradeStatus.DRAFT.value,
            feedback=data.get("feedback") or "",
            notes=data.get("notes") or "",
            graded_by=data.get("graded_by") or self.ctx.actor_id,
        )
        g.tenant_id = self.tenant_id
        validate_grade(g)

        assessment = await self.repos.assessments.get_by_id(g.assessment_id)
        if assessment is None:
            raise ValidationError({"assessment_id": "assessment not found"})
        await self._ensure_not_frozen(assessment, g.student_id)

        existing = await self.repos.grades.get_by_student_and_assessment(g.student_id, g.assessment_id)
        async with self.transaction():
            if existing is not None:
                await self.repos.grades.update(existing, **{k: getattr(g, k) for k in GRADE_FIELDS})
                return existing
            await self.repos.grades.create(g)
        return g

    @bounded("grading.list_student_grades")
    async def list_student_grades(
        self, student_id: UUID, class_id: Optional[UUID] = None, semester_id: Optional[UUID] = None
    ) -> list[Grade]:
        return await self.repos.grades.list_by_student(student_id, class_id=class_id, semester_id=semester_id)

    @bounded("grading.list_assessment_grades")
    async def list_assessment_grades(self, assessment_id: UUID) -> list[Grade]:
        self.require(await self.repos.assessments.get_by_id(assessment_id), "assessment", assessment_id)
        return await self.repos.grades.list_by_assessment(assessment_id)

    # ---- scores --------------------------------------------------------------

    async def _weighted(self, pairs: Iterable[tuple[Assessment, Grade]]) -> tuple[float, int]:
        pairs = list(pairs)
        categories = await self.repos.grade_categories.get_many({a.grade_category_id for a, _ in pairs})
        entries = []
        for a, g in pairs:
            cat = categories.get(a.grade_category_id)
            if cat is None:
                continue
            entries.append((normalize_score(g.score, a.max_score), cat.weight))
        return weighted_average(entries), len(entries)

    @bounded("grading.calculate_final_score")
    async def calculate_final_score(
        self,
        student_id: UUID,
        class_id: UUID,
        subject_id: UUID,
        semester_id: Optional[UUID] = None,
    ) -> FinalScore:
        assessments = [
            a for a in await self.repos.assessments.get_by_class_and_subject(class_id, subject_id)
            if in_semester(a, semester_id)
        ]
        score, counted = 0.0, 0
        if assessments:
            grades = await self.repos.grades.list_for_assessments(student_id, [a.id for a in assessments])
            by_assessment = {g.assessment_id: g for g in grades}
            pairs = [(a, by_assessment[a.id]) for a in assessments if a.id in by_assessment]
            score, counted = await self._weighted(pairs)
        return FinalScore(student_id, class_id, subject_id, semester_id, score, counted)

    async def subject_scores(
        self, student_id: UUID, class_id: UUID, semester_id: Optional[UUID] = None
    ) -> dict[UUID, float]:
        """
        Final score per subject from every grade of the student whose
        assessment belongs to ``class_id`` (and the semester, when given).
        """
        grades = await self.repos.grades.list_by_student(student_id)
        assessments = await self.repos.assessments.get_many({g.assessment_id for g in grades})
        grouped: dict[UUID, list[tuple[Assessment, Grade]]] = defaultdict(list)
        for g in grades:
            a = assessments.get(g.assessment_id)
            if a is None or a.class_id != class_id or not in_semester(a, semester_id):
                continue
            grouped[a.subject_id].append((a, g))
        scores: dict[UUID, float] = {}
        for subject_id, pairs in grouped.items():
            scores[subject_id], _ = await self._weighted(pairs)
        return scores
