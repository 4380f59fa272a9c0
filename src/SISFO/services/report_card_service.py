"""
Report card engine.

``generate`` is idempotent for cards that are not yet published: an
existing card for (student, semester) is recomputed in place and its
detail rows replaced. Letter grades come from the grading rules of the
curriculum bound to the semester, or from the default A-E ladder.
PDF upload failures are logged and leave ``pdf_url`` empty; the next
generation retries the upload.
"""

from __future__ import annotations

import asyncio
import uuid
from typing import Optional
from uuid import UUID

from SISFO.app_logger import get_logger
from SISFO.core.config import settings
from SISFO.db.base import utcnow
from SISFO.db.models import ReportCard, ReportCardDetail, Semester
from SISFO.domain.enums import ReportCardStatus
from SISFO.domain.grading import GradeBand, compute_gpa, resolve_letter
from SISFO.errors import AlreadyPublishedError
from SISFO.storage import FileStorage, report_card_pdf_path

from .base import BaseService, ServiceContext, bounded
from .grading_service import GradingService
from .pdf import render_report_card_pdf

logger = get_logger(__name__)


class ReportCardService(BaseService):
    def __init__(
        self,
        ctx: ServiceContext,
        storage: Optional[FileStorage] = None,
        default_credit: Optional[int] = None,
    ) -> None:
        super().__init__(ctx)
        self.storage = storage
        self.default_credit = default_credit or settings.DEFAULT_SUBJECT_CREDIT
        self.grading = GradingService(ctx)

    async def _grade_bands(self, semester: Semester) -> list[GradeBand]:
        if semester.curriculum_id is None:
            return []
        rules = await self.repos.grading_rules.list_by_curriculum(semester.curriculum_id)
        return [GradeBand(r.grade, r.min_score, r.max_score, r.points) for r in rules]

    async def _build_details(
        self, student_id: UUID, class_id: UUID, semester: Semester
    ) -> list[ReportCardDetail]:
        scores = await self.grading.subject_scores(student_id, class_id, semester.id)
        bands = await self._grade_bands(semester)
        subjects = await self.repos.subjects.get_many(list(scores))
        details: list[ReportCardDetail] = []
        for subject_id, final in scores.items():
            subject = subjects.get(subject_id)
            letter, points = resolve_letter(final, bands)
            credit = subject.credit_units if subject is not None and subject.credit_units > 0 else self.default_credit
            d = ReportCardDetail(
                subject_id=subject_id,
                subject_name=subject.name if subject is not None else f"Subject {str(subject_id)[:8]}",
                credit=credit,
                final_score=round(final, 2),
                grade_letter=letter,
                points=points,
                comments="",
            )
            d.tenant_id = self.tenant_id
            details.append(d)
        details.sort(key=lambda d: (d.subject_name, str(d.subject_id)))
        return details

    async def _publish_pdf(self, card: ReportCard, details: list[ReportCardDetail], student_name: str) -> str:
        if self.storage is None:
            return ""
        path = report_card_pdf_path(self.tenant_id, card.id)
        try:
            content = await asyncio.to_thread(render_report_card_pdf, card, details, student_name)
            return await self.storage.upload(path, content)
        except Exception:
            logger.warning("report card pdf upload failed", exc_info=True,
                           extra={"report_card_id": str(card.id), "path": path})
            return ""

    @bounded("report_card.generate")
    async def generate(
        self,
        student_id: UUID,
        class_id: UUID,
        semester_id: UUID,
        comments: Optional[str] = None,
    ) -> ReportCard:
        existing = await self.repos.report_cards.get_by_student_and_semester(student_id, semester_id)
        if existing is not None and existing.status == ReportCardStatus.PUBLISHED.value:
            raise AlreadyPublishedError(existing.id)

        semester = self.require(await self.repos.semesters.get_by_id(semester_id), "semester", semester_id)
        student = self.require(await self.repos.students.get_by_id(student_id), "student", student_id)
        details = await self._build_details(student_id, class_id, semester)
        gpa, total_credits = compute_gpa((d.points, d.credit) for d in details)

        # Work on a detached card so the upload runs before anything is flushed.
        card = ReportCard(
            id=existing.id if existing is not None else uuid.uuid4(),
            student_id=student_id,
            class_id=class_id,
            semester_id=semester_id,
            status=ReportCardStatus.GENERATED.value,
            gpa=round(gpa, 2),
            total_credits=total_credits,
            rank=existing.rank if existing is not None else 0,
            attendance=existing.attendance if existing is not None else 0,
            attendance_summary=dict(existing.attendance_summary or {}) if existing is not None else {},
            comments=comments if comments is not None else (existing.comments if existing is not None else ""),
            generated_at=utcnow(),
        )
        card.tenant_id = self.tenant_id
        card.pdf_url = await self._publish_pdf(card, details, student.name)

        async with self.transaction():
            if existing is None:
                await self.repos.report_cards.create_with_details(card, details)
                return card
            await self.repos.report_cards.update_with_details(
                existing_with(existing, card), details
            )
        return existing

    @bounded("report_card.publish")
    async def publish(self, id: UUID) -> ReportCard:
        card = self.require(await self.repos.report_cards.get_with_details(id), "report card", id)
        if card.status == ReportCardStatus.PUBLISHED.value:
            raise AlreadyPublishedError(card.id)
        async with self.transaction():
            await self.repos.report_cards.update(
                card, status=ReportCardStatus.PUBLISHED.value, published_at=utcnow()
            )
        return card

    @bounded("report_card.get")
    async def get(self, id: UUID) -> ReportCard:
        return self.require(await self.repos.report_cards.get_with_details(id), "report card", id)

    @bounded("report_card.list_by_student")
    async def list_by_student(self, student_id: UUID, semester_id: Optional[UUID] = None) -> list[ReportCard]:
        return await self.repos.report_cards.list_by_student(student_id, semester_id)

    @bounded("report_card.render_pdf")
    async def render_pdf(self, id: UUID) -> bytes:
        card = self.require(await self.repos.report_cards.get_with_details(id), "report card", id)
        student = await self.repos.students.get_by_id(card.student_id)
        return await asyncio.to_thread(
            render_report_card_pdf, card, card.details, student.name if student is not None else None
        )


def existing_with(existing: ReportCard, fresh: ReportCard) -> ReportCard:
    """Copy the recomputed values of ``fresh`` onto the persisted ``existing`` card."""
    for key in (
        "class_id", "status", "gpa", "total_credits", "comments", "pdf_url", "generated_at",
    ):
        setattr(existing, key, getattr(fresh, key))
    return existing
