"""
Repository factory for creating tenant-bound repository instances.

All repositories share one session so a service can flush through several
of them and commit once.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from SISFO.app_logger import get_logger

from .academic_repository import (
    AcademicYearRepository,
    ClassRepository,
    SemesterRepository,
    StudentRepository,
    SubjectRepository,
    TeacherRepository,
)
from .assessment_repository import AssessmentRepository, GradeCategoryRepository, GradeRepository
from .curriculum_repository import CurriculumRepository, CurriculumSubjectRepository, GradingRuleRepository
from .enrollment_repository import ClassSubjectRepository, EnrollmentRepository
from .report_card_repository import ReportCardRepository
from .schedule_repository import ScheduleRepository, ScheduleTemplateRepository

logger = get_logger(__name__)


class RepositoryFactory:
    """
    Factory for repositories sharing one session, tenant and actor.
    """

    def __init__(self, session: AsyncSession, tenant_id: str, actor_id: Optional[UUID] = None) -> None:
        self.session = session
        self.tenant_id = tenant_id
        self.actor_id = actor_id
        self._repositories: Dict[str, Any] = {}
        logger.debug(f"Repository factory initialized for tenant {tenant_id}")

    def _get(self, key: str, cls: Callable[..., Any]) -> Any:
        if key not in self._repositories:
            self._repositories[key] = cls(self.session, self.tenant_id, self.actor_id)
        return self._repositories[key]

    @property
    def academic_years(self) -> AcademicYearRepository:
        return self._get("academic_years", AcademicYearRepository)

    @property
    def semesters(self) -> SemesterRepository:
        return self._get("semesters", SemesterRepository)

    @property
    def subjects(self) -> SubjectRepository:
        return self._get("subjects", SubjectRepository)

    @property
    def teachers(self) -> TeacherRepository:
        return self._get("teachers", TeacherRepository)

    @property
    def students(self) -> StudentRepository:
        return self._get("students", StudentRepository)

    @property
    def classes(self) -> ClassRepository:
        return self._get("classes", ClassRepository)

    @property
    def class_subjects(self) -> ClassSubjectRepository:
        return self._get("class_subjects", ClassSubjectRepository)

    @property
    def enrollments(self) -> EnrollmentRepository:
        return self._get("enrollments", EnrollmentRepository)

    @property
    def curricula(self) -> CurriculumRepository:
        return self._get("curricula", CurriculumRepository)

    @property
    def curriculum_subjects(self) -> CurriculumSubjectRepository:
        return self._get("curriculum_subjects", CurriculumSubjectRepository)

    @property
    def grading_rules(self) -> GradingRuleRepository:
        return self._get("grading_rules", GradingRuleRepository)

    @property
    def schedules(self) -> ScheduleRepository:
        return self._get("schedules", ScheduleRepository)

    @property
    def schedule_templates(self) -> ScheduleTemplateRepository:
        return self._get("schedule_templates", ScheduleTemplateRepository)

    @property
    def grade_categories(self) -> GradeCategoryRepository:
        return self._get("grade_categories", GradeCategoryRepository)

    @property
    def assessments(self) -> AssessmentRepository:
        return self._get("assessments", AssessmentRepository)

    @property
    def grades(self) -> GradeRepository:
        return self._get("grades", GradeRepository)

    @property
    def report_cards(self) -> ReportCardRepository:
        return self._get("report_cards", ReportCardRepository)
