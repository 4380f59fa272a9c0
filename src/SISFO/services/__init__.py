"""
Engines of the academic core. Each service is bound to one request context
(session, tenant, actor, deadline) and owns its transactions.
"""

from .base import BaseService, ServiceContext, bounded, with_deadline
from .class_service import ClassSubjectService, EnrollmentService
from .crud import EntityService
from .curriculum_service import CurriculumService
from .grading_service import FinalScore, GradingService
from .report_card_service import ReportCardService
from .schedule_service import ScheduleService
from .schedule_template_service import ScheduleTemplateService
from .semester_service import SemesterService
from .student_service import StudentService

__all__ = [
    "BaseService",
    "ServiceContext",
    "bounded",
    "with_deadline",
    "ClassSubjectService",
    "EnrollmentService",
    "EntityService",
    "CurriculumService",
    "FinalScore",
    "GradingService",
    "ReportCardService",
    "ScheduleService",
    "ScheduleTemplateService",
    "SemesterService",
    "StudentService",
]
