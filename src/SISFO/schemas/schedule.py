# src/SISFO/schemas/schedule.py
from __future__ import annotations

from typing import Any, Optional, Union
from uuid import UUID

from pydantic import Field, field_validator

from .base import APIModel, ORMBase


class ScheduleCreate(APIModel):
    class_id: UUID
    subject_id: UUID
    teacher_id: UUID
    day_of_week: int
    start_time: str
    end_time: str
    room: str = ""


class ScheduleUpdate(APIModel):
    class_id: Optional[UUID] = None
    subject_id: Optional[UUID] = None
    teacher_id: Optional[UUID] = None
    day_of_week: Optional[int] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    room: Optional[str] = None


class BulkScheduleCreate(APIModel):
    schedules: list[ScheduleCreate]


class ScheduleOut(ORMBase):
    class_id: UUID
    subject_id: UUID
    teacher_id: UUID
    day_of_week: int
    start_time: str
    end_time: str
    room: str


class TeacherAssignment(APIModel):
    subject_id: UUID
    teacher_id: UUID


class CreateFromTemplate(APIModel):
    """
    ``assignments`` maps subject id to teacher id. Both ``{"<subject>": "<teacher>"}``
    and ``[{"subject_id": ..., "teacher_id": ...}]`` are accepted.
    """

    template_id: UUID
    class_id: UUID
    assignments: Union[dict[UUID, UUID], list[TeacherAssignment]] = Field(default_factory=dict)

    @field_validator("assignments", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return {} if v is None else v

    def assignment_map(self) -> dict[UUID, UUID]:
        if isinstance(self.assignments, dict):
            return dict(self.assignments)
        return {a.subject_id: a.teacher_id for a in self.assignments}


# ---- templates ---------------------------------------------------------------

class TemplateItemCreate(APIModel):
    subject_id: Optional[UUID] = None
    day_of_week: int
    start_time: str
    end_time: str


class TemplateItemOut(APIModel):
    id: UUID
    template_id: UUID
    subject_id: Optional[UUID] = None
    day_of_week: int
    start_time: str
    end_time: str


class ScheduleTemplateCreate(APIModel):
    name: str
    description: str = ""
    is_active: bool = True
    items: list[TemplateItemCreate] = Field(default_factory=list)


class ScheduleTemplateUpdate(APIModel):
    name: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class ScheduleTemplateOut(ORMBase):
    name: str
    description: str
    is_active: bool
    items: list[TemplateItemOut] = Field(default_factory=list)
