"""
Class membership: subject assignments and capacity-checked enrollment.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence
from uuid import UUID

from SISFO.db.models import ClassSubject, Enrollment, SchoolClass
from SISFO.domain.enums import EnrollmentStatus
from SISFO.domain.validation import validate_class_subject, validate_enrollment
from SISFO.errors import CapacityExceededError, ConflictError, DuplicateClassSubjectError, ValidationError

from .base import BaseService, bounded


class ClassSubjectService(BaseService):
    @bounded("class_subject.assign")
    async def assign(self, class_id: UUID, subject_id: UUID, teacher_id: Optional[UUID] = None) -> ClassSubject:
        cs = ClassSubject(class_id=class_id, subject_id=subject_id, teacher_id=teacher_id)
        cs.tenant_id = self.tenant_id
        validate_class_subject(cs)
        self.require(await self.repos.classes.get_by_id(class_id), "class", class_id)
        self.require(await self.repos.subjects.get_by_id(subject_id), "subject", subject_id)
        if teacher_id is not None:
            self.require(await self.repos.teachers.get_by_id(teacher_id), "teacher", teacher_id)
        if await self.repos.class_subjects.get_by_class_and_subject(class_id, subject_id) is not None:
            raise DuplicateClassSubjectError(class_id, subject_id)
        async with self.transaction():
            await self.repos.class_subjects.create(cs)
        return cs

    @bounded("class_subject.list_by_class")
    async def list_by_class(self, class_id: UUID) -> list[ClassSubject]:
        return await self.repos.class_subjects.list_by_class(class_id)

    @bounded("class_subject.set_teacher")
    async def set_teacher(self, id: UUID, teacher_id: Optional[UUID]) -> ClassSubject:
        cs = self.require(await self.repos.class_subjects.get_by_id(id), "class subject", id)
        if teacher_id is not None:
            self.require(await self.repos.teachers.get_by_id(teacher_id), "teacher", teacher_id)
        async with self.transaction():
            await self.repos.class_subjects.update(cs, teacher_id=teacher_id)
        return cs

    @bounded("class_subject.remove")
    async def remove(self, id: UUID) -> None:
        cs = self.require(await self.repos.class_subjects.get_by_id(id), "class subject", id)
        async with self.transaction():
            await self.repos.class_subjects.soft_delete(cs)


class EnrollmentService(BaseService):
    async def _load_class(self, class_id: UUID) -> SchoolClass:
        return self.require(await self.repos.classes.get_by_id(class_id), "class", class_id)

    async def _check_capacity(self, klass: SchoolClass, adding: int) -> None:
        active = await self.repos.enrollments.count_active(klass.id)
        if active + adding > klass.capacity:
            raise CapacityExceededError(klass.id, klass.capacity, active + adding)

    def _build(self, class_id: UUID, student_id: UUID) -> Enrollment:
        e = Enrollment(class_id=class_id, student_id=student_id, status=EnrollmentStatus.ACTIVE.value)
        e.tenant_id = self.tenant_id
        validate_enrollment(e)
        return e

    async def _ensure_not_enrolled(self, class_id: UUID, student_id: UUID) -> None:
        if await self.repos.enrollments.get_active(class_id, student_id) is not None:
            raise ConflictError(
                "enrollment conflict: student already enrolled in class",
                details={"class_id": str(class_id), "student_id": str(student_id)},
            )

    @bounded("enrollment.enroll")
    async def enroll(self, class_id: UUID, student_id: UUID) -> Enrollment:
        e = self._build(class_id, student_id)
        klass = await self._load_class(class_id)
        self.require(await self.repos.students.get_by_id(student_id), "student", student_id)
        await self._ensure_not_enrolled(class_id, student_id)
        await self._check_capacity(klass, 1)
        async with self.transaction():
            await self.repos.enrollments.create(e)
        return e

    @bounded("enrollment.bulk_enroll")
    async def bulk_enroll(self, class_id: UUID, student_ids: Sequence[UUID]) -> list[Enrollment]:
        if not student_ids:
            raise ValidationError({"student_ids": "at least one student is required"})
        if len(set(student_ids)) != len(student_ids):
            raise ValidationError({"student_ids": "student ids must be unique"})
        klass = await self._load_class(class_id)
        rows = []
        for sid in student_ids:
            self.require(await self.repos.students.get_by_id(sid), "student", sid)
            await self._ensure_not_enrolled(class_id, sid)
            rows.append(self._build(class_id, sid))
        await self._check_capacity(klass, len(rows))
        async with self.transaction():
            await self.repos.enrollments.bulk_enroll(rows)
        return rows

    @bounded("enrollment.get")
    async def get(self, id: UUID) -> Enrollment:
        return self.require(await self.repos.enrollments.get_by_id(id), "enrollment", id)

    @bounded("enrollment.list_by_class")
    async def list_by_class(self, class_id: UUID) -> list[Enrollment]:
        return await self.repos.enrollments.list_by_class(class_id)

    @bounded("enrollment.list_by_student")
    async def list_by_student(self, student_id: UUID) -> list[Enrollment]:
        return await self.repos.enrollments.list_by_student(student_id)

    @bounded("enrollment.update_status")
    async def update_status(self, id: UUID, status: str) -> Enrollment:
        e = self.require(await self.repos.enrollments.get_by_id(id), "enrollment", id)
        if status not in {s.value for s in EnrollmentStatus}:
            raise ValidationError({"status": "status must be one of active, dropped, moved"})
        if status == EnrollmentStatus.ACTIVE.value and e.status != status:
            await self._check_capacity(await self._load_class(e.class_id), 1)
        async with self.transaction():
            await self.repos.enrollments.update(e, status=status)
        return e

    @bounded("enrollment.unenroll")
    async def unenroll(self, id: UUID) -> None:
        e = self.require(await self.repos.enrollments.get_by_id(id), "enrollment", id)
        async with self.transaction():
            await self.repos.enrollments.soft_delete(e)
