# src/SISFO/schemas/academic.py
from __future__ import annotations

from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import Field

from .base import APIModel, ORMBase


# ---- academic years ----------------------------------------------------------

class AcademicYearCreate(APIModel):
    name: str
    start_date: date
    end_date: date
    is_active: bool = False


class AcademicYearUpdate(APIModel):
    name: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: Optional[bool] = None


class AcademicYearOut(ORMBase):
    name: str
    start_date: date
    end_date: date
    is_active: bool


# ---- semesters ---------------------------------------------------------------

class SemesterCreate(APIModel):
    academic_year_id: UUID
    curriculum_id: Optional[UUID] = None
    name: str
    semester_type: str = "odd"
    start_date: date
    end_date: date
    is_active: bool = False


class SemesterUpdate(APIModel):
    curriculum_id: Optional[UUID] = None
    name: Optional[str] = None
    semester_type: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: Optional[bool] = None


class SemesterOut(ORMBase):
    academic_year_id: UUID
    curriculum_id: Optional[UUID] = None
    name: str
    semester_type: str
    start_date: date
    end_date: date
    is_active: bool


# ---- subjects ----------------------------------------------------------------

class SubjectCreate(APIModel):
    code: str
    name: str
    description: str = ""
    credit_units: int = Field(default=0, ge=0)
    type: str = ""


class SubjectUpdate(APIModel):
    code: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    credit_units: Optional[int] = Field(default=None, ge=0)
    type: Optional[str] = None


class SubjectOut(ORMBase):
    code: str
    name: str
    description: str
    credit_units: int
    type: str


# ---- teachers / students -----------------------------------------------------

class TeacherCreate(APIModel):
    user_id: Optional[UUID] = None
    nip: str = ""
    name: str
    gender: str = ""
    title_front: str = ""
    title_back: str = ""
    phone: str = ""
    email: str = ""
    status: str = "active"


class TeacherUpdate(APIModel):
    user_id: Optional[UUID] = None
    nip: Optional[str] = None
    name: Optional[str] = None
    gender: Optional[str] = None
    title_front: Optional[str] = None
    title_back: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    status: Optional[str] = None


class TeacherOut(ORMBase):
    user_id: Optional[UUID] = None
    nip: str
    name: str
    gender: str
    title_front: str
    title_back: str
    phone: str
    email: str
    status: str


class StudentCreate(APIModel):
    user_id: Optional[UUID] = None
    nis: str = ""
    nisn: str = ""
    name: str
    gender: str = ""
    birth_place: str = ""
    birth_date: Optional[date] = None
    address: str = ""
    phone: str = ""
    email: str = ""
    parent_name: str = ""
    parent_phone: str = ""
    admission_date: Optional[date] = None
    status: str = "active"


class StudentUpdate(APIModel):
    user_id: Optional[UUID] = None
    nis: Optional[str] = None
    nisn: Optional[str] = None
    name: Optional[str] = None
    gender: Optional[str] = None
    birth_place: Optional[str] = None
    birth_date: Optional[date] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    parent_name: Optional[str] = None
    parent_phone: Optional[str] = None
    admission_date: Optional[date] = None
    status: Optional[str] = None


class StudentOut(ORMBase):
    user_id: Optional[UUID] = None
    nis: str
    nisn: str
    name: str
    gender: str
    birth_place: str
    birth_date: Optional[date] = None
    address: str
    phone: str
    email: str
    parent_name: str
    parent_phone: str
    admission_date: Optional[date] = None
    status: str


# ---- classes -----------------------------------------------------------------

class ClassCreate(APIModel):
    school_id: Optional[UUID] = None
    academic_year_id: Optional[UUID] = None
    name: str
    level: int = 0
    major: str = ""
    homeroom_teacher_id: Optional[UUID] = None
    capacity: int = Field(default=0, ge=0)


class ClassUpdate(APIModel):
    school_id: Optional[UUID] = None
    academic_year_id: Optional[UUID] = None
    name: Optional[str] = None
    level: Optional[int] = None
    major: Optional[str] = None
    homeroom_teacher_id: Optional[UUID] = None
    capacity: Optional[int] = Field(default=None, ge=0)


class ClassOut(ORMBase):
    school_id: Optional[UUID] = None
    academic_year_id: Optional[UUID] = None
    name: str
    level: int
    major: str
    homeroom_teacher_id: Optional[UUID] = None
    capacity: int


# ---- class subjects / enrollments --------------------------------------------

class ClassSubjectCreate(APIModel):
    class_id: UUID
    subject_id: UUID
    teacher_id: Optional[UUID] = None


class ClassSubjectTeacher(APIModel):
    teacher_id: Optional[UUID] = None


class ClassSubjectOut(ORMBase):
    class_id: UUID
    subject_id: UUID
    teacher_id: Optional[UUID] = None


class EnrollmentCreate(APIModel):
    class_id: UUID
    student_id: UUID


class BulkEnrollmentCreate(APIModel):
    class_id: UUID
    student_ids: list[UUID]


class EnrollmentStatusUpdate(APIModel):
    status: str


class EnrollmentOut(ORMBase):
    class_id: UUID
    student_id: UUID
    status: str


# ---- curricula ---------------------------------------------------------------

class CurriculumCreate(APIModel):
    name: str
    description: str = ""
    year: int
    is_active: bool = False


class CurriculumUpdate(APIModel):
    name: Optional[str] = None
    description: Optional[str] = None
    year: Optional[int] = None
    is_active: Optional[bool] = None


class CurriculumOut(ORMBase):
    name: str
    description: str
    year: int
    is_active: bool


class CurriculumSubjectCreate(APIModel):
    subject_id: UUID
    grade_level: int = 0
    semester: int = 0


class CurriculumSubjectOut(ORMBase):
    curriculum_id: UUID
    subject_id: UUID
    grade_level: int
    semester: int


class GradingRuleCreate(APIModel):
    grade: str
    min_score: float
    max_score: float
    points: float = 0.0
    description: str = ""


class GradingRuleUpdate(APIModel):
    grade: Optional[str] = None
    min_score: Optional[float] = None
    max_score: Optional[float] = None
    points: Optional[float] = None
    description: Optional[str] = None


class GradingRuleOut(ORMBase):
    curriculum_id: UUID
    grade: str
    min_score: float
    max_score: float
    points: float
    description: str
