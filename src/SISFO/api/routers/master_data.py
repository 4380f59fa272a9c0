# src/SISFO/api/routers/master_data.py
from fastapi import APIRouter

from SISFO.api.router_factory import build_crud_router
from SISFO.db.models import AcademicYear, GradeCategory, SchoolClass, Student, Subject, Teacher
from SISFO.domain import validation as v
from SISFO.schemas.academic import (
    AcademicYearCreate,
    AcademicYearOut,
    AcademicYearUpdate,
    ClassCreate,
    ClassOut,
    ClassUpdate,
    StudentCreate,
    StudentOut,
    StudentUpdate,
    SubjectCreate,
    SubjectOut,
    SubjectUpdate,
    TeacherCreate,
    TeacherOut,
    TeacherUpdate,
)
from SISFO.schemas.grading import GradeCategoryCreate, GradeCategoryOut, GradeCategoryUpdate

router = APIRouter()

_RESOURCES = [
    # model, create, read, update, prefix, tag, validator, label
    (AcademicYear, AcademicYearCreate, AcademicYearOut, AcademicYearUpdate,
     "/academic-years", "academic-years", v.validate_academic_year, "academic year"),
    (Subject, SubjectCreate, SubjectOut, SubjectUpdate,
     "/subjects", "subjects", v.validate_subject, "subject"),
    (Teacher, TeacherCreate, TeacherOut, TeacherUpdate,
     "/teachers", "teachers", v.validate_person, "teacher"),
    (Student, StudentCreate, StudentOut, StudentUpdate,
     "/students", "students", v.validate_person, "student"),
    (SchoolClass, ClassCreate, ClassOut, ClassUpdate,
     "/classes", "classes", v.validate_class, "class"),
    (GradeCategory, GradeCategoryCreate, GradeCategoryOut, GradeCategoryUpdate,
     "/grade-categories", "grade-categories", v.validate_grade_category, "grade category"),
]

for model, create, read, update, prefix, tag, validator, label in _RESOURCES:
    router.include_router(
        build_crud_router(
            model=model,
            create_schema=create,
            read_schema=read,
            update_schema=update,
            path_prefix=prefix,
            tags=[tag],
            validator=validator,
            label=label,
        )
    )
