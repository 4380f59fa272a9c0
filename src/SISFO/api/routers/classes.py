# src/SISFO/api/routers/classes.py
from fastapi import APIRouter, Depends, Request, status

from SISFO.api.deps import get_context, parse_id
from SISFO.api.envelope import success
from SISFO.schemas.academic import (
    BulkEnrollmentCreate,
    ClassSubjectCreate,
    ClassSubjectOut,
    ClassSubjectTeacher,
    EnrollmentCreate,
    EnrollmentOut,
    EnrollmentStatusUpdate,
)
from SISFO.services import ClassSubjectService, EnrollmentService, ServiceContext

class_subject_router = APIRouter(prefix="/class-subjects", tags=["class-subjects"])
enrollment_router = APIRouter(prefix="/enrollments", tags=["enrollments"])


def _cs_out(cs):
    return ClassSubjectOut.model_validate(cs).model_dump(mode="json")


def _enr_out(e):
    return EnrollmentOut.model_validate(e).model_dump(mode="json")


# ---- class subjects ----------------------------------------------------------

@class_subject_router.post("", status_code=status.HTTP_201_CREATED)
async def assign_subject(payload: ClassSubjectCreate, request: Request, ctx: ServiceContext = Depends(get_context)):
    cs = await ClassSubjectService(ctx).assign(payload.class_id, payload.subject_id, payload.teacher_id)
    return success(request, _cs_out(cs), status_code=status.HTTP_201_CREATED)


@class_subject_router.get("/class/{class_id}")
async def list_class_subjects(class_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    rows = await ClassSubjectService(ctx).list_by_class(parse_id(class_id, "class_id"))
    return success(request, [_cs_out(r) for r in rows])


@class_subject_router.put("/{class_subject_id}/teacher")
async def set_class_subject_teacher(
    class_subject_id: str, payload: ClassSubjectTeacher, request: Request, ctx: ServiceContext = Depends(get_context)
):
    cs = await ClassSubjectService(ctx).set_teacher(parse_id(class_subject_id), payload.teacher_id)
    return success(request, _cs_out(cs))


@class_subject_router.delete("/{class_subject_id}")
async def remove_class_subject(class_subject_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    await ClassSubjectService(ctx).remove(parse_id(class_subject_id))
    return success(request, None)


# ---- enrollments -------------------------------------------------------------

@enrollment_router.post("", status_code=status.HTTP_201_CREATED)
async def enroll(payload: EnrollmentCreate, request: Request, ctx: ServiceContext = Depends(get_context)):
    e = await EnrollmentService(ctx).enroll(payload.class_id, payload.student_id)
    return success(request, _enr_out(e), status_code=status.HTTP_201_CREATED)


@enrollment_router.post("/bulk", status_code=status.HTTP_201_CREATED)
async def bulk_enroll(payload: BulkEnrollmentCreate, request: Request, ctx: ServiceContext = Depends(get_context)):
    rows = await EnrollmentService(ctx).bulk_enroll(payload.class_id, payload.student_ids)
    return success(request, [_enr_out(e) for e in rows], status_code=status.HTTP_201_CREATED)


@enrollment_router.get("/class/{class_id}")
async def list_enrollments_by_class(class_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    rows = await EnrollmentService(ctx).list_by_class(parse_id(class_id, "class_id"))
    return success(request, [_enr_out(e) for e in rows])


@enrollment_router.get("/student/{student_id}")
async def list_enrollments_by_student(student_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    rows = await EnrollmentService(ctx).list_by_student(parse_id(student_id, "student_id"))
    return success(request, [_enr_out(e) for e in rows])


@enrollment_router.get("/{enrollment_id}")
async def get_enrollment(enrollment_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    return success(request, _enr_out(await EnrollmentService(ctx).get(parse_id(enrollment_id))))


@enrollment_router.put("/{enrollment_id}/status")
async def update_enrollment_status(
    enrollment_id: str, payload: EnrollmentStatusUpdate, request: Request, ctx: ServiceContext = Depends(get_context)
):
    e = await EnrollmentService(ctx).update_status(parse_id(enrollment_id), payload.status)
    return success(request, _enr_out(e))


@enrollment_router.delete("/{enrollment_id}")
async def unenroll(enrollment_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    await EnrollmentService(ctx).unenroll(parse_id(enrollment_id))
    return success(request, None)
