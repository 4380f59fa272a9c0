# src/SISFO/api/routers/grading.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from SISFO.api.deps import get_context, parse_id, parse_optional_id
from SISFO.api.envelope import success
from SISFO.schemas.grading import AssessmentCreate, AssessmentOut, FinalScoreOut, GradeInput, GradeOut
from SISFO.services import GradingService, ServiceContext

assessment_router = APIRouter(prefix="/assessments", tags=["assessments"])
grade_router = APIRouter(prefix="/grades", tags=["grades"])


def _assessment_out(a):
    return AssessmentOut.model_validate(a).model_dump(mode="json")


def _grade_out(g):
    return GradeOut.model_validate(g).model_dump(mode="json")


# ---- assessments -------------------------------------------------------------

@assessment_router.post("")
async def create_assessment(payload: AssessmentCreate, request: Request, ctx: ServiceContext = Depends(get_context)):
    a = await GradingService(ctx).create_assessment(payload.model_dump())
    return success(request, _assessment_out(a))


@assessment_router.get("")
async def list_assessments(
    request: Request,
    class_id: str = Query(...),
    subject_id: str = Query(...),
    ctx: ServiceContext = Depends(get_context),
):
    rows = await GradingService(ctx).list_assessments(parse_id(class_id, "class_id"), parse_id(subject_id, "subject_id"))
    return success(request, [_assessment_out(a) for a in rows])


@assessment_router.get("/{assessment_id}")
async def get_assessment(assessment_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    return success(request, _assessment_out(await GradingService(ctx).get_assessment(parse_id(assessment_id))))


# ---- grades ------------------------------------------------------------------

@grade_router.post("")
async def input_grade(payload: GradeInput, request: Request, ctx: ServiceContext = Depends(get_context)):
    """Create or overwrite the grade of a student for an assessment."""
    g = await GradingService(ctx).input_grade(payload.model_dump())
    return success(request, _grade_out(g))


@grade_router.get("/students/{student_id}")
async def list_student_grades(
    student_id: str,
    request: Request,
    class_id: Optional[str] = Query(default=None),
    semester_id: Optional[str] = Query(default=None),
    ctx: ServiceContext = Depends(get_context),
):
    rows = await GradingService(ctx).list_student_grades(
        parse_id(student_id, "student_id"),
        class_id=parse_optional_id(class_id, "class_id"),
        semester_id=parse_optional_id(semester_id, "semester_id"),
    )
    return success(request, [_grade_out(g) for g in rows])


@grade_router.get("/students/{student_id}/final-score")
async def final_score(
    student_id: str,
    request: Request,
    subject_id: str = Query(...),
    class_id: str = Query(...),
    semester_id: Optional[str] = Query(default=None),
    ctx: ServiceContext = Depends(get_context),
):
    result = await GradingService(ctx).calculate_final_score(
        parse_id(student_id, "student_id"),
        parse_id(class_id, "class_id"),
        parse_id(subject_id, "subject_id"),
        parse_optional_id(semester_id, "semester_id"),
    )
    return success(request, FinalScoreOut.model_validate(result).model_dump(mode="json"))


@grade_router.get("/assessments/{assessment_id}")
async def list_assessment_grades(assessment_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    rows = await GradingService(ctx).list_assessment_grades(parse_id(assessment_id, "assessment_id"))
    return success(request, [_grade_out(g) for g in rows])
