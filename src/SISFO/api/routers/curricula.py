# src/SISFO/api/routers/curricula.py
from fastapi import APIRouter, Depends, Query, Request, status

from SISFO.api.deps import get_context, parse_id
from SISFO.api.envelope import success
from SISFO.schemas.academic import (
    CurriculumCreate,
    CurriculumOut,
    CurriculumSubjectCreate,
    CurriculumSubjectOut,
    CurriculumUpdate,
    GradingRuleCreate,
    GradingRuleOut,
    GradingRuleUpdate,
)
from SISFO.services import CurriculumService, ServiceContext

router = APIRouter(prefix="/curricula", tags=["curricula"])


def _out(c):
    return CurriculumOut.model_validate(c).model_dump(mode="json")


def _subject_out(cs):
    return CurriculumSubjectOut.model_validate(cs).model_dump(mode="json")


def _rule_out(r):
    return GradingRuleOut.model_validate(r).model_dump(mode="json")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_curriculum(payload: CurriculumCreate, request: Request, ctx: ServiceContext = Depends(get_context)):
    c = await CurriculumService(ctx).create(payload.model_dump())
    return success(request, _out(c), status_code=status.HTTP_201_CREATED)


@router.get("")
async def list_curricula(
    request: Request,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    ctx: ServiceContext = Depends(get_context),
):
    rows, total = await CurriculumService(ctx).list(limit=limit, offset=offset)
    return success(request, [_out(c) for c in rows], meta={"total": total, "limit": limit, "offset": offset})


@router.delete("/subjects/{curriculum_subject_id}")
async def remove_curriculum_subject(
    curriculum_subject_id: str, request: Request, ctx: ServiceContext = Depends(get_context)
):
    await CurriculumService(ctx).remove_subject(parse_id(curriculum_subject_id))
    return success(request, None)


@router.put("/grading-rules/{rule_id}")
async def update_grading_rule(
    rule_id: str, payload: GradingRuleUpdate, request: Request, ctx: ServiceContext = Depends(get_context)
):
    rule = await CurriculumService(ctx).update_grading_rule(parse_id(rule_id), payload.model_dump(exclude_unset=True))
    return success(request, _rule_out(rule))


@router.delete("/grading-rules/{rule_id}")
async def delete_grading_rule(rule_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    await CurriculumService(ctx).delete_grading_rule(parse_id(rule_id))
    return success(request, None)


@router.get("/{curriculum_id}")
async def get_curriculum(curriculum_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    return success(request, _out(await CurriculumService(ctx).get(parse_id(curriculum_id))))


@router.put("/{curriculum_id}")
async def update_curriculum(
    curriculum_id: str, payload: CurriculumUpdate, request: Request, ctx: ServiceContext = Depends(get_context)
):
    c = await CurriculumService(ctx).update(parse_id(curriculum_id), payload.model_dump(exclude_unset=True))
    return success(request, _out(c))


@router.delete("/{curriculum_id}")
async def delete_curriculum(curriculum_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    await CurriculumService(ctx).delete(parse_id(curriculum_id))
    return success(request, None)


@router.post("/{curriculum_id}/subjects", status_code=status.HTTP_201_CREATED)
async def add_curriculum_subject(
    curriculum_id: str, payload: CurriculumSubjectCreate, request: Request, ctx: ServiceContext = Depends(get_context)
):
    cs = await CurriculumService(ctx).add_subject(parse_id(curriculum_id), payload.model_dump())
    return success(request, _subject_out(cs), status_code=status.HTTP_201_CREATED)


@router.get("/{curriculum_id}/subjects")
async def list_curriculum_subjects(curriculum_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    rows = await CurriculumService(ctx).list_subjects(parse_id(curriculum_id))
    return success(request, [_subject_out(r) for r in rows])


@router.post("/{curriculum_id}/grading-rules", status_code=status.HTTP_201_CREATED)
async def add_grading_rule(
    curriculum_id: str, payload: GradingRuleCreate, request: Request, ctx: ServiceContext = Depends(get_context)
):
    rule = await CurriculumService(ctx).add_grading_rule(parse_id(curriculum_id), payload.model_dump())
    return success(request, _rule_out(rule), status_code=status.HTTP_201_CREATED)


@router.get("/{curriculum_id}/grading-rules")
async def list_grading_rules(curriculum_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    rows = await CurriculumService(ctx).list_grading_rules(parse_id(curriculum_id))
    return success(request, [_rule_out(r) for r in rows])
