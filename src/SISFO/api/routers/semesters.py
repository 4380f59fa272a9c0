# src/SISFO/api/routers/semesters.py
from fastapi import APIRouter, Depends, Query, Request, status

from SISFO.api.deps import get_context, parse_id
from SISFO.api.envelope import success
from SISFO.schemas.academic import SemesterCreate, SemesterOut, SemesterUpdate
from SISFO.services import SemesterService, ServiceContext

router = APIRouter(prefix="/semesters", tags=["semesters"])


def _out(s):
    return SemesterOut.model_validate(s).model_dump(mode="json")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_semester(payload: SemesterCreate, request: Request, ctx: ServiceContext = Depends(get_context)):
    sem = await SemesterService(ctx).create(payload.model_dump())
    return success(request, _out(sem), status_code=status.HTTP_201_CREATED)


@router.get("")
async def list_semesters(
    request: Request,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    ctx: ServiceContext = Depends(get_context),
):
    rows, total = await SemesterService(ctx).list(limit=limit, offset=offset)
    return success(request, [_out(s) for s in rows], meta={"total": total, "limit": limit, "offset": offset})


@router.get("/academic-year/{academic_year_id}")
async def list_by_academic_year(academic_year_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    rows = await SemesterService(ctx).list_by_academic_year(parse_id(academic_year_id, "academic_year_id"))
    return success(request, [_out(s) for s in rows])


@router.get("/{semester_id}")
async def get_semester(semester_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    return success(request, _out(await SemesterService(ctx).get(parse_id(semester_id))))


@router.put("/{semester_id}")
async def update_semester(
    semester_id: str, payload: SemesterUpdate, request: Request, ctx: ServiceContext = Depends(get_context)
):
    sem = await SemesterService(ctx).update(parse_id(semester_id), payload.model_dump(exclude_unset=True))
    return success(request, _out(sem))


@router.post("/{semester_id}/activate")
async def activate_semester(semester_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    return success(request, _out(await SemesterService(ctx).activate(parse_id(semester_id))))


@router.delete("/{semester_id}")
async def delete_semester(semester_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    await SemesterService(ctx).delete(parse_id(semester_id))
    return success(request, None)
