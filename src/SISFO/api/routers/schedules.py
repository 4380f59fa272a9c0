# src/SISFO/api/routers/schedules.py
from fastapi import APIRouter, Depends, Query, Request

from SISFO.api.deps import get_context, parse_id
from SISFO.api.envelope import success
from SISFO.schemas.schedule import (
    BulkScheduleCreate,
    CreateFromTemplate,
    ScheduleCreate,
    ScheduleOut,
    ScheduleTemplateCreate,
    ScheduleTemplateOut,
    ScheduleTemplateUpdate,
    TemplateItemCreate,
    TemplateItemOut,
    ScheduleUpdate,
)
from SISFO.services import ScheduleService, ScheduleTemplateService, ServiceContext

router = APIRouter(prefix="/schedules", tags=["schedules"])
template_router = APIRouter(prefix="/schedule-templates", tags=["schedule-templates"])


def _out(rows):
    return [ScheduleOut.model_validate(r).model_dump(mode="json") for r in rows]


@router.post("")
async def create_schedule(payload: ScheduleCreate, request: Request, ctx: ServiceContext = Depends(get_context)):
    slot = await ScheduleService(ctx).create(payload.model_dump())
    return success(request, ScheduleOut.model_validate(slot).model_dump(mode="json"))


@router.post("/bulk")
async def bulk_create_schedules(
    payload: BulkScheduleCreate, request: Request, ctx: ServiceContext = Depends(get_context)
):
    slots = await ScheduleService(ctx).bulk_create([s.model_dump() for s in payload.schedules])
    return success(request, _out(slots))


@router.post("/from-template")
async def create_from_template(
    payload: CreateFromTemplate, request: Request, ctx: ServiceContext = Depends(get_context)
):
    slots = await ScheduleService(ctx).create_from_template(
        payload.template_id, payload.class_id, payload.assignment_map()
    )
    return success(request, _out(slots))


@router.get("")
async def list_schedules(
    request: Request,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    ctx: ServiceContext = Depends(get_context),
):
    rows, total = await ScheduleService(ctx).list(limit=limit, offset=offset)
    return success(request, _out(rows), meta={"total": total, "limit": limit, "offset": offset})


@router.get("/class/{class_id}")
async def list_by_class(class_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    rows = await ScheduleService(ctx).list_by_class(parse_id(class_id, "class_id"))
    return success(request, _out(rows))


@router.get("/teacher/{teacher_id}")
async def list_by_teacher(teacher_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    rows = await ScheduleService(ctx).list_by_teacher(parse_id(teacher_id, "teacher_id"))
    return success(request, _out(rows))


@router.get("/{schedule_id}")
async def get_schedule(schedule_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    slot = await ScheduleService(ctx).get(parse_id(schedule_id))
    return success(request, ScheduleOut.model_validate(slot).model_dump(mode="json"))


@router.put("/{schedule_id}")
async def update_schedule(
    schedule_id: str, payload: ScheduleUpdate, request: Request, ctx: ServiceContext = Depends(get_context)
):
    slot = await ScheduleService(ctx).update(parse_id(schedule_id), payload.model_dump(exclude_unset=True))
    return success(request, ScheduleOut.model_validate(slot).model_dump(mode="json"))


@router.delete("/{schedule_id}")
async def delete_schedule(schedule_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    await ScheduleService(ctx).delete(parse_id(schedule_id))
    return success(request, None)


# ---- templates ---------------------------------------------------------------

def _template_out(t):
    return ScheduleTemplateOut.model_validate(t).model_dump(mode="json")


@template_router.post("")
async def create_template(
    payload: ScheduleTemplateCreate, request: Request, ctx: ServiceContext = Depends(get_context)
):
    template = await ScheduleTemplateService(ctx).create(
        payload.model_dump(exclude={"items"}), [i.model_dump() for i in payload.items]
    )
    return success(request, _template_out(template))


@template_router.get("")
async def list_templates(
    request: Request,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    ctx: ServiceContext = Depends(get_context),
):
    rows, total = await ScheduleTemplateService(ctx).list(limit=limit, offset=offset)
    return success(request, [_template_out(t) for t in rows], meta={"total": total, "limit": limit, "offset": offset})


@template_router.delete("/items/{item_id}")
async def delete_template_item(item_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    await ScheduleTemplateService(ctx).delete_item(parse_id(item_id, "item_id"))
    return success(request, None)


@template_router.get("/{template_id}")
async def get_template(template_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    template = await ScheduleTemplateService(ctx).get(parse_id(template_id, "template_id"))
    return success(request, _template_out(template))


@template_router.put("/{template_id}")
async def update_template(
    template_id: str, payload: ScheduleTemplateUpdate, request: Request, ctx: ServiceContext = Depends(get_context)
):
    template = await ScheduleTemplateService(ctx).update(
        parse_id(template_id, "template_id"), payload.model_dump(exclude_unset=True)
    )
    return success(request, _template_out(template))


@template_router.delete("/{template_id}")
async def delete_template(template_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    await ScheduleTemplateService(ctx).delete(parse_id(template_id, "template_id"))
    return success(request, None)


@template_router.post("/{template_id}/items")
async def add_template_item(
    template_id: str, payload: TemplateItemCreate, request: Request, ctx: ServiceContext = Depends(get_context)
):
    item = await ScheduleTemplateService(ctx).add_item(parse_id(template_id, "template_id"), payload.model_dump())
    return success(request, TemplateItemOut.model_validate(item).model_dump(mode="json"))
