# src/SISFO/api/routers/report_cards.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response

from SISFO.api.deps import get_context, get_storage, parse_id, parse_optional_id
from SISFO.api.envelope import success
from SISFO.schemas.grading import ReportCardGenerate, ReportCardOut
from SISFO.services import ReportCardService, ServiceContext
from SISFO.storage import FileStorage

router = APIRouter(prefix="/report-cards", tags=["report-cards"])


def _out(card):
    return ReportCardOut.model_validate(card).model_dump(mode="json")


@router.post("/generate")
async def generate_report_card(
    payload: ReportCardGenerate,
    request: Request,
    ctx: ServiceContext = Depends(get_context),
    storage: FileStorage = Depends(get_storage),
):
    card = await ReportCardService(ctx, storage=storage).generate(
        payload.student_id, payload.class_id, payload.semester_id, comments=payload.comments
    )
    return success(request, _out(card))


@router.get("/students/{student_id}")
async def list_student_report_cards(
    student_id: str,
    request: Request,
    semester_id: Optional[str] = Query(default=None),
    ctx: ServiceContext = Depends(get_context),
):
    rows = await ReportCardService(ctx).list_by_student(
        parse_id(student_id, "student_id"), parse_optional_id(semester_id, "semester_id")
    )
    return success(request, [_out(c) for c in rows])


@router.get("/{report_card_id}")
async def get_report_card(report_card_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    return success(request, _out(await ReportCardService(ctx).get(parse_id(report_card_id))))


@router.get("/{report_card_id}/pdf")
async def download_report_card_pdf(report_card_id: str, ctx: ServiceContext = Depends(get_context)):
    rid = parse_id(report_card_id)
    content = await ReportCardService(ctx).render_pdf(rid)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="report-card-{rid}.pdf"'},
    )


@router.post("/{report_card_id}/publish")
async def publish_report_card(report_card_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
    return success(request, _out(await ReportCardService(ctx).publish(parse_id(report_card_id))))
