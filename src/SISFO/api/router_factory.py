import textwrap
from typing import Any, Callable, Iterable, Optional, Type, TypeVar

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import BaseModel

from SISFO.api.deps import get_context, parse_id
from SISFO.api.envelope import success
from SISFO.services import EntityService, ServiceContext

ModelT = TypeVar("ModelT")
SchemaT = TypeVar("SchemaT", bound=BaseModel)


def _get_model_note(model: type) -> str:
    note = getattr(model, "NOTE", "") or ""
    return " ".join(note.strip().split())


def _note_summary(note: str, table_name: str) -> str:
    table_label = table_name.replace("_", " ").title()
    if not note:
        return table_label
    lower = note.lower()
    desc_idx = lower.find("description=")
    desc_part = note[desc_idx + len("description="):] if desc_idx != -1 else note
    for sep in (";", "."):
        if sep in desc_part:
            desc_part = desc_part.split(sep, 1)[0]
            break
    return desc_part.strip() or table_label


def _with_model_note(note: str, extra: str) -> str:
    if note:
        return textwrap.dedent(f"""{note}\n\n{extra}""").strip()
    return extra


def build_crud_router(
    *,
    model: Type[ModelT],
    create_schema: Type[SchemaT],
    read_schema: Type[SchemaT],
    update_schema: Optional[Type[SchemaT]] = None,
    path_prefix: str,
    tags: Optional[Iterable[str]] = None,
    validator: Optional[Callable[[Any], None]] = None,
    label: Optional[str] = None,
) -> APIRouter:
    """
    Tenant-scoped list/get/create/update/soft-delete routes for ``model``,
    all answering with the standard envelope.
    """
    update_schema = update_schema or create_schema
    router = APIRouter(prefix=path_prefix, tags=list(tags or []))

    table_name = getattr(model, "__tablename__", model.__name__.lower())
    label = label or table_name.rstrip("s").replace("_", " ")
    model_note = _get_model_note(model)
    summary = _note_summary(model_note, table_name)

    def service(ctx: ServiceContext) -> EntityService:
        return EntityService(ctx, model, validator=validator, label=label)

    def out(obj: Any) -> dict:
        return read_schema.model_validate(obj).model_dump(mode="json")

    # LIST
    async def list_items(
        request: Request,
        limit: int = Query(default=100, ge=1, le=1000),
        offset: int = Query(default=0, ge=0),
        ctx: ServiceContext = Depends(get_context),
    ):
        rows, total = await service(ctx).list(limit=limit, offset=offset)
        return success(request, [out(r) for r in rows], meta={"total": total, "limit": limit, "offset": offset})

    router.add_api_route(
        "",
        list_items,
        methods=["GET"],
        summary=f"List {summary}",
        description=_with_model_note(
            model_note,
            f"Retrieve a paginated list of live `{table_name}` records of the tenant. "
            "Use `limit` and `offset` query parameters for pagination.",
        ),
    )

    # GET ONE
    async def get_item(item_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
        obj = await service(ctx).get(parse_id(item_id))
        return success(request, out(obj))

    router.add_api_route(
        "/{item_id}",
        get_item,
        methods=["GET"],
        summary=f"Get {summary}",
        description=_with_model_note(
            model_note,
            f"Retrieve a single `{table_name}` record. Returns 404 if absent or deleted.",
        ),
    )

    # CREATE
    async def create_item(payload: create_schema, request: Request, ctx: ServiceContext = Depends(get_context)):
        obj = await service(ctx).create(payload.model_dump())
        return success(request, out(obj), status_code=status.HTTP_201_CREATED)

    router.add_api_route(
        "",
        create_item,
        methods=["POST"],
        status_code=status.HTTP_201_CREATED,
        summary=f"Create {summary}",
        description=_with_model_note(model_note, f"Create a new `{table_name}` record."),
    )

    # UPDATE
    async def update_item(
        item_id: str, payload: update_schema, request: Request, ctx: ServiceContext = Depends(get_context)
    ):
        obj = await service(ctx).update(parse_id(item_id), payload.model_dump(exclude_unset=True))
        return success(request, out(obj))

    router.add_api_route(
        "/{item_id}",
        update_item,
        methods=["PUT"],
        summary=f"Update {summary}",
        description=_with_model_note(
            model_note,
            f"Partially update a `{table_name}` record; omitted fields are left unchanged.",
        ),
    )

    # DELETE
    async def delete_item(item_id: str, request: Request, ctx: ServiceContext = Depends(get_context)):
        await service(ctx).delete(parse_id(item_id))
        return success(request, None)

    router.add_api_route(
        "/{item_id}",
        delete_item,
        methods=["DELETE"],
        summary=f"Delete {summary}",
        description=_with_model_note(model_note, f"Soft delete a `{table_name}` record."),
    )

    return router
