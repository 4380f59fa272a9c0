"""
Request-scoped dependencies: database session, tenant and actor resolution,
identifier parsing and the service context handed to the engines.
"""

from __future__ import annotations

from typing import AsyncGenerator, Optional
from uuid import UUID

from fastapi import Depends, Header, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from SISFO.core.config import Settings, get_settings
from SISFO.db.session import get_session, get_sessionmaker
from SISFO.errors import InvalidIdentifierError, ValidationError
from SISFO.services import ServiceContext
from SISFO.storage import FileStorage, build_storage


async def get_db(
    maker: async_sessionmaker[AsyncSession] = Depends(get_sessionmaker),
) -> AsyncGenerator[AsyncSession, None]:
    async with get_session(maker) as session:
        yield session


def parse_id(value: Optional[str], field: str = "id") -> UUID:
    """Parse a 128-bit identifier or fail with 400 / 4001."""
    if value is None:
        raise InvalidIdentifierError(field, value)
    try:
        return UUID(str(value))
    except (ValueError, AttributeError, TypeError):
        raise InvalidIdentifierError(field, value) from None


def parse_optional_id(value: Optional[str], field: str) -> Optional[UUID]:
    if value is None or value == "":
        return None
    return parse_id(value, field)


def get_tenant_id(
    x_tenant_id: Optional[str] = Header(default=None, alias="X-Tenant-ID"),
    tenant_id: Optional[str] = Query(default=None),
) -> str:
    tenant = (x_tenant_id or tenant_id or "").strip()
    if not tenant:
        raise ValidationError({"tenant_id": "tenant ID is required"}, message="tenant ID is required")
    return tenant


def get_actor_id(x_user_id: Optional[str] = Header(default=None, alias="X-User-ID")) -> Optional[UUID]:
    return parse_optional_id(x_user_id, "X-User-ID")


def get_context(
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    actor_id: Optional[UUID] = Depends(get_actor_id),
    settings: Settings = Depends(get_settings),
) -> ServiceContext:
    return ServiceContext(session=session, tenant_id=tenant_id, actor_id=actor_id,
                          timeout=settings.CALL_TIMEOUT_SECONDS)


def get_storage(request: Request, settings: Settings = Depends(get_settings)) -> FileStorage:
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        storage = build_storage(settings)
        request.app.state.storage = storage
    return storage


__all__ = [
    "get_db",
    "parse_id",
    "parse_optional_id",
    "get_tenant_id",
    "get_actor_id",
    "get_context",
    "get_storage",
]
