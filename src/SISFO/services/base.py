"""
Shared plumbing for the engines: request-scoped context, repository access,
per-call deadlines and the unit-of-work helper.
"""

from __future__ import annotations

import asyncio
import functools
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, TypeVar
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from SISFO.core.config import settings
from SISFO.db.session import transaction
from SISFO.errors import DeadlineExceededError, NotFoundError
from SISFO.repositories import RepositoryFactory

T = TypeVar("T")


@dataclass
class ServiceContext:
    session: AsyncSession
    tenant_id: str
    actor_id: Optional[UUID] = None
    timeout: float = field(default_factory=lambda: settings.CALL_TIMEOUT_SECONDS)


async def with_deadline(aw: Awaitable[T], operation: str, timeout: float) -> T:
    """Await ``aw`` for at most ``timeout`` seconds; expiry cancels it."""
    try:
        return await asyncio.wait_for(aw, timeout=timeout)
    except asyncio.TimeoutError as e:
        raise DeadlineExceededError(operation, timeout) from e


def bounded(operation: str) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Run a service coroutine method under the context's call deadline."""

    def decorator(fn: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(fn)
        async def wrapper(self: "BaseService", *args: Any, **kwargs: Any) -> T:
            return await with_deadline(fn(self, *args, **kwargs), operation, self.ctx.timeout)

        return wrapper

    return decorator


class BaseService:
    def __init__(self, ctx: ServiceContext) -> None:
        self.ctx = ctx
        self.session = ctx.session
        self.tenant_id = ctx.tenant_id
        self.repos = RepositoryFactory(ctx.session, ctx.tenant_id, ctx.actor_id)

    def transaction(self):
        return transaction(self.session)

    @staticmethod
    def require(instance: Optional[T], entity: str, entity_id: Any) -> T:
        if instance is None:
            raise NotFoundError(entity, entity_id)
        return instance


__all__ = ["ServiceContext", "BaseService", "bounded", "with_deadline"]
