"""
Base repository class with tenant-scoped, soft-delete-aware CRUD.

``BaseRepository.select()`` is the single place where the tenant filter and
the ``deleted_at IS NULL`` predicate are applied; every read in the
repositories is built from it. Repositories only ``flush``: the calling
service owns the transaction (see ``SISFO.db.session.transaction``).
"""

from __future__ import annotations

from typing import Any, Generic, Iterable, Optional, Protocol, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from SISFO.app_logger import get_logger
from SISFO.db.base import utcnow

logger = get_logger(__name__)


class TenantScoped(Protocol):
    id: Any
    tenant_id: Any
    deleted_at: Any


ModelType = TypeVar("ModelType", bound=TenantScoped)


class BaseRepository(Generic[ModelType]):
    """
    Repository pattern over one mapped class, bound to a tenant and an actor.

    Single-row reads return ``None`` when the row is absent (or soft deleted);
    storage errors propagate unchanged.
    """

    def __init__(
        self,
        session: AsyncSession,
        model_class: type[ModelType],
        tenant_id: str,
        actor_id: Optional[UUID] = None,
    ) -> None:
        self.session = session
        self.model_class = model_class
        self.model_name = model_class.__name__
        self.tenant_id = tenant_id
        self.actor_id = actor_id

    # ---- query builder -----------------------------------------------------

    def select(self, *criteria: Any) -> Select:
        """SELECT over live rows of this tenant, narrowed by ``criteria``."""
        m = self.model_class
        return select(m).where(m.tenant_id == self.tenant_id, m.deleted_at.is_(None), *criteria)

    async def find(
        self,
        *criteria: Any,
        order_by: Sequence[Any] = (),
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> list[ModelType]:
        stmt = self.select(*criteria)
        if order_by:
            stmt = stmt.order_by(*order_by)
        if offset:
            stmt = stmt.offset(offset)
        if limit:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        rows = list(result.scalars().all())
        logger.debug(f"Retrieved {len(rows)} {self.model_name} rows")
        return rows

    async def find_one(self, *criteria: Any) -> ModelType | None:
        result = await self.session.execute(self.select(*criteria).limit(1))
        return result.scalars().first()

    # ---- CRUD --------------------------------------------------------------

    def _stamp_new(self, instance: ModelType) -> ModelType:
        instance.tenant_id = self.tenant_id
        now = utcnow()
        if getattr(instance, "created_at", None) is None:
            instance.created_at = now
        instance.updated_at = now
        if self.actor_id is not None:
            instance.created_by = self.actor_id
            instance.updated_by = self.actor_id
        return instance

    async def create(self, instance: ModelType | None = None, **kwargs: Any) -> ModelType:
        """
        Add a new row (either a prepared instance or attributes) and flush.

        The tenant always comes from the repository, never from the caller.
        """
        if instance is None:
            instance = self.model_class(**kwargs)
        self._stamp_new(instance)
        try:
            self.session.add(instance)
            await self.session.flush()
        except Exception as e:
            logger.error(f"Failed to create {self.model_name}: {e}")
            raise
        logger.debug(f"Created {self.model_name}: {instance.id}")
        return instance

    async def bulk_create(self, instances: Iterable[ModelType]) -> list[ModelType]:
        """Add many rows with a single flush; the caller's transaction makes it atomic."""
        rows = [self._stamp_new(i) for i in instances]
        try:
            self.session.add_all(rows)
            await self.session.flush()
        except Exception as e:
            logger.error(f"Failed to bulk create {len(rows)} {self.model_name}: {e}")
            raise
        logger.debug(f"Bulk created {len(rows)} {self.model_name}")
        return rows

    async def get_by_id(self, id: UUID) -> ModelType | None:
        instance = await self.find_one(self.model_class.id == id)
        if instance is None:
            logger.debug(f"{self.model_name} not found: {id}")
        return instance

    async def get_all(self, limit: Optional[int] = None, offset: Optional[int] = None) -> list[ModelType]:
        return await self.find(
            order_by=(self.model_class.created_at.desc(), self.model_class.id),
            limit=limit,
            offset=offset,
        )

    async def count(self, *criteria: Any) -> int:
        m = self.model_class
        stmt = (
            select(func.count())
            .select_from(m)
            .where(m.tenant_id == self.tenant_id, m.deleted_at.is_(None), *criteria)
        )
        result = await self.session.execute(stmt)
        return int(result.scalar() or 0)

    async def update(self, instance: ModelType, **changes: Any) -> ModelType:
        """Apply ``changes``, refresh audit columns and flush."""
        for key, value in changes.items():
            setattr(instance, key, value)
        instance.updated_at = utcnow()
        if self.actor_id is not None:
            instance.updated_by = self.actor_id
        try:
            await self.session.flush()
        except Exception as e:
            logger.error(f"Failed to update {self.model_name} {instance.id}: {e}")
            raise
        logger.debug(f"Updated {self.model_name}: {instance.id}")
        return instance

    async def soft_delete(self, instance: ModelType) -> ModelType:
        now = utcnow()
        instance.deleted_at = now
        instance.updated_at = now
        if self.actor_id is not None:
            instance.updated_by = self.actor_id
        await self.session.flush()
        logger.debug(f"Soft deleted {self.model_name}: {instance.id}")
        return instance

    async def delete(self, id: UUID) -> bool:
        """Soft delete by id; ``False`` when there is no live row."""
        instance = await self.get_by_id(id)
        if instance is None:
            return False
        await self.soft_delete(instance)
        return True

    async def exists(self, id: UUID) -> bool:
        return await self.count(self.model_class.id == id) > 0
