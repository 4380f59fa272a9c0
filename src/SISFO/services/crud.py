"""
Generic tenant-scoped CRUD for master data (academic years, subjects,
teachers, students, classes, grade categories).
"""

from __future__ import annotations

from typing import Any, Callable, Generic, Optional, TypeVar
from uuid import UUID

from SISFO.repositories.base import BaseRepository

from .base import BaseService, ServiceContext, bounded

ModelT = TypeVar("ModelT")


class EntityService(BaseService, Generic[ModelT]):
    def __init__(
        self,
        ctx: ServiceContext,
        model: type[ModelT],
        validator: Optional[Callable[[Any], None]] = None,
        label: Optional[str] = None,
    ) -> None:
        super().__init__(ctx)
        self.model = model
        self.validator = validator
        self.label = label or model.__name__
        self.repo: BaseRepository = BaseRepository(ctx.session, model, ctx.tenant_id, ctx.actor_id)

    def _validate(self, obj: Any) -> None:
        # tenant_id must be in place before validators run
        obj.tenant_id = self.tenant_id
        if self.validator is not None:
            self.validator(obj)

    @bounded("entity.create")
    async def create(self, data: dict[str, Any]) -> ModelT:
        obj = self.model(**data)
        self._validate(obj)
        async with self.transaction():
            await self.repo.create(obj)
        return obj

    @bounded("entity.get")
    async def get(self, id: UUID) -> ModelT:
        return self.require(await self.repo.get_by_id(id), self.label, id)

    @bounded("entity.list")
    async def list(self, limit: int = 100, offset: int = 0) -> tuple[list[ModelT], int]:
        rows = await self.repo.get_all(limit=limit, offset=offset)
        return rows, await self.repo.count()

    @bounded("entity.update")
    async def update(self, id: UUID, changes: dict[str, Any]) -> ModelT:
        obj = self.require(await self.repo.get_by_id(id), self.label, id)
        for key, value in changes.items():
            setattr(obj, key, value)
        self._validate(obj)
        async with self.transaction():
            await self.repo.update(obj)
        return obj

    @bounded("entity.delete")
    async def delete(self, id: UUID) -> None:
        obj = self.require(await self.repo.get_by_id(id), self.label, id)
        async with self.transaction():
            await self.repo.soft_delete(obj)
