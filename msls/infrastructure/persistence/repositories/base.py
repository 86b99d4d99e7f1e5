"""Repository base: lookups, paging and flush-on-write for one mapped model.

Isolation does not rely on repository filters. Tenant-scoped repositories run
on a session from open_tenant_session, where row-level security already
restricts every statement to the bound tenant.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from msls.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_id(self, entity_id: str) -> ModelType | None:
        return await self.db.get(self.model, entity_id)

    async def first_where(self, *criteria: Any) -> ModelType | None:
        """First row matching all criteria, or None."""
        result = await self.db.execute(select(self.model).where(*criteria).limit(1))
        return result.scalar_one_or_none()

    async def page(self, stmt: Select[Any], skip: int, limit: int) -> tuple[list[ModelType], int]:
        """Run an ordered select for one page; returns (rows, total matching rows)."""
        total = await self.db.scalar(
            select(func.count()).select_from(stmt.order_by(None).subquery())
        )
        result = await self.db.execute(stmt.offset(skip).limit(limit))
        return list(result.scalars().all()), int(total or 0)

    async def create(self, obj: ModelType) -> ModelType:
        """Insert and reload so server defaults (timestamps) are populated."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Flush pending changes on an attached row and reload it."""
        await self.db.flush()
        await self.db.refresh(obj)
        return obj
