"""User repository (tenant-scoped session)."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from msls.infrastructure.persistence.models.user import User
from msls.infrastructure.persistence.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def get_by_email(self, tenant_id: str, email: str) -> User | None:
        """Return the user with this email in the tenant (case-insensitive)."""
        return await self.first_where(User.tenant_id == tenant_id, User.email == email.lower())
