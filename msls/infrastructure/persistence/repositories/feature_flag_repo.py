"""Feature flag repository: definitions plus tenant/user overrides."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from msls.infrastructure.persistence.models.feature_flag import (
    FeatureFlag,
    TenantFeatureFlag,
    UserFeatureFlag,
)
from msls.infrastructure.persistence.repositories.base import BaseRepository


class FeatureFlagRepository(BaseRepository[FeatureFlag]):
    """Flag definitions and overrides, always filtered by tenant explicitly."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, FeatureFlag)

    async def list_flags(self) -> list[FeatureFlag]:
        result = await self.db.execute(select(FeatureFlag).order_by(FeatureFlag.key))
        return list(result.scalars().all())

    async def get_by_key(self, key: str) -> FeatureFlag | None:
        return await self.first_where(FeatureFlag.key == key)

    async def tenant_overrides(self, tenant_id: str) -> dict[str, TenantFeatureFlag]:
        """Return tenant overrides keyed by flag key."""
        result = await self.db.execute(
            select(FeatureFlag.key, TenantFeatureFlag)
            .join(TenantFeatureFlag, TenantFeatureFlag.flag_id == FeatureFlag.id)
            .where(TenantFeatureFlag.tenant_id == tenant_id)
        )
        return {key: override for key, override in result.all()}

    async def user_overrides(self, tenant_id: str, user_id: str) -> dict[str, UserFeatureFlag]:
        """Return user overrides keyed by flag key."""
        result = await self.db.execute(
            select(FeatureFlag.key, UserFeatureFlag)
            .join(UserFeatureFlag, UserFeatureFlag.flag_id == FeatureFlag.id)
            .where(
                UserFeatureFlag.tenant_id == tenant_id,
                UserFeatureFlag.user_id == user_id,
            )
        )
        return {key: override for key, override in result.all()}

    async def upsert_tenant_override(
        self,
        tenant_id: str,
        flag: FeatureFlag,
        enabled: bool,
        custom_value: dict[str, Any] | None = None,
    ) -> TenantFeatureFlag:
        result = await self.db.execute(
            select(TenantFeatureFlag).where(
                TenantFeatureFlag.tenant_id == tenant_id,
                TenantFeatureFlag.flag_id == flag.id,
            )
        )
        override = result.scalar_one_or_none()
        if override is None:
            override = TenantFeatureFlag(tenant_id=tenant_id, flag_id=flag.id, enabled=enabled)
            self.db.add(override)
        override.enabled = enabled
        override.custom_value = custom_value
        await self.db.flush()
        return override

    async def upsert_user_override(
        self,
        tenant_id: str,
        user_id: str,
        flag: FeatureFlag,
        enabled: bool,
        custom_value: dict[str, Any] | None = None,
    ) -> UserFeatureFlag:
        result = await self.db.execute(
            select(UserFeatureFlag).where(
                UserFeatureFlag.tenant_id == tenant_id,
                UserFeatureFlag.user_id == user_id,
                UserFeatureFlag.flag_id == flag.id,
            )
        )
        override = result.scalar_one_or_none()
        if override is None:
            override = UserFeatureFlag(
                tenant_id=tenant_id, user_id=user_id, flag_id=flag.id, enabled=enabled
            )
            self.db.add(override)
        override.enabled = enabled
        override.custom_value = custom_value
        await self.db.flush()
        return override

    async def delete_tenant_override(self, tenant_id: str, flag: FeatureFlag) -> bool:
        result = await self.db.execute(
            select(TenantFeatureFlag).where(
                TenantFeatureFlag.tenant_id == tenant_id,
                TenantFeatureFlag.flag_id == flag.id,
            )
        )
        override = result.scalar_one_or_none()
        if override is None:
            return False
        await self.db.delete(override)
        await self.db.flush()
        return True
