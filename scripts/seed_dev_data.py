"""Seed a development database: global feature flags, a demo school, students.

Creates the default feature flags (skipping existing keys), a demo tenant with
default roles and an admin user, enables online admissions for it, and adds a
few sample students. Safe to re-run: existing rows are left alone.

Usage:
    python -m scripts.seed_dev_data [slug]

Requires: DB_* settings (.env is read by the settings loader), migrated schema.
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from datetime import date

from msls.application.services.feature_flag_service import FeatureFlagService
from msls.application.services.student_service import StudentService
from msls.application.services.tenant_service import TenantService, tenant_to_context
from msls.core.config import get_settings
from msls.core.constants import DEFAULT_FEATURE_FLAGS, FEATURE_ONLINE_ADMISSIONS
from msls.domain.enums import Gender
from msls.infrastructure.persistence.database import (
    dispose_engine,
    open_tenant_session,
    platform_transaction,
)
from msls.infrastructure.persistence.models import FeatureFlag, Student
from msls.infrastructure.persistence.repositories import (
    FeatureFlagRepository,
    StudentRepository,
    TenantRepository,
)
from msls.infrastructure.services import TenantInitializationService
from msls.shared.logging import setup_logging

logger = logging.getLogger("scripts.seed_dev_data")

DEMO_ADMIN_EMAIL = "admin@demo.school"
# Override with SEED_ADMIN_PASSWORD; the default is for local databases only.
DEMO_ADMIN_PASSWORD = os.environ.get("SEED_ADMIN_PASSWORD", "ChangeMe123!")

SAMPLE_STUDENTS = [
    ("ADM-2026-001", "Aarav", "Sharma", date(2015, 4, 12), Gender.MALE),
    ("ADM-2026-002", "Diya", "Patel", date(2014, 11, 3), Gender.FEMALE),
    ("ADM-2026-003", "Kabir", "Nair", date(2016, 1, 27), Gender.MALE),
]


async def seed_feature_flags() -> None:
    async with platform_transaction() as db:
        repo = FeatureFlagRepository(db)
        flags = FeatureFlagService(repo, flag_factory=FeatureFlag)
        for key, (name, description, default) in DEFAULT_FEATURE_FLAGS.items():
            if await repo.get_by_key(key) is not None:
                continue
            await flags.create_flag(key, name, description, default_value=default)
            logger.info("Created feature flag %s", key)


async def seed_tenant(slug: str) -> str:
    """Return the tenant id, creating the tenant and its admin if missing."""
    async with platform_transaction() as db:
        repo = TenantRepository(db)
        existing = await repo.get_by_slug(slug)
        if existing is not None:
            logger.info("Tenant %s already exists (%s)", slug, existing.id)
            return existing.id
        tenants = TenantService(repo, initializer=TenantInitializationService(db))
        result = await tenants.create_tenant(
            slug=slug,
            name="Demo Public School",
            admin_email=DEMO_ADMIN_EMAIL,
            admin_password=DEMO_ADMIN_PASSWORD,
            admin_name="Demo Admin",
        )
        await FeatureFlagService(FeatureFlagRepository(db)).set_tenant_override(
            result.tenant_id, FEATURE_ONLINE_ADMISSIONS, True
        )
        logger.info("Created tenant %s (%s), admin %s", slug, result.tenant_id, DEMO_ADMIN_EMAIL)
        return result.tenant_id


async def seed_students(tenant_id: str) -> None:
    async with platform_transaction() as db:
        tenant = await TenantRepository(db).get_by_id(tenant_id)
    ctx = tenant_to_context(tenant)
    async with open_tenant_session(ctx) as db:
        repo = StudentRepository(db)
        students = StudentService(repo, ctx, student_factory=Student)
        for number, first, last, dob, gender in SAMPLE_STUDENTS:
            if await repo.get_by_admission_number(number) is not None:
                continue
            await students.create(
                {
                    "admission_number": number,
                    "first_name": first,
                    "last_name": last,
                    "date_of_birth": dob,
                    "gender": gender,
                }
            )
            logger.info("Created student %s", number)


async def main(slug: str) -> None:
    setup_logging(get_settings().log)
    try:
        await seed_feature_flags()
        tenant_id = await seed_tenant(slug)
        await seed_students(tenant_id)
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "demo"))
