"""Application service dependencies (composition root).

Routes depend on these; repositories and infrastructure are only built here.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from msls.application.services.auth_service import AuthService
from msls.application.services.authorization_service import AuthorizationService
from msls.application.services.enquiry_service import EnquiryService
from msls.application.services.student_service import StudentService
from msls.domain.context import RequestContext, TenantContext
from msls.infrastructure.cache.redis_cache import CacheService
from msls.infrastructure.persistence.database import open_tenant_session
from msls.infrastructure.persistence.models import AdmissionEnquiry, Student
from msls.infrastructure.persistence.repositories import (
    EnquiryRepository,
    StudentRepository,
    UserRepository,
)
from msls.infrastructure.security.jwt import TokenService
from msls.infrastructure.security.password import verify_password
from msls.infrastructure.services import PermissionResolver
from msls.infrastructure.storage.object_storage import ObjectStorageService

from .common import get_storage
from .tenant import get_request_context, get_tenant_db


async def get_student_service(
    db: Annotated[AsyncSession, Depends(get_tenant_db)],
    ctx: Annotated[RequestContext, Depends(get_request_context)],
    storage: Annotated[ObjectStorageService | None, Depends(get_storage)],
) -> StudentService:
    return StudentService(
        StudentRepository(db),
        ctx.require_tenant(),
        storage=storage,
        student_factory=Student,
    )


async def get_enquiry_service(
    db: Annotated[AsyncSession, Depends(get_tenant_db)],
    ctx: Annotated[RequestContext, Depends(get_request_context)],
) -> EnquiryService:
    return EnquiryService(
        EnquiryRepository(db), ctx.require_tenant(), enquiry_factory=AdmissionEnquiry
    )


@asynccontextmanager
async def tenant_auth_service(
    tenant: TenantContext,
    tokens: TokenService,
    cache: CacheService | None,
) -> AsyncIterator[AuthService]:
    """AuthService on a session bound to tenant (login/refresh pick the tenant from the body)."""
    async with open_tenant_session(tenant) as db:
        authorization = AuthorizationService(PermissionResolver(db), cache=cache)
        yield AuthService(tokens, UserRepository(db), authorization, verify_password)
