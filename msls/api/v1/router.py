"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. Routes use
dependencies from msls.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from msls.api.v1.endpoints import (
    auth,
    enquiries,
    feature_flags,
    health,
    students,
    tenants,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(tenants.router, prefix="/tenants", tags=["tenants"])
api_router.include_router(
    feature_flags.router, prefix="/feature-flags", tags=["feature-flags"]
)
api_router.include_router(students.router, prefix="/students", tags=["students"])
api_router.include_router(
    enquiries.router, prefix="/admission-enquiries", tags=["admission-enquiries"]
)
