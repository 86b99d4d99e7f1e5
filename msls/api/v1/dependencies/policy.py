"""Access policy as a FastAPI dependency.

    @router.get("/students", dependencies=[Depends(require(TenantActive(), HasPermission("students:read")))])

The same Requirement objects drive the route guards; here a denial is raised
as the mapped domain exception instead of returned as a redirect.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends

from msls.application.services.access_policy import Requirement, evaluate
from msls.domain.context import RequestContext

from .tenant import get_request_context


def require(*requirements: Requirement) -> Callable[..., Awaitable[RequestContext]]:
    """Dependency factory: evaluate requirements in order, raise on the first denial."""

    async def _require(
        ctx: Annotated[RequestContext, Depends(get_request_context)],
    ) -> RequestContext:
        evaluate(list(requirements), ctx).raise_for_denial(ctx)
        return ctx

    return _require
