"""FastAPI application entry point.

Wiring only: logging, lifespan, exception handlers, middleware, routers.
No business logic here. See msls.core.lifespan and msls.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and clear
the get_settings cache) before calling create_app().
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from msls.api.v1 import api_router
from msls.core.config import get_settings
from msls.core.exception_handlers import register_exception_handlers
from msls.core.lifespan import create_lifespan
from msls.core.limiter import limiter
from msls.middleware import (
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
    TimeoutMiddleware,
)
from msls.shared.logging import setup_logging


def create_app() -> FastAPI:
    """Build and return the FastAPI application.

    APP_DEBUG only widens the generic 500 message; Starlette's debug mode
    (HTML tracebacks) stays off.
    """
    settings = get_settings()
    setup_logging(settings.log)

    app = FastAPI(
        title=settings.app.name,
        version=settings.app.version,
        lifespan=create_lifespan,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

    register_exception_handlers(app)

    # Last added = outermost. Order: timeout → request ID → security headers → CORS.
    origins = settings.server.allowed_origin_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[settings.server.request_id_header],
    )
    app.add_middleware(SecurityHeadersMiddleware, hsts=settings.app.is_production)
    app.add_middleware(RequestIDMiddleware, header_name=settings.server.request_id_header)
    app.add_middleware(TimeoutMiddleware, timeout=settings.server.request_timeout)

    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()
