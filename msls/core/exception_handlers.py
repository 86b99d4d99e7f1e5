"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to HTTP responses. Request validation failures carry one
human-readable message per field under "field_errors".
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from msls.core.config import get_settings
from msls.domain.exceptions import MslsException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status when applicable
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "TENANT_REQUIRED": 400,
    "INVALID_TENANT_ID": 400,
    "AUTHENTICATION_ERROR": 401,
    "PERMISSION_DENIED": 403,
    "TENANT_MISMATCH": 403,
    "TENANT_UNAVAILABLE": 403,
    "FEATURE_UNAVAILABLE": 403,
    "RESOURCE_NOT_FOUND": 404,
    "TENANT_NOT_FOUND": 404,
    "STORAGE_NOT_FOUND": 404,
    "TENANT_ALREADY_EXISTS": 409,
    "DUPLICATE_RECORD": 409,
    "VERSION_CONFLICT": 409,
    "INVALID_STATUS_TRANSITION": 409,
    "STORAGE_UPLOAD_ERROR": 502,
    "STORAGE_DOWNLOAD_ERROR": 502,
    "STORAGE_DELETE_ERROR": 502,
    "SERVICE_UNAVAILABLE": 503,
}

# Request locations stripped from the field path.
_LOCATIONS = {"body", "query", "path", "header", "cookie", "form"}


def status_for_error_code(error_code: str) -> int:
    return _ERROR_CODE_STATUS.get(error_code, 400)


def field_path(loc: tuple[Any, ...] | list[Any]) -> str:
    """("body", "guardian", "phone") -> "guardian.phone"."""
    parts = [str(p) for p in loc]
    if len(parts) > 1 and parts[0] in _LOCATIONS:
        parts = parts[1:]
    return ".".join(parts)


def field_label(path: str) -> str:
    """"guardian.parent_phone" -> "Parent phone"."""
    name = path.rsplit(".", 1)[-1].replace("_", " ").strip()
    return name[:1].upper() + name[1:] if name else "Value"


def field_error_message(error: dict[str, Any]) -> str:
    """Human-readable message for one pydantic error entry."""
    label = field_label(field_path(error.get("loc", ())))
    kind = error.get("type", "")
    ctx = error.get("ctx") or {}
    msg = str(error.get("msg", "is invalid"))

    if kind == "missing":
        return f"{label} is required"
    if kind == "string_too_short":
        if ctx.get("min_length") == 1:
            return f"{label} is required"
        return f"{label} must be at least {ctx.get('min_length')} characters"
    if kind == "string_too_long":
        return f"{label} must be at most {ctx.get('max_length')} characters"
    if kind == "string_pattern_mismatch":
        return f"{label} has an invalid format"
    if kind in ("enum", "literal_error"):
        return f"{label} must be one of: {ctx.get('expected')}"
    if kind == "value_error" and "email" in msg.lower():
        return f"{label} must be a valid email address"
    if kind.startswith("date"):
        return f"{label} must be a valid date (YYYY-MM-DD)"
    if kind in ("int_parsing", "int_type"):
        return f"{label} must be a whole number"
    if kind == "greater_than_equal":
        return f"{label} must be at least {ctx.get('ge')}"
    if kind == "less_than_equal":
        return f"{label} must be at most {ctx.get('le')}"
    if kind == "value_error":
        return msg.removeprefix("Value error, ")
    return f"{label}: {msg}"


def build_field_errors(errors: list[dict[str, Any]]) -> dict[str, str]:
    """One message per field (first error wins)."""
    result: dict[str, str] = {}
    for error in errors:
        path = field_path(error.get("loc", ()))
        if path not in result:
            result[path] = field_error_message(error)
    return result


def _msls_exception_handler(request: Request, exc: MslsException) -> JSONResponse:
    """Return JSON from MslsException.to_dict() with the mapped status code."""
    status = status_for_error_code(exc.error_code)
    if status >= 500:
        logger.error("%s on %s: %s", exc.error_code, request.url.path, exc.message)
    return JSONResponse(status_code=status, content=exc.to_dict())


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with raw error details and per-field messages."""
    errors = list(exc.errors())
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "field_errors": build_field_errors(errors),
            "details": jsonable_encoder(errors),
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.app.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Handlers: MslsException (and subclasses), RequestValidationError,
    StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(MslsException, _msls_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)
