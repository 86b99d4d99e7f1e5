"""Raw ASGI middleware: request id, security headers, timeout."""

import asyncio

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from msls.middleware import RequestIDMiddleware, SecurityHeadersMiddleware, TimeoutMiddleware
from msls.middleware.request_id import sanitize_request_id


async def _echo(request: Request) -> JSONResponse:
    return JSONResponse({"request_id": request.state.request_id})


async def _slow(request: Request) -> JSONResponse:
    await asyncio.sleep(1)
    return JSONResponse({"ok": True})


async def _framed(request: Request) -> JSONResponse:
    return JSONResponse({}, headers={"X-Frame-Options": "SAMEORIGIN"})


def _starlette() -> Starlette:
    return Starlette(
        routes=[Route("/echo", _echo), Route("/slow", _slow), Route("/framed", _framed)]
    )


def _client(asgi) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=asgi), base_url="http://test")


@pytest.mark.parametrize(
    ("raw", "kept"),
    [("abc-123_X", True), ("", False), (None, False), ("bad id", False), ("x" * 65, False)],
)
def test_sanitize_request_id(raw, kept) -> None:
    result = sanitize_request_id(raw)
    assert (result == raw) is kept
    assert result


async def test_request_id_is_forwarded_and_echoed() -> None:
    async with _client(RequestIDMiddleware(_starlette())) as client:
        response = await client.get("/echo", headers={"X-Request-ID": "req-42"})
    assert response.headers["x-request-id"] == "req-42"
    assert response.json() == {"request_id": "req-42"}


async def test_request_id_generated_for_unsafe_value() -> None:
    async with _client(RequestIDMiddleware(_starlette())) as client:
        response = await client.get("/echo", headers={"X-Request-ID": "<script>"})
    generated = response.headers["x-request-id"]
    assert generated != "<script>"
    assert response.json()["request_id"] == generated


async def test_security_headers_without_hsts() -> None:
    async with _client(SecurityHeadersMiddleware(_starlette())) as client:
        response = await client.get("/echo")
    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["cache-control"] == "no-store"
    assert "strict-transport-security" not in response.headers


async def test_security_headers_hsts_and_handler_override() -> None:
    async with _client(SecurityHeadersMiddleware(_starlette(), hsts=True)) as client:
        response = await client.get("/framed")
    assert response.headers["strict-transport-security"].startswith("max-age=")
    assert response.headers["x-frame-options"] == "SAMEORIGIN"


async def test_timeout_returns_504() -> None:
    async with _client(TimeoutMiddleware(_starlette(), 0.05)) as client:
        response = await client.get("/slow")
    assert response.status_code == 504
    assert response.json()["error"] == "GATEWAY_TIMEOUT"


async def test_fast_request_passes_timeout() -> None:
    async with _client(TimeoutMiddleware(_starlette(), 5)) as client:
        response = await client.get("/echo")
    assert response.status_code == 200
