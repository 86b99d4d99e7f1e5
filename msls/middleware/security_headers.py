"""Security headers middleware for the JSON API.

HSTS is only sent when enabled (production); API responses are never cached.
Headers already set by a handler win. Raw ASGI.
"""

from collections.abc import Callable

API_HEADERS = {
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cache-Control": "no-store",
}
HSTS_VALUE = "max-age=31536000; includeSubDomains"


def SecurityHeadersMiddleware(app: Callable, hsts: bool = False) -> Callable:
    """Set security headers on all HTTP responses."""
    resolved = dict(API_HEADERS)
    if hsts:
        resolved["Strict-Transport-Security"] = HSTS_VALUE
    header_list = [(k.lower().encode(), v.encode()) for k, v in resolved.items()]

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                seen = {h[0].lower() for h in headers}
                headers.extend(h for h in header_list if h[0] not in seen)
                message["headers"] = headers
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
