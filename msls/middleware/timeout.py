"""Request timeout middleware (SERVER_REQUEST_TIMEOUT).

Cancels the handler after the timeout and answers 504, unless the response
has already started, in which case the connection is simply cut short.
"""

import asyncio
import json
import logging
from collections.abc import Callable
from datetime import timedelta

logger = logging.getLogger(__name__)


def TimeoutMiddleware(app: Callable, timeout: timedelta | float) -> Callable:
    """Cancel requests running longer than timeout. Raw ASGI."""
    seconds = timeout.total_seconds() if isinstance(timeout, timedelta) else float(timeout)

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http" or seconds <= 0:
            await app(scope, receive, send)
            return
        started = False

        async def send_wrapper(message: dict) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await asyncio.wait_for(app(scope, receive, send_wrapper), timeout=seconds)
        except TimeoutError:
            logger.warning(
                "Request timed out after %ss: %s %s",
                seconds,
                scope.get("method", ""),
                scope.get("path", ""),
            )
            if started:
                return
            body = json.dumps(
                {
                    "error": "GATEWAY_TIMEOUT",
                    "message": f"Request timed out after {seconds:g} seconds",
                    "details": {"timeout_seconds": seconds},
                }
            ).encode()
            await send(
                {
                    "type": "http.response.start",
                    "status": 504,
                    "headers": [(b"content-type", b"application/json")],
                }
            )
            await send({"type": "http.response.body", "body": body, "more_body": False})

    return asgi_app
