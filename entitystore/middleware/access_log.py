"""Access log middleware.

One INFO line per HTTP request: method, path, status, latency in ms and the
request id set by RequestIDMiddleware. Requests that raise are logged with
status 500 and the exception propagates unchanged. Raw ASGI.
"""

import logging
import time
from typing import Callable

from entitystore.middleware._asgi import scope_state

logger = logging.getLogger("entitystore.access")


def AccessLogMiddleware(app: Callable) -> Callable:
    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        started = time.perf_counter()
        status = 500

        async def send_capturing_status(message: dict) -> None:
            nonlocal status
            if message["type"] == "http.response.start":
                status = message["status"]
            await send(message)

        try:
            await app(scope, receive, send_capturing_status)
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                "%s %s %s %.1fms request_id=%s",
                scope.get("method", ""),
                scope.get("path", ""),
                status,
                elapsed_ms,
                scope_state(scope).get("request_id", "-"),
            )

    return asgi_app
