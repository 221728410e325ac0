from __future__ import annotations

import logging
import time
from typing import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from calc_engine.core.context import get_request_id, reset_request_id, set_request_id

logger = logging.getLogger("calc_engine.request")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Binds a request id to the context and logs the start and end of every request."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        incoming_id = request.headers.get(REQUEST_ID_HEADER.lower())
        token = set_request_id(incoming_id)
        request_id = get_request_id() or ""

        started = time.perf_counter()
        extra: dict[str, object] = {"path": request.url.path, "method": request.method}
        logger.info("request.start", extra=extra)

        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            extra["status_code"] = status_code
            extra["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
            logger.info("request.end", extra=extra)
            reset_request_id(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
