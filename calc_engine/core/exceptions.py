from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from calc_engine.core.context import get_request_id

logger = logging.getLogger("calc_engine.errors")


class AppError(Exception):
    status_code: int = 500
    error_type: str = "APP_ERROR"

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_payload(self, trace_id: str | None = None) -> dict[str, Any]:
        error: dict[str, Any] = {
            "type": self.error_type,
            "message": self.message,
        }
        if self.details:
            error["details"] = self.details
        if trace_id:
            error["traceId"] = trace_id
        return {"error": error}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.warning("request.failed", extra={"error_type": exc.error_type, "path": request.url.path})
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload(get_request_id()))
