from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx
from pydantic import ValidationError

from calc_engine.core.config import get_settings
from calc_engine.models.calculator import CalculatorResult
from calc_engine.services.calculator import (
    ERRORS_BY_TYPE,
    CalculatorError,
    CalculatorService,
    ExpressionFormatError,
)

logger = logging.getLogger("calc_engine.calculator_http")


class CalculatorHttpServiceError(CalculatorError):
    status_code = 502
    error_type = "CALCULATOR_HTTP_ERROR"


class Calculator(Protocol):
    def evaluate(self, expression: str) -> CalculatorResult:
        ...


@dataclass
class CalculatorHttpService:
    """Evaluates expressions on a remote calc-engine instance through its `/calc` endpoint."""

    base_url: str
    timeout: float = 5.0

    @classmethod
    def from_settings(cls) -> "CalculatorHttpService":
        settings = get_settings()
        if not settings.calc_http_base_url:
            raise CalculatorHttpServiceError("CALC_HTTP_BASE_URL is not configured.")
        return cls(
            base_url=settings.calc_http_base_url.rstrip("/"),
            timeout=float(settings.calc_http_timeout_sec),
        )

    def evaluate(self, expression: str) -> CalculatorResult:
        if not expression.strip():
            raise ExpressionFormatError("Error. Input string is empty.")

        url = f"{self.base_url}/calc"
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.get(url, params={"query": expression})
        except httpx.RequestError as exc:
            logger.warning("calc.http.unavailable", extra={"url": url})
            raise CalculatorHttpServiceError("Calculator service is unavailable.") from exc

        if response.status_code != 200:
            raise self._remote_error(response)

        try:
            return CalculatorResult.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise CalculatorHttpServiceError("Calculator response was malformed.") from exc

    def _remote_error(self, response: httpx.Response) -> CalculatorError:
        try:
            payload = response.json()
        except ValueError:
            payload = None

        error = payload.get("error") if isinstance(payload, dict) else None
        if not isinstance(error, dict):
            return CalculatorHttpServiceError("Calculator request failed.")

        message = error.get("message") or "Calculator request failed."
        details = error.get("details") if isinstance(error.get("details"), dict) else None
        error_cls = ERRORS_BY_TYPE.get(error.get("type", ""))
        if error_cls is None:
            return CalculatorHttpServiceError(message, details=details)
        return error_cls(message, details=details)


def get_calculator() -> Calculator:
    settings = get_settings()
    if settings.calc_tool_mode.lower() == "http":
        return CalculatorHttpService.from_settings()
    return CalculatorService(max_expression_length=settings.max_expression_length)
