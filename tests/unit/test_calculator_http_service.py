from __future__ import annotations

import httpx
import pytest
import respx
from httpx import Response

from calc_engine.core.config import AppSettings
from calc_engine.services.calculator import (
    CalculatorError,
    CalculatorService,
    DivisionByZeroError,
    ExpressionFormatError,
)
from calc_engine.services.calculator_http import (
    CalculatorHttpService,
    CalculatorHttpServiceError,
    get_calculator,
)


@respx.mock
def test_evaluate_returns_result(respx_mock):
    service = CalculatorHttpService(base_url="http://calculator.local", timeout=1.5)
    route = respx_mock.get("http://calculator.local/calc").mock(
        return_value=Response(200, json={"expression": "1+2", "result": 3.0})
    )

    result = service.evaluate("1+2")

    assert result.result == 3.0
    assert route.calls.last.request.url.params["query"] == "1+2"


@respx.mock
def test_evaluate_maps_remote_error_type(respx_mock):
    service = CalculatorHttpService(base_url="http://calculator.local")
    respx_mock.get("http://calculator.local/calc").mock(
        return_value=Response(
            400,
            json={
                "error": {
                    "type": "DIVISION_BY_ZERO_ERROR",
                    "message": "Error. Input string contains dividing by zero operation.",
                    "details": {"messages": ["Error. Input string contains dividing by zero operation."]},
                }
            },
        )
    )

    with pytest.raises(DivisionByZeroError) as exc_info:
        service.evaluate("5/0")

    assert exc_info.value.details["messages"] == ["Error. Input string contains dividing by zero operation."]


@respx.mock
def test_evaluate_raises_on_http_error(respx_mock):
    service = CalculatorHttpService(base_url="http://calculator.local")
    respx_mock.get("http://calculator.local/calc").mock(return_value=Response(500, json={"error": {"message": "fail"}}))

    with pytest.raises(CalculatorHttpServiceError) as exc_info:
        service.evaluate("5+5")

    assert exc_info.value.message == "fail"


@respx.mock
def test_evaluate_rejects_invalid_payload(respx_mock):
    service = CalculatorHttpService(base_url="http://calculator.local")
    respx_mock.get("http://calculator.local/calc").mock(return_value=Response(200, text="not json"))

    with pytest.raises(CalculatorHttpServiceError) as exc_info:
        service.evaluate("5+5")

    assert exc_info.value.message == "Calculator response was malformed."


@respx.mock
def test_evaluate_rejects_unexpected_payload_shape(respx_mock):
    service = CalculatorHttpService(base_url="http://calculator.local")
    respx_mock.get("http://calculator.local/calc").mock(return_value=Response(200, json={"unexpected": 1}))

    with pytest.raises(CalculatorHttpServiceError) as exc_info:
        service.evaluate("5+5")

    assert exc_info.value.message == "Calculator response was malformed."


@respx.mock
def test_evaluate_rejects_empty_expression(respx_mock):
    service = CalculatorHttpService(base_url="http://calculator.local")
    with pytest.raises(ExpressionFormatError):
        service.evaluate("   ")
    assert not respx_mock.calls


def test_evaluate_handles_network_error(monkeypatch):
    service = CalculatorHttpService(base_url="http://calculator.local")

    def fail_request(*args, **kwargs):
        raise httpx.ConnectError("unreachable")

    monkeypatch.setattr(httpx, "Client", lambda *args, **kwargs: DummyClient(fail_request))

    with pytest.raises(CalculatorHttpServiceError):
        service.evaluate("2+2")


class DummyClient:
    def __init__(self, callback):
        self._callback = callback

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return False

    def get(self, *args, **kwargs):
        return self._callback(*args, **kwargs)


def test_from_settings_requires_base_url(monkeypatch):
    monkeypatch.setattr(
        "calc_engine.services.calculator_http.get_settings",
        lambda: AppSettings(_env_file=None, calc_http_base_url=None),
    )

    with pytest.raises(CalculatorHttpServiceError):
        CalculatorHttpService.from_settings()


def test_from_settings_uses_timeout(monkeypatch):
    settings = AppSettings(_env_file=None, calc_http_base_url="http://calculator.local/", calc_http_timeout_sec=7.5)
    monkeypatch.setattr("calc_engine.services.calculator_http.get_settings", lambda: settings)

    service = CalculatorHttpService.from_settings()

    assert service.base_url == "http://calculator.local"
    assert service.timeout == 7.5


def test_get_calculator_selects_http_mode(monkeypatch):
    settings = AppSettings(_env_file=None, calc_tool_mode="http", calc_http_base_url="http://calc.internal")
    monkeypatch.setattr("calc_engine.services.calculator_http.get_settings", lambda: settings)

    calculator = get_calculator()

    assert isinstance(calculator, CalculatorHttpService)


def test_get_calculator_defaults_to_local(monkeypatch):
    settings = AppSettings(_env_file=None, calc_tool_mode="local", max_expression_length=50)
    monkeypatch.setattr("calc_engine.services.calculator_http.get_settings", lambda: settings)

    calculator = get_calculator()

    assert isinstance(calculator, CalculatorService)
    assert calculator.max_expression_length == 50
    with pytest.raises(CalculatorError):
        calculator.evaluate("1+" * 30)
