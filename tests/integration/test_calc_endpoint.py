from fastapi.testclient import TestClient

from calc_engine.main import create_app


def create_test_client() -> TestClient:
    app = create_app()
    return TestClient(app)


def test_calc_endpoint_returns_result_for_valid_expression() -> None:
    client = create_test_client()

    response = client.get("/calc", params={"query": "3*(4+5)"})

    assert response.status_code == 200
    assert response.json() == {
        "expression": "3*(4+5)",
        "result": 27.0,
    }
    assert response.headers["X-Request-ID"]


def test_calc_endpoint_honours_right_associative_power() -> None:
    client = create_test_client()

    response = client.get("/calc", params={"query": "2^3^2"})

    assert response.status_code == 200
    assert response.json()["result"] == 512.0


def test_calc_endpoint_returns_error_for_invalid_expression() -> None:
    client = create_test_client()

    response = client.get("/calc", params={"query": "abc"})

    assert response.status_code == 400
    payload = response.json()
    assert payload["error"]["type"] == "FORMAT_ERROR"
    assert "unsupported text symbols" in payload["error"]["message"]
    assert payload["error"]["traceId"] == response.headers["X-Request-ID"]


def test_calc_endpoint_reports_division_by_zero() -> None:
    client = create_test_client()

    response = client.get("/calc", params={"query": "5/0"})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["type"] == "DIVISION_BY_ZERO_ERROR"
    assert error["details"] == {"messages": ["Error. Input string contains dividing by zero operation."]}


def test_calc_endpoint_reports_overflow() -> None:
    client = create_test_client()

    response = client.get("/calc", params={"query": "10^400"})

    assert response.status_code == 400
    assert response.json()["error"]["type"] == "OVERFLOW_ERROR"


def test_calc_endpoint_aggregates_messages() -> None:
    client = create_test_client()

    response = client.get("/calc", params={"query": "(2++3"})

    error = response.json()["error"]
    assert error["details"]["messages"] == [
        "Error. There is ) missing.",
        "Error. There are two or more operators together.",
    ]
    assert error["message"] == "\n".join(error["details"]["messages"])


def test_calc_endpoint_requires_query_param() -> None:
    client = create_test_client()

    response = client.get("/calc")

    assert response.status_code == 422


def test_explain_endpoint_returns_postfix() -> None:
    client = create_test_client()

    response = client.get("/calc/explain", params={"query": "[1 + 2] * 3"})

    assert response.status_code == 200
    assert response.json() == {
        "expression": "[1 + 2] * 3",
        "result": 9.0,
        "normalized": "(1+2)*3",
        "tokens": ["(", "1.0", "+", "2.0", ")", "*", "3.0"],
        "postfix": ["1.0", "2.0", "+", "3.0", "*"],
    }


def test_explain_endpoint_returns_error_envelope() -> None:
    client = create_test_client()

    response = client.get("/calc/explain", params={"query": "2)(3"})

    assert response.status_code == 400
    assert response.json()["error"]["type"] == "FORMAT_ERROR"
