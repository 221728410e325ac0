from __future__ import annotations

import logging
from functools import cached_property

from langchain_core.tools import tool

from calc_engine.core.config import get_settings
from calc_engine.core.exceptions import AppError
from calc_engine.engine import facade
from calc_engine.engine.result import EngineError, Err, ErrorKind
from calc_engine.models.calculator import CalculationExplanation, CalculatorResult

logger = logging.getLogger("calc_engine.calculator")


class CalculatorError(AppError):
    status_code = 400
    error_type = "CALCULATOR_ERROR"


class ExpressionFormatError(CalculatorError):
    error_type = "FORMAT_ERROR"


class DivisionByZeroError(CalculatorError):
    error_type = "DIVISION_BY_ZERO_ERROR"


class ArithmeticOverflowError(CalculatorError):
    error_type = "OVERFLOW_ERROR"


class NotANumberError(CalculatorError):
    error_type = "NOT_A_NUMBER_ERROR"


ERRORS_BY_KIND: dict[ErrorKind, type[CalculatorError]] = {
    ErrorKind.FORMAT: ExpressionFormatError,
    ErrorKind.DIVISION_BY_ZERO: DivisionByZeroError,
    ErrorKind.OVERFLOW: ArithmeticOverflowError,
    ErrorKind.NOT_A_NUMBER: NotANumberError,
}

ERRORS_BY_TYPE: dict[str, type[CalculatorError]] = {
    error_cls.error_type: error_cls for error_cls in ERRORS_BY_KIND.values()
}


def error_from_engine(error: EngineError) -> CalculatorError:
    error_cls = ERRORS_BY_KIND.get(error.kind, CalculatorError)
    return error_cls(error.message, details={"messages": list(error.messages)})


class CalculatorService:
    def __init__(self, max_expression_length: int | None = None) -> None:
        if max_expression_length is None:
            max_expression_length = get_settings().max_expression_length
        self.max_expression_length = max_expression_length

    def evaluate(self, expression: str) -> CalculatorResult:
        self._check_length(expression)
        outcome = facade.evaluate(expression)
        if isinstance(outcome, Err):
            raise self._failure(expression, outcome.error)

        logger.debug("calc.evaluate.ok", extra={"expression": expression, "result": outcome.value})
        return CalculatorResult(expression=expression, result=outcome.value)

    def explain(self, expression: str) -> CalculationExplanation:
        self._check_length(expression)
        outcome = facade.explain(expression)
        if isinstance(outcome, Err):
            raise self._failure(expression, outcome.error)

        explanation = outcome.value
        return CalculationExplanation(
            expression=expression,
            normalized=explanation.normalized,
            tokens=[str(lexeme) for lexeme in explanation.tokens],
            postfix=[str(lexeme) for lexeme in explanation.postfix],
            result=explanation.value,
        )

    @cached_property
    def langchain_tool(self):
        service = self

        @tool("calculator", return_direct=True)
        def _calculator(expression: str) -> float:
            """Evaluate an arithmetic expression with + - * / ^ and brackets and return the number."""
            return service.evaluate(expression).result

        return _calculator

    def _check_length(self, expression: str) -> None:
        if len(expression) > self.max_expression_length:
            raise ExpressionFormatError(f"Expression exceeds {self.max_expression_length} characters.")

    def _failure(self, expression: str, error: EngineError) -> CalculatorError:
        logger.info(
            "calc.evaluate.error",
            extra={"expression": expression, "kind": error.kind.value, "problems": len(error.messages)},
        )
        return error_from_engine(error)
