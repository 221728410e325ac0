from __future__ import annotations

import math
import operator
from typing import Callable, Sequence

from calc_engine.engine.lexemes import Lexeme, Operand, Operator
from calc_engine.engine.result import EngineError, Err, ErrorKind, Ok, Result

INFINITE_RESULT = "Error. Result is infinity."
NAN_RESULT = "Error. Result is not a number."
MALFORMED_EXPRESSION = "Error. Expression is malformed."


def _divide(a: float, b: float) -> float:
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _power(a: float, b: float) -> float:
    try:
        return math.pow(a, b)
    except OverflowError:
        # magnitude overflow; odd integer exponents keep the sign of a negative base
        if a < 0 and b.is_integer() and int(b) % 2 == 1:
            return -math.inf
        return math.inf
    except ValueError:
        if a == 0 and b < 0:
            return math.inf
        return math.nan


ARITHMETIC: dict[str, Callable[[float, float], float]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": _divide,
    "^": _power,
}


def apply(symbol: str, a: float, b: float) -> Result[float]:
    """Apply `a <symbol> b` with IEEE semantics; non-finite results are errors."""
    try:
        function = ARITHMETIC[symbol]
    except KeyError:
        return Err(EngineError.single(ErrorKind.FORMAT, f"Error. Unsupported operator '{symbol}'."))

    result = function(a, b)
    if math.isnan(result):
        return Err(EngineError.single(ErrorKind.NOT_A_NUMBER, NAN_RESULT))
    if math.isinf(result):
        return Err(EngineError.single(ErrorKind.OVERFLOW, INFINITE_RESULT))
    return Ok(result)


def evaluate_postfix(postfix: Sequence[Lexeme]) -> Result[float]:
    malformed = Err(EngineError.single(ErrorKind.FORMAT, MALFORMED_EXPRESSION))
    stack: list[float] = []

    for lexeme in postfix:
        if isinstance(lexeme, Operand):
            stack.append(lexeme.value)
            continue
        if not isinstance(lexeme, Operator) or len(stack) < 2:
            return malformed
        op2 = stack.pop()
        op1 = stack.pop()
        applied = apply(lexeme.symbol, op1, op2)
        if isinstance(applied, Err):
            return applied
        stack.append(applied.value)

    if len(stack) != 1:
        return malformed
    return Ok(stack[0])
