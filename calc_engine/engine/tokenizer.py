from __future__ import annotations

import math
import re
from typing import Optional

from calc_engine.engine.lexemes import (
    CLOSE_BRACKET,
    EXPONENT_MARKER,
    OPEN_BRACKET,
    OPERATOR_PRIORITIES,
    Lexeme,
    Operand,
    lexeme_for_delimiter,
)
from calc_engine.engine.result import EngineError, Err, ErrorKind, Ok, Result
from calc_engine.engine.validator import normalize_and_validate

DELIMITERS = frozenset(OPERATOR_PRIORITIES) | {OPEN_BRACKET, CLOSE_BRACKET}

# Invariant-culture float: optional sign, digits with an optional decimal point.
_DECIMAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)", re.ASCII)
_NON_DIGITS = re.compile(r"\D", re.ASCII)
MAX_EXPONENT_DIGITS = 400


def _format_error(text: str) -> Err:
    return Err(EngineError.single(ErrorKind.FORMAT, f"Error. Cannot parse operand '{text}'."))


def _parse_decimal(text: str) -> Optional[float]:
    if not _DECIMAL.fullmatch(text):
        return None
    return float(text)


def _overflow_error(text: str) -> Err:
    return Err(EngineError.single(ErrorKind.OVERFLOW, f"Error. Operand '{text}' is too large."))


def _parse_exponent(text: str) -> Optional[int]:
    # text starts right after the exponent marker
    sign = ""
    if text[:1] in ("+", "-"):
        sign, text = text[0], text[1:]
    digits = _NON_DIGITS.sub("", text)
    if not digits:
        return None
    # anything longer already overflows or underflows math.pow
    digits = digits.lstrip("0")[:MAX_EXPONENT_DIGITS] or "0"
    return int(sign + digits)


def parse_operand(text: str) -> Result[Operand]:
    if EXPONENT_MARKER not in text:
        value = _parse_decimal(text)
        if value is None:
            return _format_error(text)
        if not math.isfinite(value):
            return _overflow_error(text)
        return Ok(Operand(value))

    mantissa_text, _, exponent_text = text.partition(EXPONENT_MARKER)
    mantissa = _parse_decimal(mantissa_text)
    exponent = _parse_exponent(exponent_text)
    if mantissa is None or exponent is None:
        return _format_error(text)
    if not math.isfinite(mantissa):
        return _overflow_error(text)

    if mantissa == 0:
        return Ok(Operand(0.0))
    try:
        scale = math.pow(10, exponent)
    except OverflowError:
        scale = math.inf if exponent > 0 else 0.0
    value = mantissa * scale
    if not math.isfinite(value):
        return _overflow_error(text)
    return Ok(Operand(value))


def _is_delimiter(text: str, index: int) -> bool:
    if text[index] not in DELIMITERS:
        return False
    return index == 0 or text[index - 1] != EXPONENT_MARKER


def tokenize_normalized(text: str) -> Result[tuple[Lexeme, ...]]:
    """Scan already-normalized text into lexemes."""
    lexemes: list[Lexeme] = []
    buffer: list[str] = []

    def flush() -> Optional[Err]:
        if not buffer:
            return None
        parsed = parse_operand("".join(buffer))
        buffer.clear()
        if isinstance(parsed, Err):
            return parsed
        lexemes.append(parsed.value)
        return None

    for index, char in enumerate(text):
        if not _is_delimiter(text, index):
            buffer.append(char)
            continue
        failure = flush()
        if failure is not None:
            return failure
        lexemes.append(lexeme_for_delimiter(char))

    failure = flush()
    if failure is not None:
        return failure
    return Ok(tuple(lexemes))


def tokenize(raw: Optional[str]) -> Result[tuple[Lexeme, ...]]:
    validated = normalize_and_validate(raw)
    if isinstance(validated, Err):
        return validated
    return tokenize_normalized(validated.value)
