from __future__ import annotations

import re
import unicodedata
from typing import Callable, Optional

from calc_engine.engine.lexemes import EXPONENT_MARKER, OPERATOR_PRIORITIES
from calc_engine.engine.result import EngineError, Err, ErrorKind, Ok, Result

NULL_INPUT = "Error. Input string is null."
EMPTY_INPUT = "Error. Input string is empty."
DIVISION_BY_ZERO = "Error. Input string contains dividing by zero operation."
UNSUPPORTED_LETTERS = "Error. Input string contains some unsupported text symbols."
UNSUPPORTED_PUNCTUATION = "Error. Input string contains some unsupported punctuation symbols."
UNSUPPORTED_MODIFIERS = "Error. Input string contains some unsupported modifier symbols."
UNSUPPORTED_MATH = "Error. Input string contains some unsupported math symbols."
REPEATED_OPERATORS = "Error. There are two or more operators together."
MISSING_OPERATOR_BRACKETS = "Error. There is a missing operator between )(."
MISSING_OPERATOR_NUMBER = "Error. There is a missing operator between bracket and number."
MISSING_OPERAND = "Error. There is a missing operand."
DANGLING_EXPONENT = "Error. Exponent marker must be followed by digits."

ALLOWED_PUNCTUATION = frozenset(".,/])([*-")
ALLOWED_MODIFIERS = frozenset("^")
ALLOWED_MATH_SYMBOLS = frozenset("+")

_OPERATORS = "".join(re.escape(symbol) for symbol in OPERATOR_PRIORITIES)
_ZERO = r"0+(?:\.0*)?"
_NUMBER = r"(?:\d+(?:\.\d*)?|\.\d+)"

_ZERO_DIVISOR_PATTERNS = (
    re.compile(rf"/{_ZERO}(?![\d.])", re.ASCII),
    re.compile(rf"/\(+{_ZERO}\)+", re.ASCII),
    re.compile(rf"/\({_NUMBER}\*{_ZERO}\)", re.ASCII),
    re.compile(rf"/\({_ZERO}\*{_NUMBER}\)", re.ASCII),
    re.compile(rf"/\(+{_ZERO}[+\-*]{_ZERO}\)+", re.ASCII),
)
_REPEATED_OPERATORS = re.compile(rf"[{_OPERATORS}]{{2,}}")
_MISSING_OPERAND = re.compile(rf"^[{_OPERATORS}]|[{_OPERATORS}]$|\([{_OPERATORS}]|[{_OPERATORS}]\)|\(\)")
_DIGIT_BEFORE_BRACKET = re.compile(r"\d\(")
_BRACKET_BEFORE_DIGIT = re.compile(r"\)\d")
_DANGLING_EXPONENT = re.compile(rf"{EXPONENT_MARKER}(?![+-]?\d)")

Check = Callable[[str], list[str]]


def normalize(raw: str) -> str:
    text = raw.replace(" ", "")
    text = text.replace(",", ".")
    text = text.replace("[", "(").replace("]", ")")
    if text.startswith("-"):
        text = "0" + text
    text = text.replace("(-", "(0-")
    return text.lower()


def _bracket_balance(text: str, opening: str, closing: str) -> list[str]:
    opened = text.count(opening)
    closed = text.count(closing)
    if opened == closed:
        return []
    missing = opening if opened < closed else closing
    return [f"Error. There is {missing} missing."]


def check_round_brackets(text: str) -> list[str]:
    return _bracket_balance(text, "(", ")")


def check_square_brackets(raw: str) -> list[str]:
    # Runs on the raw input: substitution would leave no square brackets to count.
    return _bracket_balance(raw, "[", "]")


def check_zero_divisor(text: str) -> list[str]:
    if any(pattern.search(text) for pattern in _ZERO_DIVISOR_PATTERNS):
        return [DIVISION_BY_ZERO]
    return []


def _is_disallowed(char: str) -> Optional[str]:
    category = unicodedata.category(char)
    if category.startswith("L") and char != EXPONENT_MARKER:
        return UNSUPPORTED_LETTERS
    if category.startswith("P") and char not in ALLOWED_PUNCTUATION:
        return UNSUPPORTED_PUNCTUATION
    if category == "Sk" and char not in ALLOWED_MODIFIERS:
        return UNSUPPORTED_MODIFIERS
    if category == "Sm" and char not in ALLOWED_MATH_SYMBOLS:
        return UNSUPPORTED_MATH
    return None


def check_characters(text: str) -> list[str]:
    found = {_is_disallowed(char) for char in text}
    order = (UNSUPPORTED_LETTERS, UNSUPPORTED_PUNCTUATION, UNSUPPORTED_MODIFIERS, UNSUPPORTED_MATH)
    return [message for message in order if message in found]


def check_exponent_marker(text: str) -> list[str]:
    if _DANGLING_EXPONENT.search(text):
        return [DANGLING_EXPONENT]
    return []


def check_repeated_operators(text: str) -> list[str]:
    if _REPEATED_OPERATORS.search(text):
        return [REPEATED_OPERATORS]
    return []


def check_missing_operator(text: str) -> list[str]:
    messages: list[str] = []
    if ")(" in text:
        messages.append(MISSING_OPERATOR_BRACKETS)
    if _DIGIT_BEFORE_BRACKET.search(text) or _BRACKET_BEFORE_DIGIT.search(text):
        messages.append(MISSING_OPERATOR_NUMBER)
    return messages


def check_missing_operand(text: str) -> list[str]:
    if _MISSING_OPERAND.search(text):
        return [MISSING_OPERAND]
    return []


_CHECKS: tuple[Check, ...] = (
    check_zero_divisor,
    check_characters,
    check_exponent_marker,
    check_repeated_operators,
    check_missing_operator,
    check_missing_operand,
)


def normalize_and_validate(raw: Optional[str]) -> Result[str]:
    """
    Normalize a human-typed expression and run every syntax check over it.

    All checks run, so a single error can report several problems at once.
    The error kind is DIVISION_BY_ZERO only when the zero-divisor check is the
    sole one that fired; any other combination is a FORMAT error.
    """
    if raw is None:
        return Err(EngineError.single(ErrorKind.FORMAT, NULL_INPUT))

    text = normalize(raw)
    if not text:
        return Err(EngineError.single(ErrorKind.FORMAT, EMPTY_INPUT))

    messages = check_round_brackets(text) + check_square_brackets(raw)
    for check in _CHECKS:
        messages.extend(check(text))

    if not messages:
        return Ok(text)

    kind = ErrorKind.DIVISION_BY_ZERO if messages == [DIVISION_BY_ZERO] else ErrorKind.FORMAT
    return Err(EngineError(kind=kind, messages=tuple(messages)))
