from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import ClassVar, Iterable


class Priority(IntEnum):
    NONE = 0
    LOWEST = 1
    LOW = 2
    MEDIUM = 3
    HIGH = 4


OPERATOR_PRIORITIES: dict[str, Priority] = {
    "+": Priority.LOW,
    "-": Priority.LOW,
    "*": Priority.MEDIUM,
    "/": Priority.MEDIUM,
    "^": Priority.HIGH,
}

OPEN_BRACKET = "("
CLOSE_BRACKET = ")"
EXPONENT_MARKER = "e"


class Lexeme:
    """Base of the four lexeme kinds; never instantiated directly."""

    priority: Priority

    def __le__(self, other: "Lexeme") -> bool:
        return self.priority <= other.priority

    def __ge__(self, other: "Lexeme") -> bool:
        return self.priority >= other.priority


@dataclass(frozen=True)
class OpenBracket(Lexeme):
    priority: ClassVar[Priority] = Priority.LOWEST

    def __str__(self) -> str:
        return OPEN_BRACKET


@dataclass(frozen=True)
class CloseBracket(Lexeme):
    priority: ClassVar[Priority] = Priority.LOWEST

    def __str__(self) -> str:
        return CLOSE_BRACKET


@dataclass(frozen=True)
class Operator(Lexeme):
    symbol: str
    priority: Priority = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        try:
            priority = OPERATOR_PRIORITIES[self.symbol]
        except KeyError as exc:
            raise ValueError(f"Unsupported operator symbol: {self.symbol!r}") from exc
        object.__setattr__(self, "priority", priority)

    def __str__(self) -> str:
        return self.symbol


@dataclass(frozen=True)
class Operand(Lexeme):
    value: float
    priority: ClassVar[Priority] = Priority.NONE

    def __str__(self) -> str:
        return repr(self.value)


def lexeme_for_delimiter(char: str) -> Lexeme:
    if char == OPEN_BRACKET:
        return OpenBracket()
    if char == CLOSE_BRACKET:
        return CloseBracket()
    return Operator(char)


def format_lexemes(lexemes: Iterable[Lexeme]) -> str:
    return " ".join(str(lexeme) for lexeme in lexemes)
