from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    FORMAT = "FORMAT"
    DIVISION_BY_ZERO = "DIVISION_BY_ZERO"
    OVERFLOW = "OVERFLOW"
    NOT_A_NUMBER = "NOT_A_NUMBER"


@dataclass(frozen=True)
class EngineError:
    kind: ErrorKind
    messages: tuple[str, ...]

    @property
    def message(self) -> str:
        """All detected problems, one per line."""
        return "\n".join(self.messages)

    @classmethod
    def single(cls, kind: ErrorKind, message: str) -> "EngineError":
        return cls(kind=kind, messages=(message,))


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: EngineError

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]
