from __future__ import annotations

from typing import Sequence

from calc_engine.engine.lexemes import CloseBracket, Lexeme, OpenBracket, Operand, Operator, Priority


def to_postfix(tokens: Sequence[Lexeme]) -> tuple[Lexeme, ...]:
    """
    Reorder infix lexemes into postfix order (shunting-yard).

    `^` never pops anything before being pushed, which makes it
    right-associative; every other operator pops operators of equal or
    higher priority and is left-associative.
    """
    output: list[Lexeme] = []
    stack: list[Lexeme] = []

    for token in tokens:
        if isinstance(token, Operand):
            output.append(token)
        elif isinstance(token, Operator):
            while stack and token.priority != Priority.HIGH and token <= stack[-1]:
                output.append(stack.pop())
            stack.append(token)
        elif isinstance(token, OpenBracket):
            stack.append(token)
        elif isinstance(token, CloseBracket):
            while stack and not isinstance(stack[-1], OpenBracket):
                output.append(stack.pop())
            if stack:
                stack.pop()

    while stack:
        output.append(stack.pop())
    return tuple(output)
