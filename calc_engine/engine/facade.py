from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from calc_engine.engine.converter import to_postfix
from calc_engine.engine.evaluator import evaluate_postfix
from calc_engine.engine.lexemes import Lexeme
from calc_engine.engine.result import Err, Ok, Result
from calc_engine.engine.tokenizer import tokenize_normalized
from calc_engine.engine.validator import normalize_and_validate


@dataclass(frozen=True)
class Explanation:
    normalized: str
    tokens: tuple[Lexeme, ...]
    postfix: tuple[Lexeme, ...]
    value: float


def explain(expression: Optional[str]) -> Result[Explanation]:
    validated = normalize_and_validate(expression)
    if isinstance(validated, Err):
        return validated

    tokens = tokenize_normalized(validated.value)
    if isinstance(tokens, Err):
        return tokens

    postfix = to_postfix(tokens.value)
    evaluated = evaluate_postfix(postfix)
    if isinstance(evaluated, Err):
        return evaluated

    return Ok(
        Explanation(
            normalized=validated.value,
            tokens=tokens.value,
            postfix=postfix,
            value=evaluated.value,
        )
    )


def evaluate(expression: Optional[str]) -> Result[float]:
    """Evaluate an arithmetic expression; failures come back as `Err`, never raised."""
    explained = explain(expression)
    if isinstance(explained, Err):
        return explained
    return Ok(explained.value.value)
