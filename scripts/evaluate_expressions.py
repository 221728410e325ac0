from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional, TextIO

from calc_engine.engine import facade
from calc_engine.engine.lexemes import format_lexemes
from calc_engine.engine.result import Err
from calc_engine.services.calculator import CalculatorError
from calc_engine.services.calculator_http import Calculator, get_calculator

logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(message)s")
logger = logging.getLogger("evaluate_expressions")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Evaluate arithmetic expressions and print one result per line.",
    )
    parser.add_argument("expressions", nargs="*", help="Expressions to evaluate.")
    parser.add_argument(
        "--file",
        type=Path,
        help="Read expressions from a file, one per line (blank lines are skipped).",
    )
    parser.add_argument(
        "--explain",
        action="store_true",
        help="Also print the normalized input, the tokens and the postfix order.",
    )
    return parser


def load_expressions(args: argparse.Namespace) -> List[str]:
    expressions = list(args.expressions)
    if args.file:
        with args.file.open("r", encoding="utf-8") as handle:
            expressions.extend(line.rstrip("\n") for line in handle if line.strip())
    return expressions


def _print_explanation(expression: str, out: TextIO) -> None:
    outcome = facade.explain(expression)
    if isinstance(outcome, Err):
        return
    explanation = outcome.value
    print(f"  normalized: {explanation.normalized}", file=out)
    print(f"  tokens:     {format_lexemes(explanation.tokens)}", file=out)
    print(f"  postfix:    {format_lexemes(explanation.postfix)}", file=out)


def run(
    expressions: Iterable[str],
    *,
    calculator: Calculator,
    explain: bool = False,
    out: Optional[TextIO] = None,
) -> int:
    if out is None:
        out = sys.stdout
    failures = 0
    for expression in expressions:
        try:
            result = calculator.evaluate(expression)
        except CalculatorError as exc:
            failures += 1
            print(f"{expression} -> {exc.error_type}", file=out)
            for line in exc.message.splitlines():
                print(f"  {line}", file=out)
            continue

        print(f"{expression} = {result.result!r}", file=out)
        if explain:
            _print_explanation(expression, out)

    return 1 if failures else 0


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    expressions = load_expressions(args)
    if not expressions:
        parser.error("provide at least one expression or --file")

    try:
        calculator = get_calculator()
    except CalculatorError as exc:
        logger.error("Cannot create calculator: %s", exc.message)
        return 2

    return run(expressions, calculator=calculator, explain=args.explain)


if __name__ == "__main__":
    sys.exit(main())
