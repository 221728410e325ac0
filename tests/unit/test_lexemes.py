import pytest

from calc_engine.engine.lexemes import (
    CloseBracket,
    OpenBracket,
    Operand,
    Operator,
    Priority,
    format_lexemes,
    lexeme_for_delimiter,
)


def test_priorities_form_strict_total_order() -> None:
    assert Priority.NONE < Priority.LOWEST < Priority.LOW < Priority.MEDIUM < Priority.HIGH


@pytest.mark.parametrize(
    ("symbol", "priority"),
    [
        ("+", Priority.LOW),
        ("-", Priority.LOW),
        ("*", Priority.MEDIUM),
        ("/", Priority.MEDIUM),
        ("^", Priority.HIGH),
    ],
)
def test_operator_priority_follows_symbol(symbol: str, priority: Priority) -> None:
    assert Operator(symbol).priority == priority


def test_brackets_and_operands_priorities() -> None:
    assert OpenBracket().priority == Priority.LOWEST
    assert CloseBracket().priority == Priority.LOWEST
    assert Operand(1.5).priority == Priority.NONE


def test_lexemes_compare_by_priority() -> None:
    assert Operator("+") <= Operator("*")
    assert Operator("^") >= Operator("/")
    assert OpenBracket() <= Operator("-")
    assert Operand(3.0) <= OpenBracket()


def test_unknown_operator_symbol_is_rejected() -> None:
    with pytest.raises(ValueError):
        Operator("%")


def test_lexeme_for_delimiter_builds_matching_kind() -> None:
    assert lexeme_for_delimiter("(") == OpenBracket()
    assert lexeme_for_delimiter(")") == CloseBracket()
    assert lexeme_for_delimiter("^") == Operator("^")


def test_format_lexemes_renders_symbols_and_numbers() -> None:
    lexemes = [OpenBracket(), Operand(2.0), Operator("+"), Operand(0.5), CloseBracket()]

    assert format_lexemes(lexemes) == "( 2.0 + 0.5 )"
