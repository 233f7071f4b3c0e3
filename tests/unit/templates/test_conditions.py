"""Tests for the condition expression parser and evaluator."""
from __future__ import annotations

import pytest

from tessera.core.templates.conditions import (
    BinaryOp,
    ConditionEvaluator,
    Literal,
    Lookup,
    Not,
    parse_condition,
)
from tessera.core.templates.errors import ConditionEvaluationError, ConditionSyntaxError


@pytest.fixture
def evaluator() -> ConditionEvaluator:
    return ConditionEvaluator()


@pytest.fixture
def context() -> dict:
    return {
        "isAuthenticated": True,
        "isGuest": False,
        "count": 3,
        "user": {"role": "admin", "profile": {"locale": "nb-NO"}},
        "empty": "",
    }


class TestParse:
    def test_literals(self) -> None:
        assert parse_condition("true") == Literal(True)
        assert parse_condition("false") == Literal(False)
        assert parse_condition("null") == Literal(None)
        assert parse_condition("42") == Literal(42)
        assert parse_condition("'admin'") == Literal("admin")
        assert parse_condition('"a \\"b\\""') == Literal('a "b"')

    def test_dotted_lookup(self) -> None:
        assert parse_condition("user.profile.locale") == Lookup(("user", "profile", "locale"))

    def test_precedence_and_binds_tighter_than_or(self) -> None:
        node = parse_condition("a || b && c")
        assert node == BinaryOp("||", Lookup(("a",)), BinaryOp("&&", Lookup(("b",)), Lookup(("c",))))

    def test_not_applies_to_comparison(self) -> None:
        node = parse_condition("!a == b")
        assert node == Not(BinaryOp("==", Lookup(("a",)), Lookup(("b",))))

    @pytest.mark.parametrize(
        "expr",
        ["", "   ", "a &&", "(a || b", "a b", "a = b", "user.", "a ||| b", "import os"],
    )
    def test_malformed_expressions_raise(self, expr: str) -> None:
        with pytest.raises(ConditionSyntaxError):
            parse_condition(expr)

    def test_syntax_error_reports_position(self) -> None:
        with pytest.raises(ConditionSyntaxError) as exc_info:
            parse_condition("a && #")
        assert exc_info.value.position == 5


class TestEvaluate:
    @pytest.mark.parametrize(
        "expr,expected",
        [
            ("isAuthenticated", True),
            ("!isAuthenticated", False),
            ("isGuest || isAuthenticated", True),
            ("isGuest && isAuthenticated", False),
            ("user.role == 'admin'", True),
            ("user.role != 'admin'", False),
            ("count == 3", True),
            ("!(isGuest || empty)", True),
            ("user.profile.locale == \"nb-NO\" && isAuthenticated", True),
            ("true", True),
            ("false", False),
        ],
    )
    def test_expressions(self, evaluator, context, expr: str, expected: bool) -> None:
        assert evaluator.evaluate(expr, context) is expected

    def test_missing_nested_segment_is_null(self, evaluator, context) -> None:
        assert evaluator.evaluate("user.missing == null", context) is True
        assert evaluator.evaluate("user.missing.deeper", context) is False

    def test_lookup_through_non_mapping_is_null(self, evaluator, context) -> None:
        assert evaluator.evaluate("count.value == null", context) is True

    def test_undefined_top_level_name_raises(self, evaluator, context) -> None:
        with pytest.raises(ConditionEvaluationError) as exc_info:
            evaluator.evaluate("notDefined", context)
        assert "notDefined" in str(exc_info.value)

    def test_short_circuit_skips_undefined_right_operand(self, evaluator, context) -> None:
        assert evaluator.evaluate("isAuthenticated || notDefined", context) is True
        assert evaluator.evaluate("isGuest && notDefined", context) is False

    def test_caller_text_is_not_executed(self, evaluator) -> None:
        with pytest.raises(ConditionSyntaxError):
            evaluator.evaluate("__import__('os').system('true')", {})
