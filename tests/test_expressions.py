"""
Tests for the expression lexer, parser and evaluator.
"""

import pytest

from tplc.expressions import (
    BinaryExpression,
    CompareExpression,
    EvaluationError,
    ExpressionEvaluator,
    ExpressionLexer,
    ExpressionType,
    GroupExpression,
    LexError,
    LiteralExpression,
    NotExpression,
    ParseError,
    PathExpression,
    parse_expression,
)


class TestExpressionLexer:

    def setup_method(self):
        self.lexer = ExpressionLexer()

    def test_tokens(self):
        tokens = self.lexer.tokenize("$a.b >= 10 AND not 'x'")
        assert [(t.type, t.value) for t in tokens] == [
            ("PATH", "$a.b"),
            ("OPERATOR", ">="),
            ("NUMBER", "10"),
            ("KEYWORD", "and"),
            ("KEYWORD", "not"),
            ("STRING", "'x'"),
            ("EOF", ""),
        ]

    def test_dollar_keyword_is_a_path(self):
        """$true - это имя переменной, а не литерал"""
        (token, _) = self.lexer.tokenize("$true")
        assert token.type == "PATH"

    def test_negative_and_float_numbers(self):
        tokens = self.lexer.tokenize("-3 1.25")
        assert [t.value for t in tokens[:2]] == ["-3", "1.25"]

    def test_unknown_character(self):
        with pytest.raises(LexError, match="Unexpected character"):
            self.lexer.tokenize("$a & $b")


class TestExpressionParser:

    def test_path(self):
        result = parse_expression("$user.name")
        assert isinstance(result, PathExpression)
        assert result.parts == ("user", "name")
        assert str(result) == "$user.name"

    def test_literals(self):
        assert parse_expression("'it\\'s'") == LiteralExpression("it's")
        assert parse_expression("42") == LiteralExpression(42)
        assert parse_expression("TRUE") == LiteralExpression(True)
        assert parse_expression("null") == LiteralExpression(None)

    def test_precedence(self):
        """Test that AND binds tighter than OR"""
        result = parse_expression("$a or $b and $c")
        assert isinstance(result, BinaryExpression)
        assert result.operator == ExpressionType.OR
        assert isinstance(result.right, BinaryExpression)
        assert result.right.operator == ExpressionType.AND

    def test_not_and_group(self):
        result = parse_expression("not ($a == 1)")
        assert isinstance(result, NotExpression)
        assert isinstance(result.expression, GroupExpression)
        assert isinstance(result.expression.expression, CompareExpression)

    @pytest.mark.parametrize("text, message", [
        ("", "Empty expression"),
        ("$a ==", "Unexpected end"),
        ("($a", r"Expected '\)'"),
        ("$a $b", "Unexpected token"),
    ])
    def test_errors(self, text, message):
        with pytest.raises(ParseError, match=message):
            parse_expression(text)


class TestExpressionEvaluator:

    def setup_method(self):
        self.scope = {"a": 1, "user": {"name": "Ann", "tags": ["x", "y"]}, "empty": []}

    def _eval(self, text):
        return ExpressionEvaluator(self.scope).evaluate(parse_expression(text))

    def test_paths(self):
        assert self._eval("$user.name") == "Ann"
        assert self._eval("user.tags.1") == "y"

    def test_comparisons(self):
        assert self._eval("$a == 1") is True
        assert self._eval("$a != 1") is False
        assert self._eval("$user.name >= 'A'") is True

    def test_truthiness(self):
        assert not self._eval("$empty")
        assert self._eval("not $empty and $a")

    def test_undefined_name(self):
        with pytest.raises(EvaluationError, match="Undefined name 'missing'"):
            self._eval("$missing")

    def test_missing_key(self):
        with pytest.raises(EvaluationError, match="has no item 'age'"):
            self._eval("$user.age")

    def test_index_out_of_range(self):
        with pytest.raises(EvaluationError, match="out of range"):
            self._eval("$user.tags.5")

    def test_mapping_key_does_not_fall_back_to_attribute(self):
        """$user.keys - ключ отображения, а не метод dict"""
        with pytest.raises(EvaluationError, match="has no item 'keys'"):
            self._eval("$user.keys")

    def test_sequence_name_does_not_fall_back_to_attribute(self):
        with pytest.raises(EvaluationError, match="has no item 'count'"):
            self._eval("$user.tags.count")

    def test_mapping_key_shadows_method_name(self):
        self.scope["order"] = {"items": [1, 2]}
        assert self._eval("$order.items") == [1, 2]
