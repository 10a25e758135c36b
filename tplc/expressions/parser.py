"""
Парсер выражений с рекурсивным спуском.

Грамматика:
expression → or_expression
or_expression  → and_expression ("or" and_expression)*
and_expression → not_expression ("and" not_expression)*
not_expression → "not" not_expression | comparison
comparison     → primary (OPERATOR primary)?
primary        → STRING | NUMBER | "true" | "false" | "null" | PATH | "(" expression ")"
"""

from __future__ import annotations

import ast
from functools import lru_cache
from typing import Callable, List, Optional

from .lexer import ExpressionLexer, LexError, Token
from .model import (
    BinaryExpression,
    CompareExpression,
    Expression,
    ExpressionType,
    GroupExpression,
    LiteralExpression,
    NotExpression,
    PathExpression,
)

_KEYWORD_LITERALS = {"true": True, "false": False, "null": None}


class ParseError(Exception):
    """Ошибка парсинга выражения."""

    def __init__(self, message: str, position: int):
        self.message = message
        self.position = position
        super().__init__(f"Parse error at position {position}: {message}")


class ExpressionParser:
    """
    Парсер выражений тегов.

    Экземпляр не хранит состояние между вызовами parse().
    """

    def __init__(self):
        self.lexer = ExpressionLexer()

    def parse(self, text: str) -> Expression:
        """
        Парсит строку выражения в AST.

        Raises:
            ParseError: При синтаксической ошибке или ошибке токенизации
        """
        try:
            tokens = self.lexer.tokenize(text)
        except LexError as e:
            raise ParseError(str(e), e.position) from e

        cursor = _Cursor(tokens)
        if cursor.peek().type == "EOF":
            raise ParseError("Empty expression", 0)

        result = self._or(cursor)
        rest = cursor.peek()
        if rest.type != "EOF":
            raise ParseError(f"Unexpected token '{rest.value}'", rest.position)
        return result

    def _binary(
        self,
        cursor: _Cursor,
        keyword: str,
        operator: ExpressionType,
        operand: Callable[[_Cursor], Expression],
    ) -> Expression:
        # Левоассоциативная цепочка a op b op c
        left = operand(cursor)
        while cursor.accept("KEYWORD", keyword):
            left = BinaryExpression(left=left, right=operand(cursor), operator=operator)
        return left

    def _or(self, cursor: _Cursor) -> Expression:
        return self._binary(cursor, "or", ExpressionType.OR, self._and)

    def _and(self, cursor: _Cursor) -> Expression:
        return self._binary(cursor, "and", ExpressionType.AND, self._not)

    def _not(self, cursor: _Cursor) -> Expression:
        if cursor.accept("KEYWORD", "not"):
            return NotExpression(expression=self._not(cursor))
        return self._comparison(cursor)

    def _comparison(self, cursor: _Cursor) -> Expression:
        left = self._primary(cursor)
        op = cursor.accept("OPERATOR")
        if op is None:
            return left
        return CompareExpression(left=left, operator=op.value, right=self._primary(cursor))

    def _primary(self, cursor: _Cursor) -> Expression:
        if cursor.accept("SYMBOL", "("):
            inner = self._or(cursor)
            if not cursor.accept("SYMBOL", ")"):
                raise ParseError("Expected ')' after grouped expression", cursor.peek().position)
            return GroupExpression(expression=inner)

        token = cursor.next()
        if token.type == "STRING":
            return LiteralExpression(value=ast.literal_eval(token.value))
        if token.type == "NUMBER":
            return LiteralExpression(value=float(token.value) if "." in token.value else int(token.value))
        if token.type == "KEYWORD" and token.value in _KEYWORD_LITERALS:
            return LiteralExpression(value=_KEYWORD_LITERALS[token.value])
        if token.type == "PATH":
            return PathExpression(parts=tuple(token.value.lstrip("$").split(".")))
        if token.type == "EOF":
            raise ParseError("Unexpected end of expression", token.position)
        raise ParseError(f"Unexpected token '{token.value}'", token.position)


class _Cursor:
    """Позиция в списке токенов; EOF никогда не потребляется."""

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.index = 0

    def peek(self) -> Token:
        return self.tokens[self.index]

    def next(self) -> Token:
        token = self.tokens[self.index]
        if token.type != "EOF":
            self.index += 1
        return token

    def accept(self, token_type: str, value: Optional[str] = None) -> Optional[Token]:
        token = self.peek()
        if token.type == token_type and (value is None or token.value == value):
            return self.next()
        return None


@lru_cache(maxsize=512)
def parse_expression(text: str) -> Expression:
    """
    Парсит выражение с кэшированием по тексту.

    Raises:
        ParseError: При синтаксической ошибке
    """
    return ExpressionParser().parse(text)


__all__ = ["ParseError", "ExpressionParser", "parse_expression"]
