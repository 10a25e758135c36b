"""
Язык выражений тегов: пути к данным, литералы, сравнения и логические операции.
"""

from __future__ import annotations

from .evaluator import EvaluationError, ExpressionEvaluator, evaluate_expression
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
from .parser import ExpressionParser, ParseError, parse_expression

__all__ = [
    "BinaryExpression",
    "CompareExpression",
    "EvaluationError",
    "Expression",
    "ExpressionEvaluator",
    "ExpressionLexer",
    "ExpressionParser",
    "ExpressionType",
    "GroupExpression",
    "LexError",
    "LiteralExpression",
    "NotExpression",
    "ParseError",
    "PathExpression",
    "Token",
    "evaluate_expression",
    "parse_expression",
]
