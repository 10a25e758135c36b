"""
Модели данных для выражений в тегах.

Содержит классы для представления значений, путей к данным
и логических операций в условиях и тегах вывода.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple


class ExpressionType(Enum):
    """Типы выражений."""
    LITERAL = "literal"
    PATH = "path"
    COMPARE = "compare"
    AND = "and"
    OR = "or"
    NOT = "not"
    GROUP = "group"  # для явной группировки в скобках


@dataclass(frozen=True)
class Expression(ABC):
    """Базовый абстрактный класс для всех выражений."""

    @abstractmethod
    def get_type(self) -> ExpressionType:
        """Возвращает тип выражения."""
        pass

    def __str__(self) -> str:
        return self._to_string()

    @abstractmethod
    def _to_string(self) -> str:
        pass


@dataclass(frozen=True)
class LiteralExpression(Expression):
    """
    Литерал: строка, число, true/false/null.
    """
    value: Any

    def get_type(self) -> ExpressionType:
        return ExpressionType.LITERAL

    def _to_string(self) -> str:
        if self.value is None:
            return "null"
        if isinstance(self.value, bool):
            return "true" if self.value else "false"
        return repr(self.value)


@dataclass(frozen=True)
class PathExpression(Expression):
    """
    Путь к данным: $user.name, items.0

    Первая часть ищется в области видимости, остальные - в найденном значении.
    """
    parts: Tuple[str, ...]

    def get_type(self) -> ExpressionType:
        return ExpressionType.PATH

    def _to_string(self) -> str:
        return "$" + ".".join(self.parts)


@dataclass(frozen=True)
class CompareExpression(Expression):
    """
    Сравнение: left op right, где op - один из ==, !=, <, <=, >, >=
    """
    left: Expression
    operator: str
    right: Expression

    def get_type(self) -> ExpressionType:
        return ExpressionType.COMPARE

    def _to_string(self) -> str:
        return f"{self.left} {self.operator} {self.right}"


@dataclass(frozen=True)
class GroupExpression(Expression):
    """
    Группа в скобках: (expression)
    """
    expression: Expression

    def get_type(self) -> ExpressionType:
        return ExpressionType.GROUP

    def _to_string(self) -> str:
        return f"({self.expression})"


@dataclass(frozen=True)
class NotExpression(Expression):
    """
    Отрицание: not expression
    """
    expression: Expression

    def get_type(self) -> ExpressionType:
        return ExpressionType.NOT

    def _to_string(self) -> str:
        return f"not {self.expression}"


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """
    Бинарная логическая операция: left and/or right

    Вычисляется с коротким замыканием.
    """
    left: Expression
    right: Expression
    operator: ExpressionType  # AND или OR

    def get_type(self) -> ExpressionType:
        return self.operator

    def _to_string(self) -> str:
        op_str = "and" if self.operator == ExpressionType.AND else "or"
        return f"{self.left} {op_str} {self.right}"


__all__ = [
    "Expression",
    "ExpressionType",
    "LiteralExpression",
    "PathExpression",
    "CompareExpression",
    "GroupExpression",
    "NotExpression",
    "BinaryExpression",
]
