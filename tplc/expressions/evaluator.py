"""
Вычислитель выражений.

Проходит по AST выражения и вычисляет его значение в области видимости
(отображение имя -> значение, переданное при рендеринге).
"""

from __future__ import annotations

import operator
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Dict, cast

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


class EvaluationError(Exception):
    """Ошибка при вычислении выражения."""
    pass


_COMPARATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


class ExpressionEvaluator:
    """
    Вычислитель выражений.

    Принимает AST выражения и область видимости, возвращает значение.
    """

    def __init__(self, scope: Mapping):
        """
        Args:
            scope: Данные, доступные шаблону
        """
        self.scope = scope

    def evaluate(self, expression: Expression) -> Any:
        """
        Вычисляет значение выражения.

        Raises:
            EvaluationError: Неизвестное имя или неподдерживаемая операция
        """
        expression_type = expression.get_type()

        if expression_type == ExpressionType.LITERAL:
            return cast(LiteralExpression, expression).value
        elif expression_type == ExpressionType.PATH:
            return self._evaluate_path(cast(PathExpression, expression))
        elif expression_type == ExpressionType.GROUP:
            return self.evaluate(cast(GroupExpression, expression).expression)
        elif expression_type == ExpressionType.NOT:
            return not self.evaluate(cast(NotExpression, expression).expression)
        elif expression_type == ExpressionType.AND:
            node = cast(BinaryExpression, expression)
            return self.evaluate(node.left) and self.evaluate(node.right)
        elif expression_type == ExpressionType.OR:
            node = cast(BinaryExpression, expression)
            return self.evaluate(node.left) or self.evaluate(node.right)
        elif expression_type == ExpressionType.COMPARE:
            return self._evaluate_compare(cast(CompareExpression, expression))
        else:
            raise EvaluationError(f"Unknown expression type: {expression_type}")

    def _evaluate_path(self, expression: PathExpression) -> Any:
        """
        Вычисляет путь: первая часть - имя в области видимости,
        далее ключ отображения, индекс последовательности или атрибут.
        """
        head, *rest = expression.parts
        if head not in self.scope:
            raise EvaluationError(f"Undefined name '{head}'")

        value = self.scope[head]
        walked = head
        for part in rest:
            value = _lookup(value, part, walked)
            walked = f"{walked}.{part}"
        return value

    def _evaluate_compare(self, expression: CompareExpression) -> bool:
        left = self.evaluate(expression.left)
        right = self.evaluate(expression.right)
        try:
            return _COMPARATORS[expression.operator](left, right)
        except TypeError as e:
            raise EvaluationError(
                f"Cannot compare {type(left).__name__} {expression.operator} {type(right).__name__}"
            ) from e


def _lookup(value: Any, part: str, walked: str) -> Any:
    """
    Шаг пути: ключ отображения, индекс последовательности или атрибут объекта.

    У контейнеров атрибуты не ищутся: $d.items - это ключ "items", а не метод.
    """
    if isinstance(value, Mapping):
        if part in value:
            return value[part]
        raise EvaluationError(f"'{walked}' has no item '{part}'")

    if isinstance(value, Sequence) and not isinstance(value, str):
        if not part.isdigit():
            raise EvaluationError(f"'{walked}' has no item '{part}'")
        index = int(part)
        if index < len(value):
            return value[index]
        raise EvaluationError(f"Index {index} out of range in '{walked}'")

    if not part.startswith("_") and hasattr(value, part):
        return getattr(value, part)
    raise EvaluationError(f"'{walked}' has no item '{part}'")


def evaluate_expression(expression: Expression, scope: Mapping) -> Any:
    """Удобная функция для вычисления выражения."""
    return ExpressionEvaluator(scope).evaluate(expression)


__all__ = ["EvaluationError", "ExpressionEvaluator", "evaluate_expression"]
