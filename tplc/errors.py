"""
Иерархия ошибок шаблонизатора.

Все ожидаемые ошибки, которые показываются пользователю чистым сообщением
(без трассировки стека), наследуются от TplUserError.

Программные ошибки и баги НЕ наследуются от TplUserError:
они распространяются с полной трассировкой.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SourcePosition:
    """
    Позиция в исходном тексте шаблона для точной диагностики ошибок.
    """
    offset: int   # Смещение от начала текста
    line: int     # Номер строки (начиная с 1)
    column: int   # Номер колонки (начиная с 1)

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


class TplUserError(Exception):
    """
    Базовый класс для всех пользовательских ошибок.

    Сигнализирует о проблемах, которые пользователь может исправить сам:
    неверная грамматика, несбалансированные теги, отсутствующие данные.
    """
    pass


class GrammarError(TplUserError):
    """Некорректное описание грамматики разделителей."""
    pass


class TemplateCompileError(TplUserError):
    """Общая ошибка компиляции шаблона."""

    def __init__(self, message: str, position: Optional[SourcePosition] = None):
        if position is not None:
            super().__init__(f"{message} at {position}")
        else:
            super().__init__(message)
        self.message = message
        self.position = position


class MalformedTagError(TemplateCompileError):
    """Открывающий разделитель без закрывающего."""
    pass


class UnbalancedTagError(TemplateCompileError):
    """Закрывающий тег без открывающего или незакрытый открывающий тег."""
    pass


class UnknownTagError(TemplateCompileError):
    """Для распознанного тега не зарегистрирован обработчик."""
    pass


class ExpressionSyntaxError(TemplateCompileError):
    """Синтаксическая ошибка в выражении внутри тега."""
    pass


class ArgumentMismatchError(TplUserError):
    """
    Текст тега не соответствует шаблону аргументов.

    Мягкая ошибка: перехватывается экстрактором аргументов,
    тег обрабатывается как тег без аргументов.
    """

    def __init__(self, pattern: str, text: str):
        super().__init__(f"Text {text!r} does not match argument pattern {pattern!r}")
        self.pattern = pattern
        self.text = text


class RenderError(TplUserError):
    """Ошибка выполнения скомпилированного шаблона."""

    def __init__(
        self,
        message: str,
        position: Optional[SourcePosition] = None,
        cause: Optional[Exception] = None,
    ):
        if position is not None:
            super().__init__(f"{message} at {position}")
        else:
            super().__init__(message)
        self.message = message
        self.position = position
        self.cause = cause


class RegistryFrozenError(RuntimeError):
    """Попытка регистрации в замороженном реестре грамматики."""
    pass


__all__ = [
    "SourcePosition",
    "TplUserError",
    "GrammarError",
    "TemplateCompileError",
    "MalformedTagError",
    "UnbalancedTagError",
    "UnknownTagError",
    "ExpressionSyntaxError",
    "ArgumentMismatchError",
    "RenderError",
    "RegistryFrozenError",
]
