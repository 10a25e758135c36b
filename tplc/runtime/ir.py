"""
Набор инструкций скомпилированного шаблона.

Генератор кода превращает дерево шаблона в кортеж инструкций (фрагмент),
который исполняет интерпретатор. Выполнения произвольного кода нет:
набор инструкций закрыт.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from ..errors import SourcePosition
from ..expressions.model import Expression


@dataclass(frozen=True)
class Instruction:
    """Базовый класс инструкций."""
    pass


# Фрагмент - единица сгенерированного кода для одного узла
Fragment = Tuple[Instruction, ...]


@dataclass(frozen=True)
class AppendLiteral(Instruction):
    """Добавить текст как есть."""
    text: str


@dataclass(frozen=True)
class AppendExpression(Instruction):
    """Добавить значение выражения."""
    expression: Expression
    source: str = ""
    position: Optional[SourcePosition] = None


@dataclass(frozen=True)
class Branch(Instruction):
    """Начало условной цепочки: {if ...}."""
    condition: Expression
    body: Fragment
    source: str = ""
    position: Optional[SourcePosition] = None


@dataclass(frozen=True)
class ElseIfBranch(Instruction):
    """Продолжение условной цепочки: {elseif ...}."""
    condition: Expression
    body: Fragment
    source: str = ""
    position: Optional[SourcePosition] = None


@dataclass(frozen=True)
class ElseBranch(Instruction):
    """Завершение условной цепочки: {else}."""
    body: Fragment
    position: Optional[SourcePosition] = None


class LoopMode(enum.Enum):
    """Режимы цикла."""
    EACH = "each"      # Любой итерируемый объект или отображение
    INDEX = "index"    # Только последовательность, обход по индексу


@dataclass(frozen=True)
class Loop(Instruction):
    """
    Цикл по коллекции.

    На каждой итерации связывает target со значением,
    а f"{target}_i" - с индексом (или ключом отображения).
    """
    target: str
    iterable: Expression
    body: Fragment
    mode: LoopMode = LoopMode.EACH
    source: str = ""
    position: Optional[SourcePosition] = None


@dataclass
class CallContext:
    """
    Контекст вызова пользовательского обработчика во время выполнения.

    Предоставляет доступ к области видимости и рендеру тела тега
    без доступа к внутреннему состоянию интерпретатора.
    """
    arguments: Dict[str, str]
    scope: Mapping[str, Any]
    render_body: Callable[[Optional[Mapping[str, Any]]], str]
    evaluate: Callable[[Expression], Any]


@dataclass(frozen=True)
class Call(Instruction):
    """Вызов пользовательской функции с телом тега."""
    func: Callable[[CallContext], str]
    body: Fragment = ()
    arguments: Dict[str, str] = field(default_factory=dict)
    position: Optional[SourcePosition] = None


# Инструкции, которые могут продолжить условную цепочку
CHAIN_STARTERS = (Branch, ElseIfBranch)


def join_fragments(fragments: Iterable[Fragment]) -> Fragment:
    """
    Склеивает фрагменты, объединяя соседние литералы.
    """
    result: List[Instruction] = []
    for fragment in fragments:
        for instruction in fragment:
            if isinstance(instruction, AppendLiteral) and result and isinstance(result[-1], AppendLiteral):
                result[-1] = AppendLiteral(result[-1].text + instruction.text)
            elif isinstance(instruction, AppendLiteral) and not instruction.text:
                continue
            else:
                result.append(instruction)
    return tuple(result)


__all__ = [
    "Instruction",
    "Fragment",
    "AppendLiteral",
    "AppendExpression",
    "Branch",
    "ElseIfBranch",
    "ElseBranch",
    "LoopMode",
    "Loop",
    "CallContext",
    "Call",
    "CHAIN_STARTERS",
    "join_fragments",
]
