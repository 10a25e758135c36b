"""
Интерпретатор набора инструкций.

Исполняет тело скомпилированного шаблона над данными рендеринга.
Каждый вызов получает собственный аккумулятор и область видимости.
Вложенные блоки исполняются на явном стеке кадров, поэтому глубина
вложенности тегов не ограничена глубиной рекурсии Python.
"""

from __future__ import annotations

from collections import ChainMap
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Iterator, List, MutableMapping, Optional, Tuple, Union

from .ir import (
    AppendExpression,
    AppendLiteral,
    Branch,
    Call,
    CallContext,
    ElseBranch,
    ElseIfBranch,
    Fragment,
    Instruction,
    Loop,
    LoopMode,
)
from ..errors import RenderError, SourcePosition
from ..expressions.evaluator import EvaluationError, ExpressionEvaluator
from ..expressions.model import Expression

Scope = ChainMap


def to_text(value: Any) -> str:
    """Преобразует значение выражения в текст для вывода."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass
class _BlockFrame:
    """Исполняемый блок инструкций."""
    instructions: Iterator[Instruction]
    scope: Scope
    # None - нет активной условной цепочки, иначе - была ли выполнена ветка
    chain_taken: Optional[bool] = None


@dataclass
class _LoopFrame:
    """Активный цикл: каждая пара (индекс, значение) порождает кадр тела."""
    loop: Loop
    pairs: Iterator[Tuple[Any, Any]]
    scope: Scope


_Frame = Union[_BlockFrame, _LoopFrame]


class Interpreter:
    """
    Исполнитель фрагментов.
    """

    def run(self, body: Fragment, data: Optional[Mapping[str, Any]] = None) -> str:
        """
        Исполняет тело шаблона.

        Args:
            body: Фрагмент инструкций
            data: Данные рендеринга (не изменяются и не сохраняются)

        Returns:
            Отрендеренный текст

        Raises:
            RenderError: При ошибке выполнения инструкции
        """
        # Запись локальных имен уходит в верхний слой, данные вызывающего не трогаются
        scope: Scope = ChainMap({}, data if data is not None else {})
        out: List[str] = []
        try:
            self._execute(body, scope, out)
        except RecursionError as e:
            raise RenderError("Template nesting is too deep", cause=e) from e
        return "".join(out)

    def _execute(self, block: Fragment, scope: Scope, out: List[str]) -> None:
        stack: List[_Frame] = [_BlockFrame(iter(block), scope)]

        while stack:
            frame = stack[-1]

            if isinstance(frame, _LoopFrame):
                pair = next(frame.pairs, None)
                if pair is None:
                    stack.pop()
                    continue
                index, value = pair
                child: MutableMapping[str, Any] = {frame.loop.target: value, f"{frame.loop.target}_i": index}
                stack.append(_BlockFrame(iter(frame.loop.body), frame.scope.new_child(child)))
                continue

            instruction = next(frame.instructions, None)
            if instruction is None:
                stack.pop()
                continue

            if isinstance(instruction, AppendLiteral):
                out.append(instruction.text)
                frame.chain_taken = None

            elif isinstance(instruction, AppendExpression):
                value = self._evaluate(instruction.expression, frame.scope, instruction.position)
                out.append(to_text(value))
                frame.chain_taken = None

            elif isinstance(instruction, Branch):
                frame.chain_taken = bool(self._evaluate(instruction.condition, frame.scope, instruction.position))
                if frame.chain_taken:
                    stack.append(_BlockFrame(iter(instruction.body), frame.scope))

            elif isinstance(instruction, ElseIfBranch):
                if not frame.chain_taken and self._evaluate(instruction.condition, frame.scope, instruction.position):
                    frame.chain_taken = True
                    stack.append(_BlockFrame(iter(instruction.body), frame.scope))

            elif isinstance(instruction, ElseBranch):
                taken = frame.chain_taken
                frame.chain_taken = None
                if not taken:
                    stack.append(_BlockFrame(iter(instruction.body), frame.scope))

            elif isinstance(instruction, Loop):
                frame.chain_taken = None
                stack.append(_LoopFrame(instruction, self._pairs(instruction, frame.scope), frame.scope))

            elif isinstance(instruction, Call):
                out.append(self._execute_call(instruction, frame.scope))
                frame.chain_taken = None

            else:
                raise RenderError(f"Unsupported instruction: {type(instruction).__name__}")

    def _pairs(self, loop: Loop, scope: Scope) -> Iterator[Tuple[Any, Any]]:
        collection = self._evaluate(loop.iterable, scope, loop.position)

        if loop.mode is LoopMode.INDEX:
            if not isinstance(collection, Sequence) or isinstance(collection, str):
                raise RenderError(
                    f"'{loop.iterable}' is not a sequence ({type(collection).__name__})",
                    loop.position,
                )
            return ((i, collection[i]) for i in range(len(collection)))
        if isinstance(collection, Mapping):
            return iter(collection.items())
        if isinstance(collection, (str, bytes)) or not hasattr(collection, "__iter__"):
            raise RenderError(
                f"'{loop.iterable}' is not iterable ({type(collection).__name__})",
                loop.position,
            )
        return enumerate(collection)

    def _execute_call(self, call: Call, scope: Scope) -> str:
        def render_body(extra: Optional[Mapping[str, Any]] = None) -> str:
            parts: List[str] = []
            self._execute(call.body, scope.new_child(dict(extra or {})), parts)
            return "".join(parts)

        def evaluate(expression: Expression) -> Any:
            return self._evaluate(expression, scope, call.position)

        context = CallContext(
            arguments=dict(call.arguments),
            scope=scope,
            render_body=render_body,
            evaluate=evaluate,
        )
        try:
            return to_text(call.func(context))
        except RenderError:
            raise
        except Exception as e:
            raise RenderError(f"Tag handler failed: {e}", call.position, e) from e

    @staticmethod
    def _evaluate(
        expression: Expression,
        scope: Scope,
        position: Optional[SourcePosition],
    ) -> Any:
        try:
            return ExpressionEvaluator(scope).evaluate(expression)
        except EvaluationError as e:
            raise RenderError(str(e), position, e) from e


__all__ = ["Interpreter", "to_text"]
