"""
Генератор кода шаблона.

Обходит дерево снизу вверх (post-order) без рекурсии и делегирует
каждый теговый узел обработчику, зарегистрированному по паре
(семейство, имя тега). Результат - фрагмент из инструкций.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from .nodes import TagNode, TemplateTree, TextNode
from ..errors import UnbalancedTagError, UnknownTagError
from ..grammar.registry import GrammarRegistry
from ..runtime.ir import (
    AppendLiteral,
    CHAIN_STARTERS,
    ElseBranch,
    ElseIfBranch,
    Fragment,
    join_fragments,
)

logger = logging.getLogger(__name__)


class CodeGenerator:
    """
    Превращает дерево шаблона в тело скомпилированного шаблона.
    """

    def __init__(self, registry: GrammarRegistry):
        self.registry = registry

    def generate(self, tree: TemplateTree) -> Fragment:
        """
        Генерирует фрагмент для всего дерева.

        Корень обработчиком не оборачивается: его фрагмент -
        конкатенация фрагментов дочерних узлов.

        Raises:
            UnknownTagError: Для тега не зарегистрирован обработчик
            UnbalancedTagError: elseif/else не продолжают условную цепочку
        """
        fragments: Dict[int, Fragment] = {}
        stack: List[Tuple[int, bool]] = [(tree.root.id, False)]

        while stack:
            node_id, expanded = stack.pop()
            node = tree[node_id]

            if isinstance(node, TextNode):
                fragments[node_id] = (AppendLiteral(node.value),)
                continue

            if not expanded:
                stack.append((node_id, True))
                stack.extend((child, False) for child in reversed(node.children))
                continue

            inner = self._join([fragments.pop(child) for child in node.children])
            fragments[node_id] = inner if node.is_root else self._handle(node, inner)

        body = fragments[tree.root.id]
        logger.debug(f"Generated template body -> {len(body)} instructions")
        return body

    def _handle(self, node: TagNode, inner: Fragment) -> Fragment:
        assert node.delimiter is not None
        handler = self.registry.handler_for(node.delimiter, node.tag_name)
        if handler is None:
            label = node.tag_name or (node.raw or "").strip()
            raise UnknownTagError(
                f"No handler registered for tag {label!r} in '{node.delimiter}'",
                node.position,
            )
        return tuple(handler(node, inner))

    @staticmethod
    def _join(fragments: List[Fragment]) -> Fragment:
        """
        Склеивает фрагменты дочерних узлов и проверяет условные цепочки.
        """
        body = join_fragments(fragments)

        previous = None
        for instruction in body:
            if isinstance(instruction, (ElseIfBranch, ElseBranch)) and not isinstance(previous, CHAIN_STARTERS):
                name = "elseif" if isinstance(instruction, ElseIfBranch) else "else"
                raise UnbalancedTagError(
                    f"'{name}' must directly follow 'if' or 'elseif'",
                    instruction.position,
                )
            previous = instruction
        return body


__all__ = ["CodeGenerator"]
