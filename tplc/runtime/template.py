"""
Скомпилированный шаблон и конвейер компиляции.

Сегментация -> построение дерева -> генерация кода. Все структурные ошибки
обнаруживаются при компиляции; run() ничего не разбирает.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .interpreter import Interpreter
from .ir import Fragment
from ..compiler.codegen import CodeGenerator
from ..compiler.matcher import TagMatcher
from ..compiler.nodes import TemplateTree
from ..compiler.segmenter import Segmenter
from ..compiler.tag_parser import TagParser
from ..compiler.tree import TreeBuilder
from ..grammar.registry import GrammarRegistry

logger = logging.getLogger(__name__)

_INTERPRETER = Interpreter()


@dataclass(frozen=True)
class CompiledTemplate:
    """
    Результат компиляции шаблона.

    Неизменяем и безопасен для одновременного использования из разных потоков:
    каждый вызов run() работает со своим аккумулятором.
    """
    body: Fragment
    name: str = ""

    def run(self, data: Optional[Mapping[str, Any]] = None) -> str:
        """
        Рендерит шаблон с указанными данными.

        Raises:
            RenderError: При ошибке выполнения
        """
        return _INTERPRETER.run(self.body, data)

    __call__ = run


class TemplateCompiler:
    """
    Конвейер компиляции для одной грамматики.
    """

    def __init__(self, registry: GrammarRegistry):
        self.registry = registry
        self.matcher = TagMatcher(registry)
        self.segmenter = Segmenter(self.matcher)
        self.parser = TagParser(self.matcher)
        self.tree_builder = TreeBuilder(self.parser)
        self.generator = CodeGenerator(registry)

    def parse(self, source: str) -> TemplateTree:
        """Строит дерево шаблона без генерации кода."""
        return self.tree_builder.build(self.segmenter.segment(source))

    def compile(self, source: str, name: str = "") -> CompiledTemplate:
        """
        Компилирует текст шаблона.

        Raises:
            MalformedTagError, UnbalancedTagError, UnknownTagError, ExpressionSyntaxError
        """
        tree = self.parse(source)
        body = self.generator.generate(tree)
        logger.debug(f"Compiled template '{name}' -> {len(body)} instructions")
        return CompiledTemplate(body=body, name=name)


def compile_template(source: str, registry: GrammarRegistry, name: str = "") -> CompiledTemplate:
    """Удобная функция для компиляции шаблона."""
    return TemplateCompiler(registry).compile(source, name)


__all__ = ["CompiledTemplate", "TemplateCompiler", "compile_template"]
