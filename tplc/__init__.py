"""
Компилятор шаблонов с подключаемыми грамматиками разделителей.

Превращает текст с тегами ({if}, {foreach}, {$var} и т.п.) в набор инструкций,
который многократно исполняется над разными данными.
"""

from __future__ import annotations

from .engine import TemplateEngine
from .errors import (
    ArgumentMismatchError,
    ExpressionSyntaxError,
    GrammarError,
    MalformedTagError,
    RegistryFrozenError,
    RenderError,
    SourcePosition,
    TemplateCompileError,
    TplUserError,
    UnbalancedTagError,
    UnknownTagError,
)
from .grammar import DelimiterType, GrammarRegistry, TagSpec, build_registry, load_grammar
from .runtime.template import CompiledTemplate, TemplateCompiler, compile_template
from .standard import standard_registry

__all__ = [
    "ArgumentMismatchError",
    "CompiledTemplate",
    "DelimiterType",
    "ExpressionSyntaxError",
    "GrammarError",
    "GrammarRegistry",
    "MalformedTagError",
    "RegistryFrozenError",
    "RenderError",
    "SourcePosition",
    "TagSpec",
    "TemplateCompileError",
    "TemplateCompiler",
    "TemplateEngine",
    "TplUserError",
    "UnbalancedTagError",
    "UnknownTagError",
    "build_registry",
    "compile_template",
    "load_grammar",
    "standard_registry",
]
