"""
Грамматика разделителей: семейства тегов, реестр обработчиков и загрузка из YAML.
"""

from __future__ import annotations

from .load import build_registry, load_grammar
from .registry import GrammarRegistry
from .types import DelimiterKey, DelimiterType, GrammarConfig, TagHandler, TagSpec

__all__ = [
    "DelimiterKey",
    "DelimiterType",
    "GrammarConfig",
    "GrammarRegistry",
    "TagHandler",
    "TagSpec",
    "build_registry",
    "load_grammar",
]
