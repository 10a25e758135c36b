"""
Стандартная грамматика: комментарии, вывод, циклы, условия и literal-блоки.
"""

from __future__ import annotations

from .grammar import STANDARD_FAMILIES, standard_registry
from .handlers import HANDLERS

__all__ = ["HANDLERS", "STANDARD_FAMILIES", "standard_registry"]
