"""
Поиск ближайшего тега в тексте.

Среди всех зарегистрированных семейств находит то, чья открывающая строка
встречается раньше других начиная с заданной позиции.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..grammar.registry import GrammarRegistry
from ..grammar.types import DelimiterType


@dataclass(frozen=True)
class TagMatch:
    """Результат поиска: семейство и позиция его открывающей строки."""
    type: DelimiterType
    index: int

    @property
    def delimiter(self) -> str:
        return self.type.key


class TagMatcher:
    """
    Определяет, какое семейство разделителей начинается раньше всех.

    При совпадении позиций выигрывает семейство с большим priority,
    затем - зарегистрированное раньше (порядок GrammarRegistry.families()).
    """

    def __init__(self, registry: GrammarRegistry):
        self.registry = registry

    def match(self, source: str, start: int = 0) -> Optional[TagMatch]:
        """
        Ищет ближайшее вхождение открывающей строки любого семейства.

        Args:
            source: Исходный текст
            start: Позиция начала поиска

        Returns:
            TagMatch или None, если ни одно семейство не найдено
        """
        best: Optional[TagMatch] = None

        for family in self.registry.families():
            index = source.find(family.opener, start)
            if index < 0:
                continue
            # Строгое сравнение сохраняет приоритетный порядок при равных позициях
            if best is None or index < best.index:
                best = TagMatch(type=family, index=index)

        return best


__all__ = ["TagMatch", "TagMatcher"]
