"""
Извлечение аргументов тега по шаблону с плейсхолдерами.

Шаблон вида "{element} in {object}" компилируется в регулярное выражение:
весь текст вне плейсхолдеров экранируется, каждый плейсхолдер заменяется
захватывающей группой. Захваченные подстроки связываются с именами
плейсхолдеров в порядке объявления.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Pattern, Tuple

from ..errors import ArgumentMismatchError

logger = logging.getLogger(__name__)

# Плейсхолдер: {name}
_PLACEHOLDER = re.compile(r"\{(\w+)\}")


@dataclass(frozen=True)
class ArgumentPattern:
    """
    Скомпилированный шаблон аргументов.
    """
    source: str
    names: Tuple[str, ...]
    regex: Pattern[str]

    @classmethod
    def compile(cls, pattern: str) -> ArgumentPattern:
        """
        Компилирует шаблон аргументов.

        Args:
            pattern: Шаблон с плейсхолдерами {name}

        Returns:
            Скомпилированный шаблон
        """
        names = []
        parts = []
        last = 0
        for m in _PLACEHOLDER.finditer(pattern):
            parts.append(re.escape(pattern[last:m.start()]))
            parts.append("(.*?)")
            names.append(m.group(1))
            last = m.end()
        parts.append(re.escape(pattern[last:]))

        return cls(
            source=pattern,
            names=tuple(names),
            regex=re.compile("".join(parts), re.DOTALL),
        )

    def match(self, text: str) -> Dict[str, str]:
        """
        Применяет шаблон к тексту тега.

        Raises:
            ArgumentMismatchError: Если текст не соответствует шаблону
        """
        m = self.regex.fullmatch(text.strip())
        if m is None:
            raise ArgumentMismatchError(self.source, text)
        return {name: value.strip() for name, value in zip(self.names, m.groups())}

    def extract(self, text: str) -> Dict[str, str]:
        """
        Извлекает аргументы, трактуя несоответствие как отсутствие аргументов.
        """
        try:
            return self.match(text)
        except ArgumentMismatchError as e:
            logger.debug(str(e))
            return {}


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> ArgumentPattern:
    """Компилирует шаблон аргументов с кэшированием."""
    return ArgumentPattern.compile(pattern)


__all__ = ["ArgumentPattern", "compile_pattern"]
