"""
Разбор одного тегового сегмента.

Извлекает имя тега, признак закрывающего тега, признак изоляции
и именованные аргументы.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Optional, Pattern, Union

from .arguments import compile_pattern
from .matcher import TagMatcher
from .segmenter import Segment
from ..grammar.types import DelimiterType


@dataclass(frozen=True)
class ParsedTag:
    """
    Метаданные разобранного тега.

    tag_name == None означает анонимный тег вывода (например, {$var}).
    """
    tag_name: Optional[str]
    delimiter: str
    is_closing: bool = False
    isolated: bool = False
    verbatim: bool = False
    raw_inner: Optional[str] = None
    arguments: Dict[str, str] = field(default_factory=dict)


class TagParser:
    """
    Разбирает теговые сегменты в ParsedTag.
    """

    def __init__(self, matcher: TagMatcher):
        self.matcher = matcher
        self._name_patterns: Dict[str, Pattern[str]] = {}

    def parse(self, segment: Segment) -> Union[ParsedTag, bool]:
        """
        Разбирает теговый сегмент.

        Args:
            segment: Сегмент вида TAG

        Returns:
            ParsedTag или False, если внутренний текст не соответствует
            ни одному имени тега семейства с именованными тегами
        """
        match = self.matcher.match(segment.raw)
        if match is None or match.index != 0:
            return False

        family = match.type
        inner = segment.raw[len(family.opener):len(segment.raw) - len(family.closer)]

        if not family.has_named_tags:
            return ParsedTag(
                tag_name=None,
                delimiter=family.key,
                raw_inner=inner,
                arguments=self._extract(inner, family.arguments),
            )

        m = self._name_pattern(family).match(inner.strip())
        if m is None:
            return False

        is_closing = bool(m.group(1))
        tag_name = m.group(2)
        rest = m.group(3)
        spec = family.tag(tag_name)
        assert spec is not None

        if is_closing:
            return ParsedTag(
                tag_name=tag_name,
                delimiter=family.key,
                is_closing=True,
                isolated=spec.isolated,
                verbatim=spec.verbatim,
            )

        # Шаблон уровня тега имеет приоритет над шаблоном семейства
        pattern = spec.arguments if spec.arguments is not None else family.arguments
        return ParsedTag(
            tag_name=tag_name,
            delimiter=family.key,
            isolated=spec.isolated,
            verbatim=spec.verbatim,
            raw_inner=rest,
            arguments=self._extract(rest, pattern),
        )

    def parse_anonymous(self, segment: Segment) -> ParsedTag:
        """
        Строит анонимный тег для сегмента, не распознанного как именованный.
        """
        family = self.matcher.registry.family(segment.delimiter) if segment.delimiter else None
        if family is None:
            match = self.matcher.match(segment.raw)
            assert match is not None
            family = match.type
        inner = segment.raw[len(family.opener):len(segment.raw) - len(family.closer)]
        return ParsedTag(
            tag_name=None,
            delimiter=family.key,
            raw_inner=inner,
            arguments=self._extract(inner, family.arguments),
        )

    def _name_pattern(self, family: DelimiterType) -> Pattern[str]:
        pattern = self._name_patterns.get(family.key)
        if pattern is None:
            # Длинные имена первыми, чтобы "for" не перекрывал "foreach"
            names = sorted(family.tags or {}, key=len, reverse=True)
            alternatives = "|".join(re.escape(name) for name in names)
            pattern = re.compile(rf"^(/)?({alternatives})(?=\s|$)\s*(.*)$", re.DOTALL)
            self._name_patterns[family.key] = pattern
        return pattern

    @staticmethod
    def _extract(text: str, pattern: Optional[str]) -> Dict[str, str]:
        if not pattern:
            return {}
        return compile_pattern(pattern).extract(text)


__all__ = ["ParsedTag", "TagParser"]
