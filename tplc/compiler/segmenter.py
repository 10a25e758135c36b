"""
Разбиение исходного текста шаблона на сегменты.

Проходит по тексту с помощью TagMatcher и порождает упорядоченную
последовательность чередующихся текстовых и теговых сегментов.
Разбиение полное: конкатенация raw всех сегментов равна исходному тексту.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import List, Optional

from .matcher import TagMatcher
from ..errors import MalformedTagError, SourcePosition

logger = logging.getLogger(__name__)


class SegmentKind(enum.Enum):
    """Типы сегментов."""
    TEXT = "TEXT"
    TAG = "TAG"


@dataclass(frozen=True)
class Segment:
    """
    Сегмент исходного текста с позиционной информацией.
    """
    kind: SegmentKind
    raw: str
    offset: int
    position: SourcePosition
    delimiter: Optional[str] = None   # Ключ семейства для TAG-сегментов

    @property
    def is_tag(self) -> bool:
        return self.kind is SegmentKind.TAG

    def __repr__(self) -> str:
        return f"Segment({self.kind.name}, {self.raw!r}, {self.position})"


class _PositionTracker:
    """Пересчитывает смещения в номера строк и колонок по мере продвижения."""

    def __init__(self, text: str):
        self.text = text
        self.offset = 0
        self.line = 1
        self.column = 1

    def at(self, offset: int) -> SourcePosition:
        chunk = self.text[self.offset:offset]
        newlines = chunk.count("\n")
        if newlines:
            self.line += newlines
            self.column = len(chunk) - chunk.rfind("\n")
        else:
            self.column += len(chunk)
        self.offset = offset
        return SourcePosition(offset=offset, line=self.line, column=self.column)


class Segmenter:
    """
    Разбивает шаблон на текстовые и теговые сегменты.
    """

    def __init__(self, matcher: TagMatcher):
        self.matcher = matcher

    def segment(self, source: str) -> List[Segment]:
        """
        Разбивает текст на сегменты.

        Args:
            source: Исходный текст шаблона

        Returns:
            Список непустых сегментов в порядке следования

        Raises:
            MalformedTagError: Если для открывающей строки не найдена закрывающая
        """
        segments: List[Segment] = []
        tracker = _PositionTracker(source)
        cursor = 0

        while cursor < len(source):
            match = self.matcher.match(source, cursor)
            if match is None:
                break

            opener_at = match.index
            closer_at = source.find(match.type.closer, opener_at + len(match.type.opener))
            if closer_at < 0:
                raise MalformedTagError(
                    f"Unterminated '{match.type.opener}' tag (expected '{match.type.closer}')",
                    tracker.at(opener_at),
                )
            tag_end = closer_at + len(match.type.closer)

            if opener_at > cursor:
                segments.append(Segment(
                    kind=SegmentKind.TEXT,
                    raw=source[cursor:opener_at],
                    offset=cursor,
                    position=tracker.at(cursor),
                ))

            segments.append(Segment(
                kind=SegmentKind.TAG,
                raw=source[opener_at:tag_end],
                offset=opener_at,
                position=tracker.at(opener_at),
                delimiter=match.delimiter,
            ))
            cursor = tag_end

        if cursor < len(source):
            segments.append(Segment(
                kind=SegmentKind.TEXT,
                raw=source[cursor:],
                offset=cursor,
                position=tracker.at(cursor),
            ))

        logger.debug(f"Segmented template -> {len(segments)} segments")
        return segments


__all__ = ["SegmentKind", "Segment", "Segmenter"]
