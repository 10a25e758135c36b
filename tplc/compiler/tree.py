"""
Построение дерева шаблона из последовательности сегментов.

Открытые теги хранятся на явном стеке: открывающий тег кладется на стек,
совпадающий закрывающий - снимает его.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from .nodes import TagNode, TemplateTree, TextNode
from .segmenter import Segment
from .tag_parser import ParsedTag, TagParser
from ..errors import UnbalancedTagError

logger = logging.getLogger(__name__)


class TreeBuilder:
    """
    Строит дерево узлов, вкладывая содержимое между парными тегами.
    """

    def __init__(self, parser: TagParser):
        self.parser = parser

    def build(self, segments: Sequence[Segment]) -> TemplateTree:
        """
        Строит дерево.

        Args:
            segments: Сегменты в порядке следования

        Returns:
            Дерево с неявным корнем

        Raises:
            UnbalancedTagError: Закрывающий тег без открывающего
                или незакрытый открывающий тег
        """
        tree = TemplateTree()
        stack: List[TagNode] = [tree.root]

        for index, segment in enumerate(segments):
            current = stack[-1]

            if not segment.is_tag:
                tree.add_text(current, segment.raw, segment.position)
                continue

            parsed = self.parser.parse(segment)

            # Внутри verbatim-блока всё, кроме собственного закрывающего тега, - текст
            if self._is_verbatim(current):
                if isinstance(parsed, ParsedTag) and parsed.is_closing and self._closes(current, parsed):
                    self._close(current, segments, index)
                    stack.pop()
                else:
                    tree.add_text(current, segment.raw, segment.position)
                continue

            if not isinstance(parsed, ParsedTag) or (parsed.tag_name is None and not parsed.is_closing):
                tag = parsed if isinstance(parsed, ParsedTag) else self.parser.parse_anonymous(segment)
                tree.add_tag(
                    current,
                    tag_name=None,
                    delimiter=tag.delimiter,
                    arguments=tag.arguments,
                    raw=tag.raw_inner,
                    source_index=index,
                    position=segment.position,
                )
                continue

            if not parsed.is_closing:
                if parsed.isolated:
                    last = tree.last_child(current)
                    if isinstance(last, TextNode) and not last.value.strip():
                        tree.remove_last_child(current)

                node = tree.add_tag(
                    current,
                    tag_name=parsed.tag_name,
                    delimiter=parsed.delimiter,
                    arguments=parsed.arguments,
                    raw=parsed.raw_inner,
                    source_index=index,
                    position=segment.position,
                )
                stack.append(node)
                continue

            if current.is_root or not self._closes(current, parsed):
                expected = f"'{current.tag_name}'" if not current.is_root else "no open tag"
                raise UnbalancedTagError(
                    f"Unexpected closing tag '{parsed.tag_name}' ({expected})",
                    segment.position,
                )
            self._close(current, segments, index)
            stack.pop()

        if len(stack) > 1:
            unclosed = stack[-1]
            raise UnbalancedTagError(f"Tag '{unclosed.tag_name}' is never closed", unclosed.position)

        logger.debug(f"Built template tree -> {len(tree)} nodes")
        return tree

    @staticmethod
    def _closes(node: TagNode, parsed: ParsedTag) -> bool:
        return parsed.tag_name == node.tag_name and parsed.delimiter == node.delimiter

    def _is_verbatim(self, node: TagNode) -> bool:
        if node.is_root or node.delimiter is None:
            return False
        spec = self.parser.matcher.registry.family(node.delimiter).tag(node.tag_name)
        return bool(spec and spec.verbatim)

    @staticmethod
    def _close(node: TagNode, segments: Sequence[Segment], close_index: int) -> None:
        node.source = "".join(s.raw for s in segments[node.source_index + 1:close_index])


__all__ = ["TreeBuilder"]
