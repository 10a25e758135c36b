"""
Узлы дерева шаблона.

Узлы хранятся в арене и ссылаются друг на друга целочисленными
идентификаторами: parent и children - индексы в арене, а не ссылки
на объекты. Корень - неявный TagNode без имени с идентификатором 0.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Union

from ..errors import SourcePosition

ROOT_ID = 0


@dataclass
class TextNode:
    """
    Обычный текстовый контент в шаблоне.
    """
    id: int
    value: str
    parent: Optional[int] = None
    position: Optional[SourcePosition] = None


@dataclass
class TagNode:
    """
    Тег шаблона с дочерними узлами между открывающим и закрывающим тегами.

    Анонимный тег (tag_name is None) всегда лист.
    """
    id: int
    tag_name: Optional[str]
    delimiter: Optional[str]
    arguments: Dict[str, str] = field(default_factory=dict)
    raw: Optional[str] = None              # Текст тега без разделителей и имени
    children: List[int] = field(default_factory=list)
    parent: Optional[int] = None
    source_index: int = -1                 # Индекс открывающего сегмента
    position: Optional[SourcePosition] = None
    source: Optional[str] = None           # Исходный текст между открывающим и закрывающим тегами

    @property
    def is_root(self) -> bool:
        return self.id == ROOT_ID


Node = Union[TextNode, TagNode]


class TemplateTree:
    """
    Арена узлов шаблона.
    """

    def __init__(self):
        self.nodes: List[Node] = [TagNode(id=ROOT_ID, tag_name=None, delimiter=None)]

    @property
    def root(self) -> TagNode:
        root = self.nodes[ROOT_ID]
        assert isinstance(root, TagNode)
        return root

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, node_id: int) -> Node:
        return self.nodes[node_id]

    def add_text(self, parent: TagNode, value: str, position: Optional[SourcePosition] = None) -> TextNode:
        node = TextNode(id=len(self.nodes), value=value, parent=parent.id, position=position)
        self.nodes.append(node)
        parent.children.append(node.id)
        return node

    def add_tag(self, parent: TagNode, **attrs) -> TagNode:
        node = TagNode(id=len(self.nodes), parent=parent.id, **attrs)
        self.nodes.append(node)
        parent.children.append(node.id)
        return node

    def remove_last_child(self, parent: TagNode) -> None:
        """Отсоединяет последний дочерний узел (в арене он остается недостижимым)."""
        node_id = parent.children.pop()
        self.nodes[node_id].parent = None

    def children(self, node: TagNode) -> List[Node]:
        return [self.nodes[i] for i in node.children]

    def last_child(self, node: TagNode) -> Optional[Node]:
        return self.nodes[node.children[-1]] if node.children else None

    def walk(self, node: Optional[TagNode] = None) -> Iterator[Node]:
        """Обход в прямом порядке без рекурсии."""
        stack: List[int] = [(node or self.root).id]
        while stack:
            current = self.nodes[stack.pop()]
            yield current
            if isinstance(current, TagNode):
                stack.extend(reversed(current.children))

    def find(self, tag_name: str) -> List[TagNode]:
        """Возвращает все достижимые узлы с указанным именем тега."""
        return [n for n in self.walk() if isinstance(n, TagNode) and n.tag_name == tag_name]

    def to_dict(self, node: Optional[Node] = None) -> dict:
        """Сериализует поддерево в словарь (для диагностики и CLI) без рекурсии."""
        node = node or self.root
        result = self._node_dict(node)
        stack = [(node, result)]
        while stack:
            current, data = stack.pop()
            if isinstance(current, TextNode):
                continue
            for child_id in current.children:
                child = self.nodes[child_id]
                child_data = self._node_dict(child)
                # Порядок детей фиксируется здесь, порядок обхода стека не важен
                data["children"].append(child_data)
                stack.append((child, child_data))
        return result

    @staticmethod
    def _node_dict(node: Node) -> dict:
        if isinstance(node, TextNode):
            return {"type": "text", "value": node.value}
        return {
            "type": "root" if node.is_root else "tag",
            "tag": node.tag_name,
            "delimiter": node.delimiter,
            "arguments": dict(node.arguments),
            "raw": node.raw,
            "line": node.position.line if node.position else None,
            "children": [],
        }


__all__ = ["ROOT_ID", "TextNode", "TagNode", "Node", "TemplateTree"]
