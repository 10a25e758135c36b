"""
Компилятор шаблонов: поиск тегов, сегментация, разбор тегов,
построение дерева и генерация кода.
"""

from __future__ import annotations

from .arguments import ArgumentPattern, compile_pattern
from .codegen import CodeGenerator
from .matcher import TagMatch, TagMatcher
from .nodes import ROOT_ID, Node, TagNode, TemplateTree, TextNode
from .segmenter import Segment, SegmentKind, Segmenter
from .tag_parser import ParsedTag, TagParser
from .tree import TreeBuilder

__all__ = [
    "ArgumentPattern",
    "CodeGenerator",
    "Node",
    "ParsedTag",
    "ROOT_ID",
    "Segment",
    "SegmentKind",
    "Segmenter",
    "TagMatch",
    "TagMatcher",
    "TagNode",
    "TagParser",
    "TemplateTree",
    "TextNode",
    "TreeBuilder",
    "compile_pattern",
]
