"""
Обработчики стандартной грамматики.

Каждый обработчик получает узел тега и уже сгенерированный фрагмент
его дочерних узлов и возвращает фрагмент для самого узла.
"""

from __future__ import annotations

import re
from typing import Dict, Optional

from ..compiler.nodes import TagNode
from ..errors import ExpressionSyntaxError, UnknownTagError
from ..expressions.model import Expression
from ..expressions.parser import ParseError, parse_expression
from ..grammar.types import TagHandler
from ..runtime.ir import (
    AppendExpression,
    Branch,
    ElseBranch,
    ElseIfBranch,
    Fragment,
    Loop,
    LoopMode,
)

_IDENTIFIER = re.compile(r"\$?([A-Za-z_]\w*)")


def _expression(node: TagNode, text: Optional[str], what: str) -> Expression:
    text = (text or "").strip()
    if not text:
        raise ExpressionSyntaxError(f"'{node.tag_name or node.delimiter}' requires {what}", node.position)
    try:
        return parse_expression(text)
    except ParseError as e:
        raise ExpressionSyntaxError(f"Invalid {what} '{text}': {e.message}", node.position) from e
    except RecursionError as e:
        raise ExpressionSyntaxError(f"Invalid {what}: nested too deeply", node.position) from e


def echo(node: TagNode, inner: Fragment) -> Fragment:
    """{echo $expr} - вывод значения выражения."""
    source = (node.raw or "").strip()
    return (AppendExpression(_expression(node, source, "an expression"), source=source, position=node.position),)


def output(node: TagNode, inner: Fragment) -> Fragment:
    """
    {$expr} - анонимный тег вывода.

    Текст без ведущего $ не является выражением: это неизвестный тег.
    """
    source = (node.raw or "").strip()
    if not source.startswith("$"):
        name = source.split()[0] if source else ""
        raise UnknownTagError(f"Unknown tag '{name}' in '{node.delimiter}'", node.position)
    return echo(node, inner)


def comment(node: TagNode, inner: Fragment) -> Fragment:
    """{* ... *} - ничего не выводит."""
    return ()


def if_(node: TagNode, inner: Fragment) -> Fragment:
    source = (node.raw or "").strip()
    return (Branch(_expression(node, source, "a condition"), inner, source=source, position=node.position),)


def elseif(node: TagNode, inner: Fragment) -> Fragment:
    source = (node.raw or "").strip()
    return (ElseIfBranch(_expression(node, source, "a condition"), inner, source=source, position=node.position),)


def else_(node: TagNode, inner: Fragment) -> Fragment:
    return (ElseBranch(inner, position=node.position),)


def _loop(node: TagNode, inner: Fragment, mode: LoopMode) -> Fragment:
    element = node.arguments.get("element")
    collection = node.arguments.get("object")
    if not element or not collection:
        raise ExpressionSyntaxError(
            f"'{node.tag_name}' expects '<element> in <collection>', got '{(node.raw or '').strip()}'",
            node.position,
        )

    m = _IDENTIFIER.fullmatch(element)
    if m is None:
        raise ExpressionSyntaxError(f"Invalid loop variable '{element}'", node.position)

    return (Loop(
        target=m.group(1),
        iterable=_expression(node, collection, "a collection"),
        body=inner,
        mode=mode,
        source=collection,
        position=node.position,
    ),)


def each(node: TagNode, inner: Fragment) -> Fragment:
    """{foreach $item in $items} - по последовательности или отображению."""
    return _loop(node, inner, LoopMode.EACH)


def for_(node: TagNode, inner: Fragment) -> Fragment:
    """{for $item in $items} - по последовательности по индексу."""
    return _loop(node, inner, LoopMode.INDEX)


def literal(node: TagNode, inner: Fragment) -> Fragment:
    # Дочерние узлы verbatim-тега - только текст
    return inner


HANDLERS: Dict[str, TagHandler] = {
    "echo": echo,
    "output": output,
    "comment": comment,
    "if": if_,
    "elseif": elseif,
    "else": else_,
    "each": each,
    "for": for_,
    "literal": literal,
}


__all__ = ["HANDLERS"]
