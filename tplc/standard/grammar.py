"""
Стандартная грамматика шаблонов.

    {* комментарий *}
    {echo $user.name}
    {$user.name}
    {foreach $item in $items}...{/foreach}
    {for $item in $items}...{/for}
    {if $a}...{/if}{elseif $b}...{/elseif}{else}...{/else}
    {literal}{не разбирается}{/literal}
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional, Tuple

from .handlers import HANDLERS
from ..grammar.registry import GrammarRegistry
from ..grammar.types import DelimiterType, TagHandler, TagSpec

LOOP_ARGUMENTS = "{element} in {object}"

STANDARD_FAMILIES: Tuple[DelimiterType, ...] = (
    DelimiterType(key="comment", opener="{*", closer="*}", handler="comment", priority=20),
    DelimiterType(key="echo", opener="{echo ", closer="}", handler="echo", priority=10),
    DelimiterType(
        key="statement",
        opener="{",
        closer="}",
        handler="output",
        tags={
            "foreach": TagSpec("foreach", handler="each", arguments=LOOP_ARGUMENTS),
            "for": TagSpec("for", handler="for", arguments=LOOP_ARGUMENTS),
            "if": TagSpec("if", handler="if"),
            "elseif": TagSpec("elseif", handler="elseif", isolated=True),
            "else": TagSpec("else", handler="else", isolated=True),
            "literal": TagSpec("literal", handler="literal", verbatim=True),
        },
    ),
)


def standard_registry(
    extra_handlers: Optional[Mapping[str, TagHandler]] = None,
    freeze: bool = True,
) -> GrammarRegistry:
    """
    Создает реестр со стандартной грамматикой.

    Args:
        extra_handlers: Дополнительные обработчики библиотеки (переопределяют стандартные)
        freeze: Проверить и заморозить реестр
    """
    library: Dict[str, TagHandler] = dict(HANDLERS)
    library.update(extra_handlers or {})

    registry = GrammarRegistry(library)
    for family in STANDARD_FAMILIES:
        registry.register_family(family)
    if freeze:
        registry.freeze()
    return registry


__all__ = ["LOOP_ARGUMENTS", "STANDARD_FAMILIES", "standard_registry"]
