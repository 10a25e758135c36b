"""
Типы грамматики разделителей.

Описывают семейства тегов (пары разделителей, имена тегов и их метаданные).
Чистые данные без поведения, кроме поиска.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Tuple

from ..errors import GrammarError

if TYPE_CHECKING:
    from ..compiler.nodes import TagNode
    from ..runtime.ir import Fragment

# Ключ семейства разделителей (например, "statement", "echo")
DelimiterKey = str

# Обработчик тега: (узел, фрагмент дочерних узлов) -> фрагмент узла
TagHandler = Callable[["TagNode", "Fragment"], "Fragment"]

# Ключ обработчика в реестре: (семейство, имя тега или None для анонимных тегов)
HandlerKey = Tuple[DelimiterKey, Optional[str]]


@dataclass(frozen=True)
class TagSpec:
    """
    Описание именованного тега внутри семейства.
    """
    name: str
    handler: Optional[str] = None     # Имя обработчика в библиотеке
    isolated: bool = False            # Подавляет пробельный текст перед тегом
    arguments: Optional[str] = None   # Шаблон аргументов, например "{element} in {object}"
    verbatim: bool = False            # Содержимое до закрывающего тега - обычный текст

    @classmethod
    def from_dict(cls, name: str, data: Optional[Dict[str, Any]]) -> TagSpec:
        data = data or {}
        if not isinstance(data, dict):
            raise GrammarError(f"Tag '{name}' must be a mapping")
        return cls(
            name=name,
            handler=data.get("handler", name),
            isolated=bool(data.get("isolated", False)),
            arguments=data.get("arguments"),
            verbatim=bool(data.get("verbatim", False)),
        )


@dataclass(frozen=True)
class DelimiterType:
    """
    Семейство тегов: пара разделителей и опциональный набор именованных тегов.

    Семейство без именованных тегов порождает только анонимные теги
    (например, {echo $name}), которые обрабатываются обработчиком по умолчанию.
    """
    key: DelimiterKey
    opener: str
    closer: str
    tags: Optional[Dict[str, TagSpec]] = None
    arguments: Optional[str] = None   # Шаблон аргументов уровня семейства
    handler: Optional[str] = None     # Обработчик по умолчанию для анонимных тегов
    priority: int = 0                 # Больше = выигрывает при совпадении позиций открывающих строк

    def __post_init__(self):
        if not self.key:
            raise GrammarError("Delimiter key cannot be empty")
        if not self.opener or not self.closer:
            raise GrammarError(f"Delimiter '{self.key}' must define both opener and closer")

    def tag(self, name: Optional[str]) -> Optional[TagSpec]:
        """Возвращает описание тега по имени."""
        if name is None or not self.tags:
            return None
        return self.tags.get(name)

    @property
    def has_named_tags(self) -> bool:
        return bool(self.tags)

    @classmethod
    def from_dict(cls, key: str, data: Dict[str, Any]) -> DelimiterType:
        """Создает семейство из словаря YAML-конфигурации."""
        if not isinstance(data, dict):
            raise GrammarError(f"Delimiter '{key}' must be a mapping")

        raw_tags = data.get("tags")
        tags: Optional[Dict[str, TagSpec]] = None
        if raw_tags:
            if not isinstance(raw_tags, dict):
                raise GrammarError(f"Delimiter '{key}': 'tags' must be a mapping")
            tags = {name: TagSpec.from_dict(name, spec) for name, spec in raw_tags.items()}

        return cls(
            key=key,
            opener=str(data.get("opener", "")),
            closer=str(data.get("closer", "")),
            tags=tags,
            arguments=data.get("arguments"),
            handler=data.get("handler"),
            priority=int(data.get("priority", 0)),
        )


@dataclass
class GrammarConfig:
    """Набор семейств в порядке объявления."""
    families: Dict[DelimiterKey, DelimiterType] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> GrammarConfig:
        raw = data.get("families") or {}
        if not isinstance(raw, dict):
            raise GrammarError("'families' must be a mapping of delimiter key to definition")
        return cls(families={key: DelimiterType.from_dict(key, spec) for key, spec in raw.items()})


__all__ = [
    "DelimiterKey",
    "TagHandler",
    "HandlerKey",
    "TagSpec",
    "DelimiterType",
    "GrammarConfig",
]
