"""
Центральный реестр грамматики разделителей.

Хранит семейства тегов и таблицу обработчиков (семейство, имя тега) -> функция.
Заполняется один раз при старте, после freeze() используется только на чтение.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, List, Mapping, Optional

from .types import DelimiterKey, DelimiterType, HandlerKey, TagHandler
from ..errors import GrammarError, RegistryFrozenError

logger = logging.getLogger(__name__)


class GrammarRegistry:
    """
    Реестр семейств разделителей и их обработчиков.

    Имена обработчиков из TagSpec/DelimiterType разрешаются по библиотеке
    обработчиков в момент регистрации семейства. Явная регистрация через
    register_handler() переопределяет обработчик из библиотеки.
    """

    def __init__(self, library: Optional[Mapping[str, TagHandler]] = None):
        self._library: Dict[str, TagHandler] = dict(library or {})
        self._families: Dict[DelimiterKey, DelimiterType] = {}
        self._handlers: Dict[HandlerKey, TagHandler] = {}
        self._ordered: Optional[List[DelimiterType]] = None
        self._lock = threading.Lock()
        self._frozen = False

    # ---- Регистрация ----

    def register_family(self, family: DelimiterType) -> None:
        """
        Регистрирует семейство тегов и связывает его обработчики из библиотеки.

        Raises:
            RegistryFrozenError: Если реестр уже заморожен
        """
        with self._lock:
            self._ensure_mutable()
            if family.key in self._families:
                logger.warning(f"Delimiter '{family.key}' overwrites existing definition")
            self._families[family.key] = family
            self._ordered = None

            if family.handler and family.handler in self._library:
                self._handlers.setdefault((family.key, None), self._library[family.handler])
            for spec in (family.tags or {}).values():
                if spec.handler and spec.handler in self._library:
                    self._handlers.setdefault((family.key, spec.name), self._library[spec.handler])

    def register_handler(self, delimiter: DelimiterKey, tag_name: Optional[str], handler: TagHandler) -> None:
        """
        Регистрирует обработчик для тега семейства.

        Args:
            delimiter: Ключ семейства
            tag_name: Имя тега или None для обработчика анонимных тегов
            handler: Функция (узел, внутренний фрагмент) -> фрагмент
        """
        with self._lock:
            self._ensure_mutable()
            key = (delimiter, tag_name)
            if key in self._handlers:
                logger.warning(f"Handler for {delimiter}:{tag_name or '<default>'} overwrites existing handler")
            self._handlers[key] = handler

    def freeze(self) -> GrammarRegistry:
        """Проверяет реестр и запрещает дальнейшую регистрацию."""
        self.validate()
        with self._lock:
            self._frozen = True
        return self

    def _ensure_mutable(self) -> None:
        if self._frozen:
            raise RegistryFrozenError("Grammar registry is frozen")

    # ---- Проверка ----

    def validate(self) -> None:
        """
        Проверяет, что каждому объявленному тегу назначен обработчик.

        Raises:
            GrammarError: Если найдены теги без обработчиков
        """
        if not self._families:
            raise GrammarError("Grammar defines no delimiter families")

        missing: List[str] = []
        for family in self._families.values():
            if not family.has_named_tags and (family.key, None) not in self._handlers:
                missing.append(f"{family.key}:<default>")
            for name in family.tags or {}:
                if (family.key, name) not in self._handlers:
                    missing.append(f"{family.key}:{name}")

        if missing:
            raise GrammarError(f"No handlers registered for: {', '.join(missing)}")

    # ---- Поиск ----

    @property
    def frozen(self) -> bool:
        return self._frozen

    def family(self, key: DelimiterKey) -> DelimiterType:
        return self._families[key]

    def families(self) -> List[DelimiterType]:
        """
        Возвращает семейства в порядке разрешения конфликтов.

        Больший priority идет первым, при равенстве - порядок регистрации.
        """
        ordered = self._ordered
        if ordered is None:
            order = {key: i for i, key in enumerate(self._families)}
            ordered = sorted(self._families.values(), key=lambda f: (-f.priority, order[f.key]))
            self._ordered = ordered
        return ordered

    def handler_for(self, delimiter: DelimiterKey, tag_name: Optional[str]) -> Optional[TagHandler]:
        """Возвращает обработчик тега или None, если он не зарегистрирован."""
        return self._handlers.get((delimiter, tag_name))


__all__ = ["GrammarRegistry"]
