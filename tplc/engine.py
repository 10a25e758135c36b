"""
Движок шаблонов.

Публичный API, объединяющий грамматику, компилятор и кэш скомпилированных
шаблонов в удобный интерфейс: compile() один раз на исходный текст,
render() многократно с разными данными.
"""

from __future__ import annotations

import hashlib
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .compiler.nodes import TemplateTree
from .grammar.registry import GrammarRegistry
from .runtime.template import CompiledTemplate, TemplateCompiler

logger = logging.getLogger(__name__)


class TemplateEngine:
    """
    Основной движок шаблонов.
    """

    def __init__(self, registry: Optional[GrammarRegistry] = None):
        """
        Args:
            registry: Реестр грамматики (передается извне для избежания глобального состояния);
                по умолчанию - стандартная грамматика
        """
        if registry is None:
            from .standard import standard_registry
            registry = standard_registry()
        elif not registry.frozen:
            registry.freeze()

        self.registry = registry
        self.compiler = TemplateCompiler(registry)

        # Кэш скомпилированных шаблонов: (имя, хеш исходника) -> шаблон
        self._template_cache: Dict[str, CompiledTemplate] = {}
        self._lock = threading.Lock()

    def compile(self, source: str, name: str = "") -> CompiledTemplate:
        """
        Компилирует шаблон с кэшированием по имени и содержимому.

        Raises:
            TemplateCompileError: При структурной ошибке шаблона
        """
        digest = hashlib.sha1(source.encode("utf-8")).hexdigest()
        cache_key = f"{name}:{digest}"

        with self._lock:
            cached = self._template_cache.get(cache_key)
        if cached is not None:
            return cached

        template = self.compiler.compile(source, name)
        with self._lock:
            # Параллельная компиляция того же исходника даёт эквивалентный результат
            template = self._template_cache.setdefault(cache_key, template)
        logger.debug(f"Cached template '{name}' ({digest[:8]})")
        return template

    def compile_file(self, path: Path) -> CompiledTemplate:
        """Компилирует шаблон из файла."""
        return self.compile(path.read_text(encoding="utf-8"), name=str(path))

    def render(self, source: str, data: Optional[Mapping[str, Any]] = None, name: str = "") -> str:
        """
        Компилирует (или берет из кэша) и рендерит шаблон.

        Raises:
            TemplateCompileError: При структурной ошибке шаблона
            RenderError: При ошибке выполнения
        """
        return self.compile(source, name).run(data)

    def parse(self, source: str) -> TemplateTree:
        """Возвращает дерево шаблона (для диагностики)."""
        return self.compiler.parse(source)

    def clear_cache(self) -> None:
        with self._lock:
            self._template_cache.clear()


__all__ = ["TemplateEngine"]
