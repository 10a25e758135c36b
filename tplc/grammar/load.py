"""
Загрузчик грамматики разделителей из YAML.

Формат файла:

    families:
      comment:
        opener: "{*"
        closer: "*}"
        handler: comment
        priority: 20
      statement:
        opener: "{"
        closer: "}"
        handler: output
        tags:
          if: {}
          else: {isolated: true}
          foreach: {handler: each, arguments: "{element} in {object}"}

Имена обработчиков разрешаются по библиотеке (по умолчанию стандартная).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .registry import GrammarRegistry
from .types import GrammarConfig, TagHandler
from ..errors import GrammarError

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")


def _read_yaml_map(path: Path) -> dict:
    """Читает YAML файл и возвращает словарь."""
    if not path.is_file():
        raise GrammarError(f"Grammar file not found: {path}")
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise GrammarError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise GrammarError(f"YAML must be a mapping: {path}")
    return raw


def build_registry(
    config: GrammarConfig,
    library: Optional[Mapping[str, TagHandler]] = None,
    freeze: bool = True,
) -> GrammarRegistry:
    """
    Строит реестр по конфигурации грамматики.

    Args:
        config: Конфигурация семейств
        library: Библиотека обработчиков (имя -> функция); по умолчанию стандартная
        freeze: Проверить и заморозить реестр

    Returns:
        Заполненный реестр
    """
    if library is None:
        from ..standard.handlers import HANDLERS
        library = HANDLERS

    registry = GrammarRegistry(library)
    for family in config.families.values():
        registry.register_family(family)
    if freeze:
        registry.freeze()
    return registry


def load_grammar(
    path: Path,
    library: Optional[Mapping[str, TagHandler]] = None,
    freeze: bool = True,
) -> GrammarRegistry:
    """Загружает грамматику из YAML файла и строит реестр."""
    config = GrammarConfig.from_dict(_read_yaml_map(path))
    logger.debug(f"Loaded grammar from {path}: {', '.join(config.families)}")
    return build_registry(config, library, freeze=freeze)


__all__ = ["build_registry", "load_grammar"]
