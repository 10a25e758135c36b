"""
Модели JSON-вывода CLI.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class TreeNodeModel(BaseModel):
    """Узел дерева шаблона в JSON-дампе."""
    type: str
    value: Optional[str] = None
    tag: Optional[str] = None
    delimiter: Optional[str] = None
    arguments: Dict[str, str] = Field(default_factory=dict)
    raw: Optional[str] = None
    line: Optional[int] = None
    children: List["TreeNodeModel"] = Field(default_factory=list)


class CheckResult(BaseModel):
    """Результат проверки одного шаблона."""
    path: str
    ok: bool
    error: Optional[str] = None
    kind: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None


class CheckReport(BaseModel):
    """Сводный отчет команды check."""
    ok: bool
    results: List[CheckResult] = Field(default_factory=list)


TreeNodeModel.model_rebuild()

__all__ = ["TreeNodeModel", "CheckResult", "CheckReport"]
