"""
Исполнение скомпилированных шаблонов: набор инструкций и интерпретатор.

CompiledTemplate и TemplateCompiler находятся в tplc.runtime.template
(модуль зависит от tplc.compiler и не импортируется здесь).
"""

from __future__ import annotations

from .interpreter import Interpreter, to_text
from .ir import (
    AppendExpression,
    AppendLiteral,
    Branch,
    Call,
    CallContext,
    ElseBranch,
    ElseIfBranch,
    Fragment,
    Instruction,
    Loop,
    LoopMode,
    join_fragments,
)

__all__ = [
    "AppendExpression",
    "AppendLiteral",
    "Branch",
    "Call",
    "CallContext",
    "ElseBranch",
    "ElseIfBranch",
    "Fragment",
    "Instruction",
    "Interpreter",
    "Loop",
    "LoopMode",
    "join_fragments",
    "to_text",
]
