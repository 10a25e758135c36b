"""
Лексер выражений в тегах.

Все виды токенов собраны в одно регулярное выражение с именованными
группами; порядок групп задает приоритет (двухсимвольные операторы
раньше односимвольных, числа раньше путей).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Pattern


@dataclass
class Token:
    """
    Токен выражения.

    Attributes:
        type: STRING, NUMBER, OPERATOR, SYMBOL, PATH, KEYWORD или EOF
        value: Текст токена (ключевые слова - в нижнем регистре)
        position: Смещение в строке выражения
    """
    type: str
    value: str
    position: int

    def __repr__(self):
        return f"Token({self.type}, '{self.value}', pos={self.position})"


class LexError(ValueError):
    """Ошибка токенизации выражения."""

    def __init__(self, message: str, position: int):
        super().__init__(f"{message} at position {position}")
        self.position = position


def _scanner(specs) -> Pattern[str]:
    return re.compile("|".join(f"(?P<{name}>{pattern})" for name, pattern in specs))


class ExpressionLexer:
    """
    Разбивает строку выражения на токены.
    """

    # (имя группы, шаблон); пробелы пропускаются, UNKNOWN - ошибка
    TOKEN_SPECS = [
        ("WHITESPACE", r"\s+"),
        ("STRING", r'"(?:[^"\\]|\\.)*"|' r"'(?:[^'\\]|\\.)*'"),
        ("NUMBER", r"-?\d+(?:\.\d+)?(?![\w.])"),
        ("OPERATOR", r"==|!=|<=|>=|<|>"),
        ("SYMBOL", r"[()]"),
        ("PATH", r"\$?[A-Za-z_]\w*(?:\.\w+)*"),
        ("UNKNOWN", r"."),
    ]

    # Ключевые слова распознаются без учета регистра и только без $
    KEYWORDS = frozenset({"and", "or", "not", "true", "false", "null"})

    _pattern = _scanner(TOKEN_SPECS)

    def tokenize(self, text: str) -> List[Token]:
        """
        Разбивает строку на токены.

        Returns:
            Список токенов, последний - EOF

        Raises:
            LexError: При обнаружении неизвестного символа
        """
        tokens: List[Token] = []

        for match in self._pattern.finditer(text):
            kind = match.lastgroup
            value = match.group()
            if kind == "WHITESPACE":
                continue
            if kind == "UNKNOWN":
                raise LexError(f"Unexpected character '{value}'", match.start())
            if kind == "PATH" and value.lower() in self.KEYWORDS:
                kind, value = "KEYWORD", value.lower()
            tokens.append(Token(type=kind, value=value, position=match.start()))

        tokens.append(Token(type="EOF", value="", position=len(text)))
        return tokens


__all__ = ["Token", "LexError", "ExpressionLexer"]
