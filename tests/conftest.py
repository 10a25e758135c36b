from __future__ import annotations

import json
import os
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

from tplc import TemplateEngine, standard_registry
from tplc.runtime.template import TemplateCompiler

ROOT = Path(__file__).resolve().parent.parent


def write(p: Path, text: str) -> Path:
    """Записывает текст в файл, создавая родительские директории при необходимости."""
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p


@pytest.fixture
def registry():
    """Замороженный реестр стандартной грамматики."""
    return standard_registry()


@pytest.fixture
def compiler(registry):
    return TemplateCompiler(registry)


@pytest.fixture
def engine(registry):
    return TemplateEngine(registry)


@pytest.fixture
def render(engine):
    """Компилирует и рендерит шаблон стандартной грамматикой."""
    def _render(source: str, **data) -> str:
        return engine.render(source, data)
    return _render


@pytest.fixture
def grammar_file(tmp_path: Path) -> Path:
    """Минимальная YAML-грамматика с двумя семействами."""
    return write(
        tmp_path / "grammar.yaml",
        textwrap.dedent("""
        families:
          note:
            opener: "<#"
            closer: "#>"
            handler: comment
            priority: 5
          block:
            opener: "<%"
            closer: "%>"
            handler: output
            tags:
              when: {handler: if}
              otherwise: {handler: else, isolated: true}
              each: {arguments: "{element} in {object}"}
        """).lstrip(),
    )


def run_cli(cwd: Path, *args: str, stdin: str | None = None) -> subprocess.CompletedProcess:
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(ROOT), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-m", "tplc", *args],
        cwd=cwd, env=env, input=stdin, capture_output=True, text=True, encoding="utf-8",
    )


def jload(s: str):
    return json.loads(s)
