from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .engine import TemplateEngine
from .errors import TemplateCompileError, TplUserError
from .grammar.load import load_grammar
from .grammar.registry import GrammarRegistry
from .models import CheckReport, CheckResult, TreeNodeModel
from .version import tool_version

_yaml = YAML(typ="safe")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="tplc",
        description="Template compiler with pluggable delimiter grammars",
        add_help=True,
    )
    p.add_argument("-V", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("-v", "--verbose", action="store_true", help="отладочный вывод в stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Общие аргументы для всех подкоманд
    def add_grammar(sp: argparse.ArgumentParser) -> None:
        sp.add_argument(
            "--grammar",
            metavar="FILE",
            help="YAML-файл грамматики (по умолчанию - стандартная грамматика)",
        )

    sp_render = sub.add_parser("render", help="Отрендерить шаблон")
    sp_render.add_argument("template", help="путь к шаблону или - для чтения из stdin")
    sp_render.add_argument("--data", metavar="FILE", help="данные рендеринга (YAML или JSON)")
    sp_render.add_argument(
        "--set",
        action="append",
        metavar="KEY=VALUE",
        help="значение данных (можно указать несколько; KEY может быть путем через точку)",
    )
    add_grammar(sp_render)

    sp_tree = sub.add_parser("tree", help="JSON-дамп дерева шаблона")
    sp_tree.add_argument("template", help="путь к шаблону или - для чтения из stdin")
    add_grammar(sp_tree)

    sp_check = sub.add_parser("check", help="Проверить шаблоны без рендеринга (JSON)")
    sp_check.add_argument("templates", nargs="+", help="пути к шаблонам")
    add_grammar(sp_check)

    return p


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[%(levelname)s] %(message)s",
        stream=sys.stderr,
    )


def _registry(ns: argparse.Namespace) -> Optional[GrammarRegistry]:
    grammar = getattr(ns, "grammar", None)
    return load_grammar(Path(grammar)) if grammar else None


def _read_template(arg: str) -> str:
    if arg == "-":
        return sys.stdin.read()
    path = Path(arg)
    if not path.is_file():
        raise ValueError(f"Template file not found: {path}")
    return path.read_text(encoding="utf-8")


def _load_data(path_arg: Optional[str]) -> Dict[str, Any]:
    """Читает данные рендеринга из YAML/JSON файла."""
    if not path_arg:
        return {}
    path = Path(path_arg)
    if not path.is_file():
        raise ValueError(f"Data file not found: {path}")
    try:
        data = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise ValueError(f"Invalid data file {path}: {e}")
    if not isinstance(data, dict):
        raise ValueError(f"Data file must contain a mapping: {path}")
    return data


def _apply_assignments(data: Dict[str, Any], assignments: Optional[List[str]]) -> Dict[str, Any]:
    """Применяет --set KEY=VALUE; значение разбирается как YAML-скаляр."""
    for assignment in assignments or []:
        if "=" not in assignment:
            raise ValueError(f"Invalid assignment '{assignment}'. Expected 'KEY=VALUE'")
        key, raw_value = assignment.split("=", 1)
        parts = [p for p in key.strip().split(".") if p]
        if not parts:
            raise ValueError(f"Invalid assignment '{assignment}'. Empty key")

        value = _yaml.load(raw_value) if raw_value.strip() else ""
        target = data
        for part in parts[:-1]:
            nested = target.get(part)
            if not isinstance(nested, dict):
                nested = {}
                target[part] = nested
            target = nested
        target[parts[-1]] = value
    return data


def _check(engine: TemplateEngine, paths: List[str]) -> CheckReport:
    results: List[CheckResult] = []
    for path in paths:
        try:
            source = _read_template(path)
        except ValueError as e:
            results.append(CheckResult(path=path, ok=False, error=str(e), kind="MissingTemplate"))
            continue
        try:
            engine.compile(source, name=path)
            results.append(CheckResult(path=path, ok=True))
        except TemplateCompileError as e:
            results.append(CheckResult(
                path=path,
                ok=False,
                error=e.message,
                kind=type(e).__name__,
                line=e.position.line if e.position else None,
                column=e.position.column if e.position else None,
            ))
    return CheckReport(ok=all(r.ok for r in results), results=results)


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(bool(ns.verbose))

    try:
        engine = TemplateEngine(_registry(ns))

        if ns.cmd == "render":
            data = _apply_assignments(_load_data(ns.data), ns.set)
            name = ns.template if ns.template != "-" else "<stdin>"
            sys.stdout.write(engine.render(_read_template(ns.template), data, name=name))
            return 0

        if ns.cmd == "tree":
            tree = engine.parse(_read_template(ns.template))
            model = TreeNodeModel.model_validate(tree.to_dict())
            sys.stdout.write(model.model_dump_json(indent=2) + "\n")
            return 0

        if ns.cmd == "check":
            report = _check(engine, ns.templates)
            sys.stdout.write(report.model_dump_json(indent=2) + "\n")
            return 0 if report.ok else 1

    except TplUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
