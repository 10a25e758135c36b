"""
Тесты реестра грамматики и пользовательских обработчиков.
"""

import logging

import pytest

from tplc import TemplateEngine
from tplc.errors import GrammarError, RegistryFrozenError, RenderError
from tplc.grammar import DelimiterType, GrammarRegistry, TagSpec
from tplc.runtime.ir import Call
from tplc.standard import HANDLERS, standard_registry


def upper(node, inner):
    """[[upper]]...[[/upper]] - тело в верхнем регистре."""
    return (Call(
        func=lambda ctx: ctx.render_body().upper(),
        body=inner,
        arguments=node.arguments,
        position=node.position,
    ),)


def repeat(node, inner):
    """[[repeat 3]]...[[/repeat]] - повтор тела с переменной $n."""
    def run(ctx):
        count = int(ctx.arguments["count"])
        return "".join(ctx.render_body({"n": i}) for i in range(count))
    return (Call(func=run, body=inner, arguments=node.arguments, position=node.position),)


SHOUT = DelimiterType(
    key="shout",
    opener="[[",
    closer="]]",
    tags={
        "upper": TagSpec("upper"),
        "repeat": TagSpec("repeat", arguments="{count}"),
        "boom": TagSpec("boom"),
    },
)


class TestGrammarRegistry:

    def test_standard_registry_is_frozen(self):
        registry = standard_registry()
        assert registry.frozen
        with pytest.raises(RegistryFrozenError):
            registry.register_handler("statement", "if", HANDLERS["if"])
        with pytest.raises(RegistryFrozenError):
            registry.register_family(SHOUT)

    def test_families_order(self):
        keys = [f.key for f in standard_registry().families()]
        assert keys == ["comment", "echo", "statement"]

    def test_validate_reports_missing_handlers(self):
        registry = GrammarRegistry(HANDLERS)
        registry.register_family(SHOUT)
        with pytest.raises(GrammarError) as exc:
            registry.freeze()
        assert "shout:upper" in str(exc.value)
        assert not registry.frozen

    def test_validate_tagless_family_needs_default_handler(self):
        registry = GrammarRegistry()
        registry.register_family(DelimiterType(key="raw", opener="<<", closer=">>"))
        with pytest.raises(GrammarError, match="raw:<default>"):
            registry.validate()

    def test_empty_registry(self):
        with pytest.raises(GrammarError, match="no delimiter families"):
            GrammarRegistry().validate()

    def test_library_binding(self):
        registry = standard_registry()
        assert registry.handler_for("statement", "foreach") is HANDLERS["each"]
        assert registry.handler_for("statement", None) is HANDLERS["output"]
        assert registry.handler_for("statement", "nope") is None

    def test_overwrite_logs_warning(self, caplog):
        registry = standard_registry(freeze=False)
        with caplog.at_level(logging.WARNING, logger="tplc.grammar.registry"):
            registry.register_handler("statement", "if", HANDLERS["else"])
        assert "overwrites" in caplog.text

    def test_extra_handlers_override_library(self):
        def shout_output(node, inner):
            return HANDLERS["output"](node, inner)

        registry = standard_registry({"output": shout_output})
        assert registry.handler_for("statement", None) is shout_output

    def test_invalid_delimiter(self):
        with pytest.raises(GrammarError):
            DelimiterType(key="bad", opener="", closer="}")


class TestCustomHandlers:

    def setup_method(self):
        registry = standard_registry(freeze=False)
        registry.register_family(SHOUT)
        registry.register_handler("shout", "upper", upper)
        registry.register_handler("shout", "repeat", repeat)
        registry.register_handler("shout", "boom", lambda node, inner: (Call(func=lambda ctx: 1 / 0),))
        self.engine = TemplateEngine(registry)

    def test_engine_freezes_registry(self):
        assert self.engine.registry.frozen

    def test_call_renders_body(self):
        assert self.engine.render("[[upper]]hi {$name}[[/upper]]!", {"name": "ann"}) == "HI ANN!"

    def test_call_with_arguments_and_extra_scope(self):
        assert self.engine.render("[[repeat 3]]{$n}[[/repeat]]") == "012"

    def test_handler_failure_becomes_render_error(self):
        with pytest.raises(RenderError) as exc:
            self.engine.render("[[boom]][[/boom]]")
        assert isinstance(exc.value.cause, ZeroDivisionError)
