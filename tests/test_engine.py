"""
Tests for the template engine facade.
"""

from tests.conftest import write
from tplc import TemplateEngine, compile_template, standard_registry


class TestTemplateEngine:

    def setup_method(self):
        self.engine = TemplateEngine()

    def test_default_grammar(self):
        assert self.engine.render("{$a}", {"a": "x"}) == "x"

    def test_compile_is_cached(self):
        first = self.engine.compile("{$a}", name="t")
        assert self.engine.compile("{$a}", name="t") is first
        assert self.engine.compile("{$b}", name="t") is not first

    def test_clear_cache(self):
        first = self.engine.compile("{$a}")
        self.engine.clear_cache()
        assert self.engine.compile("{$a}") is not first

    def test_compile_file(self, tmp_path):
        path = write(tmp_path / "page.tpl", "<h1>{$title}</h1>")
        template = self.engine.compile_file(path)
        assert template.name == str(path)
        assert template.run({"title": "Hi"}) == "<h1>Hi</h1>"

    def test_render_without_data(self):
        assert self.engine.render("static") == "static"

    def test_compile_template_function(self):
        template = compile_template("{foreach $x in $xs}{$x}{/foreach}", standard_registry(), name="loop")
        assert template.name == "loop"
        assert template.run({"xs": list("abc")}) == "abc"
