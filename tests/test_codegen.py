"""
Тесты генерации кода.
"""

import pytest

from tplc.errors import ExpressionSyntaxError, UnbalancedTagError, UnknownTagError
from tplc.runtime.ir import AppendExpression, AppendLiteral, Branch, ElseBranch, Loop, LoopMode


class TestCodeGenerator:

    @pytest.fixture(autouse=True)
    def _compiler(self, compiler):
        self.compiler = compiler

    def test_text_becomes_single_literal(self):
        template = self.compiler.compile("hello")
        assert template.body == (AppendLiteral("hello"),)

    def test_comments_vanish_and_literals_merge(self):
        template = self.compiler.compile("a{* note *}b")
        assert template.body == (AppendLiteral("ab"),)

    def test_output_expression(self):
        (literal, expr) = self.compiler.compile("x{$name}").body
        assert literal == AppendLiteral("x")
        assert isinstance(expr, AppendExpression)
        assert expr.source == "$name"

    def test_branch_chain(self):
        body = self.compiler.compile("{if $a}A{/if}{else}B{/else}").body
        assert [type(i) for i in body] == [Branch, ElseBranch]
        assert body[0].body == (AppendLiteral("A"),)

    def test_loop_modes(self):
        (loop,) = self.compiler.compile("{foreach $x in $xs}.{/foreach}").body
        assert isinstance(loop, Loop)
        assert loop.target == "x"
        assert loop.mode is LoopMode.EACH

        (loop,) = self.compiler.compile("{for $x in $xs}.{/for}").body
        assert loop.mode is LoopMode.INDEX

    def test_unknown_tag(self):
        with pytest.raises(UnknownTagError, match="frobnicate"):
            self.compiler.compile("{frobnicate x}")

    def test_unknown_tag_is_not_a_parse_failure(self):
        """Дерево строится, ошибка возникает только при генерации"""
        tree = self.compiler.parse("{frobnicate x}")
        assert len(tree.children(tree.root)) == 1

    def test_else_without_if(self):
        with pytest.raises(UnbalancedTagError, match="else"):
            self.compiler.compile("x{else}B{/else}")

    def test_elseif_after_text(self):
        with pytest.raises(UnbalancedTagError, match="elseif"):
            self.compiler.compile("{if $a}A{/if}text{elseif $b}B{/elseif}")

    def test_invalid_expression(self):
        with pytest.raises(ExpressionSyntaxError):
            self.compiler.compile("{if $a ==}x{/if}")

    def test_missing_condition(self):
        with pytest.raises(ExpressionSyntaxError, match="condition"):
            self.compiler.compile("{if}x{/if}")

    def test_malformed_loop(self):
        with pytest.raises(ExpressionSyntaxError, match="foreach"):
            self.compiler.compile("{foreach $items}x{/foreach}")

    def test_deep_nesting_does_not_recurse(self):
        depth = 2000
        source = "{if $a}" * depth + "x" + "{/if}" * depth
        body = self.compiler.compile(source).body
        assert isinstance(body[0], Branch)

    def test_deep_nesting_renders(self):
        """Глубина вложенности при исполнении не ограничена стеком Python"""
        depth = 1200
        template = self.compiler.compile("{if 1}" * depth + "x" + "{/if}" * depth)
        assert template.run({}) == "x"

    def test_deep_loop_nesting_renders(self):
        depth = 600
        source = "{foreach $x in $xs}" * depth + "{$x}" + "{/foreach}" * depth
        assert self.compiler.compile(source).run({"xs": [7]}) == "7"

    def test_too_deeply_nested_expression(self):
        with pytest.raises(ExpressionSyntaxError, match="nested too deeply"):
            self.compiler.compile("{if " + "(" * 5000 + "1" + ")" * 5000 + "}x{/if}")
