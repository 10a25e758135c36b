"""
Тесты поиска тегов и сегментации.
"""

import pytest

from tplc.compiler.matcher import TagMatcher
from tplc.compiler.segmenter import SegmentKind, Segmenter
from tplc.errors import MalformedTagError
from tplc.grammar import DelimiterType, GrammarRegistry


def _registry(*families):
    registry = GrammarRegistry()
    for family in families:
        registry.register_family(family)
    return registry


class TestTagMatcher:

    def setup_method(self):
        self.registry = _registry(
            DelimiterType(key="statement", opener="{", closer="}"),
            DelimiterType(key="comment", opener="{*", closer="*}", priority=20),
            DelimiterType(key="angle", opener="<%", closer="%>"),
        )
        self.matcher = TagMatcher(self.registry)

    def test_no_match(self):
        assert self.matcher.match("plain text") is None

    def test_earliest_opener_wins(self):
        m = self.matcher.match("a <% x %> {y}")
        assert m.delimiter == "angle"
        assert m.index == 2

    def test_priority_breaks_ties(self):
        """Test that a higher priority family wins at the same index"""
        m = self.matcher.match("x {* note *}")
        assert m.delimiter == "comment"
        assert m.index == 2

    def test_registration_order_breaks_equal_priority(self):
        registry = _registry(
            DelimiterType(key="first", opener="[[", closer="]]"),
            DelimiterType(key="second", opener="[", closer="]"),
        )
        m = TagMatcher(registry).match("[[a]]")
        assert m.delimiter == "first"

    def test_start_offset(self):
        m = self.matcher.match("{a} {b}", start=1)
        assert m.index == 4


class TestSegmenter:

    def setup_method(self, method):
        from tplc.standard import standard_registry
        self.segmenter = Segmenter(TagMatcher(standard_registry()))

    def test_text_only(self):
        segments = self.segmenter.segment("just text")
        assert len(segments) == 1
        assert segments[0].kind is SegmentKind.TEXT
        assert segments[0].raw == "just text"

    def test_empty_source(self):
        assert self.segmenter.segment("") == []

    @pytest.mark.parametrize("source", [
        "Hello {$name}!",
        "{if $a}A{/if}{else}B{/else}",
        "{* c *}{echo $x}{$y}tail",
        "line1\n{foreach $i in $items}\n{$i}\n{/foreach}\n",
    ])
    def test_concatenation_restores_source(self, source):
        segments = self.segmenter.segment(source)
        assert "".join(s.raw for s in segments) == source
        assert all(s.raw for s in segments)

    def test_tags_and_text_alternate(self):
        segments = self.segmenter.segment("a{$b}c")
        assert [s.kind for s in segments] == [SegmentKind.TEXT, SegmentKind.TAG, SegmentKind.TEXT]
        assert segments[1].raw == "{$b}"
        assert segments[1].delimiter == "statement"

    def test_adjacent_tags_produce_no_empty_text(self):
        segments = self.segmenter.segment("{$a}{$b}")
        assert [s.raw for s in segments] == ["{$a}", "{$b}"]

    def test_family_detection(self):
        segments = self.segmenter.segment("{* x *}{echo $y}{$z}")
        assert [s.delimiter for s in segments] == ["comment", "echo", "statement"]

    def test_positions(self):
        """Test line and column tracking"""
        segments = self.segmenter.segment("ab\ncd{$x}\n  {$y}")
        tags = [s for s in segments if s.is_tag]
        assert (tags[0].position.line, tags[0].position.column) == (2, 3)
        assert (tags[1].position.line, tags[1].position.column) == (3, 3)
        assert tags[0].offset == 5

    def test_unterminated_tag(self):
        with pytest.raises(MalformedTagError) as exc:
            self.segmenter.segment("ok\n  {if $a")
        assert exc.value.position.line == 2
        assert exc.value.position.column == 3
