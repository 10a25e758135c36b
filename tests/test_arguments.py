"""
Tests for tag argument extraction.
"""

import pytest

from tplc.compiler.arguments import ArgumentPattern, compile_pattern
from tplc.errors import ArgumentMismatchError


class TestArgumentPattern:

    def test_two_placeholders(self):
        pattern = compile_pattern("{a} and {b}")
        assert pattern.names == ("a", "b")
        assert pattern.extract("x and y") == {"a": "x", "b": "y"}

    def test_each_placeholder_binds_its_own_name(self):
        pattern = compile_pattern("{element} in {object}")
        assert pattern.extract("$item in $items") == {"element": "$item", "object": "$items"}

    def test_values_are_stripped(self):
        pattern = compile_pattern("{element} in {object}")
        assert pattern.extract("   $a   in   $b.c  ") == {"element": "$a", "object": "$b.c"}

    def test_literal_text_is_escaped(self):
        pattern = ArgumentPattern.compile("{key}=({value})")
        assert pattern.match("k=(v.1)") == {"key": "k", "value": "v.1"}
        assert pattern.extract("k=v") == {}

    def test_mismatch_raises_in_strict_mode(self):
        with pytest.raises(ArgumentMismatchError):
            compile_pattern("{a} and {b}").match("x or y")

    def test_mismatch_is_soft_in_extract(self):
        assert compile_pattern("{a} and {b}").extract("x or y") == {}

    def test_pattern_without_placeholders(self):
        pattern = compile_pattern("now")
        assert pattern.names == ()
        assert pattern.extract(" now ") == {}

    def test_compile_pattern_is_cached(self):
        assert compile_pattern("{x} to {y}") is compile_pattern("{x} to {y}")
