# tests/test_pattern_matching.py
"""Tests for glob compilation and matching."""

import pytest

from llmgather.core.discovery import pattern_matching
from llmgather.core.discovery.pattern_matching import compile_glob, translate_glob


class TestMatchEverything:
    """'*' and '**' on their own match any input."""

    @pytest.mark.parametrize("path", ["", "a", "Assets/Script.cs", "deep/er/still/file.bin", "UPPER.TXT"])
    def test_single_and_double_star_match_any_path(self, path):
        assert compile_glob("*").matches(path)
        assert compile_glob("**").matches(path)


class TestSingleSegmentWildcards:
    """'*' and '?' never cross a '/'."""

    def test_star_stays_within_segment(self):
        pattern = compile_glob("*.cs")
        assert pattern.matches("Script.cs")
        assert pattern.matches(".cs")
        assert not pattern.matches("Assets/Script.cs")

    def test_star_inside_path(self):
        pattern = compile_glob("Assets/*/Script.cs")
        assert pattern.matches("Assets/Editor/Script.cs")
        assert not pattern.matches("Assets/Script.cs")
        assert not pattern.matches("Assets/a/b/Script.cs")

    def test_question_mark_matches_exactly_one_character(self):
        pattern = compile_glob("a?c")
        assert pattern.matches("abc")
        assert not pattern.matches("ac")
        assert not pattern.matches("abbc")
        assert not pattern.matches("a/c")

    def test_matching_is_anchored(self):
        pattern = compile_glob("src")
        assert pattern.matches("src")
        assert not pattern.matches("src/main.py")
        assert not pattern.matches("my_src")


class TestDoubleStarSegments:
    """'**' stands for whole path segments."""

    def test_middle_double_star_allows_zero_segments(self):
        assert compile_glob("src/**/test").matches("src/test")

    def test_middle_double_star_allows_many_segments(self):
        pattern = compile_glob("src/**/test")
        assert pattern.matches("src/a/test")
        assert pattern.matches("src/a/b/test")

    def test_middle_double_star_requires_separators(self):
        pattern = compile_glob("src/**/test")
        assert not pattern.matches("srcXtest")
        assert not pattern.matches("src/atest")

    def test_trailing_double_star_matches_directory_and_contents(self):
        pattern = compile_glob("Library/**")
        assert pattern.matches("Library")
        assert pattern.matches("Library/cache.bin")
        assert pattern.matches("Library/a/b/c.txt")
        assert not pattern.matches("LibraryX")
        assert not pattern.matches("Assets/Library")

    def test_leading_double_star_matches_at_any_depth(self):
        pattern = compile_glob("**/test.py")
        assert pattern.matches("test.py")
        assert pattern.matches("a/b/test.py")
        assert not pattern.matches("atest.py")

    def test_bare_double_star_crosses_separators(self):
        pattern = compile_glob("a**b")
        assert pattern.matches("ab")
        assert pattern.matches("a/x/y/b")
        assert not pattern.matches("a/x/c")

    def test_translation_of_double_star_forms(self):
        assert translate_glob("src/**/test") == "src(?:/|/.*/)test"
        assert translate_glob("Library/**") == "Library(?:/.*)?"
        assert translate_glob("**/x") == "(?:.*/)?x"
        assert translate_glob("a**b") == "a.*b"


class TestLiteralsAndCase:
    def test_matching_is_case_insensitive(self):
        pattern = compile_glob("assets/*.CS")
        assert pattern.matches("Assets/script.cs")
        assert pattern.matches("ASSETS/SCRIPT.CS")

    def test_regex_metacharacters_are_literal(self):
        pattern = compile_glob("file[1]+(x).txt")
        assert pattern.matches("file[1]+(x).txt")
        assert not pattern.matches("file1.txt")
        assert not compile_glob("a.b").matches("axb")

    def test_matching_is_deterministic(self):
        pattern = compile_glob("src/**/*.py")
        results = {pattern.matches("src/pkg/mod.py") for _ in range(5)}
        assert results == {True}


class TestDegeneratePatterns:
    def test_empty_pattern_matches_only_empty_input(self):
        pattern = compile_glob("")
        assert pattern.matches("")
        assert not pattern.matches("a")

    def test_non_empty_pattern_never_matches_empty_input(self):
        assert not compile_glob("a*").matches("")
        assert not compile_glob("**/x").matches("")


class TestInvalidExpressions:
    def test_uncompilable_expression_never_matches(self, monkeypatch):
        """A pattern whose regex fails to compile is reported invalid and matches nothing."""
        monkeypatch.setattr(pattern_matching, "translate_glob", lambda glob: "(unclosed")
        pattern = pattern_matching.GlobPattern("anything")
        assert not pattern.is_valid
        assert not pattern.matches("anything")
