# tests/test_policy.py
"""Tests for the exclude / include / skip-content policy."""

from pathlib import Path

import pytest

from llmgather.config.settings import PatternProfile
from llmgather.core.discovery.policy import PatternPolicy, compile_pattern_list
from llmgather.util import normalize_separators


@pytest.fixture
def root(tmp_path: Path) -> Path:
    return tmp_path.resolve()


def make_policy(root: Path, exclude=None, skip_content=None, include=None) -> PatternPolicy:
    profile = PatternProfile(
        exclude_patterns=list(exclude or []),
        skip_content_patterns=list(skip_content or []),
        include_patterns=list(include or []),
    )
    return PatternPolicy(profile, root)


class TestIncludeEmptyInvariant:
    """An include list without effective entries includes everything."""

    def test_no_include_patterns_includes_all(self, root):
        policy = make_policy(root)
        assert not policy.has_include_filter
        assert policy.should_include(root / "anything" / "at" / "all.bin")

    def test_blank_include_patterns_are_ignored(self, root):
        policy = make_policy(root, include=["", "   ", "\t"])
        assert not policy.has_include_filter
        assert policy.should_include(root / "Assets" / "Script.cs")

    def test_include_patterns_filter_when_present(self, root):
        policy = make_policy(root, include=["", "Assets/**/*.cs"])
        assert policy.has_include_filter
        assert policy.should_include(root / "Assets" / "Scripts" / "Player.cs")
        assert not policy.should_include(root / "Assets" / "readme.md")


class TestExcludeAndSkipContent:
    def test_directory_exclusion_matches_directory_itself(self, root):
        policy = make_policy(root, exclude=["Library/**"])
        assert policy.should_exclude(root / "Library")
        assert policy.should_exclude(root / "Library" / "cache" / "x.bin")
        assert not policy.should_exclude(root / "Assets" / "Library.cs")

    def test_blank_exclude_entries_never_match(self, root):
        policy = make_policy(root, exclude=["", "  "])
        assert not policy.should_exclude(root / "a.txt")

    def test_slashless_pattern_applies_at_every_depth(self, root):
        policy = make_policy(root, exclude=["*.meta"], skip_content=["*.png"])
        assert policy.should_exclude(root / "Assets" / "Deep" / "Script.cs.meta")
        assert policy.should_skip_content(root / "Assets" / "Texture.png")
        assert not policy.should_skip_content(root / "Assets" / "Script.cs")

    def test_pattern_with_slash_is_anchored_at_root(self, root):
        policy = make_policy(root, exclude=["Assets/*.tmp"])
        assert policy.should_exclude(root / "Assets" / "a.tmp")
        assert not policy.should_exclude(root / "Other" / "Assets" / "a.tmp")

    def test_skip_content_does_not_affect_other_queries(self, root):
        policy = make_policy(root, skip_content=["*.png"])
        texture = root / "Assets" / "Texture.png"
        assert not policy.should_exclude(texture)
        assert policy.should_include(texture)

    def test_backslash_patterns_are_normalized(self, root):
        policy = make_policy(root, exclude=["Assets\\Secret\\**"])
        assert policy.should_exclude(root / "Assets" / "Secret" / "keys.txt")


class TestRelativePaths:
    def test_relative_path_uses_forward_slashes(self, root):
        policy = make_policy(root)
        assert policy.relative_path(root / "Assets" / "Script.cs") == "Assets/Script.cs"

    def test_paths_outside_root_collapse_to_file_name(self, root):
        policy = make_policy(root / "project")
        assert policy.relative_path(root / "elsewhere" / "notes.txt") == "notes.txt"

    def test_normalization_is_idempotent(self):
        once = normalize_separators("Assets\\Scripts\\Player.cs")
        assert once == "Assets/Scripts/Player.cs"
        assert normalize_separators(once) == once
        assert normalize_separators("src/**/test") == "src/**/test"


def test_compile_pattern_list_drops_blank_entries():
    compiled = compile_pattern_list(["*.cs", "", "  ", None, " Library/** "])
    assert [p.pattern for p in compiled] == ["*.cs", "Library/**"]
