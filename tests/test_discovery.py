import os
from pathlib import Path

import pytest

from llmgather.config.settings import GatherConfig, PatternProfile
from llmgather.core.discovery import walker
from llmgather.core.discovery.path_resolution import resolve_target_path
from llmgather.core.discovery.policy import PatternPolicy
from llmgather.core.discovery.walker import walk_tree, collect_single_file
from llmgather.exceptions import TargetNotFoundError


def create_project_structure(base_path: Path, files_to_create: dict):
    """
    Creates a directory structure with files.
    files_to_create = {"dir/file.py": "content", "another.txt": "text"}
    """
    for rel_path, content in files_to_create.items():
        file_path = base_path / rel_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content or f"content of {rel_path}")


def make_policy(root: Path, exclude=None, include=None) -> PatternPolicy:
    return PatternPolicy(
        PatternProfile(exclude_patterns=list(exclude or []), include_patterns=list(include or [])),
        root,
    )


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path.resolve() / "proj"
    root.mkdir()
    create_project_structure(root, {
        "b.txt": "b",
        "a.txt": "a",
        "Z/z.txt": "z",
        "A/inner.txt": "inner",
    })
    return root


def test_directories_come_before_files_and_both_are_sorted(project: Path):
    result = walk_tree(project, make_policy(project))

    assert result.tree_lines == [
        "    A/",
        "        inner.txt",
        "    Z/",
        "        z.txt",
        "    a.txt",
        "    b.txt",
    ]
    assert [p.relative_to(project).as_posix() for p in result.files] == [
        "A/inner.txt", "Z/z.txt", "a.txt", "b.txt",
    ]
    assert all(p.is_absolute() for p in result.files)


def test_excluded_directory_is_pruned(project: Path):
    create_project_structure(project, {"Library/cache/blob.txt": "x", "Library/top.txt": "y"})
    result = walk_tree(project, make_policy(project, exclude=["Library/**"]))

    assert not any("Library" in line for line in result.tree_lines)
    assert not any("Library" in p.parts for p in result.files)


def test_empty_directories_are_still_listed(project: Path):
    (project / "empty").mkdir()
    result = walk_tree(project, make_policy(project))
    assert "    empty/" in result.tree_lines


def test_include_filter_counts_dropped_files(project: Path):
    create_project_structure(project, {"src/main.cs": "class A {}", "src/notes.md": "notes"})
    result = walk_tree(project, make_policy(project, include=["*.cs"]))

    assert [p.name for p in result.files] == ["main.cs"]
    # a.txt, b.txt, A/inner.txt, Z/z.txt, src/notes.md
    assert result.skipped_include == 5
    assert "    src/" in result.tree_lines


def test_exclusion_wins_over_inclusion(project: Path):
    create_project_structure(project, {"secret.txt": "s"})
    result = walk_tree(project, make_policy(project, exclude=["secret.txt"], include=["*.txt"]))

    assert "secret.txt" not in [p.name for p in result.files]
    # excluded files are dropped before include filtering and are not tallied
    assert result.skipped_include == 0


def test_unreadable_directory_is_treated_as_empty(project: Path, monkeypatch):
    create_project_structure(project, {"locked/hidden.txt": "h"})
    real_scandir = os.scandir

    def flaky_scandir(path):
        if Path(path).name == "locked":
            raise PermissionError("permission denied")
        return real_scandir(path)

    monkeypatch.setattr(walker.os, "scandir", flaky_scandir)
    result = walk_tree(project, make_policy(project))

    assert "    locked/" in result.tree_lines
    assert "hidden.txt" not in [p.name for p in result.files]
    assert [p.name for p in result.files] == ["inner.txt", "z.txt", "a.txt", "b.txt"]


def test_symlinked_directories_followed_only_on_request(project: Path):
    try:
        (project / "A" / "loop").symlink_to(project / "A", target_is_directory=True)
    except OSError:
        pytest.skip("symlinks not supported here")

    default = walk_tree(project, make_policy(project))
    assert not any("loop" in line for line in default.tree_lines)

    followed = walk_tree(project, make_policy(project), follow_symlinks=True)
    assert "        loop/" in followed.tree_lines
    # the cycle back to A is entered once and not walked again
    assert [p.name for p in followed.files] == ["inner.txt", "z.txt", "a.txt", "b.txt"]


def test_dangling_symlink_is_not_listed(project: Path):
    try:
        (project / "dangling.txt").symlink_to(project / "gone.txt")
    except OSError:
        pytest.skip("symlinks not supported here")

    for follow in (False, True):
        result = walk_tree(project, make_policy(project), follow_symlinks=follow)
        assert not any("dangling" in line for line in result.tree_lines)
        assert [p.name for p in result.files] == ["inner.txt", "z.txt", "a.txt", "b.txt"]


class TestSingleFileTarget:
    def test_single_file_becomes_sole_entry(self, project: Path):
        result = collect_single_file(project / "a.txt", make_policy(project))
        assert result.files == [project / "a.txt"]
        assert result.tree_lines == []

    def test_excluded_single_file_is_dropped(self, project: Path):
        result = collect_single_file(project / "a.txt", make_policy(project, exclude=["a.txt"]))
        assert result.files == []
        assert result.skipped_include == 0

    def test_single_file_failing_include_is_tallied(self, project: Path):
        result = collect_single_file(project / "a.txt", make_policy(project, include=["*.cs"]))
        assert result.files == []
        assert result.skipped_include == 1


class TestTargetResolution:
    def test_relative_target_resolves_under_project_root(self, project: Path):
        config = GatherConfig(target="A", project_root=project)
        assert resolve_target_path(config) == project / "A"

    def test_absolute_target_is_used_as_given(self, project: Path):
        config = GatherConfig(target=str(project / "a.txt"), project_root=project)
        assert resolve_target_path(config) == project / "a.txt"

    def test_missing_target_raises(self, project: Path):
        config = GatherConfig(target="does-not-exist", project_root=project)
        with pytest.raises(TargetNotFoundError, match="does-not-exist"):
            resolve_target_path(config)
