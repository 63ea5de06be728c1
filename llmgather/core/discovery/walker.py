# llmgather/core/discovery/walker.py
import os
from pathlib import Path
from typing import List, Set, Tuple
import structlog

from llmgather.core.discovery.policy import PatternPolicy
from llmgather.core.results import TraversalResult
from llmgather.util import normalize_separators

log = structlog.get_logger(__name__)

INDENT_UNIT = "    "


def walk_tree(root: Path, policy: PatternPolicy, follow_symlinks: bool = False) -> TraversalResult:
    """
    Walks `root` depth-first and returns the indented tree lines together with
    the ordered list of files whose contents should be gathered.

    Within a directory, subdirectories come before files and both are sorted by
    their full path. Excluded directories are pruned without being listed.
    """
    log.info("tree_walk_started", root=str(root), follow_symlinks=follow_symlinks)
    result = TraversalResult()
    _walk_directory(Path(root), policy, result, 0, follow_symlinks, set())
    log.info(
        "tree_walk_complete",
        files=len(result.files),
        tree_lines=len(result.tree_lines),
        skipped_include=result.skipped_include,
    )
    return result


def collect_single_file(file_path: Path, policy: PatternPolicy) -> TraversalResult:
    # a file target has no tree; it is subject to the same exclude/include rules.
    result = TraversalResult()
    if policy.should_exclude(file_path):
        log.info("single_file_target_excluded", path=str(file_path))
        return result
    if not policy.should_include(file_path):
        log.info("single_file_target_not_included", path=str(file_path))
        result.skipped_include += 1
        return result
    result.files.append(Path(file_path))
    return result


def _list_directory(directory: Path, follow_symlinks: bool) -> Tuple[List[str], List[str]]:
    # returns (subdirectories, files) as sorted, '/'-normalized path strings.
    subdirs: List[str] = []
    files: List[str] = []
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                entry_path = normalize_separators(entry.path)
                try:
                    if entry.is_dir(follow_symlinks=follow_symlinks):
                        subdirs.append(entry_path)
                    elif entry.is_file():
                        files.append(entry_path)
                    elif entry.is_symlink():
                        log.debug("symlink_not_followed", path=entry_path)
                except OSError as e:
                    log.warning("directory_entry_access_error", path=entry_path, error=str(e))
    except OSError as e:
        log.warning("directory_access_error", path=str(directory), error=str(e))
        return [], []
    return sorted(subdirs), sorted(files)


def _walk_directory(
    directory: Path,
    policy: PatternPolicy,
    result: TraversalResult,
    depth: int,
    follow_symlinks: bool,
    visited: Set[str],
) -> None:
    if depth > 0:
        result.tree_lines.append(f"{INDENT_UNIT * depth}{directory.name}/")

    if follow_symlinks:
        real_dir = os.path.realpath(directory)
        if real_dir in visited:
            log.warning("symlink_cycle_skipped", path=str(directory), target=real_dir)
            return
        visited.add(real_dir)

    subdirs, files = _list_directory(directory, follow_symlinks)

    for subdir in subdirs:
        if policy.should_exclude(subdir):
            log.debug("directory_pruned_by_exclude", path=subdir)
            continue
        _walk_directory(Path(subdir), policy, result, depth + 1, follow_symlinks, visited)

    kept = [f for f in files if not policy.should_exclude(f)]
    if policy.has_include_filter:
        included = [f for f in kept if policy.should_include(f)]
        result.skipped_include += len(kept) - len(included)
        kept = included

    file_indent = INDENT_UNIT * (depth + 1)
    for file_path_str in kept:
        file_path = Path(file_path_str)
        result.tree_lines.append(f"{file_indent}{file_path.name}")
        result.files.append(file_path)
