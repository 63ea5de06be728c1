# llmgather/core/discovery/__init__.py
"""
Path discovery and filtering for llmgather.

This package compiles glob patterns, applies the exclude / include /
skip-content policy, resolves the run target and walks the directory tree.
"""
from .pattern_matching import GlobPattern, compile_glob
from .policy import PatternPolicy
from .path_resolution import resolve_target_path
from .walker import walk_tree, collect_single_file

__all__ = [
    "GlobPattern",
    "compile_glob",
    "PatternPolicy",
    "resolve_target_path",
    "walk_tree",
    "collect_single_file",
]
