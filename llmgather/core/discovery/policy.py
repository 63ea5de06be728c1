# llmgather/core/discovery/policy.py
"""
The three-tier filter policy: exclude, include and skip-content.

Every query works on the path relative to the project root with '/'
separators. A pattern without any '/' is also tried against the last path
segment, so '*.meta' applies at every depth while 'Library/**' stays
anchored at the root.
"""
import os
from pathlib import Path
from typing import List, Sequence, Union
import structlog

from llmgather.config.settings import PatternProfile
from llmgather.core.discovery.pattern_matching import GlobPattern, compile_glob
from llmgather.util import normalize_separators

log = structlog.get_logger(__name__)

PathLike = Union[str, Path]


def compile_pattern_list(patterns: Sequence[str]) -> List[GlobPattern]:
    # drops blank entries and normalizes separators before compiling.
    compiled = []
    for raw in patterns or ():
        if raw is None or not str(raw).strip():
            continue
        compiled.append(compile_glob(normalize_separators(str(raw).strip())))
    return compiled


class PatternPolicy:
    """Answers exclude / include / skip-content queries for paths under one project root."""

    def __init__(self, profile: PatternProfile, project_root: Path):
        self.project_root = Path(project_root)
        self.exclude = compile_pattern_list(profile.exclude_patterns)
        self.skip_content = compile_pattern_list(profile.skip_content_patterns)
        self.include = compile_pattern_list(profile.include_patterns)
        log.debug(
            "pattern_policy_compiled",
            exclude=len(self.exclude),
            skip_content=len(self.skip_content),
            include=len(self.include),
        )

    @property
    def has_include_filter(self) -> bool:
        return bool(self.include)

    def relative_path(self, path: PathLike) -> str:
        # root-relative, '/'-separated; paths outside the root collapse to their file name.
        abs_path = Path(os.path.abspath(os.fspath(path)))
        try:
            rel = abs_path.relative_to(self.project_root)
        except ValueError:
            log.debug("path_outside_project_root", path=str(abs_path), root=str(self.project_root))
            return abs_path.name
        return normalize_separators(rel.as_posix())

    def _matches_any(self, path: PathLike, patterns: List[GlobPattern], group: str) -> bool:
        if not patterns:
            return False
        rel = self.relative_path(path)
        name = rel.rsplit("/", 1)[-1]
        for pattern in patterns:
            if pattern.matches(rel) or ("/" not in pattern.pattern and pattern.matches(name)):
                log.debug("pattern_matched", group=group, pattern=pattern.pattern, path=rel, abs_path=str(path))
                return True
        return False

    def should_exclude(self, path: PathLike) -> bool:
        return self._matches_any(path, self.exclude, "exclude")

    def should_include(self, path: PathLike) -> bool:
        if not self.include:
            return True
        return self._matches_any(path, self.include, "include")

    def should_skip_content(self, path: PathLike) -> bool:
        return self._matches_any(path, self.skip_content, "skip_content")
