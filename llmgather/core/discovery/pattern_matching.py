# llmgather/core/discovery/pattern_matching.py
"""
Glob-to-regex compilation for '/'-separated, root-relative paths.

Supported wildcards:
    *    any run of characters except '/'
    ?    exactly one character except '/'
    **   any number of whole path segments; '/**/' may collapse to a single
         '/', a trailing '/**' also matches the directory itself, and a
         leading '**/' also matches at the top level.

Matching is case-insensitive and anchored at both ends.
"""
import re
from typing import Optional, Pattern
import structlog

log = structlog.get_logger(__name__)

MATCH_ALL_PATTERNS = frozenset({"*", "**"})
_REGEX_FLAGS = re.IGNORECASE | re.DOTALL


def translate_glob(glob: str) -> str:
    # translates a glob into an (unanchored) regex body; callers use fullmatch.
    parts = []
    i, n = 0, len(glob)
    while i < n:
        if glob.startswith("/**", i) and (i + 3 == n or glob[i + 3] == "/"):
            if i + 3 == n:
                parts.append("(?:/.*)?")
                i += 3
            else:
                parts.append("(?:/|/.*/)")
                i += 4
            continue
        if glob.startswith("**", i):
            if i == 0 and glob.startswith("/", 2):
                parts.append("(?:.*/)?")
                i += 3
            else:
                parts.append(".*")
                i += 2
            continue
        c = glob[i]
        if c == "*":
            parts.append("[^/]*")
        elif c == "?":
            parts.append("[^/]")
        elif c == "/":
            parts.append("/")
        else:
            parts.append(re.escape(c))
        i += 1
    return "".join(parts)


class GlobPattern:
    """A compiled glob. Invalid expressions never match instead of raising."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        self.matches_everything = pattern in MATCH_ALL_PATTERNS
        self.regex_source: Optional[str] = None
        self._regex: Optional[Pattern[str]] = None
        self.is_valid = True

        if self.matches_everything or not pattern:
            return
        self.regex_source = translate_glob(pattern)
        try:
            self._regex = re.compile(self.regex_source, _REGEX_FLAGS)
        except re.error as e:
            self.is_valid = False
            log.warning("invalid_glob_pattern", pattern=pattern, regex=self.regex_source, error=str(e))

    def matches(self, path: str) -> bool:
        if self.matches_everything:
            return True
        if not self.pattern:
            return not path
        if not path or self._regex is None:
            return False
        return self._regex.fullmatch(path) is not None

    def __repr__(self) -> str:
        return f"GlobPattern({self.pattern!r})"


def compile_glob(pattern: str) -> GlobPattern:
    return GlobPattern(pattern)
