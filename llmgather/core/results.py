# llmgather/core/results.py
"""
Value types produced by a gather run: the traversal output, the per-file
outcome and the run-scoped counters.
"""
from dataclasses import dataclass, field, asdict
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


class OutcomeKind(Enum):
    PROCESSED = "processed"
    SKIPPED_SIZE = "skipped_size"
    SKIPPED_CONTENT = "skipped_content"
    SKIPPED_BINARY = "skipped_binary"
    SKIPPED_INCLUDE = "skipped_include"


@dataclass
class FileOutcome:
    kind: OutcomeKind
    relative_path: str
    reason: str
    lines: List[str] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class TraversalResult:
    tree_lines: List[str] = field(default_factory=list)
    files: List[Path] = field(default_factory=list)
    skipped_include: int = 0


_COUNTER_FIELD_BY_KIND = {
    OutcomeKind.PROCESSED: "processed_files",
    OutcomeKind.SKIPPED_SIZE: "skipped_files_size",
    OutcomeKind.SKIPPED_CONTENT: "skipped_files_content",
    OutcomeKind.SKIPPED_BINARY: "skipped_files_binary",
    OutcomeKind.SKIPPED_INCLUDE: "skipped_files_include",
}


@dataclass
class GatherCounters:
    """Tallies for one run. Reset at the start of every run."""
    total_files_found: int = 0
    processed_files: int = 0
    skipped_files_size: int = 0
    skipped_files_content: int = 0
    skipped_files_binary: int = 0
    skipped_files_include: int = 0
    read_errors: int = 0

    def reset(self) -> None:
        for name in self.as_dict():
            setattr(self, name, 0)

    def record(self, outcome: FileOutcome) -> None:
        # exactly one outcome field moves per file; read errors are tallied alongside.
        field_name = _COUNTER_FIELD_BY_KIND[outcome.kind]
        setattr(self, field_name, getattr(self, field_name) + 1)
        if outcome.error is not None:
            self.read_errors += 1

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)
