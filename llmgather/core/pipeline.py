# llmgather/core/pipeline.py
from pathlib import Path
from typing import Callable, List, Optional

import structlog

from llmgather.config.settings import GatherConfig
from llmgather.core.discovery.path_resolution import resolve_target_path
from llmgather.core.discovery.policy import PatternPolicy
from llmgather.core.discovery.walker import walk_tree, collect_single_file
from llmgather.core.processing import extract_file_content
from llmgather.core.results import GatherCounters, TraversalResult
from llmgather.util import code_fence_for

log = structlog.get_logger(__name__)

ProgressCallback = Callable[[str, float], None]

SUMMARY_TITLE = "# Project Summary"
TREE_HEADING = "## Directory Structure"
CONTENTS_HEADING = "## File Contents"

PROGRESS_SCAN = 0.1
PROGRESS_FILES_START = 0.2
PROGRESS_FILES_SPAN = 0.6
PROGRESS_FINALIZE = 0.9


def _no_progress(message: str, fraction: float) -> None:
    pass


class SummaryGenerator:
    # orchestrates one gather run: resolve target, walk, extract, assemble lines.
    def __init__(self, config: GatherConfig):
        self.config: GatherConfig = config
        self.log = structlog.get_logger(f"{__name__}.{self.__class__.__name__}")
        self.counters = GatherCounters()
        self.policy = PatternPolicy(config.profile, config.project_root)
        self.traversal: Optional[TraversalResult] = None

    def _emit_tree_section(self, target: Path, output_lines: List[str]) -> TraversalResult:
        if target.is_dir():
            traversal = walk_tree(target, self.policy, follow_symlinks=self.config.follow_symlinks)
            if self.config.show_tree:
                output_lines.append(TREE_HEADING)
                output_lines.append("```")
                output_lines.extend(traversal.tree_lines)
                output_lines.append("```")
        else:
            output_lines.append(f"## Target File: {self.policy.relative_path(target)}")
            traversal = collect_single_file(target, self.policy)
        return traversal

    def _emit_file_section(self, file_path: Path, output_lines: List[str]) -> None:
        outcome = extract_file_content(
            file_path, self.policy, self.config.max_lines_per_file, self.config.max_file_size
        )
        self.counters.record(outcome)
        self.log.debug(
            "file_outcome_recorded",
            path=outcome.relative_path,
            outcome=outcome.kind.value,
            reason=outcome.reason,
        )
        body = outcome.lines or [""]
        fence = code_fence_for(body)
        output_lines.append(f"### {outcome.relative_path}")
        output_lines.append(fence)
        output_lines.extend(body)
        output_lines.append(fence)
        output_lines.append("")

    def generate(self, progress_callback: Optional[ProgressCallback] = None) -> List[str]:
        """
        Runs the full gather and returns the summary as an ordered list of lines.

        Counters are reset first and hold the final tallies afterwards. Raises
        TargetNotFoundError before any output is produced when the target is
        missing; per-directory and per-file problems are logged and skipped.
        """
        report = progress_callback or _no_progress
        self.counters.reset()
        output_lines: List[str] = []

        target = resolve_target_path(self.config)
        self.log.info("summary_generation_started", target=str(target), profile=self.config.profile_name)
        root = self.config.project_root
        if target != root and root not in target.parents:
            self.log.warning(
                "target_outside_project_root",
                target=str(target),
                project_root=str(root),
                note="paths are shown by file name only and root-anchored patterns will not apply",
            )

        report("Scanning directory structure...", PROGRESS_SCAN)
        output_lines.append(SUMMARY_TITLE)
        traversal = self._emit_tree_section(target, output_lines)
        self.traversal = traversal
        self.counters.skipped_files_include = traversal.skipped_include

        output_lines.append("")
        total = len(traversal.files)
        self.counters.total_files_found = total

        output_lines.append(CONTENTS_HEADING)
        for index, file_path in enumerate(traversal.files):
            fraction = PROGRESS_FILES_START + PROGRESS_FILES_SPAN * (index / total)
            report(
                f"Processing file: {self.policy.relative_path(file_path)} ({index + 1}/{total})",
                fraction,
            )
            self._emit_file_section(file_path, output_lines)

        report("Finalizing summary...", PROGRESS_FINALIZE)
        self.log.info("summary_generation_complete", **self.counters.as_dict())
        return output_lines
