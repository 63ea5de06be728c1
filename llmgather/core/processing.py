# llmgather/core/processing.py
"""
Per-file content extraction: skip-content and size checks, binary detection
and line-capped text reading.
"""
import io
from pathlib import Path
from typing import List, Tuple
import structlog

from llmgather.core.discovery.policy import PatternPolicy
from llmgather.core.results import FileOutcome, OutcomeKind
from llmgather.util import detect_bom

log = structlog.get_logger(__name__)

BINARY_SNIFF_BYTES = 512

TEXT_EXTENSIONS = frozenset({
    ".txt", ".md", ".cs", ".js", ".ts", ".json", ".xml", ".yaml", ".yml", ".html", ".css",
    ".shader", ".cginc", ".hlsl", ".glsl", ".py", ".java", ".cpp", ".h", ".log", ".csv", ".tsv",
    ".php", ".rb",
})

SKIP_CONTENT_PLACEHOLDER = "(Content skipped due to matching Skip Content Pattern)"
TRUNCATION_ELLIPSIS = "..."


def size_limit_placeholder(size: int, limit: int) -> str:
    return f"(Content skipped due to file size limit: {size} > {limit} bytes)"


def binary_placeholder(size: int) -> str:
    return f"(Binary file detected, content not displayed: {size} bytes)"


def truncation_marker(max_lines: int) -> str:
    return f"(Truncated: Maximum line count {max_lines} reached)"


def read_error_placeholder(error: Exception) -> str:
    return f"[Error] Failed to read file: {error}"


def is_binary_file(file_path: Path) -> bool:
    # known text extensions short-circuit; otherwise a NUL byte in the head means binary.
    if file_path.suffix.lower() in TEXT_EXTENSIONS:
        return False
    try:
        with open(file_path, "rb") as f_obj:
            head = f_obj.read(BINARY_SNIFF_BYTES)
    except OSError as e:
        log.warning("binary_check_failed_assuming_text", path=str(file_path), error=str(e))
        return False
    return b"\x00" in head


def read_text_lines(file_path: Path, max_lines: int) -> Tuple[List[str], bool]:
    """
    Reads at most `max_lines` lines of text and reports whether more remained.

    The encoding follows a leading byte-order mark (utf-8, utf-16, utf-32) and
    defaults to utf-8; the mark itself is dropped and undecodable bytes are
    replaced. Line endings (\\n, \\r\\n, \\r) are stripped.
    """
    lines: List[str] = []
    with open(file_path, "rb") as raw:
        encoding, bom_length = detect_bom(raw.read(4))
        raw.seek(bom_length)
        with io.TextIOWrapper(raw, encoding=encoding, errors="replace", newline=None) as text:
            for line in text:
                if len(lines) == max_lines:
                    return lines, True
                lines.append(line.rstrip("\n"))
    return lines, False


def _file_size(file_path: Path, relative_path: str) -> int:
    try:
        return file_path.stat().st_size
    except OSError as e:
        log.warning("file_size_unavailable", path=relative_path, error=str(e))
        return 0


def extract_file_content(
    file_path: Path,
    policy: PatternPolicy,
    max_lines: int,
    max_size_bytes: int,
) -> FileOutcome:
    """
    Decides what a file contributes to the summary.

    Checks run in a fixed order and the first hit wins: skip-content pattern,
    size limit (when `max_size_bytes` > 0), binary sniffing, then a capped
    text read. A failed read still yields a PROCESSED outcome whose single
    line is an inline error message.
    """
    file_path = Path(file_path)
    relative_path = policy.relative_path(file_path)

    if policy.should_skip_content(file_path):
        return FileOutcome(
            OutcomeKind.SKIPPED_CONTENT, relative_path,
            reason="matched skip content pattern",
            lines=[SKIP_CONTENT_PLACEHOLDER],
        )

    file_size = _file_size(file_path, relative_path)

    if max_size_bytes > 0 and file_size > max_size_bytes:
        return FileOutcome(
            OutcomeKind.SKIPPED_SIZE, relative_path,
            reason=f"file size {file_size} exceeds limit {max_size_bytes}",
            lines=[size_limit_placeholder(file_size, max_size_bytes)],
        )

    if is_binary_file(file_path):
        return FileOutcome(
            OutcomeKind.SKIPPED_BINARY, relative_path,
            reason="binary content detected",
            lines=[binary_placeholder(file_size)],
        )

    try:
        lines, truncated = read_text_lines(file_path, max_lines)
    except (OSError, LookupError) as e:
        log.warning("file_read_error_in_processing", path=relative_path, error=str(e))
        return FileOutcome(
            OutcomeKind.PROCESSED, relative_path,
            reason="read failed",
            lines=[read_error_placeholder(e)],
            error=str(e),
        )

    if truncated:
        log.debug("file_content_truncated", path=relative_path, max_lines=max_lines)
        lines.extend([TRUNCATION_ELLIPSIS, truncation_marker(max_lines)])
    return FileOutcome(
        OutcomeKind.PROCESSED, relative_path,
        reason="truncated" if truncated else "included",
        lines=lines,
    )
