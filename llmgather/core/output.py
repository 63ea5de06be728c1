import sys
from pathlib import Path
from typing import List
import click
import structlog
from llmgather.exceptions import OutputError

log = structlog.get_logger(__name__)

def render_lines(output_lines: List[str]) -> str:
    # joins summary lines into the final document text.
    return "\n".join(output_lines) + "\n"

def write_to_stdout(text_content: str):
    # writes text to standard output.
    try:
        sys.stdout.write(text_content)
        sys.stdout.flush()
    except UnicodeEncodeError as e:
        log.warning("stdout_write_failed_trying_binary_fallback", error=str(e))
        try:
            sys.stdout.buffer.write(text_content.encode("utf-8", errors="replace"))
            sys.stdout.buffer.flush()
        except (AttributeError, OSError) as inner_e:
            raise OutputError(f"failed to write summary to stdout: {inner_e}")
    except OSError as e:
        raise OutputError(f"failed to write summary to stdout: {e}")

def write_to_file(output_file_path: Path, text_content: str):
    # writes text content to the specified file path, creating parent directories.
    # undecodable file names arrive as surrogate escapes and are written as "?".
    log.info("writing_output_to_file", path=str(output_file_path))
    try:
        output_file_path.parent.mkdir(parents=True, exist_ok=True)
        output_file_path.write_text(text_content, encoding="utf-8", errors="replace")
    except OSError as e:
        raise OutputError(f"failed to write to file '{output_file_path}': {e}")

def open_with_default_app(file_path: Path) -> bool:
    # asks the OS to open the written summary; failure is reported, never raised.
    try:
        exit_code = click.launch(str(file_path))
    except OSError as e:
        log.error("failed_to_open_output_file", path=str(file_path), error=str(e))
        return False
    if exit_code != 0:
        log.warning("open_output_file_nonzero_exit", path=str(file_path), exit_code=exit_code)
        return False
    return True
