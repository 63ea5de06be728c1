from pathlib import Path
import structlog

from llmgather.config.settings import GatherConfig
from llmgather.exceptions import TargetNotFoundError

log = structlog.get_logger(__name__)

def resolve_target_path(config: GatherConfig) -> Path:
    # absolute targets are used as given; relative ones are joined onto the project root.
    raw_target = Path(config.target) if config.target else Path(".")
    candidate = raw_target if raw_target.is_absolute() else config.project_root / raw_target

    try:
        resolved = candidate.resolve(strict=True)
    except FileNotFoundError:
        log.error("target_not_found", target=str(config.target), full_path=str(candidate))
        raise TargetNotFoundError(f"Target directory or file not found: {candidate}")
    except OSError as e:
        log.error("error_resolving_target", target=str(config.target), error=str(e))
        raise TargetNotFoundError(f"Target directory or file could not be resolved: {candidate} ({e})")

    if not (resolved.is_dir() or resolved.is_file()):
        raise TargetNotFoundError(f"Target is neither a directory nor a regular file: {resolved}")

    log.info("target_resolved", path=str(resolved), is_dir=resolved.is_dir())
    return resolved
