# llmgather/config/loader.py
"""
Handles loading and merging of TOML configuration files, and reading,
selecting and saving named pattern profiles.
"""
import toml
from pathlib import Path
from typing import Dict, Any, List, Optional
import structlog

from llmgather.exceptions import ConfigError

from .settings import PatternProfile, DEFAULT_PROFILE_NAME

log = structlog.get_logger(__name__)

PROJECT_CONFIG_FILENAMES = [".llmgather.toml", "llmgather.toml", "pyproject.toml"]
USER_CONFIG_DIR = Path.home() / ".config" / "llmgather"
USER_CONFIG_FILE = USER_CONFIG_DIR / "config.toml"

CONFIG_KEY_TO_GATHERCONFIG_ATTR_MAP: Dict[str, str] = {
    "target": "target",
    "output_file": "output_file",
    "max_lines_per_file": "max_lines_per_file",
    "max_file_size": "max_file_size",
    "show_tree": "show_tree",
    "follow_symlinks": "follow_symlinks",
    "open_after_generate": "open_after_generate",
    "console_show_summary": "console_show_summary",
}

PROFILE_KEYS = ("exclude_patterns", "skip_content_patterns", "include_patterns")

def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    if not file_path.is_file():
        return {}
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
        return data.get("tool", {}).get("llmgather", {}) if file_path.name == "pyproject.toml" else data
    except (toml.TomlDecodeError, OSError) as e:
        log.error("config_file_load_error", path=str(file_path), error=str(e))
        return {}

def load_and_merge_configs(project_root: Optional[Path] = None) -> Dict[str, Any]:
    # user-global settings first, then the first project-local file found; profiles merge by name.
    root = project_root or Path.cwd()
    merged_toml_data: Dict[str, Any] = {}
    if USER_CONFIG_FILE.is_file():
        log.info("loading_user_global_config", path=str(USER_CONFIG_FILE))
        merged_toml_data.update(_load_toml_file_data(USER_CONFIG_FILE))

    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = root / filename
        if candidate.is_file():
            project_settings = _load_toml_file_data(candidate)
            if project_settings:
                log.info("loading_project_local_config", path=str(candidate))
                project_profiles = project_settings.pop("profiles", None)
                if project_profiles is not None:
                    user_profiles = merged_toml_data.get("profiles")
                    if isinstance(user_profiles, dict) and isinstance(project_profiles, dict):
                        user_profiles.update(project_profiles)
                    else:
                        merged_toml_data["profiles"] = project_profiles
                merged_toml_data.update(project_settings)
                break
    if not merged_toml_data:
        log.debug("no_configuration_files_loaded")
    return merged_toml_data

def _string_list(value: Any, key: str, profile_name: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(item) for item in value if item is not None]
    log.warning("invalid_profile_pattern_list_ignored", profile=profile_name, key=key, value_type=type(value).__name__)
    return []

def profile_from_mapping(data: Dict[str, Any], profile_name: str = "") -> PatternProfile:
    return PatternProfile(**{key: _string_list(data.get(key), key, profile_name) for key in PROFILE_KEYS})

def profile_to_mapping(profile: PatternProfile) -> Dict[str, List[str]]:
    return {key: list(getattr(profile, key)) for key in PROFILE_KEYS}

def load_profiles(raw_config: Dict[str, Any]) -> Dict[str, PatternProfile]:
    # the built-in Default profile always comes first; a file-defined Default replaces its patterns.
    profiles: Dict[str, PatternProfile] = {DEFAULT_PROFILE_NAME: PatternProfile.create_default()}
    raw_profiles = raw_config.get("profiles", {})
    if not isinstance(raw_profiles, dict):
        log.warning("profiles_table_invalid_ignored", value_type=type(raw_profiles).__name__)
        return profiles
    for name, data in raw_profiles.items():
        if not isinstance(data, dict):
            log.warning("profile_entry_invalid_ignored", profile=name)
            continue
        profiles[str(name)] = profile_from_mapping(data, str(name))
    log.debug("profiles_loaded", names=list(profiles))
    return profiles

def resolve_profile(profiles: Dict[str, PatternProfile], name: Optional[str]) -> PatternProfile:
    if not name:
        return profiles[DEFAULT_PROFILE_NAME]
    if name not in profiles:
        log.warning("profile_not_found_using_default", profile_name=name, fallback=DEFAULT_PROFILE_NAME)
        return profiles[DEFAULT_PROFILE_NAME]
    return profiles[name]

def _profile_target_file(project_root: Path) -> Path:
    target_toml_path = project_root / ".llmgather.toml"
    if not target_toml_path.exists():
        alt_path = project_root / "llmgather.toml"
        if alt_path.exists():
            target_toml_path = alt_path
    return target_toml_path

def save_profile(profile: PatternProfile, profile_name: str, project_root: Optional[Path] = None) -> Path:
    # writes [profiles.<name>] into the project's config file, keeping everything else in it.
    if not profile_name or not profile_name.strip():
        raise ConfigError("profile name must not be empty")
    target_toml_path = _profile_target_file(project_root or Path.cwd())
    log.info("attempting_to_save_profile", profile=profile_name, path=str(target_toml_path))

    existing_data: Dict[str, Any] = {}
    if target_toml_path.exists():
        try:
            existing_data = toml.load(target_toml_path)
        except toml.TomlDecodeError as e:
            raise ConfigError(f"Could not read existing TOML {target_toml_path} to save profile: {e}")

    existing_data.setdefault("profiles", {})[profile_name] = profile_to_mapping(profile)
    try:
        with target_toml_path.open("w", encoding="utf-8") as f:
            toml.dump(existing_data, f)
    except OSError as e:
        raise ConfigError(f"Error writing profile '{profile_name}' to {target_toml_path}: {e}")
    log.info("profile_saved_successfully", profile=profile_name, path=str(target_toml_path))
    return target_toml_path

def load_patterns_from_file(file_path: Path) -> List[str]:
    # one pattern per line; blank lines and '#' comments are ignored.
    patterns: List[str] = []
    try:
        with file_path.open("r", encoding="utf-8-sig") as f:
            for line in f:
                stripped = line.strip()
                if stripped and not stripped.startswith("#"):
                    patterns.append(stripped)
    except OSError as e:
        log.error("pattern_file_read_error", path=str(file_path), error=str(e))
        raise ConfigError(f"Error reading pattern file {file_path}: {e}")
    log.info("patterns_loaded_from_file", path=str(file_path), count=len(patterns))
    return patterns
