from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
import structlog

from llmgather.exceptions import ConfigError

log = structlog.get_logger(__name__)

DEFAULT_PROFILE_NAME = "Default"
DEFAULT_TARGET = "."
DEFAULT_MAX_LINES_PER_FILE = 1000
DEFAULT_MAX_FILE_SIZE = 0  # bytes; 0 means unlimited.
DEFAULT_SHOW_TREE = True
DEFAULT_CONSOLE_SHOW_SUMMARY = True

DEFAULT_EXCLUDE_PATTERNS = [
    "Library/**", "Temp/**", "Logs/**", "UserSettings/**",
    "obj/**", "Build/**", "*.csproj", "*.sln",
    "*.userprefs", "*.suo", "*.meta",
]

DEFAULT_SKIP_CONTENT_PATTERNS = [
    "*.dll", "*.asset", "*.prefab", "*.unity", "*.png", "*.jpg", "*.tga", "*.psd",
    "*.fbx", "*.obj", "*.blend", "*.max", "*.ma",
    "*.anim", "*.controller", "*.mat", "*.spriteatlas",
    "*.ttf", "*.otf",
    "*.mp3", "*.wav", "*.ogg",
]

@dataclass
class PatternProfile:
    # the three glob lists that decide what a run lists and what it prints.
    exclude_patterns: List[str] = field(default_factory=list)
    skip_content_patterns: List[str] = field(default_factory=list)
    include_patterns: List[str] = field(default_factory=list)

    @classmethod
    def create_default(cls) -> "PatternProfile":
        return cls(
            exclude_patterns=list(DEFAULT_EXCLUDE_PATTERNS),
            skip_content_patterns=list(DEFAULT_SKIP_CONTENT_PATTERNS),
            include_patterns=[],
        )

    def extended(
        self,
        exclude: Optional[List[str]] = None,
        skip_content: Optional[List[str]] = None,
        include: Optional[List[str]] = None,
    ) -> "PatternProfile":
        # returns a new profile with extra patterns appended; self is left untouched.
        return PatternProfile(
            exclude_patterns=[*self.exclude_patterns, *(exclude or [])],
            skip_content_patterns=[*self.skip_content_patterns, *(skip_content or [])],
            include_patterns=[*self.include_patterns, *(include or [])],
        )

@dataclass
class GatherConfig:
    # holds all configuration parameters for a single gather run.
    target: str = DEFAULT_TARGET
    project_root: Optional[Path] = None
    max_lines_per_file: int = DEFAULT_MAX_LINES_PER_FILE
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    profile: PatternProfile = field(default_factory=PatternProfile.create_default)
    profile_name: str = DEFAULT_PROFILE_NAME
    show_tree: bool = DEFAULT_SHOW_TREE
    follow_symlinks: bool = False
    output_file: Optional[Path] = None
    open_after_generate: bool = False
    console_show_summary: bool = DEFAULT_CONSOLE_SHOW_SUMMARY

    def __post_init__(self):
        # validates limits and pins the project root to an absolute path.
        if isinstance(self.max_lines_per_file, bool) or not isinstance(self.max_lines_per_file, int) \
                or self.max_lines_per_file < 1:
            raise ConfigError(f"max_lines_per_file must be a positive integer, got {self.max_lines_per_file!r}")
        if isinstance(self.max_file_size, bool) or not isinstance(self.max_file_size, int) \
                or self.max_file_size < 0:
            raise ConfigError(f"max_file_size must be a non-negative integer, got {self.max_file_size!r}")
        root = Path(self.project_root) if self.project_root is not None else Path.cwd()
        self.project_root = root.resolve()
        if self.output_file is not None:
            self.output_file = Path(self.output_file)
        log.debug(
            "gather_config_initialized",
            project_root=str(self.project_root),
            target=self.target,
            profile=self.profile_name,
        )
