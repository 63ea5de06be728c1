"""
Configuration for llmgather.

Holds the per-run settings dataclasses and the TOML loader that supplies
named pattern profiles.
"""
from .settings import GatherConfig, PatternProfile, DEFAULT_PROFILE_NAME

__all__ = ["GatherConfig", "PatternProfile", "DEFAULT_PROFILE_NAME"]
