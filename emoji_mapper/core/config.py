"""
Configuration settings for the emoji mapper.

Uses pydantic-settings for environment variable loading (prefix
``EMOJI_MAPPER_``). A YAML file can provide the base values; environment
variables still win over it.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from emoji_mapper.exceptions import ConfigError


ENV_PREFIX = "EMOJI_MAPPER_"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Directory holding the pipeline artifacts
    work_dir: Path = Path("scripts/icon-to-emoji-llm")

    # Input artifacts (relative to work_dir)
    assignments_file: str = "emoji-assignments.json"
    overrides_file: str = "emoji-ties-manually-broken.json"
    groups_dir: str = "emoji-groups"

    # Output artifacts (relative to work_dir)
    mapping_file: str = "emoji-to-icon.json"
    mapping_by_emoji_file: str = "emoji-to-icon-by-emoji.json"
    ties_file: str = "emoji-ties.json"

    # Build logs
    log_dir: Path = Path("scripts/build-logs")

    # Resolution
    consider_alternatives: bool = False

    # Icon grouping for the classifier
    max_group_size: int = Field(default=15, ge=1)
    min_subgroup_size: int = Field(default=3, ge=1)
    max_extras_group_size: int = Field(default=10, ge=1)

    @property
    def assignments_path(self) -> Path:
        return self.work_dir / self.assignments_file

    @property
    def overrides_path(self) -> Path:
        return self.work_dir / self.overrides_file

    @property
    def groups_path(self) -> Path:
        return self.work_dir / self.groups_dir

    @property
    def mapping_path(self) -> Path:
        return self.work_dir / self.mapping_file

    @property
    def mapping_by_emoji_path(self) -> Path:
        return self.work_dir / self.mapping_by_emoji_file

    @property
    def ties_path(self) -> Path:
        return self.work_dir / self.ties_file

    @classmethod
    def from_yaml(cls, path: str) -> "Settings":
        """
        Load settings from YAML file.

        Raises:
            ConfigError: unreadable file, invalid YAML, or a non-mapping document
        """
        config_path = Path(path)

        if not config_path.exists():
            # Return defaults if no config file
            return cls()

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(str(config_path), str(e)) from e

        if not isinstance(data, dict):
            raise ConfigError(str(config_path), f"expected a mapping, got {type(data).__name__}")

        # Environment variables take precedence over the file
        data = cls._drop_env_overridden(data)

        return cls(**data)

    @classmethod
    def _drop_env_overridden(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        """Remove YAML keys that are also set in the environment."""
        return {
            key: value
            for key, value in data.items()
            if f"{ENV_PREFIX}{key}".upper() not in os.environ
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    for candidate in (Path("emoji_mapper.yaml"), Path("emoji_mapper.yml")):
        if candidate.exists():
            return Settings.from_yaml(str(candidate))
    return Settings()


def load_settings(config_path: Optional[str] = None) -> Settings:
    """Load settings from an explicit YAML path, or the cached defaults."""
    if config_path:
        return Settings.from_yaml(config_path)
    return get_settings()
