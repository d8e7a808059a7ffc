"""Configuration management for Content Index."""

import json
import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

from . import CIX_DIR, COMMIT_INDEX_FILE, CONFIG_FILE, INDEX_FILE
from .errors import ConfigError
from .hasher import DEFAULT_ALGORITHM, check_algorithm


class ContentIndexConfig(BaseModel):
    """Configuration for Content Index."""

    version: int = 1
    index_file: str = INDEX_FILE
    commit_index_file: str = COMMIT_INDEX_FILE
    hash_algorithm: str = DEFAULT_ALGORITHM
    strict_records: bool = False
    on_hash_collision: Literal["keep_last", "error"] = "keep_last"
    exclude_patterns: list[str] = Field(
        default=[
            CIX_DIR,
            ".git",
            "__pycache__",
            "*.pyc",
            "*.tmp",
        ]
    )

    @field_validator("hash_algorithm")
    @classmethod
    def _known_algorithm(cls, value: str) -> str:
        return check_algorithm(value)

    @field_validator("index_file", "commit_index_file")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("index file name must not be empty")
        return value


def get_cix_dir(project_root: Path) -> Path:
    """Get the .content-index directory path."""
    return project_root / CIX_DIR


def get_config_path(project_root: Path) -> Path:
    """Get the config file path."""
    return get_cix_dir(project_root) / CONFIG_FILE


def get_index_path(project_root: Path, config: ContentIndexConfig) -> Path:
    """Get the filename-keyed index file path."""
    return get_cix_dir(project_root) / config.index_file


def get_commit_index_path(project_root: Path, config: ContentIndexConfig) -> Path:
    """Get the hash-keyed commit index file path."""
    return get_cix_dir(project_root) / config.commit_index_file


def load_config(project_root: Path) -> ContentIndexConfig:
    """Load configuration from the project's config file.

    Falls back to defaults if file doesn't exist.
    Environment variables can override config values.

    Raises:
        ConfigError: the file is unreadable, not JSON, or fails validation
    """
    config_path = get_config_path(project_root)

    try:
        if config_path.exists():
            with open(config_path) as f:
                data = json.load(f)
            config = ContentIndexConfig.model_validate(data)
        else:
            config = ContentIndexConfig()

        # Apply environment variable overrides
        config = _apply_env_overrides(config)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise ConfigError(str(config_path), e) from e

    return config


def save_config(config: ContentIndexConfig, project_root: Path) -> None:
    """Save configuration to the project's config file."""
    config_path = get_config_path(project_root)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        json.dump(config.model_dump(), f, indent=2)


def _apply_env_overrides(config: ContentIndexConfig) -> ContentIndexConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    # CIX_HASH_ALGORITHM
    if algorithm := os.environ.get("CIX_HASH_ALGORITHM"):
        data["hash_algorithm"] = algorithm

    # CIX_STRICT_RECORDS
    if strict := os.environ.get("CIX_STRICT_RECORDS"):
        data["strict_records"] = strict.lower() in ("1", "true", "yes", "on")

    return ContentIndexConfig.model_validate(data)
