"""
Configuration loader — reads uam.yml into a validated ``Settings`` model.

Precedence: CLI flag > UAM_* environment variable > uam.yml > default.
Without a uam.yml, documents live in the current directory.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from uam.core.errors import UamError

logger = logging.getLogger(__name__)

CONFIG_FILE = "uam.yml"
DEFAULT_SOURCE_URL = (
    "https://raw.githubusercontent.com/WilliamWolfy/Universal_Automation_Manager/refs/heads/main/"
)


class ConfigError(UamError):
    """Raised when uam.yml is invalid or unreadable."""


class Settings(BaseModel):
    """Everything the workspace needs, passed explicitly to each component."""

    model_config = ConfigDict(extra="forbid")

    language: str = "en"
    data_dir: Path | None = None
    tasks_file: str = "tasks.json"
    profiles_file: str = "profiles.json"
    lang_file: str = "lang.json"
    cache_dir: str = "packages"
    source_url: str = DEFAULT_SOURCE_URL

    platform: Literal["linux", "windows", "macos"] | None = None
    package_manager: str | None = None

    interactive: bool = True
    strict_fallback: bool = False
    cache_mode: Literal["normal", "force", "cache"] = "normal"

    config_path: Path | None = Field(default=None, exclude=True)

    @property
    def base_dir(self) -> Path:
        return self.data_dir or Path.cwd()

    @property
    def tasks_path(self) -> Path:
        return self.base_dir / self.tasks_file

    @property
    def profiles_path(self) -> Path:
        return self.base_dir / self.profiles_file

    @property
    def lang_path(self) -> Path:
        return self.base_dir / self.lang_file

    @property
    def cache_path(self) -> Path:
        return self.base_dir / self.cache_dir

    def document_paths(self) -> list[Path]:
        return [self.lang_path, self.tasks_path, self.profiles_path]


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for uam.yml starting from the given directory, walking up."""
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def _read_yaml(path: Path) -> dict:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
    return data


def load_settings(
    path: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
    search: bool = True,
) -> Settings:
    """Load settings from uam.yml and the environment.

    Args:
        path: Explicit uam.yml. If None and ``search`` is set, searches upward.
        env: Environment mapping (default: ``os.environ``).

    Raises:
        ConfigError: If the file is missing (when explicit) or invalid.
    """
    env = os.environ if env is None else env

    if path is None and search:
        path = find_config_file()

    data: dict = {}
    if path is not None:
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        logger.debug("Loading settings from %s", path)
        data = _read_yaml(path)

    if env.get("UAM_LANG"):
        data["language"] = env["UAM_LANG"]
    if env.get("UAM_PLATFORM"):
        data["platform"] = env["UAM_PLATFORM"]

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    root = path.parent.resolve() if path is not None else Path.cwd()
    if settings.data_dir is None:
        settings.data_dir = root
    elif not settings.data_dir.is_absolute():
        settings.data_dir = (root / settings.data_dir).resolve()
    settings.config_path = path

    logger.info("Settings: language=%s data_dir=%s", settings.language, settings.data_dir)
    return settings
