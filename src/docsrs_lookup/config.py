"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (DOCSRS_LOOKUP__LOGGING__LEVEL=DEBUG)
  2. docsrs-lookup.yaml     (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional; every field has a default. The cache
location follows the launcher: Alfred exports ``alfred_workflow_cache`` for
every workflow run, and outside Alfred the cache lives in the temp dir.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from docsrs_lookup import __version__

LAUNCHER_CACHE_ENV = "alfred_workflow_cache"
CACHE_SUBDIR = "docsrs"
CACHE_FILENAME = "cache.db"


def default_cache_dir() -> Path:
    """Return the launcher-provided cache dir, or a fixed temp-dir fallback."""
    launcher_dir = os.environ.get(LAUNCHER_CACHE_ENV)
    if launcher_dir:
        return Path(launcher_dir) / CACHE_SUBDIR
    return Path(tempfile.gettempdir()) / CACHE_SUBDIR


def _default_db_path() -> str:
    return str(default_cache_dir() / CACHE_FILENAME)


def _find_config_file() -> str | None:
    """Return the path of the first docsrs-lookup.yaml found, or None."""
    candidates = [
        Path("docsrs-lookup.yaml"),
        Path(platformdirs.user_config_dir("docsrs-lookup")) / "docsrs-lookup.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class RegistrySettings(BaseModel):
    search_url: str = "https://crates.io/api/v1/crates"


class DocsSettings(BaseModel):
    host: str = "https://docs.rs"


class FetcherSettings(BaseModel):
    timeout_seconds: float = 10.0
    max_redirects: int = 5
    user_agent: str = f"docsrs-lookup/{__version__}"


class CacheSettings(BaseModel):
    db_path: str = Field(default_factory=_default_db_path)


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    format: Literal["json", "text"] = "text"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: DOCSRS_LOOKUP__FETCHER__TIMEOUT_SECONDS=5
        env_prefix="DOCSRS_LOOKUP__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    registry: RegistrySettings = RegistrySettings()
    docs: DocsSettings = DocsSettings()
    fetcher: FetcherSettings = FetcherSettings()
    cache: CacheSettings = Field(default_factory=CacheSettings)
    logging: LoggingSettings = LoggingSettings()
    clear_flag: str = "-f"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
