"""
ignore_hub.config - User Settings
=================================

Optional user configuration, read from a TOML file::

    # ~/.config/ignore-hub/config.toml
    output = ".gitignore"
    simple_separator = false
    cache_dir = "~/.cache/ignore-hub"
    timeout = 15.0
    log_level = "WARNING"

Lookup order for the file: ``$IGNORE_HUB_CONFIG``, then
``~/.config/ignore-hub/config.toml``. A missing file means defaults.

Precedence
----------
command-line flags > environment variables > config file > defaults

Every setting can be overridden by an ``IGNORE_HUB_<NAME>`` environment
variable (``IGNORE_HUB_CACHE_DIR``, ``IGNORE_HUB_LOG_LEVEL``...). Loading goes
through pydantic-settings: environment and TOML file are two settings
sources of the same model.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    SettingsError,
    TomlConfigSettingsSource,
)


ENV_PREFIX = "IGNORE_HUB_"
CONFIG_ENV_VAR = f"{ENV_PREFIX}CONFIG"

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "ignore-hub" / "config.toml"
DEFAULT_CACHE_DIR = Path.home() / ".cache" / "ignore-hub"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """
    Persistent defaults for ignore-hub.

    Values come from, highest priority first: keyword arguments,
    ``IGNORE_HUB_*`` environment variables, the TOML config file, defaults.

    Attributes
    ----------
    output : Path
        Default output file, relative paths resolve against the working
        directory.

    simple_separator : bool
        Default for ``--simple-separation``.

    cache_dir : Path
        Directory holding ``index.json``.

    timeout : float
        HTTP timeout in seconds.

    log_level : str
        Logging level name when ``--verbose`` is not given.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
    )

    output: Path = Field(default=Path(".gitignore"))
    simple_separator: bool = False
    cache_dir: Path = Field(default=DEFAULT_CACHE_DIR)
    timeout: float = Field(default=15.0, gt=0)
    log_level: str = "WARNING"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Environment beats the TOML file; no .env or secrets directory."""
        return (init_settings, env_settings, TomlConfigSettingsSource(settings_cls))

    @field_validator("cache_dir", "output")
    @classmethod
    def expand_user(cls, v: Path) -> Path:
        """Expand ``~`` so config files can use home-relative paths."""
        return v.expanduser()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept level names in any case."""
        level = v.upper().strip()
        if level not in _LOG_LEVELS:
            msg = f"Invalid log level '{v}'. Valid: {', '.join(sorted(_LOG_LEVELS))}"
            raise ValueError(msg)
        return level

    @property
    def cache_file(self) -> Path:
        """Location of the cached template index."""
        return self.cache_dir / "index.json"

    @classmethod
    def from_toml(cls, path: Path) -> Settings:
        """
        Load settings from a TOML file, still letting the environment win.

        Raises
        ------
        ValueError
            If the file is not valid TOML or a value is invalid.
        """

        class FileSettings(cls):
            model_config = SettingsConfigDict(toml_file=path)

        try:
            return FileSettings()
        except (tomllib.TOMLDecodeError, SettingsError, ValidationError) as e:
            msg = f"Invalid config file {path}: {e}"
            raise ValueError(msg) from e


def config_path() -> Path:
    """Path of the config file that :func:`load_settings` reads."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_PATH


def load_settings(path: Path | None = None) -> Settings:
    """
    Load settings from ``path`` (or the default location) plus environment.

    Parameters
    ----------
    path : Path | None
        Explicit config file. ``None`` uses :func:`config_path`.

    Returns
    -------
    Settings
        Defaults overridden by the file and then by the environment.

    Raises
    ------
    ValueError
        If the file or an ``IGNORE_HUB_*`` variable holds an invalid value.
    """
    path = path or config_path()
    if path.is_file():
        return Settings.from_toml(path)

    try:
        return Settings()
    except (SettingsError, ValidationError) as e:
        msg = f"Invalid {ENV_PREFIX}* environment variable: {e}"
        raise ValueError(msg) from e
