"""Configuration loaded from .medcms.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".medcms.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
]
GLOBAL_CONFIG = Path.home() / ".config" / "medcms" / "config.toml"


class StorageConfig(BaseModel):
    """[storage] section."""

    data_dir: str = "./.medcms"


class ExportConfig(BaseModel):
    """[export] section."""

    directory: str = "."
    exported_by: str = "CMS User"


class LoggingConfig(BaseModel):
    """[logging] section."""

    level: str = "WARNING"


class CMSConfig(BaseModel):
    """Top-level configuration model."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def data_path(self) -> Path:
        return Path(self.storage.data_dir).expanduser()

    @property
    def export_path(self) -> Path:
        return Path(self.export.directory).expanduser()


def load_config(path: str | Path | None = None) -> CMSConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .medcms.toml in CWD
    3. ~/.config/medcms/config.toml

    Then overlay environment variables.

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged CMSConfig.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        if not data and GLOBAL_CONFIG.exists():
            data = _load_toml(GLOBAL_CONFIG)
            logger.info("Loaded config from %s", GLOBAL_CONFIG)

    config = CMSConfig.model_validate(data) if data else CMSConfig()
    return _apply_env_vars(config)


def merge_cli_overrides(config: CMSConfig, **cli_kwargs: object) -> CMSConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was explicitly provided
    (i.e., not None).
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "data_dir": ("storage", "data_dir"),
        "export_dir": ("export", "directory"),
        "exported_by": ("export", "exported_by"),
        "log_level": ("logging", "level"),
    }

    for key, value in cli_kwargs.items():
        if value is None or key not in mapping:
            continue
        section, field = mapping[key]
        data[section][field] = str(value)

    return CMSConfig.model_validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: CMSConfig) -> CMSConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "MEDCMS_DATA_DIR": ("storage", "data_dir"),
        "MEDCMS_EXPORT_DIR": ("export", "directory"),
        "MEDCMS_EXPORTED_BY": ("export", "exported_by"),
        "MEDCMS_LOG_LEVEL": ("logging", "level"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    return CMSConfig.model_validate(data)
