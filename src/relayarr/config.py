"""Configuration loading for relayarr.

The configuration file is YAML with three sections: ``global``, ``arrs``
(push targets) and ``indexers`` (enabled definitions and their settings).
"""

from enum import StrEnum
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator


class ConfigError(ValueError):
    """Configuration file is unreadable or invalid."""


class ArrType(StrEnum):
    """Supported arr application families."""

    RADARR = "radarr"
    SONARR = "sonarr"
    LIDARR = "lidarr"
    READARR = "readarr"
    WHISPARR = "whisparr"


class GlobalConfig(BaseModel):
    """Process-wide settings."""

    loglevel: str = "info"
    definitions_dirs: list[str] = Field(default_factory=list)
    include_bundled_definitions: bool = True
    strict_definitions: bool = False
    notification_urls: list[str] = Field(default_factory=list)
    push_attempts: int = Field(1, ge=1, description="Attempts per push, 1 = no retry")


class ArrConfig(BaseModel):
    """One arr application to push releases to."""

    name: str
    type: ArrType
    host: str
    api_key: str
    basic_auth: bool = False
    username: str = ""
    password: str = ""
    timeout: float = Field(120.0, gt=0)
    download_client: str = ""
    download_client_id: int = 0
    indexers: list[str] = Field(
        default_factory=list, description="Indexers routed here, empty = all"
    )
    max_in_flight: int | None = Field(None, ge=1)

    @model_validator(mode="after")
    def _check_basic_auth(self) -> "ArrConfig":
        if self.basic_auth and not self.username:
            raise ValueError(f"{self.name}: basic_auth requires a username")
        return self


class IndexerConfig(BaseModel):
    """An enabled definition and the operator's values for its settings."""

    identifier: str
    enabled: bool = True
    settings: dict[str, str] = Field(default_factory=dict)


class RelayarrConfig(BaseModel):
    """Root configuration model."""

    model_config = ConfigDict(populate_by_name=True)

    global_config: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    arrs: list[ArrConfig] = Field(default_factory=list)
    indexers: list[IndexerConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_unique_names(self) -> "RelayarrConfig":
        names = [arr.name for arr in self.arrs]
        if len(names) != len(set(names)):
            raise ValueError("arr names must be unique")
        identifiers = [indexer.identifier for indexer in self.indexers]
        if len(identifiers) != len(set(identifiers)):
            raise ValueError("indexer identifiers must be unique")
        return self

    @property
    def enabled_indexers(self) -> list[IndexerConfig]:
        return [indexer for indexer in self.indexers if indexer.enabled]


def load_config(content: str) -> RelayarrConfig:
    """Parse configuration YAML without touching the global config.

    Args:
        content: YAML text.

    Returns:
        RelayarrConfig: The parsed configuration.

    Raises:
        ConfigError: If the YAML is invalid or does not validate.
    """
    try:
        data = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")
    try:
        return RelayarrConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(str(e)) from e


# Global configuration instance
cfg: RelayarrConfig = RelayarrConfig()


def init_config(path: str | Path) -> RelayarrConfig:
    """Load the configuration file into the global ``cfg``.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        RelayarrConfig: The loaded configuration.

    Raises:
        ConfigError: If the file cannot be read or is invalid.
    """
    global cfg
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    cfg = load_config(content)
    return cfg
