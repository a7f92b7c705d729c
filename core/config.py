"""Configuration models and loading.

Settings sections read their environment variables through pydantic-settings;
the JSON config file provides the values underneath them.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from core.exceptions import ConfigurationError

CONFIG_DIR = Path.home() / ".config" / "worker-bridge"
CONFIG_FILE = CONFIG_DIR / "config.json"


class EnvSettings(BaseSettings):
    """Section whose aliased fields can be overridden from the environment."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
        env_ignore_empty=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment wins over values passed in from the config file
        return env_settings, init_settings, dotenv_settings, file_secret_settings


class ProxySettings(EnvSettings):
    port: int = Field(default=4001, alias="PORT")
    debug: bool = True


class WorkerSettings(EnvSettings):
    base_url: str = Field(default="http://localhost:4002", alias="WORKER_URL")
    internal_api_key: str = Field(default="", alias="INTERNAL_API_KEY")
    timeout: float = Field(default=60.0, alias="WORKER_TIMEOUT", gt=0)


class TenancySettings(EnvSettings):
    default_tenant_id: str | None = Field(default=None, alias="DEFAULT_TENANT_ID")


class LimitSettings(BaseModel):
    max_body_size: int = 10 * 1024 * 1024
    max_connections: int = 100
    max_keepalive_connections: int = 20
    keep_alive_timeout: int = 5


class Config(BaseModel):
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    worker: WorkerSettings = Field(default_factory=WorkerSettings)
    tenancy: TenancySettings = Field(default_factory=TenancySettings)
    limits: LimitSettings = Field(default_factory=LimitSettings)


def load_config(config_file: Path = CONFIG_FILE) -> Config:
    """Load configuration from JSON file, creating default if needed.

    Environment variables are applied on top of the file contents.
    """
    data = _load_file(config_file)
    try:
        return Config(
            proxy=ProxySettings(**data.get("proxy", {})),
            worker=WorkerSettings(**data.get("worker", {})),
            tenancy=TenancySettings(**data.get("tenancy", {})),
            limits=LimitSettings(**data.get("limits", {})),
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def file_defaults() -> dict[str, Any]:
    """Default file contents, without anything taken from the environment."""
    return {
        "proxy": ProxySettings.model_construct().model_dump(),
        "worker": WorkerSettings.model_construct().model_dump(),
        "tenancy": TenancySettings.model_construct().model_dump(),
        "limits": LimitSettings().model_dump(),
    }


def _load_file(config_file: Path) -> dict[str, Any]:
    if not config_file.exists():
        config_file.parent.mkdir(parents=True, exist_ok=True)
        default = file_defaults()
        config_file.write_text(json.dumps(default, indent=2))
        return default

    try:
        data = json.loads(config_file.read_text())
    except json.JSONDecodeError:
        return _reset_file(config_file)
    if not isinstance(data, dict) or not all(isinstance(v, dict) for v in data.values()):
        return _reset_file(config_file)
    return data


def _reset_file(config_file: Path) -> dict[str, Any]:
    """Backup corrupted config and recreate default."""
    backup = config_file.with_suffix(".json.bak")
    config_file.rename(backup)
    default = file_defaults()
    config_file.write_text(json.dumps(default, indent=2))
    return default
