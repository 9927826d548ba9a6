"""Settings file loading and validation."""

import logging
from pathlib import Path

from pydantic import BaseModel, Field, HttpUrl, ValidationError
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from .consts import LOG_FILE_DEFAULT, TIMEOUT_HTTP_REQUEST
from .errors import ConfigException
from .utils import format_validation_error

logger = logging.getLogger(__name__)


class ServerConfig(BaseModel):
    """DNS server connection settings."""

    url: HttpUrl | None = None
    token: str = ""
    node: str | None = None
    timeout: int = Field(default=TIMEOUT_HTTP_REQUEST, ge=1)
    verify_ssl: bool = True

    @property
    def base_url(self) -> str:
        if self.url is None:
            raise ConfigException("server.url is not configured")
        return str(self.url).rstrip("/")


class Settings(BaseSettings):
    """Application settings."""

    log_file: str = Field(default=LOG_FILE_DEFAULT)
    server: ServerConfig = Field(default_factory=ServerConfig)

    model_config = SettingsConfigDict(
        env_prefix="APPFORM_",
        env_nested_delimiter="__",
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
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls),
        )

    @classmethod
    def load_from_file(cls, config_path: str) -> "Settings":
        """Load settings from specified path, with environment overrides."""
        path = Path(config_path)
        if not path.exists():
            raise ConfigException(f"Settings file not found: {config_path}")

        class _Settings(cls):
            model_config = SettingsConfigDict(
                toml_file=str(path),
                env_prefix="APPFORM_",
                env_nested_delimiter="__",
            )

        try:
            return _Settings()
        except ValidationError as e:
            raise ConfigException(format_validation_error(e, "Settings validation failed:")) from e
        except ValueError as e:
            raise ConfigException(f"Invalid settings file {config_path}: {e}") from e

    @classmethod
    def from_env(cls) -> "Settings":
        try:
            return cls()
        except ValidationError as e:
            raise ConfigException(format_validation_error(e, "Settings validation failed:")) from e
