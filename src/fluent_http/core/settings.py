"""
Configuration loading from environment variables, .env files and
YAML/JSON files.

Priority (highest to lowest): explicit overrides, environment variables
(FLUENT_HTTP_*), .env file, defaults.
"""

import json
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config import (
    DEFAULT_CONTENT_TYPE,
    ConnectionPoolConfig,
    HttpClientConfig,
    SecurityConfig,
    TimeoutConfig,
)
from .exceptions import ConfigurationError
from .logging.config import LoggingConfig


class ConfigValidationError(ConfigurationError):
    """Raised when a configuration file or environment is invalid."""
    pass


class ClientSettings(BaseSettings):
    """
    fluent-http-client settings from the environment.

    Example .env file:
        FLUENT_HTTP_BASE_URL=https://api.example.com
        FLUENT_HTTP_TIMEOUT_CONNECT=5
        FLUENT_HTTP_TIMEOUT_READ=30
        FLUENT_HTTP_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="FLUENT_HTTP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: Optional[str] = None
    default_content_type: str = DEFAULT_CONTENT_TYPE

    timeout_connect: float = Field(default=5.0, gt=0)
    timeout_read: float = Field(default=30.0, gt=0)

    pool_connections: int = Field(default=10, ge=1)
    pool_maxsize: int = Field(default=10, ge=1)

    verify_ssl: bool = True
    allow_redirects: bool = True

    log_enabled: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file_path: Optional[str] = None

    def to_config(self) -> HttpClientConfig:
        logging_config = None
        if self.log_enabled:
            logging_config = LoggingConfig.create(
                level=self.log_level,
                format=self.log_format,
                enable_file=self.log_file_path is not None,
                file_path=self.log_file_path,
            )

        return HttpClientConfig(
            base_url=self.base_url or None,
            default_content_type=self.default_content_type,
            timeout=TimeoutConfig(connect=self.timeout_connect, read=self.timeout_read),
            pool=ConnectionPoolConfig(
                pool_connections=self.pool_connections,
                pool_maxsize=self.pool_maxsize,
            ),
            security=SecurityConfig(
                verify_ssl=self.verify_ssl,
                allow_redirects=self.allow_redirects,
            ),
            logging=logging_config,
        )


def load_from_env(env_file: Optional[str] = None, **overrides: Any) -> HttpClientConfig:
    """
    Load HttpClientConfig from environment variables and an optional .env file.

    Example:
        >>> config = load_from_env()
        >>> config = load_from_env(env_file=".env.production", base_url="https://custom.api.com")
    """
    if env_file is not None:
        overrides["_env_file"] = env_file
    try:
        settings = ClientSettings(**overrides)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid environment configuration: {e}") from e
    return settings.to_config()


def load_from_file(path: Union[str, Path]) -> HttpClientConfig:
    """
    Load HttpClientConfig from a YAML (.yaml/.yml) or JSON file.

    Keys are the same as ClientSettings fields.

    Example config.yaml:
        base_url: https://api.example.com
        timeout_read: 60
        log_enabled: true

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigValidationError: If the file cannot be parsed or has invalid values
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    data = _read_file(path)
    if not isinstance(data, dict):
        raise ConfigValidationError(f"Config file {path} must contain a mapping")

    try:
        # Only the file's values; the environment is not consulted here
        settings = ClientSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid config in {path}: {e}") from e
    return settings.to_config()


def _read_file(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        import yaml

        try:
            return yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML syntax in {path}: {e}") from e
    if path.suffix.lower() == ".json":
        try:
            return json.loads(text or "{}")
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid JSON syntax in {path}: {e}") from e
    raise ConfigValidationError(f"Unsupported config file format: {path.suffix}")
