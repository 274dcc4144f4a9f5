"""
Configuration Settings

Type-safe configuration for the daemon, loaded once at startup from
environment variables (and an optional .env file).

Create a .env file with:
- DB_USER, DB_PASSWORD, DB_HOST, DB_NAME (required)
- CACHE_PATH, STATE_FILE, CHECK_INTERVAL (optional)
"""

from typing import Any, Literal

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

from .exceptions import ConfigError

DEFAULT_ENV_FILE = ".env"
DEFAULT_CACHE_PATH = "/var/run/nginx-cache/"
DEFAULT_STATE_FILE = "/var/run/nginx-cache-sync.last"
DEFAULT_CHECK_INTERVAL = 60

# WordPress option written by the cache plugin whenever a purge is requested
MARKER_OPTION_NAME = "nginx_cache_last_cleared"


def split_host(host: str) -> tuple[str, int | None]:
    """
    Split a "host[:port]" string.

    Bracketed IPv6 literals ("[::1]:3306") are unwrapped.
    """
    name, sep, port = host.rpartition(":")
    if sep and name and port.isdigit():
        return name.strip("[]"), int(port)
    return host.strip("[]"), None


class Settings(BaseSettings):
    """Daemon settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=DEFAULT_ENV_FILE,
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        populate_by_name=True,
    )

    # Database credentials
    db_user: str = Field(min_length=1)
    db_password: str = Field(min_length=1)
    db_host: str = Field(min_length=1)
    db_name: str = Field(min_length=1)
    db_table_prefix: str = Field(default="wp_", pattern=r"^[A-Za-z0-9_]*$")
    db_connect_timeout: int | None = Field(default=None, gt=0)

    # Cache and local state
    cache_path: str = Field(
        default=DEFAULT_CACHE_PATH,
        validation_alias=AliasChoices("CACHE_PATH", "NGINX_CACHE_PATH"),
    )
    state_file: str = Field(
        default=DEFAULT_STATE_FILE,
        validation_alias=AliasChoices("STATE_FILE", "NGINX_CACHE_STATE_FILE"),
    )
    check_interval: int = Field(
        default=DEFAULT_CHECK_INTERVAL,
        gt=0,
        validation_alias=AliasChoices("CHECK_INTERVAL", "NGINX_CACHE_CHECK_INTERVAL"),
    )

    # Cache-clear action
    clear_method: Literal["native", "find"] = "native"
    clear_timeout: int | None = Field(default=None, gt=0)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        validation_alias="NGINX_CACHE_SYNC_LOG_LEVEL",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        validation_alias="NGINX_CACHE_SYNC_LOG_FORMAT",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @field_validator("log_format", mode="before")
    @classmethod
    def _lower_format(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    @property
    def options_table(self) -> str:
        """Name of the WordPress options table"""
        return f"{self.db_table_prefix}options"

    @property
    def database_url(self) -> URL:
        """SQLAlchemy URL for the MySQL database (PyMySQL driver)"""
        host, port = split_host(self.db_host)
        return URL.create(
            "mysql+pymysql",
            username=self.db_user,
            password=self.db_password,
            host=host,
            port=port,
            database=self.db_name,
        )

    def summary(self) -> dict[str, Any]:
        """Settings suitable for logging (password masked)"""
        return {
            "db_user": self.db_user,
            "db_password": "***",
            "db_host": self.db_host,
            "db_name": self.db_name,
            "options_table": self.options_table,
            "db_connect_timeout": self.db_connect_timeout,
            "cache_path": self.cache_path,
            "state_file": self.state_file,
            "check_interval": self.check_interval,
            "clear_method": self.clear_method,
            "clear_timeout": self.clear_timeout,
            "log_level": self.log_level,
            "log_format": self.log_format,
        }


def load_settings(env_file: str | None = DEFAULT_ENV_FILE) -> Settings:
    """
    Load and validate settings.

    Args:
        env_file: Optional .env file to read in addition to the environment
            (None disables .env loading)

    Raises:
        ConfigError: A required value is missing or a value is invalid
    """
    try:
        return Settings(_env_file=env_file)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in err['loc']).upper()}: {err['msg']}"
            for err in e.errors()
        ]
        raise ConfigError("; ".join(errors), errors=errors) from e
