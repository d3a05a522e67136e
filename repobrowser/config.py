"""
Configuration for the repository browser crawler.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from repobrowser.utils.exceptions import ConfigurationError


class CrawlerConfig(BaseModel):
    """Repository crawler configuration."""

    root_repository_uri: str = "https://models.interlis.ch"
    # Locations whose subtrees are skipped while crawling
    repository_ignore_list: list[str] = Field(default_factory=list)


class HttpConfig(BaseModel):
    """HTTP fetcher configuration."""

    timeout: float = 30.0
    max_connections: int = 10
    user_agent: str = "repobrowser-crawler/1.0"
    follow_redirects: bool = True


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_file: bool = False
    log_dir: str = "logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str | None = "zip"
    serialize: bool = True


class Config(BaseModel):
    """Main configuration."""

    crawler: CrawlerConfig = Field(default_factory=CrawlerConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in working directory)

        Returns:
            Config instance

        Environment variables:
            REPOBROWSER_ROOT_REPOSITORY_URI: Root repository location
            REPOBROWSER_REPOSITORY_IGNORE_LIST: Comma separated ignored locations
            REPOBROWSER_HTTP_TIMEOUT: Request timeout in seconds
            REPOBROWSER_HTTP_MAX_CONNECTIONS: Concurrent request limit
            REPOBROWSER_HTTP_USER_AGENT: User-Agent header
            REPOBROWSER_HTTP_FOLLOW_REDIRECTS: Follow redirects for GET requests
            REPOBROWSER_LOG_LEVEL: Log level
            REPOBROWSER_LOG_TO_FILE: Enable file logging
            REPOBROWSER_LOG_DIR: Log directory
        """
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        def get_env(key: str, default: Any = None) -> Any:
            """Get environment variable with type conversion."""
            value = os.getenv(key)
            if value is None or value == "":
                return default
            try:
                if isinstance(default, bool):
                    return str(value).lower() in ("true", "1", "yes")
                if isinstance(default, int):
                    return int(value)
                if isinstance(default, float):
                    return float(value)
                if isinstance(default, list):
                    return [item.strip() for item in value.split(",") if item.strip()]
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid value for {key}: {value}", context={"key": key}
                ) from e
            return value

        return cls(
            crawler=CrawlerConfig(
                root_repository_uri=get_env(
                    "REPOBROWSER_ROOT_REPOSITORY_URI", "https://models.interlis.ch"
                ),
                repository_ignore_list=get_env("REPOBROWSER_REPOSITORY_IGNORE_LIST", []),
            ),
            http=HttpConfig(
                timeout=get_env("REPOBROWSER_HTTP_TIMEOUT", 30.0),
                max_connections=get_env("REPOBROWSER_HTTP_MAX_CONNECTIONS", 10),
                user_agent=get_env("REPOBROWSER_HTTP_USER_AGENT", "repobrowser-crawler/1.0"),
                follow_redirects=get_env("REPOBROWSER_HTTP_FOLLOW_REDIRECTS", True),
            ),
            logging=LoggingConfig(
                level=get_env("REPOBROWSER_LOG_LEVEL", "INFO"),
                log_to_file=get_env("REPOBROWSER_LOG_TO_FILE", False),
                log_dir=get_env("REPOBROWSER_LOG_DIR", "logs"),
                file_rotation=get_env("REPOBROWSER_LOG_FILE_ROTATION", "10 MB"),
                file_retention=get_env("REPOBROWSER_LOG_FILE_RETENTION", "7 days"),
                compression=get_env("REPOBROWSER_LOG_COMPRESSION", "zip"),
                serialize=get_env("REPOBROWSER_LOG_SERIALIZE", True),
            ),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

    @classmethod
    def from_env_or_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str | Path | None = None
    ) -> "Config":
        """
        Load configuration with priority: env vars > YAML > defaults.

        Args:
            yaml_path: Optional path to YAML config
            env_file: Optional path to .env file

        Returns:
            Config instance
        """
        if yaml_path and Path(yaml_path).exists():
            with open(yaml_path) as f:
                config_dict = yaml.safe_load(f) or {}
        else:
            config_dict = {}

        env_config = cls.from_env(env_file=env_file)

        # Merge: env vars override YAML
        final_dict = {**config_dict}

        # Apply env overrides (non-default values)
        default = cls()
        if env_config.crawler != default.crawler:
            final_dict["crawler"] = env_config.crawler.model_dump()
        if env_config.http != default.http:
            final_dict["http"] = env_config.http.model_dump()
        if env_config.logging != default.logging:
            final_dict["logging"] = env_config.logging.model_dump()

        return cls(**final_dict) if final_dict else env_config


# Default config instance
default_config = Config()
