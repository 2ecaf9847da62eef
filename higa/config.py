"""
Configuration management for the higa client.

This module handles loading, validation, and management of client
configuration from YAML files and environment variables.
"""

import os
import re
import yaml
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .exceptions import ConfigurationError
from .models import APIVersion


DEFAULT_USER_AGENT = "Higa (https://github.com/fantomitechno/Higa, 1.0.0-dev)"

_ENV_PATTERN = re.compile(r'\$\{([^}]+)\}')


@dataclass
class HTTPConfig:
    """Credential and endpoint configuration for the REST API."""
    token: str = ""
    token_type: str = "Bot"
    host: str = "discord.com"
    api_version: int = 9
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = 30.0

    @property
    def base_url(self) -> str:
        """Root URL every endpoint path is appended to."""
        return f"https://{self.host}/api/v{self.api_version}"


@dataclass
class RetryConfig:
    """
    Retry policy applied at the transport boundary.

    Retries are disabled by default (``max_retries == 0``) so every failure
    reaches the caller on the first attempt.
    """
    max_retries: int = 0
    base_delay: float = 1.0
    max_delay: float = 60.0
    exponential_base: float = 2
    retry_statuses: Tuple[int, ...] = (429, 500, 502, 503, 504)


@dataclass
class Config:
    """Main client configuration."""
    http: HTTPConfig = field(default_factory=HTTPConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    log_level: str = "INFO"
    log_file: Optional[str] = None
    structured_logs: bool = False

    def __post_init__(self):
        """Post-initialization to expand paths."""
        if self.log_file:
            self.log_file = os.path.expanduser(self.log_file)

    def validate(self) -> None:
        """Validate configuration and raise ConfigurationError if invalid."""
        errors = []

        if not self.http.token:
            errors.append("API token is required")

        if not self.http.token_type:
            errors.append("Token type is required")

        if not self.http.host:
            errors.append("API host is required")

        valid_versions = {version.value for version in APIVersion}
        if self.http.api_version not in valid_versions:
            errors.append(
                f"api_version must be one of: {', '.join(str(v) for v in sorted(valid_versions))}"
            )

        if self.http.timeout <= 0:
            errors.append("HTTP timeout must be positive")

        if self.retry.max_retries < 0:
            errors.append("max_retries must not be negative")

        if self.retry.base_delay < 0 or self.retry.max_delay < 0:
            errors.append("Retry delays must not be negative")

        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.log_level not in valid_log_levels:
            errors.append(f"log_level must be one of: {', '.join(sorted(valid_log_levels))}")

        if errors:
            raise ConfigurationError("Configuration validation failed", "; ".join(errors))


def expand_env_vars(value: Any) -> Any:
    """Replace ``${VAR}`` references in strings, recursing into containers."""
    if isinstance(value, str):
        return _ENV_PATTERN.sub(lambda match: os.getenv(match.group(1), match.group(0)), value)
    if isinstance(value, dict):
        return {key: expand_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    return value


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to configuration file. If None, uses default locations.

    Returns:
        Config: Loaded and validated configuration.

    Raises:
        ConfigurationError: If configuration cannot be loaded or is invalid.
    """
    config = Config()

    if config_path is None:
        possible_paths = [
            "higa.yaml",
            "~/.higa/config.yaml",
        ]

        for path in possible_paths:
            expanded_path = os.path.expanduser(path)
            if os.path.exists(expanded_path):
                config_path = expanded_path
                break

    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                yaml_data = expand_env_vars(yaml.safe_load(f))

            if yaml_data is not None:
                config = _merge_config_data(config, yaml_data)

        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to load config file {config_path}", str(e))

    config = _load_env_overrides(config)

    config.validate()

    return config


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Return a mapping section of the YAML data; an empty section is skipped."""
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigurationError(
            f"Config section '{name}' must be a mapping",
            f"got {type(section).__name__}"
        )
    return section


def _merge_config_data(config: Config, data: Dict[str, Any]) -> Config:
    """Merge YAML data into configuration object."""
    if not isinstance(data, dict):
        raise ConfigurationError(
            "Config file must contain a mapping",
            f"got {type(data).__name__}"
        )

    http_data = _section(data, 'http')
    for key in ('token', 'token_type', 'host', 'api_version', 'user_agent', 'timeout'):
        if key in http_data:
            setattr(config.http, key, http_data[key])

    retry_data = _section(data, 'retry')
    for key in ('max_retries', 'base_delay', 'max_delay', 'exponential_base'):
        if key in retry_data:
            setattr(config.retry, key, retry_data[key])
    if 'retry_statuses' in retry_data:
        config.retry.retry_statuses = tuple(retry_data['retry_statuses'] or ())

    if 'log_level' in data:
        config.log_level = data['log_level']
    if 'log_file' in data:
        config.log_file = os.path.expanduser(data['log_file']) if data['log_file'] else None
    if 'structured_logs' in data:
        config.structured_logs = bool(data['structured_logs'])

    return config


def _env_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value:
        try:
            return int(value)
        except ValueError:
            raise ConfigurationError(f"Environment variable {name} must be an integer", value)
    return None


def _load_env_overrides(config: Config) -> Config:
    """Load configuration overrides from environment variables."""

    token = os.getenv('HIGA_TOKEN')
    if token:
        config.http.token = token

    token_type = os.getenv('HIGA_TOKEN_TYPE')
    if token_type:
        config.http.token_type = token_type

    host = os.getenv('HIGA_API_HOST')
    if host:
        config.http.host = host

    api_version = _env_int('HIGA_API_VERSION')
    if api_version is not None:
        config.http.api_version = api_version

    max_retries = _env_int('HIGA_MAX_RETRIES')
    if max_retries is not None:
        config.retry.max_retries = max_retries

    log_level = os.getenv('HIGA_LOG_LEVEL')
    if log_level:
        config.log_level = log_level.upper()

    return config


def create_default_config_file(path: str) -> None:
    """Create a default configuration file at the specified path."""

    default_config = {
        'http': {
            'token': '${HIGA_TOKEN}',
            'token_type': 'Bot',
            'host': 'discord.com',
            'api_version': 9,
            'timeout': 30.0
        },
        'retry': {
            'max_retries': 0,
            'base_delay': 1.0,
            'max_delay': 60.0,
            'exponential_base': 2,
            'retry_statuses': [429, 500, 502, 503, 504]
        },
        'log_level': 'INFO',
        'log_file': None,
        'structured_logs': False
    }

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(path, 'w') as f:
        yaml.dump(default_config, f, default_flow_style=False, indent=2)
