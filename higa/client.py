"""
Client context for the higa library.

The Client owns the configuration, the cache and the HTTP transport, and
hands them to each resource manager. Nothing is shared between Client
instances.
"""

import logging
from dataclasses import replace
from typing import Optional

from .cache import CacheManager
from .config import Config, HTTPConfig, load_config
from .error_handler import ErrorHandler
from .http import HTTPClient
from .logging_config import setup_logging
from .managers import ChannelManager


class Client:
    """
    Entry point of the library.

    Example::

        async with Client(token="...") as client:
            channel = await client.channels.get_channel("41771983423143937")
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        *,
        token: Optional[str] = None,
        token_type: Optional[str] = None,
        api_version: Optional[int] = None,
        base_url: Optional[str] = None
    ):
        """
        Initialize the client.

        Args:
            config: Full configuration; a default one is built when omitted
            token: Credential, overriding the configured one
            token_type: Credential scheme (``Bot`` or ``Bearer``)
            api_version: API version, overriding the configured one
            base_url: Override for the API root (mainly for tests)
        """
        config = config or Config(http=HTTPConfig())

        http_overrides = {}
        if token is not None:
            http_overrides['token'] = token
        if token_type is not None:
            http_overrides['token_type'] = token_type
        if api_version is not None:
            http_overrides['api_version'] = int(api_version)

        # Overrides apply to a private copy of the config
        self.config = replace(
            config,
            http=replace(config.http, **http_overrides),
            retry=replace(config.retry)
        )

        self.config.validate()

        self.logger = logging.getLogger(__name__)
        self.cache = CacheManager()
        self.error_handler = ErrorHandler(self.config.retry)
        self.http = HTTPClient(self.config.http, self.error_handler, base_url=base_url)

        self.channels = ChannelManager(self.http, self.cache)

    @classmethod
    def from_config(cls, config_path: Optional[str] = None) -> "Client":
        """
        Build a client from a configuration file and the environment.

        Logging is configured from the loaded settings.

        Args:
            config_path: Path to a YAML file; default locations are searched
                when omitted

        Returns:
            Client: A ready-to-use client

        Raises:
            ConfigurationError: If the configuration is missing or invalid
        """
        config = load_config(config_path)
        setup_logging(config.log_level, config.log_file, config.structured_logs)
        return cls(config)

    @property
    def version(self) -> int:
        """API version targeted by this client."""
        return self.config.http.api_version

    async def close(self) -> None:
        """Release the HTTP session."""
        await self.http.close()
        self.logger.debug("Client closed")

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
