"""
higa - a typed async client for a chat platform's REST API.

This package gives access to channels, messages, threads, invites and
permission overwrites through resource managers that share an in-memory,
per-client cache.
"""

__version__ = "1.0.0"
__author__ = "Higa Team"

from .client import Client
from .cache import CacheManager, CacheStore
from .config import Config, HTTPConfig, RetryConfig, load_config
from .exceptions import (
    HigaError,
    ConfigurationError,
    RequestError,
    TransportError,
    HTTPStatusError,
    DecodeError
)
from .http import HTTPClient, Route
from .managers import ChannelManager, ResourceManager
from .models import (
    MISSING,
    APIVersion,
    ArchivedThreadsQuery,
    BulkDeleteOptions,
    CreateInviteOptions,
    CreateMessageOptions,
    EditMessageOptions,
    EditPermissionsOptions,
    FollowChannelOptions,
    GetMessagesQuery,
    GroupDMAddRecipientOptions,
    ModifyChannelOptions,
    StartThreadOptions,
    StartThreadWithMessageOptions
)

__all__ = [
    "Client",
    "CacheManager",
    "CacheStore",
    "Config",
    "HTTPConfig",
    "RetryConfig",
    "load_config",
    "HigaError",
    "ConfigurationError",
    "RequestError",
    "TransportError",
    "HTTPStatusError",
    "DecodeError",
    "HTTPClient",
    "Route",
    "ChannelManager",
    "ResourceManager",
    "MISSING",
    "APIVersion",
    "ArchivedThreadsQuery",
    "BulkDeleteOptions",
    "CreateInviteOptions",
    "CreateMessageOptions",
    "EditMessageOptions",
    "EditPermissionsOptions",
    "FollowChannelOptions",
    "GetMessagesQuery",
    "GroupDMAddRecipientOptions",
    "ModifyChannelOptions",
    "StartThreadOptions",
    "StartThreadWithMessageOptions"
]
