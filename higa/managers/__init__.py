"""
Resource managers for the higa client.

Each manager exposes one coroutine per remote action on a resource kind and
keeps the client's cache in step with the results.
"""

from .base import ResourceManager
from .channel import ChannelManager

__all__ = [
    "ResourceManager",
    "ChannelManager"
]
