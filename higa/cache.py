"""
In-memory cache for resource representations.

The cache is partitioned by resource kind. Each partition is a CacheStore
mapping resource ids to the last representation this process observed.
Entries have no TTL and are never evicted; they live until a delete
operation removes them or the process ends.
"""

import logging
from typing import Any, Dict, Iterator, Optional


class CacheStore:
    """
    One resource kind's partition of the cache.

    None of the operations fail. A lookup for an unknown id returns
    ``None`` rather than raising.
    """

    def __init__(self, kind: str):
        """
        Initialize an empty partition.

        Args:
            kind: Name of the resource kind stored here (used for logging)
        """
        self.kind = kind
        self.logger = logging.getLogger(__name__)
        self._entries: Dict[str, Dict[str, Any]] = {}

    def has(self, resource_id: str) -> bool:
        """Check whether a representation is cached for the id."""
        return resource_id in self._entries

    def get(self, resource_id: str) -> Optional[Dict[str, Any]]:
        """Return the cached representation, or None when absent."""
        return self._entries.get(resource_id)

    def set(self, resource_id: str, representation: Dict[str, Any]) -> None:
        """Store or overwrite the representation for the id."""
        self._entries[resource_id] = representation
        self.logger.debug(f"Cached {self.kind} {resource_id}")

    def delete(self, resource_id: str) -> None:
        """Remove the entry for the id; unknown ids are ignored."""
        if self._entries.pop(resource_id, None) is not None:
            self.logger.debug(f"Evicted {self.kind} {resource_id}")

    def clear(self) -> None:
        """Drop every entry in this partition."""
        self._entries.clear()

    def __contains__(self, resource_id: str) -> bool:
        return self.has(resource_id)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __repr__(self) -> str:
        return f"<CacheStore kind={self.kind!r} size={len(self._entries)}>"


class CacheManager:
    """
    Owner of every cache partition.

    A single instance is created by the client context and handed to each
    resource manager, so partitions are shared per client rather than per
    process.
    """

    KINDS = ("channels", "messages", "users", "guilds", "invites")

    def __init__(self):
        self.channels = CacheStore("channel")
        self.messages = CacheStore("message")
        self.users = CacheStore("user")
        self.guilds = CacheStore("guild")
        self.invites = CacheStore("invite")

    def partition(self, kind: str) -> CacheStore:
        """
        Look up a partition by its attribute name.

        Args:
            kind: One of ``CacheManager.KINDS``

        Returns:
            CacheStore: The partition for that kind

        Raises:
            KeyError: If the kind is unknown
        """
        if kind not in self.KINDS:
            raise KeyError(kind)
        return getattr(self, kind)

    def clear(self) -> None:
        """Clear all partitions."""
        for kind in self.KINDS:
            self.partition(kind).clear()

    def stats(self) -> Dict[str, int]:
        """Return the number of entries held per partition."""
        return {kind: len(self.partition(kind)) for kind in self.KINDS}
