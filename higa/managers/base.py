"""
Shared machinery for resource managers.

Every resource manager composes the HTTP transport with a cache partition
and builds its operations from three shapes:

* read-through fetch: answer from the cache, or fetch once and remember;
* write-through mutation: call the API, then update or evict the entry;
* pass-through query: call the API and return the result untouched.

The cache is only touched after the remote call succeeded, so a failed
request never leaves a partial update behind.
"""

import logging
from typing import Any, Dict, Optional

from ..cache import CacheStore
from ..http import HTTPClient, Route
from ..models import Payload


def to_body(options: Optional[Payload]) -> Optional[Dict[str, Any]]:
    """Serialize an option record into a JSON body."""
    if options is None:
        return None
    if not isinstance(options, Payload):
        raise TypeError(f"Expected an option record, got {type(options).__name__}")
    return options.to_dict()


def to_query(options: Optional[Payload]) -> Optional[Dict[str, str]]:
    """Serialize an option record into query string parameters."""
    if options is None:
        return None
    if not isinstance(options, Payload):
        raise TypeError(f"Expected an option record, got {type(options).__name__}")
    return options.to_query() or None


class ResourceManager:
    """
    Base class for the managers of one resource kind.

    Subclasses declare their endpoints as Routes and call the helpers below.
    The cache partition is owned by the client context and passed in, so
    several managers can share one partition.
    """

    def __init__(self, http: HTTPClient, cache: CacheStore):
        """
        Initialize the manager.

        Args:
            http: Transport used for every request
            cache: Partition holding this kind's representations
        """
        self.http = http
        self.cache = cache
        self.logger = logging.getLogger(self.__class__.__module__)

    def _store_for(self, cache: Optional[CacheStore]) -> CacheStore:
        return cache if cache is not None else self.cache

    async def _fetch(
        self,
        resource_id: str,
        route: Route,
        cache: Optional[CacheStore] = None
    ) -> Dict[str, Any]:
        """
        Read-through fetch of a single resource.

        A cached representation is returned without any request, even if it
        may be stale. On a miss the resource is fetched and cached; an empty
        response is returned as None and not cached.
        """
        store = self._store_for(cache)

        if store.has(resource_id):
            return store.get(resource_id)

        representation = await self.http.request(route)
        if isinstance(representation, dict):
            store.set(resource_id, representation)
        return representation

    async def _write(
        self,
        resource_id: Optional[str],
        route: Route,
        *,
        body: Optional[Dict[str, Any]] = None,
        reason: Optional[str] = None,
        cache: Optional[CacheStore] = None,
        key: str = "id"
    ) -> Any:
        """
        Write-through mutation returning the new representation.

        The returned representation overwrites the cache entry. When
        ``resource_id`` is None (creation), the id is read from the
        representation's ``key`` field.
        """
        representation = await self.http.request(route, body=body, reason=reason)

        if isinstance(representation, dict):
            entry_id = resource_id if resource_id is not None else representation.get(key)
            if entry_id is not None:
                self._store_for(cache).set(str(entry_id), representation)

        return representation

    async def _delete(
        self,
        resource_id: str,
        route: Route,
        *,
        reason: Optional[str] = None,
        cache: Optional[CacheStore] = None
    ) -> None:
        """Write-through deletion: the entry is evicted once the call succeeds."""
        await self.http.request(route, reason=reason)
        self._store_for(cache).delete(resource_id)

    async def _query(self, route: Route, options: Optional[Payload] = None) -> Any:
        """Pass-through read; the cache is neither consulted nor populated."""
        return await self.http.request(route, query=to_query(options))

    async def _action(
        self,
        route: Route,
        options: Optional[Payload] = None,
        reason: Optional[str] = None
    ) -> Any:
        """Pass-through mutation whose result is not a cacheable resource."""
        return await self.http.request(route, body=to_body(options), reason=reason)
