"""
HTTP transport for the higa client.

This module owns the aiohttp session and turns a Route plus an optional
JSON body and query string into one request against the REST API. It adds
the credential, content-type, client identification and audit-log headers,
decodes JSON responses, and maps every failure onto the RequestError family.
"""

import asyncio
import json
import logging
import time
from typing import Any, Dict, Optional
from urllib.parse import quote

import aiohttp

from .config import HTTPConfig
from .error_handler import ErrorHandler
from .exceptions import DecodeError, HTTPStatusError, TransportError
from .logging_config import log_api_call


AUDIT_LOG_HEADER = "X-Audit-Log-Reason"


class Route:
    """
    An endpoint of the REST API.

    The path is a template whose ``{name}`` fields are filled from the
    keyword parameters. Identifiers are percent-encoded so they can never
    escape their path segment.
    """

    def __init__(self, method: str, path: str, **parameters: Any):
        self.method = method.upper()
        self.path = path
        self.parameters = parameters

        if parameters:
            self.endpoint = path.format_map(
                {key: quote(str(value), safe='') for key, value in parameters.items()}
            )
        else:
            self.endpoint = path

    @property
    def is_mutating(self) -> bool:
        """Whether the route changes remote state."""
        return self.method not in ("GET", "HEAD")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Route):
            return NotImplemented
        return self.method == other.method and self.endpoint == other.endpoint

    def __hash__(self) -> int:
        return hash((self.method, self.endpoint))

    def __repr__(self) -> str:
        return f"<Route {self.method} {self.endpoint}>"


def encode_audit_reason(reason: Optional[str]) -> str:
    """
    Render an audit reason as a header value.

    The value is percent-encoded UTF-8 so any text survives the header
    encoding; a missing reason becomes an empty string.
    """
    if not reason:
        return ""
    return quote(reason, safe=" ")


class HTTPClient:
    """
    Async REST transport built on aiohttp.

    Every request is a single coroutine that suspends only while waiting on
    the network. Timeouts are enforced by the aiohttp session; retries are
    delegated to the ErrorHandler.
    """

    def __init__(
        self,
        config: HTTPConfig,
        error_handler: Optional[ErrorHandler] = None,
        session: Optional[aiohttp.ClientSession] = None,
        base_url: Optional[str] = None
    ):
        """
        Initialize the transport.

        Args:
            config: Credential and endpoint configuration
            error_handler: Retry handler; defaults to one that never retries
            session: Existing aiohttp session to use instead of creating one
            base_url: Override for the API root (mainly for tests)
        """
        self.config = config
        self.base_url = (base_url or config.base_url).rstrip('/')
        self.error_handler = error_handler or ErrorHandler()
        self.logger = logging.getLogger(__name__)

        self._session = session
        self._owns_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        """The aiohttp session, created on first use."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.timeout)
            )
            self._owns_session = True
        return self._session

    def build_headers(self, method: str, reason: Optional[str] = None) -> Dict[str, str]:
        """
        Build the headers sent with a request.

        Args:
            method: HTTP verb of the request
            reason: Audit-log reason for mutating requests

        Returns:
            Dict of header names to values
        """
        headers = {
            "Authorization": f"{self.config.token_type} {self.config.token}",
            "Content-Type": "application/json",
            "User-Agent": self.config.user_agent,
        }

        if method.upper() not in ("GET", "HEAD"):
            headers[AUDIT_LOG_HEADER] = encode_audit_reason(reason)

        return headers

    async def request(
        self,
        route: Route,
        *,
        body: Any = None,
        query: Optional[Dict[str, str]] = None,
        reason: Optional[str] = None
    ) -> Any:
        """
        Send a request and return the decoded response.

        Args:
            route: Endpoint to call
            body: JSON-serializable request body
            query: Query string parameters
            reason: Audit-log reason (mutating routes only)

        Returns:
            The decoded JSON body, or None for an empty response

        Raises:
            TransportError: If the request could not be delivered
            HTTPStatusError: If the API answered with a non-success status
            DecodeError: If the response body is not valid JSON
        """
        return await self.error_handler.retry_async(
            self._request_once,
            route,
            body=body,
            query=query,
            reason=reason,
            method=route.method,
            context={'endpoint': route.endpoint}
        )

    async def _request_once(
        self,
        route: Route,
        *,
        body: Any = None,
        query: Optional[Dict[str, str]] = None,
        reason: Optional[str] = None
    ) -> Any:
        url = self.base_url + route.endpoint
        headers = self.build_headers(route.method, reason)
        data = json.dumps(body) if body is not None else None

        start_time = time.perf_counter()

        try:
            async with self.session.request(
                route.method,
                url,
                headers=headers,
                data=data,
                params=query or None
            ) as response:
                status = response.status
                payload = await response.read()

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            log_api_call(self.logger, route.method, route.endpoint, None,
                         time.perf_counter() - start_time, error=str(e))
            raise TransportError(
                "Request could not be completed",
                str(e) or type(e).__name__,
                method=route.method,
                url=url
            ) from e

        log_api_call(self.logger, route.method, route.endpoint, status,
                     time.perf_counter() - start_time)

        if not 200 <= status < 300:
            raise HTTPStatusError(
                status,
                self._decode_error_body(payload),
                details=f"{route.method} {route.endpoint}",
                method=route.method,
                url=url
            )

        if not payload:
            return None

        try:
            return json.loads(payload)
        except ValueError as e:
            raise DecodeError(
                "Malformed response body",
                str(e),
                method=route.method,
                url=url
            ) from e

    @staticmethod
    def _decode_error_body(payload: bytes) -> Any:
        if not payload:
            return None
        try:
            return json.loads(payload)
        except ValueError:
            return payload.decode('utf-8', errors='replace')

    async def close(self) -> None:
        """Close the underlying session if this client created it."""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "HTTPClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
