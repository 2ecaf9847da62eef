"""
Error tracking and retry logic for API requests.

This module provides the retry policy applied at the transport boundary:
exponential backoff for transient failures, rate-limit aware delays, and an
error history for debugging and monitoring.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .config import RetryConfig
from .exceptions import HTTPStatusError, RequestError, TransportError


# Verbs that can be replayed without risking a duplicated side effect
IDEMPOTENT_METHODS = frozenset(("GET", "HEAD", "PUT", "DELETE"))

RATE_LIMITED = 429


class ErrorHandler:
    """
    Retry handler with error tracking.

    Retries a failed request when the failure is transient and replaying the
    request is safe. A 429 means the remote system did not process the
    request, so it is retried for every verb; other retryable failures are
    only retried for idempotent verbs.
    """

    def __init__(self, retry_config: Optional[RetryConfig] = None):
        """
        Initialize the error handler.

        Args:
            retry_config: Retry policy; defaults to no retries
        """
        self.logger = logging.getLogger(__name__)
        self.retry_config = retry_config or RetryConfig()
        self.error_history: List[Dict[str, Any]] = []
        self.max_history = 1000

    def record_error(self, error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Record an error in the error history.

        Args:
            error: The exception that occurred
            context: Optional context information
        """
        error_info = {
            'timestamp': datetime.now().isoformat(),
            'error_type': type(error).__name__,
            'error_message': str(error),
            'status': getattr(error, 'status', None),
            'context': context or {}
        }

        self.error_history.append(error_info)

        if len(self.error_history) > self.max_history:
            self.error_history = self.error_history[-self.max_history:]

    def is_retryable(self, error: Exception, method: str) -> bool:
        """
        Decide whether a failed request may be sent again.

        Args:
            error: The failure raised by the request
            method: HTTP verb of the request

        Returns:
            bool: True if the request should be retried
        """
        if isinstance(error, HTTPStatusError):
            if error.status not in self.retry_config.retry_statuses:
                return False
            if error.status == RATE_LIMITED:
                return True
            return method.upper() in IDEMPOTENT_METHODS

        if isinstance(error, TransportError):
            return method.upper() in IDEMPOTENT_METHODS

        return False

    def get_delay(self, error: Exception, attempt: int) -> float:
        """
        Compute how long to wait before the next attempt.

        A rate-limit response carrying ``retry_after`` wins over the
        exponential schedule.
        """
        config = self.retry_config

        if isinstance(error, HTTPStatusError) and error.status == RATE_LIMITED:
            retry_after = error.body.get('retry_after') if isinstance(error.body, dict) else None
            if isinstance(retry_after, (int, float)) and retry_after >= 0:
                return float(retry_after)

        return min(config.base_delay * (config.exponential_base ** attempt), config.max_delay)

    async def retry_async(
        self,
        func: Callable[..., Awaitable[Any]],
        *args,
        method: str = "GET",
        context: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> Any:
        """
        Execute an async request function with automatic retry logic.

        Args:
            func: Async function performing one attempt
            *args: Positional arguments for func
            method: HTTP verb, used to decide whether replays are safe
            context: Optional context for error recording
            **kwargs: Keyword arguments for func

        Returns:
            Result of the function call

        Raises:
            RequestError: The last failure once retries are exhausted or the
                failure is not retryable
        """
        max_retries = self.retry_config.max_retries
        attempt = 0

        while True:
            try:
                return await func(*args, **kwargs)

            except RequestError as e:
                self.record_error(e, context)

                if attempt >= max_retries or not self.is_retryable(e, method):
                    if max_retries and attempt:
                        self.logger.error(
                            f"Giving up on {method} after {attempt + 1} attempts: {e}"
                        )
                    raise

                delay = self.get_delay(e, attempt)

                self.logger.warning(
                    f"Attempt {attempt + 1}/{max_retries + 1} failed for {method}: {e}. "
                    f"Retrying in {delay:.1f}s..."
                )

                await asyncio.sleep(delay)
                attempt += 1

    def get_error_statistics(self) -> Dict[str, Any]:
        """
        Get error statistics from the error history.

        Returns:
            Dict containing error statistics
        """
        if not self.error_history:
            return {
                'total_errors': 0,
                'error_types': {},
                'recent_errors': []
            }

        error_types = {}
        for error in self.error_history:
            error_type = error['error_type']
            error_types[error_type] = error_types.get(error_type, 0) + 1

        return {
            'total_errors': len(self.error_history),
            'error_types': error_types,
            'recent_errors': self.error_history[-10:],
            'oldest_error': self.error_history[0]['timestamp'],
            'newest_error': self.error_history[-1]['timestamp']
        }

    def clear_error_history(self) -> None:
        """Clear the error history."""
        self.error_history.clear()
        self.logger.info("Error history cleared")
