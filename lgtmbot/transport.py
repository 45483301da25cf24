"""
HTTP Transport for the GitLab API.

Handles authenticated communication with the GitLab instance, optional
retry logic, and mapping of error responses to typed exceptions.
"""

import math
import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from lgtmbot.exceptions import (
    APIValidationError,
    AuthenticationError,
    GitLabAPIError,
    MergeConflictError,
    MergeNotAcceptableError,
    NotFoundError,
    ServerError,
)
from lgtmbot.logging import log_http_request, log_http_response

PRIVATE_TOKEN_HEADER = "PRIVATE-TOKEN"


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior.

    The default performs a single attempt: the merge call is fire-and-forget.
    """

    max_retries: int = 0
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


class HTTPTransport:
    """
    HTTP transport layer for the GitLab REST API.

    Handles:
    - PRIVATE-TOKEN authentication on every request
    - Exponential backoff with jitter when retries are enabled
    - Error response parsing into typed exceptions
    """

    def __init__(
        self,
        base_url: str,
        private_token: str,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL of the GitLab instance (e.g., "https://gitlab.example.com")
            private_token: Token sent in the PRIVATE-TOKEN header
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers={PRIVATE_TOKEN_HEADER: private_token},
            transport=transport,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        Make an authenticated request.

        Args:
            method: HTTP method (PUT, GET, etc.)
            path: API path (e.g., "/api/v3/projects/1/merge_requests/2/merge")
            body: JSON request body

        Returns:
            The successful (2xx) response

        Raises:
            GitLabAPIError: On API errors and connection failures
        """
        def make_request() -> httpx.Response:
            log_http_request(method, f"{self.base_url}{path}", dict(self._client.headers), body)
            started = time.monotonic()
            response = self._client.request(method, path, json=body)
            log_http_response(
                response.status_code,
                f"{self.base_url}{path}",
                elapsed_ms=(time.monotonic() - started) * 1000,
            )
            return response

        return self._execute_with_retry(make_request)

    def _execute_with_retry(
        self, request_fn: Callable[[], httpx.Response]
    ) -> httpx.Response:
        """
        Execute a request, retrying on retryable errors if configured.

        Raises:
            GitLabAPIError: On non-retryable errors or after max retries
        """
        last_error: Exception | None = None

        for attempt in range(self.retry_config.max_retries + 1):
            try:
                response = request_fn()

                if 200 <= response.status_code < 300:
                    return response

                error = self._parse_error_response(response)

                if not self._should_retry(response.status_code, attempt):
                    raise error

                last_error = error

                retry_after = response.headers.get("Retry-After")
                wait_time = self._get_backoff_time(attempt, retry_after)
                time.sleep(wait_time)

            except httpx.RequestError as e:
                # Network errors are retryable
                if attempt >= self.retry_config.max_retries:
                    raise ServerError("CONNECTION_ERROR", str(e)) from e

                last_error = e
                wait_time = self._get_backoff_time(attempt, None)
                time.sleep(wait_time)

        if last_error:
            if isinstance(last_error, GitLabAPIError):
                raise last_error
            raise ServerError("MAX_RETRIES_EXCEEDED", str(last_error))

        raise ServerError("UNKNOWN_ERROR", "Request failed with no error details")

    def _should_retry(self, status_code: int, attempt: int) -> bool:
        """
        Determine if a request should be retried.

        Args:
            status_code: HTTP status code
            attempt: Current attempt number (0-indexed)

        Returns:
            True if the request should be retried
        """
        if attempt >= self.retry_config.max_retries:
            return False

        return status_code in self.retry_config.retry_on

    def _get_backoff_time(
        self, attempt: int, retry_after: str | None
    ) -> float:
        """
        Calculate backoff time for retry.

        Uses exponential backoff with jitter, respecting Retry-After header
        if present.

        Args:
            attempt: Current attempt number (0-indexed)
            retry_after: Value of Retry-After header (if present)

        Returns:
            Time to wait in seconds
        """
        if retry_after and self.retry_config.respect_retry_after:
            try:
                requested = float(retry_after)
            except ValueError:
                requested = -1.0
            # Negative, nan and inf fall through to exponential backoff
            if math.isfinite(requested) and requested >= 0:
                return min(requested, self.retry_config.max_backoff)

        base_wait = self.retry_config.backoff_factor ** attempt

        jitter_range = base_wait * self.retry_config.jitter
        jitter = random.uniform(-jitter_range, jitter_range)
        wait_time = base_wait + jitter

        return min(wait_time, self.retry_config.max_backoff)

    def _parse_error_response(self, response: httpx.Response) -> GitLabAPIError:
        """
        Parse an error response into a typed exception.

        GitLab reports errors as ``{"message": ...}`` or ``{"error": ...}``.
        """
        try:
            data = response.json()
        except ValueError:
            data = {}

        message = f"HTTP {response.status_code}"
        if isinstance(data, dict):
            detail = data.get("message") or data.get("error")
            if detail:
                message = str(detail)

        status_code = response.status_code

        if status_code == 401:
            return AuthenticationError("UNAUTHORIZED", message, status_code)
        elif status_code == 404:
            return NotFoundError("NOT_FOUND", message, status_code)
        elif status_code == 405:
            return MergeConflictError("METHOD_NOT_ALLOWED", message, status_code)
        elif status_code == 406:
            return MergeNotAcceptableError("NOT_ACCEPTABLE", message, status_code)
        elif status_code >= 500:
            return ServerError("SERVER_ERROR", message, status_code)
        elif status_code >= 400:
            return APIValidationError("CLIENT_ERROR", message, status_code)
        else:
            return APIValidationError("UNEXPECTED_STATUS", message, status_code)
