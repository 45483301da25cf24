"""
GitLab API client.

Provides the authenticated interface the bot uses to accept merge requests.
"""

from typing import Any

import httpx

from lgtmbot.clients import MergeRequestsClient
from lgtmbot.transport import HTTPTransport, RetryConfig


class GitLabClient:
    """
    Client for the parts of the GitLab REST API the bot needs.

    Example:
        ```python
        from lgtmbot import GitLabClient

        with GitLabClient("https://gitlab.example.com", private_token="...") as client:
            client.merge_requests.accept(project_id=3, merge_request_id=42)
        ```
    """

    DEFAULT_TIMEOUT = 30.0
    DEFAULT_API_VERSION = "v3"

    def __init__(
        self,
        base_url: str,
        private_token: str,
        api_version: str = DEFAULT_API_VERSION,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the GitLab client.

        Args:
            base_url: Base URL of the GitLab instance
            private_token: Token sent in the PRIVATE-TOKEN header
            api_version: REST API version segment (default: v3)
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (default: no retries)
            transport: Optional httpx transport, mainly for tests
        """
        self.base_url = base_url
        self.api_version = api_version
        self.timeout = timeout

        self._transport = HTTPTransport(
            base_url=base_url,
            private_token=private_token,
            timeout=timeout,
            retry_config=retry_config,
            transport=transport,
        )

        self.merge_requests = MergeRequestsClient(self._transport, api_version)

    @property
    def transport(self) -> HTTPTransport:
        """Get the underlying HTTP transport (for advanced use cases)."""
        return self._transport

    def close(self) -> None:
        """Close the client and release resources."""
        self._transport.close()

    def __enter__(self) -> "GitLabClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
