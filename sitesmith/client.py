"""
GitHub API client.

Aggregates the resource clients used by the provisioning workflow over a
single HTTP transport.
"""

import os
import time
from collections.abc import Callable
from typing import Any

import httpx

from sitesmith.clients import ContentsClient, DispatchesClient, PagesClient, ReposClient
from sitesmith.exceptions import ConfigurationError
from sitesmith.transport import HTTPTransport, RetryConfig


class GitHubClient:
    """
    Client for the parts of the GitHub REST API sitesmith needs.

    Example:
        ```python
        from sitesmith import GitHubClient

        client = GitHubClient(token_provider=lambda: "ghp_...")
        repo = client.repos.get("acme", "site1")
        entry = client.contents.get("acme", "site1", "FAKE/values.js")
        ```
    """

    DEFAULT_BASE_URL = "https://api.github.com"
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        token_provider: Callable[[], str],
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            token_provider: Callable returning the access token for each request
            base_url: Base URL for API requests (default: https://api.github.com)
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)
            sleep: Sleep function used between transport retries
            http_transport: Optional httpx transport, for tests
        """
        self.base_url = base_url
        self.timeout = timeout

        self._transport = HTTPTransport(
            base_url=base_url,
            token_provider=token_provider,
            timeout=timeout,
            retry_config=retry_config,
            sleep=sleep,
            http_transport=http_transport,
        )

        self.repos = ReposClient(self._transport)
        self.contents = ContentsClient(self._transport)
        self.pages = PagesClient(self._transport)
        self.dispatches = DispatchesClient(self._transport)

    @classmethod
    def from_env(
        cls,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
    ) -> "GitHubClient":
        """
        Create a client from environment variables.

        Environment variables:
            SITESMITH_TOKEN: Personal access token (required)
            SITESMITH_API_BASE_URL: Base URL for API (optional, default: https://api.github.com)

        Raises:
            ConfigurationError: If SITESMITH_TOKEN is not set
        """
        token = os.environ.get("SITESMITH_TOKEN")
        base_url = os.environ.get("SITESMITH_API_BASE_URL", cls.DEFAULT_BASE_URL)

        if not token:
            raise ConfigurationError("SITESMITH_TOKEN environment variable not set")

        return cls(
            token_provider=lambda: token,
            base_url=base_url,
            timeout=timeout,
            retry_config=retry_config,
        )

    @property
    def transport(self) -> HTTPTransport:
        """Get the underlying HTTP transport (for advanced use cases)."""
        return self._transport

    def close(self) -> None:
        """Close the client and release resources."""
        self._transport.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
