"""
HTTP Transport for sitesmith.

Handles HTTP communication with the GitHub REST API: token headers,
automatic retry logic and error handling.
"""

import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from sitesmith.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ParseError,
    PermissionDeniedError,
    ProviderError,
    RateLimitedError,
    ServerError,
    ValidationError,
)
from sitesmith.logging import get_logger, log_http_request, log_http_response

logger = get_logger("http")

GITHUB_API_VERSION = "2022-11-28"
USER_AGENT = "sitesmith"


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior."""

    max_retries: int = 3
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


class HTTPTransport:
    """
    HTTP transport layer for the GitHub REST API.

    Handles:
    - Token authentication resolved on every request
    - Exponential backoff with jitter for retries
    - Retry-After header respect for rate limiting
    - Error response parsing into typed exceptions
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Callable[[], str],
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://api.github.com")
            token_provider: Callable returning the current access token ("" for anonymous)
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            sleep: Sleep function used between retries
            http_transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
        """
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()
        self.sleep = sleep

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers={
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
                "User-Agent": USER_AGENT,
            },
            transport=http_transport,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _auth_headers(self) -> dict[str, str]:
        token = self.token_provider()
        if not token:
            return {}
        return {"Authorization": f"token {token}"}

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
        retry: bool = True,
    ) -> Any:
        """
        Make an authenticated request with automatic retry.

        Args:
            method: HTTP method
            path: API path (e.g., "/repos/acme/site")
            params: Query parameters
            body: JSON request body (for POST/PUT/PATCH)
            retry: False sends the request exactly once

        Returns:
            Parsed JSON response, or None for empty (204) responses

        Raises:
            ProviderError: On API errors
            ParseError: When a success response is not valid JSON
        """
        def make_request() -> httpx.Response:
            headers = self._auth_headers()
            log_http_request(method, f"{self.base_url}{path}", headers, body)
            return self._client.request(method, path, params=params, json=body, headers=headers)

        max_retries = self.retry_config.max_retries if retry else 0
        return self._execute_with_retry(make_request, method, path, max_retries)

    def probe(self, path: str) -> dict[str, Any] | None:
        """
        Check whether a resource exists.

        Args:
            path: API path

        Returns:
            The resource body, or None when the API answers 404

        Raises:
            ProviderError: On any error other than 404
        """
        try:
            data = self.request("GET", path)
        except NotFoundError:
            return None
        return data if isinstance(data, dict) else {}

    def _execute_with_retry(
        self,
        request_fn: Callable[[], httpx.Response],
        method: str,
        path: str,
        max_retries: int,
    ) -> Any:
        """
        Execute a request with automatic retry on retryable errors.

        Args:
            request_fn: Function that makes the HTTP request
            method: HTTP method, for error messages
            path: API path, for error messages
            max_retries: Retries allowed after the first attempt

        Returns:
            Parsed JSON response

        Raises:
            ProviderError: On non-retryable errors or after max retries
        """
        endpoint = f"{method} {path}"
        last_error: Exception | None = None

        for attempt in range(max_retries + 1):
            try:
                started = time.perf_counter()
                response = request_fn()
                elapsed_ms = (time.perf_counter() - started) * 1000

                if response.status_code < 400:
                    data = self._parse_body(response, endpoint)
                    log_http_response(response.status_code, str(response.request.url), data, elapsed_ms)
                    return data

                log_http_response(response.status_code, str(response.request.url), None, elapsed_ms)

                # Parse error response
                error = self._parse_error_response(response, endpoint)

                # Check if we should retry
                if attempt >= max_retries or not self._should_retry(response.status_code, attempt):
                    raise error

                last_error = error

                # Calculate backoff time
                retry_after = response.headers.get("Retry-After")
                wait_time = self._get_backoff_time(attempt, retry_after)
                logger.warning(
                    "%s returned %d, retrying in %.1fs", endpoint, response.status_code, wait_time
                )
                self.sleep(wait_time)

            except httpx.RequestError as e:
                # Network errors are retryable
                if attempt >= max_retries:
                    raise ServerError(
                        "CONNECTION_ERROR", f"{endpoint}: {e}", endpoint=endpoint
                    ) from e

                last_error = e
                wait_time = self._get_backoff_time(attempt, None)
                logger.warning("%s failed (%s), retrying in %.1fs", endpoint, e, wait_time)
                self.sleep(wait_time)

        # Should not reach here, but just in case
        if last_error:
            if isinstance(last_error, ProviderError):
                raise last_error
            raise ServerError("MAX_RETRIES_EXCEEDED", str(last_error), endpoint=endpoint)

        raise ServerError("UNKNOWN_ERROR", "Request failed with no error details", endpoint=endpoint)

    @staticmethod
    def _parse_body(response: httpx.Response, endpoint: str) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ParseError(f"{endpoint} returned a non-JSON body", endpoint) from e

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
                return float(retry_after)
            except ValueError:
                pass  # Fall through to exponential backoff

        # Exponential backoff: backoff_factor ^ attempt
        base_wait = self.retry_config.backoff_factor ** attempt

        # Apply jitter (±jitter%)
        jitter_range = base_wait * self.retry_config.jitter
        jitter = random.uniform(-jitter_range, jitter_range)
        wait_time = base_wait + jitter

        return min(wait_time, self.retry_config.max_backoff)

    def _parse_error_response(self, response: httpx.Response, endpoint: str) -> ProviderError:
        """
        Parse an error response into a typed exception.

        Args:
            response: HTTP response with error status
            endpoint: "METHOD /path" of the failed call

        Returns:
            Appropriate ProviderError subclass
        """
        try:
            body: Any = response.json()
        except ValueError:
            body = response.text

        if isinstance(body, dict):
            detail = body.get("message") or f"HTTP {response.status_code}"
        else:
            detail = body or f"HTTP {response.status_code}"

        status_code = response.status_code
        message = f"{endpoint} failed with {status_code}: {detail}"
        kwargs: dict[str, Any] = {"status_code": status_code, "body": body, "endpoint": endpoint}

        if status_code == 401:
            return AuthenticationError("UNAUTHORIZED", message, **kwargs)
        elif status_code == 403:
            if response.headers.get("X-RateLimit-Remaining") == "0":
                return RateLimitedError(
                    "RATE_LIMITED", message, self._retry_after_seconds(response), **kwargs
                )
            return PermissionDeniedError("FORBIDDEN", message, **kwargs)
        elif status_code == 404:
            return NotFoundError("NOT_FOUND", message, **kwargs)
        elif status_code == 409:
            return ConflictError("CONFLICT", message, **kwargs)
        elif status_code == 429:
            return RateLimitedError(
                "RATE_LIMITED", message, self._retry_after_seconds(response), **kwargs
            )
        elif status_code == 422:
            return ValidationError("UNPROCESSABLE", message, **kwargs)
        elif status_code >= 500:
            return ServerError("SERVER_ERROR", message, **kwargs)
        else:
            return ProviderError("HTTP_ERROR", message, **kwargs)

    @staticmethod
    def _retry_after_seconds(response: httpx.Response) -> int:
        retry_after_str = response.headers.get("Retry-After", "60")
        try:
            return int(retry_after_str)
        except ValueError:
            return 60
