"""sitesmith exception classes."""

from typing import Any


class SitesmithError(Exception):
    """Base exception for all sitesmith errors."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class ConfigurationError(SitesmithError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class MissingCredentialError(SitesmithError):
    """Raised when no access token is available from any source."""

    def __init__(self, message: str = "No GitHub token available") -> None:
        super().__init__("MISSING_CREDENTIAL", message)


class TemplateInvalidError(SitesmithError):
    """Raised when the template repository is missing or not a template."""

    def __init__(self, reason: str, message: str) -> None:
        super().__init__("TEMPLATE_INVALID", message)
        self.reason = reason


class ParseError(SitesmithError):
    """Raised when a response body does not have the expected shape."""

    def __init__(self, message: str, endpoint: str | None = None) -> None:
        super().__init__("PARSE_ERROR", message)
        self.endpoint = endpoint


class NotReadyError(SitesmithError):
    """Raised when a polled resource did not become available in time."""

    def __init__(self, code: str, message: str, attempts: int) -> None:
        super().__init__(code, message)
        self.attempts = attempts


class RepositoryNotReadyError(NotReadyError):
    """Raised when a generated repository never became queryable."""

    def __init__(self, full_name: str, attempts: int) -> None:
        super().__init__(
            "REPOSITORY_NOT_READY",
            f"Repository {full_name} was not ready after {attempts} attempts",
            attempts,
        )
        self.full_name = full_name


class FileNotFoundAfterRetriesError(NotReadyError):
    """Raised when a file never appeared in a repository."""

    def __init__(self, path: str, attempts: int) -> None:
        super().__init__(
            "FILE_NOT_FOUND",
            f"File {path} not found after {attempts} attempts",
            attempts,
        )
        self.path = path


class ProviderError(SitesmithError):
    """Raised on any non-success response from the GitHub API."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int | None = None,
        body: Any = None,
        endpoint: str | None = None,
    ) -> None:
        super().__init__(code, message)
        self.status_code = status_code
        self.body = body
        self.endpoint = endpoint


class AuthenticationError(ProviderError):
    """Raised when the token is rejected (401)."""

    pass


class PermissionDeniedError(ProviderError):
    """Raised when the token lacks scope or organization permission (403)."""

    pass


class NotFoundError(ProviderError):
    """Raised when a resource is not found (404)."""

    pass


class ConflictError(ProviderError):
    """Raised on conflicts (409)."""

    pass


class ValidationError(ProviderError):
    """Raised on unprocessable requests (422)."""

    pass


class StaleRevisionError(ProviderError):
    """Raised when a write is rejected because the local copy is outdated."""

    pass


class RateLimitedError(ProviderError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        status_code: int | None = None,
        body: Any = None,
        endpoint: str | None = None,
    ) -> None:
        super().__init__(code, message, status_code, body, endpoint)
        self.retry_after = retry_after


class ServerError(ProviderError):
    """Raised on server errors (5xx) and connection failures."""

    pass


class GenerationError(ProviderError):
    """Raised when generating a repository from a template fails."""

    pass


class TemplateNotAccessibleError(GenerationError, NotFoundError):
    """Raised when the generate call answers 404."""

    pass


class GenerationPermissionError(GenerationError, PermissionDeniedError):
    """Raised when the generate call answers 403."""

    pass
