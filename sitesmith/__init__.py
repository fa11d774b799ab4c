"""sitesmith - provision client sites from a GitHub template repository."""

from sitesmith.client import GitHubClient
from sitesmith.codec import decode_base64, encode_base64
from sitesmith.config import PanelConfig, load_config
from sitesmith.credentials import CredentialResolver, CredentialStore
from sitesmith.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ConflictError,
    FileNotFoundAfterRetriesError,
    GenerationError,
    GenerationPermissionError,
    MissingCredentialError,
    NotFoundError,
    NotReadyError,
    ParseError,
    PermissionDeniedError,
    ProviderError,
    RateLimitedError,
    RepositoryNotReadyError,
    ServerError,
    SitesmithError,
    StaleRevisionError,
    TemplateInvalidError,
    TemplateNotAccessibleError,
    ValidationError,
)
from sitesmith.logging import configure_logging, get_logger
from sitesmith.polling import BackoffKind, PollStrategy, retry_until
from sitesmith.references import build_issue_body, parse_template_reference, prefilled_issue_url
from sitesmith.session import Phase, SessionContext, WorkflowStatus
from sitesmith.transport import HTTPTransport, RetryConfig
from sitesmith.types import (
    PagesState,
    ProvisionedRepository,
    ProvisionRequest,
    RemoteFile,
    TemplateReference,
)
from sitesmith.workflow import (
    ContentIngestor,
    DispatchEmitter,
    EditorBridge,
    PagesPublisher,
    ProvisioningWorkflow,
    ProvisionResult,
    RepositoryGenerator,
    TemplateValidator,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Client
    "GitHubClient",
    "HTTPTransport",
    "RetryConfig",
    # Session & configuration
    "SessionContext",
    "WorkflowStatus",
    "Phase",
    "PanelConfig",
    "load_config",
    "CredentialResolver",
    "CredentialStore",
    # Workflow
    "ProvisioningWorkflow",
    "ProvisionResult",
    "TemplateValidator",
    "RepositoryGenerator",
    "ContentIngestor",
    "PagesPublisher",
    "EditorBridge",
    "DispatchEmitter",
    # Types
    "TemplateReference",
    "ProvisionRequest",
    "ProvisionedRepository",
    "RemoteFile",
    "PagesState",
    # Helpers
    "encode_base64",
    "decode_base64",
    "PollStrategy",
    "BackoffKind",
    "retry_until",
    "parse_template_reference",
    "build_issue_body",
    "prefilled_issue_url",
    # Exceptions
    "SitesmithError",
    "ConfigurationError",
    "MissingCredentialError",
    "TemplateInvalidError",
    "ParseError",
    "NotReadyError",
    "RepositoryNotReadyError",
    "FileNotFoundAfterRetriesError",
    "ProviderError",
    "AuthenticationError",
    "PermissionDeniedError",
    "NotFoundError",
    "ConflictError",
    "ValidationError",
    "StaleRevisionError",
    "RateLimitedError",
    "ServerError",
    "GenerationError",
    "TemplateNotAccessibleError",
    "GenerationPermissionError",
    # Logging
    "configure_logging",
    "get_logger",
]
