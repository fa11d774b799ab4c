"""
Session context shared by the workflow components.

Holds what the admin page kept in globals: configuration, the token
resolver, the API client, the file being edited and the status line.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from sitesmith.client import GitHubClient
from sitesmith.config import PanelConfig
from sitesmith.credentials import CredentialResolver, CredentialStore
from sitesmith.exceptions import SitesmithError
from sitesmith.logging import get_logger
from sitesmith.types.contents import RemoteFile

logger = get_logger("workflow")


class Phase(str, Enum):
    """Where the provisioning workflow currently is."""

    IDLE = "idle"
    CHECKING_TOKEN = "checking_token"
    VALIDATING_TEMPLATE = "validating_template"
    GENERATING = "generating"
    WAITING_FOR_REPOSITORY = "waiting_for_repository"
    INGESTING = "ingesting"
    PUBLISHING = "publishing"
    EDITING = "editing"
    SAVING = "saving"
    DISPATCHING = "dispatching"
    DONE = "done"
    FAILED = "failed"


@dataclass
class WorkflowStatus:
    """Status surface rendered by a front end."""

    phase: Phase = Phase.IDLE
    message: str = ""
    error: str | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


StatusListener = Callable[[WorkflowStatus], None]


@dataclass
class SessionContext:
    """
    Explicit state for one operator session.

    Example:
        ```python
        config = load_config("config.json")
        with SessionContext.create(config, token=args.token) as session:
            ProvisioningWorkflow(session).run(request)
        ```
    """

    config: PanelConfig
    credentials: CredentialResolver
    client: GitHubClient
    sleep: Callable[[float], None] = time.sleep
    current_file: RemoteFile | None = None
    status: WorkflowStatus = field(default_factory=WorkflowStatus)
    listeners: list[StatusListener] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        config: PanelConfig,
        token: str | None = None,
        sleep: Callable[[float], None] = time.sleep,
        **client_kwargs,
    ) -> "SessionContext":
        """
        Build a session: token resolver primed from the store and config,
        and an API client that asks the resolver for the token on every call.

        Args:
            config: Panel configuration
            token: Token typed by the operator, used when no other tier has one
            sleep: Sleep function for every wait in the workflow
            **client_kwargs: Passed to GitHubClient (timeout, retry_config, http_transport)
        """
        credentials = CredentialResolver(
            CredentialStore(config.credentials_path),
            input_value=lambda: token,
        )
        credentials.prime(bootstrap=config.pat)
        client = GitHubClient(
            token_provider=credentials.resolve,
            base_url=config.api_base_url,
            sleep=sleep,
            **client_kwargs,
        )
        return cls(config=config, credentials=credentials, client=client, sleep=sleep)

    def set_status(self, message: str, phase: Phase | None = None) -> None:
        """Update the status line and clear any previous error."""
        self.status = WorkflowStatus(phase=phase or self.status.phase, message=message)
        logger.info(message)
        self._notify()

    def fail(self, error: SitesmithError | str) -> None:
        """Record a terminal error for the current phase."""
        detail = error.message if isinstance(error, SitesmithError) else error
        self.status = WorkflowStatus(phase=Phase.FAILED, message=detail, error=str(error))
        logger.error(detail)
        self._notify()

    def subscribe(self, listener: StatusListener) -> None:
        """Call ``listener`` on every status change."""
        self.listeners.append(listener)

    def _notify(self) -> None:
        for listener in self.listeners:
            listener(self.status)

    def close(self) -> None:
        """Close the API client."""
        self.client.close()

    def __enter__(self) -> "SessionContext":
        return self

    def __exit__(self, *args) -> None:
        self.close()
