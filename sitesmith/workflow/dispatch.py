"""repository_dispatch events."""

from typing import Any

from sitesmith.logging import get_logger
from sitesmith.session import Phase, SessionContext

logger = get_logger("workflow")


class DispatchEmitter:
    """Fires custom events at a repository's workflows. No retry, no polling."""

    def __init__(self, session: SessionContext) -> None:
        self.session = session

    def dispatch(self, owner: str, repo: str, event_type: str, payload: dict[str, Any]) -> None:
        """
        Send one repository_dispatch event.

        Raises:
            ProviderError: If GitHub does not answer with a 2xx status
        """
        self.session.set_status(f"Sending {event_type} to {owner}/{repo}...", Phase.DISPATCHING)
        self.session.client.dispatches.create(owner, repo, event_type, payload)
        self.session.set_status("Dispatch sent")

    def dispatch_client_data(
        self,
        owner: str,
        repo: str,
        title: str = "",
        description: str = "",
        image: str = "",
    ) -> None:
        """Send the client form fields with the configured event type."""
        data = {"title": title, "description": description, "image": image}
        self.dispatch(owner, repo, self.session.config.dispatch_event_type, {"data": data})
