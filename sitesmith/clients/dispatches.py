"""Repository dispatch resource client."""

from typing import TYPE_CHECKING, Any

from sitesmith.clients.repos import repo_path

if TYPE_CHECKING:
    from sitesmith.transport import HTTPTransport


class DispatchesClient:
    """Client for repository_dispatch events."""

    def __init__(self, transport: "HTTPTransport") -> None:
        self.transport = transport

    def create(
        self,
        owner: str,
        repo: str,
        event_type: str,
        client_payload: dict[str, Any] | None = None,
    ) -> None:
        """
        Send a repository_dispatch event once. GitHub answers 204 with no body.

        Args:
            owner: Repository owner
            repo: Repository name
            event_type: Event name matched by workflow triggers
            client_payload: Arbitrary JSON passed to the workflow
        """
        path = f"{repo_path(owner, repo)}/dispatches"
        body = {"event_type": event_type, "client_payload": client_payload or {}}
        self.transport.request("POST", path, body=body, retry=False)
