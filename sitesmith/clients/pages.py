"""GitHub Pages resource client."""

from typing import TYPE_CHECKING, Any

from sitesmith.clients.repos import repo_path
from sitesmith.clients.schema import expect_object, optional
from sitesmith.types.pages import PagesSite

if TYPE_CHECKING:
    from sitesmith.transport import HTTPTransport


def _parse_site(data: Any, endpoint: str) -> PagesSite:
    data = expect_object(data, endpoint)
    return PagesSite(
        status=optional(data, "status", str, endpoint),
        html_url=optional(data, "html_url", str, endpoint),
        build_type=optional(data, "build_type", str, endpoint),
    )


class PagesClient:
    """Client for the Pages endpoints of a repository."""

    def __init__(self, transport: "HTTPTransport") -> None:
        self.transport = transport

    def get(self, owner: str, repo: str) -> PagesSite:
        """
        Get the Pages site of a repository.

        Raises:
            NotFoundError: If Pages is not enabled
        """
        path = f"{repo_path(owner, repo)}/pages"
        return _parse_site(self.transport.request("GET", path), f"GET {path}")

    def set_source(
        self,
        owner: str,
        repo: str,
        branch: str,
        source_path: str = "/",
        build_type: str = "legacy",
    ) -> None:
        """
        Point Pages at a branch and folder. Sent once; callers poll and repeat it.

        Args:
            owner: Repository owner
            repo: Repository name
            branch: Branch to publish from
            source_path: Folder to publish ("/" or "/docs")
            build_type: "legacy" or "workflow"
        """
        path = f"{repo_path(owner, repo)}/pages"
        body = {
            "source": {"branch": branch, "path": source_path},
            "build_type": build_type,
            "public": True,
        }
        self.transport.request("PUT", path, body=body, retry=False)

    def request_build(self, owner: str, repo: str) -> None:
        """Ask GitHub to build the Pages site from the latest commit. Sent once."""
        path = f"{repo_path(owner, repo)}/pages/builds"
        self.transport.request("POST", path, retry=False)
