"""Repository contents resource client."""

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from sitesmith.clients.repos import repo_path
from sitesmith.clients.schema import expect_object, optional, require
from sitesmith.types.contents import ContentEntry, WriteResult

if TYPE_CHECKING:
    from sitesmith.transport import HTTPTransport


def contents_path(owner: str, repo: str, path: str) -> str:
    """API path of a file in a repository."""
    return f"{repo_path(owner, repo)}/contents/{quote(path.lstrip('/'), safe='/')}"


def _parse_entry(data: Any, endpoint: str) -> ContentEntry:
    """Parse a contents response for a single path."""
    data = expect_object(data, endpoint)
    return ContentEntry(
        type=require(data, "type", str, endpoint),
        path=optional(data, "path", str, endpoint, ""),
        sha=require(data, "sha", str, endpoint),
        content=optional(data, "content", str, endpoint, ""),
        encoding=optional(data, "encoding", str, endpoint),
        size=optional(data, "size", int, endpoint, 0),
    )


def _parse_write(data: Any, path: str, endpoint: str) -> WriteResult:
    """Parse a create/update file response."""
    data = expect_object(data, endpoint)
    content = data.get("content")
    commit = data.get("commit")
    return WriteResult(
        path=path,
        sha=content.get("sha") if isinstance(content, dict) else None,
        commit_sha=commit.get("sha") if isinstance(commit, dict) else None,
    )


class ContentsClient:
    """Client for reading and writing repository files."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the contents client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def get(self, owner: str, repo: str, path: str, ref: str | None = None) -> ContentEntry:
        """
        Get a file with its base64 content and sha.

        Args:
            owner: Repository owner
            repo: Repository name
            path: File path inside the repository
            ref: Branch, tag or commit (default branch when None)

        Raises:
            NotFoundError: If the path does not exist
            ParseError: If the path is a directory or the body is malformed
        """
        api_path = contents_path(owner, repo, path)
        params = {"ref": ref} if ref else None
        data = self.transport.request("GET", api_path, params=params)
        return _parse_entry(data, f"GET {api_path}")

    def probe(self, owner: str, repo: str, path: str) -> ContentEntry | None:
        """
        Look up a file without failing when it is absent.

        Returns:
            The entry, or None on 404
        """
        api_path = contents_path(owner, repo, path)
        data = self.transport.probe(api_path)
        if data is None:
            return None
        return _parse_entry(data, f"GET {api_path}")

    def put(
        self,
        owner: str,
        repo: str,
        path: str,
        content_b64: str,
        message: str,
        sha: str | None = None,
        branch: str | None = None,
    ) -> WriteResult:
        """
        Create or update a file.

        The sha must be the current blob sha when updating and must be
        omitted when creating.

        Args:
            owner: Repository owner
            repo: Repository name
            path: File path inside the repository
            content_b64: New content, base64 encoded
            message: Commit message
            sha: Current revision of the file, if it exists
            branch: Target branch (default branch when None)

        Returns:
            WriteResult with the new blob and commit shas
        """
        api_path = contents_path(owner, repo, path)
        body: dict[str, Any] = {"message": message, "content": content_b64}
        if sha:
            body["sha"] = sha
        if branch:
            body["branch"] = branch

        data = self.transport.request("PUT", api_path, body=body)
        return _parse_write(data, path, f"PUT {api_path}")
