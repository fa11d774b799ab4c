"""File content data models."""

from dataclasses import dataclass


@dataclass
class RemoteFile:
    """
    A file in a repository, decoded to text.

    ``sha`` is GitHub's revision marker for the stored blob. It is None when
    the file does not exist remotely yet, which makes the next save a create.
    """

    owner: str
    repo: str
    path: str
    content: str = ""
    sha: str | None = None

    @property
    def exists(self) -> bool:
        return self.sha is not None


@dataclass
class ContentEntry:
    """A raw entry from the contents endpoint (content still base64)."""

    type: str
    path: str
    sha: str
    content: str
    encoding: str | None
    size: int


@dataclass
class WriteResult:
    """Response of a create/update file call."""

    path: str
    sha: str | None
    commit_sha: str | None
