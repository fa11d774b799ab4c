"""Loading and saving a repository file as text."""

from sitesmith.codec import decode_base64, encode_base64
from sitesmith.exceptions import (
    ConflictError,
    NotFoundError,
    ParseError,
    ProviderError,
    StaleRevisionError,
    ValidationError,
)
from sitesmith.logging import get_logger
from sitesmith.polling import PollStrategy, retry_until
from sitesmith.session import Phase, SessionContext
from sitesmith.types.contents import RemoteFile

logger = get_logger("workflow")

LOAD_STRATEGY = PollStrategy(interval=3.0, max_attempts=5)


class EditorBridge:
    """Moves file content between a repository and an in-memory text buffer."""

    def __init__(self, session: SessionContext, load_strategy: PollStrategy = LOAD_STRATEGY) -> None:
        self.session = session
        self.load_strategy = load_strategy

    def load(self, owner: str, repo: str, path: str) -> RemoteFile:
        """
        Fetch a file and decode it.

        A 404 is retried on the load strategy, since a file written moments
        ago may not be readable yet.

        Raises:
            NotFoundError: If the file is still missing after every attempt
            ParseError: If the path is not a file
        """
        self.session.set_status(f"Loading {owner}/{repo}/{path}...", Phase.EDITING)
        contents = self.session.client.contents

        result = retry_until(
            self.load_strategy,
            lambda n: contents.probe(owner, repo, path),
            sleep=self.session.sleep,
            label=f"load {owner}/{repo}:{path}",
        )
        if not result.succeeded:
            raise NotFoundError(
                "NOT_FOUND",
                f"{path} not found in {owner}/{repo} after {result.attempts} attempts",
                status_code=404,
                endpoint=f"GET /repos/{owner}/{repo}/contents/{path}",
            )
        entry = result.value
        if entry.type != "file":
            raise ParseError(f"{path} is a {entry.type}, not a file")

        remote = RemoteFile(
            owner=owner,
            repo=repo,
            path=path,
            content=decode_base64(entry.content),
            sha=entry.sha,
        )
        self.session.current_file = remote
        self.session.set_status("File loaded")
        return remote

    def save(self, file: RemoteFile, new_content: str, message: str | None = None) -> RemoteFile:
        """
        Write new content for a file.

        The current sha is looked up right before writing; it is sent when
        the file exists and left out when it does not, which makes the call
        an update or a create.

        Args:
            file: The file as last loaded or saved
            new_content: Full new text of the file
            message: Commit message (default: "Update <path> via admin")

        Returns:
            RemoteFile with the new content and sha; also the session's current file

        Raises:
            StaleRevisionError: If GitHub rejects the sha (422/409)
            ProviderError: On any other API failure
        """
        self.session.set_status(f"Saving {file.path}...", Phase.SAVING)
        contents = self.session.client.contents

        sha = file.sha
        try:
            current = contents.probe(file.owner, file.repo, file.path)
        except (ProviderError, ParseError) as e:
            logger.warning("Could not re-check %s before saving: %s", file.path, e)
        else:
            sha = current.sha if current is not None else None

        try:
            result = contents.put(
                file.owner,
                file.repo,
                file.path,
                encode_base64(new_content),
                message=message or f"Update {file.path} via admin",
                sha=sha,
            )
        except (ValidationError, ConflictError) as e:
            raise StaleRevisionError(
                "STALE_REVISION",
                f"{file.path} changed on GitHub since it was loaded; reload it and retry",
                e.status_code,
                e.body,
                e.endpoint,
            ) from e

        saved = RemoteFile(
            owner=file.owner,
            repo=file.repo,
            path=file.path,
            content=new_content,
            sha=result.sha or result.commit_sha,
        )
        self.session.current_file = saved
        self.session.set_status("File saved")
        return saved
