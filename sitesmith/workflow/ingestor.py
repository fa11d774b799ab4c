"""Waiting for the seed file of a freshly generated repository."""

from sitesmith.codec import decode_base64
from sitesmith.exceptions import FileNotFoundAfterRetriesError, ParseError, ServerError
from sitesmith.logging import get_logger
from sitesmith.polling import PollStrategy, retry_until
from sitesmith.session import Phase, SessionContext
from sitesmith.types.contents import ContentEntry, RemoteFile

logger = get_logger("workflow")

FILE_READY = PollStrategy(interval=3.0, max_attempts=5)


class ContentIngestor:
    """
    Polls the contents endpoint until a file shows up with content.

    GitHub copies the template tree asynchronously, so the file can lag
    behind the repository itself by several seconds.
    """

    GENERAL_MAX_ATTEMPTS = 15

    def __init__(self, session: SessionContext, strategy: PollStrategy = FILE_READY) -> None:
        self.session = session
        self.strategy = strategy

    @classmethod
    def patient(cls, session: SessionContext) -> "ContentIngestor":
        """Ingestor for files that may take longer to appear."""
        return cls(
            session,
            PollStrategy(interval=FILE_READY.interval, max_attempts=cls.GENERAL_MAX_ATTEMPTS),
        )

    def await_file(self, owner: str, repo: str, path: str) -> RemoteFile:
        """
        Wait for a file and decode it.

        Args:
            owner: Repository owner
            repo: Repository name
            path: File path inside the repository

        Returns:
            RemoteFile with decoded content and sha; also set as the session's current file

        Raises:
            FileNotFoundAfterRetriesError: If the file never appears with content
        """
        self.session.set_status(f"Loading {path}...", Phase.INGESTING)
        contents = self.session.client.contents

        def attempt(n: int) -> ContentEntry | None:
            entry = contents.probe(owner, repo, path)
            if entry is None or entry.type != "file" or not entry.content:
                return None
            return entry

        result = retry_until(
            self.strategy,
            attempt,
            sleep=self.session.sleep,
            retry_on=(ServerError, ParseError),
            label=f"{owner}/{repo}:{path}",
        )
        if not result.succeeded:
            raise FileNotFoundAfterRetriesError(path, result.attempts)

        entry = result.value
        remote = RemoteFile(
            owner=owner,
            repo=repo,
            path=path,
            content=decode_base64(entry.content),
            sha=entry.sha,
        )
        self.session.current_file = remote
        logger.info("Loaded %s from %s/%s (%d chars)", path, owner, repo, len(remote.content))
        return remote
