"""
Access token resolution.

The token lives in up to three places: the process memory, a durable
credentials file and whatever the operator typed (``--token``). Lookups
walk them in that order. Nothing is copied between tiers except by an
explicit ``save``.
"""

import json
import os
from collections.abc import Callable
from pathlib import Path

from sitesmith.exceptions import ConfigurationError, MissingCredentialError
from sitesmith.logging import get_logger

logger = get_logger("credentials")

STORE_KEY = "admin_pat"


class CredentialStore:
    """Durable token storage in a small JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> str | None:
        """
        Read the saved token.

        Returns:
            The token, or None if nothing is saved

        Raises:
            ConfigurationError: If the file exists but is corrupt
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Credential file {self.path} is corrupt: {e}") from e
        token = data.get(STORE_KEY) if isinstance(data, dict) else None
        return token or None

    def save(self, token: str) -> None:
        """Write the token, readable by the current user only."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(json.dumps({STORE_KEY: token}), encoding="utf-8")
        os.chmod(tmp, 0o600)
        tmp.replace(self.path)

    def clear(self) -> None:
        """Remove the saved token."""
        self.path.unlink(missing_ok=True)


class CredentialResolver:
    """
    Resolves the access token from memory, the durable store or operator input.

    Example:
        ```python
        resolver = CredentialResolver(CredentialStore(path), input_value=lambda: args.token)
        resolver.prime(bootstrap=config.pat)
        token = resolver.require()
        ```
    """

    def __init__(
        self,
        store: CredentialStore,
        input_value: Callable[[], str | None] | None = None,
    ) -> None:
        """
        Args:
            store: Durable token storage
            input_value: Returns the operator-supplied token, if any
        """
        self.store = store
        self.input_value = input_value or (lambda: None)
        self._memory: str | None = None

    @property
    def source(self) -> str | None:
        """Name of the tier the next ``resolve`` would use."""
        if self._memory:
            return "memory"
        if self._load_stored():
            return "store"
        if self.input_value():
            return "input"
        return None

    def prime(self, bootstrap: str | None = None) -> None:
        """
        Seed the in-memory tier at startup.

        The saved token wins; a bootstrap token from configuration is kept in
        memory only when nothing is saved.

        Args:
            bootstrap: Token from config.json, if any
        """
        saved = self._load_stored()
        if saved:
            self._memory = saved
            logger.info("Token loaded from credential store (hidden)")
        elif bootstrap:
            self._memory = bootstrap
            logger.info("Token loaded from configuration (hidden)")

    def resolve(self) -> str:
        """
        Return the current token, or "" when no tier holds one.
        """
        if self._memory:
            logger.debug("Using token from memory")
            return self._memory
        saved = self._load_stored()
        if saved:
            logger.debug("Using token from credential store")
            return saved
        value = self.input_value() or ""
        if value:
            logger.debug("Using token from input")
        return value

    def require(self) -> str:
        """
        Return the current token.

        Raises:
            MissingCredentialError: If no tier holds a token
        """
        token = self.resolve()
        if not token:
            raise MissingCredentialError(
                "No GitHub token: pass --token, run 'sitesmith token set' or set SITESMITH_TOKEN"
            )
        return token

    def save(self, token: str) -> None:
        """
        Persist an explicitly entered token and drop the in-memory copy so
        the new value is used from now on.
        """
        self.store.save(token)
        self._memory = None
        logger.info("Token saved to %s", self.store.path)

    def _load_stored(self) -> str | None:
        try:
            return self.store.load()
        except (OSError, ConfigurationError) as e:
            logger.warning("Credential store unavailable: %s", e)
            return None
