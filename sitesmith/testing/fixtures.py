"""
Pytest fixtures for sitesmith testing.

Provides a fake GitHub API seeded with a template repository and a session
wired to it, with every wait recorded instead of slept.
"""

from collections.abc import Generator
from pathlib import Path

import pytest

from sitesmith.config import PanelConfig
from sitesmith.session import SessionContext
from sitesmith.testing.fake_api import FakeGitHub
from sitesmith.transport import RetryConfig

TEST_TOKEN = "ghp_testtoken0123456789abcdef"
TEMPLATE_OWNER = "acme"
TEMPLATE_REPO = "site-template"
SEED_PATH = "FAKE/values.js"
SEED_CONTENT = 'export default { title: "Café Ñandú", items: [] };\n'


class SleepRecorder:
    """Stand-in for ``time.sleep`` that records the requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)

    @property
    def total(self) -> float:
        return sum(self.delays)

    def reset(self) -> None:
        self.delays.clear()


# ============================================================================
# Helper Functions
# ============================================================================


def create_template_api(
    owner: str = TEMPLATE_OWNER,
    name: str = TEMPLATE_REPO,
    seed_path: str = SEED_PATH,
    seed_content: str = SEED_CONTENT,
) -> FakeGitHub:
    """Create a FakeGitHub holding one template repository with a seed file."""
    github = FakeGitHub()
    github.add_repo(owner, name, is_template=True)
    github.add_file(owner, name, seed_path, seed_content)
    return github


def create_session(
    github: FakeGitHub,
    credentials_path: Path,
    token: str | None = TEST_TOKEN,
    sleep: SleepRecorder | None = None,
    transport_retries: bool = False,
    **config_overrides,
) -> SessionContext:
    """
    Create a session talking to ``github``.

    Transport-level retries are disabled unless ``transport_retries`` is set,
    so that the recorded delays come from the workflow's own polling only.
    With it set, the session uses the default RetryConfig like the CLI does.
    """
    config = PanelConfig(
        owner=TEMPLATE_OWNER,
        template_owner=TEMPLATE_OWNER,
        template_repo=TEMPLATE_REPO,
        credentials_path=credentials_path,
        **config_overrides,
    )
    return SessionContext.create(
        config,
        token=token,
        sleep=sleep or SleepRecorder(),
        http_transport=github.transport(),
        retry_config=None if transport_retries else RetryConfig(max_retries=0),
    )


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def fake_github() -> FakeGitHub:
    """
    Provide a FakeGitHub with a template repository and its seed file.

    Example:
        ```python
        def test_generate(fake_github, session):
            fake_github.script("POST", "/repos/acme/site-template/generate", 500)
            ...
            assert fake_github.was_called("PATCH", "/repos/acme/site1")
        ```
    """
    return create_template_api()


@pytest.fixture
def sleeps() -> SleepRecorder:
    """Provide a sleep recorder."""
    return SleepRecorder()


@pytest.fixture
def credentials_path(tmp_path: Path) -> Path:
    """Provide a credential file location inside the test's temp dir."""
    return tmp_path / "sitesmith" / "credentials.json"


@pytest.fixture
def session(
    fake_github: FakeGitHub, credentials_path: Path, sleeps: SleepRecorder
) -> Generator[SessionContext, None, None]:
    """Provide a session connected to ``fake_github`` with a token supplied as input."""
    ctx = create_session(fake_github, credentials_path, sleep=sleeps)
    yield ctx
    ctx.close()


@pytest.fixture
def anonymous_session(
    fake_github: FakeGitHub, credentials_path: Path, sleeps: SleepRecorder
) -> Generator[SessionContext, None, None]:
    """Provide a session with no token in any tier."""
    ctx = create_session(fake_github, credentials_path, token=None, sleep=sleeps)
    yield ctx
    ctx.close()


@pytest.fixture
def retrying_session(
    fake_github: FakeGitHub, credentials_path: Path, sleeps: SleepRecorder
) -> Generator[SessionContext, None, None]:
    """Provide a session with the default transport retries, as the CLI builds it."""
    ctx = create_session(fake_github, credentials_path, sleep=sleeps, transport_retries=True)
    yield ctx
    ctx.close()
