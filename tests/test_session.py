"""
Tests for the session context.
"""

from pathlib import Path
from unittest.mock import MagicMock

from sitesmith.config import PanelConfig
from sitesmith.exceptions import NotFoundError
from sitesmith.session import Phase, SessionContext, WorkflowStatus
from sitesmith.testing import FakeGitHub, SleepRecorder
from sitesmith.testing.fixtures import TEST_TOKEN


def test_set_status_notifies_listeners(session: SessionContext) -> None:
    seen: list[WorkflowStatus] = []
    session.subscribe(seen.append)

    session.set_status("Generating...", Phase.GENERATING)
    session.set_status("Still generating")

    assert [s.phase for s in seen] == [Phase.GENERATING, Phase.GENERATING]
    assert seen[-1].message == "Still generating"
    assert not seen[-1].is_error


def test_fail_records_error(session: SessionContext) -> None:
    session.fail(NotFoundError("NOT_FOUND", "Repository missing"))

    assert session.status.phase is Phase.FAILED
    assert session.status.message == "Repository missing"
    assert session.status.is_error
    assert "NOT_FOUND" in session.status.error


def test_requests_carry_the_resolved_token(session: SessionContext, fake_github: FakeGitHub) -> None:
    session.client.repos.get("acme", "site-template")

    assert fake_github.calls[-1].headers["authorization"] == f"token {TEST_TOKEN}"


def test_saved_token_takes_effect_immediately(session: SessionContext, fake_github: FakeGitHub) -> None:
    session.credentials.save("ghp_replacement")

    session.client.repos.get("acme", "site-template")

    assert fake_github.calls[-1].headers["authorization"] == "token ghp_replacement"


def test_config_token_used_when_nothing_saved(fake_github: FakeGitHub, tmp_path: Path) -> None:
    config = PanelConfig(pat="ghp_fromconfig", credentials_path=tmp_path / "c.json")

    with SessionContext.create(config, sleep=SleepRecorder(), http_transport=fake_github.transport()) as ctx:
        assert ctx.credentials.resolve() == "ghp_fromconfig"
        assert ctx.credentials.source == "memory"


def test_close_closes_client(session: SessionContext) -> None:
    session.client = MagicMock()

    with session:
        pass

    session.client.close.assert_called_once()


def test_listener_receives_failure(session: SessionContext) -> None:
    listener = MagicMock()
    session.subscribe(listener)

    session.fail("boom")

    listener.assert_called_once_with(session.status)
    assert session.status.error == "boom"
