"""Shared fixtures for the sitesmith test suite."""

from sitesmith.testing.conftest import (  # noqa: F401
    anonymous_session,
    credentials_path,
    fake_github,
    retrying_session,
    session,
    sleeps,
)
