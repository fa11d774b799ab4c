"""
Pytest plugin for sitesmith testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
discovered by pytest. To use them, add this to your conftest.py:

    pytest_plugins = ["sitesmith.testing.conftest"]
"""

# Re-export all fixtures for pytest auto-discovery
from sitesmith.testing.fixtures import (
    anonymous_session,
    credentials_path,
    fake_github,
    retrying_session,
    session,
    sleeps,
)

__all__ = [
    "fake_github",
    "sleeps",
    "credentials_path",
    "session",
    "retrying_session",
    "anonymous_session",
]
