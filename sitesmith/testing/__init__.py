"""sitesmith testing utilities.

Provides an in-memory GitHub API and fixtures for testing code that
uses sitesmith.
"""

from sitesmith.testing.fake_api import FakeGitHub, RecordedCall, blob_sha
from sitesmith.testing.fixtures import (
    SleepRecorder,
    create_session,
    create_template_api,
)

__all__ = [
    # Fake API
    "FakeGitHub",
    "RecordedCall",
    "blob_sha",
    # Helpers
    "SleepRecorder",
    "create_session",
    "create_template_api",
]
