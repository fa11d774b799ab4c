"""sitesmith type definitions.

This module exports all data model types used by the package.
"""

from sitesmith.types.contents import ContentEntry, RemoteFile, WriteResult
from sitesmith.types.pages import PagesSite, PagesState
from sitesmith.types.repos import (
    ProvisionedRepository,
    ProvisionRequest,
    RepositoryInfo,
    ScopeCheck,
    TemplateReference,
)

__all__ = [
    # Repository types
    "TemplateReference",
    "RepositoryInfo",
    "ProvisionRequest",
    "ProvisionedRepository",
    "ScopeCheck",
    # Content types
    "RemoteFile",
    "ContentEntry",
    "WriteResult",
    # Pages types
    "PagesState",
    "PagesSite",
]
