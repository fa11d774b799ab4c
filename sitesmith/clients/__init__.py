"""Resource clients for the GitHub REST API."""

from sitesmith.clients.contents import ContentsClient
from sitesmith.clients.dispatches import DispatchesClient
from sitesmith.clients.pages import PagesClient
from sitesmith.clients.repos import ReposClient

__all__ = [
    "ContentsClient",
    "DispatchesClient",
    "PagesClient",
    "ReposClient",
]
