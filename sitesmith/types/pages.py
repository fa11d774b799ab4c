"""GitHub Pages data models."""

from dataclasses import dataclass


@dataclass
class PagesState:
    """Progress of publishing a repository with GitHub Pages."""

    workflow_present: bool = False
    enabled: bool = False
    public_url: str | None = None
    build_triggered: bool = False

    @property
    def published(self) -> bool:
        return self.enabled and self.public_url is not None


@dataclass
class PagesSite:
    """Response of GET /repos/{owner}/{repo}/pages."""

    status: str | None
    html_url: str | None
    build_type: str | None
