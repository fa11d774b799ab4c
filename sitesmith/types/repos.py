"""Repository-related data models."""

from dataclasses import dataclass, field

from sitesmith.exceptions import ConfigurationError


@dataclass(frozen=True)
class TemplateReference:
    """A template repository, identified by owner and name."""

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass
class RepositoryInfo:
    """Repository metadata as returned by GET /repos/{owner}/{repo}."""

    id: int
    owner: str
    name: str
    full_name: str
    is_template: bool
    private: bool
    default_branch: str
    html_url: str
    description: str | None = None


@dataclass
class ProvisionRequest:
    """Parameters for generating a client repository from a template."""

    template: TemplateReference
    owner: str
    name: str
    description: str = "Generated from template"
    private: bool = False
    include_all_branches: bool = True

    def validate(self) -> None:
        """Raise ConfigurationError unless owner and name are set."""
        if not self.owner.strip() or not self.name.strip():
            raise ConfigurationError("Both owner and repository name are required")


@dataclass
class ProvisionedRepository:
    """A generated repository; owner/name are what GitHub actually created."""

    owner: str
    name: str
    ready: bool = False
    html_url: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass
class ScopeCheck:
    """Result of probing what the token is allowed to do on a repository."""

    repo: bool
    workflow: bool
    pages: bool
    missing: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.missing
