"""Repositories resource client."""

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from sitesmith.clients.schema import expect_list, expect_object, optional, require
from sitesmith.exceptions import (
    AuthenticationError,
    ParseError,
    PermissionDeniedError,
    ProviderError,
)
from sitesmith.logging import get_logger
from sitesmith.types.repos import (
    ProvisionedRepository,
    RepositoryInfo,
    ScopeCheck,
    TemplateReference,
)

if TYPE_CHECKING:
    from sitesmith.transport import HTTPTransport

logger = get_logger("repos")


def repo_path(owner: str, repo: str) -> str:
    """API path of a repository."""
    return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"


def _parse_repository(data: Any, endpoint: str) -> RepositoryInfo:
    """Parse repository metadata."""
    data = expect_object(data, endpoint)
    owner = expect_object(require(data, "owner", dict, endpoint), endpoint)
    name = require(data, "name", str, endpoint)
    owner_login = require(owner, "login", str, endpoint)
    return RepositoryInfo(
        id=require(data, "id", int, endpoint),
        owner=owner_login,
        name=name,
        full_name=optional(data, "full_name", str, endpoint, f"{owner_login}/{name}"),
        is_template=bool(data.get("is_template", False)),
        private=bool(data.get("private", False)),
        default_branch=optional(data, "default_branch", str, endpoint, "main"),
        html_url=optional(data, "html_url", str, endpoint, ""),
        description=optional(data, "description", str, endpoint),
    )


class ReposClient:
    """Client for repository-related operations."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the repos client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def get(self, owner: str, repo: str) -> RepositoryInfo:
        """
        Get repository metadata.

        Raises:
            NotFoundError: If the repository does not exist or is not visible
            ParseError: If the body lacks an id, owner or name
        """
        path = repo_path(owner, repo)
        data = self.transport.request("GET", path)
        return _parse_repository(data, f"GET {path}")

    def generate(
        self,
        template: TemplateReference,
        owner: str,
        name: str,
        description: str = "",
        private: bool = False,
        include_all_branches: bool = False,
    ) -> ProvisionedRepository:
        """
        Create a repository from a template.

        GitHub may create the repository under a different name than the one
        requested; the returned owner/name are the ones it reports. The request is
        never repeated, since a retry could create a second repository.

        Args:
            template: Template repository
            owner: Desired owner (user or organization)
            name: Desired repository name
            description: Repository description
            private: Requested visibility
            include_all_branches: Copy every branch, not just the default one

        Returns:
            ProvisionedRepository with ready=False
        """
        path = f"{repo_path(template.owner, template.name)}/generate"
        body: dict[str, Any] = {
            "owner": owner,
            "name": name,
            "description": description,
            "private": private,
            "include_all_branches": include_all_branches,
        }
        data = expect_object(
            self.transport.request("POST", path, body=body, retry=False), f"POST {path}"
        )

        owner_data = data.get("owner")
        actual_owner = owner_data.get("login") if isinstance(owner_data, dict) else None
        return ProvisionedRepository(
            owner=actual_owner or owner,
            name=data.get("name") or name,
            html_url=data.get("html_url"),
        )

    def update(self, owner: str, repo: str, **settings: Any) -> RepositoryInfo:
        """
        Patch repository settings (visibility, has_issues, ...).

        Args:
            owner: Repository owner
            repo: Repository name
            **settings: Fields accepted by PATCH /repos/{owner}/{repo}
        """
        path = repo_path(owner, repo)
        data = self.transport.request("PATCH", path, body=settings)
        return _parse_repository(data, f"PATCH {path}")

    def list_for_owner(self, owner: str) -> list[RepositoryInfo]:
        """
        List repositories of a user, falling back to the organization endpoint.

        Args:
            owner: User or organization login

        Returns:
            Repositories sorted by name

        Raises:
            AuthenticationError: If the token is rejected
        """
        path = f"/users/{quote(owner, safe='')}/repos"
        try:
            data = self.transport.request("GET", path)
        except PermissionDeniedError:
            logger.warning("users endpoint refused %s, trying organization endpoint", owner)
            path = f"/orgs/{quote(owner, safe='')}/repos"
            data = self.transport.request("GET", path)

        endpoint = f"GET {path}"
        repos = [_parse_repository(item, endpoint) for item in expect_list(data, endpoint)]
        return sorted(repos, key=lambda r: r.name.lower())

    def list_branches(self, owner: str, repo: str, fallback: list[str]) -> list[str]:
        """
        List branch names, or ``fallback`` when the call fails or returns none.

        Args:
            owner: Repository owner
            repo: Repository name
            fallback: Names returned on any error
        """
        path = f"{repo_path(owner, repo)}/branches"
        try:
            data = self.transport.request("GET", path)
        except (ProviderError, ParseError) as e:
            logger.warning("Could not list branches of %s/%s: %s", owner, repo, e.message)
            return list(fallback)

        if not isinstance(data, list) or not data:
            return list(fallback)
        names = [item.get("name") for item in data if isinstance(item, dict)]
        return [n for n in names if n] or list(fallback)

    def check_token_scopes(self, owner: str, repo: str) -> ScopeCheck:
        """
        Probe what the current token can do on a repository.

        Reads the repository, its Actions workflows and its Pages site. The
        Pages probe only counts as missing on 404.

        Args:
            owner: Repository owner
            repo: Repository name

        Returns:
            ScopeCheck listing the missing rights
        """
        base = repo_path(owner, repo)
        has_repo = self._reachable(base)
        has_workflow = self._reachable(f"{base}/actions/workflows")
        try:
            self.transport.request("GET", f"{base}/pages")
            has_pages = True
        except AuthenticationError:
            raise
        except ProviderError as e:
            has_pages = e.status_code != 404

        missing = [
            scope
            for scope, ok in (("repo", has_repo), ("workflow", has_workflow), ("pages", has_pages))
            if not ok
        ]
        logger.info("Token scope check for %s/%s: missing=%s", owner, repo, missing or "none")
        return ScopeCheck(repo=has_repo, workflow=has_workflow, pages=has_pages, missing=missing)

    def _reachable(self, path: str) -> bool:
        try:
            self.transport.request("GET", path)
        except AuthenticationError:
            raise
        except ProviderError:
            return False
        return True
