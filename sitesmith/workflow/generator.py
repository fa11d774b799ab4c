"""Repository generation from a template."""

from sitesmith.exceptions import (
    GenerationError,
    GenerationPermissionError,
    NotFoundError,
    ParseError,
    PermissionDeniedError,
    ProviderError,
    RepositoryNotReadyError,
    ServerError,
    TemplateNotAccessibleError,
)
from sitesmith.logging import get_logger
from sitesmith.polling import PollStrategy, retry_until
from sitesmith.session import Phase, SessionContext
from sitesmith.types.repos import ProvisionedRepository, ProvisionRequest, RepositoryInfo

logger = get_logger("workflow")

REPOSITORY_READY = PollStrategy(interval=3.0, max_attempts=5)

# Applied after generation whatever visibility the generate call was given
PUBLIC_SETTINGS = {
    "private": False,
    "has_issues": True,
    "has_wiki": False,
    "has_projects": False,
}


class RepositoryGenerator:
    """Creates a repository from a template and waits until it can be queried."""

    def __init__(
        self,
        session: SessionContext,
        ready_strategy: PollStrategy = REPOSITORY_READY,
    ) -> None:
        self.session = session
        self.ready_strategy = ready_strategy

    def generate(self, request: ProvisionRequest) -> ProvisionedRepository:
        """
        Generate a repository and wait for it.

        Args:
            request: What to create and from which template

        Returns:
            ProvisionedRepository with the owner/name GitHub reports, ready=True

        Raises:
            ConfigurationError: If owner or name is empty
            TemplateNotAccessibleError: If the generate call answers 404
            GenerationPermissionError: If the generate call answers 403
            GenerationError: On any other failure of the generate call
            RepositoryNotReadyError: If the repository never becomes queryable
        """
        request.validate()
        template = request.template
        self.session.set_status(
            f"Creating {request.owner}/{request.name} from {template.full_name}...",
            Phase.GENERATING,
        )

        try:
            repo = self.session.client.repos.generate(
                template,
                owner=request.owner,
                name=request.name,
                description=request.description,
                private=request.private,
                include_all_branches=request.include_all_branches,
            )
        except NotFoundError as e:
            raise TemplateNotAccessibleError(
                "TEMPLATE_NOT_ACCESSIBLE",
                f"Template {template.full_name} not found or not accessible; "
                "check the template owner/name and that it is marked as a template",
                e.status_code,
                e.body,
                e.endpoint,
            ) from e
        except PermissionDeniedError as e:
            raise GenerationPermissionError(
                "INSUFFICIENT_SCOPE",
                f"Insufficient permission for {e.endpoint}: the token needs the repo scope "
                f"and the right to create repositories under {request.owner}. Response: {e.body}",
                e.status_code,
                e.body,
                e.endpoint,
            ) from e
        except ProviderError as e:
            raise GenerationError(
                "GENERATION_FAILED",
                f"Repository generation failed with {e.status_code}: {e.body}",
                e.status_code,
                e.body,
                e.endpoint,
            ) from e

        if (repo.owner, repo.name) != (request.owner, request.name):
            logger.info("GitHub created %s instead of %s/%s", repo.full_name, request.owner, request.name)
        self.session.set_status(f"Repository created: {repo.full_name}")

        self._make_public(repo)
        self._wait_until_ready(repo)
        return repo

    def _make_public(self, repo: ProvisionedRepository) -> None:
        try:
            self.session.client.repos.update(repo.owner, repo.name, **PUBLIC_SETTINGS)
        except (ProviderError, ParseError) as e:
            logger.warning("Could not update settings of %s: %s", repo.full_name, e)
        else:
            logger.info("Repository settings of %s updated", repo.full_name)

    def _wait_until_ready(self, repo: ProvisionedRepository) -> None:
        self.session.set_status("Waiting for the repository to initialize...", Phase.WAITING_FOR_REPOSITORY)

        def attempt(n: int) -> RepositoryInfo | None:
            return self.session.client.repos.get(repo.owner, repo.name)

        result = retry_until(
            self.ready_strategy,
            attempt,
            sleep=self.session.sleep,
            retry_on=(NotFoundError, ServerError, ParseError),
            label=f"repository {repo.full_name}",
        )
        if not result.succeeded:
            raise RepositoryNotReadyError(repo.full_name, result.attempts)

        repo.ready = True
        repo.html_url = result.value.html_url or repo.html_url
        logger.info("Repository %s is ready", repo.full_name)
