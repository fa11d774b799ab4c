"""
The provisioning workflow.

Runs the stages strictly one after another: token, template check,
generation, seed file, Pages. Only the Pages stage is allowed to fall
short without failing the run.
"""

from dataclasses import dataclass, field

from sitesmith.exceptions import PermissionDeniedError, SitesmithError, TemplateInvalidError
from sitesmith.logging import get_logger
from sitesmith.session import Phase, SessionContext
from sitesmith.types.contents import RemoteFile
from sitesmith.types.pages import PagesState
from sitesmith.types.repos import ProvisionedRepository, ProvisionRequest
from sitesmith.workflow.generator import RepositoryGenerator
from sitesmith.workflow.ingestor import ContentIngestor
from sitesmith.workflow.publisher import PagesPublisher
from sitesmith.workflow.validator import SEED_FILE_MISSING, TemplateValidator

logger = get_logger("workflow")


@dataclass
class ProvisionResult:
    """Everything a provisioning run produced."""

    repository: ProvisionedRepository
    file: RemoteFile
    pages: PagesState
    warnings: list[str] = field(default_factory=list)


class ProvisioningWorkflow:
    """
    Turns a template repository into a published, editable client repository.

    Example:
        ```python
        with SessionContext.create(load_config("config.json")) as session:
            result = ProvisioningWorkflow(session).run(
                ProvisionRequest(TemplateReference("acme", "tpl"), owner="acme", name="site1")
            )
            print(result.repository.full_name, result.pages.public_url)
        ```
    """

    def __init__(
        self,
        session: SessionContext,
        validator: TemplateValidator | None = None,
        generator: RepositoryGenerator | None = None,
        ingestor: ContentIngestor | None = None,
        publisher: PagesPublisher | None = None,
    ) -> None:
        self.session = session
        self.validator = validator or TemplateValidator(session)
        self.generator = generator or RepositoryGenerator(session)
        self.ingestor = ingestor or ContentIngestor(session)
        self.publisher = publisher or PagesPublisher(session)

    def run(
        self,
        request: ProvisionRequest,
        seed_path: str | None = None,
        check_scopes: bool = False,
    ) -> ProvisionResult:
        """
        Provision a client repository.

        Args:
            request: Template and desired owner/name
            seed_path: File to load for editing (default: config.file_path)
            check_scopes: Probe the token's rights on the template first

        Returns:
            ProvisionResult

        Raises:
            SitesmithError: On any terminal failure; the session status carries it too
        """
        seed_path = seed_path or self.session.config.file_path
        try:
            return self._run(request, seed_path, check_scopes)
        except SitesmithError as e:
            self.session.fail(e)
            raise

    def _run(self, request: ProvisionRequest, seed_path: str, check_scopes: bool) -> ProvisionResult:
        warnings: list[str] = []
        template = request.template

        self.session.set_status("Checking token...", Phase.CHECKING_TOKEN)
        self.session.credentials.require()
        request.validate()

        if check_scopes:
            scopes = self.session.client.repos.check_token_scopes(template.owner, template.name)
            if not scopes.valid:
                raise PermissionDeniedError(
                    "MISSING_SCOPES",
                    f"Token is missing rights: {', '.join(scopes.missing)}. "
                    "Required: repo, workflow, pages",
                    endpoint=f"/repos/{template.full_name}",
                )

        validation = self.validator.validate(template, seed_path)
        if validation.fatal:
            raise TemplateInvalidError(
                validation.reason,
                f"Template {template.full_name}: {validation.reason}",
            )
        if validation.reason == SEED_FILE_MISSING:
            warning = f"Template {template.full_name} has no '{seed_path}' on its default branch"
            logger.warning(warning)
            warnings.append(warning)

        repository = self.generator.generate(request)
        remote = self.ingestor.await_file(repository.owner, repository.name, seed_path)
        pages = self.publisher.publish(repository.owner, repository.name)
        if not pages.enabled:
            warnings.append("GitHub Pages could not be enabled")
        elif not pages.public_url:
            warnings.append("GitHub Pages is enabled but the site URL is not available yet")

        self.session.set_status(f"{repository.full_name} is ready for editing", Phase.DONE)
        return ProvisionResult(repository=repository, file=remote, pages=pages, warnings=warnings)
