"""Template repository validation."""

from dataclasses import dataclass

from sitesmith.exceptions import NotFoundError, ParseError, ProviderError
from sitesmith.logging import get_logger
from sitesmith.session import Phase, SessionContext
from sitesmith.types.repos import RepositoryInfo, TemplateReference

logger = get_logger("workflow")

TEMPLATE_MISSING = "template missing"
NOT_A_TEMPLATE = "not marked as template"
SEED_FILE_MISSING = "seed file missing"


@dataclass
class ValidationResult:
    """Outcome of checking a template repository."""

    ok: bool
    reason: str | None = None
    repository: RepositoryInfo | None = None
    seed_present: bool | None = None

    @property
    def fatal(self) -> bool:
        """True when provisioning must not go ahead."""
        return self.reason in (TEMPLATE_MISSING, NOT_A_TEMPLATE)


class TemplateValidator:
    """Checks that a template exists, is flagged as a template and has the seed file."""

    def __init__(self, session: SessionContext) -> None:
        self.session = session

    def validate(self, template: TemplateReference, required_path: str) -> ValidationResult:
        """
        Validate a template repository.

        Stops at the first failed check. The seed file check is advisory:
        a failed lookup is logged and reported as ``seed_present=None``.

        Args:
            template: Template repository
            required_path: File every generated repository must contain

        Returns:
            ValidationResult

        Raises:
            ProviderError: If the metadata lookup fails for a reason other than 404
        """
        self.session.set_status(
            f"Checking template {template.full_name}...", Phase.VALIDATING_TEMPLATE
        )
        try:
            info = self.session.client.repos.get(template.owner, template.name)
        except NotFoundError:
            return ValidationResult(ok=False, reason=TEMPLATE_MISSING)

        if not info.is_template:
            return ValidationResult(ok=False, reason=NOT_A_TEMPLATE, repository=info)

        try:
            entry = self.session.client.contents.probe(template.owner, template.name, required_path)
        except (ProviderError, ParseError) as e:
            logger.warning("Could not check %s in %s: %s", required_path, template.full_name, e)
            return ValidationResult(ok=True, repository=info, seed_present=None)

        if entry is None:
            return ValidationResult(
                ok=False, reason=SEED_FILE_MISSING, repository=info, seed_present=False
            )
        return ValidationResult(ok=True, repository=info, seed_present=True)
