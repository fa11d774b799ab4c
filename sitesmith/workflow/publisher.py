"""Publishing a repository with GitHub Pages."""

from sitesmith.codec import encode_base64
from sitesmith.exceptions import ParseError, ProviderError
from sitesmith.logging import get_logger
from sitesmith.polling import BackoffKind, PollStrategy, retry_until
from sitesmith.session import Phase, SessionContext
from sitesmith.types.pages import PagesState

logger = get_logger("workflow")

DEFAULT_BRANCH = "main"
PAGES_WORKFLOW_PATH = ".github/workflows/pages.yml"

PAGES_WORKFLOW_TEMPLATE = """\
name: Build and deploy GitHub Pages

on:
  push:
    branches: [ {branch} ]
  workflow_dispatch:

permissions:
  contents: read
  pages: write
  id-token: write

jobs:
  deploy:
    runs-on: ubuntu-latest
    environment:
      name: github-pages
      url: ${{{{ steps.deployment.outputs.page_url }}}}
    steps:
      - name: Checkout
        uses: actions/checkout@v4

      - name: Setup Pages
        uses: actions/configure-pages@v4

      - name: Upload artifact
        uses: actions/upload-pages-artifact@v3
        with:
          path: ./

      - name: Deploy to GitHub Pages
        id: deployment
        uses: actions/deploy-pages@v4
"""

ENABLE_STRATEGY = PollStrategy(
    interval=1.0, max_attempts=5, backoff=BackoffKind.EXPONENTIAL, max_delay=30.0
)
URL_STRATEGY = PollStrategy(interval=5.0, max_attempts=10)

_SOFT_ERRORS = (ProviderError, ParseError)


def render_pages_workflow(branch: str = DEFAULT_BRANCH) -> str:
    """Deploy workflow triggered by pushes to ``branch``."""
    return PAGES_WORKFLOW_TEMPLATE.format(branch=branch)


class PagesPublisher:
    """
    Turns on GitHub Pages for a repository.

    Nothing here is fatal: a repository that never gets published is still a
    valid, editable repository, so every failure is logged and reflected in
    the returned PagesState.
    """

    def __init__(
        self,
        session: SessionContext,
        enable_strategy: PollStrategy = ENABLE_STRATEGY,
        url_strategy: PollStrategy = URL_STRATEGY,
    ) -> None:
        self.session = session
        self.enable_strategy = enable_strategy
        self.url_strategy = url_strategy

    def publish(self, owner: str, repo: str) -> PagesState:
        """
        Ensure the deploy workflow, enable Pages, wait for the URL and request a build.

        Args:
            owner: Repository owner
            repo: Repository name

        Returns:
            PagesState describing how far publishing got
        """
        self.session.set_status("Setting up GitHub Pages...", Phase.PUBLISHING)
        state = PagesState()

        branch = self._default_branch(owner, repo)
        state.workflow_present = self._ensure_workflow(owner, repo, branch)

        state.enabled = self._enable(owner, repo, branch)
        if not state.enabled:
            logger.warning(
                "Pages could not be enabled for %s/%s after %d attempts",
                owner,
                repo,
                self.enable_strategy.max_attempts,
            )
            self.session.set_status("Pages not enabled; the repository is ready for editing")
            return state

        state.public_url = self._wait_for_url(owner, repo)
        if state.public_url:
            self.session.set_status(f"Site published: {state.public_url}")
        else:
            logger.warning("Pages enabled for %s/%s but no URL yet", owner, repo)
            self.session.set_status("Pages enabled, URL not available yet; check the repository settings later")

        state.build_triggered = self._trigger_build(owner, repo)
        return state

    def _default_branch(self, owner: str, repo: str) -> str:
        repos = self.session.client.repos
        try:
            return repos.get(owner, repo).default_branch or DEFAULT_BRANCH
        except _SOFT_ERRORS as e:
            logger.warning("Could not read default branch of %s/%s: %s", owner, repo, e)

        fallback = self.session.config.default_branches or [DEFAULT_BRANCH]
        branches = repos.list_branches(owner, repo, fallback)
        return next((b for b in fallback if b in branches), branches[0])

    def _ensure_workflow(self, owner: str, repo: str, branch: str) -> bool:
        contents = self.session.client.contents
        try:
            existing = contents.probe(owner, repo, PAGES_WORKFLOW_PATH)
        except _SOFT_ERRORS as e:
            logger.warning("Could not check %s: %s", PAGES_WORKFLOW_PATH, e)
            return False
        if existing is not None:
            return True

        try:
            contents.put(
                owner,
                repo,
                PAGES_WORKFLOW_PATH,
                encode_base64(render_pages_workflow(branch)),
                message="Add pages workflow",
                branch=branch,
            )
        except _SOFT_ERRORS as e:
            logger.warning("Could not add %s to %s/%s: %s", PAGES_WORKFLOW_PATH, owner, repo, e)
            return False
        logger.info("Added %s to %s/%s", PAGES_WORKFLOW_PATH, owner, repo)
        return True

    def _enable(self, owner: str, repo: str, branch: str) -> bool:
        pages = self.session.client.pages

        def attempt(n: int) -> bool | None:
            self.session.set_status(
                f"Enabling Pages (attempt {n}/{self.enable_strategy.max_attempts})..."
            )
            pages.set_source(owner, repo, branch=branch)
            return True

        result = retry_until(
            self.enable_strategy,
            attempt,
            sleep=self.session.sleep,
            retry_on=_SOFT_ERRORS,
            label="enable pages",
        )
        return result.succeeded

    def _wait_for_url(self, owner: str, repo: str) -> str | None:
        pages = self.session.client.pages

        def attempt(n: int) -> str | None:
            return pages.get(owner, repo).html_url

        result = retry_until(
            self.url_strategy,
            attempt,
            sleep=self.session.sleep,
            retry_on=_SOFT_ERRORS,
            label="pages url",
        )
        return result.value

    def _trigger_build(self, owner: str, repo: str) -> bool:
        try:
            self.session.client.pages.request_build(owner, repo)
        except _SOFT_ERRORS as e:
            logger.warning("Pages build request for %s/%s failed: %s", owner, repo, e)
            return False
        logger.info("Pages build requested for %s/%s", owner, repo)
        return True
