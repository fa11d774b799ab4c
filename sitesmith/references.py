"""
Template reference parsing and prefilled issue links.

A template can be given as two fields (owner, repo) or as one combined
field holding ``owner/name`` or a full ``github.com`` URL. An explicit
owner field always wins over the owner found in the combined field.
"""

import re
from urllib.parse import quote, urlencode

from sitesmith.exceptions import ConfigurationError
from sitesmith.types.repos import TemplateReference

_URL_RE = re.compile(
    r"(?:https?://)?(?:www\.)?github\.com/([^/\s]+)/([^/\s]+)(?:/.*)?",
    re.IGNORECASE,
)
_SHORTHAND_RE = re.compile(r"^([^/\s]+)/([^/\s]+)$")


def _strip_git_suffix(name: str) -> str:
    return name[:-4] if name.endswith(".git") else name


def parse_template_reference(owner: str | None, repo: str | None) -> TemplateReference:
    """
    Resolve a template reference from the owner and repo fields.

    Args:
        owner: Owner field (may be empty when ``repo`` carries it)
        repo: Repository name, ``owner/name`` or a github.com URL

    Returns:
        TemplateReference

    Raises:
        ConfigurationError: If owner or name cannot be determined
    """
    owner = (owner or "").strip()
    repo = (repo or "").strip()

    match = _URL_RE.search(repo) or _SHORTHAND_RE.match(repo)
    if match:
        owner = owner or match.group(1)
        repo = _strip_git_suffix(match.group(2))

    if not owner or not repo:
        raise ConfigurationError(
            "Template repository is incomplete: give owner and name, 'owner/name' or a GitHub URL"
        )
    return TemplateReference(owner=owner, name=repo)


def build_issue_body(
    title: str,
    owner: str,
    repo: str,
    description: str = "",
    image: str = "",
) -> str:
    """
    Body of a "create client" issue, one ``key: value`` per line.

    The template repository's issue automation reads these keys.
    """
    client_name = title or repo or "New client"
    return (
        f"client_name: {client_name}\n"
        f"owner: {owner}\n"
        f"repo: {repo}\n"
        f"description: {description}\n"
        f"image: {image}"
    )


def prefilled_issue_url(
    template: TemplateReference,
    title: str,
    body: str,
    web_base_url: str = "https://github.com",
) -> str:
    """
    URL of the new-issue form on the template repository, prefilled.

    Opening it needs no token; the template's automation does the rest.
    """
    owner = quote(template.owner, safe="")
    name = quote(template.name, safe="")
    query = urlencode({"title": title, "body": body}, quote_via=quote)
    return f"{web_base_url.rstrip('/')}/{owner}/{name}/issues/new?{query}"
