"""
cli.py

Command-line front end for the provisioning panel.

Commands:
- provision: generate a client repo from the template, load the seed file, enable Pages
- load / save: edit a file of an existing client repo
- dispatch: send a repository_dispatch event with client data
- repos: list the repositories of the configured owner
- issue-url: print a prefilled "create client" issue link (no token needed)
- token: save the token or check its rights on the template
"""

from __future__ import annotations

import argparse
import getpass
import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path

from sitesmith.config import PanelConfig, load_config
from sitesmith.exceptions import ConfigurationError, SitesmithError
from sitesmith.logging import configure_logging, mask_token
from sitesmith.references import build_issue_body, parse_template_reference, prefilled_issue_url
from sitesmith.session import SessionContext, WorkflowStatus
from sitesmith.types.contents import RemoteFile
from sitesmith.types.repos import ProvisionRequest
from sitesmith.workflow import DispatchEmitter, EditorBridge, ProvisioningWorkflow

SessionFactory = Callable[[PanelConfig, str | None], SessionContext]


def _default_session(config: PanelConfig, token: str | None) -> SessionContext:
    return SessionContext.create(config, token=token)


def _print_status(status: WorkflowStatus) -> None:
    prefix = "error" if status.is_error else status.phase.value
    print(f"[{prefix}] {status.message}", file=sys.stderr)


def _template(args: argparse.Namespace, config: PanelConfig):
    return parse_template_reference(
        args.template_owner or config.template_owner,
        args.template_repo or config.template_repo,
    )


def _owner(args: argparse.Namespace, config: PanelConfig) -> str:
    owner = getattr(args, "owner", None) or config.owner
    if not owner:
        raise ConfigurationError("Owner is required (--owner or 'owner' in config.json)")
    return owner


def _write_output(text: str, out: str | None) -> None:
    if out:
        Path(out).write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)


def provision_cmd(args: argparse.Namespace, session: SessionContext) -> int:
    config = session.config
    request = ProvisionRequest(
        template=_template(args, config),
        owner=_owner(args, config),
        name=args.name,
        description=args.description,
        private=args.private,
    )
    result = ProvisioningWorkflow(session).run(
        request, seed_path=args.path, check_scopes=args.check_scopes
    )
    for warning in result.warnings:
        print(f"warning: {warning}", file=sys.stderr)
    print(json.dumps({
        "repository": result.repository.full_name,
        "html_url": result.repository.html_url,
        "file": result.file.path,
        "sha": result.file.sha,
        "pages_enabled": result.pages.enabled,
        "pages_url": result.pages.public_url,
    }, indent=2))
    if args.out:
        _write_output(result.file.content, args.out)
    return 0


def load_cmd(args: argparse.Namespace, session: SessionContext) -> int:
    remote = EditorBridge(session).load(
        _owner(args, session.config), args.repo, args.path or session.config.file_path
    )
    _write_output(remote.content, args.out)
    return 0


def save_cmd(args: argparse.Namespace, session: SessionContext) -> int:
    path = args.path or session.config.file_path
    content = Path(args.source).read_text(encoding="utf-8")
    file = RemoteFile(owner=_owner(args, session.config), repo=args.repo, path=path)
    saved = EditorBridge(session).save(file, content, message=args.message)
    print(saved.sha or "")
    return 0


def dispatch_cmd(args: argparse.Namespace, session: SessionContext) -> int:
    emitter = DispatchEmitter(session)
    owner = _owner(args, session.config)
    if args.payload:
        try:
            payload = json.loads(args.payload)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"--payload is not valid JSON: {e}") from e
        emitter.dispatch(owner, args.repo, args.event_type or session.config.dispatch_event_type, payload)
    else:
        emitter.dispatch_client_data(
            owner, args.repo, title=args.title, description=args.description, image=args.image
        )
    return 0


def repos_cmd(args: argparse.Namespace, session: SessionContext) -> int:
    owner = args.owner or session.config.owner or session.config.template_owner
    if not owner:
        raise ConfigurationError("Owner is required to list repositories")
    repos = session.client.repos.list_for_owner(owner)
    if not repos:
        print("No repositories found", file=sys.stderr)
    for repo in repos:
        print(repo.name)
    return 0


def token_set_cmd(args: argparse.Namespace, session: SessionContext) -> int:
    token = args.value or getpass.getpass("GitHub token: ")
    if not token:
        raise ConfigurationError("Empty token")
    session.credentials.save(token)
    print(f"Saved token {mask_token(token)}", file=sys.stderr)
    return 0


def token_check_cmd(args: argparse.Namespace, session: SessionContext) -> int:
    session.credentials.require()
    template = _template(args, session.config)
    scopes = session.client.repos.check_token_scopes(template.owner, template.name)
    if scopes.valid:
        print("Token has repo, workflow and pages rights")
        return 0
    print(f"Token is missing: {', '.join(scopes.missing)}", file=sys.stderr)
    return 1


def issue_url_cmd(args: argparse.Namespace, config: PanelConfig) -> int:
    template = _template(args, config)
    repo = args.repo or ""
    title = (args.title or f"Create client: {repo or 'client'}").strip()
    body = build_issue_body(
        args.title or "", args.owner or config.owner or "", repo, args.description, args.image
    )
    print(prefilled_issue_url(template, title, body))
    return 0


def _add_template_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--template-owner", default=None, help="Template owner (default: config templateOwner)")
    p.add_argument(
        "--template-repo",
        default=None,
        help="Template name, 'owner/name' or GitHub URL (default: config templateRepo)",
    )


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="sitesmith", description="Provision client sites from a GitHub template")
    p.add_argument("--config", default="config.json", help="Path to config.json (default: ./config.json)")
    p.add_argument("--token", default=None, help="GitHub token, used when none is saved")
    p.add_argument("-v", "--verbose", action="count", default=0, help="-v for progress, -vv for HTTP traffic")
    sub = p.add_subparsers(dest="command", required=True)

    pr = sub.add_parser("provision", help="Create a client repo from the template and publish it")
    pr.add_argument("name", help="Name of the new repository")
    pr.add_argument("--owner", default=None, help="Owner of the new repository (default: config owner)")
    pr.add_argument("--description", default="Generated from template")
    pr.add_argument("--private", action="store_true", help="Request a private repository")
    pr.add_argument("--path", default=None, help="Seed file to load (default: config filePath)")
    pr.add_argument("--check-scopes", action="store_true", help="Verify token rights on the template first")
    pr.add_argument("--out", default=None, help="Write the seed file content here")
    _add_template_args(pr)
    pr.set_defaults(func=provision_cmd)

    ld = sub.add_parser("load", help="Print a file of a client repository")
    ld.add_argument("repo")
    ld.add_argument("--owner", default=None)
    ld.add_argument("--path", default=None)
    ld.add_argument("--out", default=None, help="Write to this file instead of stdout")
    ld.set_defaults(func=load_cmd)

    sv = sub.add_parser("save", help="Upload a local file to a client repository")
    sv.add_argument("repo")
    sv.add_argument("source", help="Local file with the new content")
    sv.add_argument("--owner", default=None)
    sv.add_argument("--path", default=None)
    sv.add_argument("--message", default=None, help="Commit message")
    sv.set_defaults(func=save_cmd)

    dp = sub.add_parser("dispatch", help="Send repository_dispatch to a client repository")
    dp.add_argument("repo")
    dp.add_argument("--owner", default=None)
    dp.add_argument("--event-type", default=None, help="Event type (default: config dispatchEventType)")
    dp.add_argument("--payload", default=None, help="Raw JSON client_payload")
    dp.add_argument("--title", default="")
    dp.add_argument("--description", default="")
    dp.add_argument("--image", default="")
    dp.set_defaults(func=dispatch_cmd)

    rp = sub.add_parser("repos", help="List repositories of an owner")
    rp.add_argument("owner", nargs="?", default=None)
    rp.set_defaults(func=repos_cmd)

    iu = sub.add_parser("issue-url", help="Print a prefilled issue link on the template")
    iu.add_argument("--title", default=None)
    iu.add_argument("--owner", default=None)
    iu.add_argument("--repo", default=None)
    iu.add_argument("--description", default="")
    iu.add_argument("--image", default="")
    _add_template_args(iu)
    iu.set_defaults(func=None, offline=issue_url_cmd)

    tk = sub.add_parser("token", help="Manage the GitHub token")
    tk_sub = tk.add_subparsers(dest="token_command", required=True)
    ts = tk_sub.add_parser("set", help="Save a token (prompted when omitted)")
    ts.add_argument("value", nargs="?", default=None)
    ts.set_defaults(func=token_set_cmd)
    tc = tk_sub.add_parser("check", help="Check token rights on the template")
    _add_template_args(tc)
    tc.set_defaults(func=token_check_cmd)

    return p


def main(argv: list[str] | None = None, session_factory: SessionFactory | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        configure_logging(
            level=logging.INFO,
            http_level=logging.DEBUG if args.verbose > 1 else logging.INFO,
        )

    try:
        config = load_config(args.config)
        if args.func is None:
            return int(args.offline(args, config))

        session = (session_factory or _default_session)(config, args.token)
        session.subscribe(_print_status)
        with session:
            return int(args.func(args, session))
    except SitesmithError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
