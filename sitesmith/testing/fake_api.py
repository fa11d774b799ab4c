"""
In-memory GitHub API for testing.

FakeGitHub answers the endpoints sitesmith uses from a small in-memory
model and records every call. It plugs into the real client through
``httpx.MockTransport``, so tests exercise the full transport, parsing and
error mapping.

Scripted responses take priority over the model: queue them with
``script()`` to simulate propagation delays, outages or conflicts.
"""

import base64
import hashlib
import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import httpx

ScriptedResponse = int | tuple[int, Any] | httpx.Response


@dataclass
class RecordedCall:
    """Record of a request received by the fake."""

    method: str
    path: str
    body: Any
    headers: dict[str, str]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def blob_sha(data: bytes) -> str:
    """Git blob sha of ``data``, as GitHub reports for file contents."""
    return hashlib.sha1(b"blob %d\0" % len(data) + data).hexdigest()


_REPO = r"/repos/(?P<owner>[^/]+)/(?P<repo>[^/]+)"


class FakeGitHub:
    """
    Fake GitHub REST API.

    Example:
        ```python
        github = FakeGitHub()
        github.add_repo("acme", "tpl", is_template=True)
        github.add_file("acme", "tpl", "FAKE/values.js", "export default {}")
        client = GitHubClient(token_provider=lambda: "t", http_transport=github.transport())
        ```
    """

    def __init__(self, base_url: str = "https://api.github.com") -> None:
        self.base_url = base_url
        self.repos: dict[str, dict[str, Any]] = {}
        self.files: dict[str, dict[str, bytes]] = {}
        self.pages: dict[str, dict[str, Any]] = {}
        self.dispatches: list[dict[str, Any]] = []
        self.builds: list[str] = []
        self.calls: list[RecordedCall] = []
        self._scripts: dict[tuple[str, str], list[ScriptedResponse]] = {}
        self._next_id = 1000
        self._routes = [
            ("GET", re.compile(f"^{_REPO}$"), self._get_repo),
            ("PATCH", re.compile(f"^{_REPO}$"), self._patch_repo),
            ("POST", re.compile(f"^{_REPO}/generate$"), self._generate),
            ("GET", re.compile(f"^{_REPO}/contents/(?P<path>.+)$"), self._get_contents),
            ("PUT", re.compile(f"^{_REPO}/contents/(?P<path>.+)$"), self._put_contents),
            ("GET", re.compile(f"^{_REPO}/pages$"), self._get_pages),
            ("PUT", re.compile(f"^{_REPO}/pages$"), self._put_pages),
            ("POST", re.compile(f"^{_REPO}/pages/builds$"), self._post_build),
            ("POST", re.compile(f"^{_REPO}/dispatches$"), self._dispatch),
            ("GET", re.compile(f"^{_REPO}/branches$"), self._branches),
            ("GET", re.compile(f"^{_REPO}/actions/workflows$"), self._workflows),
            ("GET", re.compile(r"^/(?:users|orgs)/(?P<owner>[^/]+)/repos$"), self._list_repos),
        ]

    # ------------------------------------------------------------------
    # Model setup
    # ------------------------------------------------------------------

    def add_repo(
        self,
        owner: str,
        name: str,
        is_template: bool = False,
        private: bool = False,
        default_branch: str = "main",
    ) -> dict[str, Any]:
        """Create a repository in the model and return its JSON."""
        self._next_id += 1
        full_name = f"{owner}/{name}"
        repo = {
            "id": self._next_id,
            "name": name,
            "full_name": full_name,
            "owner": {"login": owner},
            "private": private,
            "is_template": is_template,
            "default_branch": default_branch,
            "html_url": f"https://github.com/{full_name}",
            "description": None,
            "has_issues": False,
        }
        self.repos[full_name] = repo
        self.files.setdefault(full_name, {})
        return repo

    def add_file(self, owner: str, repo: str, path: str, text: str | bytes) -> str:
        """Store a file and return its sha."""
        data = text.encode("utf-8") if isinstance(text, str) else text
        self.files.setdefault(f"{owner}/{repo}", {})[path] = data
        return blob_sha(data)

    def file_text(self, owner: str, repo: str, path: str) -> str | None:
        """Current text of a file, or None when absent."""
        data = self.files.get(f"{owner}/{repo}", {}).get(path)
        return None if data is None else data.decode("utf-8")

    def enable_pages(self, owner: str, repo: str, html_url: str | None = None) -> None:
        """Mark Pages as enabled, optionally with a published URL."""
        self.pages[f"{owner}/{repo}"] = {"status": "built" if html_url else None, "html_url": html_url, "build_type": "legacy"}

    def script(self, method: str, path: str, *responses: ScriptedResponse) -> None:
        """
        Queue responses for a method and exact path.

        Each response is a status code, a ``(status, json_body)`` tuple or an
        ``httpx.Response``. Queued responses are used first, one per call;
        afterwards the model answers.
        """
        self._scripts.setdefault((method.upper(), path), []).extend(responses)

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def calls_to(self, method: str, path: str) -> list[RecordedCall]:
        """Calls with this method and exact path."""
        return [c for c in self.calls if c.method == method.upper() and c.path == path]

    def was_called(self, method: str, path: str) -> bool:
        return bool(self.calls_to(method, path))

    def reset_calls(self) -> None:
        self.calls.clear()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def transport(self) -> httpx.MockTransport:
        """httpx transport serving this fake."""
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        body = json.loads(request.content) if request.content else None
        self.calls.append(RecordedCall(request.method, path, body, dict(request.headers)))

        queue = self._scripts.get((request.method, path))
        if queue:
            return self._scripted(queue.pop(0))

        for method, pattern, handler in self._routes:
            if method != request.method:
                continue
            match = pattern.match(path)
            if match:
                return handler(body, **match.groupdict())
        return self._error(404, "Not Found")

    @staticmethod
    def _scripted(response: ScriptedResponse) -> httpx.Response:
        if isinstance(response, httpx.Response):
            return response
        if isinstance(response, int):
            if response == 204:
                return httpx.Response(204)
            return httpx.Response(response, json={"message": f"scripted {response}"})
        status, payload = response
        return httpx.Response(status, json=payload)

    @staticmethod
    def _error(status: int, message: str) -> httpx.Response:
        return httpx.Response(
            status,
            json={"message": message, "documentation_url": "https://docs.github.com/rest"},
        )

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _get_repo(self, body: Any, owner: str, repo: str) -> httpx.Response:
        data = self.repos.get(f"{owner}/{repo}")
        if data is None:
            return self._error(404, "Not Found")
        return httpx.Response(200, json=data)

    def _patch_repo(self, body: Any, owner: str, repo: str) -> httpx.Response:
        data = self.repos.get(f"{owner}/{repo}")
        if data is None:
            return self._error(404, "Not Found")
        data.update(body or {})
        return httpx.Response(200, json=data)

    def _generate(self, body: Any, owner: str, repo: str) -> httpx.Response:
        template = self.repos.get(f"{owner}/{repo}")
        if template is None or not template["is_template"]:
            return self._error(404, "Not Found")

        new_owner = body.get("owner") or owner
        name = body["name"]
        candidate, n = name, 0
        while f"{new_owner}/{candidate}" in self.repos:
            n += 1
            candidate = f"{name}-{n}"

        created = self.add_repo(new_owner, candidate, private=bool(body.get("private")))
        created["description"] = body.get("description")
        self.files[created["full_name"]] = dict(self.files.get(template["full_name"], {}))
        return httpx.Response(201, json=created)

    def _get_contents(self, body: Any, owner: str, repo: str, path: str) -> httpx.Response:
        full_name = f"{owner}/{repo}"
        if full_name not in self.repos:
            return self._error(404, "Not Found")
        data = self.files.get(full_name, {}).get(path)
        if data is None:
            return self._error(404, "Not Found")
        return httpx.Response(200, json={
            "type": "file",
            "encoding": "base64",
            "size": len(data),
            "name": path.rsplit("/", 1)[-1],
            "path": path,
            "sha": blob_sha(data),
            "content": base64.encodebytes(data).decode("ascii"),
        })

    def _put_contents(self, body: Any, owner: str, repo: str, path: str) -> httpx.Response:
        full_name = f"{owner}/{repo}"
        if full_name not in self.repos:
            return self._error(404, "Not Found")
        files = self.files.setdefault(full_name, {})
        existing = files.get(path)
        sha = body.get("sha")
        if existing is not None and not sha:
            return self._error(422, "Invalid request.\n\n\"sha\" wasn't supplied.")
        if existing is not None and sha != blob_sha(existing):
            return self._error(409, f"{path} does not match {sha}")

        data = base64.b64decode(body["content"])
        files[path] = data
        new_sha = blob_sha(data)
        return httpx.Response(200 if existing is not None else 201, json={
            "content": {"path": path, "sha": new_sha},
            "commit": {"sha": hashlib.sha1(new_sha.encode() + body["message"].encode()).hexdigest()},
        })

    def _get_pages(self, body: Any, owner: str, repo: str) -> httpx.Response:
        site = self.pages.get(f"{owner}/{repo}")
        if site is None:
            return self._error(404, "Not Found")
        return httpx.Response(200, json=site)

    def _put_pages(self, body: Any, owner: str, repo: str) -> httpx.Response:
        full_name = f"{owner}/{repo}"
        if full_name not in self.repos:
            return self._error(404, "Not Found")
        self.pages[full_name] = {
            "status": "built",
            "html_url": f"https://{owner.lower()}.github.io/{repo}/",
            "build_type": body.get("build_type"),
            "source": body.get("source"),
        }
        return httpx.Response(204)

    def _post_build(self, body: Any, owner: str, repo: str) -> httpx.Response:
        full_name = f"{owner}/{repo}"
        if full_name not in self.pages:
            return self._error(404, "Not Found")
        self.builds.append(full_name)
        return httpx.Response(201, json={"url": f"{self.base_url}/repos/{full_name}/pages/builds/latest", "status": "queued"})

    def _dispatch(self, body: Any, owner: str, repo: str) -> httpx.Response:
        if f"{owner}/{repo}" not in self.repos:
            return self._error(404, "Not Found")
        self.dispatches.append({"repo": f"{owner}/{repo}", **(body or {})})
        return httpx.Response(204)

    def _branches(self, body: Any, owner: str, repo: str) -> httpx.Response:
        data = self.repos.get(f"{owner}/{repo}")
        if data is None:
            return self._error(404, "Not Found")
        return httpx.Response(200, json=[{"name": data["default_branch"]}])

    def _workflows(self, body: Any, owner: str, repo: str) -> httpx.Response:
        if f"{owner}/{repo}" not in self.repos:
            return self._error(404, "Not Found")
        return httpx.Response(200, json={"total_count": 0, "workflows": []})

    def _list_repos(self, body: Any, owner: str) -> httpx.Response:
        owned = [r for r in self.repos.values() if r["owner"]["login"] == owner]
        return httpx.Response(200, json=owned)
