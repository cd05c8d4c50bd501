"""GitHub SCM provider backed by the GitHub REST API."""

from __future__ import annotations

import json
import logging
import re
import urllib.error
import urllib.request
from typing import Any

from sandbox_agent.errors import ConfigError, InvalidUrlError, ProviderError
from sandbox_agent.models.scm import PullRequestInfo
from sandbox_agent.providers.scm.base import ScmProvider

logger = logging.getLogger(__name__)

_REPO_URL_PATTERN = re.compile(
    r"github\.com[/:](?P<owner>[^/]+)/(?P<repo>[^/]+?)(?:\.git)?(?:/|$)"
)
_HTTPS_PREFIX = "https://github.com/"


def parse_repo_slug(repo_url: str) -> tuple[str, str]:
    """Return ``(owner, repo)`` for an HTTPS or SSH GitHub URL."""
    match = _REPO_URL_PATTERN.search(repo_url.strip())
    if not match:
        raise InvalidUrlError("Invalid GitHub repository URL")
    return match.group("owner"), match.group("repo")


class GitHubProvider(ScmProvider):
    def __init__(
        self,
        token: str | None = None,
        base_url: str = "https://api.github.com",
        timeout_s: float = 30.0,
    ) -> None:
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s

    @property
    def has_token(self) -> bool:
        return bool(self._token)

    def _ensure_token(self) -> str:
        if not self._token:
            raise ConfigError("GITHUB_TOKEN environment variable is required")
        return self._token

    def authenticated_url(self, repo_url: str) -> str:
        token = self._ensure_token()
        if not repo_url.startswith(_HTTPS_PREFIX):
            return repo_url
        return repo_url.replace(_HTTPS_PREFIX, f"https://{token}@github.com/", 1)

    def _request(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
        raise_for_status: bool = True,
    ) -> Any:
        token = self._ensure_token()
        url = f"{self._base_url}{path}"
        data = None
        if payload is not None:
            data = json.dumps(payload).encode("utf-8")
        request = urllib.request.Request(url, data=data, method=method)
        request.add_header("Accept", "application/vnd.github+json")
        request.add_header("User-Agent", "sandbox-agent")
        request.add_header("Authorization", f"Bearer {token}")
        if data is not None:
            request.add_header("Content-Type", "application/json")
        try:
            with urllib.request.urlopen(request, timeout=self._timeout_s) as response:
                raw = response.read()
        except urllib.error.HTTPError as exc:
            body = exc.read().decode("utf-8")
            logger.warning("GitHub API error method=%s path=%s status=%s", method, path, exc.code)
            if raise_for_status:
                raise ProviderError(f"GitHub API error {exc.code}: {body}") from exc
            try:
                return json.loads(body) if body else None
            except ValueError:
                return {"message": body}
        except OSError as exc:
            logger.warning("GitHub API unreachable method=%s path=%s error=%s", method, path, exc)
            raise ProviderError(f"GitHub API request failed: {exc}") from exc
        try:
            return json.loads(raw.decode("utf-8")) if raw else None
        except ValueError as exc:
            raise ProviderError("Unexpected response from GitHub API.") from exc

    def validate_auth(self) -> None:
        self._request("GET", "/user")

    def get_repo_default_branch(self, repo: str) -> str:
        response = self._request("GET", f"/repos/{repo}")
        if not isinstance(response, dict) or "default_branch" not in response:
            raise ProviderError("Unexpected response from GitHub API.")
        return response["default_branch"]

    def open_pr(
        self,
        repo: str,
        head_branch: str,
        base_branch: str,
        title: str,
        body: str,
    ) -> PullRequestInfo:
        payload = {
            "title": title,
            "body": body,
            "head": head_branch,
            "base": base_branch,
        }
        response = self._request("POST", f"/repos/{repo}/pulls", payload, raise_for_status=False)
        if not isinstance(response, dict) or not response.get("html_url"):
            message = None
            if isinstance(response, dict):
                message = response.get("message")
            raise ProviderError(message or "Failed to create PR")
        return PullRequestInfo(url=response["html_url"], number=response.get("number", 0))
