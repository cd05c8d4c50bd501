"""Publishes sandbox changes as a GitHub pull request."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import logging
import threading
import time
from typing import Callable

from sandbox_agent.errors import ConfigError, RemoteCommandError, SandboxAgentError
from sandbox_agent.models.scm import PRFailure, PRRequest, PRResult, PRSuccess
from sandbox_agent.providers.sandbox.session import SandboxSession
from sandbox_agent.providers.scm.base import ScmProvider
from sandbox_agent.providers.scm.github import parse_repo_slug

logger = logging.getLogger(__name__)

ARCHIVE_EXCLUDES = (
    ":!*.tar",
    ":!*.tar.gz",
    ":!*.tar.bz2",
    ":!*.tar.xz",
    ":!*.tgz",
    ":!*.tbz",
    ":!*.tbz2",
    ":!*.txz",
)
ACTIVITY_MARKER = ".ai-activity.md"
DEFAULT_BRANCH_PREFIX = "feature/ai-changes"


@dataclass(frozen=True)
class CommitIdentity:
    name: str = "AI Coding Agent"
    email: str = "ai-agent@example.com"


class PRPublisher:
    """Branches, commits and pushes the sandbox checkout, then opens a PR.

    Every step must succeed before the next one runs. Failures are returned
    as ``PRFailure``; whatever was already created (branch, commit, pushed
    ref) is left in place.
    """

    def __init__(
        self,
        scm: ScmProvider,
        identity: CommitIdentity | None = None,
        base_branch: str | None = "main",
        branch_prefix: str = DEFAULT_BRANCH_PREFIX,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._scm = scm
        self._identity = identity or CommitIdentity()
        self._base_branch = base_branch
        self._branch_prefix = branch_prefix
        self._clock = clock
        self._last_stamp = 0
        self._stamp_lock = threading.Lock()

    def branch_name(self, requested: str | None = None) -> str:
        with self._stamp_lock:
            stamp = int(self._clock() * 1000)
            if stamp <= self._last_stamp:
                stamp = self._last_stamp + 1
            self._last_stamp = stamp
        return f"{requested or self._branch_prefix}-{stamp}"

    def create_pr(self, session: SandboxSession, repo_url: str, request: PRRequest) -> PRResult:
        try:
            return self._create_pr(session, repo_url, request)
        except SandboxAgentError as exc:
            logger.warning("PR creation failed sandbox=%s error=%s", session.sandbox_id, exc)
            return PRFailure(message=str(exc))
        except Exception as exc:
            logger.exception("PR creation failed unexpectedly sandbox=%s", session.sandbox_id)
            return PRFailure(message=str(exc) or type(exc).__name__)

    def _create_pr(self, session: SandboxSession, repo_url: str, request: PRRequest) -> PRSuccess:
        if not self._scm.has_token:
            raise ConfigError("GITHUB_TOKEN environment variable is required")
        push_url = self._scm.authenticated_url(repo_url)
        logger.info(
            "Creating PR sandbox=%s title=%r branch=%s",
            session.sandbox_id,
            request.title,
            request.branch,
        )
        branch = self.branch_name(request.branch)

        session.check_command("git", ["config", "user.email", self._identity.email])
        session.check_command("git", ["config", "user.name", self._identity.name])

        result = session.run_command("git", ["remote", "set-url", "origin", push_url])
        if not result.ok:
            raise RemoteCommandError(["git", "remote", "set-url", "origin", repo_url], result)

        session.check_command("git", ["checkout", "-b", branch])
        self._stage(session)
        if not self._has_staged_changes(session):
            logger.info("No staged changes, writing %s sandbox=%s", ACTIVITY_MARKER, session.sandbox_id)
            timestamp = datetime.now(timezone.utc).isoformat()
            session.write_file(ACTIVITY_MARKER, f"AI Agent Activity: {timestamp}\n")
            self._stage(session)

        session.check_command("git", ["commit", "-m", request.title])
        session.check_command("git", ["push", "origin", branch])
        logger.info("Pushed branch sandbox=%s branch=%s", session.sandbox_id, branch)

        owner, repo = parse_repo_slug(repo_url)
        slug = f"{owner}/{repo}"
        base = self._base_branch or self._scm.get_repo_default_branch(slug)
        info = self._scm.open_pr(
            repo=slug,
            head_branch=branch,
            base_branch=base,
            title=request.title,
            body=request.body,
        )
        logger.info("PR opened repo=%s number=%s url=%s", slug, info.number, info.url)
        return PRSuccess(branch=branch, pr_url=info.url, pr_number=info.number)

    def _stage(self, session: SandboxSession) -> None:
        session.check_command("git", ["add", ".", *ARCHIVE_EXCLUDES])

    def _has_staged_changes(self, session: SandboxSession) -> bool:
        result = session.check_command("git", ["diff", "--cached", "--name-only"])
        return bool(result.stdout.strip())
