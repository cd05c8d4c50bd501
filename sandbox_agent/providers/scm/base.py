"""SCM provider interface."""

from __future__ import annotations

from typing import Protocol

from sandbox_agent.models.scm import PullRequestInfo


class ScmProvider(Protocol):
    @property
    def has_token(self) -> bool:
        ...

    def validate_auth(self) -> None:
        ...

    def get_repo_default_branch(self, repo: str) -> str:
        ...

    def authenticated_url(self, repo_url: str) -> str:
        ...

    def open_pr(
        self,
        repo: str,
        head_branch: str,
        base_branch: str,
        title: str,
        body: str,
    ) -> PullRequestInfo:
        ...
