"""SCM provider implementations and interfaces."""

from sandbox_agent.providers.scm.base import ScmProvider
from sandbox_agent.providers.scm.github import GitHubProvider, parse_repo_slug

__all__ = ["GitHubProvider", "ScmProvider", "parse_repo_slug"]
