"""Provider package for sandbox, SCM, and LLM integrations."""

from sandbox_agent.providers.llm import LiteLLMClient
from sandbox_agent.providers.sandbox import (
    LocalProvider,
    SandboxProvider,
    SandboxSession,
    VercelProvider,
)
from sandbox_agent.providers.scm import GitHubProvider, ScmProvider

__all__ = [
    "GitHubProvider",
    "LiteLLMClient",
    "LocalProvider",
    "SandboxProvider",
    "SandboxSession",
    "ScmProvider",
    "VercelProvider",
]
