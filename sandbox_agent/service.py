"""Wires settings, providers and the coding agent into one request handler."""

from __future__ import annotations

import logging

from sandbox_agent.agent import CodingAgent
from sandbox_agent.config import Settings
from sandbox_agent.errors import ConfigError
from sandbox_agent.providers.llm.litellm_client import LiteLLMClient
from sandbox_agent.providers.sandbox.base import SandboxProvider
from sandbox_agent.providers.sandbox.local import LocalProvider
from sandbox_agent.providers.sandbox.session import SandboxSession
from sandbox_agent.providers.sandbox.vercel import VercelProvider
from sandbox_agent.providers.scm.github import GitHubProvider
from sandbox_agent.publisher import CommitIdentity, PRPublisher

logger = logging.getLogger(__name__)


class AgentService:
    def __init__(self, settings: Settings, provider: SandboxProvider, agent: CodingAgent) -> None:
        self._settings = settings
        self._provider = provider
        self._agent = agent

    def create_session(self, repo_url: str) -> SandboxSession:
        settings = self._settings
        handle = self._provider.create_sandbox(
            name="agent",
            resources=settings.sandbox_resources,
            source_url=repo_url,
            timeout_s=settings.sandbox_timeout_s,
            ports=settings.sandbox_ports,
            runtime=settings.sandbox_runtime,
        )
        return SandboxSession(self._provider, handle)

    def handle(self, prompt: str, repo_url: str | None = None) -> str:
        target = repo_url or self._settings.repo_url
        if not target:
            raise ConfigError("A repository URL is required (repo_url or SANDBOX_AGENT_REPO_URL)")
        session = self.create_session(target)
        logger.info("Agent run started sandbox=%s repo=%s", session.sandbox_id, target)
        try:
            return self._agent.run(session, target, prompt)
        finally:
            session.close()
            logger.info("Sandbox released sandbox=%s", session.sandbox_id)


def build_provider(settings: Settings) -> SandboxProvider:
    if settings.sandbox_provider == "vercel":
        return VercelProvider()
    if settings.sandbox_provider == "local":
        return LocalProvider()
    raise ConfigError(f"Unknown sandbox provider: {settings.sandbox_provider}")


def build_service(settings: Settings) -> AgentService:
    publisher = None
    if settings.github_token:
        scm = GitHubProvider(token=settings.github_token)
        scm.validate_auth()
        logger.info("GitHub token validated")
        publisher = PRPublisher(
            scm,
            identity=CommitIdentity(name=settings.commit_name, email=settings.commit_email),
            base_branch=settings.base_branch,
            branch_prefix=settings.branch_prefix,
        )
    agent = CodingAgent(
        LiteLLMClient(settings.models_config),
        profile=settings.model_profile,
        publisher=publisher,
        max_steps=settings.max_steps,
    )
    return AgentService(settings, build_provider(settings), agent)
