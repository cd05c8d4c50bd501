"""Exception hierarchy shared by the sandbox agent."""

from __future__ import annotations

from typing import Sequence

from sandbox_agent.models.sandbox import ExecResult


class SandboxAgentError(Exception):
    """Base class for errors raised by sandbox agent operations."""


class ConfigError(SandboxAgentError):
    pass


class InvalidUrlError(SandboxAgentError):
    pass


class ProviderError(SandboxAgentError):
    pass


class ReadError(SandboxAgentError):
    pass


class AgentError(SandboxAgentError):
    pass


class RemoteCommandError(SandboxAgentError):
    """Raised when a command run inside the sandbox exits non-zero."""

    def __init__(self, command: Sequence[str], result: ExecResult) -> None:
        self.command = list(command)
        self.result = result
        detail = result.stderr.strip() or result.stdout.strip()
        message = f"Command failed ({result.exit_code}): {' '.join(self.command)}"
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)


class NotFoundError(RemoteCommandError):
    pass
