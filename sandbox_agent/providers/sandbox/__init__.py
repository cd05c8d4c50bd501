"""Sandbox provider implementations and interfaces."""

from sandbox_agent.providers.sandbox.base import SandboxProvider
from sandbox_agent.providers.sandbox.local import LocalProvider
from sandbox_agent.providers.sandbox.session import SandboxSession
from sandbox_agent.providers.sandbox.vercel import VercelProvider

__all__ = ["LocalProvider", "SandboxProvider", "SandboxSession", "VercelProvider"]
