"""LLM client integrations."""

from sandbox_agent.providers.llm.litellm_client import LiteLLMClient

__all__ = ["LiteLLMClient"]
