"""Runs an LLM coding agent inside an ephemeral sandbox and opens pull requests."""

__version__ = "0.1.0"
