"""Settings loaded once at startup from YAML and the environment."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
import logging
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from sandbox_agent.errors import ConfigError
from sandbox_agent.models.sandbox import SandboxResources

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/agent.yaml"

_ENV_OVERRIDES = {
    "SANDBOX_AGENT_REPO_URL": "repo_url",
    "SANDBOX_AGENT_MODEL_PROFILE": "model_profile",
    "SANDBOX_AGENT_MODELS_CONFIG": "models_config",
    "SANDBOX_PROVIDER": "sandbox_provider",
    "SANDBOX_AGENT_BASE_BRANCH": "base_branch",
}


@dataclass(frozen=True)
class Settings:
    github_token: str | None = field(default=None, repr=False)
    repo_url: str | None = None
    base_branch: str | None = "main"
    branch_prefix: str = "feature/ai-changes"
    commit_name: str = "AI Coding Agent"
    commit_email: str = "ai-agent@example.com"
    sandbox_provider: str = "local"
    sandbox_vcpus: int = 2
    sandbox_timeout_s: int = 60
    sandbox_ports: tuple[int, ...] = (3000,)
    sandbox_runtime: str = "node22"
    model_profile: str = "default"
    models_config: str = "config/models.yaml"
    max_steps: int = 20

    @property
    def sandbox_resources(self) -> SandboxResources:
        return SandboxResources(vcpus=self.sandbox_vcpus)


def _coerce(values: Mapping[str, Any]) -> dict[str, Any]:
    known = {item.name for item in fields(Settings)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigError(f"Unknown settings: {', '.join(unknown)}")
    coerced = dict(values)
    if "sandbox_ports" in coerced:
        coerced["sandbox_ports"] = tuple(int(port) for port in coerced["sandbox_ports"] or ())
    for name in ("sandbox_vcpus", "sandbox_timeout_s", "max_steps"):
        if name in coerced:
            coerced[name] = int(coerced[name])
    return coerced


def load_settings(
    config_path: str | None = None, environ: Mapping[str, str] | None = None
) -> Settings:
    """Build ``Settings`` from the YAML file, then apply environment overrides."""
    env = os.environ if environ is None else environ
    path = Path(config_path or env.get("SANDBOX_AGENT_CONFIG", DEFAULT_CONFIG_PATH))
    values: dict[str, Any] = {}
    if path.exists():
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Settings file must contain a mapping: {path}")
        values.update(data)

    for variable, name in _ENV_OVERRIDES.items():
        if env.get(variable):
            values[name] = env[variable]
    token = env.get("GITHUB_TOKEN") or env.get("GITHUB_PAT")
    if token:
        values["github_token"] = token

    settings = replace(Settings(), **_coerce(values))
    if settings.sandbox_provider not in ("local", "vercel"):
        raise ConfigError(f"Unknown sandbox provider: {settings.sandbox_provider}")
    if not settings.github_token:
        logger.warning("GITHUB_TOKEN is not set; pull request creation is disabled")
    return settings
