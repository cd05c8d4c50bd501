"""Tests for settings loading."""

import pytest

from sandbox_agent.config import Settings, load_settings
from sandbox_agent.errors import ConfigError


def test_defaults_without_file(tmp_path):
    settings = load_settings(str(tmp_path / "missing.yaml"), environ={})

    assert settings == Settings()
    assert settings.sandbox_ports == (3000,)
    assert settings.sandbox_resources.vcpus == 2


def test_yaml_values_and_env_overrides(tmp_path):
    config = tmp_path / "agent.yaml"
    config.write_text(
        "repo_url: https://github.com/acme/widgets\n"
        "sandbox_timeout_s: '120'\n"
        "sandbox_ports: [3000, 8080]\n"
        "model_profile: fast\n",
        encoding="utf-8",
    )
    environ = {"SANDBOX_AGENT_MODEL_PROFILE": "default", "GITHUB_TOKEN": "ghp_env"}

    settings = load_settings(str(config), environ=environ)

    assert settings.repo_url == "https://github.com/acme/widgets"
    assert settings.sandbox_timeout_s == 120
    assert settings.sandbox_ports == (3000, 8080)
    assert settings.model_profile == "default"
    assert settings.github_token == "ghp_env"
    assert "ghp_env" not in repr(settings)


def test_config_path_from_environment(tmp_path):
    config = tmp_path / "custom.yaml"
    config.write_text("base_branch: trunk\n", encoding="utf-8")

    settings = load_settings(environ={"SANDBOX_AGENT_CONFIG": str(config), "GITHUB_PAT": "ghp_pat"})

    assert settings.base_branch == "trunk"
    assert settings.github_token == "ghp_pat"


def test_unknown_provider_is_rejected(tmp_path):
    with pytest.raises(ConfigError, match="Unknown sandbox provider"):
        load_settings(str(tmp_path / "missing.yaml"), environ={"SANDBOX_PROVIDER": "docker"})


def test_unknown_setting_is_rejected(tmp_path):
    config = tmp_path / "agent.yaml"
    config.write_text("sandbox_cpus: 4\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="sandbox_cpus"):
        load_settings(str(config), environ={})
