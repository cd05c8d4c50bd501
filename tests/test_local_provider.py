"""Tests for LocalProvider and SandboxSession."""

import shutil
import sys

import pytest

from sandbox_agent.errors import RemoteCommandError
from sandbox_agent.models.sandbox import FileUpload, SandboxResources
from sandbox_agent.providers.sandbox.local import LocalProvider
from sandbox_agent.providers.sandbox.session import SandboxSession


@pytest.fixture
def provider(tmp_path):
    return LocalProvider(base_dir=str(tmp_path))


def test_create_sandbox_returns_handle(provider):
    handle = provider.create_sandbox("demo", SandboxResources(vcpus=2), timeout_s=60, ports=[3000])

    assert handle.sandbox_id.startswith("demo-")
    assert handle.ports == (3000,)
    assert handle.timeout_s == 60


def test_write_and_run_in_sandbox(provider):
    handle = provider.create_sandbox("demo", SandboxResources(vcpus=1))
    session = SandboxSession(provider, handle)

    session.write_files([FileUpload(path="nested/hello.txt", content=b"hi there")])
    result = session.run_command("cat", ["nested/hello.txt"])

    assert result.ok
    assert result.output == "hi there"


def test_check_command_raises_on_failure(provider):
    session = SandboxSession(provider, provider.create_sandbox("demo", SandboxResources(vcpus=1)))

    with pytest.raises(RemoteCommandError) as excinfo:
        session.check_command("ls", ["does-not-exist"])

    assert excinfo.value.command == ["ls", "does-not-exist"]
    assert excinfo.value.result.exit_code != 0


def test_missing_executable_is_exit_127(provider):
    handle = provider.create_sandbox("demo", SandboxResources(vcpus=1))

    result = provider.exec(handle.sandbox_id, ["definitely-not-a-real-binary"])

    assert result.exit_code == 127


def test_commands_respect_sandbox_timeout(provider):
    handle = provider.create_sandbox("demo", SandboxResources(vcpus=1), timeout_s=1)

    result = provider.exec(handle.sandbox_id, [sys.executable, "-c", "import time; time.sleep(5)"])

    assert result.exit_code == 124


def test_paths_cannot_escape_sandbox(provider):
    handle = provider.create_sandbox("demo", SandboxResources(vcpus=1))

    with pytest.raises(ValueError, match="escapes sandbox"):
        provider.write_files(handle.sandbox_id, [FileUpload(path="../outside.txt", content=b"x")])


def test_delete_sandbox_removes_directory(provider, tmp_path):
    handle = provider.create_sandbox("demo", SandboxResources(vcpus=1))
    session = SandboxSession(provider, handle)

    session.close()

    assert not (tmp_path / handle.sandbox_id).exists()
    with pytest.raises(KeyError):
        provider.exec(handle.sandbox_id, ["true"])


@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
def test_failed_clone_leaves_nothing_behind(provider, tmp_path):
    missing = tmp_path / "no-such-repo"

    with pytest.raises(RemoteCommandError) as excinfo:
        provider.create_sandbox("demo", SandboxResources(vcpus=1), source_url=str(missing))

    assert excinfo.value.command == ["git", "clone", str(missing)]
    assert provider._sandboxes == {}
    assert [p.name for p in tmp_path.iterdir() if p.name.startswith("demo-")] == []
