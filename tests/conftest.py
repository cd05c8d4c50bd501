"""Pytest configuration and fixtures."""

from __future__ import annotations

from typing import Sequence

import pytest

from sandbox_agent.errors import ProviderError
from sandbox_agent.models.sandbox import ExecResult, FileUpload, SandboxHandle, SandboxResources
from sandbox_agent.models.scm import PullRequestInfo
from sandbox_agent.providers.sandbox.session import SandboxSession


class FakeSandboxProvider:
    """In-memory sandbox: ``cat`` and ``ls`` are answered from ``files``.

    Any other command succeeds with empty output unless a response was
    scripted for a prefix of it with ``respond``.
    """

    def __init__(self) -> None:
        self.files: dict[str, str] = {}
        self.commands: list[list[str]] = []
        self.writes: list[FileUpload] = []
        self.deleted: list[str] = []
        self._responses: list[tuple[tuple[str, ...], ExecResult]] = []

    def respond(self, prefix: Sequence[str], exit_code: int = 0, stdout: str = "", stderr: str = "") -> None:
        self._responses.insert(
            0, (tuple(prefix), ExecResult(exit_code=exit_code, stdout=stdout, stderr=stderr))
        )

    def create_sandbox(self, name, resources, source_url=None, timeout_s=None, ports=(), runtime=None):
        return SandboxHandle(
            sandbox_id=f"{name}-fake",
            cwd="/workspace",
            resources=resources,
            ports=tuple(ports),
            timeout_s=timeout_s,
        )

    def delete_sandbox(self, sandbox_id: str) -> None:
        self.deleted.append(sandbox_id)

    def exec(self, sandbox_id, command, cwd=None, env=None, timeout_s=None) -> ExecResult:
        command = list(command)
        self.commands.append(command)
        for prefix, result in self._responses:
            if tuple(command[: len(prefix)]) == prefix:
                return result
        if command[0] == "cat":
            path = command[1]
            if path not in self.files:
                return ExecResult(1, "", f"cat: {path}: No such file or directory")
            return ExecResult(0, self.files[path], "")
        if command[0] == "ls":
            target = command[-1]
            if target != "." and not any(name.startswith(f"{target}/") for name in self.files):
                return ExecResult(2, "", f"ls: cannot access '{target}': No such file or directory")
            names = sorted(self.files)
            return ExecResult(0, "total 0\n" + "\n".join(names) + "\n", "")
        return ExecResult(0, "", "")

    def write_files(self, sandbox_id, files) -> None:
        for upload in files:
            self.writes.append(upload)
            self.files[upload.path] = upload.content.decode("utf-8")


class FakeScmProvider:
    def __init__(self, token: str | None = "ghp_test", response: PullRequestInfo | None = None) -> None:
        self._token = token
        self.response = response or PullRequestInfo(url="https://github.com/acme/widgets/pull/7", number=7)
        self.error: str | None = None
        self.opened: list[dict] = []

    @property
    def has_token(self) -> bool:
        return bool(self._token)

    def get_repo_default_branch(self, repo: str) -> str:
        return "develop"

    def authenticated_url(self, repo_url: str) -> str:
        return repo_url.replace("https://github.com/", f"https://{self._token}@github.com/", 1)

    def open_pr(self, repo, head_branch, base_branch, title, body):
        self.opened.append(
            {"repo": repo, "head": head_branch, "base": base_branch, "title": title, "body": body}
        )
        if self.error is not None:
            raise ProviderError(self.error)
        return self.response


@pytest.fixture
def fake_provider():
    return FakeSandboxProvider()


@pytest.fixture
def session(fake_provider):
    handle = fake_provider.create_sandbox("test", SandboxResources(vcpus=2))
    return SandboxSession(fake_provider, handle)


@pytest.fixture
def fake_scm():
    return FakeScmProvider()


@pytest.fixture
def repo_url():
    return "https://github.com/acme/widgets.git"
