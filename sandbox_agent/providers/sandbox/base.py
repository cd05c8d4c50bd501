"""Sandbox provider interface."""

from __future__ import annotations

from typing import Protocol, Sequence

from sandbox_agent.models.sandbox import (
    ExecResult,
    FileUpload,
    SandboxHandle,
    SandboxResources,
)


class SandboxProvider(Protocol):
    def create_sandbox(
        self,
        name: str,
        resources: SandboxResources,
        source_url: str | None = None,
        timeout_s: int | None = None,
        ports: Sequence[int] = (),
        runtime: str | None = None,
    ) -> SandboxHandle:
        ...

    def delete_sandbox(self, sandbox_id: str) -> None:
        ...

    def exec(
        self,
        sandbox_id: str,
        command: Sequence[str],
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        timeout_s: int | None = None,
    ) -> ExecResult:
        ...

    def write_files(self, sandbox_id: str, files: Sequence[FileUpload]) -> None:
        ...
