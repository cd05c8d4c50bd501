"""Data models for sandbox interactions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class SandboxResources:
    vcpus: int
    memory_gib: Optional[int] = None
    disk_gib: Optional[int] = None


@dataclass(frozen=True)
class SandboxHandle:
    sandbox_id: str
    cwd: str
    resources: SandboxResources
    ports: tuple[int, ...] = ()
    timeout_s: Optional[int] = None
    endpoint: Optional[str] = None


@dataclass(frozen=True)
class ExecResult:
    exit_code: int
    stdout: str
    stderr: str
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        return self.stdout + self.stderr


@dataclass(frozen=True)
class FileUpload:
    path: str
    content: bytes = field(repr=False)
