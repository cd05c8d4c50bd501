"""Local sandbox provider implementation."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
import shutil
import subprocess
import tempfile
import time
from typing import Sequence
from uuid import uuid4

from sandbox_agent.errors import RemoteCommandError
from sandbox_agent.models.sandbox import (
    ExecResult,
    FileUpload,
    SandboxHandle,
    SandboxResources,
)
from sandbox_agent.providers.sandbox.base import SandboxProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _SandboxRecord:
    sandbox_id: str
    root: Path
    deadline: float | None


class LocalProvider(SandboxProvider):
    """Sandboxes are directories under ``base_dir``; commands run via subprocess.

    The timeout given at creation bounds every command run afterwards, so a
    sandbox whose budget is spent fails its commands the way an expired
    remote sandbox would.
    """

    def __init__(self, base_dir: str | None = None) -> None:
        self._base_dir = Path(base_dir) if base_dir else Path(
            tempfile.mkdtemp(prefix="sandbox-agent-")
        )
        self._sandboxes: dict[str, _SandboxRecord] = {}

    def create_sandbox(
        self,
        name: str,
        resources: SandboxResources,
        source_url: str | None = None,
        timeout_s: int | None = None,
        ports: Sequence[int] = (),
        runtime: str | None = None,
    ) -> SandboxHandle:
        sandbox_id = f"{name}-{uuid4().hex[:8]}"
        root = self._base_dir / sandbox_id
        root.mkdir(parents=True, exist_ok=False)
        deadline = time.monotonic() + timeout_s if timeout_s else None
        self._sandboxes[sandbox_id] = _SandboxRecord(
            sandbox_id=sandbox_id, root=root, deadline=deadline
        )
        if source_url:
            self._clone(sandbox_id, source_url)
        logger.info(
            "Local sandbox created sandbox=%s root=%s runtime=%s", sandbox_id, root, runtime
        )
        return SandboxHandle(
            sandbox_id=sandbox_id,
            cwd=str(root),
            resources=resources,
            ports=tuple(ports),
            timeout_s=timeout_s,
            endpoint=None,
        )

    def delete_sandbox(self, sandbox_id: str) -> None:
        record = self._get_record(sandbox_id)
        shutil.rmtree(record.root, ignore_errors=True)
        self._sandboxes.pop(sandbox_id, None)

    def exec(
        self,
        sandbox_id: str,
        command: Sequence[str],
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        timeout_s: int | None = None,
    ) -> ExecResult:
        record = self._get_record(sandbox_id)
        workdir = self._resolve_path(sandbox_id, cwd) if cwd else record.root
        start = time.monotonic()
        try:
            process = subprocess.run(
                list(command),
                cwd=workdir,
                env=self._merge_env(env),
                capture_output=True,
                text=True,
                timeout=self._remaining(record, timeout_s),
                check=False,
            )
        except FileNotFoundError as exc:
            return ExecResult(
                exit_code=127,
                stdout="",
                stderr=str(exc),
                duration_ms=int((time.monotonic() - start) * 1000),
            )
        except subprocess.TimeoutExpired:
            return ExecResult(
                exit_code=124,
                stdout="",
                stderr=f"Command timed out: {' '.join(command)}",
                duration_ms=int((time.monotonic() - start) * 1000),
            )
        duration_ms = int((time.monotonic() - start) * 1000)
        return ExecResult(
            exit_code=process.returncode,
            stdout=process.stdout,
            stderr=process.stderr,
            duration_ms=duration_ms,
        )

    def write_files(self, sandbox_id: str, files: Sequence[FileUpload]) -> None:
        for upload in files:
            target = self._resolve_path(sandbox_id, upload.path)
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("wb") as handle:
                handle.write(upload.content)

    def _get_record(self, sandbox_id: str) -> _SandboxRecord:
        if sandbox_id not in self._sandboxes:
            raise KeyError(f"Unknown sandbox id: {sandbox_id}")
        return self._sandboxes[sandbox_id]

    def _resolve_path(self, sandbox_id: str, path: str) -> Path:
        root = self._get_record(sandbox_id).root.resolve()
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = root / candidate
        resolved = candidate.resolve()
        if root != resolved and root not in resolved.parents:
            raise ValueError(f"Path escapes sandbox: {path}")
        return resolved

    def _remaining(self, record: _SandboxRecord, timeout_s: int | None) -> float | None:
        if record.deadline is None:
            return timeout_s
        remaining = max(record.deadline - time.monotonic(), 0.001)
        if timeout_s is None:
            return remaining
        return min(remaining, timeout_s)

    def _merge_env(self, env: dict[str, str] | None) -> dict[str, str]:
        merged = os.environ.copy()
        if env:
            merged.update(env)
        return merged

    def _clone(self, sandbox_id: str, url: str) -> None:
        root = self._get_record(sandbox_id).root
        result = self.exec(sandbox_id, ["git", "clone", url, str(root)])
        if result.exit_code != 0:
            logger.warning("Clone failed, removing sandbox=%s", sandbox_id)
            self.delete_sandbox(sandbox_id)
            raise RemoteCommandError(["git", "clone", url], result)
