"""A sandbox provider bound to a single running sandbox."""

from __future__ import annotations

import logging
from typing import Sequence

from sandbox_agent.errors import RemoteCommandError
from sandbox_agent.models.sandbox import ExecResult, FileUpload, SandboxHandle
from sandbox_agent.providers.sandbox.base import SandboxProvider

logger = logging.getLogger(__name__)


class SandboxSession:
    """Runs commands and writes files in one sandbox.

    Commands run in the sandbox working directory (the repository checkout).
    ``run_command`` returns the raw ``ExecResult``; ``check_command`` raises
    ``RemoteCommandError`` when the command exits non-zero.
    """

    def __init__(self, provider: SandboxProvider, handle: SandboxHandle) -> None:
        self._provider = provider
        self._handle = handle

    @property
    def handle(self) -> SandboxHandle:
        return self._handle

    @property
    def sandbox_id(self) -> str:
        return self._handle.sandbox_id

    def run_command(self, executable: str, args: Sequence[str] = ()) -> ExecResult:
        command = [executable, *args]
        result = self._provider.exec(
            self._handle.sandbox_id, command, cwd=self._handle.cwd
        )
        logger.debug(
            "Sandbox command sandbox=%s command=%s exit_code=%s duration_ms=%s",
            self._handle.sandbox_id,
            executable,
            result.exit_code,
            result.duration_ms,
        )
        return result

    def check_command(self, executable: str, args: Sequence[str] = ()) -> ExecResult:
        result = self.run_command(executable, args)
        if not result.ok:
            raise RemoteCommandError([executable, *args], result)
        return result

    def write_files(self, files: Sequence[FileUpload]) -> None:
        self._provider.write_files(self._handle.sandbox_id, files)

    def write_file(self, path: str, content: str) -> None:
        self.write_files([FileUpload(path=path, content=content.encode("utf-8"))])

    def close(self) -> None:
        self._provider.delete_sandbox(self._handle.sandbox_id)
