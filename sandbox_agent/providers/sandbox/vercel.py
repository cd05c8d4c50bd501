"""Vercel Sandbox provider backed by the ``vercel`` SDK."""

from __future__ import annotations

import asyncio
import importlib
import importlib.util
import logging
import threading
import time
from typing import Any, Sequence

from sandbox_agent.models.sandbox import (
    ExecResult,
    FileUpload,
    SandboxHandle,
    SandboxResources,
)
from sandbox_agent.providers.sandbox.base import SandboxProvider

logger = logging.getLogger(__name__)


class VercelProvider(SandboxProvider):
    """Ephemeral remote sandboxes created with ``vercel.sandbox.Sandbox``.

    The SDK is asynchronous; every call is driven to completion on an event
    loop owned by the calling thread so callers stay synchronous. A sandbox
    is used from the thread that created it, as one request runs start to
    finish in a single worker thread. Authentication uses
    whatever the SDK picks up from the environment (an OIDC token or a
    team/project access token).
    """

    def __init__(self) -> None:
        sdk_spec = importlib.util.find_spec("vercel")
        if sdk_spec is None:
            raise RuntimeError("vercel must be installed to use the Vercel sandbox provider.")
        self._sdk = importlib.import_module("vercel.sandbox")
        self._local = threading.local()
        self._sandboxes: dict[str, Any] = {}

    def _run(self, coroutine: Any) -> Any:
        loop = getattr(self._local, "loop", None)
        if loop is None:
            loop = asyncio.new_event_loop()
            self._local.loop = loop
        return loop.run_until_complete(coroutine)

    def create_sandbox(
        self,
        name: str,
        resources: SandboxResources,
        source_url: str | None = None,
        timeout_s: int | None = None,
        ports: Sequence[int] = (),
        runtime: str | None = None,
    ) -> SandboxHandle:
        params: dict[str, Any] = {"resources": {"vcpus": resources.vcpus}}
        if source_url:
            params["source"] = {"url": source_url, "type": "git"}
        if timeout_s:
            params["timeout"] = timeout_s * 1000
        if ports:
            params["ports"] = list(ports)
        if runtime:
            params["runtime"] = runtime
        sandbox = self._run(self._sdk.Sandbox.create(**params))
        sandbox_id = sandbox.sandbox_id
        self._sandboxes[sandbox_id] = sandbox
        endpoint = sandbox.domain(ports[0]) if ports else None
        logger.info(
            "Vercel sandbox created sandbox=%s name=%s runtime=%s", sandbox_id, name, runtime
        )
        return SandboxHandle(
            sandbox_id=sandbox_id,
            cwd=sandbox.sandbox.cwd,
            resources=resources,
            ports=tuple(ports),
            timeout_s=timeout_s,
            endpoint=endpoint,
        )

    def delete_sandbox(self, sandbox_id: str) -> None:
        sandbox = self._get_sandbox(sandbox_id)
        self._run(sandbox.stop())
        self._sandboxes.pop(sandbox_id, None)

    def exec(
        self,
        sandbox_id: str,
        command: Sequence[str],
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        timeout_s: int | None = None,
    ) -> ExecResult:
        sandbox = self._get_sandbox(sandbox_id)
        executable, *args = list(command)
        start = time.monotonic()
        finished = self._run(sandbox.run_command(executable, args, cwd=cwd, env=env))
        stdout = self._run(finished.stdout()) or ""
        stderr = self._run(finished.stderr()) or ""
        return ExecResult(
            exit_code=finished.exit_code,
            stdout=stdout,
            stderr=stderr,
            duration_ms=int((time.monotonic() - start) * 1000),
        )

    def write_files(self, sandbox_id: str, files: Sequence[FileUpload]) -> None:
        sandbox = self._get_sandbox(sandbox_id)
        payload = [{"path": upload.path, "content": upload.content} for upload in files]
        self._run(sandbox.write_files(payload))

    def _get_sandbox(self, sandbox_id: str) -> Any:
        if sandbox_id not in self._sandboxes:
            raise KeyError(f"Unknown sandbox id: {sandbox_id}")
        return self._sandboxes[sandbox_id]
