"""File operations composed from sandbox commands."""

from __future__ import annotations

import logging

from sandbox_agent.errors import NotFoundError, ReadError, RemoteCommandError
from sandbox_agent.models.files import (
    EditFailure,
    EditResult,
    EditSuccess,
    FileContent,
    FileEditRequest,
)
from sandbox_agent.providers.sandbox.session import SandboxSession

logger = logging.getLogger(__name__)


def read_file(session: SandboxSession, path: str) -> FileContent:
    logger.info("Reading file path=%s", path)
    result = session.run_command("cat", [path])
    if not result.ok:
        raise NotFoundError(["cat", path], result)
    logger.debug("File read path=%s bytes=%s", path, len(result.stdout))
    return FileContent(path=path, content=result.stdout)


def list_files(session: SandboxSession, path: str | None = None) -> str:
    target = path if path else "."
    logger.info("Listing files path=%s", target)
    result = session.run_command("ls", ["-la", target])
    if not result.ok:
        raise RemoteCommandError(["ls", "-la", target], result)
    return result.stdout


def edit_file(
    session: SandboxSession,
    path: str,
    old_text: str,
    new_text: str,
    touch_on_noop: bool = True,
) -> EditResult:
    """Replace the first occurrence of ``old_text`` with ``new_text`` in ``path``.

    The file is rewritten in full. An unreadable file raises ``ReadError``
    and is left alone. When ``old_text == new_text`` the edit is
    a no-op; ``touch_on_noop`` controls whether the unchanged content is
    still written back (the historical "touch" behaviour) or skipped.
    """
    logger.info("Editing file path=%s", path)
    try:
        content = read_file(session, path).content
    except NotFoundError as exc:
        logger.warning("Edit aborted path=%s reason=read_error", path)
        raise ReadError(f"Could not read file {path}: {exc.result.stderr.strip()}") from exc

    updated = content.replace(old_text, new_text, 1)
    if updated == content and old_text != new_text:
        logger.info("Edit target not found path=%s", path)
        return EditFailure(path=path, message=f'String "{old_text}" not found in file')

    if old_text == new_text and not touch_on_noop:
        logger.info("Edit skipped path=%s reason=noop", path)
        return EditSuccess(path=path)

    session.write_file(path, updated)
    logger.info("File edited path=%s", path)
    return EditSuccess(path=path)


def apply_edit(
    session: SandboxSession, request: FileEditRequest, touch_on_noop: bool = True
) -> EditResult:
    return edit_file(
        session, request.path, request.old_text, request.new_text, touch_on_noop=touch_on_noop
    )
