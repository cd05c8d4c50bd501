"""Shared data models for the sandbox agent."""

from sandbox_agent.models.files import (
    EditFailure,
    EditResult,
    EditSuccess,
    FileContent,
    FileEditRequest,
)
from sandbox_agent.models.sandbox import (
    ExecResult,
    FileUpload,
    SandboxHandle,
    SandboxResources,
)
from sandbox_agent.models.scm import (
    PRFailure,
    PRRequest,
    PRResult,
    PRSuccess,
    PullRequestInfo,
)

__all__ = [
    "EditFailure",
    "EditResult",
    "EditSuccess",
    "ExecResult",
    "FileContent",
    "FileEditRequest",
    "FileUpload",
    "PRFailure",
    "PRRequest",
    "PRResult",
    "PRSuccess",
    "PullRequestInfo",
    "SandboxHandle",
    "SandboxResources",
]
