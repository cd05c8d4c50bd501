"""Data models for SCM interactions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union


@dataclass(frozen=True)
class PullRequestInfo:
    url: str
    number: int


@dataclass(frozen=True)
class PRRequest:
    title: str
    body: str
    branch: Optional[str] = None


@dataclass(frozen=True)
class PRSuccess:
    branch: str
    pr_url: str
    pr_number: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "branch": self.branch,
            "pr_url": self.pr_url,
            "pr_number": self.pr_number,
        }


@dataclass(frozen=True)
class PRFailure:
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message}


PRResult = Union[PRSuccess, PRFailure]
