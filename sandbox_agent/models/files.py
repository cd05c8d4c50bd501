"""Data models for file operations inside a sandbox."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class FileContent:
    path: str
    content: str

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "content": self.content}


@dataclass(frozen=True)
class FileEditRequest:
    path: str
    old_text: str
    new_text: str


@dataclass(frozen=True)
class EditSuccess:
    path: str

    def to_dict(self) -> dict[str, Any]:
        return {"success": True}


@dataclass(frozen=True)
class EditFailure:
    path: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message}


EditResult = Union[EditSuccess, EditFailure]
