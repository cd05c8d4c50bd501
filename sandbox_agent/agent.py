"""Tool-calling coding agent that works inside a sandbox."""

from __future__ import annotations

import inspect
import json
import logging
from typing import Any, Callable

from sandbox_agent.errors import AgentError, ConfigError, SandboxAgentError
from sandbox_agent.files import apply_edit, list_files, read_file
from sandbox_agent.models.files import FileEditRequest
from sandbox_agent.models.scm import PRRequest
from sandbox_agent.providers.llm.litellm_client import LiteLLMClient
from sandbox_agent.providers.sandbox.session import SandboxSession
from sandbox_agent.publisher import PRPublisher

logger = logging.getLogger(__name__)

MAX_TOOL_OUTPUT_CHARS = 20_000

SYSTEM_PROMPT = """\
You are a coding agent working in a checkout of {repo_url}.
The working directory is the repository root.

Use the tools to inspect and change the code:
- list_files and read_file to explore the repository.
- edit_file to replace an exact snippet of text in a file (first match only).
- run_command to run shell commands such as tests or builds.
- create_pr to commit every change on a new branch and open a pull request.

Only call create_pr when the user asked for a pull request. When you are
done, answer with a short summary of what you did."""


def _function(name: str, description: str, properties: dict[str, Any], required: list[str]) -> dict[str, Any]:
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": {
                "type": "object",
                "properties": properties,
                "required": required,
            },
        },
    }


TOOL_SPECS = [
    _function(
        "read_file",
        "Read the full contents of a file in the repository.",
        {"path": {"type": "string", "description": "File path relative to the repository root."}},
        ["path"],
    ),
    _function(
        "list_files",
        "List a directory (ls -la). Defaults to the repository root.",
        {"path": {"type": "string", "description": "Directory to list."}},
        [],
    ),
    _function(
        "edit_file",
        "Replace the first occurrence of old_str with new_str in a file.",
        {
            "path": {"type": "string"},
            "old_str": {"type": "string", "description": "Exact text to replace."},
            "new_str": {"type": "string", "description": "Replacement text."},
        },
        ["path", "old_str", "new_str"],
    ),
    _function(
        "run_command",
        "Run a shell command in the repository root and return its output.",
        {"command": {"type": "string"}},
        ["command"],
    ),
    _function(
        "create_pr",
        "Commit all changes on a new branch, push it and open a pull request.",
        {
            "title": {"type": "string"},
            "body": {"type": "string"},
            "branch": {"type": "string", "description": "Optional branch name prefix."},
        },
        ["title", "body"],
    ),
]


_ARGUMENT_TYPES = {
    spec["function"]["name"]: {
        key: prop["type"] for key, prop in spec["function"]["parameters"]["properties"].items()
    }
    for spec in TOOL_SPECS
}

_JSON_TYPES: dict[str, type] = {"string": str}


def _mistyped_argument(name: str, args: dict[str, Any]) -> str | None:
    """Return the first argument whose value does not match its declared type."""
    for key, value in args.items():
        expected = _JSON_TYPES.get(_ARGUMENT_TYPES[name].get(key, ""))
        if expected is not None and value is not None and not isinstance(value, expected):
            return key
    return None


def _truncate(text: str) -> str:
    if len(text) <= MAX_TOOL_OUTPUT_CHARS:
        return text
    return text[:MAX_TOOL_OUTPUT_CHARS] + "\n[truncated]"


class CodingAgent:
    def __init__(
        self,
        llm: LiteLLMClient,
        profile: str = "default",
        publisher: PRPublisher | None = None,
        max_steps: int = 20,
    ) -> None:
        self._llm = llm
        self._profile = profile
        self._publisher = publisher
        self._max_steps = max_steps

    def run(self, session: SandboxSession, repo_url: str, prompt: str) -> str:
        messages: list[dict[str, Any]] = [
            {"role": "system", "content": SYSTEM_PROMPT.format(repo_url=repo_url)},
            {"role": "user", "content": prompt},
        ]
        for step in range(1, self._max_steps + 1):
            response = self._llm.completion(self._profile, messages, tools=TOOL_SPECS)
            message = response.choices[0].message
            tool_calls = getattr(message, "tool_calls", None) or []
            if not tool_calls:
                logger.info("Agent finished sandbox=%s steps=%s", session.sandbox_id, step)
                return message.content or ""

            messages.append(
                {
                    "role": "assistant",
                    "content": message.content,
                    "tool_calls": [
                        {
                            "id": call.id,
                            "type": "function",
                            "function": {
                                "name": call.function.name,
                                "arguments": call.function.arguments,
                            },
                        }
                        for call in tool_calls
                    ],
                }
            )
            for call in tool_calls:
                output = self.call_tool(session, repo_url, call.function.name, call.function.arguments)
                messages.append({"role": "tool", "tool_call_id": call.id, "content": output})

        raise AgentError(f"Agent did not finish within {self._max_steps} steps")

    def call_tool(self, session: SandboxSession, repo_url: str, name: str, arguments: str | None) -> str:
        """Run one tool call and return its JSON-encoded output.

        Failures are reported to the model as ``{"error": ...}`` outputs.
        """
        logger.info("Tool call sandbox=%s tool=%s", session.sandbox_id, name)
        handlers: dict[str, Callable[..., Any]] = {
            "read_file": self._read_file,
            "list_files": self._list_files,
            "edit_file": self._edit_file,
            "run_command": self._run_command,
            "create_pr": self._create_pr,
        }
        handler = handlers.get(name)
        if handler is None:
            return json.dumps({"error": f"Unknown tool: {name}"})
        try:
            args = json.loads(arguments) if arguments else {}
        except ValueError:
            return json.dumps({"error": f"Invalid arguments for {name}"})
        if not isinstance(args, dict):
            return json.dumps({"error": f"Invalid arguments for {name}"})
        try:
            bound = inspect.signature(handler).bind(session, repo_url, **args)
        except TypeError as exc:
            return json.dumps({"error": f"Invalid arguments for {name}: {exc}"})
        mistyped = _mistyped_argument(name, args)
        if mistyped is not None:
            expected = _ARGUMENT_TYPES[name][mistyped]
            return json.dumps({"error": f"Invalid arguments for {name}: {mistyped} must be a {expected}"})
        try:
            output = handler(*bound.args, **bound.kwargs)
        except SandboxAgentError as exc:
            logger.warning("Tool failed sandbox=%s tool=%s error=%s", session.sandbox_id, name, exc)
            return json.dumps({"error": str(exc)})
        except Exception as exc:
            logger.exception("Tool crashed sandbox=%s tool=%s", session.sandbox_id, name)
            return json.dumps({"error": str(exc) or type(exc).__name__})
        if isinstance(output, str):
            return _truncate(output)
        return json.dumps(output)

    def _read_file(self, session: SandboxSession, repo_url: str, path: str) -> dict[str, Any]:
        content = read_file(session, path)
        return {"path": content.path, "content": _truncate(content.content)}

    def _list_files(self, session: SandboxSession, repo_url: str, path: str | None = None) -> str:
        return list_files(session, path)

    def _edit_file(
        self, session: SandboxSession, repo_url: str, path: str, old_str: str, new_str: str
    ) -> dict[str, Any]:
        request = FileEditRequest(path=path, old_text=old_str, new_text=new_str)
        return apply_edit(session, request).to_dict()

    def _run_command(self, session: SandboxSession, repo_url: str, command: str) -> dict[str, Any]:
        result = session.run_command("bash", ["-c", command])
        return {
            "exit_code": result.exit_code,
            "stdout": result.stdout[-MAX_TOOL_OUTPUT_CHARS:],
            "stderr": result.stderr[-MAX_TOOL_OUTPUT_CHARS:],
        }

    def _create_pr(
        self,
        session: SandboxSession,
        repo_url: str,
        title: str,
        body: str,
        branch: str | None = None,
    ) -> dict[str, Any]:
        if self._publisher is None:
            raise ConfigError("GITHUB_TOKEN environment variable is required")
        request = PRRequest(title=title, body=body, branch=branch or None)
        return self._publisher.create_pr(session, repo_url, request).to_dict()
