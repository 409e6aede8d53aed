"""Domain types for hook inputs, decisions and persisted records.

Each event kind has its own immutable input record decoded once from the
stdin payload.  Decoding never rejects a payload: missing or mistyped
fields fall back to explicit defaults so a hook always runs to completion.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_CONTINUE = 0
"""Allow / continue (every event)."""

EXIT_BLOCK = 1
"""Block the tool call (PreToolUse only, when enforcement is enabled)."""

UNKNOWN = "unknown"

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class HookEventKind(str, Enum):
    """Lifecycle events a hook can be invoked for."""

    SESSION_START = "SessionStart"
    SESSION_END = "SessionEnd"
    PRE_TOOL_USE = "PreToolUse"
    POST_TOOL_USE = "PostToolUse"
    USER_PROMPT_SUBMIT = "UserPromptSubmit"


def _build_event_aliases() -> dict[str, HookEventKind]:
    """Map PascalCase, camelCase and kebab-case names to each event kind."""
    aliases: dict[str, HookEventKind] = {}
    for kind in HookEventKind:
        pascal = kind.value
        camel = pascal[0].lower() + pascal[1:]
        kebab = "".join("-" + c.lower() if c.isupper() else c for c in pascal).lstrip("-")
        for alias in (pascal, camel, kebab):
            aliases[alias] = kind
    return aliases


_EVENT_ALIASES = _build_event_aliases()


def normalize_event(raw: str) -> HookEventKind | None:
    """Normalize an event name (PascalCase, camelCase or kebab-case).

    Returns ``None`` if the event is not recognized.
    """
    return _EVENT_ALIASES.get(raw.strip())


class Decision(str, Enum):
    """Outcome of PreToolUse validation."""

    ALLOWED = "ALLOWED"
    WARNING = "WARNING"
    BLOCKED = "BLOCKED"


# ---------------------------------------------------------------------------
# Field decoding helpers
# ---------------------------------------------------------------------------


def _first(data: dict[str, Any], *keys: str) -> Any:
    """Return the value of the first present key, or None."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _as_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(value)


def _as_bool(value: Any, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    if isinstance(value, (int, float)):
        return value != 0
    return default


def _as_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(float(value))
        except ValueError:
            return default
    return default


def _as_dict(value: Any) -> dict[str, Any]:
    return dict(value) if isinstance(value, dict) else {}


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SessionStartInput:
    """Parsed SessionStart payload."""

    session_id: str = ""
    cwd: str = ""
    source: str = ""

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> SessionStartInput:
        return cls(
            session_id=_as_str(data.get("session_id")),
            cwd=_as_str(data.get("cwd")),
            source=_as_str(data.get("source")),
        )


@dataclass(frozen=True)
class UserPromptSubmitInput:
    """Parsed UserPromptSubmit payload."""

    prompt: str = ""
    session_id: str = ""
    cwd: str = ""

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> UserPromptSubmitInput:
        return cls(
            prompt=_as_str(data.get("prompt")),
            session_id=_as_str(data.get("session_id")),
            cwd=_as_str(data.get("cwd")),
        )


@dataclass(frozen=True)
class PreToolUseInput:
    """Parsed PreToolUse payload.

    Accepts both ``tool``/``parameters`` and the host's
    ``tool_name``/``tool_input`` field names.
    """

    tool: str = UNKNOWN
    parameters: dict[str, Any] = field(default_factory=dict)
    session_id: str = ""
    cwd: str = ""

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> PreToolUseInput:
        return cls(
            tool=_as_str(_first(data, "tool", "tool_name", "name"), UNKNOWN) or UNKNOWN,
            parameters=_as_dict(_first(data, "parameters", "tool_input")),
            session_id=_as_str(data.get("session_id")),
            cwd=_as_str(data.get("cwd")),
        )

    def param(self, key: str) -> str:
        return _as_str(self.parameters.get(key))


@dataclass(frozen=True)
class PostToolUseInput:
    """Parsed PostToolUse payload."""

    tool: str = UNKNOWN
    parameters: dict[str, Any] = field(default_factory=dict)
    success: bool = False
    output: str = ""
    error: str = ""
    duration_ms: int = 0
    session_id: str = ""
    cwd: str = ""

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> PostToolUseInput:
        return cls(
            tool=_as_str(_first(data, "tool", "tool_name", "name"), UNKNOWN) or UNKNOWN,
            parameters=_as_dict(_first(data, "parameters", "tool_input")),
            success=_as_bool(data.get("success")),
            output=_as_str(_first(data, "output", "tool_response")),
            error=_as_str(data.get("error")),
            duration_ms=max(0, _as_int(data.get("duration_ms"))),
            session_id=_as_str(data.get("session_id")),
            cwd=_as_str(data.get("cwd")),
        )

    def param(self, key: str) -> str:
        return _as_str(self.parameters.get(key))


# ---------------------------------------------------------------------------
# Persisted records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ContextBundle:
    """Environment snapshot written to ``session-context.json``."""

    timestamp: str
    working_directory: str
    user: str
    git_branch: str
    git_status: str
    shell: str
    term: str
    lang: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "working_directory": self.working_directory,
            "user": self.user,
            "git_branch": self.git_branch,
            "git_status": self.git_status,
            "environment": {
                "shell": self.shell,
                "term": self.term,
                "lang": self.lang,
            },
        }


@dataclass(frozen=True)
class SessionRecord:
    """Metadata written once per session to ``sessions/<id>.json``."""

    session_id: str
    started_at: str
    working_directory: str
    context_bundle: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "started_at": self.started_at,
            "working_directory": self.working_directory,
            "context_bundle": self.context_bundle,
            "hooks": {
                "session_start": {
                    "executed": True,
                    "timestamp": self.started_at,
                }
            },
        }


@dataclass(frozen=True)
class ToolUsageRecord:
    """One line of ``tool-usage-detailed.jsonl``."""

    timestamp: str
    tool: str
    success: bool
    duration_ms: int
    working_dir: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "tool": self.tool,
            "success": self.success,
            "duration_ms": self.duration_ms,
            "working_dir": self.working_dir,
        }


@dataclass(frozen=True)
class PromptMetadataRecord:
    """One line of ``prompts.jsonl``.  Holds no prompt text."""

    timestamp: str
    length: int
    intents: tuple[str, ...]
    working_dir: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "length": self.length,
            "intents": list(self.intents),
            "working_dir": self.working_dir,
        }


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass
class HookResult:
    """What a handler reports back to the dispatcher."""

    exit_code: int = EXIT_CONTINUE
    decision: Decision | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def blocked(self) -> bool:
        return self.exit_code != EXIT_CONTINUE
