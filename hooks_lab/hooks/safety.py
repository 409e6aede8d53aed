"""Validation rules applied before a tool runs.

Maps a tool call to an ALLOWED / WARNING / BLOCKED decision:

* ``Bash`` — the command is matched against the dangerous-command patterns
  (recursive delete of ``/``, ``mkfs``, raw ``dd`` writes by default).
* ``Write`` / ``Edit`` / ``MultiEdit`` — the target path is matched against
  the protected system paths (``/etc/``, ``/sys/``, ``/proc/`` by default).
* ``Grep`` / ``Read`` / ``Glob`` — read-only, always allowed.
* Anything else — allowed, no rules apply.

A BLOCKED decision only stops the tool when ``enforce_blocking`` is set;
otherwise it is recorded in the log and the call proceeds.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from hooks_lab.config import Settings
from hooks_lab.hooks.models import Decision

READ_ONLY_TOOLS: frozenset[str] = frozenset({"Grep", "Read", "Glob"})
FILE_WRITE_TOOLS: frozenset[str] = frozenset({"Write", "Edit", "MultiEdit"})
SHELL_TOOLS: frozenset[str] = frozenset({"Bash"})


@dataclass(frozen=True)
class SafetyVerdict:
    """Decision for one tool call."""

    decision: Decision
    reason: str
    category: str
    matched_pattern: str = ""
    blocks: bool = False
    subject: str = ""


@lru_cache(maxsize=64)
def _compile(patterns: tuple[str, ...]) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p) for p in patterns)


def find_match(text: str, patterns: list[str]) -> str:
    """Return the first pattern in *patterns* found in *text*, or ``""``."""
    if not text:
        return ""
    for compiled in _compile(tuple(patterns)):
        if compiled.search(text):
            return compiled.pattern
    return ""


def evaluate_tool_use(
    tool: str,
    parameters: dict[str, Any],
    settings: Settings,
) -> SafetyVerdict:
    """Apply the validation rules for *tool*.

    Args:
        tool: Tool name from the payload.
        parameters: Tool parameters from the payload.
        settings: Pattern lists and enforcement switches.

    Returns:
        SafetyVerdict with the decision and whether it should block.
    """
    if tool in SHELL_TOOLS:
        command = str(parameters.get("command", "") or "")
        matched = find_match(command, settings.dangerous_command_patterns)
        if matched:
            return SafetyVerdict(
                decision=Decision.BLOCKED,
                reason="Command contains dangerous patterns",
                category="shell",
                matched_pattern=matched,
                blocks=settings.enforce_blocking,
                subject=command,
            )
        return SafetyVerdict(
            decision=Decision.ALLOWED,
            reason="Command appears safe",
            category="shell",
            subject=command,
        )

    if tool in FILE_WRITE_TOOLS:
        file_path = str(parameters.get("file_path", "") or "")
        matched = find_match(file_path, settings.protected_path_patterns)
        if matched:
            decision = Decision.BLOCKED if settings.block_protected_paths else Decision.WARNING
            return SafetyVerdict(
                decision=decision,
                reason="Modifying system files can be dangerous",
                category="file_write",
                matched_pattern=matched,
                blocks=decision is Decision.BLOCKED and settings.enforce_blocking,
                subject=file_path,
            )
        return SafetyVerdict(
            decision=Decision.ALLOWED,
            reason="File path appears safe",
            category="file_write",
            subject=file_path,
        )

    if tool in READ_ONLY_TOOLS:
        return SafetyVerdict(
            decision=Decision.ALLOWED,
            reason="Read operations are generally safe",
            category="read_only",
        )

    return SafetyVerdict(
        decision=Decision.ALLOWED,
        reason="No specific validation rules for this tool",
        category="unvalidated",
    )
