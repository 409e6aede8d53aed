"""Generate the hook registration block for Claude Code settings.

The output goes under the ``hooks`` key of ``.claude/settings.json`` (or a
plugin's ``hooks/hooks.json``) and registers every lifecycle event handled
by ``hooks-lab hook <event>``.
"""

from __future__ import annotations

import sys
from typing import Any

from hooks_lab.hooks.models import HookEventKind

# Events with a handler, in the order they fire within a session.
REGISTERED_EVENTS: tuple[HookEventKind, ...] = (
    HookEventKind.SESSION_START,
    HookEventKind.USER_PROMPT_SUBMIT,
    HookEventKind.PRE_TOOL_USE,
    HookEventKind.POST_TOOL_USE,
)

_TOOL_EVENTS = frozenset({HookEventKind.PRE_TOOL_USE, HookEventKind.POST_TOOL_USE})

DEFAULT_TIMEOUT_SECONDS = 10


def event_cli_name(event: HookEventKind) -> str:
    """Kebab-case CLI name for *event* (``PreToolUse`` -> ``pre-tool-use``)."""
    return "".join("-" + c.lower() if c.isupper() else c for c in event.value).lstrip("-")


def _base_command(mode: str, python_path: str) -> str:
    if mode == "module":
        return f"{python_path or sys.executable} -m hooks_lab"
    if mode == "cli":
        return "hooks-lab"
    raise ValueError(f"Unknown mode: {mode!r}. Expected 'cli' or 'module'")


def build_hooks(
    *,
    mode: str = "cli",
    python_path: str = "",
    timeout: int = DEFAULT_TIMEOUT_SECONDS,
    tool_matcher: str = "*",
) -> dict[str, list[dict[str, Any]]]:
    """Build the ``hooks`` mapping.

    Args:
        mode: ``"cli"`` runs the ``hooks-lab`` console script, ``"module"``
            runs ``<python> -m hooks_lab``.
        python_path: Interpreter for module mode (defaults to the current one).
        timeout: Per-hook timeout in seconds.
        tool_matcher: Matcher for the tool events.

    Returns:
        Mapping of event name to its list of matcher groups.
    """
    base = _base_command(mode, python_path)
    hooks: dict[str, list[dict[str, Any]]] = {}
    for event in REGISTERED_EVENTS:
        group: dict[str, Any] = {
            "hooks": [
                {
                    "type": "command",
                    "command": f"{base} hook {event_cli_name(event)}",
                    "timeout": timeout,
                }
            ]
        }
        if event in _TOOL_EVENTS:
            group = {"matcher": tool_matcher, **group}
        hooks[event.value] = [group]
    return hooks


def generate_hook_config(
    *,
    mode: str = "cli",
    python_path: str = "",
    timeout: int = DEFAULT_TIMEOUT_SECONDS,
) -> dict[str, Any]:
    """Generate the full setup response.

    Returns:
        Dict with ``hooks`` (the settings block) and ``instructions``.

    Raises:
        ValueError: If *mode* is unknown or *timeout* is not positive.
    """
    if timeout <= 0:
        raise ValueError(f"timeout must be positive, got {timeout}")
    return {
        "hooks": build_hooks(mode=mode, python_path=python_path, timeout=timeout),
        "instructions": (
            "Add the 'hooks' mapping to .claude/settings.json under the 'hooks' key, "
            "or save it as hooks/hooks.json inside a plugin. "
            "Set HOOKS_LAB_ENFORCE_BLOCKING=true to let PreToolUse block "
            "dangerous commands instead of only logging them."
        ),
    }
