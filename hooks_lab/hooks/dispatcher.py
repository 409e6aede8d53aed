"""Unified dispatcher for all hook events.

Routes a hook invocation to its handler based on the event name.  Accepts
PascalCase (``PreToolUse``), camelCase (``preToolUse``) and kebab-case
(``pre-tool-use``) names.

CLI usage::

    echo '{"tool":"Bash","parameters":{"command":"ls"}}' | hooks-lab hook pre-tool-use
    echo '{"prompt":"explain this"}' | python -m hooks_lab hook user-prompt-submit

Every path ends in a deliberate exit code: malformed input degrades to
placeholder values and unexpected errors are logged to ``hook-errors.log``
(fail-open, exit 0).  Only a BLOCKED PreToolUse decision with enforcement
enabled exits 1.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import IO, Any

from hooks_lab.config import Settings, get_settings
from hooks_lab.core.errors import PayloadDecodeError
from hooks_lab.hooks import post_tool_use, pre_tool_use, session_start, user_prompt_submit
from hooks_lab.hooks.context_builder import log_payload_summary
from hooks_lab.hooks.hook_helpers import HookContext, build_context, log_hook_error, read_payload
from hooks_lab.hooks.models import (
    EXIT_CONTINUE,
    HookEventKind,
    HookResult,
    PostToolUseInput,
    PreToolUseInput,
    SessionStartInput,
    UserPromptSubmitInput,
    normalize_event,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Handler registry
# ---------------------------------------------------------------------------

_HandlerFn = Callable[[dict[str, Any], HookContext], HookResult]


def _run_session_start(data: dict[str, Any], ctx: HookContext) -> HookResult:
    return session_start.handle(SessionStartInput.from_payload(data), ctx)


def _run_user_prompt_submit(data: dict[str, Any], ctx: HookContext) -> HookResult:
    return user_prompt_submit.handle(UserPromptSubmitInput.from_payload(data), ctx)


def _run_pre_tool_use(data: dict[str, Any], ctx: HookContext) -> HookResult:
    return pre_tool_use.handle(PreToolUseInput.from_payload(data), ctx)


def _run_post_tool_use(data: dict[str, Any], ctx: HookContext) -> HookResult:
    return post_tool_use.handle(PostToolUseInput.from_payload(data), ctx)


_HANDLER_MAP: dict[HookEventKind, _HandlerFn] = {
    HookEventKind.SESSION_START: _run_session_start,
    HookEventKind.USER_PROMPT_SUBMIT: _run_user_prompt_submit,
    HookEventKind.PRE_TOOL_USE: _run_pre_tool_use,
    HookEventKind.POST_TOOL_USE: _run_post_tool_use,
}


# ---------------------------------------------------------------------------
# Primary dispatch function (testable surface)
# ---------------------------------------------------------------------------


def dispatch(event: HookEventKind, data: dict[str, Any], ctx: HookContext) -> HookResult:
    """Dispatch a hook event to the appropriate handler.

    Args:
        event: Canonical event kind.
        data: Parsed stdin JSON.
        ctx: Invocation context.

    Returns:
        The handler's result; events without a handler continue (exit 0).
    """
    handler = _HANDLER_MAP.get(event)
    if handler is None:
        ctx.logger.hook_event(event.value, "Ignored", "No handler registered for this event")
        return HookResult(exit_code=EXIT_CONTINUE)
    return handler(data, ctx)


def _decode_payload(stdin: IO[str], ctx: HookContext) -> dict[str, Any]:
    try:
        return read_payload(stdin, ctx.settings.max_stdin_bytes)
    except PayloadDecodeError as e:
        ctx.logger.warning(f"{e} - continuing with placeholder values")
        return {}


def run_hook(
    event_name: str,
    stdin: IO[str] | None = None,
    settings: Settings | None = None,
    ctx: HookContext | None = None,
) -> int:
    """Run one hook invocation end to end.

    Args:
        event_name: Event name in any supported casing.
        stdin: Payload stream (defaults to ``sys.stdin``).
        settings: Settings (defaults to ``get_settings()``).
        ctx: Pre-built context (tests).

    Returns:
        Process exit code.
    """
    stdin = stdin if stdin is not None else sys.stdin
    try:
        ctx = ctx or build_context(settings or get_settings())
    except Exception as e:
        # Without settings or a logger there is nowhere to record anything else.
        logger.error("Hook setup failed for %s: %s", event_name, e)
        return EXIT_CONTINUE

    event = normalize_event(event_name)
    if event is None:
        ctx.logger.warning(f"Unknown hook event '{event_name}' - nothing to do")
        return EXIT_CONTINUE

    try:
        data = _decode_payload(stdin, ctx)
        if data and ctx.settings.log_level.upper() == "DEBUG":
            log_payload_summary(ctx.logger, data, f"{event.value} payload")
        result = dispatch(event, data, ctx)
    except Exception as exc:
        # Fail-open: record the error, never block the host on our own bugs.
        log_hook_error(exc, f"dispatcher:{event.value}", ctx.paths.hook_errors_log)
        try:
            ctx.logger.error(f"{event.value} hook failed: {type(exc).__name__}: {exc}")
        except Exception:
            pass
        return EXIT_CONTINUE

    return result.exit_code
