"""PreToolUse hook: inspect and validate a tool call before it runs.

Logs the tool and its parameters, counts the call in ``tool-usage.log``
and applies the validation rules from ``safety``.  A BLOCKED decision is
always logged; it only stops the tool when ``enforce_blocking`` is enabled.

Exit codes:
    0 — Allow the tool call.
    1 — Block the tool call (BLOCKED decision with enforcement enabled).
"""

from __future__ import annotations

from hooks_lab.core.errors import StorageError
from hooks_lab.core.logging import ColorTag
from hooks_lab.core.utils import iso_seconds
from hooks_lab.hooks.context_builder import analyze_tool_usage
from hooks_lab.hooks.hook_helpers import (
    HookContext,
    read_environment,
    resolve_working_dir,
    truncate,
)
from hooks_lab.hooks.models import (
    EXIT_BLOCK,
    EXIT_CONTINUE,
    Decision,
    HookResult,
    PreToolUseInput,
)
from hooks_lab.hooks.safety import SafetyVerdict, evaluate_tool_use

HOOK_NAME = "PreToolUse"

COMMAND_PREVIEW_CHARS = 100

_LEARNING = [
    "This hook runs BEFORE any tool executes",
    "Use it to: validate inputs, log intentions, block dangerous operations",
]

_INJECTION_PATTERNS = [
    "Adding safety checks automatically",
    "Injecting environment-specific configuration",
    "Modifying tool behavior based on context",
]


def _log_validation(ctx: HookContext, tool: str, verdict: SafetyVerdict) -> None:
    log = ctx.logger

    if verdict.category == "shell":
        log.emit("VALIDATION", ColorTag.YELLOW, f"{tool} tool detected - checking command")
        if verdict.decision is Decision.BLOCKED:
            log.error("Potentially dangerous command detected!")
            log.decision(verdict.decision.value, verdict.reason)
            log.context("Matched Pattern", verdict.matched_pattern)
            if verdict.blocks:
                log.emit("NOTE", ColorTag.RED, "Enforcement enabled - blocking execution")
            else:
                log.emit("NOTE", ColorTag.CYAN, "In production, this could block execution")
        else:
            log.decision(verdict.decision.value, verdict.reason)
        log.context("Command Preview", truncate(verdict.subject, COMMAND_PREVIEW_CHARS))

    elif verdict.category == "file_write":
        log.emit("VALIDATION", ColorTag.YELLOW, "File modification tool detected")
        log.context("Target File", verdict.subject)
        if verdict.decision is Decision.ALLOWED:
            log.decision(verdict.decision.value, verdict.reason)
        else:
            log.error("Attempting to modify system file!")
            log.decision(verdict.decision.value, verdict.reason)
            if verdict.blocks:
                log.emit("NOTE", ColorTag.RED, "Enforcement enabled - blocking execution")

    elif verdict.category == "read_only":
        log.emit("VALIDATION", ColorTag.GREEN, "Read-only tool - safe operation")
        log.decision(verdict.decision.value, verdict.reason)

    else:
        log.emit("VALIDATION", ColorTag.BLUE, "Unknown or unvalidated tool")
        log.decision(verdict.decision.value, verdict.reason)


def handle(hook_input: PreToolUseInput, ctx: HookContext) -> HookResult:
    """Run the PreToolUse steps and decide whether the tool may run."""
    log = ctx.logger
    cwd = resolve_working_dir(hook_input.cwd)
    tool = hook_input.tool

    log.hook_event(HOOK_NAME, "Tool Interception", "A tool is about to be used")
    log.learning(HOOK_NAME, _LEARNING)

    log.step(1, "Parsing tool use context")
    log.context("Tool Name", tool)
    log.info("Tool Parameters:")
    log.pretty_json(hook_input.parameters)
    try:
        analyze_tool_usage(log, ctx.paths, tool, cwd)
    except StorageError as e:
        log.error(f"Could not record tool usage: {e}")
    log.separator()

    log.step(2, "Applying validation rules")
    verdict = evaluate_tool_use(tool, hook_input.parameters, ctx.settings)
    _log_validation(ctx, tool, verdict)
    log.separator()

    log.step(3, "Logging transparency information")
    log.context("Timestamp", iso_seconds())
    log.context("Working Directory", cwd)
    log.context("User", read_environment().user)
    log.separator()

    log.step(4, "Context injection (advanced pattern)")
    log.info("PreToolUse can inject additional context or modify parameters", ColorTag.CYAN)
    log.info("This enables patterns like:", ColorTag.CYAN)
    for pattern in _INJECTION_PATTERNS:
        log.info(f"  • {pattern}")
    log.separator()

    exit_code = EXIT_BLOCK if verdict.blocks else EXIT_CONTINUE
    if verdict.blocks:
        outcome = f"{verdict.decision.value} (enforced)"
    elif ctx.settings.enforce_blocking:
        outcome = verdict.decision.value
    else:
        outcome = f"{verdict.decision.value} (learning mode, not enforced)"

    log.hook_event(HOOK_NAME, "Complete", "Tool validation and logging complete")
    log.summary(f"Tool: {tool}")
    log.summary(f"Decision: {outcome}", ColorTag.RED if verdict.blocks else ColorTag.GREEN)
    log.summary(f"Full logs: {log.log_file}", ColorTag.CYAN)
    if ctx.settings.show_banner:
        log.banner(
            "PreToolUse hook executed",
            "Tool validation and transparency logging complete",
        )

    return HookResult(
        exit_code=exit_code,
        decision=verdict.decision,
        details={
            "tool": tool,
            "reason": verdict.reason,
            "matched_pattern": verdict.matched_pattern,
            "enforced": verdict.blocks,
        },
    )
