"""UserPromptSubmit hook: analyze a prompt before it reaches the model.

Detects intent tags, lists context that could be injected and appends a
metadata record to ``prompts.jsonl``.  The record holds the prompt length
and tags only; the prompt text itself is never persisted there.

Exit codes:
    0 — Always.  This hook never blocks a prompt.
"""

from __future__ import annotations

from hooks_lab.core.logging import ColorTag
from hooks_lab.core.storage import append_jsonl
from hooks_lab.core.utils import iso_seconds
from hooks_lab.hooks.context_builder import injection_suggestions, log_environment_context
from hooks_lab.hooks.hook_helpers import HookContext, resolve_working_dir, truncate
from hooks_lab.hooks.intent_detection import detect_intents
from hooks_lab.hooks.models import (
    EXIT_CONTINUE,
    HookResult,
    PromptMetadataRecord,
    UserPromptSubmitInput,
)

HOOK_NAME = "UserPromptSubmit"

_LEARNING = [
    "This hook runs when user submits a prompt to Claude",
    "Use it to: analyze intent, inject context, enhance prompts",
]

_ENHANCEMENT_PATTERNS = [
    "Auto-inject relevant documentation",
    "Add context about current file/directory",
    "Include recent git history for debugging",
    "Inject coding standards or conventions",
    "Add warnings about environment state",
]


def build_prompt_record(prompt: str, intents: list[str], cwd: str) -> PromptMetadataRecord:
    """Build the privacy-preserving metadata record for *prompt*."""
    return PromptMetadataRecord(
        timestamp=iso_seconds(),
        length=len(prompt),
        intents=tuple(intents),
        working_dir=cwd,
    )


def handle(hook_input: UserPromptSubmitInput, ctx: HookContext) -> HookResult:
    """Run the UserPromptSubmit steps."""
    log = ctx.logger
    settings = ctx.settings
    cwd = resolve_working_dir(hook_input.cwd)
    prompt = hook_input.prompt

    log.hook_event(HOOK_NAME, "Prompt Interception", "User has submitted a prompt")
    log.learning(HOOK_NAME, _LEARNING)

    log.step(1, "Parsing user prompt")
    log.context("Prompt Length", f"{len(prompt)} characters")
    if settings.log_prompt_preview:
        log.info("Prompt preview:")
        log.info(truncate(prompt, settings.preview_chars))
    log.separator()

    log.step(2, "Analyzing prompt intent")
    intents = detect_intents(prompt)
    for intent in intents:
        log.emit("INTENT", ColorTag.CYAN, f"Detected: {intent}")
    if not intents:
        log.emit("INTENT", ColorTag.GRAY, "No specific intent patterns detected")
    log.separator()

    log.step(3, "Identifying context injection opportunities")
    git = log_environment_context(log, cwd)
    log.info("Context injection opportunities:", ColorTag.CYAN)
    suggestions = injection_suggestions(cwd, git)
    for suggestion in suggestions:
        log.emit("CONTEXT", suggestion.color, suggestion.render())
    log.separator()

    log.step(4, "Prompt enhancement patterns")
    log.info("UserPromptSubmit enables advanced patterns:", ColorTag.CYAN)
    for pattern in _ENHANCEMENT_PATTERNS:
        log.info(f"  • {pattern}")
    log.separator()

    log.step(5, "Recording prompt metadata")
    record = build_prompt_record(prompt, intents, cwd)
    append_jsonl(ctx.paths.prompts_db, record.to_dict())
    log.success("Prompt metadata recorded (prompt content not logged for privacy)")
    log.separator()

    log.hook_event(HOOK_NAME, "Complete", "Prompt analysis and context injection complete")
    log.summary(f"Prompt Length: {len(prompt)} chars")
    log.summary(f"Detected Intents: {len(intents)}")
    log.summary(f"Full logs: {log.log_file}", ColorTag.CYAN)
    if settings.show_banner:
        log.banner(
            "UserPromptSubmit hook executed",
            "Prompt analysis and context injection opportunities identified",
        )

    return HookResult(
        exit_code=EXIT_CONTINUE,
        details={
            "length": len(prompt),
            "intents": intents,
            "suggestions": [s.message for s in suggestions],
        },
    )
