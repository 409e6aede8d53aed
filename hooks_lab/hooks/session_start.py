"""SessionStart hook: capture the environment when a session begins.

Steps:
    1. Log the environment (cwd, user, shell, git)
    2. Write the session context bundle (``session-context.json``)
    3. Detect the project from its manifest files
    4. Write the session record (``sessions/session-<unix-seconds>.json``)

Exit codes:
    0 — Always.
"""

from __future__ import annotations

from hooks_lab.core.logging import ColorTag
from hooks_lab.core.storage import write_json
from hooks_lab.core.utils import iso_seconds, unix_seconds
from hooks_lab.hooks.context_builder import (
    build_session_context,
    detect_project,
    log_environment_context,
    log_project,
)
from hooks_lab.hooks.hook_helpers import HookContext, resolve_working_dir
from hooks_lab.hooks.models import EXIT_CONTINUE, HookResult, SessionRecord, SessionStartInput

HOOK_NAME = "SessionStart"

_LEARNING = [
    "This hook runs when Claude Code starts a new session",
    "Use it to: initialize state, capture context, set up environment",
]


def make_session_id(seconds: int | None = None) -> str:
    """Session ids are ``session-<unix-seconds>``.

    Two sessions started within the same second share an id.
    """
    return f"session-{unix_seconds() if seconds is None else seconds}"


def handle(hook_input: SessionStartInput, ctx: HookContext) -> HookResult:
    """Run the SessionStart steps and report the files written."""
    log = ctx.logger
    cwd = resolve_working_dir(hook_input.cwd)

    log.hook_event(HOOK_NAME, "Session Initialization", "A new Claude Code session is beginning")
    log.learning(HOOK_NAME, _LEARNING)

    log.step(1, "Capturing environment context")
    git = log_environment_context(log, cwd)
    log.separator()

    log.step(2, "Building session context bundle")
    context_file = build_session_context(log, ctx.paths, cwd, git=git)
    log.separator()

    log.step(3, "Checking for project configuration")
    project = detect_project(cwd)
    log_project(log, project)
    log.separator()

    log.step(4, "Creating session metadata")
    session_id = make_session_id()
    record = SessionRecord(
        session_id=session_id,
        started_at=iso_seconds(),
        working_directory=cwd,
        context_bundle=str(context_file),
    )
    session_file = write_json(ctx.paths.session_file(session_id), record.to_dict())
    log.success(f"Session metadata created: {session_file}")
    log.separator()

    log.hook_event(HOOK_NAME, "Complete", "Session initialization successful")
    log.summary(f"Session ID: {session_id}")
    log.summary(f"Context Bundle: {context_file}")
    log.summary(f"Metadata: {session_file}")
    log.summary(f"View logs at: {log.log_file}", ColorTag.CYAN)
    if ctx.settings.show_banner:
        log.banner(
            "SessionStart hook executed successfully",
            "Session initialized with context bundling and verbose logging",
        )

    return HookResult(
        exit_code=EXIT_CONTINUE,
        details={
            "session_id": session_id,
            "session_file": str(session_file),
            "context_file": str(context_file),
            "project_kind": project.kind,
            "project_name": project.name,
            "git_in_repo": git.in_repo,
        },
    )
