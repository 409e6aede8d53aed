"""Unit tests for hooks_lab.hooks.pre_tool_use.

Tests cover:
1. Dangerous Bash — BLOCKED logged, exit 0 in log-only mode
2. Enforcement — BLOCKED exits 1 when enforce_blocking is set
3. Safe Bash, file writes, read-only and unknown tools
4. Tool usage log — appended on every call, failures logged not raised
5. Command preview truncation
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import pytest

from hooks_lab.core.errors import StorageError
from hooks_lab.hooks.hook_helpers import HookContext
from hooks_lab.hooks.models import EXIT_BLOCK, Decision, PreToolUseInput
from hooks_lab.hooks.pre_tool_use import handle


def _bash(command: str, cwd: Path) -> PreToolUseInput:
    return PreToolUseInput(tool="Bash", parameters={"command": command}, cwd=str(cwd))


# =============================================================================
# Bash
# =============================================================================


@pytest.mark.unit
class TestBash:
    """Test Bash validation end to end through the handler."""

    def test_dangerous_logged_not_blocked(
        self, hook_ctx: HookContext, project_dir: Path, read_log: Callable[[], str]
    ) -> None:
        result = handle(_bash("rm -rf /", project_dir), hook_ctx)
        assert result.exit_code == 0
        assert result.decision is Decision.BLOCKED
        assert result.details["enforced"] is False
        log = read_log()
        assert "[DECISION] BLOCKED" in log
        assert "[REASON]   → Command contains dangerous patterns" in log
        assert "[CONTEXT] Matched Pattern: rm -rf /" in log
        assert "[NOTE] In production, this could block execution" in log
        assert "Decision: BLOCKED (learning mode, not enforced)" in log

    def test_dangerous_blocked_when_enforced(
        self, hook_ctx: HookContext, project_dir: Path, read_log: Callable[[], str]
    ) -> None:
        hook_ctx.settings = hook_ctx.settings.model_copy(update={"enforce_blocking": True})
        result = handle(_bash("rm -rf /", project_dir), hook_ctx)
        assert result.exit_code == EXIT_BLOCK
        assert result.blocked is True
        assert result.details["enforced"] is True
        log = read_log()
        assert "[NOTE] Enforcement enabled - blocking execution" in log
        assert "Decision: BLOCKED (enforced)" in log

    def test_safe_command(
        self, hook_ctx: HookContext, project_dir: Path, read_log: Callable[[], str]
    ) -> None:
        result = handle(_bash("ls -la", project_dir), hook_ctx)
        assert result.exit_code == 0
        assert result.decision is Decision.ALLOWED
        log = read_log()
        assert "[DECISION] ALLOWED" in log
        assert "Command appears safe" in log
        assert "[CONTEXT] Command Preview: ls -la..." in log

    def test_safe_command_with_enforcement(
        self, hook_ctx: HookContext, project_dir: Path, read_log: Callable[[], str]
    ) -> None:
        hook_ctx.settings = hook_ctx.settings.model_copy(update={"enforce_blocking": True})
        assert handle(_bash("ls", project_dir), hook_ctx).exit_code == 0
        assert "[SUMMARY] Decision: ALLOWED" in read_log()

    def test_command_preview_truncated(
        self, hook_ctx: HookContext, project_dir: Path, read_log: Callable[[], str]
    ) -> None:
        handle(_bash("echo " + "x" * 300, project_dir), hook_ctx)
        log = read_log()
        assert "Command Preview: echo " + "x" * 95 + "..." in log
        assert "x" * 96 not in log.split("Command Preview: ")[1]


# =============================================================================
# Other tools
# =============================================================================


@pytest.mark.unit
class TestOtherTools:
    def test_protected_write_warns(
        self, hook_ctx: HookContext, project_dir: Path, read_log: Callable[[], str]
    ) -> None:
        hook_input = PreToolUseInput(
            tool="Write", parameters={"file_path": "/etc/hosts"}, cwd=str(project_dir)
        )
        result = handle(hook_input, hook_ctx)
        assert result.exit_code == 0
        assert result.decision is Decision.WARNING
        log = read_log()
        assert "[CONTEXT] Target File: /etc/hosts" in log
        assert "[DECISION] WARNING" in log
        assert "Modifying system files can be dangerous" in log

    def test_read_only(
        self, hook_ctx: HookContext, project_dir: Path, read_log: Callable[[], str]
    ) -> None:
        result = handle(PreToolUseInput(tool="Grep", cwd=str(project_dir)), hook_ctx)
        assert result.decision is Decision.ALLOWED
        assert "Read-only tool - safe operation" in read_log()

    def test_missing_tool(
        self, hook_ctx: HookContext, project_dir: Path, read_log: Callable[[], str]
    ) -> None:
        result = handle(PreToolUseInput(cwd=str(project_dir)), hook_ctx)
        assert result.exit_code == 0
        assert result.details["tool"] == "unknown"
        log = read_log()
        assert "[CONTEXT] Tool Name: unknown" in log
        assert "No specific validation rules for this tool" in log


# =============================================================================
# Tool usage log
# =============================================================================


@pytest.mark.unit
class TestToolUsage:
    def test_usage_appended(self, hook_ctx: HookContext, project_dir: Path) -> None:
        handle(_bash("ls", project_dir), hook_ctx)
        handle(_bash("pwd", project_dir), hook_ctx)
        lines = hook_ctx.paths.tool_usage_log.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        assert all(f",Bash,{project_dir}" in line for line in lines)

    def test_usage_count_logged(
        self, hook_ctx: HookContext, project_dir: Path, read_log: Callable[[], str]
    ) -> None:
        handle(_bash("ls", project_dir), hook_ctx)
        handle(_bash("ls", project_dir), hook_ctx)
        assert "Bash has been used 2 times total" in read_log()

    def test_usage_failure_does_not_stop_validation(
        self, hook_ctx: HookContext, project_dir: Path, read_log: Callable[[], str]
    ) -> None:
        error = StorageError(hook_ctx.paths.tool_usage_log, "disk full")
        with patch("hooks_lab.hooks.pre_tool_use.analyze_tool_usage", side_effect=error):
            result = handle(_bash("rm -rf /", project_dir), hook_ctx)
        assert result.decision is Decision.BLOCKED
        assert "Could not record tool usage" in read_log()

    def test_parameters_on_console(
        self,
        hook_ctx: HookContext,
        project_dir: Path,
        console_text: Callable[[], str],
    ) -> None:
        handle(_bash("ls -la", project_dir), hook_ctx)
        assert '"command": "ls -la"' in console_text()
