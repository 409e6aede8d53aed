"""Unit tests for hooks_lab.hooks.user_prompt_submit.

Tests cover:
1. Intent logging — detected tags, no-match message
2. Privacy — prompts.jsonl never holds the prompt text
3. Preview — truncated preview in the log, switchable
4. Suggestions — context injection lines
5. Exit code — always 0, prompt never mutated (nothing on stdout)
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from hooks_lab.hooks.hook_helpers import HookContext
from hooks_lab.hooks.models import UserPromptSubmitInput
from hooks_lab.hooks.user_prompt_submit import build_prompt_record, handle

SECRET_PROMPT = "fix the failing test in payments.py with key sk-live-12345"


@pytest.mark.unit
class TestBuildPromptRecord:
    def test_fields(self) -> None:
        record = build_prompt_record("explain", ["explanation"], "/work")
        data = record.to_dict()
        assert data["length"] == 7
        assert data["intents"] == ["explanation"]
        assert data["working_dir"] == "/work"


@pytest.mark.unit
class TestHandle:
    """Test the UserPromptSubmit handler."""

    def test_explain(
        self,
        hook_ctx: HookContext,
        project_dir: Path,
        no_git: None,
        read_log: Callable[[], str],
    ) -> None:
        result = handle(UserPromptSubmitInput(prompt="explain", cwd=str(project_dir)), hook_ctx)
        assert result.exit_code == 0
        assert result.details["intents"] == ["explanation"]
        assert "[INTENT] Detected: explanation" in read_log()

    def test_multiple_intents(
        self,
        hook_ctx: HookContext,
        project_dir: Path,
        no_git: None,
        read_log: Callable[[], str],
    ) -> None:
        result = handle(
            UserPromptSubmitInput(prompt="fix the failing test", cwd=str(project_dir)), hook_ctx
        )
        assert result.details["intents"] == ["debugging", "testing"]
        log = read_log()
        assert "[INTENT] Detected: debugging" in log
        assert "[INTENT] Detected: testing" in log

    def test_no_intent(
        self,
        hook_ctx: HookContext,
        project_dir: Path,
        no_git: None,
        read_log: Callable[[], str],
    ) -> None:
        handle(UserPromptSubmitInput(prompt="hello there", cwd=str(project_dir)), hook_ctx)
        assert "[INTENT] No specific intent patterns detected" in read_log()

    def test_metadata_has_no_prompt_text(
        self,
        hook_ctx: HookContext,
        project_dir: Path,
        no_git: None,
        read_jsonl: Callable[[Path], list[dict[str, Any]]],
    ) -> None:
        handle(UserPromptSubmitInput(prompt=SECRET_PROMPT, cwd=str(project_dir)), hook_ctx)
        raw = hook_ctx.paths.prompts_db.read_text(encoding="utf-8")
        assert "sk-live-12345" not in raw
        assert "payments.py" not in raw
        records = read_jsonl(hook_ctx.paths.prompts_db)
        assert records == [
            {
                "timestamp": records[0]["timestamp"],
                "length": len(SECRET_PROMPT),
                "intents": ["debugging", "testing"],
                "working_dir": str(project_dir),
            }
        ]

    def test_one_record_per_prompt(
        self,
        hook_ctx: HookContext,
        project_dir: Path,
        no_git: None,
        read_jsonl: Callable[[Path], list[dict[str, Any]]],
    ) -> None:
        for prompt in ("explain", "refactor this", ""):
            handle(UserPromptSubmitInput(prompt=prompt, cwd=str(project_dir)), hook_ctx)
        records = read_jsonl(hook_ctx.paths.prompts_db)
        assert [r["length"] for r in records] == [7, 13, 0]
        assert records[2]["intents"] == []

    def test_preview_truncated(
        self,
        hook_ctx: HookContext,
        project_dir: Path,
        no_git: None,
        read_log: Callable[[], str],
    ) -> None:
        prompt = "a" * 200
        handle(UserPromptSubmitInput(prompt=prompt, cwd=str(project_dir)), hook_ctx)
        log = read_log()
        assert "[CONTEXT] Prompt Length: 200 characters" in log
        assert "a" * 150 + "..." in log
        assert "a" * 151 not in log

    def test_preview_disabled(
        self,
        hook_ctx: HookContext,
        project_dir: Path,
        no_git: None,
        read_log: Callable[[], str],
    ) -> None:
        hook_ctx.settings = hook_ctx.settings.model_copy(update={"log_prompt_preview": False})
        handle(UserPromptSubmitInput(prompt=SECRET_PROMPT, cwd=str(project_dir)), hook_ctx)
        log = read_log()
        assert "sk-live-12345" not in log
        assert "Prompt preview" not in log

    def test_suggestions(
        self,
        hook_ctx: HookContext,
        project_dir: Path,
        fake_git: object,
        read_log: Callable[[], str],
    ) -> None:
        (project_dir / "README.md").write_text("# demo", encoding="utf-8")
        result = handle(UserPromptSubmitInput(prompt="explain", cwd=str(project_dir)), hook_ctx)
        assert result.details["suggestions"] == [
            "Could inject git branch context: main",
            "Could warn about uncommitted changes",
            "Could inject README.md project overview",
        ]
        log = read_log()
        assert "[CONTEXT] ✓ Could inject git branch context: main" in log
        assert "[CONTEXT] ⚠ Could warn about uncommitted changes" in log

    def test_nothing_on_stdout(
        self,
        hook_ctx: HookContext,
        project_dir: Path,
        no_git: None,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        handle(UserPromptSubmitInput(prompt="explain", cwd=str(project_dir)), hook_ctx)
        assert capsys.readouterr().out == ""

    def test_record_is_compact_json(
        self, hook_ctx: HookContext, project_dir: Path, no_git: None
    ) -> None:
        handle(UserPromptSubmitInput(prompt="explain", cwd=str(project_dir)), hook_ctx)
        line = hook_ctx.paths.prompts_db.read_text(encoding="utf-8").splitlines()[0]
        assert json.loads(line)["length"] == 7
        assert ", " not in line
