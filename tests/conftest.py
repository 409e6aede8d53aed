"""Pytest fixtures for Hooks Lab tests."""

from __future__ import annotations

import io
import json
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from rich.console import Console

from hooks_lab.adapters.git_utils import NOT_A_REPO, GitStatus
from hooks_lab.config import Settings, override_settings, reset_settings
from hooks_lab.core.logging import configure_logging
from hooks_lab.core.storage import StoragePaths
from hooks_lab.hooks.hook_helpers import HookContext, build_context

# ---------------------------------------------------------------------------
# Basic fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def base_dir(tmp_path: Path) -> Path:
    """Storage directory for one test."""
    return tmp_path / "hooks-lab"


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """An empty working directory for the hook to inspect."""
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def test_settings(base_dir: Path) -> Generator[Settings, None, None]:
    """Provide test settings with temp storage."""
    settings = Settings(
        base_dir=base_dir,
        color=False,
        log_level="DEBUG",
    )
    override_settings(settings)
    yield settings
    reset_settings()


@pytest.fixture
def console() -> Console:
    """Console writing into memory instead of stderr."""
    return Console(file=io.StringIO(), no_color=True, width=300, soft_wrap=True)


@pytest.fixture
def storage_paths(base_dir: Path) -> StoragePaths:
    return StoragePaths(base_dir=base_dir)


@pytest.fixture
def hook_ctx(test_settings: Settings, console: Console) -> HookContext:
    """Invocation context logging to the in-memory console."""
    paths = StoragePaths(base_dir=test_settings.base_dir)
    hook_logger = configure_logging(paths, level="DEBUG", console=console)
    return build_context(test_settings, logger=hook_logger)


@pytest.fixture
def no_git() -> Generator[None, None, None]:
    """Make every git query report 'not a repository'."""
    with patch("hooks_lab.hooks.context_builder.read_git_status", return_value=NOT_A_REPO):
        yield


@pytest.fixture
def fake_git() -> Generator[GitStatus, None, None]:
    """Make every git query report a dirty ``main`` branch."""
    status = GitStatus(in_repo=True, branch="main", dirty_count=3)
    with patch("hooks_lab.hooks.context_builder.read_git_status", return_value=status):
        yield status


# ---------------------------------------------------------------------------
# Helpers (exposed as fixtures so test modules need no package import)
# ---------------------------------------------------------------------------


@pytest.fixture
def read_log(storage_paths: StoragePaths) -> Callable[[], str]:
    """Return a reader that concatenates every daily log file."""

    def _read() -> str:
        if not storage_paths.logs_dir.exists():
            return ""
        return "".join(
            p.read_text(encoding="utf-8") for p in sorted(storage_paths.logs_dir.glob("*.log"))
        )

    return _read


@pytest.fixture
def read_jsonl() -> Callable[[Path], list[dict[str, Any]]]:
    """Return a parser for JSONL files."""

    def _read(path: Path) -> list[dict[str, Any]]:
        return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line]

    return _read


@pytest.fixture
def console_text(console: Console) -> Callable[[], str]:
    """Return a reader for everything printed to the in-memory console."""

    def _read() -> str:
        return console.file.getvalue()  # type: ignore[attr-defined]

    return _read
