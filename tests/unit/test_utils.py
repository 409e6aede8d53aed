"""Unit tests for hooks_lab.core.utils and hooks_lab.core.errors."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from hooks_lab.core.errors import (
    HooksLabError,
    PayloadDecodeError,
    StorageError,
    sanitize_path_for_error,
)
from hooks_lab.core.utils import clock_millis, iso_seconds, local_now, unix_seconds


@pytest.mark.unit
class TestTime:
    def test_local_now_is_aware(self) -> None:
        assert local_now().tzinfo is not None

    def test_iso_seconds(self) -> None:
        now = datetime(2024, 1, 15, 10, 30, 0, 999999, tzinfo=timezone(timedelta(hours=1)))
        assert iso_seconds(now) == "2024-01-15T10:30:00+01:00"

    def test_clock_millis(self) -> None:
        assert clock_millis(datetime(2024, 1, 15, 9, 5, 7, 42000)) == "09:05:07.042"

    def test_unix_seconds_is_int(self) -> None:
        assert isinstance(unix_seconds(), int)


@pytest.mark.unit
class TestErrors:
    def test_sanitize(self) -> None:
        assert sanitize_path_for_error("/home/user/secret/file.log") == "file.log"
        assert sanitize_path_for_error(Path("/a/b.json")) == "b.json"

    def test_hierarchy(self) -> None:
        assert issubclass(PayloadDecodeError, HooksLabError)
        assert issubclass(StorageError, HooksLabError)

    def test_storage_error_message(self) -> None:
        err = StorageError("/home/user/.claude/hooks-lab/prompts.jsonl", "Permission denied")
        assert str(err) == "Failed to write prompts.jsonl: Permission denied"
        assert err.path == Path("/home/user/.claude/hooks-lab/prompts.jsonl")
