"""File-backed stores for hook records.

Every store is a plain file under the configured base directory.  Appends
open the file, write one line and close it again; no handle is held across
calls.  The session context bundle and session records are replaced as a
whole (temp file + ``os.replace``) so readers never observe a partial write.

No cross-process locking is done: concurrent hook processes may interleave
appended lines, relying on the filesystem's append semantics.
"""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any

from hooks_lab.core.errors import StorageError

LOGS_DIR_NAME = "logs"
SESSIONS_DIR_NAME = "sessions"
CONTEXT_FILE_NAME = "session-context.json"
TOOL_USAGE_LOG_NAME = "tool-usage.log"
TOOL_USAGE_DETAILED_NAME = "tool-usage-detailed.jsonl"
PROMPTS_DB_NAME = "prompts.jsonl"
HOOK_ERRORS_LOG_NAME = "hook-errors.log"


@dataclass(frozen=True)
class StoragePaths:
    """Resolved locations of every file the hooks read or write."""

    base_dir: Path

    @property
    def logs_dir(self) -> Path:
        return self.base_dir / LOGS_DIR_NAME

    @property
    def sessions_dir(self) -> Path:
        return self.base_dir / SESSIONS_DIR_NAME

    @property
    def context_file(self) -> Path:
        return self.base_dir / CONTEXT_FILE_NAME

    @property
    def tool_usage_log(self) -> Path:
        return self.base_dir / TOOL_USAGE_LOG_NAME

    @property
    def tool_usage_detailed(self) -> Path:
        return self.base_dir / TOOL_USAGE_DETAILED_NAME

    @property
    def prompts_db(self) -> Path:
        return self.base_dir / PROMPTS_DB_NAME

    @property
    def hook_errors_log(self) -> Path:
        return self.base_dir / HOOK_ERRORS_LOG_NAME

    def daily_log_file(self, day: date) -> Path:
        """Log file for a calendar day: ``logs/YYYY-MM-DD.log``."""
        return self.logs_dir / f"{day.strftime('%Y-%m-%d')}.log"

    def session_file(self, session_id: str) -> Path:
        return self.sessions_dir / f"{session_id}.json"

    def as_dict(self) -> dict[str, str]:
        return {
            "base_dir": str(self.base_dir),
            "logs_dir": str(self.logs_dir),
            "sessions_dir": str(self.sessions_dir),
            "context_file": str(self.context_file),
            "tool_usage_log": str(self.tool_usage_log),
            "tool_usage_detailed": str(self.tool_usage_detailed),
            "prompts_db": str(self.prompts_db),
            "hook_errors_log": str(self.hook_errors_log),
        }


def append_line(path: Path, line: str) -> None:
    """Append a single line to *path*, creating parent directories.

    Raises:
        StorageError: If the directory cannot be created or the write fails.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding="utf-8") as fh:
            fh.write(line.rstrip("\n") + "\n")
    except OSError as e:
        raise StorageError(path, str(e)) from e


def append_jsonl(path: Path, record: dict[str, Any]) -> None:
    """Append *record* as one compact JSON line."""
    append_line(path, json.dumps(record, ensure_ascii=False, separators=(",", ":")))


def write_json(path: Path, data: dict[str, Any]) -> Path:
    """Replace *path* with the pretty-printed JSON of *data*.

    Writes to a temp file in the same directory, then ``os.replace()`` for an
    all-or-nothing update.

    Returns:
        The written path.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, ensure_ascii=False)
                fh.write("\n")
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise
    except OSError as e:
        raise StorageError(path, str(e)) from e
    return path


def count_lines_containing(path: Path, needle: str) -> int:
    """Count lines in *path* that contain *needle* as a substring.

    Returns 0 if the file does not exist or cannot be read.
    """
    try:
        with open(path, encoding="utf-8", errors="replace") as fh:
            return sum(1 for line in fh if needle in line)
    except OSError:
        return 0
