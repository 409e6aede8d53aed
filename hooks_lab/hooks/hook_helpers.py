"""Shared utilities for the hook handlers.

Provides the per-invocation ``HookContext``, stdin decoding, working
directory resolution, ambient environment reads and the fail-open error log
used by the dispatcher.
"""

from __future__ import annotations

import getpass
import json
import os
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any

from hooks_lab.config import Settings
from hooks_lab.core.errors import PayloadDecodeError
from hooks_lab.core.logging import HookLogger, configure_logging
from hooks_lab.core.storage import StoragePaths
from hooks_lab.hooks.models import UNKNOWN

# ---------------------------------------------------------------------------
# Input sanitization
# ---------------------------------------------------------------------------

_WINDOWS_DEVICE_RE = re.compile(r"^(CON|NUL|PRN|AUX|COM[1-9]|LPT[1-9])(\..+)?$", re.IGNORECASE)
"""Windows reserved device names that must not be used as path components."""

_MAX_CWD_LENGTH = 4096
"""Maximum allowed length for a CWD path."""

_MAX_LOG_SIZE = 1_048_576
"""Maximum error log size in bytes before rotation (1MB)."""


def validate_cwd(cwd: str) -> str:
    """Validate a working directory path from the payload.

    Rejects empty, overly long, traversal-containing, relative, and
    Windows device name paths.  All string ops, no I/O.

    Args:
        cwd: Raw working directory path.

    Returns:
        The validated path, or ``""`` if invalid.
    """
    if not cwd:
        return ""

    if len(cwd) > _MAX_CWD_LENGTH:
        return ""

    if ".." in cwd:
        return ""

    if not os.path.isabs(cwd):
        return ""

    basename = os.path.basename(cwd)
    if basename and _WINDOWS_DEVICE_RE.match(basename):
        return ""

    return cwd


def resolve_working_dir(payload_cwd: str = "") -> str:
    """Resolve the directory a hook inspects.

    Resolution order:
    1. ``cwd`` from the payload (if it passes ``validate_cwd``)
    2. ``$CLAUDE_PROJECT_DIR``
    3. The process working directory
    """
    validated = validate_cwd(payload_cwd)
    if validated:
        return validated
    project_dir = validate_cwd(os.environ.get("CLAUDE_PROJECT_DIR", ""))
    if project_dir:
        return project_dir
    try:
        return os.getcwd()
    except OSError:
        return UNKNOWN


# ---------------------------------------------------------------------------
# Ambient environment
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EnvironmentInfo:
    """Read-only view of the user/shell/terminal/locale environment."""

    user: str
    shell: str
    term: str
    lang: str


def _current_user() -> str:
    user = os.environ.get("USER") or os.environ.get("USERNAME")
    if user:
        return user
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return UNKNOWN


def read_environment() -> EnvironmentInfo:
    """Snapshot the environment variables the context bundle records."""
    return EnvironmentInfo(
        user=_current_user(),
        shell=os.environ.get("SHELL", "") or UNKNOWN,
        term=os.environ.get("TERM", "") or UNKNOWN,
        lang=os.environ.get("LANG", "") or UNKNOWN,
    )


# ---------------------------------------------------------------------------
# Invocation context
# ---------------------------------------------------------------------------


@dataclass
class HookContext:
    """Everything a handler needs for one invocation."""

    settings: Settings
    paths: StoragePaths
    logger: HookLogger


def build_context(settings: Settings, logger: HookLogger | None = None) -> HookContext:
    """Create the storage paths and logger for one invocation."""
    paths = StoragePaths(base_dir=Path(settings.base_dir).expanduser())
    if logger is None:
        logger = configure_logging(
            paths,
            level=settings.log_level,
            color=settings.color,
            show_learning=settings.show_learning,
        )
    return HookContext(settings=settings, paths=paths, logger=logger)


# ---------------------------------------------------------------------------
# stdin
# ---------------------------------------------------------------------------


def read_payload(stream: IO[str], max_bytes: int = 524_288) -> dict[str, Any]:
    """Read and parse the JSON payload from *stream*.

    Args:
        stream: Text stream (normally ``sys.stdin``).
        max_bytes: Upper bound on characters read.

    Returns:
        The parsed object, or an empty dict for empty input or a non-object
        JSON value.

    Raises:
        PayloadDecodeError: If the input is not valid UTF-8 or not valid JSON.
    """
    try:
        raw = stream.read(max_bytes)
    except UnicodeDecodeError as e:
        raise PayloadDecodeError(f"invalid UTF-8: {e.reason}", raw_length=len(e.object)) from e
    if not raw or not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise PayloadDecodeError(str(e), raw_length=len(raw)) from e
    if not isinstance(data, dict):
        return {}
    return data


def truncate(text: str, limit: int) -> str:
    """Cut *text* to *limit* characters, appending ``...`` like the previews."""
    return f"{text[:limit]}..."


# ---------------------------------------------------------------------------
# Error logging
# ---------------------------------------------------------------------------


def log_hook_error(exc: BaseException, hook_name: str, log_path: Path) -> None:
    """Append an error entry to ``hook-errors.log``.

    Rotates the log file when it exceeds ``_MAX_LOG_SIZE`` (1MB).
    This function **must never raise**.

    Args:
        exc: The exception to log.
        hook_name: Name of the hook that failed.
        log_path: Path of the error log.
    """
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            if log_path.exists() and log_path.stat().st_size > _MAX_LOG_SIZE:
                rotated = log_path.with_name(log_path.name + ".1")
                if rotated.exists():
                    rotated.unlink()
                log_path.rename(rotated)
        except OSError:
            pass

        timestamp = time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())
        line = f"[{timestamp}] {hook_name}: {type(exc).__name__}: {exc}\n"
        with open(log_path, "a", encoding="utf-8") as f:
            f.write(line)
    except Exception:
        pass  # Error log must never raise
