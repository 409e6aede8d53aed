"""Verbose hook logging for Hooks Lab.

Every log call produces one line of the form::

    [HH:MM:SS.mmm] [TAG] message

The line is written twice: colorized to stderr (through a ``rich`` console)
and plain to ``logs/YYYY-MM-DD.log`` under the base directory.

Features:
    - Free-form tags (HOOK, CONTEXT, DECISION, ...) carried on the record
    - Daily log file path recomputed from the record time on every call,
      so a process running across midnight continues in the next day's file
    - File handler opens and closes the file per record
    - File failures degrade to console-only output and never propagate
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from enum import Enum
from pathlib import Path

from rich.console import Console
from rich.json import JSON
from rich.text import Text

from hooks_lab.core.errors import StorageError
from hooks_lab.core.storage import StoragePaths, append_line
from hooks_lab.core.utils import clock_millis

EVENT_LOGGER_NAME = "hooks_lab.events"

SEPARATOR_WIDTH = 40
BANNER_WIDTH = 52


class ColorTag(str, Enum):
    """Display colors for log tags (``rich`` style names)."""

    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    MAGENTA = "magenta"
    CYAN = "cyan"
    GRAY = "bright_black"


# Tags that map onto a non-INFO logging level; everything else is INFO.
_TAG_LEVELS: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def level_for_tag(tag: str) -> int:
    """Return the logging level used to filter records with *tag*."""
    return _TAG_LEVELS.get(tag, logging.INFO)


def _record_tag(record: logging.LogRecord) -> str:
    return str(getattr(record, "hook_tag", record.levelname))


def _record_color(record: logging.LogRecord) -> str:
    return str(getattr(record, "hook_color", ColorTag.GRAY.value))


class PlainFormatter(logging.Formatter):
    """Formatter producing ``[HH:MM:SS.mmm] [TAG] message``."""

    def prefix(self, record: logging.LogRecord) -> str:
        """The timestamp and tag portion of the line."""
        created = datetime.fromtimestamp(record.created)
        return f"[{clock_millis(created)}] [{_record_tag(record)}]"

    def format(self, record: logging.LogRecord) -> str:
        return f"{self.prefix(record)} {record.getMessage()}"


class ConsoleHandler(logging.Handler):
    """Write colorized log lines to stderr through a ``rich`` console."""

    def __init__(self, console: Console | None = None, color: bool | None = None) -> None:
        """Initialize the console handler.

        Args:
            console: Console to print to.  Defaults to a stderr console.
            color: Force color on (``True``) or off (``False``); ``None``
                lets ``rich`` detect the terminal and honor ``NO_COLOR``.
        """
        super().__init__()
        self.console = console or Console(
            stderr=True,
            highlight=False,
            soft_wrap=True,
            no_color=color is False,
            force_terminal=True if color else None,
        )
        self.setFormatter(PlainFormatter())

    def emit(self, record: logging.LogRecord) -> None:
        try:
            formatter = self.formatter
            if not isinstance(formatter, PlainFormatter):
                self.console.print(Text(self.format(record)))
                return
            line = Text()
            line.append(formatter.prefix(record), style=_record_color(record))
            line.append(" " + record.getMessage())
            self.console.print(line)
        except Exception:
            self.handleError(record)


class DailyFileHandler(logging.Handler):
    """Append plain log lines to the log file for the record's calendar day.

    The file is opened for each record and closed immediately afterwards.
    If the log directory cannot be created or the append fails, the handler
    switches to degraded mode: the first failure is reported through
    *fallback* and later records are dropped from the file only.
    """

    def __init__(self, paths: StoragePaths, fallback: logging.Handler | None = None) -> None:
        super().__init__()
        self.paths = paths
        self.fallback = fallback
        self.degraded = False
        self.setFormatter(PlainFormatter())

    def path_for(self, record: logging.LogRecord) -> Path:
        return self.paths.daily_log_file(date.fromtimestamp(record.created))

    def emit(self, record: logging.LogRecord) -> None:
        if self.degraded:
            return
        try:
            append_line(self.path_for(record), self.format(record))
        except StorageError as e:
            self.degraded = True
            self._report_degraded(e)

    def _report_degraded(self, exc: StorageError) -> None:
        if self.fallback is None:
            return
        notice = logging.LogRecord(
            name=EVENT_LOGGER_NAME,
            level=logging.WARNING,
            pathname=__file__,
            lineno=0,
            msg=f"Log file unavailable ({exc}); logging to console only",
            args=None,
            exc_info=None,
        )
        notice.hook_tag = "WARNING"
        notice.hook_color = ColorTag.YELLOW.value
        self.fallback.handle(notice)


class HookLogger:
    """Facade over the event logger with the hook-specific helpers.

    Example:
        hook_logger = configure_logging(paths, level="INFO")
        hook_logger.hook_event("PreToolUse", "Tool Interception", "A tool is about to be used")
        hook_logger.context("Tool Name", "Bash")
        hook_logger.decision("ALLOWED", "Command appears safe")
    """

    def __init__(
        self,
        logger: logging.Logger,
        paths: StoragePaths,
        console_handler: ConsoleHandler | None = None,
        show_learning: bool = True,
    ) -> None:
        self._logger = logger
        self._paths = paths
        self._console_handler = console_handler
        self.show_learning = show_learning

    @property
    def log_file(self) -> Path:
        """Today's log file path."""
        return self._paths.daily_log_file(date.today())

    # -- core -----------------------------------------------------------------

    def emit(self, tag: str, color: ColorTag | str, message: str) -> None:
        """Log *message* under *tag* in *color*."""
        self._logger.log(
            level_for_tag(tag),
            message,
            extra={"hook_tag": tag, "hook_color": ColorTag(color).value},
        )

    # -- helpers --------------------------------------------------------------

    def hook_event(self, hook_name: str, event: str, details: str = "") -> None:
        """Log a hook lifecycle block: rule, hook name, event and details."""
        self.emit("HOOK", ColorTag.MAGENTA, "━" * SEPARATOR_WIDTH)
        self.emit("HOOK", ColorTag.MAGENTA, f"Hook: {hook_name}")
        self.emit("HOOK", ColorTag.CYAN, f"Event: {event}")
        if details:
            self.emit("HOOK", ColorTag.GRAY, f"Details: {details}")

    def context(self, key: str, value: object) -> None:
        self.emit("CONTEXT", ColorTag.BLUE, f"{key}: {value}")

    def decision(self, decision: str, reason: str = "") -> None:
        self.emit("DECISION", ColorTag.YELLOW, decision)
        if reason:
            self.emit("REASON", ColorTag.GRAY, f"  → {reason}")

    def success(self, message: str) -> None:
        self.emit("SUCCESS", ColorTag.GREEN, f"✓ {message}")

    def error(self, message: str) -> None:
        self.emit("ERROR", ColorTag.RED, f"✗ {message}")

    def warning(self, message: str) -> None:
        self.emit("WARNING", ColorTag.YELLOW, message)

    def info(self, message: str, color: ColorTag = ColorTag.GRAY) -> None:
        self.emit("INFO", color, message)

    def summary(self, message: str, color: ColorTag = ColorTag.GREEN) -> None:
        self.emit("SUMMARY", color, message)

    def step(self, number: int, text: str) -> None:
        self.emit("STEP", ColorTag.BLUE, f"Step {number}: {text}")

    def separator(self) -> None:
        self.emit("─────", ColorTag.GRAY, "─" * SEPARATOR_WIDTH)

    def learning(self, hook_name: str, lines: list[str]) -> None:
        """Explain what a hook is for.  Skipped when learning output is off."""
        if not self.show_learning:
            return
        self.emit("LEARNING", ColorTag.CYAN, f"━━━ LEARNING: {hook_name} Hook ━━━")
        for line in lines:
            self.emit("LEARNING", ColorTag.CYAN, line)
        self.separator()

    # -- console only ---------------------------------------------------------

    def pretty_json(self, data: object) -> None:
        """Print *data* as highlighted JSON on the console (not the log file)."""
        if self._console_handler is None:
            return
        self._console_handler.console.print(JSON.from_data(data, default=str))

    def banner(self, title: str, subtitle: str) -> None:
        """Print the closing banner on the console (not the log file)."""
        if self._console_handler is None:
            return
        console = self._console_handler.console
        console.print()
        console.print(Text("━" * BANNER_WIDTH, style=ColorTag.MAGENTA.value))
        console.print(Text(f"🧪 Hooks Lab: {title}", style=ColorTag.GREEN.value))
        console.print(Text(subtitle, style=ColorTag.GRAY.value))
        console.print(Text("━" * BANNER_WIDTH, style=ColorTag.MAGENTA.value))
        console.print()


def configure_logging(
    paths: StoragePaths,
    level: str = "INFO",
    color: bool | None = None,
    show_learning: bool = True,
    console: Console | None = None,
) -> HookLogger:
    """Configure the event logger and return its facade.

    Replaces any handlers installed by an earlier call, so configuring twice
    in one process does not duplicate lines.

    Args:
        paths: Storage locations (the daily log lives under ``logs_dir``).
        level: Logging level (DEBUG, INFO, WARNING, ERROR).
        color: Force color on/off; ``None`` detects the terminal.
        show_learning: Emit LEARNING blocks.
        console: Explicit console for the stderr stream (tests).

    Returns:
        A ready-to-use HookLogger.
    """
    logger = logging.getLogger(EVENT_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    console_handler = ConsoleHandler(console=console, color=color)
    file_handler = DailyFileHandler(paths, fallback=console_handler)
    logger.addHandler(console_handler)
    logger.addHandler(file_handler)

    return HookLogger(logger, paths, console_handler=console_handler, show_learning=show_learning)
