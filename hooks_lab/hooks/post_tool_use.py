"""PostToolUse hook: analyze a tool's result after it ran.

Branches on the tool kind to look at its output, classifies the run time
and appends one record to ``tool-usage-detailed.jsonl``.

Exit codes:
    0 — Always.
"""

from __future__ import annotations

import os
import re
from typing import NamedTuple

from hooks_lab.core.logging import ColorTag
from hooks_lab.core.storage import append_jsonl
from hooks_lab.core.utils import iso_seconds
from hooks_lab.hooks.hook_helpers import HookContext, resolve_working_dir, truncate
from hooks_lab.hooks.models import EXIT_CONTINUE, HookResult, PostToolUseInput, ToolUsageRecord

HOOK_NAME = "PostToolUse"

ERROR_PREVIEW_CHARS = 200
OUTPUT_PREVIEW_CHARS = 200

_LEARNING = [
    "This hook runs AFTER a tool completes",
    "Use it to: analyze results, log outputs, trigger follow-ups",
]

_FOLLOW_UPS = [
    "Run tests after code changes",
    "Format code after Write operations",
    "Send notifications on failures",
    "Generate reports from analysis",
]

# ---------------------------------------------------------------------------
# Analysis helpers
# ---------------------------------------------------------------------------


class OutputPattern(NamedTuple):
    """A keyword scan applied to Bash output."""

    name: str
    pattern: re.Pattern[str]
    color: ColorTag
    message: str


OUTPUT_PATTERNS: tuple[OutputPattern, ...] = (
    OutputPattern(
        "error",
        re.compile(r"error", re.IGNORECASE),
        ColorTag.YELLOW,
        "⚠ Output contains 'error' keyword",
    ),
    OutputPattern(
        "warning",
        re.compile(r"warning", re.IGNORECASE),
        ColorTag.YELLOW,
        "⚠ Output contains 'warning' keyword",
    ),
    OutputPattern(
        "success",
        re.compile(r"success|complete|done", re.IGNORECASE),
        ColorTag.GREEN,
        "✓ Output indicates success",
    ),
)

_FILE_TYPES: dict[str, str] = {
    "json": "json",
    "md": "markdown",
    "sh": "shell script",
}


def scan_output_keywords(output: str) -> list[OutputPattern]:
    """Return every output pattern found in *output*."""
    if not output:
        return []
    return [p for p in OUTPUT_PATTERNS if p.pattern.search(output)]


def file_extension(file_path: str) -> str:
    """Extension without the dot, or ``""``."""
    return os.path.splitext(file_path)[1].lstrip(".")


def classify_file_type(file_path: str) -> str:
    """Classify *file_path* as json, markdown, shell script or other."""
    return _FILE_TYPES.get(file_extension(file_path).lower(), "other")


def count_output_lines(output: str) -> int:
    return len(output.splitlines())


def classify_match_count(count: int, large_threshold: int = 10) -> str:
    """Classify a Grep result size as none, manageable or large."""
    if count == 0:
        return "none"
    if count > large_threshold:
        return "large"
    return "manageable"


def classify_duration(duration_ms: int, moderate_ms: int = 1000, slow_ms: int = 5000) -> str | None:
    """Classify a run time as fast, moderate or slow.

    Returns ``None`` when no duration was reported (zero).
    """
    if duration_ms <= 0:
        return None
    if duration_ms > slow_ms:
        return "slow"
    if duration_ms > moderate_ms:
        return "moderate"
    return "fast"


# ---------------------------------------------------------------------------
# Per-tool analysis
# ---------------------------------------------------------------------------


def _analyze_bash(hook_input: PostToolUseInput, ctx: HookContext) -> dict[str, object]:
    log = ctx.logger
    log.emit("ANALYSIS", ColorTag.BLUE, "Analyzing Bash command output")
    output = hook_input.output
    if not output:
        return {"keywords": []}

    log.context("Output Length", f"{len(output)} characters")
    log.context("Output Lines", f"{count_output_lines(output)} lines")
    matches = scan_output_keywords(output)
    for match in matches:
        log.emit("PATTERN", match.color, match.message)
    log.info(f"Output preview (first {OUTPUT_PREVIEW_CHARS} chars):")
    log.info(truncate(output, OUTPUT_PREVIEW_CHARS))
    return {"keywords": [m.name for m in matches]}


def _analyze_read(hook_input: PostToolUseInput, ctx: HookContext) -> dict[str, object]:
    log = ctx.logger
    log.emit("ANALYSIS", ColorTag.BLUE, "Analyzing file read operation")
    file_path = hook_input.param("file_path")
    log.context("File Read", file_path)
    file_type = classify_file_type(file_path)
    if hook_input.output:
        log.context("File Size (approx)", f"{len(hook_input.output)} characters")
        if file_type == "json":
            log.emit("PATTERN", ColorTag.CYAN, "JSON file detected")
        elif file_type == "markdown":
            log.emit("PATTERN", ColorTag.CYAN, "Markdown file detected")
        elif file_type == "shell script":
            log.emit("PATTERN", ColorTag.CYAN, "Shell script detected")
        else:
            log.emit("PATTERN", ColorTag.GRAY, f"File type: {file_extension(file_path)}")
    return {"file_type": file_type}


def _analyze_write(hook_input: PostToolUseInput, ctx: HookContext) -> dict[str, object]:
    log = ctx.logger
    log.emit("ANALYSIS", ColorTag.BLUE, "Analyzing file modification operation")
    file_path = hook_input.param("file_path")
    log.context("File Modified", file_path)
    if not hook_input.success:
        return {"file_size": None}

    log.success("File successfully modified")
    file_size: int | None = None
    if file_path and os.path.isfile(file_path):
        try:
            file_size = os.path.getsize(file_path)
        except OSError:
            file_size = None
        log.context("New File Size", f"{file_size if file_size is not None else 'unknown'} bytes")
    return {"file_size": file_size}


def _analyze_grep(hook_input: PostToolUseInput, ctx: HookContext) -> dict[str, object]:
    log = ctx.logger
    log.emit("ANALYSIS", ColorTag.BLUE, "Analyzing search operation")
    count = count_output_lines(hook_input.output)
    log.context("Matches Found", count)
    size = classify_match_count(count, ctx.settings.large_match_threshold)
    if size == "large":
        log.emit(
            "PATTERN", ColorTag.YELLOW, "⚠ Large number of matches - consider refining search"
        )
    elif size == "none":
        log.emit("PATTERN", ColorTag.GRAY, "No matches found")
    else:
        log.emit("PATTERN", ColorTag.GREEN, "✓ Manageable number of matches")
    return {"match_count": count, "match_size": size}


_ANALYZERS = {
    "Bash": _analyze_bash,
    "Read": _analyze_read,
    "Write": _analyze_write,
    "Edit": _analyze_write,
    "Grep": _analyze_grep,
}

_PERFORMANCE_LINES: dict[str, tuple[ColorTag, str]] = {
    "slow": (ColorTag.YELLOW, "⚠ Slow operation (>{slow:g}s)"),
    "moderate": (ColorTag.CYAN, "Moderate duration (>{moderate:g}s)"),
    "fast": (ColorTag.GREEN, "Fast operation (<{moderate:g}s)"),
}


# ---------------------------------------------------------------------------
# Handler
# ---------------------------------------------------------------------------


def handle(hook_input: PostToolUseInput, ctx: HookContext) -> HookResult:
    """Run the PostToolUse steps."""
    log = ctx.logger
    settings = ctx.settings
    cwd = resolve_working_dir(hook_input.cwd)
    tool = hook_input.tool

    log.hook_event(HOOK_NAME, "Tool Completion", "A tool has finished executing")
    log.learning(HOOK_NAME, _LEARNING)

    log.step(1, "Parsing tool execution result")
    log.context("Tool Name", tool)
    log.context("Success", str(hook_input.success).lower())
    if hook_input.success:
        log.success("Tool executed successfully")
    else:
        log.error("Tool execution failed")
        if hook_input.error:
            log.context("Error", truncate(hook_input.error, ERROR_PREVIEW_CHARS))
    log.separator()

    log.step(2, "Analyzing output patterns")
    analyzer = _ANALYZERS.get(tool)
    if analyzer is not None:
        analysis = analyzer(hook_input, ctx)
    else:
        log.emit("ANALYSIS", ColorTag.GRAY, f"No specific analysis for tool: {tool}")
        analysis = {}
    log.separator()

    log.step(3, "Performance tracking")
    performance = classify_duration(
        hook_input.duration_ms, settings.moderate_threshold_ms, settings.slow_threshold_ms
    )
    if performance is not None:
        log.context("Execution Time", f"{hook_input.duration_ms}ms")
        color, template = _PERFORMANCE_LINES[performance]
        log.emit(
            "PERFORMANCE",
            color,
            template.format(
                slow=settings.slow_threshold_ms / 1000,
                moderate=settings.moderate_threshold_ms / 1000,
            ),
        )
    log.separator()

    log.step(4, "Recording to usage database")
    record = ToolUsageRecord(
        timestamp=iso_seconds(),
        tool=tool,
        success=hook_input.success,
        duration_ms=hook_input.duration_ms,
        working_dir=cwd,
    )
    append_jsonl(ctx.paths.tool_usage_detailed, record.to_dict())
    log.success("Usage record appended to database")
    log.separator()

    log.step(5, "Follow-up action opportunities")
    log.info("PostToolUse can trigger follow-up actions like:", ColorTag.CYAN)
    for follow_up in _FOLLOW_UPS:
        log.info(f"  • {follow_up}")
    log.separator()

    log.hook_event(HOOK_NAME, "Complete", "Tool result analysis complete")
    log.summary(f"Tool: {tool}")
    log.summary(f"Status: {str(hook_input.success).lower()}")
    log.summary(f"Full logs: {log.log_file}", ColorTag.CYAN)
    if settings.show_banner:
        log.banner("PostToolUse hook executed", "Tool result analysis and logging complete")

    return HookResult(
        exit_code=EXIT_CONTINUE,
        details={"tool": tool, "performance": performance, **analysis},
    )
