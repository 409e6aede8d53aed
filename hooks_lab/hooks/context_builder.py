"""Environment context for the hook handlers.

Logs the ambient environment, writes the session context bundle, keeps the
running tool usage log and detects what kind of project the session is in.
"""

from __future__ import annotations

import json
import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from hooks_lab.adapters.git_utils import GitStatus, read_git_status
from hooks_lab.core.logging import ColorTag, HookLogger
from hooks_lab.core.storage import (
    StoragePaths,
    append_line,
    count_lines_containing,
    write_json,
)
from hooks_lab.core.utils import iso_seconds
from hooks_lab.hooks.hook_helpers import read_environment
from hooks_lab.hooks.models import UNKNOWN, ContextBundle

logger = logging.getLogger(__name__)

NOT_APPLICABLE = "N/A"


# ---------------------------------------------------------------------------
# Environment logging
# ---------------------------------------------------------------------------


def log_environment_context(
    hook_logger: HookLogger,
    cwd: str,
    git: GitStatus | None = None,
) -> GitStatus:
    """Log working directory, user, shell and git state.

    Args:
        hook_logger: Where to log.
        cwd: Working directory to describe.
        git: Pre-fetched git status; queried from *cwd* when omitted.

    Returns:
        The git status that was logged.
    """
    env = read_environment()
    hook_logger.context("Working Directory", cwd)
    hook_logger.context("User", env.user)
    hook_logger.context("Shell", env.shell)

    git = git if git is not None else read_git_status(cwd)
    if git.in_repo:
        hook_logger.context("Git Branch", git.branch)
        hook_logger.context("Modified Files", git.dirty_count)
    else:
        hook_logger.context("Git", "Not in a git repository")
    return git


def log_payload_summary(hook_logger: HookLogger, payload: dict[str, Any], label: str) -> None:
    """Pretty-print *payload* on the console and log its tool / event fields."""
    hook_logger.hook_event("Context Parser", f"Parsing {label}")
    hook_logger.pretty_json(payload)

    tool = payload.get("tool") or payload.get("tool_name") or payload.get("name")
    event = payload.get("event") or payload.get("hook_event_name") or payload.get("type")
    if tool:
        hook_logger.context("Tool", tool)
    if event:
        hook_logger.context("Event Type", event)


# ---------------------------------------------------------------------------
# Session context bundle
# ---------------------------------------------------------------------------


def collect_context_bundle(cwd: str, git: GitStatus | None = None) -> ContextBundle:
    """Snapshot the environment of *cwd* into a ContextBundle."""
    env = read_environment()
    git = git if git is not None else read_git_status(cwd)
    return ContextBundle(
        timestamp=iso_seconds(),
        working_directory=cwd,
        user=env.user,
        git_branch=git.branch if git.in_repo else NOT_APPLICABLE,
        git_status=str(git.dirty_count if git.in_repo else 0),
        shell=env.shell,
        term=env.term,
        lang=env.lang,
    )


def build_session_context(
    hook_logger: HookLogger,
    paths: StoragePaths,
    cwd: str,
    git: GitStatus | None = None,
) -> Path:
    """Write ``session-context.json``, replacing any earlier snapshot.

    Returns:
        Path to the context bundle.
    """
    bundle = collect_context_bundle(cwd, git)
    context_file = write_json(paths.context_file, bundle.to_dict())
    hook_logger.success(f"Session context bundle created at {context_file}")
    return context_file


# ---------------------------------------------------------------------------
# Tool usage
# ---------------------------------------------------------------------------


def analyze_tool_usage(
    hook_logger: HookLogger,
    paths: StoragePaths,
    tool_name: str,
    cwd: str,
) -> int:
    """Record a tool call in ``tool-usage.log`` and log its running total.

    The total is the number of lines mentioning *tool_name* anywhere, so a
    tool whose name is a substring of another (or of a directory) is
    over-counted.

    Returns:
        The count that was logged.
    """
    append_line(paths.tool_usage_log, f"{iso_seconds()},{tool_name},{cwd}")
    count = count_lines_containing(paths.tool_usage_log, tool_name)
    hook_logger.context("Tool Usage Count", f"{tool_name} has been used {count} times total")
    return count


# ---------------------------------------------------------------------------
# Project detection
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProjectInfo:
    """What the session's working directory appears to be."""

    kind: str  # "plugin" | "node" | "python" | "unknown"
    name: str = UNKNOWN
    manifest: str = ""


def _read_json_name(path: Path) -> str:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.debug("Could not read %s: %s", path, e)
        return UNKNOWN
    if isinstance(data, dict) and isinstance(data.get("name"), str) and data["name"]:
        return str(data["name"])
    return UNKNOWN


def _read_pyproject_name(path: Path) -> str:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.debug("Could not read %s: %s", path, e)
        return UNKNOWN
    name = data.get("project", {}).get("name")
    return name if isinstance(name, str) and name else UNKNOWN


def detect_project(cwd: str) -> ProjectInfo:
    """Identify the project in *cwd* from its manifest files.

    Checked in order: ``.claude-plugin/plugin.json``, ``package.json``,
    ``pyproject.toml``.  The first one found wins.
    """
    root = Path(cwd)
    plugin_manifest = root / ".claude-plugin" / "plugin.json"
    if plugin_manifest.is_file():
        return ProjectInfo("plugin", _read_json_name(plugin_manifest), str(plugin_manifest))

    package_json = root / "package.json"
    if package_json.is_file():
        return ProjectInfo("node", _read_json_name(package_json), str(package_json))

    pyproject = root / "pyproject.toml"
    if pyproject.is_file():
        return ProjectInfo("python", _read_pyproject_name(pyproject), str(pyproject))

    return ProjectInfo("unknown")


def log_project(hook_logger: HookLogger, project: ProjectInfo) -> None:
    """Log the outcome of ``detect_project``."""
    if project.kind == "plugin":
        hook_logger.success("Found plugin.json - this appears to be a plugin project")
        hook_logger.context("Plugin Name", project.name)
    elif project.kind == "node":
        hook_logger.success("Found package.json - this appears to be a Node.js project")
        hook_logger.context("Project Name", project.name)
    elif project.kind == "python":
        hook_logger.success("Found pyproject.toml - this appears to be a Python project")
        hook_logger.context("Project Name", project.name)
    else:
        hook_logger.context("Project Type", "Unknown - no recognizable project files found")


# ---------------------------------------------------------------------------
# Context injection suggestions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Suggestion:
    """An informational note on context that could accompany a prompt."""

    message: str
    color: ColorTag = ColorTag.GREEN
    glyph: str = "✓"

    def render(self) -> str:
        return f"{self.glyph} {self.message}"


_PROJECT_MANIFESTS: tuple[tuple[str, str], ...] = (
    ("package.json", "Node.js"),
    ("Cargo.toml", "Rust"),
    ("go.mod", "Go"),
)

_DOC_FILES: tuple[tuple[str, str], ...] = (
    ("CLAUDE.md", "project guidelines"),
    ("README.md", "project overview"),
)


def injection_suggestions(cwd: str, git: GitStatus) -> list[Suggestion]:
    """List context that could be injected alongside a prompt.

    Purely informational: nothing here modifies the prompt.
    """
    root = Path(cwd)
    suggestions: list[Suggestion] = []

    if git.in_repo:
        suggestions.append(Suggestion(f"Could inject git branch context: {git.branch}"))
        if git.has_changes:
            suggestions.append(
                Suggestion("Could warn about uncommitted changes", ColorTag.YELLOW, "⚠")
            )

    for filename, language in _PROJECT_MANIFESTS:
        if (root / filename).is_file():
            suggestions.append(Suggestion(f"Could inject {language} project context"))
            break

    for filename, description in _DOC_FILES:
        if (root / filename).is_file():
            suggestions.append(Suggestion(f"Could inject {filename} {description}"))

    return suggestions
