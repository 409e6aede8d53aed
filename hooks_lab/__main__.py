"""Entry point for the hooks-lab CLI."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import NoReturn


def run_hook_command(args: argparse.Namespace) -> int:
    """Run one lifecycle hook with the payload on stdin.

    Args:
        args: Parsed command line arguments.

    Returns:
        Exit code from the hook (0 continue, 1 block).
    """
    from hooks_lab.config import Settings, get_settings
    from hooks_lab.hooks.dispatcher import run_hook
    from hooks_lab.hooks.models import EXIT_CONTINUE

    overrides: dict[str, object] = {}
    if args.enforce:
        overrides["enforce_blocking"] = True
    if args.base_dir:
        overrides["base_dir"] = Path(args.base_dir)
    if args.quiet:
        overrides["show_learning"] = False
        overrides["show_banner"] = False

    try:
        settings = get_settings()
        if overrides:
            settings = Settings(**{**settings.model_dump(), **overrides})
    except Exception as e:
        # A bad HOOKS_LAB_* value must not turn into a block signal.
        print(f"hooks-lab: invalid configuration, skipping {args.event}: {e}", file=sys.stderr)
        return EXIT_CONTINUE

    return run_hook(args.event, sys.stdin, settings)


def run_setup_hooks(args: argparse.Namespace) -> int:
    """Print the hook registration block as JSON.

    Args:
        args: Parsed command line arguments.

    Returns:
        Exit code (0 for success, 1 for error).
    """
    from hooks_lab.tools.setup_hooks import generate_hook_config

    try:
        config = generate_hook_config(
            mode=args.mode,
            python_path=args.python or "",
            timeout=args.timeout,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.hooks_only:
        print(json.dumps({"hooks": config["hooks"]}, indent=2))
    else:
        print(json.dumps(config, indent=2))
    return 0


def run_paths(args: argparse.Namespace) -> int:
    """Print where hooks-lab reads and writes its files."""
    from hooks_lab.config import get_settings
    from hooks_lab.core.storage import StoragePaths

    paths = StoragePaths(base_dir=Path(get_settings().base_dir).expanduser())
    if args.json:
        print(json.dumps(paths.as_dict(), indent=2))
    else:
        for name, value in paths.as_dict().items():
            print(f"{name:20} {value}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="hooks-lab",
        description="Verbose lifecycle hooks for AI coding-assistant plugins",
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")

    subparsers = parser.add_subparsers(dest="command")

    hook_parser = subparsers.add_parser(
        "hook",
        help="Run a lifecycle hook (reads the JSON payload from stdin)",
    )
    hook_parser.add_argument(
        "event",
        help="Event name: session-start, user-prompt-submit, pre-tool-use, post-tool-use",
    )
    hook_parser.add_argument(
        "--enforce",
        action="store_true",
        help="Exit 1 on BLOCKED PreToolUse decisions",
    )
    hook_parser.add_argument("--base-dir", help="Override the storage directory")
    hook_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Skip LEARNING lines and the closing banner",
    )

    setup_parser = subparsers.add_parser(
        "setup-hooks",
        help="Print the hooks block for .claude/settings.json",
    )
    setup_parser.add_argument(
        "--mode",
        choices=["cli", "module"],
        default="cli",
        help="Invoke the hooks-lab script (cli) or python -m hooks_lab (module)",
    )
    setup_parser.add_argument("--python", help="Interpreter for module mode")
    setup_parser.add_argument("--timeout", type=int, default=10, help="Hook timeout in seconds")
    setup_parser.add_argument(
        "--hooks-only",
        action="store_true",
        help="Print only the hooks mapping",
    )

    paths_parser = subparsers.add_parser("paths", help="Show storage locations")
    paths_parser.add_argument("--json", action="store_true", help="Output as JSON")

    return parser


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        from hooks_lab import __version__

        print(f"hooks-lab {__version__}")
        sys.exit(0)

    if args.command == "hook":
        sys.exit(run_hook_command(args))
    elif args.command == "setup-hooks":
        sys.exit(run_setup_hooks(args))
    elif args.command == "paths":
        sys.exit(run_paths(args))
    else:
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":
    main()
