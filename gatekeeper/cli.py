#!/usr/bin/env python3
"""
gatekeeper CLI

A Git commit gatekeeper that blocks commits leaking secrets, failing
linters, or rejected by an AI code review.

Usage:
    gatekeeper init      Install the pre-commit hook and an example config
    gatekeeper check     Run all checks on staged files (called by the hook)
    gatekeeper bypass    Skip all checks for the next commit only
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from gatekeeper.bypass import BypassToken
from gatekeeper.config import CONFIG_FILENAME, load_config_or_default
from gatekeeper.errors import GatekeeperError
from gatekeeper.git.snapshot import is_git_repo
from gatekeeper.hooks import install_precommit_hook, write_example_config
from gatekeeper.orchestrator import CheckOrchestrator
from gatekeeper.report import print_header, print_summary

logger = logging.getLogger(__name__)

EXIT_ALLOWED = 0
EXIT_BLOCKED = 1

NOT_A_REPO = "Not a Git repository. Please run this command from the root of a Git repository."


def configure_logging(verbosity: int) -> None:
    """Send logs to stderr so stdout stays a clean report."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def cmd_init(args) -> int:
    """Install the pre-commit hook."""
    repo_root: Path = args.repo
    print("Initializing gatekeeper...")
    print()

    if not is_git_repo(repo_root):
        raise GatekeeperError(NOT_A_REPO)
    print("  ok  Git repository detected")

    install_precommit_hook(repo_root)
    print("  ok  Created pre-commit hook")

    if write_example_config(repo_root) is not None:
        print(f"  ok  Created example {CONFIG_FILENAME} config")

    print()
    print("gatekeeper initialized successfully!")
    print()
    print("Next steps:")
    print("  1. Set your GROQ_API_KEY in a .env file")
    print(f"  2. Customize {CONFIG_FILENAME} as needed")
    print("  3. Stage your changes and commit - checks will run automatically!")
    print()
    print("To bypass checks once: gatekeeper bypass")
    return EXIT_ALLOWED


def cmd_check(args) -> int:
    """Run all checks; exit code is the gate decision."""
    repo_root: Path = args.repo
    print_header()

    config = load_config_or_default(repo_root / CONFIG_FILENAME)
    orchestrator = CheckOrchestrator(config=config, repo_root=repo_root)
    summary = asyncio.run(orchestrator.run())

    print_summary(summary)
    return EXIT_BLOCKED if summary.blocked else EXIT_ALLOWED


def cmd_bypass(args) -> int:
    """Create a one-time bypass token."""
    repo_root: Path = args.repo
    print("Creating bypass token...")
    print()

    if not is_git_repo(repo_root):
        raise GatekeeperError(NOT_A_REPO)

    BypassToken.for_repo(repo_root).create()

    print("  ok  Bypass token created")
    print()
    print("Your next commit will skip all checks.")
    print()
    print("The bypass token will be automatically deleted after one use.")
    print("This is intended for emergency situations only.")
    print()
    print("Now run your commit:")
    print('  git commit -m "your message"')
    return EXIT_ALLOWED


COMMANDS = {
    "init": cmd_init,
    "check": cmd_check,
    "bypass": cmd_bypass,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gatekeeper",
        description="Git-integrated pre-commit gatekeeper",
    )
    parser.add_argument(
        "--repo",
        type=Path,
        default=Path("."),
        help="Repository root (default: current directory)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-vv for debug)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")
    subparsers.add_parser("init", help="Initialize gatekeeper in the current Git repository")
    subparsers.add_parser("check", help="Run all checks on staged files (called by pre-commit hook)")
    subparsers.add_parser("bypass", help="Bypass checks for the next commit (one-time skip token)")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return EXIT_BLOCKED

    configure_logging(args.verbose)

    try:
        return handler(args)
    except GatekeeperError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_BLOCKED


if __name__ == "__main__":
    sys.exit(main())
