"""Pre-commit hook installation."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from gatekeeper.config import CONFIG_FILENAME, EXAMPLE_CONFIG
from gatekeeper.errors import GatekeeperError
from gatekeeper.git.snapshot import get_hooks_path, get_precommit_hook_path

logger = logging.getLogger(__name__)

PRECOMMIT_HOOK_CONTENT = """#!/bin/sh
# gatekeeper pre-commit hook
# Installed by `gatekeeper init`; runs security, linting, and AI checks

gatekeeper check
exit_code=$?

if [ $exit_code -ne 0 ]; then
    echo ""
    echo "Commit blocked by gatekeeper."
    echo "Fix the issues above or run 'gatekeeper bypass' to skip checks once."
    exit 1
fi

exit 0
"""


class HookInstallError(GatekeeperError):
    """The hook or example config could not be written."""
    pass


def install_precommit_hook(repo_root: Path) -> Path:
    """Write the pre-commit hook, replacing any existing one.

    Returns:
        Path of the installed hook

    Raises:
        HookInstallError: If the hook cannot be written
    """
    hooks_path = get_hooks_path(repo_root)
    hook_path = get_precommit_hook_path(repo_root)
    try:
        hooks_path.mkdir(parents=True, exist_ok=True)
        hook_path.write_text(PRECOMMIT_HOOK_CONTENT, encoding="utf-8")
        if os.name == "posix":
            hook_path.chmod(0o755)
    except OSError as e:
        raise HookInstallError(f"Failed to install pre-commit hook: {e}") from e
    logger.info("Installed pre-commit hook at %s", hook_path)
    return hook_path


def write_example_config(repo_root: Path) -> Path | None:
    """Create gatekeeper.yaml unless one exists.

    Returns:
        Path of the new file, or None if a config already existed
    """
    config_path = repo_root / CONFIG_FILENAME
    if config_path.exists():
        return None
    try:
        config_path.write_text(EXAMPLE_CONFIG, encoding="utf-8")
    except OSError as e:
        raise HookInstallError(f"Failed to create example config file: {e}") from e
    return config_path


__all__ = ["HookInstallError", "install_precommit_hook", "write_example_config"]
