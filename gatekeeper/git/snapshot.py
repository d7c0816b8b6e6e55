"""Read-only view of the staged change set.

Wraps the git command line. Every query spawns git with
asyncio.create_subprocess_exec so the checks can await it concurrently.
Nothing here mutates the repository.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from gatekeeper.errors import CollaboratorError, ContentUnavailable

logger = logging.getLogger(__name__)

GIT_DIR = ".git"
GITDIR_PREFIX = "gitdir:"
COMMONDIR_FILE = "commondir"
HOOKS_DIR = "hooks"
PRECOMMIT_HOOK = "pre-commit"
BYPASS_SENTINEL = "GATEKEEPER_SKIP"


def is_git_repo(repo_root: Path) -> bool:
    """Check whether repo_root holds a .git directory or gitfile."""
    return (repo_root / GIT_DIR).exists()


def resolve_git_dir(repo_root: Path) -> Path:
    """Locate the metadata directory of a checkout.

    Linked worktrees and submodules have a `.git` file containing
    "gitdir: <path>" instead of a `.git` directory.
    """
    dot_git = repo_root / GIT_DIR
    if not dot_git.is_file():
        return dot_git
    try:
        content = dot_git.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s: %s", dot_git, e)
        return dot_git
    if not content.startswith(GITDIR_PREFIX):
        logger.warning("Unrecognized gitfile %s", dot_git)
        return dot_git
    git_dir = Path(content[len(GITDIR_PREFIX) :].strip())
    if not git_dir.is_absolute():
        git_dir = repo_root / git_dir
    return git_dir


def resolve_common_dir(repo_root: Path) -> Path:
    """Metadata directory shared by all worktrees (holds hooks/)."""
    git_dir = resolve_git_dir(repo_root)
    commondir = git_dir / COMMONDIR_FILE
    if not commondir.is_file():
        return git_dir
    try:
        common = Path(commondir.read_text(encoding="utf-8").strip())
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s: %s", commondir, e)
        return git_dir
    return common if common.is_absolute() else git_dir / common


def get_hooks_path(repo_root: Path) -> Path:
    return resolve_common_dir(repo_root) / HOOKS_DIR


def get_precommit_hook_path(repo_root: Path) -> Path:
    return get_hooks_path(repo_root) / PRECOMMIT_HOOK


def get_bypass_sentinel_path(repo_root: Path) -> Path:
    """Per-worktree sentinel location."""
    return resolve_git_dir(repo_root) / BYPASS_SENTINEL


class StagingSnapshotReader:
    """Query staged paths, the staged diff and staged file content."""

    def __init__(self, repo_root: Path | None = None, git: str = "git") -> None:
        """Initialize the reader.

        Args:
            repo_root: Working directory for git commands (default: cwd)
            git: git executable name
        """
        self.repo_root = repo_root
        self.git = git

    async def _run_git(self, *args: str) -> bytes:
        """Run git and return raw stdout.

        Raises:
            CollaboratorError: If git cannot be started or exits non-zero
        """
        command = [self.git, *args]
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(self.repo_root) if self.repo_root else None,
            )
            stdout, stderr = await process.communicate()
        except OSError as e:
            raise CollaboratorError(
                f"Failed to execute {' '.join(command)}: {e}", command=command
            ) from e

        if process.returncode != 0:
            stderr_str = stderr.decode("utf-8", errors="replace").strip()
            raise CollaboratorError(
                f"Git command failed: {stderr_str}", command=command, stderr=stderr_str
            )
        return stdout

    async def list_staged_paths(self) -> list[str]:
        """Return staged paths in the order git reports them."""
        stdout = await self._run_git("diff", "--cached", "--name-only")
        text = stdout.decode("utf-8", errors="replace")
        return [line for line in text.splitlines() if line]

    async def staged_diff(self) -> str:
        """Return the unified diff of staged changes ("" if none)."""
        stdout = await self._run_git("diff", "--cached")
        return stdout.decode("utf-8", errors="replace")

    async def staged_content(self, path: str) -> str:
        """Return the staged (index) content of a file.

        Raises:
            ContentUnavailable: If the file is deleted, binary or not UTF-8
        """
        try:
            stdout = await self._run_git("show", f":{path}")
        except CollaboratorError as e:
            raise ContentUnavailable(f"Could not read staged content of {path}: {e}", path) from e

        if b"\x00" in stdout:
            raise ContentUnavailable(f"{path} is a binary file", path)
        try:
            return stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ContentUnavailable(f"{path} is not valid UTF-8 text", path) from e


__all__ = [
    "StagingSnapshotReader",
    "get_bypass_sentinel_path",
    "get_hooks_path",
    "get_precommit_hook_path",
    "is_git_repo",
    "resolve_common_dir",
    "resolve_git_dir",
]
