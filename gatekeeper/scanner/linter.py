"""External linter dispatch for staged files.

Each file is mapped by extension to one linter from a closed table, the
tool is probed on PATH, then invoked as its own asyncio task. Every file
yields exactly one LinterResult:

- no tool for the extension          -> skipped ("No linter configured ...")
- tool not on PATH                   -> skipped ("<tool> is not installed")
- tool could not be spawned          -> skipped ("Failed to run <tool>: ...")
- tool exited non-zero               -> failed, output captured
- tool exited zero                   -> passed

No timeout is imposed; linters are trusted to terminate on their own.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path, PurePath

from gatekeeper.errors import ToolSpawnError
from gatekeeper.models import LinterResult

logger = logging.getLogger(__name__)

NO_TOOL = "none"


@dataclass(frozen=True)
class LinterSpec:
    """Executable and fixed arguments; the file path is appended last."""

    executable: str
    args: tuple[str, ...] = ()

    def command(self, file_path: str) -> list[str]:
        return [self.executable, *self.args, file_path]


_RUFF = LinterSpec("ruff", ("check",))
_ESLINT = LinterSpec("eslint", ("--no-error-on-unmatched-pattern",))
_CARGO_FMT = LinterSpec("cargo", ("fmt", "--check", "--"))

# Lower-cased extension (no dot) -> linter
LINTERS: dict[str, LinterSpec] = {
    "py": _RUFF,
    "js": _ESLINT,
    "jsx": _ESLINT,
    "ts": _ESLINT,
    "tsx": _ESLINT,
    "rs": _CARGO_FMT,
}


def file_extension(file_path: str) -> str:
    """Lower-cased extension without the dot ("" if none)."""
    return PurePath(file_path).suffix.lstrip(".").lower()


def is_command_available(command: str) -> bool:
    """Check whether an executable is on PATH."""
    return shutil.which(command) is not None


class LinterDispatcher:
    """Run the configured linter for each staged file concurrently."""

    def __init__(
        self,
        repo_root: Path | None = None,
        linters: dict[str, LinterSpec] | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            repo_root: Working directory for linter processes (default: cwd)
            linters: Extension table override, mainly for tests
        """
        self.repo_root = repo_root
        self.linters = linters if linters is not None else LINTERS

    async def _spawn(self, spec: LinterSpec, file_path: str) -> tuple[int, str]:
        """Run a linter and return (exit code, combined output).

        Raises:
            ToolSpawnError: If the process cannot be started
        """
        try:
            process = await asyncio.create_subprocess_exec(
                *spec.command(file_path),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(self.repo_root) if self.repo_root else None,
            )
        except OSError as e:
            raise ToolSpawnError(f"Failed to run {spec.executable}: {e}", spec.executable) from e

        stdout, stderr = await process.communicate()
        combined = stdout.decode("utf-8", errors="replace") + stderr.decode("utf-8", errors="replace")
        return process.returncode, combined.strip()

    async def run_linter(self, file_path: str) -> LinterResult:
        """Lint a single file."""
        extension = file_extension(file_path)
        spec = self.linters.get(extension)
        if spec is None:
            kind = f".{extension} files" if extension else "files without an extension"
            return LinterResult.skip(NO_TOOL, file_path, f"No linter configured for {kind}")

        tool = spec.executable
        if not is_command_available(tool):
            return LinterResult.skip(tool, file_path, f"{tool} is not installed")

        try:
            returncode, output = await self._spawn(spec, file_path)
        except ToolSpawnError as e:
            logger.warning("%s", e)
            return LinterResult.skip(tool, file_path, str(e))

        if returncode != 0:
            logger.info("%s reported issues in %s (exit %d)", tool, file_path, returncode)
        return LinterResult(tool=tool, file=file_path, passed=returncode == 0, output=output)

    async def run(self, paths: Sequence[str]) -> list[LinterResult]:
        """Lint all files concurrently and wait for every one to finish.

        Args:
            paths: Files to lint

        Returns:
            One result per path, in input order
        """
        outcomes = await asyncio.gather(
            *(self.run_linter(path) for path in paths),
            return_exceptions=True,
        )

        results: list[LinterResult] = []
        for path, outcome in zip(paths, outcomes):
            if isinstance(outcome, Exception):
                logger.error("Linting %s failed unexpectedly: %s", path, outcome)
                results.append(LinterResult.skip(NO_TOOL, path, f"Linter error: {outcome}"))
            else:
                results.append(outcome)
        return results


__all__ = [
    "LINTERS",
    "LinterDispatcher",
    "LinterSpec",
    "file_extension",
    "is_command_available",
]
