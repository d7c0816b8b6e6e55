"""Check orchestration and gate decision.

The orchestrator runs one check invocation:

1. A present bypass token is consumed and short-circuits everything.
2. Staged paths are listed; nothing staged means nothing to check.
3. Paths matching ignore patterns are dropped from scanning and linting.
4. The secret scan, the linters and the AI review run concurrently. The
   review sees the full staged diff, ignored files included.
5. Results are aggregated into a CheckSummary whose `blocked` property is
   the gate decision.

The three checks share no mutable state: each receives the same tuple of
paths and the frozen config. A crash inside one check's harness degrades
that check to "no result" and never aborts the others. Only a failure to
list staged files or to touch the bypass token is fatal.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from gatekeeper.bypass import BypassToken
from gatekeeper.config import ENV_FILENAME, GatekeeperConfig
from gatekeeper.errors import (
    CollaboratorError,
    ConfigurationError,
    ContentUnavailable,
    ReviewError,
)
from gatekeeper.git.snapshot import StagingSnapshotReader
from gatekeeper.llm.reviewer import AIReviewer
from gatekeeper.models import CheckSummary, LinterResult, ReviewResult, SecurityFinding, Severity
from gatekeeper.scanner.linter import LinterDispatcher
from gatekeeper.scanner.security import PatternScanner

logger = logging.getLogger(__name__)


class CheckOrchestrator:
    """Run the three checks over the staged change set.

    Collaborators are injectable; by default they are built from the
    repository root and configuration.
    """

    def __init__(
        self,
        config: GatekeeperConfig | None = None,
        repo_root: Path | None = None,
        reader: StagingSnapshotReader | None = None,
        scanner: PatternScanner | None = None,
        linter: LinterDispatcher | None = None,
        reviewer: AIReviewer | None = None,
        bypass: BypassToken | None = None,
    ) -> None:
        self.config = config or GatekeeperConfig()
        root = repo_root or Path.cwd()
        self.reader = reader or StagingSnapshotReader(root)
        self.scanner = scanner or PatternScanner(self.config)
        self.linter = linter or LinterDispatcher(root)
        self.reviewer = reviewer or AIReviewer(self.config, env_file=root / ENV_FILENAME)
        self.bypass = bypass or BypassToken.for_repo(root)

    async def run(self) -> CheckSummary:
        """Run one check invocation.

        Returns:
            CheckSummary; `blocked` is the gate decision

        Raises:
            BypassIOError: If a present bypass token cannot be deleted
            CollaboratorError: If staged files cannot be listed
        """
        if self.bypass.consume():
            logger.warning("Bypass token detected - skipping all checks")
            return CheckSummary(bypassed=True)

        staged = await self.reader.list_staged_paths()
        if not staged:
            logger.info("No staged files to check")
            return CheckSummary()

        files = tuple(path for path in staged if not self.config.should_ignore(path))
        ignored_count = len(staged) - len(files)
        if ignored_count:
            logger.info("%d file(s) ignored per config", ignored_count)

        security, linting, review = await asyncio.gather(
            self._run_security_check(files),
            self._run_linting_check(files),
            self._run_ai_review(),
            return_exceptions=True,
        )

        if isinstance(security, BaseException):
            logger.error("Security scan aborted: %s", security)
            security = []
        if isinstance(linting, BaseException):
            logger.error("Linting aborted: %s", linting)
            linting = []
        if isinstance(review, BaseException):
            logger.error("AI review aborted: %s", review)
            review = (None, f"AI review error: {review}")

        ai_result, ai_skip_reason = review
        return CheckSummary(
            security_findings=security,
            linter_results=linting,
            ai_result=ai_result,
            ai_skip_reason=ai_skip_reason,
            staged_count=len(staged),
            ignored_count=ignored_count,
        )

    async def _run_security_check(self, files: tuple[str, ...]) -> list[SecurityFinding]:
        findings: list[SecurityFinding] = []
        for path in files:
            try:
                content = await self.reader.staged_content(path)
            except ContentUnavailable as e:
                # Deleted or binary files have nothing to scan
                logger.warning("Could not read %s: %s", path, e)
                continue
            findings.extend(self.scanner.scan(path, content))

        if findings:
            high = sum(1 for f in findings if f.severity == Severity.HIGH)
            medium = sum(1 for f in findings if f.severity == Severity.MEDIUM)
            logger.info(
                "Security scan found %d issue(s) (%d high, %d medium)", len(findings), high, medium
            )
        return findings

    async def _run_linting_check(self, files: tuple[str, ...]) -> list[LinterResult]:
        results = await self.linter.run(files)
        failed = sum(1 for r in results if r.failed)
        checked = sum(1 for r in results if not r.skipped)
        logger.info("Linting: %d/%d checked file(s) failed", failed, checked)
        return results

    async def _run_ai_review(self) -> tuple[ReviewResult | None, str | None]:
        """Review the full staged diff.

        Returns:
            (result, None) when the review ran, (None, reason) when skipped
        """
        try:
            diff = await self.reader.staged_diff()
        except CollaboratorError as e:
            logger.warning("AI review skipped: %s", e)
            return None, f"AI review skipped: {e}"

        if not diff.strip():
            return None, "AI review skipped: no diff"

        try:
            return await self.reviewer.review(diff), None
        except ConfigurationError:
            logger.warning("AI review skipped: API key not set")
            return None, "AI review skipped: API key not set"
        except ReviewError as e:
            logger.warning("AI review error: %s", e)
            return None, f"AI review error: {e}"


async def run_checks(config: GatekeeperConfig, repo_root: Path) -> CheckSummary:
    """Run one check invocation with default collaborators."""
    return await CheckOrchestrator(config=config, repo_root=repo_root).run()


__all__ = ["CheckOrchestrator", "run_checks"]
