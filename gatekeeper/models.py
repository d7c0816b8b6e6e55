"""Core result models for the commit gate.

This module defines the data produced by the three checks and the summary
the orchestrator aggregates them into.

Key constraints:
- SecurityFinding never stores a full secret longer than MASK_MIN_LENGTH
- LinterResult: skipped implies passed and a skip reason
- ReviewResult is immutable once parsed
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# Matches longer than this are masked to prefix + marker + suffix
MASK_MIN_LENGTH = 10
MASK_PREFIX = 5
MASK_SUFFIX = 3
MASK_MARKER = "..."


class Severity(str, Enum):
    """Severity of a security finding."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    def __str__(self) -> str:
        return self.value.upper()


# Higher number = more severe
SEVERITY_PRIORITY: dict[Severity, int] = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
}


def mask_secret(matched: str) -> str:
    """Mask a matched secret for display.

    Args:
        matched: The full matched text

    Returns:
        First 5 and last 3 characters joined by "..." when the match is
        longer than 10 characters, otherwise the match unchanged.
    """
    if len(matched) > MASK_MIN_LENGTH:
        return f"{matched[:MASK_PREFIX]}{MASK_MARKER}{matched[-MASK_SUFFIX:]}"
    return matched


@dataclass(frozen=True)
class SecurityFinding:
    """A secret pattern matched in staged content.

    Attributes:
        file: Repository-relative path
        line_number: 1-based line number
        pattern_name: Name of the pattern that matched
        matched_text: Masked matched text
        severity: Severity of the pattern
    """

    file: str
    line_number: int
    pattern_name: str
    matched_text: str
    severity: Severity


@dataclass(frozen=True)
class LinterResult:
    """Normalized outcome of linting one file.

    A skipped result never blocks the gate.
    """

    tool: str
    file: str
    passed: bool
    output: str = ""
    skipped: bool = False
    skip_reason: str | None = None

    def __post_init__(self) -> None:
        if self.skipped and (not self.passed or not self.skip_reason):
            raise ValueError("skipped linter result must be passed and carry a skip reason")
        if not self.skipped and self.skip_reason is not None:
            raise ValueError("non-skipped linter result cannot carry a skip reason")

    @classmethod
    def skip(cls, tool: str, file: str, reason: str) -> LinterResult:
        """Build a skipped result."""
        return cls(tool=tool, file=file, passed=True, skipped=True, skip_reason=reason)

    @property
    def failed(self) -> bool:
        return not self.skipped and not self.passed

    @property
    def is_important_skip(self) -> bool:
        """A missing tool is worth surfacing; an unmapped extension is not."""
        return self.skipped and "not installed" in (self.skip_reason or "")


@dataclass(frozen=True)
class ReviewResult:
    """Verdict of the AI reviewer."""

    passed: bool
    feedback: str
    raw_response: str = ""


@dataclass
class CheckSummary:
    """Aggregated outcome of one check run.

    Attributes:
        security_findings: All findings across scanned files
        linter_results: One result per linted file
        ai_result: Review verdict, None when the review did not run
        ai_skip_reason: Why the review did not run, if it did not
        bypassed: True when a bypass token short-circuited the run
        staged_count: Number of staged paths
        ignored_count: Number of staged paths dropped by ignore patterns
    """

    security_findings: list[SecurityFinding] = field(default_factory=list)
    linter_results: list[LinterResult] = field(default_factory=list)
    ai_result: ReviewResult | None = None
    ai_skip_reason: str | None = None
    bypassed: bool = False
    staged_count: int = 0
    ignored_count: int = 0

    @property
    def security_passed(self) -> bool:
        # Severity-agnostic: a Low finding blocks as well
        return not self.security_findings

    @property
    def linting_passed(self) -> bool:
        return all(r.passed or r.skipped for r in self.linter_results)

    @property
    def ai_passed(self) -> bool:
        # A review that did not run has no opinion and does not block
        return self.ai_result.passed if self.ai_result is not None else True

    @property
    def blocked(self) -> bool:
        return not (self.security_passed and self.linting_passed and self.ai_passed)

    def count_by_severity(self) -> dict[Severity, int]:
        counts = {severity: 0 for severity in Severity}
        for finding in self.security_findings:
            counts[finding.severity] += 1
        return counts


__all__ = [
    "CheckSummary",
    "LinterResult",
    "ReviewResult",
    "SEVERITY_PRIORITY",
    "SecurityFinding",
    "Severity",
    "mask_secret",
]
