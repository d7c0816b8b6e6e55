"""Plain-text report of a check run, printed to stdout."""

from __future__ import annotations

from gatekeeper.models import CheckSummary, LinterResult, ReviewResult, SecurityFinding, Severity

RULE = "-" * 60
MAX_OUTPUT_LINES = 10


def print_header() -> None:
    print()
    print("=" * 60)
    print("  gatekeeper pre-commit check")
    print("=" * 60)
    print()


def print_findings(findings: list[SecurityFinding]) -> None:
    if not findings:
        return
    print()
    print("Security Findings:")
    print(RULE)
    for finding in findings:
        print(
            f"  {finding.severity} [{finding.pattern_name}] "
            f"{finding.file}:{finding.line_number} - {finding.matched_text}"
        )
    print(RULE)


def print_linter_results(results: list[LinterResult]) -> None:
    failures = [r for r in results if r.failed]
    if failures:
        print()
        print("Linting Failures:")
        print(RULE)
        for result in failures:
            print(f"  x {result.file} ({result.tool})")
            lines = result.output.splitlines()
            for line in lines[:MAX_OUTPUT_LINES]:
                print(f"    {line}")
            if len(lines) > MAX_OUTPUT_LINES:
                print(f"    ... {len(lines) - MAX_OUTPUT_LINES} more lines...")
        print(RULE)

    important = [r for r in results if r.is_important_skip]
    if important:
        print()
        print("Linter Warnings:")
        for result in important:
            print(f"  ! {result.skip_reason}")


def print_review(result: ReviewResult) -> None:
    print()
    print(f"AI Review: {'PASSED' if result.passed else 'REJECTED'}")
    print(RULE)
    for line in result.feedback.splitlines():
        print(f"  {line}" if line.strip() else "")
    print(RULE)


def print_status(summary: CheckSummary) -> None:
    """One status line per check."""
    counts = summary.count_by_severity()
    if summary.security_passed:
        print("  ok  Security scan passed")
    else:
        print(
            f"  x   Security scan found {len(summary.security_findings)} issue(s) "
            f"({counts[Severity.HIGH]} high, {counts[Severity.MEDIUM]} medium, "
            f"{counts[Severity.LOW]} low)"
        )

    checked = sum(1 for r in summary.linter_results if not r.skipped)
    failed = sum(1 for r in summary.linter_results if r.failed)
    if failed:
        print(f"  x   Linting failed ({failed}/{checked} files)")
    else:
        print(f"  ok  Linting passed ({checked} files checked)")

    if summary.ai_result is None:
        print(f"  !   {summary.ai_skip_reason or 'AI review skipped'}")
    elif summary.ai_result.passed:
        print("  ok  AI review passed")
    else:
        print("  x   AI review: changes rejected")


def print_summary(summary: CheckSummary) -> None:
    """Print the full report and the final verdict banner."""
    if summary.bypassed:
        print("Bypass token detected - skipping all checks")
        print("  This is a one-time bypass. Future commits will be checked.")
        print()
        return

    if summary.staged_count == 0:
        print("No staged files to check.")
        return

    print(f"  Found {summary.staged_count} staged file(s)")
    if summary.ignored_count:
        print(f"  -> {summary.ignored_count} file(s) ignored per config")
    print()
    print_status(summary)

    print_findings(summary.security_findings)
    print_linter_results(summary.linter_results)
    if summary.ai_result is not None and not summary.ai_result.passed:
        print_review(summary.ai_result)

    print()
    if summary.blocked:
        failed = [
            name
            for name, ok in (
                ("security", summary.security_passed),
                ("linting", summary.linting_passed),
                ("ai review", summary.ai_passed),
            )
            if not ok
        ]
        print("=" * 60)
        print(f"  COMMIT BLOCKED ({', '.join(failed)})")
        print("  Fix the issues above, or run:")
        print("  gatekeeper bypass  (emergency skip, use sparingly)")
        print("=" * 60)
    else:
        print("=" * 60)
        print("  ALL CHECKS PASSED")
        print("=" * 60)
    print()


__all__ = ["print_header", "print_summary"]
