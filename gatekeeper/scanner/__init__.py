"""Per-file checks: secret scanning and linter dispatch."""

from gatekeeper.scanner.linter import LINTERS, LinterDispatcher, LinterSpec
from gatekeeper.scanner.security import BUILTIN_PATTERNS, PatternScanner, scan_content

__all__ = [
    "BUILTIN_PATTERNS",
    "LINTERS",
    "LinterDispatcher",
    "LinterSpec",
    "PatternScanner",
    "scan_content",
]
