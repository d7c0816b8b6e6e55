# Gatekeeper - Git commit gate
"""Pre-commit gatekeeper for Git repositories.

This package blocks a commit unless three independent checks pass:
- PatternScanner: leaked secrets in staged content
- LinterDispatcher: external linters on staged files
- AIReviewer: rate-limited AI review of the staged diff

CheckOrchestrator runs them concurrently and derives the gate decision.
BypassToken lets a single commit skip all checks.
"""

from gatekeeper.bypass import BypassToken
from gatekeeper.config import GatekeeperConfig, load_config
from gatekeeper.errors import GatekeeperError
from gatekeeper.models import CheckSummary, LinterResult, ReviewResult, SecurityFinding, Severity
from gatekeeper.orchestrator import CheckOrchestrator

__version__ = "0.1.0"

__all__ = [
    "BypassToken",
    "CheckOrchestrator",
    "CheckSummary",
    "GatekeeperConfig",
    "GatekeeperError",
    "LinterResult",
    "ReviewResult",
    "SecurityFinding",
    "Severity",
    "load_config",
]
