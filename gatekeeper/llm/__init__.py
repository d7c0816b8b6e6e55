# Gatekeeper - LLM Module
"""AI review support for the commit gate.

This module provides:
- AIReviewer: Rate-limited chat-completion reviewer for the staged diff
- RateLimiter: Suspending token-bucket limiter used by the reviewer
"""

from gatekeeper.llm.rate_limiter import RateLimiter
from gatekeeper.llm.reviewer import AIReviewer, parse_verdict, review_diff

__all__ = [
    "AIReviewer",
    "RateLimiter",
    "parse_verdict",
    "review_diff",
]
