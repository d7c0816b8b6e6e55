# Gatekeeper - AI Reviewer
"""AI-assisted review of the staged diff.

Sends the staged diff to a chat-completion endpoint with a fixed
senior-reviewer instruction and derives a verdict from sentinel lines in
the answer.

Usage:
    reviewer = AIReviewer(config)
    result = await reviewer.review(diff)
    if not result.passed:
        print(result.feedback)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import httpx

from gatekeeper.config import GatekeeperConfig, get_settings
from gatekeeper.errors import ConfigurationError, ParseError, TransportError, UpstreamError
from gatekeeper.llm.rate_limiter import RateLimiter
from gatekeeper.models import ReviewResult

logger = logging.getLogger(__name__)

API_URL = "https://api.groq.com/openai/v1/chat/completions"
API_KEY_ENV = "GROQ_API_KEY"

MAX_DIFF_CHARS = 15_000
TEMPERATURE = 0.3
MAX_TOKENS = 1024
TIMEOUT_SECONDS = 60.0

PASS_SENTINEL = "RESULT: PASS"
REJECT_SENTINEL = "RESULT: REJECT"
SENTINEL_PREFIX = "RESULT:"

NO_CHANGES_FEEDBACK = "No changes to review."

REVIEW_PROMPT = """Act as a Senior Code Reviewer with expertise in security and best practices.

Analyze the following Git diff for:
1. Logic bugs or errors
2. Security vulnerabilities (SQL injection, XSS, auth issues, etc.)
3. Code smells (dead code, duplications, poor naming, etc.)
4. Performance issues
5. Best practice violations

IMPORTANT: Your response MUST start with exactly one of these lines:
- "RESULT: PASS" if the code is acceptable (may have minor suggestions)
- "RESULT: REJECT" if the code has critical issues that must be fixed

After the RESULT line, provide a brief explanation of your findings.

Here is the diff to review:

```diff
{diff}
```"""


def truncate_diff(diff: str, limit: int = MAX_DIFF_CHARS) -> str:
    """Keep the first `limit` characters and note how many were dropped."""
    if len(diff) <= limit:
        return diff
    omitted = len(diff) - limit
    return f"{diff[:limit]}\n\n... [diff truncated, {omitted} characters omitted] ..."


def build_prompt(diff: str) -> str:
    return REVIEW_PROMPT.replace("{diff}", truncate_diff(diff))


def parse_verdict(content: str) -> ReviewResult:
    """Derive a verdict from the model's answer.

    Passing requires the accept sentinel and no reject sentinel anywhere in
    the answer. Feedback is the text after the first RESULT line, or the
    whole answer when nothing follows it.
    """
    passed = PASS_SENTINEL in content and REJECT_SENTINEL not in content

    lines = content.splitlines()
    feedback = ""
    for index, line in enumerate(lines):
        if line.strip().startswith(SENTINEL_PREFIX):
            feedback = "\n".join(lines[index + 1 :]).strip()
            break

    return ReviewResult(
        passed=passed,
        feedback=feedback or content,
        raw_response=content,
    )


def _extract_content(data: Any) -> str:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise ParseError(f"Unexpected AI provider response shape: {e!r}") from e
    if not isinstance(content, str):
        raise ParseError("AI provider response content is not a string")
    return content


class AIReviewer:
    """Rate-limited reviewer making one HTTP call per review."""

    def __init__(
        self,
        config: GatekeeperConfig | None = None,
        api_key: str | None = None,
        rate_limiter: RateLimiter | None = None,
        timeout_seconds: float = TIMEOUT_SECONDS,
        env_file: Path | None = None,
    ) -> None:
        """Initialize the reviewer.

        Args:
            config: Gate configuration (model and rate limit)
            api_key: Provider credential; read from the environment if omitted
            rate_limiter: Limiter override, mainly for tests
            timeout_seconds: Ceiling for the whole HTTP call
            env_file: .env file holding the credential (default: cwd)
        """
        self.config = config or GatekeeperConfig()
        self._api_key = api_key
        self.rate_limiter = rate_limiter or RateLimiter(self.config.requests_per_minute)
        self.timeout_seconds = timeout_seconds
        self.env_file = env_file

    def _resolve_api_key(self) -> str:
        api_key = self._api_key or get_settings(self.env_file).groq_api_key
        if not api_key:
            raise ConfigurationError(
                f"{API_KEY_ENV} environment variable not set. Please add it to your .env file."
            )
        return api_key

    def _build_payload(self, diff: str) -> dict[str, Any]:
        return {
            "model": self.config.ai_model,
            "messages": [{"role": "user", "content": build_prompt(diff)}],
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
        }

    async def review(self, diff: str) -> ReviewResult:
        """Review a staged diff.

        Args:
            diff: Unified diff of all staged changes

        Returns:
            ReviewResult with the verdict and feedback

        Raises:
            ConfigurationError: If the credential is missing
            TransportError: On network failure or timeout
            UpstreamError: On a non-success HTTP status
            ParseError: If the response body has an unexpected shape
        """
        if not diff.strip():
            return ReviewResult(passed=True, feedback=NO_CHANGES_FEEDBACK, raw_response="")

        api_key = self._resolve_api_key()
        payload = self._build_payload(diff)

        await self.rate_limiter.acquire()

        logger.info("Requesting AI review from %s (%d diff chars)", self.config.ai_model, len(diff))
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(API_URL, headers=headers, json=payload)
        except httpx.TimeoutException as e:
            raise TransportError(f"AI provider timed out after {self.timeout_seconds:.0f}s") from e
        except httpx.RequestError as e:
            raise TransportError(f"Failed to connect to AI provider: {e}") from e

        if not response.is_success:
            raise UpstreamError(response.status_code, response.text)

        try:
            data = response.json()
        except ValueError as e:
            raise ParseError(f"Failed to parse AI provider response: {e}") from e

        result = parse_verdict(_extract_content(data))
        logger.info("AI review verdict: %s", "pass" if result.passed else "reject")
        return result


async def review_diff(diff: str, config: GatekeeperConfig) -> ReviewResult:
    """Review a diff with a reviewer built from config."""
    return await AIReviewer(config).review(diff)


__all__ = [
    "AIReviewer",
    "API_URL",
    "MAX_DIFF_CHARS",
    "NO_CHANGES_FEEDBACK",
    "PASS_SENTINEL",
    "REJECT_SENTINEL",
    "build_prompt",
    "parse_verdict",
    "review_diff",
    "truncate_diff",
]
