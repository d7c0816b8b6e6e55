"""One-shot bypass token.

The token is a marker file inside the git metadata directory. Its content
carries no meaning; only existence matters.

State machine:
    ABSENT --create()--> PRESENT --consume()--> ABSENT

There is no multi-use state. consume() performs a single unlink so that
detection and deletion cannot be separated: once it reports a token, the
token is gone.
"""

from __future__ import annotations

import logging
from pathlib import Path

from gatekeeper.errors import BypassIOError
from gatekeeper.git.snapshot import get_bypass_sentinel_path

logger = logging.getLogger(__name__)

SENTINEL_CONTENT = "BYPASS_TOKEN"


class BypassToken:
    """Filesystem-persisted single-use bypass flag."""

    def __init__(self, path: Path) -> None:
        self.path = path

    @classmethod
    def for_repo(cls, repo_root: Path) -> BypassToken:
        return cls(get_bypass_sentinel_path(repo_root))

    def is_present(self) -> bool:
        return self.path.exists()

    def create(self) -> None:
        """Create (or overwrite) the token.

        Raises:
            BypassIOError: If the sentinel cannot be written
        """
        try:
            self.path.write_text(SENTINEL_CONTENT, encoding="utf-8")
        except OSError as e:
            raise BypassIOError(f"Failed to create bypass sentinel file: {e}", self.path) from e
        logger.info("Bypass token created at %s", self.path)

    def consume(self) -> bool:
        """Delete the token if present.

        Returns:
            True if a token was consumed, False if none existed

        Raises:
            BypassIOError: If a token exists but cannot be deleted
        """
        try:
            self.path.unlink()
        except (FileNotFoundError, NotADirectoryError):
            # A parent that is a file (unresolved gitfile) cannot hold a token
            return False
        except OSError as e:
            raise BypassIOError(f"Failed to remove bypass sentinel file: {e}", self.path) from e
        logger.info("Bypass token consumed")
        return True


__all__ = ["BypassToken"]
