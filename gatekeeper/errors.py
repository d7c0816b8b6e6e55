# gatekeeper/errors.py
"""Gatekeeper error types.

Only two of these abort a check run: a CollaboratorError while listing staged
files and a BypassIOError. Everything else is degraded by the caller into a
skipped or "no opinion" result.
"""


class GatekeeperError(Exception):
    """Base exception for gatekeeper errors."""
    pass


class CollaboratorError(GatekeeperError):
    """A git command failed or git is not available."""

    def __init__(self, message: str, command: list[str] | None = None, stderr: str = ""):
        super().__init__(message)
        self.command = command or []
        self.stderr = stderr


class ContentUnavailable(CollaboratorError):
    """Staged content of a file cannot be read as text (deleted or binary)."""

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class PatternCompileError(GatekeeperError):
    """A secret pattern is not a valid regular expression."""

    def __init__(self, message: str, name: str, pattern: str):
        super().__init__(message)
        self.name = name
        self.pattern = pattern


class ToolSpawnError(GatekeeperError):
    """An external linter could not be started at all."""

    def __init__(self, message: str, tool: str):
        super().__init__(message)
        self.tool = tool


class ConfigError(GatekeeperError):
    """The configuration file is malformed or fails validation."""

    def __init__(self, message: str, path=None):
        super().__init__(f"{message} ({path})" if path is not None else message)
        self.message = message
        self.path = path


class ReviewError(GatekeeperError):
    """Base exception for AI review failures."""
    pass


class ConfigurationError(ReviewError):
    """The AI provider credential is missing."""
    pass


class TransportError(ReviewError):
    """The AI provider could not be reached or timed out."""
    pass


class UpstreamError(ReviewError):
    """The AI provider answered with a non-success status."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"AI provider error ({status_code}): {body}")
        self.status_code = status_code
        self.body = body


class ParseError(ReviewError):
    """The AI provider response does not have the expected shape."""
    pass


class BypassIOError(GatekeeperError):
    """The bypass sentinel could not be created or deleted."""

    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path
