# Gatekeeper - Configuration
"""Configuration for the commit gate.

Two sources are combined:
- gatekeeper.yaml at the repository root (ignored files, custom secret
  patterns, AI model, rate limit), validated into GatekeeperConfig
- Process settings from the environment or a .env file (AI credential)

Usage:
    from gatekeeper.config import load_config, get_settings

    config = load_config(Path("gatekeeper.yaml"))
    if config.should_ignore("Cargo.lock"):
        ...
    api_key = get_settings().groq_api_key
"""

from __future__ import annotations

import fnmatch
import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, PositiveInt, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from gatekeeper.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "gatekeeper.yaml"
ENV_FILENAME = ".env"
DEFAULT_AI_MODEL = "llama-3.3-70b-versatile"
DEFAULT_REQUESTS_PER_MINUTE = 30

EXAMPLE_CONFIG = f"""# gatekeeper configuration file

# Files to ignore during secret scanning and linting (supports * globs).
# The AI review always sees the full staged diff.
ignored_files:
  - "*.lock"
  - "*.min.js"
  - "*.min.css"
  - package-lock.json
  - yarn.lock

# Custom regex patterns for project-specific secrets,
# in addition to the built-in patterns
custom_patterns: []
#  - "MY_SECRET_[A-Z0-9]{{32}}"

# AI model to use for code review (Groq models)
ai_model: {DEFAULT_AI_MODEL}

# Rate limiting for AI API calls
rate_limit:
  requests_per_minute: {DEFAULT_REQUESTS_PER_MINUTE}
"""


class RateLimitConfig(BaseModel):
    """Rate limit for AI review calls."""

    model_config = ConfigDict(frozen=True)

    requests_per_minute: PositiveInt = DEFAULT_REQUESTS_PER_MINUTE


class GatekeeperConfig(BaseModel):
    """Validated contents of gatekeeper.yaml.

    Loaded once per invocation and read-only afterwards.
    """

    model_config = ConfigDict(frozen=True)

    ignored_files: tuple[str, ...] = ()
    custom_patterns: tuple[str, ...] = ()
    ai_model: str = DEFAULT_AI_MODEL
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)

    @property
    def requests_per_minute(self) -> int:
        return self.rate_limit.requests_per_minute

    def should_ignore(self, file_path: str) -> bool:
        """Check whether a staged path is excluded from scanning and linting.

        Patterns containing "*" are globs matched against the whole path
        ("*" also crosses directory separators). Other patterns match the
        path exactly or as a suffix.

        Globs are anchored at both ends: "*.min.js" does not match
        "app.min.js.map" and "test*" does not match "src/test_a.py"
        (write "*test*" for that).
        """
        for pattern in self.ignored_files:
            if "*" in pattern:
                if fnmatch.fnmatchcase(file_path, pattern):
                    return True
            elif file_path == pattern or file_path.endswith(pattern):
                return True
        return False


class Settings(BaseSettings):
    """Process settings read from the environment or .env."""

    model_config = SettingsConfigDict(env_file=ENV_FILENAME, extra="ignore")

    groq_api_key: str | None = None


def get_settings(env_file: Path | None = None) -> Settings:
    """Read settings fresh from the environment.

    Args:
        env_file: .env file to read (default: .env in the working directory)

    Returns:
        Settings instance
    """
    if env_file is None:
        return Settings()
    return Settings(_env_file=env_file)


def _format_validation_error(error: ValidationError) -> str:
    messages = []
    for item in error.errors():
        loc = ".".join(str(part) for part in item["loc"])
        messages.append(f"{loc}: {item['msg']}")
    return "; ".join(messages)


def load_config(path: Path) -> GatekeeperConfig:
    """Load gatekeeper.yaml into a validated config.

    Args:
        path: Path to the YAML file

    Returns:
        GatekeeperConfig, with defaults if the file does not exist

    Raises:
        ConfigError: If YAML parsing or validation fails
    """
    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
        return GatekeeperConfig()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML syntax error: {e}", path) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Top-level YAML value must be a mapping", path)

    try:
        return GatekeeperConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Validation failed: {_format_validation_error(e)}", path) from e


def load_config_or_default(path: Path) -> GatekeeperConfig:
    """Load the config, falling back to defaults when it is invalid."""
    try:
        return load_config(path)
    except ConfigError as e:
        logger.warning("Ignoring invalid configuration: %s", e)
        return GatekeeperConfig()


__all__ = [
    "CONFIG_FILENAME",
    "ENV_FILENAME",
    "EXAMPLE_CONFIG",
    "GatekeeperConfig",
    "RateLimitConfig",
    "Settings",
    "get_settings",
    "load_config",
    "load_config_or_default",
]
