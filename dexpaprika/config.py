"""
DexPaprika Client - Configuration.

============================================================
PURPOSE
============================================================
All configuration for the client.

CRITICAL CONSTRAINTS:
- Immutable once the client is built
- Bounded retries, capped backoff, no jitter
- Every override independently optional

============================================================
"""

import os
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

from dotenv import load_dotenv

from dexpaprika.exceptions import ConfigurationError


DEFAULT_BASE_URL = "https://api.dexpaprika.com"
DEFAULT_USER_AGENT = "DexPaprika-SDK-Python"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_WAIT_MIN_SECONDS = 1.0
DEFAULT_RETRY_WAIT_MAX_SECONDS = 5.0

ENV_PREFIX = "DEXPAPRIKA_"


# ============================================================
# RETRY CONFIGURATION
# ============================================================

@dataclass(frozen=True)
class RetryConfig:
    """
    Retry policy for a single logical call.

    max_retries=0 means exactly one attempt.
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    """Retries after the first attempt."""

    retry_wait_min_seconds: float = DEFAULT_RETRY_WAIT_MIN_SECONDS
    """Backoff before the first retry."""

    retry_wait_max_seconds: float = DEFAULT_RETRY_WAIT_MAX_SECONDS
    """Ceiling for any backoff."""

    def backoff_for(self, attempt: int) -> float:
        """Backoff in seconds before the given attempt (attempt >= 1)."""
        return compute_backoff(
            attempt,
            self.retry_wait_min_seconds,
            self.retry_wait_max_seconds,
        )

    def validate(self) -> list[str]:
        """Validate retry policy, return list of errors."""
        errors = []
        if self.max_retries < 0:
            errors.append("max_retries must be >= 0")
        if self.retry_wait_min_seconds < 0:
            errors.append("retry_wait_min_seconds must be >= 0")
        if self.retry_wait_max_seconds < 0:
            errors.append("retry_wait_max_seconds must be >= 0")
        if self.retry_wait_min_seconds > self.retry_wait_max_seconds:
            errors.append("retry_wait_min_seconds must not exceed retry_wait_max_seconds")
        return errors


def compute_backoff(attempt: int, wait_min: float, wait_max: float) -> float:
    """
    Exponential backoff with a hard ceiling.

    attempt k (k >= 1) waits min(wait_min * 2**(k-1), wait_max).
    """
    if attempt <= 0:
        return 0.0
    return min(wait_min * (2 ** (attempt - 1)), wait_max)


# ============================================================
# CLIENT CONFIGURATION
# ============================================================

@dataclass(frozen=True)
class ClientConfig:
    """
    Configuration for DexPaprikaClient.

    Read by every call, never mutated. Use with_overrides() to derive
    a changed copy.
    """

    base_url: str = DEFAULT_BASE_URL
    """API base address."""

    user_agent: str = DEFAULT_USER_AGENT
    """User-Agent header value."""

    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    """Transport timeout for a single attempt."""

    retry: RetryConfig = field(default_factory=RetryConfig)
    """Retry policy."""

    rate_limit_per_second: Optional[float] = None
    """Outbound requests per second, None for unbounded."""

    def with_overrides(self, **changes: Any) -> "ClientConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        try:
            parts = urlsplit(self.base_url)
        except ValueError as e:
            errors.append(f"base_url is not a valid URL: {e}")
        else:
            if parts.scheme not in ("http", "https") or not parts.netloc:
                errors.append(f"base_url must be an absolute http(s) URL, got {self.base_url!r}")

        if not self.user_agent:
            errors.append("user_agent must not be empty")
        if self.timeout_seconds <= 0:
            errors.append("timeout_seconds must be > 0")
        if self.rate_limit_per_second is not None and self.rate_limit_per_second <= 0:
            errors.append("rate_limit_per_second must be > 0 or None")

        errors.extend(self.retry.validate())
        return errors

    @classmethod
    def from_env(
        cls,
        prefix: str = ENV_PREFIX,
        load_dotenv_file: bool = True,
    ) -> "ClientConfig":
        """
        Load configuration from environment variables.

        Unset variables keep their defaults. A .env file in the working
        directory (or its parents) is loaded first; real environment
        variables take precedence over it.

        Args:
            prefix: Environment variable prefix
            load_dotenv_file: Whether to load a .env file first

        Returns:
            ClientConfig

        Raises:
            ConfigurationError: If a numeric variable is malformed
        """
        if load_dotenv_file:
            load_dotenv(override=False)

        retry = RetryConfig(
            max_retries=_env_value(prefix, "MAX_RETRIES", int, DEFAULT_MAX_RETRIES),
            retry_wait_min_seconds=_env_value(
                prefix, "RETRY_WAIT_MIN", float, DEFAULT_RETRY_WAIT_MIN_SECONDS
            ),
            retry_wait_max_seconds=_env_value(
                prefix, "RETRY_WAIT_MAX", float, DEFAULT_RETRY_WAIT_MAX_SECONDS
            ),
        )

        rate_limit = _env_value(prefix, "RATE_LIMIT", float, None)
        if not rate_limit:
            rate_limit = None

        return cls(
            base_url=os.getenv(f"{prefix}BASE_URL") or DEFAULT_BASE_URL,
            user_agent=os.getenv(f"{prefix}USER_AGENT") or DEFAULT_USER_AGENT,
            timeout_seconds=_env_value(prefix, "TIMEOUT_SECONDS", float, DEFAULT_TIMEOUT_SECONDS),
            retry=retry,
            rate_limit_per_second=rate_limit,
        )


def _env_value(
    prefix: str,
    name: str,
    convert: Callable[[str], Any],
    default: Any,
) -> Any:
    key = f"{prefix}{name}"
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return convert(raw.strip())
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid value for {key}: {raw!r}",
            config_key=key,
            original_error=e,
        ) from e
