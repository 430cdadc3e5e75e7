"""Configuration loaded from environment variables.

All settings except the base URL have sensible defaults. Override via
HARVEST_* env vars, a YAML file (see yaml_config.py) or CLI flags.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_PATH = "simplified_transcripts.json"

# Never echoed back in logs.
_SECRET_VARS = {"HARVEST_API_KEY"}


@dataclass
class HarvestConfig:
    """Transcript harvest configuration."""

    # Remote service
    base_url: str = ""
    api_key: str = ""
    # Per-request timeout; a timed out call counts as a failed fetch.
    request_timeout_seconds: float = 30.0

    # Pipeline bounds
    max_sessions: int = 1000
    # Consecutive transcript fetch failures before the run stops early.
    max_failures: int = 3

    # Output
    output_path: str = DEFAULT_OUTPUT_PATH

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> HarvestConfig:
        """Load configuration from HARVEST_* environment variables."""
        harvest_vars = sorted(
            k for k in os.environ if k.startswith("HARVEST_")
        )
        if harvest_vars:
            logger.info(
                "HarvestConfig.from_env: HARVEST_* env overrides: %s",
                ", ".join(
                    k if k in _SECRET_VARS else f"{k}={os.environ[k]}"
                    for k in harvest_vars
                ),
            )
        else:
            logger.debug("HarvestConfig.from_env: no HARVEST_* env vars set, using defaults")

        config = cls(
            base_url=os.getenv("HARVEST_BASE_URL", cls.base_url),
            api_key=os.getenv("HARVEST_API_KEY", cls.api_key),
            request_timeout_seconds=_env_number(
                "HARVEST_REQUEST_TIMEOUT", cls.request_timeout_seconds, float,
            ),
            max_sessions=_env_number(
                "HARVEST_MAX_SESSIONS", cls.max_sessions, int,
            ),
            max_failures=_env_number(
                "HARVEST_MAX_FAILURES", cls.max_failures, int,
            ),
            output_path=os.getenv("HARVEST_OUTPUT", cls.output_path),
            log_level=os.getenv("HARVEST_LOG_LEVEL", cls.log_level),
        )
        logger.debug(
            "HarvestConfig.from_env: base_url=%s max_sessions=%d max_failures=%d output=%s",
            config.base_url or "(unset)", config.max_sessions,
            config.max_failures, config.output_path,
        )
        return config

    def validate(self) -> None:
        """Raise ConfigError if the configuration cannot drive a run."""
        if not self.base_url or not self.base_url.strip():
            raise ConfigError("base_url", "a base endpoint URL is required")
        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigError("base_url", f"not an http(s) URL: {self.base_url}")
        if self.max_sessions < 1:
            raise ConfigError("max_sessions", "must be a positive integer")
        if self.max_failures < 1:
            raise ConfigError("max_failures", "must be a positive integer")
        if self.request_timeout_seconds <= 0:
            raise ConfigError("request_timeout_seconds", "must be greater than zero")
        if not self.output_path:
            raise ConfigError("output_path", "an output file path is required")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ConfigError("log_level", f"unknown level {self.log_level!r}")
        if not self.api_key:
            logger.warning("No API key configured; requests will be sent unauthenticated")

    def headers(self) -> dict[str, str]:
        """Fixed header set sent with every request."""
        return {
            "accept": "application/json",
            "Authorization": self.api_key,
        }


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(name, f"expected a number, got {raw!r}") from None
