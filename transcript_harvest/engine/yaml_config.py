"""YAML configuration loader.

Loads a single YAML file layered on top of the HARVEST_* env vars.
When no YAML is provided, env vars and CLI flags work on their own.

Example YAML:
    api:
      base_url: https://api.example.com/v2/transcripts/PROJECT_ID
      api_key_env: TRANSCRIPTS_API_KEY   # or api_key: "..."

    pipeline:
      max_sessions: 500
      max_failures: 3
      request_timeout_seconds: 20

    output:
      path: exports/simplified_transcripts.json

    logging:
      level: DEBUG
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from .config import HarvestConfig
from .errors import ConfigError

logger = logging.getLogger(__name__)


def load_yaml_config(path: str | Path, base: HarvestConfig | None = None) -> HarvestConfig:
    """Load a YAML config file and apply it over *base* (env by default).

    Sections that are absent leave the corresponding fields untouched.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.error(
            "load_yaml_config: config file not found at %s (absolute path: %s)",
            path, path.absolute(),
        )
        raise ConfigError("config", f"file not found: {path}") from None
    except yaml.YAMLError as exc:
        logger.error("load_yaml_config: YAML parse error in %s: %s", path, exc)
        raise ConfigError("config", f"YAML parse error in {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError("config", f"top level of {path} must be a mapping")

    logger.info(
        "Parsed YAML config %s, sections: %s",
        path.name, ", ".join(sorted(raw)) if raw else "(empty)",
    )

    config = base if base is not None else HarvestConfig.from_env()

    api_raw = _section(raw, "api")
    if "base_url" in api_raw:
        config.base_url = str(api_raw["base_url"] or "")
    if api_raw.get("api_key_env"):
        env_name = str(api_raw["api_key_env"])
        key = os.getenv(env_name)
        if key is None:
            raise ConfigError("api.api_key_env", f"environment variable {env_name} is not set")
        config.api_key = key
    elif "api_key" in api_raw:
        config.api_key = str(api_raw["api_key"] or "")

    pipeline_raw = _section(raw, "pipeline")
    if "max_sessions" in pipeline_raw:
        config.max_sessions = _number(pipeline_raw, "max_sessions", int, "pipeline")
    if "max_failures" in pipeline_raw:
        config.max_failures = _number(pipeline_raw, "max_failures", int, "pipeline")
    if "request_timeout_seconds" in pipeline_raw:
        config.request_timeout_seconds = _number(
            pipeline_raw, "request_timeout_seconds", float, "pipeline",
        )

    output_raw = _section(raw, "output")
    if output_raw.get("path"):
        config.output_path = str(output_raw["path"])

    logging_raw = _section(raw, "logging")
    if logging_raw.get("level"):
        config.log_level = str(logging_raw["level"]).upper()

    return config


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    value = raw.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(name, "section must be a mapping")
    return value


def _number(section: dict[str, Any], key: str, cast, prefix: str):
    value = section[key]
    # bool is an int subclass; `max_failures: yes` is a typo, not 1.
    if isinstance(value, bool):
        raise ConfigError(f"{prefix}.{key}", f"expected a number, got {value!r}")
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{prefix}.{key}", f"expected a number, got {value!r}") from None
