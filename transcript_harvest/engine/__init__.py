"""Transcript harvest engine: configuration, failure guard and run loop."""
from .config import HarvestConfig
from .errors import ConfigError, FetchError, HarvestError, OutputError
from .failure_guard import FailureGuard

__all__ = [
    # Config
    "HarvestConfig",
    "FailureGuard",
    # YAML config (lazy import)
    "load_yaml_config",
    # Runner (lazy import)
    "PipelineRunner",
    # Errors
    "ConfigError",
    "FetchError",
    "HarvestError",
    "OutputError",
]


def __getattr__(name: str):
    if name == "PipelineRunner":
        from .runner import PipelineRunner
        return PipelineRunner
    if name == "load_yaml_config":
        from .yaml_config import load_yaml_config
        return load_yaml_config
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
