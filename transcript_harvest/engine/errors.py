"""Exception hierarchy for the transcript harvest pipeline.

FetchError is the only recoverable kind: the HTTP sources return it
inside a FetchResult instead of raising it.
"""
from __future__ import annotations


class HarvestError(Exception):
    """Base exception for all harvest errors."""


class FetchError(HarvestError):
    """Transport failure or non-success response from the remote service."""
    def __init__(self, url: str, reason: str, status: int | None = None):
        self.url = url
        self.reason = reason
        self.status = status
        if status is not None:
            message = f"GET {url} failed with status {status}: {reason}"
        else:
            message = f"GET {url} failed: {reason}"
        super().__init__(message)


class ConfigError(HarvestError):
    """Configuration value is missing or invalid."""
    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid configuration for '{field}': {reason}")


class OutputError(HarvestError):
    """The output document could not be written or read back."""
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot access output file {path}: {reason}")
