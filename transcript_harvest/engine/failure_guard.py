"""Consecutive-failure guard for the transcript fetch loop."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class FailureGuard:
    """Counts back-to-back failures and trips once max_failures is reached.

    Owned by a single pipeline run; a success anywhere resets the streak.
    """

    max_failures: int = 3
    consecutive_failures: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.max_failures, bool) or not isinstance(self.max_failures, int):
            raise ValueError(f"max_failures must be an int, got {self.max_failures!r}")
        if self.max_failures < 1:
            raise ValueError(f"max_failures must be positive, got {self.max_failures}")

    @property
    def tripped(self) -> bool:
        return self.consecutive_failures >= self.max_failures

    def on_success(self) -> None:
        self.consecutive_failures = 0

    def on_failure(self) -> bool:
        """Record a failure; return True if the threshold is now reached."""
        self.consecutive_failures += 1
        return self.tripped

    def reset(self) -> None:
        self.consecutive_failures = 0
