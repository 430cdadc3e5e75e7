"""Canonical transcript export models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from transcript_harvest.engine.errors import FetchError

T = TypeVar("T")


class TurnKind(str, Enum):
    """Turn variants understood by the normalizer, keyed by wire ``type``."""
    PRESENTED_CHOICE = "choice"
    AGENT_MESSAGE = "text"
    USER_REQUEST = "request"
    USER_INTENT = "intent"


class RunState(str, Enum):
    """Terminal states of a pipeline run."""
    RUNNING = "running"
    COMPLETED = "completed"
    STOPPED_BY_FAILURE = "stopped_by_failure"
    NO_SESSIONS = "no_sessions"


@dataclass(frozen=True)
class Session:
    """One remote session record as listed by the service."""

    transcript_id: str
    session_id: str | None = None
    created_at: str | None = None
    browser: str | None = None
    os: str | None = None
    device: str | None = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Session | None:
        """Build a Session from a listing record; None if it has no ``_id``."""
        transcript_id = record.get("_id")
        if transcript_id is None or transcript_id == "":
            return None
        return cls(
            transcript_id=str(transcript_id),
            session_id=record.get("sessionID"),
            created_at=record.get("createdAt"),
            browser=record.get("browser"),
            os=record.get("os"),
            device=record.get("device"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "transcriptID": self.transcript_id,
            "sessionID": self.session_id,
            "createdAt": self.created_at,
            "browser": self.browser,
            "os": self.os,
            "device": self.device,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Session:
        return cls(
            transcript_id=data["transcriptID"],
            session_id=data.get("sessionID"),
            created_at=data.get("createdAt"),
            browser=data.get("browser"),
            os=data.get("os"),
            device=data.get("device"),
        )


@dataclass
class TranscriptResult:
    """A session's metadata paired with its normalized transcript lines."""

    session_info: Session
    transcript: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sessionInfo": self.session_info.to_dict(),
            "transcript": list(self.transcript),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TranscriptResult:
        return cls(
            session_info=Session.from_dict(data["sessionInfo"]),
            transcript=[str(line) for line in data.get("transcript", [])],
        )


@dataclass
class PipelineOutput:
    """Accumulated results of one run plus its bookkeeping.

    Only ``results`` is serialized by the output sink.
    """

    results: list[TranscriptResult] = field(default_factory=list)
    state: RunState = RunState.RUNNING
    total_sessions: int = 0
    attempted: int = 0
    failed: int = 0

    def __len__(self) -> int:
        return len(self.results)

    def to_list(self) -> list[dict[str, Any]]:
        return [result.to_dict() for result in self.results]


@dataclass
class FetchResult(Generic[T]):
    """Outcome of one remote call: a value on success, a FetchError otherwise."""

    value: T | None = None
    error: FetchError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> FetchResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: FetchError) -> FetchResult[T]:
        return cls(error=error)
