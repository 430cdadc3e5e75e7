"""Base interfaces for remote session and transcript sources."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..models import FetchResult, Session


class SessionLister(ABC):
    """Lists the sessions available on the remote service."""

    @abstractmethod
    async def list_sessions(self) -> FetchResult[list[Session]]:
        """Fetch the full session list. Never raises FetchError."""


class TranscriptClient(ABC):
    """Fetches the raw turn records of one session."""

    @abstractmethod
    async def fetch_transcript(self, transcript_id: str) -> FetchResult[Any]:
        """Fetch one raw transcript. Never raises FetchError."""
