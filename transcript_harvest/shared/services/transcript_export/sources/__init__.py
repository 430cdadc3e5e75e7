"""Remote sources for session listings and transcripts."""

from .base import SessionLister, TranscriptClient
from .http import HttpSessionLister, HttpTranscriptClient, TranscriptApi

__all__ = [
    "SessionLister",
    "TranscriptClient",
    "HttpSessionLister",
    "HttpTranscriptClient",
    "TranscriptApi",
]
