"""Transcript export: remote sources, turn normalization and the JSON sink."""

from .models import (
    FetchResult,
    PipelineOutput,
    RunState,
    Session,
    TranscriptResult,
    TurnKind,
)
from .normalize import normalize_transcript, normalize_turn
from .sink import load_output, write_output

__all__ = [
    "FetchResult",
    "PipelineOutput",
    "RunState",
    "Session",
    "TranscriptResult",
    "TurnKind",
    "load_output",
    "normalize_transcript",
    "normalize_turn",
    "write_output",
]
