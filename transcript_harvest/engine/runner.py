"""Sequential, failure-aware transcript harvest loop.

The runner lists sessions, keeps the first ``cap`` of them and fetches
their transcripts one at a time. Each fetched transcript is normalized
and paired with its session metadata. ``failure_threshold`` consecutive
fetch failures stop the run early: sustained failure of the transcript
endpoint is treated as systemic. A partial result is returned exactly
like a complete one.
"""
from __future__ import annotations

import logging

from transcript_harvest.shared.services.transcript_export.models import (
    PipelineOutput,
    RunState,
    TranscriptResult,
)
from transcript_harvest.shared.services.transcript_export.normalize import (
    normalize_transcript,
)
from transcript_harvest.shared.services.transcript_export.sources.base import (
    SessionLister,
    TranscriptClient,
)

from .failure_guard import FailureGuard

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 1000
DEFAULT_MAX_FAILURES = 3


def _require_positive(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")


class PipelineRunner:
    """Drives one harvest run over a session lister and transcript client."""

    def __init__(self, lister: SessionLister, client: TranscriptClient) -> None:
        self._lister = lister
        self._client = client

    async def run(
        self,
        cap: int = DEFAULT_MAX_SESSIONS,
        failure_threshold: int = DEFAULT_MAX_FAILURES,
    ) -> PipelineOutput:
        _require_positive("cap", cap)
        guard = FailureGuard(max_failures=failure_threshold)
        output = PipelineOutput()

        logger.info("Fetching sessions...")
        listed = await self._lister.list_sessions()
        all_sessions = listed.value if listed.ok else None
        if not all_sessions:
            logger.info("No sessions found or error occurred.")
            output.state = RunState.NO_SESSIONS
            return output

        sessions = all_sessions[:cap]
        output.total_sessions = len(all_sessions)
        logger.info(
            "Found %d sessions. Processing %d sessions.",
            len(all_sessions), len(sessions),
        )

        for session in sessions:
            logger.info(
                "Fetching transcript for session ID: %s (Transcript ID: %s)",
                session.session_id, session.transcript_id,
            )
            output.attempted += 1
            fetched = await self._client.fetch_transcript(session.transcript_id)

            if fetched.ok:
                output.results.append(
                    TranscriptResult(
                        session_info=session,
                        transcript=normalize_transcript(fetched.value),
                    )
                )
                guard.on_success()
                logger.info(
                    "Successfully fetched and simplified transcript for session ID: %s",
                    session.session_id,
                )
                continue

            output.failed += 1
            logger.warning(
                "Failed to fetch transcript for session ID: %s", session.session_id,
            )
            if guard.on_failure():
                logger.info(
                    "Stopping due to %d consecutive failures.", guard.max_failures,
                )
                output.state = RunState.STOPPED_BY_FAILURE
                break
        else:
            output.state = RunState.COMPLETED

        logger.info("Retrieved and simplified %d transcripts.", len(output.results))
        return output
