"""aiohttp-backed session and transcript sources.

Both sources share one ClientSession and the same fixed header set.
Every failure (transport, timeout, non-2xx, undecodable body) is turned
into a FetchResult carrying a FetchError; nothing is retried.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from urllib.parse import quote

import aiohttp

from transcript_harvest.engine.config import HarvestConfig
from transcript_harvest.engine.errors import FetchError

from ..models import FetchResult, Session
from .base import SessionLister, TranscriptClient

logger = logging.getLogger(__name__)


async def get_json(
    http: aiohttp.ClientSession,
    url: str,
    *,
    headers: dict[str, str],
    timeout: float,
) -> FetchResult[Any]:
    """GET *url* and decode its JSON body without raising."""
    try:
        async with http.get(
            url,
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=timeout),
        ) as resp:
            if not 200 <= resp.status < 300:
                return FetchResult.failure(
                    FetchError(url, resp.reason or "non-success response", status=resp.status)
                )
            data = await resp.json(content_type=None)
    except asyncio.TimeoutError:
        return FetchResult.failure(FetchError(url, f"timed out after {timeout}s"))
    except aiohttp.ClientError as exc:
        return FetchResult.failure(FetchError(url, str(exc) or type(exc).__name__))
    except ValueError as exc:
        return FetchResult.failure(FetchError(url, f"invalid JSON body: {exc}"))
    return FetchResult.success(data)


class HttpSessionLister(SessionLister):
    """Lists sessions with ``GET <base>``."""

    def __init__(
        self,
        http: aiohttp.ClientSession,
        base_url: str,
        *,
        headers: dict[str, str],
        timeout: float = 30.0,
    ) -> None:
        self._http = http
        self.url = base_url.rstrip("/")
        self._headers = dict(headers)
        self._timeout = timeout

    async def list_sessions(self) -> FetchResult[list[Session]]:
        result = await get_json(
            self._http, self.url, headers=self._headers, timeout=self._timeout,
        )
        if not result.ok:
            logger.error("Error fetching sessions: %s", result.error)
            return FetchResult.failure(result.error)

        records = result.value
        if not isinstance(records, list):
            error = FetchError(
                self.url, f"unexpected payload: expected a list, got {type(records).__name__}",
            )
            logger.error("Error fetching sessions: %s", error)
            return FetchResult.failure(error)

        sessions: list[Session] = []
        for idx, record in enumerate(records):
            if not isinstance(record, dict):
                logger.warning("Skipping session record %d: not an object", idx)
                continue
            session = Session.from_record(record)
            if session is None:
                logger.warning(
                    "Skipping session record %d (session ID %s): no transcript ID",
                    idx, record.get("sessionID"),
                )
                continue
            sessions.append(session)
        logger.debug("Listed %d sessions from %s", len(sessions), self.url)
        return FetchResult.success(sessions)


class HttpTranscriptClient(TranscriptClient):
    """Fetches transcripts with ``GET <base>/<transcript_id>``."""

    def __init__(
        self,
        http: aiohttp.ClientSession,
        base_url: str,
        *,
        headers: dict[str, str],
        timeout: float = 30.0,
    ) -> None:
        self._http = http
        self.base_url = base_url.rstrip("/")
        self._headers = dict(headers)
        self._timeout = timeout

    def transcript_url(self, transcript_id: str) -> str:
        return f"{self.base_url}/{quote(str(transcript_id), safe='')}"

    async def fetch_transcript(self, transcript_id: str) -> FetchResult[Any]:
        url = self.transcript_url(transcript_id)
        result = await get_json(
            self._http, url, headers=self._headers, timeout=self._timeout,
        )
        if result.ok and result.value is None:
            result = FetchResult.failure(FetchError(url, "empty response body"))
        if not result.ok:
            logger.error(
                "Error fetching transcript contents for transcript ID %s: %s",
                transcript_id, result.error,
            )
        return result


class TranscriptApi:
    """Owns the HTTP session shared by the lister and the transcript client.

    Usage:
        async with TranscriptApi.from_config(config) as api:
            runner = PipelineRunner(api.sessions, api.transcripts)
    """

    def __init__(
        self,
        base_url: str,
        *,
        headers: dict[str, str],
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url
        self._headers = dict(headers)
        self._timeout = timeout
        self._http: aiohttp.ClientSession | None = None
        self.sessions: HttpSessionLister | None = None
        self.transcripts: HttpTranscriptClient | None = None

    @classmethod
    def from_config(cls, config: HarvestConfig) -> TranscriptApi:
        return cls(
            config.base_url,
            headers=config.headers(),
            timeout=config.request_timeout_seconds,
        )

    async def __aenter__(self) -> TranscriptApi:
        self._http = aiohttp.ClientSession()
        self.sessions = HttpSessionLister(
            self._http, self.base_url, headers=self._headers, timeout=self._timeout,
        )
        self.transcripts = HttpTranscriptClient(
            self._http, self.base_url, headers=self._headers, timeout=self._timeout,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._http is not None:
            await self._http.close()
            self._http = None
