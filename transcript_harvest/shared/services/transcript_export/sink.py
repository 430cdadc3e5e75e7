"""JSON output sink for harvested transcripts.

The whole result sequence is written once, at the end of a run, as a
single JSON array:

    [
      {
        "sessionInfo": {"transcriptID": ..., "sessionID": ..., ...},
        "transcript": ["User: Started conversation", ...]
      }
    ]
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from transcript_harvest.engine.errors import OutputError

from .models import PipelineOutput, TranscriptResult

logger = logging.getLogger(__name__)


def dumps_output(output: PipelineOutput | list[TranscriptResult]) -> str:
    results = output.results if isinstance(output, PipelineOutput) else output
    return json.dumps(
        [result.to_dict() for result in results],
        indent=2,
        ensure_ascii=False,
    )


def loads_output(text: str) -> list[TranscriptResult]:
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError("output document must be a JSON array")
    return [TranscriptResult.from_dict(item) for item in data]


def write_output(path: str | Path, output: PipelineOutput | list[TranscriptResult]) -> Path:
    """Serialize *output* and atomically replace the file at *path*."""
    target = Path(path)
    try:
        _atomic_write_text(target, dumps_output(output) + "\n")
    except OSError as exc:
        raise OutputError(str(target), str(exc)) from exc
    logger.debug("Wrote %d transcripts to %s", _count(output), target)
    return target


def load_output(path: str | Path) -> list[TranscriptResult]:
    """Parse a previously written output document."""
    target = Path(path)
    try:
        text = target.read_text(encoding="utf-8")
    except OSError as exc:
        raise OutputError(str(target), str(exc)) from exc
    try:
        return loads_output(text)
    except (ValueError, KeyError, TypeError) as exc:
        raise OutputError(str(target), f"malformed output document: {exc}") from exc


def _count(output: PipelineOutput | list[TranscriptResult]) -> int:
    return len(output.results) if isinstance(output, PipelineOutput) else len(output)


def _atomic_write_text(path: Path, content: str) -> None:
    """Write via a sibling temp file, fsync it, then rename over *path*."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)
