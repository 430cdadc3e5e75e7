"""CLI entry point for the transcript harvester.

Usage:
    transcript-harvest --base-url https://api.example.com/v2/transcripts/PROJECT
    transcript-harvest --config harvest.yaml --max-sessions 50 -o out.json
    python -m transcript_harvest -v
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from transcript_harvest.shared.services.transcript_export.models import (
    PipelineOutput,
    RunState,
)
from transcript_harvest.shared.services.transcript_export.sink import write_output
from transcript_harvest.shared.services.transcript_export.sources.http import (
    TranscriptApi,
)

from .config import HarvestConfig
from .errors import ConfigError, OutputError
from .runner import PipelineRunner
from .yaml_config import load_yaml_config

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="transcript-harvest",
        description=(
            "Fetch conversation transcripts from a remote service and "
            "save them as simplified Agent/User lines"
        ),
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="YAML config file (layered over HARVEST_* env vars)",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="Transcripts endpoint; sessions are listed from it directly",
    )
    parser.add_argument(
        "--api-key",
        default=None,
        help="Value of the Authorization header (default: HARVEST_API_KEY)",
    )
    parser.add_argument(
        "--max-sessions",
        type=int,
        default=None,
        help="Maximum number of sessions to process (default: 1000)",
    )
    parser.add_argument(
        "--max-failures",
        type=int,
        default=None,
        help="Consecutive fetch failures before stopping (default: 3)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: 30)",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Output JSON file (default: simplified_transcripts.json)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def resolve_config(args: argparse.Namespace) -> HarvestConfig:
    """Layer defaults, env vars, the YAML file and CLI flags, in that order."""
    config = HarvestConfig.from_env()
    if args.config:
        config = load_yaml_config(args.config, base=config)
    if args.base_url is not None:
        config.base_url = args.base_url
    if args.api_key is not None:
        config.api_key = args.api_key
    if args.max_sessions is not None:
        config.max_sessions = args.max_sessions
    if args.max_failures is not None:
        config.max_failures = args.max_failures
    if args.timeout is not None:
        config.request_timeout_seconds = args.timeout
    if args.output is not None:
        config.output_path = args.output
    config.validate()
    return config


async def harvest(config: HarvestConfig) -> PipelineOutput:
    """Run the pipeline against the configured remote service."""
    async with TranscriptApi.from_config(config) as api:
        runner = PipelineRunner(api.sessions, api.transcripts)
        return await runner.run(
            cap=config.max_sessions,
            failure_threshold=config.max_failures,
        )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = resolve_config(args)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    if not args.verbose:
        logging.getLogger().setLevel(config.log_level.upper())

    try:
        output = asyncio.run(harvest(config))
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 1

    if output.state is RunState.NO_SESSIONS:
        return 0

    try:
        path = write_output(config.output_path, output)
    except OutputError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Retrieved and simplified {len(output)} transcripts.")
    print(f"All simplified transcripts saved to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
