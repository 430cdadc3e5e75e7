"""Transcript Harvest: fetch remote conversation transcripts as simplified Agent/User lines."""

__version__ = "0.1.0"
