"""Normalization of raw transcript turns into display lines.

Each turn is a JSON object with a ``type`` tag and a nested ``payload``.
Every accessor below returns None when a level is missing or has the
wrong shape, so a malformed turn simply yields no line.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .models import TurnKind

AGENT_PREFIX = "Agent:"
USER_PREFIX = "User:"


def as_mapping(value: Any) -> dict[str, Any] | None:
    return value if isinstance(value, dict) else None


def as_text(value: Any) -> str | None:
    """Return *value* if it is a non-empty string."""
    if isinstance(value, str) and value:
        return value
    return None


def turn_kind(turn: Any) -> TurnKind | None:
    record = as_mapping(turn)
    if record is None:
        return None
    try:
        return TurnKind(record.get("type"))
    except ValueError:
        return None


def outer_payload(turn: Any) -> dict[str, Any] | None:
    """``turn.payload``"""
    record = as_mapping(turn)
    if record is None:
        return None
    return as_mapping(record.get("payload"))


def inner_payload(turn: Any) -> dict[str, Any] | None:
    """``turn.payload.payload``"""
    outer = outer_payload(turn)
    if outer is None:
        return None
    return as_mapping(outer.get("payload"))


def inner_field(turn: Any, name: str) -> str | None:
    inner = inner_payload(turn)
    if inner is None:
        return None
    return as_text(inner.get(name))


def option_names(turn: Any) -> list[str]:
    """Names of the buttons offered by a choice turn, in order."""
    inner = inner_payload(turn)
    if inner is None:
        return []
    buttons = inner.get("buttons")
    if not isinstance(buttons, list):
        return []
    names: list[str] = []
    for button in buttons:
        button = as_mapping(button)
        if button is None:
            continue
        name = as_text(button.get("name"))
        if name is not None:
            names.append(name)
    return names


def _presented_choice(turn: Any) -> str | None:
    names = option_names(turn)
    if not names:
        return None
    return f"{AGENT_PREFIX} Presented options: {', '.join(names)}"


def _agent_message(turn: Any) -> str | None:
    message = inner_field(turn, "message")
    if message is None:
        return None
    return f"{AGENT_PREFIX} {message}"


def _user_request(turn: Any) -> str | None:
    outer = outer_payload(turn)
    if outer is None:
        return None
    request_type = outer.get("type")
    if request_type == "intent":
        # query wins when both are present
        query = inner_field(turn, "query")
        if query is not None:
            return f"{USER_PREFIX} {query}"
        label = inner_field(turn, "label")
        if label is not None:
            return f'{USER_PREFIX} Selected "{label}"'
        return None
    if request_type == "launch":
        return f"{USER_PREFIX} Started conversation"
    return None


def _user_intent(turn: Any) -> str | None:
    query = inner_field(turn, "query")
    if query is None:
        return None
    return f"{USER_PREFIX} {query}"


_HANDLERS: dict[TurnKind, Callable[[Any], str | None]] = {
    TurnKind.PRESENTED_CHOICE: _presented_choice,
    TurnKind.AGENT_MESSAGE: _agent_message,
    TurnKind.USER_REQUEST: _user_request,
    TurnKind.USER_INTENT: _user_intent,
}


def normalize_turn(turn: Any) -> str | None:
    """Render one turn as a display line, or None if it has nothing to show."""
    kind = turn_kind(turn)
    if kind is None:
        return None
    return _HANDLERS[kind](turn)


def normalize_transcript(transcript: Any) -> list[str]:
    """Flatten a raw transcript into ``Agent:``/``User:`` lines.

    Total over any input: a non-list transcript yields no lines, and
    turns that carry no recognizable content are dropped in place.
    """
    if not isinstance(transcript, list):
        return []
    lines: list[str] = []
    for turn in transcript:
        line = normalize_turn(turn)
        if line is not None:
            lines.append(line)
    return lines
