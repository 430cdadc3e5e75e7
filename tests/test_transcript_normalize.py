from __future__ import annotations

import copy
import json
from pathlib import Path

import pytest

from transcript_harvest.shared.services.transcript_export.models import TurnKind
from transcript_harvest.shared.services.transcript_export.normalize import (
    inner_field,
    normalize_transcript,
    normalize_turn,
    option_names,
    turn_kind,
)


FIXTURES_DIR = Path(__file__).parent / "fixtures" / "transcript_export"


def _load_fixture(name: str):
    return json.loads((FIXTURES_DIR / name).read_text(encoding="utf-8"))


def _choice(*names):
    return {"type": "choice", "payload": {"payload": {"buttons": [{"name": n} for n in names]}}}


def _request(request_type, **fields):
    return {"type": "request", "payload": {"type": request_type, "payload": dict(fields)}}


def test_fixture_transcript_is_flattened_in_order() -> None:
    lines = normalize_transcript(_load_fixture("transcript.json"))
    assert lines == [
        "User: Started conversation",
        "Agent: Hi! How can I help you today?",
        "Agent: Presented options: Track order, Returns, Talk to a person",
        'User: Selected "Track order"',
        "Agent: Sure, what is your order number?",
        "User: it's 4471-B",
        "User: when will it arrive",
        "Agent: Your order ships tomorrow.",
    ]


def test_each_turn_kind_renders_its_line() -> None:
    assert normalize_turn(_choice("Yes", "No")) == "Agent: Presented options: Yes, No"
    assert normalize_turn(
        {"type": "text", "payload": {"payload": {"message": "Hello"}}}
    ) == "Agent: Hello"
    assert normalize_turn(_request("intent", query="cancel my plan")) == "User: cancel my plan"
    assert normalize_turn(_request("intent", label="Billing")) == 'User: Selected "Billing"'
    assert normalize_turn(_request("launch")) == "User: Started conversation"
    assert normalize_turn(
        {"type": "intent", "payload": {"payload": {"query": "opening hours"}}}
    ) == "User: opening hours"


def test_query_takes_priority_over_label() -> None:
    turn = _request("intent", query="reset password", label="Account help")
    assert normalize_turn(turn) == "User: reset password"


def test_empty_query_falls_back_to_label() -> None:
    assert normalize_turn(_request("intent", query="", label="Account help")) == 'User: Selected "Account help"'


def test_choice_with_no_options_emits_nothing() -> None:
    assert normalize_turn(_choice()) is None
    assert normalize_transcript([_choice()]) == []


def test_choice_skips_buttons_without_names() -> None:
    turn = {
        "type": "choice",
        "payload": {"payload": {"buttons": [{"name": "A"}, {"request": {}}, "junk", {"name": ""}, {"name": "B"}]}},
    }
    assert option_names(turn) == ["A", "B"]
    assert normalize_turn(turn) == "Agent: Presented options: A, B"


def test_launch_ignores_inner_payload() -> None:
    assert normalize_turn({"type": "request", "payload": {"type": "launch"}}) == "User: Started conversation"


@pytest.mark.parametrize(
    "turn",
    [
        None,
        "text",
        42,
        [],
        {},
        {"type": "text"},
        {"type": "text", "payload": None},
        {"type": "text", "payload": {"payload": "flat string"}},
        {"type": "text", "payload": {"payload": {"message": 7}}},
        {"type": "choice", "payload": {"payload": {"buttons": "Yes, No"}}},
        {"type": "request"},
        {"type": "request", "payload": {"payload": {"query": "no sub-type"}}},
        {"type": "request", "payload": {"type": "intent"}},
        {"type": "request", "payload": {"type": "intent", "payload": {}}},
        {"type": "request", "payload": {"type": "no-reply", "payload": {"query": "x"}}},
        {"type": "intent", "payload": {"payload": {"label": "only a label"}}},
        {"type": "speak", "payload": {"payload": {"message": "unknown kind"}}},
        {"type": ["text"], "payload": {"payload": {"message": "unhashable tag"}}},
    ],
)
def test_malformed_or_unknown_turns_emit_nothing(turn) -> None:
    assert normalize_turn(turn) is None
    assert normalize_transcript([turn]) == []


@pytest.mark.parametrize("transcript", [None, {}, "turns", 0, {"turns": []}])
def test_non_list_transcript_yields_no_lines(transcript) -> None:
    assert normalize_transcript(transcript) == []


def test_output_is_ordered_subsequence_of_input() -> None:
    transcript = _load_fixture("transcript.json")
    rendered = [normalize_turn(turn) for turn in transcript]
    lines = normalize_transcript(transcript)

    assert len(lines) <= len(transcript)
    assert lines == [line for line in rendered if line is not None]


def test_normalize_does_not_mutate_input() -> None:
    transcript = _load_fixture("transcript.json")
    snapshot = copy.deepcopy(transcript)
    normalize_transcript(transcript)
    assert transcript == snapshot


def test_accessors_report_absence() -> None:
    assert turn_kind({"type": "choice"}) is TurnKind.PRESENTED_CHOICE
    assert turn_kind({"type": "unknown"}) is None
    assert turn_kind("choice") is None
    assert inner_field({"type": "text"}, "message") is None
    assert inner_field({"payload": {"payload": {"message": ""}}}, "message") is None
    assert option_names({"type": "choice", "payload": None}) == []
