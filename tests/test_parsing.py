"""Tests for recovering JSON objects from model replies."""

import json

import pytest

from conftest import make_brief_data
from ugcb.errors import ParseError
from ugcb.models import Brief, normalize_scenes
from ugcb.parsing import SUMMARY_FALLBACK, find_json_block, parse_json_object, summary_or_fallback


def test_fenced_block_wins_over_trailing_prose():
    reply = (
        "Here is the updated brief:\n"
        "```json\n"
        '{"title": "Fenced", "scenes": []}\n'
        "```\n"
        "Let me know if you want {more} changes!"
    )
    assert parse_json_object(reply) == {"title": "Fenced", "scenes": []}


def test_fenced_block_wins_over_earlier_bare_object():
    reply = 'Old: {"title": "Bare"}\n```json\n{"title": "Fenced"}\n```'
    assert parse_json_object(reply) == {"title": "Fenced"}


def test_bare_object_is_recovered():
    assert parse_json_object('{"title": "Bare", "n": 1}') == {"title": "Bare", "n": 1}


def test_object_embedded_in_prose_is_recovered():
    reply = 'Sure! {"title": "Inline", "nested": {"a": [1, 2]}} Hope that helps.'
    assert parse_json_object(reply) == {"title": "Inline", "nested": {"a": [1, 2]}}


def test_braces_inside_strings_do_not_end_the_object():
    reply = 'Result: {"script": "Say } and { out loud", "ok": true} done'
    assert parse_json_object(reply) == {"script": "Say } and { out loud", "ok": True}


def test_plain_text_has_no_block():
    assert find_json_block("Happy to help! What product is this for?") is None
    assert parse_json_object("Happy to help! What product is this for?") is None


def test_malformed_candidate_is_a_parse_error_with_raw_text():
    reply = "```json\n{\"title\": \"Broken\",}\n```"
    with pytest.raises(ParseError) as exc_info:
        parse_json_object(reply)
    assert exc_info.value.raw_text == reply


def test_non_object_json_is_a_parse_error():
    with pytest.raises(ParseError):
        parse_json_object("```json\n[1, 2, 3]\n```")


def test_summary_is_used_when_present():
    assert summary_or_fallback({"summaryOfChanges": "Shortened scene 2."}) == "Shortened scene 2."


@pytest.mark.parametrize("data", [{}, {"summaryOfChanges": None}, {"summaryOfChanges": 3}])
def test_missing_summary_uses_fallback(data):
    assert summary_or_fallback(data) == SUMMARY_FALLBACK


def test_brief_survives_serialize_and_reparse():
    data = make_brief_data()
    brief = Brief(title=data["title"], language=data["language"], scenes=normalize_scenes(data["scenes"]))

    reply = "```json\n" + brief.to_json() + "\n```\nAnything else?"
    recovered = parse_json_object(reply)

    assert recovered == json.loads(json.dumps(data))
    again = Brief(
        title=recovered["title"],
        language=recovered["language"],
        scenes=normalize_scenes(recovered["scenes"]),
    )
    assert again == brief
