import json

import pytest

from portfolio_mcp.portfolio.normalizer import (
    UnparsableAIResponse,
    extract_json_candidate,
    normalize_ai_response,
    repair_json,
    scrape_markdown,
)

SAMPLE = {
    "summary": "Balanced growth",
    "tags": ["core", "income"],
    "suggestions": [
        {"ticker": "VTI", "allocation": 60.5, "ok": True},
        {"ticker": "BND", "allocation": -39.5, "note": None},
    ],
}

MARKDOWN_ANSWER = """## Summary
Your portfolio is **overweight** technology.

## Recommendations
- Trim VGT
- Add **BND**

| Asset | Current % | Target % | Action |
|---|---|---|---|
| VGT | 35% | 25% | Reduce |
| BND | n/a | 20.5% | Increase |
"""


def test_well_formed_fenced_json_matches_strict_parse() -> None:
    body = json.dumps(SAMPLE)
    text = f"Here is the allocation:\n```json\n{body}\n```\nLet me know if you need more."
    assert normalize_ai_response(text) == json.loads(body)


def test_fence_wins_over_braces_in_prose() -> None:
    text = 'Use {placeholders} carefully.\n```json\n{"a": 1}\n```'
    assert normalize_ai_response(text) == {"a": 1}


def test_brace_substring_without_fence() -> None:
    assert normalize_ai_response('Sure! {"summary": "ok"} Hope that helps.') == {"summary": "ok"}


def test_bare_array_without_fence_keeps_its_shape() -> None:
    one = '[{"ticker": "VTI", "allocation": 100}]'
    assert normalize_ai_response(one) == [{"ticker": "VTI", "allocation": 100}]

    two = 'Suggested mix: [{"ticker": "VTI", "allocation": 60}, {"ticker": "BND", "allocation": 40}] Enjoy.'
    assert normalize_ai_response(two) == [
        {"ticker": "VTI", "allocation": 60},
        {"ticker": "BND", "allocation": 40},
    ]


def test_truncated_bare_array_is_repaired_as_array() -> None:
    text = '[{"ticker": "VTI", "allocation": 60}, {"ticker": "BND", "allo'
    assert normalize_ai_response(text)[0] == {"ticker": "VTI", "allocation": 60}


def test_link_brackets_before_object_do_not_hide_it() -> None:
    text = 'See [the docs](https://example.com) first. {"summary": "ok"}'
    assert extract_json_candidate(text) == '{"summary": "ok"}'
    assert normalize_ai_response(text) == {"summary": "ok"}


def test_missing_closing_bracket_is_repaired() -> None:
    assert normalize_ai_response('```json\n{"a":1,"b":[2,3}\n```') == {"a": 1, "b": [2, 3]}


def test_unterminated_fence_and_string_are_repaired() -> None:
    text = '```json\n{"summary": "ok", "recommendations": ["a", "b'
    assert normalize_ai_response(text) == {"summary": "ok", "recommendations": ["a", "b"]}


def test_missing_comma_between_objects_is_repaired() -> None:
    assert normalize_ai_response('{"rows": [{"a": 1}{"b": 2}]}') == {"rows": [{"a": 1}, {"b": 2}]}


def test_trailing_commas_are_removed() -> None:
    assert normalize_ai_response('{"a": [1, 2,], }') == {"a": [1, 2]}


def test_every_truncation_of_a_valid_object_becomes_parseable() -> None:
    text = json.dumps(SAMPLE)
    for cut in range(1, len(text)):
        candidate = extract_json_candidate(text[:cut])
        assert candidate, cut
        repaired = list(repair_json(candidate))[-1]
        parsed = json.loads(repaired)
        assert isinstance(parsed, dict), (cut, repaired)


def test_truncated_answer_keeps_complete_fields() -> None:
    text = json.dumps(SAMPLE)
    cut = text.index('"note"')
    parsed = normalize_ai_response(text[:cut])
    assert parsed["summary"] == "Balanced growth"
    assert parsed["suggestions"][0]["ticker"] == "VTI"
    assert parsed["suggestions"][1]["allocation"] == -39.5


def test_markdown_scrape_extracts_summary_recommendations_and_table() -> None:
    scraped = scrape_markdown(MARKDOWN_ANSWER)

    assert scraped["summary"] == "Your portfolio is overweight technology."
    assert scraped["recommendations"] == ["Trim VGT", "Add BND"]
    assert scraped["current_vs_target"] == [
        {"ticker": "VGT", "current": 35.0, "target": 25.0, "action": "Reduce"},
        {"ticker": "BND", "current": 0.0, "target": 20.5, "action": "Increase"},
    ]
    assert normalize_ai_response(MARKDOWN_ANSWER) == scraped


def test_plain_text_without_markers_is_not_scraped() -> None:
    assert scrape_markdown("Just a sentence without structure.") == {}


@pytest.mark.parametrize("text", ["", "   ", "I cannot help with that.", "```json\n{}\n```"])
def test_unparsable_answers_raise(text: str) -> None:
    with pytest.raises(UnparsableAIResponse):
        normalize_ai_response(text)


def test_normalizer_is_deterministic() -> None:
    text = '```json\n{"a": [1, {"b": 2'
    assert normalize_ai_response(text) == normalize_ai_response(text) == {"a": [1, {"b": 2}]}
