import pytest

from geoquery.api.outcome import ErrorKind
from geoquery.api.sanitizer import parse_structured, sanitize


@pytest.mark.parametrize(
    "raw, expected",
    [
        ('```json\n{"a": 1}\n```', '\n{"a": 1}\n'),
        ('```\n[1, 2]\n```', "\n[1, 2]\n"),
        ('```python\nprint(1)\n```', "\nprint(1)\n"),
        ('```json{"a": 1}```', '{"a": 1}'),
        ('Here you go:\n```json\n{}\n```\nThanks', "Here you go:\n\n{}\n\nThanks"),
    ],
)
def test_sanitize_strips_fences(raw, expected):
    assert sanitize(raw) == expected


def test_sanitize_leaves_plain_text_untouched():
    text = 'No fences here: {"query": "cafés in Montréal"}  \n'
    assert sanitize(text) == text


def test_sanitize_keeps_single_backticks():
    text = "use `json` and ``two`` ticks"
    assert sanitize(text) == text


def test_parse_structured_decodes_fenced_json():
    outcome = parse_structured('```json\n{"locations": []}\n```')
    assert outcome.ok
    assert outcome.value == {"locations": []}


def test_parse_structured_decodes_unfenced_json():
    outcome = parse_structured('{"requests": [{"query": "parks in Lyon", "limit": 2}]}')
    assert outcome.ok
    assert outcome.value["requests"][0] == {"query": "parks in Lyon", "limit": 2}


@pytest.mark.parametrize("raw", ["I cannot answer", "", "```json\n{\"a\": \n```", "{'single': 'quotes'}"])
def test_parse_structured_reports_malformed_response(raw):
    outcome = parse_structured(raw)
    assert not outcome.ok
    assert outcome.error.kind is ErrorKind.MALFORMED_RESPONSE
    assert outcome.error.raw == raw


def test_parse_structured_rejects_non_text():
    outcome = parse_structured(None)
    assert not outcome.ok
    assert outcome.error.kind is ErrorKind.MALFORMED_RESPONSE


def test_parse_structured_applies_schema():
    outcome = parse_structured('{"n": 2}', schema=lambda payload: payload["n"] * 10)
    assert outcome.ok
    assert outcome.value == 20


def test_parse_structured_schema_errors_become_malformed():
    outcome = parse_structured('{"n": 2}', schema=lambda payload: payload["missing"])
    assert not outcome.ok
    assert outcome.error.kind is ErrorKind.MALFORMED_RESPONSE
    assert outcome.error.raw == '{"n": 2}'


@pytest.mark.parametrize(
    "raw, expected",
    [
        ('{"a":1}```end\n', '{"a":1}end\n'),
        ('```\n{}\n```end\n', "\n{}\nend\n"),
        ('```json\n{}\n```\nnote: done', "\n{}\n\nnote: done"),
    ],
)
def test_sanitize_keeps_text_after_closing_fence(raw, expected):
    assert sanitize(raw) == expected
