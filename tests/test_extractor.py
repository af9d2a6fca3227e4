# tests/test_extractor.py
import json

import pytest

from lucidiq.errors import ExtractionError
from lucidiq.extractor import extract_structured, greedy_braces, strip_fences


def test_fenced_json():
    assert extract_structured('```json\n{"a":1}\n```') == {"a": 1}


def test_untagged_fence():
    assert extract_structured('```\n{"a": 1, "b": null}\n```') == {"a": 1, "b": None}


def test_plain_json_with_surrounding_whitespace():
    assert extract_structured('\n  {"verdict": "SKIP"}  \n') == {"verdict": "SKIP"}


def test_prose_around_object_uses_brace_fallback():
    raw = 'Sure! Here it is: {"a":1,"b":[1,2]} Thanks!'
    assert extract_structured(raw) == {"a": 1, "b": [1, 2]}


def test_prose_before_fence_uses_brace_fallback():
    raw = 'Here you go:\n```json\n{"product": {"name": "Kettle"}}\n```\nEnjoy.'
    assert extract_structured(raw) == {"product": {"name": "Kettle"}}


def test_uppercase_fence_tag_falls_back():
    assert extract_structured('```JSON\n{"a": 1}\n```') == {"a": 1}


def test_no_json_at_all():
    with pytest.raises(ExtractionError) as info:
        extract_structured("no json here")
    assert info.value.error == ExtractionError.NO_JSON


@pytest.mark.parametrize("raw", ["", None, "close } before open {"])
def test_no_brace_span(raw):
    with pytest.raises(ExtractionError) as info:
        extract_structured(raw)
    assert info.value.error == ExtractionError.NO_JSON


def test_trailing_open_brace_is_outside_the_span():
    # the last "}" comes before the stray "{", so the span is the first object
    assert extract_structured('{"a":1} trailing garbage {') == {"a": 1}


def test_greedy_span_over_captures_two_objects():
    # known limitation: first "{" to last "}" is not balanced matching
    with pytest.raises(ExtractionError) as info:
        extract_structured('first {"a": 1} then {"b": 2}')
    assert info.value.error == ExtractionError.UNPARSEABLE


def test_greedy_span_over_captures_trailing_brace_in_prose():
    with pytest.raises(ExtractionError):
        extract_structured('{"a": 1} (see note}')


def test_top_level_array_is_not_accepted_from_first_phase():
    with pytest.raises(ExtractionError):
        extract_structured("[1, 2, 3]")
    # the brace fallback still finds the object inside
    assert extract_structured('[{"a": 1}]') == {"a": 1}


def test_non_standard_constants_are_rejected():
    with pytest.raises(ExtractionError) as info:
        extract_structured('{"score": NaN}')
    assert info.value.error == ExtractionError.UNPARSEABLE


def test_fence_stripping_parses_stripped_text_not_raw():
    assert strip_fences('```json\n{"a": [1]}\n```') == {"a": [1]}
    with pytest.raises(ValueError):
        greedy_braces("nothing")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ('{"a": 1}', {"a": 1}),
        ('{"nested": {"list": [1, 2.5, null, true], "text": "a } b { c"}}',
         {"nested": {"list": [1, 2.5, None, True], "text": "a } b { c"}}),
        ('{"unicode": "Café ✓", "empty": {}}', {"unicode": "Café ✓", "empty": {}}),
        ('{"price": 1e400}', {"price": None}),
    ],
)
def test_reextracting_serialized_result_is_stable(raw, expected):
    first = extract_structured(raw)
    assert first == expected
    assert extract_structured(json.dumps(first)) == first
    assert extract_structured(f"```json\n{json.dumps(first, indent=2)}\n```") == first


def test_extra_strategy_runs_after_builtin_ones():
    def give_up(text):
        return {"raw": text}

    chain = [strip_fences, greedy_braces, give_up]
    assert extract_structured("no json here", strategies=chain) == {"raw": "no json here"}
    assert extract_structured('{"a": 1}', strategies=chain) == {"a": 1}


def test_out_of_range_numbers_read_as_null():
    result = extract_structured('Here: {"price": 1e400, "low": -1e400, "ok": 1.5e300}')
    assert result == {"price": None, "low": None, "ok": 1.5e300}
    assert "Infinity" not in json.dumps(result)


def test_leading_byte_order_mark_parses_in_first_phase():
    assert strip_fences('\ufeff```json\n{"a": 1}\n```\u3000') == {"a": 1}
