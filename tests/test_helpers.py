"""Tests for model-output parsing helpers."""

import json

import pytest

from haven.utils.helpers import (
    clamp_percent,
    extract_json_array,
    extract_json_object,
    parse_json_response,
    strip_code_fences,
    to_int_seconds,
    vector_literal,
)


class TestModelOutput:
    def test_strip_fenced_json(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_plain_text_is_trimmed(self):
        assert strip_code_fences("  hi  ") == "hi"

    def test_parse_json_response_raises_on_prose(self):
        with pytest.raises(json.JSONDecodeError):
            parse_json_response("Sure! Here is your outline.")

    def test_extract_object_from_surrounding_text(self):
        assert extract_json_object('Here you go: {"title": "T", "sections": []} hope it helps') == {
            "title": "T",
            "sections": [],
        }

    def test_extract_object_without_braces(self):
        with pytest.raises(ValueError):
            extract_json_object("no json here")

    def test_extract_array(self):
        assert extract_json_array('Keywords: ["laptop", "office"]') == ["laptop", "office"]
        assert extract_json_array("[not, json]") is None
        assert extract_json_array("nothing") is None


class TestCoercion:
    @pytest.mark.parametrize("value,expected", [("12", 12), (7.6, 8), (None, 0), ("abc", 0), (float("inf"), 0), ("1e999", 0)])
    def test_to_int_seconds(self, value, expected):
        assert to_int_seconds(value) == expected

    def test_clamp_percent(self):
        assert clamp_percent(140) == 100
        assert clamp_percent(-3) == 0
        assert clamp_percent("55") == 55

    def test_vector_literal(self):
        assert vector_literal([0.5, -1.0, 2]) == "[0.5,-1.0,2]"
