"""Tests for truncation repair."""

import json

from json_salvage.repair import (
    needs_repair,
    repair_truncation,
    truncate_to_last_element,
)


class TestTruncateToLastElement:
    def test_missing_closers_keeps_all_elements(self):
        text = '{"shots":[{"a":1},{"a":2},{"a":3}'
        assert truncate_to_last_element(text, "shots") == (
            '{"shots":[{"a":1},{"a":2},{"a":3}]}'
        )

    def test_cut_mid_object_keeps_complete_only(self):
        text = '{"shots":[{"a":1},{"a":2},{"a":3'
        assert truncate_to_last_element(text, "shots") == '{"shots":[{"a":1},{"a":2}]}'

    def test_cut_inside_string_with_braces(self):
        text = '{"shots": [\n  {"d": "x}"},\n  {"d": "open { brace'
        fixed = truncate_to_last_element(text, "shots")
        assert json.loads(fixed) == {"shots": [{"d": "x}"}]}

    def test_prefix_fields_preserved(self):
        text = '{"basicInfo": {"title": "T"}, "shots": [{"n": 1}, {"n": 2}, {"n"'
        fixed = truncate_to_last_element(text, "shots")
        assert json.loads(fixed) == {
            "basicInfo": {"title": "T"},
            "shots": [{"n": 1}, {"n": 2}],
        }

    def test_array_closed_but_outer_object_cut(self):
        text = '{"shots": [{"n": 1}], "meta": {"x": '
        assert json.loads(truncate_to_last_element(text, "shots")) == {
            "shots": [{"n": 1}]
        }

    def test_nested_anchor_closes_all_enclosing(self):
        text = '{"scene": {"shots": [{"n": 1}, {"n": 2'
        assert json.loads(truncate_to_last_element(text, "shots")) == {
            "scene": {"shots": [{"n": 1}]}
        }

    def test_anchor_inside_string_ignored(self):
        text = '{"note": "\\"shots\\": [", "shots": [{"n": 1}, {"n"'
        assert json.loads(truncate_to_last_element(text, "shots")) == {
            "note": '"shots": [',
            "shots": [{"n": 1}],
        }

    def test_nested_arrays_inside_elements(self):
        text = '{"shots": [{"tags": ["a", "b"]}, {"tags": [["x"]]}, {"tags": ["c"'
        assert json.loads(truncate_to_last_element(text, "shots")) == {
            "shots": [{"tags": ["a", "b"]}, {"tags": [["x"]]}]
        }

    def test_array_element_does_not_end_scan(self):
        text = '{"shots": [[1, 2], {"n": 1}, {"n"'
        assert json.loads(truncate_to_last_element(text, "shots")) == {
            "shots": [[1, 2], {"n": 1}]
        }

    def test_no_complete_element(self):
        assert truncate_to_last_element('{"shots":[{"a":1', "shots") is None

    def test_anchor_missing(self):
        assert truncate_to_last_element('{"items":[{"a":1},{"a"', "shots") is None


class TestRepairTruncation:
    def test_balanced_text_untouched(self):
        text = '{"shots": [{"a": 1}]}'
        result = repair_truncation(text, "shots")
        assert result.text == text
        assert not result.attempted
        assert not result.repaired
        assert not needs_repair(text)

    def test_repaired(self):
        result = repair_truncation('{"shots":[{"a":1},{"a":2', "shots")
        assert result.attempted
        assert result.repaired
        assert result.text == '{"shots":[{"a":1}]}'

    def test_failure_returns_original(self):
        text = '{"shots":[{"a":1'
        result = repair_truncation(text, "shots")
        assert result.attempted
        assert not result.repaired
        assert result.text == text

    def test_no_anchor_returns_original(self):
        text = '{"shots":[{"a":1},{"a":2'
        result = repair_truncation(text, None)
        assert result == (text, True, False)

    def test_custom_anchor(self):
        result = repair_truncation('{"frames":[{"a":1},{"a":2', "frames")
        assert result.text == '{"frames":[{"a":1}]}'
