"""Tests for two-tier decoding and required-field checks."""

import json

import pytest

from json_salvage.exceptions import (
    ErrorKind,
    MalformedAfterRepair,
    MissingRequiredField,
)
from json_salvage.validator import check_required, decode, validate


class TestDecode:
    @pytest.mark.parametrize(
        "value",
        [
            {"basicInfo": {"title": "x"}, "shots": [{"a": 1}]},
            [1, "two", {"three": None}],
            {"unicode": "镜头 🎬", "nested": {"deep": [True, False]}},
        ],
    )
    def test_round_trip(self, value):
        fields = list(value) if isinstance(value, dict) else []
        assert validate(json.dumps(value, ensure_ascii=False), fields) == value

    def test_aggressive_tier_strips_stray_controls(self):
        assert decode('{"a":\x00 1}') == {"a": 1}

    def test_aggressive_tier_accepts_raw_whitespace_in_strings(self):
        assert decode('{"a": "x\ty"}') == {"a": "x\ty"}

    def test_malformed_raises_with_position(self):
        with pytest.raises(MalformedAfterRepair) as exc:
            decode('{"a": 1 "b": 2}')
        assert exc.value.kind is ErrorKind.MALFORMED_AFTER_REPAIR
        assert exc.value.position == 8


class TestRequiredFields:
    def test_missing_field_reported_by_name(self):
        with pytest.raises(MissingRequiredField) as exc:
            validate('{"shots": []}', ["basicInfo"])
        assert exc.value.field == "basicInfo"
        assert exc.value.kind is ErrorKind.MISSING_REQUIRED_FIELD

    def test_string_names_one_field(self):
        assert validate('{"basicInfo": {}}', "basicInfo") == {"basicInfo": {}}
        with pytest.raises(MissingRequiredField) as exc:
            check_required({"shots": []}, "basicInfo")
        assert exc.value.field == "basicInfo"

    def test_first_missing_in_order(self):
        with pytest.raises(MissingRequiredField) as exc:
            check_required({"a": 1}, ["a", "b", "c"])
        assert exc.value.field == "b"

    def test_null_value_counts_as_present(self):
        assert validate('{"basicInfo": null}', ["basicInfo"]) == {"basicInfo": None}

    def test_non_object_with_required_fields(self):
        with pytest.raises(MissingRequiredField):
            validate("[1, 2]", ["shots"])

    def test_nested_key_is_not_top_level(self):
        with pytest.raises(MissingRequiredField):
            validate('{"data": {"basicInfo": {}}}', ["basicInfo"])
