"""Tests for the string-literal aware scanner."""

from json_salvage.scanner import (
    StringStateScanner,
    count_brackets,
    open_containers,
    scan,
    structural_mask,
)


class TestStringStateScanner:
    def test_quotes_toggle_string_state(self):
        states = [sc.in_string for sc in scan('a"b"c')]
        assert states == [False, True, True, True, False]

    def test_escaped_quote_does_not_close_string(self):
        text = r'"a\"b"'
        result = list(scan(text))
        # The escaped quote stays inside the literal
        assert result[3].char == '"'
        assert result[3].in_string
        assert result[3].escaped
        assert result[-1].in_string  # closing quote
        scanner = StringStateScanner()
        for ch in text:
            scanner.feed(ch)
        assert scanner.state.in_string is False

    def test_escaped_backslash_then_quote_closes(self):
        text = r'"a\\"x'
        result = list(scan(text))
        assert result[-1].char == "x"
        assert not result[-1].in_string

    def test_depth_ignores_brackets_in_strings(self):
        scanner = StringStateScanner()
        for ch in '{"a": "{[", "b": [1':
            scanner.feed(ch)
        assert scanner.state.depth == 2
        assert scanner.state.in_string is False

    def test_escape_applies_to_exactly_one_char(self):
        scanner = StringStateScanner()
        scanner.feed('"')
        scanner.feed("\\")
        assert scanner.state.escape_next is True
        assert scanner.feed("n") == (True, True)
        assert scanner.state.escape_next is False
        assert scanner.feed("x") == (True, False)


class TestBracketCounting:
    def test_balanced(self):
        assert count_brackets('{"a": [1, 2], "b": {}}').balanced

    def test_brackets_inside_strings_ignored(self):
        balance = count_brackets('{"text": "use { and [ freely"}')
        assert balance.balanced
        assert balance.open_braces == 1
        assert balance.open_brackets == 0

    def test_truncated_is_unbalanced(self):
        balance = count_brackets('{"shots":[{"a":1},{"a":2')
        assert not balance.balanced
        assert balance.open_braces == 3
        assert balance.close_braces == 1
        assert balance.open_brackets == 1
        assert balance.close_brackets == 0

    def test_open_containers_stack(self):
        assert open_containers('{"a": {"b": [1, {"c": 2}') == ["{", "{", "["]
        assert open_containers('{"a": 1}') == []

    def test_structural_mask(self):
        mask = structural_mask('{"k"}')
        assert mask == [True, False, False, False, True]
