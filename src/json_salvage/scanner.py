"""String-literal aware character scanning.

Every component that counts structural characters (``{ } [ ] ,``) or rewrites
text outside of string values walks the input through ``StringStateScanner``
so that the same characters inside a quoted value are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, NamedTuple

OPENERS = "{["
CLOSERS = "}]"


@dataclass
class ScanState:
    in_string: bool = False
    escape_next: bool = False
    depth: int = 0


class ScannedChar(NamedTuple):
    index: int
    char: str
    in_string: bool  # True for the quotes delimiting a literal and everything between
    escaped: bool

    @property
    def structural(self) -> bool:
        return not self.in_string


class StringStateScanner:
    """Track whether each fed character belongs to a JSON string literal.

    A ``"`` toggles the in-string state unless it is escaped; a ``\\`` escapes
    exactly the character that follows it. ``depth`` counts unmatched ``{``
    and ``[`` seen outside of strings.
    """

    def __init__(self) -> None:
        self.state = ScanState()

    def feed(self, char: str) -> tuple[bool, bool]:
        """Advance by one character, returning ``(in_string, escaped)`` for it."""
        state = self.state
        if state.escape_next:
            state.escape_next = False
            return state.in_string, True
        if char == "\\":
            state.escape_next = True
            return state.in_string, False
        if char == '"':
            state.in_string = not state.in_string
            return True, False
        if not state.in_string:
            if char in OPENERS:
                state.depth += 1
            elif char in CLOSERS:
                state.depth -= 1
        return state.in_string, False


def scan(text: str) -> Iterator[ScannedChar]:
    """Yield every character of ``text`` with its string-literal state."""
    scanner = StringStateScanner()
    for index, char in enumerate(text):
        in_string, escaped = scanner.feed(char)
        yield ScannedChar(index, char, in_string, escaped)


class BracketBalance(NamedTuple):
    open_braces: int
    close_braces: int
    open_brackets: int
    close_brackets: int

    @property
    def balanced(self) -> bool:
        return (
            self.open_braces == self.close_braces
            and self.open_brackets == self.close_brackets
        )


def count_brackets(text: str) -> BracketBalance:
    """Count braces and brackets that occur outside string literals."""
    counts = {"{": 0, "}": 0, "[": 0, "]": 0}
    for sc in scan(text):
        if sc.structural and sc.char in counts:
            counts[sc.char] += 1
    return BracketBalance(counts["{"], counts["}"], counts["["], counts["]"])


def open_containers(text: str) -> list[str]:
    """Return the stack of ``{``/``[`` still unclosed at the end of ``text``."""
    stack: list[str] = []
    for sc in scan(text):
        if not sc.structural:
            continue
        if sc.char in OPENERS:
            stack.append(sc.char)
        elif sc.char in CLOSERS and stack:
            stack.pop()
    return stack


def structural_mask(text: str) -> list[bool]:
    """Per-index flag: True where the character sits outside any string literal."""
    return [sc.structural for sc in scan(text)]
