"""Control-character cleanup for LLM-written JSON.

Models often write multi-line free text into string values without escaping
the newlines. ``escape_control_chars`` rewrites raw control characters found
inside string literals into JSON escapes and leaves structural whitespace
between tokens untouched.
"""

from __future__ import annotations

import re

from .scanner import scan

_SHORT_ESCAPES = {
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
}

# Everything in U+0000-U+001F except the three whitespace characters JSON allows between tokens.
_STRAY_CONTROL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def is_control(char: str) -> bool:
    return ord(char) < 0x20


def escape_control(char: str) -> str:
    """Canonical JSON escape for a single control character."""
    return _SHORT_ESCAPES.get(char) or f"\\u{ord(char):04x}"


def escape_control_chars(text: str) -> str:
    """Escape raw control characters that appear inside string literals.

    A control character right after a backslash (a line continuation such as
    ``"line\\<LF>next"``) becomes the matching escape, reusing that backslash.
    """
    out: list[str] = []
    for sc in scan(text):
        if sc.in_string and is_control(sc.char):
            escape = escape_control(sc.char)
            out.append(escape[1:] if sc.escaped else escape)
        else:
            out.append(sc.char)
    return "".join(out)


def strip_stray_controls(text: str) -> str:
    """Aggressive pass: drop every control byte other than \\n, \\r and \\t."""
    return _STRAY_CONTROL.sub("", text)
