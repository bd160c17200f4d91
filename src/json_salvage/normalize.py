"""Comment and trailing-comma removal.

Both rewrites skip string literals, so a ``//`` inside a URL value or a
``,]`` inside prose survives untouched.
"""

from __future__ import annotations

from .scanner import StringStateScanner, scan


def strip_comments(text: str) -> str:
    """Remove ``// line`` and ``/* block */`` comments outside string literals.

    Line comments keep their terminating newline. An unterminated block
    comment swallows the rest of the text.
    """
    out: list[str] = []
    scanner = StringStateScanner()
    i = 0
    n = len(text)
    while i < n:
        char = text[i]
        nxt = text[i + 1] if i + 1 < n else ""
        state = scanner.state
        if char == "/" and not state.in_string and not state.escape_next:
            if nxt == "/":
                end = text.find("\n", i + 2)
                i = n if end == -1 else end
                continue
            if nxt == "*":
                end = text.find("*/", i + 2)
                i = n if end == -1 else end + 2
                continue
        scanner.feed(char)
        out.append(char)
        i += 1
    return "".join(out)


def strip_trailing_commas(text: str) -> str:
    """Drop commas followed (ignoring whitespace) by ``]`` or ``}``."""
    out: list[str] = []
    n = len(text)
    for sc in scan(text):
        if sc.structural and sc.char == ",":
            j = sc.index + 1
            while j < n and text[j].isspace():
                j += 1
            if j < n and text[j] in "]}":
                continue
        out.append(sc.char)
    return "".join(out)


def normalize(text: str) -> str:
    return strip_trailing_commas(strip_comments(text))
