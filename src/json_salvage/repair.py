"""Truncation repair for the ``{"<key>": [ {...}, {...}, ... ]}`` shape.

When a stream is cut off mid-generation the bracket counts no longer match.
The repairer keeps every array element that was completely written, drops
the partial tail and re-closes the structure. It never invents content: if
no element was completed the text is handed back unchanged so validation
fails explicitly.
"""

from __future__ import annotations

import logging
import re
from typing import NamedTuple

from .scanner import StringStateScanner, count_brackets, open_containers, structural_mask

logger = logging.getLogger("json-salvage")

_CLOSE = {"{": "}", "[": "]"}


class RepairResult(NamedTuple):
    text: str
    attempted: bool
    repaired: bool


def needs_repair(text: str) -> bool:
    return not count_brackets(text).balanced


def _find_anchor(text: str, anchor_key: str) -> int | None:
    """Index just past the ``[`` that opens ``"<anchor_key>": [``, outside strings."""
    pattern = re.compile(r'"' + re.escape(anchor_key) + r'"\s*:\s*\[')
    mask = structural_mask(text)
    for match in pattern.finditer(text):
        # The opening quote of the key toggles into a string, so test the char before it.
        start = match.start()
        if start == 0 or mask[start - 1]:
            return match.end()
    return None


def _last_complete_element(content: str) -> int | None:
    """Offset after the last fully written object element of an array body."""
    scanner = StringStateScanner()
    last_end: int | None = None
    n = len(content)
    for i, char in enumerate(content):
        in_string, escaped = scanner.feed(char)
        if in_string or escaped:
            continue
        depth = scanner.state.depth
        if char == "}" and depth == 0:
            last_end = i + 1
            j = last_end
            while j < n and content[j].isspace():
                j += 1
            if j < n and content[j] in ",]":
                last_end = j + 1
        elif char == "]" and depth < 0:
            # anchor array closed
            break
    return last_end


def truncate_to_last_element(text: str, anchor_key: str) -> str | None:
    """Cut ``text`` after the last complete anchor-array element and close it.

    Returns None when the anchor is absent or no element was completed.
    """
    body_start = _find_anchor(text, anchor_key)
    if body_start is None:
        return None
    content = text[body_start:]
    cut = _last_complete_element(content)
    if cut is None:
        return None

    kept = content[:cut].rstrip()
    if kept.endswith(","):
        kept = kept[:-1].rstrip()
    if not kept.endswith("]"):
        kept += "]"

    # Containers opened before the anchor array, innermost last.
    prefix = text[:body_start]
    enclosing = open_containers(prefix)[:-1]
    closing = "".join(_CLOSE[c] for c in reversed(enclosing))
    return prefix + kept + closing


def repair_truncation(text: str, anchor_key: str | None) -> RepairResult:
    """Repair ``text`` if its brackets are unbalanced.

    The result's ``attempted`` flag records whether repair was needed;
    ``repaired`` whether it produced new text.
    """
    balance = count_brackets(text)
    if balance.balanced:
        return RepairResult(text, attempted=False, repaired=False)

    logger.warning(
        "Unbalanced brackets detected: {%d/%d, [%d/%d",
        balance.open_braces,
        balance.close_braces,
        balance.open_brackets,
        balance.close_brackets,
    )
    if not anchor_key:
        return RepairResult(text, attempted=True, repaired=False)

    fixed = truncate_to_last_element(text, anchor_key)
    if fixed is None:
        logger.warning("Truncation repair found no complete %r element", anchor_key)
        return RepairResult(text, attempted=True, repaired=False)

    logger.info("Truncated %r array to last complete element", anchor_key)
    return RepairResult(fixed, attempted=True, repaired=True)
