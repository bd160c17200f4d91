"""Decode a cleaned candidate and check required top-level keys.

Decoding is tried at most twice: the candidate as given, then once more
after the aggressive control-byte strip. There is no third attempt.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable

from .exceptions import MalformedAfterRepair, MissingRequiredField
from .sanitize import strip_stray_controls

logger = logging.getLogger("json-salvage")


def decode(candidate: str) -> Any:
    """Two-tier JSON decode. Raises MalformedAfterRepair when both tiers fail."""
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.debug("Strict decode failed (%s); retrying after control-byte strip", e)

    aggressive = strip_stray_controls(candidate)
    try:
        return json.loads(aggressive, strict=False)
    except json.JSONDecodeError as e:
        raise MalformedAfterRepair(f"JSON decode failed: {e}", position=e.pos) from e


def field_names(required_fields: Iterable[str] | str) -> tuple[str, ...]:
    """A bare string names one field, not one field per character."""
    if isinstance(required_fields, str):
        return (required_fields,)
    return tuple(required_fields)


def check_required(value: Any, required_fields: Iterable[str] | str) -> None:
    """Raise MissingRequiredField for the first absent top-level key."""
    for name in field_names(required_fields):
        if not isinstance(value, dict) or name not in value:
            raise MissingRequiredField(name)


def validate(candidate: str, required_fields: Iterable[str] | str = ()) -> Any:
    value = decode(candidate)
    check_required(value, required_fields)
    return value
