"""End-to-end extraction: raw completion text -> validated value.

    locate -> strip comments/trailing commas -> escape control chars
           -> truncation repair (only if unbalanced) -> validate

Every call re-derives its result from the input text alone, so it is safe to
call concurrently and repeatedly on a growing stream prefix.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from .config import DEFAULT_CONFIG, SalvageConfig
from .exceptions import ConfigError, MalformedAfterRepair, UnbalancedAfterRepair
from .locator import locate
from .normalize import normalize
from .repair import repair_truncation
from .sanitize import escape_control_chars
from .thinking import extract_thinking, merge_thinking
from .validator import field_names, validate

logger = logging.getLogger("json-salvage")

_UNSET: Any = object()


def clean_candidate(candidate: str) -> str:
    return escape_control_chars(normalize(candidate))


def extract_json(
    text: str,
    required_fields: Iterable[str] | str = (),
    *,
    anchor_key: str | None = _UNSET,
    config: SalvageConfig | None = None,
) -> Any:
    """Recover one JSON value from ``text`` that carries every required key.

    ``anchor_key`` names the array the truncation repair anchors on; it
    defaults to ``config.repair.anchor_key`` and ``None`` disables repair.

    Raises NoCandidateFound, UnbalancedAfterRepair, MalformedAfterRepair or
    MissingRequiredField.
    """
    config = config or DEFAULT_CONFIG
    if anchor_key is _UNSET:
        anchor_key = config.repair.anchor_key
    if not config.repair.enabled:
        anchor_key = None

    located = locate(text, config)
    cleaned = clean_candidate(located.candidate)
    repair = repair_truncation(cleaned, anchor_key)

    try:
        return validate(repair.text, field_names(required_fields))
    except MalformedAfterRepair as e:
        if repair.attempted and not repair.repaired:
            raise UnbalancedAfterRepair(
                f"Unbalanced brackets and no complete {anchor_key!r} element to keep",
                position=e.position,
            ) from e
        raise


def merge_thinking_and_result(
    text: str,
    required_fields: Iterable[str] | str = (),
    *,
    anchor_key: str | None = _UNSET,
    config: SalvageConfig | None = None,
) -> Any:
    """Extract the JSON value and attach the step reasoning found in ``text``."""
    config = config or DEFAULT_CONFIG
    required = field_names(required_fields)
    if config.thinking.field in required:
        raise ConfigError(
            f"Thinking field {config.thinking.field!r} collides with a required field"
        )
    value = extract_json(text, required, anchor_key=anchor_key, config=config)
    thinking = extract_thinking(text, config)
    if thinking:
        logger.debug("Attaching %d thinking segments", len(thinking))
    return merge_thinking(
        value, thinking, field=config.thinking.field, required_fields=required
    )
