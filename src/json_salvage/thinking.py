"""Reasoning-segment extraction for step-marked chain-of-thought output.

Completions interleave prose like::

    【Step 1.2 执行中】
    思考过程：why this framing works...
    输出结果：medium shot

with the final JSON. The reasoning text is collected into a ``{"1_2": ...}``
map that the merger attaches to the parsed value under one optional field,
separate from the caller's required fields.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable

from .config import DEFAULT_CONFIG, MarkerConfig, SalvageConfig
from .exceptions import ConfigError, NoCandidateFound
from .locator import from_final_section, locate_candidate
from .models import ChainCompleteness, ChainOutput, ChainStats, ChainStep, ChainValidation
from .validator import field_names

logger = logging.getLogger("json-salvage")


def _marker_regex(markers: MarkerConfig, step_id: str = r"\d+\.\d+") -> str:
    return re.escape(markers.step_open) + f"({step_id})" + re.escape(markers.step_close)


def _stop(*labels: str) -> str:
    parts = [re.escape(label) for label in labels if label]
    return "(?=" + "|".join(parts + [r"\Z"]) + ")"


def _not_crossing(label: str) -> str:
    """Lazy gap that never runs past the next occurrence of ``label``."""
    return rf"(?:(?!{re.escape(label)})[\s\S])*?"


def _thinking_by_step(text: str, markers: MarkerConfig) -> dict[str, str]:
    pattern = re.compile(
        _marker_regex(markers)
        + _not_crossing(markers.step_open)
        + re.escape(markers.process_label)
        + r"\s*([\s\S]*?)"
        + _stop(markers.result_label, markers.step_open, markers.final_output)
    )
    return {m.group(1): m.group(2).strip() for m in pattern.finditer(text)}


def extract_thinking(text: str, config: SalvageConfig | None = None) -> dict[str, str]:
    """Map step id (``"1_2"``) to the reasoning written under its process label.

    Returns an empty dict when the text carries no step markers.
    """
    config = config or DEFAULT_CONFIG
    prefix = config.thinking.key_prefix
    return {
        f"{prefix}{step_id.replace('.', '_')}": thinking
        for step_id, thinking in _thinking_by_step(text, config.markers).items()
    }


def extract_step_thinking(
    text: str, step_id: str, config: SalvageConfig | None = None
) -> str:
    """Reasoning for a single step, or "" when that step has no complete section."""
    markers = (config or DEFAULT_CONFIG).markers
    pattern = re.compile(
        _marker_regex(markers, re.escape(step_id))
        + _not_crossing(markers.step_open)
        + re.escape(markers.process_label)
        + r"\s*([\s\S]*?)\s*"
        + re.escape(markers.result_label)
    )
    match = pattern.search(text)
    return match.group(2).strip() if match else ""


def merge_thinking(
    value: Any,
    thinking: dict[str, str],
    *,
    field: str = "thinking",
    required_fields: Iterable[str] | str = (),
) -> Any:
    """Return ``value`` with ``thinking`` attached under ``field``.

    An empty map leaves the value as it is rather than adding an empty field.
    Values that are not objects, or that already carry ``field``, are also
    returned unchanged.
    """
    if field in field_names(required_fields):
        raise ConfigError(f"Thinking field {field!r} collides with a required field")
    if not thinking:
        return value
    if not isinstance(value, dict):
        logger.debug(
            "Not attaching thinking to a %s value; expected an object",
            type(value).__name__,
        )
        return value
    if field in value:
        logger.warning("Value already has a %r key; thinking not attached", field)
        return value
    return {**value, field: dict(thinking)}


def format_chain_output(text: str, config: SalvageConfig | None = None) -> ChainOutput:
    """Split a chain-of-thought response into its steps and final JSON text."""
    config = config or DEFAULT_CONFIG
    markers = config.markers
    section = re.compile(
        _marker_regex(markers)
        + r"([\s\S]*?)"
        + _stop(markers.step_open, markers.final_output)
    )
    process = re.compile(
        re.escape(markers.process_label)
        + r"\s*([\s\S]*?)"
        + _stop(markers.result_label)
    )
    result = re.compile(re.escape(markers.result_label) + r"\s*([\s\S]*)\Z")

    steps = []
    for match in section.finditer(text):
        step_id, body = match.group(1), match.group(2)
        thinking_match = process.search(body)
        result_match = result.search(body)
        steps.append(
            ChainStep(
                id=step_id,
                title=f"Step {step_id}",
                thinking=thinking_match.group(1).strip() if thinking_match else "",
                result=result_match.group(1).strip() if result_match else "",
            )
        )

    final_json = from_final_section(text, markers)
    if final_json is None:
        try:
            final_json = locate_candidate(text, config)
        except NoCandidateFound:
            final_json = None
    return ChainOutput(steps=steps, final_json=final_json)


def chain_stats(text: str, config: SalvageConfig | None = None) -> ChainStats:
    markers = (config or DEFAULT_CONFIG).markers
    total = len(re.findall(_marker_regex(markers), text))
    thinking = _thinking_by_step(text, markers)
    return ChainStats(
        total_steps=total,
        completed_steps=len(thinking),
        thinking_length=sum(len(t) for t in thinking.values()),
        output_length=len(text),
    )


def is_chain_complete(
    text: str, expected_steps: Iterable[str], config: SalvageConfig | None = None
) -> ChainCompleteness:
    """Check that every expected step id (``"1.1"``) has a reasoning section."""
    completed = _thinking_by_step(text, (config or DEFAULT_CONFIG).markers)
    missing = [step for step in expected_steps if step not in completed]
    return ChainCompleteness(is_complete=not missing, missing_steps=missing)


def validate_chain_of_thought(
    text: str,
    expected_markers: list[str],
    stage_name: str = "",
    config: SalvageConfig | None = None,
) -> ChainValidation:
    """Check a response for its literal step markers and label counts."""
    markers = (config or DEFAULT_CONFIG).markers
    missing = [m for m in expected_markers if m not in text]
    warnings = []

    expected_labels = len(expected_markers) - 1
    process_count = text.count(markers.process_label)
    result_count = text.count(markers.result_label)
    if process_count < expected_labels:
        warnings.append(
            f"Too few process labels: expected {expected_labels}, found {process_count}"
        )
    if result_count < expected_labels:
        warnings.append(
            f"Too few result labels: expected {expected_labels}, found {result_count}"
        )

    report = ChainValidation(is_valid=not missing, missing_steps=missing, warnings=warnings)
    if missing or warnings:
        logger.warning(
            "[%s] chain-of-thought check: missing=%s warnings=%s length=%d",
            stage_name or "chain",
            missing,
            warnings,
            len(text),
        )
    return report


def detect_step_marker(text: str, config: SalvageConfig | None = None) -> str | None:
    """First step marker in a streaming prefix, else the final-output marker, else None."""
    markers = (config or DEFAULT_CONFIG).markers
    match = re.search(_marker_regex(markers), text)
    if match:
        return match.group(0)
    if markers.final_output and markers.final_output in text:
        return markers.final_output
    return None
