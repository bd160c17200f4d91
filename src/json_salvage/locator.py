"""Candidate location: find the substring most likely to be the JSON payload.

Strategies are tried in ``STRATEGIES`` order and the first one that yields a
candidate wins. Strategies 2-4 keep the last match, since completions are
append-only and later text supersedes earlier drafts.

  1. ```json fence inside the final-output section
  2. last ```json fence anywhere
  3. last unlabeled fence whose content starts with { or [
  4. last greedy {...} span
"""

from __future__ import annotations

import logging
import re
from typing import Callable, NamedTuple

from .config import DEFAULT_CONFIG, MarkerConfig, SalvageConfig
from .exceptions import NoCandidateFound

logger = logging.getLogger("json-salvage")

# A trailing fence may be missing when the stream was cut off inside the block.
_JSON_FENCE = re.compile(r"```json\s*([\s\S]*?)\s*(?:```|\Z)", re.IGNORECASE)
_PLAIN_FENCE = re.compile(r"```\s*([\s\S]*?)\s*```")
_GREEDY_OBJECT = re.compile(r"\{[\s\S]*\}")


def _starts_like_json(content: str) -> bool:
    return content.startswith(("{", "["))


def from_final_section(text: str, markers: MarkerConfig) -> str | None:
    """Fenced json block following the final-output marker."""
    if not markers.final_output:
        return None
    idx = text.find(markers.final_output)
    if idx == -1:
        return None
    match = _JSON_FENCE.search(text, idx + len(markers.final_output))
    if match is None:
        return None
    return match.group(1).strip()


def from_last_json_fence(text: str, markers: MarkerConfig) -> str | None:
    blocks = _JSON_FENCE.findall(text)
    if not blocks:
        return None
    return blocks[-1].strip()


def from_plain_fence(text: str, markers: MarkerConfig) -> str | None:
    blocks = [b.strip() for b in _PLAIN_FENCE.findall(text)]
    blocks = [b for b in blocks if _starts_like_json(b)]
    if not blocks:
        return None
    return blocks[-1]


def from_greedy_braces(text: str, markers: MarkerConfig) -> str | None:
    spans = _GREEDY_OBJECT.findall(text)
    if not spans:
        return None
    return spans[-1]


class Strategy(NamedTuple):
    name: str
    find: Callable[[str, MarkerConfig], str | None]


STRATEGIES: tuple[Strategy, ...] = (
    Strategy("final_section", from_final_section),
    Strategy("last_json_fence", from_last_json_fence),
    Strategy("plain_fence", from_plain_fence),
    Strategy("greedy_braces", from_greedy_braces),
)


class Located(NamedTuple):
    strategy: str
    candidate: str


def locate(text: str, config: SalvageConfig | None = None) -> Located:
    """Return the winning strategy name and its candidate.

    Raises NoCandidateFound if no strategy produces a ``{``/``[``-starting substring.
    """
    markers = (config or DEFAULT_CONFIG).markers
    for strategy in STRATEGIES:
        candidate = strategy.find(text, markers)
        if candidate and _starts_like_json(candidate):
            logger.debug("JSON candidate located by %s strategy", strategy.name)
            return Located(strategy.name, candidate)
    raise NoCandidateFound()


def locate_candidate(text: str, config: SalvageConfig | None = None) -> str:
    return locate(text, config).candidate
