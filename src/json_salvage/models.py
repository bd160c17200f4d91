"""Pydantic models for chain-of-thought inspection results."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ChainStep(BaseModel):
    id: str  # "1.2" as written in the marker
    title: str
    thinking: str = ""
    result: str = ""


class ChainOutput(BaseModel):
    steps: list[ChainStep] = Field(default_factory=list)
    final_json: str | None = None  # None when no candidate could be located


class ChainStats(BaseModel):
    total_steps: int
    completed_steps: int
    thinking_length: int
    output_length: int


class ChainCompleteness(BaseModel):
    is_complete: bool
    missing_steps: list[str] = Field(default_factory=list)


class ChainValidation(BaseModel):
    """Result of checking a streamed response for its expected step markers.

    ``warnings`` flags responses whose process/result label counts fall short
    of the number of reasoning steps (every expected marker but the last,
    which is the final-output section).
    """

    is_valid: bool
    missing_steps: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
