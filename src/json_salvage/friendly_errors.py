"""Human-readable messages for extraction failures.

Maps each extraction error kind to a short explanation and the usual fix,
for display by the CLI or by callers that surface failures to users.
"""

from __future__ import annotations

from dataclasses import dataclass

from .exceptions import ConfigError, ErrorKind, ExtractionError, MissingRequiredField


@dataclass
class FriendlyError:
    """A readable error with a fix suggestion."""

    title: str
    message: str
    fix: str


def friendly_extraction_error(error: Exception) -> FriendlyError:
    """Convert an extraction or config error to a readable message."""
    if isinstance(error, ConfigError):
        return FriendlyError(
            title="Configuration error",
            message=f"There's a problem with your setup: {error}",
            fix=(
                "Check ~/.json-salvage/config.yaml for syntax errors, or unset "
                "JSON_SALVAGE_* environment variables to use the defaults."
            ),
        )

    kind = error.kind if isinstance(error, ExtractionError) else None

    if kind is ErrorKind.NO_CANDIDATE_FOUND:
        return FriendlyError(
            title="No JSON found",
            message="The response contains no fenced block or {...} object.",
            fix=(
                "The model answered in prose only. Ask it again and remind it "
                "to finish with a ```json block."
            ),
        )

    if kind is ErrorKind.UNBALANCED_AFTER_REPAIR:
        return FriendlyError(
            title="Response was cut off",
            message="The JSON ends mid-structure and no complete item could be kept.",
            fix=(
                "The stream likely hit the token limit. Raise max_tokens or ask "
                "for fewer items per call.\n"
                "If the payload is not keyed by the default array, pass --anchor."
            ),
        )

    if kind is ErrorKind.MALFORMED_AFTER_REPAIR:
        return FriendlyError(
            title="JSON could not be parsed",
            message=f"The JSON is malformed even after cleanup: {error}",
            fix="Retry the generation; the model produced syntax that cannot be repaired.",
        )

    if isinstance(error, MissingRequiredField):
        return FriendlyError(
            title="Required field missing",
            message=f"The JSON parsed but has no '{error.field}' key.",
            fix="Retry the generation, or check the prompt still asks for this field.",
        )

    return FriendlyError(
        title="Extraction error",
        message=f"Something went wrong while reading the response: {error}",
        fix="Run with --verbose to see which strategy and repair steps ran.",
    )


def format_friendly_error(err: FriendlyError) -> str:
    """Format a FriendlyError for display in a terminal."""
    lines = [
        f"Error: {err.title}",
        f"   {err.message}",
        "",
        "How to fix:",
    ]
    for line in err.fix.split("\n"):
        lines.append(f"   {line}")
    return "\n".join(lines)
