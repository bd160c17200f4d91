"""Custom exception hierarchy for json-salvage.

All json-salvage exceptions inherit from JsonSalvageError, allowing callers
to catch broad or specific errors:

    try:
        data = extract_json(completion, ["basicInfo"])
    except MissingRequiredField as e:
        print(f"Model skipped {e.field}")
    except ExtractionError as e:
        print(f"Could not recover JSON ({e.kind.value}): {e}")
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    NO_CANDIDATE_FOUND = "no_candidate_found"
    UNBALANCED_AFTER_REPAIR = "unbalanced_after_repair"
    MALFORMED_AFTER_REPAIR = "malformed_after_repair"
    MISSING_REQUIRED_FIELD = "missing_required_field"


class JsonSalvageError(Exception):
    """Base exception for all json-salvage errors."""


class ExtractionError(JsonSalvageError):
    """Raised when no value satisfying the caller's requirements can be recovered."""

    kind: ErrorKind


class NoCandidateFound(ExtractionError):
    """Raised when no locator strategy finds a bracket-starting substring."""

    kind = ErrorKind.NO_CANDIDATE_FOUND

    def __init__(self, message: str = "No JSON candidate found in text") -> None:
        super().__init__(message)


class MalformedAfterRepair(ExtractionError):
    """Raised when the candidate still fails JSON decoding after both cleanup passes."""

    kind = ErrorKind.MALFORMED_AFTER_REPAIR

    def __init__(self, message: str, position: int | None = None) -> None:
        super().__init__(message)
        self.position = position


class UnbalancedAfterRepair(ExtractionError):
    """Raised when truncation repair found no complete array element to keep."""

    kind = ErrorKind.UNBALANCED_AFTER_REPAIR

    def __init__(self, message: str, position: int | None = None) -> None:
        super().__init__(message)
        self.position = position


class MissingRequiredField(ExtractionError):
    """Raised when decoding succeeded but a required top-level key is absent."""

    kind = ErrorKind.MISSING_REQUIRED_FIELD

    def __init__(self, field: str) -> None:
        super().__init__(f"Missing required field: {field}")
        self.field = field


class ConfigError(JsonSalvageError):
    """Raised when configuration is invalid or conflicts with a call's arguments."""
