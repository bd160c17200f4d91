"""json-salvage: resilient JSON recovery from LLM completions."""

__version__ = "0.3.0"

import logging

logging.getLogger("json-salvage").addHandler(logging.NullHandler())

from .exceptions import (
    ConfigError,
    ErrorKind,
    ExtractionError,
    JsonSalvageError,
    MalformedAfterRepair,
    MissingRequiredField,
    NoCandidateFound,
    UnbalancedAfterRepair,
)
from .pipeline import extract_json, merge_thinking_and_result
from .thinking import extract_thinking, merge_thinking

__all__ = [
    "__version__",
    "JsonSalvageError",
    "ExtractionError",
    "ErrorKind",
    "NoCandidateFound",
    "UnbalancedAfterRepair",
    "MalformedAfterRepair",
    "MissingRequiredField",
    "ConfigError",
    "extract_json",
    "merge_thinking_and_result",
    "extract_thinking",
    "merge_thinking",
]
