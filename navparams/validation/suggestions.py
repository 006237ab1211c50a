"""
Fix suggestions for validation errors.

Classifies validator messages by severity and proposes a concrete value
that would satisfy the failing check.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from ..faults import Severity
from .validator import ValidationResult

_ERROR_MARKERS = ("required", "missing", "invalid", "not match", "must be", "cannot exceed")
_WARN_MARKERS = ("recommended", "should be", "better to", "deprecated", "requires parent")

_PARAM_NAME_RE = re.compile(r"Parameter\s+(\w+)", re.IGNORECASE)
_AT_LEAST_RE = re.compile(r"at least (\d+)")
_EXCEED_RE = re.compile(r"exceed (\d+)")


@dataclass
class FixSuggestion:
    """Represents a single fix suggestion."""
    param: str
    error_message: str
    severity: Severity
    suggestion: str
    example_fix: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "param": self.param,
            "error": self.error_message,
            "severity": self.severity.value,
            "suggestion": self.suggestion,
            "example_fix": self.example_fix,
        }


def determine_severity(message: str) -> Severity:
    """Rank a validation message: blocking errors, warnings, or info."""
    lower = message.lower()
    if any(marker in lower for marker in _ERROR_MARKERS):
        return Severity.ERROR
    if any(marker in lower for marker in _WARN_MARKERS):
        return Severity.WARN
    return Severity.INFO


def suggest_fixes(name: str, message: str, current_value: str = "") -> List[FixSuggestion]:
    """Suggest how to fix one validation message for parameter ``name``."""
    severity = determine_severity(message)
    lower = message.lower()

    def make(text: str, example: Optional[str] = None) -> FixSuggestion:
        return FixSuggestion(name, message, severity, text, example)

    if "required" in lower and not current_value.strip():
        return [make(f"Parameter {name} is required. Please provide a value.", f"example-{name}")]
    if "must be a number" in lower:
        return [make(f"Parameter {name} must be a number.", "123" if current_value else "0")]
    if "must be a boolean" in lower:
        return [make(f"Parameter {name} must be 'true' or 'false'.", "true")]
    if "valid uuid" in lower:
        return [make(f"Parameter {name} must be a valid UUID.", "123e4567-e89b-12d3-a456-426614174000")]
    if "valid email" in lower:
        return [make(f"Parameter {name} must be a valid email address.", "example@domain.com")]

    at_least = _AT_LEAST_RE.search(lower)
    if at_least:
        min_length = int(at_least.group(1))
        return [make(
            f"Parameter {name} is too short. It needs at least {min_length} characters.",
            current_value.ljust(min_length, "a"),
        )]

    exceed = _EXCEED_RE.search(lower)
    if exceed:
        max_length = int(exceed.group(1))
        return [make(
            f"Parameter {name} is too long. It must not exceed {max_length} characters.",
            current_value[:max_length],
        )]

    if "pattern" in lower:
        return [make(
            f"Parameter {name} doesn't match the required pattern.",
            "123" if name == "id" else f"valid-{name}",
        )]
    if "requires parent" in lower:
        return [make(f"Provide a value for the parent of {name} or clear {name}.")]

    return [make(f"Please review the value for parameter {name}.")]


def suggestions_from_result(
    result: ValidationResult,
    params: Mapping[str, str],
) -> Dict[str, List[FixSuggestion]]:
    """Group suggestions by parameter for every error and warning in ``result``."""
    grouped: Dict[str, List[FixSuggestion]] = {}

    messages = list(result.errors) + [w.message for w in result.warnings]
    for message in messages:
        match = _PARAM_NAME_RE.search(message)
        if not match:
            continue
        name = match.group(1)
        grouped.setdefault(name, []).extend(
            suggest_fixes(name, message, params.get(name) or "")
        )

    return grouped
