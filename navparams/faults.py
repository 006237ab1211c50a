"""
NavParams faults.

Faults are raised only for programmer errors: a rule built with impossible
settings, a URL built without its required values, an invalid engine
configuration. A path that does not match or a value that fails a rule is
never raised; it is reported as data on the result objects.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class Severity(str, Enum):
    """Fault severity, also used to rank validation messages."""
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"


class FaultDomain(str, Enum):
    """Functional area a fault belongs to."""
    CONFIG = "config"
    PATTERN = "pattern"
    VALIDATION = "validation"
    CACHE = "cache"


# domain -> (default severity, retryable)
DOMAIN_DEFAULTS: Dict[FaultDomain, Tuple[Severity, bool]] = {
    FaultDomain.CONFIG: (Severity.FATAL, False),
    FaultDomain.PATTERN: (Severity.ERROR, False),
    FaultDomain.VALIDATION: (Severity.ERROR, False),
    FaultDomain.CACHE: (Severity.WARN, True),
}


class Fault(Exception):
    """
    Structured engine error.

    Subclasses pin ``code`` and ``domain`` as class attributes; severity and
    retryability follow the domain unless given explicitly.

    Example::

        raise Fault(
            "Pattern '[a-' is not a valid regular expression",
            code="INVALID_PATTERN",
            domain=FaultDomain.VALIDATION,
        )
    """

    code: str = "FAULT"
    domain: FaultDomain = FaultDomain.PATTERN

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        domain: Optional[FaultDomain] = None,
        severity: Optional[Severity] = None,
        retryable: Optional[bool] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if domain is not None:
            self.domain = domain

        default_severity, default_retryable = DOMAIN_DEFAULTS[self.domain]
        self.severity = severity or default_severity
        self.retryable = default_retryable if retryable is None else retryable
        self.metadata = dict(metadata or {})

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, domain={self.domain.value})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "domain": self.domain.value,
            "severity": self.severity.value,
            "retryable": self.retryable,
            "metadata": self.metadata,
        }


class RuleDefinitionFault(Fault):
    """A validation rule was built with invalid or contradictory settings."""

    code = "INVALID_RULE"
    domain = FaultDomain.VALIDATION

    def __init__(self, message: str, *, code: Optional[str] = None, **metadata: Any):
        super().__init__(message, code=code, metadata=metadata)


class UrlBuildFault(Fault):
    """A URL could not be built: required parameters have no value."""

    code = "MISSING_URL_PARAMS"
    domain = FaultDomain.PATTERN

    def __init__(self, template: str, missing: List[str]):
        super().__init__(
            f"Cannot build URL for template '{template}': "
            f"missing required parameters {', '.join(missing)}",
            metadata={"template": template, "missing": list(missing)},
        )


class ConfigFault(Fault):
    """Engine configuration is invalid."""

    code = "INVALID_CONFIG"
    domain = FaultDomain.CONFIG

    def __init__(self, key: str, reason: str):
        super().__init__(
            f"Invalid configuration for '{key}': {reason}",
            metadata={"key": key, "reason": reason},
        )
