"""
Validator - applies rules to extracted parameters.

Two independent passes:

1. Rule pass: each ``(name, rule)`` pair is checked against ``params[name]``.
   Violations become entries in ``errors`` and decide ``is_valid``.
2. Dependency pass: a parameter that has a value while its parent in the
   hierarchy is empty yields a ``DependencyWarning``. Warnings are advisory
   and never affect ``is_valid``.

An empty value whose rule carries a default is checked as the default and
reported in ``defaults_applied``; the params mapping itself is left alone.
"""

import logging
import math
import re
import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..patterns.hierarchy import NestedParameter
from .rules import EMAIL_RE, UUID_RE, RuleKind, ValidationRule

logger = logging.getLogger("navparams.validation")


@dataclass(frozen=True)
class DependencyWarning:
    """A parameter has a value but its parent does not."""
    name: str
    parent: str

    @property
    def message(self) -> str:
        return f"Parameter {self.name} requires parent parameter {self.parent}"

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "parent": self.parent, "message": self.message}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one parameter map."""
    is_valid: bool
    errors: Tuple[str, ...] = ()
    warnings: Tuple[DependencyWarning, ...] = ()
    validation_time_ms: float = 0.0
    defaults_applied: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def resolve(self, params: Mapping[str, str]) -> Dict[str, str]:
        """``params`` with the applied defaults filled in."""
        resolved = dict(params)
        resolved.update(self.defaults_applied)
        return resolved

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": [w.to_dict() for w in self.warnings],
            "defaults_applied": dict(self.defaults_applied),
            "validation_time_ms": self.validation_time_ms,
        }


# Decimal with optional exponent, or a 0x/0o/0b integer literal; ASCII only
_NUMBER_RE = re.compile(
    r"""
    [+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?
    | 0[xX][0-9a-fA-F]+
    | 0[oO][0-7]+
    | 0[bB][01]+
    """,
    re.ASCII | re.VERBOSE,
)


def _is_number(value: str) -> bool:
    text = value.strip()
    if not _NUMBER_RE.fullmatch(text):
        return False
    if text[:2].lower() in ("0x", "0o", "0b"):
        return True
    return math.isfinite(float(text))


def _kind_error(name: str, kind: RuleKind, value: str) -> Optional[str]:
    if kind == RuleKind.NUMBER and not _is_number(value):
        return f"Parameter {name} must be a number"
    if kind == RuleKind.BOOLEAN and value.lower() not in ("true", "false"):
        return f"Parameter {name} must be a boolean"
    if kind == RuleKind.UUID and not UUID_RE.match(value):
        return f"Parameter {name} must be a valid UUID"
    if kind == RuleKind.EMAIL and not EMAIL_RE.match(value):
        return f"Parameter {name} must be a valid email"
    return None


def check_rule(name: str, value: str, rule: ValidationRule) -> List[str]:
    """Return the rule violations for a single value."""
    if not value:
        return [f"Parameter {name} is required"] if rule.required else []

    kind_error = _kind_error(name, rule.kind, value)
    if kind_error:
        # Length and pattern checks are noise once the kind is wrong
        return [kind_error]

    errors: List[str] = []
    if rule.min_length is not None and len(value) < rule.min_length:
        errors.append(f"Parameter {name} must be at least {rule.min_length} characters long")
    if rule.max_length is not None and len(value) > rule.max_length:
        errors.append(f"Parameter {name} cannot exceed {rule.max_length} characters")
    if rule.pattern is not None and not rule.pattern.search(value):
        errors.append(f"Parameter {name} does not match required pattern")
    if rule.custom is not None and not rule.custom(value):
        errors.append(f"Parameter {name} failed custom validation")
    return errors


def check_dependencies(
    params: Mapping[str, str],
    hierarchy: Mapping[str, NestedParameter],
) -> List[DependencyWarning]:
    warnings: List[DependencyWarning] = []
    for name, param in hierarchy.items():
        if param.parent and params.get(name) and not params.get(param.parent):
            warnings.append(DependencyWarning(name=name, parent=param.parent))
    return warnings


def validate(
    params: Mapping[str, str],
    hierarchy: Mapping[str, NestedParameter],
    rules: Optional[Mapping[str, ValidationRule]] = None,
) -> ValidationResult:
    """Validate ``params`` against ``rules`` and check parent dependencies."""
    start = time.perf_counter()

    errors: List[str] = []
    defaults: Dict[str, str] = {}
    for name, rule in (rules or {}).items():
        value = params.get(name) or ""
        if not value and rule.default is not None:
            value = defaults[name] = rule.default
        errors.extend(check_rule(name, value, rule))

    warnings = check_dependencies(params, hierarchy)

    elapsed_ms = (time.perf_counter() - start) * 1000.0

    if errors:
        logger.debug("Validation failed with %d error(s): %s", len(errors), errors)

    return ValidationResult(
        is_valid=not errors,
        errors=tuple(errors),
        warnings=tuple(warnings),
        validation_time_ms=elapsed_ms,
        defaults_applied=MappingProxyType(defaults),
    )


def validate_nested_parameters(
    params: Mapping[str, str],
    hierarchy: Mapping[str, NestedParameter],
    rules: Optional[Mapping[str, ValidationRule]] = None,
) -> ValidationResult:
    """Host entry point, same contract as ``validate``."""
    return validate(params, hierarchy, rules)
