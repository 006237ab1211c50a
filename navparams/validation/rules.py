"""
Validation rule model and fluent builder.

Rules are frozen once built. The builder is single-use: chain calls on one
instance, call ``build()`` once, and start a fresh builder for the next rule.

Usage::

    rule = ValidationRuleBuilder().string().required().min_length(3).build()
    uuid_rule = ValidationRuleBuilder.uuid().build()
    slug_rule = ValidationRuleBuilder.presets["slug"]().required().build()
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Pattern, Union

from ..faults import RuleDefinitionFault
from ..patterns.ast_nodes import RouteTemplate
from ..patterns.tokenizer import tokenize


class RuleKind(str, Enum):
    """Closed set of value kinds a rule can check."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    UUID = "uuid"
    EMAIL = "email"
    CUSTOM = "custom"


# Kinds whose values are not free text; length bounds make no sense for them
LENGTHLESS_KINDS = frozenset({RuleKind.NUMBER, RuleKind.BOOLEAN})

UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
SLUG_RE = re.compile(r"^[a-z0-9-]+$")
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class ValidationRule:
    """Immutable validation rule for a single parameter."""
    kind: RuleKind = RuleKind.STRING
    required: bool = False
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[Pattern[str]] = None
    custom: Optional[Callable[[str], bool]] = None
    default: Optional[str] = None

    def fingerprint(self) -> str:
        """
        Deterministic description of the declarative settings.

        A custom predicate only contributes a presence marker; cache keys
        carry the predicate object itself (see ``validation_key``).
        """
        pattern = f"{self.pattern.pattern}/{self.pattern.flags}" if self.pattern else ""
        return "|".join([
            self.kind.value,
            "req" if self.required else "opt",
            str(self.min_length),
            str(self.max_length),
            pattern,
            "custom" if self.custom is not None else "",
            "" if self.default is None else f"default={self.default}",
        ])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "required": self.required,
            "min_length": self.min_length,
            "max_length": self.max_length,
            "pattern": self.pattern.pattern if self.pattern else None,
            "custom": self.custom is not None,
            "default": self.default,
        }


class ValidationRuleBuilder:
    """
    Fluent builder for ``ValidationRule``.

    Every method returns the builder itself. Settings that can never be
    valid (bad regex, negative length) raise ``RuleDefinitionFault``
    immediately; contradictory combinations are rejected by ``build()``.
    """

    presets: Dict[str, Callable[[], "ValidationRuleBuilder"]] = {}

    def __init__(self):
        self._kind = RuleKind.STRING
        self._required = False
        self._min_length: Optional[int] = None
        self._max_length: Optional[int] = None
        self._pattern: Optional[Pattern[str]] = None
        self._custom: Optional[Callable[[str], bool]] = None
        self._default: Optional[str] = None
        self._consumed = False

    def _check_open(self):
        if self._consumed:
            raise RuleDefinitionFault(
                "ValidationRuleBuilder.build() was already called; use a new builder",
                code="BUILDER_CONSUMED",
            )

    def _set_kind(self, kind: RuleKind) -> "ValidationRuleBuilder":
        self._check_open()
        self._kind = kind
        return self

    def string(self) -> "ValidationRuleBuilder":
        return self._set_kind(RuleKind.STRING)

    def number(self) -> "ValidationRuleBuilder":
        return self._set_kind(RuleKind.NUMBER)

    def boolean(self) -> "ValidationRuleBuilder":
        return self._set_kind(RuleKind.BOOLEAN)

    def uuid_format(self) -> "ValidationRuleBuilder":
        """Values must be RFC 4122 style UUID strings (any case)."""
        return self._set_kind(RuleKind.UUID)

    def email_format(self) -> "ValidationRuleBuilder":
        return self._set_kind(RuleKind.EMAIL)

    def required(self) -> "ValidationRuleBuilder":
        self._check_open()
        self._required = True
        return self

    def optional(self) -> "ValidationRuleBuilder":
        self._check_open()
        self._required = False
        return self

    def min_length(self, n: int) -> "ValidationRuleBuilder":
        self._check_open()
        self._min_length = self._check_length("min_length", n)
        return self

    def max_length(self, n: int) -> "ValidationRuleBuilder":
        self._check_open()
        self._max_length = self._check_length("max_length", n)
        return self

    def pattern(self, regex: Union[str, Pattern[str]], flags: int = 0) -> "ValidationRuleBuilder":
        """Require values to match ``regex`` (a string is compiled here)."""
        self._check_open()
        if isinstance(regex, re.Pattern):
            self._pattern = regex
            return self
        if not isinstance(regex, str):
            raise RuleDefinitionFault(
                f"pattern must be a string or compiled regex, got {type(regex).__name__}",
                code="INVALID_PATTERN",
            )
        try:
            self._pattern = re.compile(regex, flags)
        except re.error as exc:
            raise RuleDefinitionFault(
                f"Pattern {regex!r} is not a valid regular expression: {exc}",
                code="INVALID_PATTERN",
                pattern=regex,
            ) from exc
        return self

    def custom(self, predicate: Callable[[str], bool]) -> "ValidationRuleBuilder":
        self._check_open()
        if not callable(predicate):
            raise RuleDefinitionFault(
                f"custom predicate must be callable, got {type(predicate).__name__}",
                code="INVALID_PREDICATE",
            )
        self._custom = predicate
        return self

    def default(self, value: str) -> "ValidationRuleBuilder":
        """
        Value reported for an empty optional parameter.

        Validation checks the default in place of the empty value and lists
        it in ``ValidationResult.defaults_applied``; params are not modified.
        """
        self._check_open()
        if not isinstance(value, str) or not value:
            raise RuleDefinitionFault(
                f"default must be a non-empty string, got {value!r}",
                code="INVALID_DEFAULT",
            )
        self._default = value
        return self

    def build(self) -> ValidationRule:
        """Snapshot the settings into a frozen rule and consume the builder."""
        self._check_open()

        has_bounds = self._min_length is not None or self._max_length is not None
        if has_bounds and self._kind in LENGTHLESS_KINDS:
            raise RuleDefinitionFault(
                f"Length bounds are not allowed on {self._kind.value} rules",
                code="INVALID_RULE_COMBINATION",
                kind=self._kind.value,
            )
        if (
            self._min_length is not None
            and self._max_length is not None
            and self._min_length > self._max_length
        ):
            raise RuleDefinitionFault(
                f"min_length ({self._min_length}) exceeds max_length ({self._max_length})",
                code="INVALID_RULE_COMBINATION",
            )
        if self._required and self._default is not None:
            raise RuleDefinitionFault(
                "A default value only applies to optional parameters",
                code="INVALID_RULE_COMBINATION",
            )

        self._consumed = True
        return ValidationRule(
            kind=self._kind,
            required=self._required,
            min_length=self._min_length,
            max_length=self._max_length,
            pattern=self._pattern,
            custom=self._custom,
            default=self._default,
        )

    @staticmethod
    def _check_length(name: str, n: Any) -> int:
        if isinstance(n, bool) or not isinstance(n, int) or n < 0:
            raise RuleDefinitionFault(
                f"{name} must be a non-negative integer, got {n!r}",
                code="INVALID_LENGTH",
            )
        return n

    # ── Presets ──────────────────────────────────────────────────────

    @classmethod
    def uuid(cls) -> "ValidationRuleBuilder":
        builder = cls()._set_kind(RuleKind.CUSTOM).required()
        return builder.pattern(UUID_RE)

    @classmethod
    def email(cls) -> "ValidationRuleBuilder":
        return cls().email_format().pattern(EMAIL_RE)

    @classmethod
    def slug(cls) -> "ValidationRuleBuilder":
        return cls().string().pattern(SLUG_RE)

    @classmethod
    def date(cls) -> "ValidationRuleBuilder":
        return cls().string().pattern(DATE_RE)


ValidationRuleBuilder.presets = {
    "uuid": ValidationRuleBuilder.uuid,
    "email": ValidationRuleBuilder.email,
    "slug": ValidationRuleBuilder.slug,
    "date": ValidationRuleBuilder.date,
}


def rules_from_template(
    template: Union[RouteTemplate, str],
    defaults: Optional[Mapping[str, str]] = None,
) -> Dict[str, ValidationRule]:
    """
    One string rule per template parameter, required unless marked optional.

    ``defaults`` attaches a default value to optional parameters; a default
    for a required parameter raises ``RuleDefinitionFault``.
    """
    defaults = defaults or {}
    if isinstance(template, str):
        template = tokenize(template)

    rules: Dict[str, ValidationRule] = {}
    for segment in template.params:
        if segment.name in rules:
            continue
        builder = ValidationRuleBuilder().string()
        if not segment.optional:
            builder.required()
        if segment.name in defaults:
            builder.default(defaults[segment.name])
        rules[segment.name] = builder.build()
    return rules
