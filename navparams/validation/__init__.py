"""
Validation - typed rules, fluent builder with presets, validator, fix suggestions.
"""

from .rules import (
    RuleKind,
    ValidationRule,
    ValidationRuleBuilder,
    rules_from_template,
)
from .validator import (
    DependencyWarning,
    ValidationResult,
    check_rule,
    validate,
    validate_nested_parameters,
)
from .suggestions import (
    FixSuggestion,
    determine_severity,
    suggest_fixes,
    suggestions_from_result,
)

__all__ = [
    "RuleKind",
    "ValidationRule",
    "ValidationRuleBuilder",
    "rules_from_template",
    "DependencyWarning",
    "ValidationResult",
    "check_rule",
    "validate",
    "validate_nested_parameters",
    "FixSuggestion",
    "determine_severity",
    "suggest_fixes",
    "suggestions_from_result",
]
