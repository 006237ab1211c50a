"""
NavParams - nested route-parameter extraction, hierarchy resolution and validation.

This package provides:
- Route template tokenizer (``:param`` and ``:param?`` segments)
- Parameter hierarchy builder with relationship analysis
- Tolerant extraction engine that reports why a path failed to match
- Typed validation rules with a fluent builder and presets
- Memoization layer with hit/miss metrics
- Bounded performance monitor
"""

from .faults import (
    ConfigFault,
    Fault,
    FaultDomain,
    RuleDefinitionFault,
    Severity,
    UrlBuildFault,
)
from .patterns import (
    ExtractionResult,
    NestedParameter,
    ParamSegment,
    RelationshipAnalysis,
    RouteTemplate,
    StaticSegment,
    analyze_relationships,
    build_hierarchy,
    build_url,
    extract,
    extract_nested_parameters,
    split_path,
    tokenize,
)
from .validation import (
    DependencyWarning,
    FixSuggestion,
    RuleKind,
    ValidationResult,
    ValidationRule,
    ValidationRuleBuilder,
    rules_from_template,
    suggest_fixes,
    suggestions_from_result,
    validate,
    validate_nested_parameters,
)
from .cache import MemoizationLayer
from .monitor import PerformanceMonitor, PerformanceSample
from .config import ConfigLoader, EngineConfig
from .engine import NestedParameterEngine
from .report import render_report

__version__ = "0.1.0"

__all__ = [
    # Faults
    "Fault",
    "FaultDomain",
    "Severity",
    "RuleDefinitionFault",
    "UrlBuildFault",
    "ConfigFault",
    # Patterns
    "RouteTemplate",
    "StaticSegment",
    "ParamSegment",
    "tokenize",
    "split_path",
    "NestedParameter",
    "build_hierarchy",
    "RelationshipAnalysis",
    "analyze_relationships",
    "ExtractionResult",
    "extract",
    "extract_nested_parameters",
    "build_url",
    # Validation
    "RuleKind",
    "ValidationRule",
    "ValidationRuleBuilder",
    "rules_from_template",
    "ValidationResult",
    "DependencyWarning",
    "validate",
    "validate_nested_parameters",
    "FixSuggestion",
    "suggest_fixes",
    "suggestions_from_result",
    # Caching & monitoring
    "MemoizationLayer",
    "PerformanceMonitor",
    "PerformanceSample",
    # Engine
    "EngineConfig",
    "ConfigLoader",
    "NestedParameterEngine",
    "render_report",
]
